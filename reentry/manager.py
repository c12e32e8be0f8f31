"""Deferred-delivery manager.

Nested, dispatcher-unaware code reports a condition kind with :meth:`raise_`.
Every live registration of that kind is flagged pending, in the current region
and in every region suspended behind a dispatcher call. Each region observes
its own flags only after control returns to it, via :meth:`drain_pending`.

The physical call stack that existed when the condition was raised is gone by
the time it is delivered, so only the decision data (which registrations are
pending, per region) crosses the suspension boundary. The actual non-local
transfer happens inside the resuming region, see :mod:`reentry.scopes`.

Usage:
    manager = DeliveryManager()

    with manager.catching(RESOURCE_INVALIDATED) as scope:
        with manager.suspension():
            dispatcher.run_pending()   # may call manager.raise_(RESOURCE_INVALIDATED)
    if scope.delivered:
        recover()
"""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger as _loguru_logger

from reentry._vendor import NOTHING, Maybe, Some
from reentry.config import DeliveryConfig
from reentry.errors import LeakedRegistrationError
from reentry.frames import RegionFrameStack, SuspensionToken
from reentry.kinds import ConditionKind, ensure_kind
from reentry.observability import ManagerSnapshot, RegionSnapshot
from reentry.registration import RegistrationEntry, RegistrationList
from reentry.scopes import ConditionDelivered, HandlerScope, Suspension

logger = _loguru_logger.bind(component="delivery_manager")


class DeliveryManager:
    """Owns the current registration list and the stack of suspended ones.

    One instance per cooperative execution context. Pass it explicitly to every
    collaborator that registers, raises or suspends; there is no ambient default.
    """

    def __init__(self, config: DeliveryConfig | None = None) -> None:
        self.config = config if config is not None else DeliveryConfig.from_env()
        self._current = RegistrationList()
        self._frames = RegionFrameStack()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, kind: ConditionKind) -> RegistrationEntry:
        """Append a non-pending registration of ``kind`` to the current region."""
        ensure_kind(kind)
        entry = self._current.append(kind)
        self._trace("register {!r} (entry {}) at depth {}", kind, entry.entry_id, self.depth)
        return entry

    def unregister(self, kind: ConditionKind) -> bool:
        """Remove the most recent registration of ``kind`` in the current region.

        Returns False, without error, when the current region holds none.
        """
        removed = self._current.remove_most_recent(kind)
        outcome = "removed" if removed is not None else "absent"
        self._trace("unregister {!r} at depth {}: {}", kind, self.depth, outcome)
        return removed is not None

    def discard(self, entry: RegistrationEntry) -> bool:
        """Remove exactly ``entry`` from the current region, whatever its position."""
        return self._current.discard(entry)

    def raise_(self, kind: ConditionKind) -> int:
        """Flag every registration of ``kind`` in every live region as pending.

        A kind nobody registered is dropped silently and not remembered.

        Returns:
            Number of registrations flagged across all regions.
        """
        ensure_kind(kind)
        flagged = self._current.flag_all(kind)
        for frame in self._frames:
            flagged += frame.registrations.flag_all(kind)
        if flagged:
            self._trace("raise {!r} flagged {} registration(s)", kind, flagged)
        else:
            self._trace("raise {!r} dropped, no live registration", kind)
        return flagged

    # ------------------------------------------------------------------
    # Region boundaries
    # ------------------------------------------------------------------

    def enter_suspension(self) -> SuspensionToken:
        """Save the current region; call immediately before the dispatcher."""
        token = self._frames.push(self._current)
        self._current = RegistrationList()
        self._trace("enter suspension -> depth {}", token.depth)
        return token

    def leave_suspension(self, token: SuspensionToken) -> None:
        """Restore the region saved by ``token``; call immediately after the dispatcher.

        Raises:
            RegionBoundaryError: ``token`` is not the innermost suspension.
            LeakedRegistrationError: in strict mode, when registrations made
                during the suspension were never unregistered. The saved region
                is restored before raising.
        """
        restored = self._frames.pop(token)
        discarded, self._current = self._current, restored
        self._trace("leave suspension <- depth {}", token.depth)
        if len(discarded):
            self.report_leak(tuple(discarded), f"suspended region at depth {token.depth}")

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def drain_pending(self) -> Maybe[ConditionKind]:
        """Select the newest pending registration of the current region.

        Regions still suspended are not examined. The entry stays registered
        and pending; the handler scope's cleanup removes it.
        """
        entry = self._current.most_recent_pending()
        if entry is None:
            return NOTHING
        self._trace("drain at depth {} selects {!r}", self.depth, entry.kind)
        return Some(entry.kind)

    def deliver_pending(self) -> None:
        """Raise ConditionDelivered for the next pending kind, if there is one."""
        pending = self.drain_pending()
        if pending:
            raise ConditionDelivered(pending.unwrap(), self.depth)

    # ------------------------------------------------------------------
    # Scoped helpers
    # ------------------------------------------------------------------

    def suspension(self) -> Suspension:
        return Suspension(self)

    def catching(
        self,
        *kinds: ConditionKind,
        on_delivery: Callable[[ConditionKind], object] | None = None,
    ) -> HandlerScope:
        return HandlerScope(self, *kinds, on_delivery=on_delivery)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def depth(self) -> int:
        """Depth of the current region; 0 is the root region."""
        return self._frames.depth

    def current_registrations(self) -> tuple[RegistrationEntry, ...]:
        return tuple(self._current)

    def owns(self, entry: RegistrationEntry) -> bool:
        """Whether ``entry`` is still registered in the current region."""
        return entry in self._current

    def is_registered(self, kind: ConditionKind) -> bool:
        return self._current.has_kind(kind)

    def is_pending(self, kind: ConditionKind) -> bool:
        return any(entry.kind == kind for entry in self._current.pending_entries())

    def snapshot(self) -> ManagerSnapshot:
        saved = list(reversed(list(self._frames)))
        regions = [
            RegionSnapshot.from_registrations(depth, frame.registrations)
            for depth, frame in enumerate(saved)
        ]
        regions.append(RegionSnapshot.from_registrations(self.depth, self._current))
        return ManagerSnapshot(regions=tuple(regions))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def report_leak(self, entries: tuple[RegistrationEntry, ...], where: str) -> None:
        error = LeakedRegistrationError(entries, where)
        if self.config.strict:
            raise error
        logger.warning("{}", error)

    def _trace(self, message: str, *args: object) -> None:
        if self.config.debug:
            logger.debug(message, *args)

    def __repr__(self) -> str:
        return f"DeliveryManager(depth={self.depth}, current={self._current!r})"


__all__ = ["DeliveryManager"]
