"""Scoped integration of the delivery manager with ordinary Python control flow.

Two context managers pair every boundary call with its counterpart on every
exit path:

- :class:`Suspension` brackets one dispatcher call with enter_suspension /
  leave_suspension and delivers whatever became pending in the restored region.
- :class:`HandlerScope` registers a catch set on entry, unregisters it on exit,
  and turns a delivered condition of its catch set into an ordinary exit.

Delivery itself is a :class:`ConditionDelivered` exception raised inside the
resuming region. It never unwinds through a dispatcher call: it is raised after
leave_suspension, so it only travels through frames of the current region.

Usage:
    with manager.catching(GENERIC, SPECIFIC) as scope:
        call_suspended(manager, dispatcher.run_pending)
    if scope.delivered:
        ...
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeAlias

from loguru import logger as _loguru_logger

from reentry._vendor import NOTHING, Maybe, Some
from reentry.errors import InternalConsistencyError, LeakedRegistrationError
from reentry.kinds import ConditionKind, ensure_kind

if TYPE_CHECKING:
    from reentry.frames import SuspensionToken
    from reentry.manager import DeliveryManager
    from reentry.registration import RegistrationEntry

logger = _loguru_logger.bind(component="handler_scope")


# Runs pending reentrant work and returns; the result is handed back unchanged.
Dispatcher: TypeAlias = Callable[..., Any]


class ConditionDelivered(Exception):
    """A pending condition kind delivered to the handler scope that registered it.

    Attributes:
        kind: The delivered condition kind.
        depth: Depth of the region the delivery happened in. Only a handler
            scope opened at the same depth may accept it.
    """

    def __init__(self, kind: ConditionKind, depth: int) -> None:
        self.kind = kind
        self.depth = depth
        super().__init__(f"condition {kind!r} delivered at depth {depth}")


class Suspension:
    """Region boundary around one dispatcher call."""

    def __init__(self, manager: DeliveryManager) -> None:
        self._manager = manager
        self.token: SuspensionToken | None = None

    def __enter__(self) -> Suspension:
        if self.token is not None:
            raise InternalConsistencyError("Suspension is not reentrant; create one per dispatcher call")
        self.token = self._manager.enter_suspension()
        return self

    def __exit__(self, exc_type: Any, exc: BaseException | None, tb: Any) -> bool:
        token, self.token = self.token, None
        if token is None:
            raise InternalConsistencyError("Suspension exited without being entered")
        self._manager.leave_suspension(token)
        if exc is None:
            self._manager.deliver_pending()
            return False
        if isinstance(exc, ConditionDelivered) and exc.depth > self._manager.depth:
            raise LeakedRegistrationError(
                (),
                f"region at depth {exc.depth}: {exc.kind!r} was delivered outside any handler scope",
            ) from exc
        return False


def call_suspended(
    manager: DeliveryManager, dispatcher: Dispatcher, *args: Any, **kwargs: Any
) -> Any:
    """Invoke ``dispatcher`` inside a :class:`Suspension` and return its result.

    Raises:
        ConditionDelivered: a condition became pending in the caller's region
            while the dispatcher ran.
    """
    with Suspension(manager):
        return dispatcher(*args, **kwargs)


class HandlerScope:
    """Recoverable scope observing a catch set of condition kinds.

    Kinds are registered in the order given; list the most specific kind last so
    it wins when several are pending at once.

    Attributes:
        kinds: The catch set.
        delivered: ``Some(kind)`` once a kind of the catch set was delivered,
            ``NOTHING`` otherwise.
    """

    def __init__(
        self,
        manager: DeliveryManager,
        *kinds: ConditionKind,
        on_delivery: Callable[[ConditionKind], object] | None = None,
    ) -> None:
        if not kinds:
            raise TypeError("HandlerScope requires at least one condition kind")
        self._manager = manager
        self.kinds = tuple(ensure_kind(kind) for kind in kinds)
        self.on_delivery = on_delivery
        self.delivered: Maybe[ConditionKind] = NOTHING
        self._entries: tuple[RegistrationEntry, ...] = ()
        self._depth: int | None = None

    def __enter__(self) -> HandlerScope:
        if self._depth is not None:
            raise InternalConsistencyError("HandlerScope is not reentrant; create one per scope")
        self._depth = self._manager.depth
        self._entries = tuple(self._manager.register(kind) for kind in self.kinds)
        return self

    def __exit__(self, exc_type: Any, exc: BaseException | None, tb: Any) -> bool:
        depth, self._depth = self._depth, None
        if depth != self._manager.depth:
            raise InternalConsistencyError(
                f"HandlerScope for {self.kinds!r} entered at depth {depth} "
                f"but exited at depth {self._manager.depth}"
            )
        if exc is None:
            # A catch-all between the suspension and this scope swallowed the
            # delivery, or nothing delivered it yet; our entry is still pending.
            swallowed = self._newest_pending()
            self._release()
            if swallowed is None:
                return False
            logger.warning(
                "pending {!r} reached the exit of handler scope {!r} undelivered; "
                "delivering it at scope exit",
                swallowed,
                self.kinds,
            )
            self._recover(swallowed)
            return False
        self._release()
        delivered = self._accepts(exc, depth)
        if delivered is None:
            return False
        self._recover(delivered.kind)
        return True

    def _recover(self, kind: ConditionKind) -> None:
        self.delivered = Some(kind)
        if self.on_delivery is not None:
            self.on_delivery(kind)
        # An enclosing scope of this region may have its own pending kind.
        self._manager.deliver_pending()

    def _newest_pending(self) -> ConditionKind | None:
        for entry in reversed(self._entries):
            if entry.pending and self._manager.owns(entry):
                return entry.kind
        return None

    def _accepts(self, exc: BaseException | None, depth: int) -> ConditionDelivered | None:
        if isinstance(exc, ConditionDelivered) and exc.depth == depth and exc.kind in self.kinds:
            return exc
        return None

    def _release(self) -> None:
        for kind in reversed(self.kinds):
            self._manager.unregister(kind)
        # A nested scope that leaked a registration of the same kind makes
        # unregister remove its entry instead of ours.
        leftover = tuple(entry for entry in self._entries if self._manager.owns(entry))
        self._entries = ()
        if not leftover:
            return
        for entry in leftover:
            self._manager.discard(entry)
        self._manager.report_leak(leftover, f"a scope nested in handler scope {self.kinds!r}")


__all__ = [
    "ConditionDelivered",
    "Dispatcher",
    "HandlerScope",
    "Suspension",
    "call_suspended",
]
