"""Fault types raised by the delivery manager.

Faults are programming-contract violations. They never travel through the
delivery path, so a collaborator bug cannot masquerade as a delivered condition.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from reentry.frames import SuspensionToken
    from reentry.registration import RegistrationEntry


class DeliveryError(Exception):
    """Base class for every fault raised by reentry."""


class InternalConsistencyError(DeliveryError):
    """Raised when a collaborator breaks the region-tracking contract."""


class RegionBoundaryError(InternalConsistencyError):
    """Raised when leave_suspension does not match the innermost enter_suspension.

    Either suspension calls were not properly nested, or another manager call
    slipped between saving the region and invoking the dispatcher.

    Attributes:
        expected: Token at the top of the region frame stack, or None if empty.
        actual: Token handed to leave_suspension.
    """

    def __init__(self, expected: SuspensionToken | None, actual: Any) -> None:
        self.expected = expected
        self.actual = actual
        if expected is None:
            message = f"leave_suspension({actual!r}) called with no suspended region"
        else:
            message = f"leave_suspension({actual!r}) does not match innermost region {expected!r}"
        super().__init__(message)


class LeakedRegistrationError(InternalConsistencyError):
    """Raised when registrations outlive the scope or region that created them.

    Attributes:
        entries: The registrations still live after their owner closed.
    """

    def __init__(self, entries: tuple[RegistrationEntry, ...], where: str) -> None:
        self.entries = entries
        self.where = where
        if entries:
            kinds = ", ".join(repr(entry.kind) for entry in entries)
            message = f"{len(entries)} registration(s) leaked from {where}: {kinds}"
        else:
            message = f"registration leaked from {where}"
        super().__init__(message)


__all__ = [
    "DeliveryError",
    "InternalConsistencyError",
    "LeakedRegistrationError",
    "RegionBoundaryError",
]
