"""reentry - deferred delivery of conditions across reentrant dispatcher calls.

Single-threaded programs that pump an event dispatcher from inside ordinary code
cannot rely on exceptions alone: a condition raised by work the dispatcher runs
never reaches a handler established before the dispatcher call. reentry records
the condition against every live registration instead, and delivers it to the
right handler scope once control is back in that scope's region.

Usage:
    from reentry import DeliveryManager, call_suspended, kind

    CLOSED = kind("document-closed")
    manager = DeliveryManager()

    def on_close():
        manager.raise_(CLOSED)

    with manager.catching(CLOSED) as scope:
        call_suspended(manager, event_loop.process_pending)
    if scope.delivered:
        ...
"""

from reentry._vendor import NOTHING, Maybe, Nothing, Some
from reentry.config import DeliveryConfig
from reentry.errors import (
    DeliveryError,
    InternalConsistencyError,
    LeakedRegistrationError,
    RegionBoundaryError,
)
from reentry.frames import RegionFrame, RegionFrameStack, SuspensionToken
from reentry.kinds import ConditionKind, Kind, ensure_kind, kind
from reentry.manager import DeliveryManager
from reentry.observability import EntrySnapshot, ManagerSnapshot, RegionSnapshot
from reentry.registration import RegistrationEntry, RegistrationList
from reentry.scopes import (
    ConditionDelivered,
    Dispatcher,
    HandlerScope,
    Suspension,
    call_suspended,
)

__all__ = [
    "NOTHING",
    "ConditionDelivered",
    "ConditionKind",
    "DeliveryConfig",
    "DeliveryError",
    "DeliveryManager",
    "Dispatcher",
    "EntrySnapshot",
    "HandlerScope",
    "InternalConsistencyError",
    "Kind",
    "LeakedRegistrationError",
    "ManagerSnapshot",
    "Maybe",
    "Nothing",
    "RegionBoundaryError",
    "RegionFrame",
    "RegionFrameStack",
    "RegionSnapshot",
    "RegistrationEntry",
    "RegistrationList",
    "Some",
    "Suspension",
    "SuspensionToken",
    "call_suspended",
    "ensure_kind",
    "kind",
]
