"""
Point-in-time snapshots of a DeliveryManager.

Snapshots are immutable copies; mutating the manager afterwards does not change
a snapshot already taken. Useful for asserting on region state in tests and for
logging the registration view when a fault is reported.

Public API:
    - EntrySnapshot: one registration
    - RegionSnapshot: one region's registration list
    - ManagerSnapshot: every live region, root first

Example:
    snapshot = manager.snapshot()
    for region in snapshot.regions:
        print(region.depth, region.pending_counts)
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING

from reentry._vendor import FrozenDict
from reentry.kinds import ConditionKind

if TYPE_CHECKING:
    from reentry.registration import RegistrationList


@dataclass(frozen=True)
class EntrySnapshot:
    kind: ConditionKind
    pending: bool
    entry_id: int


@dataclass(frozen=True)
class RegionSnapshot:
    """
    Snapshot of one region's registration list.

    Attributes:
        depth: 0 for the root region, n for the region entered by the n-th
            nested suspension.
        entries: Registrations in insertion (priority) order.
        pending_counts: Number of pending registrations per kind.
    """

    depth: int
    entries: tuple[EntrySnapshot, ...]
    pending_counts: FrozenDict

    @classmethod
    def from_registrations(cls, depth: int, registrations: RegistrationList) -> RegionSnapshot:
        entries = tuple(
            EntrySnapshot(kind=entry.kind, pending=entry.pending, entry_id=entry.entry_id)
            for entry in registrations
        )
        counts = Counter(entry.kind for entry in entries if entry.pending)
        return cls(depth=depth, entries=entries, pending_counts=FrozenDict(counts))

    @property
    def kinds(self) -> tuple[ConditionKind, ...]:
        return tuple(entry.kind for entry in self.entries)


@dataclass(frozen=True)
class ManagerSnapshot:
    regions: tuple[RegionSnapshot, ...]

    @property
    def current(self) -> RegionSnapshot:
        return self.regions[-1]

    @property
    def depth(self) -> int:
        return self.current.depth

    def pending_kinds(self) -> frozenset[ConditionKind]:
        """Kinds pending in any region, suspended or current."""
        return frozenset(kind for region in self.regions for kind in region.pending_counts)

    def format(self) -> str:
        lines = []
        for region in self.regions:
            rendered = ", ".join(
                f"{entry.kind!r}{'*' if entry.pending else ''}" for entry in region.entries
            )
            lines.append(f"region {region.depth}: [{rendered}]")
        return "\n".join(lines)


__all__ = [
    "EntrySnapshot",
    "ManagerSnapshot",
    "RegionSnapshot",
]
