"""Per-region registration lists.

Insertion order doubles as priority: the entry added last wins when several
entries in one list are pending.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterator
from dataclasses import dataclass, field

from reentry.kinds import ConditionKind

_entry_id_counter = itertools.count(1)


def _next_entry_id() -> int:
    return next(_entry_id_counter)


@dataclass(eq=False)
class RegistrationEntry:
    """A live claim that ``kind`` is interesting to one handler scope.

    Entries compare by identity: two registrations of the same kind are two
    distinct claims, each removed by its own unregister call.
    """

    kind: ConditionKind
    pending: bool = False
    entry_id: int = field(default_factory=_next_entry_id)


class RegistrationList:
    def __init__(self) -> None:
        self._entries: list[RegistrationEntry] = []

    def append(self, kind: ConditionKind) -> RegistrationEntry:
        entry = RegistrationEntry(kind=kind)
        self._entries.append(entry)
        return entry

    def remove_most_recent(self, kind: ConditionKind) -> RegistrationEntry | None:
        """Remove the newest entry matching ``kind``; survivors keep their order."""
        for index in range(len(self._entries) - 1, -1, -1):
            if self._entries[index].kind == kind:
                return self._entries.pop(index)
        return None

    def discard(self, entry: RegistrationEntry) -> bool:
        """Remove exactly ``entry`` (by identity)."""
        for index, existing in enumerate(self._entries):
            if existing is entry:
                del self._entries[index]
                return True
        return False

    def flag_all(self, kind: ConditionKind) -> int:
        """Mark every entry matching ``kind`` pending and return how many matched."""
        matched = 0
        for entry in self._entries:
            if entry.kind == kind:
                entry.pending = True
                matched += 1
        return matched

    def most_recent_pending(self) -> RegistrationEntry | None:
        for entry in reversed(self._entries):
            if entry.pending:
                return entry
        return None

    def pending_entries(self) -> tuple[RegistrationEntry, ...]:
        return tuple(entry for entry in self._entries if entry.pending)

    def has_kind(self, kind: ConditionKind) -> bool:
        return any(entry.kind == kind for entry in self._entries)

    def __contains__(self, entry: object) -> bool:
        return any(existing is entry for existing in self._entries)

    def __iter__(self) -> Iterator[RegistrationEntry]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"RegistrationList({self._entries!r})"


__all__ = [
    "RegistrationEntry",
    "RegistrationList",
]
