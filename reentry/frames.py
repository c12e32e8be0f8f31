from __future__ import annotations

import itertools
from collections.abc import Iterator
from dataclasses import dataclass, field

from reentry.errors import RegionBoundaryError
from reentry.registration import RegistrationList

_frame_id_counter = itertools.count(1)


def _next_frame_id() -> int:
    return next(_frame_id_counter)


@dataclass(frozen=True)
class SuspensionToken:
    """Identifies one pushed region frame.

    Attributes:
        depth: Stack depth right after the push (1 for the outermost suspension).
        frame_id: Unique identifier, so a stale token of equal depth never matches.
    """

    depth: int
    frame_id: int = field(default_factory=_next_frame_id)


@dataclass(frozen=True)
class RegionFrame:
    registrations: RegistrationList
    token: SuspensionToken


class RegionFrameStack:
    """LIFO stack of registration lists saved at suspension boundaries."""

    def __init__(self) -> None:
        self._frames: list[RegionFrame] = []

    @property
    def depth(self) -> int:
        return len(self._frames)

    def push(self, registrations: RegistrationList) -> SuspensionToken:
        token = SuspensionToken(depth=len(self._frames) + 1)
        self._frames.append(RegionFrame(registrations=registrations, token=token))
        return token

    def peek(self) -> RegionFrame | None:
        return self._frames[-1] if self._frames else None

    def pop(self, token: SuspensionToken) -> RegistrationList:
        """Pop the top frame, which must be the one ``token`` identifies.

        Raises:
            RegionBoundaryError: ``token`` is not the stack top. The stack is
                left untouched.
        """
        top = self.peek()
        if top is None or top.token != token:
            raise RegionBoundaryError(None if top is None else top.token, token)
        self._frames.pop()
        return top.registrations

    def __iter__(self) -> Iterator[RegionFrame]:
        """Iterate innermost frame first."""
        return reversed(tuple(self._frames))

    def __len__(self) -> int:
        return len(self._frames)


__all__ = [
    "RegionFrame",
    "RegionFrameStack",
    "SuspensionToken",
]
