"""Condition kind identifiers.

A condition kind is any hashable value the application chooses: an enum member,
a string, or a :class:`Kind`. Deliveries carry only the kind, never a payload.

Usage:
    from reentry import DeliveryManager, kind

    RESOURCE_INVALIDATED = kind("resource-invalidated")

    manager = DeliveryManager()
    manager.register(RESOURCE_INVALIDATED)
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from typing import TypeAlias

ConditionKind: TypeAlias = Hashable


@dataclass(frozen=True)
class Kind:
    """Named opaque condition kind. Two kinds are equal when their names are."""

    name: str

    def __repr__(self) -> str:
        return f"Kind({self.name!r})"


def kind(name: str) -> Kind:
    """Create a named condition kind.

    Args:
        name: Human readable identifier, used for equality and in log output.

    Returns:
        Kind usable with register, unregister and raise.
    """
    if not isinstance(name, str) or not name:
        raise TypeError(f"kind name must be a non-empty str, got {name!r}")
    return Kind(name=name)


def ensure_kind(value: object, *, name: str = "kind") -> ConditionKind:
    if value is None:
        raise TypeError(f"{name} must not be None")
    try:
        hash(value)
    except TypeError:
        raise TypeError(f"{name} must be hashable, got {type(value).__name__}") from None
    return value


__all__ = [
    "ConditionKind",
    "Kind",
    "ensure_kind",
    "kind",
]
