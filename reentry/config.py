"""Runtime configuration for DeliveryManager.

Environment variables:
    REENTRY_STRICT: raise LeakedRegistrationError instead of logging a warning.
    REENTRY_DEBUG: emit debug traces for every manager operation.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

_TRUTHY = ("1", "true", "yes")


def _flag(environ: Mapping[str, str], key: str) -> bool:
    return environ.get(key, "").lower() in _TRUTHY


@dataclass(frozen=True)
class DeliveryConfig:
    """
    Behaviour switches for a DeliveryManager.

    Attributes:
        strict: Treat leaked registrations as fatal instead of warning about them.
        debug: Log every register/unregister/raise/boundary/drain at DEBUG level.
    """

    strict: bool = False
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> DeliveryConfig:
        env = os.environ if environ is None else environ
        return cls(
            strict=_flag(env, "REENTRY_STRICT"),
            debug=_flag(env, "REENTRY_DEBUG"),
        )


__all__ = ["DeliveryConfig"]
