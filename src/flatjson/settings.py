"""Process-wide defaults for how serializers treat values they cannot map."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from dataclasses import replace
from typing import Any

_current: FlatjsonSettings | None = None
_lock = threading.RLock()


@dataclass(frozen=True)
class FlatjsonSettings:
    """Configuration settings for flatjson."""

    strict: bool = False
    """
    Whether an unserializable value aborts the whole serialize call.

    If False, the value is replaced with None and traversal continues.
    """

    warn_unserializable: bool = True
    """Whether a warning is logged for every value replaced with None."""


def get_global_settings() -> FlatjsonSettings:
    """Return the settings new serializers start from, defaulting to `FlatjsonSettings()`."""
    global _current
    with _lock:
        if _current is None:
            _current = FlatjsonSettings()
        return _current


def set_global_settings(settings: FlatjsonSettings) -> None:
    """
    Replace the process-wide settings.

    A Serializer reads the global settings when it is constructed, so existing serializers keep
    the settings they were created with.
    """
    global _current
    with _lock:
        _current = settings


@contextmanager
def override_settings(**changes: Any) -> Iterator[FlatjsonSettings]:
    """
    Temporarily change individual global settings.

    Examples:
        >>> with override_settings(strict=True) as settings:
        ...     settings.strict
        True
        >>> get_global_settings().strict
        False
    """
    with _lock:
        previous = get_global_settings()
        updated = replace(previous, **changes)
        set_global_settings(updated)
    try:
        yield updated
    finally:
        set_global_settings(previous)
