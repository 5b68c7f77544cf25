"""
Centralized exception classes for the flatjson library.

All flatjson-specific exceptions inherit from FlatjsonError for easy catching.
"""

from typing import Any


class FlatjsonError(Exception):
    """Base exception for all flatjson errors."""


class RegistrationError(FlatjsonError):
    """Raised when a type is registered with an invalid tag or field options."""


class UnserializableValueError(FlatjsonError):
    """Raised in strict mode when a value cannot be mapped to the flattened form."""

    def __init__(self, value: Any, path: str) -> None:
        self.value = value
        self.path = path
        super().__init__(
            f"Value at '{path}' of type '{type(value).__qualname__}' is not serializable"
        )
