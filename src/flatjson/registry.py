"""
Type registry consulted by the serializer.

The registry answers three questions about a value's type: is it registered, what tag does it
serialize under, and which fields should be kept. Lookups use direct type identity; subclasses of
a registered class are not registered themselves.

Example:
    >>> from flatjson.registry import TypeRegistry
    >>> registry = TypeRegistry()
    >>> @registry.serializable("user", exclude=["password"])
    ... class User:
    ...     def __init__(self, name, password):
    ...         self.name = name
    ...         self.password = password
    >>> registry.has_type(User)
    True
    >>> registry.get_options("user")
    FieldOptions(include=None, exclude=('password',))
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Callable, Protocol, TypeVar, runtime_checkable

from flatjson._typing import PRIMITIVE_TYPES
from flatjson.exceptions import RegistrationError
from flatjson.instances import RESERVED_TAGS

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=type)

_CONTAINER_TYPES: tuple[type, ...] = (dict, list, tuple)


@dataclass(frozen=True)
class FieldOptions:
    """
    Field-filtering policy for a registered type.

    Exclusion is applied before inclusion: a field named in both lists is dropped.
    """

    include: tuple[str, ...] | None = None
    exclude: tuple[str, ...] | None = None

    @classmethod
    def create(
        cls, include: Iterable[str] | None = None, exclude: Iterable[str] | None = None
    ) -> FieldOptions:
        """Build options from any iterables of field names, removing duplicates in order."""
        return cls(include=_normalize_names(include), exclude=_normalize_names(exclude))

    @property
    def is_empty(self) -> bool:
        return self.include is None and self.exclude is None

    def apply(self, fields: dict[str, Any]) -> dict[str, Any]:
        """
        Filter a field mapping.

        Examples:
            >>> options = FieldOptions(include=("b", "a", "z"), exclude=("a",))
            >>> options.apply({"a": 1, "b": 2, "c": 3})
            {'b': 2}
        """
        if self.exclude is not None:
            fields = {name: value for name, value in fields.items() if name not in self.exclude}
        if self.include is not None:
            fields = {name: fields[name] for name in self.include if name in fields}
        return fields


@runtime_checkable
class TypeRegistryProtocol(Protocol):
    """Contract the serializer relies on. Implementations must be side-effect free."""

    def has_type(self, cls: type) -> bool: ...

    def get_type_tag(self, cls: type) -> str: ...

    def get_options(self, type_tag: str) -> FieldOptions | None: ...


class TypeRegistry:
    """
    Registry mapping Python classes to type tags and field options.

    Examples:
        >>> class Point:
        ...     pass
        >>> registry = TypeRegistry()
        >>> registry.register(Point, "point", include=["x", "y"])  # doctest: +ELLIPSIS
        <class '...Point'>
        >>> registry.get_type_tag(Point)
        'point'
        >>> registry.get_type("point") is Point
        True
    """

    def __init__(self) -> None:
        self._tags: dict[type, str] = {}
        self._types: dict[str, type] = {}
        self._options: dict[str, FieldOptions] = {}

    def register(
        self,
        cls: T,
        type_tag: str | None = None,
        *,
        include: Iterable[str] | None = None,
        exclude: Iterable[str] | None = None,
    ) -> T:
        """
        Register a class for custom serialization.

        Registering a class a second time replaces its tag and options.

        Args:
            cls: Class to register.
            type_tag: Tag written to `__type__`. Defaults to the class's qualified name.
            include: If given, only these fields are serialized, in this order.
            exclude: Fields that are never serialized. Applied before `include`.

        Returns:
            The registered class, so this can be used inline.

        Raises:
            RegistrationError: If the class, tag, or field names are invalid, or the tag is
                already bound to another class. Primitive types and their subclasses (such as
                `IntEnum` subclasses) are always inlined and cannot be registered.
        """
        if not isinstance(cls, type):
            raise RegistrationError(f"Expected a class, got {type(cls).__qualname__}: {cls!r}")
        if issubclass(cls, PRIMITIVE_TYPES) or cls in _CONTAINER_TYPES:
            raise RegistrationError(f"Built-in type '{cls.__qualname__}' cannot be registered")

        tag = cls.__qualname__ if type_tag is None else type_tag
        if not isinstance(tag, str) or not tag:
            raise RegistrationError(f"Type tag for '{cls.__qualname__}' must be a non-empty string")
        if tag in RESERVED_TAGS:
            raise RegistrationError(f"Type tag '{tag}' is reserved")

        owner = self._types.get(tag)
        if owner is not None and owner is not cls:
            raise RegistrationError(
                f"Type tag '{tag}' is already registered for '{owner.__qualname__}'"
            )

        options = FieldOptions.create(include=include, exclude=exclude)

        previous_tag = self._tags.get(cls)
        if previous_tag is not None and previous_tag != tag:
            del self._types[previous_tag]
            del self._options[previous_tag]
            logger.debug(f"Re-registering '{cls.__qualname__}': '{previous_tag}' -> '{tag}'")

        self._tags[cls] = tag
        self._types[tag] = cls
        self._options[tag] = options
        return cls

    def serializable(
        self,
        type_tag: str | None = None,
        *,
        include: Iterable[str] | None = None,
        exclude: Iterable[str] | None = None,
    ) -> Callable[[T], T]:
        """Class decorator form of `register`."""

        def decorator(cls: T) -> T:
            return self.register(cls, type_tag, include=include, exclude=exclude)

        return decorator

    def unregister(self, cls: type) -> None:
        """
        Remove a class from the registry.

        Raises:
            KeyError: If the class is not registered.
        """
        tag = self._tags.pop(cls)
        del self._types[tag]
        del self._options[tag]

    def has_type(self, cls: type) -> bool:
        return cls in self._tags

    def get_type_tag(self, cls: type) -> str:
        """
        Return the tag a registered class serializes under.

        Raises:
            KeyError: If the class is not registered.
        """
        return self._tags[cls]

    def get_type(self, type_tag: str) -> type | None:
        return self._types.get(type_tag)

    def get_options(self, type_tag: str) -> FieldOptions | None:
        """Return field options for a tag, or None if the tag has no filtering."""
        options = self._options.get(type_tag)
        if options is None or options.is_empty:
            return None
        return options

    def registered_types(self) -> dict[str, type]:
        return dict(self._types)

    def __contains__(self, cls: object) -> bool:
        return cls in self._tags

    def __len__(self) -> int:
        return len(self._tags)


def _normalize_names(names: Iterable[str] | None) -> tuple[str, ...] | None:
    if names is None:
        return None
    if isinstance(names, str):
        raise RegistrationError(f"Field names must be an iterable of strings, got '{names}'")

    normalized: dict[str, None] = {}
    for name in names:
        if not isinstance(name, str):
            raise RegistrationError(f"Field names must be strings, got {name!r}")
        normalized[name] = None
    return tuple(normalized)


default_registry = TypeRegistry()
"""Registry used by `serialize` and `Serializer` when none is given."""
