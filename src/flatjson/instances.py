"""
Output model and identity-keyed instance table.

A serialize call produces a flat list of `SerializedInstance` entries plus a root value. Every
object that recurs in the graph is replaced by a `Reference` pointing into that list.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Any, Final

OBJECT_TAG: Final = "__object__"
ARRAY_TAG: Final = "__array__"

TYPE_KEY: Final = "__type__"
VALUE_KEY: Final = "__value__"
INDEX_KEY: Final = "__index__"

RESERVED_TAGS: Final = frozenset({OBJECT_TAG, ARRAY_TAG})

UNSET: Final = object()
"""Value of an instance slot that was reserved but not yet filled."""


@dataclass(frozen=True)
class Reference:
    """Pointer into the instances list, substituted wherever an object is reused."""

    index: int

    def to_dict(self) -> dict[str, int]:
        return {INDEX_KEY: self.index}


@dataclass
class SerializedInstance:
    """One entry per distinct object identity encountered during traversal."""

    type_tag: str
    value: Any = UNSET

    @property
    def is_filled(self) -> bool:
        """Whether the slot has left the placeholder state."""
        return self.value is not UNSET

    def to_dict(self) -> dict[str, Any]:
        return {TYPE_KEY: self.type_tag, VALUE_KEY: to_wire(self.value)}


@dataclass
class SerializationResult:
    """
    Flattened form of an object graph.

    Examples:
        >>> result = SerializationResult(
        ...     instances=[SerializedInstance("__array__", [1, 2])],
        ...     root=Reference(0),
        ... )
        >>> result.to_dict()
        {'instances': [{'__type__': '__array__', '__value__': [1, 2]}], 'root': {'__index__': 0}}
    """

    instances: list[SerializedInstance] = field(default_factory=list)
    root: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Render the result as plain dicts and lists ready for a JSON encoder."""
        return {
            "instances": [instance.to_dict() for instance in self.instances],
            "root": to_wire(self.root),
        }


def to_wire(value: Any) -> Any:
    """
    Replace every `Reference` in a mapped value with its `{"__index__": n}` form.

    Non-string mapping keys are converted with `str()`, so the result can always be handed to a
    JSON encoder. Keys that only differ in type (`1` and `"1"`) collapse onto one entry.

    Examples:
        >>> to_wire({1: Reference(0), (2, 3): [Reference(1)]})
        {'1': {'__index__': 0}, '(2, 3)': [{'__index__': 1}]}
    """
    if isinstance(value, Reference):
        return value.to_dict()
    if isinstance(value, list):
        return [to_wire(item) for item in value]
    if isinstance(value, dict):
        return {_wire_key(key): to_wire(item) for key, item in value.items()}
    return value


def _wire_key(key: Any) -> str:
    return key if isinstance(key, str) else str(key)


class InstanceTable:
    """
    Identity-keyed deduplication store for a single serialize call.

    Lookups use object identity, never equality: two equal but distinct dicts get two slots.
    The table keeps a strong reference to every registered object so that `id()` values cannot
    be recycled while the session is alive.

    Examples:
        >>> table = InstanceTable()
        >>> data = {"a": 1}
        >>> ref = table.reserve_placeholder(data, "__object__")
        >>> table.try_get_existing(data) is ref
        True
        >>> table.try_get_existing({"a": 1}) is None
        True
        >>> table.fill(ref, {"a": 1})
        >>> table.instances[0].value
        {'a': 1}
    """

    def __init__(self) -> None:
        self._references: dict[int, tuple[Any, Reference]] = {}
        self._instances: list[SerializedInstance] = []

    @property
    def instances(self) -> list[SerializedInstance]:
        return self._instances

    def __len__(self) -> int:
        return len(self._instances)

    def try_get_existing(self, obj: Any) -> Reference | None:
        """Return the reference already assigned to `obj`, if any."""
        entry = self._references.get(id(obj))
        return entry[1] if entry is not None else None

    def reserve_placeholder(self, obj: Any, type_tag: str) -> Reference:
        """
        Append an unfilled instance for `obj` and record its reference.

        Must be called before descending into the object's children so that back-edges resolve to
        this slot.

        Args:
            obj: Object whose identity owns the slot.
            type_tag: Tag stored on the new instance.

        Returns:
            Reference whose index is the length of the instances list before the append.

        Raises:
            ValueError: If `obj` already owns a slot in this table.
        """
        if id(obj) in self._references:
            raise ValueError(f"Object of type '{type(obj).__qualname__}' already has a slot")

        reference = Reference(len(self._instances))
        self._instances.append(SerializedInstance(type_tag))
        self._references[id(obj)] = (obj, reference)
        return reference

    def fill(self, reference: Reference, value: Any) -> None:
        """
        Write the finished mapped value into a reserved slot.

        Raises:
            ValueError: If the slot was already filled.
        """
        instance = self._instances[reference.index]
        if instance.is_filled:
            raise ValueError(f"Instance slot {reference.index} is already filled")
        instance.value = value
