"""
Depth-first value mapping for a single serialize call.

Every non-primitive value is classified, looked up in the `InstanceTable` by identity, and, on
first encounter, given a slot *before* its children are visited. A back-edge to an object that is
still being mapped therefore resolves to its already reserved slot instead of recursing forever.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterator
from typing import Any

from pluggy import HookRelay

from flatjson._typing import PRIMITIVE_TYPES
from flatjson._typing import SupportsSerialize
from flatjson._typing import ValueKind
from flatjson.exceptions import UnserializableValueError
from flatjson.instances import ARRAY_TAG
from flatjson.instances import OBJECT_TAG
from flatjson.instances import InstanceTable
from flatjson.instances import Reference
from flatjson.registry import FieldOptions
from flatjson.registry import TypeRegistryProtocol
from flatjson.settings import FlatjsonSettings

logger = logging.getLogger(__name__)

ROOT_PATH = "$"

_Path = tuple[Any, str]
"""Location inside the graph as a (parent, segment) chain, rendered only for diagnostics."""


class ValueMapper:
    """
    Maps values onto their flattened form, filling an `InstanceTable` along the way.

    A mapper is bound to one table and must not be reused across serialize calls.

    Examples:
        >>> from flatjson.registry import TypeRegistry
        >>> table = InstanceTable()
        >>> mapper = ValueMapper(TypeRegistry(), table, FlatjsonSettings())
        >>> shared = [1, 2]
        >>> mapper.map_value({"a": shared, "b": shared})
        Reference(index=0)
        >>> table.instances[0].value
        {'a': Reference(index=1), 'b': Reference(index=1)}
    """

    def __init__(
        self,
        registry: TypeRegistryProtocol,
        table: InstanceTable,
        settings: FlatjsonSettings,
        hook: HookRelay | None = None,
    ) -> None:
        self._registry = registry
        self._table = table
        self._settings = settings
        self._hook = hook

    def classify(self, value: Any) -> ValueKind:
        """
        Determine how a value is mapped.

        Registration is checked by exact type, before the built-in containers.

        Examples:
            >>> from flatjson.registry import TypeRegistry
            >>> mapper = ValueMapper(TypeRegistry(), InstanceTable(), FlatjsonSettings())
            >>> [mapper.classify(v) for v in (1, {}, (), len)]
            ['primitive', 'plain_record', 'sequence', 'unsupported']
        """
        if isinstance(value, PRIMITIVE_TYPES):
            return "primitive"
        value_type = type(value)
        if self._registry.has_type(value_type):
            return "registered"
        if value_type is dict:
            return "plain_record"
        if value_type is list or value_type is tuple:
            return "sequence"
        return "unsupported"

    def map_value(self, value: Any, path: str = ROOT_PATH) -> Any:
        """
        Map a single value and everything reachable from it.

        Traversal is depth-first and pre-order, driven by an explicit stack of open objects, so
        graph depth is not limited by the interpreter's recursion limit.

        Args:
            value: Value to map.
            path: Location of the value inside the graph, used for diagnostics.

        Returns:
            The primitive itself, a `Reference` to the value's instance slot, or None if the value
            cannot be serialized.

        Raises:
            UnserializableValueError: If the value cannot be serialized and strict mode is on.
        """
        stack: list[_OpenObject] = []
        result = self._visit(value, (None, path), stack)

        while stack:
            current = stack[-1]
            entry = next(current.children, None)
            if entry is None:
                stack.pop()
                self._table.fill(current.reference, current.value)
                continue

            key, child_path, child = entry
            mapped = self._visit(child, child_path, stack)
            if isinstance(current.value, list):
                current.value.append(mapped)
            else:
                current.value[key] = mapped

        return result

    def _visit(self, value: Any, path: _Path, stack: list[_OpenObject]) -> Any:
        """Map `value` itself, opening a new stack entry for objects seen for the first time."""
        kind = self.classify(value)
        if kind == "primitive":
            return value
        if kind == "unsupported":
            self._report_unserializable(value, path)
            return None

        reference = self._table.try_get_existing(value)
        if reference is not None:
            return reference

        options: FieldOptions | None = None
        if kind == "registered":
            type_tag = self._registry.get_type_tag(type(value))
            data = _substitute(value)
            options = self._registry.get_options(type_tag)
        elif kind == "plain_record":
            type_tag = OBJECT_TAG
            data = value
        else:
            type_tag = ARRAY_TAG
            data = value

        reference = self._table.reserve_placeholder(value, type_tag)
        if isinstance(data, PRIMITIVE_TYPES):
            self._table.fill(reference, data)
        else:
            stack.append(_open(reference, data, options, path))
        return reference

    def _report_unserializable(self, value: Any, location: _Path) -> None:
        path = _render(location)
        if self._hook is not None:
            self._hook.on_unserializable_value(value=value, path=path)

        if self._settings.strict:
            raise UnserializableValueError(value, path)

        if self._settings.warn_unserializable:
            logger.warning(
                f"Value at '{path}' of type '{type(value).__qualname__}' is not serializable "
                f"and will NOT be recorded: {value!r}"
            )


@dataclasses.dataclass
class _OpenObject:
    """An object whose slot is reserved while its children are still being mapped."""

    reference: Reference
    children: Iterator[tuple[Any, _Path, Any]]
    value: list[Any] | dict[Any, Any]


def _open(
    reference: Reference, data: Any, options: FieldOptions | None, path: _Path
) -> _OpenObject:
    """Start mapping the children of `data`, whose owner already holds `reference`."""
    if isinstance(data, (list, tuple)):
        items = ((i, (path, f"[{i}]"), item) for i, item in enumerate(data))
        return _OpenObject(reference, items, [])

    fields = _fields_of(data)
    if options is not None:
        fields = options.apply(fields)
    children = ((name, (path, _segment(name)), value) for name, value in fields.items())
    return _OpenObject(reference, children, {})


def _substitute(obj: Any) -> Any:
    """Return the data to map for `obj`, honouring the `__serialize__` hook."""
    if isinstance(obj, SupportsSerialize):
        return obj.__serialize__()
    return obj


def _fields_of(data: Any) -> dict[Any, Any]:
    """
    Extract the field mapping of a record-like value, preserving declaration order.

    Slot attributes along the MRO come first, then dataclass fields or the instance `__dict__`.
    Attributes that were never assigned are skipped.
    """
    if isinstance(data, dict):
        return dict(data)

    fields: dict[str, Any] = {}
    for klass in reversed(type(data).__mro__):
        slots = klass.__dict__.get("__slots__", ())
        for name in (slots,) if isinstance(slots, str) else slots:
            if name not in ("__dict__", "__weakref__") and hasattr(data, name):
                fields[name] = getattr(data, name)

    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        for f in dataclasses.fields(data):
            if f.name not in fields and hasattr(data, f.name):
                fields[f.name] = getattr(data, f.name)
    elif hasattr(data, "__dict__"):
        fields.update(vars(data))
    return fields


def _segment(name: Any) -> str:
    if isinstance(name, str) and name.isidentifier():
        return f".{name}"
    return f"[{name!r}]"


def _render(path: _Path) -> str:
    segments: list[str] = []
    node: _Path | None = path
    while node is not None:
        node, segment = node
        segments.append(segment)
    return "".join(reversed(segments))
