"""
Entry point for flattening object graphs.

Example:
    >>> from flatjson import serialize
    >>> node = {"name": "a"}
    >>> node["self"] = node
    >>> serialize(node).to_dict()
    {'instances': [{'__type__': '__object__', '__value__': {'name': 'a', 'self': {'__index__': 0}}}], 'root': {'__index__': 0}}
"""

from __future__ import annotations

import logging
from typing import Any

from flatjson.instances import InstanceTable
from flatjson.instances import SerializationResult
from flatjson.mapper import ValueMapper
from flatjson.plugins.manager import create_hook_manager_with_plugins
from flatjson.registry import TypeRegistryProtocol
from flatjson.registry import default_registry
from flatjson.settings import FlatjsonSettings
from flatjson.settings import get_global_settings

logger = logging.getLogger(__name__)


class Serializer:
    """
    Flattens object graphs into a list of instances plus a root value.

    The serializer itself holds only configuration. All identity tracking lives in an
    `InstanceTable` created for each `serialize` call, so calls never share state.

    Examples:
        >>> serializer = Serializer()
        >>> serializer.serialize([1, 2, 3]).to_dict()
        {'instances': [{'__type__': '__array__', '__value__': [1, 2, 3]}], 'root': {'__index__': 0}}
        >>> serializer.serialize(42).to_dict()
        {'instances': [], 'root': 42}
    """

    def __init__(
        self,
        registry: TypeRegistryProtocol | None = None,
        *,
        settings: FlatjsonSettings | None = None,
        plugins: list[Any] | None = None,
    ) -> None:
        """
        Initialize serializer.

        Args:
            registry: Registry of custom types. Defaults to `default_registry`.
            settings: Serializer settings. Defaults to the global settings at construction time.
            plugins: Hook implementations used in addition to the globally registered ones.
        """
        self.registry = registry if registry is not None else default_registry
        self.settings = settings if settings is not None else get_global_settings()
        self._plugins = list(plugins) if plugins else []

    def serialize(self, value: Any) -> SerializationResult:
        """
        Flatten an object graph.

        Args:
            value: Root of the graph. Primitives are returned as the root with no instances.

        Returns:
            The instances in first-encounter order and the mapped root value.

        Raises:
            UnserializableValueError: If strict mode is on and the graph holds a value that
                cannot be serialized.
        """
        hook = create_hook_manager_with_plugins(self._plugins).hook
        hook.before_serialize(root=value)

        table = InstanceTable()
        mapper = ValueMapper(self.registry, table, self.settings, hook)
        root = mapper.map_value(value)
        result = SerializationResult(instances=table.instances, root=root)

        logger.debug(
            f"Serialized '{type(value).__qualname__}' root into {len(result.instances)} instance(s)"
        )
        hook.after_serialize(result=result)
        return result


def serialize(
    value: Any,
    registry: TypeRegistryProtocol | None = None,
    **kwargs: Any,
) -> SerializationResult:
    """
    Flatten an object graph with a one-off `Serializer`.

    Args:
        value: Root of the graph.
        registry: Registry of custom types. Defaults to `default_registry`.
        **kwargs: Forwarded to `Serializer` (`settings`, `plugins`).
    """
    return Serializer(registry, **kwargs).serialize(value)
