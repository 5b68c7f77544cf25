"""Hook specifications for flatjson serialization events."""

from typing import Any

from flatjson.instances import SerializationResult
from flatjson.plugins.markers import hook_spec


class SerializationSpec:
    """Hook specifications for a single serialize call."""

    @hook_spec
    def before_serialize(self, root: Any) -> None:
        """
        Called before traversal of an object graph begins.

        Args:
            root: Value passed to `serialize`.
        """

    @hook_spec
    def on_unserializable_value(self, value: Any, path: str) -> None:
        """
        Called when a value cannot be serialized.

        In the default fail-soft mode the value is then replaced with None. In strict mode the
        hook runs before the error is raised.

        Args:
            value: The offending value.
            path: Location of the value inside the graph, e.g. `$.children[2]`.
        """

    @hook_spec
    def after_serialize(self, result: SerializationResult) -> None:
        """
        Called after an object graph has been fully flattened.

        Args:
            result: The finished instances list and root value.
        """
