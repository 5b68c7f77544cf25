from typing import Any, Protocol, Union, runtime_checkable

from typing_extensions import Literal

Primitive = Union[None, bool, int, float, str]
"""Values passed through unchanged; they never get an instance slot."""

PRIMITIVE_TYPES: tuple[type, ...] = (type(None), bool, int, float, str)

ValueKind = Literal["primitive", "registered", "plain_record", "sequence", "unsupported"]
"""Classification of a value, determining how the mapper treats it."""


@runtime_checkable
class SupportsSerialize(Protocol):
    """
    Opt-in pre-serialization capability.

    The value returned by `__serialize__` replaces the object as the data that gets mapped. The
    object itself still owns the instance slot, so sharing and cycles are tracked on it.
    """

    def __serialize__(self) -> Any: ...
