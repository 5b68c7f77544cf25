"""Flatjson: flatten object graphs with shared and cyclic references into JSON-ready instances."""

__version__ = "0.1.0"

from . import settings
from ._typing import SupportsSerialize
from .exceptions import FlatjsonError
from .exceptions import RegistrationError
from .exceptions import UnserializableValueError
from .instances import ARRAY_TAG
from .instances import OBJECT_TAG
from .instances import InstanceTable
from .instances import Reference
from .instances import SerializationResult
from .instances import SerializedInstance
from .plugins.manager import reset_global_manager
from .registry import FieldOptions
from .registry import TypeRegistry
from .registry import default_registry
from .serializer import Serializer
from .serializer import serialize

# Initialize hooks system on module import
reset_global_manager()

__all__ = [
    "ARRAY_TAG",
    "OBJECT_TAG",
    "FieldOptions",
    "FlatjsonError",
    "InstanceTable",
    "Reference",
    "RegistrationError",
    "SerializationResult",
    "SerializedInstance",
    "Serializer",
    "SupportsSerialize",
    "TypeRegistry",
    "UnserializableValueError",
    "default_registry",
    "serialize",
    "settings",
]
