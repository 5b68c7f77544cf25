from .manager import register_hooks
from .manager import register_plugins_entry_points
from .manager import unregister_hooks
from .markers import hook_impl

__all__ = [
    "hook_impl",
    "register_hooks",
    "register_plugins_entry_points",
    "unregister_hooks",
]
