"""
Plugin managers for serialization hooks.

A process-wide manager holds hooks registered through `register_hooks` or discovered through the
`flatjson.hooks` entry point. Every serialize call builds its own manager seeded with those global
hooks plus the plugins handed to its `Serializer`.
"""

import logging
from inspect import isclass
from typing import Any

from pluggy import PluginManager

from .markers import HOOK_NAMESPACE
from .specs import SerializationSpec

logger = logging.getLogger(__name__)

PLUGIN_ENTRY_POINT = "flatjson.hooks"

_GLOBAL_MANAGER: PluginManager | None = None


# region API


def register_hooks(*plugins: Any) -> None:
    """Register hook implementations for every subsequent serialize call in this process."""
    manager = get_global_manager()
    for plugin in plugins:
        _add_plugin(manager, plugin)


def unregister_hooks(*plugins: Any) -> None:
    """Remove hook implementations added with `register_hooks`; unknown plugins are ignored."""
    manager = get_global_manager()
    for plugin in plugins:
        if manager.is_registered(plugin):
            manager.unregister(plugin)


def register_plugins_entry_points(plugin_manager: PluginManager | None = None) -> int:
    """
    Load plugins advertised under the `flatjson.hooks` entry point group.

    Args:
        plugin_manager: Manager to load into. Defaults to the global manager.

    Returns:
        Number of plugins loaded.
    """
    manager = plugin_manager if plugin_manager is not None else get_global_manager()
    count = manager.load_setuptools_entrypoints(PLUGIN_ENTRY_POINT)  # Doesn't use setuptools
    logger.debug(f"Loaded {count} plugin(s) from '{PLUGIN_ENTRY_POINT}' entry points")
    return count


def create_hook_manager_with_plugins(plugins: list[Any]) -> PluginManager:
    """
    Build the manager used by one serialize call.

    Args:
        plugins: Serializer-specific hook implementations, added after the global ones.

    Returns:
        A new PluginManager; registering into it never affects the global manager.
    """
    manager = new_plugin_manager()
    for plugin in [*get_global_manager().get_plugins(), *plugins]:
        _add_plugin(manager, plugin)
    return manager


def get_global_manager() -> PluginManager:
    """Return the process-wide manager, creating it on first use."""
    if _GLOBAL_MANAGER is None:
        return reset_global_manager()
    return _GLOBAL_MANAGER


def reset_global_manager() -> PluginManager:
    """Replace the process-wide manager with an empty one, dropping all global hooks."""
    global _GLOBAL_MANAGER
    _GLOBAL_MANAGER = new_plugin_manager()
    return _GLOBAL_MANAGER


def new_plugin_manager() -> PluginManager:
    """Create a PluginManager that knows flatjson's hook specs."""
    manager = PluginManager(HOOK_NAMESPACE)
    manager.trace.root.setwriter(
        logger.debug if logger.getEffectiveLevel() == logging.DEBUG else None
    )
    manager.enable_tracing()
    manager.add_hookspecs(SerializationSpec)
    return manager


# region Helpers


def _add_plugin(manager: PluginManager, plugin: Any) -> None:
    if manager.is_registered(plugin):
        return
    if isclass(plugin):
        raise TypeError(
            f"flatjson expects hooks to be registered as instances, got class "
            f"'{plugin.__qualname__}'. Have you forgotten the `()` when registering it?"
        )
    manager.register(plugin)
