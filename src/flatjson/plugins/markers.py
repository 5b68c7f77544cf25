"""Markers used by flatjson to declare and implement hooks."""

import pluggy

HOOK_NAMESPACE = "flatjson"

hook_spec = pluggy.HookspecMarker(HOOK_NAMESPACE)
hook_impl = pluggy.HookimplMarker(HOOK_NAMESPACE)
