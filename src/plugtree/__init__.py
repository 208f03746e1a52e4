"""Pluggable function composition for module-compilation pipelines.

Any function wrapped as a pluggable can be:
- Intercepted before execution by override hooks
- Post-processed after execution by transform hooks
- Timed by the process-wide profiler

Hooks are registered by plugins against a context; the context is cloned at
every node of the call tree so dependency bindings never leak between calls.
"""

from plugtree.builder import (
    OverrideRegistrar,
    TransformRegistrar,
    build_context,
    build_context_from_settings,
    load_plugins,
)
from plugtree.config import PlugtreeSettings, get_settings
from plugtree.context import Context
from plugtree.graph import PluggableGraph
from plugtree.pluggable import Pluggable, is_pluggable, pluggable, wrap
from plugtree.profiler import InvocationRecord, Profiler, create_event, get_profiler
from plugtree.registry import HookRegistry
from plugtree.sentinel import CONTINUE

__all__ = [
    "CONTINUE",
    "Context",
    "HookRegistry",
    "InvocationRecord",
    "OverrideRegistrar",
    "Pluggable",
    "PluggableGraph",
    "PlugtreeSettings",
    "Profiler",
    "TransformRegistrar",
    "build_context",
    "build_context_from_settings",
    "create_event",
    "get_profiler",
    "get_settings",
    "is_pluggable",
    "load_plugins",
    "pluggable",
    "wrap",
]
