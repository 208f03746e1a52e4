"""Root context construction and plugin registration.

A plugin is any callable taking two registrars::

    def minify_plugin(override, transform):
        override("emit_chunk", lambda ctx, chunk: override.CONTINUE)
        transform("emit_chunk", lambda ctx, code, args: minify(code))

Every plugin runs exactly once, in order, before any pluggable is invoked.
"""

from __future__ import annotations

import importlib
import inspect
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any

from plugtree.context import Context
from plugtree.registry import HookRegistry, OverrideHook, TransformHook
from plugtree.sentinel import CONTINUE

if TYPE_CHECKING:
    from plugtree.config import PlugtreeSettings

logger = logging.getLogger(__name__)


class OverrideRegistrar:
    """Callable handed to plugins for registering override hooks."""

    CONTINUE = CONTINUE

    def __init__(self, registry: HookRegistry) -> None:
        self._registry = registry

    def __call__(self, name: str, hook: OverrideHook) -> None:
        self._registry.add_override(name, hook)


class TransformRegistrar:
    """Callable handed to plugins for registering transform hooks."""

    def __init__(self, registry: HookRegistry) -> None:
        self._registry = registry

    def __call__(self, name: str, hook: TransformHook) -> None:
        self._registry.add_transform(name, hook)


Plugin = Callable[[OverrideRegistrar, TransformRegistrar], Any]


def build_context(
    props: Mapping[str, Any] | None = None,
    plugins: Iterable[Plugin] = (),
) -> Context:
    """Build the root context for one call tree.

    Args:
        props: Caller properties visible to every node of the tree
        plugins: Plugins to run against a fresh hook registry

    Returns:
        Context to pass to the root pluggable
    """
    registry = HookRegistry()
    override = OverrideRegistrar(registry)
    transform = TransformRegistrar(registry)

    for plugin in plugins:
        before = registry.hook_count()
        if inspect.isawaitable(outcome := plugin(override, transform)):
            if inspect.iscoroutine(outcome):
                outcome.close()
            raise TypeError(f"Plugin {_plugin_name(plugin)} must register hooks synchronously, got an awaitable")
        if registry.hook_count() == before:
            logger.warning("Plugin %s registered no hooks", _plugin_name(plugin))
        else:
            logger.debug(
                "Plugin %s registered %d hook(s)",
                _plugin_name(plugin),
                registry.hook_count() - before,
            )

    logger.debug("Hooked pluggables: %s", ", ".join(sorted(registry.hooked_names())) or "none")
    return Context(props=dict(props or {}), registry=registry)


def _plugin_name(plugin: Plugin) -> str:
    return getattr(plugin, "__qualname__", None) or repr(plugin)


def load_plugin(plugin_path: str) -> Plugin:
    """Import a plugin from its import path.

    Accepts ``package.module.attr`` or ``package.module:attr``; after a colon
    the attribute may be dotted (``package.module:Class.method``).

    Args:
        plugin_path: Python import path to the plugin callable

    Returns:
        The plugin callable

    Raises:
        ImportError: If the module or attribute cannot be found
        TypeError: If the target is not callable
    """
    if ":" in plugin_path:
        module_path, attr_name = plugin_path.split(":", 1)
    elif "." in plugin_path:
        module_path, attr_name = plugin_path.rsplit(".", 1)
    else:
        raise ImportError(f"Invalid plugin path '{plugin_path}': expected 'module.attr' or 'module:attr'")

    try:
        module = importlib.import_module(module_path)
        plugin = module
        for part in attr_name.split("."):
            plugin = getattr(plugin, part)
    except (ImportError, AttributeError) as e:
        raise ImportError(f"Failed to load plugin {plugin_path}: {e}") from e

    if not callable(plugin):
        raise TypeError(f"Plugin {plugin_path} is not callable: {type(plugin).__name__}")

    logger.debug("Loaded plugin: %s", plugin_path)
    return plugin


def load_plugins(plugin_paths: Iterable[str]) -> list[Plugin]:
    """Import plugins in order.

    Args:
        plugin_paths: Python import paths

    Returns:
        Plugin callables in the same order
    """
    return [load_plugin(path) for path in plugin_paths]


def build_context_from_settings(
    settings: PlugtreeSettings | None = None,
    props: Mapping[str, Any] | None = None,
    plugins: Iterable[Plugin] = (),
) -> Context:
    """Build a root context with the plugins named in settings.

    Configured plugins run before the ones passed explicitly.

    Args:
        settings: Settings to read; defaults to the global instance
        props: Caller properties
        plugins: Additional plugins

    Returns:
        Root context
    """
    if settings is None:
        from plugtree.config import get_settings

        settings = get_settings()

    configured = load_plugins(settings.plugins)
    return build_context(props, [*configured, *plugins])
