"""Invocation context threaded through a tree of pluggable calls."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from plugtree.registry import HookRegistry

# Entry point for a dependency, already bound to the invoking node's context
BoundPluggable = Callable[..., Awaitable[Any]]


@dataclass
class Context:
    """Per-node view of one call tree.

    Attributes:
        props: Caller-supplied properties, shallow-copied at every node
        registry: Hook registry, shared by reference across the whole tree
        deps: Dependency alias to bound entry point, private to this node
    """

    props: dict[str, Any] = field(default_factory=dict)
    registry: HookRegistry = field(default_factory=HookRegistry)
    deps: dict[str, BoundPluggable] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a caller-supplied property.

        Args:
            key: Property name
            default: Default value if not found

        Returns:
            Property value or default
        """
        return self.props.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.props[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.props[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self.props

    def derive(self, deps: Mapping[str, Callable[[Context], BoundPluggable]]) -> Context:
        """Clone this context for a nested invocation.

        Props are shallow-copied and the registry is shared. Each factory
        in ``deps`` receives the clone and returns the entry point to store
        under its alias, so dependencies keep threading the same lineage.

        Args:
            deps: Alias to factory building a bound entry point

        Returns:
            New context; this one is left untouched
        """
        clone = Context(props=dict(self.props), registry=self.registry)
        clone.deps = {alias: bind(clone) for alias, bind in deps.items()}
        return clone
