"""Dependency graph of a pluggable call tree.

Walks the ``dependencies`` declared on pluggables, starting from a root,
and exposes the same metadata a documentation tool would need: names,
docstrings, and alias edges.
"""

from __future__ import annotations

import inspect
import logging
from graphlib import TopologicalSorter
from typing import Any

from plugtree.pluggable import Pluggable

logger = logging.getLogger(__name__)


class PluggableGraph:
    """Graph of pluggables reachable from a root.

    Nodes are keyed by pluggable name; an edge ``a -> b`` means ``a``
    declares ``b`` as a dependency.
    """

    def __init__(self, root: Pluggable) -> None:
        """Initialize graph by walking dependencies from the root.

        Args:
            root: Entry-point pluggable

        Raises:
            ValueError: If two distinct pluggables share a name
        """
        self.root = root
        self._nodes: dict[str, Pluggable] = {}
        self._collect(root)
        logger.debug("Collected %d pluggable(s) from '%s'", len(self._nodes), root.name)

    def _collect(self, root: Pluggable) -> None:
        stack = [root]
        while stack:
            node = stack.pop()
            existing = self._nodes.get(node.name)
            if existing is node:
                continue
            if existing is not None:
                raise ValueError(
                    f"duplicate pluggable '{node.name}' found: {existing.fn!r} and {node.fn!r}"
                )
            self._nodes[node.name] = node
            stack.extend(node.dependencies.values())

    @property
    def names(self) -> list[str]:
        """Get pluggable names, sorted."""
        return sorted(self._nodes)

    def get(self, name: str) -> Pluggable:
        """Get a pluggable by name.

        Raises:
            KeyError: If no reachable pluggable has that name
        """
        return self._nodes[name]

    def edges(self, name: str) -> dict[str, str]:
        """Get dependency aliases of a pluggable.

        Args:
            name: Pluggable name

        Returns:
            Alias to dependency name
        """
        return {alias: dep.name for alias, dep in self._nodes[name].dependencies.items()}

    def _dependency_sets(self) -> dict[str, set[str]]:
        return {name: {dep.name for dep in node.dependencies.values()} for name, node in self._nodes.items()}

    @property
    def dependency_order(self) -> list[str]:
        """Get pluggable names with every dependency before its dependents."""
        return list(TopologicalSorter(self._dependency_sets()).static_order())

    def to_dict(self) -> dict[str, Any]:
        """Build a nested tree rooted at the root pluggable.

        Shared dependencies appear under every parent that declares them;
        each node is built once and the same dict is reused.

        Returns:
            ``{"name", "doc", "edges", "children"}`` nodes
        """
        built: dict[str, dict[str, Any]] = {}

        def build(node: Pluggable) -> dict[str, Any]:
            if node.name not in built:
                built[node.name] = {
                    "name": node.name,
                    "doc": inspect.cleandoc(node.__doc__) if node.__doc__ else None,
                    "edges": self.edges(node.name),
                    "children": [build(dep) for dep in node.dependencies.values()],
                }
            return built[node.name]

        return build(self.root)

    def to_mermaid(self) -> str:
        """Generate Mermaid diagram of the graph.

        Returns:
            Mermaid graph definition string
        """
        lines = ["graph TD"]
        deps = self._dependency_sets()
        has_edges: set[str] = set()

        for name in self.names:
            for dep in sorted(deps[name]):
                lines.append(f"    {name} --> {dep}")
                has_edges.update((name, dep))

        for name in self.names:
            if name not in has_edges:
                lines.append(f"    {name}")

        return "\n".join(lines)
