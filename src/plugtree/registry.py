"""Hook registry shared by every node of one call tree."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

# Type aliases
OverrideHook = Callable[..., Any]
TransformHook = Callable[..., Any]


@dataclass
class HookRegistry:
    """Override and transform hooks keyed by pluggable name.

    Populated while plugins run, read-only once invocation starts.
    Registration during execution is not detected.

    Attributes:
        override: Pluggable name to overrides, in registration order
        transform: Pluggable name to transforms, in registration order
    """

    override: dict[str, list[OverrideHook]] = field(default_factory=dict)
    transform: dict[str, list[TransformHook]] = field(default_factory=dict)

    def add_override(self, name: str, hook: OverrideHook) -> None:
        """Append an override hook for a pluggable."""
        self.override.setdefault(name, []).append(hook)
        logger.debug("Registered override for '%s' (%d total)", name, len(self.override[name]))

    def add_transform(self, name: str, hook: TransformHook) -> None:
        """Append a transform hook for a pluggable."""
        self.transform.setdefault(name, []).append(hook)
        logger.debug("Registered transform for '%s' (%d total)", name, len(self.transform[name]))

    def get_overrides(self, name: str) -> list[OverrideHook]:
        """Get overrides for a pluggable (empty if none registered)."""
        return list(self.override.get(name, ()))

    def get_transforms(self, name: str) -> list[TransformHook]:
        """Get transforms for a pluggable (empty if none registered)."""
        return list(self.transform.get(name, ()))

    def hook_count(self) -> int:
        """Total number of registered hooks."""
        return sum(map(len, self.override.values())) + sum(map(len, self.transform.values()))

    def hooked_names(self) -> set[str]:
        """Names of every pluggable with at least one hook."""
        return {name for name, hooks in (*self.override.items(), *self.transform.items()) if hooks}
