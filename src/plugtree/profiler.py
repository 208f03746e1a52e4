"""Lightweight timing recorder for pluggable invocations.

The profiler records unconditionally whenever ``create_event`` is called.
Whether pluggables bother to call it is governed by the ``active`` flag,
which only the wrapper consults.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

import pydantic
import yaml

logger = logging.getLogger(__name__)

NSEC_PER_SEC = 1_000_000_000
NSEC_PER_MSEC = 1_000_000

ConcludeFn = Callable[[], None]


@dataclass(frozen=True)
class InvocationRecord:
    """Elapsed time of one concluded profiler event.

    Attributes:
        name: Event name (the pluggable name for wrapped invocations)
        sec: Whole seconds elapsed
        nsec: Remaining nanoseconds elapsed
    """

    name: str
    sec: int
    nsec: int

    @property
    def elapsed_ns(self) -> int:
        """Total elapsed time in nanoseconds."""
        return self.sec * NSEC_PER_SEC + self.nsec

    @property
    def elapsed_ms(self) -> float:
        """Total elapsed time in milliseconds."""
        return self.elapsed_ns / NSEC_PER_MSEC


@dataclass
class Profiler:
    """Process-wide timing state.

    Attributes:
        active: Whether pluggable invocations should open events
        invocations: Concluded records in conclusion order
    """

    active: bool = False
    invocations: list[InvocationRecord] = field(default_factory=list)

    def create_event(self, name: str) -> ConcludeFn:
        """Open a timing event.

        Args:
            name: Event name

        Returns:
            Function that appends one record per call, measuring from the
            moment this event was opened
        """
        start = time.monotonic_ns()

        def conclude() -> None:
            sec, nsec = divmod(time.monotonic_ns() - start, NSEC_PER_SEC)
            self.invocations.append(InvocationRecord(name=name, sec=sec, nsec=nsec))

        return conclude

    def reset(self) -> None:
        """Drop all recorded invocations."""
        self.invocations.clear()


# Global profiler instance
_profiler_instance: Profiler | None = None
_profiler_lock = threading.Lock()


def get_profiler() -> Profiler:
    """Get the profiler instance, creating it from settings on first use."""
    global _profiler_instance

    if _profiler_instance is None:
        with _profiler_lock:
            if _profiler_instance is None:
                from plugtree.config import get_settings

                try:
                    active = get_settings().profile
                except (OSError, yaml.YAMLError, pydantic.ValidationError) as e:
                    logger.warning("Invalid plugtree config, profiling disabled: %s", e)
                    active = False
                _profiler_instance = Profiler(active=active)
                if active:
                    logger.info("Pluggable profiling enabled")

    return _profiler_instance


def set_profiler(profiler: Profiler) -> None:
    """Set the global profiler instance (for testing)."""
    global _profiler_instance
    _profiler_instance = profiler


def clear_profiler() -> None:
    """Clear the global profiler instance (for testing)."""
    global _profiler_instance
    _profiler_instance = None


def create_event(name: str) -> ConcludeFn:
    """Open a timing event on the current global profiler."""
    return get_profiler().create_event(name)
