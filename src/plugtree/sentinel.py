"""Control sentinel for override hooks.

An override hook returns ``CONTINUE`` to defer to the next registered
override, or to the default implementation once every override has deferred.
"""

from __future__ import annotations

from enum import Enum


class Control(Enum):
    """Flow-control markers understood by the pluggable wrapper."""

    CONTINUE = "continue"  # Defer to the next override or the default

    def __repr__(self) -> str:
        return f"<{self.name}>"


CONTINUE = Control.CONTINUE


def is_continue(value: object) -> bool:
    """Check whether a hook result is the control sentinel.

    Identity comparison only, so values that merely compare equal to
    ``CONTINUE`` are treated as ordinary data.
    """
    return value is CONTINUE
