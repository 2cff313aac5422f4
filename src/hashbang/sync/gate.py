"""
Change gate.

Remembers the last fragment this process wrote (or already processed) so
that the change notification caused by our own write, the echo, is not
mistaken for navigation and parsed back into the tree.
"""

from __future__ import annotations


class ChangeGate:
    """Tracks the last fragment written through the channel."""

    __slots__ = ("_last_written",)

    def __init__(self) -> None:
        self._last_written: str | None = None

    @property
    def last_written(self) -> str | None:
        """Last fragment recorded, or None before the first one."""
        return self._last_written

    def is_echo(self, fragment: str) -> bool:
        """Check whether a fragment is the one we recorded last."""
        return self._last_written is not None and fragment == self._last_written

    def record(self, fragment: str) -> bool:
        """
        Remember a fragment.

        Returns:
            True if it differs from the previous one (a write is needed).
        """
        if fragment == self._last_written:
            return False
        self._last_written = fragment
        return True

    def reset(self) -> None:
        self._last_written = None

    def __repr__(self) -> str:
        return f"ChangeGate(last_written={self._last_written!r})"
