"""
Lifecycle events and sync states.

These define the signals a SyncController emits:
- LifecycleEvent: what just happened to the live tree
- SyncState: where the outgoing string channel currently stands
"""

from __future__ import annotations

import enum as _enum
import typing as _typing


class LifecycleEvent(_enum.Enum):
    """
    Signals emitted by the sync controller.

    Exactly one of the external events fires per processed navigation;
    UPDATED_INTERNALLY fires at most once per coalescing window.
    """

    INITIALIZED = "initialized"
    """First successful parse since the controller started."""

    UPDATED_EXTERNALLY = "updated-externally"
    """The fragment was changed by navigation and parsed into a new tree."""

    UPDATED_INTERNALLY = "updated-internally"
    """The tree was mutated by the program and the fragment committed."""

    UNPARSABLE = "unparsable"
    """The current fragment is not a hashbang; the tree is empty."""

    IMMEDIATE = "immediate"
    """Pseudo-event: run an observer once at registration time."""

    @property
    def is_lifecycle(self) -> bool:
        """Whether the controller itself can emit this event."""
        return self is not LifecycleEvent.IMMEDIATE

    @property
    def is_external(self) -> bool:
        """Whether this event results from navigation."""
        return self in {
            LifecycleEvent.INITIALIZED,
            LifecycleEvent.UPDATED_EXTERNALLY,
            LifecycleEvent.UNPARSABLE,
        }

    @classmethod
    def lifecycle(cls) -> frozenset[LifecycleEvent]:
        """All events the controller emits."""
        return frozenset(event for event in cls if event.is_lifecycle)

    @classmethod
    def coerce(cls, value: LifecycleEvent | str) -> LifecycleEvent:
        """
        Accept an event or its name/value.

        Both ``"updated-externally"`` and ``"UPDATED_EXTERNALLY"`` work.

        Raises:
            ValueError: If the name is unknown.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            pass
        try:
            return cls[str(value).upper().replace("-", "_")]
        except KeyError:
            raise ValueError(f"Unknown lifecycle event: {value!r}") from None


class SyncState(_enum.Enum):
    """State of the outgoing fragment channel."""

    IDLE = "idle"
    """Nothing has been committed yet."""

    PENDING = "pending"
    """A commit happened and its notification is waiting for the timer."""

    COMMITTED = "committed"
    """The last internal change has been committed and announced."""


LifecycleSink: _typing.TypeAlias = _typing.Callable[[LifecycleEvent], None]
