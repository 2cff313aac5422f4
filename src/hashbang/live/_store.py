"""
Store owning one live value tree.

The store replaces a process-wide global: every controller, wrapper and
observer registry works against an explicit Store, so independent
instances can coexist.
"""

from __future__ import annotations

import collections.abc as _abc
import contextlib as _contextlib
import logging as _logging
import typing as _typing

import hashbang.live._containers as _containers

_logger = _logging.getLogger(__name__)

MutationListener: _typing.TypeAlias = _typing.Callable[[], None]


class Store:
    """
    Owner of the live root mapping.

    Mutations made through the live containers notify every subscribed
    listener. ``replace()`` swaps the whole tree without notifying; it is
    reserved for installing a freshly parsed tree after navigation.

    Every installed tree gets its own hook. Nodes of a tree that has been
    swapped out keep working as plain containers but no longer notify.

    Example:
        >>> store = Store({"page": "1"})
        >>> unsubscribe = store.subscribe(lambda: print("changed"))
        >>> store.root["page"] = "2"
        changed
    """

    def __init__(self, value: _abc.Mapping[str, _typing.Any] | None = None) -> None:
        self._listeners: list[MutationListener] = []
        self._batch_depth = 0
        self._batch_dirty = False
        self._root = self._wrap_root(value if value is not None else {})

    @property
    def root(self) -> _containers.LiveMapping:
        """The live root mapping."""
        return self._root

    @root.setter
    def root(self, value: _typing.Any) -> None:
        """Replace the whole tree as an internal change (notifies listeners)."""
        self._root = self._wrap_root(value)
        self._on_mutation()

    def replace(self, value: _typing.Any) -> _containers.LiveMapping:
        """
        Swap in a new tree without notifying listeners.

        Returns:
            The new live root.
        """
        self._root = self._wrap_root(value)
        return self._root

    def to_plain(self) -> dict[str, _typing.Any]:
        """Plain deep copy of the current tree."""
        return self._root.to_plain()

    def subscribe(self, listener: MutationListener) -> _typing.Callable[[], None]:
        """
        Register a mutation listener.

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    @_contextlib.contextmanager
    def batch(self) -> _typing.Iterator[_containers.LiveMapping]:
        """
        Group several mutations into a single notification.

        Usage:
            with store.batch() as root:
                root["a"] = "1"
                root["b"] = "2"
        """
        self._batch_depth += 1
        try:
            yield self._root
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._batch_dirty:
                self._batch_dirty = False
                self._notify()

    def _make_hook(self) -> _containers.MutationHook:
        """Create a hook that only fires while its tree is installed."""

        def _hook() -> None:
            if self._hook is _hook:
                self._on_mutation()

        return _hook

    def _wrap_root(self, value: _typing.Any) -> _containers.LiveMapping:
        """Install a new hook generation and wrap the new root under it.

        Anything but a mapping is coerced to an empty one.
        """
        if not isinstance(value, _abc.Mapping):
            if value is not None:
                _logger.warning(
                    "Root value must be a mapping, got %s; using an empty mapping",
                    type(value).__name__,
                )
            value = {}
        self._hook: _containers.MutationHook = self._make_hook()
        root = _containers.wrap(value, self._hook)
        return _typing.cast(_containers.LiveMapping, root)

    def _on_mutation(self) -> None:
        if self._batch_depth:
            self._batch_dirty = True
            return
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
