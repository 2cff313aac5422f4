"""
Navigation channel: the boundary to the host's fragment/history mechanism.

The core only needs to read the current fragment, write a new one, and be
told when the fragment changes externally. Whether a write replaces the
current history entry or pushes a new one is the caller's policy.
"""

from __future__ import annotations

import logging as _logging
import typing as _typing

_logger = _logging.getLogger(__name__)

ChangeCallback: _typing.TypeAlias = _typing.Callable[[], None]


class NavigationChannel(_typing.Protocol):
    """Host collaborator carrying the fragment string."""

    def read(self) -> str:
        """Return the current fragment, including its leading '#'."""
        ...

    def write(self, fragment: str, *, replace: bool) -> None:
        """Commit a fragment (replace or push a history entry)."""
        ...

    def subscribe(self, callback: ChangeCallback) -> _typing.Callable[[], None]:
        """Call ``callback`` on every external change; returns an unsubscriber."""
        ...


def has_change_notification(channel: object) -> bool:
    """Check whether a channel can deliver change notifications."""
    return callable(getattr(channel, "subscribe", None))


def fragment_of(url: str) -> str:
    """
    Extract the raw fragment (with '#') from a URL, without unescaping.

        >>> fragment_of("https://example.com/app#!/a?x=1")
        '#!/a?x=1'
        >>> fragment_of("https://example.com/app")
        ''
    """
    _, hash_mark, fragment = url.partition("#")
    return hash_mark + fragment


class MemoryChannel:
    """
    In-process navigation channel.

    Keeps a URL and a history stack. ``write()`` is what the core calls and
    never notifies (like ``history.replaceState``); ``navigate()`` and
    ``back()`` simulate the user or host changing the fragment and notify
    subscribers.
    """

    def __init__(self, url: str = "about:blank") -> None:
        self._base, _, fragment = url.partition("#")
        self._history: list[str] = ["#" + fragment if fragment else ""]
        self._subscribers: list[ChangeCallback] = []
        self.writes: list[tuple[str, bool]] = []
        """Every fragment committed through write(), with its replace flag."""

    @property
    def url(self) -> str:
        """Full URL including the current fragment."""
        return self._base + self.read()

    @property
    def history(self) -> list[str]:
        """Copy of the history stack, oldest first."""
        return list(self._history)

    def read(self) -> str:
        return self._history[-1]

    def write(self, fragment: str, *, replace: bool) -> None:
        """Commit a fragment. Writing the current fragment is a no-op."""
        if fragment == self.read():
            return
        self.writes.append((fragment, replace))
        if replace:
            self._history[-1] = fragment
        else:
            self._history.append(fragment)
        _logger.debug("Set new fragment: %s | current url: %s", fragment, self.url)

    def subscribe(self, callback: ChangeCallback) -> _typing.Callable[[], None]:
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def navigate(self, fragment: str) -> None:
        """Externally move to a new fragment (pushes history, notifies)."""
        if fragment and not fragment.startswith("#"):
            fragment = "#" + fragment
        self._history.append(fragment)
        self._notify()

    def back(self) -> bool:
        """
        Go back one history entry.

        Returns:
            False if already at the oldest entry.
        """
        if len(self._history) < 2:
            return False
        self._history.pop()
        self._notify()
        return True

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback()
