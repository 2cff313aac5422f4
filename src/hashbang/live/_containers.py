"""
Observable containers for the live value tree.

LiveMapping and LiveSequence wrap mapping and sequence nodes. Every
mutating operation funnels through the owner's hook after the write has
been applied, at any nesting depth:

    >>> calls = []
    >>> tree = wrap({"mod": {"ids": [1, 2]}}, lambda: calls.append(1))
    >>> tree["mod"]["ids"].append(3)
    >>> len(calls)
    1

Values stored into a live container are wrapped on the way in, so nested
dicts and lists assigned later are observed too.
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

MutationHook: _typing.TypeAlias = _typing.Callable[[], None]


def wrap(value: _typing.Any, hook: MutationHook) -> _typing.Any:
    """
    Wrap a value for the live tree.

    Mappings become LiveMapping, non-string sequences become LiveSequence,
    scalars are returned unchanged. Live nodes already bound to ``hook``
    are reused; nodes bound elsewhere are copied.
    """
    if isinstance(value, (LiveMapping, LiveSequence)) and value._hook is hook:
        return value
    if isinstance(value, _abc.Mapping):
        return LiveMapping(value, hook)
    if isinstance(value, (str, bytes)):
        return value
    if isinstance(value, _abc.Sequence):
        return LiveSequence(value, hook)
    return value


def unwrap(value: _typing.Any) -> _typing.Any:
    """Return a plain dict/list copy of a (possibly live) value."""
    if isinstance(value, _abc.Mapping):
        return {key: unwrap(item) for key, item in value.items()}
    if isinstance(value, (str, bytes)):
        return value
    if isinstance(value, _abc.Sequence):
        return [unwrap(item) for item in value]
    return value


class LiveMapping(_abc.MutableMapping[str, _typing.Any]):
    """
    Mapping node of the live tree.

    Keys are strings; non-string keys are converted on every access since
    the fragment format cannot carry anything else.
    """

    __slots__ = ("_data", "_hook")

    def __init__(
        self,
        data: _abc.Mapping[_typing.Any, _typing.Any],
        hook: MutationHook,
    ) -> None:
        self._hook = hook
        self._data: dict[str, _typing.Any] = {
            str(key): wrap(item, hook) for key, item in data.items()
        }

    def __getitem__(self, key: str) -> _typing.Any:
        return self._data[str(key)]

    def __setitem__(self, key: str, value: _typing.Any) -> None:
        self._data[str(key)] = wrap(value, self._hook)
        self._hook()

    def __delitem__(self, key: str) -> None:
        del self._data[str(key)]
        self._hook()

    def __iter__(self) -> _typing.Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return str(key) in self._data

    def clear(self) -> None:
        """Remove all keys with a single notification."""
        if not self._data:
            return
        self._data.clear()
        self._hook()

    def update(self, *args: _typing.Any, **kwargs: _typing.Any) -> None:
        """Update from a mapping or pairs with a single notification."""
        incoming = dict(*args, **kwargs)
        if not incoming:
            return
        for key, item in incoming.items():
            self._data[str(key)] = wrap(item, self._hook)
        self._hook()

    def to_plain(self) -> dict[str, _typing.Any]:
        """Plain deep copy of this node."""
        return _typing.cast(dict[str, _typing.Any], unwrap(self))

    def __repr__(self) -> str:
        return f"LiveMapping({self._data!r})"

    def __eq__(self, other: object) -> bool:
        """Compare equal to any Mapping with the same content."""
        if isinstance(other, _abc.Mapping):
            return unwrap(self) == unwrap(other)
        return NotImplemented

    def __hash__(self) -> int:
        """Not hashable."""
        raise TypeError(f"unhashable type: '{type(self).__name__}'")


class LiveSequence(_abc.MutableSequence[_typing.Any]):
    """Sequence node of the live tree."""

    __slots__ = ("_data", "_hook")

    def __init__(
        self,
        data: _abc.Iterable[_typing.Any],
        hook: MutationHook,
    ) -> None:
        self._hook = hook
        self._data: list[_typing.Any] = [wrap(item, hook) for item in data]

    @_typing.overload
    def __getitem__(self, index: int) -> _typing.Any: ...

    @_typing.overload
    def __getitem__(self, index: slice) -> list[_typing.Any]: ...

    def __getitem__(self, index: int | slice) -> _typing.Any:
        # Slices are detached copies, like list slicing
        if isinstance(index, slice):
            return unwrap(self._data[index])
        return self._data[index]

    def __setitem__(self, index: _typing.Any, value: _typing.Any) -> None:
        if isinstance(index, slice):
            self._data[index] = [wrap(item, self._hook) for item in value]
        else:
            self._data[index] = wrap(value, self._hook)
        self._hook()

    def __delitem__(self, index: int | slice) -> None:
        del self._data[index]
        self._hook()

    def __len__(self) -> int:
        return len(self._data)

    def insert(self, index: int, value: _typing.Any) -> None:
        self._data.insert(index, wrap(value, self._hook))
        self._hook()

    def extend(self, values: _abc.Iterable[_typing.Any]) -> None:
        """Append all values with a single notification."""
        items = [wrap(item, self._hook) for item in values]
        if not items:
            return
        self._data.extend(items)
        self._hook()

    def clear(self) -> None:
        """Remove all items with a single notification."""
        if not self._data:
            return
        self._data.clear()
        self._hook()

    def reverse(self) -> None:
        self._data.reverse()
        self._hook()

    def sort(self, *, key: _typing.Any = None, reverse: bool = False) -> None:
        self._data.sort(key=key, reverse=reverse)
        self._hook()

    def to_plain(self) -> list[_typing.Any]:
        """Plain deep copy of this node."""
        return _typing.cast(list[_typing.Any], unwrap(self))

    def __repr__(self) -> str:
        return f"LiveSequence({self._data!r})"

    def __eq__(self, other: object) -> bool:
        """Compare equal to any non-string Sequence with the same content."""
        if isinstance(other, _abc.Sequence) and not isinstance(other, (str, bytes)):
            return unwrap(self) == unwrap(other)
        return NotImplemented

    def __hash__(self) -> int:
        """Not hashable."""
        raise TypeError(f"unhashable type: '{type(self).__name__}'")
