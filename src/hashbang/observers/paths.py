"""
Observer paths.

A path addresses a subtree of the value tree as a tuple of segments:
strings for mapping keys, ints for sequence indexes. Paths may be given
as text using dots and brackets:

    >>> parse_path("mod.items[0].id")
    ('mod', 'items', 0, 'id')
"""

from __future__ import annotations

import collections.abc as _abc
import re as _re
import typing as _typing

Segment: _typing.TypeAlias = "str | int"
Path: _typing.TypeAlias = "tuple[str | int, ...]"

_TOKEN_RE = _re.compile(r"([^.\[\]]+)|\[([^\]]*)\]")


def parse_path(text: str) -> tuple[str | int, ...]:
    """
    Split a dotted/indexed path string into segments.

    Bracketed all-digit segments become ints; anything else stays a string.
    An empty string is the root path.
    """
    segments: list[str | int] = []
    for name, bracketed in _TOKEN_RE.findall(text):
        if name:
            segments.append(name)
        elif bracketed.isdigit():
            segments.append(int(bracketed))
        else:
            segments.append(bracketed)
    return tuple(segments)


def normalize_path(
    path: str | _abc.Iterable[str | int] | None,
) -> tuple[str | int, ...]:
    """
    Turn any accepted path form into a tuple.

    None and "" address the root. Sequences are used verbatim.
    """
    if path is None:
        return ()
    if isinstance(path, str):
        return parse_path(path)
    return tuple(path)


def format_path(path: tuple[str | int, ...]) -> str:
    """Render a path tuple for messages ("<root>" when empty)."""
    if not path:
        return "<root>"
    text = ""
    for segment in path:
        if isinstance(segment, int):
            text += f"[{segment}]"
        else:
            text += ("." if text else "") + segment
    return text


def resolve(root: _typing.Any, path: tuple[str | int, ...]) -> _typing.Any:
    """
    Look up the value at a path.

    Missing keys, out-of-range indexes and descending into scalars all
    yield None instead of raising.
    """
    current = root
    for segment in path:
        if isinstance(current, _abc.Mapping):
            key = str(segment)
            if key not in current:
                return None
            current = current[key]
        elif isinstance(current, _abc.Sequence) and not isinstance(current, (str, bytes)):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError):
                return None
        else:
            return None
    return current
