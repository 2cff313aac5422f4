"""
Fragment parser.

Turns a hashbang fragment into a nested value tree:

    >>> parse("#!/a/b?x=1&y[]=2&y[]=3")
    {'#path': '/a/b', 'x': '1', 'y': ['2', '3']}

Parsing is total. Anything that is not a hashbang yields an empty mapping,
and malformed keys are decoded on a best-effort basis.
"""

from __future__ import annotations

import logging as _logging
import typing as _typing

import hashbang.codec.arrays as arrays
import hashbang.codec.grammar as grammar
import hashbang.constants as constants
import hashbang.errors as errors

_logger = _logging.getLogger(__name__)


def parse(
    fragment: str,
    *,
    separator: str = constants.DEFAULT_SEPARATOR,
    strict: bool = False,
) -> dict[str, _typing.Any]:
    """
    Parse a hashbang fragment.

    Args:
        fragment: Fragment string including its leading hash (may be empty).
        separator: Expected fragment prefix.
        strict: Raise FormatError instead of returning an empty mapping
            when the fragment is not a hashbang.

    Returns:
        The decoded tree. Scalars are always strings.

    Raises:
        FormatError: If strict and the fragment is not a hashbang.
    """
    if not grammar.is_hashbang(fragment, separator):
        if strict:
            raise errors.FormatError(fragment, separator)
        _logger.debug("Not a hashbang fragment: %r", fragment)
        return {}

    root: dict[str, _typing.Any] = {}
    hints = arrays.HintTable()
    hints.track(root)

    remainder = grammar.strip_separator(fragment, separator)
    match = grammar.PATH_RE.match(remainder)
    if match:
        root[constants.PATH_KEY] = match.group(1)
        remainder = remainder[match.end():]

    for token in remainder.split("&") if remainder else []:
        if not token:
            continue
        raw_key, _, raw_value = token.partition("=")
        _assign(root, grammar.split_key(raw_key), grammar.decode_component(raw_value), hints)

    result = arrays.to_sequences(root, hints)
    hints.clear()
    return _typing.cast(dict[str, _typing.Any], result)


def _assign(
    root: dict[str, _typing.Any],
    segments: list[str],
    value: str,
    hints: arrays.HintTable,
) -> None:
    """Walk one bracket key path from the root and store the value at its end."""
    pointer = root
    last = len(segments) - 1

    for position, raw_segment in enumerate(segments):
        prop = grammar.decode_component(raw_segment)
        if not prop:
            # Anonymous "next index" from key[]=value
            prop = str(hints.get(pointer))

        if grammar.looks_like_index(prop) and prop not in pointer:
            hints.increment(pointer)

        if position == last:
            pointer[prop] = value
            return

        child = pointer.get(prop)
        if not isinstance(child, dict):
            child = {}
            hints.track(child)
            pointer[prop] = child
        pointer = child
