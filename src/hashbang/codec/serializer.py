"""
Fragment serializer.

Turns a nested value tree into a hashbang fragment:

    >>> serialize({"#path": "/a", "mod": {"id": 5}, "tags": ["x", "y"]})
    '#!/a?mod[id]=5&tags[]=x&tags[]=y'

Scalar list members serialize as anonymous ``key[]=v`` pairs while
composite members keep their index (``key[0][x]=...``) so the parser can
regroup them. Mapping keys are emitted in insertion order.
"""

from __future__ import annotations

import collections.abc as _abc
import logging as _logging
import math as _math
import typing as _typing

import hashbang.codec.grammar as grammar
import hashbang.constants as constants
import hashbang.errors as errors

_logger = _logging.getLogger(__name__)


def serialize(
    value: _typing.Any,
    *,
    separator: str = constants.DEFAULT_SEPARATOR,
    strict: bool = False,
) -> str:
    """
    Serialize a value tree into a hashbang fragment.

    Args:
        value: Root value, normally a mapping (plain or live).
        separator: Fragment prefix to emit.
        strict: Raise UnsupportedValueError instead of skipping values
            that cannot be encoded.

    Returns:
        The fragment. ``separator`` alone when there is nothing to encode.

    Raises:
        UnsupportedValueError: If strict and the tree holds an unsupported value.
    """
    path = ""
    if isinstance(value, _abc.Mapping):
        path = value.get(constants.PATH_KEY) or ""

    pairs: list[str] = []
    _walk([], value, pairs, strict)
    query = "&".join(pairs)

    if not path and not query:
        return separator
    return separator + str(path) + ("?" if path and query else "") + query


def is_composite(value: _typing.Any) -> bool:
    """Check whether a value is a mapping or a (non-string) sequence."""
    if isinstance(value, (str, bytes)):
        return False
    return isinstance(value, (_abc.Mapping, _abc.Sequence))


def format_scalar(value: _typing.Any) -> str | None:
    """
    Render a scalar as fragment text.

    Returns:
        The text, or None if the value is not a supported scalar.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if _math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        return value
    return None


def _walk(
    keys: list[str],
    value: _typing.Any,
    pairs: list[str],
    strict: bool,
) -> None:
    """Append the key=value pairs for one subtree."""
    if isinstance(value, _abc.Mapping):
        for key, item in value.items():
            if key == constants.PATH_KEY:
                continue
            keys.append(grammar.encode_component(str(key)))
            _walk(keys, item, pairs, strict)
            keys.pop()
        return

    if is_composite(value):
        for index, item in enumerate(value):
            keys.append(str(index) if is_composite(item) else "")
            _walk(keys, item, pairs, strict)
            keys.pop()
        return

    text = format_scalar(value)
    if text is None:
        if strict:
            raise errors.UnsupportedValueError(keys, value)
        _logger.warning(
            "The value type '%s' is not supported (key %s), skipping",
            type(value).__name__,
            "/".join(keys) or "<root>",
        )
        return

    head = keys[0] if keys and keys[0] else constants.NOKEY
    key = head + "".join(f"[{segment}]" for segment in keys[1:])
    pairs.append(key + ("=" + grammar.encode_component(text) if text else ""))
