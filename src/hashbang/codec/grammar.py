"""
Lexical rules of the hashbang fragment format.

Grammar:
    SEPARATOR [ "/" pathchars* ] [ "?" token ("&" token)* ]
    token := key ("=" urlencoded-value)?
    key   := ident ("[" (ident | digits)? "]")*

The path component excludes '&' and '=' even though RFC 3986 allows them,
so a query without a path can never be mistaken for one.
"""

from __future__ import annotations

import re as _re
import urllib.parse as _urllib_parse

import hashbang.constants as constants

PATH_RE = _re.compile(r"^(/[/a-z0-9. %_~!$'()*+,;:@-]*)(\?|$)", _re.IGNORECASE)
"""Leading path component, optionally followed by the query marker."""

INDEX_RE = _re.compile(r"^[0-9]+$")
"""A key segment that could be a sequence index."""

# Characters encodeURIComponent leaves alone (besides alphanumerics)
_UNRESERVED = "-_.!~*'()"


def is_hashbang(fragment: str, separator: str = constants.DEFAULT_SEPARATOR) -> bool:
    """
    Check whether a fragment is in hashbang format.

    An empty fragment and a bare hash are valid, empty hashbangs.

    Args:
        fragment: Fragment string including its leading hash.
        separator: Required prefix.

    Returns:
        True if the fragment can be parsed.
    """
    if not fragment or fragment == constants.BARE_HASH:
        return True
    return fragment.startswith(separator)


def strip_separator(fragment: str, separator: str = constants.DEFAULT_SEPARATOR) -> str:
    """Remove the separator (or bare hash) from a hashbang fragment."""
    if fragment.startswith(separator):
        return fragment[len(separator):]
    if fragment == constants.BARE_HASH:
        return ""
    return fragment


def encode_component(text: str) -> str:
    """Percent-encode text the way encodeURIComponent does."""
    return _urllib_parse.quote(text, safe=_UNRESERVED)


def decode_component(text: str) -> str:
    """Percent-decode text. '+' is kept literally."""
    return _urllib_parse.unquote(text)


def split_key(raw_key: str) -> list[str]:
    """
    Split a bracket-notation key into its raw segments.

    One trailing ']' is dropped, then every '][' and '[' acts as a
    separator:

        >>> split_key("mod[list][0][name]")
        ['mod', 'list', '0', 'name']
        >>> split_key("tags[]")
        ['tags', '']
    """
    if raw_key.endswith("]"):
        raw_key = raw_key[:-1]
    return raw_key.replace("][", "[").split("[")


def looks_like_index(segment: str) -> bool:
    """Check if a key segment is a non-negative integer."""
    return bool(INDEX_RE.match(segment))
