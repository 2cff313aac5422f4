"""
Value filters for observers.

An observer may restrict which changes reach its callback. A filter is
one of:
- None: every change passes
- a callable ``(new, old) -> bool``
- a compiled regex, searched in the stringified new value
- a string pattern against the stringified new value:
  regex-looking strings are searched as regex, ``*``/``?`` strings are
  glob patterns, anything else must match exactly
- a bool: the truthiness of the new value must equal it

The stringified form of a missing value (None) is the empty string.
"""

from __future__ import annotations

import contextlib as _contextlib
import fnmatch as _fnmatch
import re as _re
import typing as _typing

Predicate: _typing.TypeAlias = _typing.Callable[[_typing.Any, _typing.Any], bool]
FilterSpec: _typing.TypeAlias = "Predicate | _re.Pattern[str] | str | bool | None"


def looks_like_regex(value: str) -> bool:
    """
    Check if a string looks like a regex pattern.

    Only characters that are clearly regex-specific count, so `*.py` or
    `file?.txt` stay globs.

    Regex-specific: ^, $, +, (, ), |, \\, [, ], {, }
    Shared with glob: *, ?
    """
    regex_only_chars = {"^", "$", "+", "(", ")", "|", "\\", "[", "]", "{", "}"}
    return any(c in value for c in regex_only_chars)


def stringify(value: _typing.Any) -> str:
    """Text a filter pattern is matched against."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    return str(value)


class ValueFilter:
    """
    Compiled filter.

    Call it with ``(new, old)`` to decide whether a change passes.
    """

    __slots__ = ("_spec", "_predicate")

    def __init__(self, spec: FilterSpec = None) -> None:
        self._spec = spec
        self._predicate = self._compile(spec)

    @property
    def spec(self) -> FilterSpec:
        return self._spec

    def __call__(self, new: _typing.Any, old: _typing.Any) -> bool:
        return bool(self._predicate(new, old))

    def __repr__(self) -> str:
        return f"ValueFilter({self._spec!r})"

    @staticmethod
    def _compile(spec: FilterSpec) -> Predicate:
        """Build the predicate for a filter spec."""
        if spec is None:
            return lambda new, old: True

        if isinstance(spec, bool):
            return lambda new, old: bool(new) == spec

        if isinstance(spec, _re.Pattern):
            pattern = spec
            return lambda new, old: pattern.search(stringify(new)) is not None

        if isinstance(spec, str):
            if looks_like_regex(spec):
                compiled: _re.Pattern[str] | None = None
                with _contextlib.suppress(_re.error):
                    compiled = _re.compile(spec)
                if compiled is not None:
                    regex = compiled
                    return lambda new, old: regex.search(stringify(new)) is not None

            if "*" in spec or "?" in spec:
                return lambda new, old: _fnmatch.fnmatchcase(stringify(new), spec)

            return lambda new, old: stringify(new) == spec

        if callable(spec):
            return spec

        raise TypeError(f"Unsupported filter type: {type(spec).__name__}")


def compile_filter(spec: FilterSpec | ValueFilter) -> ValueFilter:
    """Return a ValueFilter for any accepted filter form."""
    if isinstance(spec, ValueFilter):
        return spec
    return ValueFilter(spec)
