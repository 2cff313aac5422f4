"""
Array heuristic for parsed fragments.

Bracket notation cannot tell ``a[0]=x&a[1]=y`` (a list) from an object that
happens to use numeric keys. While parsing, every mapping counts how many
new purely numeric keys were inserted into it. Afterwards a mapping whose
key count equals that counter, and whose keys cover ``0..n-1``, becomes a
list.

A genuine object with keys exactly ``"0".."n-1"`` is indistinguishable from
a list and is converted too. This ambiguity is accepted.
"""

from __future__ import annotations

import typing as _typing


class HintTable:
    """
    Side table of array hint counters, keyed by mapping identity.

    Counters live only for the duration of one parse; nodes are kept
    alive by the tree being built, so identity keys are stable.
    """

    __slots__ = ("_counters",)

    def __init__(self) -> None:
        self._counters: dict[int, int] = {}

    def track(self, node: dict[str, _typing.Any]) -> None:
        """Start counting for a freshly created mapping."""
        self._counters[id(node)] = 0

    def get(self, node: dict[str, _typing.Any]) -> int:
        """Current counter of a mapping (0 when never tracked)."""
        return self._counters.get(id(node), 0)

    def increment(self, node: dict[str, _typing.Any]) -> None:
        """Record one more numeric key inserted into a mapping."""
        self._counters[id(node)] = self.get(node) + 1

    def clear(self) -> None:
        self._counters.clear()

    def __len__(self) -> int:
        return len(self._counters)


def qualifies_as_sequence(node: dict[str, _typing.Any], hint: int) -> bool:
    """
    Check whether a mapping should become a list.

    Args:
        node: The mapping to test.
        hint: Number of numeric keys inserted into it during parsing.

    Returns:
        True if the key count equals the hint and keys 0..hint-1 all exist.
    """
    if len(node) != hint:
        return False
    return all(str(i) in node for i in range(hint))


def to_sequences(
    node: _typing.Any,
    hints: HintTable,
    *,
    is_root: bool = True,
) -> _typing.Any:
    """
    Convert qualifying mappings to lists, bottom-up.

    Children are converted first so a list of lists resolves fully.
    The root mapping is never converted.

    Args:
        node: Parsed value (mapping or scalar).
        hints: Hint counters collected during parsing.
        is_root: Whether ``node`` is the root of the tree.

    Returns:
        The node itself (children replaced in place) or a new list.
    """
    if not isinstance(node, dict):
        return node

    for key in list(node):
        node[key] = to_sequences(node[key], hints, is_root=False)

    if is_root:
        return node

    hint = hints.get(node)
    if hint and qualifies_as_sequence(node, hint):
        return [node[str(i)] for i in range(hint)]
    return node
