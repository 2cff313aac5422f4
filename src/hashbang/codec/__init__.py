"""
Codec for hashbang fragments.

Pure functions converting between a fragment string and a value tree.

Example:
    >>> from hashbang.codec import parse, serialize
    >>> parse("#!mod[id]=5&mod[name]=foo")
    {'mod': {'id': '5', 'name': 'foo'}}
    >>> serialize({"a": True, "b": False, "c": ""})
    '#!a=1&b&c'
"""

from hashbang.codec.arrays import HintTable
from hashbang.codec.grammar import (
    decode_component,
    encode_component,
    is_hashbang,
    split_key,
)
from hashbang.codec.parser import parse
from hashbang.codec.serializer import serialize

__all__ = [
    "HintTable",
    "decode_component",
    "encode_component",
    "is_hashbang",
    "parse",
    "serialize",
    "split_key",
]
