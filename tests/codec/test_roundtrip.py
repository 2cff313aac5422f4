"""Parse/serialize agreement on canonical fragments."""

import pytest as _pytest

import hashbang.codec as codec

CANONICAL_FRAGMENTS = [
    "#!/a/b?x=1&y[]=2&y[]=3",
    "#!mod[id]=5&mod[name]=foo",
    "#!items[0][id]=1&items[1][id]=2",
    "#!m[0][]=1&m[0][]=2&m[1][]=3",
    "#!q=a%20b%26c&flag",
    "#!/only",
    "#!",
]


class TestRoundTrip:
    @_pytest.mark.parametrize("fragment", CANONICAL_FRAGMENTS)
    def test_canonical_fragment_survives(self, fragment: str) -> None:
        assert codec.serialize(codec.parse(fragment)) == fragment

    def test_typed_values_come_back_as_strings(self) -> None:
        value = {"n": 5, "on": True, "off": False, "tags": [1, 2]}
        assert codec.parse(codec.serialize(value)) == {
            "n": "5",
            "on": "1",
            "off": "",
            "tags": ["1", "2"],
        }

    def test_string_tree_survives(self) -> None:
        value = {"#path": "/p", "mod": {"list": [{"a": "x y"}, {"a": "ü"}]}}
        assert codec.parse(codec.serialize(value)) == value
