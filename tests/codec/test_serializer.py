"""Tests for the fragment serializer."""

import logging as _logging

import pytest as _pytest

import hashbang.codec.serializer as serializer
import hashbang.errors as errors
import hashbang.live as live


class TestSerializeBasics:
    """Documented serialize examples."""

    def test_booleans_and_empty(self) -> None:
        assert serializer.serialize({"a": True, "b": False, "c": ""}) == "#!a=1&b&c"

    def test_path_and_nested(self) -> None:
        value = {"#path": "/a", "mod": {"id": 5}, "tags": ["x", "y"]}
        assert serializer.serialize(value) == "#!/a?mod[id]=5&tags[]=x&tags[]=y"

    def test_path_only(self) -> None:
        assert serializer.serialize({"#path": "/p"}) == "#!/p"

    def test_empty_mapping(self) -> None:
        assert serializer.serialize({}) == "#!"

    def test_values_are_encoded(self) -> None:
        assert serializer.serialize({"q": "a b&c=d"}) == "#!q=a%20b%26c%3Dd"

    def test_unreserved_characters_kept(self) -> None:
        assert serializer.serialize({"q": "a-b_c.d!e~f*g'h(i)"}) == "#!q=a-b_c.d!e~f*g'h(i)"

    def test_keys_are_encoded(self) -> None:
        assert serializer.serialize({"a b": "1"}) == "#!a%20b=1"

    def test_insertion_order(self) -> None:
        assert serializer.serialize({"z": "1", "a": "2"}) == "#!z=1&a=2"

    def test_custom_separator(self) -> None:
        assert serializer.serialize({"a": "1"}, separator="#") == "#a=1"


class TestSerializeScalars:
    """Scalar formatting."""

    @_pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, ""),
            (True, "1"),
            (False, ""),
            (0, "0"),
            (42, "42"),
            (2.0, "2"),
            (1.5, "1.5"),
            ("x", "x"),
        ],
    )
    def test_format_scalar(self, value: object, expected: str) -> None:
        assert serializer.format_scalar(value) == expected

    def test_unsupported_scalar(self) -> None:
        assert serializer.format_scalar(object()) is None

    def test_none_is_bare_key(self) -> None:
        assert serializer.serialize({"a": None}) == "#!a"


class TestSerializeComposites:
    """Nested mappings and lists."""

    def test_list_of_mappings_keeps_index(self) -> None:
        value = {"items": [{"id": 1}, {"id": 2}]}
        assert serializer.serialize(value) == "#!items[0][id]=1&items[1][id]=2"

    def test_list_of_lists(self) -> None:
        value = {"m": [[1, 2], [3]]}
        assert serializer.serialize(value) == "#!m[0][]=1&m[0][]=2&m[1][]=3"

    def test_tuple_is_a_sequence(self) -> None:
        assert serializer.serialize({"t": ("a", "b")}) == "#!t[]=a&t[]=b"

    def test_empty_containers_emit_nothing(self) -> None:
        assert serializer.serialize({"a": {}, "b": [], "c": "1"}) == "#!c=1"

    def test_nested_path_key_is_skipped(self) -> None:
        assert serializer.serialize({"mod": {"#path": "/x", "id": "1"}}) == "#!mod[id]=1"

    def test_empty_key_becomes_nokey(self) -> None:
        assert serializer.serialize({"": "v"}) == "#!nokey=v"

    def test_live_tree(self) -> None:
        tree = live.wrap({"mod": {"ids": [1, 2]}}, lambda: None)
        assert serializer.serialize(tree) == "#!mod[ids][]=1&mod[ids][]=2"

    def test_is_composite(self) -> None:
        assert serializer.is_composite({})
        assert serializer.is_composite([])
        assert not serializer.is_composite("abc")
        assert not serializer.is_composite(b"abc")
        assert not serializer.is_composite(3)


class TestUnsupportedValues:
    """Values the format cannot carry."""

    def test_skipped_with_warning(self, caplog: _pytest.LogCaptureFixture) -> None:
        with caplog.at_level(_logging.WARNING, logger="hashbang"):
            result = serializer.serialize({"a": "1", "bad": object(), "c": "2"})
        assert result == "#!a=1&c=2"
        assert "not supported" in caplog.text

    def test_strict_raises(self) -> None:
        with _pytest.raises(errors.UnsupportedValueError) as exc_info:
            serializer.serialize({"mod": {"bad": {1, 2}}}, strict=True)
        assert exc_info.value.keys == ["mod", "bad"]

    def test_unsupported_error_is_type_error(self) -> None:
        with _pytest.raises(TypeError):
            serializer.serialize({"bad": object()}, strict=True)
