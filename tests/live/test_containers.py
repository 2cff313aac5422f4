"""Tests for the live containers."""

import pytest as _pytest

import hashbang.live as live


class _Counter:
    """Mutation hook counting its calls."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1


@_pytest.fixture
def hook() -> _Counter:
    return _Counter()


class TestWrap:
    def test_mapping_and_sequence_wrapped(self, hook: _Counter) -> None:
        tree = live.wrap({"a": [1, {"b": 2}]}, hook)
        assert isinstance(tree, live.LiveMapping)
        assert isinstance(tree["a"], live.LiveSequence)
        assert isinstance(tree["a"][1], live.LiveMapping)

    def test_scalars_and_strings_unchanged(self, hook: _Counter) -> None:
        assert live.wrap("abc", hook) == "abc"
        assert live.wrap(5, hook) == 5

    def test_same_hook_reused(self, hook: _Counter) -> None:
        tree = live.wrap({"a": 1}, hook)
        assert live.wrap(tree, hook) is tree

    def test_foreign_node_copied(self, hook: _Counter) -> None:
        other = _Counter()
        tree = live.wrap({"a": {"b": 1}}, other)
        copied = live.wrap(tree, hook)
        assert copied is not tree
        copied["a"]["b"] = 2
        assert hook.calls == 1
        assert other.calls == 0
        assert tree["a"]["b"] == 1

    def test_unwrap_returns_plain(self, hook: _Counter) -> None:
        tree = live.wrap({"a": [1, {"b": (2, 3)}]}, hook)
        plain = live.unwrap(tree)
        assert type(plain) is dict
        assert type(plain["a"]) is list
        assert plain == {"a": [1, {"b": [2, 3]}]}


class TestLiveMapping:
    def test_setitem_notifies(self, hook: _Counter) -> None:
        tree = live.wrap({}, hook)
        tree["a"] = "1"
        assert hook.calls == 1
        assert tree["a"] == "1"

    def test_nested_write_notifies(self, hook: _Counter) -> None:
        tree = live.wrap({"mod": {"ids": [1, 2]}}, hook)
        tree["mod"]["ids"].append(3)
        assert hook.calls == 1
        assert tree["mod"]["ids"] == [1, 2, 3]

    def test_assigned_containers_are_observed(self, hook: _Counter) -> None:
        tree = live.wrap({}, hook)
        tree["mod"] = {"id": "1"}
        tree["mod"]["id"] = "2"
        assert hook.calls == 2

    def test_delete_notifies(self, hook: _Counter) -> None:
        tree = live.wrap({"a": 1}, hook)
        del tree["a"]
        assert hook.calls == 1
        assert "a" not in tree

    def test_non_string_keys_converted(self, hook: _Counter) -> None:
        tree = live.wrap({}, hook)
        tree[1] = "x"  # type: ignore[index]
        assert list(tree) == ["1"]

    def test_non_string_keys_on_every_access(self, hook: _Counter) -> None:
        tree = live.wrap({}, hook)
        tree[0] = "x"  # type: ignore[index]
        assert tree[0] == "x"  # type: ignore[index]
        assert 0 in tree
        assert tree.get(0) == "x"  # type: ignore[call-overload]
        del tree[0]  # type: ignore[arg-type]
        assert 0 not in tree
        assert hook.calls == 2

    def test_update_single_notification(self, hook: _Counter) -> None:
        tree = live.wrap({}, hook)
        tree.update({"a": 1, "b": 2}, c=3)
        assert hook.calls == 1
        assert tree == {"a": 1, "b": 2, "c": 3}

    def test_clear_single_notification(self, hook: _Counter) -> None:
        tree = live.wrap({"a": 1, "b": 2}, hook)
        tree.clear()
        assert hook.calls == 1
        tree.clear()
        assert hook.calls == 1

    def test_pop_and_setdefault(self, hook: _Counter) -> None:
        tree = live.wrap({"a": 1}, hook)
        assert tree.pop("a") == 1
        assert tree.setdefault("b", 2) == 2
        assert hook.calls == 2

    def test_equality_with_plain(self, hook: _Counter) -> None:
        assert live.wrap({"a": [1]}, hook) == {"a": [1]}
        assert live.wrap({"a": [1]}, hook) != {"a": [2]}

    def test_unhashable(self, hook: _Counter) -> None:
        with _pytest.raises(TypeError):
            hash(live.wrap({}, hook))

    def test_to_plain(self, hook: _Counter) -> None:
        tree = live.wrap({"a": {"b": 1}}, hook)
        plain = tree.to_plain()
        plain["a"]["b"] = 2
        assert tree["a"]["b"] == 1
        assert hook.calls == 0


class TestLiveSequence:
    def test_append_and_insert(self, hook: _Counter) -> None:
        seq = live.wrap([1], hook)
        seq.append(2)
        seq.insert(0, 0)
        assert seq == [0, 1, 2]
        assert hook.calls == 2

    def test_extend_single_notification(self, hook: _Counter) -> None:
        seq = live.wrap([], hook)
        seq.extend([1, 2, 3])
        assert hook.calls == 1
        seq.extend([])
        assert hook.calls == 1

    def test_setitem_and_delitem(self, hook: _Counter) -> None:
        seq = live.wrap(["a", "b"], hook)
        seq[0] = {"x": 1}
        del seq[1]
        assert seq == [{"x": 1}]
        assert isinstance(seq[0], live.LiveMapping)
        assert hook.calls == 2

    def test_slice_assignment(self, hook: _Counter) -> None:
        seq = live.wrap([1, 2, 3], hook)
        seq[1:] = [{"a": 1}]
        assert seq == [1, {"a": 1}]
        assert isinstance(seq[1], live.LiveMapping)
        assert hook.calls == 1

    def test_slice_is_plain_copy(self, hook: _Counter) -> None:
        seq = live.wrap([{"a": 1}, 2], hook)
        part = seq[:1]
        assert type(part) is list
        part[0]["a"] = 5
        assert seq[0]["a"] == 1

    def test_sort_and_reverse(self, hook: _Counter) -> None:
        seq = live.wrap([3, 1, 2], hook)
        seq.sort()
        assert seq == [1, 2, 3]
        seq.reverse()
        assert seq == [3, 2, 1]
        assert hook.calls == 2

    def test_pop_and_remove(self, hook: _Counter) -> None:
        seq = live.wrap([1, 2, 3], hook)
        assert seq.pop() == 3
        seq.remove(1)
        assert seq == [2]

    def test_not_equal_to_string(self, hook: _Counter) -> None:
        assert live.wrap(["a"], hook) != "a"
