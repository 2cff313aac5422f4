"""Tests for the runtime binding."""

import pytest as _pytest

import hashbang
import hashbang.sync as sync

Event = sync.LifecycleEvent


class TestInstall:
    def test_install_reads_current_fragment(self, make_runtime) -> None:
        hb = make_runtime("#!/list?page=3&filter[tag]=red")
        assert hb.root == {"#path": "/list", "page": "3", "filter": {"tag": "red"}}
        assert hb.controller.started

    def test_second_install_on_same_channel_fails(self, settings, scheduler) -> None:
        channel = sync.MemoryChannel("https://x/")
        first = hashbang.install(channel, settings=settings, scheduler=scheduler)
        try:
            with _pytest.raises(hashbang.DoubleInitializationError):
                hashbang.install(channel, settings=settings, scheduler=scheduler)
        finally:
            first.stop()

    def test_install_outside_event_loop_needs_scheduler(self, settings) -> None:
        channel = sync.MemoryChannel("https://x/#!a=1")
        with _pytest.raises(hashbang.MissingCapabilityError):
            hashbang.install(channel, settings=settings)
        assert channel.writes == []
        hb = hashbang.install(channel, settings=settings, scheduler=sync.ManualScheduler())
        try:
            hb.root["a"] = "2"
            assert channel.read() == "#!a=2"
        finally:
            hb.stop()

    def test_mutation_updates_fragment(self, make_runtime) -> None:
        hb = make_runtime("#!page=1")
        hb.root["page"] = "2"
        assert hb.controller.channel.read() == "#!page=2"

    def test_root_assignment(self, make_runtime) -> None:
        hb = make_runtime("#!page=1")
        hb.root = {"x": "1"}
        assert hb.controller.channel.read() == "#!x=1"

    def test_codec_helpers_use_separator(self, make_runtime) -> None:
        hb = make_runtime("#a=1", separator="#")
        assert hb.serialize({"b": "2"}) == "#b=2"
        assert hb.parse("#b=2") == {"b": "2"}
        assert hb.parse("#!b=2") == {"!b": "2"}


class TestObservers:
    def test_observer_fires_once_per_burst(self, make_runtime, scheduler) -> None:
        hb = make_runtime("#!page=1")
        calls: list[tuple[object, object]] = []
        hb.observe("page", lambda new, old: calls.append((new, old)))
        for i in range(2, 10):
            hb.root["page"] = str(i)
        assert calls == []
        scheduler.advance(0.05)
        assert calls == [("9", "1")]

    def test_observer_with_filter(self, make_runtime, scheduler) -> None:
        hb = make_runtime()
        calls: list[object] = []
        hb.observe("id", lambda new, old: calls.append(new), filter=r"^\d+$")
        hb.controller.channel.navigate("#!id=abc")
        hb.controller.channel.navigate("#!id=42")
        assert calls == ["42"]

    def test_unobserve(self, make_runtime) -> None:
        hb = make_runtime()
        calls: list[object] = []

        def _on_page(new: object, old: object) -> None:  # noqa: ARG001
            calls.append(new)

        hb.observe("page", _on_page)
        assert hb.unobserve(_on_page) == 1
        hb.controller.channel.navigate("#!page=1")
        assert calls == []

    def test_sink_sees_all_events(self, make_runtime, scheduler) -> None:
        seen: list[sync.LifecycleEvent] = []
        hb = make_runtime("#!a=1", sink=seen.append)
        hb.root["a"] = "2"
        scheduler.advance(0.05)
        hb.controller.channel.navigate("#nope")
        assert seen == [
            Event.INITIALIZED,
            Event.UPDATED_INTERNALLY,
            Event.UNPARSABLE,
        ]

    def test_stop_clears_observers(self, make_runtime) -> None:
        hb = make_runtime()
        hb.observe("a", lambda new, old: None)
        hb.stop()
        assert len(hb.registry) == 0
        assert not hb.controller.started


class TestPublicApi:
    def test_top_level_exports(self) -> None:
        assert hashbang.parse("#!a=1") == {"a": "1"}
        assert hashbang.serialize({"a": "1"}) == "#!a=1"
        assert hashbang.is_hashbang("#!")
        assert isinstance(hashbang.__version__, str)
