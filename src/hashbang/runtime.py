"""
Runtime façade wiring store, controller and observer registry.

Example:
    >>> import hashbang
    >>> channel = hashbang.MemoryChannel("https://example.com/#!page=1")
    >>> hb = hashbang.install(channel, scheduler=hashbang.ManualScheduler())
    >>> hb.root["page"]
    '1'
    >>> hb.root["page"] = "2"
    >>> channel.read()
    '#!page=2'
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

import hashbang.codec as codec
import hashbang.config as config
import hashbang.live as live
import hashbang.observers as observers
import hashbang.sync as sync


class HashbangRuntime:
    """
    One live hashbang binding.

    Owns a Store, a SyncController attached to a navigation channel, and an
    ObserverRegistry listening to the controller.
    """

    def __init__(
        self,
        channel: sync.NavigationChannel,
        *,
        settings: config.Settings | None = None,
        scheduler: sync.Scheduler | None = None,
        sink: sync.LifecycleSink | None = None,
    ) -> None:
        self._settings = settings or config.Settings()
        self._store = live.Store()
        self._controller = sync.SyncController(
            self._store,
            channel,
            settings=self._settings,
            scheduler=scheduler,
            sink=sink,
        )
        self._registry = observers.ObserverRegistry(self._store)
        self._registry.attach(self._controller)

    @property
    def settings(self) -> config.Settings:
        return self._settings

    @property
    def store(self) -> live.Store:
        return self._store

    @property
    def controller(self) -> sync.SyncController:
        return self._controller

    @property
    def registry(self) -> observers.ObserverRegistry:
        return self._registry

    @property
    def root(self) -> live.LiveMapping:
        """The live root mapping (read and mutate through it)."""
        return self._store.root

    @root.setter
    def root(self, value: _abc.Mapping[str, _typing.Any]) -> None:
        self._store.root = value

    def start(self) -> HashbangRuntime:
        self._controller.start()
        return self

    def stop(self) -> None:
        self._controller.stop()
        self._registry.clear()

    def observe(
        self,
        path: str | _abc.Iterable[str | int] | None,
        callback: observers.registry.ObserverCallback,
        filter: _typing.Any = None,  # noqa: A002
        events: _typing.Any = None,
        once: bool = False,
    ) -> observers.ObserverHandle:
        """Watch a path; see ObserverRegistry.observe."""
        return self._registry.observe(path, callback, filter=filter, events=events, once=once)

    def unobserve(
        self,
        callback: observers.registry.ObserverCallback,
        path: str | _abc.Iterable[str | int] | None = None,
    ) -> int:
        """Remove observers; see ObserverRegistry.unobserve."""
        return self._registry.unobserve(callback, path)

    def parse(self, fragment: str) -> dict[str, _typing.Any]:
        """Parse a fragment with this binding's separator."""
        return codec.parse(fragment, separator=self._settings.separator)

    def serialize(self, value: _typing.Any) -> str:
        """Serialize a value with this binding's separator (e.g. to build links)."""
        return codec.serialize(value, separator=self._settings.separator)


def install(
    channel: sync.NavigationChannel,
    *,
    settings: config.Settings | None = None,
    scheduler: sync.Scheduler | None = None,
    sink: sync.LifecycleSink | None = None,
) -> HashbangRuntime:
    """
    Bind hashbang to a navigation channel and start it.

    Args:
        channel: Host channel carrying the fragment.
        settings: Configuration; loaded from env/files when omitted.
        scheduler: Scheduler for the coalescing timer (asyncio by default).
        sink: Optional callable receiving every lifecycle event.

    Returns:
        The started runtime.

    Raises:
        MissingCapabilityError: If the channel cannot notify changes, or no
            scheduler was given and no asyncio loop is running.
        DoubleInitializationError: If the channel is already bound.
    """
    runtime = HashbangRuntime(channel, settings=settings, scheduler=scheduler, sink=sink)
    return runtime.start()
