r"""
Observer registry.

Consumers watch a path in the value tree and are called back when the
value there changes:

    registry.observe("mod.id", on_id, filter=r"^\d+$")

On every lifecycle event the registry re-reads each watched path,
compares a JSON snapshot with the last one it saw, and calls back only on
a real change that passes the filter. The snapshot is refreshed on every
evaluation, so ``old`` is always the most recent value the observer saw.
"""

from __future__ import annotations

import collections.abc as _abc
import dataclasses as _dataclasses
import json as _json
import logging as _logging
import typing as _typing

import hashbang.live as live
import hashbang.observers.filters as filters
import hashbang.observers.paths as paths
import hashbang.sync.events as lifecycle

_logger = _logging.getLogger(__name__)

ObserverCallback: _typing.TypeAlias = _typing.Callable[[_typing.Any, _typing.Any], _typing.Any]
EventSpec: _typing.TypeAlias = (
    "lifecycle.LifecycleEvent | str | _abc.Iterable[lifecycle.LifecycleEvent | str] | None"
)


def snapshot(value: _typing.Any) -> str:
    """Serialized form of a subtree used for change detection."""
    return _json.dumps(live.unwrap(value), default=repr, ensure_ascii=False)


def _normalize_events(spec: EventSpec) -> frozenset[lifecycle.LifecycleEvent]:
    """Turn an event spec into a set of events (all lifecycle events if None)."""
    if spec is None:
        return lifecycle.LifecycleEvent.lifecycle()
    if isinstance(spec, (lifecycle.LifecycleEvent, str)):
        return frozenset({lifecycle.LifecycleEvent.coerce(spec)})
    return frozenset(lifecycle.LifecycleEvent.coerce(item) for item in spec)


@_dataclasses.dataclass(eq=False)
class ObserverRecord:
    """
    One registered observer.

    Attributes:
        path: Watched path (empty tuple for the whole tree)
        callback: Called as ``callback(new, old)``
        value_filter: Decides whether a change reaches the callback
        events: Events that trigger re-evaluation
        once: Remove after the first callback
        last_seen: Snapshot at the last evaluation (None before any)
        last_value: Plain copy of the value at the last evaluation
        active: False once removed
    """

    path: paths.Path
    callback: ObserverCallback
    value_filter: filters.ValueFilter
    events: frozenset[lifecycle.LifecycleEvent]
    once: bool = False
    last_seen: str | None = None
    last_value: _typing.Any = None
    active: bool = True


class ObserverHandle:
    """Returned by ``observe()``; cancels the registration."""

    __slots__ = ("_registry", "_record")

    def __init__(self, registry: ObserverRegistry, record: ObserverRecord) -> None:
        self._registry = registry
        self._record = record

    @property
    def record(self) -> ObserverRecord:
        return self._record

    @property
    def active(self) -> bool:
        return self._record.active

    def cancel(self) -> bool:
        """
        Remove the observer.

        Returns:
            False if it was already removed.
        """
        return self._registry._remove(self._record)

    def __repr__(self) -> str:
        state = "active" if self.active else "removed"
        return f"<ObserverHandle {paths.format_path(self._record.path)} {state}>"


class ObserverRegistry:
    """
    Path-scoped observers over a Store.

    The registry reacts to lifecycle events; wire it to a controller with
    ``attach()`` or call ``notify()`` yourself.
    """

    def __init__(self, store: live.Store) -> None:
        self._store = store
        self._records: list[ObserverRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> list[ObserverRecord]:
        """Copy of the active records, in registration order."""
        return list(self._records)

    def attach(self, controller: _typing.Any) -> _typing.Callable[[], None]:
        """
        Listen to a controller's lifecycle events.

        Args:
            controller: Anything with ``add_listener(callable)`` (a SyncController).

        Returns:
            A callable that detaches again.
        """
        return _typing.cast(_typing.Callable[[], None], controller.add_listener(self.notify))

    def observe(
        self,
        path: str | _abc.Iterable[str | int] | None,
        callback: ObserverCallback,
        filter: filters.FilterSpec | filters.ValueFilter = None,  # noqa: A002
        events: EventSpec = None,
        once: bool = False,
    ) -> ObserverHandle:
        """
        Watch the value at ``path``.

        Args:
            path: Path tuple/list, or text like "mod.items[0]". None or ""
                watches the whole tree.
            callback: Called as ``callback(new, old)``.
            filter: Restricts which changes reach the callback (see filters).
            events: Events to react to. Defaults to all lifecycle events.
                Include IMMEDIATE to run once right away; registering only
                for IMMEDIATE implies ``once``.
            once: Remove the observer after its first callback.

        Returns:
            Handle that can cancel the registration.
        """
        event_set = _normalize_events(events)
        immediate = lifecycle.LifecycleEvent.IMMEDIATE
        if event_set == {immediate}:
            once = True

        record = ObserverRecord(
            path=paths.normalize_path(path),
            callback=callback,
            value_filter=filters.compile_filter(filter),
            events=event_set,
            once=once,
        )
        if immediate not in event_set:
            current = paths.resolve(self._store.root, record.path)
            record.last_seen = snapshot(current)
            record.last_value = live.unwrap(current)

        self._records.append(record)
        _logger.debug(
            "Observing %s for %s",
            paths.format_path(record.path),
            sorted(e.value for e in event_set),
        )

        if immediate in event_set:
            self._evaluate(record)
            # An immediate-only observer has no later event to wait for
            if event_set == {immediate}:
                self._remove(record)

        return ObserverHandle(self, record)

    def unobserve(
        self,
        callback: ObserverCallback,
        path: str | _abc.Iterable[str | int] | None = None,
    ) -> int:
        """
        Remove registrations of ``callback``.

        Args:
            callback: The callback given to ``observe()``.
            path: Only remove registrations on this path. None removes the
                callback from every path.

        Returns:
            Number of registrations removed.
        """
        wanted = None if path is None else paths.normalize_path(path)
        removed = 0
        for record in list(self._records):
            if record.callback != callback:
                continue
            if wanted is not None and record.path != wanted:
                continue
            if self._remove(record):
                removed += 1
        return removed

    def clear(self) -> None:
        for record in self._records:
            record.active = False
        self._records.clear()

    def notify(self, event: lifecycle.LifecycleEvent) -> int:
        """
        Re-evaluate every observer subscribed to ``event``.

        Returns:
            Number of callbacks invoked.
        """
        fired = 0
        for record in list(self._records):
            if not record.active or event not in record.events:
                continue
            if self._evaluate(record):
                fired += 1
        return fired

    def _evaluate(self, record: ObserverRecord) -> bool:
        """Compare, filter, call back and refresh one record."""
        current = paths.resolve(self._store.root, record.path)
        seen = snapshot(current)
        if seen == record.last_seen:
            return False

        old = record.last_value
        new = live.unwrap(current)
        accepted = record.value_filter(new, old)
        if accepted:
            try:
                record.callback(new, old)
            except Exception as e:
                _logger.warning(
                    "Observer on %s failed with error: %s",
                    paths.format_path(record.path),
                    e,
                    exc_info=True,
                )

        record.last_seen = seen
        record.last_value = new

        if accepted and record.once:
            self._remove(record)
        return accepted

    def _remove(self, record: ObserverRecord) -> bool:
        if not record.active:
            return False
        record.active = False
        if record in self._records:
            self._records.remove(record)
        return True
