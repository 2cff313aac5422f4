"""
Sync controller - keeps the live tree and the fragment consistent.

Two cycles run through the controller:

External change (navigation):
    channel notifies -> echo check -> parse -> store.replace -> one of
    INITIALIZED / UPDATED_EXTERNALLY / UNPARSABLE

Internal change (mutation through the live tree):
    store notifies -> serialize -> gate.record -> channel.write (eager)
    -> coalescing timer -> UPDATED_INTERNALLY (once per burst)

Writing the fragment ourselves must not loop back into a parse; the
ChangeGate recognises that echo.
"""

from __future__ import annotations

import logging as _logging
import typing as _typing
import weakref as _weakref

import hashbang.codec.grammar as grammar
import hashbang.codec.parser as parser
import hashbang.codec.serializer as serializer
import hashbang.config as config
import hashbang.errors as errors
import hashbang.live as live
import hashbang.sync.channel as channel_mod
import hashbang.sync.events as events
import hashbang.sync.gate as change_gate
import hashbang.sync.timer as timer

_logger = _logging.getLogger(__name__)

# Channels that already have a started controller
_claimed_channels: _weakref.WeakKeyDictionary[_typing.Any, SyncController] = (
    _weakref.WeakKeyDictionary()
)


class SyncController:
    """
    Orchestrates parsing, serializing and lifecycle notifications.

    The controller runs for as long as its host; there is no shutdown
    state. ``stop()`` exists to detach it from a channel when the host
    itself is disposed of (and in tests).
    """

    def __init__(
        self,
        store: live.Store,
        channel: channel_mod.NavigationChannel,
        *,
        settings: config.Settings | None = None,
        scheduler: timer.Scheduler | None = None,
        sink: events.LifecycleSink | None = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            store: Store owning the live tree.
            channel: Host channel carrying the fragment.
            settings: Configuration (separator, delay, history mode).
            scheduler: Scheduler for the coalescing timer. Defaults to the
                running asyncio loop.
            sink: Optional callable receiving every lifecycle event.
        """
        self._store = store
        self._channel = channel
        self._settings = settings or config.Settings()
        self._gate = change_gate.ChangeGate()
        self._scheduler = scheduler or timer.AsyncioScheduler()
        self._timer = timer.CoalescingTimer(
            self._scheduler,
            self._settings.coalesce_delay,
        )
        self._listeners: list[events.LifecycleSink] = []
        if sink is not None:
            self._listeners.append(sink)
        self._initialized = False
        self._started = False
        self._unsubscribers: list[_typing.Callable[[], None]] = []

    @property
    def store(self) -> live.Store:
        return self._store

    @property
    def channel(self) -> channel_mod.NavigationChannel:
        return self._channel

    @property
    def settings(self) -> config.Settings:
        return self._settings

    @property
    def gate(self) -> change_gate.ChangeGate:
        return self._gate

    @property
    def started(self) -> bool:
        return self._started

    @property
    def initialized(self) -> bool:
        """Whether a fragment has been parsed successfully since start."""
        return self._initialized

    @property
    def state(self) -> events.SyncState:
        """State of the outgoing fragment channel."""
        if self._timer.pending:
            return events.SyncState.PENDING
        if self._gate.last_written is None:
            return events.SyncState.IDLE
        return events.SyncState.COMMITTED

    def add_listener(self, listener: events.LifecycleSink) -> _typing.Callable[[], None]:
        """
        Register a lifecycle listener.

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def start(self) -> None:
        """
        Attach to the channel and process the current fragment.

        Raises:
            MissingCapabilityError: If the channel cannot notify changes
                or the default asyncio scheduler finds no running loop.
            DoubleInitializationError: If the channel already has a
                started controller.
        """
        if self._started:
            raise errors.DoubleInitializationError("Controller already started")
        if not channel_mod.has_change_notification(self._channel):
            raise errors.MissingCapabilityError(
                f"{type(self._channel).__name__} cannot deliver change notifications"
            )
        if self._channel in _claimed_channels:
            raise errors.DoubleInitializationError(
                "A hashbang controller is already attached to this channel"
            )
        self._bind_scheduler()

        _claimed_channels[self._channel] = self
        self._started = True
        self._unsubscribers.append(self._channel.subscribe(self.handle_external_change))
        self._unsubscribers.append(self._store.subscribe(self.handle_internal_change))
        _logger.debug("Controller started (separator %r)", self._settings.separator)

        self.handle_external_change()

    def _bind_scheduler(self) -> None:
        """Resolve the event loop now rather than on the first mutation."""
        bind = getattr(self._scheduler, "bind", None)
        if bind is None:
            return
        try:
            bind()
        except RuntimeError as e:
            raise errors.MissingCapabilityError(
                "No running asyncio event loop for the coalescing timer; "
                "start inside the loop or pass a scheduler"
            ) from e

    def stop(self) -> None:
        """Detach from channel and store, dropping a pending notification."""
        if not self._started:
            return
        self._timer.cancel()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        if _claimed_channels.get(self._channel) is self:
            del _claimed_channels[self._channel]
        self._started = False

    def handle_external_change(self) -> events.LifecycleEvent | None:
        """
        Process a change of the channel's fragment.

        Returns:
            The event fired, or None if the change was our own echo.
        """
        fragment = self._channel.read()
        if self._gate.is_echo(fragment):
            _logger.debug("Ignoring our own fragment %r", fragment)
            return None
        self._gate.record(fragment)

        separator = self._settings.separator
        if not grammar.is_hashbang(fragment, separator):
            event = events.LifecycleEvent.UNPARSABLE
            tree: dict[str, _typing.Any] = {}
        else:
            tree = parser.parse(fragment, separator=separator)
            if self._initialized:
                event = events.LifecycleEvent.UPDATED_EXTERNALLY
            else:
                event = events.LifecycleEvent.INITIALIZED
                self._initialized = True

        self._store.replace(tree)
        _logger.debug("Object updated (%s): %r", event.value, tree)
        self._emit(event)
        return event

    def handle_internal_change(self) -> str:
        """
        Commit the current tree after a mutation.

        The fragment is written right away; the UPDATED_INTERNALLY event
        follows once the coalescing delay passes without further mutations.

        Returns:
            The serialized fragment.
        """
        fragment = serializer.serialize(
            self._store.root,
            separator=self._settings.separator,
        )
        if self._gate.record(fragment):
            self._channel.write(fragment, replace=self._settings.replace_history)
            _logger.debug("Committed fragment %r", fragment)
        self._timer.schedule(self._announce_internal_change)
        return fragment

    def flush(self) -> bool:
        """
        Fire a pending UPDATED_INTERNALLY notification now.

        Returns:
            True if one was pending.
        """
        if not self._timer.cancel():
            return False
        self._announce_internal_change()
        return True

    def _announce_internal_change(self) -> None:
        self._emit(events.LifecycleEvent.UPDATED_INTERNALLY)

    def _emit(self, event: events.LifecycleEvent) -> None:
        _logger.debug("Triggering event %s", event.value)
        for listener in list(self._listeners):
            listener(event)
