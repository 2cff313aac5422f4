"""
Synchronization between the live tree and the navigation channel.

Example usage:
    from hashbang.live import Store
    from hashbang.sync import MemoryChannel, SyncController

    channel = MemoryChannel("https://example.com/#!page=1")
    controller = SyncController(Store(), channel)
    controller.start()              # fires INITIALIZED
    controller.store.root["page"] = "2"   # commits "#!page=2"
"""

from hashbang.sync.channel import (
    MemoryChannel,
    NavigationChannel,
    fragment_of,
    has_change_notification,
)
from hashbang.sync.controller import SyncController
from hashbang.sync.events import LifecycleEvent, LifecycleSink, SyncState
from hashbang.sync.gate import ChangeGate
from hashbang.sync.timer import (
    AsyncioScheduler,
    CoalescingTimer,
    ManualScheduler,
    Scheduler,
)

__all__ = [
    "AsyncioScheduler",
    "ChangeGate",
    "CoalescingTimer",
    "LifecycleEvent",
    "LifecycleSink",
    "ManualScheduler",
    "MemoryChannel",
    "NavigationChannel",
    "Scheduler",
    "SyncController",
    "SyncState",
    "fragment_of",
    "has_change_notification",
]
