"""
Live value tree.

Observable mapping/sequence containers and the Store that owns them.

Example:
    >>> from hashbang.live import Store
    >>> store = Store()
    >>> store.root["mod"] = {"id": "5"}
    >>> store.root["mod"]["id"] = "6"   # nested writes are observed too
"""

from hashbang.live._containers import (
    LiveMapping,
    LiveSequence,
    MutationHook,
    unwrap,
    wrap,
)
from hashbang.live._store import MutationListener, Store

__all__ = [
    "LiveMapping",
    "LiveSequence",
    "MutationHook",
    "MutationListener",
    "Store",
    "unwrap",
    "wrap",
]
