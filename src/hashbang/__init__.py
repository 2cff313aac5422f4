"""
hashbang - live two-way binding between a nested value and a URL fragment.

The fragment ``#!/path?mod[id]=5&tags[]=a&tags[]=b`` maps to
``{"#path": "/path", "mod": {"id": "5"}, "tags": ["a", "b"]}`` and back.
Mutating the live tree rewrites the fragment; navigating replaces the tree.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("hashbang")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from hashbang.codec import is_hashbang, parse, serialize  # noqa: E402
from hashbang.config import Settings  # noqa: E402
from hashbang.errors import (  # noqa: E402
    DoubleInitializationError,
    FormatError,
    HashbangError,
    MissingCapabilityError,
    UnsupportedValueError,
)
from hashbang.live import LiveMapping, LiveSequence, Store  # noqa: E402
from hashbang.observers import ObserverHandle, ObserverRegistry  # noqa: E402
from hashbang.runtime import HashbangRuntime, install  # noqa: E402
from hashbang.sync import (  # noqa: E402
    AsyncioScheduler,
    LifecycleEvent,
    ManualScheduler,
    MemoryChannel,
    SyncController,
)

__all__ = [
    "__version__",
    "__version_info__",
    "AsyncioScheduler",
    "DoubleInitializationError",
    "FormatError",
    "HashbangError",
    "HashbangRuntime",
    "LifecycleEvent",
    "LiveMapping",
    "LiveSequence",
    "ManualScheduler",
    "MemoryChannel",
    "MissingCapabilityError",
    "ObserverHandle",
    "ObserverRegistry",
    "Settings",
    "Store",
    "SyncController",
    "UnsupportedValueError",
    "install",
    "is_hashbang",
    "parse",
    "serialize",
]
