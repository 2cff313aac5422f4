r"""
Observers for paths in the live value tree.

Example usage:
    from hashbang.observers import ObserverRegistry

    registry = ObserverRegistry(store)
    registry.attach(controller)
    handle = registry.observe(("mod", "id"), on_change, filter=r"^\d+$")
    ...
    handle.cancel()
"""

from hashbang.observers.filters import ValueFilter, compile_filter
from hashbang.observers.paths import format_path, normalize_path, parse_path, resolve
from hashbang.observers.registry import (
    ObserverHandle,
    ObserverRecord,
    ObserverRegistry,
    snapshot,
)

__all__ = [
    "ObserverHandle",
    "ObserverRecord",
    "ObserverRegistry",
    "ValueFilter",
    "compile_filter",
    "format_path",
    "normalize_path",
    "parse_path",
    "resolve",
    "snapshot",
]
