"""
Shared constants for hashbang.

This module provides a single source of truth for default values
that are used across multiple modules.
"""

# Fragment format defaults
DEFAULT_SEPARATOR = "#!"
"""Default prefix of a hashbang fragment."""

BARE_HASH = "#"
"""A fragment consisting of only the hash marker (an empty hashbang)."""

PATH_KEY = "#path"
"""Reserved mapping key holding the leading-slash path component."""

NOKEY = "nokey"
"""Key substituted when a scalar is serialized without any key segment."""

# Sync defaults
DEFAULT_COALESCE_DELAY_MS = 50
"""Delay before an internal change is announced (milliseconds).

Mutations arriving within this window collapse into a single
``updated-internally`` notification.
"""

DEFAULT_HISTORY_MODE = "replace"
"""How internal commits are written to the navigation channel."""
