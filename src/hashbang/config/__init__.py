"""
Configuration module for hashbang.

Uses pydantic-settings for environment variable loading.
"""

from hashbang.config.settings import Settings
from hashbang.config.sources import ConfigFileError

__all__ = ["ConfigFileError", "Settings"]
