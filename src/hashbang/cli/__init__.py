"""
CLI module for hashbang.

Provides the command-line interface using Click.
"""

from hashbang.cli.main import cli, main

__all__ = ["main", "cli"]
