"""
Error types for hashbang.

Only the startup errors are fatal. Format and value errors are recovered
locally by the default codec functions and surface as exceptions only in
strict mode.
"""


class HashbangError(Exception):
    """Base class for all hashbang errors."""

    pass


class FormatError(HashbangError, ValueError):
    """Raised when a fragment does not match the hashbang grammar."""

    def __init__(self, fragment: str, separator: str) -> None:
        self.fragment = fragment
        self.separator = separator
        super().__init__(
            f"Fragment {fragment!r} does not start with separator {separator!r}"
        )


class UnsupportedValueError(HashbangError, TypeError):
    """Raised when a value of an unsupported kind is serialized in strict mode."""

    def __init__(self, keys: list[str], value: object) -> None:
        self.keys = list(keys)
        self.value = value
        location = "/".join(self.keys) or "<root>"
        super().__init__(
            f"The value type '{type(value).__name__}' at {location} is not supported"
        )


class DoubleInitializationError(HashbangError, RuntimeError):
    """Raised when a navigation channel already has a running controller."""

    pass


class MissingCapabilityError(HashbangError, RuntimeError):
    """Raised when the navigation channel cannot deliver change notifications."""

    pass
