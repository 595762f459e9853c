"""
Style system exceptions.

"No active style" is not an error: lookups return None for it.
"""


class StyleError(Exception):
    """Base class for theme and button preset errors."""


class InvalidColor(StyleError, ValueError):
    """A colour value is not a 6-digit RGB hex string."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid hex colour: {value!r}")


class InvariantViolation(StyleError):
    """
    A mutation would break the active/default invariants.

    Raised before anything is written, so the operation is never partially
    applied. ``reason`` is safe to show to the admin user.
    """

    def __init__(self, reason):
        self.reason = reason
        super().__init__(reason)


class FetchFailure(StyleError):
    """Retrieving a style blob failed; callers keep the previous stylesheet."""
