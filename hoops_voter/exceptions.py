"""
Exception classes for the hoops voter system.

Centralized location for all custom exceptions to avoid circular imports.
"""


class ValidationError(Exception):
    """Base exception for validation-related errors."""
    pass


class ConfigurationError(Exception):
    """Base exception for configuration-related errors."""
    pass


class StoreError(Exception):
    """Base exception for aggregate store failures."""
    pass


class StoreReadError(StoreError):
    """Snapshot fetch failed. Callers keep their last-known-good state."""
    pass


class StoreWriteError(StoreError):
    """Vote write failed. The vote was not counted and may be retried."""
    pass
