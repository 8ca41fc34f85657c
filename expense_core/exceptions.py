"""Domain-specific exceptions for the expense tracker core."""

class ValidationError(ValueError):
    """Raised when provided data does not meet validation requirements."""


class StorageError(IOError):
    """Raised when the database rejects or cannot perform an operation."""
