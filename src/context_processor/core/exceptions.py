"""
Context Processor exception hierarchy.

All library exceptions inherit from ContextProcessorError, so consumers can
catch library-level errors while still distinguishing specific failure modes.
"""


class ContextProcessorError(Exception):
    """Base exception class for all context processor errors."""


class NotFoundError(ContextProcessorError, LookupError):
    """Raised when a requested document or model does not exist."""


class DocumentNotFoundError(NotFoundError):
    """Raised when no document is stored under the requested id."""


class ModelNotFoundError(NotFoundError):
    """Raised when a preprocessing model name is not registered."""


class ValidationError(ContextProcessorError, ValueError):
    """Raised for invalid drafts or query options (missing title, bad tags, ...)."""


class ConfigurationError(ContextProcessorError):
    """Raised for configuration errors (bad values, malformed models file)."""


class StorageError(ContextProcessorError):
    """Raised when a record cannot be read or written."""


class StoragePermissionError(StorageError):
    """Raised when the storage directory or a record is not accessible."""


class CorruptedRecordError(StorageError):
    """Raised when a record is unreadable and no valid backup exists."""
