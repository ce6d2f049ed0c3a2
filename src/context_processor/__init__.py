"""Context Processor: tagged document storage with text preprocessing models."""

__version__ = "0.1.0"

from .core.config import Config
from .core.exceptions import (
    ConfigurationError,
    ContextProcessorError,
    DocumentNotFoundError,
    ModelNotFoundError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from .store import ContextModel, ContextStore, Document, DocumentDraft, ModelRegistry, Strategy

__all__ = [
    "Config",
    "ConfigurationError",
    "ContextModel",
    "ContextProcessorError",
    "ContextStore",
    "Document",
    "DocumentDraft",
    "DocumentNotFoundError",
    "ModelNotFoundError",
    "ModelRegistry",
    "NotFoundError",
    "StorageError",
    "Strategy",
    "ValidationError",
    "__version__",
]
