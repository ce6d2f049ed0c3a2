"""Tagged document storage with preprocessing models.

Provides the Document data model, file-per-document JSON storage, the
preprocessing strategies/model registry, and the ContextStore facade.
"""

from .models import ContextModel, Document, DocumentDraft, ProcessingResult, Strategy, StrategyResult
from .preprocessor import Preprocessor
from .registry import DEFAULT_MODELS, ModelRegistry
from .search import SearchResult
from .storage import DocumentStorage
from .store import ContextStore

__all__ = [
    "DEFAULT_MODELS",
    "ContextModel",
    "ContextStore",
    "Document",
    "DocumentDraft",
    "DocumentStorage",
    "ModelRegistry",
    "Preprocessor",
    "ProcessingResult",
    "SearchResult",
    "Strategy",
    "StrategyResult",
]
