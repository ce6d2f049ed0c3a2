"""ContextStore: the public facade over storage, preprocessing and search.

Every operation runs synchronously to completion. The store keeps no
document state in memory; each call reads the records it needs from disk.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from loguru import logger

from context_processor.core.config import Config
from context_processor.core.exceptions import ValidationError
from context_processor.core.metrics import MetricsCollector

from .models import ContextModel, Document, DocumentDraft, utcnow
from .preprocessor import Preprocessor
from .registry import ModelRegistry
from .search import SEARCHABLE_FIELDS, filter_by_tags, full_text_search, paginate, related_documents
from .storage import DocumentStorage

DEFAULT_ROOT = "./contexts"


class ContextStore:
    """Save, load, list, search and delete tagged documents.

    Example::

        store = ContextStore("./contexts")
        doc = store.save(DocumentDraft(title="Notes", content="...", tags=["python"]))
        store.search(["python"])
        store.save(DocumentDraft(title="Notes", content="...", id=doc.id), model_name="comprehensive")
    """

    def __init__(
        self,
        root: str | Path = DEFAULT_ROOT,
        *,
        registry: ModelRegistry | None = None,
        preprocessor: Preprocessor | None = None,
        metrics: MetricsCollector | None = None,
        max_backups: int = 5,
        default_find_limit: int = 50,
        related_limit: int = 5,
    ) -> None:
        self.storage = DocumentStorage(root, max_backups=max_backups)
        self.registry = registry or ModelRegistry()
        self.preprocessor = preprocessor or Preprocessor()
        self.metrics = metrics or MetricsCollector()
        self.default_find_limit = default_find_limit
        self.related_limit = related_limit

    @classmethod
    def from_config(cls, config: Config) -> ContextStore:
        """Build a store from ``storage.*``, ``models.file`` and ``search.*`` settings."""
        models_file = config.get("models.file")
        registry = ModelRegistry.from_file(str(models_file)) if models_file else ModelRegistry()
        return cls(
            config.get_storage_root(),
            registry=registry,
            max_backups=config.get_int("storage.max_backups", 5),
            default_find_limit=config.get_int("search.default_limit", 50),
            related_limit=config.get_int("search.related_limit", 5),
        )

    @property
    def root(self) -> Path:
        return self.storage.root

    # -- CRUD ---------------------------------------------------------------

    def save(
        self,
        draft: DocumentDraft | None = None,
        model_name: str | None = None,
        **fields: Any,
    ) -> Document:
        """Create or overwrite a document.

        Pass a :class:`DocumentDraft`, or its fields as keyword arguments.
        With ``model_name`` the model's strategies run over the content
        first. A draft id that already exists replaces that record's
        title/content/tags/metadata and keeps its ``created_at``.

        Raises:
            ValidationError: invalid draft fields.
            ModelNotFoundError: unknown ``model_name`` (nothing is written).
            StorageError: the record could not be written.
        """
        with self.metrics.track("save"):
            if draft is None:
                try:
                    draft = DocumentDraft(**fields)
                except TypeError as e:
                    raise ValidationError(f"Invalid draft fields: {e}") from e
            elif fields:
                raise ValidationError("Pass either a DocumentDraft or keyword fields, not both")

            tags = list(draft.tags)
            metadata = dict(draft.metadata)
            processed_content = None
            applied: list[str] = []
            model = self.registry.get_model_info(model_name) if model_name else None
            if model is not None:
                result = self.preprocessor.process(model, draft.content, tags, metadata)
                processed_content = result.processed_content
                tags = result.tags
                metadata = result.metadata
                applied = result.applied_strategies

            now = utcnow()
            created_at = now
            existed = False
            doc_id = draft.id
            if doc_id is None:
                doc_id = uuid.uuid4().hex
            elif self.storage.exists(doc_id):
                existed = True
                previous = self.storage.read(doc_id)
                created_at = previous.created_at
                now = max(now, created_at)

            doc = Document(
                id=doc_id,
                title=draft.title,
                content=draft.content,
                tags=tags,
                metadata=metadata,
                created_at=created_at,
                updated_at=now,
                processed_content=processed_content,
                model=model.name if model else None,
                applied_strategies=applied,
            )
            self.storage.write(doc)

        action = "Updated" if existed else "Saved"
        logger.debug(f"{action} document {doc.id} (model={doc.model}, strategies={applied})")
        return doc

    def load(self, doc_id: str) -> Document:
        """Return the document stored under ``doc_id``.

        Raises:
            DocumentNotFoundError: no such document.
        """
        with self.metrics.track("load"):
            return self.storage.read(doc_id)

    def delete(self, doc_id: str) -> bool:
        """Remove a document. Returns False (and does nothing) if it was already absent."""
        with self.metrics.track("delete"):
            deleted = self.storage.remove(doc_id)
        if not deleted:
            logger.debug(f"Delete of missing document {doc_id} ignored")
        return deleted

    # -- Query --------------------------------------------------------------

    def list(self, limit: int | None = None, offset: int = 0) -> list[Document]:
        """All documents in creation order, sliced to ``[offset, offset + limit)``."""
        with self.metrics.track("list"):
            return paginate(self.storage.read_all(), limit, offset)

    def count(self) -> int:
        with self.metrics.track("count"):
            return len(self.storage.read_all())

    def search(
        self,
        tags: Sequence[str] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Document]:
        """Documents tagged with every tag in ``tags`` (AND), in creation order.

        An empty or missing tag list matches all documents.
        """
        with self.metrics.track("search"):
            matches = filter_by_tags(self.storage.read_all(), tags)
            return paginate(matches, limit, offset)

    def find(
        self,
        query: str,
        limit: int | None = None,
        fields: Sequence[str] = SEARCHABLE_FIELDS,
    ) -> list[Document]:
        """Full-text search over title/content, best match first."""
        with self.metrics.track("find"):
            limit = self.default_find_limit if limit is None else limit
            results = full_text_search(self.storage.read_all(), query, limit=limit, fields=fields)
            return [r.document for r in results]

    def related(self, doc_id: str, limit: int | None = None) -> list[Document]:
        """Other documents sharing at least one tag with ``doc_id``."""
        with self.metrics.track("related"):
            target = self.storage.read(doc_id)
            limit = self.related_limit if limit is None else limit
            return related_documents(target, self.storage.read_all(), limit=limit)

    # -- Models -------------------------------------------------------------

    def list_models(self) -> list[ContextModel]:
        return self.registry.list_models()

    def get_model_info(self, name: str) -> ContextModel:
        """Raises ModelNotFoundError for unknown names."""
        return self.registry.get_model_info(name)
