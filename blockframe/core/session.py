from __future__ import annotations

"""Editor session: one loaded document with its history, services and save state.

Public API:
- EditorSession.open(store, document_id) -> EditorSession (load errors propagate)
- EditorSession.new(store, name) -> EditorSession for a blank site
- EditorSession.save() -> OperationResult
- EditorSession.is_dirty
- EditorSession.stylesheet() -> compiled dynamic CSS for the active page
"""

import copy
from datetime import datetime, timezone
import logging
from typing import Optional

from blockframe.core.exceptions import StorageError
from blockframe.core.factory import new_document
from blockframe.core.models import Document
from blockframe.core.services.history_service import HistoryService
from blockframe.core.services.structure_editing_service import OperationResult, StructureEditingService
from blockframe.core.services.style_service import StyleService
from blockframe.core.storage import DocumentStore

__all__ = ["EditorSession"]

logger = logging.getLogger(__name__)


class EditorSession:
    """Bundle the services editing a single document.

    The session remembers which snapshot was last saved; the document is
    dirty whenever the history pointer is on any other snapshot.
    """

    def __init__(self, store: DocumentStore, document: Document) -> None:
        self._store = store
        self.history = HistoryService(document)
        self.editing = StructureEditingService(self.history)
        self.styles = StyleService()
        self._saved_document: Optional[Document] = self.history.current
        self._last_saved_at: Optional[str] = None

    @classmethod
    def open(cls, store: DocumentStore, document_id: str) -> "EditorSession":
        """Load *document_id* from *store*; a failed load raises and creates no session."""
        document = store.load(document_id)
        logger.info("Session opened for document %s (%d pages)", document.id, len(document.pages))
        return cls(store, document)

    @classmethod
    def new(cls, store: DocumentStore, name: str) -> "EditorSession":
        session = cls(store, new_document(name))
        # Never saved yet
        session._saved_document = None
        return session

    @property
    def document(self) -> Document:
        return self.history.current

    @property
    def is_dirty(self) -> bool:
        return self.history.current is not self._saved_document

    @property
    def last_saved_at(self) -> Optional[str]:
        return self._last_saved_at

    def save(self) -> OperationResult:
        """Persist the current snapshot.

        The stored copy is stamped with ``updated_at``; history is not
        touched. On failure the session stays dirty.
        """
        current = self.history.current
        if not self.is_dirty:
            return OperationResult(True, "No changes to save.", {"document_id": current.id})
        stamped = copy.deepcopy(current)
        stamped.updated_at = datetime.now(timezone.utc).isoformat()
        try:
            self._store.save(stamped)
        except StorageError as exc:
            logger.error("Save FAIL: %s", exc)
            return OperationResult(False, f"Save failed: {exc}", {"document_id": current.id})
        self._saved_document = current
        self._last_saved_at = stamped.updated_at
        logger.info("Save OK: document=%s entry=%d", current.id, self.history.index)
        return OperationResult(True, "Saved.", {"document_id": current.id, "updated_at": stamped.updated_at})

    def stylesheet(self) -> str:
        return self.styles.resolve(self.history.current, self.editing.active_page)

    def undo(self) -> bool:
        return self.editing.undo()

    def redo(self) -> bool:
        return self.editing.redo()
