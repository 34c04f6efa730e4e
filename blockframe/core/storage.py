from __future__ import annotations

"""Load/save collaborators for documents.

The editing core treats persistence as an opaque collaborator implementing
:class:`DocumentStore`. :class:`JsonFileStore` is the bundled implementation:
one JSON file per document under a base directory, using the same camelCase
shape the render collaborator consumes.

Public API:
- DocumentStore: protocol with ``load(document_id)`` and ``save(document)``
- JsonFileStore(base_dir): file-backed store
"""

import contextlib
import json
import logging
import os
from pathlib import Path
import tempfile
from typing import Optional, Protocol, Union

from blockframe.core.exceptions import DocumentNotFoundError, StorageError
from blockframe.core.models import Document

__all__ = ["DocumentStore", "JsonFileStore"]

logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    """Persistence boundary of the editor."""

    def load(self, document_id: str) -> Document:
        """Return the stored document or raise :class:`DocumentNotFoundError`."""
        ...

    def save(self, document: Document) -> None:
        """Persist *document*; raise :class:`StorageError` on failure."""
        ...


class JsonFileStore:
    """Store each document as ``<base_dir>/<document_id>.json``."""

    def __init__(self, base_dir: Union[str, Path]) -> None:
        self._base_dir = Path(base_dir)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def path_for(self, document_id: str) -> Path:
        safe = str(document_id).replace(os.sep, "_").replace("/", "_")
        return self._base_dir / f"{safe}.json"

    def load(self, document_id: str) -> Document:
        path = self.path_for(document_id)
        if not path.exists():
            raise DocumentNotFoundError("No document found.", document_id=document_id)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageError(f"Could not read {path.name}: {exc}", document_id=document_id, cause=exc) from exc
        if not isinstance(data, dict):
            raise StorageError(f"{path.name} does not hold a document object.", document_id=document_id)
        logger.info("Loaded document %s from %s", document_id, path)
        return Document.from_dict(data)

    def save(self, document: Document) -> None:
        path = self.path_for(document.id)
        tmp_name: Optional[str] = None
        try:
            self._base_dir.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(document.to_dict(), ensure_ascii=False, indent=2)
            # Write then swap so a failed write never truncates the previous file
            fd, tmp_name = tempfile.mkstemp(dir=self._base_dir, prefix=".tmp_", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as exc:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            raise StorageError(f"Could not write {path.name}: {exc}", document_id=document.id, cause=exc) from exc
        logger.info("Saved document %s to %s", document.id, path)
