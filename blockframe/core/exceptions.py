from __future__ import annotations

"""Exception classes for external collaborator failures.

Tree-internal conditions (missing nodes, illegal drops) are never raised;
they surface as boolean/optional results. Only the load, save and content
suggestion boundaries raise the exceptions below, and callers decide how
to report them to the user.
"""

from typing import Optional


class BlockframeError(Exception):
    """Base exception for all collaborator-related errors."""

    def __init__(self, message: str, document_id: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.document_id = document_id
        self.cause = cause

    def __str__(self) -> str:
        if self.document_id:
            return f"[Document: {self.document_id}] {super().__str__()}"
        return super().__str__()


class StorageError(BlockframeError):
    """Raised when a document cannot be read from or written to storage."""
    pass


class DocumentNotFoundError(StorageError):
    """Raised when the storage collaborator has no document for the given id."""
    pass


class SuggestionError(BlockframeError):
    """Raised when the content-suggestion collaborator fails or returns
    a payload that does not match the node's content contract.
    """

    def __init__(self, message: str, node_id: Optional[str] = None,
                 action: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message, cause=cause)
        self.node_id = node_id
        self.action = action
