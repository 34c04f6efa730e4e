from __future__ import annotations

"""Linear undo/redo history of whole-document snapshots.

This service is UI-agnostic and owns the editable :class:`Document`. Every
change goes through :meth:`HistoryService.commit`, which hands the mutator a
deep working copy of the current snapshot, records the result as a new
immutable :class:`HistoryEntry` and moves the pointer onto it.

Design principles
-----------------
- Snapshots are never mutated once stored; the mutator only ever sees a copy.
- A commit after an undo truncates the entries past the pointer (standard
  linear history), so redo is no longer available.
- The initial entry holds the loaded document and is never removed.

Notes
-----
Each commit deep-copies the whole document. This is fine at human editing
cadence; a structurally shared tree would be needed for very large sites.
"""

from dataclasses import dataclass, field
import copy
import logging
import time
from typing import Callable, List, Optional, Union

from blockframe.core.models import Document

__all__ = ["HistoryEntry", "HistoryService", "Mutator"]

logger = logging.getLogger(__name__)

# A mutator edits the working copy in place and returns None, returns a
# replacement Document, or returns False to abandon the change.
Mutator = Callable[[Document], Union[Document, None, bool]]


@dataclass(frozen=True)
class HistoryEntry:
    """Immutable (snapshot, description) pair in the timeline.

    Attributes
    ----------
    document
        The document state after the change. Treat as read-only.
    description
        Human-readable summary shown by a history scrubber.
    timestamp
        Unix epoch seconds when the entry was recorded.
    """

    document: Document
    description: str
    timestamp: float = field(default_factory=time.time)


class HistoryService:
    """Own a document and track its edits for undo/redo and time travel.

    Parameters
    ----------
    document : Document
        The freshly loaded document seeding the initial entry.
    description : str, default="Loaded document"
        Description of the initial entry.

    Examples
    --------
    >>> history = HistoryService(doc)
    >>> history.commit(lambda d: setattr(d, "name", "Renamed"), "Rename site")
    >>> history.undo()
    >>> history.current.name == doc.name
    True
    """

    def __init__(self, document: Document, description: str = "Loaded document") -> None:
        self._entries: List[HistoryEntry] = []
        self._index: int = 0
        self.reset(document, description)

    # --------------------------------------------------------------------- API

    @property
    def current(self) -> Document:
        """The document at the history pointer (read-only)."""
        return self._entries[self._index].document

    @property
    def index(self) -> int:
        return self._index

    @property
    def entries(self) -> List[HistoryEntry]:
        """A copy of the timeline, oldest first."""
        return list(self._entries)

    def reset(self, document: Document, description: str = "Loaded document") -> None:
        """Discard all history and start over from *document*."""
        self._entries = [HistoryEntry(copy.deepcopy(document), description)]
        self._index = 0

    def commit(self, mutator: Mutator, description: str) -> bool:
        """Apply *mutator* to a working copy and record the result.

        The mutator may edit the copy in place (returning None), return a new
        Document, or return ``False`` to abandon the change, in which case
        nothing is recorded.

        Returns
        -------
        bool
            True if a new entry was recorded.
        """
        working = copy.deepcopy(self.current)
        result = mutator(working)
        if result is False:
            logger.debug("History: commit abandoned (%s)", description)
            return False
        new_document = result if isinstance(result, Document) else working

        # New user action invalidates redo history
        del self._entries[self._index + 1:]
        self._entries.append(HistoryEntry(new_document, description))
        self._index = len(self._entries) - 1
        logger.debug("History: commit #%d %s", self._index, description)
        return True

    def undo(self) -> bool:
        """Step back one entry; no-op at the initial entry."""
        if not self.can_undo():
            return False
        self._index -= 1
        return True

    def redo(self) -> bool:
        """Step forward one entry; no-op at the newest entry."""
        if not self.can_redo():
            return False
        self._index += 1
        return True

    def jump_to(self, index: int) -> bool:
        """Move the pointer directly to *index*; out-of-range requests are ignored."""
        if not isinstance(index, int) or index < 0 or index >= len(self._entries):
            return False
        self._index = index
        return True

    def can_undo(self) -> bool:
        """Return True if an undo operation is currently possible."""
        return self._index > 0

    def can_redo(self) -> bool:
        """Return True if a redo operation is currently possible."""
        return self._index < len(self._entries) - 1

    def describe(self, index: Optional[int] = None) -> str:
        """Return the description of the entry at *index* (default: current)."""
        i = self._index if index is None else index
        return self._entries[i].description
