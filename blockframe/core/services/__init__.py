from __future__ import annotations

"""Editing orchestration services (history, structure edits, styles, suggestions)."""

from .history_service import HistoryService  # noqa: F401
from .structure_editing_service import OperationResult, StructureEditingService  # noqa: F401
from .style_service import StyleService  # noqa: F401
from .suggestion_service import SuggestionService  # noqa: F401

__all__: list[str] = [
    "HistoryService",
    "OperationResult",
    "StructureEditingService",
    "StyleService",
    "SuggestionService",
]
