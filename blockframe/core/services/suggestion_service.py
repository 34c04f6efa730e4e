from __future__ import annotations

"""Bridge between the editor and an external content-suggestion collaborator.

The collaborator (typically an AI text service) is opaque: it receives the
current text of a node or a whole section and returns replacement content.
This service validates requests before the call, converts collaborator
failures into failed :class:`OperationResult` values, and applies
successful answers through the editing service, so each applied suggestion
is one ordinary history entry.
"""

import copy
import logging
import re
from typing import Any, Dict, List, Optional, Protocol

from blockframe.config import ConfigManager
from blockframe.core.exceptions import SuggestionError
from blockframe.core.factory import build_node
from blockframe.core.models import Document, Node
from blockframe.core.models.content import ELEMENT_TYPES
from blockframe.core.services.structure_editing_service import OperationResult, StructureEditingService

__all__ = ["ContentSuggester", "SuggestionService"]

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]*>?")
_DEFAULT_ACTIONS = ("improve", "shorten", "lengthen", "change-tone", "generate")
_DEFAULT_TEXT_FIELDS = {"headline": "text", "text": "text", "button": "text"}


class ContentSuggester(Protocol):
    """External content-suggestion collaborator."""

    def suggest_text(self, text: str, action: str, node_type: str, tone: Optional[str] = None) -> str:
        """Return replacement text for *text* according to *action*."""
        ...

    def generate_section(self, document: Document, tagline: str, section: Node) -> List[Any]:
        """Return element payloads (``{"type": ..., "content": {...}}``) for *section*.

        Either one list per column, or a flat list to be spread over the
        section's columns.
        """
        ...


class SuggestionService:
    """Apply collaborator suggestions to nodes of the edited document.

    Parameters
    ----------
    editing : StructureEditingService
        Mutation interface; suggestions are applied through it.
    suggester : ContentSuggester
        The external collaborator.
    config : dict, optional
        The ``suggestions`` configuration section.
    """

    def __init__(self, editing: StructureEditingService, suggester: ContentSuggester,
                 config: Optional[Dict[str, Any]] = None) -> None:
        cfg = config if config is not None else ConfigManager().get_suggestion_config()
        self._editing = editing
        self._suggester = suggester
        self._actions = tuple(cfg.get("actions") or _DEFAULT_ACTIONS)
        self._default_tone = cfg.get("default_tone") or "professional"
        self._text_fields: Dict[str, str] = dict(cfg.get("text_fields") or _DEFAULT_TEXT_FIELDS)

    @property
    def actions(self) -> tuple:
        return self._actions

    def rewrite_text(self, node_id: str, action: str, tone: Optional[str] = None) -> OperationResult:
        """Ask the collaborator to rewrite the text of *node_id*.

        The node is left unchanged when the action is unsupported, the node
        carries no rewritable text, or the collaborator fails.
        """
        logger.info("Suggest: rewrite_text node=%s action=%s", node_id, action)
        if action not in self._actions:
            return OperationResult(False, f"Unsupported text action '{action}'.",
                                   {"node_id": node_id, "allowed": list(self._actions)})
        node = self._editing.find_node(node_id)
        if node is None:
            return OperationResult(False, f"Node not found for id '{node_id}'.", {"node_id": node_id})
        field_name = self._text_fields.get(node.type)
        if field_name is None or not isinstance(node.content.get(field_name), str):
            return OperationResult(False, f"A {node.type} has no text to rewrite.", {"node_id": node_id})

        plain = _TAG_RE.sub("", node.content[field_name])
        if action == "change-tone":
            tone = tone or self._default_tone
        try:
            new_text = self._suggester.suggest_text(plain, action, node.type, tone)
            if not isinstance(new_text, str) or not new_text.strip():
                raise SuggestionError("Empty suggestion returned.", node_id=node_id, action=action)
        except Exception as exc:
            logger.error("Suggest FAIL: rewrite_text node=%s action=%s: %s", node_id, action, exc)
            return OperationResult(False, f"Suggestion failed: {exc}", {"node_id": node_id, "action": action})

        return self._editing.update_node(node_id, {"content": {field_name: new_text}}, f"AI: {action} text")

    def generate_section_content(self, section_id: str) -> OperationResult:
        """Fill every column of a section with collaborator-generated elements.

        Each column's children are replaced; columns with no payload are
        emptied. Every generated element receives a fresh id.
        """
        logger.info("Suggest: generate_section_content section=%s", section_id)
        section = self._editing.find_node(section_id)
        if section is None or section.type != "section":
            return OperationResult(False, "Content can only be generated for a section.", {"node_id": section_id})
        page = self._editing.active_page
        tagline = page.tagline if page is not None else ""

        try:
            payload = self._suggester.generate_section(self._editing.document, tagline, copy.deepcopy(section))
            if not isinstance(payload, list):
                raise SuggestionError("Expected a list of elements.", node_id=section_id, action="generate")
        except Exception as exc:
            logger.error("Suggest FAIL: generate_section_content section=%s: %s", section_id, exc)
            return OperationResult(False, f"Suggestion failed: {exc}", {"node_id": section_id, "action": "generate"})

        rows = copy.deepcopy(section.children or [])
        columns = [col for row in rows for col in row.children or [] if col.type == "column"]
        if not columns:
            return OperationResult(False, "Section has no columns to fill.", {"node_id": section_id})

        per_column = self._distribute(payload, len(columns))
        created = 0
        for column, blueprints in zip(columns, per_column):
            column.children = self._build_elements(blueprints)
            created += len(column.children)

        result = self._editing.update_node(section_id, {"children": rows}, "AI: generate section content")
        if result.success:
            return OperationResult(True, result.message, {"node_id": section_id, "elements": created})
        return result

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _distribute(payload: List[Any], count: int) -> List[List[Any]]:
        """Map *payload* onto *count* columns.

        A list of lists is taken per column; a flat list is dealt
        round-robin (element ``i`` goes to column ``i % count``).
        """
        buckets: List[List[Any]] = [[] for _ in range(count)]
        if payload and all(isinstance(p, list) for p in payload):
            for i, blueprints in enumerate(payload[:count]):
                buckets[i] = list(blueprints)
            return buckets
        for i, blueprint in enumerate(payload):
            buckets[i % count].append(blueprint)
        return buckets

    @staticmethod
    def _build_elements(blueprints: List[Any]) -> List[Node]:
        elements = []
        for blueprint in blueprints:
            if not isinstance(blueprint, dict) or blueprint.get("type") not in ELEMENT_TYPES:
                logger.warning("Skipping generated element with unsupported shape: %r", blueprint)
                continue
            node = build_node({"type": blueprint["type"], "content": blueprint.get("content"), "styles": blueprint.get("styles")})
            if node is not None:
                elements.append(node)
        return elements
