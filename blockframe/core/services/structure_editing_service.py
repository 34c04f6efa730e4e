from __future__ import annotations

"""Service layer for structural and style edits on a site document.

This module provides a UI-agnostic, testable service that turns editor
commands (insert, move, duplicate, delete, restyle, rename, page and color
management) into history commits. It is the only mutation interface a
render or drag/drop surface should use.

Scope and guarantees:
- Every successful edit is exactly one :class:`HistoryService` commit;
  refused or no-op edits record nothing.
- Invalid operations return ``OperationResult(success=False, ...)`` with a
  clear message and never raise.
- Edits target the tree of the current editing context: the active page,
  the header or the footer.

Examples
--------
Basic usage:

    history = HistoryService(document)
    service = StructureEditingService(history)
    result = service.insert_node(row_id, "column")
    if not result.success:
        print(result.message)

"""

from dataclasses import dataclass
import copy
import logging
from typing import Any, Callable, Dict, List, Literal, Optional

from blockframe.config import ConfigManager
from blockframe.core import tree
from blockframe.core.drop_rules import is_allowed
from blockframe.core.factory import create_default_section, instantiate_template
from blockframe.core.models import BREAKPOINTS, Document, GlobalColor, Node, Page, ResponsiveStyles
from blockframe.core.services.history_service import HistoryService
from blockframe.core.utils import generate_node_id, unique_slug


__all__ = ["OperationResult", "StructureEditingService", "EditingContext"]

logger = logging.getLogger(__name__)

EditingContext = Literal["page", "header", "footer"]

# Page fields that update_page may change, by attribute name.
_PAGE_FIELDS = (
    "name", "slug", "is_draft", "password", "hero_image_url", "tagline", "meta_title",
    "meta_description", "og_image_url", "custom_head_code", "custom_body_code",
)
_SITE_FIELDS = (
    "name", "theme", "favicon_url", "google_font", "custom_cursor", "custom_head_code", "palette",
)


@dataclass(frozen=True)
class OperationResult:
    """Result of an editing operation.

    Attributes
    ----------
    success
        Whether the operation completed successfully.
    message
        Human-readable summary suitable for logs or UI display.
    details
        Optional structured details for diagnostics or caller logic.
    """
    success: bool
    message: str
    details: Optional[Dict[str, Any]] = None


class StructureEditingService:
    """Encapsulates edit operations on the document owned by a history.

    Parameters
    ----------
    history : HistoryService
        Owner of the document; every edit is committed through it.
    editor_config : dict, optional
        The ``editor`` configuration section (column width precision).

    Notes
    -----
    The service keeps a little editor state outside the document: the
    active page id, the editing context and the style clipboard. None of it
    is part of the undo history.
    """

    def __init__(self, history: HistoryService, editor_config: Optional[Dict[str, Any]] = None) -> None:
        cfg = editor_config if editor_config is not None else ConfigManager().get_editor_config()
        self._precision = cfg.get("column_width_precision", 2)
        self._history = history
        self._editing_context: EditingContext = "page"
        self._copied_styles: Optional[ResponsiveStyles] = None
        home = history.current.homepage()
        self._active_page_id: Optional[str] = home.id if home is not None else None

    # -------------------------------------------------------------------------
    # Read-only state
    # -------------------------------------------------------------------------

    @property
    def history(self) -> HistoryService:
        return self._history

    @property
    def document(self) -> Document:
        return self._history.current

    @property
    def active_page(self) -> Optional[Page]:
        return self.document.find_page(self._active_page_id)

    @property
    def editing_context(self) -> EditingContext:
        return self._editing_context

    @property
    def copied_styles(self) -> Optional[ResponsiveStyles]:
        return self._copied_styles

    def content_tree(self, document: Optional[Document] = None) -> Optional[List[Node]]:
        """Return the node list edited in the current context, or None."""
        doc = document if document is not None else self.document
        if self._editing_context == "header":
            return doc.header
        if self._editing_context == "footer":
            return doc.footer
        page = doc.find_page(self._active_page_id)
        return page.children if page is not None else None

    def find_node(self, node_id: str) -> Optional[Node]:
        return tree.find_by_id(self.content_tree() or [], node_id)

    def breadcrumb(self, node_id: str) -> Optional[List[Node]]:
        """Ancestors of *node_id* ending with the node, or None if absent."""
        return tree.find_path(self.content_tree() or [], node_id)

    def can_drop(self, source_id: str, target_id: Optional[str],
                 position: Literal["before", "after", "inside"] = "before") -> bool:
        """Pre-drop feedback using the same rules the moves enforce.

        ``inside`` asks whether the source may become a child of the target;
        ``before``/``after`` ask whether it may become the target's sibling.
        """
        roots = self.content_tree() or []
        source = tree.find_by_id(roots, source_id)
        if source is None or source.locked or source_id == target_id:
            return False
        if target_id is not None and (tree.find_by_id([source], target_id) is not None
                                      or tree.find_container([source], target_id) is not None):
            return False
        if position == "inside" or target_id is None:
            # Same lookup as move_node_into, so tab item ids address their pane
            resolved = tree.find_container(roots, target_id)
            return resolved is not None and is_allowed(source.type, resolved[0])
        loc = tree.find_with_parent(roots, target_id)
        return loc is not None and is_allowed(source.type, loc.parent_kind)

    # -------------------------------------------------------------------------
    # Editor state (not recorded in history)
    # -------------------------------------------------------------------------

    def select_page(self, page_id: str) -> OperationResult:
        if self.document.find_page(page_id) is None:
            return OperationResult(False, f"Page not found for id '{page_id}'.", {"page_id": page_id})
        self._active_page_id = page_id
        self._editing_context = "page"
        return OperationResult(True, "Page selected.", {"page_id": page_id})

    def set_editing_context(self, context: EditingContext) -> OperationResult:
        if context not in ("page", "header", "footer"):
            return OperationResult(False, f"Unsupported editing context '{context}'.",
                                   {"allowed": ["page", "header", "footer"]})
        self._editing_context = context
        return OperationResult(True, f"Editing {context}.", {"context": context})

    def undo(self) -> bool:
        ok = self._history.undo()
        self._ensure_active_page()
        return ok

    def redo(self) -> bool:
        ok = self._history.redo()
        self._ensure_active_page()
        return ok

    def jump_to(self, index: int) -> bool:
        ok = self._history.jump_to(index)
        self._ensure_active_page()
        return ok

    def can_undo(self) -> bool:
        return self._history.can_undo()

    def can_redo(self) -> bool:
        return self._history.can_redo()

    # -------------------------------------------------------------------------
    # Node operations
    # -------------------------------------------------------------------------

    def add_section(self, template: Optional[str] = None) -> OperationResult:
        """Append a new section (blank, or built from *template*) to the current tree."""
        logger.info("Edit: add_section context=%s template=%s", self._editing_context, template)
        section = instantiate_template(template) if template else create_default_section()
        if section is None:
            return OperationResult(False, f"Unknown section template '{template}'.", {"template": template})

        def op(_doc: Document, roots: List[Node]) -> bool:
            return tree.append_node(roots, None, section)

        return self._edit("add_section", "Add section" if not template else f"Add section '{template}'",
                          op, {"node_id": section.id})

    def insert_node(self, parent_id: Optional[str], node_type: str) -> OperationResult:
        """Append a default *node_type* node under *parent_id* (None: top level)."""
        logger.info("Edit: insert_node type=%s parent=%s", node_type, parent_id)
        created: Dict[str, Node] = {}

        def op(_doc: Document, roots: List[Node]) -> bool:
            node = tree.insert_node(roots, parent_id, node_type, self._precision)
            if node is None:
                return False
            created["node"] = node
            return True

        result = self._edit("insert_node", f"Add {node_type}", op, {"parent_id": parent_id, "type": node_type})
        if result.success:
            return OperationResult(True, result.message, {**(result.details or {}), "node_id": created["node"].id})
        return result

    def update_node(self, node_id: str, updates: Dict[str, Any], description: Optional[str] = None) -> OperationResult:
        """Merge *updates* into a node (see :func:`blockframe.core.tree.update_by_id`)."""
        logger.info("Edit: update_node node=%s fields=%s", node_id, sorted(updates))
        node = self.find_node(node_id)
        if node is None:
            return self._not_found("update_node", node_id)

        def op(_doc: Document, roots: List[Node]) -> bool:
            return tree.update_by_id(roots, node_id, updates)

        return self._edit("update_node", description or f"Edit {node.display_name}", op, {"node_id": node_id})

    def update_content(self, node_id: str, content: Dict[str, Any]) -> OperationResult:
        return self.update_node(node_id, {"content": content}, "Edit content")

    def update_styles(self, node_id: str, styles: Dict[str, Any]) -> OperationResult:
        """Merge per-breakpoint style properties, e.g. ``{"desktop": {"color": "red"}}``."""
        return self.update_node(node_id, {"styles": styles}, "Change style")

    def set_hover_styles(self, node_id: str, hover_styles: Optional[Dict[str, Any]]) -> OperationResult:
        return self.update_node(node_id, {"hover_styles": hover_styles}, "Change hover style")

    def set_custom_css(self, node_id: str, css: str) -> OperationResult:
        return self.update_node(node_id, {"custom_css": css or None}, "Edit custom CSS")

    def rename_node(self, node_id: str, name: str) -> OperationResult:
        name = " ".join((name or "").split())
        return self.update_node(node_id, {"custom_name": name or None}, f"Rename to '{name}'" if name else "Clear name")

    def toggle_lock(self, node_id: str) -> OperationResult:
        node = self.find_node(node_id)
        if node is None:
            return self._not_found("toggle_lock", node_id)
        return self.update_node(node_id, {"locked": not node.locked}, "Unlock" if node.locked else "Lock")

    def toggle_visibility(self, node_id: str, breakpoint: str) -> OperationResult:
        if breakpoint not in BREAKPOINTS:
            return OperationResult(False, f"Unknown breakpoint '{breakpoint}'.", {"allowed": list(BREAKPOINTS)})
        node = self.find_node(node_id)
        if node is None:
            return self._not_found("toggle_visibility", node_id)
        visible = node.is_visible_on(breakpoint)
        return self.update_node(node_id, {"visibility": {breakpoint: not visible}},
                                f"{'Hide' if visible else 'Show'} on {breakpoint}")

    def delete_node(self, node_id: str) -> OperationResult:
        """Remove a node; remaining columns of a row are rebalanced."""
        logger.info("Edit: delete_node node=%s", node_id)
        node = self.find_node(node_id)
        if node is None:
            return self._not_found("delete_node", node_id)
        if node.locked:
            return self._locked("delete_node", node_id)

        def op(_doc: Document, roots: List[Node]) -> bool:
            loc = tree.find_with_parent(roots, node_id)
            if loc is None or not tree.remove_by_id(roots, node_id):
                return False
            if node.type == "column" and loc.parent is not None and loc.parent.type == "row":
                tree.rebalance_columns(loc.parent, self._precision)
            return True

        return self._edit("delete_node", f"Delete {node.display_name}", op, {"node_id": node_id})

    def move_node(self, source_id: str, target_id: str,
                  position: Literal["before", "after"] = "before") -> OperationResult:
        """Move a node next to *target_id*; columns changing rows rebalance both rows."""
        logger.info("Edit: move_node source=%s target=%s position=%s", source_id, target_id, position)
        source = self.find_node(source_id)
        if source is None:
            return self._not_found("move_node", source_id)
        if source.locked:
            return self._locked("move_node", source_id)

        def op(_doc: Document, roots: List[Node]) -> bool:
            before = tree.find_with_parent(roots, source_id)
            if not tree.move_node(roots, source_id, target_id, position):
                return False
            self._rebalance_after_move(roots, before, source_id)
            return True

        return self._edit("move_node", f"Move {source.display_name}", op,
                          {"source_id": source_id, "target_id": target_id, "position": position})

    def move_node_into(self, source_id: str, parent_id: Optional[str], index: Optional[int] = None) -> OperationResult:
        """Move a node into a container (e.g. an empty column) at *index*."""
        logger.info("Edit: move_node_into source=%s parent=%s index=%s", source_id, parent_id, index)
        source = self.find_node(source_id)
        if source is None:
            return self._not_found("move_node_into", source_id)
        if source.locked:
            return self._locked("move_node_into", source_id)

        def op(_doc: Document, roots: List[Node]) -> bool:
            before = tree.find_with_parent(roots, source_id)
            if not tree.move_node_into(roots, source_id, parent_id, index):
                return False
            self._rebalance_after_move(roots, before, source_id)
            return True

        return self._edit("move_node_into", f"Move {source.display_name}", op,
                          {"source_id": source_id, "parent_id": parent_id})

    def duplicate_node(self, node_id: str) -> OperationResult:
        logger.info("Edit: duplicate_node node=%s", node_id)
        node = self.find_node(node_id)
        if node is None:
            return self._not_found("duplicate_node", node_id)
        created: Dict[str, Node] = {}

        def op(_doc: Document, roots: List[Node]) -> bool:
            clone = tree.duplicate_by_id(roots, node_id)
            if clone is None:
                return False
            created["node"] = clone
            return True

        result = self._edit("duplicate_node", f"Duplicate {node.display_name}", op, {"node_id": node_id})
        if result.success:
            return OperationResult(True, result.message, {"node_id": node_id, "clone_id": created["node"].id})
        return result

    def copy_styles(self, node_id: str) -> OperationResult:
        node = self.find_node(node_id)
        if node is None:
            return self._not_found("copy_styles", node_id)
        self._copied_styles = copy.deepcopy(node.styles)
        return OperationResult(True, "Styles copied.", {"node_id": node_id})

    def paste_styles(self, node_id: str) -> OperationResult:
        if self._copied_styles is None:
            return OperationResult(False, "No styles copied.", {"node_id": node_id})
        return self.update_node(node_id, {"styles": copy.deepcopy(self._copied_styles)}, "Paste styles")

    # -------------------------------------------------------------------------
    # Page operations
    # -------------------------------------------------------------------------

    def add_page(self, name: str) -> OperationResult:
        logger.info("Edit: add_page name=%s", name)
        name = " ".join((name or "").split()) or "New Page"
        page = Page(
            id=generate_node_id(),
            name=name,
            slug=unique_slug(name, {p.slug for p in self.document.pages}),
            children=[create_default_section()],
        )

        def op(doc: Document) -> bool:
            doc.pages.append(page)
            return True

        result = self._edit_document("add_page", f"Add page '{name}'", op, {"page_id": page.id})
        if result.success:
            self._active_page_id = page.id
            self._editing_context = "page"
        return result

    def update_page(self, page_id: str, **fields: Any) -> OperationResult:
        """Update page settings (name, slug, tagline, hero image, meta fields...)."""
        unknown = sorted(set(fields) - set(_PAGE_FIELDS))
        if unknown:
            return OperationResult(False, f"Unsupported page fields: {', '.join(unknown)}.", {"fields": unknown})
        page = self.document.find_page(page_id)
        if page is None:
            return OperationResult(False, f"Page not found for id '{page_id}'.", {"page_id": page_id})
        if "slug" in fields:
            taken = {p.slug for p in self.document.pages if p.id != page_id}
            fields["slug"] = unique_slug(fields["slug"], taken)

        def op(doc: Document) -> bool:
            target = doc.find_page(page_id)
            for name, value in fields.items():
                setattr(target, name, value)
            return True

        return self._edit_document("update_page", f"Update page '{page.name}'", op, {"page_id": page_id})

    def set_homepage(self, page_id: str) -> OperationResult:
        page = self.document.find_page(page_id)
        if page is None:
            return OperationResult(False, f"Page not found for id '{page_id}'.", {"page_id": page_id})
        if page.is_homepage:
            return OperationResult(False, "Page is already the homepage.", {"page_id": page_id})

        def op(doc: Document) -> bool:
            for p in doc.pages:
                p.is_homepage = p.id == page_id
            return True

        return self._edit_document("set_homepage", f"Set '{page.name}' as homepage", op, {"page_id": page_id})

    def duplicate_page(self, page_id: str) -> OperationResult:
        page = self.document.find_page(page_id)
        if page is None:
            return OperationResult(False, f"Page not found for id '{page_id}'.", {"page_id": page_id})
        clone = copy.deepcopy(page)
        clone.id = generate_node_id()
        clone.name = f"{page.name} (Copy)"
        clone.slug = unique_slug(f"{page.slug}-copy", {p.slug for p in self.document.pages})
        clone.is_homepage = False
        for section in clone.children:
            tree.reassign_ids(section)

        def op(doc: Document) -> bool:
            index = next(i for i, p in enumerate(doc.pages) if p.id == page_id)
            doc.pages.insert(index + 1, clone)
            return True

        return self._edit_document("duplicate_page", f"Duplicate page '{page.name}'", op,
                                   {"page_id": page_id, "clone_id": clone.id})

    def delete_page(self, page_id: str) -> OperationResult:
        """Delete a page; the last page cannot go, a deleted homepage is replaced."""
        page = self.document.find_page(page_id)
        if page is None:
            return OperationResult(False, f"Page not found for id '{page_id}'.", {"page_id": page_id})
        if len(self.document.pages) <= 1:
            return OperationResult(False, "Cannot delete the only page.", {"page_id": page_id})

        def op(doc: Document) -> bool:
            doc.pages = [p for p in doc.pages if p.id != page_id]
            if not any(p.is_homepage for p in doc.pages):
                doc.pages[0].is_homepage = True
            return True

        result = self._edit_document("delete_page", f"Delete page '{page.name}'", op, {"page_id": page_id})
        if result.success:
            self._ensure_active_page()
        return result

    # -------------------------------------------------------------------------
    # Site-wide settings
    # -------------------------------------------------------------------------

    def update_site(self, **fields: Any) -> OperationResult:
        unknown = sorted(set(fields) - set(_SITE_FIELDS))
        if unknown:
            return OperationResult(False, f"Unsupported site fields: {', '.join(unknown)}.", {"fields": unknown})

        def op(doc: Document) -> bool:
            for name, value in fields.items():
                setattr(doc, name, value)
            return True

        return self._edit_document("update_site", "Update site settings", op, {"fields": sorted(fields)})

    def add_color(self, name: str, value: str) -> OperationResult:
        name = " ".join((name or "").split())
        if not name or not value:
            return OperationResult(False, "Color name and value are required.")
        color = GlobalColor(id=generate_node_id(), name=name, value=value)

        def op(doc: Document) -> bool:
            doc.global_colors.append(color)
            return True

        return self._edit_document("add_color", f"Add color '{name}'", op, {"color_id": color.id})

    def update_color(self, color_id: str, name: Optional[str] = None, value: Optional[str] = None) -> OperationResult:
        if not any(c.id == color_id for c in self.document.global_colors):
            return OperationResult(False, f"Color not found for id '{color_id}'.", {"color_id": color_id})

        def op(doc: Document) -> bool:
            color = next(c for c in doc.global_colors if c.id == color_id)
            if name:
                color.name = " ".join(name.split())
            if value:
                color.value = value
            return True

        return self._edit_document("update_color", "Update color", op, {"color_id": color_id})

    def remove_color(self, color_id: str) -> OperationResult:
        if not any(c.id == color_id for c in self.document.global_colors):
            return OperationResult(False, f"Color not found for id '{color_id}'.", {"color_id": color_id})

        def op(doc: Document) -> bool:
            doc.global_colors = [c for c in doc.global_colors if c.id != color_id]
            return True

        return self._edit_document("remove_color", "Remove color", op, {"color_id": color_id})

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _edit(self, op_name: str, description: str,
              op: Callable[[Document, List[Node]], bool], details: Dict[str, Any]) -> OperationResult:
        """Commit *op* against the current content tree of a working copy."""

        def doc_op(doc: Document) -> bool:
            roots = self.content_tree(doc)
            if roots is None:
                return False
            return op(doc, roots)

        return self._edit_document(op_name, description, doc_op, details)

    def _edit_document(self, op_name: str, description: str,
                       op: Callable[[Document], bool], details: Dict[str, Any]) -> OperationResult:
        committed = self._history.commit(lambda doc: None if op(doc) else False, description)
        if committed:
            logger.info("Edit OK: %s %s", op_name, details)
            return OperationResult(True, description, details)
        logger.info("Edit noop: %s %s", op_name, details)
        return OperationResult(False, f"Cannot {description[0].lower()}{description[1:]}.", details)

    def _rebalance_after_move(self, roots: List[Node], before: Optional[tree.NodeLocation], source_id: str) -> None:
        if before is None or before.node.type != "column":
            return
        after = tree.find_with_parent(roots, source_id)
        if after is None or after.parent is before.parent:
            return
        for row in (before.parent, after.parent):
            if row is not None and row.type == "row":
                tree.rebalance_columns(row, self._precision)

    def _ensure_active_page(self) -> None:
        if self.document.find_page(self._active_page_id) is None:
            home = self.document.homepage()
            self._active_page_id = home.id if home is not None else None

    @staticmethod
    def _not_found(op_name: str, node_id: str) -> OperationResult:
        logger.warning("Edit FAIL: %s node_not_found node=%s", op_name, node_id)
        return OperationResult(False, f"Node not found for id '{node_id}'.", {"node_id": node_id})

    @staticmethod
    def _locked(op_name: str, node_id: str) -> OperationResult:
        logger.info("Edit noop: %s locked node=%s", op_name, node_id)
        return OperationResult(False, "Node is locked.", {"node_id": node_id, "reason": "locked"})
