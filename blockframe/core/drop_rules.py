from __future__ import annotations

"""Containment rules: which node kinds may be direct children of which.

The same table backs hard enforcement in the tree mutation library and the
soft, pre-drop feedback of an interactive drag surface, so the UI never
offers a drop the engine would refuse.
"""

from typing import Dict, FrozenSet, Optional

from blockframe.core.models.content import ELEMENT_TYPES

__all__ = ["ROOT", "TAB_PANE", "ALLOWED_CHILDREN", "is_allowed", "container_kind_for"]

# Synthetic parent kinds for the top-level node lists (page content, header,
# footer) and for the node lists held inside a tabs element's items.
ROOT = "root"
TAB_PANE = "tab"

ALLOWED_CHILDREN: Dict[str, FrozenSet[str]] = {
    ROOT: frozenset({"section"}),
    "section": frozenset({"row"}),
    "row": frozenset({"column"}),
    "column": frozenset(ELEMENT_TYPES),
    TAB_PANE: frozenset(ELEMENT_TYPES),
}


def is_allowed(child_kind: Optional[str], parent_kind: Optional[str]) -> bool:
    """Return True if a node of *child_kind* may sit directly under *parent_kind*."""
    if not child_kind or not parent_kind:
        return False
    return child_kind in ALLOWED_CHILDREN.get(parent_kind, frozenset())


def container_kind_for(child_kind: str) -> Optional[str]:
    """Return the container kind that directly holds *child_kind*.

    Tab panes also accept elements; the canonical holder is ``column``.
    """
    for parent_kind in (ROOT, "section", "row", "column"):
        if child_kind in ALLOWED_CHILDREN[parent_kind]:
            return parent_kind
    return None
