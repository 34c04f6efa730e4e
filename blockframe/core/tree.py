from __future__ import annotations

"""Stateless query and mutation algorithms over a list of sibling root nodes.

Every function takes ``roots``: the top-level node list of a page, the
header or the footer. Mutations happen in place, so callers wanting
undo/redo apply them to a working copy handed out by
:class:`~blockframe.core.services.history_service.HistoryService`.

Failure semantics
-----------------
- "Not found" is a normal outcome: functions return ``None`` or ``False``.
- Illegal structure (a drop the containment rules forbid) is refused as a
  no-op, never a partial edit.
- Entries that are not well-formed nodes (missing ``id``/``type``) are
  skipped during traversal.

Traversal is depth-first, parent before children, and also descends into
the node lists held by ``tabs`` items.
"""

from dataclasses import dataclass
import copy
import logging
from typing import Any, Dict, Iterator, List, Literal, Optional, Tuple

from blockframe.core.drop_rules import ROOT, TAB_PANE, is_allowed
from blockframe.core.factory import build_tab_items, create_default_node
from blockframe.core.models import BREAKPOINTS, Node, ResponsiveStyles
from blockframe.core.models.content import ITEM_LIST_KEYS
from blockframe.core.utils import format_percentage, generate_node_id

__all__ = [
    "NodeLocation",
    "iter_nodes",
    "find_by_id",
    "find_path",
    "find_with_parent",
    "find_container",
    "update_by_id",
    "remove_by_id",
    "insert_node",
    "append_node",
    "move_node",
    "move_node_into",
    "duplicate_by_id",
    "reassign_ids",
    "rebalance_columns",
]

logger = logging.getLogger(__name__)

# Fields a partial update may touch. Identity and kind are immutable.
_SCALAR_FIELDS = ("custom_name", "locked", "custom_css", "animation", "global_typography_id")


@dataclass
class NodeLocation:
    """Where a node lives: the list holding it and the owner of that list.

    Attributes
    ----------
    node
        The located node.
    parent
        The container node owning ``siblings``; ``None`` for the root list.
        For a node inside a tab pane this is the ``tabs`` element.
    siblings
        The list object the node is stored in (splice target).
    index
        Position of ``node`` within ``siblings``.
    parent_kind
        Containment kind of ``siblings``: ``root``, ``section``, ``row``,
        ``column`` or ``tab``.
    """

    node: Node
    parent: Optional[Node]
    siblings: List[Node]
    index: int
    parent_kind: str


def _is_node(obj: Any) -> bool:
    return isinstance(obj, Node) and bool(obj.id) and bool(obj.type)


def _child_lists(node: Node) -> Iterator[Tuple[str, List[Node]]]:
    if isinstance(node.children, list):
        yield node.type, node.children
    for pane in node.tab_panes():
        yield TAB_PANE, pane


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def iter_nodes(roots: List[Node]) -> Iterator[Node]:
    """Yield every well-formed node under *roots*, parents before children."""
    for node in roots or []:
        if not _is_node(node):
            continue
        yield node
        for _kind, children in _child_lists(node):
            yield from iter_nodes(children)


def _locate(nodes: List[Node], node_id: str, parent: Optional[Node], kind: str,
            trail: List[Node]) -> Optional[Tuple[NodeLocation, List[Node]]]:
    for index, node in enumerate(nodes or []):
        if not _is_node(node):
            continue
        if node.id == node_id:
            return NodeLocation(node, parent, nodes, index, kind), trail + [node]
        for child_kind, children in _child_lists(node):
            found = _locate(children, node_id, node, child_kind, trail + [node])
            if found is not None:
                return found
    return None


def find_by_id(roots: List[Node], node_id: str) -> Optional[Node]:
    """Return the node with *node_id*, or None when absent."""
    for node in iter_nodes(roots):
        if node.id == node_id:
            return node
    return None


def find_path(roots: List[Node], node_id: str) -> Optional[List[Node]]:
    """Return the ancestors of *node_id* followed by the node itself.

    Returns None when the id is absent, so a breadcrumb is never built from
    a path that stops short of the requested node.
    """
    found = _locate(roots, node_id, None, ROOT, [])
    return found[1] if found is not None else None


def find_with_parent(roots: List[Node], node_id: str) -> Optional[NodeLocation]:
    """Return the :class:`NodeLocation` of *node_id*, or None when absent."""
    found = _locate(roots, node_id, None, ROOT, [])
    return found[0] if found is not None else None


def find_container(roots: List[Node], container_id: Optional[str]) -> Optional[Tuple[str, List[Node], Optional[Node]]]:
    """Resolve *container_id* to ``(kind, child list, owner)``.

    ``None`` addresses the root list; a tab item id addresses its pane.
    """
    if container_id is None:
        return ROOT, roots, None
    for node in iter_nodes(roots):
        if node.id == container_id and isinstance(node.children, list):
            return node.type, node.children, node
        if node.type == "tabs":
            for item in node.content.get("items") or []:
                if isinstance(item, dict) and item.get("id") == container_id and isinstance(item.get("content"), list):
                    return TAB_PANE, item["content"], node
    return None


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

def _merge_styles(current: Optional[ResponsiveStyles], patch: Any) -> ResponsiveStyles:
    merged = current if current is not None else ResponsiveStyles()
    merged.merge(patch)
    return merged


def update_by_id(roots: List[Node], node_id: str, updates: Dict[str, Any]) -> bool:
    """Merge *updates* into the node with *node_id*.

    - scalar fields (``custom_name``, ``locked``, ``custom_css``...) overwrite;
    - ``content`` is shallow-merged into the existing content;
    - ``styles`` and ``hover_styles`` are merged per breakpoint, keeping
      properties the update does not name;
    - ``visibility`` is merged per breakpoint;
    - ``children`` replaces the child list of a container with copies of the
      given nodes (never added to a leaf);
    - ``tabs`` items are normalized so their panes hold element nodes.

    Returns False if the id is not found, or if a replacement child (or any
    node below it) breaks the containment rules; nothing is changed then.
    """
    node = find_by_id(roots, node_id)
    if node is None:
        return False
    new_children = updates.get("children")
    replace_children = isinstance(new_children, list) and isinstance(node.children, list)
    if replace_children and not all(_is_legal_subtree(c, node.type) for c in new_children):
        logger.debug("Refused children update of %s (%s)", node.type, node_id)
        return False

    for name in _SCALAR_FIELDS:
        if name in updates:
            setattr(node, name, updates[name])
    if isinstance(updates.get("content"), dict) and not node.is_container:
        node.content = {**node.content, **updates["content"]}
        if node.type == "tabs" and "items" in updates["content"]:
            node.content["items"] = build_tab_items(node.content["items"])
    if "styles" in updates:
        node.styles = _merge_styles(node.styles, updates["styles"])
    if "hover_styles" in updates:
        if updates["hover_styles"] is None:
            node.hover_styles = None
        else:
            node.hover_styles = _merge_styles(node.hover_styles, updates["hover_styles"])
    if isinstance(updates.get("visibility"), dict):
        patch = {bp: bool(v) for bp, v in updates["visibility"].items() if bp in BREAKPOINTS}
        node.visibility = {**(node.visibility or {}), **patch}
    if replace_children:
        node.children = copy.deepcopy(list(new_children))
    return True


def _is_legal_subtree(node: Any, parent_kind: str) -> bool:
    if not _is_node(node) or not is_allowed(node.type, parent_kind):
        return False
    return all(_is_legal_subtree(child, kind) for kind, children in _child_lists(node) for child in children)


def remove_by_id(roots: List[Node], node_id: str) -> bool:
    """Splice the node with *node_id* out of its parent's list.

    Rebalancing of sibling columns is left to the caller.
    """
    loc = find_with_parent(roots, node_id)
    if loc is None:
        return False
    del loc.siblings[loc.index]
    return True


def rebalance_columns(row: Node, precision: Optional[int] = 2) -> None:
    """Give every column of *row* an equal ``flexBasis`` share (desktop)."""
    columns = [c for c in row.children or [] if _is_node(c) and c.type == "column"]
    if not columns:
        return
    share = format_percentage(100 / len(columns), precision)
    for column in columns:
        column.styles.desktop["flexBasis"] = share


def append_node(roots: List[Node], target_parent_id: Optional[str], node: Node,
                index: Optional[int] = None) -> bool:
    """Place an existing *node* under *target_parent_id* if containment allows.

    ``None`` targets the root list. Appends unless *index* is given.
    """
    resolved = find_container(roots, target_parent_id)
    if resolved is None:
        return False
    kind, children, _owner = resolved
    if not is_allowed(node.type, kind):
        logger.debug("Refused %s under %s (%s)", node.type, kind, target_parent_id)
        return False
    if index is None:
        children.append(node)
    else:
        children.insert(max(0, min(index, len(children))), node)
    return True


def insert_node(roots: List[Node], target_parent_id: Optional[str], node_type: str,
                precision: Optional[int] = 2) -> Optional[Node]:
    """Create a default node of *node_type* and append it under the target.

    Inserting a column into a row rebalances every column of that row to
    ``100 / count`` percent. Returns the new node, or None if the target is
    missing or the containment rules refuse the kind.
    """
    new_node = create_default_node(node_type)
    if new_node is None:
        return None
    if not append_node(roots, target_parent_id, new_node):
        return None
    if node_type == "column":
        parent = find_by_id(roots, target_parent_id) if target_parent_id else None
        if parent is not None and parent.type == "row":
            rebalance_columns(parent, precision)
    return new_node


def _contains(node: Node, node_id: str) -> bool:
    return find_by_id([node], node_id) is not None


def move_node(roots: List[Node], source_id: str, target_id: str,
              position: Literal["before", "after"] = "before") -> bool:
    """Move *source_id* next to *target_id*, atomically.

    The source is placed before or after the target in the target's parent
    list. Nothing changes if either node is missing, if the target lies
    inside the source, or if the source kind is not allowed under the
    target's parent.
    """
    if source_id == target_id or position not in ("before", "after"):
        return False
    src = find_with_parent(roots, source_id)
    dst = find_with_parent(roots, target_id)
    if src is None or dst is None:
        return False
    if _contains(src.node, target_id):
        return False
    if not is_allowed(src.node.type, dst.parent_kind):
        logger.debug("Refused move of %s under %s", src.node.type, dst.parent_kind)
        return False

    del src.siblings[src.index]
    target_index = dst.index
    if src.siblings is dst.siblings and src.index < dst.index:
        target_index -= 1
    if position == "after":
        target_index += 1
    dst.siblings.insert(target_index, src.node)
    return True


def move_node_into(roots: List[Node], source_id: str, target_parent_id: Optional[str],
                   index: Optional[int] = None) -> bool:
    """Move *source_id* into the container *target_parent_id* (e.g. an empty column)."""
    src = find_with_parent(roots, source_id)
    if src is None:
        return False
    if target_parent_id is not None and _contains(src.node, target_parent_id):
        return False
    resolved = find_container(roots, target_parent_id)
    if resolved is None or not is_allowed(src.node.type, resolved[0]):
        return False

    del src.siblings[src.index]
    children = resolved[1]
    if index is None:
        children.append(src.node)
    else:
        if children is src.siblings and src.index < index:
            index -= 1
        children.insert(max(0, min(index, len(children))), src.node)
    return True


def reassign_ids(node: Node) -> Node:
    """Give *node*, its descendants and every id-bearing content item a fresh id."""
    node.id = generate_node_id()
    key = ITEM_LIST_KEYS.get(node.type)
    if key and isinstance(node.content.get(key), list):
        for item in node.content[key]:
            if isinstance(item, dict) and "id" in item:
                item["id"] = generate_node_id()
    for _kind, children in _child_lists(node):
        for child in children:
            if _is_node(child):
                reassign_ids(child)
    return node


def duplicate_by_id(roots: List[Node], node_id: str) -> Optional[Node]:
    """Clone the subtree at *node_id* with new identities, right after the original."""
    loc = find_with_parent(roots, node_id)
    if loc is None:
        return None
    clone = reassign_ids(copy.deepcopy(loc.node))
    loc.siblings.insert(loc.index + 1, clone)
    return clone
