from __future__ import annotations

"""One-time structural migration of legacy page content.

Older documents stored a page's content as a flat ``sections`` list of
loosely typed blocks instead of the section → row → column → element tree.
:func:`migrate_document_dict` rewrites such pages in the raw JSON shape,
before parsing, so the rest of the engine only ever sees the current
schema. Already-migrated documents pass through unchanged.
"""

import logging
from typing import Any, Dict, List

from blockframe.core.models.content import ELEMENT_TYPES
from blockframe.core.utils import generate_node_id

__all__ = ["migrate_document_dict", "migrate_page_dict"]

logger = logging.getLogger(__name__)


def _empty_styles() -> Dict[str, Dict[str, Any]]:
    return {"desktop": {}, "tablet": {}, "mobile": {}}


def _wrap_element(element: Dict[str, Any]) -> Dict[str, Any]:
    element = dict(element)
    element.setdefault("id", generate_node_id())
    element.setdefault("styles", _empty_styles())
    element.setdefault("content", {})
    return {
        "id": generate_node_id(),
        "type": "section",
        "styles": {"desktop": {"paddingTop": "2rem", "paddingBottom": "2rem"}, "tablet": {}, "mobile": {}},
        "children": [{
            "id": generate_node_id(),
            "type": "row",
            "styles": _empty_styles(),
            "children": [{
                "id": generate_node_id(),
                "type": "column",
                "styles": {"desktop": {"flexBasis": "100%"}, "tablet": {}, "mobile": {}},
                "children": [element],
            }],
        }],
    }


def migrate_page_dict(page: Dict[str, Any]) -> Dict[str, Any]:
    """Return *page* with a legacy ``sections`` list converted to ``children``.

    Legacy leaf blocks are each wrapped in their own section/row/column;
    legacy items that already are sections are kept; anything else is
    dropped with a warning.
    """
    if "children" in page or not isinstance(page.get("sections"), list):
        return page

    children: List[Dict[str, Any]] = []
    for item in page["sections"]:
        if not isinstance(item, dict):
            continue
        kind = item.get("type")
        if kind == "section":
            children.append(item)
        elif kind in ELEMENT_TYPES:
            children.append(_wrap_element(item))
        else:
            logger.warning("Dropping legacy block of unknown type '%s' on page %s", kind, page.get("id"))

    migrated = {k: v for k, v in page.items() if k != "sections"}
    migrated["children"] = children
    logger.info("Migrated legacy page %s: %d blocks -> %d sections",
                page.get("id"), len(page["sections"]), len(children))
    return migrated


def migrate_document_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """Return *data* with every legacy page migrated; input is not modified."""
    pages = data.get("pages")
    if not isinstance(pages, list):
        return data
    if not any(isinstance(p, dict) and "children" not in p and isinstance(p.get("sections"), list) for p in pages):
        return data
    migrated = dict(data)
    migrated["pages"] = [migrate_page_dict(p) if isinstance(p, dict) else p for p in pages]
    return migrated
