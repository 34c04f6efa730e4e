from __future__ import annotations

"""Compile a document's dynamic style data into one CSS text blob.

The compiler walks the header, the active page and the footer (in that
order, which fixes the cascade order of same-specificity rules) and emits:

1. a ``:root`` block with one custom property per global color token;
2. every node's custom CSS, with the placeholder token replaced by a
   selector targeting that node;
3. ``:hover`` rules from each node's hover styles: desktop rules plain,
   tablet and mobile rules each grouped in one media query.

A node with malformed style data is skipped for the affected rule category;
the rest of the stylesheet is still produced.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from blockframe.config import ConfigManager
from blockframe.core.models import Document, Node, Page, ResponsiveStyles
from blockframe.core.tree import iter_nodes
from blockframe.core.utils import camel_to_kebab

__all__ = ["StyleService", "generate_rule"]

logger = logging.getLogger(__name__)

_DEFAULT_SELECTOR = '[data-node-id="{id}"]'
_DEFAULT_PLACEHOLDER = "selector"


def generate_rule(selector: str, properties: Dict[str, Any]) -> str:
    """Return ``selector { prop: value; ... }`` or ``""`` if nothing is set.

    Property names are converted from camelCase to kebab-case; properties
    with an empty or falsy value are omitted.
    """
    if not isinstance(properties, dict):
        return ""
    declarations = [f"{camel_to_kebab(str(k))}: {v};" for k, v in properties.items() if v]
    if not declarations:
        return ""
    return f"{selector} {{ {' '.join(declarations)} }}"


class StyleService:
    """Produce the dynamic stylesheet for a document and its active page.

    Parameters
    ----------
    editor_config : dict, optional
        The ``editor`` configuration section; read from
        :class:`~blockframe.config.ConfigManager` when omitted.
    """

    def __init__(self, editor_config: Optional[Dict[str, Any]] = None) -> None:
        cfg = editor_config if editor_config is not None else ConfigManager().get_editor_config()
        breakpoints = cfg.get("breakpoints") or {}
        self._tablet_max = int(breakpoints.get("tablet", 768))
        self._mobile_max = int(breakpoints.get("mobile", 480))
        self._selector_template = str(cfg.get("node_selector") or _DEFAULT_SELECTOR)
        placeholder = str(cfg.get("css_placeholder") or _DEFAULT_PLACEHOLDER)
        self._placeholder_re = re.compile(rf"\b{re.escape(placeholder)}\b")

        self._cached_key: Optional[Tuple[Document, Optional[str]]] = None
        self._cached_css: str = ""

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def node_selector(self, node_id: str) -> str:
        return self._selector_template.format(id=node_id)

    def resolve(self, document: Optional[Document], active_page: Optional[Page]) -> str:
        """Return the stylesheet, recompiling only when the inputs changed.

        History snapshots are never mutated, so the document object and the
        active page id identify the inputs.
        """
        if document is None:
            return ""
        page_id = active_page.id if active_page is not None else None
        if self._cached_key is not None and self._cached_key[0] is document and self._cached_key[1] == page_id:
            return self._cached_css
        css = self.compile(document, active_page)
        self._cached_key = (document, page_id)
        self._cached_css = css
        return css

    def compile(self, document: Optional[Document], active_page: Optional[Page]) -> str:
        """Compile *document* scoped to header, *active_page* and footer."""
        if document is None:
            return ""

        css = self._color_variables(document)

        roots: List[Node] = list(document.header)
        if active_page is not None:
            roots.extend(active_page.children)
        roots.extend(document.footer)
        nodes = list(iter_nodes(roots))

        for node in nodes:
            scoped = self._scoped_custom_css(node)
            if scoped:
                css += f"{scoped}\n"

        hover_rules: Dict[str, List[str]] = {"desktop": [], "tablet": [], "mobile": []}
        for node in nodes:
            for bp, rule in self._hover_rules(node):
                hover_rules[bp].append(rule)

        css += "\n".join(hover_rules["desktop"])
        if hover_rules["tablet"]:
            css += f"\n@media (max-width: {self._tablet_max}px) {{ {chr(10).join(hover_rules['tablet'])} }}\n"
        if hover_rules["mobile"]:
            css += f"\n@media (max-width: {self._mobile_max}px) {{ {chr(10).join(hover_rules['mobile'])} }}\n"
        return css

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _color_variables(document: Document) -> str:
        declarations = []
        for color in document.global_colors or []:
            if not getattr(color, "name", None) or not getattr(color, "value", None):
                continue
            declarations.append(f"{color.variable_name}: {color.value};")
        if not declarations:
            return ""
        return ":root { " + "\n".join(declarations) + " }\n"

    def _scoped_custom_css(self, node: Node) -> str:
        custom_css = node.custom_css
        if not custom_css:
            return ""
        if not isinstance(custom_css, str):
            logger.warning("Skipping custom CSS of node %s: not text", node.id)
            return ""
        return self._placeholder_re.sub(lambda _m: self.node_selector(node.id), custom_css)

    def _hover_rules(self, node: Node) -> List[Tuple[str, str]]:
        hover = node.hover_styles
        if hover is None:
            return []
        if not isinstance(hover, ResponsiveStyles):
            logger.warning("Skipping hover styles of node %s: malformed", node.id)
            return []
        selector = f"{self.node_selector(node.id)}:hover"
        rules = []
        for bp in ("desktop", "tablet", "mobile"):
            rule = generate_rule(selector, hover.get(bp))
            if rule:
                rules.append((bp, rule))
        return rules
