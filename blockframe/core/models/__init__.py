from __future__ import annotations

"""Shared data structures used across the Blockframe core.

This package exposes the dataclasses that make up an editable site: the
:class:`Node` tree unit, the :class:`Page` and :class:`Document` aggregates
and their small value objects. It is intentionally free of UI / I/O code so
that the contained objects can be reused in any context (unit-tests, CLI,
server, etc.).

Serialization uses the camelCase JSON shape understood by the storage and
render collaborators (``customName``, ``hoverStyles``, ``isHomepage``...).
Parsing is lenient: nodes missing ``id`` or ``type`` are skipped with a
warning instead of failing the whole document.
"""

from dataclasses import dataclass, field
import logging
from typing import Any, Dict, Iterator, List, Optional

from .content import CONTAINER_TYPES, ELEMENT_TYPES, NODE_TYPES

__all__ = [
    "BREAKPOINTS",
    "ResponsiveStyles",
    "Node",
    "Page",
    "GlobalColor",
    "GlobalTypography",
    "Asset",
    "Document",
    "CONTAINER_TYPES",
    "ELEMENT_TYPES",
    "NODE_TYPES",
]

logger = logging.getLogger(__name__)

BREAKPOINTS = ("desktop", "tablet", "mobile")


def _style_map(value: Any) -> Dict[str, Any]:
    if not isinstance(value, dict):
        return {}
    return {str(k): v for k, v in value.items() if isinstance(v, (str, int, float))}


@dataclass
class ResponsiveStyles:
    """Per-breakpoint style maps; all three breakpoints are always present."""

    desktop: Dict[str, Any] = field(default_factory=dict)
    tablet: Dict[str, Any] = field(default_factory=dict)
    mobile: Dict[str, Any] = field(default_factory=dict)

    def get(self, breakpoint: str) -> Dict[str, Any]:
        return getattr(self, breakpoint)

    def is_empty(self) -> bool:
        return not (self.desktop or self.tablet or self.mobile)

    def merge(self, updates: "ResponsiveStyles | Dict[str, Any]") -> None:
        """Shallow-merge *updates* into each breakpoint independently.

        Keys absent from the update are preserved; keys present overwrite.
        """
        if isinstance(updates, ResponsiveStyles):
            updates = updates.to_dict()
        if not isinstance(updates, dict):
            return
        for bp in BREAKPOINTS:
            patch = updates.get(bp)
            if isinstance(patch, dict):
                getattr(self, bp).update(_style_map(patch))

    @classmethod
    def from_dict(cls, data: Any) -> "ResponsiveStyles":
        if not isinstance(data, dict):
            return cls()
        return cls(
            desktop=_style_map(data.get("desktop")),
            tablet=_style_map(data.get("tablet")),
            mobile=_style_map(data.get("mobile")),
        )

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {bp: dict(getattr(self, bp)) for bp in BREAKPOINTS}


@dataclass
class Node:
    """A single unit of the site tree: section, row, column or leaf element.

    Attributes
    ----------
    id
        Unique identifier, generated once and never reused.
    type
        Discriminant, one of :data:`NODE_TYPES`.
    styles
        Per-breakpoint style record.
    content
        Kind-specific payload (see :mod:`blockframe.core.models.content`).
        Empty for containers.
    children
        Ordered child list for container kinds, ``None`` for leaf kinds.
    """

    id: str
    type: str
    styles: ResponsiveStyles = field(default_factory=ResponsiveStyles)
    content: Dict[str, Any] = field(default_factory=dict)
    children: Optional[List["Node"]] = None
    custom_name: Optional[str] = None
    hover_styles: Optional[ResponsiveStyles] = None
    visibility: Optional[Dict[str, bool]] = None
    custom_css: Optional[str] = None
    locked: bool = False
    animation: Optional[str] = None
    global_typography_id: Optional[str] = None

    @property
    def is_container(self) -> bool:
        return self.type in CONTAINER_TYPES

    @property
    def display_name(self) -> str:
        return self.custom_name or self.type

    def is_visible_on(self, breakpoint: str) -> bool:
        return (self.visibility or {}).get(breakpoint) is not False

    def tab_panes(self) -> Iterator[List["Node"]]:
        """Yield the nested node lists held by a ``tabs`` element's items."""
        if self.type != "tabs":
            return
        for item in self.content.get("items") or []:
            if isinstance(item, dict) and isinstance(item.get("content"), list):
                yield item["content"]

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    @classmethod
    def from_dict(cls, data: Any) -> Optional["Node"]:
        """Build a node from its JSON shape, or return None if malformed."""
        if not isinstance(data, dict) or not data.get("id") or not data.get("type"):
            logger.warning("Skipping malformed node: %r", _describe(data))
            return None
        node_type = str(data["type"])
        if node_type not in NODE_TYPES:
            logger.warning("Skipping node %s with unknown type '%s'", data.get("id"), node_type)
            return None

        children: Optional[List[Node]] = None
        if node_type in CONTAINER_TYPES:
            children = nodes_from_list(data.get("children"))

        content = dict(data.get("content") or {}) if isinstance(data.get("content"), dict) else {}
        if node_type == "tabs" and isinstance(content.get("items"), list):
            items = []
            for item in content["items"]:
                if not isinstance(item, dict):
                    continue
                item = dict(item)
                item["content"] = nodes_from_list(item.get("content"))
                items.append(item)
            content["items"] = items

        hover = data.get("hoverStyles")
        visibility = data.get("visibility")
        return cls(
            id=str(data["id"]),
            type=node_type,
            styles=ResponsiveStyles.from_dict(data.get("styles")),
            content=content,
            children=children,
            custom_name=data.get("customName"),
            hover_styles=ResponsiveStyles.from_dict(hover) if isinstance(hover, dict) else None,
            visibility={k: bool(v) for k, v in visibility.items()} if isinstance(visibility, dict) else None,
            custom_css=data.get("customCss"),
            locked=bool(data.get("locked", False)),
            animation=data.get("animation"),
            global_typography_id=data.get("globalTypographyId"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"id": self.id, "type": self.type, "styles": self.styles.to_dict()}
        if self.children is not None:
            out["children"] = [c.to_dict() for c in self.children]
        else:
            content = dict(self.content)
            if self.type == "tabs" and isinstance(content.get("items"), list):
                content["items"] = [
                    {**item, "content": [n.to_dict() for n in item.get("content") or []]}
                    for item in content["items"]
                ]
            out["content"] = content
        optional = {
            "customName": self.custom_name,
            "hoverStyles": self.hover_styles.to_dict() if self.hover_styles is not None else None,
            "visibility": dict(self.visibility) if self.visibility is not None else None,
            "customCss": self.custom_css,
            "animation": self.animation,
            "globalTypographyId": self.global_typography_id,
        }
        out.update({k: v for k, v in optional.items() if v is not None})
        if self.locked:
            out["locked"] = True
        return out


def nodes_from_list(data: Any) -> List[Node]:
    """Parse a JSON list of nodes, dropping malformed entries."""
    if not isinstance(data, list):
        return []
    nodes = []
    for item in data:
        node = Node.from_dict(item)
        if node is not None:
            nodes.append(node)
    return nodes


def _describe(data: Any) -> Any:
    if isinstance(data, dict):
        return {k: data.get(k) for k in ("id", "type")}
    return type(data).__name__


@dataclass
class Page:
    """A routable page and its ordered list of section nodes."""

    id: str
    name: str
    slug: str
    is_homepage: bool = False
    is_draft: bool = False
    password: Optional[str] = None
    hero_image_url: str = ""
    tagline: str = ""
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    og_image_url: Optional[str] = None
    custom_head_code: Optional[str] = None
    custom_body_code: Optional[str] = None
    children: List[Node] = field(default_factory=list)

    _FIELDS = {
        "id": "id",
        "name": "name",
        "slug": "slug",
        "is_homepage": "isHomepage",
        "is_draft": "isDraft",
        "password": "password",
        "hero_image_url": "heroImageUrl",
        "tagline": "tagline",
        "meta_title": "metaTitle",
        "meta_description": "metaDescription",
        "og_image_url": "ogImageUrl",
        "custom_head_code": "customHeadCode",
        "custom_body_code": "customBodyCode",
    }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Page":
        kwargs = {attr: data[key] for attr, key in cls._FIELDS.items() if key in data}
        kwargs.setdefault("id", "")
        kwargs.setdefault("name", "Untitled")
        kwargs.setdefault("slug", "")
        kwargs["is_homepage"] = bool(kwargs.get("is_homepage", False))
        kwargs["is_draft"] = bool(kwargs.get("is_draft", False))
        return cls(children=nodes_from_list(data.get("children")), **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        out = {}
        for attr, key in self._FIELDS.items():
            value = getattr(self, attr)
            if value is not None:
                out[key] = value
        out["children"] = [n.to_dict() for n in self.children]
        return out


@dataclass
class GlobalColor:
    id: str
    name: str
    value: str

    @property
    def variable_name(self) -> str:
        """CSS custom property name, e.g. ``--brand-blue``."""
        return "--" + "-".join(self.name.lower().split())


@dataclass
class GlobalTypography:
    id: str
    name: str
    styles: ResponsiveStyles = field(default_factory=ResponsiveStyles)


@dataclass
class Asset:
    id: str
    name: str
    url: str


@dataclass
class Document:
    """A complete editable site: header, footer, pages and global assets."""

    id: str
    name: str
    theme: str = "light"
    favicon_url: Optional[str] = None
    google_font: Optional[str] = None
    custom_cursor: Optional[str] = None
    custom_head_code: Optional[str] = None
    header: List[Node] = field(default_factory=list)
    footer: List[Node] = field(default_factory=list)
    palette: Dict[str, str] = field(default_factory=dict)
    global_colors: List[GlobalColor] = field(default_factory=list)
    global_typography: List[GlobalTypography] = field(default_factory=list)
    assets: List[Asset] = field(default_factory=list)
    pages: List[Page] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def find_page(self, page_id: Optional[str]) -> Optional[Page]:
        for page in self.pages:
            if page.id == page_id:
                return page
        return None

    def homepage(self) -> Optional[Page]:
        """Return the homepage, or the first page if none is flagged."""
        for page in self.pages:
            if page.is_homepage:
                return page
        return self.pages[0] if self.pages else None

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Document":
        from blockframe.core.migration import migrate_document_dict

        data = migrate_document_dict(data)
        global_styles = data.get("globalStyles") or {}
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            theme=data.get("theme") or "light",
            favicon_url=data.get("faviconUrl"),
            google_font=data.get("googleFont"),
            custom_cursor=data.get("customCursor"),
            custom_head_code=data.get("customHeadCode"),
            header=nodes_from_list(data.get("header")),
            footer=nodes_from_list(data.get("footer")),
            palette=dict(data.get("palette") or {}),
            global_colors=[
                GlobalColor(id=str(c.get("id", "")), name=str(c.get("name", "")), value=str(c.get("value", "")))
                for c in global_styles.get("colors") or []
                if isinstance(c, dict)
            ],
            global_typography=[
                GlobalTypography(
                    id=str(t.get("id", "")),
                    name=str(t.get("name", "")),
                    styles=ResponsiveStyles.from_dict(t.get("styles")),
                )
                for t in global_styles.get("typography") or []
                if isinstance(t, dict)
            ],
            assets=[
                Asset(id=str(a.get("id", "")), name=str(a.get("name", "")), url=str(a.get("url", "")))
                for a in data.get("assets") or []
                if isinstance(a, dict)
            ],
            pages=[Page.from_dict(p) for p in data.get("pages") or [] if isinstance(p, dict)],
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "theme": self.theme,
            "header": [n.to_dict() for n in self.header],
            "footer": [n.to_dict() for n in self.footer],
            "palette": dict(self.palette),
            "globalStyles": {
                "colors": [{"id": c.id, "name": c.name, "value": c.value} for c in self.global_colors],
                "typography": [
                    {"id": t.id, "name": t.name, "styles": t.styles.to_dict()} for t in self.global_typography
                ],
            },
            "assets": [{"id": a.id, "name": a.name, "url": a.url} for a in self.assets],
            "pages": [p.to_dict() for p in self.pages],
        }
        optional = {
            "faviconUrl": self.favicon_url,
            "googleFont": self.google_font,
            "customCursor": self.custom_cursor,
            "customHeadCode": self.custom_head_code,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        out.update({k: v for k, v in optional.items() if v is not None})
        return out
