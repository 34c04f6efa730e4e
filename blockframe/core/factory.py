from __future__ import annotations

"""Canonical starting nodes, section templates and blank documents.

:func:`create_default_node` is the single source of truth for what a
brand-new node of a given kind looks like. Every entry of
:data:`~blockframe.core.models.content.NODE_TYPES` must have a builder in
``_CONTENT_BUILDERS`` (or be a container); this is checked at import time.
"""

import copy
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from blockframe.core.models import BREAKPOINTS, Document, Node, Page
from blockframe.core.models.content import CONTAINER_TYPES, ELEMENT_TYPES, ITEM_LIST_KEYS, ElementContent
from blockframe.core.utils import generate_node_id

__all__ = [
    "create_default_node",
    "create_default_section",
    "build_node",
    "build_tab_items",
    "instantiate_template",
    "SECTION_TEMPLATES",
    "new_document",
]

_PLACEHOLDER_IMAGE = (
    "https://images.unsplash.com/photo-1554629947-334ff61d85dc?q=80&w=2072&auto=format&fit=crop"
)


def _full_visibility() -> Dict[str, bool]:
    return {bp: True for bp in BREAKPOINTS}


_CONTENT_BUILDERS: Dict[str, Callable[[], ElementContent]] = {
    "headline": lambda: {"text": "New Headline", "level": "h2"},
    "text": lambda: {"text": "New paragraph of text. Click here to edit."},
    "image": lambda: {"src": _PLACEHOLDER_IMAGE, "alt": "Mountain landscape"},
    "button": lambda: {"text": "Click Me", "href": "#"},
    "spacer": lambda: {},
    "icon": lambda: {"name": "star"},
    "video": lambda: {
        "src": "https://www.youtube.com/embed/dQw4w9WgXcQ",
        "autoplay": False,
        "loop": False,
        "muted": False,
        "controls": True,
    },
    "form": lambda: {
        "buttonText": "Submit",
        "fields": [
            {"id": generate_node_id(), "type": "text", "label": "Name", "placeholder": "Your name", "required": True},
            {"id": generate_node_id(), "type": "email", "label": "Email", "placeholder": "you@example.com", "required": True},
            {"id": generate_node_id(), "type": "textarea", "label": "Message", "placeholder": "", "required": False},
        ],
    },
    "embed": lambda: {"html": "<p>Paste your embed code here.</p>"},
    "navigation": lambda: {"links": []},
    "gallery": lambda: {
        "images": [
            {"src": _PLACEHOLDER_IMAGE, "alt": "Gallery image 1"},
            {"src": _PLACEHOLDER_IMAGE, "alt": "Gallery image 2"},
            {"src": _PLACEHOLDER_IMAGE, "alt": "Gallery image 3"},
        ]
    },
    "divider": lambda: {},
    "map": lambda: {"embedUrl": "https://maps.google.com/maps?q=London&output=embed"},
    "accordion": lambda: {
        "items": [
            {"id": generate_node_id(), "title": "Accordion Item 1", "content": "Content for the first item."},
            {"id": generate_node_id(), "title": "Accordion Item 2", "content": "Content for the second item."},
        ]
    },
    "tabs": lambda: {
        "items": [
            {"id": generate_node_id(), "title": "Tab 1", "content": []},
            {"id": generate_node_id(), "title": "Tab 2", "content": []},
        ]
    },
    "socialIcons": lambda: {
        "networks": [
            {"id": generate_node_id(), "network": "facebook", "url": "https://facebook.com"},
            {"id": generate_node_id(), "network": "twitter", "url": "https://twitter.com"},
            {"id": generate_node_id(), "network": "instagram", "url": "https://instagram.com"},
        ]
    },
}

_missing = set(ELEMENT_TYPES) - set(_CONTENT_BUILDERS)
if _missing:
    raise RuntimeError(f"Default-node factory is missing element kinds: {sorted(_missing)}")


def create_default_node(node_type: str) -> Optional[Node]:
    """Return a fresh node of *node_type* with placeholder content.

    Containers start with an empty child list; elements get the placeholder
    content from ``_CONTENT_BUILDERS``. Returns None for unknown kinds.
    """
    if node_type in CONTAINER_TYPES:
        return Node(id=generate_node_id(), type=node_type, children=[], visibility=_full_visibility())
    builder = _CONTENT_BUILDERS.get(node_type)
    if builder is None:
        return None
    return Node(id=generate_node_id(), type=node_type, content=builder(), visibility=_full_visibility())


def create_default_section() -> Node:
    """Return a section holding one row with a single full-width column."""
    column = create_default_node("column")
    column.styles.desktop["flexBasis"] = "100%"
    row = create_default_node("row")
    row.children.append(column)
    section = create_default_node("section")
    section.styles.desktop.update({"paddingTop": "2rem", "paddingBottom": "2rem"})
    section.children.append(row)
    return section


def build_node(blueprint: Dict[str, Any]) -> Optional[Node]:
    """Build a node from a partial description, giving every node a fresh id.

    *blueprint* needs only ``type``; ``content``, ``styles`` and ``children`` are
    optional and layered on top of the kind's defaults. Item lists (form
    fields, tab items...) get fresh item ids, and the panes of ``tabs`` items
    are built recursively like children.
    """
    node = create_default_node(str(blueprint.get("type", "")))
    if node is None:
        return None
    if isinstance(blueprint.get("content"), dict) and not node.is_container:
        node.content.update(copy.deepcopy(blueprint["content"]))
        key = ITEM_LIST_KEYS.get(node.type)
        if node.type == "tabs":
            node.content["items"] = build_tab_items(node.content.get("items"), keep_ids=False)
        elif key is not None and isinstance(node.content.get(key), list):
            node.content[key] = [
                {**item, "id": generate_node_id()} for item in node.content[key] if isinstance(item, dict)
            ]
    node.styles.merge(blueprint.get("styles") or {})
    if node.children is not None:
        for child_blueprint in blueprint.get("children") or []:
            child = build_node(child_blueprint)
            if child is not None:
                node.children.append(child)
    return node


def build_tab_items(items: Any, keep_ids: bool = True) -> List[Dict[str, Any]]:
    """Normalize the ``items`` of a ``tabs`` element.

    Pane entries may be :class:`Node` objects, serialized nodes or
    blueprints; every pane ends up holding element nodes only. Items
    without an id get one. With ``keep_ids=False`` every item and pane node
    gets a fresh id, as :func:`build_node` promises.
    """
    normalized: List[Dict[str, Any]] = []
    for item in items if isinstance(items, list) else []:
        if not isinstance(item, dict):
            continue
        item = dict(item)
        if not keep_ids or not item.get("id"):
            item["id"] = generate_node_id()
        pane: List[Node] = []
        for entry in item.get("content") if isinstance(item.get("content"), list) else []:
            if isinstance(entry, Node):
                entry = copy.deepcopy(entry) if keep_ids else entry.to_dict()
            if isinstance(entry, dict):
                entry = Node.from_dict(entry) if keep_ids and entry.get("id") else build_node(entry)
            if isinstance(entry, Node) and entry.type in ELEMENT_TYPES:
                pane.append(entry)
        item["content"] = pane
        normalized.append(item)
    return normalized


SECTION_TEMPLATES: Dict[str, Dict[str, Any]] = {
    "Hero Left": {
        "description": "Headline, text, and a CTA button aligned to the left.",
        "structure": {"type": "section", "children": [{"type": "row", "children": [
            {"type": "column", "styles": {"desktop": {"flexBasis": "50%", "justifyContent": "center"}}, "children": [
                {"type": "headline", "content": {"level": "h1", "text": "Powerful Headline"}},
                {"type": "text", "content": {"text": "Sub-heading to support the main headline and provide more context."}},
                {"type": "button", "content": {"text": "Call to Action", "href": "#"}},
            ]},
            {"type": "column", "styles": {"desktop": {"flexBasis": "50%"}}, "children": [
                {"type": "image", "content": {"src": _PLACEHOLDER_IMAGE, "alt": "Team working"}},
            ]},
        ]}]},
    },
    "Features (3 Col)": {
        "description": "Three columns with icons, headlines, and text.",
        "structure": {"type": "section", "children": [{"type": "row", "children": [
            {"type": "column", "styles": {"desktop": {"flexBasis": "33.33%", "textAlign": "center"}}, "children": [
                {"type": "icon", "content": {"name": icon}},
                {"type": "headline", "content": {"level": "h3", "text": title}},
                {"type": "text", "content": {"text": "Describe the feature in a few sentences."}},
            ]}
            for icon, title in (("star", "Feature One"), ("check", "Feature Two"), ("heart", "Feature Three"))
        ]}]},
    },
    "Call to Action": {
        "description": "A centered headline, text, and button to encourage action.",
        "structure": {"type": "section", "children": [{"type": "row", "children": [
            {"type": "column", "styles": {"desktop": {"textAlign": "center", "alignItems": "center"}}, "children": [
                {"type": "headline", "content": {"level": "h2", "text": "Ready to Get Started?"}},
                {"type": "text", "content": {"text": "Take the next step and see how we can help you achieve your goals."}},
                {"type": "button", "content": {"text": "Sign Up Now", "href": "#"}},
            ]},
        ]}]},
    },
}


def instantiate_template(name: str) -> Optional[Node]:
    """Build a fresh section from the named entry of :data:`SECTION_TEMPLATES`."""
    template = SECTION_TEMPLATES.get(name)
    if template is None:
        return None
    return build_node(template["structure"])


def new_document(name: str, document_id: Optional[str] = None) -> Document:
    """Return a blank site with a single homepage and a welcome section."""
    section = create_default_section()
    column = section.children[0].children[0]
    column.styles.desktop.pop("flexBasis", None)
    welcome = create_default_node("headline")
    welcome.content = {"level": "h2", "text": "Welcome to Your New Website"}
    welcome.styles.desktop["textAlign"] = "center"
    intro = create_default_node("text")
    intro.content = {
        "text": "This is your first section. You can edit this text, change the layout, "
                "and add more content using the editor."
    }
    column.children.extend([welcome, intro])

    home = Page(
        id=generate_node_id(),
        name="Home",
        slug="home",
        is_homepage=True,
        tagline="Your amazing tagline here!",
        meta_title=name,
        children=[section],
    )
    now = datetime.now(timezone.utc).isoformat()
    return Document(
        id=document_id or generate_node_id(),
        name=name,
        favicon_url="/favicon.ico",
        palette={"primary": "#4f46e5", "secondary": "#f1f5f9", "text": "#334155", "accent": "#0ea5e9"},
        pages=[home],
        created_at=now,
        updated_at=now,
    )
