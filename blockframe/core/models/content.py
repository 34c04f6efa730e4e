from __future__ import annotations

"""Typed content payloads, one per leaf element kind.

The ``content`` field of a :class:`~blockframe.core.models.Node` is stored as
a plain dict so it can be shallow-merged by the tree library and serialized
without conversion. The TypedDicts below document the expected shape for
each element kind and are used as type hints by the default-node factory.
"""

from typing import Any, Dict, List, Literal, Tuple, TypedDict, Union

__all__ = [
    "ELEMENT_TYPES",
    "CONTAINER_TYPES",
    "NODE_TYPES",
    "ITEM_LIST_KEYS",
    "HeadlineContent",
    "TextContent",
    "ImageContent",
    "ButtonContent",
    "SpacerContent",
    "IconContent",
    "VideoContent",
    "FormField",
    "FormContent",
    "EmbedContent",
    "NavigationLink",
    "NavigationContent",
    "GalleryImage",
    "GalleryContent",
    "DividerContent",
    "MapContent",
    "AccordionItem",
    "AccordionContent",
    "TabItem",
    "TabsContent",
    "SocialNetwork",
    "SocialIconsContent",
    "ElementContent",
]

ELEMENT_TYPES: Tuple[str, ...] = (
    "headline",
    "text",
    "image",
    "button",
    "spacer",
    "icon",
    "video",
    "form",
    "embed",
    "navigation",
    "gallery",
    "divider",
    "map",
    "accordion",
    "tabs",
    "socialIcons",
)

CONTAINER_TYPES: Tuple[str, ...] = ("section", "row", "column")

NODE_TYPES: Tuple[str, ...] = CONTAINER_TYPES + ELEMENT_TYPES

# Content keys holding lists of identifier-bearing items, per element kind.
ITEM_LIST_KEYS: Dict[str, str] = {
    "form": "fields",
    "navigation": "links",
    "accordion": "items",
    "tabs": "items",
    "socialIcons": "networks",
}


class HeadlineContent(TypedDict):
    text: str
    level: Literal["h1", "h2", "h3", "h4", "h5", "h6"]


class TextContent(TypedDict):
    text: str


class ImageContent(TypedDict):
    src: str
    alt: str


class ButtonContent(TypedDict):
    text: str
    href: str


class SpacerContent(TypedDict):
    pass


class IconContent(TypedDict):
    name: str


class VideoContent(TypedDict, total=False):
    src: str
    autoplay: bool
    loop: bool
    muted: bool
    controls: bool


class FormField(TypedDict, total=False):
    id: str
    type: Literal["text", "email", "textarea", "checkbox", "select"]
    label: str
    placeholder: str
    required: bool
    options: List[str]


class FormContent(TypedDict):
    buttonText: str
    fields: List[FormField]


class EmbedContent(TypedDict):
    html: str


class NavigationLink(TypedDict):
    id: str
    label: str
    href: str


class NavigationContent(TypedDict, total=False):
    # Empty links means "generate from the document's pages" at render time.
    links: List[NavigationLink]


class GalleryImage(TypedDict):
    src: str
    alt: str


class GalleryContent(TypedDict):
    images: List[GalleryImage]


class DividerContent(TypedDict):
    pass


class MapContent(TypedDict):
    embedUrl: str


class AccordionItem(TypedDict):
    id: str
    title: str
    content: str


class AccordionContent(TypedDict):
    items: List[AccordionItem]


class TabItem(TypedDict):
    id: str
    title: str
    content: List[Any]  # nested leaf Nodes


class TabsContent(TypedDict):
    items: List[TabItem]


class SocialNetwork(TypedDict):
    id: str
    network: Literal["facebook", "twitter", "instagram", "linkedin", "youtube"]
    url: str


class SocialIconsContent(TypedDict):
    networks: List[SocialNetwork]


# Any element payload; the return type of the default-content builders.
ElementContent = Union[
    HeadlineContent,
    TextContent,
    ImageContent,
    ButtonContent,
    SpacerContent,
    IconContent,
    VideoContent,
    FormContent,
    EmbedContent,
    NavigationContent,
    GalleryContent,
    DividerContent,
    MapContent,
    AccordionContent,
    TabsContent,
    SocialIconsContent,
]
