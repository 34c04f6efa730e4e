from __future__ import annotations

"""Simple reusable helper functions.

These helpers are side-effect-free and contain no I/O; they can be used
across all layers of the editor core.
"""

import re
import uuid
from typing import Optional

__all__ = [
    "generate_node_id",
    "slugify",
    "camel_to_kebab",
    "format_percentage",
    "unique_slug",
]


def generate_node_id() -> str:
    """Generate a globally unique identifier for a tree node or list item."""
    return str(uuid.uuid4())


def slugify(text: str) -> str:
    """Return a URL-safe slug version of *text*.

    Removes non-alphanumeric chars, converts whitespace/underscores to dashes,
    and lower-cases the result.
    """
    text = re.sub(r"[^\w\s-]", "", text or "").strip().lower()
    return re.sub(r"[-\s_]+", "-", text).strip("-")


def unique_slug(base: str, taken: set[str]) -> str:
    """Return *base* or the first ``base-N`` variant not present in *taken*."""
    slug = slugify(base) or "page"
    if slug not in taken:
        return slug
    n = 2
    while f"{slug}-{n}" in taken:
        n += 1
    return f"{slug}-{n}"


def camel_to_kebab(name: str) -> str:
    """Convert a camel-cased style property (``fontSize``) to CSS (``font-size``)."""
    return re.sub(r"[A-Z]", lambda m: "-" + m.group(0).lower(), name)


def format_percentage(value: float, precision: Optional[int] = 2) -> str:
    """Format *value* as a CSS percentage rounded to *precision* decimals.

    Trailing zeros are dropped so whole shares stay readable:

    >>> format_percentage(100 / 3)
    '33.33%'
    >>> format_percentage(50.0)
    '50%'
    """
    if precision is not None:
        value = round(value, precision)
    text = f"{value:.{precision if precision is not None else 6}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text or '0'}%"
