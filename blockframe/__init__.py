"""Top-level package for the Blockframe page-builder editing core.

Front-ends (render surfaces, property inspectors, HTTP handlers) should only
depend on the public API exposed here rather than importing internal
modules directly.
"""

from .core.models import Document, Node, Page  # re-export for convenience
from .core.session import EditorSession

__all__: list[str] = [
    "Document",
    "EditorSession",
    "Node",
    "Page",
]
