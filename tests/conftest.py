"""Shared fixtures for the Blockframe editing core tests.

The fixtures build small documents by hand with readable ids so assertions
can address nodes directly, e.g. ``col-a`` and ``col-b`` are the two 50%
columns of ``row-1``.
"""

from pathlib import Path
import sys

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from blockframe.config import ConfigManager
from blockframe.core.models import Document, GlobalColor, Node, Page, ResponsiveStyles


EDITOR_CONFIG = {
    "breakpoints": {"tablet": 768, "mobile": 480},
    "node_selector": '[data-node-id="{id}"]',
    "css_placeholder": "selector",
    "column_width_precision": 2,
}


def make_leaf(node_id, node_type="text", text="Hello", **kwargs):
    content = {"text": text} if node_type in ("text", "headline", "button") else {}
    return Node(id=node_id, type=node_type, content=content, **kwargs)


def make_column(node_id, children=None, basis="50%"):
    return Node(
        id=node_id,
        type="column",
        styles=ResponsiveStyles(desktop={"flexBasis": basis}),
        children=list(children or []),
    )


def make_section(section_id, row_id, columns):
    row = Node(id=row_id, type="row", children=list(columns))
    return Node(id=section_id, type="section", children=[row])


def build_document():
    """Home page: sec-1 > row-1 > [col-a > [txt-1, head-1], col-b > [btn-1]]."""
    col_a = make_column("col-a", [make_leaf("txt-1"), make_leaf("head-1", "headline", "Title")])
    col_b = make_column("col-b", [make_leaf("btn-1", "button", "Go")])
    home = Page(id="page-home", name="Home", slug="home", is_homepage=True, tagline="Fresh bread daily",
                children=[make_section("sec-1", "row-1", [col_a, col_b])])
    about = Page(id="page-about", name="About", slug="about",
                 children=[make_section("sec-2", "row-2", [make_column("col-c", basis="100%")])])
    header = [make_section("hdr-sec", "hdr-row", [make_column("hdr-col", [make_leaf("logo", "headline", "Logo")],
                                                              basis="100%")])]
    return Document(
        id="doc-1",
        name="Bakery",
        header=header,
        pages=[home, about],
        global_colors=[GlobalColor(id="c1", name="Brand Blue", value="#0055ff")],
    )


@pytest.fixture
def document():
    return build_document()


@pytest.fixture
def roots(document):
    """The content tree of the home page (mutated in place by tree tests)."""
    return document.pages[0].children


@pytest.fixture
def editor_config():
    return dict(EDITOR_CONFIG)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user overrides out of the tests and reload config for each test."""
    monkeypatch.setenv("BLOCKFRAME_CONFIG_DIR", str(tmp_path / "user-config"))
    ConfigManager.reset()
    yield
    ConfigManager.reset()
