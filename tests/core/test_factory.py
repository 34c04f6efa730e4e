import pytest

from blockframe.core import tree
from blockframe.core.factory import (
    SECTION_TEMPLATES,
    build_node,
    create_default_node,
    create_default_section,
    instantiate_template,
    new_document,
)
from blockframe.core.models.content import ELEMENT_TYPES, ITEM_LIST_KEYS


@pytest.mark.parametrize("kind", sorted(ELEMENT_TYPES))
def test_default_elements_are_leaves(kind):
    node = create_default_node(kind)
    assert node.type == kind
    assert node.children is None
    assert node.visibility == {"desktop": True, "tablet": True, "mobile": True}


@pytest.mark.parametrize("kind", ["section", "row", "column"])
def test_default_containers_have_empty_children(kind):
    node = create_default_node(kind)
    assert node.children == []
    assert node.content == {}


def test_unknown_kind_returns_none():
    assert create_default_node("marquee") is None


def test_default_ids_are_unique():
    ids = {create_default_node("text").id for _ in range(50)}
    assert len(ids) == 50


def test_list_items_carry_fresh_ids():
    for kind, key in ITEM_LIST_KEYS.items():
        node = create_default_node(kind)
        items = node.content[key]
        assert all("id" in item for item in items), kind
        assert len({item["id"] for item in items}) == len(items)


def test_default_section_shape():
    section = create_default_section()
    assert section.styles.desktop == {"paddingTop": "2rem", "paddingBottom": "2rem"}
    [row] = section.children
    [column] = row.children
    assert row.type == "row"
    assert column.styles.desktop["flexBasis"] == "100%"
    assert column.children == []


def test_build_node_layers_content_on_defaults():
    node = build_node({"type": "headline", "content": {"text": "Hi"}, "styles": {"desktop": {"color": "red"}}})
    assert node.content == {"text": "Hi", "level": "h2"}
    assert node.styles.desktop == {"color": "red"}
    assert build_node({"type": "nope"}) is None


def test_build_node_builds_tab_panes():
    node = build_node({"type": "tabs", "content": {"items": [
        {"id": "t1", "title": "T", "content": [{"type": "text", "content": {"text": "Inside"}}, {"type": "row"}]},
        {"title": "Second"},
    ]}})

    first, second = node.content["items"]
    assert first["id"] != "t1"
    assert second["id"] and second["content"] == []
    assert [n.type for n in first["content"]] == ["text"]
    assert first["content"][0].content == {"text": "Inside"}
    assert tree.find_by_id([node], first["content"][0].id) is first["content"][0]


def test_build_node_regenerates_item_ids():
    node = build_node({"type": "form", "content": {"fields": [{"id": "f1", "label": "Name"}, "junk"]}})
    assert [f["label"] for f in node.content["fields"]] == ["Name"]
    assert node.content["fields"][0]["id"] != "f1"


@pytest.mark.parametrize("name", sorted(SECTION_TEMPLATES))
def test_templates_instantiate_with_unique_ids(name):
    first = instantiate_template(name)
    second = instantiate_template(name)
    assert first.type == "section"
    first_ids = [n.id for n in tree.iter_nodes([first])]
    second_ids = [n.id for n in tree.iter_nodes([second])]
    assert len(set(first_ids)) == len(first_ids)
    assert not set(first_ids) & set(second_ids)


def test_features_template_has_three_columns():
    section = instantiate_template("Features (3 Col)")
    assert [c.type for c in section.children[0].children] == ["column"] * 3


def test_unknown_template():
    assert instantiate_template("Pricing Table") is None


def test_new_document():
    doc = new_document("My Site", document_id="site-1")
    assert doc.id == "site-1"
    assert doc.name == "My Site"
    assert doc.header == [] and doc.footer == []
    [home] = doc.pages
    assert home.is_homepage
    assert home.slug == "home"
    texts = [n.content.get("text") for n in tree.iter_nodes(home.children) if n.type in ("headline", "text")]
    assert texts[0] == "Welcome to Your New Website"
    assert doc.created_at is not None
