import logging

from blockframe.core.models import Document, GlobalColor, Node, ResponsiveStyles


def _node_json(**extra):
    data = {"id": "n1", "type": "text", "styles": {"desktop": {"color": "red"}}, "content": {"text": "Hi"}}
    data.update(extra)
    return data


class TestResponsiveStyles:
    def test_from_dict_normalizes_missing_breakpoints(self):
        styles = ResponsiveStyles.from_dict({"desktop": {"color": "red"}})
        assert styles.to_dict() == {"desktop": {"color": "red"}, "tablet": {}, "mobile": {}}

    def test_from_dict_drops_non_scalar_values(self):
        styles = ResponsiveStyles.from_dict({"desktop": {"color": "red", "bad": {"nested": 1}}, "tablet": "oops"})
        assert styles.desktop == {"color": "red"}
        assert styles.tablet == {}

    def test_merge_is_per_breakpoint(self):
        styles = ResponsiveStyles(desktop={"color": "red", "margin": "0"}, tablet={"color": "blue"})
        styles.merge({"desktop": {"color": "green"}})
        assert styles.desktop == {"color": "green", "margin": "0"}
        assert styles.tablet == {"color": "blue"}
        assert not styles.is_empty()


class TestNode:
    def test_from_dict_reads_camel_case(self):
        node = Node.from_dict(_node_json(customName="Intro", customCss="selector { color: red; }", locked=True,
                                         hoverStyles={"desktop": {"color": "blue"}}))
        assert node.custom_name == "Intro"
        assert node.custom_css == "selector { color: red; }"
        assert node.locked is True
        assert node.hover_styles.desktop == {"color": "blue"}
        assert node.children is None

    def test_malformed_nodes_are_skipped(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert Node.from_dict({"type": "text"}) is None
            assert Node.from_dict({"id": "x"}) is None
            assert Node.from_dict({"id": "x", "type": "blink"}) is None
            assert Node.from_dict("text") is None
        assert "Skipping" in caplog.text

    def test_container_children_parsed_and_bad_children_dropped(self):
        node = Node.from_dict({"id": "c", "type": "column", "children": [_node_json(), {"type": "text"}]})
        assert [c.id for c in node.children] == ["n1"]

    def test_tabs_items_hold_nodes(self):
        node = Node.from_dict({
            "id": "t", "type": "tabs",
            "content": {"items": [{"id": "i1", "title": "One", "content": [_node_json()]}]},
        })
        [pane] = list(node.tab_panes())
        assert isinstance(pane[0], Node)
        assert node.to_dict()["content"]["items"][0]["content"][0]["id"] == "n1"

    def test_to_dict_round_trip_keeps_json_shape(self):
        data = _node_json(customName="Intro", visibility={"desktop": True, "tablet": True, "mobile": False})
        out = Node.from_dict(data).to_dict()
        assert out["customName"] == "Intro"
        assert out["visibility"]["mobile"] is False
        assert out["styles"] == {"desktop": {"color": "red"}, "tablet": {}, "mobile": {}}
        assert "locked" not in out
        assert "children" not in out

    def test_display_name_and_visibility_defaults(self):
        node = Node(id="x", type="image")
        assert node.display_name == "image"
        assert node.is_visible_on("mobile")


class TestDocument:
    def test_from_dict_reads_global_styles_and_pages(self):
        doc = Document.from_dict({
            "id": "d1",
            "name": "Site",
            "globalStyles": {"colors": [{"id": "c1", "name": "Brand Blue", "value": "#00f"}]},
            "pages": [
                {"id": "p1", "name": "Home", "slug": "home", "isHomepage": True, "children": []},
                {"id": "p2", "name": "About", "slug": "about", "children": []},
            ],
        })
        assert doc.global_colors[0].variable_name == "--brand-blue"
        assert doc.homepage().id == "p1"
        assert doc.find_page("p2").name == "About"
        assert doc.find_page("nope") is None

    def test_homepage_falls_back_to_first_page(self, document):
        for page in document.pages:
            page.is_homepage = False
        assert document.homepage().id == "page-home"

    def test_to_dict_from_dict_preserves_document(self, document):
        assert Document.from_dict(document.to_dict()) == document

    def test_global_color_variable_name(self):
        assert GlobalColor(id="c", name="  Soft  Sand ", value="#eee").variable_name == "--soft-sand"
