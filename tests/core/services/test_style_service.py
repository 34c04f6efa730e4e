import pytest

from blockframe.core import tree
from blockframe.core.models import ResponsiveStyles
from blockframe.core.services.style_service import StyleService, generate_rule


@pytest.fixture
def service(editor_config):
    return StyleService(editor_config)


def _home(document):
    return document.pages[0]


class TestGenerateRule:
    def test_kebab_case_and_order(self):
        rule = generate_rule(".x", {"backgroundColor": "red", "fontSize": "12px"})
        assert rule == ".x { background-color: red; font-size: 12px; }"

    def test_empty_values_omitted(self):
        assert generate_rule(".x", {"color": "", "margin": None, "padding": "1rem"}) == ".x { padding: 1rem; }"

    def test_nothing_set_yields_empty_string(self):
        assert generate_rule(".x", {}) == ""
        assert generate_rule(".x", {"color": ""}) == ""


class TestCompile:
    def test_color_variables_block(self, service, document):
        css = service.compile(document, _home(document))
        assert css.startswith(":root { --brand-blue: #0055ff; }\n")

    def test_custom_css_placeholder_is_scoped(self, service, document):
        document.global_colors = []
        node = tree.find_by_id(_home(document).children, "txt-1")
        node.id = "abc"
        node.custom_css = "selector { color: red; }"

        css = service.compile(document, _home(document))

        assert css == '[data-node-id="abc"] { color: red; }\n'

    def test_placeholder_only_replaced_as_whole_word(self, service, document):
        document.global_colors = []
        node = tree.find_by_id(_home(document).children, "txt-1")
        node.custom_css = "selector .selectors { color: red; }"
        css = service.compile(document, _home(document))
        assert '[data-node-id="txt-1"] .selectors' in css

    def test_hover_rules_grouped_by_breakpoint(self, service, document):
        document.global_colors = []
        roots = _home(document).children
        tree.find_by_id(roots, "txt-1").hover_styles = ResponsiveStyles(
            desktop={"color": "red"}, tablet={"color": "blue"})
        tree.find_by_id(roots, "btn-1").hover_styles = ResponsiveStyles(
            tablet={"backgroundColor": "black"}, mobile={"opacity": 0.5})

        css = service.compile(document, _home(document))

        assert css.startswith('[data-node-id="txt-1"]:hover { color: red; }')
        assert css.count("@media (max-width: 768px)") == 1
        assert css.count("@media (max-width: 480px)") == 1
        tablet_block = css.split("@media (max-width: 768px)")[1].split("@media")[0]
        assert '[data-node-id="txt-1"]:hover { color: blue; }' in tablet_block
        assert '[data-node-id="btn-1"]:hover { background-color: black; }' in tablet_block
        assert css.index("768px") < css.index("480px")

    def test_header_page_footer_order(self, service, document):
        document.global_colors = []
        tree.find_by_id(document.header, "logo").custom_css = "selector { top: 0; }"
        tree.find_by_id(_home(document).children, "btn-1").custom_css = "selector { left: 0; }"
        css = service.compile(document, _home(document))
        assert css.index('"logo"') < css.index('"btn-1"')

    def test_only_active_page_is_compiled(self, service, document):
        tree.find_by_id(document.pages[1].children, "col-c").custom_css = "selector { color: red; }"
        assert "col-c" not in service.compile(document, _home(document))
        assert "col-c" in service.compile(document, document.pages[1])

    def test_malformed_node_is_skipped(self, service, document):
        roots = _home(document).children
        tree.find_by_id(roots, "txt-1").hover_styles = {"desktop": {"color": "red"}}
        tree.find_by_id(roots, "btn-1").custom_css = "selector { color: green; }"
        css = service.compile(document, _home(document))
        assert "txt-1" not in css
        assert '[data-node-id="btn-1"] { color: green; }' in css

    def test_compile_is_idempotent(self, service, document):
        tree.find_by_id(_home(document).children, "txt-1").hover_styles = ResponsiveStyles(mobile={"color": "red"})
        assert service.compile(document, _home(document)) == service.compile(document, _home(document))

    def test_no_document(self, service):
        assert service.compile(None, None) == ""
        assert service.resolve(None, None) == ""


class TestResolve:
    def test_cached_until_inputs_change(self, service, document, monkeypatch):
        calls = []
        original = service.compile

        def counting(doc, page):
            calls.append(page.id)
            return original(doc, page)

        monkeypatch.setattr(service, "compile", counting)
        first = service.resolve(document, _home(document))
        assert service.resolve(document, _home(document)) == first
        assert calls == ["page-home"]

        service.resolve(document, document.pages[1])
        assert calls == ["page-home", "page-about"]


def test_custom_thresholds_from_config(document):
    service = StyleService({"breakpoints": {"tablet": 900, "mobile": 400}})
    tree.find_by_id(_home(document).children, "txt-1").hover_styles = ResponsiveStyles(mobile={"color": "red"})
    css = service.compile(document, _home(document))
    assert "@media (max-width: 400px)" in css
