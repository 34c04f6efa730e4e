from unittest.mock import Mock

import pytest

from blockframe.core.exceptions import DocumentNotFoundError, StorageError
from blockframe.core.services.suggestion_service import SuggestionService
from blockframe.core.session import EditorSession
from blockframe.core.storage import JsonFileStore


@pytest.fixture
def store(tmp_path, document):
    store = JsonFileStore(tmp_path)
    store.save(document)
    return store


def test_open_loads_document_clean(store):
    session = EditorSession.open(store, "doc-1")
    assert session.document.name == "Bakery"
    assert not session.is_dirty
    assert session.editing.active_page.id == "page-home"


def test_open_missing_document_raises(tmp_path):
    with pytest.raises(DocumentNotFoundError):
        EditorSession.open(JsonFileStore(tmp_path), "ghost")


def test_edit_makes_dirty_and_save_clears(store):
    session = EditorSession.open(store, "doc-1")
    session.editing.update_content("txt-1", {"text": "Changed"})
    assert session.is_dirty

    res = session.save()

    assert res.success
    assert not session.is_dirty
    saved = store.load("doc-1")
    assert saved.updated_at == session.last_saved_at
    assert len(session.history.entries) == 2


def test_undo_back_to_saved_state_is_clean(store):
    session = EditorSession.open(store, "doc-1")
    session.editing.rename_node("txt-1", "Intro")
    assert session.undo()
    assert not session.is_dirty
    assert session.redo()
    assert session.is_dirty


def test_failed_save_stays_dirty_and_keeps_history(document):
    store = Mock()
    store.save.side_effect = StorageError("disk full", document_id="doc-1")
    session = EditorSession(store, document)
    session.editing.update_content("txt-1", {"text": "Changed"})
    current = session.document

    res = session.save()

    assert not res.success
    assert "disk full" in res.message
    assert session.is_dirty
    assert session.document is current
    assert session.history.index == 1


def test_new_session_is_dirty_until_saved(tmp_path):
    store = JsonFileStore(tmp_path)
    session = EditorSession.new(store, "Fresh Site")
    assert session.is_dirty
    assert session.save().success
    assert store.load(session.document.id).name == "Fresh Site"


def test_stylesheet_follows_active_page(store):
    session = EditorSession.open(store, "doc-1")
    session.editing.set_custom_css("txt-1", "selector { color: red; }")
    assert '[data-node-id="txt-1"] { color: red; }' in session.stylesheet()
    session.editing.select_page("page-about")
    assert "txt-1" not in session.stylesheet()


def test_generated_tabs_content_can_be_saved(store):
    session = EditorSession.open(store, "doc-1")
    suggester = Mock()
    suggester.generate_section.return_value = [[{"type": "tabs", "content": {"items": [
        {"id": "t1", "title": "T", "content": [{"type": "text", "content": {"text": "Inside a tab"}}]},
    ]}}]]
    service = SuggestionService(session.editing, suggester, {})

    assert service.generate_section_content("sec-1").success
    tabs = session.editing.find_node("col-a").children[0]
    nested = tabs.content["items"][0]["content"][0]
    assert session.editing.find_node(nested.id) is nested

    assert session.save().success
    reloaded = store.load("doc-1").pages[0].children[0].children[0].children[0].children[0]
    assert reloaded.content["items"][0]["content"][0].content == {"text": "Inside a tab"}
