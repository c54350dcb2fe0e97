import pytest
from lsprotocol import types as lsp

from ..server.documents import DocumentStore
from ..server.features.completion import get_completions
from ..server.indexing import ComponentIndex
from .test_indexing import make_component


@pytest.fixture
def populated_index():
    component_index = ComponentIndex()
    component_index.insert(
        make_component("app-foo", inputs=("value",), outputs=("changed",))
    )
    component_index.insert(make_component("app-bar", "BarComponent"))
    return component_index


def complete(store: DocumentStore, component_index: ComponentIndex, text: str, offset: int):
    document = store.on_change("file:///t.html", text)
    return get_completions(document.tree.root_node, offset, document.buffer, component_index)


def test_tag_name_lists_selectors(store: DocumentStore, populated_index: ComponentIndex):
    items = complete(store, populated_index, "<app-f></app-f>", 6)

    assert sorted(item.label for item in items) == ["app-bar", "app-foo"]
    assert all(item.kind == lsp.CompletionItemKind.Keyword for item in items)
    assert all(item.insert_text is None for item in items)


def test_tag_name_with_empty_index(store: DocumentStore):
    assert complete(store, ComponentIndex(), "<app-f></app-f>", 6) == []


def test_attribute_name_lists_bindings(store: DocumentStore, populated_index: ComponentIndex):
    items = complete(store, populated_index, "<app-foo val></app-foo>", 12)

    assert [item.label for item in items] == ["value", "changed"]
    assert [item.insert_text for item in items] == ['[value]="$0"', '(changed)="$0"']
    assert all(item.insert_text_format == lsp.InsertTextFormat.Snippet for item in items)
    assert all(item.kind == lsp.CompletionItemKind.Field for item in items)


def test_attribute_in_self_closing_tag(store: DocumentStore, populated_index: ComponentIndex):
    items = complete(store, populated_index, "<app-foo ch />", 11)

    assert [item.label for item in items] == ["value", "changed"]


def test_unclosed_element(store: DocumentStore, populated_index: ComponentIndex):
    items = complete(store, populated_index, "<app-foo val>", 12)

    assert [item.insert_text for item in items] == ['[value]="$0"', '(changed)="$0"']


def test_no_attribute_yet(store: DocumentStore, populated_index: ComponentIndex):
    assert complete(store, populated_index, "<app-foo ></app-foo>", 9) == []


def test_unknown_component(store: DocumentStore, populated_index: ComponentIndex):
    assert complete(store, populated_index, "<app-baz val></app-baz>", 12) == []


def test_component_without_bindings(store: DocumentStore, populated_index: ComponentIndex):
    assert complete(store, populated_index, "<app-bar val></app-bar>", 12) == []


def test_outside_any_tag(store: DocumentStore, populated_index: ComponentIndex):
    assert complete(store, populated_index, "<div>hello</div>", 7) == []
    assert complete(store, populated_index, "", 0) == []


def test_attribute_without_closing_bracket(store: DocumentStore, populated_index: ComponentIndex):
    items = complete(store, populated_index, "<app-foo val", 12)

    assert [item.label for item in items] == ["value", "changed"]
    assert items[0].insert_text == '[value]="$0"'


def test_trailing_space_without_attribute(store: DocumentStore, populated_index: ComponentIndex):
    assert complete(store, populated_index, "<app-foo ", 9) == []


def test_partial_tag_name(store: DocumentStore, populated_index: ComponentIndex):
    items = complete(store, populated_index, "<app-f", 6)

    assert sorted(item.label for item in items) == ["app-bar", "app-foo"]
