from lsprotocol import types as lsp
from tree_sitter import Node

from .. import AngularLanguageServer
from ..analyzers import node_text
from ..indexing import ComponentIndex
from ..positions import TextBuffer
from .helpers import (
    ATTRIBUTE_NAME_KINDS,
    START_TAG_KINDS,
    TAG_NAME_KINDS,
    document_offset,
    fetch_document,
    find_node,
)

INPUT_TEMPLATE = '[{}]="$0"'
OUTPUT_TEMPLATE = '({})="$0"'


def completion(ls: AngularLanguageServer, params: lsp.CompletionParams):
    if not (document := fetch_document(ls, params)):
        return None

    codec = ls.client_position_codec()
    if (offset := document_offset(document, params.position, codec)) is None:
        return []

    return get_completions(
        document.tree.root_node, offset, document.buffer, ls.component_index
    )


def binding_items(names: tuple[str, ...], template: str) -> list[lsp.CompletionItem]:
    return [
        lsp.CompletionItem(
            label=name,
            kind=lsp.CompletionItemKind.Field,
            insert_text=template.format(name),
            insert_text_format=lsp.InsertTextFormat.Snippet,
        )
        for name in names
    ]


def get_completions(
    root: Node,
    offset: int,
    buffer: TextBuffer,
    component_index: ComponentIndex,
) -> list[lsp.CompletionItem]:
    if (start_tag := find_node(root, offset, START_TAG_KINDS)) is None:
        return []

    if find_node(start_tag, offset, TAG_NAME_KINDS) is not None:
        return [
            lsp.CompletionItem(
                label=component.selector, kind=lsp.CompletionItemKind.Keyword
            )
            for component in component_index
        ]

    if find_node(start_tag, offset, ATTRIBUTE_NAME_KINDS) is None:
        return []

    if (tag_name := start_tag.named_child(0)) is None:
        return []

    if not (component := component_index.get(node_text(tag_name, buffer))):
        return []

    return binding_items(component.inputs, INPUT_TEMPLATE) + binding_items(
        component.outputs, OUTPUT_TEMPLATE
    )
