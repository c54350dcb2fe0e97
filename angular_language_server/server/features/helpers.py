from typing import Any, Iterable

from lsprotocol import types as lsp
from pygls.workspace import PositionCodec
from tree_sitter import Node

from .. import AngularLanguageServer
from ..documents import Document
from ..positions import DEFAULT_CODEC, position_to_byte_offset

START_TAG_KINDS = ["start_tag", "self_closing_tag"]
TAG_NAME_KINDS = ["tag_name"]
ATTRIBUTE_NAME_KINDS = ["attribute_name"]


def find_node(root: Node, offset: int, kinds: Iterable[str]) -> Node | None:
    """Descend from ``root`` towards ``offset`` and return the first node of one of ``kinds``.

    Spans are inclusive on both ends, so a cursor right after a tag name still
    counts as inside it. Once a containing node is picked the walk never
    backtracks to its siblings.
    """
    kinds = set(kinds)
    cursor = root.walk()

    while True:
        node = cursor.node
        if node.start_byte <= offset <= node.end_byte:
            if node.type in kinds:
                return node
            if not cursor.goto_first_child():
                return None
        elif not cursor.goto_next_sibling():
            return None


def fetch_document(ls: AngularLanguageServer, params: Any) -> Document | None:
    return ls.documents.get(params.text_document.uri)


def document_offset(
    document: Document, position: lsp.Position, codec: PositionCodec = DEFAULT_CODEC
) -> int | None:
    return position_to_byte_offset(document.buffer, position, codec)
