from lsprotocol import types as lsp
from pygls.workspace import PositionCodec

from .. import AngularLanguageServer
from ..analyzers import node_text
from ..documents import Document
from ..indexing import ComponentIndex
from ..positions import DEFAULT_CODEC
from .helpers import TAG_NAME_KINDS, document_offset, fetch_document, find_node


def get_definition(ls: AngularLanguageServer, params: lsp.DefinitionParams):
    if not (document := fetch_document(ls, params)):
        return None

    return goto_definition(
        document, params.position, ls.component_index, ls.client_position_codec()
    )


def goto_definition(
    document: Document,
    position: lsp.Position,
    component_index: ComponentIndex,
    codec: PositionCodec = DEFAULT_CODEC,
) -> lsp.Location | None:
    if (offset := document_offset(document, position, codec)) is None:
        return None

    if (node := find_node(document.tree.root_node, offset, TAG_NAME_KINDS)) is None:
        return None

    if not (component := component_index.get(node_text(node, document.buffer))):
        return None

    return component.location
