from lsprotocol import types as lsp

from .server import AngularLanguageServer

__version__ = "0.1.0"

angular_server = AngularLanguageServer(
    "angular-language-server",
    __version__,
    text_document_sync_kind=lsp.TextDocumentSyncKind.Full,
)
