import argparse
import logging

from lsprotocol import types as lsp

from . import angular_server
from .server import AngularLanguageServer
from .server.analyzers import AnalyzerConfig
from .server.features.completion import completion
from .server.features.definition import get_definition


@angular_server.feature(lsp.INITIALIZED)
def initialized(ls: AngularLanguageServer, params: lsp.InitializedParams):
    ls.setup_workspace()
    ls.client_log("initialized!")


@angular_server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: AngularLanguageServer, params: lsp.DidOpenTextDocumentParams):
    ls.client_log("file opened!")
    ls.documents.on_change(params.text_document.uri, params.text_document.text)


@angular_server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: AngularLanguageServer, params: lsp.DidChangeTextDocumentParams):
    ls.client_log("file changed!")
    if not params.content_changes:
        return

    # full sync, the last change carries the whole document
    ls.documents.on_change(params.text_document.uri, params.content_changes[-1].text)


@angular_server.feature(lsp.TEXT_DOCUMENT_DID_SAVE)
def did_save(ls: AngularLanguageServer, params: lsp.DidSaveTextDocumentParams):
    ls.client_log("file saved!")


@angular_server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: AngularLanguageServer, params: lsp.DidCloseTextDocumentParams):
    ls.documents.remove(params.text_document.uri)
    ls.client_log("file closed!")


@angular_server.feature(lsp.WORKSPACE_DID_CHANGE_WORKSPACE_FOLDERS)
def folders_changed(
    ls: AngularLanguageServer, params: lsp.DidChangeWorkspaceFoldersParams
):
    ls.client_log("workspace folders changed!")


@angular_server.feature(lsp.WORKSPACE_DID_CHANGE_WATCHED_FILES)
def watched_files_changed(
    ls: AngularLanguageServer, params: lsp.DidChangeWatchedFilesParams
):
    ls.client_log("watched: " + "|".join(change.uri for change in params.changes))

    for change in params.changes:
        if change.type == lsp.FileChangeType.Deleted:
            logging.debug(f"Ignoring deleted file {change.uri}")
            continue

        ls.reanalyze(change.uri)


@angular_server.feature(
    lsp.TEXT_DOCUMENT_COMPLETION, lsp.CompletionOptions(resolve_provider=False)
)
def get_completion(ls: AngularLanguageServer, params: lsp.CompletionParams):
    return completion(ls, params)


@angular_server.feature(lsp.TEXT_DOCUMENT_DEFINITION)
def definition(ls: AngularLanguageServer, params: lsp.DefinitionParams):
    return get_definition(ls, params)


@angular_server.command("angular.server.dumpIndex")
def dump(ls: AngularLanguageServer, *args):
    ls.client_log(ls.component_index.dump())


def add_arguments(parser: argparse.ArgumentParser):
    parser.description = "Angular template language server"

    parser.add_argument("--tcp", action="store_true", help="Use TCP server")
    parser.add_argument("--ws", action="store_true", help="Use WebSocket server")
    parser.add_argument("--host", default="127.0.0.1", help="Bind to this address")
    parser.add_argument("--port", type=int, default=2087, help="Bind to this port")
    parser.add_argument(
        "--log-file", default="angular-lsp.log", help="Write the server log here"
    )
    parser.add_argument(
        "--log-level",
        default="DEBUG",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Minimum level written to the log file",
    )
    parser.add_argument(
        "--source-dir",
        default="src",
        help="Directory under the workspace root that holds component sources",
    )
    parser.add_argument(
        "--source-ext",
        default="ts",
        help="Extension of component source files",
    )


def main():
    parser = argparse.ArgumentParser()
    add_arguments(parser)
    args = parser.parse_args()

    logging.basicConfig(
        filename=args.log_file,
        filemode="w",
        level=getattr(logging, args.log_level),
        format="%(levelname)s:%(filename)s:%(lineno)d:\t%(message)s",
    )
    logging.info("Starting Angular LS")

    angular_server.set_config(
        AnalyzerConfig(source_dir=args.source_dir, source_extension=args.source_ext)
    )

    if args.tcp:
        angular_server.start_tcp(args.host, args.port)
    elif args.ws:
        angular_server.start_ws(args.host, args.port)
    else:
        angular_server.start_io()

    angular_server._kill()


if __name__ == "__main__":
    main()
