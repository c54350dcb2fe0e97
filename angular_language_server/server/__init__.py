import logging
import os
from pathlib import Path
from threading import Event, Thread
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer
from pygls.workspace import PositionCodec

from .analyzers import AnalyzerConfig, AnalyzerError, ComponentAnalyzer
from .documents import DocumentStore
from .indexing import ComponentIndex


class AngularLanguageServer(LanguageServer):
    component_index: ComponentIndex
    documents: DocumentStore
    analyzer_config: AnalyzerConfig
    analyzer: ComponentAnalyzer | None = None
    root: Path | None = None
    scan_finished: Event
    _scan_thread: Thread | None = None
    _scan_stop: Event

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.component_index = ComponentIndex()
        self.documents = DocumentStore()
        self.analyzer_config = AnalyzerConfig()
        self.scan_finished = Event()
        self._scan_stop = Event()

    def set_config(self, config: AnalyzerConfig):
        self.analyzer_config = config

    def client_log(self, message: str, message_type=lsp.MessageType.Info):
        self.window_log_message(lsp.LogMessageParams(type=message_type, message=message))

    def client_message(self, message: str, message_type=lsp.MessageType.Info):
        self.window_show_message(lsp.ShowMessageParams(type=message_type, message=message))

    def workspace_root(self) -> Path | None:
        for folder in self.workspace.folders.values():
            return self.uri_to_path(folder.uri)

        if self.workspace.root_path:
            return Path(self.workspace.root_path)

        return None

    def client_position_codec(self) -> PositionCodec:
        return self.workspace.position_codec

    def create_analyzer(self) -> ComponentAnalyzer | None:
        try:
            return ComponentAnalyzer(self.analyzer_config, self.client_position_codec())
        except AnalyzerError as exc:
            logging.error(f"Error building analyzer: {exc}")
            self.client_message(
                f"Failed to start component analysis, tag completions will be disabled\n{exc}",
                lsp.MessageType.Error,
            )
            return None

    def setup_workspace(self):
        if not (root := self.workspace_root()):
            logging.info("No workspace root, skipping component scan")
            self.scan_finished.set()
            return

        if not (analyzer := self.create_analyzer()):
            self.scan_finished.set()
            return

        self.root = root
        self.analyzer = analyzer
        self._scan_thread = Thread(
            target=self.scan_workspace,
            args=[analyzer, root],
            name="component-scan",
            daemon=True,
        )
        self._scan_thread.start()

    def scan_workspace(self, analyzer: ComponentAnalyzer, root: Path):
        logging.info("Started workspace scan")
        try:
            count = analyzer.analyze_workspace(root, self.component_index, self._scan_stop)
            logging.info(f"Workspace scan finished, {count} components indexed")
        except Exception as exc:
            logging.error(f"Fatal error occured while scanning {root}: {exc}")
        finally:
            self.scan_finished.set()

    def reanalyze(self, uri: str):
        if self.analyzer is None or self.root is None:
            return

        path = self.uri_to_path(uri)
        if not self.analyzer.handles(path, self.root):
            logging.debug(f"Ignoring watched file {path}")
            return

        self.analyzer.analyze_file(path, self.component_index)

    def uri_to_path(self, uri: str):
        parsed = urlparse(uri)
        host = "{0}{0}{mnt}{0}".format(os.path.sep, mnt=parsed.netloc)
        norm_path = os.path.normpath(
            os.path.join(host, url2pathname(unquote(parsed.path)))
        )
        return Path(norm_path)

    def _kill(self):
        self._scan_stop.set()

    def shutdown(self):
        self._kill()
        super().shutdown()
