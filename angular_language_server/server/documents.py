from dataclasses import dataclass, field
from threading import Lock

from tree_sitter import Tree

from .analyzers import TemplateParser
from .positions import TextBuffer


@dataclass(frozen=True)
class Document:
    uri: str
    buffer: TextBuffer
    tree: Tree

    @property
    def text(self) -> str:
        return self.buffer.text


@dataclass
class DocumentStore:
    """Open templates keyed by uri.

    A change builds a whole new ``Document`` and swaps it in with a single
    assignment, so a reader never pairs one edit's text with another's tree.
    """

    parser: TemplateParser = field(default_factory=TemplateParser)
    _documents: dict[str, Document] = field(default_factory=dict)
    _lock: Lock = field(default_factory=Lock)

    def on_change(self, uri: str, text: str) -> Document:
        buffer = TextBuffer(text)
        document = Document(uri, buffer, self.parser.parse(buffer))

        with self._lock:
            self._documents[uri] = document

        return document

    def get(self, uri: str) -> Document | None:
        with self._lock:
            return self._documents.get(uri)

    def remove(self, uri: str) -> Document | None:
        with self._lock:
            return self._documents.pop(uri, None)

    def __contains__(self, uri: str):
        return self.get(uri) is not None

    def __len__(self):
        with self._lock:
            return len(self._documents)
