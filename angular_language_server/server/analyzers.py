import logging
from dataclasses import dataclass
from pathlib import Path
from threading import Event
from typing import Iterator

import tree_sitter_html as tshtml
import tree_sitter_typescript as tstypescript
from lsprotocol import types as lsp
from pygls.workspace import PositionCodec
from tree_sitter import Language, Node, Parser, Query, QueryCursor, QueryError, Tree

from .indexing import Component, ComponentIndex
from .positions import DEFAULT_CODEC, TextBuffer, offset_to_position

COMPONENT_DECORATOR = "Component"
INPUT_MARKER = "Input"
OUTPUT_MARKER = "Output"

FIND_COMPONENT_QUERY = f"""
(export_statement
  decorator: (decorator
    (call_expression
      function: (identifier) @dec-name
      arguments: (arguments
        (object (pair
          key: (property_identifier) @prop-name
          value: (string (string_fragment) @selector))))))
  declaration: (class_declaration name: (type_identifier) @class-name) @declaration
  (#eq? @dec-name "{COMPONENT_DECORATOR}")
  (#eq? @prop-name "selector"))

(class_declaration
  (decorator
    (call_expression
      function: (identifier) @dec-name
      arguments: (arguments
        (object (pair
          key: (property_identifier) @prop-name
          value: (string (string_fragment) @selector))))))
  name: (type_identifier) @class-name
  (#eq? @dec-name "{COMPONENT_DECORATOR}")
  (#eq? @prop-name "selector")) @declaration
"""

INOUT_QUERY = f"""
(public_field_definition
  (decorator (call_expression function: (identifier) @marker))
  name: (property_identifier) @member
  (#match? @marker "^({INPUT_MARKER}|{OUTPUT_MARKER})$"))

(
  (decorator (call_expression function: (identifier) @marker))
  .
  (method_definition name: (property_identifier) @member)
  (#match? @marker "^({INPUT_MARKER}|{OUTPUT_MARKER})$")
)
"""


class AnalyzerError(Exception):
    pass


@dataclass
class AnalyzerConfig:
    source_dir: str = "src"
    source_extension: str = "ts"

    @property
    def pattern(self) -> str:
        return f"**/*.{self.source_extension}"


def node_text(node: Node, buffer: TextBuffer) -> str:
    return buffer.slice_bytes(node.start_byte, node.end_byte)


def node_to_range(
    node: Node, buffer: TextBuffer, codec: PositionCodec = DEFAULT_CODEC
) -> lsp.Range:
    return lsp.Range(
        start=offset_to_position(buffer, buffer.from_byte_offset(node.start_byte), codec),
        end=offset_to_position(buffer, buffer.from_byte_offset(node.end_byte), codec),
    )


class ComponentAnalyzer:
    """Finds decorated component classes in TypeScript sources.

    Construction compiles both queries, a malformed query or a grammar that
    fails to load raises ``AnalyzerError`` and no scan can run.
    """

    def __init__(
        self,
        config: AnalyzerConfig | None = None,
        codec: PositionCodec | None = None,
    ):
        self.config = config or AnalyzerConfig()
        self.codec = codec or DEFAULT_CODEC

        try:
            self.language = Language(tstypescript.language_typescript())
            self.component_query = Query(self.language, FIND_COMPONENT_QUERY)
            self.inout_query = Query(self.language, INOUT_QUERY)
        except (QueryError, ValueError, TypeError) as exc:
            raise AnalyzerError(f"Failed to build component analyzer: {exc}") from exc

    def parse(self, buffer: TextBuffer) -> Tree:
        return Parser(self.language).parse(buffer.data)

    def extract(self, text: str, uri: str) -> Iterator[Component]:
        buffer = TextBuffer(text)
        tree = self.parse(buffer)

        matches = QueryCursor(self.component_query).matches(tree.root_node)

        for _, captures in matches:
            class_name_node = captures["class-name"][0]
            declaration = captures["declaration"][0]
            selector = node_text(captures["selector"][0], buffer)
            class_name = node_text(class_name_node, buffer)

            logging.debug(f"COMP {selector} -> {class_name}")

            inputs, outputs = self.extract_members(declaration, buffer)

            yield Component(
                selector=selector,
                class_name=class_name,
                uri=uri,
                class_name_range=node_to_range(class_name_node, buffer, self.codec),
                inputs=tuple(inputs),
                outputs=tuple(outputs),
            )

    def extract_members(self, declaration: Node, buffer: TextBuffer):
        inputs: list[str] = []
        outputs: list[str] = []

        members = []
        for _, captures in QueryCursor(self.inout_query).matches(declaration):
            members.append((captures["member"][0], captures["marker"][0]))

        # two patterns, so restore source order explicitly
        for member, marker in sorted(members, key=lambda m: m[0].start_byte):
            marker_name = node_text(marker, buffer)
            member_name = node_text(member, buffer)

            logging.debug(f"  PROP {marker_name} {member_name}")

            if marker_name == INPUT_MARKER:
                inputs.append(member_name)
            else:
                outputs.append(member_name)

        return inputs, outputs

    def analyze_file(self, file_path: Path, component_index: ComponentIndex) -> int:
        logging.debug(f"FILE {file_path}")

        try:
            contents = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logging.warning(f"Skipping unreadable file {file_path}: {exc}")
            return 0

        uri = file_path.resolve().as_uri()

        count = 0
        try:
            for component in self.extract(contents, uri):
                component_index.insert(component)
                count += 1
        except Exception as exc:
            logging.warning(f"Skipping file {file_path}, failed to analyze: {exc}")

        return count

    def source_files(self, workspace_root: Path) -> Iterator[Path]:
        source_root = workspace_root / self.config.source_dir

        try:
            for path in sorted(source_root.glob(self.config.pattern)):
                if path.is_file():
                    yield path
        except (OSError, ValueError) as exc:
            logging.warning(f"Error globbing {source_root / self.config.pattern}: {exc}")

    def analyze_workspace(
        self,
        workspace_root: Path,
        component_index: ComponentIndex,
        stop: Event | None = None,
    ) -> int:
        logging.debug(f"WORKSPACE {workspace_root}")

        count = 0
        for file_path in self.source_files(workspace_root):
            if stop is not None and stop.is_set():
                logging.info("Workspace scan stopped")
                break

            count += self.analyze_file(file_path, component_index)

        return count

    def handles(self, file_path: Path, workspace_root: Path | None = None) -> bool:
        if file_path.suffix != f".{self.config.source_extension}":
            return False

        if workspace_root is None:
            return True

        source_root = (workspace_root / self.config.source_dir).resolve()
        return file_path.resolve().is_relative_to(source_root)


class TemplateParser:
    def __init__(self):
        try:
            self.language = Language(tshtml.language())
        except (ValueError, TypeError) as exc:
            raise AnalyzerError(f"Failed to load template grammar: {exc}") from exc

    def parse(self, buffer: TextBuffer) -> Tree:
        return Parser(self.language).parse(buffer.data)
