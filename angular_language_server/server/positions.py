from bisect import bisect_right

from lsprotocol import types as lsp
from pygls.workspace import PositionCodec

DEFAULT_CODEC = PositionCodec()


class TextBuffer:
    """Immutable text with a line index for position <-> offset lookups.

    Offsets are character offsets into ``text``. Tree-sitter addresses nodes
    by UTF-8 byte offsets, use ``to_byte_offset`` to cross over. Positions
    exchanged with the client are in the negotiated encoding (UTF-16 unless
    told otherwise) and go through a ``PositionCodec``.
    """

    def __init__(self, text: str):
        self.text = text
        self.data = text.encode("utf-8")
        self._line_starts = [0]

        for index, char in enumerate(text):
            if char == "\n":
                self._line_starts.append(index + 1)

        self.lines = [
            text[start:end]
            for start, end in zip(self._line_starts, self._line_starts[1:] + [len(text)])
        ]

    def __len__(self):
        return len(self.text)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def line_to_char(self, line: int) -> int | None:
        if line < 0 or line >= len(self._line_starts):
            return None

        return self._line_starts[line]

    def char_to_line(self, offset: int) -> int:
        return bisect_right(self._line_starts, offset) - 1

    def line_end(self, line: int) -> int:
        if line + 1 < len(self._line_starts):
            end = self._line_starts[line + 1] - 1
            if end > 0 and self.text[end - 1] == "\r":
                end -= 1
            return end

        return len(self.text)

    def to_byte_offset(self, offset: int) -> int:
        return len(self.text[:offset].encode("utf-8"))

    def from_byte_offset(self, byte_offset: int) -> int:
        return len(self.data[:byte_offset].decode("utf-8", errors="ignore"))

    def slice_bytes(self, start_byte: int, end_byte: int) -> str:
        return self.data[start_byte:end_byte].decode("utf-8", errors="replace")


def position_to_offset(
    buffer: TextBuffer, position: lsp.Position, codec: PositionCodec = DEFAULT_CODEC
) -> int | None:
    if (line_start := buffer.line_to_char(position.line)) is None:
        return None

    line_end = buffer.line_end(position.line)

    # clamp in client units, the codec would stop one unit short of the end
    width = codec.client_num_units(buffer.text[line_start:line_end])
    client_position = lsp.Position(
        line=position.line, character=min(position.character, width)
    )

    character = codec.position_from_client_units(buffer.lines, client_position).character

    return min(line_start + character, line_end)


def offset_to_position(
    buffer: TextBuffer, offset: int, codec: PositionCodec = DEFAULT_CODEC
) -> lsp.Position:
    offset = max(0, min(offset, len(buffer)))
    line = buffer.char_to_line(offset)
    position = lsp.Position(line=line, character=offset - buffer._line_starts[line])

    return codec.position_to_client_units(buffer.lines, position)


def position_to_byte_offset(
    buffer: TextBuffer, position: lsp.Position, codec: PositionCodec = DEFAULT_CODEC
) -> int | None:
    if (offset := position_to_offset(buffer, position, codec)) is None:
        return None

    return buffer.to_byte_offset(offset)
