"""Output sinks: turn rendered lines into bytes on a stream.

The renderer produces lines of ``(text, style)`` runs and knows nothing about
how styles reach the screen.  A sink decides: :class:`AnsiSink` encodes them
as SGR escape sequences, :class:`PlainSink` drops them.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Callable, Iterable, Protocol, TextIO

from pi.table.ansi import encode_line
from pi.table.style import Line, line_text

if TYPE_CHECKING:
    from pi.table.config import RenderConfig
    from pi.table.elements import Table


class Sink(Protocol):
    """Anything that accepts rendered lines, top to bottom."""

    def write_lines(self, lines: Iterable[Line]) -> None: ...


class _StreamSink:
    def __init__(self, encode: Callable[[Line], str], stream: TextIO | None = None) -> None:
        self.encode = encode
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # Resolved late so that redirected stdout is honoured
        return self._stream if self._stream is not None else sys.stdout

    def write_lines(self, lines: Iterable[Line]) -> None:
        stream = self.stream
        for line in lines:
            stream.write(self.encode(line))
            stream.write("\n")
        stream.flush()


class AnsiSink(_StreamSink):
    """Writes lines with styles encoded as ANSI SGR sequences."""

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__(encode_line, stream)


class PlainSink(_StreamSink):
    """Writes lines as plain text."""

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__(line_text, stream)


def render_to_string(
    table: Table,
    width: int,
    *,
    ansi: bool = False,
    height: int | None = None,
    config: RenderConfig | None = None,
) -> str:
    """Render *table* and join its lines with newlines."""
    encode = encode_line if ansi else line_text
    return "\n".join(encode(line) for line in table.render(width, height=height, config=config))
