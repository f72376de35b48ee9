"""pi-table: fixed-width terminal tables with weighted layouts, spans and nesting."""

# Model
from pi.table.elements import Cell, Element, Overflow, Row, StyledText, Table, Text

# Layout policies
from pi.table.layout import (
    ContentDriven,
    Layout,
    Proportional,
    Weighted,
    content,
    proportional,
    weighted,
)

# Borders and separators
from pi.table.borders import (
    ASCII,
    DASHED,
    DOUBLE,
    GLYPH_SETS,
    HEAVY,
    LIGHT,
    NONE,
    ROUNDED,
    STAR,
    BorderStyle,
    GlyphSet,
    SeparatorStyle,
)

# Styles
from pi.table.style import PLAIN, Line, Run, Style, combine, line_text

# ANSI translation
from pi.table.ansi import encode_line, parse_ansi, style_to_sgr

# Rendering
from pi.table.config import RenderConfig
from pi.table.errors import InsufficientWidth, InvalidLayout, InvalidSpan, TableError
from pi.table.renderer import Rendering, TableLayout, render
from pi.table.sinks import AnsiSink, PlainSink, Sink, render_to_string

__all__ = [
    # Model
    "Cell",
    "Element",
    "Overflow",
    "Row",
    "StyledText",
    "Table",
    "Text",
    # Layout
    "ContentDriven",
    "Layout",
    "Proportional",
    "Weighted",
    "content",
    "proportional",
    "weighted",
    # Borders
    "ASCII",
    "DASHED",
    "DOUBLE",
    "GLYPH_SETS",
    "HEAVY",
    "LIGHT",
    "NONE",
    "ROUNDED",
    "STAR",
    "BorderStyle",
    "GlyphSet",
    "SeparatorStyle",
    # Styles
    "PLAIN",
    "Line",
    "Run",
    "Style",
    "combine",
    "line_text",
    # ANSI
    "encode_line",
    "parse_ansi",
    "style_to_sgr",
    # Rendering
    "RenderConfig",
    "Rendering",
    "TableLayout",
    "render",
    # Errors
    "InsufficientWidth",
    "InvalidLayout",
    "InvalidSpan",
    "TableError",
    # Sinks
    "AnsiSink",
    "PlainSink",
    "Sink",
    "render_to_string",
]
