"""Table model: text elements, cells, rows and tables.

The model is a plain value tree built by callers and read by the renderer.
An element is one of :class:`Text`, :class:`StyledText` or :class:`Table`;
anywhere an element is expected a ``str`` is accepted and wrapped in
:class:`Text`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Iterator, Literal, Sequence, Union

from pi.table.ansi import parse_ansi
from pi.table.borders import BorderStyle, SeparatorStyle
from pi.table.errors import InvalidLayout, InvalidSpan
from pi.table.layout import Layout, Proportional, Weighted
from pi.table.style import PLAIN, Run, Style

if TYPE_CHECKING:
    from pi.table.config import RenderConfig
    from pi.table.renderer import Rendering

# "clip"  ->  every physical line is cut at the box edge
# "wrap"  ->  lines are word-wrapped to the box width, then cut to its height
Overflow = Literal["clip", "wrap"]

_OVERFLOWS: tuple[str, ...] = ("clip", "wrap")


def _check_overflow(overflow: str | None) -> None:
    if overflow is not None and overflow not in _OVERFLOWS:
        raise ValueError(f"Overflow must be one of {_OVERFLOWS}, got {overflow!r}")


# ---------------------------------------------------------------------------
# Text elements
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Text:
    """Unstyled text; may contain newlines."""

    value: str = ""


@dataclass(frozen=True)
class StyledText:
    """Text made of explicitly styled runs."""

    runs: tuple[Run, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "runs",
            tuple(run if isinstance(run, Run) else Run(*run) for run in self.runs),
        )

    @classmethod
    def of(cls, text: str, style: Style = PLAIN) -> StyledText:
        return cls((Run(text, style),))

    @classmethod
    def from_ansi(cls, text: str) -> StyledText:
        """Build from a string carrying SGR escape sequences."""
        return cls(tuple(parse_ansi(text)))

    @property
    def plain(self) -> str:
        return "".join(run.text for run in self.runs)


Element = Union[Text, StyledText, "Table"]
ElementLike = Union[Element, str]


def as_element(value: ElementLike) -> Element:
    if isinstance(value, str):
        return Text(value)
    if isinstance(value, (Text, StyledText, Table)):
        return value
    raise TypeError(f"Cannot place {type(value).__name__} in a table cell")


# ---------------------------------------------------------------------------
# Cell / Row
# ---------------------------------------------------------------------------


class Cell:
    """One element occupying ``col_span`` x ``row_span`` grid slots."""

    def __init__(
        self,
        element: ElementLike = "",
        *,
        col_span: int = 1,
        row_span: int = 1,
        style: Style | None = None,
        overflow: Overflow | None = None,
    ) -> None:
        if col_span < 1:
            raise InvalidSpan(f"Column span must be at least 1, got {col_span}")
        if row_span < 1:
            raise InvalidSpan(f"Row span must be at least 1, got {row_span}")
        _check_overflow(overflow)
        self.element: Element = as_element(element)
        self.col_span = col_span
        self.row_span = row_span
        self.style = style
        self.overflow = overflow

    def __repr__(self) -> str:
        return (
            f"Cell({self.element!r}, col_span={self.col_span}, "
            f"row_span={self.row_span})"
        )


CellLike = Union[Cell, ElementLike]


def as_cell(value: CellLike) -> Cell:
    return value if isinstance(value, Cell) else Cell(value)


class Row:
    """An ordered list of cells, owned by at most one table."""

    def __init__(self, *cells: CellLike) -> None:
        self.cells: list[Cell] = [as_cell(c) for c in cells]
        self._table: Table | None = None

    def add(self, cell: CellLike) -> Row:
        self.cells.append(as_cell(cell))
        return self

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------


class Table:
    """A renderable table.

    Configure it in one go with keyword arguments, or with the chainable
    ``with_*`` methods::

        table = Table(column_layout=weighted(1, 2), border=BorderStyle())
        table.add_row("name", "value")
    """

    def __init__(
        self,
        *rows: Row,
        column_layout: Layout | None = None,
        row_layout: Layout | None = None,
        border: BorderStyle | None = None,
        separator: SeparatorStyle | None = None,
        style: Style | None = None,
        overflow: Overflow | None = None,
    ) -> None:
        self._rows: list[Row] = []
        self._column_layout: Layout = (
            column_layout if column_layout is not None else Proportional()
        )
        self._row_layout: Layout = row_layout if row_layout is not None else Proportional()
        self.border = border
        self.separator = separator
        self.style = style
        _check_overflow(overflow)
        self.overflow = overflow
        for row in rows:
            self.add(row)

    @classmethod
    def weighted(cls, *columns: int, rows: Sequence[int] | None = None) -> Table:
        """A table with weighted columns and, optionally, weighted rows."""
        return cls(
            column_layout=Weighted(tuple(columns)),
            row_layout=Weighted(tuple(rows)) if rows is not None else None,
        )

    # -- rows ---------------------------------------------------------------

    @property
    def rows(self) -> list[Row]:
        return self._rows

    def add(self, row: Row) -> Table:
        if row._table is not None and row._table is not self:
            raise ValueError("Row already belongs to another table")
        if row._table is self:
            raise ValueError("Row was already added to this table")
        row._table = self
        self._rows.append(row)
        return self

    def add_row(self, *cells: CellLike) -> Table:
        return self.add(Row(*cells))

    def extend(self, rows: Iterable[Iterable[CellLike]]) -> Table:
        for cells in rows:
            self.add_row(*cells)
        return self

    # -- layouts ------------------------------------------------------------

    @property
    def column_layout(self) -> Layout:
        return self._column_layout

    @column_layout.setter
    def column_layout(self, layout: Layout) -> None:
        if layout is None:
            raise InvalidLayout("Column layout cannot be None")
        self._column_layout = layout

    @property
    def row_layout(self) -> Layout:
        return self._row_layout

    @row_layout.setter
    def row_layout(self, layout: Layout) -> None:
        if layout is None:
            raise InvalidLayout("Row layout cannot be None")
        self._row_layout = layout

    # -- chainable configuration ------------------------------------------

    def with_column_layout(self, layout: Layout) -> Table:
        self.column_layout = layout
        return self

    def with_row_layout(self, layout: Layout) -> Table:
        self.row_layout = layout
        return self

    def with_border(self, border: BorderStyle | None) -> Table:
        self.border = border
        return self

    def with_separator(self, separator: SeparatorStyle | None) -> Table:
        self.separator = separator
        return self

    def collapse(self) -> Table:
        """Drop internal separator lines; the border is left alone."""
        self.separator = None
        return self

    def with_style(self, style: Style | None) -> Table:
        self.style = style
        return self

    def with_overflow(self, overflow: Overflow | None) -> Table:
        _check_overflow(overflow)
        self.overflow = overflow
        return self

    # -- rendering ----------------------------------------------------------

    def render(
        self,
        width: int,
        height: int | None = None,
        config: RenderConfig | None = None,
    ) -> Rendering:
        """Lay the table out at *width* columns and return its lines."""
        from pi.table.renderer import render

        return render(self, width, height=height, config=config)

    def __repr__(self) -> str:
        return f"Table(rows={len(self._rows)}, column_layout={self._column_layout!r})"
