"""Table renderer: measurement, sizing and drawing.

:func:`render` runs three phases, strictly in order:

1. Measurement -- natural width and height of every cell, recursing into
   nested tables as if they had unlimited width.
2. Sizing -- column widths from the column layout, then row heights at those
   fixed widths (wrapped text and nested tables get taller as they get
   narrower, so rows can only be sized once columns are).
3. Drawing -- lazily, one line at a time, from the fixed geometry.

Everything that can fail does so in the first two phases, so iterating a
:class:`Rendering` never stops half-way through a table.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from itertools import islice
from typing import Iterator, Union, overload

from pi.table.borders import (
    BorderStyle,
    Frame,
    SeparatorStyle,
    downgrade,
    horizontal_overhead,
    vertical_overhead,
)
from pi.table.config import DEFAULT_CONFIG, RenderConfig
from pi.table.elements import Cell, Element, StyledText, Table, Text
from pi.table.errors import InsufficientWidth, InvalidLayout, InvalidSpan
from pi.table.layout import Weighted
from pi.table.style import PLAIN, Line, Run, Style, combine, line_text, merge_runs, restyle
from pi.table.utils import blank, expand_tabs, fit_runs, runs_width, split_lines, wrap_runs

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Grid placement
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class _Slot:
    """A cell pinned to its top-left grid position."""

    cell: Cell
    row: int
    column: int

    @property
    def rows(self) -> range:
        return range(self.row, self.row + self.cell.row_span)

    @property
    def columns(self) -> range:
        return range(self.column, self.column + self.cell.col_span)


@dataclass
class _Grid:
    slots: list[_Slot]
    cells: list[list[_Slot]]  # [row][column]
    columns: int

    @property
    def rows(self) -> int:
        return len(self.cells)


def _declared_columns(table: Table) -> int | None:
    layout = table.column_layout
    if isinstance(layout, Weighted):
        return len(layout.weights)
    return None


def _place(table: Table) -> _Grid:
    """Assign every cell a grid position, left to right, skipping row spans."""
    rows = table.rows
    declared = _declared_columns(table)
    occupied: dict[tuple[int, int], _Slot] = {}
    slots: list[_Slot] = []

    for r, row in enumerate(rows):
        c = 0
        for cell in row.cells:
            while (r, c) in occupied:
                c += 1
            if r + cell.row_span > len(rows):
                raise InvalidSpan(
                    f"Cell at row {r}, column {c} spans {cell.row_span} rows "
                    f"but only {len(rows) - r} remain"
                )
            if declared is not None and c + cell.col_span > declared:
                raise InvalidSpan(
                    f"Cell at row {r}, column {c} spans {cell.col_span} columns "
                    f"but the table declares {declared}"
                )
            slot = _Slot(cell, r, c)
            area = [(rr, cc) for rr in slot.rows for cc in slot.columns]
            for pos in area:
                if pos in occupied:
                    raise InvalidSpan(
                        f"Cell at row {r}, column {c} overlaps the cell spanning "
                        f"into row {pos[0]}, column {pos[1]}"
                    )
            for pos in area:
                occupied[pos] = slot
            slots.append(slot)
            c += cell.col_span

    if declared is not None:
        columns = declared
    else:
        columns = max((c for _r, c in occupied), default=-1) + 1
    if rows and columns == 0:
        raise InvalidLayout("Table has rows but no cells to lay out")

    cells: list[list[_Slot]] = []
    for r in range(len(rows)):
        line: list[_Slot] = []
        for c in range(columns):
            slot = occupied.get((r, c))
            if slot is None:
                slot = _Slot(Cell(), r, c)
                slots.append(slot)
            line.append(slot)
        cells.append(line)
    return _Grid(slots, cells, columns)


# ---------------------------------------------------------------------------
# Per-call context
# ---------------------------------------------------------------------------


@dataclass
class _Measure:
    columns: list[int]
    rows: list[int]
    width: int
    height: int


class _Context:
    """Caches shared by every table visited in one render call."""

    def __init__(self, config: RenderConfig) -> None:
        self.config = config
        self._grids: dict[int, _Grid] = {}
        self.measures: dict[int, _Measure] = {}
        self._stack: list[int] = []

    def enter(self, table: Table) -> None:
        if id(table) in self._stack:
            raise InvalidLayout("Table is nested inside itself")
        self._stack.append(id(table))

    def leave(self, table: Table) -> None:
        self._stack.pop()

    def grid(self, table: Table) -> _Grid:
        grid = self._grids.get(id(table))
        if grid is None:
            grid = self._grids[id(table)] = _place(table)
        return grid

    def border(self, table: Table) -> BorderStyle | None:
        if self.config.ascii_only:
            return downgrade(table.border)  # type: ignore[return-value]
        return table.border

    def separator(self, table: Table) -> SeparatorStyle | None:
        if self.config.ascii_only:
            return downgrade(table.separator)  # type: ignore[return-value]
        return table.separator

    def overflow(self, table: Table, cell: Cell) -> str:
        return cell.overflow or table.overflow or self.config.default_overflow


# ---------------------------------------------------------------------------
# Phase 1: measurement
# ---------------------------------------------------------------------------


def _text_lines(element: Text | StyledText, style: Style | None, tab_width: int) -> list[Line]:
    """Physical lines of a text element, with *style* layered under its runs."""
    if isinstance(element, Text):
        runs = [Run(element.value, style if style is not None else PLAIN)]
    else:
        runs = restyle(list(element.runs), style)
    return split_lines(expand_tabs(runs, tab_width))


def _natural_size(ctx: _Context, element: Element) -> tuple[int, int]:
    if isinstance(element, Table):
        measure = _measure(ctx, element)
        return (measure.width, measure.height)
    lines = _text_lines(element, None, ctx.config.tab_width)
    return (max(runs_width(line) for line in lines), len(lines))


def _ceil_div(value: int, parts: int) -> int:
    return -(-value // parts)


def _measure(ctx: _Context, table: Table) -> _Measure:
    """Natural column widths and row heights of *table* at unlimited width."""
    cached = ctx.measures.get(id(table))
    if cached is not None:
        return cached

    if not table.rows:
        measure = _Measure([], [], 0, 0)
        ctx.measures[id(table)] = measure
        return measure

    ctx.enter(table)
    grid = ctx.grid(table)
    widths = [0] * grid.columns
    heights = [0] * grid.rows
    for slot in grid.slots:
        width, height = _natural_size(ctx, slot.cell.element)
        width_share = _ceil_div(width, slot.cell.col_span)
        height_share = _ceil_div(height, slot.cell.row_span)
        for c in slot.columns:
            widths[c] = max(widths[c], width_share)
        for r in slot.rows:
            heights[r] = max(heights[r], height_share)
    ctx.leave(table)

    border, separator = ctx.border(table), ctx.separator(table)
    measure = _Measure(
        widths,
        heights,
        sum(widths) + horizontal_overhead(border, separator, grid.columns),
        sum(heights) + vertical_overhead(border, separator, grid.rows),
    )
    ctx.measures[id(table)] = measure
    return measure


# ---------------------------------------------------------------------------
# Phase 2: sizing
# ---------------------------------------------------------------------------


@dataclass
class _Box:
    x: int
    y: int
    width: int
    height: int


# Wrapped/clipped text lines, or the layout of a nested table
_Content = Union[list[Line], "TableLayout"]


class TableLayout:
    """Concrete geometry of one table laid out at one width."""

    def __init__(
        self,
        table: Table,
        grid: _Grid,
        frame: Frame,
        styles: dict[int, Style],
        contents: dict[int, _Content],
        glyph_style: Style,
    ) -> None:
        self.table = table
        self.grid = grid
        self.frame = frame
        self.glyph_style = glyph_style
        self._styles = styles
        self._contents = contents
        self.boxes: dict[int, _Box] = {}
        for slot in grid.slots:
            self.boxes[id(slot)] = self._box(slot)
        self.owners = self._owners()

    @property
    def column_widths(self) -> list[int]:
        return [t.size for t in self.frame.columns if t.kind == "slot"]

    @property
    def row_heights(self) -> list[int]:
        return [t.size for t in self.frame.rows if t.kind == "slot"]

    @property
    def width(self) -> int:
        return self.frame.width

    @property
    def height(self) -> int:
        return self.frame.height

    def nested(self, row: int, column: int) -> TableLayout | None:
        """Layout of the table nested in the cell at (*row*, *column*), if any."""
        content = self._contents.get(id(self.grid.cells[row][column]))
        return content if isinstance(content, TableLayout) else None

    def _box(self, slot: _Slot) -> _Box:
        frame = self.frame
        first_col = frame.columns[frame.column_track(slot.columns[0])]
        last_col = frame.columns[frame.column_track(slot.columns[-1])]
        first_row = frame.rows[frame.row_track(slot.rows[0])]
        last_row = frame.rows[frame.row_track(slot.rows[-1])]
        return _Box(
            first_col.offset,
            first_row.offset,
            last_col.offset + last_col.size - first_col.offset,
            last_row.offset + last_row.size - first_row.offset,
        )

    def _owners(self) -> list[list[_Slot | None]]:
        """For every (row track, column track) the slot drawn there, or None for a line."""
        cells = self.grid.cells
        owners: list[list[_Slot | None]] = []
        for yt in self.frame.rows:
            line: list[_Slot | None] = []
            for xt in self.frame.columns:
                if yt.kind == "border" or xt.kind == "border":
                    line.append(None)
                    continue
                rows = [yt.index] if yt.kind == "slot" else [yt.index, yt.index + 1]
                cols = [xt.index] if xt.kind == "slot" else [xt.index, xt.index + 1]
                candidates = {id(cells[r][c]) for r in rows for c in cols}
                line.append(cells[rows[0]][cols[0]] if len(candidates) == 1 else None)
            owners.append(line)
        return owners


def _box_width(slot: _Slot, col_widths: list[int], separator: SeparatorStyle | None) -> int:
    absorbed = slot.cell.col_span - 1 if separator is not None and separator.draws("vertical") else 0
    return sum(col_widths[c] for c in slot.columns) + absorbed


def _prepare(
    ctx: _Context, table: Table, slot: _Slot, width: int, style: Style
) -> _Content:
    """Lay out a cell's content at its box width."""
    element = slot.cell.element
    if isinstance(element, Table):
        if not element.rows:
            return []
        return _layout(ctx, element, width, None, style)
    lines = _text_lines(element, style, ctx.config.tab_width)
    if ctx.overflow(table, slot.cell) == "wrap":
        return [wrapped for line in lines for wrapped in wrap_runs(line, width)]
    return lines


def _content_height(content: _Content) -> int:
    if isinstance(content, TableLayout):
        return content.height
    return len(content)


def _row_heights(
    grid: _Grid,
    heights: dict[int, int],
    separator: SeparatorStyle | None,
) -> list[int]:
    """Natural row heights; spanning cells top up the last row they cover."""
    rows = [0] * grid.rows
    spanning: list[_Slot] = []
    for slot in grid.slots:
        if slot.cell.row_span == 1:
            rows[slot.row] = max(rows[slot.row], heights[id(slot)])
        else:
            spanning.append(slot)
    absorbs = separator is not None and separator.draws("horizontal")
    for slot in spanning:
        available = sum(rows[r] for r in slot.rows)
        if absorbs:
            available += slot.cell.row_span - 1
        deficit = heights[id(slot)] - available
        if deficit > 0:
            rows[slot.rows[-1]] += deficit
    return rows


def _layout(
    ctx: _Context,
    table: Table,
    width: int,
    height: int | None,
    base: Style | None,
) -> TableLayout:
    grid = ctx.grid(table)
    border, separator = ctx.border(table), ctx.separator(table)
    natural = _measure(ctx, table)

    if width <= 0:
        raise InsufficientWidth(f"Cannot render a table into {width} columns")
    available = width - horizontal_overhead(border, separator, grid.columns)
    if available < grid.columns:
        raise InsufficientWidth(
            f"Width {width} cannot hold {grid.columns} columns plus "
            f"{width - available} columns of borders and separators"
        )

    col_widths = table.column_layout.compute(available, grid.columns, natural.columns)
    logger.debug("Column widths at width %d: %s", width, col_widths)

    table_style = combine(base, table.style)
    styles: dict[int, Style] = {}
    contents: dict[int, _Content] = {}
    heights: dict[int, int] = {}
    ctx.enter(table)
    for slot in grid.slots:
        style = combine(table_style, slot.cell.style)
        styles[id(slot)] = style
        content = _prepare(ctx, table, slot, _box_width(slot, col_widths, separator), style)
        contents[id(slot)] = content
        heights[id(slot)] = _content_height(content)
    ctx.leave(table)

    row_heights = _row_heights(grid, heights, separator)
    if height is not None:
        available_height = height - vertical_overhead(border, separator, grid.rows)
        if available_height < 0:
            raise InvalidLayout(
                f"Height {height} cannot hold the table's borders and separators"
            )
        row_heights = table.row_layout.compute(available_height, grid.rows, row_heights)
    logger.debug("Row heights at width %d: %s", width, row_heights)

    frame = Frame(border, separator, col_widths, row_heights)
    return TableLayout(table, grid, frame, styles, contents, table_style)


# ---------------------------------------------------------------------------
# Phase 3: drawing
# ---------------------------------------------------------------------------


def _box_lines(layout: TableLayout, slot: _Slot) -> list[Line]:
    """The slot's content as exactly ``box.height`` lines of ``box.width``."""
    box = layout.boxes[id(slot)]
    style = layout._styles[id(slot)]
    content = layout._contents[id(slot)]
    if isinstance(content, TableLayout):
        source: Iterator[Line] | list[Line] = _draw(content)
    else:
        source = content

    lines: list[Line] = []
    for line in source:
        if len(lines) == box.height:
            break
        lines.append(fit_runs(line, box.width, style))
    while len(lines) < box.height:
        lines.append(blank(box.width, style))
    return lines


def _glyph(layout: TableLayout, yi: int, xi: int) -> str:
    frame = layout.frame
    owners = layout.owners
    yt, xt = frame.rows[yi], frame.columns[xi]
    glyphs = frame.glyphs_at(yt, xt)
    if yt.kind == "slot":
        return glyphs.vertical
    if xt.kind == "slot":
        return glyphs.horizontal * xt.size
    up = yi > 0 and owners[yi - 1][xi] is None
    down = yi + 1 < len(frame.rows) and owners[yi + 1][xi] is None
    left = xi > 0 and owners[yi][xi - 1] is None
    right = xi + 1 < len(frame.columns) and owners[yi][xi + 1] is None
    return glyphs.junction(up, down, left, right)


def _draw(layout: TableLayout) -> Iterator[Line]:
    frame = layout.frame
    boxes: dict[int, list[Line]] = {}
    for yi, yt in enumerate(frame.rows):
        for k in range(yt.size):
            y = yt.offset + k
            runs: list[Run] = []
            xi = 0
            while xi < len(frame.columns):
                slot = layout.owners[yi][xi]
                if slot is None:
                    runs.append(Run(_glyph(layout, yi, xi), layout.glyph_style))
                    xi += 1
                    continue
                box = layout.boxes[id(slot)]
                lines = boxes.get(id(slot))
                if lines is None:
                    lines = boxes[id(slot)] = _box_lines(layout, slot)
                runs.extend(lines[y - box.y])
                # Skip by track, not offset: zero-width columns share an offset
                xi = frame.column_track(slot.columns[-1]) + 1
            yield merge_runs(runs)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


class Rendering(Sequence[Line]):
    """The lines of a rendered table.

    Lines are drawn on iteration, and every iteration draws them afresh from
    the same layout, so a rendering can be consumed any number of times.
    """

    def __init__(self, layout: TableLayout | None, width: int) -> None:
        self.layout = layout
        self.width = width

    def __iter__(self) -> Iterator[Line]:
        if self.layout is None:
            return iter(())
        return _draw(self.layout)

    def __len__(self) -> int:
        return 0 if self.layout is None else self.layout.height

    @overload
    def __getitem__(self, index: int) -> Line: ...

    @overload
    def __getitem__(self, index: slice) -> list[Line]: ...

    def __getitem__(self, index: int | slice) -> Line | list[Line]:
        if isinstance(index, slice):
            return list(self)[index]
        size = len(self)
        position = index + size if index < 0 else index
        if not 0 <= position < size:
            raise IndexError(f"Line index {index} out of range for {size} lines")
        return next(islice(self, position, None))

    def plain(self) -> list[str]:
        """Lines with styles dropped."""
        return [line_text(line) for line in self]

    def __str__(self) -> str:
        return "\n".join(self.plain())


def render(
    table: Table,
    width: int,
    height: int | None = None,
    config: RenderConfig | None = None,
) -> Rendering:
    """Lay *table* out at *width* columns (and optionally *height* lines).

    A table without rows renders as zero lines whatever its border.

    Raises:
        InvalidLayout: a layout policy cannot size the table's slots.
        InvalidSpan: a cell spans past the table's rows or declared columns.
        InsufficientWidth: *width* cannot hold the borders plus the columns.
    """
    if not table.rows:
        return Rendering(None, width)
    ctx = _Context(config or DEFAULT_CONFIG)
    layout = _layout(ctx, table, width, height, None)
    return Rendering(layout, width)
