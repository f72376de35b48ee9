"""Border and separator glyphs, and the frame of tracks they draw.

A rendered table is a grid of *tracks* along each axis: one track per
column (or row) plus one track for every border edge and separator line that
is actually drawn.  A glyph set whose characters are empty draws nothing and
therefore contributes no track at all, so a ``NONE`` border never leaves a
stray blank column behind.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal, Union

# ---------------------------------------------------------------------------
# Glyph sets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GlyphSet:
    """Line-drawing characters for one visual style."""

    name: str
    horizontal: str
    vertical: str
    top_left: str
    top_right: str
    bottom_left: str
    bottom_right: str
    tee_down: str  # ┬
    tee_up: str  # ┴
    tee_right: str  # ├
    tee_left: str  # ┤
    cross: str

    @property
    def is_blank(self) -> bool:
        return not self.horizontal and not self.vertical

    @property
    def is_ascii(self) -> bool:
        chars = "".join(
            (
                self.horizontal,
                self.vertical,
                self.top_left,
                self.top_right,
                self.bottom_left,
                self.bottom_right,
                self.tee_down,
                self.tee_up,
                self.tee_right,
                self.tee_left,
                self.cross,
            )
        )
        return all(ord(ch) < 0x80 for ch in chars)

    def junction(self, up: bool, down: bool, left: bool, right: bool) -> str:
        """Pick the glyph where lines meet, from the arms that are drawn."""
        if up and down:
            if left and right:
                return self.cross
            if right:
                return self.tee_right
            if left:
                return self.tee_left
            return self.vertical
        if left and right:
            if down:
                return self.tee_down
            if up:
                return self.tee_up
            return self.horizontal
        if down:
            if right:
                return self.top_left
            if left:
                return self.top_right
            return self.vertical
        if up:
            if right:
                return self.bottom_left
            if left:
                return self.bottom_right
            return self.vertical
        if left or right:
            return self.horizontal
        return " "


def _uniform(name: str, horizontal: str, vertical: str, corner: str) -> GlyphSet:
    return GlyphSet(name, horizontal, vertical, *([corner] * 9))


ASCII = _uniform("ascii", "-", "|", "+")
DASHED = _uniform("dashed", "-", "|", " ")
STAR = _uniform("star", "*", "*", "*")
LIGHT = GlyphSet(
    "light", "─", "│", "┌", "┐", "└", "┘",
    "┬", "┴", "├", "┤", "┼",
)
ROUNDED = GlyphSet(
    "rounded", "─", "│", "╭", "╮", "╰", "╯",
    "┬", "┴", "├", "┤", "┼",
)
HEAVY = GlyphSet(
    "heavy", "━", "┃", "┏", "┓", "┗", "┛",
    "┳", "┻", "┣", "┫", "╋",
)
DOUBLE = GlyphSet(
    "double", "═", "║", "╔", "╗", "╚", "╝",
    "╦", "╩", "╠", "╣", "╬",
)
NONE = _uniform("none", "", "", "")

GLYPH_SETS: dict[str, GlyphSet] = {
    g.name: g for g in (ASCII, DASHED, STAR, LIGHT, ROUNDED, HEAVY, DOUBLE, NONE)
}


def _resolve_glyphs(glyphs: GlyphSet | str) -> GlyphSet:
    if isinstance(glyphs, GlyphSet):
        return glyphs
    try:
        return GLYPH_SETS[glyphs.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown glyph set {glyphs!r}; expected one of {', '.join(GLYPH_SETS)}"
        ) from None


# ---------------------------------------------------------------------------
# Border / separator styles
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BorderStyle:
    """Outer border: a glyph set and the edges to draw."""

    glyphs: GlyphSet = LIGHT
    top: bool = True
    bottom: bool = True
    left: bool = True
    right: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "glyphs", _resolve_glyphs(self.glyphs))

    def draws(self, edge: Literal["top", "bottom", "left", "right"]) -> bool:
        return getattr(self, edge) and not self.glyphs.is_blank


@dataclass(frozen=True)
class SeparatorStyle:
    """Lines between rows (horizontal) and between columns (vertical)."""

    glyphs: GlyphSet = LIGHT
    horizontal: bool = True
    vertical: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "glyphs", _resolve_glyphs(self.glyphs))

    def draws(self, direction: Literal["horizontal", "vertical"]) -> bool:
        return getattr(self, direction) and not self.glyphs.is_blank


def downgrade(
    style: Union[BorderStyle, SeparatorStyle, None],
) -> Union[BorderStyle, SeparatorStyle, None]:
    """Replace Unicode glyphs in *style* with ASCII ones."""
    if style is None or style.glyphs.is_ascii:
        return style
    return replace(style, glyphs=ASCII)


# ---------------------------------------------------------------------------
# Frame
# ---------------------------------------------------------------------------

TrackKind = Literal["slot", "border", "separator"]


@dataclass(frozen=True)
class Track:
    """One band of character cells along an axis.

    ``index`` is the slot number for slot tracks, the slot *before* the line
    for separator tracks, and ``-1`` / slot count for the leading / trailing
    border.
    """

    kind: TrackKind
    index: int
    size: int
    offset: int


def _tracks(
    sizes: list[int], leading: bool, trailing: bool, between: bool
) -> list[Track]:
    tracks: list[Track] = []
    offset = 0

    def push(kind: TrackKind, index: int, size: int) -> None:
        nonlocal offset
        tracks.append(Track(kind, index, size, offset))
        offset += size

    if leading:
        push("border", -1, 1)
    for index, size in enumerate(sizes):
        if between and index > 0:
            push("separator", index - 1, 1)
        push("slot", index, size)
    if trailing:
        push("border", len(sizes), 1)
    return tracks


def horizontal_overhead(
    border: BorderStyle | None, separator: SeparatorStyle | None, columns: int
) -> int:
    """Columns consumed by vertical border and separator lines."""
    total = 0
    if border is not None:
        total += int(border.draws("left")) + int(border.draws("right"))
    if separator is not None and separator.draws("vertical"):
        total += max(0, columns - 1)
    return total


def vertical_overhead(
    border: BorderStyle | None, separator: SeparatorStyle | None, rows: int
) -> int:
    """Lines consumed by horizontal border and separator rules."""
    total = 0
    if border is not None:
        total += int(border.draws("top")) + int(border.draws("bottom"))
    if separator is not None and separator.draws("horizontal"):
        total += max(0, rows - 1)
    return total


class Frame:
    """Tracks along both axes for one laid-out table.

    ``columns`` runs left to right, ``rows`` top to bottom.  Slot tracks have
    the computed column widths / row heights; border and separator tracks are
    one character thick.
    """

    def __init__(
        self,
        border: BorderStyle | None,
        separator: SeparatorStyle | None,
        col_widths: list[int],
        row_heights: list[int],
    ) -> None:
        self.border = border
        self.separator = separator
        has = border.draws if border is not None else (lambda _edge: False)
        self.columns = _tracks(
            col_widths,
            leading=has("left"),
            trailing=has("right"),
            between=separator is not None and separator.draws("vertical"),
        )
        self.rows = _tracks(
            row_heights,
            leading=has("top"),
            trailing=has("bottom"),
            between=separator is not None and separator.draws("horizontal"),
        )
        self._column_slots = {t.index: i for i, t in enumerate(self.columns) if t.kind == "slot"}
        self._row_slots = {t.index: i for i, t in enumerate(self.rows) if t.kind == "slot"}

    @property
    def width(self) -> int:
        return sum(t.size for t in self.columns)

    @property
    def height(self) -> int:
        return sum(t.size for t in self.rows)

    def column_track(self, column: int) -> int:
        return self._column_slots[column]

    def row_track(self, row: int) -> int:
        return self._row_slots[row]

    def glyphs_at(self, row_track: Track, column_track: Track) -> GlyphSet:
        """Glyph set for a line position: the border's on outer edges."""
        if row_track.kind == "border" or column_track.kind == "border":
            assert self.border is not None
            return self.border.glyphs
        assert self.separator is not None
        return self.separator.glyphs
