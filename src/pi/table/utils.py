"""Terminal text utilities for styled runs: width measurement, clipping, wrapping.

All functions work on grapheme clusters so that combining marks, emoji
sequences and wide CJK characters are measured the way a terminal draws
them.  Styles ride along with the characters: clipping or wrapping never
moves a style onto characters it was not attached to.
"""

from __future__ import annotations

import unicodedata

import grapheme
import wcwidth as _wcwidth

from pi.table.style import PLAIN, Line, Run, Style, merge_runs

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------

def grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Rules:
    1. Zero-width characters (control, combining marks, etc.) -> 0
    2. Emoji (multi-codepoint, contains VS16 U+FE0F, ZWJ sequences, etc.) -> 2
    3. Otherwise delegate to wcwidth for the first meaningful codepoint.
    """
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):  # VS16, ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF:  # Skin tone modifiers
            return 2
        if 0x1F1E6 <= cp <= 0x1F1FF:  # Regional indicators
            return 2

    first_cp = ord(g[0])
    if first_cp >= 0x1F000 or 0x2600 <= first_cp <= 0x27BF:
        return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(g[0]), 0)


def text_width(text: str) -> int:
    """Visible terminal width of plain *text* (no escape sequences)."""
    if not text:
        return 0

    if all(0x20 <= ord(ch) <= 0x7E for ch in text):
        return len(text)

    cached = _width_cache.get(text)
    if cached is not None:
        return cached

    total = sum(grapheme_width(g) for g in grapheme.graphemes(text))
    return _cache_width(text, total)


def runs_width(runs: list[Run]) -> int:
    """Visible width of a single line of runs."""
    return sum(text_width(run.text) for run in runs)


# ---------------------------------------------------------------------------
# Line splitting
# ---------------------------------------------------------------------------

def expand_tabs(runs: list[Run], tab_width: int) -> list[Run]:
    """Replace tabs with *tab_width* spaces."""
    spaces = " " * tab_width
    return [Run(run.text.replace("\t", spaces), run.style) for run in runs]


def split_lines(runs: list[Run]) -> list[Line]:
    """Split runs on embedded newlines into physical lines."""
    lines: list[Line] = [[]]
    for run in runs:
        pieces = run.text.replace("\r\n", "\n").replace("\r", "").split("\n")
        for idx, piece in enumerate(pieces):
            if idx > 0:
                lines.append([])
            if piece:
                lines[-1].append(Run(piece, run.style))
    return [merge_runs(line) for line in lines]


# ---------------------------------------------------------------------------
# Clipping and padding
# ---------------------------------------------------------------------------

def clip_runs(runs: list[Run], max_width: int) -> Line:
    """Return the prefix of *runs* that fits in *max_width* columns.

    Text is cut at grapheme boundaries.  A wide grapheme straddling the edge
    is replaced by spaces in its own style so that the result is exactly as
    wide as the columns it keeps.
    """
    if max_width <= 0:
        return []

    result: list[Run] = []
    cols = 0
    for run in runs:
        if cols >= max_width:
            break
        if cols + text_width(run.text) <= max_width:
            result.append(run)
            cols += text_width(run.text)
            continue
        kept: list[str] = []
        for g in grapheme.graphemes(run.text):
            w = grapheme_width(g)
            if cols + w > max_width:
                kept.append(" " * (max_width - cols))
                cols = max_width
                break
            kept.append(g)
            cols += w
        result.append(Run("".join(kept), run.style))
    return merge_runs(result)


def fit_runs(runs: list[Run], width: int, fill: Style = PLAIN) -> Line:
    """Clip *runs* to *width* and pad with *fill*-styled spaces to exactly *width*."""
    clipped = clip_runs(runs, width)
    used = runs_width(clipped)
    if used < width:
        clipped.append(Run(" " * (width - used), fill))
    return merge_runs(clipped)


def blank(width: int, fill: Style = PLAIN) -> Line:
    """A line of *width* spaces in *fill* style."""
    if width <= 0:
        return []
    return [Run(" " * width, fill)]


# ---------------------------------------------------------------------------
# Word wrapping
# ---------------------------------------------------------------------------

def _graphemes(runs: list[Run]) -> list[tuple[str, Style, int]]:
    cells: list[tuple[str, Style, int]] = []
    for run in runs:
        for g in grapheme.graphemes(run.text):
            cells.append((g, run.style, grapheme_width(g)))
    return cells


def _to_runs(cells: list[tuple[str, Style, int]]) -> Line:
    return merge_runs([Run(g, style) for g, style, _w in cells])


def _find_word_break(cells: list[tuple[str, Style, int]]) -> int | None:
    """Index of the last space in *cells* that leaves a non-empty line before it."""
    for idx in range(len(cells) - 1, 0, -1):
        if cells[idx][0] == " ":
            return idx
    return None


def _strip_spaces(
    cells: list[tuple[str, Style, int]], leading: bool
) -> list[tuple[str, Style, int]]:
    if leading:
        start = 0
        while start < len(cells) and cells[start][0] == " ":
            start += 1
        return cells[start:]
    end = len(cells)
    while end > 0 and cells[end - 1][0] == " ":
        end -= 1
    return cells[:end]


def wrap_runs(runs: list[Run], width: int) -> list[Line]:
    """Word-wrap one physical line of runs to *width* columns.

    Breaks at the last space that fits; words longer than *width* are broken
    at the column edge.  Returns at least one (possibly empty) line.
    """
    if width <= 0:
        return [list(runs)]

    result: list[list[tuple[str, Style, int]]] = []
    current: list[tuple[str, Style, int]] = []
    current_width = 0

    for cell in _graphemes(runs):
        g, _style, w = cell
        if current_width + w > width and current:
            if g == " ":
                # The overflowing character is the break itself
                result.append(_strip_spaces(current, leading=False))
                current = []
                current_width = 0
                continue
            split = _find_word_break(current)
            if split is not None:
                result.append(_strip_spaces(current[:split], leading=False))
                current = _strip_spaces(current[split + 1 :], leading=True)
            else:
                result.append(current)
                current = []
            current_width = sum(c[2] for c in current)
            while current and current_width + w > width:
                # Carried fragment plus the new character still overflows
                result.append(current)
                current = []
                current_width = 0
        if not current and g == " " and result:
            continue
        current.append(cell)
        current_width += w

    result.append(current)
    return [_to_runs(cells) for cells in result]
