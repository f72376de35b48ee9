"""ANSI SGR translation: escape-coded strings to runs and back.

``parse_ansi`` turns text carrying SGR sequences (``ESC[...m``) into styled
runs so that already-coloured strings can be placed in cells.  Other escape
sequences (cursor movement, OSC 8 hyperlinks, APC payloads) have no width and
are dropped.  ``style_to_sgr`` and ``encode_line`` go the other way for the
ANSI output sink.
"""

from __future__ import annotations

from pi.table.style import BASIC_COLORS, PLAIN, Color, Line, Run, Style, merge_runs

RESET = "\x1b[0m"


# ---------------------------------------------------------------------------
# extract_ansi_code
# ---------------------------------------------------------------------------

def extract_ansi_code(text: str, pos: int) -> tuple[str, int] | None:
    """Extract an ANSI escape sequence starting at *pos* in *text*.

    Returns ``(code, length)`` where *code* is the full escape sequence string
    and *length* is the number of characters consumed, or ``None`` if there is
    no escape sequence at *pos*.

    Handles:
    * CSI sequences: ``ESC[`` ... ``m`` / ``G`` / ``K`` / ``H`` / ``J``
    * OSC and APC sequences: ``ESC]`` / ``ESC_`` ... ``BEL`` / ``ST``
    """
    if pos + 1 >= len(text) or text[pos] != "\x1b":
        return None

    next_ch = text[pos + 1]

    if next_ch == "[":
        i = pos + 2
        while i < len(text):
            ch = text[i]
            if ch in "mGKHJ":
                code = text[pos : i + 1]
                return (code, len(code))
            if ch.isdigit() or ch == ";":
                i += 1
                continue
            break
        return None

    if next_ch in "]_":
        i = pos + 2
        while i < len(text):
            ch = text[i]
            if ch == "\x07":  # BEL
                code = text[pos : i + 1]
                return (code, len(code))
            if ch == "\x1b" and i + 1 < len(text) and text[i + 1] == "\\":
                code = text[pos : i + 2]
                return (code, len(code))
            i += 1
        return None

    return None


# ---------------------------------------------------------------------------
# SGR state tracking
# ---------------------------------------------------------------------------

_FLAG_CODES: dict[int, str] = {
    1: "bold",
    2: "dim",
    3: "italic",
    4: "underline",
    5: "blink",
    7: "inverse",
    9: "strikethrough",
}

_FLAG_RESETS: dict[int, tuple[str, ...]] = {
    22: ("bold", "dim"),
    23: ("italic",),
    24: ("underline",),
    25: ("blink",),
    27: ("inverse",),
    29: ("strikethrough",),
}


class SgrTracker:
    """Track the SGR attributes active at a point in an escape-coded string."""

    def __init__(self) -> None:
        self._attrs: dict[str, object] = {}

    def clear(self) -> None:
        self._attrs = {}

    def style(self) -> Style:
        if not self._attrs:
            return PLAIN
        return Style(**self._attrs)  # type: ignore[arg-type]

    def process(self, code: str) -> None:
        """Update tracked state from an SGR sequence like ``\\x1b[1;31m``."""
        if not code.startswith("\x1b[") or not code.endswith("m"):
            return

        params_str = code[2:-1]
        if not params_str:
            # ESC[m is equivalent to reset
            self.clear()
            return

        params = [int(p) if p else 0 for p in params_str.split(";")]
        i = 0
        while i < len(params):
            val = params[i]
            if val == 0:
                self.clear()
            elif val in _FLAG_CODES:
                self._attrs[_FLAG_CODES[val]] = True
            elif val in _FLAG_RESETS:
                for name in _FLAG_RESETS[val]:
                    self._attrs.pop(name, None)
            elif 30 <= val <= 37:
                self._attrs["fg"] = BASIC_COLORS[val - 30]
            elif 90 <= val <= 97:
                self._attrs["fg"] = "bright_" + BASIC_COLORS[val - 90]
            elif 40 <= val <= 47:
                self._attrs["bg"] = BASIC_COLORS[val - 40]
            elif 100 <= val <= 107:
                self._attrs["bg"] = "bright_" + BASIC_COLORS[val - 100]
            elif val == 39:
                self._attrs.pop("fg", None)
            elif val == 49:
                self._attrs.pop("bg", None)
            elif val in (38, 48):
                key = "fg" if val == 38 else "bg"
                color, consumed = _extended_color(params, i + 1)
                if color is not None:
                    self._attrs[key] = color
                i += consumed
            i += 1


def _extended_color(params: list[int], start: int) -> tuple[Color | None, int]:
    """Decode ``5;N`` or ``2;R;G;B`` following a 38/48 parameter."""
    if start >= len(params):
        return (None, 0)
    mode = params[start]
    if mode == 5 and start + 1 < len(params):
        n = params[start + 1]
        return (n if 0 <= n <= 255 else None, 2)
    if mode == 2 and start + 3 < len(params):
        rgb = (params[start + 1], params[start + 2], params[start + 3])
        if all(0 <= c <= 255 for c in rgb):
            return (rgb, 4)
        return (None, 4)
    return (None, 1)


# ---------------------------------------------------------------------------
# parse_ansi
# ---------------------------------------------------------------------------

def parse_ansi(text: str) -> list[Run]:
    """Split escape-coded *text* into runs, one per distinct SGR state."""
    tracker = SgrTracker()
    runs: list[Run] = []
    current: list[str] = []
    i = 0

    while i < len(text):
        extracted = extract_ansi_code(text, i)
        if extracted is not None:
            code, length = extracted
            if code.endswith("m") and code.startswith("\x1b["):
                if current:
                    runs.append(Run("".join(current), tracker.style()))
                    current = []
                tracker.process(code)
            i += length
            continue
        current.append(text[i])
        i += 1

    if current:
        runs.append(Run("".join(current), tracker.style()))
    return merge_runs(runs)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def _color_params(color: Color, background: bool) -> list[str]:
    if isinstance(color, str):
        if color.startswith("bright_"):
            base = 100 if background else 90
            return [str(base + BASIC_COLORS.index(color[len("bright_"):]))]
        base = 40 if background else 30
        return [str(base + BASIC_COLORS.index(color))]
    lead = "48" if background else "38"
    if isinstance(color, int):
        return [lead, "5", str(color)]
    r, g, b = color
    return [lead, "2", str(r), str(g), str(b)]


def style_to_sgr(style: Style) -> str:
    """Return the SGR sequence that switches the terminal to *style*."""
    params: list[str] = []
    for code, name in _FLAG_CODES.items():
        if getattr(style, name):
            params.append(str(code))
    if style.fg is not None:
        params.extend(_color_params(style.fg, background=False))
    if style.bg is not None:
        params.extend(_color_params(style.bg, background=True))
    if not params:
        return ""
    return f"\x1b[{';'.join(params)}m"


def encode_line(line: Line) -> str:
    """Render one line of runs as an escape-coded string."""
    parts: list[str] = []
    for run in line:
        sgr = style_to_sgr(run.style)
        if sgr:
            parts.append(f"{sgr}{run.text}{RESET}")
        else:
            parts.append(run.text)
    return "".join(parts)
