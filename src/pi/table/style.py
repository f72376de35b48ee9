"""Style values and styled text runs.

A :class:`Style` is an immutable set of optional text attributes.  ``None``
means "inherit", so styles compose with :func:`combine`: the override's set
attributes win and everything else falls through to the base.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import NamedTuple, Union

# "red", "bright_blue", ...  ->  basic 16-colour palette
# 0..255                      ->  256-colour palette
# (r, g, b)                   ->  true colour
Color = Union[str, int, tuple[int, int, int]]

BASIC_COLORS: tuple[str, ...] = (
    "black",
    "red",
    "green",
    "yellow",
    "blue",
    "magenta",
    "cyan",
    "white",
)


def _check_color(color: Color | None) -> None:
    if color is None:
        return
    if isinstance(color, str):
        name = color[len("bright_"):] if color.startswith("bright_") else color
        if name not in BASIC_COLORS:
            raise ValueError(f"Unknown color name: {color!r}")
    elif isinstance(color, int):
        if not 0 <= color <= 255:
            raise ValueError(f"Palette color out of range: {color}")
    elif isinstance(color, tuple):
        if len(color) != 3 or any(not 0 <= c <= 255 for c in color):
            raise ValueError(f"Invalid RGB color: {color!r}")
    else:
        raise ValueError(f"Unsupported color value: {color!r}")


@dataclass(frozen=True)
class Style:
    """Visual decoration attached to a run of text."""

    fg: Color | None = None
    bg: Color | None = None
    bold: bool | None = None
    dim: bool | None = None
    italic: bool | None = None
    underline: bool | None = None
    blink: bool | None = None
    inverse: bool | None = None
    strikethrough: bool | None = None

    def __post_init__(self) -> None:
        _check_color(self.fg)
        _check_color(self.bg)

    @property
    def is_plain(self) -> bool:
        """``True`` when no attribute is set."""
        return all(getattr(self, f.name) is None for f in fields(self))

    def __add__(self, other: Style | None) -> Style:
        return combine(self, other)


PLAIN = Style()


def combine(base: Style | None, override: Style | None) -> Style:
    """Layer *override* on top of *base*.

    Attributes set (not ``None``) on *override* win; the rest come from
    *base*.  Either side may be ``None``.
    """
    if base is None:
        return override if override is not None else PLAIN
    if override is None or override.is_plain:
        return base
    if base.is_plain:
        return override
    merged = {
        f.name: (
            getattr(override, f.name)
            if getattr(override, f.name) is not None
            else getattr(base, f.name)
        )
        for f in fields(Style)
    }
    return Style(**merged)


class Run(NamedTuple):
    """A span of text rendered with a single style."""

    text: str
    style: Style = PLAIN


# A rendered terminal line: runs in left-to-right order.
Line = list[Run]


def line_text(line: Line) -> str:
    """Return the text of *line* with styles dropped."""
    return "".join(run.text for run in line)


def merge_runs(runs: list[Run]) -> list[Run]:
    """Join adjacent runs that share a style and drop empty ones."""
    merged: list[Run] = []
    for run in runs:
        if not run.text:
            continue
        if merged and merged[-1].style == run.style:
            merged[-1] = Run(merged[-1].text + run.text, run.style)
        else:
            merged.append(run)
    return merged


def restyle(runs: list[Run], base: Style | None) -> list[Run]:
    """Layer every run's own style over *base*."""
    if base is None or base.is_plain:
        return list(runs)
    return [Run(run.text, combine(base, run.style)) for run in runs]
