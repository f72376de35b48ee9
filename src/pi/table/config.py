"""Render configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from pi.table.elements import Overflow

_TRUTHY = ("1", "true", "yes", "on")


@dataclass
class RenderConfig:
    """Options that apply to a whole render call, nested tables included."""

    tab_width: int = 3
    ascii_only: bool = False
    default_overflow: Overflow = "clip"

    def __post_init__(self) -> None:
        if self.tab_width < 0:
            raise ValueError(f"tab_width cannot be negative: {self.tab_width}")
        if self.default_overflow not in ("clip", "wrap"):
            raise ValueError(f"Unknown overflow mode: {self.default_overflow!r}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RenderConfig:
        """Build a config from ``PI_TABLE_*`` environment variables.

        * ``PI_TABLE_ASCII`` -- draw borders with ASCII glyphs only.
        * ``PI_TABLE_TAB_WIDTH`` -- spaces per tab character.
        * ``PI_TABLE_OVERFLOW`` -- ``clip`` or ``wrap``.
        """
        env = os.environ if environ is None else environ
        config = cls()
        if env.get("PI_TABLE_ASCII", "").strip().lower() in _TRUTHY:
            config.ascii_only = True
        tab_width = env.get("PI_TABLE_TAB_WIDTH")
        if tab_width:
            try:
                config.tab_width = max(0, int(tab_width))
            except ValueError:
                raise ValueError(f"PI_TABLE_TAB_WIDTH must be an integer, got {tab_width!r}") from None
        overflow = env.get("PI_TABLE_OVERFLOW")
        if overflow:
            if overflow not in ("clip", "wrap"):
                raise ValueError(f"PI_TABLE_OVERFLOW must be 'clip' or 'wrap', got {overflow!r}")
            config.default_overflow = overflow  # type: ignore[assignment]
        return config


DEFAULT_CONFIG = RenderConfig()
