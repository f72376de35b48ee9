"""Tests for pi.table.config."""

from __future__ import annotations

import pytest

from pi.table.config import RenderConfig


class TestRenderConfig:
    """Defaults and validation."""

    def test_defaults(self) -> None:
        config = RenderConfig()
        assert config.tab_width == 3
        assert config.ascii_only is False
        assert config.default_overflow == "clip"

    def test_negative_tab_width(self) -> None:
        with pytest.raises(ValueError):
            RenderConfig(tab_width=-1)

    def test_unknown_overflow(self) -> None:
        with pytest.raises(ValueError):
            RenderConfig(default_overflow="truncate")  # type: ignore[arg-type]


class TestFromEnv:
    """PI_TABLE_* environment variables."""

    def test_empty_environment(self) -> None:
        assert RenderConfig.from_env({}) == RenderConfig()

    def test_all_variables(self) -> None:
        config = RenderConfig.from_env(
            {"PI_TABLE_ASCII": "Yes", "PI_TABLE_TAB_WIDTH": "8", "PI_TABLE_OVERFLOW": "wrap"}
        )
        assert config == RenderConfig(tab_width=8, ascii_only=True, default_overflow="wrap")

    @pytest.mark.parametrize("value", ["0", "no", "", "off"])
    def test_ascii_falsy_values(self, value: str) -> None:
        assert RenderConfig.from_env({"PI_TABLE_ASCII": value}).ascii_only is False

    def test_invalid_tab_width(self) -> None:
        with pytest.raises(ValueError, match="PI_TABLE_TAB_WIDTH"):
            RenderConfig.from_env({"PI_TABLE_TAB_WIDTH": "wide"})

    def test_invalid_overflow(self) -> None:
        with pytest.raises(ValueError, match="PI_TABLE_OVERFLOW"):
            RenderConfig.from_env({"PI_TABLE_OVERFLOW": "scroll"})

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PI_TABLE_ASCII", "1")
        assert RenderConfig.from_env().ascii_only is True
