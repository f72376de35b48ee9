"""Tests for pi.table.style -- style composition and run helpers."""

from __future__ import annotations

import pytest

from pi.table.style import PLAIN, Run, Style, combine, line_text, merge_runs, restyle


class TestStyle:
    """Construction and validation."""

    def test_default_is_plain(self) -> None:
        assert Style().is_plain
        assert Style() == PLAIN

    def test_any_attribute_makes_it_non_plain(self) -> None:
        assert not Style(bold=False).is_plain

    @pytest.mark.parametrize("color", ["red", "bright_cyan", 0, 255, (0, 128, 255)])
    def test_valid_colors(self, color: object) -> None:
        Style(fg=color)  # type: ignore[arg-type]

    @pytest.mark.parametrize("color", ["crimson", "bright_", 256, -1, (1, 2), (0, 0, 300), 1.5])
    def test_invalid_colors(self, color: object) -> None:
        with pytest.raises(ValueError):
            Style(bg=color)  # type: ignore[arg-type]

    def test_hashable(self) -> None:
        assert len({Style(bold=True), Style(bold=True)}) == 1


class TestCombine:
    """Override attributes win; unset ones inherit."""

    def test_override_wins(self) -> None:
        merged = combine(Style(fg="red", bold=True), Style(fg="blue"))
        assert merged == Style(fg="blue", bold=True)

    def test_unset_attributes_inherit(self) -> None:
        merged = combine(Style(bg="white"), Style(italic=True))
        assert merged == Style(bg="white", italic=True)

    def test_explicit_false_overrides(self) -> None:
        assert combine(Style(bold=True), Style(bold=False)) == Style(bold=False)

    def test_none_sides(self) -> None:
        red = Style(fg="red")
        assert combine(None, None) == PLAIN
        assert combine(None, red) is red
        assert combine(red, None) is red

    def test_plain_override_keeps_base(self) -> None:
        red = Style(fg="red")
        assert combine(red, PLAIN) is red

    def test_add_operator(self) -> None:
        assert Style(fg="red") + Style(dim=True) == Style(fg="red", dim=True)

    def test_three_level_precedence(self) -> None:
        table = Style(fg="red", bg="black", bold=True)
        cell = Style(fg="green", underline=True)
        run = Style(fg="yellow")
        merged = combine(combine(table, cell), run)
        assert merged == Style(fg="yellow", bg="black", bold=True, underline=True)


class TestRunHelpers:
    """Small helpers on lists of runs."""

    def test_line_text(self) -> None:
        assert line_text([Run("a", Style(bold=True)), Run("b")]) == "ab"

    def test_merge_joins_same_style(self) -> None:
        red = Style(fg="red")
        assert merge_runs([Run("a", red), Run("b", red), Run("c")]) == [
            Run("ab", red),
            Run("c"),
        ]

    def test_merge_drops_empty_runs(self) -> None:
        assert merge_runs([Run(""), Run("x"), Run("")]) == [Run("x")]

    def test_restyle_layers_run_over_base(self) -> None:
        runs = restyle([Run("a", Style(bold=True)), Run("b")], Style(fg="red"))
        assert runs == [
            Run("a", Style(fg="red", bold=True)),
            Run("b", Style(fg="red")),
        ]
