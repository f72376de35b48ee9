"""Tests for pi.table.utils -- width measurement, clipping and wrapping of runs."""

from __future__ import annotations

from pi.table.style import PLAIN, Run, Style, line_text
from pi.table.utils import (
    blank,
    clip_runs,
    expand_tabs,
    fit_runs,
    runs_width,
    split_lines,
    text_width,
    wrap_runs,
)

RED = Style(fg="red")
BLUE = Style(fg="blue")


def _texts(lines: list[list[Run]]) -> list[str]:
    return [line_text(line) for line in lines]


# ---------------------------------------------------------------------------
# text_width
# ---------------------------------------------------------------------------


class TestTextWidth:
    """Measure the visible terminal width of plain text."""

    def test_plain_ascii(self) -> None:
        assert text_width("hello") == 5

    def test_empty_string(self) -> None:
        assert text_width("") == 0

    def test_wide_cjk_characters_count_as_two(self) -> None:
        assert text_width("世") == 2

    def test_mixed_ascii_and_wide(self) -> None:
        assert text_width("A世B") == 4

    def test_combining_mark_adds_nothing(self) -> None:
        # "e" + COMBINING ACUTE ACCENT is one column
        assert text_width("é") == 1

    def test_box_drawing_is_one_column(self) -> None:
        assert text_width("┌─┐") == 3

    def test_runs_width_sums_runs(self) -> None:
        assert runs_width([Run("ab", RED), Run("世", BLUE)]) == 4


# ---------------------------------------------------------------------------
# split_lines / expand_tabs
# ---------------------------------------------------------------------------


class TestSplitLines:
    """Embedded newlines split runs into physical lines."""

    def test_single_line(self) -> None:
        assert split_lines([Run("abc")]) == [[Run("abc")]]

    def test_newline_inside_run(self) -> None:
        assert split_lines([Run("a\nb", RED)]) == [[Run("a", RED)], [Run("b", RED)]]

    def test_newline_across_runs_keeps_styles(self) -> None:
        lines = split_lines([Run("a\n", RED), Run("b", BLUE)])
        assert lines == [[Run("a", RED)], [Run("b", BLUE)]]

    def test_trailing_newline_gives_empty_line(self) -> None:
        assert split_lines([Run("a\n")]) == [[Run("a")], []]

    def test_carriage_returns_dropped(self) -> None:
        assert _texts(split_lines([Run("a\r\nb")])) == ["a", "b"]

    def test_expand_tabs(self) -> None:
        assert expand_tabs([Run("a\tb")], 3) == [Run("a   b")]


# ---------------------------------------------------------------------------
# clip_runs / fit_runs
# ---------------------------------------------------------------------------


class TestClipRuns:
    """Hard clipping at a column boundary."""

    def test_short_text_unchanged(self) -> None:
        assert clip_runs([Run("hi")], 5) == [Run("hi")]

    def test_clips_to_exact_width(self) -> None:
        assert clip_runs([Run("hello world")], 5) == [Run("hello")]

    def test_style_stays_on_retained_characters(self) -> None:
        clipped = clip_runs([Run("ab", RED), Run("cdef", BLUE)], 3)
        assert clipped == [Run("ab", RED), Run("c", BLUE)]

    def test_wide_character_at_edge_becomes_space(self) -> None:
        clipped = clip_runs([Run("a世", RED)], 2)
        assert clipped == [Run("a ", RED)]
        assert runs_width(clipped) == 2

    def test_zero_width(self) -> None:
        assert clip_runs([Run("abc")], 0) == []


class TestFitRuns:
    """Clip and pad to an exact width."""

    def test_pads_with_fill_style(self) -> None:
        assert fit_runs([Run("ab", RED)], 4, BLUE) == [Run("ab", RED), Run("  ", BLUE)]

    def test_same_style_padding_is_merged(self) -> None:
        assert fit_runs([Run("ab")], 5) == [Run("ab   ")]

    def test_long_text_is_clipped(self) -> None:
        assert fit_runs([Run("abcdef")], 3) == [Run("abc")]

    def test_blank(self) -> None:
        assert blank(3, RED) == [Run("   ", RED)]
        assert blank(0) == []


# ---------------------------------------------------------------------------
# wrap_runs
# ---------------------------------------------------------------------------


class TestWrapRuns:
    """Word wrapping with hard breaks for long words."""

    def test_short_text_is_one_line(self) -> None:
        assert _texts(wrap_runs([Run("hello")], 10)) == ["hello"]

    def test_breaks_at_space(self) -> None:
        assert _texts(wrap_runs([Run("hello world")], 5)) == ["hello", "world"]

    def test_breaks_at_last_space_that_fits(self) -> None:
        assert _texts(wrap_runs([Run("ab cdef")], 5)) == ["ab", "cdef"]

    def test_long_word_broken_at_edge(self) -> None:
        assert _texts(wrap_runs([Run("abcdefgh")], 3)) == ["abc", "def", "gh"]

    def test_styles_follow_characters(self) -> None:
        lines = wrap_runs([Run("aa ", RED), Run("bb", BLUE)], 3)
        assert lines == [[Run("aa", RED)], [Run("bb", BLUE)]]

    def test_empty_line(self) -> None:
        assert wrap_runs([], 5) == [[]]

    def test_every_line_fits(self) -> None:
        text = "the quick brown fox jumps over the lazy dog"
        for line in wrap_runs([Run(text, PLAIN)], 7):
            assert runs_width(line) <= 7
