"""Tests for pi.table.layout -- slot size distribution."""

from __future__ import annotations

import pytest

from pi.table.errors import InvalidLayout
from pi.table.layout import (
    ContentDriven,
    Proportional,
    Weighted,
    content,
    proportional,
    weighted,
)


# ---------------------------------------------------------------------------
# Proportional
# ---------------------------------------------------------------------------


class TestProportional:
    """Even split with the remainder handed out from the first slot."""

    def test_even_split(self) -> None:
        assert Proportional().compute(10, 2) == [5, 5]

    def test_remainder_goes_to_first_slots(self) -> None:
        assert Proportional().compute(11, 3) == [4, 4, 3]

    def test_fewer_units_than_slots(self) -> None:
        assert Proportional().compute(2, 4) == [1, 1, 0, 0]

    def test_ignores_natural_sizes(self) -> None:
        assert proportional().compute(9, 3, [100, 0, 5]) == [3, 3, 3]

    def test_zero_slots_zero_size(self) -> None:
        assert Proportional().compute(0, 0) == []

    def test_zero_slots_with_size_fails(self) -> None:
        with pytest.raises(InvalidLayout):
            Proportional().compute(5, 0)

    def test_negative_size_fails(self) -> None:
        with pytest.raises(InvalidLayout):
            Proportional().compute(-1, 2)


# ---------------------------------------------------------------------------
# Weighted
# ---------------------------------------------------------------------------


class TestWeighted:
    """Sizes proportional to weights, summing exactly."""

    def test_equal_weights(self) -> None:
        assert weighted(1, 1).compute(10, 2) == [5, 5]

    def test_one_to_two(self) -> None:
        assert weighted(1, 2).compute(9, 2) == [3, 6]

    def test_leftover_to_largest_remainder(self) -> None:
        # 20/3 = 6 r2, 10/3 = 3 r1 -> the single leftover unit goes to slot 0
        assert weighted(2, 1).compute(10, 2) == [7, 3]

    def test_leftover_ties_broken_by_lowest_index(self) -> None:
        assert weighted(1, 1, 1).compute(10, 3) == [4, 3, 3]

    def test_zero_weight_rejected(self) -> None:
        with pytest.raises(InvalidLayout):
            Weighted((1, 0))

    def test_negative_weight_rejected(self) -> None:
        with pytest.raises(InvalidLayout):
            weighted(2, -1)

    def test_no_weights_rejected(self) -> None:
        with pytest.raises(InvalidLayout):
            weighted()

    def test_slot_count_must_match_weights(self) -> None:
        with pytest.raises(InvalidLayout):
            weighted(1, 2).compute(10, 3)

    def test_weights_normalised_to_tuple(self) -> None:
        assert Weighted([1, 2]).weights == (1, 2)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Content-driven
# ---------------------------------------------------------------------------


class TestContentDriven:
    """Natural sizes when they fit, proportional shrink when they do not."""

    def test_fits_and_spreads_leftover(self) -> None:
        assert content().compute(7, 2, [1, 4]) == [2, 5]

    def test_exact_fit(self) -> None:
        assert ContentDriven().compute(6, 3, [1, 2, 3]) == [1, 2, 3]

    def test_shrinks_proportionally(self) -> None:
        assert ContentDriven().compute(20, 2, [10, 30]) == [5, 15]

    def test_shrink_keeps_one_column_minimum(self) -> None:
        assert ContentDriven().compute(10, 2, [1, 100]) == [1, 9]

    def test_all_empty_content_spreads_evenly(self) -> None:
        assert ContentDriven().compute(5, 2, [0, 0]) == [3, 2]

    def test_requires_natural_sizes(self) -> None:
        with pytest.raises(InvalidLayout):
            ContentDriven().compute(10, 2)

    def test_natural_size_count_must_match(self) -> None:
        with pytest.raises(InvalidLayout):
            ContentDriven().compute(10, 2, [1, 2, 3])


# ---------------------------------------------------------------------------
# Sum invariant
# ---------------------------------------------------------------------------


class TestSumInvariant:
    """Every policy hands out exactly the available size."""

    @pytest.mark.parametrize("available", [3, 7, 10, 33, 80])
    @pytest.mark.parametrize("slots", [1, 2, 3])
    def test_proportional(self, available: int, slots: int) -> None:
        sizes = Proportional().compute(available, slots)
        assert len(sizes) == slots
        assert sum(sizes) == available

    @pytest.mark.parametrize("available", [3, 7, 10, 33, 80])
    def test_weighted(self, available: int) -> None:
        sizes = weighted(3, 1, 5).compute(available, 3)
        assert sum(sizes) == available
        assert all(size >= 0 for size in sizes)

    @pytest.mark.parametrize("available", [3, 7, 10, 33, 80])
    def test_content_driven(self, available: int) -> None:
        sizes = ContentDriven().compute(available, 3, [4, 17, 9])
        assert sum(sizes) == available
        assert all(size >= 1 for size in sizes)
