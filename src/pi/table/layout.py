"""Layout policies: distribute an available size across a row of slots.

A slot is a column or a row; the same policies size both.  Every policy
returns exactly ``slot_count`` non-negative sizes that add up to the
available size.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

from pi.table.errors import InvalidLayout


def _check_request(available_size: int, slot_count: int) -> None:
    if available_size < 0:
        raise InvalidLayout(f"Available size cannot be negative: {available_size}")
    if slot_count < 0:
        raise InvalidLayout(f"Slot count cannot be negative: {slot_count}")
    if slot_count == 0 and available_size > 0:
        raise InvalidLayout("Cannot distribute size across zero slots")


def _largest_remainder(available_size: int, shares: Sequence[int]) -> list[int]:
    """Split *available_size* in proportion to *shares*, summing exactly.

    Each slot gets ``floor(available * share / total)``; the units left over
    go to the largest fractional remainders, ties broken by lowest index.
    """
    total = sum(shares)
    sizes: list[int] = []
    remainders: list[tuple[int, int]] = []
    for index, share in enumerate(shares):
        size, remainder = divmod(available_size * share, total)
        sizes.append(size)
        remainders.append((-remainder, index))
    leftover = available_size - sum(sizes)
    for _neg_remainder, index in sorted(remainders)[:leftover]:
        sizes[index] += 1
    return sizes


def _spread(available_size: int, slot_count: int) -> list[int]:
    base, remainder = divmod(available_size, slot_count)
    return [base + 1 if index < remainder else base for index in range(slot_count)]


# ---------------------------------------------------------------------------
# Policies
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Proportional:
    """Split the available size evenly; the remainder goes to the first slots."""

    def compute(
        self,
        available_size: int,
        slot_count: int,
        natural_sizes: Sequence[int] | None = None,
    ) -> list[int]:
        _check_request(available_size, slot_count)
        if slot_count == 0:
            return []
        return _spread(available_size, slot_count)


@dataclass(frozen=True)
class Weighted:
    """Split the available size in proportion to one positive weight per slot."""

    weights: tuple[int, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "weights", tuple(self.weights))
        if not self.weights:
            raise InvalidLayout("A weighted layout needs at least one weight")
        for weight in self.weights:
            if not isinstance(weight, int) or isinstance(weight, bool) or weight <= 0:
                raise InvalidLayout(f"Layout weights must be positive integers, got {weight!r}")

    def compute(
        self,
        available_size: int,
        slot_count: int,
        natural_sizes: Sequence[int] | None = None,
    ) -> list[int]:
        _check_request(available_size, slot_count)
        if slot_count != len(self.weights):
            raise InvalidLayout(
                f"Weighted layout declares {len(self.weights)} slots, "
                f"table has {slot_count}"
            )
        return _largest_remainder(available_size, self.weights)


@dataclass(frozen=True)
class ContentDriven:
    """Size each slot to its content, shrinking proportionally when it does not fit."""

    def compute(
        self,
        available_size: int,
        slot_count: int,
        natural_sizes: Sequence[int] | None = None,
    ) -> list[int]:
        _check_request(available_size, slot_count)
        if natural_sizes is None:
            raise InvalidLayout("A content-driven layout needs natural sizes")
        if len(natural_sizes) != slot_count:
            raise InvalidLayout(
                f"Got {len(natural_sizes)} natural sizes for {slot_count} slots"
            )
        if slot_count == 0:
            return []

        naturals = [max(0, size) for size in natural_sizes]
        total = sum(naturals)
        if total <= available_size:
            extra = _spread(available_size - total, slot_count)
            return [size + bonus for size, bonus in zip(naturals, extra)]

        sizes = _largest_remainder(available_size, naturals)
        if available_size >= slot_count:
            _raise_to_minimum(sizes, 1)
        return sizes


def _raise_to_minimum(sizes: list[int], minimum: int) -> None:
    """Lift every slot to *minimum*, taking units from the largest slots."""
    for index, size in enumerate(sizes):
        while size < minimum:
            donor = max(range(len(sizes)), key=lambda i: (sizes[i], -i))
            if sizes[donor] <= minimum:
                return
            sizes[donor] -= 1
            size += 1
        sizes[index] = size


Layout = Union[Proportional, Weighted, ContentDriven]


def proportional() -> Proportional:
    return Proportional()


def weighted(*weights: int) -> Weighted:
    return Weighted(tuple(weights))


def content() -> ContentDriven:
    return ContentDriven()
