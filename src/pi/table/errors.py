"""Errors raised while building or rendering tables."""

from __future__ import annotations


class TableError(ValueError):
    """Base class for table layout and rendering errors."""


class InvalidLayout(TableError):
    """A layout policy cannot allocate sizes for the requested slots."""


class InvalidSpan(TableError):
    """A cell span is out of range or exceeds the table's dimensions."""


class InsufficientWidth(TableError):
    """The target width cannot hold the borders, separators and one column per slot."""
