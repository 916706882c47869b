"""Renderable projection of a table query: headers, cell strings and cursor."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Direction(Enum):
    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)


@dataclass
class TableView:
    """Header, widths and formatted values of the displayed table.

    ``len(header) == len(widths) == len(row)`` for every row in ``values``.
    ``selected`` is a (row, column) pair kept inside ``values``, or (0, 0)
    when there is nothing to select.
    """

    header: list[str] = field(default_factory=list)
    values: list[list[str]] = field(default_factory=list)
    widths: list[int] = field(default_factory=list)
    selected: tuple[int, int] = (0, 0)

    @property
    def row_count(self) -> int:
        return len(self.values)

    @property
    def column_count(self) -> int:
        return len(self.header)

    def get_selected(self) -> tuple[int, int]:
        return self.selected

    def selected_value(self) -> str | None:
        """Formatted text of the selected cell, or None for an empty table."""
        if not self.values or not self.header:
            return None
        row, col = self.selected
        return self.values[row][col]

    def move(self, direction: Direction) -> bool:
        """Move the cursor one cell. Moving past an edge is a no-op."""
        d_row, d_col = direction.value
        row, col = self.selected
        new_row, new_col = row + d_row, col + d_col
        if not (0 <= new_row < self.row_count and 0 <= new_col < self.column_count):
            return False
        self.selected = (new_row, new_col)
        return True

    def select(self, row: int, col: int) -> None:
        self.selected = self._clamp(row, col)

    def set_contents(self, header: list[str], values: list[list[str]]) -> None:
        """Replace header and values, keeping the cursor in bounds."""
        self.header = header
        self.values = values
        self.selected = self._clamp(*self.selected)

    def _clamp(self, row: int, col: int) -> tuple[int, int]:
        if not self.values or not self.header:
            return (0, 0)
        row = max(0, min(row, self.row_count - 1))
        col = max(0, min(col, self.column_count - 1))
        return (row, col)
