"""A sparse grid of text cells that grows as cells are set."""

from __future__ import annotations


class CellTable:
    """Text cells addressed by row and column."""

    def __init__(self) -> None:
        self.row_count = 0
        self.column_count = 0
        self._cells: dict[tuple[int, int], str] = {}

    def reset(self) -> None:
        """Remove all rows, columns and cells."""
        self.row_count = 0
        self.column_count = 0
        self._cells.clear()

    def set_cell_text(self, row: int, column: int, text: str) -> str | None:
        """Set a cell's text, growing the table; None for a negative position."""
        if row < 0 or column < 0:
            return None
        self.row_count = max(self.row_count, row + 1)
        self.column_count = max(self.column_count, column + 1)
        self._cells[row, column] = text
        return text

    def cell(self, row: int, column: int) -> str | None:
        """The text at a position, or None if that cell was never set."""
        return self._cells.get((row, column))