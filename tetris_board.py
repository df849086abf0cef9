
"""Grid: cell store with a hidden band above the playfield; place, lock, sweep, ghost"""
from dataclasses import dataclass
from typing import List, Optional, Tuple

from tetris_config import COLS, ROWS, HIDDEN_ROWS
from tetris_piece import Piece


@dataclass(frozen=True)
class Cell:
    filled: bool = False
    color: Optional[str] = None


EMPTY = Cell()

Row = List[Cell]


class Grid:
    """COLS x (HIDDEN_ROWS + ROWS) cells. Row 0 is the topmost hidden row.

    Out-of-range reads give None and out-of-range writes give False; nothing
    here raises for a coordinate.
    """

    def __init__(self):
        self.width = COLS
        self.height = ROWS
        self.hidden = HIDDEN_ROWS
        self._rows: List[Row] = [self._empty_row() for _ in range(self.total_height)]

    @property
    def total_height(self) -> int:
        return self.height + self.hidden

    def _empty_row(self) -> Row:
        return [EMPTY] * self.width

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.total_height

    def cell_at(self, x: int, y: int) -> Optional[Cell]:
        if not self.in_bounds(x, y):
            return None
        return self._rows[y][x]

    def set_cell(self, x: int, y: int, filled: bool, color: Optional[str] = None) -> bool:
        if not self.in_bounds(x, y):
            return False
        self._rows[y][x] = Cell(filled, color)
        return True

    def is_cell_empty(self, x: int, y: int) -> bool:
        cell = self.cell_at(x, y)
        return cell is not None and not cell.filled

    def can_place(self, piece: Piece) -> bool:
        return all(self.is_cell_empty(x, y) for x, y in piece.cells())

    def lock(self, piece: Piece) -> bool:
        if not self.can_place(piece):
            return False
        for x, y in piece.cells():
            self._rows[y][x] = Cell(True, piece.color)
        return True

    def is_row_full(self, y: int) -> bool:
        if not 0 <= y < self.total_height:
            return False
        return all(c.filled for c in self._rows[y])

    def clear_row(self, y: int):
        if not 0 <= y < self.total_height:
            return
        del self._rows[y]
        self._rows.insert(0, self._empty_row())

    def clear_full_rows(self) -> int:
        """Sweep bottom-up; a cleared index is re-checked since rows shift into it."""
        cleared = 0
        y = self.total_height - 1
        while y >= 0:
            if self.is_row_full(y):
                self.clear_row(y)
                cleared += 1
            else:
                y -= 1
        return cleared

    def is_overflowing(self) -> bool:
        return any(c.filled for row in self._rows[:self.hidden] for c in row)

    def drop_position(self, piece: Piece) -> Tuple[int, int]:
        """Lowest reachable position straight below the piece (ghost / hard drop)."""
        test = piece.clone()
        last_y = test.y
        while self.can_place(test):
            last_y = test.y
            test.move(0, 1)
        return piece.x, last_y

    def rows(self, include_hidden: bool = False) -> Tuple[Tuple[Cell, ...], ...]:
        start = 0 if include_hidden else self.hidden
        return tuple(tuple(row) for row in self._rows[start:])

    def visible_rows(self) -> Tuple[Tuple[Cell, ...], ...]:
        return self.rows(include_hidden=False)

    def reset(self):
        self._rows = [self._empty_row() for _ in range(self.total_height)]
