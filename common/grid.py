from enum import IntEnum
from typing import List, NamedTuple, Optional, Tuple
import numpy as np


class Point(NamedTuple):
    row: int
    col: int


class Cell(IntEnum):
    # same 0 = free / 1 = wall convention as the int8 maze grids
    OPEN = 0
    WALL = 1

    @property
    def symbol(self) -> str:
        return '.' if self is Cell.OPEN else '#'


_TO_SYMBOLS = bytes.maketrans(b'\x00\x01', b'.#')
_FROM_SYMBOLS = {'.': Cell.OPEN, '#': Cell.WALL}


class Grid:
    """Fixed-size rectangular maze grid backed by an int8 numpy array.

    Indexing is strict: reading or writing a point outside the grid raises
    IndexError. Use in_bounds() to probe coordinates first.
    """

    def __init__(self, rows: int, cols: int, fill: Cell = Cell.OPEN, capacity: Optional[int] = None):
        if rows < 1 or cols < 1:
            raise ValueError(f'grid must have at least one row and one column, got {rows}x{cols}')
        if capacity is not None and rows * cols != capacity:
            raise ValueError(f'grid must hold exactly {capacity} cells, got {rows}x{cols}={rows * cols}')
        self.rows = rows
        self.cols = cols
        self.cells = np.full((rows, cols), int(fill), dtype=np.int8)

    @classmethod
    def open(cls, rows: int, cols: int, capacity: Optional[int] = None) -> 'Grid':
        return cls(rows, cols, Cell.OPEN, capacity=capacity)

    @classmethod
    def from_string(cls, text: str, rows: int, cols: int) -> 'Grid':
        """Rebuild a grid from its serialize() output."""
        if len(text) != rows * cols:
            raise ValueError(f'expected {rows * cols} symbols for a {rows}x{cols} grid, got {len(text)}')
        grid = cls(rows, cols)
        for i, ch in enumerate(text):
            if ch not in _FROM_SYMBOLS:
                raise ValueError(f'unknown cell symbol {ch!r} at offset {i}')
            grid.cells[i // cols, i % cols] = int(_FROM_SYMBOLS[ch])
        return grid

    def in_bounds(self, point: Tuple[int, int]) -> bool:
        r, c = point
        return 0 <= r < self.rows and 0 <= c < self.cols

    def _check(self, point: Tuple[int, int]) -> None:
        if not self.in_bounds(point):
            raise IndexError(f'index out of bounds: {tuple(point)} not in {self.rows}x{self.cols} grid')

    def get(self, point: Tuple[int, int]) -> Cell:
        self._check(point)
        return Cell(int(self.cells[point[0], point[1]]))

    def set(self, point: Tuple[int, int], cell: Cell) -> None:
        self._check(point)
        self.cells[point[0], point[1]] = int(cell)

    def is_open(self, point: Tuple[int, int]) -> bool:
        return self.get(point) is Cell.OPEN

    def copy(self) -> 'Grid':
        dup = Grid.__new__(Grid)
        dup.rows = self.rows
        dup.cols = self.cols
        dup.cells = self.cells.copy()
        return dup

    def serialize(self) -> str:
        return self.cells.tobytes().translate(_TO_SYMBOLS).decode('ascii')

    def enumerate(self) -> List[Tuple[int, int, Cell]]:
        # row-major, materialized so callers may mutate the grid while iterating
        return [(r, c, Cell(int(v))) for (r, c), v in np.ndenumerate(self.cells)]

    def count(self, cell: Cell) -> int:
        return int(np.count_nonzero(self.cells == int(cell)))

    def to_list(self) -> List[List[int]]:
        return self.cells.tolist()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.rows == other.rows and self.cols == other.cols and bool(np.array_equal(self.cells, other.cells))

    def __repr__(self) -> str:
        return f'Grid({self.rows}x{self.cols}, {self.serialize()!r})'
