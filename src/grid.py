# grid.py
# Fixed-size square container of tile values, stored as one row-major list.

from typing import List, Tuple

from records import BoardRecord


class GridIndexError(IndexError):
    """Raised when a linear index or coordinate falls outside the grid."""


class InvalidMergeError(ValueError):
    """Raised when asked to merge cells that are empty or hold different values."""


class Grid:
    """
    A size x size board of tiles. 0 marks an empty cell.

    Cells are addressed by a linear index (row * size + column). The conversion
    between (row, col) and index lives in index_of / position_of only.
    """

    def __init__(self, size: int = 4):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("Board size must be a positive integer.")
        self._size = size
        self._cells: List[int] = [0] * (size * size)

    # --- Addressing ---

    def get_size(self) -> int:
        return self._size

    def in_bounds(self, index: int) -> bool:
        return 0 <= index < self._size * self._size

    def index_of(self, row: int, col: int) -> int:
        """
        Converts a (row, col) coordinate to a linear index.
        Raises:
            GridIndexError: If either coordinate is outside [0, size).
        """
        if not (0 <= row < self._size and 0 <= col < self._size):
            raise GridIndexError(f"Coordinate ({row}, {col}) is outside a {self._size}x{self._size} grid.")
        return row * self._size + col

    def position_of(self, index: int) -> Tuple[int, int]:
        """
        Converts a linear index to a (row, col) coordinate.
        Raises:
            GridIndexError: If the index is out of bounds.
        """
        self._check_index(index)
        return divmod(index, self._size)

    def same_row(self, index1: int, index2: int) -> bool:
        # Structural check only; callers bounds-check separately.
        return index1 // self._size == index2 // self._size

    def same_column(self, index1: int, index2: int) -> bool:
        return index1 % self._size == index2 % self._size

    def row_indices(self, row: int) -> List[int]:
        return [self.index_of(row, col) for col in range(self._size)]

    def column_indices(self, col: int) -> List[int]:
        return [self.index_of(row, col) for row in range(self._size)]

    # --- Queries ---

    def cell_at(self, index: int) -> int:
        self._check_index(index)
        return self._cells[index]

    def cell(self, row: int, col: int) -> int:
        return self._cells[self.index_of(row, col)]

    def is_empty(self, index: int) -> bool:
        return self.cell_at(index) == 0

    def empty_cells(self) -> List[int]:
        """Indices of all empty cells, in ascending order."""
        return [index for index, value in enumerate(self._cells) if value == 0]

    def highest_value(self) -> int:
        return max(self._cells)

    @property
    def cells(self) -> List[int]:
        return list(self._cells)

    def rows(self) -> List[List[int]]:
        n = self._size
        return [self._cells[row * n:(row + 1) * n] for row in range(n)]

    # --- Mutation ---

    def set_value(self, index: int, value: int) -> None:
        self._check_index(index)
        if value < 0 or value & (value - 1):
            raise ValueError(f"Tile value {value} is neither 0 nor a power of two.")
        self._cells[index] = value

    def swap_cells(self, index1: int, index2: int) -> None:
        self._check_index(index1)
        self._check_index(index2)
        self._cells[index1], self._cells[index2] = self._cells[index2], self._cells[index1]

    def merge_cells(self, index1: int, index2: int) -> int:
        """
        Merges the tile at index1 into the equal tile at index2.
        Args:
            index1 (int): The arriving tile, cleared by the merge.
            index2 (int): The absorbing tile, doubled by the merge.
        Returns:
            int: The merged value, i.e. the score contribution.
        Raises:
            GridIndexError: If either index is out of bounds.
            InvalidMergeError: If the cells are empty or hold different values.
        """
        self._check_index(index1)
        self._check_index(index2)
        value = self._cells[index1]
        if value == 0 or value != self._cells[index2]:
            raise InvalidMergeError(
                f"Cannot merge {value} at {index1} with {self._cells[index2]} at {index2}."
            )
        merged_value = value * 2
        self._cells[index2] = merged_value
        self._cells[index1] = 0
        return merged_value

    def copy(self) -> "Grid":
        clone = Grid(self._size)
        clone._cells = list(self._cells)
        return clone

    def restore(self, snapshot: "Grid") -> None:
        """Copies the cells of an equally sized snapshot back into this grid."""
        if snapshot._size != self._size:
            raise ValueError("Snapshot size does not match the grid.")
        self._cells[:] = snapshot._cells

    # --- Serialization ---

    def to_record(self) -> BoardRecord:
        return BoardRecord(size=self._size, cells=list(self._cells))

    @classmethod
    def from_record(cls, record: BoardRecord) -> "Grid":
        grid = cls(record.size)
        grid._cells = list(record.cells)
        return grid

    def _check_index(self, index: int) -> None:
        if not self.in_bounds(index):
            raise GridIndexError(f"Index {index} is outside [0, {self._size * self._size}).")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self._size == other._size and self._cells == other._cells

    def __repr__(self) -> str:
        return f"Grid(size={self._size}, cells={self._cells})"
