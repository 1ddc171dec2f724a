# core.py
# Move, merge and terminal-state logic for a 2048 game played on a Grid.

from enum import Enum
from typing import List, Optional
import logging
import random

from grid import Grid, GridIndexError, InvalidMergeError
from records import GameRecord

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 4
DEFAULT_GOAL = 2048
DEFAULT_INITIAL_TILES = 2


class GameProgressState(Enum):
    """Represents the current progress state of the game."""
    IN_PROGRESS = 1
    GAME_OVER = 2  # Lost
    GAME_WON = 3


class DIRECTION(Enum):
    """Represents the possible move directions."""
    UP = 1
    DOWN = 2
    LEFT = 3
    RIGHT = 4


class NoEmptyCellError(ValueError):
    """Raised when a tile must be spawned but the board is full."""


class GameController:
    """
    Owns one Grid together with the score, move count and goal of a game.

    Every directional move compacts each row or column toward the edge of the
    move, merging equal neighbours once per scan. An effective move bumps the
    move count by one and spawns a 2 or 4 into a random empty cell.
    """

    def __init__(self,
                 size: int = DEFAULT_SIZE,
                 goal: int = DEFAULT_GOAL,
                 rng: Optional[random.Random] = None,
                 initial_tiles: int = DEFAULT_INITIAL_TILES):
        if goal <= 0:
            raise ValueError("Goal must be a positive integer.")
        self._grid = Grid(size)
        self._score = 0
        self._moves = 0
        self._goal = goal
        self._rng = rng if rng is not None else random.Random()

        for _ in range(initial_tiles):
            self.insert_random_number()

    # --- Accessors ---

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def score(self) -> int:
        return self._score

    @score.setter
    def score(self, value: int) -> None:
        if value < 0:
            raise ValueError("Score must be non-negative.")
        self._score = value

    @property
    def moves(self) -> int:
        return self._moves

    @moves.setter
    def moves(self, value: int) -> None:
        if value < 0:
            raise ValueError("Move count must be non-negative.")
        self._moves = value

    @property
    def goal(self) -> int:
        return self._goal

    @goal.setter
    def goal(self, value: int) -> None:
        if value <= 0:
            raise ValueError("Goal must be a positive integer.")
        self._goal = value

    # --- Moves ---

    def move(self, direction: DIRECTION) -> bool:
        """
        Applies one direction signal. Signals are ignored once the game is over.
        Args:
            direction (DIRECTION): The direction to move.
        Returns:
            bool: True if the board changed.
        Raises:
            ValueError: If an invalid direction is specified.
        """
        if self.is_game_over():
            logger.debug("Ignoring %s, game is over", direction)
            return False

        if direction == DIRECTION.LEFT:
            return self.move_left()
        elif direction == DIRECTION.RIGHT:
            return self.move_right()
        elif direction == DIRECTION.UP:
            return self.move_up()
        elif direction == DIRECTION.DOWN:
            return self.move_down()
        raise ValueError("Invalid direction specified for move.")

    def move_left(self) -> bool:
        n = self._grid.get_size()
        return self._apply_move(DIRECTION.LEFT, [self._grid.row_indices(row) for row in range(n)])

    def move_right(self) -> bool:
        n = self._grid.get_size()
        return self._apply_move(DIRECTION.RIGHT, [self._grid.row_indices(row)[::-1] for row in range(n)])

    def move_up(self) -> bool:
        n = self._grid.get_size()
        return self._apply_move(DIRECTION.UP, [self._grid.column_indices(col) for col in range(n)])

    def move_down(self) -> bool:
        n = self._grid.get_size()
        return self._apply_move(DIRECTION.DOWN, [self._grid.column_indices(col)[::-1] for col in range(n)])

    def _apply_move(self, direction: DIRECTION, lines: List[List[int]]) -> bool:
        """
        Scans every line, then counts the move and spawns a tile if anything changed.
        Args:
            direction (DIRECTION): Used for logging only.
            lines (List[List[int]]): Linear indices of each row or column, ordered
                                     from the edge tiles move toward.
        Returns:
            bool: True if any line changed.
        """
        saved_grid = self._grid.copy()
        saved_score = self._score

        try:
            moved = False
            for line in lines:
                moved = self._scan_line(line) or moved
        except (GridIndexError, InvalidMergeError):
            self._grid.restore(saved_grid)
            self._score = saved_score
            logger.exception("Move %s failed; state restored", direction.name)
            raise

        if moved:
            self._moves += 1
            self.insert_random_number()
            logger.debug("Move %s: score=%d moves=%d", direction.name, self._score, self._moves)
        return moved

    def _scan_line(self, line: List[int]) -> bool:
        """
        Compacts one row or column toward line[0], merging equal neighbours.

        Each tile is pulled back by the number of gaps seen so far, so its
        landing position is never before line[0]. Only the landing cell and its
        nearest neighbour toward line[0] are compared.
        """
        gap = 0
        moved = False

        for position, index in enumerate(line):
            if self._grid.is_empty(index):
                gap += 1
                continue

            target = position - gap
            if gap:
                self._grid.swap_cells(index, line[target])

            neighbour = target - 1
            if neighbour >= 0 and self.check_merge(line[target], line[neighbour]):
                self._score += self._grid.merge_cells(line[target], line[neighbour])
                gap += 1
                moved = True
            elif gap > 0:
                moved = True

        return moved

    # --- Merge checks ---

    def check_merge_row(self, index1: int, index2: int) -> bool:
        """True if both indices are in bounds, on the same row and hold equal tiles."""
        return self._grid.same_row(index1, index2) and self._equal_in_bounds(index1, index2)

    def check_merge_column(self, index1: int, index2: int) -> bool:
        """True if both indices are in bounds, in the same column and hold equal tiles."""
        return self._grid.same_column(index1, index2) and self._equal_in_bounds(index1, index2)

    def check_merge(self, index1: int, index2: int) -> bool:
        if self._grid.is_empty(index1):
            return False
        return self.check_merge_row(index1, index2) or self.check_merge_column(index1, index2)

    def _equal_in_bounds(self, index1: int, index2: int) -> bool:
        if not (self._grid.in_bounds(index1) and self._grid.in_bounds(index2)):
            return False
        return self._grid.cell_at(index1) == self._grid.cell_at(index2)

    # --- Game State Checks ---

    def is_game_over(self) -> bool:
        """True if the board is full and no adjacent pair of tiles can merge."""
        if self._grid.empty_cells():
            return False

        n = self._grid.get_size()
        for index in range(n * n):
            if self.check_merge_row(index, index + 1) or self.check_merge_column(index, index + n):
                return False
        return True

    def is_game_won(self) -> bool:
        return self._grid.highest_value() >= self._goal

    def status(self) -> GameProgressState:
        if self.is_game_won():
            return GameProgressState.GAME_WON
        if self.is_game_over():
            return GameProgressState.GAME_OVER
        return GameProgressState.IN_PROGRESS

    def insert_random_number(self) -> int:
        """
        Writes a 2 or a 4 (even odds) into a uniformly chosen empty cell.
        Returns:
            int: The index of the new tile.
        Raises:
            NoEmptyCellError: If the board has no empty cell.
        """
        empty_cells = self._grid.empty_cells()
        if not empty_cells:
            raise NoEmptyCellError("Cannot insert a tile into a full board.")

        index = self._rng.choice(empty_cells)
        value = 2 * self._rng.randint(1, 2)
        self._grid.set_value(index, value)
        logger.debug("Spawned %d at index %d", value, index)
        return index

    # --- Serialization ---

    def to_record(self) -> GameRecord:
        return GameRecord(
            goal=self._goal,
            score=self._score,
            moves=self._moves,
            board=self._grid.to_record()
        )

    @classmethod
    def from_record(cls, record: GameRecord, rng: Optional[random.Random] = None) -> "GameController":
        """
        Rebuilds a game from its record without spawning any tiles.
        Args:
            record (GameRecord): A record produced by to_record (or an equivalent dict).
            rng (Optional[random.Random]): Source of randomness for later spawns.
        Returns:
            GameController: The restored game.
        """
        if not isinstance(record, GameRecord):
            record = GameRecord.model_validate(record)
        game = cls(size=record.board.size, goal=record.goal, rng=rng, initial_tiles=0)
        game._grid = Grid.from_record(record.board)
        game._score = record.score
        game._moves = record.moves
        return game
