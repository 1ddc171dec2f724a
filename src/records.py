# records.py
# Serializable shapes of a game, shared by the engine and the HTTP service.

from typing import List

from pydantic import BaseModel, Field, model_validator


class BoardRecord(BaseModel):
    """Row-major snapshot of a grid."""
    size: int = Field(..., ge=1, description="The dimension N of the N x N board.")
    cells: List[int] = Field(..., description="All tile values in row-major order (0 = empty).")

    @model_validator(mode="after")
    def _check_cells(self) -> "BoardRecord":
        if len(self.cells) != self.size * self.size:
            raise ValueError(
                f"Board of size {self.size} needs {self.size * self.size} cells, got {len(self.cells)}."
            )
        if any(value < 0 or value & (value - 1) for value in self.cells):
            raise ValueError("Tile values must be 0 or a power of two.")
        return self


class GameRecord(BaseModel):
    """Full state of one game: goal, score, move count and board."""
    goal: int = Field(..., gt=0, description="The tile value required to win this game instance.")
    score: int = Field(..., ge=0, description="Current score of the game.")
    moves: int = Field(..., ge=0, description="Number of effective moves made so far.")
    board: BoardRecord
