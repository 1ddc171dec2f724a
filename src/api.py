import logging
import random
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

import core
from records import GameRecord

logger = logging.getLogger(__name__)

# Initialize the rate limiter
limiter = Limiter(key_func=get_remote_address)
app = FastAPI(
    title="2048 Game API",
    description="A stateless API for playing the 2048 game. "\
                "Keep the game record (goal, score, moves, board) on the client side.",
    version="1.0.0"
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# --- Pydantic Models for API requests and responses ---

class NewGameSettings(BaseModel):
    """Settings for creating a new game."""
    size: int = Field(
        default=core.DEFAULT_SIZE,
        gt=1, # Board size must be at least 2x2
        description="Size of the N x N game board (e.g., 4 for a 4x4 board)."
    )
    goal: int = Field(
        default=core.DEFAULT_GOAL,
        gt=0,
        description="The tile value to achieve for winning the game (e.g., 2048)."
    )
    seed: Optional[int] = Field(
        default=None,
        description="Optional seed for the tile spawns, for reproducible games."
    )

class GameStateData(GameRecord):
    """The game record plus its derived progress state."""
    progress: core.GameProgressState = Field(
        ...,
        description="Current progress state of the game (IN_PROGRESS, GAME_WON, GAME_OVER)."
    )

class MoveRequestData(BaseModel):
    """Data required to make a move."""
    state: GameRecord = Field(..., description="The game record before the move.")
    direction: core.DIRECTION = Field(
        ...,
        description="Direction of the move (UP, DOWN, LEFT, RIGHT)."
    )
    seed: Optional[int] = Field(
        default=None,
        description="Optional seed for the tile spawned after an effective move."
    )

class MoveResponseData(GameStateData):
    """Response after a move, including the new game state and move effectiveness."""
    move_was_effective: bool = Field(
        ...,
        description="True if the move resulted in a change to the board state, False otherwise."
    )
    message: Optional[str] = Field(
        default=None,
        description="An optional message, e.g., if a move was invalid, game ended, or other info."
    )


def _state_data(game: core.GameController) -> dict:
    return dict(**game.to_record().model_dump(), progress=game.status())

# --- API Endpoints ---

@app.post("/game/new", response_model=GameStateData, summary="Start a New 2048 Game")
@limiter.limit("100/minute")
async def start_new_game(request: Request, settings: NewGameSettings):
    """
    Starts a new 2048 game based on the provided settings.

    - **size**: Dimension of the N x N board (e.g., 4 for 4x4). Default is 4.
    - **goal**: Tile value to reach to win (e.g., 2048). Default is 2048.
    - **seed**: Optional seed for the two starting tiles.

    Returns the initial game record with two random tiles, score and moves
    at 0, and the progress status.
    """
    try:
        game = core.GameController(
            size=settings.size,
            goal=settings.goal,
            rng=random.Random(settings.seed)
        )
        return GameStateData(**_state_data(game))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Unexpected error in /game/new: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"An unexpected error occurred during game creation: {str(e)}")


@app.post("/game/move", response_model=MoveResponseData, summary="Make a Move in the Game")
@limiter.limit("100/minute")
async def make_move(request: Request, request_data: MoveRequestData):
    """
    Processes a player's move in the game.

    Requires the current game record (`state`) and the `direction` of the move.

    The API will:
    1. Rebuild the game from the record.
    2. Slide and merge tiles; if the board changed, count the move and add a new tile.
    3. Determine the new game status (IN_PROGRESS, GAME_WON, GAME_OVER).

    Moves sent after the game is over are ignored.
    """
    try:
        game = core.GameController.from_record(request_data.state, rng=random.Random(request_data.seed))
        game_was_over = game.is_game_over()
        move_was_effective = game.move(request_data.direction)

        message_for_client: Optional[str] = None
        if game_was_over:
            message_for_client = "Game is already over; move ignored."
        elif not move_was_effective:
            message_for_client = "Move was not effective; board state unchanged by slide."

        current_progress = game.status()
        if current_progress == core.GameProgressState.GAME_WON:
            message_for_client = "Congratulations! You won!"
        elif current_progress == core.GameProgressState.GAME_OVER and not game_was_over:
            message_for_client = "Game Over. No more valid moves."

        return MoveResponseData(
            **_state_data(game),
            move_was_effective=move_was_effective,
            message=message_for_client
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Error processing move: {str(e)}")
    except Exception as e:
        logger.error(f"Unexpected error in /game/move: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"An unexpected server error occurred while processing the move: {str(e)}")
