"""
FastAPI web application for the draughts engine.

Exposes the engine's request/response contract over REST so that a browser
front end can play against it:

    GET  /api/new           fresh standard position
    POST /api/moves         legal moves for a board + side
    POST /api/destinations  highlightable landing squares for one piece
    POST /api/apply         apply a move chosen by the player
    POST /api/move          the engine's move within a time budget

Architecture notes:
- Sync endpoints (not async): FastAPI runs sync handlers in a thread pool,
  which is the correct pattern for CPU-bound blocking calls like the search.
- Stateless per request: the client sends the full board and side to move
  each time; no server-side game state is kept between requests.
- Boards travel in the compact text form of draughts.notation.board_to_text,
  moves in "C3->D4" notation.
"""

import logging

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, field_validator

from draughts.constants import DEFAULT_TIME_LIMIT_MS
from draughts.game import Game
from draughts.notation import (
    board_from_text,
    board_to_text,
    find_legal_move,
    move_to_text,
    parse_square,
    square_to_text,
)
from draughts.pieces import Side
from draughts.search import Bot, clamp_time_limit

# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

logging.basicConfig(level=logging.INFO)
_log = logging.getLogger(__name__)

app = FastAPI(title="Draughts AI", version="1.0.0")


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class PositionRequest(BaseModel):
    """
    A position sent by the client.

    Fields:
        board: Board text ("r", "R", "w", "W", "." per square, rows split by "/").
        side:  Side to move.
    """

    board: str
    side: Side = Side.RED


class DestinationsRequest(PositionRequest):
    square: str


class ApplyRequest(PositionRequest):
    move: str


class BotMoveRequest(PositionRequest):
    """
    Fields:
        time_limit_ms: Budget for the engine, clamped to [100, 10000] ms
                       before it reaches the Bot.
    """

    time_limit_ms: int = DEFAULT_TIME_LIMIT_MS

    @field_validator("time_limit_ms")
    @classmethod
    def clamp_time_limit_ms(cls, v: int) -> int:
        """Clamp time_limit_ms to the supported operating range."""
        return clamp_time_limit(v)


class PositionResponse(BaseModel):
    board: str
    side: Side
    game_over: bool
    winner: Side | None = None


class MovesResponse(BaseModel):
    moves: list[str]


class DestinationsResponse(BaseModel):
    squares: list[str]


class AppliedMoveResponse(PositionResponse):
    """
    Position after a move, plus the move itself.

    Fields:
        move:  Move in "C3->D4" notation.
        score: Engine evaluation (material, engine's perspective). Zero for
               player moves.
        depth: Deepest fully completed search depth. Zero for player moves.
    """

    move: str
    score: int = 0
    depth: int = 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_game(request: PositionRequest) -> Game:
    try:
        board = board_from_text(request.board)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid board: {exc}") from exc
    return Game.from_position(board, request.side)


def _position_fields(game: Game) -> dict:
    return {
        "board": board_to_text(game.board),
        "side": game.current_side,
        "game_over": game.is_over,
        "winner": game.winner,
    }


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------


@app.get("/api/new", response_model=PositionResponse)
def api_new() -> PositionResponse:
    """Standard starting position, RED to move."""
    return PositionResponse(**_position_fields(Game()))


@app.post("/api/moves", response_model=MovesResponse)
def api_moves(request: PositionRequest) -> MovesResponse:
    """Legal moves for the side to move, with the forced-capture rule applied."""
    game = _load_game(request)
    return MovesResponse(moves=[move_to_text(move) for move in game.legal_moves()])


@app.post("/api/destinations", response_model=DestinationsResponse)
def api_destinations(request: DestinationsRequest) -> DestinationsResponse:
    """First landing square of each legal move of the selected piece."""
    game = _load_game(request)
    try:
        square = parse_square(request.square)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return DestinationsResponse(
        squares=[square_to_text(pos) for pos in game.destinations_for(square)]
    )


@app.post("/api/apply", response_model=AppliedMoveResponse)
def api_apply(request: ApplyRequest) -> AppliedMoveResponse:
    """
    Apply the player's move.

    Raises:
        HTTPException 400: Malformed board, or the move is not legal here.
    """
    game = _load_game(request)
    move = find_legal_move(game, request.move)
    if move is None or not game.make_move(move):
        raise HTTPException(status_code=400, detail=f"Illegal move: {request.move}")
    return AppliedMoveResponse(move=move_to_text(move), **_position_fields(game))


@app.post("/api/move", response_model=AppliedMoveResponse)
def api_move(request: BotMoveRequest) -> AppliedMoveResponse:
    """
    Compute and apply the engine's move for the side to move.

    Raises:
        HTTPException 400: Malformed board, or the game is already over.
        HTTPException 500: Search failed, or returned no move in a
                           non-terminal position (budget too small).
    """
    game = _load_game(request)
    if game.is_over:
        raise HTTPException(
            status_code=400,
            detail=f"Game is already over: {game.winner.value} wins",
        )

    bot = Bot(game.current_side, request.time_limit_ms)
    try:
        result = bot.search(game)
    except Exception as exc:
        _log.exception("Engine search failed for board=%s", request.board)
        raise HTTPException(status_code=500, detail=f"Engine error: {exc}") from exc

    if result.move is None:
        raise HTTPException(status_code=500, detail="Engine returned no move")

    _log.info(
        "Move=%s score=%d depth=%d nodes=%d board=%s",
        move_to_text(result.move),
        result.score,
        result.depth,
        result.nodes,
        request.board,
    )

    game.make_move(result.move)
    return AppliedMoveResponse(
        move=move_to_text(result.move),
        score=result.score,
        depth=result.depth,
        **_position_fields(game),
    )
