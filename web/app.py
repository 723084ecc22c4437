"""
FastAPI web application for playing against the engine in a browser.

Endpoints:
    POST /api/move    FEN + difficulty in, engine move + new FEN + status out
    POST /api/play    FEN + human move in, new FEN + status out
    POST /api/status  FEN in, check/mate/draw flags + legal moves out
    GET  /            the board page (static/index.html)

Architecture notes:
- Sync endpoints (not async): FastAPI runs sync handlers in a thread pool,
  which keeps the CPU-bound search off the event loop.
- Static files mounted LAST: route registration is first-match, so API routes
  must be registered before the StaticFiles catch-all.
- Stateless per request: the client sends the full FEN each time and every
  request gets its own position handle, so concurrent searches never share one.
"""

import logging
import random
from pathlib import Path

import chess
from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, field_validator

from engine.policy import Difficulty, select_move
from engine.position import BoardPosition, IllegalMoveError

# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

logging.basicConfig(level=logging.INFO)
_log = logging.getLogger(__name__)

# Absolute path resolved at import time, immune to working-directory changes.
_STATIC_DIR = Path(__file__).parent / "static"

app = FastAPI(title="Zen Chess", version="1.0.0")


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class PositionRequest(BaseModel):
    """A position given as a full FEN string."""

    fen: str

    @field_validator("fen")
    @classmethod
    def strip_fen(cls, v: str) -> str:
        return v.strip()


class MoveRequest(PositionRequest):
    """
    Client request for an engine move.

    Fields:
        fen:        Current position.
        difficulty: Easy, Medium or Hard.
        seed:       Optional seed for reproducible random choices.
    """

    difficulty: Difficulty = Difficulty.MEDIUM
    seed: int | None = None


class PlayRequest(PositionRequest):
    """A human move to apply, in SAN ("Nf3") or coordinates ("g1f3")."""

    move: str


class StatusResponse(BaseModel):
    fen: str
    turn: str
    is_check: bool
    is_checkmate: bool
    is_draw: bool
    is_game_over: bool
    legal_moves: list[str]


class MoveResponse(BaseModel):
    """
    Engine response after choosing a move.

    Fields:
        move:       Move in SAN (e.g. "Nf6").
        uci:        Move in coordinate notation (e.g. "g8f6").
        fen:        Board FEN after the move.
        score:      White-positive centipawn score, None for a random move.
        depth:      Search depth in plies (0 for a random move).
        nodes:      Positions visited by the search.
        randomized: True when the Easy tier skipped the search.
        captured:   Captured piece symbol ("q", "p", ...) or None.
        status:     Game status after the move.
    """

    move: str
    uci: str
    fen: str
    score: int | None
    depth: int
    nodes: int
    randomized: bool
    captured: str | None
    status: StatusResponse


class PlayResponse(BaseModel):
    move: str
    uci: str
    fen: str
    captured: str | None
    status: StatusResponse


def _load(fen: str) -> BoardPosition:
    try:
        return BoardPosition.from_fen(fen)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid FEN: {exc}") from exc


def _status(position: BoardPosition) -> StatusResponse:
    return StatusResponse(
        fen=position.fen,
        turn="w" if position.side_to_move() == chess.WHITE else "b",
        is_check=position.is_check(),
        is_checkmate=position.is_checkmate(),
        is_draw=position.is_draw(),
        is_game_over=position.is_terminal(),
        legal_moves=position.legal_moves(),
    )


# ---------------------------------------------------------------------------
# API routes (registered BEFORE StaticFiles mount)
# ---------------------------------------------------------------------------


@app.post("/api/status", response_model=StatusResponse)
def api_status(request: PositionRequest) -> StatusResponse:
    """Report check, mate and draw flags and the legal moves for a position."""
    return _status(_load(request.fen))


@app.post("/api/play", response_model=PlayResponse)
def api_play(request: PlayRequest) -> PlayResponse:
    """
    Apply a human move and return the resulting position.

    Raises:
        HTTPException 400: Malformed FEN, game over or illegal move.
    """
    position = _load(request.fen)
    if position.is_terminal():
        raise HTTPException(status_code=400, detail="Game is already over")

    try:
        played = position.push(position.parse_move(request.move))
    except IllegalMoveError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return PlayResponse(
        move=played.san,
        uci=played.uci,
        fen=position.fen,
        captured=chess.piece_symbol(played.captured) if played.captured else None,
        status=_status(position),
    )


@app.post("/api/move", response_model=MoveResponse)
def api_move(request: MoveRequest) -> MoveResponse:
    """
    Compute and play the engine's move for the given position.

    Raises:
        HTTPException 400: Malformed FEN or game already over.
        HTTPException 500: The engine failed or returned no move.
    """
    position = _load(request.fen)

    if position.is_terminal():
        reason = position.result()
        raise HTTPException(status_code=400, detail=f"Game is already over: {reason}")

    rng = random.Random(request.seed)
    legal = position.legal_moves()

    try:
        result = select_move(position, request.difficulty, legal, rng)
    except Exception as exc:
        _log.exception("Engine search failed for FEN=%s", request.fen)
        raise HTTPException(status_code=500, detail=f"Engine error: {exc}") from exc

    if result is None:
        raise HTTPException(status_code=500, detail="Engine returned no move")

    played = position.push(chess.Move.from_uci(result.move))
    _log.info(
        "difficulty=%s move=%s score=%s nodes=%d fen=%s",
        request.difficulty.value,
        played.san,
        result.score,
        result.nodes,
        request.fen[:40],
    )

    return MoveResponse(
        move=played.san,
        uci=played.uci,
        fen=position.fen,
        score=result.score,
        depth=result.depth,
        nodes=result.nodes,
        randomized=result.randomized,
        captured=chess.piece_symbol(played.captured) if played.captured else None,
        status=_status(position),
    )


@app.get("/", include_in_schema=False)
def serve_root() -> FileResponse:
    """Serve the board page."""
    return FileResponse(_STATIC_DIR / "index.html")


# ---------------------------------------------------------------------------
# Static file mount: MUST be last (catch-all for /static/* assets)
# ---------------------------------------------------------------------------

app.mount("/static", StaticFiles(directory=_STATIC_DIR), name="static")
