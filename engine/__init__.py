"""
Chess move-search engine package.

This package picks moves for the computer opponent using minimax search with
alpha-beta pruning over a hand-crafted evaluation function. The rules of chess
come from python-chess through a small position adapter.

Modules:
    constants — Piece values, piece-square tables, difficulty parameters
    evaluate  — Static position evaluation (material + piece-square tables)
    position  — Position protocol and the python-chess adapter
    search    — Minimax with alpha-beta pruning, root move selection
    policy    — Difficulty tiers and the best_move() entry point
"""

from engine.policy import Difficulty, best_move, best_move_async, select_move
from engine.position import BoardPosition, IllegalMoveError, MoveResult, Position

__all__ = [
    "BoardPosition",
    "Difficulty",
    "IllegalMoveError",
    "MoveResult",
    "Position",
    "best_move",
    "best_move_async",
    "select_move",
]
