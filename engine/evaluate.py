"""
Static evaluation: material plus piece-square tables.

A chess engine needs a number for every position so the search can compare
the outcomes of different moves. This evaluator sums, over every occupied
square, the piece's material value and a positional bonus read from a
per-piece 8x8 table. White pieces add to the score and Black pieces subtract.

The score is always from White's point of view: positive means White is
better, negative means Black is better, whoever is to move. The minimax search
relies on this convention (White maximizes, Black minimizes).

Terminal positions are scored the same way. Checkmate and draws are detected
by the rules engine; this module never substitutes a special mate score.
"""

from collections.abc import Mapping
from typing import Protocol

import chess

from engine.constants import PIECE_SQUARE_TABLES, PIECE_VALUES


class HasPieceMap(Protocol):
    def piece_map(self) -> Mapping[chess.Square, chess.Piece]: ...


def piece_square_bonus(piece_type: chess.PieceType, color: chess.Color, square: chess.Square) -> int:
    """
    Positional bonus for a piece standing on a square.

    Tables are written with row 0 as the 8th rank, so a White piece on rank
    index r (0 = first rank) reads row 7 - r. Black mirrors the rank and reads
    row r, which makes the tables symmetric between the two colors.

    Args:
        piece_type: python-chess piece type (chess.PAWN ... chess.KING).
        color:      chess.WHITE or chess.BLACK.
        square:     python-chess square index (a1 = 0, h8 = 63).

    Returns:
        The unsigned table entry; the caller applies the color sign.
    """
    rank = chess.square_rank(square)
    row = 7 - rank if color == chess.WHITE else rank
    return PIECE_SQUARE_TABLES[piece_type][row][chess.square_file(square)]


def evaluate(position: HasPieceMap) -> int:
    """
    Centipawn evaluation from White's perspective.

    Args:
        position: Anything exposing piece_map(), such as chess.Board or
                  engine.position.BoardPosition. Not modified.

    Returns:
        Sum of (value + bonus) for White pieces minus the same for Black.

    Example:
        >>> import chess
        >>> evaluate(chess.Board())  # the start position is symmetric
        0
    """
    total = 0
    for square, piece in position.piece_map().items():
        term = PIECE_VALUES[piece.piece_type] + piece_square_bonus(
            piece.piece_type, piece.color, square
        )
        if piece.color == chess.WHITE:
            total += term
        else:
            total -= term
    return total
