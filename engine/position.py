"""
Position contract and its python-chess implementation.

The search never knows the rules of chess. It talks to a position handle
through the small `Position` protocol below: list legal moves, apply one,
undo the last one, and ask whether the game has ended. `BoardPosition`
implements that protocol on top of `chess.Board`, which owns all the rules
(move generation, castling and en passant rights, repetition bookkeeping).

Moves are coordinate strings ("e2e4", "g1f3", "e7e8q"). They are opaque to the
search; only the adapter parses them. Standard algebraic notation is produced
only for moves shown to players, since it costs a legality probe per move.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

import chess

_COORDINATE_MOVE = re.compile(r"^([a-h][1-8])([a-h][1-8])([qrbn])?$")


class IllegalMoveError(ValueError):
    """Raised when a move cannot be applied to the current position."""


@dataclass(frozen=True)
class MoveResult:
    """
    Outcome of applying one move.

    The search ignores this object; the game session uses it to track
    captured material and highlight the last move.

    Attributes:
        uci:      The move in coordinate notation (e.g. "e7e8q").
        color:    Side that made the move.
        captured: Piece type taken by the move, or None for quiet moves.
                  En passant reports chess.PAWN.
        san:      The move in standard algebraic notation. Only filled in
                  by `BoardPosition.push`; moves applied by the search
                  leave it as None.
    """

    uci: str
    color: chess.Color
    captured: chess.PieceType | None = None
    san: str | None = None

    @property
    def from_square(self) -> str:
        return self.uci[:2]

    @property
    def to_square(self) -> str:
        return self.uci[2:4]


class Position(Protocol):
    """The minimal rules-engine contract consumed by the search."""

    def legal_moves(self) -> list[str]: ...

    def apply(self, move: str) -> MoveResult: ...

    def undo(self) -> None: ...

    def is_terminal(self) -> bool: ...

    def is_checkmate(self) -> bool: ...

    def is_draw(self) -> bool: ...

    def is_check(self) -> bool: ...

    def side_to_move(self) -> chess.Color: ...

    def piece_map(self) -> Mapping[chess.Square, chess.Piece]: ...


class BoardPosition:
    """
    Mutable position handle backed by a python-chess board.

    Every `apply` pushes exactly one move and every `undo` pops exactly one,
    so python-chess restores side to move, castling rights, en passant square
    and the move clocks on its own.
    """

    __slots__ = ("board",)

    def __init__(self, board: chess.Board | None = None) -> None:
        self.board: chess.Board = board if board is not None else chess.Board()

    @classmethod
    def from_fen(cls, fen: str) -> "BoardPosition":
        """Build a handle from a FEN string. Raises ValueError on bad FEN."""
        return cls(chess.Board(fen))

    @property
    def fen(self) -> str:
        return self.board.fen()

    def legal_moves(self) -> list[str]:
        return [move.uci() for move in self.board.legal_moves]

    def apply(self, move: str) -> MoveResult:
        """
        Apply a coordinate move in place.

        Args:
            move: A move in coordinate notation, as produced by `legal_moves()`.

        Returns:
            A MoveResult describing the move that was played (without SAN).

        Raises:
            IllegalMoveError: The move is illegal or unparsable. The board is
                left untouched.
        """
        try:
            parsed = chess.Move.from_uci(move)
        except ValueError as exc:
            raise IllegalMoveError(f"Illegal move {move!r} in {self.board.fen()}") from exc
        return self._push(parsed, notate=False)

    def parse_move(self, text: str) -> chess.Move:
        """
        Parse a human move in SAN ("Nf3") or coordinates ("g1f3", "e7e8n").

        Coordinate pawn moves to the last rank promote to a queen unless a
        piece letter is appended.

        Raises:
            IllegalMoveError: The text is not a legal move here.
        """
        text = text.strip()
        match = _COORDINATE_MOVE.match(text.lower())
        if match is None:
            try:
                return self.board.parse_san(text)
            except ValueError as exc:
                raise IllegalMoveError(f"Illegal move {text!r}") from exc

        from_square = chess.parse_square(match.group(1))
        to_square = chess.parse_square(match.group(2))
        promotion = None
        if match.group(3):
            promotion = chess.Piece.from_symbol(match.group(3)).piece_type
        elif (
            self.board.piece_type_at(from_square) == chess.PAWN
            and chess.square_rank(to_square) in (0, 7)
        ):
            promotion = chess.QUEEN

        move = chess.Move(from_square, to_square, promotion=promotion)
        if not self.board.is_legal(move):
            raise IllegalMoveError(f"Illegal move {text!r}")
        return move

    def push(self, move: chess.Move) -> MoveResult:
        """Apply an already-parsed move and describe it, SAN included."""
        return self._push(move, notate=True)

    def _push(self, move: chess.Move, notate: bool) -> MoveResult:
        if not self.board.is_legal(move):
            raise IllegalMoveError(f"Illegal move {move.uci()!r} in {self.board.fen()}")

        captured = None
        if self.board.is_en_passant(move):
            captured = chess.PAWN
        elif self.board.is_capture(move):
            captured = self.board.piece_type_at(move.to_square)

        result = MoveResult(
            uci=move.uci(),
            color=self.board.turn,
            captured=captured,
            san=self.board.san(move) if notate else None,
        )
        self.board.push(move)
        return result

    def undo(self) -> None:
        self.board.pop()

    def is_terminal(self) -> bool:
        # Threefold repetition and the fifty-move rule end the game without a claim.
        board = self.board
        return board.is_game_over() or board.is_fifty_moves() or board.is_repetition(3)

    def is_checkmate(self) -> bool:
        return self.board.is_checkmate()

    def is_draw(self) -> bool:
        return self.is_terminal() and not self.board.is_checkmate()

    def is_check(self) -> bool:
        return self.board.is_check()

    def result(self) -> str:
        """Game result in PGN form: "1-0", "0-1", "1/2-1/2" or "*" while in progress."""
        if self.board.is_checkmate():
            return "0-1" if self.board.turn == chess.WHITE else "1-0"
        return "1/2-1/2" if self.is_terminal() else "*"

    def side_to_move(self) -> chess.Color:
        return self.board.turn

    def piece_map(self) -> Mapping[chess.Square, chess.Piece]:
        return self.board.piece_map()

    def __repr__(self) -> str:
        return f"BoardPosition({self.board.fen()!r})"
