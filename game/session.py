"""
Game session: one game of chess between two humans or a human and the engine.

The session owns the position handle for the lifetime of a game and keeps the
bookkeeping that the engine does not care about: move history, the last move
played, captured pieces and the status line shown to the player.

In Player-vs-Computer mode the human always plays White and the engine plays
Black at the session's difficulty.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum

import chess

from engine.policy import Difficulty, best_move
from engine.position import BoardPosition, IllegalMoveError, MoveResult

_log = logging.getLogger(__name__)

HUMAN_COLOR: chess.Color = chess.WHITE


class GameMode(str, Enum):
    PVC = "PvC"  # Player vs Computer
    PVP = "PvP"  # Player vs Player


@dataclass(frozen=True)
class GameStatus:
    fen: str
    is_check: bool
    is_checkmate: bool
    is_draw: bool
    turn: chess.Color

    @property
    def is_over(self) -> bool:
        return self.is_checkmate or self.is_draw


class GameSession:
    """
    Stateful game between the player(s) and optionally the engine.

    Attributes:
        mode:       PvC or PvP.
        difficulty: Engine tier used in PvC.
        position:   The position handle shared with the engine.
        history:    Moves played so far, in SAN.
        last_move:  Result of the most recent move, or None.
        captured:   Captured piece types, keyed by the color of the captured piece.
    """

    def __init__(
        self,
        mode: GameMode = GameMode.PVC,
        difficulty: Difficulty = Difficulty.MEDIUM,
        rng: random.Random | None = None,
    ) -> None:
        self.mode = GameMode(mode)
        self.difficulty = Difficulty(difficulty)
        self.rng = rng if rng is not None else random.Random()
        self.position = BoardPosition()
        self.history: list[str] = []
        self.last_move: MoveResult | None = None
        self.captured: dict[chess.Color, list[chess.PieceType]] = {
            chess.WHITE: [],
            chess.BLACK: [],
        }

    def reset(self) -> None:
        """Start a new game with the same mode and difficulty."""
        self.position = BoardPosition()
        self.history = []
        self.last_move = None
        self.captured = {chess.WHITE: [], chess.BLACK: []}

    # -----------------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------------

    def status(self) -> GameStatus:
        return GameStatus(
            fen=self.position.fen,
            is_check=self.position.is_check(),
            is_checkmate=self.position.is_checkmate(),
            is_draw=self.position.is_draw(),
            turn=self.position.side_to_move(),
        )

    def status_message(self) -> str:
        """The one-line status shown next to the board."""
        status = self.status()
        white_to_move = status.turn == chess.WHITE
        if status.is_checkmate:
            if self.mode == GameMode.PVC:
                return "Game Over" if white_to_move else "Victory"
            return "Black Wins" if white_to_move else "White Wins"
        if status.is_draw:
            return "Stalemate"
        if status.is_check:
            return "Check"
        if self.mode == GameMode.PVC:
            return "Your Move" if white_to_move else "Thinking..."
        return "White's Turn" if white_to_move else "Black's Turn"

    def is_engine_turn(self) -> bool:
        return (
            self.mode == GameMode.PVC
            and self.position.side_to_move() != HUMAN_COLOR
            and not self.position.is_terminal()
        )

    def targets(self, square: str) -> list[str]:
        """
        Destination squares for the piece on `square`.

        Returns an empty list for empty squares, the opponent's pieces and
        unknown square names.
        """
        try:
            from_square = chess.parse_square(square)
        except ValueError:
            return []
        board = self.position.board
        return sorted(
            {
                chess.square_name(move.to_square)
                for move in board.legal_moves
                if move.from_square == from_square
            }
        )

    # -----------------------------------------------------------------------
    # Moves
    # -----------------------------------------------------------------------

    def play(self, text: str) -> MoveResult:
        """
        Play a human move given in SAN ("Nf3") or coordinates ("g1f3").

        Coordinate pawn moves to the last rank promote to a queen unless a
        piece letter is appended ("e7e8n").

        Raises:
            IllegalMoveError: The game is over, it is the engine's turn, or
                the move is not legal here.
        """
        if self.position.is_terminal():
            raise IllegalMoveError("The game is over")
        if self.is_engine_turn():
            raise IllegalMoveError("Wait for the engine to move")

        move = self.position.parse_move(text)
        result = self.position.push(move)
        self._record(result)
        return result

    def play_engine_move(self) -> MoveResult | None:
        """
        Let the engine move for the side to move.

        Returns:
            The engine's move, or None when it has no legal move.

        Raises:
            IllegalMoveError: It is not the engine's turn in PvC.
        """
        if self.mode == GameMode.PVC and not self.is_engine_turn():
            raise IllegalMoveError("It is not the engine's turn")

        legal = self.position.legal_moves()
        move = best_move(self.position, self.difficulty, legal, self.rng)
        if move is None:
            return None
        result = self.position.push(chess.Move.from_uci(move))
        self._record(result)
        _log.info("engine (%s) played %s", self.difficulty.value, result.san)
        return result

    def _record(self, result: MoveResult) -> None:
        self.history.append(result.san)
        self.last_move = result
        if result.captured is not None:
            self.captured[not result.color].append(result.captured)
