"""Tests for the game session layer."""

import random

import chess
import pytest

from engine.policy import Difficulty
from engine.position import BoardPosition, IllegalMoveError
from game.session import GameMode, GameSession
from helpers import FOOLS_MATE_FEN, STALEMATE_FEN, START_FEN


def _session(mode: GameMode = GameMode.PVC, fen: str | None = None) -> GameSession:
    session = GameSession(mode, Difficulty.MEDIUM, random.Random(3))
    if fen is not None:
        session.position = BoardPosition.from_fen(fen)
    return session


class TestStatusMessage:
    def test_pvc_turns(self) -> None:
        session = _session()
        assert session.status_message() == "Your Move"

        session.position.apply("e2e4")
        assert session.status_message() == "Thinking..."

    def test_pvp_turns(self) -> None:
        session = _session(GameMode.PVP)
        assert session.status_message() == "White's Turn"

        session.play("e4")
        assert session.status_message() == "Black's Turn"

    def test_pvc_loss(self) -> None:
        assert _session(fen=FOOLS_MATE_FEN).status_message() == "Game Over"

    def test_pvc_victory(self) -> None:
        session = _session()
        session.position = BoardPosition(chess.Board(FOOLS_MATE_FEN).mirror())

        assert session.status_message() == "Victory"

    def test_pvp_winner(self) -> None:
        assert _session(GameMode.PVP, FOOLS_MATE_FEN).status_message() == "Black Wins"

    def test_stalemate(self) -> None:
        assert _session(fen=STALEMATE_FEN).status_message() == "Stalemate"

    def test_check(self) -> None:
        session = _session(GameMode.PVP, "4k3/8/8/8/8/8/8/R3K3 w - - 0 1")
        session.play("Ra8")

        assert session.status_message() == "Check"
        assert session.status().is_check


class TestPlay:
    def test_human_then_engine(self) -> None:
        session = _session()

        human = session.play("e2e4")
        assert session.is_engine_turn()
        engine = session.play_engine_move()

        assert human.san == "e4"
        assert engine is not None
        assert engine.color == chess.BLACK
        assert session.history == ["e4", engine.san]
        assert session.last_move == engine
        assert session.position.side_to_move() == chess.WHITE

    def test_engine_moves_are_reproducible_with_seed(self) -> None:
        first = _session()
        second = _session()
        for session in (first, second):
            session.play("d4")
            session.play_engine_move()

        assert first.history == second.history

    def test_human_cannot_move_on_engine_turn(self) -> None:
        session = _session()
        session.play("e4")

        with pytest.raises(IllegalMoveError, match="engine"):
            session.play("e5")

    def test_engine_cannot_move_on_human_turn(self) -> None:
        with pytest.raises(IllegalMoveError):
            _session().play_engine_move()

    def test_no_move_after_game_over(self) -> None:
        session = _session(GameMode.PVP, FOOLS_MATE_FEN)

        with pytest.raises(IllegalMoveError, match="over"):
            session.play("a3")

    def test_illegal_move_is_rejected(self) -> None:
        session = _session()

        with pytest.raises(IllegalMoveError):
            session.play("e2e5")
        assert session.history == []
        assert session.position.fen == START_FEN

    def test_captures_are_tracked_by_captured_color(self) -> None:
        session = _session(GameMode.PVP)
        for move in ("e4", "d5", "exd5", "Qxd5"):
            session.play(move)

        assert session.captured[chess.BLACK] == [chess.PAWN]
        assert session.captured[chess.WHITE] == [chess.PAWN]

    def test_coordinate_promotion_defaults_to_queen(self) -> None:
        session = _session(GameMode.PVP, "8/4P3/8/8/8/8/k7/4K3 w - - 0 1")

        result = session.play("e7e8")

        assert result.san.startswith("e8=Q")
        assert session.position.board.piece_type_at(chess.E8) == chess.QUEEN

    def test_engine_has_no_move_when_mated(self) -> None:
        session = _session(GameMode.PVP, FOOLS_MATE_FEN)

        assert session.play_engine_move() is None


class TestHelpers:
    def test_targets(self) -> None:
        session = _session()

        assert session.targets("e2") == ["e3", "e4"]
        assert session.targets("g1") == ["f3", "h3"]
        assert session.targets("e7") == []
        assert session.targets("e4") == []
        assert session.targets("zz") == []

    def test_reset(self) -> None:
        session = _session(GameMode.PVP)
        for move in ("e4", "d5", "exd5"):
            session.play(move)

        session.reset()

        assert session.position.fen == START_FEN
        assert session.history == []
        assert session.last_move is None
        assert session.captured == {chess.WHITE: [], chess.BLACK: []}
        assert session.mode == GameMode.PVP
