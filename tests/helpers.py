"""Test helpers: FEN constants, a game-tree position, scripted random source."""

from __future__ import annotations

import random
from collections.abc import Callable

import chess

from engine.position import BoardPosition, IllegalMoveError, MoveResult

START_FEN = chess.STARTING_FEN
FOOLS_MATE_FEN = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
STALEMATE_FEN = "7k/5Q2/6K1/8/8/8/8/8 b - - 0 1"
ITALIAN_FEN = "r1bqkb1r/pppp1ppp/2n2n2/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 4 4"
ROOK_ENDING_FEN = "8/5pk1/6p1/7p/7P/6P1/5PK1/8 w - - 0 1"
HANGING_QUEEN_FEN = "4k3/8/8/3q4/8/8/3R4/4K3 w - - 0 1"

# A tree node is (static value, {move: child}). Leaves have no children.
Node = tuple[int, dict[str, "Node"]]


class TreePosition:
    """
    Abstract game tree standing in for the rules engine.

    White moves at even plies from the root. Leaves are terminal. The static
    value of the current node is read by `tree_value`, which tests pass as the
    search evaluator.
    """

    def __init__(self, root: Node, white_to_move: bool = True) -> None:
        self.root = root
        self.white_to_move = white_to_move
        self.path: list[Node] = []
        self.applied = 0

    def _node(self) -> Node:
        return self.path[-1] if self.path else self.root

    def legal_moves(self) -> list[str]:
        return list(self._node()[1])

    def apply(self, move: str) -> MoveResult:
        children = self._node()[1]
        if move not in children:
            raise IllegalMoveError(move)
        color = self.side_to_move()
        self.path.append(children[move])
        self.applied += 1
        return MoveResult(uci=move, color=color)

    def undo(self) -> None:
        self.path.pop()

    def is_terminal(self) -> bool:
        return not self._node()[1]

    def is_checkmate(self) -> bool:
        return False

    def is_draw(self) -> bool:
        return self.is_terminal()

    def is_check(self) -> bool:
        return False

    def side_to_move(self) -> chess.Color:
        white_ply = len(self.path) % 2 == 0
        return self.white_to_move if white_ply else not self.white_to_move

    def piece_map(self) -> dict:
        return {}


class BogusMovePosition(BoardPosition):
    """Lists an unparsable move once the search is one ply deep."""

    def legal_moves(self) -> list[str]:
        moves = super().legal_moves()
        if self.board.move_stack:
            moves.append("z9z9")
        return moves


def tree_value(position: TreePosition) -> int:
    return position._node()[0]


def build_tree(rng: random.Random, depth: int, max_branching: int = 4) -> Node:
    value = rng.randint(-500, 500)
    if depth == 0:
        return (value, {})
    children = {
        f"m{i}": build_tree(rng, depth - 1, max_branching)
        for i in range(rng.randint(1, max_branching))
    }
    return (value, children)


def full_minimax(position, depth: int, maximizing: bool, evaluator: Callable) -> tuple[int, int]:
    """Unpruned minimax over the same contract. Returns (value, nodes visited)."""
    if depth == 0 or position.is_terminal():
        return evaluator(position), 1
    values = []
    nodes = 1
    for move in position.legal_moves():
        position.apply(move)
        try:
            value, visited = full_minimax(position, depth - 1, not maximizing, evaluator)
        finally:
            position.undo()
        values.append(value)
        nodes += visited
    if not values:
        return evaluator(position), nodes
    return (max(values) if maximizing else min(values)), nodes


class StubRandom:
    """
    Scripted random source.

    `random()` returns the scripted values in order, `randrange()` returns a
    fixed index and `shuffle()` keeps the order, unless told to fail.
    """

    def __init__(self, values=(), index: int = 0, fail: bool = False) -> None:
        self.values = list(values)
        self.index = index
        self.fail = fail
        self.random_calls = 0

    def random(self) -> float:
        self.random_calls += 1
        if self.fail:
            raise OSError("no entropy")
        return self.values.pop(0)

    def randrange(self, n: int) -> int:
        if self.fail:
            raise OSError("no entropy")
        assert 0 <= self.index < n
        return self.index

    def shuffle(self, items: list) -> None:
        if self.fail:
            raise NotImplementedError("shuffle unavailable")
