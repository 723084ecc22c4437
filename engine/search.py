"""
Search: depth-limited minimax with alpha-beta pruning.

White is the maximizing side and Black the minimizing side, matching the
evaluator's White-positive score. The search walks one shared position handle
depth-first: every move is applied, searched and undone before the next
sibling is tried. Undo runs in a `finally` block, so the handle is restored on
pruning cutoffs and when an exception (for example an illegal move reported by
the rules engine) aborts the search.

The root ply is searched explicitly by `search_root` rather than through
`minimax` so that it can remember which move produced the best value. Root
moves are shuffled first with the caller's random source; among equally
scored moves the first one in shuffled order wins, so the engine does not
always answer the same way in equal positions.

Not implemented here: transposition tables, iterative deepening, quiescence
search, time limits. Callers bound the cost by depth.
"""

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass

import chess

from engine.constants import INF_SCORE
from engine.evaluate import evaluate
from engine.position import Position

_log = logging.getLogger(__name__)

Evaluator = Callable[[Position], int]


@dataclass
class SearchStats:
    """
    Counters filled in by `minimax` while it runs.

    Attributes:
        nodes:   Positions visited, horizon and terminal nodes included.
        cutoffs: Times the remaining siblings of a node were pruned.
    """

    nodes: int = 0
    cutoffs: int = 0


@dataclass(frozen=True)
class SearchResult:
    """
    Report of one root move selection.

    Attributes:
        move:       The chosen move identifier.
        score:      White-positive centipawn score of the chosen move, or None
                    when the move was picked at random without searching.
        depth:      Search depth in plies (0 for a random pick).
        nodes:      Positions visited below the root.
        randomized: True when the difficulty policy skipped the search.
    """

    move: str
    score: int | None
    depth: int
    nodes: int
    randomized: bool = False


def minimax(
    position: Position,
    depth: int,
    alpha: int,
    beta: int,
    maximizing: bool,
    stats: SearchStats | None = None,
    evaluator: Evaluator = evaluate,
) -> int:
    """
    Minimax value of `position` searched `depth` plies deep.

    Args:
        position:   Position handle. Mutated during the call and restored
                    before it returns or raises.
        depth:      Remaining plies. At 0 the evaluator scores the position.
        alpha:      Best score the maximizing side is already assured of.
        beta:       Best score the minimizing side is already assured of.
        maximizing: True when White is to move at this node.
        stats:      Optional counters updated in place.
        evaluator:  Static evaluation used at the horizon and terminal nodes.

    Returns:
        The White-positive score. Pruning never changes this value compared
        with a full minimax over the same tree; it only skips nodes.
    """
    if stats is not None:
        stats.nodes += 1

    if depth == 0 or position.is_terminal():
        return evaluator(position)

    moves = position.legal_moves()
    # A non-terminal node without moves cannot occur with a real rules engine.
    if not moves:
        return evaluator(position)

    if maximizing:
        best = -INF_SCORE
        for move in moves:
            position.apply(move)
            try:
                value = minimax(position, depth - 1, alpha, beta, False, stats, evaluator)
            finally:
                position.undo()
            best = max(best, value)
            alpha = max(alpha, value)
            if beta <= alpha:
                if stats is not None:
                    stats.cutoffs += 1
                break
    else:
        best = INF_SCORE
        for move in moves:
            position.apply(move)
            try:
                value = minimax(position, depth - 1, alpha, beta, True, stats, evaluator)
            finally:
                position.undo()
            best = min(best, value)
            beta = min(beta, value)
            if beta <= alpha:
                if stats is not None:
                    stats.cutoffs += 1
                break

    return best


def shuffle_moves(moves: list[str], rng: random.Random) -> list[str]:
    """
    Return a shuffled copy of `moves`.

    If the random source is unavailable (it raises OSError or
    NotImplementedError, as random.SystemRandom can on exotic platforms) the
    original enumeration order is kept.
    """
    shuffled = list(moves)
    try:
        rng.shuffle(shuffled)
    except (OSError, NotImplementedError) as exc:
        _log.warning("Random source unavailable, keeping move order: %s", exc)
        return list(moves)
    return shuffled


def search_root(
    position: Position,
    depth: int,
    rng: random.Random | None = None,
    evaluator: Evaluator = evaluate,
) -> SearchResult | None:
    """
    Search every root move and return the best one with its score.

    Args:
        position:  Position handle, restored before returning or raising.
        depth:     Total search depth in plies, root ply included. Must be >= 1.
        rng:       Random source used to shuffle the root moves. A fresh
                   random.Random() is used when omitted.
        evaluator: Static evaluation used below the root.

    Returns:
        A SearchResult, or None when the side to move has no legal moves
        (checkmate or stalemate; the caller tells them apart).

    Raises:
        ValueError: depth < 1.
        IllegalMoveError: propagated from the rules engine.
    """
    if depth < 1:
        raise ValueError("Search depth must be >= 1")

    moves = position.legal_moves()
    if not moves:
        return None

    rng = rng if rng is not None else random.Random()
    maximizing = position.side_to_move() == chess.WHITE
    stats = SearchStats()

    best_move: str | None = None
    best_value = -INF_SCORE if maximizing else INF_SCORE

    for move in shuffle_moves(moves, rng):
        position.apply(move)
        try:
            value = minimax(
                position,
                depth - 1,
                -INF_SCORE,
                INF_SCORE,
                not maximizing,
                stats,
                evaluator,
            )
        finally:
            position.undo()

        if (maximizing and value > best_value) or (not maximizing and value < best_value):
            best_value = value
            best_move = move

    _log.debug(
        "search_root depth=%d move=%s score=%d nodes=%d cutoffs=%d",
        depth,
        best_move,
        best_value,
        stats.nodes,
        stats.cutoffs,
    )
    return SearchResult(move=best_move, score=best_value, depth=depth, nodes=stats.nodes)


def choose_move(
    position: Position,
    depth: int,
    rng: random.Random | None = None,
) -> str | None:
    """Best move for the side to move at `depth` plies, or None if there is none."""
    result = search_root(position, depth, rng)
    return result.move if result is not None else None
