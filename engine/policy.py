"""
Difficulty policy and the public move-selection entry point.

Each difficulty tier maps to a fixed search depth and a probability of playing
a random legal move instead of searching:

    Easy    depth 1, random move 30% of the time
    Medium  depth 2
    Hard    depth 3

`best_move()` is what the game layer calls. The random source is a parameter
so tests (and reproducible games) can pass a seeded random.Random.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from enum import Enum

from engine.constants import (
    EASY_DEPTH,
    EASY_RANDOM_MOVE_PROBABILITY,
    HARD_DEPTH,
    MEDIUM_DEPTH,
)
from engine.position import Position
from engine.search import SearchResult, search_root

_log = logging.getLogger(__name__)


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @classmethod
    def parse(cls, text: str) -> "Difficulty":
        """
        Resolve a tier from user input.

        Accepts the enum values case-insensitively ("easy", "HARD") as well as
        the menu labels shown to players ("Casual", "Tactical", "Master").

        Raises:
            ValueError: The text names no tier.
        """
        key = text.strip().lower()
        for tier in cls:
            if key == tier.value.lower():
                return tier
        if key in _LABEL_ALIASES:
            return _LABEL_ALIASES[key]
        raise ValueError(f"Unknown difficulty: {text!r}")

    @property
    def label(self) -> str:
        return DIFFICULTY_LABELS[self][0]


@dataclass(frozen=True)
class DifficultyPolicy:
    depth: int
    random_move_probability: float = 0.0


POLICIES: dict[Difficulty, DifficultyPolicy] = {
    Difficulty.EASY: DifficultyPolicy(EASY_DEPTH, EASY_RANDOM_MOVE_PROBABILITY),
    Difficulty.MEDIUM: DifficultyPolicy(MEDIUM_DEPTH),
    Difficulty.HARD: DifficultyPolicy(HARD_DEPTH),
}

# Menu label and subtitle for each tier.
DIFFICULTY_LABELS: dict[Difficulty, tuple[str, str]] = {
    Difficulty.EASY: ("Casual", "For relaxation"),
    Difficulty.MEDIUM: ("Tactical", "Standard challenge"),
    Difficulty.HARD: ("Master", "Deep calculation"),
}

_LABEL_ALIASES: dict[str, Difficulty] = {
    label.lower(): tier for tier, (label, _) in DIFFICULTY_LABELS.items()
}


def policy_for(difficulty: Difficulty) -> DifficultyPolicy:
    return POLICIES[Difficulty(difficulty)]


def _random_pick(legal_moves: list[str], probability: float, rng: random.Random) -> str | None:
    """Return a random legal move with the given probability, else None."""
    if probability <= 0.0:
        return None
    try:
        if rng.random() >= probability:
            return None
        return legal_moves[rng.randrange(len(legal_moves))]
    except (OSError, NotImplementedError) as exc:
        _log.warning("Random source unavailable, searching instead: %s", exc)
        return None


def select_move(
    position: Position,
    difficulty: Difficulty,
    legal_moves: list[str],
    rng: random.Random | None = None,
) -> SearchResult | None:
    """
    Pick a move for the side to move according to the difficulty policy.

    Args:
        position:    Position handle. Restored before returning or raising.
        difficulty:  Tier selecting the search depth and random-move rate.
        legal_moves: The legal moves as listed by the rules engine. Used for
                     the no-move check and for the random pick.
        rng:         Random source for the random pick and root shuffling.

    Returns:
        A SearchResult (randomized=True when no search ran), or None when
        `legal_moves` is empty.
    """
    if not legal_moves:
        return None

    difficulty = Difficulty(difficulty)
    rng = rng if rng is not None else random.Random()
    policy = POLICIES[difficulty]

    move = _random_pick(legal_moves, policy.random_move_probability, rng)
    if move is not None:
        _log.debug("difficulty=%s random move=%s", difficulty.value, move)
        return SearchResult(move=move, score=None, depth=0, nodes=0, randomized=True)

    result = search_root(position, policy.depth, rng)
    if result is not None:
        _log.debug(
            "difficulty=%s move=%s score=%d nodes=%d",
            difficulty.value,
            result.move,
            result.score,
            result.nodes,
        )
    return result


def best_move(
    position: Position,
    difficulty: Difficulty,
    legal_moves: list[str],
    rng: random.Random | None = None,
) -> str | None:
    """Return the move the engine plays at `difficulty`, or None if there is none."""
    result = select_move(position, difficulty, legal_moves, rng)
    return result.move if result is not None else None


async def best_move_async(
    position: Position,
    difficulty: Difficulty,
    legal_moves: list[str],
    rng: random.Random | None = None,
) -> str | None:
    """
    Awaitable `best_move` that runs the search in a worker thread.

    The search itself stays synchronous; this only keeps an event loop
    responsive. Do not touch `position` until the call completes.
    """
    return await asyncio.to_thread(best_move, position, difficulty, legal_moves, rng)
