#!/usr/bin/env python3
"""
Benchmark: nodes searched and time per move at each difficulty depth.

Run before and after any change to the evaluator or the search to see its
effect. A lower node count at the same depth means more effective pruning;
higher NPS means a faster evaluation. The random source is seeded so runs are
comparable.

Usage: python3 tools/bench.py [--seed N] [--difficulty medium hard]
"""
import argparse
import os
import random
import sys
import time

REPO = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO not in sys.path:
    sys.path.insert(0, REPO)

from engine.policy import POLICIES, Difficulty  # noqa: E402
from engine.position import BoardPosition  # noqa: E402
from engine.search import search_root  # noqa: E402

# Fixed positions spanning opening, middlegame, and endgame.
POSITIONS = [
    ("Start",        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"),
    ("After 1.e4",   "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"),
    ("Italian",      "r1bqk1nr/pppp1ppp/2n5/2b1p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 4 4"),
    ("Mid-open",     "r1bqkb1r/pppp1ppp/2n2n2/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 4 4"),
    ("Complex mid",  "r2q1rk1/ppp2ppp/2np1n2/2b1p1B1/2B1P1b1/2NP1N2/PPP2PPP/R2Q1RK1 w - - 0 8"),
    ("Pawn ending",  "6k1/ppp2ppp/8/3p4/3P4/8/PPP2PPP/6K1 w - - 0 1"),
    ("Rook ending",  "8/5pk1/6p1/7p/7P/6P1/5PK1/8 w - - 0 1"),
]


def run_position(label: str, fen: str, difficulty: Difficulty, seed: int) -> dict:
    """Search one position at the difficulty's depth and return metrics."""
    position = BoardPosition.from_fen(fen)
    depth = POLICIES[difficulty].depth
    start = time.perf_counter()
    result = search_root(position, depth, random.Random(seed))
    elapsed_ms = max(1, int((time.perf_counter() - start) * 1000))

    if result is None:
        return {"label": label, "move": "(none)", "depth": depth, "score": 0,
                "nodes": 0, "nps": 0, "time_ms": elapsed_ms}
    return {
        "label": label,
        "move": result.move,
        "depth": depth,
        "score": result.score,
        "nodes": result.nodes,
        "nps": result.nodes * 1000 // elapsed_ms,
        "time_ms": elapsed_ms,
    }


def main() -> None:
    """Run all benchmark positions and print a summary table per difficulty."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--difficulty", nargs="+", default=["medium", "hard"])
    args = parser.parse_args()

    for name in args.difficulty:
        difficulty = Difficulty.parse(name)
        print(f"Difficulty: {difficulty.value} (depth {POLICIES[difficulty].depth})")
        print(
            f"{'Position':<14} {'Move':<7} {'Depth':>5} {'Score':>6} "
            f"{'Nodes':>8} {'NPS':>8} {'Time(ms)':>9}"
        )
        print("-" * 68)

        results = []
        for label, fen in POSITIONS:
            r = run_position(label, fen, difficulty, args.seed)
            results.append(r)
            print(
                f"{r['label']:<14} {r['move']:<7} {r['depth']:>5} {r['score']:>6} "
                f"{r['nodes']:>8,} {r['nps']:>8,} {r['time_ms']:>9,}"
            )

        valid = [r for r in results if r["nodes"] > 0]
        if valid:
            avg_nodes = sum(r["nodes"] for r in valid) // len(valid)
            avg_time = sum(r["time_ms"] for r in valid) // len(valid)
            avg_nps = sum(r["nps"] for r in valid) // len(valid)
            print("-" * 68)
            print(
                f"{'AVERAGE':<14} {'':<7} {'':<5} {'':<6} "
                f"{avg_nodes:>8,} {avg_nps:>8,} {avg_time:>9,}"
            )
        print()


if __name__ == "__main__":
    main()
