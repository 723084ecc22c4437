"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import random
from collections.abc import Callable

import pytest

from helpers import TreePosition, build_tree


@pytest.fixture
def make_tree() -> Callable[..., TreePosition]:
    """Build a random TreePosition from a seed."""

    def _make(seed: int, depth: int = 3, white_to_move: bool = True) -> TreePosition:
        return TreePosition(build_tree(random.Random(seed), depth), white_to_move)

    return _make


@pytest.fixture
def no_search(monkeypatch: pytest.MonkeyPatch) -> list[int]:
    """Make any call into the search fail the test; return the call log."""
    calls: list[int] = []

    def _fail(position, depth, rng=None, evaluator=None):
        calls.append(depth)
        raise AssertionError("search must not run")

    monkeypatch.setattr("engine.policy.search_root", _fail)
    return calls


@pytest.fixture
def recorded_search(monkeypatch: pytest.MonkeyPatch) -> list[int]:
    """Replace the search with a stub that records its depth and plays the first move."""
    from engine.search import SearchResult

    depths: list[int] = []

    def _record(position, depth, rng=None, evaluator=None):
        depths.append(depth)
        return SearchResult(move=position.legal_moves()[0], score=0, depth=depth, nodes=1)

    monkeypatch.setattr("engine.policy.search_root", _record)
    return depths
