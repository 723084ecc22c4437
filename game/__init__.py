"""
Game package: session state around the engine.

Modules:
    session — GameSession (mode, history, captures, status messages)
"""

from game.session import GameMode, GameSession, GameStatus

__all__ = ["GameMode", "GameSession", "GameStatus"]
