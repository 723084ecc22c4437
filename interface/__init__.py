"""
Interface package: ways for a person to play against the engine.

Modules:
    cli — Terminal shell with menus, hot-seat and single-player games.
          Run with: python -m interface.cli
"""
