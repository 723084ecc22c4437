"""
Terminal shell for playing chess against the engine or a friend.

Flow:
    menu        choose Single Player (vs engine) or Multiplayer (hot seat)
    difficulty  choose Casual / Tactical / Master (single player only)
    game        enter moves until the game ends

In-game commands:
    <move>          a move in SAN ("Nf3") or coordinates ("g1f3", "e7e8q")
    hint <square>   list the destination squares of the piece on <square>
    reset           restart the current game
    menu            leave the game and return to the main menu
    quit            exit

Prompts and the board go to stdout; diagnostics go to stderr. The engine runs
synchronously between prompts; depth-bounded search keeps each reply short.

Usage:
    python -m interface.cli [--mode pvc|pvp] [--difficulty easy|medium|hard] [--seed N]
"""

import argparse
import logging
import random
import sys
from typing import TextIO

import chess

from engine.policy import DIFFICULTY_LABELS, Difficulty
from engine.position import IllegalMoveError
from game.session import GameMode, GameSession


class QuitShell(Exception):
    """Raised by the `quit` command or end of input to leave the shell."""


class CliShell:
    """
    Stateful handler for the terminal shell.

    Holds the current game session and dispatches each input line to a
    handler method. Input and output streams are injectable so the shell can
    be driven from tests.

    Attributes:
        session: The running game, or None while in the menus.
        mode:    Preselected mode; skips the mode menu when set.
        difficulty: Preselected tier; skips the difficulty menu when set.
    """

    def __init__(
        self,
        stdin: TextIO = sys.stdin,
        stdout: TextIO = sys.stdout,
        stderr: TextIO = sys.stderr,
        mode: GameMode | None = None,
        difficulty: Difficulty | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.stdin = stdin
        self.stdout = stdout
        self.stderr = stderr
        self.mode = mode
        self.difficulty = difficulty
        self.rng = rng if rng is not None else random.Random()
        self.session: GameSession | None = None

    # -----------------------------------------------------------------------
    # I/O helpers
    # -----------------------------------------------------------------------

    def _send(self, line: str = "") -> None:
        print(line, file=self.stdout, flush=True)

    def _log(self, message: str) -> None:
        print(message, file=self.stderr, flush=True)

    def _prompt(self, text: str) -> str:
        self.stdout.write(text)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise QuitShell
        return line.strip()

    # -----------------------------------------------------------------------
    # Menus
    # -----------------------------------------------------------------------

    def choose_mode(self) -> GameMode:
        if self.mode is not None:
            return self.mode
        self._send("ZEN CHESS")
        self._send("  1. Single Player")
        self._send("  2. Multiplayer")
        while True:
            answer = self._prompt("> ").lower()
            if answer in ("1", "single", "pvc"):
                return GameMode.PVC
            if answer in ("2", "multi", "multiplayer", "pvp"):
                return GameMode.PVP
            if answer == "quit":
                raise QuitShell
            self._send("Choose 1 or 2.")

    def choose_difficulty(self) -> Difficulty:
        if self.difficulty is not None:
            return self.difficulty
        self._send("Select Difficulty")
        tiers = list(Difficulty)
        for index, tier in enumerate(tiers, start=1):
            label, subtitle = DIFFICULTY_LABELS[tier]
            self._send(f"  {index}. {label:<10} {subtitle}")
        while True:
            answer = self._prompt("> ")
            if answer.isdigit() and 1 <= int(answer) <= len(tiers):
                return tiers[int(answer) - 1]
            if answer.lower() == "quit":
                raise QuitShell
            try:
                return Difficulty.parse(answer)
            except ValueError:
                self._send(f"Choose 1-{len(tiers)}.")

    # -----------------------------------------------------------------------
    # Game loop
    # -----------------------------------------------------------------------

    def render(self) -> None:
        session = self.session
        self._send()
        self._send(str(session.position.board))
        self._send()
        if session.mode == GameMode.PVC:
            self._send(f"[{session.difficulty.value}]")
        self._send(f"Status: {session.status_message()}")
        for color, name in ((chess.WHITE, "White"), (chess.BLACK, "Black")):
            taken = " ".join(chess.piece_symbol(p).upper() for p in session.captured[color])
            if taken:
                self._send(f"{name} lost: {taken}")
        if session.last_move is not None:
            self._send(f"Last move: {session.last_move.san}")

    def handle_move(self, text: str) -> None:
        try:
            self.session.play(text)
        except IllegalMoveError as exc:
            self._send(str(exc))
            return
        self.render()
        if self.session.is_engine_turn():
            self.handle_engine_turn()

    def handle_engine_turn(self) -> None:
        result = self.session.play_engine_move()
        if result is None:
            self._log("engine: no legal move")
            return
        self._send(f"Engine plays: {result.san}")
        self.render()

    def handle_hint(self, args: list[str]) -> None:
        if not args:
            self._send("Usage: hint <square>")
            return
        targets = self.session.targets(args[0])
        self._send(" ".join(targets) if targets else "No moves from that square.")

    def handle_reset(self) -> None:
        self.session.reset()
        self.render()

    def play_game(self) -> bool:
        """
        Run one game until it ends or the player leaves.

        Returns:
            True to go back to the menu, False when the game simply ended.
        """
        self.render()
        while not self.session.position.is_terminal():
            line = self._prompt("Your move: " if self.session.mode == GameMode.PVC else "Move: ")
            if not line:
                continue
            tokens = line.split()
            command, args = tokens[0].lower(), tokens[1:]

            if command == "quit":
                raise QuitShell
            if command == "menu":
                return True
            if command == "reset":
                self.handle_reset()
            elif command == "hint":
                self.handle_hint(args)
            else:
                self.handle_move(line)

        self._send(f"Game over: {self.session.position.result()}")
        return False

    def run(self) -> None:
        """Main shell loop: menus, then games, until quit or end of input."""
        try:
            while True:
                mode = self.choose_mode()
                difficulty = self.choose_difficulty() if mode == GameMode.PVC else Difficulty.MEDIUM
                self.session = GameSession(mode, difficulty, self.rng)
                back_to_menu = self.play_game()
                if not back_to_menu and self.mode is not None:
                    return
                # Menu choices are asked again after leaving a game.
                self.mode = None
                self.difficulty = None
        except QuitShell:
            self._send("Goodbye")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Play chess in the terminal.")
    parser.add_argument("--mode", choices=["pvc", "pvp"], help="skip the mode menu")
    parser.add_argument("--difficulty", help="skip the difficulty menu (easy, medium, hard)")
    parser.add_argument("--seed", type=int, help="seed the engine's random choices")
    parser.add_argument("--verbose", action="store_true", help="log engine details to stderr")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    mode = {"pvc": GameMode.PVC, "pvp": GameMode.PVP}.get(args.mode) if args.mode else None
    difficulty = None
    if args.difficulty:
        try:
            difficulty = Difficulty.parse(args.difficulty)
        except ValueError as exc:
            parser.error(str(exc))

    CliShell(mode=mode, difficulty=difficulty, rng=random.Random(args.seed)).run()


if __name__ == "__main__":
    main()
