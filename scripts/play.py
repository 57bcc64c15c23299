#!/usr/bin/env python
"""Play Skillsweeper in the terminal.

Usage examples:
  python scripts/play.py
  python scripts/play.py --width 16 --height 16 --mines 40 --seed 7

Loads `config/skillsweeper.yaml` by default; command-line values override it.
Commands: `r ROW COL` reveals, `f ROW COL` toggles a flag, `n` starts over, `q` quits.
"""
import sys, os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import argparse
import logging

from skillsweeper.config import load_config
from skillsweeper.game import GameSession
from skillsweeper.utils import format_board

OUTCOME_MESSAGES = {
    "forced_safe": "No tile was provably safe, so that guess was on the house.",
    "forced_loss": "A provably safe tile existed (shown in green). Guessing loses.",
    "misclick": "That tile was provably a mine.",
    "unforced_safe": "That was a guess, but the mine count left no mine for it.",
    "unforced_loss": "That was a guess, but the mine count left no way to clear it.",
}


def print_state(state):
    print()
    print(format_board(state["board"]))
    print(f"\nMines left: {state['mines_remaining']}   Tiles left: {state['tiles_remaining']}")
    message = OUTCOME_MESSAGES.get(state["last_outcome"])
    if message:
        print(message)


def main():
    p = argparse.ArgumentParser()
    p.add_argument("--config", default=None, help="path to skillsweeper yaml config")
    p.add_argument("--width", type=int, default=None, help="board width (overrides config)")
    p.add_argument("--height", type=int, default=None, help="board height (overrides config)")
    p.add_argument("--mines", type=int, default=None, help="number of mines (overrides config)")
    p.add_argument("--seed", type=int, default=None, help="seed for a reproducible game")
    args = p.parse_args()

    config = load_config(args.config)
    logging.basicConfig(level=config["logging"]["level"], format="%(levelname)s %(name)s: %(message)s")

    board_cfg = config["board"]
    game = GameSession(
        width=args.width if args.width is not None else board_cfg["width"],
        height=args.height if args.height is not None else board_cfg["height"],
        num_mines=args.mines if args.mines is not None else board_cfg["num_mines"],
        seed=args.seed,
        config=config,
    )
    print(f"Skillsweeper {game.height}x{game.width} with {game.num_mines} mines. "
          "Commands: r ROW COL, f ROW COL, n, q")
    print_state(game.get_state())

    while True:
        parts = input("\n> ").strip().lower().replace(",", " ").split()
        if not parts:
            continue
        if parts[0] in {"q", "quit", "exit"}:
            print("Quit.")
            return
        if parts[0] == "n":
            game.reset()
            print_state(game.get_state())
            continue
        if parts[0] not in {"r", "f"} or len(parts) != 3:
            print("Invalid input. Example: r 3 5")
            continue
        try:
            row, col = int(parts[1]), int(parts[2])
        except ValueError:
            print("Invalid input. Coordinates must be integers.")
            continue

        state = game.step("reveal" if parts[0] == "r" else "flag", row, col)
        print_state(state)

        if state["game_over"]:
            print("\nYou won!" if state["won"] else "\nYou lost.")
            print("Type n for a new game or q to quit.")


if __name__ == "__main__":
    main()
