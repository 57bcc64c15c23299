# tests/helpers.py

import random

from skillsweeper.board import MinesweeperBoard
from skillsweeper.game import GameSession, GameStatus


def build_board(rows, num_mines=None, seed=0):
    """
    Build a started board from a picture:
        "*" hidden mine, "." hidden safe tile, "o" revealed safe tile.
    Clue numbers are computed from the mines.
    """
    height, width = len(rows), len(rows[0])
    mines = sum(line.count("*") for line in rows)
    board = MinesweeperBoard(
        width, height, mines if num_mines is None else num_mines, rng=random.Random(seed)
    )
    for r, line in enumerate(rows):
        for c, ch in enumerate(line):
            if ch == "*":
                board.board[r][c] = -1
            elif ch == "o":
                board.revealed[r][c] = True
    board.compute_adjacent_counts()
    board.mines_placed = True
    return board


def session_with_board(board, seed=0):
    """A GameSession already in progress on `board`, bypassing setting clamps."""
    session = GameSession(width=board.width, height=board.height, num_mines=0, seed=seed)
    session.board = board
    session.num_mines = board.num_mines
    session.board.rng = session.rng
    session.status = GameStatus.IN_PROGRESS
    return session


def mine_positions(board):
    return {
        (r, c)
        for r in range(board.height)
        for c in range(board.width)
        if board.board[r][c] == -1
    }
