# skillsweeper/utils.py

import random
from typing import List, Tuple


def get_neighbors(row: int, col: int, width: int, height: int) -> List[Tuple[int, int]]:
    """
    Return a list of valid neighboring coordinates (8-way) for (row, col).
    """
    neighbors = []
    for dr in [-1, 0, 1]:
        for dc in [-1, 0, 1]:
            nr, nc = row + dr, col + dc
            if (dr != 0 or dc != 0) and 0 <= nr < height and 0 <= nc < width:
                neighbors.append((nr, nc))
    return neighbors


def flatten_coord(row: int, col: int, width: int) -> int:
    return row * width + col


def unflatten_coord(idx: int, width: int) -> Tuple[int, int]:
    return idx // width, idx % width


def manhattan_distance(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def sample_positions(candidates, count: int, rng: random.Random = None) -> List[Tuple[int, int]]:
    """
    Pick `count` unique positions uniformly from `candidates`.
    Candidates are sorted first so a seeded rng gives the same draw
    regardless of set iteration order.
    """
    rng = rng or random
    pool = sorted(candidates)
    if count > len(pool):
        raise ValueError(
            f"Cannot place {count} mines: only {len(pool)} available cells."
        )
    return rng.sample(pool, count)


def format_board(visible: List[list]) -> str:
    """
    Render a visible board (see MinesweeperBoard.get_visible_state) as text.
    None is a hidden tile, "F" a flag and -1 a revealed mine.
    """
    symbols = {None: ".", "F": "F", 0: " ", -1: "*"}
    width = len(visible[0]) if visible else 0
    lines = ["    " + " ".join(f"{c % 10}" for c in range(width))]
    lines.append("    " + "-" * (2 * width - 1))
    for r, row in enumerate(visible):
        cells = " ".join(symbols.get(cell, str(cell)) for cell in row)
        lines.append(f"{r:2d} |{cells}")
    return "\n".join(lines)
