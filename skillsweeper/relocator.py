"""Move hidden mines after the fact so a chosen tile gets the value the no-guess rule demands."""

import logging
import random
from typing import List, Optional

import numpy as np

from .constants import EMPTY_VALUE, MINE_VALUE, UNPLACED_VALUE
from .solver import Configuration
from .utils import flatten_coord, sample_positions, unflatten_coord

logger = logging.getLogger(__name__)


class RelocationError(RuntimeError):
    """No choice of configurations puts the requested value on the tile with exactly M mines."""


def _compatible(configs: List[Configuration], target: int, desired: int) -> List[Configuration]:
    return [
        config for config in configs
        if config.value_at(target) in (desired, UNPLACED_VALUE)
    ]


def _achievable_totals(candidates):
    """totals[i] holds every mine count groups i.. can add up to."""
    totals = [{0}]
    for configs in reversed(candidates):
        counts = {config.mine_count for config in configs}
        totals.append({a + b for a in totals[-1] for b in counts})
    totals.reverse()
    return totals


def _choose_configurations(candidates, budget, free_tiles, rng):
    """
    Pick one configuration per group, uniformly among those that still
    leave a way to end up with exactly `budget` mines once the later groups
    and the free tiles take their share.
    """
    totals = _achievable_totals(candidates)

    chosen = []
    placed = 0
    for i, configs in enumerate(candidates):
        feasible = [
            config for config in configs
            if any(
                budget - free_tiles <= placed + config.mine_count + later <= budget
                for later in totals[i + 1]
            )
        ]
        if not feasible:
            raise RelocationError(
                f"No configuration of group {i} fits a budget of {budget} mines."
            )
        pick = rng.choice(feasible)
        chosen.append(pick)
        placed += pick.mine_count
    return chosen, placed


def relocate(board, configurations: List[List[Configuration]], row: int, col: int,
             desired: int, rng: Optional[random.Random] = None) -> None:
    """
    Rewrite the hidden mines of `board` so (row, col) holds `desired`
    (MINE_VALUE or EMPTY_VALUE) while every clue stays satisfied and the
    board keeps exactly `board.num_mines` mines.

    Per group, only configurations that agree with `desired` at the target
    (or leave it unplaced) survive, and one is drawn at random. The rest of
    the mines go uniformly onto hidden tiles no chosen configuration fixed.
    Clue numbers are recomputed afterwards.

    Raises:
        ValueError: if `desired` is not a mine or empty value.
        RelocationError: if no consistent placement exists.
    """
    if desired not in (MINE_VALUE, EMPTY_VALUE):
        raise ValueError("desired must be MINE_VALUE or EMPTY_VALUE.")

    rng = rng or board.rng
    target = flatten_coord(row, col, board.width)

    candidates = []
    for group_index, configs in enumerate(configurations):
        surviving = _compatible(configs, target, desired)
        if not surviving:
            raise RelocationError(
                f"Every configuration of group {group_index} contradicts the forced value at {(row, col)}."
            )
        candidates.append(surviving)

    # Tiles outside every group that are still hidden (the target excluded)
    # are the only ones free to take leftover mines.
    covered = np.zeros(board.width * board.height, dtype=bool)
    for configs in candidates:
        covered |= configs[0].assignment != UNPLACED_VALUE
    target_in_group = bool(covered[target])

    free = [
        (r, c) for r, c in board.hidden_cells()
        if not covered[flatten_coord(r, c, board.width)]
        and (r, c) != (row, col)
    ]

    budget = board.num_mines
    if desired == MINE_VALUE and not target_in_group:
        budget -= 1

    chosen, placed = _choose_configurations(candidates, budget, len(free), rng)
    if not 0 <= budget - placed <= len(free):
        raise RelocationError(
            f"{budget - placed} leftover mines cannot go on {len(free)} free tiles."
        )

    board.clear_mines()
    for config in chosen:
        for idx in np.flatnonzero(config.assignment == MINE_VALUE):
            r, c = unflatten_coord(int(idx), board.width)
            board.board[r][c] = MINE_VALUE

    board.board[row][col] = desired

    for r, c in sample_positions(free, budget - placed, rng):
        board.board[r][c] = MINE_VALUE

    board.compute_adjacent_counts()

    logger.info(
        "Relocated mines to force %s at (%d, %d): %d from configurations, %d free",
        "mine" if desired == MINE_VALUE else "empty", row, col, placed, budget - placed,
    )
