"""Constraint solver: frontier partitioning, configuration enumeration and tile classification."""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Set, Tuple

import numpy as np

from .constants import EMPTY_VALUE, MINE_VALUE, UNPLACED_VALUE
from .utils import flatten_coord, manhattan_distance

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]


class TileState(IntEnum):
    SAFE = 0
    DANGEROUS = 1
    UNKNOWN = 2


class SolverInvariantError(RuntimeError):
    """The search reached a state that a legally generated board cannot produce."""


@dataclass(frozen=True, eq=False)
class Configuration:
    """
    One clue-consistent mine/empty assignment for a group.

    assignment is flat (row * width + col) over the whole board; tiles outside
    the group stay UNPLACED_VALUE.
    """

    assignment: np.ndarray
    mine_count: int

    def value_at(self, idx: int) -> int:
        return int(self.assignment[idx])


@dataclass
class Classification:
    danger_map: np.ndarray
    groups: List[List[Coord]]
    configurations: List[List[Configuration]]
    interior: Set[Coord]
    safe_exists: bool
    interior_safe: bool

    def state_at(self, row: int, col: int) -> TileState:
        return TileState(int(self.danger_map[row, col]))

    def safe_tiles(self) -> List[Coord]:
        return [(int(r), int(c)) for r, c in np.argwhere(self.danger_map == TileState.SAFE)]


# -------------------------------------------------------------------------
# Frontier partitioning
# -------------------------------------------------------------------------

def adjacent_clues(board, row: int, col: int) -> List[Coord]:
    return [(nr, nc) for nr, nc in board.neighbors(row, col) if board.is_clue(nr, nc)]


def hidden_neighbors(board, row: int, col: int) -> List[Coord]:
    return [(nr, nc) for nr, nc in board.neighbors(row, col) if not board.revealed[nr][nc]]


def partition_frontier(board) -> Tuple[Set[Coord], Set[Coord]]:
    """
    Split the hidden tiles into the frontier (touching at least one revealed
    clue) and the interior (touching none).
    """
    frontier: Set[Coord] = set()
    interior: Set[Coord] = set()
    for row, col in board.hidden_cells():
        if adjacent_clues(board, row, col):
            frontier.add((row, col))
        else:
            interior.add((row, col))
    return frontier, interior


def find_groups(board, frontier: Set[Coord]) -> List[List[Coord]]:
    """
    Split the frontier into groups of tiles linked through shared clues.

    Each group is listed in the order the search visits it: depth-first from
    the lowest remaining tile, nearest newly exposed tiles first.
    """
    unvisited = set(frontier)
    groups: List[List[Coord]] = []

    while unvisited:
        seed = min(unvisited)
        unvisited.discard(seed)
        group: List[Coord] = []
        stack = [seed]

        while stack:
            tile = stack.pop()
            group.append(tile)

            exposed: List[Coord] = []
            for clue in adjacent_clues(board, *tile):
                for neighbor in hidden_neighbors(board, *clue):
                    if neighbor in unvisited:
                        unvisited.discard(neighbor)
                        exposed.append(neighbor)

            # farthest first on the stack, so the nearest tile is popped next
            exposed.sort(key=lambda t: manhattan_distance(t, tile), reverse=True)
            stack.extend(exposed)

        groups.append(group)

    return groups


# -------------------------------------------------------------------------
# Configuration enumeration
# -------------------------------------------------------------------------

class ConfigurationEnumerator:
    """
    Iterative backtracking search over one group at a time.

    The working copy is a flat int8 array with an explicit UNPLACED sentinel.
    Decisions live on an explicit path stack; every tile is tried as a mine
    first, then as empty, and exhausting both retreats to the most recent
    mine decision still worth flipping.
    """

    def __init__(self, board):
        self.board = board
        self.width = board.width
        self.working = np.full(board.width * board.height, UNPLACED_VALUE, dtype=np.int8)
        self._clue_cache: Dict[int, List[Tuple[int, np.ndarray]]] = {}

    def _clues_around(self, row: int, col: int) -> List[Tuple[int, np.ndarray]]:
        """(clue value, flat indices of that clue's hidden neighbors) for each adjacent clue."""
        key = flatten_coord(row, col, self.width)
        cached = self._clue_cache.get(key)
        if cached is not None:
            return cached

        clues = []
        for cr, cc in adjacent_clues(self.board, row, col):
            hidden = np.array(
                [flatten_coord(hr, hc, self.width) for hr, hc in hidden_neighbors(self.board, cr, cc)],
                dtype=np.intp,
            )
            clues.append((self.board.board[cr][cc], hidden))
        self._clue_cache[key] = clues
        return clues

    def _is_consistent(self, clues: List[Tuple[int, np.ndarray]]) -> bool:
        for clue_value, hidden in clues:
            cells = self.working[hidden]
            confirmed = int(np.count_nonzero(cells == MINE_VALUE))
            potential = int(np.count_nonzero(cells == UNPLACED_VALUE))
            if confirmed > clue_value or confirmed + potential < clue_value:
                return False
        return True

    def _snapshot(self) -> Configuration:
        assignment = self.working.copy()
        assignment.setflags(write=False)
        return Configuration(
            assignment=assignment,
            mine_count=int(np.count_nonzero(assignment == MINE_VALUE)),
        )

    def _retreat(self, path: List[Tuple[int, int]]) -> Optional[Tuple[int, int]]:
        """
        Unwind the path until a decision tried as a mine is found and return
        it flipped to empty. None once the path is exhausted.
        """
        while path:
            tile, value = path.pop()
            self.working[tile] = UNPLACED_VALUE
            if value == MINE_VALUE:
                return tile, EMPTY_VALUE
        return None

    def enumerate(self, group: List[Coord]) -> List[Configuration]:
        """
        Return every assignment over `group` that satisfies all adjacent clues.

        Raises:
            SolverInvariantError: if the group is empty or admits no configuration.
        """
        if not group:
            raise SolverInvariantError("Cannot enumerate an empty group.")

        self.working.fill(UNPLACED_VALUE)

        order = [flatten_coord(r, c, self.width) for r, c in group]
        clues = {idx: self._clues_around(r, c) for idx, (r, c) in zip(order, group)}

        configurations: List[Configuration] = []
        path: List[Tuple[int, int]] = []
        candidate: Optional[Tuple[int, int]] = (order[0], MINE_VALUE)

        while candidate is not None:
            tile, value = candidate
            self.working[tile] = value

            if self._is_consistent(clues[tile]):
                if len(path) + 1 < len(order):
                    path.append(candidate)
                    candidate = (order[len(path)], MINE_VALUE)
                    continue
                configurations.append(self._snapshot())

            self.working[tile] = UNPLACED_VALUE
            if value == MINE_VALUE:
                candidate = (tile, EMPTY_VALUE)
            else:
                candidate = self._retreat(path)

        if not configurations:
            raise SolverInvariantError(
                f"Group of {len(group)} tiles seeded at {group[0]} admits no configuration."
            )

        logger.debug("Group seeded at %s: %d tiles, %d configurations",
                     group[0], len(group), len(configurations))
        return configurations


# -------------------------------------------------------------------------
# Classification
# -------------------------------------------------------------------------

def _fewest_mine_configurations(configurations: List[Configuration]) -> List[Configuration]:
    fewest = min(config.mine_count for config in configurations)
    return [config for config in configurations if config.mine_count == fewest]


def classify(board, mine_count: int) -> Classification:
    """
    Classify every hidden tile as SAFE, DANGEROUS or UNKNOWN.

    A tile is SAFE (DANGEROUS) when every surviving configuration of its group
    leaves it empty (places a mine on it). When the groups' minimum mine counts
    already add up to `mine_count`, no mine can sit on an interior tile: the
    interior is SAFE and each group keeps only its fewest-mine configurations.

    Raises:
        SolverInvariantError: if a group admits no configuration or the clues
            need more mines than the board holds.
    """
    frontier, interior = partition_frontier(board)
    groups = find_groups(board, frontier)

    enumerator = ConfigurationEnumerator(board)
    configurations = [enumerator.enumerate(group) for group in groups]

    min_total = sum(min(config.mine_count for config in configs) for configs in configurations)
    if min_total > mine_count:
        raise SolverInvariantError(
            f"Clues need at least {min_total} mines but the board holds {mine_count}."
        )

    interior_safe = min_total == mine_count
    if interior_safe:
        configurations = [_fewest_mine_configurations(configs) for configs in configurations]

    danger_map = np.full((board.height, board.width), TileState.UNKNOWN, dtype=np.int8)

    for group, configs in zip(groups, configurations):
        stacked = np.stack([config.assignment for config in configs])
        mine_hits = np.count_nonzero(stacked == MINE_VALUE, axis=0)
        empty_hits = np.count_nonzero(stacked == EMPTY_VALUE, axis=0)
        total = len(configs)

        for row, col in group:
            idx = flatten_coord(row, col, board.width)
            if mine_hits[idx] == total:
                danger_map[row, col] = TileState.DANGEROUS
            elif empty_hits[idx] == total:
                danger_map[row, col] = TileState.SAFE

    if interior_safe:
        for row, col in interior:
            danger_map[row, col] = TileState.SAFE

    safe_exists = bool(np.any(danger_map == TileState.SAFE))

    logger.debug(
        "Classified %d frontier tiles in %d groups, %d interior tiles (interior safe: %s)",
        len(frontier), len(groups), len(interior), interior_safe,
    )

    return Classification(
        danger_map=danger_map,
        groups=groups,
        configurations=configurations,
        interior=interior,
        safe_exists=safe_exists,
        interior_safe=interior_safe,
    )
