"""
Skillsweeper

Minesweeper where a coin-flip guess is never rewarded and never unfairly
punished: hidden mines are moved after the fact so a guess loses whenever a
provably safe tile was available, and survives whenever none was.
"""

from .board import Highlight, MinesweeperBoard
from .config import clamp_settings, load_config
from .game import GameSession, GameStatus, RevealOutcome
from .relocator import RelocationError, relocate
from .solver import (
    Classification,
    Configuration,
    ConfigurationEnumerator,
    SolverInvariantError,
    TileState,
    classify,
    find_groups,
    partition_frontier,
)

__version__ = "0.1"

__all__ = [
    "Classification",
    "Configuration",
    "ConfigurationEnumerator",
    "GameSession",
    "GameStatus",
    "Highlight",
    "MinesweeperBoard",
    "RelocationError",
    "RevealOutcome",
    "SolverInvariantError",
    "TileState",
    "clamp_settings",
    "classify",
    "find_groups",
    "load_config",
    "partition_frontier",
    "relocate",
]
