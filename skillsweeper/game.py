# skillsweeper/game.py

import logging
import random
from enum import Enum

from .board import Highlight, MinesweeperBoard
from .config import DEFAULT_CONFIG, clamp_settings
from .constants import EMPTY_VALUE, MINE_VALUE
from .relocator import RelocationError, relocate
from .solver import TileState, classify

logger = logging.getLogger(__name__)


class GameStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    LOST = "lost"
    WON = "won"


class RevealOutcome(str, Enum):
    SAFE = "safe"                    # the tile was provably safe (or the first click)
    FORCED_SAFE = "forced_safe"      # a genuine guess with no safe alternative: survives
    FORCED_LOSS = "forced_loss"      # a guess while a safe tile existed: loses
    MISCLICK = "misclick"            # a provable mine
    UNFORCED_SAFE = "unforced_safe"  # should have lost, but no board with M mines puts a mine there
    UNFORCED_LOSS = "unforced_loss"  # should have survived, but no board with M mines clears the tile
    IGNORED = "ignored"              # revealed, flagged, out of range or game over


class GameSession:
    """
    A wrapper around MinesweeperBoard that manages game state and turn flow.

    Every reveal is judged against the current clues: guessing while a
    provably safe tile exists always loses, guessing when nothing is provably
    safe always survives. Hidden mines are moved after the fact to make it so.
    """

    def __init__(self, width: int, height: int, num_mines: int, seed: int = None,
                 rng: random.Random = None, config: dict = None):
        self.config = config or DEFAULT_CONFIG
        self.rng = rng if rng is not None else random.Random(seed)
        self.reset(height, width, num_mines)

    def reset(self, height: int = None, width: int = None, num_mines: int = None):
        """
        Reset the game session to a fresh, unstarted board. Omitted settings
        keep their current values; all settings are clamped into range.
        """
        height = self.height if height is None else height
        width = self.width if width is None else width
        num_mines = self.num_mines if num_mines is None else num_mines
        self.height, self.width, self.num_mines = clamp_settings(height, width, num_mines, self.config)

        self.board = MinesweeperBoard(self.width, self.height, self.num_mines, rng=self.rng)
        self.status = GameStatus.NOT_STARTED
        self.last_outcome = None
        self.moves_made = 0

    def step(self, action: str, row: int, col: int) -> dict:
        """
        Apply an action ("reveal" or "flag") at position (row, col).
        Returns a dict describing the game state after the action.
        """
        if self.is_game_over():
            return self.get_state()

        if action == "reveal":
            self.reveal(row, col)
        elif action == "flag":
            self.toggle_flag(row, col)
        else:
            raise ValueError(f"Unknown action {action!r}; expected 'reveal' or 'flag'.")

        self.moves_made += 1
        return self.get_state()

    def toggle_flag(self, row: int, col: int):
        if self.is_game_over() or not self.board.is_valid_coord(row, col):
            return
        self.board.flag(int(row), int(col))

    def reveal(self, row: int, col: int):
        """
        Reveal (row, col) under the no-unfair-guess rule. Returns nothing;
        the decision taken is kept in `last_outcome`.

        The classifier only checks the mine budget when the groups already
        need every mine, so a forced value can still be impossible. Then the
        tile keeps its current value and the outcome is UNFORCED_SAFE or
        UNFORCED_LOSS.
        """
        board = self.board
        if self.is_game_over() or not board.is_valid_coord(row, col):
            self.last_outcome = RevealOutcome.IGNORED
            return
        row, col = int(row), int(col)
        if board.is_revealed(row, col) or board.is_flagged(row, col):
            self.last_outcome = RevealOutcome.IGNORED
            return

        if self.status == GameStatus.NOT_STARTED:
            board.place_mines_around_first_click(row, col)
            self.status = GameStatus.IN_PROGRESS
            self._open(row, col, RevealOutcome.SAFE)
            return

        classification = classify(board, self.num_mines)
        state = classification.state_at(row, col)
        outcome = RevealOutcome.SAFE

        if state == TileState.UNKNOWN:
            if classification.safe_exists:
                if not board.is_mine(row, col):
                    try:
                        relocate(board, classification.configurations, row, col, MINE_VALUE, self.rng)
                    except RelocationError as e:
                        # the mine count leaves no board with a mine here
                        logger.warning("Tile (%d, %d) cannot hold a mine: %s", row, col, e)
                        self._open(row, col, RevealOutcome.UNFORCED_SAFE)
                        return
                self._lose(row, col, classification, RevealOutcome.FORCED_LOSS)
                return
            if board.is_mine(row, col):
                try:
                    relocate(board, classification.configurations, row, col, EMPTY_VALUE, self.rng)
                except RelocationError as e:
                    # the mine count leaves no board without a mine here
                    logger.warning("Tile (%d, %d) cannot be cleared: %s", row, col, e)
                    self._lose(row, col, classification, RevealOutcome.UNFORCED_LOSS)
                    return
            outcome = RevealOutcome.FORCED_SAFE

        elif state == TileState.DANGEROUS:
            self._lose(row, col, classification, RevealOutcome.MISCLICK)
            return

        self._open(row, col, outcome)

    def _open(self, row, col, outcome):
        self.board.flood_reveal(row, col)
        self.last_outcome = outcome
        if self.board.is_complete():
            self.status = GameStatus.WON
            logger.info("Game won: %d safe tiles revealed", self.board.count_revealed())

    def _lose(self, row, col, classification, outcome):
        board = self.board
        board.highlight(row, col, Highlight.RED)
        for r, c in classification.safe_tiles():
            board.highlight(r, c, Highlight.GREEN)
        board.compute_adjacent_counts()
        board.reveal_all_mines()
        self.status = GameStatus.LOST
        self.last_outcome = outcome
        logger.info("Game lost at (%d, %d): %s", row, col, outcome.value)

    def get_state(self) -> dict:
        """
        Return the current visible board and game status.
        """
        return {
            "board": self.board.get_visible_state(),
            "highlights": self.board.get_highlights(),
            "status": self.status.value,
            "game_over": self.is_game_over(),
            "won": self.is_win(),
            "last_outcome": self.last_outcome.value if self.last_outcome else None,
            "moves_made": self.moves_made,
            "dimensions": (self.height, self.width),
            "num_mines": self.num_mines,
            "mines_remaining": self.mines_remaining(),
            "tiles_remaining": self.tiles_remaining(),
        }

    def mines_remaining(self) -> int:
        return self.num_mines - self.board.count_flags()

    def tiles_remaining(self) -> int:
        return self.width * self.height - self.num_mines - self.board.count_revealed()

    def is_game_over(self) -> bool:
        return self.status in (GameStatus.LOST, GameStatus.WON)

    def is_win(self) -> bool:
        return self.status == GameStatus.WON
