# tests/test_game.py

import copy
import unittest

from skillsweeper.board import Highlight
from skillsweeper.constants import EMPTY_VALUE, MINE_VALUE
from skillsweeper.game import GameSession, GameStatus, RevealOutcome
from skillsweeper.relocator import RelocationError, relocate
from skillsweeper.solver import TileState, classify
from helpers import build_board, mine_positions, session_with_board

THREE_CLUES = [
    "ooo*.",
    "*....",
    ".....",
]

PINNED_MINE = [
    "*o..",
    "oo..",
    "....",
    "....",
]

# one pinned mine with a safe tile beside it, then a 1-or-2 mine chain
CHAIN_WITH_SAFE = ["o*o.*o.o*"]

# the same chain alone: every tile undetermined, no safe tile
CHAIN = ["*o.o*"]


class TestGameSession(unittest.TestCase):

    def test_reset_gives_blank_board(self):
        game = GameSession(width=10, height=10, num_mines=10)
        game.reset(10, 10, 10)
        self.assertEqual(game.status, GameStatus.NOT_STARTED)
        self.assertEqual(game.board.count_mines(), 0)
        self.assertEqual(game.board.count_revealed(), 0)
        self.assertEqual(game.board.count_flags(), 0)
        self.assertEqual(game.mines_remaining(), 10)
        self.assertEqual(game.tiles_remaining(), 90)

    def test_reset_clamps_settings(self):
        game = GameSession(width=10, height=10, num_mines=500)
        self.assertEqual(game.num_mines, 91)

        game.reset(height=100, width=100, num_mines=10)
        self.assertEqual((game.height, game.width), (24, 30))

        game.reset(height=3, width=3, num_mines=5)
        self.assertEqual(game.num_mines, 0)

        game.reset(height=-4, width=0, num_mines=-2)
        self.assertEqual((game.height, game.width, game.num_mines), (1, 1, 0))

    def test_reset_keeps_omitted_settings(self):
        game = GameSession(width=12, height=8, num_mines=15)
        game.reveal(4, 4)
        game.reset()
        self.assertEqual((game.height, game.width, game.num_mines), (8, 12, 15))
        self.assertEqual(game.board.count_revealed(), 0)

    def test_seed_only_feeds_the_rng(self):
        games = [GameSession(width=9, height=9, num_mines=10, seed=3) for _ in range(2)]
        for game in games:
            game.reveal(4, 4)
        self.assertEqual(mine_positions(games[0].board), mine_positions(games[1].board))
        self.assertFalse(hasattr(games[0], "seed"))

    def test_first_reveal_places_mines_away_from_click(self):
        game = GameSession(width=10, height=10, num_mines=10, seed=1)
        game.reveal(5, 5)
        self.assertEqual(game.status, GameStatus.IN_PROGRESS)
        self.assertEqual(game.last_outcome, RevealOutcome.SAFE)
        self.assertEqual(game.board.count_mines(), 10)
        self.assertTrue(game.board.is_revealed(5, 5))
        for dr in (-1, 0, 1):
            for dc in (-1, 0, 1):
                self.assertFalse(game.board.is_mine(5 + dr, 5 + dc))

    def test_guess_while_safe_tile_exists_loses(self):
        game = session_with_board(build_board(THREE_CLUES))
        self.assertFalse(game.board.is_mine(1, 1))

        game.reveal(1, 1)

        self.assertEqual(game.status, GameStatus.LOST)
        self.assertEqual(game.last_outcome, RevealOutcome.FORCED_LOSS)
        self.assertTrue(game.board.is_mine(1, 1))
        self.assertEqual(game.board.count_mines(), 2)
        self.assertEqual(game.board.highlights[1][1], Highlight.RED)
        self.assertEqual(game.board.highlights[1][2], Highlight.GREEN)
        for r, c in mine_positions(game.board):
            self.assertTrue(game.board.is_revealed(r, c))

    def test_guess_on_actual_mine_loses_without_moving_mines(self):
        game = session_with_board(build_board(THREE_CLUES))
        game.reveal(1, 0)
        self.assertEqual(game.last_outcome, RevealOutcome.FORCED_LOSS)
        self.assertEqual(mine_positions(game.board), {(1, 0), (0, 3)})

    def test_unavoidable_guess_on_mine_survives(self):
        game = session_with_board(build_board([
            "oo",
            "*.",
        ]))
        game.reveal(1, 0)

        self.assertEqual(game.last_outcome, RevealOutcome.FORCED_SAFE)
        self.assertFalse(game.board.is_mine(1, 0))
        self.assertEqual(mine_positions(game.board), {(1, 1)})
        self.assertTrue(game.board.is_revealed(1, 0))
        self.assertEqual(game.board.board[1][0], 1)
        self.assertEqual(game.status, GameStatus.WON)

    def test_unavoidable_guess_on_empty_tile_survives(self):
        game = session_with_board(build_board([
            "oo",
            "*.",
        ]))
        game.reveal(1, 1)
        self.assertEqual(game.last_outcome, RevealOutcome.FORCED_SAFE)
        self.assertEqual(mine_positions(game.board), {(1, 0)})
        self.assertTrue(game.is_win())

    def test_provable_mine_is_a_misclick(self):
        game = session_with_board(build_board(PINNED_MINE))
        game.reveal(0, 0)
        self.assertEqual(game.status, GameStatus.LOST)
        self.assertEqual(game.last_outcome, RevealOutcome.MISCLICK)
        self.assertEqual(mine_positions(game.board), {(0, 0)})
        self.assertEqual(game.board.highlights[0][0], Highlight.RED)
        self.assertEqual(game.board.highlights[3][3], Highlight.GREEN)
        self.assertEqual(game.board.highlights[0][2], Highlight.GREEN)

    def test_provably_safe_tile_opens(self):
        game = session_with_board(build_board(PINNED_MINE))
        game.reveal(3, 3)
        self.assertEqual(game.last_outcome, RevealOutcome.SAFE)
        self.assertEqual(game.status, GameStatus.WON)
        self.assertEqual(game.tiles_remaining(), 0)

    def test_flags(self):
        game = session_with_board(build_board(THREE_CLUES))
        game.toggle_flag(1, 0)
        self.assertTrue(game.board.is_flagged(1, 0))
        self.assertEqual(game.mines_remaining(), 1)

        game.reveal(1, 0)
        self.assertEqual(game.last_outcome, RevealOutcome.IGNORED)
        self.assertEqual(game.status, GameStatus.IN_PROGRESS)

        game.toggle_flag(0, 0)
        self.assertFalse(game.board.is_flagged(0, 0))
        game.toggle_flag(1, 0)
        self.assertEqual(game.mines_remaining(), 2)

    def test_no_moves_after_game_over(self):
        game = session_with_board(build_board(PINNED_MINE))
        game.reveal(0, 0)
        revealed = game.board.count_revealed()
        game.reveal(3, 3)
        game.toggle_flag(3, 3)
        self.assertEqual(game.last_outcome, RevealOutcome.IGNORED)
        self.assertEqual(game.board.count_revealed(), revealed)
        self.assertFalse(game.board.is_flagged(3, 3))

    def test_step(self):
        game = GameSession(width=6, height=6, num_mines=4, seed=2)
        state = game.step("flag", 0, 0)
        self.assertEqual(state["board"][0][0], "F")
        self.assertEqual(state["mines_remaining"], 3)
        state = game.step("flag", 0, 0)
        state = game.step("reveal", 3, 3)
        self.assertIn(state["status"], ("in_progress", "won"))
        self.assertEqual(state["last_outcome"], "safe")
        self.assertEqual(state["moves_made"], 3)
        self.assertEqual(state["dimensions"], (6, 6))

    def test_step_rejects_unknown_action(self):
        game = GameSession(width=6, height=6, num_mines=4)
        with self.assertRaises(ValueError):
            game.step("chord", 0, 0)

    def test_out_of_range_reveal_is_ignored(self):
        game = GameSession(width=5, height=5, num_mines=3)
        game.reveal(9, 9)
        self.assertEqual(game.status, GameStatus.NOT_STARTED)
        self.assertEqual(game.last_outcome, RevealOutcome.IGNORED)


class TestNoGuessPolicy(unittest.TestCase):
    """Play whole games and check each decision against a fresh classification."""

    def _first_hidden(self, game, result, state):
        for r in range(game.height):
            for c in range(game.width):
                if not game.board.is_revealed(r, c) and result.state_at(r, c) == state:
                    return r, c
        return None

    def _play_safe_move(self, game, result):
        game.reveal(*self._first_hidden(game, result, TileState.SAFE))
        self.assertEqual(game.last_outcome, RevealOutcome.SAFE)

    def test_careful_player_never_loses_to_a_guess(self):
        for seed in range(6):
            game = GameSession(width=8, height=8, num_mines=10, seed=seed)
            game.reveal(4, 4)

            while game.status == GameStatus.IN_PROGRESS:
                result = classify(game.board, game.num_mines)
                if result.safe_exists:
                    self._play_safe_move(game, result)
                else:
                    guess = self._first_hidden(game, result, TileState.UNKNOWN)
                    if guess is None:
                        break
                    before = copy.deepcopy(game.board)
                    game.reveal(*guess)
                    if game.last_outcome == RevealOutcome.UNFORCED_LOSS:
                        with self.assertRaises(RelocationError):
                            relocate(before, result.configurations, *guess, EMPTY_VALUE)
                        self.assertEqual(mine_positions(game.board), mine_positions(before))
                        break
                    self.assertEqual(game.last_outcome, RevealOutcome.FORCED_SAFE)
                    self.assertFalse(game.board.is_mine(*guess))
                self.assertNotEqual(game.status, GameStatus.LOST)
                self.assertEqual(game.board.count_mines(), 10)

    def test_guess_next_to_a_safe_tile_always_loses(self):
        for seed in range(6):
            game = GameSession(width=8, height=8, num_mines=10, seed=seed)
            game.reveal(4, 4)

            while game.status == GameStatus.IN_PROGRESS:
                result = classify(game.board, game.num_mines)
                guess = self._first_hidden(game, result, TileState.UNKNOWN)
                if not result.safe_exists or guess is None:
                    break

                before = copy.deepcopy(game.board)
                game.reveal(*guess)
                self.assertEqual(game.board.count_mines(), 10)
                if game.last_outcome == RevealOutcome.UNFORCED_SAFE:
                    with self.assertRaises(RelocationError):
                        relocate(before, result.configurations, *guess, MINE_VALUE)
                    self.assertEqual(mine_positions(game.board), mine_positions(before))
                    continue
                self.assertEqual(game.last_outcome, RevealOutcome.FORCED_LOSS)
                self.assertTrue(game.board.is_mine(*guess))
                self.assertEqual(game.status, GameStatus.LOST)



class TestRelocationFallbacks(unittest.TestCase):

    def test_guess_keeps_its_tile_when_no_mine_fits_there(self):
        board = build_board(CHAIN_WITH_SAFE)
        game = session_with_board(board)
        result = classify(board, game.num_mines)
        self.assertTrue(result.safe_exists)
        self.assertEqual(result.state_at(0, 3), TileState.SAFE)
        self.assertEqual(result.state_at(0, 6), TileState.UNKNOWN)
        mines = mine_positions(board)

        game.reveal(0, 6)

        self.assertEqual(game.last_outcome, RevealOutcome.UNFORCED_SAFE)
        self.assertEqual(game.status, GameStatus.IN_PROGRESS)
        self.assertTrue(game.board.is_revealed(0, 6))
        self.assertEqual(game.board.board[0][6], 2)
        self.assertEqual(mine_positions(game.board), mines)
        self.assertEqual(game.get_state()["last_outcome"], "unforced_safe")

    def test_guess_keeps_its_mine_when_no_empty_board_fits(self):
        board = build_board(CHAIN)
        game = session_with_board(board)
        result = classify(board, game.num_mines)
        self.assertFalse(result.safe_exists)
        self.assertEqual(result.state_at(0, 0), TileState.UNKNOWN)
        mines = mine_positions(board)

        game.reveal(0, 0)

        self.assertEqual(game.last_outcome, RevealOutcome.UNFORCED_LOSS)
        self.assertEqual(game.status, GameStatus.LOST)
        self.assertEqual(game.board.highlights[0][0], Highlight.RED)
        self.assertEqual(mine_positions(game.board), mines)
        self.assertEqual(game.board.count_mines(), 2)

    def test_relocation_reports_the_impossible_target(self):
        board = build_board(CHAIN)
        result = classify(board, board.num_mines)
        with self.assertRaises(RelocationError):
            relocate(board, result.configurations, 0, 0, EMPTY_VALUE)
        self.assertEqual(mine_positions(board), {(0, 0), (0, 4)})


if __name__ == "__main__":
    unittest.main()
