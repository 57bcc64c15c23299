import random
from enum import IntEnum

from .constants import MINE_VALUE
from .utils import get_neighbors, sample_positions


class Highlight(IntEnum):
    NONE = 0
    RED = 1
    GREEN = 2


class MinesweeperBoard:
    def __init__(
        self,
        width,
        height,
        num_mines,
        rng=None,
        reserve_radius=1
    ):
        """
        Mines are placed lazily on the first reveal, excluding a
        (2*reserve_radius+1) x (2*reserve_radius+1) block centered on that
        first click. This guarantees:
            - The first clicked cell is not a mine
            - Its neighbors (in that block) are not mines
            - The first cell is a 0 and the flood fill opens a region.

        rng:
            random.Random used for every random draw on this board, so a
            seeded game replays identically.
        """
        self.width = width
        self.height = height
        self.num_mines = num_mines
        self.rng = rng if rng is not None else random.Random()
        self.reserve_radius = reserve_radius
        self.mines_placed = False

        self.board = []       # -1 = mine, 0–8 = adjacent mine counts
        self.revealed = []    # bool grid
        self.flags = []       # bool grid
        self.highlights = []  # Highlight grid

        self._init_board()

    def _init_board(self):
        self.board = [[0 for _ in range(self.width)] for _ in range(self.height)]
        self.revealed = [[False for _ in range(self.width)] for _ in range(self.height)]
        self.flags = [[False for _ in range(self.width)] for _ in range(self.height)]
        self.highlights = [[Highlight.NONE for _ in range(self.width)] for _ in range(self.height)]
        self.mines_placed = False

    def neighbors(self, row, col):
        return get_neighbors(row, col, self.width, self.height)

    def place_mines(self, exclude_cells=None):
        """
        Place mines randomly on the board, optionally excluding a set of cells.
        exclude_cells: iterable of (row, col) coordinates that must NOT contain a mine.
        """
        exclude_set = set(exclude_cells) if exclude_cells else set()

        all_coords = [
            (r, c)
            for r in range(self.height)
            for c in range(self.width)
            if (r, c) not in exclude_set
        ]

        self.clear_mines()
        for r, c in sample_positions(all_coords, self.num_mines, self.rng):
            self.board[r][c] = MINE_VALUE

    def place_mines_around_first_click(self, row, col):
        self.place_mines(exclude_cells=self._reserved_cells_around(row, col))
        self.compute_adjacent_counts()
        self.mines_placed = True

    def clear_mines(self):
        for r in range(self.height):
            for c in range(self.width):
                if self.board[r][c] == MINE_VALUE:
                    self.board[r][c] = 0

    def compute_adjacent_counts(self):
        for r in range(self.height):
            for c in range(self.width):
                if self.board[r][c] == MINE_VALUE:
                    continue
                self.board[r][c] = sum(
                    1 for nr, nc in self.neighbors(r, c) if self.board[nr][nc] == MINE_VALUE
                )

    def is_valid_coord(self, row, col):
        try:
            row = int(row)
            col = int(col)
        except (ValueError, TypeError):
            return False
        return 0 <= row < self.height and 0 <= col < self.width

    def _reserved_cells_around(self, row, col):
        """
        Compute the reserved opening area around (row, col).
        By default this is a 3x3 block (radius=1) centered on the first click,
        clipped to the board boundaries.
        """
        cells = []
        for dr in range(-self.reserve_radius, self.reserve_radius + 1):
            for dc in range(-self.reserve_radius, self.reserve_radius + 1):
                rr, cc = row + dr, col + dc
                if self.is_valid_coord(rr, cc):
                    cells.append((rr, cc))
        return cells

    def flood_reveal(self, row, col):
        """
        Reveal (row, col) and, while zeros are uncovered, every neighbor of
        those zeros. Uses an explicit stack so large open regions cannot
        exhaust the call stack. A flag next to a zero is provably wrong, so
        it is cleared and the tile opened.

        Returns the list of newly revealed (row, col) cells.
        """
        if not self.is_valid_coord(row, col) or self.revealed[row][col]:
            return []

        opened = []
        stack = [(row, col)]
        while stack:
            r, c = stack.pop()
            if self.revealed[r][c]:
                continue

            self.revealed[r][c] = True
            self.flags[r][c] = False
            opened.append((r, c))

            if self.board[r][c] == 0:
                for nr, nc in self.neighbors(r, c):
                    if not self.revealed[nr][nc]:
                        stack.append((nr, nc))
        return opened

    def flag(self, row, col):
        if self.is_valid_coord(row, col) and not self.revealed[row][col]:
            self.flags[row][col] = not self.flags[row][col]

    def reveal_all_mines(self):
        for r in range(self.height):
            for c in range(self.width):
                if self.board[r][c] == MINE_VALUE:
                    self.revealed[r][c] = True

    def highlight(self, row, col, color):
        self.highlights[row][col] = color

    def is_mine(self, row, col):
        return self.is_valid_coord(row, col) and self.board[row][col] == MINE_VALUE

    def is_revealed(self, row, col):
        return self.is_valid_coord(row, col) and self.revealed[row][col]

    def is_flagged(self, row, col):
        return self.is_valid_coord(row, col) and self.flags[row][col]

    def is_clue(self, row, col):
        """A revealed tile showing a number 1–8."""
        return self.revealed[row][col] and self.board[row][col] > 0

    def hidden_cells(self):
        return [
            (r, c)
            for r in range(self.height)
            for c in range(self.width)
            if not self.revealed[r][c]
        ]

    def count_mines(self):
        return sum(1 for row in self.board for cell in row if cell == MINE_VALUE)

    def count_revealed(self):
        """Revealed safe tiles; mines shown at the end of a lost game do not count."""
        return sum(
            1
            for r in range(self.height)
            for c in range(self.width)
            if self.revealed[r][c] and self.board[r][c] != MINE_VALUE
        )

    def count_flags(self):
        return sum(
            1
            for r in range(self.height)
            for c in range(self.width)
            if self.flags[r][c] and not self.revealed[r][c]
        )

    def is_complete(self):
        return self.count_revealed() + self.num_mines >= self.width * self.height

    def get_visible_state(self):
        """
        None for a hidden tile, "F" for a flagged hidden tile, otherwise the
        tile value (-1 for a revealed mine, 0–8 for numbers).
        """
        state = []
        for r in range(self.height):
            row_cells = []
            for c in range(self.width):
                if self.revealed[r][c]:
                    row_cells.append(self.board[r][c])
                elif self.flags[r][c]:
                    row_cells.append("F")
                else:
                    row_cells.append(None)
            state.append(row_cells)
        return state

    def get_highlights(self):
        return [[int(h) for h in row] for row in self.highlights]
