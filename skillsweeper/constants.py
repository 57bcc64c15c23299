# skillsweeper/constants.py

# Tile values on the board and tentative values in the solver's working array.
MINE_VALUE = -1
EMPTY_VALUE = 0
UNPLACED_VALUE = -3

# The first click opens a 3x3 block, so at least this many tiles stay mine-free.
MINIMUM_EMPTY_TILES = 9
