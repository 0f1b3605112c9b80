"""
Engine constants: board geometry, piece values, search and time parameters.

All numeric constants used throughout the engine are defined here so that
modules never need to introduce their own magic numbers. There is no file or
environment configuration; callers that need different values pass them in
explicitly (e.g. the Bot's time budget).
"""

import os

# ---------------------------------------------------------------------------
# Board geometry
# ---------------------------------------------------------------------------
# English draughts is played on the dark squares of an 8x8 board. A square
# (row, col) is playable iff (row + col) is even; each side starts with its
# men on the dark squares of the three rows nearest to it.

BOARD_SIZE: int = 8
START_ROWS: int = 3

# ---------------------------------------------------------------------------
# Piece values
# ---------------------------------------------------------------------------
# Pure material: a king is worth two men. There are no positional or
# mobility terms in the evaluation.

MAN_VALUE: int = 1
KING_VALUE: int = 2

# ---------------------------------------------------------------------------
# Search parameters
# ---------------------------------------------------------------------------
# MAX_DEPTH caps iterative deepening. The time budget terminates the search
# long before this in any real position; the cap only matters in tiny
# endgames where every line is exhausted within a few plies.
MAX_DEPTH: int = 64

# Number of worker threads used to score root moves in parallel.
SEARCH_WORKERS: int = min(32, (os.cpu_count() or 1) + 4)

# ---------------------------------------------------------------------------
# Time management
# ---------------------------------------------------------------------------
# Bounds applied by the outer layers (protocol, web) before a budget is
# handed to the Bot. The Bot itself uses whatever it is given.
MIN_TIME_LIMIT_MS: int = 100
MAX_TIME_LIMIT_MS: int = 10_000
DEFAULT_TIME_LIMIT_MS: int = 1_000
