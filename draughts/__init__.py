"""
English draughts engine package.

This package implements the rules of English draughts (checkers) and a
computer opponent using minimax search with alpha-beta pruning, iterative
deepening under a wall-clock budget, and parallel scoring of root moves.

Modules:
    constants - Board geometry, piece values, search and time parameters
    pieces    - Sides, ranks, positions and board cells
    move      - The Move value
    board     - Board state, move generation, capture chains, move application
    game      - Turn and terminal-state bookkeeping
    evaluate  - Static material evaluation
    search    - Bot, minimax and the search deadline
    notation  - Square, move and board text formats
"""
