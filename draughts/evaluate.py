"""
Static evaluation: material count from one side's perspective.

Unlike a negamax engine, the search here keeps a fixed point of view (the
Bot's side) at every node, so the evaluation takes that side explicitly
rather than using the side to move.
"""

from draughts.board import Board
from draughts.constants import KING_VALUE, MAN_VALUE
from draughts.pieces import Side


def evaluate(board: Board, side: Side) -> int:
    """
    Material balance for side: +1 per man, +2 per king, negated for the opponent.

    Args:
        board: The position to score. Not modified.
        side:  The side whose advantage is positive.

    Returns:
        Integer score. 0 for equal material.

    Example:
        >>> from draughts.board import Board
        >>> evaluate(Board(), Side.RED)
        0
    """
    score = 0
    for _, piece in board.pieces():
        value = KING_VALUE if piece.is_king else MAN_VALUE
        score += value if piece.owner is side else -value
    return score
