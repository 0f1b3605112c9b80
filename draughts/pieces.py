"""
Position and cell model: sides, ranks, coordinates and the board cell variants.

A cell is either a Piece (owner + rank) or EMPTY. EMPTY is a single tagged
value rather than an object per square, so every empty square on every board
refers to the same immutable marker. Pieces are mutable only through
Piece.crown(); boards never share Piece instances after a clone.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Side(enum.Enum):
    """The two players. RED starts on rows 0-2 and moves first."""

    RED = "red"
    WHITE = "white"

    @property
    def opponent(self) -> Side:
        return Side.WHITE if self is Side.RED else Side.RED

    @property
    def forward(self) -> int:
        """Row direction a man of this side moves in."""
        return 1 if self is Side.RED else -1

    def crowning_row(self, size: int) -> int:
        """The opponent's back rank, where a man of this side is crowned."""
        return size - 1 if self is Side.RED else 0


class Rank(enum.Enum):
    MAN = "man"
    KING = "king"


@dataclass(frozen=True)
class Position:
    """A (row, col) coordinate. Validity is checked by the board, not here."""

    row: int
    col: int

    def offset(self, d_row: int, d_col: int) -> Position:
        return Position(self.row + d_row, self.col + d_col)


@dataclass
class Piece:
    owner: Side
    rank: Rank = Rank.MAN

    @property
    def is_king(self) -> bool:
        return self.rank is Rank.KING

    @property
    def is_empty(self) -> bool:
        return False

    def crown(self) -> None:
        """Promote this piece to a king. Kings stay kings."""
        self.rank = Rank.KING

    def row_directions(self) -> tuple[int, ...]:
        """Row directions this piece may move and capture in."""
        if self.is_king:
            return (-1, 1)
        return (self.owner.forward,)

    def copy(self) -> Piece:
        return Piece(self.owner, self.rank)


class Empty(enum.Enum):
    """Tag for a square holding no piece."""

    EMPTY = "empty"

    @property
    def is_empty(self) -> bool:
        return True


EMPTY = Empty.EMPTY

Cell = Piece | Empty
