"""Shared fixtures and position builders."""

import pytest

from draughts.board import Board
from draughts.pieces import Piece, Position, Rank, Side


def place(board: Board, row: int, col: int, owner: Side, rank: Rank = Rank.MAN) -> Piece:
    piece = Piece(owner, rank)
    board.set_cell_at(Position(row, col), piece)
    return piece


@pytest.fixture
def empty_board():
    return Board.empty()
