"""
Game: turn and terminal-state bookkeeping around a Board.

The only way to change a Game is make_move(), which validates the move against
the generator before touching the board. Front ends and the search engine use
clone() freely for speculative play; a clone shares nothing mutable with its
source.
"""

from __future__ import annotations

import enum

from draughts.board import Board
from draughts.move import Move
from draughts.pieces import Position, Side


class GameState(enum.Enum):
    IN_PROGRESS = "in_progress"
    GAME_OVER = "game_over"


class Game:
    """
    A game of English draughts.

    Attributes:
        board:        The current position. Owned by this game.
        current_side: Side to move. RED moves first in a fresh game.
        is_over:      True once the side to move has no legal moves.
    """

    def __init__(self, board: Board | None = None, current_side: Side = Side.RED) -> None:
        self.board = board if board is not None else Board()
        self.current_side = current_side
        self.is_over = False

    @classmethod
    def from_position(cls, board: Board, current_side: Side) -> Game:
        """A game resumed from an arbitrary position, already over if current_side cannot move."""
        game = cls(board, current_side)
        game.is_over = not game.legal_moves()
        return game

    @property
    def state(self) -> GameState:
        return GameState.GAME_OVER if self.is_over else GameState.IN_PROGRESS

    @property
    def winner(self) -> Side | None:
        """The side that made the last move once the game is over, else None."""
        return self.current_side.opponent if self.is_over else None

    def legal_moves(self) -> list[Move]:
        return self.board.legal_moves(self.current_side)

    def destinations_for(self, pos: Position) -> list[Position]:
        """Highlightable landing squares for pos, only if it belongs to the side to move."""
        cell = self.board.cell_at(pos)
        if cell is None or cell.is_empty or cell.owner is not self.current_side:
            return []
        return self.board.destinations_for(pos)

    def make_move(self, move: Move) -> bool:
        """
        Play move if it is legal for the side to move.

        The move must match a generated move structurally: same start, same
        landing sequence and same captured squares, in order.

        Returns:
            True if the move was applied. False if it was rejected, in which
            case nothing about the game has changed.
        """
        if self.is_over or not move.is_valid or move not in self.legal_moves():
            return False

        self.board.apply_move(move)
        self.current_side = self.current_side.opponent
        if not self.legal_moves():
            self.is_over = True
        return True

    def clone(self) -> Game:
        other = Game(self.board.clone(), self.current_side)
        other.is_over = self.is_over
        return other
