"""
Coordinate notation for squares, moves and whole boards.

Squares: columns A-H map to 0-7 left to right, rows 1-8 map to 0-7 top to
bottom, so "C3" is Position(row=2, col=2).

Moves: the start square followed by each landing square, joined by "->",
e.g. "C3->D4" for a step or "C3->E5->G7" for a double jump. Captured squares
are implied by the landing squares and are not written. NO_MOVES stands in
for a move when the side to move has none.

Boards: one character per square, row-major from row 0, rows separated by
"/": "r" red man, "R" red king, "w" white man, "W" white king, "." empty.
"""

from __future__ import annotations

import re

from draughts.board import Board
from draughts.constants import BOARD_SIZE
from draughts.game import Game
from draughts.move import Move
from draughts.pieces import EMPTY, Piece, Position, Rank, Side

NO_MOVES = "NO MOVES"

FILES = "ABCDEFGH"
MOVE_PATTERN = re.compile(r"^([A-H][1-8])(?:->[A-H][1-8])*$")

_PIECE_CHARS = {
    "r": (Side.RED, Rank.MAN),
    "R": (Side.RED, Rank.KING),
    "w": (Side.WHITE, Rank.MAN),
    "W": (Side.WHITE, Rank.KING),
}
_CHAR_FOR_PIECE = {value: char for char, value in _PIECE_CHARS.items()}


def square_to_text(pos: Position) -> str:
    return f"{FILES[pos.col]}{pos.row + 1}"


def parse_square(text: str) -> Position:
    """
    Parse a square like "C3" (case-insensitive).

    Raises:
        ValueError: if text is not a column letter A-H followed by a row 1-8.
    """
    square = text.strip().upper()
    if len(square) != 2 or square[0] not in FILES or square[1] not in "12345678":
        raise ValueError(f"Invalid square notation: {text!r}")
    return Position(int(square[1]) - 1, FILES.index(square[0]))


def move_to_text(move: Move | None) -> str:
    """Render move as "START->STEP1->...", or NO_MOVES for None."""
    if move is None:
        return NO_MOVES
    return "->".join(square_to_text(pos) for pos in [move.start, *move.sequence])


def parse_move(text: str) -> Move | None:
    """
    Parse move text into a Move without captures.

    Returns None for the NO_MOVES sentinel and for anything that does not
    match the START->STEP... pattern. The result is only a request; use
    find_legal_move() to resolve it against the generator.
    """
    clean = text.strip().upper()
    if clean == NO_MOVES or not MOVE_PATTERN.match(clean):
        return None

    squares = [parse_square(part) for part in clean.split("->")]
    move = Move(squares[0])
    for landing in squares[1:]:
        move.add_step(landing)
    return move


def find_legal_move(game: Game, text: str) -> Move | None:
    """
    Resolve move text to the matching legal move for the side to move.

    Matching is by start square and landing sequence; the captured squares
    come from the generated move. Returns None if the text is malformed or
    names no legal move.
    """
    requested = parse_move(text)
    if requested is None:
        return None
    for move in game.legal_moves():
        if move.start == requested.start and move.sequence == requested.sequence:
            return move
    return None


def board_to_text(board: Board) -> str:
    rows = []
    for row in range(board.size):
        chars = []
        for col in range(board.size):
            cell = board.cell_at(Position(row, col))
            chars.append("." if cell.is_empty else _CHAR_FOR_PIECE[cell.owner, cell.rank])
        rows.append("".join(chars))
    return "/".join(rows)


def board_from_text(text: str) -> Board:
    """
    Build a board from board_to_text() output.

    Raises:
        ValueError: on a wrong number of rows or columns, an unknown
            character, or a piece on a light square.
    """
    rows = text.strip().split("/")
    size = BOARD_SIZE
    if len(rows) != size or any(len(row) != size for row in rows):
        raise ValueError(f"Board text must be {size} rows of {size} squares")

    board = Board.empty(size)
    for row, chars in enumerate(rows):
        for col, char in enumerate(chars):
            if char == ".":
                board.set_cell_at(Position(row, col), EMPTY)
                continue
            if char not in _PIECE_CHARS:
                raise ValueError(f"Unknown board character {char!r}")
            owner, rank = _PIECE_CHARS[char]
            board.set_cell_at(Position(row, col), Piece(owner, rank))
    return board
