"""
Board: the 8x8 grid of cells, move generation and move application.

Move generation follows English draughts rules:

1. Men move one square diagonally forward; kings move one square diagonally
   in any of the four directions. The destination must be on the board and
   empty.

2. Captures jump an adjacent opposing piece to the empty square beyond it.
   Men capture forward only, kings in all four directions. A capture may
   continue with further jumps by the same piece; the whole chain is one move.

3. Forced capture: if any piece of the side to move can capture, only
   capturing moves are legal for that side.

The generator returns every maximal capture chain. It does not enforce the
"take the longest chain" rule, and a man that reaches the crowning row in the
middle of a chain is not crowned until apply_move commits the final move.

Capture chains are discovered with a depth-first search that simulates each
jump on this board and undoes it before trying the next direction, so
legal_moves() leaves the board exactly as it found it. The board is not
thread-safe for that reason: concurrent callers must each use their own
clone (which is what the search engine does).
"""

from __future__ import annotations

from typing import Iterator

from draughts.constants import BOARD_SIZE, START_ROWS
from draughts.move import Move
from draughts.pieces import EMPTY, Cell, Piece, Position, Side

COL_DIRECTIONS = (-1, 1)


class Board:
    """
    An N x N grid of cells, N fixed at construction.

    Invariants maintained by every mutation:
        - a square with (row + col) odd never holds a piece;
        - at most one piece per square (trivially, one cell per square).

    Attributes:
        size: Board edge length (8 for English draughts).
    """

    def __init__(self, size: int = BOARD_SIZE, setup: bool = True) -> None:
        self.size = size
        self._grid: list[list[Cell]] = [[EMPTY] * size for _ in range(size)]
        if setup:
            self._place_start_pieces()

    @classmethod
    def empty(cls, size: int = BOARD_SIZE) -> Board:
        """A board with no pieces on it."""
        return cls(size, setup=False)

    def _place_start_pieces(self) -> None:
        for row in range(self.size):
            for col in range(self.size):
                if not self.is_dark(row, col):
                    continue
                if row < START_ROWS:
                    self._grid[row][col] = Piece(Side.RED)
                elif row >= self.size - START_ROWS:
                    self._grid[row][col] = Piece(Side.WHITE)

    # -----------------------------------------------------------------------
    # Primitive accessors
    # -----------------------------------------------------------------------

    @staticmethod
    def is_dark(row: int, col: int) -> bool:
        return (row + col) % 2 == 0

    def is_inside(self, pos: Position) -> bool:
        return 0 <= pos.row < self.size and 0 <= pos.col < self.size

    def cell_at(self, pos: Position) -> Cell | None:
        """Return the cell at pos, or None if pos is off the board."""
        if not self.is_inside(pos):
            return None
        return self._grid[pos.row][pos.col]

    def set_cell_at(self, pos: Position, cell: Cell) -> None:
        """
        Place cell at pos. Off-board writes are ignored.

        Raises:
            ValueError: if a piece is placed on a light (unplayable) square.
        """
        if not self.is_inside(pos):
            return
        if not cell.is_empty and not self.is_dark(pos.row, pos.col):
            raise ValueError(f"Cannot place a piece on light square {pos}")
        self._grid[pos.row][pos.col] = cell

    def remove_piece_at(self, pos: Position) -> None:
        if self.is_inside(pos):
            self._grid[pos.row][pos.col] = EMPTY

    def pieces(self, side: Side | None = None) -> Iterator[tuple[Position, Piece]]:
        """Yield (position, piece) pairs in row-major order, optionally for one side."""
        for row in range(self.size):
            for col in range(self.size):
                cell = self._grid[row][col]
                if cell.is_empty:
                    continue
                if side is None or cell.owner is side:
                    yield Position(row, col), cell

    def count(self, side: Side) -> int:
        return sum(1 for _ in self.pieces(side))

    # -----------------------------------------------------------------------
    # Move generation
    # -----------------------------------------------------------------------

    def legal_moves(self, side: Side) -> list[Move]:
        """
        All legal moves for side, applying the forced-capture rule.

        Pieces are visited in row-major order and each piece's moves keep the
        order produced by legal_moves_for_piece().

        Args:
            side: The side whose moves to generate.

        Returns:
            Only capturing moves if any piece of side can capture, otherwise
            every simple step. Empty if side cannot move at all.
        """
        captures: list[Move] = []
        steps: list[Move] = []
        for pos, _ in list(self.pieces(side)):
            for move in self.legal_moves_for_piece(pos):
                if move.is_capture:
                    captures.append(move)
                else:
                    steps.append(move)
        return captures if captures else steps

    def legal_moves_for_piece(self, pos: Position) -> list[Move]:
        """
        Moves available to the piece at pos, ignoring the other pieces' captures.

        If the piece can capture, only its capture chains are returned; simple
        steps are never mixed in. Returns an empty list for an empty or
        off-board square.
        """
        cell = self.cell_at(pos)
        if cell is None or cell.is_empty:
            return []

        chains: list[Move] = []
        self._find_capture_chains(cell, pos, Move(pos), set(), chains)
        if chains:
            return chains

        moves = []
        for d_row in cell.row_directions():
            for d_col in COL_DIRECTIONS:
                target = pos.offset(d_row, d_col)
                landing = self.cell_at(target)
                if landing is not None and landing.is_empty:
                    moves.append(Move(pos, [target]))
        return moves

    def _find_capture_chains(
        self,
        piece: Piece,
        current: Position,
        chain: Move,
        captured: set[Position],
        found: list[Move],
    ) -> None:
        """
        Depth-first search for capture chains starting at current.

        Each valid jump is simulated on the board (piece moved to the landing
        square, jumped piece removed), explored recursively, then undone
        before the next direction is tried. A chain is recorded only at a
        node with no further jump, so prefixes of longer chains are never
        returned on their own.

        Args:
            piece:    The moving piece. Its rank is fixed for the whole chain.
            current:  Square the piece occupies at this node.
            chain:    The move built so far (copied, never mutated, per branch).
            captured: Squares already jumped in this chain; a piece cannot be
                      jumped twice.
            found:    Accumulator for completed chains.
        """
        extended = False
        for d_row in piece.row_directions():
            for d_col in COL_DIRECTIONS:
                over = current.offset(d_row, d_col)
                landing = current.offset(2 * d_row, 2 * d_col)
                victim = self.cell_at(over)
                target = self.cell_at(landing)
                if victim is None or target is None:
                    continue
                if victim.is_empty or victim.owner is piece.owner or over in captured:
                    continue
                if not target.is_empty:
                    continue

                extended = True
                next_chain = chain.copy()
                next_chain.add_step(landing, over)

                # Simulate the jump.
                mover = self._grid[current.row][current.col]
                self._grid[current.row][current.col] = EMPTY
                self._grid[over.row][over.col] = EMPTY
                self._grid[landing.row][landing.col] = mover
                captured.add(over)

                self._find_capture_chains(piece, landing, next_chain, captured, found)

                # Undo it.
                captured.discard(over)
                self._grid[landing.row][landing.col] = EMPTY
                self._grid[over.row][over.col] = victim
                self._grid[current.row][current.col] = mover

        if not extended and chain.is_capture:
            found.append(chain)

    def destinations_for(self, pos: Position) -> list[Position]:
        """
        First landing square of each legal move for the piece at pos.

        The forced-capture rule of the piece's owner applies: if another piece
        of the same side can capture, a piece that can only step has no
        destinations. Used by front ends to highlight reachable squares.
        """
        cell = self.cell_at(pos)
        if cell is None or cell.is_empty:
            return []
        destinations: list[Position] = []
        for move in self.legal_moves(cell.owner):
            if move.start == pos and move.first_step not in destinations:
                destinations.append(move.first_step)
        return destinations

    # -----------------------------------------------------------------------
    # Mutation
    # -----------------------------------------------------------------------

    def apply_move(self, move: Move) -> None:
        """
        Commit move: lift the piece, remove captures, land it, crown if due.

        No legality check is made here; Game.make_move validates first.

        Raises:
            ValueError: if move.start holds no piece, or move.end is off the
                board or on a light square (programming errors). The board is
                left unchanged in both cases.
        """
        piece = self.cell_at(move.start)
        if piece is None or piece.is_empty:
            raise ValueError(f"No piece at the starting position {move.start}")
        end = move.end
        if not self.is_inside(end) or not self.is_dark(end.row, end.col):
            raise ValueError(f"Cannot land on {end}")

        self.remove_piece_at(move.start)
        for pos in move.captured:
            self.remove_piece_at(pos)
        self.set_cell_at(end, piece)

        if not piece.is_king and end.row == piece.owner.crowning_row(self.size):
            piece.crown()

    def clone(self) -> Board:
        """Deep copy: every piece is a new instance, empty squares stay EMPTY."""
        other = Board.empty(self.size)
        other._grid = [
            [cell if cell.is_empty else cell.copy() for cell in row]
            for row in self._grid
        ]
        return other

    def __repr__(self) -> str:
        symbols = {
            (Side.RED, False): "r",
            (Side.RED, True): "R",
            (Side.WHITE, False): "w",
            (Side.WHITE, True): "W",
        }
        lines = []
        for row in range(self.size):
            line = f"{row + 1} |"
            for col in range(self.size):
                cell = self._grid[row][col]
                line += " " + ("." if cell.is_empty else symbols[cell.owner, cell.is_king])
            lines.append(line)
        lines.append("   +" + "-" * (self.size * 2))
        lines.append("    " + " ".join("ABCDEFGH"[: self.size]))
        return "\n".join(lines)
