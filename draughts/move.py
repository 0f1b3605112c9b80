"""
Move value: a start square, the ordered landing squares, and the captures.

A simple step has one landing square and no captures. A capture chain has one
landing square and one captured square per jump, in jump order. Moves are
built incrementally by the generator (add_step) and treated as immutable once
handed out. Equality is structural over all three fields, which is exactly
the check Game.make_move uses to validate a submitted move.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from draughts.pieces import Position


@dataclass
class Move:
    start: Position
    sequence: list[Position] = field(default_factory=list)
    captured: list[Position] = field(default_factory=list)

    @property
    def end(self) -> Position:
        """Final landing square, or start for a (malformed) empty sequence."""
        return self.sequence[-1] if self.sequence else self.start

    @property
    def first_step(self) -> Position | None:
        return self.sequence[0] if self.sequence else None

    @property
    def is_capture(self) -> bool:
        return bool(self.captured)

    @property
    def is_valid(self) -> bool:
        return bool(self.sequence)

    def add_step(self, landing: Position, captured: Position | None = None) -> None:
        self.sequence.append(landing)
        if captured is not None:
            self.captured.append(captured)

    def copy(self) -> Move:
        return Move(self.start, list(self.sequence), list(self.captured))
