"""Tests for the Game turn/state machine."""

from draughts.board import Board
from draughts.game import Game, GameState
from draughts.move import Move
from draughts.pieces import Position, Side

from conftest import place


def remove_side(game: Game, side: Side) -> None:
    for pos, _ in list(game.board.pieces(side)):
        game.board.remove_piece_at(pos)


class TestGame:
    def test_new_game(self):
        game = Game()
        assert game.current_side is Side.RED
        assert not game.is_over
        assert game.state is GameState.IN_PROGRESS
        assert game.winner is None

    def test_legal_moves_for_current_side(self):
        game = Game()
        moves = game.legal_moves()
        assert moves
        assert all(game.board.cell_at(m.start).owner is Side.RED for m in moves)

    def test_valid_move_switches_turn(self):
        game = Game()
        assert game.make_move(game.legal_moves()[0])
        assert game.current_side is Side.WHITE
        assert not game.is_over

    def test_invalid_move_rejected(self):
        game = Game()
        before = repr(game.board)

        assert not game.make_move(Move(Position(7, 7)))

        assert game.current_side is Side.RED
        assert not game.is_over
        assert repr(game.board) == before

    def test_empty_sequence_rejected(self):
        game = Game()
        move = Move(Position(2, 2))

        assert not move.is_valid
        assert not game.make_move(move)
        assert game.current_side is Side.RED

    def test_opponent_piece_move_rejected(self):
        game = Game()
        assert not game.make_move(Move(Position(5, 1), [Position(4, 0)]))
        assert game.current_side is Side.RED

    def test_capture_without_captured_list_rejected(self):
        board = Board.empty()
        place(board, 2, 2, Side.RED)
        place(board, 3, 3, Side.WHITE)
        place(board, 6, 6, Side.WHITE)
        game = Game(board)

        assert not game.make_move(Move(Position(2, 2), [Position(4, 4)]))
        assert game.make_move(Move(Position(2, 2), [Position(4, 4)], [Position(3, 3)]))

    def test_step_rejected_when_capture_available(self):
        board = Board.empty()
        place(board, 2, 2, Side.RED)
        place(board, 3, 3, Side.WHITE)
        place(board, 2, 6, Side.RED)
        game = Game(board)

        assert not game.make_move(Move(Position(2, 6), [Position(3, 7)]))

    def test_game_over_when_opponent_has_no_pieces(self):
        game = Game()
        remove_side(game, Side.WHITE)

        assert game.make_move(game.legal_moves()[0])

        assert game.current_side is Side.WHITE
        assert game.is_over
        assert game.state is GameState.GAME_OVER
        assert game.winner is Side.RED

    def test_no_moves_accepted_after_game_over(self):
        game = Game()
        remove_side(game, Side.WHITE)
        game.make_move(game.legal_moves()[0])

        game.current_side = Side.RED
        assert not game.make_move(game.legal_moves()[0])

    def test_game_over_when_opponent_blocked(self):
        board = Board.empty()
        place(board, 0, 2, Side.RED)
        place(board, 1, 1, Side.RED)
        place(board, 4, 4, Side.RED)
        place(board, 2, 0, Side.WHITE)
        game = Game(board)

        # White's man on (2, 0) faces (1, 1) with (0, 2) occupied behind it.
        assert game.make_move(Move(Position(4, 4), [Position(5, 5)]))
        assert game.is_over
        assert game.winner is Side.RED

    def test_clone_is_independent(self):
        game = Game()
        clone = game.clone()

        clone.make_move(clone.legal_moves()[0])

        assert game.current_side is Side.RED
        assert clone.current_side is Side.WHITE
        assert game.board.count(Side.RED) == 12
        assert len(game.legal_moves()) == 7

    def test_clone_copies_flags(self):
        game = Game()
        remove_side(game, Side.WHITE)
        game.make_move(game.legal_moves()[0])

        clone = game.clone()

        assert clone.is_over
        assert clone.current_side is Side.WHITE

    def test_from_position(self):
        board = Board.empty()
        place(board, 4, 4, Side.WHITE)
        assert Game.from_position(board, Side.RED).is_over
        assert not Game.from_position(board.clone(), Side.WHITE).is_over

    def test_destinations_only_for_side_to_move(self):
        game = Game()
        assert game.destinations_for(Position(2, 2)) == [Position(3, 1), Position(3, 3)]
        assert game.destinations_for(Position(5, 1)) == []
