"""Tests for evaluation, minimax and the time-bounded Bot."""

import threading
import time

import pytest

from draughts import search
from draughts.board import Board
from draughts.evaluate import evaluate
from draughts.game import Game
from draughts.move import Move
from draughts.pieces import Position, Rank, Side
from draughts.search import (
    Bot,
    NodeCounter,
    SearchContext,
    clamp_time_limit,
    minimax,
)

from conftest import place

INF = float("inf")


def context(side: Side, seconds: float = 10.0) -> SearchContext:
    return SearchContext(side=side, deadline=time.monotonic() + seconds)


def two_chain_game() -> Game:
    """Red to move with a one-piece and a two-piece capture chain available."""
    board = Board.empty()
    place(board, 2, 4, Side.RED)
    place(board, 3, 3, Side.WHITE)
    place(board, 3, 5, Side.WHITE)
    place(board, 5, 5, Side.WHITE)
    return Game(board)


def full_minimax(game: Game, depth: int, side: Side, counter: NodeCounter) -> int:
    """Reference minimax without pruning, scored for side."""
    counter.nodes += 1
    moves = game.legal_moves()
    if depth == 0 or game.is_over or not moves:
        return evaluate(game.board, side)
    scores = []
    for move in moves:
        child = game.clone()
        child.make_move(move)
        scores.append(full_minimax(child, depth - 1, side, counter))
    return max(scores) if game.current_side is side else min(scores)


class TestEvaluate:
    def test_start_position_is_even(self):
        assert evaluate(Board(), Side.RED) == 0
        assert evaluate(Board(), Side.WHITE) == 0

    def test_kings_count_double(self, empty_board):
        place(empty_board, 4, 4, Side.RED, Rank.KING)
        place(empty_board, 5, 5, Side.WHITE)
        assert evaluate(empty_board, Side.RED) == 1
        assert evaluate(empty_board, Side.WHITE) == -1


class TestSearchContext:
    def test_deadline(self):
        assert not context(Side.RED).expired()
        assert context(Side.RED, seconds=-1).expired()
        assert context(Side.RED, seconds=-1).remaining() == 0.0

    def test_stop_event(self):
        ctx = context(Side.RED)
        ctx.stop_event.set()
        assert ctx.expired()


class TestMinimax:
    def test_depth_zero_is_static_eval(self):
        game = two_chain_game()
        assert minimax(game, 0, -INF, INF, Side.RED, context(Side.RED)) == -2

    def test_prefers_longer_capture(self):
        game = two_chain_game()
        assert minimax(game, 1, -INF, INF, Side.RED, context(Side.RED)) == 0

    def test_minimizing_side(self):
        # From WHITE's perspective with red to move: red takes two, white is
        # left with one man against one.
        game = two_chain_game()
        assert minimax(game, 1, -INF, INF, Side.RED, context(Side.WHITE)) == 0

    def test_no_moves_returns_static_eval(self, empty_board):
        place(empty_board, 5, 5, Side.WHITE)
        game = Game(empty_board)
        assert minimax(game, 3, -INF, INF, Side.RED, context(Side.RED)) == -1

    def test_expired_deadline_returns_static_eval(self):
        counter = NodeCounter()
        score = minimax(Game(), 6, -INF, INF, Side.RED, context(Side.RED, -1), counter)
        assert score == 0
        assert counter.nodes == 1

    def test_does_not_modify_game(self):
        game = Game()
        before = repr(game.board)
        minimax(game, 3, -INF, INF, Side.RED, context(Side.RED))
        assert repr(game.board) == before
        assert game.current_side is Side.RED

    @pytest.mark.parametrize("make_game", [Game, two_chain_game])
    def test_pruning_matches_full_minimax(self, make_game):
        game = make_game()
        full = NodeCounter()
        expected = full_minimax(game, 3, Side.RED, full)

        pruned = NodeCounter()
        score = minimax(game, 3, -INF, INF, Side.RED, context(Side.RED), pruned)

        assert score == expected
        assert pruned.nodes <= full.nodes


class TestBot:
    def test_constructor(self):
        bot = Bot(Side.WHITE, 1000)
        assert bot.side is Side.WHITE
        assert bot.time_limit_ms == 1000

    def test_no_moves_returns_none(self):
        game = Game()
        for pos, _ in list(game.board.pieces(Side.RED)):
            game.board.remove_piece_at(pos)

        start = time.monotonic()
        assert Bot(Side.RED, 200).get_best_move(game) is None
        assert time.monotonic() - start < 0.5

    def test_tiny_budget_returns_legal_move_or_none(self):
        game = Game()
        start = time.monotonic()

        move = Bot(Side.RED, 1).get_best_move(game)

        assert time.monotonic() - start < 1.0
        assert move is None or move in game.legal_moves()

    def test_returns_legal_move(self):
        game = Game()
        result = Bot(Side.RED, 300).search(game)
        assert result.move in game.legal_moves()
        assert result.depth >= 1
        assert result.nodes > 0

    def test_takes_the_longer_chain(self):
        game = two_chain_game()
        move = Bot(Side.RED, 300).get_best_move(game)
        assert move == Move(
            Position(2, 4),
            [Position(4, 6), Position(6, 4)],
            [Position(3, 5), Position(5, 5)],
        )

    def test_bot_playing_white(self):
        game = Game()
        game.make_move(game.legal_moves()[0])
        move = Bot(Side.WHITE, 200).get_best_move(game)
        assert move in game.legal_moves()

    def test_search_leaves_game_untouched(self):
        game = Game()
        before = repr(game.board)
        Bot(Side.RED, 200).search(game)
        assert repr(game.board) == before
        assert game.current_side is Side.RED

    def test_stop_event_already_set(self):
        stop = threading.Event()
        stop.set()
        start = time.monotonic()

        result = Bot(Side.RED, 5000).search(Game(), stop)

        assert result.move is None
        assert time.monotonic() - start < 1.0

    def test_stop_event_ends_search_early(self):
        stop = threading.Event()
        timer = threading.Timer(0.2, stop.set)
        timer.start()
        start = time.monotonic()

        result = Bot(Side.RED, 10_000).search(Game(), stop)

        assert time.monotonic() - start < 5.0
        assert result.move is None or result.move in Game().legal_moves()


def scripted_scores(monkeypatch, table):
    """
    Replace root-move scoring with fixed scores.

    table maps depth -> {move index: score}. A move missing from its depth's
    entry, or a depth missing from table, scores as interrupted (None).
    """
    moves = Game().legal_moves()

    def fake_score_root_move(child, move, depth, ctx):
        score = table.get(depth, {}).get(moves.index(move))
        if score is None:
            return None
        return score, 1

    monkeypatch.setattr(search, "_score_root_move", fake_score_root_move)
    return moves


class TestIterativeDeepening:
    def test_lower_score_at_deeper_depth_keeps_earlier_move(self, monkeypatch):
        moves = scripted_scores(monkeypatch, {
            1: {0: 5, 1: 0, 2: 0, 3: 0, 4: 0, 5: 0, 6: 0},
            2: {0: 0, 1: 3, 2: 0, 3: 0, 4: 0, 5: 0, 6: 0},
        })

        result = Bot(Side.RED, 2000).search(Game())

        assert result.move == moves[0]
        assert result.score == 5
        assert result.depth == 2
        assert result.nodes == 14

    def test_equal_score_does_not_replace(self, monkeypatch):
        moves = scripted_scores(monkeypatch, {
            1: {0: 0, 1: 2, 2: 0, 3: 0, 4: 0, 5: 0, 6: 0},
            2: {0: 0, 1: 0, 2: 2, 3: 0, 4: 0, 5: 0, 6: 0},
        })

        result = Bot(Side.RED, 2000).search(Game())

        assert result.move == moves[1]
        assert result.score == 2

    def test_higher_score_at_deeper_depth_replaces(self, monkeypatch):
        moves = scripted_scores(monkeypatch, {
            1: {0: 1, 1: 0, 2: 0, 3: 0, 4: 0, 5: 0, 6: 0},
            2: {0: 0, 1: 0, 2: 0, 3: 0, 4: 0, 5: 4, 6: 0},
        })

        result = Bot(Side.RED, 2000).search(Game())

        assert result.move == moves[5]
        assert result.score == 4

    def test_partial_depth_uses_completed_moves_only(self, monkeypatch):
        moves = scripted_scores(monkeypatch, {
            1: {0: 1, 1: 0, 2: 0, 3: 0, 4: 0, 5: 0, 6: 0},
            2: {3: 4},
        })

        result = Bot(Side.RED, 2000).search(Game())

        assert result.move == moves[3]
        assert result.score == 4
        # Depth 2 did not score every root move.
        assert result.depth == 1
        assert result.nodes == 8

    def test_interrupted_depth_keeps_previous_move(self, monkeypatch):
        moves = scripted_scores(monkeypatch, {
            1: {0: 0, 1: 0, 2: 0, 3: 0, 4: 3, 5: 0, 6: 0},
        })

        result = Bot(Side.RED, 2000).search(Game())

        assert result.move == moves[4]
        assert result.score == 3
        assert result.depth == 1

    def test_nothing_completed_returns_no_move(self, monkeypatch):
        scripted_scores(monkeypatch, {})

        result = Bot(Side.RED, 2000).search(Game())

        assert result.move is None
        assert result.depth == 0
        assert result.nodes == 0


@pytest.mark.parametrize(
    "requested, expected",
    [(1, 100), (100, 100), (500, 500), (10_000, 10_000), (60_000, 10_000)],
)
def test_clamp_time_limit(requested, expected):
    assert clamp_time_limit(requested) == expected
