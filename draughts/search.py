"""
Search entry point: minimax with alpha-beta pruning, iterative deepening under
a wall-clock budget, and parallel scoring of the root moves.

The Bot keeps a fixed point of view: every score is material from the Bot's
side, nodes where the Bot is to move maximize and nodes where its opponent is
to move minimize. The evaluation is plain material (see evaluate.py).

Iterative deepening:
    Depth 1, 2, 3, ... until the deadline passes. At each depth the root moves
    are re-enumerated (an empty list ends the search with no move) and every
    root move is scored to that depth on its own worker thread. The best score
    among the root moves that finished in time replaces the running best only
    if it is strictly higher than the best score seen at any earlier depth. A
    depth cut short before any root move finished therefore leaves the
    previous answer in place.

Threading model:
    Each root task gets its own clone of the game, made by the caller before
    the task is submitted, so no board is ever shared between threads. The
    only shared object is the SearchContext: a deadline plus a stop event,
    both read-only from the workers' point of view. Workers poll it at the top
    of every minimax call and before expanding each sibling, and unwind on
    their own once it reports expiry; nothing is interrupted forcibly. A root
    task that observes expiry returns no score, so an incomplete subtree
    never competes with finished ones.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field

from draughts.constants import (
    MAX_DEPTH,
    MAX_TIME_LIMIT_MS,
    MIN_TIME_LIMIT_MS,
    SEARCH_WORKERS,
)
from draughts.evaluate import evaluate
from draughts.game import Game
from draughts.move import Move
from draughts.pieces import Side

_log = logging.getLogger(__name__)

INFINITY = float("inf")


@dataclass
class SearchContext:
    """
    Cancellation token shared by every task of one search.

    Attributes:
        side:       The Bot's side; scores are from this side's perspective.
        deadline:   time.monotonic() instant after which the search stops.
        stop_event: External stop signal (e.g. the protocol's "stop" command).
                    Setting it has the same effect as the deadline passing.
    """

    side: Side
    deadline: float
    stop_event: threading.Event = field(default_factory=threading.Event)

    def expired(self) -> bool:
        return self.stop_event.is_set() or time.monotonic() >= self.deadline

    def remaining(self) -> float:
        """Seconds left before the deadline, never negative."""
        return max(0.0, self.deadline - time.monotonic())


@dataclass
class NodeCounter:
    """Per-task node count. Each root task owns one; none is shared."""

    nodes: int = 0


@dataclass
class SearchResult:
    """
    Outcome of Bot.search().

    Attributes:
        move:  Best move found, or None if the side to move had no legal move
               (or the budget ran out before depth 1 produced a score).
        score: Material score of move from the Bot's side.
        depth: Deepest iteration in which every root move was scored.
        nodes: Minimax calls made by root tasks that finished in time.
    """

    move: Move | None = None
    score: int = 0
    depth: int = 0
    nodes: int = 0


def clamp_time_limit(time_limit_ms: int) -> int:
    """Clamp a requested budget to [MIN_TIME_LIMIT_MS, MAX_TIME_LIMIT_MS]."""
    return max(MIN_TIME_LIMIT_MS, min(int(time_limit_ms), MAX_TIME_LIMIT_MS))


def minimax(
    game: Game,
    depth: int,
    alpha: float,
    beta: float,
    side_to_move: Side,
    ctx: SearchContext,
    counter: NodeCounter | None = None,
) -> int:
    """
    Minimax with alpha-beta pruning, scored from ctx.side's perspective.

    Args:
        game:         Position to search. Never modified; children are clones.
        depth:        Remaining plies. 0 returns the static evaluation.
        alpha:        Best score the maximizing side can already guarantee.
        beta:         Best score the minimizing side can already guarantee.
        side_to_move: Side to move in game (game.current_side during search).
        ctx:          Shared deadline/stop token.
        counter:      Optional per-task node counter.

    Returns:
        The minimax value of game. The static evaluation is returned at depth
        0, in terminal positions, when side_to_move has no legal moves, and
        once ctx has expired.
    """
    if counter is not None:
        counter.nodes += 1

    if depth == 0 or game.is_over or ctx.expired():
        return evaluate(game.board, ctx.side)

    moves = game.board.legal_moves(side_to_move)
    if not moves:
        return evaluate(game.board, ctx.side)

    maximizing = side_to_move is ctx.side
    best = -INFINITY if maximizing else INFINITY
    for move in moves:
        if ctx.expired():
            break

        child = game.clone()
        child.make_move(move)
        score = minimax(child, depth - 1, alpha, beta, child.current_side, ctx, counter)

        if maximizing:
            best = max(best, score)
            alpha = max(alpha, score)
        else:
            best = min(best, score)
            beta = min(beta, score)

        if beta <= alpha:
            break

    if best in (INFINITY, -INFINITY):
        # Deadline hit before the first child was expanded.
        return evaluate(game.board, ctx.side)
    return int(best)


def _score_root_move(
    child: Game, move: Move, depth: int, ctx: SearchContext
) -> tuple[int, int] | None:
    """
    Worker body: play move on child and search the rest of the depth.

    Returns:
        (score, nodes), or None if the deadline passed before the subtree
        was fully searched.
    """
    counter = NodeCounter()
    child.make_move(move)
    score = minimax(child, depth - 1, -INFINITY, INFINITY, child.current_side, ctx, counter)
    if ctx.expired():
        return None
    return score, counter.nodes


class Bot:
    """
    Computer player: picks a move for its side within a time budget.

    The Bot holds no state between calls besides its configuration; there is
    no transposition table or retained tree.

    Attributes:
        side:          The side the Bot plays.
        time_limit_ms: Budget per move in milliseconds. Not clamped here;
                       callers apply clamp_time_limit() if they need bounds.
        workers:       Thread pool size for root-move scoring.
    """

    def __init__(self, side: Side, time_limit_ms: int, workers: int = SEARCH_WORKERS) -> None:
        self.side = side
        self.time_limit_ms = time_limit_ms
        self.workers = workers

    def get_best_move(self, game: Game) -> Move | None:
        """Best move for the side to move in game, or None if it has none."""
        return self.search(game).move

    def search(self, game: Game, stop_event: threading.Event | None = None) -> SearchResult:
        """
        Run iterative deepening on game until the budget is spent.

        Args:
            game:       The current game. Not modified.
            stop_event: Optional external stop signal. When set, the search
                        winds down as if the deadline had passed.

        Returns:
            SearchResult with the best move found across all depths.
        """
        ctx = SearchContext(
            side=self.side,
            deadline=time.monotonic() + self.time_limit_ms / 1000,
            stop_event=stop_event if stop_event is not None else threading.Event(),
        )
        result = SearchResult()
        best_score = -INFINITY

        with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="draughts-search") as pool:
            depth = 1
            while not ctx.expired() and depth <= MAX_DEPTH:
                moves = game.legal_moves()
                if not moves:
                    return SearchResult(depth=result.depth, nodes=result.nodes)

                scored = self._score_root_moves(pool, game, moves, depth, ctx)
                for _, _, nodes in scored:
                    result.nodes += nodes
                if len(scored) == len(moves):
                    result.depth = depth

                if scored:
                    move, score, _ = max(scored, key=lambda entry: entry[1])
                    if score > best_score:
                        best_score = score
                        result.move = move
                        result.score = score

                _log.debug(
                    "depth %d: %d/%d root moves scored, best score %s",
                    depth,
                    len(scored),
                    len(moves),
                    best_score,
                )
                depth += 1

        return result

    def _score_root_moves(
        self,
        pool: ThreadPoolExecutor,
        game: Game,
        moves: list[Move],
        depth: int,
        ctx: SearchContext,
    ) -> list[tuple[Move, int, int]]:
        """
        Score every root move to depth in parallel.

        Waits until all tasks finish or the deadline passes, whichever comes
        first. Tasks still queued at the deadline are cancelled; running ones
        unwind through their own deadline checks and are not waited for.

        Returns:
            (move, score, nodes) for each task that completed in time, in
            root-move order.
        """
        futures: list[Future] = [
            pool.submit(_score_root_move, game.clone(), move, depth, ctx) for move in moves
        ]
        done, not_done = wait(futures, timeout=ctx.remaining())
        for future in not_done:
            future.cancel()

        scored = []
        for move, future in zip(moves, futures):
            if future not in done:
                continue
            outcome = future.result()
            if outcome is not None:
                scored.append((move, outcome[0], outcome[1]))
        return scored
