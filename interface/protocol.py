"""
Line-oriented engine protocol handler, in the style of UCI.

A front end (GUI, test harness, tools/bench.py) drives the engine by writing
commands to stdin and reading responses from stdout. Every output line is
flushed immediately so the caller never waits on a buffered reply.

Protocol overview:
    Front end -> Engine: draughts, isready, newgame, position, moves, go,
                         stop, quit
    Engine -> Front end: id name, draughtsok, readyok, moves, info, bestmove

Command formats:
    position startpos [moves C3->D4 F6->E5 ...]
    position board <board text> <red|white> [moves ...]
    moves                       -> "moves C3->D4 C3->B4 ..." or "moves NO MOVES"
    go [movetime <ms>]          -> "info depth D score S nodes N nps X time T"
                                   "bestmove C3->D4" or "bestmove NO MOVES"

Threading model:
    The command loop runs on the main thread and never blocks on the search.
    "go" starts a daemon thread; "stop" sets the threading.Event that the
    search polls alongside its deadline.

Critical rule: stdout carries protocol lines only. Diagnostics go to stderr.
"""

import sys
import os
import threading
import time

# ---------------------------------------------------------------------------
# Path setup: make 'draughts' importable when this script is run directly
# as `python interface/protocol.py` from the repo root.
# ---------------------------------------------------------------------------
_REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

from draughts.constants import DEFAULT_TIME_LIMIT_MS
from draughts.game import Game
from draughts.notation import NO_MOVES, board_from_text, find_legal_move, move_to_text
from draughts.pieces import Side
from draughts.search import Bot, clamp_time_limit


def _send(line: str) -> None:
    """Write a protocol line to stdout and flush immediately."""
    print(line, flush=True)


def _log(message: str) -> None:
    """Write a diagnostic line to stderr, keeping stdout protocol-clean."""
    print(message, file=sys.stderr, flush=True)


class ProtocolHandler:
    """
    Stateful handler for the engine protocol.

    Attributes:
        game:          The current game, replaced by "newgame" and "position".
        search_thread: The active search thread, or None.
        stop_event:    Event shared with the search thread; set to stop it.
    """

    def __init__(self) -> None:
        self.game: Game = Game()
        self.search_thread: threading.Thread | None = None
        self.stop_event: threading.Event = threading.Event()

    # -----------------------------------------------------------------------
    # Command handlers
    # -----------------------------------------------------------------------

    def handle_hello(self) -> None:
        """
        Respond to the "draughts" command.

        The front end sends "draughts" once after launching the engine. The
        engine answers with its id lines and a closing "draughtsok"; nothing
        else is sent before that line.
        """
        _send("id name DraughtsAI")
        _send("id author Draughts AI Project")
        _send("draughtsok")

    def handle_isready(self) -> None:
        """
        Respond to the "isready" command.

        Used by the front end as a synchronization barrier before sending
        "position" and "go". There is no lazy setup, so the reply is immediate.
        """
        _send("readyok")

    def handle_newgame(self) -> None:
        """
        Respond to the "newgame" command.

        Stops any running search and resets to the standard setup with red
        to move.
        """
        self._stop_search()
        self.game = Game()

    def handle_position(self, tokens: list[str]) -> None:
        """
        Parse a "position" command and replay its move list.

        A move that is not legal at its point in the list stops the replay;
        the moves before it stay applied.

        Args:
            tokens: Command tokens with "position" already stripped.
        """
        if not tokens:
            return

        if tokens[0] == "startpos":
            game = Game()
            rest = tokens[1:]
        elif tokens[0] == "board":
            if len(tokens) < 3:
                _log("protocol: position board needs <board text> <red|white>")
                return
            try:
                board = board_from_text(tokens[1])
                side = Side(tokens[2].lower())
            except ValueError as e:
                _log(f"protocol: bad position: {e}")
                return
            game = Game.from_position(board, side)
            rest = tokens[3:]
        else:
            _log(f"protocol: unknown position type: {tokens[0]}")
            return

        move_tokens = rest[1:] if rest and rest[0] == "moves" else []
        for text in move_tokens:
            move = find_legal_move(game, text)
            if move is None or not game.make_move(move):
                _log(f"protocol: illegal move in position command: {text}")
                break

        self._stop_search()
        self.game = game

    def handle_moves(self) -> None:
        moves = self.game.legal_moves()
        if not moves:
            _send(f"moves {NO_MOVES}")
            return
        _send("moves " + " ".join(move_to_text(move) for move in moves))

    def handle_go(self, tokens: list[str]) -> None:
        """
        Start a search for the side to move on a background thread.

        The budget comes from "movetime <ms>" (default DEFAULT_TIME_LIMIT_MS)
        and is clamped before it reaches the Bot. The thread always answers
        with a "bestmove" line.
        """
        self._stop_search()

        time_limit_ms = clamp_time_limit(self._parse_movetime(tokens))
        self.stop_event = threading.Event()
        stop_event = self.stop_event
        game = self.game.clone()
        bot = Bot(game.current_side, time_limit_ms)

        def search_and_reply() -> None:
            try:
                start = time.monotonic()
                result = bot.search(game, stop_event)
                elapsed_ms = max(1, int((time.monotonic() - start) * 1000))

                if result.move is not None:
                    nps = max(1, result.nodes * 1000 // elapsed_ms)
                    _send(
                        f"info depth {result.depth} score {result.score} "
                        f"nodes {result.nodes} nps {nps} time {elapsed_ms}"
                    )
                _send(f"bestmove {move_to_text(result.move)}")

            except Exception as e:
                _log(f"search error: {e}")
                _send(f"bestmove {NO_MOVES}")

        self.search_thread = threading.Thread(target=search_and_reply, daemon=True)
        self.search_thread.start()

    def handle_stop(self) -> None:
        """
        Respond to the "stop" command.

        Sets the stop event and waits for the search thread, which still
        emits its "bestmove" line before exiting.
        """
        self._stop_search()

    def handle_quit(self) -> None:
        """
        Respond to the "quit" command.

        Stops the search and exits the process without a reply.
        """
        self._stop_search()
        sys.exit(0)

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    def _stop_search(self) -> None:
        """Signal the running search to stop and wait for its reply."""
        self.stop_event.set()
        if self.search_thread is not None and self.search_thread.is_alive():
            self.search_thread.join(timeout=2.0)
        self.search_thread = None

    def wait_for_search(self) -> None:
        """Block until the running search (if any) has sent its bestmove."""
        if self.search_thread is not None:
            self.search_thread.join()
        self.search_thread = None

    @staticmethod
    def _parse_movetime(tokens: list[str]) -> int:
        if "movetime" in tokens:
            idx = tokens.index("movetime")
            try:
                return int(tokens[idx + 1])
            except (ValueError, IndexError):
                _log("protocol: movetime needs an integer value")
        return DEFAULT_TIME_LIMIT_MS


def run_protocol_loop() -> None:
    """
    Main protocol loop: read commands from stdin until "quit" or EOF.

    Each command is wrapped in a try/except so that one failing command is
    logged to stderr and does not take the engine down.
    """
    handler = ProtocolHandler()

    for raw_line in sys.stdin:
        line = raw_line.strip()
        if not line:
            continue

        tokens = line.split()
        command = tokens[0]
        args = tokens[1:]

        try:
            if command == "draughts":
                handler.handle_hello()
            elif command == "isready":
                handler.handle_isready()
            elif command == "newgame":
                handler.handle_newgame()
            elif command == "position":
                handler.handle_position(args)
            elif command == "moves":
                handler.handle_moves()
            elif command == "go":
                handler.handle_go(args)
            elif command == "stop":
                handler.handle_stop()
            elif command == "quit":
                handler.handle_quit()
            else:
                _log(f"protocol: ignoring unknown command: {command!r}")

        except Exception as e:
            _log(f"protocol: unhandled error for command {command!r}: {e}")

    # Stdin closed: let a running search finish and send its reply.
    handler.wait_for_search()


if __name__ == "__main__":
    run_protocol_loop()
