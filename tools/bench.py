#!/usr/bin/env python3
"""
Benchmark: measure nodes searched and depth reached per move.

Runs a fixed set of positions through the engine protocol with the same time
budget and prints the depth, node count and NPS for each. Run it before and
after a search or move generation change to quantify the effect.

Usage: python3 tools/bench.py
"""
import subprocess
import sys
import os

REPO = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
PYTHON = sys.executable
ENGINE = os.path.join(REPO, "interface", "protocol.py")
MOVETIME_MS = 2000
STAT_KEYS = ("depth", "score", "nodes", "nps", "time")

# Fixed positions spanning opening, middlegame and endgame.
# Same positions for every comparison.
POSITIONS = [
    ("Start",        "startpos"),
    ("After C3-D4",  "startpos moves C3->D4"),
    ("Exchange",     "startpos moves C3->D4 F6->E5 D4->F6"),
    ("Capture",      "board r.r.r.r./.r.r.r.r/r.r...../.....r../....w.../.w...w.w/w.w.w.w./.w.w.w.w white"),
    ("Kings",        "board ......../......../..R...../......../....w.../......../......../...W.... red"),
    ("Race",         "board ......../.r....../......../......../......../......../....w.../........ red"),
]


def _field(parts: list[str], key: str) -> int:
    """Integer following key in an "info" line, or 0 if absent."""
    try:
        return int(parts[parts.index(key) + 1])
    except (ValueError, IndexError):
        return 0


def run_position(pos_spec: str) -> tuple[str, dict[str, int]]:
    """
    Search one position in a fresh engine process.

    Returns the engine's bestmove text and the depth/score/nodes/nps/time
    fields of its last "info" line.
    """
    proc = subprocess.Popen(
        [PYTHON, ENGINE],
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.DEVNULL,
        text=True,
        env={**os.environ, "PYTHONPATH": REPO},
    )
    proc.stdin.write(f"position {pos_spec}\ngo movetime {MOVETIME_MS}\n")
    proc.stdin.flush()

    stats = dict.fromkeys(STAT_KEYS, 0)
    move = "NO MOVES"
    for line in proc.stdout:
        parts = line.split()
        if parts[:1] == ["info"]:
            stats = {key: _field(parts, key) for key in STAT_KEYS}
        elif parts[:1] == ["bestmove"]:
            move = line.strip().split(" ", 1)[1]
            break

    proc.stdin.write("quit\n")
    proc.stdin.flush()
    proc.wait(timeout=5)
    return move, stats


def main() -> None:
    print(f"Draughts engine benchmark, {MOVETIME_MS} ms per position")
    for label, pos in POSITIONS:
        move, stats = run_position(pos)
        summary = " ".join(f"{key}={stats[key]:,}" for key in STAT_KEYS)
        print(f"{label:<12} {move:<14} {summary}")


if __name__ == "__main__":
    main()
