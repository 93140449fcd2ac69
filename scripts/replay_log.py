#!/usr/bin/env python3
"""Replay a text log of player operations through a match and report the result.

Each non-empty, non-comment line is ``<P1|P2> OP ...``, for example::

    P1 OP SETUP L 0 0
    P1 OP MOVE 1 3 2 3
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, Optional

from rainet.core import PlayerId
from rainet.protocol import ProtocolError
from rainet.session import Match, MatchConfig, load_match_config

logger = logging.getLogger("replay_log")


def replay_log(
    log_path: Path,
    *,
    config: Optional[MatchConfig] = None,
    verbose: bool = True,
) -> Dict[str, object]:
    match = Match(config)
    applied = 0
    rejected = []
    for line_no, raw in enumerate(log_path.read_text(encoding="utf-8").splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        seat, _, command = line.partition(" ")
        try:
            player = PlayerId[seat]
        except KeyError as exc:
            raise ProtocolError(f"line {line_no}: unknown player {seat!r}") from exc

        reply = match.apply(player, command)
        if reply.ok:
            applied += 1
            if verbose:
                print(f"{line_no}: {line}")
                print(reply.broadcast, end="")
        else:
            rejected.append({"line": line_no, "command": line, "error": reply.error_code})
            logger.warning("line %d rejected: %s (%s)", line_no, line, reply.error_code)

    game = match.game
    summary = {
        "applied": applied,
        "rejected": rejected,
        "phase": game.phase.kind.value,
        "winner": game.winner.name if game.winner is not None else None,
        "snapshot": match.snapshot(),
    }
    return summary


def main() -> None:
    parser = argparse.ArgumentParser(description="Replay a Rai-Net operation log.")
    parser.add_argument("log_file", type=str)
    parser.add_argument("--config", type=str, default=None, help="YAML match config")
    parser.add_argument("--check-invariants", action="store_true")
    parser.add_argument("--quiet", action="store_true")
    parser.add_argument("--log-level", type=str, default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    config = load_match_config(args.config)
    if args.check_invariants:
        config.check_invariants = True

    summary = replay_log(Path(args.log_file), config=config, verbose=not args.quiet)
    output = {key: value for key, value in summary.items() if key != "snapshot"}
    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
