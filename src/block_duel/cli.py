from __future__ import annotations

import argparse
import json
import logging
from typing import List, Optional

from block_duel.ai import ATTACKER_ROLE, DEFENDER_ROLE, PlayerConfig, create_player
from block_duel.game import Coordinator, GameConfig

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level,
                        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
                        datefmt="%H:%M:%S")


def run_match(
    seed: Optional[int] = None,
    left_attacker: str = "ai",
    left_defender: str = "ai",
    right_attacker: str = "ai",
    right_defender: str = "ai",
    max_seconds: float = 600.0,
    config: Optional[GameConfig] = None,
    player_config: Optional[PlayerConfig] = None,
) -> Coordinator:
    """Play a headless match on logical time until one side loses or time runs out."""
    config = config or GameConfig()
    coordinator = Coordinator.create(config=config, seed=seed)
    left, right = coordinator.left, coordinator.right
    create_player(left_attacker, ATTACKER_ROLE, left, player_config)
    create_player(left_defender, DEFENDER_ROLE, left, player_config)
    create_player(right_attacker, ATTACKER_ROLE, right, player_config)
    create_player(right_defender, DEFENDER_ROLE, right, player_config)

    finished = coordinator.clock.run_until(lambda: coordinator.decided, int(max_seconds * 1000))
    if not finished:
        logger.info("No side lost within %.0f logical seconds", max_seconds)
    return coordinator


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="block-duel", description="Run a headless block duel")
    kinds = ["ai", "random", "none"]
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--left-attacker", choices=kinds, default="ai")
    p.add_argument("--left-defender", choices=kinds, default="ai")
    p.add_argument("--right-attacker", choices=kinds, default="ai")
    p.add_argument("--right-defender", choices=kinds, default="ai")
    p.add_argument("--width", type=int, default=10)
    p.add_argument("--depth", type=int, default=16)
    p.add_argument("--max-seconds", type=float, default=600.0,
                   help="Logical seconds to simulate before giving up")
    p.add_argument("--json", action="store_true", help="Print the outcome and both snapshots as JSON")
    p.add_argument("--verbose", action="store_true")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    coordinator = run_match(
        seed=args.seed,
        left_attacker=args.left_attacker,
        left_defender=args.left_defender,
        right_attacker=args.right_attacker,
        right_defender=args.right_defender,
        max_seconds=args.max_seconds,
        config=GameConfig(width=args.width, depth=args.depth, random_seed=args.seed),
    )
    result = coordinator.result

    if args.json:
        print(json.dumps({
            "winner": result.winner if result else None,
            "loser": result.loser if result else None,
            "elapsed_ms": coordinator.clock.now,
            "sessions": {side: s.snapshot() for side, s in coordinator.sessions.items()},
        }, indent=2))
        return 0

    if result is None:
        print(f"Undecided after {coordinator.clock.now / 1000:.1f}s")
    else:
        print(f"Winner: {result.winner}  Loser: {result.loser} ({result.reason.value})")
    for side, session in coordinator.sessions.items():
        print(f"  {side}: {session.score} rows cleared, {session.pieces_locked} pieces locked")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
