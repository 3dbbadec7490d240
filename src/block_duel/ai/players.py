from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Optional

from block_duel.game.clock import Timer
from block_duel.game.core import GameSession, SessionState
from block_duel.game.pieces import COUNTER_CLOCKWISE, Piece

from .search import (
    ROTATIONS,
    Placement,
    best_placement_any_rotation,
    choose_adversarial_type,
    score_types,
    simulate_placement,
)

logger = logging.getLogger(__name__)

ATTACKER_ROLE = "attacker"
DEFENDER_ROLE = "defender"
PLAYER_KINDS = ("ai", "random", "none")


@dataclass
class PlayerConfig:
    attacker_interval_ms: int = 100
    defender_interval_ms: int = 200


def adversarial_choice(
    session: GameSession,
    last_type: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> Optional[str]:
    """Pick the available type that leaves the placer the worst best case.

    The type picked last time is skipped when another is available. The
    falling piece, if any, is first assumed to land where the placer would
    put it.
    """
    rng = rng or session.rng
    candidates = [t for t, count in session.available_types().items() if count > 0]
    if last_type in candidates and len(candidates) > 1:
        candidates.remove(last_type)

    grid = session.grid
    current = session.current_piece
    if current is not None:
        expected = best_placement_any_rotation(grid, current, rng)
        grid = simulate_placement(grid, current, expected)

    scores = score_types(grid, candidates, session.piece_set, rng)
    type_id = choose_adversarial_type(scores, rng)
    logger.debug("%s attacker picks %r from %s", session.side, type_id, scores)
    return type_id


class Player:
    """An automated actor polling one session on the session's clock.

    Polling stops by itself once the session is over.
    """

    def __init__(self, session: GameSession, interval_ms: int, rng: Optional[random.Random] = None) -> None:
        self.session = session
        self.rng = rng or session.rng
        self._timer: Optional[Timer] = session.clock.call_every(interval_ms, self.poll)
        session.on_game_over(self._on_game_over)

    def _on_game_over(self, sender: Any, **kwargs: Any) -> None:
        self.destroy()

    @property
    def active(self) -> bool:
        return self._timer is not None

    def destroy(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def poll(self) -> None:
        raise NotImplementedError


class AttackerAI(Player):
    """Queues whichever available type leaves the defender the worst best case."""

    def __init__(self, session: GameSession, interval_ms: int = 100, rng: Optional[random.Random] = None) -> None:
        super().__init__(session, interval_ms, rng)
        self.last_type: Optional[str] = None

    def poll(self) -> None:
        session = self.session
        if not session.playing or session.queued_type is not None:
            return
        type_id = adversarial_choice(session, self.last_type, self.rng)
        if type_id is None:
            return
        self.last_type = type_id
        session.set_queued_type(type_id)


class RandomAttacker(Player):
    def __init__(self, session: GameSession, interval_ms: int = 100, rng: Optional[random.Random] = None) -> None:
        super().__init__(session, interval_ms, rng)

    def poll(self) -> None:
        session = self.session
        if not session.playing or session.queued_type is not None:
            return
        candidates = [t for t, count in session.available_types().items() if count > 0]
        if candidates:
            session.set_queued_type(self.rng.choice(candidates))


class Defender(Player):
    """Base for defenders: steers each new piece once, then hard-drops it."""

    def __init__(self, session: GameSession, interval_ms: int = 200, rng: Optional[random.Random] = None) -> None:
        super().__init__(session, interval_ms, rng)
        self._handled: Optional[Piece] = None

    def poll(self) -> None:
        session = self.session
        piece = session.current_piece
        if session.state is not SessionState.FALLING or piece is None or piece is self._handled:
            return
        self._handled = piece
        self.execute(self.choose(piece))

    def choose(self, piece: Piece) -> Placement:
        raise NotImplementedError

    def execute(self, placement: Placement) -> None:
        """Rotate, then shift toward the target column; stop at the first rejected move."""
        session = self.session
        if placement.x is not None:
            for _ in range(placement.rotation):
                if not session.rotate(COUNTER_CLOCKWISE):
                    break
            piece = session.current_piece
            while piece is not None and piece.anchor.x != placement.x:
                if not session.shift(1 if placement.x > piece.anchor.x else -1):
                    break
        session.hard_drop()


class DefenderAI(Defender):
    def choose(self, piece: Piece) -> Placement:
        placement = best_placement_any_rotation(self.session.grid, piece, self.rng)
        logger.debug(
            "%s defender places %r at x=%s rotation=%d (score %s)",
            self.session.side,
            piece.type_id,
            placement.x,
            placement.rotation,
            placement.score,
        )
        return placement


class RandomDefender(Defender):
    def choose(self, piece: Piece) -> Placement:
        return Placement(
            x=self.rng.randrange(self.session.grid.width),
            score=float("nan"),
            rotation=self.rng.randrange(ROTATIONS),
        )


def create_player(
    kind: str,
    role: str,
    session: GameSession,
    config: Optional[PlayerConfig] = None,
    rng: Optional[random.Random] = None,
) -> Optional[Player]:
    """Build a player by kind ("ai", "random" or "none") and role."""
    config = config or PlayerConfig()
    if kind not in PLAYER_KINDS:
        raise ValueError(f"Unknown player kind {kind!r}")
    if kind == "none":
        return None
    if role == ATTACKER_ROLE:
        cls = AttackerAI if kind == "ai" else RandomAttacker
        return cls(session, config.attacker_interval_ms, rng)
    if role == DEFENDER_ROLE:
        cls = DefenderAI if kind == "ai" else RandomDefender
        return cls(session, config.defender_interval_ms, rng)
    raise ValueError(f"Unknown player role {role!r}")
