from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, Optional

from blinker import Signal

from .clock import Clock
from .core import GameConfig, GameOverReason, GameSession
from .pieces import ATTACKER_SET, DEFENDER_SET, PieceSet
from .rules import HeuristicWeights, ScoringRules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    winner: str
    loser: str
    reason: GameOverReason


class Coordinator:
    """Owns both sessions of a duel and decides its outcome.

    The first session to end loses and the other is frozen on the spot;
    survival, not score, decides the match. Any later game-over
    notification is ignored.
    """

    def __init__(self, left: GameSession, right: GameSession) -> None:
        if left is right or left.side == right.side:
            raise ValueError("A duel needs two sessions on different sides")
        self.sessions: Dict[str, GameSession] = {left.side: left, right.side: right}
        self.result: Optional[MatchResult] = None
        self.finished = Signal("finished")
        for session in self.sessions.values():
            session.on_game_over(self._on_session_over)

    @classmethod
    def create(
        cls,
        left_set: PieceSet = ATTACKER_SET,
        right_set: PieceSet = DEFENDER_SET,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        weights: Optional[HeuristicWeights] = None,
        clock: Optional[Clock] = None,
        seed: Optional[int] = None,
    ) -> "Coordinator":
        """Build two sessions sharing one clock, each with its own seeded random source."""
        config = config or GameConfig()
        clock = clock or Clock()
        if seed is None:
            seed = config.random_seed
        master = random.Random(seed)
        left = GameSession(left_set, config, rules, weights, clock, random.Random(master.getrandbits(64)))
        right = GameSession(right_set, config, rules, weights, clock, random.Random(master.getrandbits(64)))
        return cls(left, right)

    @property
    def left(self) -> GameSession:
        return list(self.sessions.values())[0]

    @property
    def right(self) -> GameSession:
        return list(self.sessions.values())[1]

    @property
    def clock(self) -> Clock:
        return self.left.clock

    @property
    def decided(self) -> bool:
        return self.result is not None

    def opponent(self, side: str) -> GameSession:
        for other_side, session in self.sessions.items():
            if other_side != side:
                return session
        raise KeyError(side)

    def _on_session_over(self, session: GameSession, side: str, reason: GameOverReason) -> None:
        if self.result is not None:
            return
        winner = self.opponent(side)
        self.result = MatchResult(winner=winner.side, loser=side, reason=reason)
        for other in self.sessions.values():
            other.freeze()
        logger.info(
            "%s loses (%s); %s wins. Scores: %s",
            side,
            reason.value,
            winner.side,
            ", ".join(f"{s}={x.score}" for s, x in self.sessions.items()),
        )
        self.finished.send(self, result=self.result)
