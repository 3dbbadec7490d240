from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, Optional

import numpy as np
from blinker import Signal

from .clock import Clock, Timer
from .errors import SnapshotError
from .geometry import GRAVITY, LEFT, RIGHT, Coordinate
from .grid import GameGrid
from .pieces import CLOCKWISE, COUNTER_CLOCKWISE, Piece, PieceSet
from .rules import HeuristicWeights, ScoringRules

logger = logging.getLogger(__name__)

UP = Coordinate(0, 1)


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    SOFT_DROP = 4
    HARD_DROP = 5
    NONE = 6


class SessionState(Enum):
    SPAWNING = "spawning"
    FALLING = "falling"
    LOCKING = "locking"
    GAME_OVER = "game_over"


class GameOverReason(str, Enum):
    SPAWN_BLOCKED = "spawn_blocked"
    FROZEN = "frozen"


@dataclass
class GameConfig:
    width: int = 10
    depth: int = 16
    random_seed: Optional[int] = None
    gravity_interval_ms: int = 1000
    gravity_speedup_ms: int = 5
    min_gravity_interval_ms: int = 100
    drop_delay_ms: int = 200
    settle_delay_ms: int = 350


@dataclass
class SessionStatus:
    score: int
    playing: bool


class GameSession:
    """One side of a duel: a pit, its inventory and the piece falling into it.

    Lifecycle: SPAWNING -> FALLING -> LOCKING -> SPAWNING, until GAME_OVER,
    which is terminal. An external actor queues piece types with
    ``set_queued_type``; another moves the falling piece. Time only passes
    through ``clock``.

    Signals (blinker, receivers get the session as sender):
      piece_spawned(piece), piece_moved(piece), grid_changed(cleared_rows),
      ended(side, reason)
    """

    def __init__(
        self,
        piece_set: PieceSet,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        weights: Optional[HeuristicWeights] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.piece_set = piece_set
        self.side = piece_set.set_id
        self.clock = clock or Clock()
        self.rng = rng or random.Random(self.config.random_seed)
        self.grid = GameGrid(self.config.width, self.config.depth, weights)

        self.piece_spawned = Signal("piece_spawned")
        self.piece_moved = Signal("piece_moved")
        self.grid_changed = Signal("grid_changed")
        self.ended = Signal("ended")

        self.score = 0
        self.lines_cleared_total = 0
        self.pieces_locked = 0
        self.state = SessionState.SPAWNING
        self.game_over_reason: Optional[GameOverReason] = None
        self.current_piece: Optional[Piece] = None
        self.queued_type: Optional[str] = None
        self.inventory: Dict[str, int] = piece_set.base_inventory()
        self.gravity_interval_ms = self.config.gravity_interval_ms

        self._gravity: Optional[Timer] = None
        self._pending: Optional[Timer] = None

    def __repr__(self) -> str:
        return f"GameSession({self.side!r}, state={self.state.value}, score={self.score})"

    # ---------- Queries ----------
    @property
    def playing(self) -> bool:
        return self.state is not SessionState.GAME_OVER

    def get_status(self) -> SessionStatus:
        return SessionStatus(score=self.score, playing=self.playing)

    def available_types(self) -> Dict[str, int]:
        return dict(self.inventory)

    def get_state(self) -> np.ndarray:
        """Pit as an array (row 0 on top) with the falling piece as negative values."""
        state = self.grid.to_array(self.piece_set)
        piece = self.current_piece
        if piece is not None:
            value = -self.piece_set.index_of(piece.type_id)
            for x, y in piece.cells_at():
                if 0 <= x < self.grid.width and 0 <= y < self.grid.depth:
                    state[self.grid.depth - 1 - y, x] = value
        return state

    def on_game_over(self, callback: Callable[..., Any]) -> None:
        self.ended.connect(callback, weak=False)

    # ---------- Inventory and spawning ----------
    def set_queued_type(self, type_id: str) -> bool:
        """Queue the next piece type. Exhausted or unknown types are ignored."""
        if not self.playing:
            return False
        if self.inventory.get(type_id, 0) < 1:
            return False
        self.queued_type = type_id
        if self.state is SessionState.SPAWNING:
            self._spawn()
        return True

    def _take_from_inventory(self, type_id: str) -> None:
        remaining = self.inventory.get(type_id, 0) - 1
        if remaining > 0:
            self.inventory[type_id] = remaining
        else:
            self.inventory.pop(type_id, None)
        if not self.inventory:
            self.inventory = self.piece_set.base_inventory()
            logger.debug("%s: inventory replenished", self.side)

    def _spawn(self) -> None:
        type_id = self.queued_type
        if type_id is None:
            return
        self.queued_type = None
        self._take_from_inventory(type_id)

        piece = Piece(type_id, self.piece_set).center(self.grid.width, self.grid.depth)
        if not self.grid.can_place(piece):
            logger.debug("%s: no room to spawn %r", self.side, type_id)
            self._end(GameOverReason.SPAWN_BLOCKED)
            return

        self.current_piece = piece
        self.state = SessionState.FALLING
        self._start_gravity()
        logger.debug("%s: spawned %r", self.side, type_id)
        self.piece_spawned.send(self, piece=piece)

    # ---------- Moves ----------
    def _falling_piece(self) -> Optional[Piece]:
        if self.state is not SessionState.FALLING:
            return None
        return self.current_piece

    def shift(self, direction: int) -> bool:
        piece = self._falling_piece()
        if piece is None or direction == 0:
            return False
        delta = RIGHT if direction > 0 else LEFT
        piece.move(delta)
        if not piece.can_place(self.grid):
            piece.anchor = piece.anchor.minus(delta)
            return False
        self.piece_moved.send(self, piece=piece)
        return True

    def rotate(self, direction: int) -> bool:
        piece = self._falling_piece()
        if piece is None or direction == 0:
            return False
        piece.rotate(direction)
        if not piece.can_place(self.grid):
            piece.rotate(CLOCKWISE if direction > 0 else COUNTER_CLOCKWISE)
            return False
        self.piece_moved.send(self, piece=piece)
        return True

    def tick(self) -> None:
        """One gravity step; a piece that cannot fall any further starts locking."""
        piece = self._falling_piece()
        if piece is None:
            return
        piece.move(GRAVITY)
        if piece.can_place(self.grid):
            self.piece_moved.send(self, piece=piece)
            return
        piece.move(UP)
        self.hard_drop()

    def hard_drop(self) -> bool:
        piece = self._falling_piece()
        if piece is None:
            return False
        while piece.can_place(self.grid):
            piece.move(GRAVITY)
        piece.move(UP)
        self.piece_moved.send(self, piece=piece)

        self._stop_gravity()
        self.state = SessionState.LOCKING
        self._pending = self.clock.call_later(self.config.drop_delay_ms, self._lock)
        return True

    def apply(self, action: Action) -> bool:
        if action == Action.LEFT:
            return self.shift(-1)
        if action == Action.RIGHT:
            return self.shift(1)
        if action == Action.ROTATE_CW:
            return self.rotate(CLOCKWISE)
        if action == Action.ROTATE_CCW:
            return self.rotate(COUNTER_CLOCKWISE)
        if action == Action.SOFT_DROP:
            self.tick()
            return True
        if action == Action.HARD_DROP:
            return self.hard_drop()
        return False

    # ---------- Locking ----------
    def _lock(self) -> None:
        self._pending = None
        piece = self.current_piece
        if self.state is not SessionState.LOCKING or piece is None:
            return
        cleared = self.grid.lock(piece)
        self.current_piece = None
        self.pieces_locked += 1
        self.lines_cleared_total += len(cleared)
        self.score += self.rules.score_for_rows(len(cleared))
        if cleared:
            logger.debug("%s: cleared rows %s, score %d", self.side, cleared, self.score)
        self.grid_changed.send(self, cleared_rows=cleared)
        self._pending = self.clock.call_later(self.config.settle_delay_ms, self._settle)

    def _settle(self) -> None:
        self._pending = None
        if self.state is not SessionState.LOCKING:
            return
        self.state = SessionState.SPAWNING
        if self.queued_type is not None:
            self._spawn()

    # ---------- Timers ----------
    def _start_gravity(self) -> None:
        if self._gravity is not None:
            return
        self._gravity = self.clock.call_every(self.gravity_interval_ms, self.tick)
        self.gravity_interval_ms = max(
            self.config.min_gravity_interval_ms,
            self.gravity_interval_ms - self.config.gravity_speedup_ms,
        )

    def _stop_gravity(self) -> None:
        if self._gravity is not None:
            self._gravity.cancel()
            self._gravity = None

    # ---------- Game over ----------
    def freeze(self) -> None:
        """Stop the session from outside, e.g. because the opponent lost first."""
        self._end(GameOverReason.FROZEN)

    def _end(self, reason: GameOverReason) -> None:
        if self.state is SessionState.GAME_OVER:
            return
        self._stop_gravity()
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        self.current_piece = None
        self.state = SessionState.GAME_OVER
        self.game_over_reason = reason
        logger.debug("%s: game over (%s), score %d", self.side, reason.value, self.score)
        self.ended.send(self, side=self.side, reason=reason)

    # ---------- Snapshots ----------
    def snapshot(self) -> Dict[str, Any]:
        return {
            "side": self.side,
            "score": self.score,
            "playing": self.playing,
            "queued_type": self.queued_type,
            "inventory": dict(self.inventory),
            "grid": self.grid.to_dict(),
        }

    @classmethod
    def from_snapshot(
        cls,
        data: Dict[str, Any],
        piece_set: PieceSet,
        config: Optional[GameConfig] = None,
        **kwargs: Any,
    ) -> "GameSession":
        if data.get("side") != piece_set.set_id:
            raise SnapshotError(f"Snapshot side {data.get('side')!r} does not match set {piece_set.set_id!r}")
        session = cls(piece_set, config, **kwargs)
        grid = GameGrid.from_dict(data.get("grid"), session.grid.weights)
        if (grid.width, grid.depth) != (session.grid.width, session.grid.depth):
            raise SnapshotError(f"Snapshot pit is {grid.width}x{grid.depth}")
        session.grid = grid

        try:
            inventory = {str(t): int(c) for t, c in dict(data.get("inventory") or {}).items()}
            score = int(data.get("score", 0))
        except (TypeError, ValueError) as exc:
            raise SnapshotError(f"Malformed snapshot: {exc}") from exc
        for type_id in inventory:
            if type_id not in piece_set:
                raise SnapshotError(f"Unknown type {type_id!r} in snapshot inventory")
        session.inventory = {t: c for t, c in inventory.items() if c > 0}
        if not session.inventory:
            session.inventory = piece_set.base_inventory()
        session.score = score

        if not data.get("playing", True):
            session.state = SessionState.GAME_OVER
            return session
        queued = data.get("queued_type")
        if queued is not None and session.inventory.get(queued, 0) > 0:
            session.queued_type = queued
        return session

    def resume(self) -> None:
        """Spawn the queued piece of a session restored between pieces."""
        if self.state is SessionState.SPAWNING and self.queued_type is not None:
            self._spawn()
