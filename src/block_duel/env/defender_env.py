from __future__ import annotations

import random
from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from block_duel.ai.players import adversarial_choice
from block_duel.ai.search import ROTATIONS
from block_duel.game import (
    COUNTER_CLOCKWISE,
    DEFENDER_SET,
    BoardFeatures,
    Clock,
    GameConfig,
    GameSession,
    PieceSet,
)
from block_duel.game.geometry import Coordinate


def _reachable(session: GameSession, rotation: int, x: int) -> bool:
    """Whether rotating then shifting the falling piece to column ``x`` never collides."""
    piece = session.current_piece
    if piece is None:
        return False
    piece = piece.clone()
    for _ in range(rotation):
        piece.rotate(COUNTER_CLOCKWISE)
        if not piece.can_place(session.grid):
            return False
    step = 1 if x > piece.anchor.x else -1
    while piece.anchor.x != x:
        piece.move(Coordinate(step, 0))
        if not piece.can_place(session.grid):
            return False
    return True


def compute_action_mask(session: GameSession) -> np.ndarray:
    mask = np.zeros((ROTATIONS, session.grid.width), dtype=np.bool_)
    if session.current_piece is None:
        return mask
    for r in range(ROTATIONS):
        for x in range(session.grid.width):
            mask[r, x] = _reachable(session, r, x)
    return mask


class DefenderEnv(gym.Env):
    """The agent places pieces chosen by the adversarial attacker.

    Action: (rotation, anchor column). The piece is turned counter-clockwise
    ``rotation`` times at the spawn row, shifted to the column and
    hard-dropped. Unreachable actions are penalised and leave the pit as is.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        piece_set: PieceSet = DEFENDER_SET,
        render_mode: Optional[str] = None,
        reward_weights: Optional[Dict[str, float]] = None,
        invalid_action_penalty: float = -0.1,
        terminal_penalty: float = -1.0,
        max_episode_steps: int = 1000,
    ) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.piece_set = piece_set
        self.render_mode = render_mode
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.max_episode_steps = int(max_episode_steps)
        self.reward_weights: Dict[str, float] = {
            "lines": 1.0,
            "holes": 0.5,
            "bumpiness": 0.02,
            "height": 0.05,
        }
        if reward_weights:
            self.reward_weights.update({k: float(v) for k, v in reward_weights.items()})

        width, depth = self.config.width, self.config.depth
        n_types = len(piece_set)
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=n_types, shape=(depth, width), dtype=np.int8),
                # 1-based type index of the falling piece, 0 when none
                "piece": spaces.Discrete(n_types + 1),
                "heights": spaces.Box(low=0, high=depth, shape=(width,), dtype=np.int8),
            }
        )
        self.action_space = spaces.MultiDiscrete((ROTATIONS, width))

        self.session = self._new_session(random.Random(self.config.random_seed))
        self._last_type: Optional[str] = None
        self._steps = 0

    def _new_session(self, rng: random.Random) -> GameSession:
        return GameSession(self.piece_set, self.config, clock=Clock(), rng=rng)

    def _feed_next_piece(self) -> None:
        if not self.session.playing:
            return
        type_id = adversarial_choice(self.session, self._last_type)
        if type_id is not None:
            self._last_type = type_id
            self.session.set_queued_type(type_id)

    def _get_obs(self) -> Dict[str, Any]:
        piece = self.session.current_piece
        heights = np.minimum(np.array(self.session.grid.height_profile()), self.config.depth)
        return {
            "grid": self.session.grid.to_array(self.piece_set),
            "piece": self.piece_set.index_of(piece.type_id) if piece is not None else 0,
            "heights": heights.astype(np.int8),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": compute_action_mask(self.session),
            "score": self.session.score,
            "lines_cleared_total": self.session.lines_cleared_total,
            "pieces_locked": self.session.pieces_locked,
        }

    def get_action_mask(self) -> np.ndarray:
        return compute_action_mask(self.session)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        rng_seed = seed if seed is not None else int(self.np_random.integers(0, 2**31 - 1))
        self.session = self._new_session(random.Random(rng_seed))
        self._last_type = None
        self._steps = 0
        self._feed_next_piece()
        return self._get_obs(), self._get_info()

    def _shaping(self, before: BoardFeatures, after: BoardFeatures, lines: int) -> Dict[str, float]:
        return {
            "lines": self.reward_weights["lines"] * float(lines),
            "holes": -self.reward_weights["holes"] * float(max(0, after.holes - before.holes)),
            "bumpiness": -self.reward_weights["bumpiness"] * float(max(0, after.total_slope - before.total_slope)),
            "height": -self.reward_weights["height"] * float(max(0, after.max_height - before.max_height)),
        }

    def step(self, action: np.ndarray | Tuple[int, int]):
        rotation, x = map(int, action)
        session = self.session
        reward_components: Dict[str, float] = {}

        if session.current_piece is not None and 0 <= rotation < ROTATIONS and _reachable(session, rotation, x):
            before = session.grid.features()
            lines_before = session.lines_cleared_total
            for _ in range(rotation):
                session.rotate(COUNTER_CLOCKWISE)
            while session.current_piece is not None and session.current_piece.anchor.x != x:
                session.shift(1 if x > session.current_piece.anchor.x else -1)
            session.hard_drop()
            session.clock.advance(self.config.drop_delay_ms + self.config.settle_delay_ms)
            lines = session.lines_cleared_total - lines_before
            reward_components.update(self._shaping(before, session.grid.features(), lines))
            self._feed_next_piece()
        else:
            reward_components["invalid"] = self.invalid_action_penalty

        self._steps += 1
        terminated = not session.playing
        truncated = self._steps >= self.max_episode_steps
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        reward = float(sum(reward_components.values()))
        info = self._get_info()
        info["reward_components"] = reward_components
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            state = self.session.get_state()
            cell = 12
            h, w = state.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    v = int(state[y, x])
                    color = (30, 30, 36)
                    if v > 0:
                        color = (70, 200, 120)
                    elif v < 0:
                        color = (240, 200, 60)
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
            return img
        return None

    def close(self) -> None:
        pass
