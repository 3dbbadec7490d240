from __future__ import annotations

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .defender_env import compute_action_mask


class FlattenPlacementWrapper(gym.ActionWrapper):
    """Exposes the (rotation, column) placement as a single Discrete index.

    Index ``i`` means rotation ``i // width`` and anchor column ``i % width``,
    so ``get_action_mask()`` is the defender mask flattened row by row.
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        assert isinstance(env.action_space, spaces.MultiDiscrete)
        self.rotations, self.width = map(int, env.action_space.nvec)
        self.action_space = spaces.Discrete(self.rotations * self.width)

    def placement(self, index: int) -> tuple[int, int]:
        rotation, x = divmod(int(index), self.width)
        return rotation, x

    def action(self, action: int):  # type: ignore[override]
        return np.array(self.placement(action), dtype=np.int64)

    def get_action_mask(self) -> np.ndarray:
        return compute_action_mask(self.env.unwrapped.session).reshape(-1)


class ValidPlacementWrapper(gym.Wrapper):
    """Swaps an unreachable placement for a random reachable one.

    Keeps unmasked policies from burning steps on the invalid-action
    penalty. Needs a flattened action space.
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        if not isinstance(env.action_space, spaces.Discrete):
            raise TypeError("ValidPlacementWrapper expects a Discrete action space")
        self.replaced = 0

    def step(self, action):  # type: ignore[override]
        mask = self.get_action_mask()
        index = int(action)
        if not (0 <= index < mask.shape[0] and mask[index]):
            valid = np.flatnonzero(mask)
            if valid.size > 0:
                index = int(self.np_random.choice(valid))
                self.replaced += 1
        return self.env.step(index)

    def get_action_mask(self) -> np.ndarray:
        return self.env.get_action_mask()
