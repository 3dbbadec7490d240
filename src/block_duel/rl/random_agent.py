from __future__ import annotations

import numpy as np
import gymnasium as gym

import block_duel.env  # noqa: F401
from block_duel.env.wrappers import FlattenPlacementWrapper, ValidPlacementWrapper


def make_env(seed: int | None = None) -> gym.Env:
    env = gym.make("BlockDuelDefender-v0")
    env = FlattenPlacementWrapper(env)
    env = ValidPlacementWrapper(env)
    if seed is not None:
        env.reset(seed=seed)
    return env


def run_random(steps: int = 200, seed: int = 0) -> float:
    env = make_env()
    rng = np.random.default_rng(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    for _ in range(steps):
        # Prefer valid actions if available
        valid = np.flatnonzero(info["action_mask"].reshape(-1))
        if valid.size > 0:
            action = int(rng.choice(valid))
        else:
            action = int(env.action_space.sample())
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            obs, info = env.reset()
    env.close()
    return total_reward


if __name__ == "__main__":  # pragma: no cover
    print(f"Random agent total reward: {run_random():.2f}")
