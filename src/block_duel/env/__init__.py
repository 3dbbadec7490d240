"""Gymnasium environments for Block Duel."""

from __future__ import annotations

from gymnasium.envs.registration import register

# The agent defends against the adversarial attacker on the default pit
register(
    id="BlockDuelDefender-v0",
    entry_point="block_duel.env.defender_env:DefenderEnv",
)

__all__ = ["BlockDuelDefender-v0"]
