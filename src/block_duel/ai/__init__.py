"""Placement search and automated players."""

from .players import (
    ATTACKER_ROLE,
    DEFENDER_ROLE,
    PLAYER_KINDS,
    AttackerAI,
    Defender,
    DefenderAI,
    Player,
    PlayerConfig,
    RandomAttacker,
    RandomDefender,
    adversarial_choice,
    create_player,
)
from .search import (
    Placement,
    best_placement,
    best_placement_any_rotation,
    choose_adversarial_type,
    drop_piece,
    score_types,
    simulate_placement,
)

__all__ = [
    "ATTACKER_ROLE",
    "DEFENDER_ROLE",
    "PLAYER_KINDS",
    "AttackerAI",
    "Defender",
    "DefenderAI",
    "Placement",
    "Player",
    "PlayerConfig",
    "RandomAttacker",
    "RandomDefender",
    "best_placement",
    "best_placement_any_rotation",
    "choose_adversarial_type",
    "adversarial_choice",
    "create_player",
    "drop_piece",
    "score_types",
    "simulate_placement",
]
