"""Game module for Block Duel.

Exports the deterministic core of the duel:
- Coordinate: integer cell positions
- PieceSet, PieceDefinition, Piece: per-side shapes and movable pieces
- GameGrid: occupancy, line clearing and the board heuristic
- ScoringRules, HeuristicWeights: tunable scoring constants
- Clock: logical timer scheduler
- GameSession: per-side lifecycle from spawn to game over
- Coordinator: arbitrates which side loses first
"""

from .clock import Clock
from .coordinator import Coordinator, MatchResult
from .core import Action, GameConfig, GameOverReason, GameSession, SessionState, SessionStatus
from .errors import BlockDuelError, InvalidPieceSet, SnapshotError, UnknownPieceType
from .geometry import Coordinate
from .grid import BoardFeatures, Cell, GameGrid
from .pieces import (
    ATTACKER,
    ATTACKER_SET,
    CLOCKWISE,
    COUNTER_CLOCKWISE,
    DEFENDER,
    DEFENDER_SET,
    Piece,
    PieceDefinition,
    PieceSet,
)
from .rules import HeuristicWeights, ScoringRules

__all__ = [
    "Action",
    "ATTACKER",
    "ATTACKER_SET",
    "BlockDuelError",
    "BoardFeatures",
    "Cell",
    "CLOCKWISE",
    "Clock",
    "Coordinate",
    "Coordinator",
    "COUNTER_CLOCKWISE",
    "DEFENDER",
    "DEFENDER_SET",
    "GameConfig",
    "GameGrid",
    "GameOverReason",
    "GameSession",
    "HeuristicWeights",
    "InvalidPieceSet",
    "MatchResult",
    "Piece",
    "PieceDefinition",
    "PieceSet",
    "ScoringRules",
    "SessionState",
    "SessionStatus",
    "SnapshotError",
    "UnknownPieceType",
]
