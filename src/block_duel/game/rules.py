from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .grid import BoardFeatures


@dataclass(frozen=True)
class HeuristicWeights:
    """Weights of the board heuristic. Holes dominate every other term."""

    holes: float = 20
    max_height: float = 1
    cells: float = 1
    max_slope: float = 1
    total_slope: float = 1
    weight: float = 1

    def evaluate(self, features: "BoardFeatures") -> float:
        return (
            self.holes * features.holes
            + self.max_height * features.max_height
            + self.cells * features.cells
            + self.max_slope * features.max_slope
            + self.total_slope * features.total_slope
            + self.weight * features.weight
        )


@dataclass
class ScoringRules:
    points_per_row: int = 1

    def score_for_rows(self, rows: int) -> int:
        if rows <= 0:
            return 0
        return rows * self.points_per_row
