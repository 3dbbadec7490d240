from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import numpy as np

from .errors import SnapshotError
from .geometry import Coordinate
from .rules import HeuristicWeights

if TYPE_CHECKING:
    from .pieces import Piece, PieceSet


@dataclass(frozen=True)
class Cell:
    type_id: str
    set_id: str


@dataclass
class BoardFeatures:
    holes: int
    max_height: int
    cells: int
    max_slope: int
    total_slope: int
    weight: int


class GameGrid:
    """Sparse occupancy map for one pit.

    ``y`` grows upward from the floor. ``column_heights`` and ``row_fill``
    are caches of what ``occupancy`` already encodes; ``recompute_caches``
    rebuilds both from scratch. Rows at or above ``depth`` are never
    counted in ``row_fill`` and never clear, although pieces may lock there.
    """

    def __init__(self, width: int, depth: int, weights: Optional[HeuristicWeights] = None) -> None:
        self.width = int(width)
        self.depth = int(depth)
        self.weights = weights or HeuristicWeights()
        self.occupancy: Dict[Coordinate, Cell] = {}
        self.column_heights: List[int] = [0] * self.width
        self.row_fill: List[int] = [0] * self.depth

    def __repr__(self) -> str:
        return f"GameGrid({self.width}x{self.depth}, cells={len(self.occupancy)})"

    def is_occupied(self, x: int, y: int) -> bool:
        return Coordinate(x, y) in self.occupancy

    def can_place(self, piece: "Piece") -> bool:
        return piece.can_place(self)

    def lock(self, piece: "Piece") -> List[int]:
        """Merge ``piece`` into the pit at its current anchor and clear full rows.

        Returns the sorted indices (pre-shift) of the rows that were cleared.
        """
        cell = Cell(piece.type_id, piece.set_id)
        for xy in piece.cells_at():
            self.occupancy[xy] = cell
            if xy.y < self.depth:
                self.row_fill[xy.y] += 1
            self.column_heights[xy.x] = max(self.column_heights[xy.x], xy.y + 1)
        return self._clear_full_rows()

    def _clear_full_rows(self) -> List[int]:
        cleared = [y for y in range(self.depth) if self.row_fill[y] == self.width]
        if not cleared:
            return []

        for y in reversed(cleared):
            del self.row_fill[y]
            self.row_fill.append(0)

        removed = set(cleared)
        shifted: Dict[Coordinate, Cell] = {}
        for xy, cell in self.occupancy.items():
            if xy.y in removed:
                continue
            drop = sum(1 for y in cleared if y < xy.y)
            shifted[Coordinate(xy.x, xy.y - drop)] = cell
        self.occupancy = shifted

        self.column_heights = [0] * self.width
        for xy in self.occupancy:
            self.column_heights[xy.x] = max(self.column_heights[xy.x], xy.y + 1)
        return cleared

    def recompute_caches(self) -> None:
        self.column_heights = [0] * self.width
        self.row_fill = [0] * self.depth
        for xy in self.occupancy:
            self.column_heights[xy.x] = max(self.column_heights[xy.x], xy.y + 1)
            if xy.y < self.depth:
                self.row_fill[xy.y] += 1

    def height_profile(self) -> List[int]:
        return list(self.column_heights)

    def features(self) -> BoardFeatures:
        holes = 0
        weight = 0
        for x, y in self.occupancy:
            weight += y + 1
            # an occupied cell with nothing directly beneath it
            if y > 0 and Coordinate(x, y - 1) not in self.occupancy:
                holes += 1

        max_slope = 0
        total_slope = 0
        for left, right in zip(self.column_heights, self.column_heights[1:]):
            diff = abs(left - right)
            total_slope += diff
            max_slope = max(max_slope, diff)

        return BoardFeatures(
            holes=holes,
            max_height=max(self.column_heights) if self.column_heights else 0,
            cells=len(self.occupancy),
            max_slope=max_slope,
            total_slope=total_slope,
            weight=weight,
        )

    def score(self) -> float:
        """Heuristic board quality; lower is better for the player placing pieces."""
        return self.weights.evaluate(self.features())

    def clone(self) -> "GameGrid":
        copy = GameGrid.__new__(GameGrid)
        copy.width = self.width
        copy.depth = self.depth
        copy.weights = self.weights
        # Cell values are frozen, so a fresh dict is a deep copy
        copy.occupancy = dict(self.occupancy)
        copy.column_heights = list(self.column_heights)
        copy.row_fill = list(self.row_fill)
        return copy

    def to_array(self, piece_set: Optional["PieceSet"] = None) -> np.ndarray:
        """Dense view with row 0 at the top of the pit, 0 for empty cells.

        With ``piece_set`` the cell value is the 1-based index of the cell's
        type within that set, otherwise 1.
        """
        state = np.zeros((self.depth, self.width), dtype=np.int8)
        for xy, cell in self.occupancy.items():
            if xy.y >= self.depth:
                continue
            value = 1
            if piece_set is not None and cell.type_id in piece_set:
                value = piece_set.index_of(cell.type_id)
            state[self.depth - 1 - xy.y, xy.x] = value
        return state

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "depth": self.depth,
            "cells": [
                [xy.x, xy.y, cell.type_id, cell.set_id]
                for xy, cell in sorted(self.occupancy.items(), key=lambda item: (item[0].y, item[0].x))
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], weights: Optional[HeuristicWeights] = None) -> "GameGrid":
        try:
            width, depth = int(data["width"]), int(data["depth"])
            cells = [(int(x), int(y), str(t), str(s)) for x, y, t, s in data["cells"]]
        except (KeyError, TypeError, ValueError) as exc:
            raise SnapshotError(f"Malformed grid snapshot: {exc}") from exc

        grid = cls(width, depth, weights)
        for x, y, type_id, set_id in cells:
            xy = Coordinate(x, y)
            if not 0 <= x < width or y < 0:
                raise SnapshotError(f"Cell ({x}, {y}) lies outside a {width}-wide pit")
            if xy in grid.occupancy:
                raise SnapshotError(f"Cell ({x}, {y}) appears twice")
            grid.occupancy[xy] = Cell(type_id, set_id)
        grid.recompute_caches()
        return grid
