from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional

from block_duel.game.geometry import GRAVITY, LEFT, RIGHT, Coordinate
from block_duel.game.grid import GameGrid
from block_duel.game.pieces import COUNTER_CLOCKWISE, Piece, PieceSet

ROTATIONS = 4


@dataclass(frozen=True)
class Placement:
    """Where to put a piece: anchor column, quarter turns, resulting heuristic.

    ``x`` is None (and ``score`` infinite) when the piece does not fit
    anywhere from the spawn row.
    """

    x: Optional[int]
    score: float
    rotation: int = 0


def drop_piece(grid: GameGrid, piece: Piece) -> Piece:
    """Move ``piece`` down until the next step would collide."""
    while piece.can_place(grid):
        piece.move(GRAVITY)
    piece.move(Coordinate(0, 1))
    return piece


def best_placement(grid: GameGrid, piece: Piece, rng: Optional[random.Random] = None) -> Placement:
    """Best column for ``piece`` in its current orientation.

    Starting at the spawn position, walk left to the last column that fits,
    then try every column to the right while the piece keeps fitting. Each
    candidate is hard-dropped and locked on a copy of the grid. Columns that
    tie on the lowest score are picked from uniformly.
    """
    rng = rng or random.Random()
    grid = grid.clone()
    piece = piece.clone().center(grid.width, grid.depth)
    if not piece.can_place(grid):
        return Placement(x=None, score=math.inf)

    while piece.can_place(grid):
        piece.move(LEFT)
    piece.move(RIGHT)

    best_score = math.inf
    best_columns: List[int] = []
    while piece.can_place(grid):
        trial_grid = grid.clone()
        trial_grid.lock(drop_piece(trial_grid, piece.clone()))
        score = trial_grid.score()
        if score < best_score:
            best_score = score
            best_columns = []
        if score == best_score:
            best_columns.append(piece.anchor.x)
        piece.move(RIGHT)

    return Placement(x=rng.choice(best_columns), score=best_score)


def best_placement_any_rotation(grid: GameGrid, piece: Piece, rng: Optional[random.Random] = None) -> Placement:
    """Best (rotation, column) pair over all four orientations.

    Symmetric shapes are evaluated once per rotation anyway; duplicates only
    add equally weighted entries to the tie pool.
    """
    rng = rng or random.Random()
    best_score = math.inf
    pool: List[Placement] = []
    for rotation in range(ROTATIONS):
        candidate = piece.clone()
        for _ in range(rotation):
            candidate.rotate(COUNTER_CLOCKWISE)
        current = best_placement(grid, candidate, rng)
        if current.score < best_score:
            best_score = current.score
            pool = []
        if current.score == best_score:
            pool.append(Placement(x=current.x, score=current.score, rotation=rotation))
    return rng.choice(pool)


def score_types(
    grid: GameGrid,
    types: Iterable[str],
    piece_set: PieceSet,
    rng: Optional[random.Random] = None,
) -> Dict[str, float]:
    """Best achievable heuristic for each candidate type. Raises UnknownPieceType."""
    rng = rng or random.Random()
    scores: Dict[str, float] = {}
    for type_id in types:
        piece = Piece(type_id, piece_set)
        scores[type_id] = best_placement_any_rotation(grid, piece, rng).score
    return scores


def choose_adversarial_type(scores: Mapping[str, float], rng: Optional[random.Random] = None) -> Optional[str]:
    """The type whose best outcome is worst for the placer; random among ties."""
    if not scores:
        return None
    rng = rng or random.Random()
    worst = max(scores.values())
    return rng.choice([type_id for type_id, score in scores.items() if score == worst])


def simulate_placement(grid: GameGrid, piece: Piece, placement: Placement) -> GameGrid:
    """Copy of ``grid`` with ``piece`` locked where ``placement`` puts it."""
    grid = grid.clone()
    if placement.x is None:
        return grid
    piece = piece.clone()
    for _ in range(placement.rotation):
        piece.rotate(COUNTER_CLOCKWISE)
    piece.anchor = Coordinate(placement.x, grid.depth - 1)
    grid.lock(drop_piece(grid, piece))
    return grid
