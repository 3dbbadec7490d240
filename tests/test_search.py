import math
import random

import pytest

from block_duel.ai import (
    best_placement,
    best_placement_any_rotation,
    choose_adversarial_type,
    score_types,
    simulate_placement,
)
from block_duel.game import ATTACKER_SET, COUNTER_CLOCKWISE, DEFENDER_SET, Coordinate, GameGrid, Piece, UnknownPieceType
from tests.helpers import DOT_SET, fill, lock_at


def random_grid(rng, width=10, depth=16, cells=30):
    grid = GameGrid(width, depth)
    for _ in range(cells):
        x = rng.randrange(width)
        fill(grid, [(x, grid.column_heights[x])])
    return grid


def test_dot_prefers_the_walls(grid):
    columns = set()
    for seed in range(40):
        placement = best_placement(grid, Piece("dot", DOT_SET), random.Random(seed))
        assert placement.score == 5
        columns.add(placement.x)
    assert columns == {0, 9}


def test_flat_bar_lies_down_against_a_wall(grid, rng):
    placement = best_placement_any_rotation(grid, Piece("i", DEFENDER_SET), rng)
    assert placement.score == 11
    assert (placement.rotation, placement.x) in {(0, 2), (0, 8), (2, 1), (2, 7)}


def test_search_does_not_touch_its_inputs(rng):
    grid = random_grid(rng)
    before = grid.to_dict()
    piece = Piece("u", ATTACKER_SET).center(grid.width, grid.depth)
    cells_before = list(piece.cells)

    best_placement_any_rotation(grid, piece, rng)

    assert grid.to_dict() == before
    assert piece.cells == cells_before
    assert piece.anchor == Coordinate(5, 15)


@pytest.mark.parametrize("seed", range(5))
def test_returned_placements_fit(seed):
    rng = random.Random(seed)
    grid = random_grid(rng)
    for piece_set in (ATTACKER_SET, DEFENDER_SET):
        for type_id in piece_set:
            piece = Piece(type_id, piece_set)
            placement = best_placement_any_rotation(grid, piece, rng)
            assert placement.x is not None
            placed = piece.clone()
            for _ in range(placement.rotation):
                placed.rotate(COUNTER_CLOCKWISE)
            placed.anchor = Coordinate(placement.x, grid.depth - 1)
            assert placed.can_place(grid)

            landed = simulate_placement(grid, piece, placement)
            assert landed.score() == placement.score


def test_no_room_at_spawn_gives_no_placement(grid, rng):
    lock_at(grid, DOT_SET, "dot", 5, 15)
    placement = best_placement(grid, Piece("dot", DOT_SET), rng)
    assert placement.x is None
    assert math.isinf(placement.score)
    assert simulate_placement(grid, Piece("dot", DOT_SET), placement).to_dict() == grid.to_dict()


def test_score_types_on_empty_pit(grid, rng):
    scores = score_types(grid, DEFENDER_SET.type_ids(), DEFENDER_SET, rng)
    assert scores == {"o": 16, "i": 11, "t": 15, "-": 7}
    assert choose_adversarial_type(scores, rng) == "o"


def test_score_types_edge_cases(grid, rng):
    assert score_types(grid, [], DEFENDER_SET, rng) == {}
    with pytest.raises(UnknownPieceType):
        score_types(grid, ["u"], DEFENDER_SET, rng)


def test_adversarial_choice_takes_the_worst_best_case():
    assert choose_adversarial_type({"a": 5, "b": 10}) == "b"
    assert choose_adversarial_type({}) is None

    picks = {choose_adversarial_type({"a": 7, "b": 7, "c": 1}, random.Random(seed)) for seed in range(40)}
    assert picks == {"a", "b"}
