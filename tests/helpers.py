from typing import Iterable, List

from block_duel.game import Coordinate, GameGrid, Piece, PieceDefinition, PieceSet


def cells(*pairs):
    return tuple(Coordinate(x, y) for x, y in pairs)


DOT_SET = PieceSet("dots", {"dot": PieceDefinition(cells((0, 0)), 1)})

# Shapes used to build exact board situations
SHAPES_SET = PieceSet(
    "shapes",
    {
        "dot": PieceDefinition(cells((0, 0)), 1),
        "bar2": PieceDefinition(cells((0, 0), (0, 1)), 1),
        "bar3": PieceDefinition(cells((0, 0), (0, 1), (0, 2)), 1),
        "row4": PieceDefinition(cells((-2, 0), (-1, 0), (0, 0), (1, 0)), 1),
    },
)


def lock_at(grid: GameGrid, piece_set: PieceSet, type_id: str, x: int, y: int) -> List[int]:
    """Lock a piece exactly at (x, y), without dropping it."""
    piece = Piece(type_id, piece_set)
    piece.anchor = Coordinate(x, y)
    return grid.lock(piece)


def fill(grid: GameGrid, positions: Iterable[tuple]) -> None:
    for x, y in positions:
        lock_at(grid, SHAPES_SET, "dot", x, y)


def fill_row(grid: GameGrid, y: int, skip: Iterable[int] = ()) -> None:
    skipped = set(skip)
    fill(grid, [(x, y) for x in range(grid.width) if x not in skipped])


def assert_caches_consistent(grid: GameGrid) -> None:
    rebuilt = grid.clone()
    rebuilt.recompute_caches()
    assert grid.column_heights == rebuilt.column_heights
    assert grid.row_fill == rebuilt.row_fill
    assert len(grid.row_fill) == grid.depth
