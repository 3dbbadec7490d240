from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterator, List, Mapping, Optional, Tuple

from .errors import InvalidPieceSet, UnknownPieceType
from .geometry import ORIGIN, Coordinate

if TYPE_CHECKING:
    from .grid import GameGrid


Color = Tuple[int, int, int]

ATTACKER = "left"
DEFENDER = "right"

# Rotation directions accepted by Piece.rotate
COUNTER_CLOCKWISE = 1
CLOCKWISE = -1


@dataclass(frozen=True)
class PieceDefinition:
    cells: Tuple[Coordinate, ...]
    spawn_weight: int
    color: Color = (200, 200, 200)


class PieceSet:
    """Named collection of piece definitions belonging to one side.

    A type id only has meaning relative to its set: both default sets
    define a ``t`` piece, with different spawn weights.
    """

    def __init__(self, set_id: str, definitions: Mapping[str, PieceDefinition]) -> None:
        self.set_id = set_id
        self._definitions: Dict[str, PieceDefinition] = dict(definitions)
        if not self._definitions:
            raise InvalidPieceSet(f"Piece set {set_id!r} defines no pieces")
        for type_id, definition in self._definitions.items():
            if not definition.cells:
                raise InvalidPieceSet(f"Piece {type_id!r} in set {set_id!r} has no cells")
            if definition.spawn_weight < 0:
                raise InvalidPieceSet(f"Piece {type_id!r} in set {set_id!r} has a negative spawn weight")
        if sum(d.spawn_weight for d in self._definitions.values()) <= 0:
            raise InvalidPieceSet(f"Piece set {set_id!r} has zero total spawn weight")

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._definitions

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __repr__(self) -> str:
        return f"PieceSet({self.set_id!r}, types={list(self._definitions)})"

    def get(self, type_id: str) -> PieceDefinition:
        try:
            return self._definitions[type_id]
        except KeyError:
            raise UnknownPieceType(type_id, self.set_id) from None

    def type_ids(self) -> List[str]:
        return list(self._definitions)

    def index_of(self, type_id: str) -> int:
        """1-based index of a type, used as the cell value in array views."""
        if type_id not in self._definitions:
            raise UnknownPieceType(type_id, self.set_id)
        return self.type_ids().index(type_id) + 1

    def base_inventory(self) -> Dict[str, int]:
        return {t: d.spawn_weight for t, d in self._definitions.items() if d.spawn_weight > 0}


def _cells(*pairs: Tuple[int, int]) -> Tuple[Coordinate, ...]:
    return tuple(Coordinate(x, y) for x, y in pairs)


ATTACKER_SET = PieceSet(
    ATTACKER,
    {
        "s": PieceDefinition(_cells((0, 0), (1, 0), (0, -1), (-1, -1)), 10, (31, 58, 147)),
        "-": PieceDefinition(_cells((0, 0), (-1, 0)), 2, (226, 226, 226)),
        "t": PieceDefinition(_cells((0, 0), (-1, 0), (1, 0), (0, -1)), 10, (240, 52, 52)),
        "u": PieceDefinition(_cells((0, 0), (-1, 0), (-1, 1), (1, 0), (1, -1)), 10, (102, 51, 153)),
    },
)

DEFENDER_SET = PieceSet(
    DEFENDER,
    {
        "o": PieceDefinition(_cells((0, 0), (-1, 0), (0, -1), (-1, -1)), 25, (45, 172, 220)),
        "i": PieceDefinition(_cells((0, 0), (-1, 0), (1, 0), (-2, 0)), 25, (251, 185, 28)),
        "t": PieceDefinition(_cells((0, 0), (-1, 0), (1, 0), (0, -1)), 3, (240, 52, 52)),
        "-": PieceDefinition(_cells((0, 0), (-1, 0)), 25, (226, 226, 226)),
    },
)


class Piece:
    """A movable group of cells, positioned by ``anchor``.

    ``cells`` holds offsets relative to the anchor; only rotation rewrites
    them. Moving the piece only changes the anchor.
    """

    def __init__(self, type_id: str, piece_set: PieceSet) -> None:
        definition = piece_set.get(type_id)
        self.type_id = type_id
        self.piece_set = piece_set
        self.anchor: Coordinate = ORIGIN
        self.cells: List[Coordinate] = list(definition.cells)

    def __repr__(self) -> str:
        return f"Piece({self.type_id!r}, set={self.set_id!r}, anchor={self.anchor})"

    @property
    def set_id(self) -> str:
        return self.piece_set.set_id

    def cells_at(self, anchor: Optional[Coordinate] = None) -> List[Coordinate]:
        if anchor is None:
            anchor = self.anchor
        return [anchor.plus(offset) for offset in self.cells]

    def can_place(self, grid: "GameGrid") -> bool:
        for x, y in self.cells_at():
            if x < 0 or x >= grid.width:
                return False
            if y < 0:
                return False
            if grid.is_occupied(x, y):
                return False
        return True

    def move(self, delta: Coordinate) -> "Piece":
        self.anchor = self.anchor.plus(delta)
        return self

    def rotate(self, direction: int) -> "Piece":
        """Rotate by 90 degrees about the anchor cell.

        Positive direction turns counter-clockwise, negative clockwise. No
        collision check is made; callers revert with the opposite direction.
        A zero direction leaves the piece as it is.
        """
        if direction == 0:
            return self
        if direction > 0:
            self.cells = [Coordinate(-c.y, c.x) for c in self.cells]
        else:
            self.cells = [Coordinate(c.y, -c.x) for c in self.cells]
        return self

    def center(self, width: int, depth: int) -> "Piece":
        self.anchor = Coordinate(width // 2, depth - 1)
        return self

    def clone(self) -> "Piece":
        copy = Piece.__new__(Piece)
        copy.type_id = self.type_id
        copy.piece_set = self.piece_set
        copy.anchor = self.anchor
        copy.cells = list(self.cells)
        return copy

