from __future__ import annotations


class BlockDuelError(Exception):
    """Base class for errors raised by the game core."""


class UnknownPieceType(BlockDuelError, KeyError):
    def __init__(self, type_id: str, set_id: str) -> None:
        super().__init__(f"Piece {type_id!r} does not exist in set {set_id!r}")
        self.type_id = type_id
        self.set_id = set_id

    def __str__(self) -> str:
        return str(self.args[0])


class InvalidPieceSet(BlockDuelError, ValueError):
    """A piece set that cannot be played, e.g. zero total spawn weight."""


class SnapshotError(BlockDuelError, ValueError):
    """A snapshot that does not describe a valid grid or session."""
