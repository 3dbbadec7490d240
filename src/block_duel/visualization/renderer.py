from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import pygame

from block_duel.game import Coordinator, GameSession, PieceSet

BACKGROUND = (10, 10, 14)
PIT_BACKGROUND = (30, 30, 36)
EMPTY = (20, 20, 26)
TEXT = (230, 230, 230)
WINNER = (0, 230, 64)
LOSER = (255, 69, 0)


def _palette(piece_set: PieceSet) -> Dict[int, Tuple[int, int, int]]:
    palette = {0: EMPTY}
    for type_id in piece_set:
        palette[piece_set.index_of(type_id)] = piece_set.get(type_id).color
    return palette


def _brighten(color: Tuple[int, int, int]) -> Tuple[int, int, int]:
    return tuple(min(255, c + 50) for c in color)  # type: ignore[return-value]


class Renderer:
    """Draws both pits of a match.

    Redraws only after a session reports a change through its signals.
    """

    def __init__(self, cell_size: int = 30, margin: int = 20) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.dirty = True

    def watch(self, session: GameSession) -> None:
        for signal in (session.piece_spawned, session.piece_moved, session.grid_changed, session.ended):
            signal.connect(self._mark_dirty, weak=False)

    def _mark_dirty(self, sender: Any, **kwargs: Any) -> None:
        self.dirty = True

    def window_size(self, coordinator: Coordinator) -> Tuple[int, int]:
        grid = coordinator.left.grid
        width = 2 * grid.width * self.cell_size + 3 * self.margin
        height = grid.depth * self.cell_size + 3 * self.margin
        return width, height

    def pit_surface(self, session: GameSession) -> pygame.Surface:
        state = session.get_state()
        palette = _palette(session.piece_set)
        h, w = state.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill(PIT_BACKGROUND)
        for y in range(h):
            for x in range(w):
                v = int(state[y, x])
                color = palette.get(abs(v), (200, 200, 200))
                if v < 0:
                    color = _brighten(color)
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                pygame.draw.rect(surf, color, rect)
        return surf

    def draw(self, screen: pygame.Surface, coordinator: Coordinator, font: Optional[pygame.font.Font] = None) -> None:
        screen.fill(BACKGROUND)
        result = coordinator.result
        for i, session in enumerate((coordinator.left, coordinator.right)):
            x0 = self.margin + i * (session.grid.width * self.cell_size + self.margin)
            y0 = self.margin * 2
            screen.blit(self.pit_surface(session), (x0, y0))
            if font is None:
                continue
            label = f"{session.side}: {session.score} rows"
            color = TEXT
            if result is not None:
                won = result.winner == session.side
                label += "  WINNER" if won else "  LOSER"
                color = WINNER if won else LOSER
            screen.blit(font.render(label, True, color), (x0, self.margin // 2))
        pygame.display.flip()
        self.dirty = False
