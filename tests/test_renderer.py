import pygame
import pytest

from block_duel.game import Action, Coordinator, GameConfig
from block_duel.visualization.match_play import KEY_TO_ACTION, build_parser
from block_duel.visualization.renderer import Renderer


@pytest.fixture
def coordinator():
    return Coordinator.create(config=GameConfig(width=6, depth=8), seed=0)


def test_pit_surface_has_one_cell_per_square(coordinator):
    renderer = Renderer(cell_size=10)
    coordinator.right.set_queued_type("o")
    surface = renderer.pit_surface(coordinator.right)
    assert surface.get_size() == (60, 80)
    # falling piece is drawn in a brightened set color
    assert tuple(surface.get_at((32, 2)))[:3] != (20, 20, 26)
    assert tuple(surface.get_at((2, 72)))[:3] == (20, 20, 26)


def test_session_signals_mark_the_view_dirty(coordinator):
    renderer = Renderer()
    renderer.watch(coordinator.left)
    renderer.dirty = False
    coordinator.left.set_queued_type("t")
    assert renderer.dirty


def test_draw_on_dummy_display(coordinator):
    pygame.display.init()
    try:
        renderer = Renderer(cell_size=8, margin=4)
        screen = pygame.display.set_mode(renderer.window_size(coordinator))
        assert screen.get_size() == (2 * 6 * 8 + 12, 8 * 8 + 12)
        renderer.draw(screen, coordinator)
        assert not renderer.dirty
    finally:
        pygame.display.quit()


def test_keyboard_and_options():
    assert KEY_TO_ACTION[pygame.K_SPACE] is Action.HARD_DROP
    args = build_parser().parse_args(["--left-defender", "human", "--seed", "3"])
    assert args.left_defender == "human"
    assert args.seed == 3
