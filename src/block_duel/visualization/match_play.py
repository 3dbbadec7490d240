from __future__ import annotations

import argparse
from typing import Dict, List, Optional

import pygame

from block_duel.ai import ATTACKER_ROLE, DEFENDER_ROLE, PLAYER_KINDS, Player, create_player
from block_duel.game import Action, Coordinator, GameConfig
from .renderer import Renderer


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_UP: Action.ROTATE_CW,
    pygame.K_z: Action.ROTATE_CCW,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_SPACE: Action.HARD_DROP,
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Watch (or play) a block duel")
    kinds = [k for k in PLAYER_KINDS if k != "none"]
    p.add_argument("--left-attacker", choices=kinds, default="ai")
    p.add_argument("--left-defender", choices=kinds + ["human"], default="ai")
    p.add_argument("--right-attacker", choices=kinds, default="ai")
    p.add_argument("--right-defender", choices=kinds, default="ai")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--cell-size", type=int, default=28)
    return p


def run(args: Optional[argparse.Namespace] = None) -> None:
    args = args or build_parser().parse_args()
    coordinator = Coordinator.create(config=GameConfig(random_seed=args.seed))
    left, right = coordinator.left, coordinator.right
    human = args.left_defender == "human"

    players: List[Optional[Player]] = [
        create_player(args.left_attacker, ATTACKER_ROLE, left),
        create_player("none" if human else args.left_defender, DEFENDER_ROLE, left),
        create_player(args.right_attacker, ATTACKER_ROLE, right),
        create_player(args.right_defender, DEFENDER_ROLE, right),
    ]

    renderer = Renderer(cell_size=args.cell_size)
    renderer.watch(left)
    renderer.watch(right)

    pygame.init()
    try:
        screen = pygame.display.set_mode(renderer.window_size(coordinator))
        pygame.display.set_caption("Block Duel")
        font = pygame.font.SysFont(None, 28)
        frame_clock = pygame.time.Clock()

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif human:
                        action = KEY_TO_ACTION.get(event.key)
                        if action is not None:
                            left.apply(action)

            # The match runs on logical time; feed it the real frame time
            coordinator.clock.advance(frame_clock.tick(60))
            if renderer.dirty:
                renderer.draw(screen, coordinator, font)
    finally:
        for player in players:
            if player is not None:
                player.destroy()
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
