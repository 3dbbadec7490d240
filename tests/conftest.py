import os
import random
import sys

import pytest

# Ensure src and the repo root are on path for test imports
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, "src")
for path in (SRC, ROOT):
    if path not in sys.path:
        sys.path.insert(0, path)

# pygame must never open a real window during tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from block_duel.game import Clock, GameConfig, GameGrid  # noqa: E402
from tests.helpers import DOT_SET, SHAPES_SET  # noqa: E402


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def grid():
    return GameGrid(10, 16)


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def small_config():
    return GameConfig(width=4, depth=6)


@pytest.fixture
def dot_set():
    return DOT_SET


@pytest.fixture
def shapes_set():
    return SHAPES_SET
