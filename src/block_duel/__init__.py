"""Block Duel: two falling-block pits whose outcome is coupled.

Subpackages:
- game: deterministic core (pieces, grid, sessions, coordinator)
- ai: placement search and automated players
- env: gymnasium environment for learning defenders
"""

__version__ = "0.1.0"
