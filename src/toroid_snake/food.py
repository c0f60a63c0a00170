"""Food spawning logic."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from toroid_snake.grid import Grid, Position

logger = logging.getLogger(__name__)


class FoodSpawner:
    """Places food on the grid and tracks the live items.

    Cells are drawn uniformly from the whole grid with a NumPy RNG. No
    occupancy check is made, so food may land on the snake or on another
    food item.
    """

    def __init__(
        self,
        grid: Grid,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.grid = grid
        self.rng = rng if rng is not None else np.random.default_rng()
        self.positions: list[Position] = []

    def spawn(self) -> Position:
        """Spawn one food item and return its position."""
        pos = self.grid.random_position(self.rng)
        self.positions.append(pos)
        logger.debug("Food spawned at %s.", pos)
        return pos

    def remove(self, position: Position) -> bool:
        """Remove one food item at *position*. Returns True if removed."""
        if position in self.positions:
            self.positions.remove(position)
            return True
        return False

    def at(self, position: Position) -> list[Position]:
        """Return every live food item sitting on *position*."""
        return [p for p in self.positions if p == position]

    def clear(self) -> None:
        """Remove all live food."""
        self.positions.clear()

    def to_dict(self) -> dict:
        """Serialize food state to a dictionary."""
        return {"positions": [list(p) for p in self.positions]}
