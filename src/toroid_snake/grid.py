"""Toroidal grid model for the snake simulation."""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    import numpy as np

    from toroid_snake.snake import Direction


class Position(NamedTuple):
    """An ``(x, y)`` grid cell; ``y`` grows upward."""

    x: int
    y: int


def wrapped(coord: int, bound: int) -> int:
    """Wrap a coordinate into ``[0, bound)``."""
    return coord % bound


def step_axis(coord: int, delta: int, bound: int) -> int:
    """Step one coordinate by *delta*, wrapping at the edges.

    The edge is handled before the step: leaving through the low edge
    first jumps to ``bound`` and leaving through the high edge first jumps
    to ``-1``, so the step itself lands on ``bound - 1`` or ``0``.
    """
    if delta < 0 and coord <= 0:
        coord = bound
    elif delta > 0 and coord >= bound - 1:
        coord = -1
    return coord + delta


class Grid:
    """Fixed-size wrap-around coordinate space."""

    def __init__(self, width: int = 35, height: int = 30) -> None:
        if width < 2 or height < 2:
            raise ValueError("Grid dimensions must be at least 2×2.")
        self.width = width
        self.height = height

    def step(self, position: Position, direction: Direction) -> Position:
        """Return the cell one step from *position* along *direction*."""
        dx, dy = direction.value
        return Position(
            step_axis(position.x, dx, self.width),
            step_axis(position.y, dy, self.height),
        )

    def random_position(self, rng: np.random.Generator) -> Position:
        """Draw a uniformly random cell, one independent draw per axis."""
        x = int(rng.integers(self.width))
        y = int(rng.integers(self.height))
        return Position(x, y)

    def to_dict(self) -> dict:
        """Serialize grid dimensions to a dictionary."""
        return {"width": self.width, "height": self.height}
