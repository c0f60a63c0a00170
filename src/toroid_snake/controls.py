"""Maps held directional keys to a single direction command."""

from __future__ import annotations

from collections.abc import Iterable

from toroid_snake.snake import Direction

# When several keys are held at once the first match in this order wins.
PRIORITY: tuple[Direction, ...] = (
    Direction.LEFT,
    Direction.DOWN,
    Direction.UP,
    Direction.RIGHT,
)


def resolve_held(held: Iterable[Direction]) -> Direction | None:
    """Return the highest-priority held direction, or ``None``."""
    pressed = set(held)
    for direction in PRIORITY:
        if direction in pressed:
            return direction
    return None

