"""Snake segments, facing, and follow-the-leader movement."""

from __future__ import annotations

import enum

from toroid_snake.errors import InvariantError
from toroid_snake.grid import Position


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) values."""

    LEFT = (-1, 0)
    UP = (0, 1)
    RIGHT = (1, 0)
    DOWN = (0, -1)

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
}

HEAD = 0
MIN_LENGTH = 2


class Snake:
    """A snake stored as ordered segment handles plus their positions.

    Handle ``0`` is the head; ``segments[-1]`` is the tail. Handles are
    never reused, so a segment keeps its identity while it moves.
    """

    def __init__(
        self,
        head: Position = Position(3, 3),
        body: Position = Position(3, 2),
        direction: Direction = Direction.UP,
    ) -> None:
        if head == body:
            raise ValueError("Snake head and body must start on different cells.")
        self.segments: list[int] = []
        self.positions: dict[int, Position] = {}
        self.direction = direction
        self._next_handle = HEAD
        self._add_segment(head)
        self._add_segment(body)

    def _add_segment(self, position: Position) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self.segments.append(handle)
        self.positions[handle] = position
        return handle

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def head(self) -> Position:
        """Return the head position."""
        self.check_invariants()
        return self.positions[HEAD]

    @property
    def tail(self) -> Position:
        """Return the tail position."""
        return self.positions[self.segments[-1]]

    def set_direction(self, new_direction: Direction | None) -> None:
        """Change facing, ignoring ``None`` and 180° reversals."""
        if new_direction is None:
            return
        if new_direction is not self.direction.opposite:
            self.direction = new_direction

    def snapshot(self) -> list[Position]:
        """Return every segment position, head first."""
        return [self.positions[h] for h in self.segments]

    def advance(self, new_head: Position) -> Position:
        """Move the head to *new_head* and shift the body along.

        Each body segment takes the position its predecessor held before
        this call. Returns the tail's position from before the move.
        """
        self.check_invariants()
        prev = self.snapshot()
        for handle, pos in zip(self.segments[1:], prev):
            self.positions[handle] = pos
        self.positions[HEAD] = new_head
        return prev[-1]

    def grow(self, position: Position) -> int:
        """Append a new tail segment at *position* and return its handle."""
        return self._add_segment(position)

    def check_invariants(self) -> None:
        """Raise :class:`InvariantError` if the segment store is corrupt."""
        if len(self.segments) < MIN_LENGTH:
            raise InvariantError(
                f"Snake has {len(self.segments)} segment(s); "
                f"at least {MIN_LENGTH} are required."
            )
        if self.segments[0] != HEAD or HEAD not in self.positions:
            raise InvariantError("Snake has no head segment.")
        if len(set(self.segments)) != len(self.segments):
            raise InvariantError("Snake has duplicate segment handles.")
        if set(self.segments) != self.positions.keys():
            raise InvariantError("Snake segment handles and positions disagree.")

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "segments": [
                {"id": h, "position": list(self.positions[h])}
                for h in self.segments
            ],
            "direction": self.direction.name.lower(),
        }
