"""Session configuration for the snake simulation."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from toroid_snake.grid import wrapped
from toroid_snake.snake import Direction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationConfig:
    """Grid size, thresholds, tick periods and starting layout.

    Supports JSON serialization for reproducibility.
    """

    # Grid
    grid_width: int = 35
    grid_height: int = 30

    # Win/loss
    win_threshold: int = 50
    loss_threshold: int = 15

    # Tick periods, in simulation-time units
    move_period: float = 0.10
    status_period: float = 3.0

    # Starting layout
    start_head: tuple[int, int] = (3, 3)
    start_body: tuple[int, int] = (3, 2)
    start_direction: str = "up"

    # Food
    spawn_on_start: bool = True
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.grid_width < 2 or self.grid_height < 2:
            raise ValueError("grid_width and grid_height must each be at least 2.")
        if self.win_threshold < 1:
            raise ValueError("win_threshold must be at least 1.")
        if self.loss_threshold < 1:
            raise ValueError("loss_threshold must be at least 1.")
        if self.move_period <= 0:
            raise ValueError("move_period must be positive.")
        if self.status_period <= 0:
            raise ValueError("status_period must be positive.")

        for name in ("start_head", "start_body"):
            x, y = getattr(self, name)
            if not (0 <= x < self.grid_width and 0 <= y < self.grid_height):
                raise ValueError(f"{name} must lie inside the grid.")

        try:
            direction = self.direction
        except KeyError:
            raise ValueError(
                f"start_direction must be one of "
                f"{[d.name.lower() for d in Direction]}."
            ) from None

        hx, hy = self.start_head
        bx, by = self.start_body
        dist_x = abs(hx - bx)
        dist_y = abs(hy - by)
        dist_x = min(dist_x, self.grid_width - dist_x)
        dist_y = min(dist_y, self.grid_height - dist_y)
        if dist_x + dist_y != 1:
            raise ValueError("start_head and start_body must be adjacent cells.")
        dx, dy = direction.value
        ahead = (wrapped(hx + dx, self.grid_width), wrapped(hy + dy, self.grid_height))
        if ahead == (bx, by):
            raise ValueError("start_direction must not point into start_body.")

    @property
    def direction(self) -> Direction:
        return Direction[self.start_direction.upper()]

    def to_dict(self) -> dict:
        """Serialize to a plain dict (tuples become lists)."""
        d = asdict(self)
        d["start_head"] = list(self.start_head)
        d["start_body"] = list(self.start_body)
        return d

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def from_dict(cls, raw: dict) -> SimulationConfig:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {unknown}.")
        data = dict(raw)
        for key in ("start_head", "start_body"):
            if key in data:
                data[key] = tuple(data[key])
        return cls(**data)

    @classmethod
    def load(cls, path: str | Path) -> SimulationConfig:
        """Load config from a JSON file."""
        return cls.from_dict(json.loads(Path(path).read_text()))
