"""Tick-driven simulation composing grid, snake, food and status logic."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

import numpy as np

from toroid_snake.clock import TickSchedule
from toroid_snake.config import SimulationConfig
from toroid_snake.controls import resolve_held
from toroid_snake.errors import InvariantError
from toroid_snake.food import FoodSpawner
from toroid_snake.grid import Grid, Position
from toroid_snake.snake import Direction, Snake
from toroid_snake.status import GameOverEvent, GameStatus, StatusMachine

logger = logging.getLogger(__name__)

GameOverListener = Callable[[GameOverEvent], None]


class Simulation:
    """Single-snake simulation on a wrap-around grid.

    The simulation owns the grid, snake, food spawner, counters and status.
    Two fixed-period ticks drive it: :meth:`movement_tick` advances the
    snake by one cell and resolves eating, and :meth:`status_tick`
    evaluates the win/loss thresholds and then spawns food. :meth:`update`
    runs whichever ticks are due for a frame of elapsed time.

    Callers only read state, through :meth:`get_state` and the read-only
    properties. The terminal :class:`GameOverEvent` is delivered once,
    both to registered listeners and through :meth:`drain_events`.
    """

    def __init__(self, config: SimulationConfig | None = None) -> None:
        cfg = config or SimulationConfig()
        self.config = cfg
        self.rng = np.random.default_rng(cfg.seed)
        self.grid = Grid(width=cfg.grid_width, height=cfg.grid_height)
        self.snake = Snake(
            Position(*cfg.start_head), Position(*cfg.start_body), cfg.direction,
        )
        self.food = FoodSpawner(self.grid, rng=self.rng)
        self.status_machine = StatusMachine(
            win_threshold=cfg.win_threshold,
            loss_threshold=cfg.loss_threshold,
        )

        self.eaten = 0
        self.spawned_backlog = 0
        self.tick = 0
        self.last_tail_position: Position | None = None

        # Status before movement when both fall due at the same instant.
        self._schedule = TickSchedule(
            ("status", cfg.status_period), ("move", cfg.move_period),
        )
        self._events: list[GameOverEvent] = []
        self._listeners: list[GameOverListener] = []

        if cfg.spawn_on_start:
            self._spawn_food()

        logger.info(
            "Session started on a %dx%d grid (win=%d, loss=%d).",
            cfg.grid_width, cfg.grid_height,
            cfg.win_threshold, cfg.loss_threshold,
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def status(self) -> GameStatus:
        return self.status_machine.status

    @property
    def in_progress(self) -> bool:
        return self.status is GameStatus.IN_PROGRESS

    @property
    def segment_positions(self) -> list[Position]:
        return self.snake.snapshot()

    @property
    def food_positions(self) -> list[Position]:
        return list(self.food.positions)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def set_direction(self, direction: Direction | None) -> None:
        """Turn the head unless *direction* would reverse it."""
        if not self.in_progress:
            return
        self.snake.set_direction(direction)

    def press(self, held: Iterable[Direction]) -> None:
        """Apply the currently held keys, honoring only one of them."""
        self.set_direction(resolve_held(held))

    # ------------------------------------------------------------------
    # Ticks
    # ------------------------------------------------------------------

    def update(self, dt: float, held: Iterable[Direction] = ()) -> list[GameOverEvent]:
        """Advance simulation time by *dt*.

        Input is resolved first, then the status and movement ticks that
        fall due within *dt* run in time order. Returns the terminal events
        raised during this call.
        """
        self.press(held)
        raised: list[GameOverEvent] = []
        for name in self._schedule.advance(dt):
            tick = self.status_tick if name == "status" else self.movement_tick
            event = tick()
            if event is not None:
                raised.append(event)
        return raised

    def movement_tick(self) -> GameOverEvent | None:
        """Move the snake one cell, then resolve eating.

        Collision is tested against the body positions from before the
        move. A collision ends the session but the move still completes.
        """
        if not self.in_progress:
            return None

        self.snake.check_invariants()
        prev = self.snake.snapshot()
        new_head = self.grid.step(prev[0], self.snake.direction)
        self.tick += 1

        collided = new_head in prev[1:]
        self.last_tail_position = self.snake.advance(new_head)

        if collided:
            logger.debug("Head ran into the body at %s.", new_head)
            return self._finish(
                self.status_machine.force_lost(self.eaten, self.tick),
            )

        self._consume_food()
        return None

    def status_tick(self) -> GameOverEvent | None:
        """Evaluate the win/loss thresholds, then try to spawn food."""
        event = self._finish(
            self.status_machine.evaluate(
                self.eaten, self.spawned_backlog, self.tick,
            ),
        )
        if self.in_progress:
            self._spawn_food()
        return event

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on_game_over(self, listener: GameOverListener) -> None:
        """Register a callback for the terminal event."""
        self._listeners.append(listener)

    def drain_events(self) -> list[GameOverEvent]:
        """Return and forget any undelivered terminal events."""
        events, self._events = self._events, []
        return events

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _spawn_food(self) -> Position:
        pos = self.food.spawn()
        self.spawned_backlog += 1
        return pos

    def _consume_food(self) -> None:
        """Grow once for every food item under the head."""
        head = self.snake.head
        for pos in self.food.at(head):
            if self.last_tail_position is None:
                raise InvariantError("Growth requested before any movement.")
            self.food.remove(pos)
            self.snake.grow(self.last_tail_position)
            self.eaten += 1
            self.spawned_backlog -= 1
            logger.debug(
                "Ate food at %s (eaten=%d, backlog=%d).",
                pos, self.eaten, self.spawned_backlog,
            )

    def _finish(self, event: GameOverEvent | None) -> GameOverEvent | None:
        """Publish a terminal event and make the session inert."""
        if event is None:
            return None
        self.food.clear()
        self._events.append(event)
        for listener in self._listeners:
            listener(event)
        return event

    def get_state(self) -> dict:
        """Return the full, serializable simulation state."""
        return {
            "tick": self.tick,
            "status": self.status.value,
            "eaten": self.eaten,
            "spawned_backlog": self.spawned_backlog,
            "grid": self.grid.to_dict(),
            "snake": self.snake.to_dict(),
            "food": self.food.to_dict(),
            "last_tail_position": (
                list(self.last_tail_position)
                if self.last_tail_position is not None else None
            ),
        }
