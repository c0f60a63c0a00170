"""Win/loss state machine and the one-shot game-over event."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class GameStatus(enum.Enum):
    """Lifecycle of a session. WON and LOST are terminal."""

    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self is not GameStatus.IN_PROGRESS


@dataclass(frozen=True)
class GameOverEvent:
    """Emitted exactly once when the session reaches a terminal status."""

    status: GameStatus
    tick: int
    eaten: int

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "tick": self.tick,
            "eaten": self.eaten,
        }


class StatusMachine:
    """Tracks IN_PROGRESS -> WON | LOST.

    Every transition returns a :class:`GameOverEvent`; once the status is
    terminal, further calls change nothing and return ``None``.
    """

    def __init__(self, win_threshold: int = 50, loss_threshold: int = 15) -> None:
        if win_threshold < 1:
            raise ValueError("win_threshold must be at least 1.")
        if loss_threshold < 1:
            raise ValueError("loss_threshold must be at least 1.")
        self.win_threshold = win_threshold
        self.loss_threshold = loss_threshold
        self.status = GameStatus.IN_PROGRESS

    def evaluate(self, eaten: int, backlog: int, tick: int = 0) -> GameOverEvent | None:
        """Apply the threshold rules; winning is checked before losing."""
        if self.status.is_terminal:
            return None
        if eaten >= self.win_threshold:
            return self._finish(GameStatus.WON, eaten, tick)
        if backlog >= self.loss_threshold:
            return self._finish(GameStatus.LOST, eaten, tick)
        return None

    def force_lost(self, eaten: int, tick: int = 0) -> GameOverEvent | None:
        """End the session as LOST regardless of the counters."""
        if self.status.is_terminal:
            return None
        return self._finish(GameStatus.LOST, eaten, tick)

    def _finish(self, status: GameStatus, eaten: int, tick: int) -> GameOverEvent:
        self.status = status
        logger.info(
            "Game over at tick %d: %s with %d eaten.", tick, status.value, eaten,
        )
        return GameOverEvent(status=status, tick=tick, eaten=eaten)
