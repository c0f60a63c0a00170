"""Tick-driven snake simulation on a wrap-around grid."""

from toroid_snake.config import SimulationConfig
from toroid_snake.engine import Simulation
from toroid_snake.errors import InvariantError
from toroid_snake.food import FoodSpawner
from toroid_snake.grid import Grid, Position
from toroid_snake.snake import Direction, Snake
from toroid_snake.status import GameOverEvent, GameStatus, StatusMachine

__all__ = [
    "Direction",
    "FoodSpawner",
    "GameOverEvent",
    "GameStatus",
    "Grid",
    "InvariantError",
    "Position",
    "Simulation",
    "SimulationConfig",
    "Snake",
    "StatusMachine",
]
