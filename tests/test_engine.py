"""Tests for the Simulation engine."""

import json

import pytest

from toroid_snake.config import SimulationConfig
from toroid_snake.engine import Simulation
from toroid_snake.errors import InvariantError
from toroid_snake.grid import Position
from toroid_snake.snake import Direction
from toroid_snake.status import GameStatus


def _quiet(**overrides) -> Simulation:
    """A simulation with no food on the board at start."""
    overrides.setdefault("seed", 0)
    return Simulation(SimulationConfig(spawn_on_start=False, **overrides))


def _place_food(sim: Simulation, position: Position) -> None:
    """Spawn through the status tick, then move the food to *position*."""
    sim.status_tick()
    sim.food.positions[-1] = position


class TestSimulationInit:
    def test_default_init(self):
        sim = Simulation(SimulationConfig(seed=0))
        assert sim.status is GameStatus.IN_PROGRESS
        assert sim.eaten == 0
        assert sim.tick == 0
        assert sim.segment_positions == [Position(3, 3), Position(3, 2)]
        assert sim.snake.direction is Direction.UP

    def test_food_spawned_on_start(self):
        sim = Simulation(SimulationConfig(seed=0))
        assert len(sim.food_positions) == 1
        assert sim.spawned_backlog == 1

    def test_no_food_when_disabled(self):
        sim = _quiet()
        assert sim.food_positions == []
        assert sim.spawned_backlog == 0


class TestMovement:
    def test_first_tick_moves_up(self):
        sim = _quiet()
        assert sim.movement_tick() is None
        assert sim.segment_positions == [Position(3, 4), Position(3, 3)]
        assert sim.status is GameStatus.IN_PROGRESS
        assert sim.last_tail_position == Position(3, 2)

    def test_segment_identities_unchanged(self):
        sim = _quiet()
        handles = list(sim.snake.segments)
        for direction in (Direction.LEFT, Direction.DOWN, Direction.RIGHT):
            sim.set_direction(direction)
            sim.movement_tick()
        assert sim.snake.segments == handles

    @pytest.mark.parametrize(
        ("head", "body", "direction", "expected"),
        [
            ((0, 5), (1, 5), "left", Position(34, 5)),
            ((34, 5), (33, 5), "right", Position(0, 5)),
            ((5, 29), (5, 28), "up", Position(5, 0)),
            ((5, 0), (5, 1), "down", Position(5, 29)),
        ],
    )
    def test_wraps_around_edges(self, head, body, direction, expected):
        sim = _quiet(start_head=head, start_body=body, start_direction=direction)
        sim.movement_tick()
        assert sim.segment_positions == [expected, Position(*head)]

    def test_movement_is_noop_after_game_over(self):
        sim = _quiet(loss_threshold=1)
        sim.status_tick()
        sim.status_tick()
        assert sim.status is GameStatus.LOST
        before = sim.segment_positions
        assert sim.movement_tick() is None
        assert sim.segment_positions == before
        assert sim.tick == 0

    def test_missing_segment_is_fatal(self):
        sim = _quiet()
        sim.snake.segments.pop()
        with pytest.raises(InvariantError):
            sim.movement_tick()


class TestInput:
    def test_reversal_rejected(self):
        sim = _quiet()
        sim.set_direction(Direction.DOWN)
        assert sim.snake.direction is Direction.UP

    def test_turn_accepted(self):
        sim = _quiet()
        sim.set_direction(Direction.LEFT)
        assert sim.snake.direction is Direction.LEFT

    def test_press_honors_priority(self):
        sim = _quiet()
        sim.press({Direction.RIGHT, Direction.LEFT})
        assert sim.snake.direction is Direction.LEFT

    def test_press_nothing_keeps_facing(self):
        sim = _quiet()
        sim.press([])
        assert sim.snake.direction is Direction.UP

    def test_input_ignored_after_game_over(self):
        sim = _quiet(loss_threshold=1)
        sim.status_tick()
        sim.status_tick()
        sim.set_direction(Direction.LEFT)
        assert sim.snake.direction is Direction.UP


class TestSelfCollision:
    @staticmethod
    def _coiled() -> Simulation:
        sim = _quiet()
        sim.snake.grow(Position(4, 2))
        sim.snake.grow(Position(4, 3))
        return sim

    def test_collision_loses_on_that_tick(self):
        sim = self._coiled()
        sim.set_direction(Direction.RIGHT)
        event = sim.movement_tick()
        assert event is not None
        assert event.status is GameStatus.LOST
        assert event.tick == 1
        assert sim.status is GameStatus.LOST

    def test_move_completes_on_collision_tick(self):
        sim = self._coiled()
        sim.set_direction(Direction.RIGHT)
        sim.movement_tick()
        assert sim.segment_positions == [
            Position(4, 3), Position(3, 3), Position(3, 2), Position(4, 2),
        ]

    def test_listener_sees_completed_move(self):
        sim = self._coiled()
        seen = []
        sim.on_game_over(lambda event: seen.append(sim.segment_positions[0]))
        sim.set_direction(Direction.RIGHT)
        sim.movement_tick()
        assert seen == [Position(4, 3)]

    def test_failing_listener_leaves_move_applied(self):
        sim = self._coiled()

        def explode(event):
            raise RuntimeError("renderer crashed")

        sim.on_game_over(explode)
        sim.set_direction(Direction.RIGHT)
        with pytest.raises(RuntimeError, match="renderer crashed"):
            sim.movement_tick()
        assert sim.status is GameStatus.LOST
        assert sim.segment_positions[0] == Position(4, 3)
        assert sim.last_tail_position == Position(4, 3)
        assert sim.tick == 1

    def test_lost_is_permanent(self):
        sim = self._coiled()
        sim.set_direction(Direction.RIGHT)
        sim.movement_tick()
        sim.eaten = 50
        for _ in range(5):
            assert sim.movement_tick() is None
            assert sim.status_tick() is None
        assert sim.status is GameStatus.LOST
        assert len(sim.drain_events()) == 1

    def test_two_segment_snake_does_not_collide_moving_forward(self):
        sim = _quiet()
        for _ in range(40):
            sim.movement_tick()
        assert sim.status is GameStatus.IN_PROGRESS


class TestGrowth:
    def test_eating_grows_and_updates_counters(self):
        sim = _quiet()
        _place_food(sim, Position(3, 4))
        assert sim.spawned_backlog == 1

        sim.movement_tick()
        assert sim.eaten == 1
        assert sim.spawned_backlog == 0
        assert len(sim.snake) == 3
        assert sim.segment_positions[-1] == Position(3, 2)
        assert sim.food_positions == []

    def test_new_tail_follows_on_next_tick(self):
        sim = _quiet()
        _place_food(sim, Position(3, 4))
        sim.movement_tick()
        sim.movement_tick()
        assert sim.segment_positions == [
            Position(3, 5), Position(3, 4), Position(3, 3),
        ]

    def test_stacked_food_grows_once_per_item(self):
        sim = _quiet()
        _place_food(sim, Position(3, 4))
        _place_food(sim, Position(3, 4))
        sim.movement_tick()
        assert sim.eaten == 2
        assert sim.spawned_backlog == 0
        assert len(sim.snake) == 4

    def test_food_elsewhere_untouched(self):
        sim = _quiet()
        _place_food(sim, Position(20, 20))
        sim.movement_tick()
        assert sim.eaten == 0
        assert sim.spawned_backlog == 1
        assert sim.food_positions == [Position(20, 20)]


class TestStatusTick:
    def test_spawn_increments_backlog(self):
        sim = _quiet()
        sim.status_tick()
        assert sim.spawned_backlog == 1
        assert len(sim.food_positions) == 1

    def test_backlog_loss_stops_spawning(self):
        sim = _quiet()
        for _ in range(15):
            assert sim.status_tick() is None
        assert sim.spawned_backlog == 15
        assert sim.status is GameStatus.IN_PROGRESS

        event = sim.status_tick()
        assert event.status is GameStatus.LOST
        assert sim.spawned_backlog == 15
        assert sim.food_positions == []

        for _ in range(3):
            sim.status_tick()
        assert sim.spawned_backlog == 15
        assert sim.food_positions == []

    def test_win(self):
        sim = _quiet(win_threshold=1)
        _place_food(sim, Position(3, 4))
        sim.movement_tick()
        event = sim.status_tick()
        assert event.status is GameStatus.WON
        assert event.eaten == 1
        assert sim.food_positions == []
        assert sim.spawned_backlog == 0


class TestGameOverEvents:
    def test_listener_called_once(self):
        sim = _quiet(loss_threshold=1)
        received = []
        sim.on_game_over(received.append)
        for _ in range(4):
            sim.status_tick()
        assert [e.status for e in received] == [GameStatus.LOST]

    def test_drain_events_delivers_once(self):
        sim = _quiet(loss_threshold=1)
        sim.status_tick()
        sim.status_tick()
        assert len(sim.drain_events()) == 1
        sim.status_tick()
        assert sim.drain_events() == []


class TestUpdate:
    def test_ticks_follow_elapsed_time(self):
        sim = _quiet(move_period=0.5, status_period=2.0, seed=11)
        sim.update(1.0)
        assert sim.tick == 2
        assert sim.spawned_backlog + sim.eaten == 0

        sim.update(1.0)
        assert sim.tick == 4
        assert sim.spawned_backlog + sim.eaten == 1

    def test_update_applies_held_keys_before_moving(self):
        sim = _quiet(move_period=0.5)
        sim.update(0.5, [Direction.LEFT])
        assert sim.segment_positions[0] == Position(2, 3)

    def test_long_frame_moves_before_later_status_tick(self):
        sim = _quiet(move_period=1.0, status_period=2.0, win_threshold=1)
        _place_food(sim, Position(3, 4))
        events = sim.update(2.0)
        assert sim.eaten == 1
        assert sim.status is GameStatus.WON
        assert [e.status for e in events] == [GameStatus.WON]
        assert sim.tick == 1

    def test_long_frame_matches_small_frames(self):
        big = _quiet(move_period=0.5, status_period=1.5, seed=3)
        small = _quiet(move_period=0.5, status_period=1.5, seed=3)
        big.update(6.0)
        for _ in range(12):
            small.update(0.5)
        assert big.get_state() == small.get_state()

    def test_update_returns_terminal_event(self):
        sim = _quiet(move_period=10.0, status_period=1.0, loss_threshold=1)
        events = sim.update(2.0)
        assert [e.status for e in events] == [GameStatus.LOST]
        assert sim.update(2.0) == []


class TestSerialization:
    def test_state_is_json_serializable(self):
        sim = Simulation(SimulationConfig(seed=42))
        sim.movement_tick()
        serialized = json.dumps(sim.get_state())
        assert isinstance(serialized, str)

    def test_state_structure(self):
        sim = _quiet()
        sim.movement_tick()
        state = sim.get_state()
        assert state["tick"] == 1
        assert state["status"] == "in_progress"
        assert state["eaten"] == 0
        assert state["spawned_backlog"] == 0
        assert state["grid"] == {"width": 35, "height": 30}
        assert state["snake"]["segments"][0]["position"] == [3, 4]
        assert state["food"] == {"positions": []}
        assert state["last_tail_position"] == [3, 2]


class TestDeterminism:
    @staticmethod
    def _run(seed: int) -> dict:
        sim = Simulation(SimulationConfig(seed=seed))
        moves = [Direction.RIGHT, None, Direction.DOWN, None, Direction.LEFT]
        for move in moves * 2:
            sim.set_direction(move)
            sim.movement_tick()
            sim.status_tick()
        return sim.get_state()

    def test_same_seed_same_outcome(self):
        assert self._run(123) == self._run(123)

    def test_different_seeds_differ(self):
        assert self._run(1)["food"] != self._run(2)["food"]
