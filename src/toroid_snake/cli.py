"""Headless command-line runner for the snake simulation."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass

import numpy as np

from toroid_snake.config import SimulationConfig
from toroid_snake.engine import Simulation
from toroid_snake.snake import Direction

logger = logging.getLogger(__name__)

_DIRECTIONS = list(Direction)


@dataclass
class SessionResult:
    """Outcome of one headless session."""

    status: str
    eaten: int
    length: int
    ticks: int
    frames: int
    elapsed: float

    def summary(self) -> str:
        return (
            f"Session: {self.status} after {self.ticks} moves "
            f"({self.frames} frames, {self.elapsed:.1f} time units) | "
            f"eaten={self.eaten}, length={self.length}"
        )


def run_session(
    config: SimulationConfig,
    *,
    frame_dt: float = 1 / 60,
    max_frames: int = 100_000,
    input_seed: int | None = None,
    turn_chance: float = 0.05,
) -> SessionResult:
    """Drive a simulation with random held keys until it ends.

    Each frame holds one random direction with probability *turn_chance*
    and nothing otherwise, mimicking a player sampled at frame rate.
    """
    sim = Simulation(config)
    rng = np.random.default_rng(input_seed)

    frames = 0
    while sim.in_progress and frames < max_frames:
        held: list[Direction] = []
        if rng.random() < turn_chance:
            held.append(_DIRECTIONS[int(rng.integers(len(_DIRECTIONS)))])
        sim.update(frame_dt, held)
        frames += 1

    result = SessionResult(
        status=sim.status.value,
        eaten=sim.eaten,
        length=len(sim.snake),
        ticks=sim.tick,
        frames=frames,
        elapsed=frames * frame_dt,
    )
    logger.info(result.summary())
    return result


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toroid-snake",
        description="Headless toroidal snake simulation tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- run ---
    run_p = sub.add_parser("run", help="Play one session with random input.")
    run_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file (flags override its values).",
    )
    run_p.add_argument("--seed", type=int, default=None)
    run_p.add_argument("--input-seed", type=int, default=None)
    run_p.add_argument("--frame-dt", type=float, default=1 / 60)
    run_p.add_argument("--max-frames", type=int, default=100_000)
    run_p.add_argument("--turn-chance", type=float, default=0.05)
    _add_config_flags(run_p)

    # --- config ---
    cfg_p = sub.add_parser("config", help="Write a JSON config file.")
    cfg_p.add_argument("output", help="Destination path.")
    cfg_p.add_argument("--seed", type=int, default=None)
    _add_config_flags(cfg_p)

    return parser


def _add_config_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--grid-width", type=int, default=None)
    parser.add_argument("--grid-height", type=int, default=None)
    parser.add_argument("--win-threshold", type=int, default=None)
    parser.add_argument("--loss-threshold", type=int, default=None)
    parser.add_argument("--move-period", type=float, default=None)
    parser.add_argument("--status-period", type=float, default=None)


def _config_from_args(args: argparse.Namespace) -> SimulationConfig:
    config_path = getattr(args, "config", None)
    config = (
        SimulationConfig.load(config_path)
        if config_path else SimulationConfig()
    )

    overrides: dict = {}
    for name in (
        "seed", "grid_width", "grid_height", "win_threshold",
        "loss_threshold", "move_period", "status_period",
    ):
        val = getattr(args, name, None)
        if val is not None:
            overrides[name] = val

    if overrides:
        d = config.to_dict()
        d.update(overrides)
        config = SimulationConfig.from_dict(d)
    return config


def _run_session(args: argparse.Namespace) -> int:
    try:
        config = _config_from_args(args)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    result = run_session(
        config,
        frame_dt=args.frame_dt,
        max_frames=args.max_frames,
        input_seed=args.input_seed,
        turn_chance=args.turn_chance,
    )
    print(result.summary())  # noqa: T201
    return 0


def _write_config(args: argparse.Namespace) -> int:
    try:
        config = _config_from_args(args)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    config.save(args.output)
    print(f"Wrote config to {args.output}")  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``toroid-snake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "run": _run_session,
        "config": _write_config,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
