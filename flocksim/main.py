"""
Headless runner for flocksim.

Runs a flock on the background tick thread for a fixed time and logs
per-second statistics instead of drawing.

Usage:
    flocksim                          # 30 boids, 800x600, 10 seconds
    flocksim --count 200 --seconds 30
    flocksim --seed 42 --params my_params.json --verbose
    flocksim --log-file run.log
"""

import argparse
import math
import time
from typing import Optional, Sequence

from flocksim.config import (
    DEFAULT_BOID_COUNT,
    MAX_BOID_COUNT,
    TICK_HZ,
    WORLD_HEIGHT,
    WORLD_WIDTH,
)
from flocksim.flock import (
    BoidSnapshot,
    FlockParams,
    FlockSimulation,
    XorShift32,
    generate_random_seed,
)
from flocksim.utils.logger import LogLevel, logger, set_log_level


class FrameStats:
    """Draw callback that logs a summary once per second of ticks."""

    def __init__(self, every: int = TICK_HZ):
        self._every = every
        self._frames = 0
        self.last_summary: Optional[str] = None

    def __call__(self, frame: Sequence[BoidSnapshot]) -> None:
        self._frames += 1
        if self._frames % self._every:
            return
        self.last_summary = summarize(frame)
        logger.info(f"Frame {self._frames}: {self.last_summary}", component="APP")

    @property
    def frames(self) -> int:
        return self._frames


def summarize(frame: Sequence[BoidSnapshot]) -> str:
    """One-line description of a frame."""
    if not frame:
        return "0 boids"
    n = len(frame)
    mean_speed = math.fsum(b.speed for b in frame) / n
    cx = math.fsum(b.x for b in frame) / n
    cy = math.fsum(b.y for b in frame) / n
    return f"{n} boids, mean speed {mean_speed:.2f}, centre ({cx:.1f}, {cy:.1f})"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flocksim", description="Run a headless boid flock.")
    parser.add_argument("--count", type=int, default=DEFAULT_BOID_COUNT,
                        help=f"number of boids (max {MAX_BOID_COUNT})")
    parser.add_argument("--width", type=float, default=WORLD_WIDTH, help="world width")
    parser.add_argument("--height", type=float, default=WORLD_HEIGHT, help="world height")
    parser.add_argument("--seconds", type=float, default=10.0, help="run time")
    parser.add_argument("--seed", type=int, default=None, help="spawn seed")
    parser.add_argument("--params", default=None,
                        help="flock params JSON (default: user config dir)")
    parser.add_argument("--verbose", action="store_true", help="log debug output")
    parser.add_argument("--log-file", default=None, help="also write the full log to FILE")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        set_log_level(LogLevel.DEBUG)

    if not 0 <= args.count <= MAX_BOID_COUNT:
        logger.error(f"--count must be between 0 and {MAX_BOID_COUNT}", component="APP")
        return 2
    if not math.isfinite(args.seconds) or args.seconds < 0:
        logger.error("--seconds must be a non-negative number", component="APP")
        return 2

    if args.log_file:
        logger.enable_file_logging(args.log_file)
    try:
        return run(args)
    finally:
        logger.disable_file_logging()


def run(args: argparse.Namespace) -> int:
    """Run the flock for args.seconds on the tick thread."""
    seed = args.seed if args.seed is not None else generate_random_seed()
    params = FlockParams.load(args.params)

    logger.info("=" * 40, component="APP")
    logger.info(f"flocksim: {args.count} boids, seed {seed}", component="APP")
    logger.info("=" * 40, component="APP")

    stats = FrameStats()
    simulation = FlockSimulation(params=params, rng=XorShift32(seed))

    try:
        simulation.initialize(stats, args.count, args.width, args.height)
        time.sleep(args.seconds)
    except ValueError as e:
        logger.error("Invalid world settings", component="APP", details=str(e))
        return 2
    except KeyboardInterrupt:
        logger.info("Interrupted", component="APP")
    finally:
        simulation.dispose()

    logger.info(f"Ran {simulation.tick_count} ticks, final: {summarize(simulation.boids)}",
                component="APP")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
