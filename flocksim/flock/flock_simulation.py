"""
Flock Simulation - Owns the flock and runs it on a tick scheduler

Each tick runs FlockEngine.update() and then hands a snapshot of the flock
to the draw callback. update/add_boid/reset all run under one lock, so a
boid added from another thread never lands in the middle of a scan.

Lifecycle: STOPPED -> initialize() -> RUNNING -> dispose() -> DISPOSED.
"""

import random
import threading
from enum import Enum, auto
from typing import Callable, Optional, Sequence, Tuple

from flocksim.config import TICK_HZ
from flocksim.utils.logger import logger

from .boid import BoidHandle, BoidSnapshot, Rgba, DEFAULT_COLOR
from .flock_engine import FlockEngine, XorShift32
from .flock_params import FlockParams
from .schedulers import TickScheduler, ThreadTickScheduler

DrawCallback = Callable[[Sequence[BoidSnapshot]], None]


class InvalidStateError(RuntimeError):
    """Operation not allowed in the simulation's current lifecycle state."""


class SimulationState(Enum):
    STOPPED = auto()
    RUNNING = auto()
    DISPOSED = auto()


def generate_random_seed() -> int:
    """Generate a random seed value."""
    return random.randint(0, 0x7FFFFFFF)


class FlockSimulation:
    """
    Flock lifecycle, locking and tick dispatch.

    All collaborators are injectable so tests can drive ticks by hand and
    seed spawning deterministically.
    """

    def __init__(self, params: Optional[FlockParams] = None,
                 scheduler: Optional[TickScheduler] = None,
                 rng: Optional[XorShift32] = None,
                 tick_hz: int = TICK_HZ):
        if not 0 < tick_hz <= 1000:
            raise ValueError(f"tick_hz must be in (0, 1000], got {tick_hz}")

        self._params = params or FlockParams()
        self._scheduler = scheduler or ThreadTickScheduler()
        self._rng = rng or XorShift32(generate_random_seed())
        self._tick_hz = tick_hz

        self._lock = threading.Lock()
        self._state = SimulationState.STOPPED
        self._engine: Optional[FlockEngine] = None
        self._draw: Optional[DrawCallback] = None
        self._tick_count = 0

    # === Lifecycle ===

    def initialize(self, draw: DrawCallback, boid_count: int,
                   world_width: float, world_height: float) -> None:
        """Spawn boid_count random boids and start ticking."""
        if boid_count < 0:
            raise ValueError(f"boid_count must not be negative, got {boid_count}")

        with self._lock:
            if self._state is not SimulationState.STOPPED:
                raise InvalidStateError(
                    f"initialize() called on a {self._state.name} simulation"
                )
            engine = FlockEngine(world_width, world_height, self._params)
            engine.spawn(boid_count, self._rng)

            self._engine = engine
            self._draw = draw
            self._state = SimulationState.RUNNING

        try:
            self._scheduler.start(1000 // self._tick_hz, self._tick)
        except Exception:
            with self._lock:
                self._state = SimulationState.STOPPED
                self._engine = None
                self._draw = None
            raise

        logger.info(
            f"Flock started: {boid_count} boids in {world_width}x{world_height} "
            f"at {self._tick_hz}Hz",
            component="FLOCK",
        )

    def dispose(self) -> None:
        """Stop ticking. Safe to call more than once."""
        with self._lock:
            if self._state is SimulationState.DISPOSED:
                return
            was_running = self._state is SimulationState.RUNNING
            self._state = SimulationState.DISPOSED

        if was_running:
            self._scheduler.stop()
            logger.info(f"Flock stopped after {self._tick_count} ticks", component="FLOCK")

    def _require_running(self, operation: str) -> FlockEngine:
        """Call with the lock held."""
        if self._state is not SimulationState.RUNNING:
            raise InvalidStateError(
                f"{operation}() not allowed on a {self._state.name} simulation"
            )
        return self._engine

    # === Mutation ===

    def add_boid(self, x: float, y: float, heading: float,
                 color: Rgba = DEFAULT_COLOR) -> BoidHandle:
        """Add one boid at (x, y) heading in the given direction (radians)."""
        with self._lock:
            engine = self._require_running("add_boid")
            boid = engine.add_boid(x, y, heading, color)
        logger.flock(f"Added boid {boid.boid_id} at ({x:.1f}, {y:.1f})")
        return boid.handle

    def reset(self) -> None:
        """Remove every boid. The next frame is empty."""
        with self._lock:
            engine = self._require_running("reset")
            removed = engine.boid_count
            engine.clear()
        logger.flock(f"Reset flock, removed {removed} boids")

    def update(self) -> None:
        """Run one steering pass over the whole flock."""
        with self._lock:
            self._require_running("update").update()

    # === Ticking ===

    def _tick(self) -> None:
        """Scheduler callback: update, then draw outside the lock."""
        with self._lock:
            if self._state is not SimulationState.RUNNING:
                return
            self._engine.update()
            self._tick_count += 1
            frame = self._engine.snapshot()
            draw = self._draw

        try:
            draw(frame)
        except Exception as e:
            # One bad frame must not stop the flock
            logger.error(f"Draw callback failed on tick {self._tick_count}",
                         component="FLOCK", details=f"{type(e).__name__}: {e}")

    # === Access ===

    @property
    def boids(self) -> Tuple[BoidSnapshot, ...]:
        """Consistent snapshot of the flock (empty before initialize)."""
        with self._lock:
            if self._engine is None:
                return ()
            return self._engine.snapshot()

    @property
    def boid_count(self) -> int:
        with self._lock:
            return self._engine.boid_count if self._engine else 0

    def find(self, handle: BoidHandle) -> Optional[BoidSnapshot]:
        """Current state of the boid behind handle, or None after reset."""
        with self._lock:
            if self._engine is None:
                return None
            boid = self._engine.find(handle.boid_id)
            return boid.snapshot() if boid else None

    @property
    def state(self) -> SimulationState:
        return self._state

    @property
    def params(self) -> FlockParams:
        return self._params

    @property
    def world_size(self) -> Optional[Tuple[float, float]]:
        if self._engine is None:
            return None
        return (self._engine.width, self._engine.height)

    @property
    def tick_count(self) -> int:
        return self._tick_count
