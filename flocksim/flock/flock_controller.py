"""
Flock Controller - Qt front-end adapter for FlockSimulation

Connects:
- FlockSimulation (steering, locking, lifecycle)
- FlockParams (tunables, preset save/load)
- Qt signals for whatever widget draws the flock

Frames are emitted from the tick thread; Qt queues them onto the
receiver's thread, so a widget slot always runs on the GUI thread.
"""

from typing import Callable, Optional, Sequence, Tuple

from PyQt5.QtCore import QObject, pyqtSignal

from flocksim.config import DEFAULT_BOID_COUNT, FULL_TURN, WORLD_WIDTH, WORLD_HEIGHT
from flocksim.utils.logger import logger

from .boid import BoidHandle, BoidSnapshot, Rgba
from .flock_engine import XorShift32
from .flock_params import FlockParams
from .flock_simulation import FlockSimulation, generate_random_seed
from .schedulers import QtTickScheduler, TickScheduler

SchedulerFactory = Callable[[QObject], TickScheduler]


class FlockController(QObject):
    """
    Controller for a flock shown in a Qt UI.

    A stopped simulation cannot be restarted, so every start() builds a
    fresh FlockSimulation from the stored params and seed.
    """

    # Signals for UI
    frame_ready = pyqtSignal(object)   # Tuple of BoidSnapshot
    enabled_changed = pyqtSignal(bool)
    seed_changed = pyqtSignal(int)

    def __init__(self, width: float = WORLD_WIDTH, height: float = WORLD_HEIGHT,
                 boid_count: int = DEFAULT_BOID_COUNT,
                 scheduler_factory: Optional[SchedulerFactory] = None,
                 parent=None):
        super().__init__(parent)

        self._width = width
        self._height = height
        self._boid_count = boid_count
        self._params = FlockParams()

        self._seed = 0
        self._seed_locked = False

        # Separate stream for click-added boids so spawning stays reproducible
        self._ui_rng = XorShift32(generate_random_seed())

        self._scheduler_factory = scheduler_factory
        self._simulation: Optional[FlockSimulation] = None

    @property
    def simulation(self) -> Optional[FlockSimulation]:
        """Running simulation, or None when stopped."""
        return self._simulation

    @property
    def enabled(self) -> bool:
        return self._simulation is not None

    # === Lifecycle ===

    def start(self) -> None:
        """Start a new simulation."""
        if self._simulation is not None:
            return

        if not self._seed_locked:
            self._seed = generate_random_seed()
        self.seed_changed.emit(self._seed)

        if self._scheduler_factory is not None:
            scheduler = self._scheduler_factory(self)
        else:
            scheduler = QtTickScheduler(self)

        simulation = FlockSimulation(
            params=self._params,
            scheduler=scheduler,
            rng=XorShift32(self._seed),
        )
        simulation.initialize(self._emit_frame, self._boid_count, self._width, self._height)
        self._simulation = simulation
        self.enabled_changed.emit(True)

    def stop(self) -> None:
        """Stop and discard the simulation."""
        if self._simulation is None:
            return

        self._simulation.dispose()
        self._simulation = None

        # Let the view clear itself
        self.frame_ready.emit(())
        self.enabled_changed.emit(False)

    def toggle(self) -> None:
        if self._simulation is not None:
            self.stop()
        else:
            self.start()

    def _emit_frame(self, frame: Sequence[BoidSnapshot]) -> None:
        self.frame_ready.emit(frame)

    # === Flock editing ===

    def add_boid_at(self, x: float, y: float) -> Optional[BoidHandle]:
        """Add a boid at a clicked point with random heading and colour."""
        if self._simulation is None:
            logger.warning("Cannot add boid: flock not running", component="FLOCK")
            return None

        heading = self._ui_rng.next_float_range(0.0, FULL_TURN)
        color = Rgba(self._ui_rng.next_int(256),
                     self._ui_rng.next_int(256),
                     self._ui_rng.next_int(256))
        return self._simulation.add_boid(x, y, heading, color)

    def reset(self) -> None:
        """Remove all boids from the running flock."""
        if self._simulation is not None:
            self._simulation.reset()

    # === Parameters ===

    def set_params(self, params: FlockParams) -> None:
        """Store params, restarting the flock if it is running."""
        self._params = params
        if self._simulation is not None:
            self.stop()
            self.start()

    @property
    def params(self) -> FlockParams:
        return self._params

    def set_boid_count(self, count: int) -> None:
        """Boids spawned on the next start()."""
        self._boid_count = max(0, count)

    def set_world_size(self, width: float, height: float) -> None:
        """World bounds for the next start()."""
        self._width = width
        self._height = height

    @property
    def world_size(self) -> Tuple[float, float]:
        return (self._width, self._height)

    # === Seed control ===

    def set_seed(self, seed: int) -> None:
        """Lock spawning to seed for reproducible runs."""
        self._seed = seed
        self._seed_locked = True
        self.seed_changed.emit(seed)

    def unlock_seed(self) -> None:
        self._seed_locked = False

    def reseed(self) -> None:
        """Pick a new random seed and restart if running."""
        self._seed = generate_random_seed()
        self.seed_changed.emit(self._seed)

        if self._simulation is not None:
            locked = self._seed_locked
            self._seed_locked = True
            self.stop()
            self.start()
            self._seed_locked = locked

    @property
    def seed(self) -> int:
        return self._seed

    # === State persistence ===

    def get_params_dict(self) -> dict:
        return self._params.to_dict()

    def load_params_dict(self, data: dict) -> None:
        self.set_params(FlockParams.from_dict(data))

    def reset_to_defaults(self) -> None:
        self.set_params(FlockParams())
