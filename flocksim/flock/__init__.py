"""
Flocking Simulation

Boids steer by separation, alignment and cohesion inside a bounded world.
A FlockSimulation ticks the flock on a scheduler and hands each frame to a
draw callback.
"""

from .boid import Boid, BoidHandle, BoidSnapshot, Rgba, DEFAULT_COLOR
from .boid_shape import BoidShape, boid_shape
from .flock_params import FlockParams
from .flock_engine import FlockEngine, XorShift32
from .flock_simulation import (
    FlockSimulation,
    InvalidStateError,
    SimulationState,
    generate_random_seed,
)
from .schedulers import TickScheduler, ThreadTickScheduler, QtTickScheduler
from .flock_controller import FlockController

__all__ = [
    'Boid',
    'BoidHandle',
    'BoidSnapshot',
    'Rgba',
    'DEFAULT_COLOR',
    'BoidShape',
    'boid_shape',
    'FlockParams',
    'FlockEngine',
    'XorShift32',
    'FlockSimulation',
    'InvalidStateError',
    'SimulationState',
    'generate_random_seed',
    'TickScheduler',
    'ThreadTickScheduler',
    'QtTickScheduler',
    'FlockController',
]
