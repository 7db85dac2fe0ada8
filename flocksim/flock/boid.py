"""
Boid - Agent data model

A boid is plain kinematic state (position, velocity) plus a display colour.
The engine owns and mutates Boid instances; renderers only ever see
BoidSnapshot copies.
"""

import math
from dataclasses import dataclass
from typing import NamedTuple

from flocksim.config import DEFAULT_BOID_COLOR
from .boid_shape import BoidShape, boid_shape


class Rgba(NamedTuple):
    """Display colour, each channel 0-255."""
    r: int
    g: int
    b: int
    a: int = 255

    @classmethod
    def from_hex(cls, value: str) -> "Rgba":
        """Parse '#rrggbb' or '#rrggbbaa'."""
        text = value.lstrip('#')
        if len(text) not in (6, 8):
            raise ValueError(f"Invalid hex colour: {value!r}")
        channels = [int(text[i:i + 2], 16) for i in range(0, len(text), 2)]
        return cls(*channels)

    def to_hex(self) -> str:
        return "#{:02x}{:02x}{:02x}{:02x}".format(self.r, self.g, self.b, self.a)


DEFAULT_COLOR = Rgba(*DEFAULT_BOID_COLOR)


@dataclass(frozen=True)
class BoidHandle:
    """Identifies a boid added to a simulation. Carries no access to its state."""
    boid_id: int


@dataclass
class Boid:
    """Single boid in world coordinates. Owned and mutated by FlockEngine."""
    boid_id: int
    x: float
    y: float
    vx: float
    vy: float
    color: Rgba = DEFAULT_COLOR

    @property
    def heading(self) -> float:
        """Orientation for rendering, radians. 0 = +x."""
        return math.atan2(self.vy, self.vx)

    @property
    def speed(self) -> float:
        return math.sqrt(self.vx * self.vx + self.vy * self.vy)

    @property
    def handle(self) -> BoidHandle:
        return BoidHandle(self.boid_id)

    def snapshot(self) -> "BoidSnapshot":
        return BoidSnapshot(self.boid_id, self.x, self.y, self.vx, self.vy, self.color)


@dataclass(frozen=True)
class BoidSnapshot:
    """Read-only copy of a boid handed to draw callbacks."""
    boid_id: int
    x: float
    y: float
    vx: float
    vy: float
    color: Rgba

    @property
    def heading(self) -> float:
        return math.atan2(self.vy, self.vx)

    @property
    def speed(self) -> float:
        return math.sqrt(self.vx * self.vx + self.vy * self.vy)

    def shape(self, size: float) -> BoidShape:
        """Polygon points for drawing this boid at the given size."""
        return boid_shape(self.x, self.y, self.heading, size)
