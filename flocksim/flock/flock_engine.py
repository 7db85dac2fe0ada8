"""
Flock Engine - Visual/protected range steering simulation

Boids fly over a bounded rectangular world. Every tick each boid looks at
every other boid (O(n^2), fine for a few hundred boids):

- Separation: raw sum of offsets from boids inside the protected range
- Alignment: steer toward average velocity of boids inside the visual range
- Cohesion: steer toward average position of boids inside the visual range

Key behaviors:
- Edge avoidance within a margin of each wall (turn, not wrap)
- Speed clamped to [min_speed, max_speed]
- Positions hard-clamped to the world rectangle
- No randomness in update(); only spawn() draws from the RNG

FlockEngine is not thread-safe; FlockSimulation serializes access to it.
"""

import math
from typing import List, Optional, Tuple

from flocksim.config import FULL_TURN, ZERO_SPEED_VELOCITY
from .boid import Boid, BoidSnapshot, Rgba, DEFAULT_COLOR
from .flock_params import FlockParams


class XorShift32:
    """Deterministic PRNG using xorshift32 algorithm."""

    def __init__(self, seed: int):
        self._state = (seed & 0xFFFFFFFF) or 1

    def next_uint32(self) -> int:
        x = self._state
        x ^= (x << 13) & 0xFFFFFFFF
        x ^= (x >> 17) & 0xFFFFFFFF
        x ^= (x << 5) & 0xFFFFFFFF
        self._state = x
        return x

    def next_float(self) -> float:
        """Random float in [0, 1)."""
        return self.next_uint32() * 2.3283064365386963e-10

    def next_float_range(self, lo: float, hi: float) -> float:
        """Random float in [lo, hi)."""
        return lo + self.next_float() * (hi - lo)

    def next_int(self, n: int) -> int:
        """Random int in [0, n)."""
        return self.next_uint32() % n


class FlockEngine:
    """
    Flocking simulation over a world of width x height units.

    Holds the boid list in insertion order and applies the steering rules
    in place, one boid at a time.
    """

    def __init__(self, width: float, height: float, params: Optional[FlockParams] = None):
        if not (math.isfinite(width) and math.isfinite(height)) or width <= 0 or height <= 0:
            raise ValueError(f"World size must be positive, got {width}x{height}")

        self._width = float(width)
        self._height = float(height)
        self._params = params or FlockParams()

        self._boids: List[Boid] = []
        self._next_id = 0

    # === Population ===

    def spawn(self, count: int, rng: XorShift32, color: Rgba = DEFAULT_COLOR) -> None:
        """Append count boids with random positions, headings and speeds."""
        p = self._params
        for _ in range(count):
            x = rng.next_float_range(0.0, self._width)
            y = rng.next_float_range(0.0, self._height)
            heading = rng.next_float_range(0.0, FULL_TURN)
            speed = rng.next_float_range(p.min_speed, p.max_speed)
            self._append(x, y, math.cos(heading) * speed, math.sin(heading) * speed, color)

    def add_boid(self, x: float, y: float, heading: float,
                 color: Rgba = DEFAULT_COLOR) -> Boid:
        """Append one boid heading in the given direction at spawn speed."""
        speed = self._params.spawn_speed
        return self._append(x, y, math.cos(heading) * speed, math.sin(heading) * speed, color)

    def _append(self, x: float, y: float, vx: float, vy: float, color: Rgba) -> Boid:
        boid = Boid(self._next_id, float(x), float(y), vx, vy, color)
        self._next_id += 1
        self._boids.append(boid)
        return boid

    def clear(self) -> None:
        """Remove all boids. Ids keep counting up."""
        self._boids.clear()

    # === Simulation ===

    def update(self) -> None:
        """Advance every boid by one tick."""
        boids = self._boids
        if not boids:
            return

        p = self._params
        visual_range = p.visual_range
        visual_sq = visual_range * visual_range
        protected_sq = p.protected_range * p.protected_range

        for boid in boids:
            close_dx, close_dy = 0.0, 0.0
            xpos_sum, ypos_sum = 0.0, 0.0
            xvel_sum, yvel_sum = 0.0, 0.0
            neighbor_count = 0

            for other in boids:
                if other is boid:
                    continue

                dx = boid.x - other.x
                dy = boid.y - other.y

                # Cheap box test before the squared distance
                if abs(dx) < visual_range and abs(dy) < visual_range:
                    dist_sq = dx * dx + dy * dy

                    if dist_sq < protected_sq:
                        close_dx += dx
                        close_dy += dy
                    elif dist_sq < visual_sq:
                        xpos_sum += other.x
                        ypos_sum += other.y
                        xvel_sum += other.vx
                        yvel_sum += other.vy
                        neighbor_count += 1

            if neighbor_count > 0:
                xpos_avg = xpos_sum / neighbor_count
                ypos_avg = ypos_sum / neighbor_count
                xvel_avg = xvel_sum / neighbor_count
                yvel_avg = yvel_sum / neighbor_count

                # Cohesion + alignment
                boid.vx += ((xpos_avg - boid.x) * p.centering_factor
                            + (xvel_avg - boid.vx) * p.matching_factor)
                boid.vy += ((ypos_avg - boid.y) * p.centering_factor
                            + (yvel_avg - boid.vy) * p.matching_factor)

            # Separation
            boid.vx += close_dx * p.avoid_factor
            boid.vy += close_dy * p.avoid_factor

            self._avoid_edges(boid)
            self._clamp_speed(boid)

            boid.x += boid.vx
            boid.y += boid.vy
            boid.x = max(0.0, min(self._width, boid.x))
            boid.y = max(0.0, min(self._height, boid.y))

    def _avoid_edges(self, boid: Boid) -> None:
        """Turn away from walls the boid is within margin of."""
        p = self._params
        margin = p.margin

        near_left = boid.x < margin
        near_right = boid.x > self._width - margin
        near_top = boid.y < margin
        near_bottom = boid.y > self._height - margin

        if near_left:
            boid.vx += p.turn_factor
        if near_right:
            boid.vx -= p.turn_factor
        if near_top:
            boid.vy += p.turn_factor
        if near_bottom:
            boid.vy -= p.turn_factor

        # Keep boids from flying exactly parallel to a single wall
        if (near_left or near_right) and not (near_top or near_bottom):
            boid.vy += math.copysign(p.wall_nudge, boid.vy)
        if (near_top or near_bottom) and not (near_left or near_right):
            boid.vx += math.copysign(p.wall_nudge, boid.vx)

    def _clamp_speed(self, boid: Boid) -> None:
        p = self._params
        speed = math.sqrt(boid.vx * boid.vx + boid.vy * boid.vy)

        if speed == 0.0:
            # Fixed fallback direction, left below min_speed
            boid.vx, boid.vy = ZERO_SPEED_VELOCITY
        elif speed < p.min_speed:
            boid.vx = boid.vx / speed * p.min_speed
            boid.vy = boid.vy / speed * p.min_speed
        elif speed > p.max_speed:
            boid.vx = boid.vx / speed * p.max_speed
            boid.vy = boid.vy / speed * p.max_speed

    # === Access ===

    def snapshot(self) -> Tuple[BoidSnapshot, ...]:
        """Read-only copies of all boids, in insertion order."""
        return tuple(b.snapshot() for b in self._boids)

    def find(self, boid_id: int) -> Optional[Boid]:
        for boid in self._boids:
            if boid.boid_id == boid_id:
                return boid
        return None

    @property
    def boids(self) -> List[Boid]:
        """Live boid list. Callers must hold the simulation lock."""
        return self._boids

    @property
    def boid_count(self) -> int:
        return len(self._boids)

    @property
    def params(self) -> FlockParams:
        return self._params

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height
