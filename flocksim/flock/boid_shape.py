"""
Boid shape derivation for renderers.

A boid is drawn as a triangle with a notch at the tail. The template points
down +y (nose at +size/2) and is rotated by heading - pi/2 around the
triangle's centroid, so a heading of 0 points the nose along +x.
"""

import math
from typing import NamedTuple, Tuple

Point = Tuple[float, float]


class BoidShape(NamedTuple):
    nose: Point
    left_wing: Point
    right_wing: Point
    tail: Point

    def points(self) -> Tuple[Point, Point, Point, Point]:
        """Polygon order: nose, left wing, tail notch, right wing."""
        return (self.nose, self.left_wing, self.tail, self.right_wing)


def _rotate(px: float, py: float, cx: float, cy: float,
            cos_a: float, sin_a: float) -> Point:
    dx = px - cx
    dy = py - cy
    return (cos_a * dx - sin_a * dy + cx,
            sin_a * dx + cos_a * dy + cy)


def boid_shape(x: float, y: float, heading: float, size: float) -> BoidShape:
    """Compute the four shape points of a boid at (x, y)."""
    nose = (x, y + size / 2)
    left = (x - size / 3, y - size / 2)
    right = (x + size / 3, y - size / 2)
    tail = (x, y)

    # Centroid of the triangle (tail notch excluded)
    cx = (nose[0] + left[0] + right[0]) / 3
    cy = (nose[1] + left[1] + right[1]) / 3

    angle = heading - math.pi / 2
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)

    return BoidShape(
        nose=_rotate(nose[0], nose[1], cx, cy, cos_a, sin_a),
        left_wing=_rotate(left[0], left[1], cx, cy, cos_a, sin_a),
        right_wing=_rotate(right[0], right[1], cx, cy, cos_a, sin_a),
        tail=_rotate(tail[0], tail[1], cx, cy, cos_a, sin_a),
    )
