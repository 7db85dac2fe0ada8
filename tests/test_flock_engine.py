"""
Tests for FlockEngine (steering rules) and XorShift32.

Covers:
- Speed and position bounds over many ticks
- Empty flock, determinism
- Separation, cohesion/alignment, isolation beyond visual range
- Edge avoidance and wall nudge
- Speed clamp, including the zero-speed fallback
"""

import math

import pytest

from flocksim.flock import FlockEngine, Rgba, XorShift32


def place(engine, x, y, vx, vy):
    """Add a boid and overwrite its velocity."""
    boid = engine.add_boid(x, y, 0.0)
    boid.vx = vx
    boid.vy = vy
    return boid


# =============================================================================
# XORSHIFT
# =============================================================================

class TestXorShift32:

    def test_same_seed_same_sequence(self):
        a = XorShift32(42)
        b = XorShift32(42)
        assert [a.next_uint32() for _ in range(10)] == [b.next_uint32() for _ in range(10)]

    def test_zero_seed_is_usable(self):
        rng = XorShift32(0)
        assert rng.next_uint32() != 0

    def test_float_range(self):
        rng = XorShift32(7)
        for _ in range(1000):
            v = rng.next_float_range(-2.0, 3.0)
            assert -2.0 <= v < 3.0

    def test_next_int_range(self):
        rng = XorShift32(7)
        values = {rng.next_int(4) for _ in range(200)}
        assert values == {0, 1, 2, 3}


# =============================================================================
# POPULATION
# =============================================================================

class TestPopulation:

    def test_rejects_empty_world(self):
        with pytest.raises(ValueError):
            FlockEngine(0, 600)
        with pytest.raises(ValueError):
            FlockEngine(800, -1)

    @pytest.mark.parametrize("width, height", [
        (math.nan, 600), (800, math.nan), (math.inf, 600), (800, math.inf),
    ])
    def test_rejects_non_finite_world(self, width, height):
        with pytest.raises(ValueError):
            FlockEngine(width, height)

    def test_spawn_inside_world_within_speed(self, rng, params):
        engine = FlockEngine(800, 600, params)
        engine.spawn(50, rng)

        assert engine.boid_count == 50
        for boid in engine.boids:
            assert 0 <= boid.x < 800
            assert 0 <= boid.y < 600
            assert params.min_speed - 1e-9 <= boid.speed <= params.max_speed + 1e-9

    def test_add_boid_uses_heading_and_spawn_speed(self, params):
        engine = FlockEngine(800, 600, params)
        boid = engine.add_boid(10.0, 20.0, math.pi / 2, Rgba(1, 2, 3))

        assert (boid.x, boid.y) == (10.0, 20.0)
        assert boid.vx == pytest.approx(0.0, abs=1e-12)
        assert boid.vy == pytest.approx(params.spawn_speed)
        assert boid.heading == pytest.approx(math.pi / 2)
        assert boid.color == Rgba(1, 2, 3, 255)

    def test_ids_keep_increasing_after_clear(self):
        engine = FlockEngine(800, 600)
        first = engine.add_boid(1, 1, 0)
        engine.clear()
        second = engine.add_boid(1, 1, 0)

        assert engine.boid_count == 1
        assert second.boid_id == first.boid_id + 1

    def test_snapshot_in_insertion_order(self):
        engine = FlockEngine(800, 600)
        for i in range(5):
            engine.add_boid(i * 10, 0, 0)
        assert [s.boid_id for s in engine.snapshot()] == [0, 1, 2, 3, 4]


# =============================================================================
# INVARIANTS
# =============================================================================

class TestInvariants:

    def test_empty_update_is_noop(self):
        engine = FlockEngine(800, 600)
        engine.update()
        assert engine.snapshot() == ()

    def test_speed_and_position_bounds(self, rng, params):
        engine = FlockEngine(400, 300, params)
        engine.spawn(60, rng)

        for _ in range(100):
            engine.update()
            for boid in engine.boids:
                assert params.min_speed - 1e-9 <= boid.speed <= params.max_speed + 1e-9
                assert 0.0 <= boid.x <= 400.0
                assert 0.0 <= boid.y <= 300.0

    def test_update_is_deterministic(self):
        def run():
            engine = FlockEngine(800, 600)
            engine.spawn(40, XorShift32(99))
            for _ in range(50):
                engine.update()
            return engine.snapshot()

        assert run() == run()


# =============================================================================
# STEERING RULES
# =============================================================================

class TestSteering:

    def test_separation_pushes_close_boids_apart(self, no_edges):
        engine = FlockEngine(800, 600, no_edges)
        a = place(engine, 100.0, 100.0, 0.0, 4.0)
        b = place(engine, 103.0, 100.0, 0.0, 4.0)

        engine.update()

        # a first: offset (-3, 0) times avoid_factor
        assert a.vx == pytest.approx(-0.15)
        assert a.vy == pytest.approx(4.0)
        # b then sees a's moved position (99.85, 104)
        assert b.vx == pytest.approx(3.15 * 0.05)
        assert b.vy == pytest.approx(4.0 - 4.0 * 0.05)
        assert a.vx < 0 < b.vx

    def test_cohesion_and_alignment_inside_visual_range(self, no_edges):
        engine = FlockEngine(800, 600, no_edges)
        a = place(engine, 100.0, 100.0, 4.0, 0.0)
        place(engine, 120.0, 100.0, 0.0, 4.0)

        engine.update()

        # centering: 20 * 0.0005, matching: -4 * 0.05 on x, +4 * 0.05 on y
        assert a.vx == pytest.approx(4.0 + 0.01 - 0.2)
        assert a.vy == pytest.approx(0.2)

    def test_boids_out_of_visual_range_ignore_each_other(self, no_edges):
        def kinematics(boid):
            return (boid.x, boid.y, boid.vx, boid.vy)

        def solo(x, y, vx, vy):
            engine = FlockEngine(800, 600, no_edges)
            boid = place(engine, x, y, vx, vy)
            engine.update()
            return kinematics(boid)

        engine = FlockEngine(800, 600, no_edges)
        a = place(engine, 100.0, 100.0, 4.0, 0.0)
        b = place(engine, 300.0, 300.0, 0.0, -4.0)
        engine.update()

        assert kinematics(a) == solo(100.0, 100.0, 4.0, 0.0)
        assert kinematics(b) == solo(300.0, 300.0, 0.0, -4.0)

    def test_box_check_excludes_diagonal_outside_range(self, no_edges):
        # dx = 30, dy = 30: inside the box, outside the circle (42.4 > 40)
        engine = FlockEngine(800, 600, no_edges)
        a = place(engine, 100.0, 100.0, 4.0, 0.0)
        place(engine, 130.0, 130.0, 0.0, 4.0)

        engine.update()

        assert (a.vx, a.vy) == (4.0, 0.0)


# =============================================================================
# EDGES
# =============================================================================

class TestEdges:

    def test_left_wall_turns_and_nudges(self, params):
        engine = FlockEngine(800, 600, params)
        boid = place(engine, 10.0, 300.0, 0.0, 4.0)

        engine.update()

        assert boid.vx == pytest.approx(0.2)
        assert boid.vy == pytest.approx(4.1)

    def test_right_wall_nudge_keeps_sign(self, params):
        engine = FlockEngine(800, 600, params)
        boid = place(engine, 790.0, 300.0, 0.0, -4.0)

        engine.update()

        assert boid.vx == pytest.approx(-0.2)
        assert boid.vy == pytest.approx(-4.1)

    def test_bottom_wall_nudges_x(self, params):
        engine = FlockEngine(800, 600, params)
        boid = place(engine, 400.0, 590.0, 4.0, 0.0)

        engine.update()

        assert boid.vx == pytest.approx(4.1)
        assert boid.vy == pytest.approx(-0.2)

    def test_corner_turns_without_nudge(self, params):
        engine = FlockEngine(800, 600, params)
        boid = place(engine, 10.0, 10.0, 0.0, 4.0)

        engine.update()

        assert boid.vx == pytest.approx(0.2)
        assert boid.vy == pytest.approx(4.2)

    def test_position_is_clamped_not_wrapped(self, no_edges):
        engine = FlockEngine(800, 600, no_edges)
        right = place(engine, 799.0, 300.0, 6.0, 0.0)
        top = place(engine, 400.0, 1.0, 0.0, -6.0)

        engine.update()

        assert right.x == 800.0
        assert top.y == 0.0


# =============================================================================
# SPEED CLAMP
# =============================================================================

class TestSpeedClamp:

    def test_fast_boid_slowed_to_max(self, params):
        engine = FlockEngine(800, 600, params)
        boid = place(engine, 400.0, 300.0, 10.0, 0.0)

        engine.update()

        assert (boid.vx, boid.vy) == (6.0, 0.0)

    def test_slow_boid_sped_up_to_min(self, params):
        engine = FlockEngine(800, 600, params)
        boid = place(engine, 400.0, 300.0, 0.0, -1.0)

        engine.update()

        assert (boid.vx, boid.vy) == (0.0, -3.0)

    def test_zero_speed_falls_back_to_unit_diagonal(self, params):
        engine = FlockEngine(800, 600, params)
        boid = place(engine, 400.0, 300.0, 0.0, 0.0)

        engine.update()

        assert (boid.vx, boid.vy) == (1.0, 1.0)
        assert (boid.x, boid.y) == (401.0, 301.0)
        assert boid.heading == pytest.approx(math.pi / 4)
