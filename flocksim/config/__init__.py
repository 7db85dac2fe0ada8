"""
Central Configuration
All constants and simulation defaults in one place
"""

import math

# === WORLD ===
WORLD_WIDTH = 800
WORLD_HEIGHT = 600

# === SCHEDULING ===
TICK_HZ = 30
TICK_INTERVAL_MS = 1000 // TICK_HZ  # 33ms

# === FLOCK SIZE ===
DEFAULT_BOID_COUNT = 30
MAX_BOID_COUNT = 500  # O(n^2) scan, keep to a few hundred

# === DISPLAY ===
DEFAULT_BOID_COLOR = (197, 66, 245, 255)  # Purple, RGBA
BOID_SHAPE_SIZE = 10

# === STEERING DEFAULTS ===
# Single source of truth for FlockParams defaults
FLOCK_DEFAULTS = {
    'min_speed': 3.0,
    'max_speed': 6.0,
    'visual_range': 40.0,
    'protected_range': 8.0,
    'centering_factor': 0.0005,
    'matching_factor': 0.05,
    'avoid_factor': 0.05,
    'turn_factor': 0.2,
    'margin': 150.0,
    'wall_nudge': 0.1,  # Orthogonal push so boids don't stall parallel to a wall
}

# Velocity assigned when a boid's speed is exactly zero before clamping
ZERO_SPEED_VELOCITY = (1.0, 1.0)

# Heading range for randomly spawned boids
FULL_TURN = 2 * math.pi
