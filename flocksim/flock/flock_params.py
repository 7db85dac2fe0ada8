"""
Flock Params - Steering tunables

Handles validation and JSON load/save of the tunables used by FlockEngine.
"""

import json
import math
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Union

from flocksim.config import FLOCK_DEFAULTS
from flocksim.utils.logger import logger

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class FlockParams:
    """
    Tunables for the visual/protected range steering model.

    Distances are in world units, speeds in world units per tick.
    """

    min_speed: float = FLOCK_DEFAULTS['min_speed']
    max_speed: float = FLOCK_DEFAULTS['max_speed']

    # Neighbour ranges
    visual_range: float = FLOCK_DEFAULTS['visual_range']
    protected_range: float = FLOCK_DEFAULTS['protected_range']

    # Rule weights
    centering_factor: float = FLOCK_DEFAULTS['centering_factor']
    matching_factor: float = FLOCK_DEFAULTS['matching_factor']
    avoid_factor: float = FLOCK_DEFAULTS['avoid_factor']

    # Edge avoidance
    turn_factor: float = FLOCK_DEFAULTS['turn_factor']
    margin: float = FLOCK_DEFAULTS['margin']
    wall_nudge: float = FLOCK_DEFAULTS['wall_nudge']

    def __post_init__(self):
        for f in fields(self):
            if not math.isfinite(getattr(self, f.name)):
                raise ValueError(f"{f.name} must be finite, got {getattr(self, f.name)}")
        if self.min_speed <= 0 or self.max_speed <= 0:
            raise ValueError(
                f"Speeds must be positive (min_speed={self.min_speed}, max_speed={self.max_speed})"
            )
        if self.min_speed > self.max_speed:
            raise ValueError(
                f"min_speed {self.min_speed} is greater than max_speed {self.max_speed}"
            )
        if not 0 <= self.protected_range <= self.visual_range:
            raise ValueError(
                f"Expected 0 <= protected_range <= visual_range, got "
                f"{self.protected_range} and {self.visual_range}"
            )
        for name in ('centering_factor', 'matching_factor', 'avoid_factor',
                     'turn_factor', 'margin', 'wall_nudge'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative, got {getattr(self, name)}")

    @property
    def spawn_speed(self) -> float:
        """Initial speed for boids added with a caller-supplied heading."""
        return (self.min_speed + self.max_speed) / 2

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict for saving."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FlockParams":
        """Deserialize, ignoring unknown keys and defaulting missing ones."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: float(v) for k, v in data.items() if k in known})

    @classmethod
    def load(cls, path: Optional[PathLike] = None) -> "FlockParams":
        """
        Load params from a JSON file.

        Returns defaults if the file is missing, unreadable or invalid.
        """
        if path is None:
            from flocksim.utils.app_paths import get_params_path
            path = get_params_path()

        if not os.path.exists(path):
            logger.config(f"No params file at {path}, using defaults")
            return cls()

        try:
            with open(path, 'r') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("top level must be an object")
            params = cls.from_dict(data)
        except (json.JSONDecodeError, IOError, ValueError, TypeError) as e:
            logger.warning(f"Failed to load flock params from {path}, using defaults",
                           component="CONFIG", details=str(e))
            return cls()

        logger.info(f"Loaded flock params from {path}", component="CONFIG")
        return params

    def save(self, path: Optional[PathLike] = None) -> None:
        """Write params as JSON, creating the parent directory if needed."""
        if path is None:
            from flocksim.utils.app_paths import get_params_path
            path = get_params_path()

        parent = os.path.dirname(os.fspath(path))
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.config("Saved flock params", details=str(path))
