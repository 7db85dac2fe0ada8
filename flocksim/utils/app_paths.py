"""App path helpers (cross-platform).

Environment overrides (useful for portable/dev launches):
- FLOCKSIM_CFG_DIR: base dir containing flock_params.json
"""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "flocksim"
PARAMS_FILENAME = "flock_params.json"


def _env_path(name: str) -> Path | None:
    v = os.environ.get(name)
    if not v:
        return None
    return Path(os.path.expanduser(v)).resolve()


def get_app_config_dir() -> Path:
    """Base config dir. Not created until something is saved into it."""
    cfg_dir = _env_path("FLOCKSIM_CFG_DIR")
    if cfg_dir is not None:
        return cfg_dir
    return Path(user_config_dir(APP_NAME, appauthor=False, roaming=True)).resolve()


def get_params_path() -> Path:
    return get_app_config_dir() / PARAMS_FILENAME
