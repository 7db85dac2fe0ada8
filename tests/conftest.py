"""Pytest configuration - ensure consistent CWD and provide fixtures."""
from __future__ import annotations

import os
from pathlib import Path
import pytest

from flocksim.flock import FlockParams, XorShift32
from tests.helpers.flock_helpers import ManualScheduler, Recorder

ROOT = Path(__file__).resolve().parents[1]


def pytest_sessionstart(session):
    os.chdir(ROOT)


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path, monkeypatch):
    """Keep params files out of the real user config dir."""
    monkeypatch.setenv("FLOCKSIM_CFG_DIR", str(tmp_path / "cfg"))


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def rng():
    return XorShift32(1234)


@pytest.fixture
def params():
    return FlockParams()


@pytest.fixture
def no_edges():
    """Defaults with edge avoidance switched off."""
    return FlockParams(margin=0.0)
