import logging
import os

# Pygame must pick the dummy drivers before it is first imported.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from constants import REFERENCE_INTERACTION_SIGNS


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging rewires the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def sim_params():
    return {
        "seed": 42,
        "particle_count": 10,
        "particle_types": 3,
        "interaction_matrix": [list(row) for row in REFERENCE_INTERACTION_SIGNS],
        "interaction_strength": 1e4,
        "base_coefficient": 5e-3,
        "min_radius_squared": 25.0,
    }
