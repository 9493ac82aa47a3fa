import math
import os
import pytest
from typing import List

import numpy as np

from sim2_geometry import Sim2


# =============================================================================
# Config Fixtures
# =============================================================================


@pytest.fixture
def base_config_path() -> str:
    """Path to the packaged base configuration YAML."""
    test_dir = os.path.dirname(__file__)
    pkg_root = os.path.dirname(test_dir)
    return os.path.join(pkg_root, "config", "sim2_geometry_base.yaml")


# =============================================================================
# Test Utility Fixtures
# =============================================================================

@pytest.fixture
def identity_sim2() -> Sim2:
    return Sim2.identity()


@pytest.fixture
def random_sim2() -> Sim2:
    """A generic Sim2 away from identity (nonzero angle, offset, non-unit scale)."""
    return Sim2.from_xy_theta(0.8, -1.3, 0.6, 1.7)


@pytest.fixture
def sim2_samples() -> List[Sim2]:
    """A spread of transforms, including large angles and small/large scales."""
    return [
        Sim2.identity(),
        Sim2.from_xy_theta(1.0, 0.0, 0.0, 2.0),
        Sim2.from_xy_theta(0.0, 1.0, math.pi / 2, 1.0),
        Sim2.from_xy_theta(-2.5, 0.3, -2.9, 0.4),
        Sim2.from_xy_theta(3.1, -4.2, 3.0, 5.0),
        Sim2.from_xy_theta(0.01, 0.02, 0.01, 1.01),
    ]


@pytest.fixture
def sample_points() -> np.ndarray:
    """A small batch of 2D points."""
    rng = np.random.default_rng(7)
    return rng.normal(0.0, 2.0, size=(8, 2))
