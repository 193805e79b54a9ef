"""Shared fixtures for gait synthesis tests."""

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from gait_synthesis.planning import GaitConstraintField, OpenTrajectory
from gait_synthesis.utils import RobotGeometry


@pytest.fixture
def geometry():
    return RobotGeometry(ankle=0.5, a=1.0, l=1.2)


@pytest.fixture
def linear_field():
    """Unit shape velocity along alpha_i, no group motion."""
    return GaitConstraintField(
        dphi=lambda g, r: np.array([1.0, 0.0]),
        dz=lambda g, r: np.zeros(3)
    )


@pytest.fixture
def turning_field():
    """Unit forward speed and unit yaw rate: a unit circle in the plane."""
    return GaitConstraintField(
        dphi=lambda g, r: np.array([1.0, 0.0]),
        dz=lambda g, r: np.array([1.0, 0.0, 1.0])
    )


def make_trajectory(n=101, duration=2.0):
    """Smooth analytic trajectory with zero group coordinates at t=0."""
    t = np.linspace(0.0, duration, n)
    return OpenTrajectory(
        t=t,
        x=np.sin(t),
        y=t ** 2,
        theta=0.5 * t,
        alpha_i=np.cos(t) + 1.0,
        alpha_j=0.3 * t
    )


@pytest.fixture
def trajectory_factory():
    return make_trajectory
