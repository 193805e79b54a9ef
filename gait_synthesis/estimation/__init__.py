"""
Estimation modules for quadruped body motion
Contact states, leg shape trajectories, and SE(2) body velocity
"""

from .body_velocity_estimator import BodyVelocityEstimator, BodyTrajectory
from .contact_estimator import ContactEstimator
from .shape_trajectory import (
    ShapeTrajectory,
    shape_from_series,
    shape_from_sinusoids,
    compute_noslip_trajectory
)
from .jacobians import compose_leg_jacobian

__all__ = [
    'BodyVelocityEstimator',
    'BodyTrajectory',
    'ContactEstimator',
    'ShapeTrajectory',
    'shape_from_series',
    'shape_from_sinusoids',
    'compute_noslip_trajectory',
    'compose_leg_jacobian'
]
