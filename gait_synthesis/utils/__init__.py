"""Utility modules for gait synthesis"""

from .math_utils import (
    rotation_matrix_2d,
    planar_exponential,
    compose_body_displacements,
    se2_limits
)
from .robot_model import RobotGeometry, CONTACT_STATES, contact_state_index
from .config import PathConfig, EstimatorConfig, load_config

__all__ = [
    'rotation_matrix_2d', 'planar_exponential',
    'compose_body_displacements', 'se2_limits',
    'RobotGeometry', 'CONTACT_STATES', 'contact_state_index',
    'PathConfig', 'EstimatorConfig', 'load_config'
]
