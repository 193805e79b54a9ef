"""
Planning modules for gait paths on contact submanifolds
Path integration, scaling, and closure
"""

from .trajectory import WindowRegime, IntegrationWindow, OpenTrajectory, ClosedTrajectory
from .interpolation import TrajectoryInterpolator, select_window
from .closure import TrajectoryCloser
from .gait_path import (
    GaitPath,
    GaitPathRegistry,
    GaitConstraintField,
    ScaledPath,
    ScaledTrajectoryFamily,
    PERCENTAGES
)

__all__ = [
    'WindowRegime',
    'IntegrationWindow',
    'OpenTrajectory',
    'ClosedTrajectory',
    'TrajectoryInterpolator',
    'select_window',
    'TrajectoryCloser',
    'GaitPath',
    'GaitPathRegistry',
    'GaitConstraintField',
    'ScaledPath',
    'ScaledTrajectoryFamily',
    'PERCENTAGES'
]
