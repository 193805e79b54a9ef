#!/usr/bin/env python3
"""
Trajectory closure through the shape-space nullspace
"""

import numpy as np

from ..errors import ConfigurationError
from .trajectory import OpenTrajectory, ClosedTrajectory


def deadband_samples(duty_cycle: float, num_active: int) -> int:
    """Deadband length round(dc * n), rounding halves away from zero"""
    return int(np.floor(duty_cycle * num_active + 0.5))


class TrajectoryCloser:
    """
    Closes open trajectories into periodic gaits

    The deadband holds the group coordinates at their final value while the
    shape coordinates return linearly to their initial value, so no
    displacement is generated during the return stroke.
    """

    def __init__(self, duty_cycle: float = 0.0):
        """
        Initialize closer

        Args:
            duty_cycle: Fraction of the cycle spent in the deadband, in [0, 1]
        """
        if not 0.0 <= duty_cycle <= 1.0:
            raise ConfigurationError(f"Duty cycle must lie in [0, 1], got {duty_cycle}")
        self.duty_cycle = float(duty_cycle)

    def close(self, open_trajectory: OpenTrajectory) -> ClosedTrajectory:
        """
        Append the deadband segment to an open trajectory

        Args:
            open_trajectory: Trajectory in the active contact state

        Returns:
            ClosedTrajectory with len(open) + round(dc * len(open)) samples
        """
        n_active = len(open_trajectory)
        n_dead = deadband_samples(self.duty_cycle, n_active)

        samples = open_trajectory.as_array()

        if n_dead == 0 or n_active < 2:
            return ClosedTrajectory.from_array(samples, num_active=n_active)

        t_end = samples[-1, 0]
        dt = t_end / (n_active - 1)

        deadband = np.empty((n_dead, samples.shape[1]))
        deadband[:, 0] = t_end + dt * np.arange(1, n_dead + 1)
        deadband[:, 1:4] = samples[-1, 1:4]

        # Open interval: both endpoints already exist as open samples
        for col in (4, 5):
            ramp = np.linspace(samples[-1, col], samples[0, col], n_dead + 2)
            deadband[:, col] = ramp[1:-1]

        return ClosedTrajectory.from_array(
            np.vstack([samples, deadband]),
            num_active=n_active
        )
