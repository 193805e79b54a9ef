"""
Tests for closing open trajectories through the deadband.
Run with: pytest tests/ -v
"""

import numpy as np
import pytest

from gait_synthesis.errors import ConfigurationError
from gait_synthesis.planning import OpenTrajectory, TrajectoryCloser


def ramp_trajectory(n):
    t = np.linspace(0.0, 1.0, n)
    return OpenTrajectory(
        t=t,
        x=0.5 * t,
        y=-0.2 * t,
        theta=0.1 * t,
        alpha_i=t,
        alpha_j=2.0 - 2.0 * t
    )


class TestTrajectoryCloser:
    """Deadband closure."""

    def test_half_duty_cycle_ten_samples(self):
        open_traj = ramp_trajectory(10)
        closed = TrajectoryCloser(0.5).close(open_traj)

        assert len(closed) == 15
        assert closed.num_active == 10
        assert closed.num_deadband == 5

        deadband = closed.as_array()[10:]
        np.testing.assert_array_equal(deadband[:, 1:4], np.tile(open_traj.group[-1], (5, 1)))

        # Shape returns monotonically from the final towards the initial value
        np.testing.assert_allclose(deadband[:, 4], [5 / 6, 4 / 6, 3 / 6, 2 / 6, 1 / 6])
        assert np.all(np.diff(deadband[:, 4]) < 0)
        assert np.all(np.diff(deadband[:, 5]) > 0)
        assert np.all((deadband[:, 5] > 0.0) & (deadband[:, 5] < 2.0))

    def test_deadband_time_spacing(self):
        open_traj = ramp_trajectory(10)
        closed = TrajectoryCloser(0.5).close(open_traj)
        np.testing.assert_allclose(np.diff(closed.t), 1.0 / 9)
        np.testing.assert_array_equal(closed.t[:10], open_traj.t)

    def test_one_more_step_returns_to_start(self):
        open_traj = ramp_trajectory(12)
        closed = TrajectoryCloser(0.75).close(open_traj)
        shape = closed.shape
        step = shape[-1] - shape[-2]
        np.testing.assert_allclose(shape[-1] + step, open_traj.initial_condition, atol=1e-12)

    def test_zero_duty_cycle_is_identity(self):
        open_traj = ramp_trajectory(10)
        closed = TrajectoryCloser(0.0).close(open_traj)
        np.testing.assert_array_equal(closed.as_array(), open_traj.as_array())
        assert closed.num_deadband == 0

    def test_rounded_away_deadband_is_identity(self):
        open_traj = ramp_trajectory(2)
        closed = TrajectoryCloser(0.2).close(open_traj)
        assert len(closed) == 2

    def test_halves_round_up(self):
        # round(0.5 * 5) -> 3, not banker's rounding to 2
        closed = TrajectoryCloser(0.5).close(ramp_trajectory(5))
        assert len(closed) == 8

    @pytest.mark.parametrize("n", [2, 3, 10, 101])
    @pytest.mark.parametrize("dc", [0.0, 0.05, 0.25, 0.5, 0.75, 1.0])
    def test_closed_length(self, n, dc):
        closed = TrajectoryCloser(dc).close(ramp_trajectory(n))
        assert len(closed) == n + int(np.floor(dc * n + 0.5))
        assert np.all(np.diff(closed.t) > 0)

    def test_full_duty_cycle_doubles_length(self):
        closed = TrajectoryCloser(1.0).close(ramp_trajectory(20))
        assert len(closed) == 40

    @pytest.mark.parametrize("dc", [-0.1, 1.5])
    def test_invalid_duty_cycle(self, dc):
        with pytest.raises(ConfigurationError):
            TrajectoryCloser(dc)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
