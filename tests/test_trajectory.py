"""
Tests for integration windows and trajectory containers.
Run with: pytest tests/ -v
"""

import numpy as np
import pytest

from gait_synthesis.errors import InvalidInputError, InvalidWindowError
from gait_synthesis.planning import (
    ClosedTrajectory,
    IntegrationWindow,
    OpenTrajectory,
    WindowRegime
)


class TestIntegrationWindow:
    """Regime resolution."""

    @pytest.mark.parametrize("window, regime, forward", [
        ((1.0, 2.0), WindowRegime.INTERIOR, 3.0),
        ((0.0, 2.0), WindowRegime.START_ANCHORED, 2.0),
        ((1.5, 0.0), WindowRegime.END_ANCHORED, 1.5),
    ])
    def test_regimes(self, window, regime, forward):
        w = IntegrationWindow(*window)
        assert w.regime is regime
        assert w.forward_time == pytest.approx(forward)
        assert w.needs_backward_leg == (regime is not WindowRegime.START_ANCHORED)

    def test_both_zero_rejected(self):
        with pytest.raises(InvalidWindowError, match="both directions"):
            IntegrationWindow(0.0, 0.0)

    @pytest.mark.parametrize("window", [(-1.0, 1.0), (1.0, np.inf), (np.nan, 1.0)])
    def test_invalid_times_rejected(self, window):
        with pytest.raises(InvalidWindowError):
            IntegrationWindow(*window)


class TestOpenTrajectory:
    """Sample container."""

    def test_properties(self, trajectory_factory):
        traj = trajectory_factory(n=11)
        assert len(traj) == 11
        assert traj.as_array().shape == (11, 6)
        assert traj.path_length == pytest.approx(2.0)
        np.testing.assert_allclose(
            traj.net_displacement, [np.sin(2.0), 4.0, 1.0]
        )
        np.testing.assert_allclose(traj.initial_condition, [2.0, 0.0])
        np.testing.assert_allclose(traj.final_condition, [np.cos(2.0) + 1.0, 0.6])

    def test_arrays_are_copied_and_read_only(self):
        t = np.linspace(0.0, 1.0, 5)
        x = np.zeros(5)
        traj = OpenTrajectory(t, x, x, x, x, x)
        x[0] = 1.0
        assert traj.x[0] == 0.0
        with pytest.raises(ValueError):
            traj.t[0] = 5.0

    def test_time_must_increase(self):
        z = np.zeros(3)
        with pytest.raises(InvalidInputError, match="strictly increasing"):
            OpenTrajectory(np.array([0.0, 1.0, 1.0]), z, z, z, z, z)

    def test_channel_lengths_must_agree(self):
        with pytest.raises(InvalidInputError, match="alpha_j"):
            OpenTrajectory(np.arange(3.0), *([np.zeros(3)] * 4), np.zeros(2))

    def test_from_array_round_trip(self, trajectory_factory):
        traj = trajectory_factory(n=7)
        again = OpenTrajectory.from_array(traj.as_array())
        np.testing.assert_array_equal(again.as_array(), traj.as_array())

    def test_reflected(self, trajectory_factory):
        traj = trajectory_factory(n=21)
        mirror = traj.reflected()
        np.testing.assert_array_equal(mirror.t, traj.t)
        np.testing.assert_allclose(mirror.net_displacement, -traj.net_displacement)
        np.testing.assert_allclose(mirror.group[0], 0.0, atol=1e-15)
        np.testing.assert_array_equal(mirror.shape, traj.shape[::-1])


class TestClosedTrajectory:
    """Closed container bookkeeping."""

    def test_active_part(self, trajectory_factory):
        samples = trajectory_factory(n=6).as_array()
        extra = samples[-1].copy()
        extra[0] += 1.0
        closed = ClosedTrajectory.from_array(np.vstack([samples, extra]), num_active=6)
        assert closed.num_deadband == 1
        np.testing.assert_array_equal(closed.active.as_array(), samples)

    def test_active_count_validated(self, trajectory_factory):
        samples = trajectory_factory(n=6).as_array()
        with pytest.raises(InvalidInputError):
            ClosedTrajectory.from_array(samples, num_active=7)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
