#!/usr/bin/env python3
"""
Scaled sub-path extraction
Window selection on a full reference path and cubic spline resampling
"""

import numpy as np
from scipy.interpolate import CubicSpline
from typing import Tuple

from ..errors import ConfigurationError, InvalidFractionError
from .trajectory import OpenTrajectory, WindowRegime


# Decimal places kept when scaling sample counts, so that products such as
# 0.3 * 10 = 3.0000000000000004 do not gain a sample under ceil()
_COUNT_PRECISION = 9

# Fewest samples a spline can be fitted through
_MIN_WINDOW = 2


def select_window(
    num_samples: int,
    fraction: float,
    regime: WindowRegime
) -> Tuple[int, int]:
    """
    Index window of a full path covering the given fraction

    Args:
        num_samples: Length of the full path
        fraction: Portion of the path to keep, in (0, 1]
        regime: Where the reference point sits on the full path

    Returns:
        (start, stop) slice bounds; stop is exclusive
    """
    if not 0.0 < fraction <= 1.0:
        raise InvalidFractionError(f"Path fraction must lie in (0, 1], got {fraction}")
    if num_samples < _MIN_WINDOW:
        raise ConfigurationError(
            f"A path needs at least {_MIN_WINDOW} samples, got {num_samples}"
        )

    n = num_samples

    if regime is WindowRegime.END_ANCHORED:
        count = int(np.ceil(round(fraction * n, _COUNT_PRECISION)))
        start, stop = n - count, n
    elif regime is WindowRegime.START_ANCHORED:
        count = int(np.ceil(round(fraction * n, _COUNT_PRECISION)))
        start, stop = 0, count
    else:
        # Midpoint in 1-based counting; the half-width truncates, so even
        # sample counts lose the last sample even at fraction 1
        mid = int(np.ceil(n / 2))
        half = int(round(fraction * (mid - 1), _COUNT_PRECISION))
        start, stop = mid - half - 1, mid + half

    if stop - start < _MIN_WINDOW:
        if start + _MIN_WINDOW <= n:
            stop = start + _MIN_WINDOW
        else:
            start = stop - _MIN_WINDOW

    return start, stop


class TrajectoryInterpolator:
    """
    Derives amplitude-scaled sub-paths from a full reference path

    The selected window is shifted so its first sample is the new origin in
    time and group coordinates. Shape coordinates keep their absolute
    values since they are physical joint angles. Every channel is then
    resampled with a not-a-knot cubic spline onto a uniform time grid.
    """

    def __init__(self, discretization: int = 100):
        """
        Initialize interpolator

        Args:
            discretization: Number of samples in every resampled path
        """
        if discretization < _MIN_WINDOW:
            raise ConfigurationError(
                f"Discretization must be at least {_MIN_WINDOW}, got {discretization}"
            )
        self.discretization = int(discretization)

    def interpolate(
        self,
        full_path: OpenTrajectory,
        fraction: float,
        regime: WindowRegime
    ) -> OpenTrajectory:
        """
        Resample a fraction of the full path

        Args:
            full_path: The +100% or -100% reference trajectory
            fraction: Portion of the path in (0, 1]
            regime: Integration window regime of the reference point

        Returns:
            OpenTrajectory with exactly `discretization` samples
        """
        start, stop = select_window(len(full_path), fraction, regime)

        window = full_path.as_array()[start:stop]
        window[:, :4] -= window[0, :4]  # t, x, y, theta

        grid = np.linspace(0.0, window[-1, 0], self.discretization)
        spline = CubicSpline(window[:, 0], window[:, 1:], axis=0)

        return OpenTrajectory.from_array(np.column_stack([grid, spline(grid)]))
