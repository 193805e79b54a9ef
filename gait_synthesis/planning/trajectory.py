#!/usr/bin/env python3
"""
Configuration trajectories on a shape-space slice
Integration windows, open trajectories, and closed (periodic) trajectories
"""

import numpy as np
from dataclasses import dataclass
from enum import Enum

from ..errors import InvalidInputError, InvalidWindowError


# Sample layout shared by every trajectory: time, group, then shape
CHANNELS = ('t', 'x', 'y', 'theta', 'alpha_i', 'alpha_j')


class WindowRegime(Enum):
    """Where the reference point sits on the integrated path"""
    INTERIOR = 0           # strictly inside the path
    START_ANCHORED = 1     # at the start, forward integration only
    END_ANCHORED = -1      # at the end, backward integration only


@dataclass(frozen=True)
class IntegrationWindow:
    """Backward and forward integration times around the reference point"""
    t_back: float
    t_fwd: float

    def __post_init__(self):
        for name in ('t_back', 't_fwd'):
            value = getattr(self, name)
            if not np.isfinite(value) or value < 0:
                raise InvalidWindowError(
                    f"Integration time '{name}' must be finite and non-negative, got {value}"
                )
        if self.t_back == 0 and self.t_fwd == 0:
            raise InvalidWindowError(
                "The integration time in both directions can't be zero"
            )

    @property
    def regime(self) -> WindowRegime:
        if self.t_back == 0:
            return WindowRegime.START_ANCHORED
        if self.t_fwd == 0:
            return WindowRegime.END_ANCHORED
        return WindowRegime.INTERIOR

    @property
    def needs_backward_leg(self) -> bool:
        return self.regime is not WindowRegime.START_ANCHORED

    @property
    def forward_time(self) -> float:
        """Duration of the forward integration that produces the full path"""
        regime = self.regime
        if regime is WindowRegime.START_ANCHORED:
            return float(self.t_fwd)
        if regime is WindowRegime.END_ANCHORED:
            return float(self.t_back)
        return float(self.t_back + self.t_fwd)


@dataclass(frozen=True, eq=False)
class OpenTrajectory:
    """
    Sampled configuration trajectory (t, x, y, theta, alpha_i, alpha_j)

    Group coordinates hold the displacement accumulated from the first
    sample, not an absolute pose. Arrays are copied on construction and
    made read-only, so derived trajectories never alias each other.
    """
    t: np.ndarray
    x: np.ndarray
    y: np.ndarray
    theta: np.ndarray
    alpha_i: np.ndarray
    alpha_j: np.ndarray

    def __post_init__(self):
        n = None
        for name in CHANNELS:
            value = np.array(getattr(self, name), dtype=float)
            if value.ndim != 1:
                raise InvalidInputError(f"Trajectory channel '{name}' must be 1-D")
            if n is None:
                n = value.size
            elif value.size != n:
                raise InvalidInputError(
                    f"Trajectory channel '{name}' has {value.size} samples, expected {n}"
                )
            value.setflags(write=False)
            object.__setattr__(self, name, value)

        if n == 0:
            raise InvalidInputError("Trajectory must contain at least one sample")
        if np.any(np.diff(self.t) <= 0):
            raise InvalidInputError("Trajectory time must be strictly increasing")

    @classmethod
    def from_array(cls, samples: np.ndarray, **kwargs):
        """Build from an (n, 6) array in CHANNELS order"""
        samples = np.asarray(samples, dtype=float)
        if samples.ndim != 2 or samples.shape[1] != len(CHANNELS):
            raise InvalidInputError(
                f"Trajectory array must have shape (n, {len(CHANNELS)})"
            )
        return cls(*samples.T, **kwargs)

    def __len__(self) -> int:
        return self.t.size

    def as_array(self) -> np.ndarray:
        """(n, 6) array of samples in CHANNELS order"""
        return np.column_stack([getattr(self, name) for name in CHANNELS])

    @property
    def group(self) -> np.ndarray:
        """(n, 3) group coordinates [x, y, theta]"""
        return np.column_stack([self.x, self.y, self.theta])

    @property
    def shape(self) -> np.ndarray:
        """(n, 2) shape coordinates [alpha_i, alpha_j]"""
        return np.column_stack([self.alpha_i, self.alpha_j])

    @property
    def net_displacement(self) -> np.ndarray:
        """Group displacement [x, y, theta] at the last sample"""
        return np.array([self.x[-1], self.y[-1], self.theta[-1]])

    @property
    def path_length(self) -> float:
        # The constraint field has unit magnitude, so arc length is final time
        return float(self.t[-1])

    @property
    def initial_condition(self) -> np.ndarray:
        return np.array([self.alpha_i[0], self.alpha_j[0]])

    @property
    def final_condition(self) -> np.ndarray:
        return np.array([self.alpha_i[-1], self.alpha_j[-1]])

    def reflected(self) -> 'OpenTrajectory':
        """
        Same geometric path traversed backward from the opposite end

        Group coordinates are reflected about the terminal displacement and
        every channel except time is reversed in order.
        """
        return OpenTrajectory(
            t=self.t,
            x=(self.x - self.x[-1])[::-1],
            y=(self.y - self.y[-1])[::-1],
            theta=(self.theta - self.theta[-1])[::-1],
            alpha_i=self.alpha_i[::-1],
            alpha_j=self.alpha_j[::-1]
        )


@dataclass(frozen=True, eq=False)
class ClosedTrajectory(OpenTrajectory):
    """
    Open trajectory followed by a deadband return through the nullspace

    The first `num_active` samples are the open (propulsive) trajectory;
    the rest hold the group coordinates and return the shape to its start.
    """
    num_active: int = 0

    def __post_init__(self):
        super().__post_init__()
        if not 0 < self.num_active <= len(self):
            raise InvalidInputError(
                f"Active sample count {self.num_active} outside 1..{len(self)}"
            )

    @property
    def num_deadband(self) -> int:
        return len(self) - self.num_active

    @property
    def active(self) -> OpenTrajectory:
        """The propulsive part of the cycle"""
        return OpenTrajectory.from_array(self.as_array()[:self.num_active])
