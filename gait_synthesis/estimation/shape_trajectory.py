#!/usr/bin/env python3
"""
Leg Shape Trajectories
Shape values and rates per leg from time series, pure sinusoid fits,
or the no-slip condition of a contact submanifold
"""

import numpy as np
from dataclasses import dataclass
from scipy.integrate import solve_ivp
from typing import Callable, Sequence, Tuple

from ..errors import (
    IntegrationError,
    InvalidInputError,
    LengthMismatchError,
    ShapeFormatError
)


# Sinusoid fit: scale * amplitude * cos(2*pi*frequency*(t - phase)) + offset
SINUSOID_PARAMETERS = ('scale', 'amplitude', 'frequency', 'phase', 'offset')


@dataclass
class ShapeTrajectory:
    """Shape value and rate per leg on a common time base"""
    t: np.ndarray           # (n,)
    position: np.ndarray    # (num_legs, n)
    rate: np.ndarray        # (num_legs, n)

    @property
    def num_legs(self) -> int:
        return self.position.shape[0]


def _check_time(t) -> np.ndarray:
    t = np.asarray(t, dtype=float)
    if t.ndim != 1 or t.size < 2:
        raise InvalidInputError("Time vector must be 1-D with at least two samples")
    if np.any(np.diff(t) <= 0):
        raise InvalidInputError("Time vector must be strictly increasing")
    return t


def _sinusoid(params: Sequence[float], leg: int) -> Tuple[float, ...]:
    params = tuple(np.ravel(np.asarray(params, dtype=float)))
    if len(params) != len(SINUSOID_PARAMETERS):
        raise ShapeFormatError(
            f"Sinusoid of leg {leg} needs {len(SINUSOID_PARAMETERS)} parameters "
            f"{SINUSOID_PARAMETERS}, got {len(params)}"
        )
    return params


def sinusoid_value(t: np.ndarray, params: Sequence[float]) -> np.ndarray:
    """Evaluate a pure sinusoid fit at times t"""
    scale, amplitude, frequency, phase, offset = _sinusoid(params, leg=1)
    return scale * amplitude * np.cos(2 * np.pi * frequency * (t - phase)) + offset


def sinusoid_rate(t: np.ndarray, params: Sequence[float]) -> np.ndarray:
    """Time derivative of a pure sinusoid fit at times t"""
    scale, amplitude, frequency, phase, _ = _sinusoid(params, leg=1)
    w = 2 * np.pi * frequency
    return -scale * amplitude * w * np.sin(w * (t - phase))


def shape_from_series(
    t: np.ndarray,
    position: Sequence,
    rate: Sequence
) -> ShapeTrajectory:
    """
    Shape trajectory from literal per-leg time series

    Args:
        t: (n,) time vector
        position: Per-leg shape values, each of length n
        rate: Per-leg shape rates, each of length n

    Returns:
        ShapeTrajectory
    """
    t = _check_time(t)

    if len(position) != len(rate):
        raise ShapeFormatError(
            f"Shape values cover {len(position)} legs but rates cover {len(rate)}"
        )
    if len(position) == 0:
        raise ShapeFormatError("Shape trajectory must cover at least one leg")

    for channel, series in (('shape', position), ('shape rate', rate)):
        for leg, values in enumerate(series, start=1):
            size = np.size(values)
            if size != t.size:
                raise LengthMismatchError(
                    f"The {channel} of leg {leg} has {size} samples, "
                    f"the time vector has {t.size}"
                )

    return ShapeTrajectory(
        t=t,
        position=np.vstack([np.ravel(np.asarray(r, dtype=float)) for r in position]),
        rate=np.vstack([np.ravel(np.asarray(r, dtype=float)) for r in rate])
    )


def shape_from_sinusoids(t: np.ndarray, sinusoids: Sequence) -> ShapeTrajectory:
    """
    Shape trajectory generated from per-leg sinusoid fits

    Args:
        t: (n,) time vector
        sinusoids: Per-leg parameter 5-tuples, see SINUSOID_PARAMETERS

    Returns:
        ShapeTrajectory
    """
    t = _check_time(t)

    if len(sinusoids) == 0:
        raise ShapeFormatError("Shape trajectory must cover at least one leg")

    params = [_sinusoid(p, leg) for leg, p in enumerate(sinusoids, start=1)]

    return ShapeTrajectory(
        t=t,
        position=np.vstack([sinusoid_value(t, p) for p in params]),
        rate=np.vstack([sinusoid_rate(t, p) for p in params])
    )


def compute_noslip_trajectory(
    t: np.ndarray,
    sinusoid: Sequence[float],
    dpsi: Callable,
    initial_value: float,
    geometry
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Second shape variable that keeps a contact pair from slipping

    The first shape variable follows a sinusoid; the second is integrated
    along the no-slip direction dpsi(geometry, [r_in, r_out]) so that

        r_out' = dpsi[1] / dpsi[0] * r_in'

    Args:
        t: (n,) time vector
        sinusoid: Sinusoid parameters of the first shape variable
        dpsi: No-slip direction field on the shape slice
        initial_value: Second shape variable at t[0]
        geometry: Robot geometry passed to dpsi

    Returns:
        Tuple of (r_out, r_out_dot), each (n,)
    """
    t = _check_time(t)
    params = _sinusoid(sinusoid, leg=1)
    t0 = t[0]

    def slope(r_in, r_out):
        d = np.asarray(dpsi(geometry, np.array([r_in, r_out])), dtype=float).reshape(2)
        return d[1] / d[0]

    def rhs(tau, x):
        tq = tau + t0
        dx = slope(sinusoid_value(tq, params), x[0]) * sinusoid_rate(tq, params)
        if not np.isfinite(dx):
            raise IntegrationError("No-slip direction is not finite", leg="noslip")
        return [dx]

    sol = solve_ivp(rhs, (0.0, t[-1] - t0), [float(initial_value)], t_eval=t - t0,
                    rtol=1e-8, atol=1e-10)
    if not sol.success:
        raise IntegrationError(f"Integrator did not converge: {sol.message}", leg="noslip")

    r_out = sol.y[0]
    r_in = sinusoid_value(t, params)
    r_in_dot = sinusoid_rate(t, params)
    r_out_dot = np.array([
        slope(a, b) * rate for a, b, rate in zip(r_in, r_out, r_in_dot)
    ])

    return r_out, r_out_dot
