#!/usr/bin/env python3
"""
Mathematical utilities for planar locomotion
SE(2) rotations, the closed-form exponential map, and displacement limits
"""

import numpy as np
from typing import Tuple

from ..errors import InvalidInputError


_VELOCITY_ERROR = (
    "Body velocity must be numeric with 3 columns of x, y, and theta "
    "velocity (at least one sample)"
)


def rotation_matrix_2d(angle: float) -> np.ndarray:
    """Planar rotation matrix"""
    c, s = np.cos(angle), np.sin(angle)
    return np.array([
        [c, -s],
        [s, c]
    ])


def _as_velocity_rows(body_velocity) -> Tuple[np.ndarray, bool]:
    """Validate a body velocity sample or batch and return it as rows"""
    xi = np.asarray(body_velocity)

    # object arrays (symbolic input), strings and booleans are all rejected
    if xi.dtype.kind not in 'iuf':
        raise InvalidInputError(_VELOCITY_ERROR)
    if xi.size == 0:
        raise InvalidInputError(_VELOCITY_ERROR)

    if xi.ndim == 1:
        if xi.size != 3:
            raise InvalidInputError(_VELOCITY_ERROR)
        return xi.reshape(1, 3).astype(float), True

    if xi.ndim != 2:
        raise InvalidInputError(_VELOCITY_ERROR)

    if xi.shape[1] != 3:
        if xi.size != 3:
            raise InvalidInputError(_VELOCITY_ERROR)
        return xi.reshape(1, 3).astype(float), True  # 3x1 column

    return xi.astype(float), False


def planar_exponential(body_velocity) -> np.ndarray:
    """
    Exponential map of se(2) for one body velocity or a batch of them

    For zero angular velocity the displacement is the translational
    velocity itself. Otherwise the translation is carried along the arc of
    radius |v| / omega:

        [dx, dy] = [[sin w, cos w - 1], [1 - cos w, sin w]] / w @ [vx, vy]

    Args:
        body_velocity: (3,) sample [vx, vy, omega] or (n, 3) batch

    Returns:
        Displacement [dx, dy, dtheta] with the same layout as the input
        ((3,) for a single vector, (n, 3) otherwise)
    """
    xi, single = _as_velocity_rows(body_velocity)

    g = np.empty_like(xi)
    g[:, 2] = xi[:, 2]

    # Rows without rotation must never reach the 1/omega perturbation
    rotating = xi[:, 2] != 0
    g[~rotating, :2] = xi[~rotating, :2]

    if np.any(rotating):
        w = xi[rotating, 2]
        vx = xi[rotating, 0]
        vy = xi[rotating, 1]
        s, c = np.sin(w), np.cos(w)
        g[rotating, 0] = (s * vx + (c - 1.0) * vy) / w
        g[rotating, 1] = ((1.0 - c) * vx + s * vy) / w

    if single:
        return g[0]
    return g


def compose_body_displacements(
    t: np.ndarray,
    body_velocity: np.ndarray,
    initial_pose: np.ndarray = None
) -> np.ndarray:
    """
    Reconstruct world poses from sampled body velocities

    Each step right-composes exp(xi_k * dt_k) onto the current pose, so the
    body follows exact arcs between samples.

    Args:
        t: (n,) sample times
        body_velocity: (n, 3) body velocities [vx, vy, omega]
        initial_pose: Starting pose [x, y, theta] (origin if None)

    Returns:
        (n, 3) poses [x, y, theta]
    """
    t = np.asarray(t, dtype=float)
    xi = np.atleast_2d(np.asarray(body_velocity, dtype=float))

    if xi.shape[0] != t.size:
        raise InvalidInputError(
            f"Expected {t.size} body velocity samples, got {xi.shape[0]}"
        )

    poses = np.zeros((t.size, 3))
    if initial_pose is not None:
        poses[0] = np.asarray(initial_pose, dtype=float)

    if t.size < 2:
        return poses

    steps = planar_exponential(xi[:-1] * np.diff(t)[:, None])

    for k in range(t.size - 1):
        R = rotation_matrix_2d(poses[k, 2])
        poses[k + 1, :2] = poses[k, :2] + R @ steps[k, :2]
        poses[k + 1, 2] = poses[k, 2] + steps[k, 2]

    return poses


def se2_limits(
    x: np.ndarray,
    y: np.ndarray,
    theta: np.ndarray
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Shared translation limits and rotation limits of SE(2) sweeps

    Args:
        x, y, theta: Arrays of any shape holding displacement sweeps

    Returns:
        Tuple of (translation_limits, rotation_limits), each [min, max];
        the translation limits cover both x and y
    """
    xy = np.concatenate([np.ravel(x), np.ravel(y)])
    theta = np.ravel(theta)
    translation = np.array([np.min(xy), np.max(xy)])
    rotation = np.array([np.min(theta), np.max(theta)])
    return translation, rotation
