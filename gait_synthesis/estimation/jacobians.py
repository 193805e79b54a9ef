#!/usr/bin/env python3
"""
Full-body Jacobian assembly for a single leg
"""

import numpy as np

from ..errors import InvalidInputError


def compose_leg_jacobian(
    body_jacobian: np.ndarray,
    hip_jacobian: np.ndarray,
    leg: int,
    num_legs: int = 4
) -> np.ndarray:
    """
    Place one leg's hip Jacobian next to the body Jacobian

    Args:
        body_jacobian: (6, 6) SE(3) body Jacobian of the leg
        hip_jacobian: (6, 2) Jacobian of the leg's two hip joints
        leg: Leg number, 1..num_legs
        num_legs: Number of legs on the robot

    Returns:
        (6, 6 + 2 * num_legs) Jacobian with zeros for the other legs
    """
    J_b = np.asarray(body_jacobian, dtype=float)
    J_h = np.asarray(hip_jacobian, dtype=float)

    if not 1 <= leg <= num_legs:
        raise InvalidInputError(f"Leg number must be in 1..{num_legs}, got {leg}")
    if J_b.shape != (6, 6):
        raise InvalidInputError(
            f"The body jacobian of leg {leg} must be 6x6, got {J_b.shape}"
        )
    if J_h.shape != (6, 2):
        raise InvalidInputError(
            f"The hip jacobian of leg {leg} must be 6x2, got {J_h.shape}"
        )

    return np.hstack([
        J_b,
        np.zeros((6, 2 * (leg - 1))),
        J_h,
        np.zeros((6, 2 * (num_legs - leg)))
    ])
