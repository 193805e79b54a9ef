#!/usr/bin/env python3
"""
SE(2) Body Velocity Estimation
Reconstructs the planar body trajectory of a quadruped from leg shape
trajectories and the contact state sequence

The body velocity in the active contact state is J_c(r) @ r_dot, where
J_c is the kinematic Jacobian of the legs in contact. Integrating its
world-frame counterpart from an initial pose yields the body trajectory.
"""

import logging
import numpy as np
from dataclasses import dataclass
from scipy.integrate import solve_ivp
from scipy.interpolate import interp1d
from typing import Callable, Dict, Optional, Sequence

from ..errors import (
    ConfigurationError,
    GaitSynthesisError,
    IntegrationError,
    InvalidInputError,
    LengthMismatchError,
    ShapeFormatError
)
from ..utils.config import EstimatorConfig
from ..utils.math_utils import rotation_matrix_2d
from ..utils.robot_model import RobotGeometry, CONTACT_STATES
from .contact_estimator import ContactEstimator
from .shape_trajectory import ShapeTrajectory, shape_from_series, shape_from_sinusoids

logger = logging.getLogger(__name__)


def to_internal_frame(v: np.ndarray) -> np.ndarray:
    """Caller (x, y, theta) -> estimator (-y, x, theta)"""
    v = np.asarray(v, dtype=float)
    return np.stack([-v[..., 1], v[..., 0], v[..., 2]], axis=-1)


def to_caller_frame(v: np.ndarray) -> np.ndarray:
    """Estimator (x, y, theta) -> caller (y, -x, theta)"""
    v = np.asarray(v, dtype=float)
    return np.stack([v[..., 1], -v[..., 0], v[..., 2]], axis=-1)


@dataclass
class BodyTrajectory:
    """Estimated planar body motion, in the caller's axis convention"""
    t: np.ndarray           # (n,) time from the first sample
    x: np.ndarray           # (n,)
    y: np.ndarray           # (n,)
    theta: np.ndarray       # (n,)
    velocity: np.ndarray    # (n, 3) body velocity [vx, vy, omega]

    def __len__(self) -> int:
        return self.t.size

    @property
    def pose(self) -> np.ndarray:
        """(n, 3) poses [x, y, theta]"""
        return np.column_stack([self.x, self.y, self.theta])

    def as_array(self) -> np.ndarray:
        """(n, 4) array [t, x, y, theta]"""
        return np.column_stack([self.t, self.x, self.y, self.theta])


class BodyVelocityEstimator:
    """
    Body trajectory from shape and contact time series

    Shape values and rates are interpolated at every solver query time;
    the contact state is taken from the nearest contact sample and selects
    which Jacobian drives the body. Contact states without a Jacobian
    (flight, single or triple support) produce no body velocity.
    """

    def __init__(
        self,
        geometry: RobotGeometry,
        jacobians: Dict[int, Callable],
        config: EstimatorConfig = None
    ):
        """
        Initialize estimator

        Args:
            geometry: Robot link parameters passed to every Jacobian
            jacobians: Contact state index (1..6) -> J(geometry, shape),
                returning a (3, num_legs) matrix in the estimator frame
            config: Estimator configuration
        """
        self.geometry = geometry
        self.config = config or EstimatorConfig()

        for state, jac in jacobians.items():
            if not 1 <= state <= len(CONTACT_STATES):
                raise ConfigurationError(
                    f"Jacobian keyed by unknown contact state {state}; "
                    f"valid states are 1..{len(CONTACT_STATES)}"
                )
            if not callable(jac):
                raise ConfigurationError(f"Jacobian of contact state {state} must be callable")
        self.jacobians = dict(jacobians)

        self.contact_estimator = ContactEstimator(self.config.height_threshold)

    def estimate(
        self,
        t: np.ndarray,
        initial_pose: Sequence[float],
        shape: Optional[Sequence] = None,
        shape_rate: Optional[Sequence] = None,
        sinusoids: Optional[Sequence] = None,
        contact: Optional[Sequence] = None,
        foot_height: Optional[Sequence] = None,
        contact_time: Optional[np.ndarray] = None
    ) -> BodyTrajectory:
        """
        Integrate the body velocity over the time vector

        Args:
            t: (n,) query times
            initial_pose: Body pose [x, y, theta] at t[0]
            shape: Per-leg shape values, each (n,); requires shape_rate
            shape_rate: Per-leg shape rates, each (n,)
            sinusoids: Per-leg sinusoid fits instead of shape/shape_rate
            contact: Per-leg binary contact indicator on contact_time
            foot_height: Per-leg foot heights on contact_time, thresholded
                with config.height_threshold instead of contact
            contact_time: Time base of the contact data (defaults to t)

        Returns:
            BodyTrajectory with one sample per query time
        """
        shapes = self._resolve_shape(t, shape, shape_rate, sinusoids)
        t = shapes.t
        indicator = self._resolve_contact(contact, foot_height)

        contact_time = t if contact_time is None else np.asarray(contact_time, dtype=float)
        if contact_time.ndim != 1 or contact_time.size != indicator.shape[1]:
            raise LengthMismatchError(
                f"Contact data has {indicator.shape[1]} samples, "
                f"its time vector has {np.size(contact_time)}"
            )
        if indicator.shape[0] != shapes.num_legs:
            raise ShapeFormatError(
                f"Contact data covers {indicator.shape[0]} legs, "
                f"shape data covers {shapes.num_legs}"
            )

        states = ContactEstimator.state_sequence(indicator)
        for state in np.unique(states):
            if state not in self.jacobians:
                logger.warning(
                    "No Jacobian for contact state %d; body velocity is zero there", state
                )

        pose0 = np.asarray(initial_pose, dtype=float)
        if pose0.shape != (3,):
            raise InvalidInputError("Initial pose must be [x, y, theta]")

        t0 = t[0]
        t_hat = t - t0

        kind = self.config.shape_interpolation
        shape_at = interp1d(t_hat, shapes.position, kind=kind, axis=1,
                            fill_value="extrapolate", assume_sorted=True)
        rate_at = interp1d(t_hat, shapes.rate, kind=kind, axis=1,
                           fill_value="extrapolate", assume_sorted=True)
        state_at = interp1d(contact_time - t0, states, kind="nearest",
                            bounds_error=False, fill_value=(states[0], states[-1]),
                            assume_sorted=True)

        def body_velocity(tq: float) -> np.ndarray:
            return self._body_velocity(
                int(round(float(state_at(tq)))), shape_at(tq), rate_at(tq)
            )

        def rhs(tq, pose):
            xi = body_velocity(tq)
            dpose = np.empty(3)
            dpose[0:2] = rotation_matrix_2d(pose[2]) @ xi[0:2]
            dpose[2] = xi[2]
            if not np.all(np.isfinite(dpose)):
                raise IntegrationError(f"Body velocity is not finite at t={tq:.4f}", leg="body")
            return dpose

        logger.debug(
            "Integrating body velocity over %.4f with %d samples", t_hat[-1], t_hat.size
        )

        try:
            sol = solve_ivp(
                rhs,
                (0.0, t_hat[-1]),
                to_internal_frame(pose0),
                method=self.config.method,
                t_eval=t_hat,
                rtol=self.config.rtol,
                atol=self.config.atol,
                max_step=self.config.max_step
            )
        except GaitSynthesisError:
            raise
        except Exception as e:
            raise IntegrationError(f"Jacobian evaluation failed: {e}", leg="body") from e

        if not sol.success:
            raise IntegrationError(f"Integrator did not converge: {sol.message}", leg="body")

        pose = to_caller_frame(sol.y.T)
        velocity = to_caller_frame(np.array([body_velocity(tq) for tq in t_hat]))

        return BodyTrajectory(
            t=t_hat,
            x=pose[:, 0],
            y=pose[:, 1],
            theta=pose[:, 2],
            velocity=velocity
        )

    def _resolve_shape(self, t, shape, shape_rate, sinusoids) -> ShapeTrajectory:
        """Shape trajectory from exactly one of the accepted input forms"""
        literal = shape is not None or shape_rate is not None
        if literal and sinusoids is not None:
            raise ShapeFormatError("Give either shape time series or sinusoid fits, not both")
        if sinusoids is not None:
            return shape_from_sinusoids(t, sinusoids)
        if shape is None or shape_rate is None:
            raise ShapeFormatError(
                "Shape time series need both values and rates (or give sinusoid fits)"
            )
        return shape_from_series(t, shape, shape_rate)

    def _resolve_contact(self, contact, foot_height) -> np.ndarray:
        """Contact indicator from exactly one of the accepted input forms"""
        if (contact is None) == (foot_height is None):
            raise ConfigurationError("Give exactly one of a contact indicator or foot heights")
        if contact is not None:
            return self.contact_estimator.from_indicator(contact)
        return self.contact_estimator.from_foot_height(foot_height)

    def _body_velocity(self, state: int, shape: np.ndarray, rate: np.ndarray) -> np.ndarray:
        """Body velocity in the estimator frame for one contact state"""
        jac = self.jacobians.get(state)
        if jac is None:
            return np.zeros(3)

        J = np.asarray(jac(self.geometry, shape), dtype=float)
        if J.shape != (3, rate.size):
            raise InvalidInputError(
                f"Jacobian of contact state {state} must be 3x{rate.size}, got {J.shape}"
            )
        return J @ rate
