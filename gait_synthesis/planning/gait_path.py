#!/usr/bin/env python3
"""
Gait Paths on Level-2 Contact Submanifolds
Integrates a gait-constraint vector field into a family of scaled,
closed gait trajectories for a rigid quadruped
"""

import logging
import numpy as np
from dataclasses import dataclass
from scipy.integrate import solve_ivp
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from ..errors import ConfigurationError, GaitSynthesisError, IntegrationError
from ..utils.config import PathConfig
from ..utils.math_utils import rotation_matrix_2d, se2_limits
from ..utils.robot_model import RobotGeometry, CONTACT_STATES
from .closure import TrajectoryCloser
from .interpolation import TrajectoryInterpolator
from .trajectory import (
    ClosedTrajectory,
    IntegrationWindow,
    OpenTrajectory,
    WindowRegime
)

logger = logging.getLogger(__name__)


# Signed percentages of the full path stored for every gait path
PERCENTAGES = tuple(range(-100, 0, 10)) + tuple(range(10, 101, 10))


@dataclass(frozen=True)
class GaitConstraintField:
    """
    Gait-constraint vector field on a shape-space slice

    Both callables take (geometry, shape) where shape = [alpha_i, alpha_j]:
        dphi -> shape velocity (2,)
        dz   -> group velocity in the body frame (3,)
    """
    dphi: Callable
    dz: Callable

    def __post_init__(self):
        if not callable(self.dphi) or not callable(self.dz):
            raise ConfigurationError("Constraint field components must be callable")

    def shape_velocity(self, geometry: RobotGeometry, shape: np.ndarray) -> np.ndarray:
        return np.asarray(self.dphi(geometry, shape), dtype=float).reshape(2)

    def group_velocity(self, geometry: RobotGeometry, shape: np.ndarray) -> np.ndarray:
        return np.asarray(self.dz(geometry, shape), dtype=float).reshape(3)


@dataclass
class ScaledPath:
    """One signed percentage of a gait path"""
    percentage: int
    open_trajectory: OpenTrajectory
    closed_trajectory: ClosedTrajectory
    path_length: float
    net_displacement: np.ndarray    # [x, y, theta] at the end of the open path
    initial_condition: np.ndarray   # shape at the first sample
    final_condition: np.ndarray     # shape at the last sample

    @classmethod
    def build(
        cls,
        percentage: int,
        open_trajectory: OpenTrajectory,
        closer: TrajectoryCloser
    ) -> 'ScaledPath':
        return cls(
            percentage=percentage,
            open_trajectory=open_trajectory,
            closed_trajectory=closer.close(open_trajectory),
            path_length=open_trajectory.path_length,
            net_displacement=open_trajectory.net_displacement,
            initial_condition=open_trajectory.initial_condition,
            final_condition=open_trajectory.final_condition
        )


class ScaledTrajectoryFamily:
    """Scaled paths keyed by signed percentage (-100..-10, 10..100)"""

    def __init__(self, paths: Dict[int, ScaledPath]):
        missing = set(PERCENTAGES) - set(paths)
        if missing:
            raise ConfigurationError(f"Missing scaled paths: {sorted(missing)}")
        self._paths = {p: paths[p] for p in PERCENTAGES}

    def __getitem__(self, percentage: int) -> ScaledPath:
        if percentage not in self._paths:
            raise KeyError(
                f"No scaled path for {percentage}%; valid percentages are {PERCENTAGES}"
            )
        return self._paths[percentage]

    def __contains__(self, percentage) -> bool:
        return percentage in self._paths

    def __iter__(self) -> Iterator[int]:
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    @property
    def percentages(self) -> Tuple[int, ...]:
        return PERCENTAGES

    def net_displacements(self) -> np.ndarray:
        """(20, 3) net displacements in percentage order"""
        return np.array([self._paths[p].net_displacement for p in PERCENTAGES])

    def displacement_limits(self) -> Tuple[np.ndarray, np.ndarray]:
        """Translation and rotation limits over every scaled path"""
        disp = self.net_displacements()
        return se2_limits(disp[:, 0], disp[:, 1], disp[:, 2])


class GaitPath:
    """
    Gait path on one level-2 contact submanifold

    The gait-constraint field is integrated from a reference point on the
    shape-space slice: backward over t_back to find the start of the path,
    then forward over the whole path with the group coordinates reset to
    zero. The +100% path, its reflection (-100%), and 10% steps in between
    are stored together with their closed counterparts.

    The integration window regime is resolved at construction; a window
    with both times zero never produces a GaitPath.
    """

    def __init__(
        self,
        geometry: RobotGeometry,
        field: GaitConstraintField,
        point_of_interest,
        window,
        duty_cycle: Optional[float] = None,
        active_state: int = 1,
        direction: float = 1.0,
        config: PathConfig = None
    ):
        """
        Initialize gait path

        Args:
            geometry: Robot link parameters passed to the field
            field: Gait-constraint vector field
            point_of_interest: Reference shape [alpha_i, alpha_j]
            window: IntegrationWindow or (t_back, t_fwd)
            duty_cycle: Deadband fraction in [0, 1] (config default if None)
            active_state: Contact state index 1..6 the path belongs to
            direction: Integration direction scaling in [-1, 1]
            config: Path configuration
        """
        self.config = config or PathConfig()
        self.geometry = geometry
        self.field = field

        poi = np.asarray(point_of_interest, dtype=float)
        if poi.shape != (2,) or not np.all(np.isfinite(poi)):
            raise ConfigurationError(
                "Point of interest must be a finite shape-space point [alpha_i, alpha_j]"
            )
        self.point_of_interest = poi

        if not isinstance(window, IntegrationWindow):
            window = IntegrationWindow(*window)
        self.window = window
        self.regime = window.regime

        if duty_cycle is None:
            duty_cycle = self.config.duty_cycle
        self.closer = TrajectoryCloser(duty_cycle)

        if not 1 <= active_state <= len(CONTACT_STATES):
            raise ConfigurationError(
                f"Active contact state must be in 1..{len(CONTACT_STATES)}, got {active_state}"
            )
        self.active_state = int(active_state)

        if not -1.0 <= direction <= 1.0:
            raise ConfigurationError(f"Integration direction must lie in [-1, 1], got {direction}")
        self.direction = float(direction)

        # Populated by compute_trajectory()
        self.family: Optional[ScaledTrajectoryFamily] = None
        self.discretization: Optional[int] = None

    @property
    def duty_cycle(self) -> float:
        return self.closer.duty_cycle

    @property
    def contact_legs(self) -> Tuple[int, int]:
        """Legs in contact for the active state"""
        return CONTACT_STATES[self.active_state - 1]

    def compute_trajectory(self, discretization: Optional[int] = None) -> ScaledTrajectoryFamily:
        """
        Integrate the field and build every scaled, closed path

        Args:
            discretization: Samples per open trajectory (config default if None)

        Returns:
            The populated ScaledTrajectoryFamily (also stored on self.family)
        """
        n = self.config.discretization if discretization is None else int(discretization)
        if n < 2:
            raise ConfigurationError(f"Path discretization must be at least 2, got {n}")

        regime = self.regime
        start_shape = self.point_of_interest

        if self.window.needs_backward_leg:
            _, qb = self._integrate(
                self._backward_field,
                self.window.t_back,
                start_shape,
                n,
                leg="backward"
            )
            start_shape = qb[:, -1]

        tf, qf = self._integrate(
            self._configuration_field,
            self.window.forward_time,
            np.concatenate([np.zeros(3), start_shape]),
            n,
            leg="forward"
        )

        full = OpenTrajectory(tf, *qf)
        mirrored = full.reflected()

        paths = {
            100: ScaledPath.build(100, full, self.closer),
            -100: ScaledPath.build(-100, mirrored, self.closer)
        }

        interpolator = TrajectoryInterpolator(n)
        for step in range(1, 10):
            fraction = step / 10
            for sign, reference in ((1, full), (-1, mirrored)):
                percentage = sign * 10 * step
                try:
                    scaled = interpolator.interpolate(reference, fraction, regime)
                except ValueError as e:
                    raise IntegrationError(
                        f"Resampling the {percentage}% path failed: {e}",
                        leg="interpolation",
                        regime=regime.name.lower()
                    ) from e
                paths[percentage] = ScaledPath.build(percentage, scaled, self.closer)

        self.family = ScaledTrajectoryFamily(paths)
        self.discretization = n

        logger.info(
            "Computed gait path for contact state %d (%s regime): "
            "path length %.4f, net displacement %s",
            self.active_state, regime.name.lower(),
            full.path_length, np.round(full.net_displacement, 6)
        )

        return self.family

    def _backward_field(self, t: float, shape: np.ndarray) -> np.ndarray:
        return -self.direction * self.field.shape_velocity(self.geometry, shape)

    def _configuration_field(self, t: float, q: np.ndarray) -> np.ndarray:
        """Full field [R(theta) dz; dphi] in (x, y, theta, alpha_i, alpha_j)"""
        shape = q[3:5]
        dz = self.field.group_velocity(self.geometry, shape)
        dq = np.empty(5)
        dq[0:2] = rotation_matrix_2d(q[2]) @ dz[0:2]
        dq[2] = dz[2]
        dq[3:5] = self.field.shape_velocity(self.geometry, shape)
        return self.direction * dq

    def _integrate(
        self,
        rhs: Callable,
        duration: float,
        y0: np.ndarray,
        num: int,
        leg: str
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Integrate one leg and sample it uniformly on [0, duration]"""
        regime = self.regime.name.lower()
        t_eval = np.linspace(0.0, duration, num)

        def checked_rhs(t, y):
            dy = rhs(t, y)
            if not np.all(np.isfinite(dy)):
                raise IntegrationError(
                    f"Constraint field is not finite at shape {y[-2:]}", leg, regime
                )
            return dy

        logger.debug("Integrating %s leg over %.4f (%s regime)", leg, duration, regime)

        try:
            sol = solve_ivp(
                checked_rhs,
                (0.0, duration),
                np.asarray(y0, dtype=float),
                method=self.config.method,
                t_eval=t_eval,
                rtol=self.config.rtol,
                atol=self.config.atol,
                max_step=self.config.max_step
            )
        except GaitSynthesisError:
            raise
        except Exception as e:
            raise IntegrationError(f"Constraint field evaluation failed: {e}", leg, regime) from e

        if not sol.success:
            raise IntegrationError(f"Integrator did not converge: {sol.message}", leg, regime)
        if sol.y.shape[1] != num or not np.all(np.isfinite(sol.y)):
            raise IntegrationError("Integrator returned an incomplete solution", leg, regime)

        return sol.t, sol.y


class GaitPathRegistry:
    """
    Explicit collection of the gait paths built for one gait

    Replaces a process-wide instance counter: whoever owns the registry
    owns the count.
    """

    def __init__(self):
        self._paths: List[GaitPath] = []

    def create(self, *args, **kwargs) -> GaitPath:
        """Construct a GaitPath and register it"""
        path = GaitPath(*args, **kwargs)
        self._paths.append(path)
        return path

    def register(self, path: GaitPath) -> int:
        """Register an existing path; returns its index"""
        self._paths.append(path)
        return len(self._paths) - 1

    def compute_all(self, discretization: Optional[int] = None) -> List[ScaledTrajectoryFamily]:
        """Compute every registered path in registration order"""
        return [path.compute_trajectory(discretization) for path in self._paths]

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[GaitPath]:
        return iter(self._paths)

    def __getitem__(self, index: int) -> GaitPath:
        return self._paths[index]
