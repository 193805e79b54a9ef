#!/usr/bin/env python3
"""
Configuration for gait path synthesis and body motion estimation
Dataclass configs with YAML loading
"""

import numpy as np
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

from ..errors import ConfigurationError


# Integration methods accepted by scipy.integrate.solve_ivp
SOLVER_METHODS = ("RK45", "RK23", "DOP853", "Radau", "BDF", "LSODA")

# Interpolation kinds accepted by scipy.interpolate.interp1d
INTERPOLATION_KINDS = (
    "linear", "nearest", "nearest-up", "zero", "slinear",
    "quadratic", "cubic", "previous", "next"
)


def load_config(config_path: Union[str, Path]) -> dict:
    """Load configuration from YAML file"""
    with open(config_path, 'r') as f:
        cfg = yaml.safe_load(f)
    return cfg or {}


def _check_solver(method: str, rtol: float, atol: float):
    if method not in SOLVER_METHODS:
        raise ConfigurationError(f"Unknown integration method: {method}")
    if rtol <= 0 or atol <= 0:
        raise ConfigurationError("Solver tolerances must be positive")


@dataclass
class PathConfig:
    """Gait path integration and scaling parameters"""
    discretization: int = 100     # samples per open trajectory
    duty_cycle: float = 0.0       # fraction of the cycle spent in the deadband

    # Integrator
    method: str = "RK45"
    rtol: float = 1e-6
    atol: float = 1e-9
    max_step: float = np.inf

    def __post_init__(self):
        if self.discretization < 2:
            raise ConfigurationError(
                f"Path discretization must be at least 2, got {self.discretization}"
            )
        if not 0.0 <= self.duty_cycle <= 1.0:
            raise ConfigurationError(
                f"Duty cycle must lie in [0, 1], got {self.duty_cycle}"
            )
        _check_solver(self.method, self.rtol, self.atol)

    @classmethod
    def from_dict(cls, cfg: Dict) -> 'PathConfig':
        solver = cfg.get('solver', {})
        return cls(
            discretization=int(cfg.get('discretization', 100)),
            duty_cycle=float(cfg.get('duty_cycle', 0.0)),
            method=solver.get('method', "RK45"),
            rtol=float(solver.get('rtol', 1e-6)),
            atol=float(solver.get('atol', 1e-9)),
            max_step=float(solver.get('max_step', np.inf))
        )

    @classmethod
    def from_yaml(cls, filepath: Union[str, Path]) -> 'PathConfig':
        """Load the 'path' section of a YAML file"""
        return cls.from_dict(load_config(filepath).get('path', {}))


@dataclass
class EstimatorConfig:
    """Body velocity estimator parameters"""
    # Foot height below which a leg counts as in contact
    height_threshold: Optional[float] = None

    # interp1d kind used for shape values and rates between samples
    shape_interpolation: str = "linear"

    # Integrator
    method: str = "RK45"
    rtol: float = 1e-6
    atol: float = 1e-9
    max_step: float = np.inf

    def __post_init__(self):
        if self.shape_interpolation not in INTERPOLATION_KINDS:
            raise ConfigurationError(
                f"Unknown shape interpolation: {self.shape_interpolation}"
            )
        _check_solver(self.method, self.rtol, self.atol)

    @classmethod
    def from_dict(cls, cfg: Dict) -> 'EstimatorConfig':
        solver = cfg.get('solver', {})
        threshold = cfg.get('height_threshold')
        return cls(
            height_threshold=None if threshold is None else float(threshold),
            shape_interpolation=cfg.get('shape_interpolation', "linear"),
            method=solver.get('method', "RK45"),
            rtol=float(solver.get('rtol', 1e-6)),
            atol=float(solver.get('atol', 1e-9)),
            max_step=float(solver.get('max_step', np.inf))
        )

    @classmethod
    def from_yaml(cls, filepath: Union[str, Path]) -> 'EstimatorConfig':
        """Load the 'estimation' section of a YAML file"""
        return cls.from_dict(load_config(filepath).get('estimation', {}))
