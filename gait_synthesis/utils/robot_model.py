#!/usr/bin/env python3
"""
Robot Geometry
Fixed link parameters of a rigid quadruped with planar hip joints
"""

from dataclasses import dataclass, asdict
from typing import Dict

from ..errors import ConfigurationError


# Smallest admissible link parameter
MIN_LINK_PARAMETER = 0.1


@dataclass(frozen=True)
class RobotGeometry:
    """
    Link parameters shared by every gait path of one robot

    The constraint field and the contact Jacobians receive this object as
    their first argument; it is never mutated.
    """
    ankle: float = 1.0     # ankle offset from the leg axis
    a: float = 1.0         # hip offset from the body centre
    l: float = 1.0         # leg length

    def __post_init__(self):
        for name, value in asdict(self).items():
            if not value > MIN_LINK_PARAMETER:
                raise ConfigurationError(
                    f"Robot geometry '{name}' must be greater than "
                    f"{MIN_LINK_PARAMETER}, got {value}"
                )

    @classmethod
    def from_dict(cls, cfg: Dict) -> 'RobotGeometry':
        """Build geometry from a 'robot' configuration section"""
        return cls(
            ankle=float(cfg.get('ankle', 1.0)),
            a=float(cfg.get('a', 1.0)),
            l=float(cfg.get('l', 1.0))
        )


# Level-2 contact states: pairs of legs in ground contact, in index order 1..6
CONTACT_STATES = ((1, 2), (2, 3), (3, 4), (4, 1), (1, 3), (2, 4))


def contact_state_index(legs_in_contact) -> int:
    """
    Index (1..6) of the contact state for a set of legs in contact

    Returns 0 when the legs do not form one of the level-2 pairs.
    """
    legs = frozenset(int(leg) for leg in legs_in_contact)
    for index, pair in enumerate(CONTACT_STATES, start=1):
        if legs == frozenset(pair):
            return index
    return 0
