#!/usr/bin/env python3
"""
Contact Estimation for Quadruped Legs
Binary contact indicators from foot heights and the level-2 contact
state they imply at every sample
"""

import numpy as np
from typing import Optional, Sequence

from ..errors import InvalidInputError, LengthMismatchError, MissingParameterError
from ..utils.robot_model import contact_state_index


class ContactEstimator:
    """
    Per-leg contact indicator over time

    Contact may be given directly as a binary indicator or recovered by
    thresholding foot heights: a foot strictly below the threshold is in
    contact.
    """

    def __init__(self, height_threshold: Optional[float] = None):
        """
        Initialize contact estimator

        Args:
            height_threshold: Foot height below which a leg is in contact
        """
        self.height_threshold = height_threshold

    def from_indicator(self, contact: Sequence) -> np.ndarray:
        """
        Validate a binary contact indicator

        Args:
            contact: Per-leg sequences of 0/1 (or bool) values

        Returns:
            (num_legs, n) boolean array
        """
        if not isinstance(contact, np.ndarray):
            lengths = [np.size(leg) for leg in contact]
            for leg, size in enumerate(lengths, start=1):
                if size != lengths[0]:
                    raise LengthMismatchError(
                        f"The contact indicator of leg {leg} has {size} samples, "
                        f"leg 1 has {lengths[0]}"
                    )

        c = np.asarray(contact)
        if c.ndim != 2 or c.shape[1] == 0:
            raise InvalidInputError("Contact indicator must be a (num_legs, n) array")
        if c.dtype.kind not in 'biuf' or not np.all(np.isin(c, (0, 1))):
            raise InvalidInputError("Contact indicator must only contain 0 and 1")
        return c.astype(bool)

    def from_foot_height(self, foot_height: Sequence) -> np.ndarray:
        """
        Threshold foot heights into a contact indicator

        Args:
            foot_height: Per-leg heights, each (n,) or (3, n) foot positions
                (the last row of a position array is the height)

        Returns:
            (num_legs, n) boolean array
        """
        if self.height_threshold is None:
            raise MissingParameterError(
                "A height threshold is needed to recover contact from foot heights"
            )

        heights = []
        for leg, h in enumerate(foot_height, start=1):
            h = np.asarray(h, dtype=float)
            if h.ndim == 2 and h.shape[0] == 3:
                h = h[2]
            if h.ndim != 1:
                raise InvalidInputError(
                    f"Foot height of leg {leg} must be (n,) heights or (3, n) positions"
                )
            heights.append(h)

        if not heights or len({h.size for h in heights}) != 1:
            raise InvalidInputError("Every leg needs a foot height series of the same length")

        return np.vstack(heights) < self.height_threshold

    @staticmethod
    def state_sequence(contact: np.ndarray) -> np.ndarray:
        """
        Contact state index (1..6, 0 outside the level-2 states) per sample

        Args:
            contact: (num_legs, n) boolean contact indicator

        Returns:
            (n,) integer array
        """
        contact = np.asarray(contact, dtype=bool)
        states = np.zeros(contact.shape[1], dtype=int)

        # Patterns repeat a lot over a gait cycle, so resolve each one once
        patterns, inverse = np.unique(contact.T, axis=0, return_inverse=True)
        for k, pattern in enumerate(patterns):
            legs = np.flatnonzero(pattern) + 1
            states[np.ravel(inverse) == k] = contact_state_index(legs)

        return states
