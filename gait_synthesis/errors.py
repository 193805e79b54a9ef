#!/usr/bin/env python3
"""
Exception types for gait synthesis and body motion estimation

Construction and format errors derive from ValueError so callers that
already guard against bad arguments keep working. Numeric failures
derive from RuntimeError and carry the integration leg and regime.
"""

from typing import Optional


class GaitSynthesisError(Exception):
    """Base class for all errors raised by this package"""
    pass


class ConfigurationError(GaitSynthesisError, ValueError):
    """Invalid argument or parameter detected before any numeric work"""
    pass


class InvalidWindowError(ConfigurationError):
    """Integration window with both times zero (or a negative time)"""
    pass


class InvalidFractionError(ConfigurationError):
    """Scaling fraction outside (0, 1]"""
    pass


class InvalidInputError(ConfigurationError):
    """Array input of the wrong dimension, size, or dtype"""
    pass


class ShapeFormatError(ConfigurationError):
    """Shape trajectory supplied in an unrecognised format"""
    pass


class LengthMismatchError(ConfigurationError):
    """Time series whose length disagrees with its time vector"""
    pass


class MissingParameterError(ConfigurationError):
    """A required configuration value was not provided"""
    pass


class IntegrationError(GaitSynthesisError, RuntimeError):
    """
    Numeric integration failure

    Attributes:
        leg: Which integration leg failed ('backward', 'forward', 'body', ...)
        regime: Integration window regime name, if any
    """

    def __init__(self, message: str, leg: str, regime: Optional[str] = None):
        self.leg = leg
        self.regime = regime
        context = f"{leg} leg" if regime is None else f"{leg} leg, {regime} regime"
        super().__init__(f"{message} ({context})")
