"""
Gait Synthesis
==============

Periodic gait paths for a rigid quadruped from gait-constraint vector
fields on two-dimensional shape-space slices, closed through the
deadband, and SE(2) body motion estimated from leg shape and contact.
"""

__version__ = "0.1.0"
