"""
File Summary:
- Groups the numeric building blocks: the Hermite ``Curve`` and spherical geometry.
- Nothing here knows about wind; generators and samplers compose these pieces.
"""

from .curves import Curve, Keyframe
from .geometry import great_circle_angle, relative_heading, to_cartesian, zero_vector

__all__ = [
    "Curve",
    "Keyframe",
    "great_circle_angle",
    "relative_heading",
    "to_cartesian",
    "zero_vector",
]
