"""
File Summary:
- Turns parameter sets and parsed definition files into wind patterns and flow maps.
- Exposes the ``build_*`` construction API and the ``load_registry`` bulk loader.
- Structural validation lives in schema, numeric validation in planetwind.config.
"""

from .builders import build_curve, build_default_curve, build_flow_map, build_generator
from .loader import load_registry, load_registry_file
from .schema import BODY_SCHEMA, BodySchema, validate_body

__all__ = [
    "BODY_SCHEMA",
    "BodySchema",
    "build_curve",
    "build_default_curve",
    "build_flow_map",
    "build_generator",
    "load_registry",
    "load_registry_file",
    "validate_body",
]
