"""
File Summary:
- Per-body aggregation of wind patterns and the process-wide body registry.
- See planetwind.bodies.body for superposition and altitude scaling rules.
"""

from .body import BodyWindField, resolve_altitude_scale
from .registry import WindFieldRegistry

__all__ = ["BodyWindField", "WindFieldRegistry", "resolve_altitude_scale"]
