"""
File Summary:
- Groups the wind field primitives: default curve factory, parametric patterns, flow maps.
- Re-exports the pattern union and its dispatcher for convenient access.
- See individual modules for parameter documentation and implementation details.
"""

from . import factory
from .flowmap import FlowMapSampler
from .generators import (
    ConvergingWind,
    JetStream,
    PolarStream,
    Updraft,
    Vortex,
    WindGenerator,
    evaluate_generator,
)

__all__ = [
    "ConvergingWind",
    "FlowMapSampler",
    "JetStream",
    "PolarStream",
    "Updraft",
    "Vortex",
    "WindGenerator",
    "evaluate_generator",
    "factory",
]
