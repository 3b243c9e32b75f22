# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Holds every wind pattern and flow map configured for one celestial body.
- Rescales altitude by the body's scale factor and superposes all contributions.
- Converts non-finite contributions to zero so callers always receive a finite vector.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List

import numpy as np

from planetwind import logger
from planetwind.core.geometry import zero_vector
from planetwind.fields.flowmap import FlowMapSampler
from planetwind.fields.generators import WindGenerator, evaluate_generator


def resolve_altitude_scale(body: str, scale: float) -> float:
    """Return ``scale`` if usable, else 1.0 (logged)."""
    try:
        value = float(scale)
    except (TypeError, ValueError):
        value = math.nan
    if not math.isfinite(value) or value <= 0.0:
        logger.warning(
            "An altitude scale factor of %r is invalid for %s; a default of 1.0 will be used.",
            scale,
            body,
        )
        return 1.0
    return value


@dataclass
class BodyWindField:
    """Wind field of one body.

    Args:
        body: Body identifier.
        altitude_scale: Divisor applied to query altitudes; corrected to 1.0 if not positive.
    """

    body: str
    altitude_scale: float = 1.0
    generators: List[WindGenerator] = field(default_factory=list)
    flow_maps: List[FlowMapSampler] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.altitude_scale = resolve_altitude_scale(self.body, self.altitude_scale)

    def add_generator(self, generator: WindGenerator) -> None:
        self.generators.append(generator)

    def add_flow_map(self, sampler: FlowMapSampler) -> None:
        self.flow_maps.append(sampler)

    def evaluate(self, lon: float, lat: float, alt: float, time: float) -> np.ndarray:
        """Sum of every contribution at the query point, always finite."""
        total = zero_vector()
        alt = alt / self.altitude_scale
        with np.errstate(all="ignore"):
            for generator in self.generators:
                contribution = evaluate_generator(generator, lon, lat, alt, time)
                if np.all(np.isfinite(contribution)):
                    total += contribution
            for sampler in self.flow_maps:
                contribution = sampler.evaluate(lon, lat, alt, time)
                if np.all(np.isfinite(contribution)):
                    total += contribution
        if not np.all(np.isfinite(total)):
            # finite terms can still overflow when summed
            return zero_vector()
        return total

    def release(self) -> None:
        """Drop owned patterns and flow maps."""
        self.generators.clear()
        self.flow_maps.clear()
