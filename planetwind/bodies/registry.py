# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Maps body identifiers to their ``BodyWindField`` for the lifetime of a scenario.
- Populated once during load, read-only afterwards, cleared at scenario end.
- Unknown bodies evaluate to the zero vector instead of raising.
"""

from __future__ import annotations

import math
from typing import Dict, Iterator, List, Optional

import numpy as np

from planetwind import logger
from planetwind.bodies.body import BodyWindField
from planetwind.config import WindConfigError, settings
from planetwind.core.geometry import zero_vector
from planetwind.fields.flowmap import FlowMapSampler
from planetwind.fields.generators import WindGenerator


class WindFieldRegistry:
    """Body id -> wind field lookup.

    Args:
        speed_multiplier: Global factor applied to every evaluated vector.
            Defaults to ``settings.global_wind_speed_multiplier``; negative
            values are clamped to 0.

    Raises:
        WindConfigError: If ``speed_multiplier`` is NaN or infinite.
    """

    def __init__(self, speed_multiplier: Optional[float] = None):
        if speed_multiplier is None:
            speed_multiplier = settings.global_wind_speed_multiplier
        speed_multiplier = float(speed_multiplier)
        if not math.isfinite(speed_multiplier):
            raise WindConfigError(f"Global wind speed multiplier must be finite, got {speed_multiplier!r}")
        self.speed_multiplier = max(speed_multiplier, 0.0)
        self._bodies: Dict[str, BodyWindField] = {}

    def add_body(self, body: str, altitude_scale: float = 1.0) -> BodyWindField:
        """Register ``body``; a second registration keeps the first field."""
        existing = self._bodies.get(body)
        if existing is not None:
            logger.debug("Body %s already registered; ignoring duplicate.", body)
            return existing
        logger.info("Creating wind field for %s", body)
        field = BodyWindField(body, altitude_scale)
        self._bodies[body] = field
        return field

    def has_body(self, body: str) -> bool:
        return body in self._bodies

    def get(self, body: str) -> Optional[BodyWindField]:
        return self._bodies.get(body)

    def bodies(self) -> List[str]:
        return list(self._bodies)

    def add_generator(self, body: str, generator: WindGenerator) -> None:
        field = self._bodies.get(body)
        if field is None:
            logger.warning("Cannot add %s pattern: body %s is not registered.", generator.kind, body)
            return
        field.add_generator(generator)

    def add_flow_map(self, body: str, sampler: FlowMapSampler) -> None:
        field = self._bodies.get(body)
        if field is None:
            logger.warning("Cannot add flow map: body %s is not registered.", body)
            return
        field.add_flow_map(sampler)

    def evaluate(self, body: str, lon: float, lat: float, alt: float, time: float) -> np.ndarray:
        """Wind vector ``(north, up, east)`` for ``body``; zero if the body is unknown."""
        field = self._bodies.get(body)
        if field is None:
            return zero_vector()
        with np.errstate(all="ignore"):
            vector = field.evaluate(lon, lat, alt, time) * self.speed_multiplier
        if not np.all(np.isfinite(vector)):
            return zero_vector()
        return vector

    def clear(self) -> None:
        """Release every body at scenario end."""
        for field in self._bodies.values():
            field.release()
        self._bodies.clear()

    def __contains__(self, body: object) -> bool:
        return body in self._bodies

    def __len__(self) -> int:
        return len(self._bodies)

    def __iter__(self) -> Iterator[str]:
        return iter(self._bodies)
