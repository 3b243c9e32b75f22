# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Samples wind from an equirectangular flow map (a decoded image grid).
- Decodes each texel to a direction before bilinear blending, then applies per-axis curves.
- The grid arrives already decoded; image loading lives outside this package.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Tuple

import numpy as np

from planetwind.config import WindConfigError
from planetwind.core.curves import Curve
from planetwind.core.geometry import zero_vector
from planetwind.fields.generators import reduce_offset

# Authored maps put the prime meridian at +90 degrees from the image center.
MERIDIAN_SHIFT = 90.0


def validate_grid(grid) -> np.ndarray:
    """Return a read-only float copy of ``grid`` shaped ``(height, width, channels)``.

    Raises:
        WindConfigError: If the grid is missing, badly shaped, or has samples
            outside ``[0, 1]``.
    """
    if grid is None:
        raise WindConfigError("Flow map grid is missing")
    data = np.array(grid, dtype=float)
    if data.ndim != 3 or data.shape[2] not in (3, 4):
        raise WindConfigError(
            f"Flow map grid must be (height, width, 3|4) channel samples, got shape {data.shape}"
        )
    if data.shape[0] < 1 or data.shape[1] < 1:
        raise WindConfigError("Flow map grid is empty")
    if not np.all(np.isfinite(data)):
        raise WindConfigError("Flow map grid contains NaN or Infinity samples")
    if np.any((data < 0.0) | (data > 1.0)):
        raise WindConfigError("Flow map grid samples must lie in [0, 1]")
    data.setflags(write=False)
    return data


@dataclass(frozen=True)
class FlowMapSampler:
    """Wind read from a color grid.

    Rows run south to north and columns west to east. Channel 0 encodes the
    east-west component, channel 1 north-south, and channel 2 (when
    ``use_third_channel``) the vertical one, each mapped from ``[0, 1]`` to
    ``[-1, 1]``.

    Args:
        grid: Channel samples shaped ``(height, width, channels)``.
        use_third_channel: Read vertical wind from channel 2.
        altitude_curve: Overall altitude falloff.
        north_south_curve: Altitude multiplier for the north component.
        vertical_curve: Altitude multiplier for the up component.
        east_west_curve: Altitude multiplier for the east component.
        axis_speeds: ``(north, up, east)`` speed constants.
        time_curve: Looping time multiplier.
        time_offset: Phase shift applied before looping ``time_curve``.
    """

    grid: np.ndarray = field(repr=False, compare=False)
    use_third_channel: bool
    altitude_curve: Curve
    north_south_curve: Curve
    vertical_curve: Curve
    east_west_curve: Curve
    axis_speeds: Tuple[float, float, float]
    time_curve: Curve
    time_offset: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "grid", validate_grid(self.grid))
        object.__setattr__(self, "axis_speeds", tuple(float(s) for s in self.axis_speeds))
        object.__setattr__(self, "time_offset", reduce_offset(self.time_offset, self.time_curve))

    @property
    def width(self) -> int:
        return int(self.grid.shape[1])

    @property
    def height(self) -> int:
        return int(self.grid.shape[0])

    def _decode(self, texel: np.ndarray) -> np.ndarray:
        vector = zero_vector()
        vector[2] = texel[0] * 2.0 - 1.0
        vector[0] = texel[1] * 2.0 - 1.0
        if self.use_third_channel:
            vector[1] = texel[2] * 2.0 - 1.0
        return vector

    def sample(self, lon: float, lat: float) -> np.ndarray:
        """Bilinearly blended, decoded direction at ``(lon, lat)`` before any scaling."""
        lon = lon + MERIDIAN_SHIFT
        lon = math.fmod(lon + 180.0, 360.0)
        lon = lon + 360.0 - 180.0 if lon <= 0.0 else lon - 180.0

        width, height = self.width, self.height
        map_x = (lon / 360.0) * width + width / 2.0 - 0.5
        map_y = (lat / 180.0) * height + height / 2.0 - 0.5
        cell_x = math.floor(map_x)
        cell_y = math.floor(map_y)
        frac_x = map_x - cell_x
        frac_y = map_y - cell_y

        left = cell_x % width
        right = (cell_x + 1) % width
        lower = min(max(cell_y, 0), height - 1)
        upper = min(max(cell_y + 1, 0), height - 1)

        lower_left = self._decode(self.grid[lower, left])
        lower_right = self._decode(self.grid[lower, right])
        upper_left = self._decode(self.grid[upper, left])
        upper_right = self._decode(self.grid[upper, right])

        lower_row = lower_left + (lower_right - lower_left) * frac_x
        upper_row = upper_left + (upper_right - upper_left) * frac_x
        return lower_row + (upper_row - lower_row) * frac_y

    def evaluate(self, lon: float, lat: float, alt: float, time: float) -> np.ndarray:
        """Wind vector ``(north, up, east)`` at the query point."""
        multiplier = max(self.altitude_curve.evaluate(alt), 0.0) * self.time_curve.loop_evaluate(
            time - self.time_offset
        )
        if not multiplier > 0.0:
            return zero_vector()
        if not (math.isfinite(lon) and math.isfinite(lat)):
            return np.full(3, np.nan)
        direction = self.sample(lon, lat)
        axis_scale = np.array(
            [
                self.north_south_curve.evaluate(alt) * self.axis_speeds[0],
                self.vertical_curve.evaluate(alt) * self.axis_speeds[1],
                self.east_west_curve.evaluate(alt) * self.axis_speeds[2],
            ]
        )
        return direction * axis_scale * multiplier
