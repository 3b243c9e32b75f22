# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Provides great-circle angular distance and relative heading on a unit sphere.
- Used by the wind generators to measure distance to a feature and to orient flow.
- All functions take degrees and broadcast over numpy arrays.
"""

from __future__ import annotations

from typing import Union

import numpy as np

Number = Union[float, np.ndarray]

# Unit vectors closer than this to parallel count as identical or antipodal.
COINCIDENT_TOLERANCE = 1e-12


def zero_vector() -> np.ndarray:
    """A fresh ``(north, up, east)`` zero vector."""
    return np.zeros(3, dtype=float)


def _as_output(value: np.ndarray) -> Number:
    return float(value) if np.ndim(value) == 0 else value


def great_circle_angle(
    lon1: Number,
    lat1: Number,
    lon2: Number,
    lat2: Number,
    radians: bool = False,
) -> Number:
    """Return the central angle between two points (spherical law of cosines).

    Args:
        lon1: Longitude of the first point in degrees.
        lat1: Latitude of the first point in degrees.
        lon2: Longitude of the second point in degrees.
        lat2: Latitude of the second point in degrees.
        radians: Return radians instead of degrees.

    Returns:
        Angle in degrees (or radians), in ``[0, 180]``.
    """
    phi1 = np.deg2rad(lat1)
    phi2 = np.deg2rad(lat2)
    dlon = np.deg2rad(np.abs(np.subtract(lon1, lon2)))
    # sin1 sin2 + cos1 cos2 cos(dlon), rearranged so equal points give exactly 1
    cos_angle = np.cos(phi1 - phi2) - np.cos(phi1) * np.cos(phi2) * 2.0 * np.sin(0.5 * dlon) ** 2
    angle = np.arccos(np.clip(cos_angle, -1.0, 1.0))
    return _as_output(angle if radians else np.rad2deg(angle))


def to_cartesian(lon: Number, lat: Number) -> np.ndarray:
    """Unit vector(s) for the given position, stacked on the last axis."""
    lam = np.deg2rad(lon)
    phi = np.deg2rad(lat)
    return np.stack(
        np.broadcast_arrays(np.cos(phi) * np.cos(lam), np.cos(phi) * np.sin(lam), np.sin(phi)),
        axis=-1,
    )


def relative_heading(
    lon1: Number,
    lat1: Number,
    lon2: Number,
    lat2: Number,
    radians: bool = False,
) -> Number:
    """Bearing from point 1 toward point 2.

    0 is north and 90 is east; the result lies in ``(-180, 180]``. Identical
    and antipodal pairs have no defined bearing and return 0.
    """
    phi1 = np.deg2rad(lat1)
    phi2 = np.deg2rad(lat2)
    dlon = np.deg2rad(np.subtract(lon2, lon1))
    # sin(dlon) carries the east/west sign
    y = np.sin(dlon) * np.cos(phi2)
    x = np.cos(phi1) * np.sin(phi2) - np.sin(phi1) * np.cos(phi2) * np.cos(dlon)
    heading = np.arctan2(y, x)
    heading = np.where(heading <= -np.pi, np.pi, heading)

    dot = np.sum(to_cartesian(lon1, lat1) * to_cartesian(lon2, lat2), axis=-1)
    degenerate = np.abs(dot) >= 1.0 - COINCIDENT_TOLERANCE
    heading = np.where(degenerate, 0.0, heading)
    return _as_output(heading if radians else np.rad2deg(heading))
