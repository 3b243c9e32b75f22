# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Defines the five parametric wind patterns as frozen dataclasses (a closed union).
- ``evaluate_generator`` dispatches on the pattern kind and returns a (north, up, east) vector.
- Patterns are pure: output depends only on their own curves and the query arguments.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar, Union

import numpy as np

from planetwind.core.curves import Curve
from planetwind.core.geometry import great_circle_angle, relative_heading, zero_vector


def reduce_offset(offset: float, curve: Curve) -> float:
    """Fold a phase offset into the curve's loop so equal phases compare equal."""
    length = curve.domain_length
    if length > 0.0 and math.isfinite(offset):
        return math.fmod(offset, length) % length
    return offset


class _TimeShifted:
    """Normalizes ``time_offset`` against ``time_curve`` after dataclass init."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "time_offset", reduce_offset(self.time_offset, self.time_curve))


@dataclass(frozen=True)
class JetStream(_TimeShifted):
    """East-west band of wind following ``latitude_curve`` (latitude as a function of longitude)."""

    kind: ClassVar[str] = "jetstream"

    wind_speed: float
    center_longitude: float
    length: float
    radius_curve: Curve
    latitude_curve: Curve
    time_curve: Curve
    lon_lat_multiplier_curve: Curve
    radius_multiplier_curve: Curve
    altitude_curve: Curve
    time_offset: float = 0.0


@dataclass(frozen=True)
class PolarStream(_TimeShifted):
    """North-south band of wind following ``longitude_curve`` (longitude as a function of latitude)."""

    kind: ClassVar[str] = "polarstream"

    wind_speed: float
    center_latitude: float
    length: float
    radius_curve: Curve
    longitude_curve: Curve
    time_curve: Curve
    lon_lat_multiplier_curve: Curve
    radius_multiplier_curve: Curve
    altitude_curve: Curve
    time_offset: float = 0.0


@dataclass(frozen=True)
class _CenteredPattern(_TimeShifted):
    """Shared shape of the patterns built around a (possibly moving) center point."""

    wind_speed: float
    radius: float
    radius_multiplier_curve: Curve
    longitude_time_curve: Curve
    latitude_time_curve: Curve
    time_curve: Curve
    altitude_curve: Curve
    time_offset: float = 0.0

    def center(self, time: float) -> tuple[float, float]:
        """Return ``(lon, lat)`` of the center at ``time``."""
        return (
            self.longitude_time_curve.loop_evaluate(time),
            self.latitude_time_curve.loop_evaluate(time),
        )


@dataclass(frozen=True)
class Vortex(_CenteredPattern):
    """Flow around a moving center: ``(cos h, 0, sin h)`` with ``h`` the heading toward the center."""

    kind: ClassVar[str] = "vortex"


@dataclass(frozen=True)
class Updraft(_CenteredPattern):
    """Vertical column; a negative speed makes it a downdraft."""

    kind: ClassVar[str] = "updraft"


@dataclass(frozen=True)
class ConvergingWind(_CenteredPattern):
    """Flow toward or away from the center: ``(sin h, 0, cos h)``; a negative speed makes it diverge."""

    kind: ClassVar[str] = "converging"


WindGenerator = Union[JetStream, PolarStream, Vortex, Updraft, ConvergingWind]


def _in_span(value: float, start: float, length: float) -> bool:
    end = start + length
    return min(start, end) <= value <= max(start, end)


def _time_factor(pattern: WindGenerator, time: float) -> float:
    return pattern.time_curve.loop_evaluate(time - pattern.time_offset)


def _fraction(angle: float, radius: float) -> float:
    # Non-positive radii switch the feature off; NaN passes through to the aggregator.
    if radius <= 0.0:
        return math.inf
    return angle / radius


def _jet_stream(pattern: JetStream, lon: float, lat: float, alt: float, time: float) -> np.ndarray:
    center_lat = pattern.latitude_curve.evaluate(lon)
    radius = max(pattern.radius_curve.evaluate(lon), 0.0)
    fraction = _fraction(great_circle_angle(lon, lat, lon, center_lat), radius)
    # TODO: gate on longitude once existing jet stream definitions are migrated
    if pattern.length != 0.0 and not _in_span(lat, pattern.center_longitude, pattern.length):
        return zero_vector()
    multiplier = (
        _time_factor(pattern, time)
        * pattern.radius_multiplier_curve.evaluate(fraction)
        * pattern.altitude_curve.evaluate(alt)
    )
    if fraction >= 1.0 or multiplier == 0.0:
        return zero_vector()
    direction = np.array([pattern.latitude_curve.derivative(lat), 0.0, 1.0])
    direction /= np.linalg.norm(direction)
    return direction * (multiplier * pattern.wind_speed * pattern.lon_lat_multiplier_curve.evaluate(lon))


def _polar_stream(pattern: PolarStream, lon: float, lat: float, alt: float, time: float) -> np.ndarray:
    center_lon = pattern.longitude_curve.evaluate(lat)
    radius = max(pattern.radius_curve.evaluate(lat), 0.0)
    fraction = _fraction(great_circle_angle(lon, lat, center_lon, lat), radius)
    if pattern.length != 0.0 and not _in_span(lat, pattern.center_latitude, pattern.length):
        return zero_vector()
    multiplier = (
        _time_factor(pattern, time)
        * pattern.radius_multiplier_curve.evaluate(fraction)
        * pattern.altitude_curve.evaluate(alt)
    )
    if fraction >= 1.0 or multiplier == 0.0:
        return zero_vector()
    direction = np.array([1.0, 0.0, pattern.longitude_curve.derivative(lat)])
    direction /= np.linalg.norm(direction)
    return direction * (multiplier * pattern.wind_speed * pattern.lon_lat_multiplier_curve.evaluate(lat))


def _centered(pattern: _CenteredPattern, lon: float, lat: float, alt: float, time: float) -> np.ndarray:
    center_lon, center_lat = pattern.center(time)
    fraction = _fraction(great_circle_angle(lon, lat, center_lon, center_lat), pattern.radius)
    multiplier = (
        _time_factor(pattern, time)
        * pattern.radius_multiplier_curve.evaluate(fraction)
        * pattern.altitude_curve.evaluate(alt)
    )
    if fraction >= 1.0 or multiplier == 0.0:
        return zero_vector()
    speed = multiplier * pattern.wind_speed
    if isinstance(pattern, Updraft):
        return np.array([0.0, speed, 0.0])
    heading = relative_heading(lon, lat, center_lon, center_lat, radians=True)
    if isinstance(pattern, Vortex):
        return np.array([math.cos(heading), 0.0, math.sin(heading)]) * speed
    # converging swaps the vortex's sin/cos roles
    return np.array([math.sin(heading), 0.0, math.cos(heading)]) * speed


def evaluate_generator(
    pattern: WindGenerator,
    lon: float,
    lat: float,
    alt: float,
    time: float,
) -> np.ndarray:
    """Wind vector ``(north, up, east)`` produced by ``pattern`` at the query point.

    Args:
        pattern: Any member of :data:`WindGenerator`.
        lon: Longitude in degrees.
        lat: Latitude in degrees.
        alt: Altitude, already divided by the body's altitude scale factor.
        time: Simulation time in seconds.

    Raises:
        TypeError: If ``pattern`` is not a known wind pattern.
    """
    match pattern:
        case JetStream():
            return _jet_stream(pattern, lon, lat, alt, time)
        case PolarStream():
            return _polar_stream(pattern, lon, lat, alt, time)
        case Vortex() | Updraft() | ConvergingWind():
            return _centered(pattern, lon, lat, alt, time)
        case _:
            raise TypeError(f"Unsupported wind pattern: {type(pattern).__name__}")
