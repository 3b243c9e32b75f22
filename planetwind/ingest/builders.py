# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Construction API turning already-parsed parameters into curves, patterns, and flow maps.
- Fills every curve the caller did not author with a factory default derived from scalars.
- Fails fast with ``WindConfigError`` so loaders can log and skip one bad definition.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple, Union

from pydantic.alias_generators import to_snake

from planetwind.config import (
    AltitudeRange,
    FlowMapParams,
    TimeSettings,
    WindConfigError,
    WindPatternParams,
    parse_params,
)
from planetwind.core.curves import Curve, Keyframe
from planetwind.fields import factory
from planetwind.fields.flowmap import FlowMapSampler
from planetwind.fields.generators import (
    ConvergingWind,
    JetStream,
    PolarStream,
    Updraft,
    Vortex,
    WindGenerator,
)

CurveLike = Union[Curve, Iterable[Any]]
ParamsLike = Union[Mapping[str, Any], None]

GENERATOR_KINDS: Dict[str, type] = {
    "jetstream": JetStream,
    "polarstream": PolarStream,
    "vortex": Vortex,
    "updraft": Updraft,
    "downdraft": Updraft,
    "converging": ConvergingWind,
    "diverging": ConvergingWind,
}

WIND_CURVE_NAMES = frozenset(
    {
        "radius",
        "latitude",
        "longitude",
        "longitude_time",
        "latitude_time",
        "time_speed_multiplier",
        "lon_lat_speed_multiplier",
        "radius_speed_multiplier",
        "altitude_speed_multiplier",
    }
)

FLOW_MAP_CURVE_NAMES = frozenset(
    {
        "time_speed_multiplier",
        "altitude_speed_multiplier",
        "east_west_altitude_speed_multiplier",
        "north_south_altitude_speed_multiplier",
        "vertical_altitude_speed_multiplier",
    }
)

# (interval, duration, fade_in, fade_out) used when TimeSettings omits a value
WIND_PULSE_DEFAULTS = (20.0, 10.0, 1.0, 1.0)
FLOW_MAP_PULSE_DEFAULTS = (1000.0, 500.0, 50.0, 50.0)


def build_curve(keyframes: CurveLike) -> Curve:
    """Build a curve from keyframe rows, ``Keyframe`` objects, or pass a ``Curve`` through.

    Rows are ``(x, value)`` or ``(x, value, in_tangent, out_tangent)``.
    """
    if isinstance(keyframes, Curve):
        return keyframes
    if isinstance(keyframes, (str, bytes)):
        raise WindConfigError("Curve keyframes must be a sequence of rows, not a string")
    try:
        rows = list(keyframes)
    except TypeError as exc:
        raise WindConfigError(f"Curve keyframes must be iterable: {exc}") from exc
    if rows and all(isinstance(row, Keyframe) for row in rows):
        return Curve(tuple(rows))
    try:
        return Curve.from_points(
            (k.x, k.value, k.in_tangent, k.out_tangent) if isinstance(k, Keyframe) else k for k in rows
        )
    except WindConfigError:
        raise
    except (TypeError, ValueError) as exc:
        raise WindConfigError(f"Malformed curve keyframes: {exc}") from exc


def _required(params: Mapping[str, Any], *names: str) -> Tuple[float, ...]:
    missing = [name for name in names if params.get(name) is None]
    if missing:
        raise WindConfigError(f"Missing curve parameter(s): {', '.join(missing)}")
    try:
        return tuple(float(params[name]) for name in names)
    except (TypeError, ValueError) as exc:
        raise WindConfigError(f"Curve parameters must be numbers: {exc}") from exc


def _flat_curve(params: Mapping[str, Any]) -> Curve:
    return factory.flat(*_required(params, "value"))


def _altitude_curve(params: Mapping[str, Any]) -> Curve:
    min_alt, max_alt = _required(params, "min_alt", "max_alt")
    lower = params.get("lower_fade_end")
    upper = params.get("upper_fade_start")
    return factory.altitude_envelope(
        min_alt,
        max_alt,
        None if lower is None else float(lower),
        None if upper is None else float(upper),
    )


def _radial_curve(params: Mapping[str, Any]) -> Curve:
    return factory.radial_envelope()


def _pulse_curve(params: Mapping[str, Any]) -> Curve:
    return factory.pulse_envelope(*_required(params, "interval", "duration", "fade_in", "fade_out"))


DEFAULT_CURVE_KINDS: Dict[str, Callable[[Mapping[str, Any]], Curve]] = {
    "flat": _flat_curve,
    "altitude": _altitude_curve,
    "radial": _radial_curve,
    "pulse": _pulse_curve,
}


def build_default_curve(kind: str, params: ParamsLike = None) -> Curve:
    """Synthesize a default curve of ``kind`` (flat, altitude, radial, pulse)."""
    key = str(kind or "").strip().lower()
    builder = DEFAULT_CURVE_KINDS.get(key)
    if builder is None:
        raise WindConfigError(f"{kind!r} is not a valid default curve kind")
    try:
        return builder(dict(params or {}))
    except WindConfigError:
        raise
    except (TypeError, ValueError) as exc:
        raise WindConfigError(f"Invalid {key} curve parameters: {exc}") from exc


def _curve_key(name: str) -> str:
    key = to_snake(str(name).strip())
    return re.sub(r"_?curve$", "", key)


def _authored_curves(
    curves: Optional[Mapping[str, CurveLike]],
    allowed: frozenset,
    context: str,
) -> Dict[str, Curve]:
    authored: Dict[str, Curve] = {}
    for name, value in (curves or {}).items():
        key = _curve_key(name)
        if key not in allowed:
            raise WindConfigError(f"Unknown curve {name!r} for {context}")
        try:
            authored[key] = build_curve(value)
        except WindConfigError as exc:
            raise WindConfigError(f"Curve {name!r} for {context}: {exc}") from exc
    return authored


def _altitude_envelope(
    min_alt: float,
    max_alt: float,
    altitude_range: Optional[AltitudeRange],
) -> Curve:
    fade = factory.default_fade(min_alt, max_alt)
    if min_alt == 0.0:
        # full strength at sea level for landed and splashed craft
        min_alt -= fade
    lower, upper = min_alt + fade, max_alt - fade
    if altitude_range is not None:
        if altitude_range.start_start is not None:
            min_alt = altitude_range.start_start
        if altitude_range.end_end is not None:
            max_alt = altitude_range.end_end
        if min_alt >= max_alt:
            raise WindConfigError(
                "Invalid altitude_range: end_end cannot be less than or equal to start_start"
            )
        fade = factory.default_fade(min_alt, max_alt)
        lower = altitude_range.start_end if altitude_range.start_end is not None else min_alt + fade
        upper = altitude_range.end_start if altitude_range.end_start is not None else max_alt - fade
    return factory.altitude_envelope(min_alt, max_alt, lower, upper)


def _time_curve(
    authored: Mapping[str, Curve],
    time_settings: Optional[TimeSettings],
    defaults: Tuple[float, float, float, float],
) -> Tuple[Curve, float]:
    offset = time_settings.offset if time_settings is not None else 0.0
    if "time_speed_multiplier" in authored:
        return authored["time_speed_multiplier"], offset
    if time_settings is None:
        return factory.time_envelope(None), offset
    given = (time_settings.interval, time_settings.duration, time_settings.fade_in, time_settings.fade_out)
    pulse = tuple(default if value is None else value for value, default in zip(given, defaults))
    return factory.time_envelope(pulse), offset


def _curve_or(authored: Mapping[str, Curve], name: str, default: Callable[[], Curve]) -> Curve:
    curve = authored.get(name)
    return curve if curve is not None else default()


def build_generator(
    kind: Optional[str],
    params: Union[WindPatternParams, ParamsLike] = None,
    curves: Optional[Mapping[str, CurveLike]] = None,
) -> WindGenerator:
    """Build a wind pattern.

    Args:
        kind: One of jetstream, polarstream, vortex, updraft, downdraft,
            converging, diverging (case-insensitive).
        params: :class:`WindPatternParams` or a mapping accepted by it.
        curves: Authored curves by name (see ``WIND_CURVE_NAMES``); anything
            missing is synthesized from ``params``.

    Raises:
        WindConfigError: On a missing or unknown kind, invalid parameters,
            a non-positive radius, or a malformed curve.
    """
    if kind is None or not str(kind).strip():
        raise WindConfigError("Wind field 'pattern_type' cannot be empty")
    key = str(kind).strip().lower()
    pattern_cls = GENERATOR_KINDS.get(key)
    if pattern_cls is None:
        raise WindConfigError(f"{kind} is not a valid wind pattern")

    p = parse_params(WindPatternParams, params, key)
    authored = _authored_curves(curves, WIND_CURVE_NAMES, key)
    if authored.get("radius") is None and p.radius <= 0.0:
        raise WindConfigError(f"{key} needs a positive radius or a radius curve")

    altitude_curve = _curve_or(
        authored, "altitude_speed_multiplier", lambda: _altitude_envelope(p.min_alt, p.max_alt, p.altitude_range)
    )
    time_curve, offset = _time_curve(authored, p.time_settings, WIND_PULSE_DEFAULTS)
    radius_multiplier = _curve_or(authored, "radius_speed_multiplier", factory.radial_envelope)

    if pattern_cls is JetStream:
        return JetStream(
            wind_speed=p.wind_speed,
            center_longitude=p.longitude,
            length=p.length,
            radius_curve=_curve_or(authored, "radius", lambda: factory.flat(p.radius)),
            latitude_curve=_curve_or(authored, "latitude", lambda: factory.flat(p.latitude)),
            time_curve=time_curve,
            lon_lat_multiplier_curve=_curve_or(authored, "lon_lat_speed_multiplier", lambda: factory.flat(1.0)),
            radius_multiplier_curve=radius_multiplier,
            altitude_curve=altitude_curve,
            time_offset=offset,
        )
    if pattern_cls is PolarStream:
        return PolarStream(
            wind_speed=p.wind_speed,
            center_latitude=p.latitude,
            length=p.length,
            radius_curve=_curve_or(authored, "radius", lambda: factory.flat(p.radius)),
            longitude_curve=_curve_or(authored, "longitude", lambda: factory.flat(p.longitude)),
            time_curve=time_curve,
            lon_lat_multiplier_curve=_curve_or(authored, "lon_lat_speed_multiplier", lambda: factory.flat(1.0)),
            radius_multiplier_curve=radius_multiplier,
            altitude_curve=altitude_curve,
            time_offset=offset,
        )
    if p.radius <= 0.0:
        raise WindConfigError(f"{key} needs a positive radius")
    return pattern_cls(
        wind_speed=p.wind_speed,
        radius=p.radius,
        radius_multiplier_curve=radius_multiplier,
        longitude_time_curve=_curve_or(authored, "longitude_time", lambda: factory.flat(p.longitude)),
        latitude_time_curve=_curve_or(authored, "latitude_time", lambda: factory.flat(p.latitude)),
        time_curve=time_curve,
        altitude_curve=altitude_curve,
        time_offset=offset,
    )


def build_flow_map(
    grid,
    params: Union[FlowMapParams, ParamsLike] = None,
    curves: Optional[Mapping[str, CurveLike]] = None,
) -> FlowMapSampler:
    """Build a flow map sampler around an already-decoded ``grid``.

    Args:
        grid: Channel samples in ``[0, 1]`` shaped ``(height, width, 3|4)``,
            rows south to north.
        params: :class:`FlowMapParams` or a mapping accepted by it.
        curves: Authored curves by name (see ``FLOW_MAP_CURVE_NAMES``).

    Raises:
        WindConfigError: If the grid is absent or malformed, or parameters are invalid.
    """
    if grid is None:
        raise WindConfigError("Flow map grid is missing")
    p = parse_params(FlowMapParams, params, "flow map")
    authored = _authored_curves(curves, FLOW_MAP_CURVE_NAMES, "flow map")
    time_curve, offset = _time_curve(authored, p.time_settings, FLOW_MAP_PULSE_DEFAULTS)
    return FlowMapSampler(
        grid=grid,
        use_third_channel=p.use_third_channel,
        altitude_curve=_curve_or(
            authored, "altitude_speed_multiplier", lambda: _altitude_envelope(p.min_alt, p.max_alt, p.altitude_range)
        ),
        north_south_curve=_curve_or(authored, "north_south_altitude_speed_multiplier", lambda: factory.flat(1.0)),
        vertical_curve=_curve_or(authored, "vertical_altitude_speed_multiplier", lambda: factory.flat(1.0)),
        east_west_curve=_curve_or(authored, "east_west_altitude_speed_multiplier", lambda: factory.flat(1.0)),
        axis_speeds=p.axis_speeds,
        time_curve=time_curve,
        time_offset=offset,
    )
