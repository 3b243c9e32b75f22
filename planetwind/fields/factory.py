# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Synthesizes default falloff curves from a handful of shape parameters.
- Covers constant, altitude trapezoid, radial edge fade, and periodic pulse shapes.
- Consumed by planetwind.ingest.builders whenever no authored curve is supplied.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

from planetwind.config import WindConfigError
from planetwind.core.curves import Curve, Keyframe

FLAT_SPAN = 10000.0
MAX_ALTITUDE_FADE = 1000.0
FADE_MARGIN = 0.001
RADIAL_FADE_START = 0.8


def _require_finite(**values: float) -> None:
    bad = [name for name, value in values.items() if not math.isfinite(value)]
    if bad:
        raise WindConfigError(f"Non-finite curve parameter(s): {', '.join(sorted(bad))}")


def flat(value: float) -> Curve:
    """Constant curve at ``value``."""
    _require_finite(value=value)
    return Curve((Keyframe(0.0, value), Keyframe(FLAT_SPAN, value)))


def default_fade(min_alt: float, max_alt: float) -> float:
    """Fade width used when no explicit fade bounds are given."""
    return min(MAX_ALTITUDE_FADE, (max_alt - min_alt) / 10.0)


def resolve_fade_bounds(
    min_alt: float,
    max_alt: float,
    lower_fade_end: Optional[float] = None,
    upper_fade_start: Optional[float] = None,
) -> Tuple[float, float]:
    """Fill in and clamp the fade bounds so ``min < lower < upper < max``."""
    fade = default_fade(min_alt, max_alt)
    if lower_fade_end is None:
        lower_fade_end = min_alt + fade
    if upper_fade_start is None:
        upper_fade_start = max_alt - fade
    upper_fade_start = min(max(upper_fade_start, min_alt + 2 * FADE_MARGIN), max_alt - FADE_MARGIN)
    lower_fade_end = min(max(lower_fade_end, min_alt + FADE_MARGIN), upper_fade_start - FADE_MARGIN)
    return lower_fade_end, upper_fade_start


def altitude_envelope(
    min_alt: float,
    max_alt: float,
    lower_fade_end: Optional[float] = None,
    upper_fade_start: Optional[float] = None,
) -> Curve:
    """Trapezoid that is 0 outside ``[min_alt, max_alt]`` and 1 on the plateau.

    Args:
        min_alt: Altitude where the ramp up starts.
        max_alt: Altitude where the ramp down ends.
        lower_fade_end: End of the ramp up. Defaults to ``min_alt + fade``.
        upper_fade_start: Start of the ramp down. Defaults to ``max_alt - fade``.

    Raises:
        WindConfigError: If ``max_alt <= min_alt`` or any bound is not finite.
    """
    _require_finite(min_alt=min_alt, max_alt=max_alt)
    if max_alt <= min_alt:
        raise WindConfigError("Altitude envelope needs max_alt greater than min_alt")
    if lower_fade_end is not None:
        _require_finite(lower_fade_end=lower_fade_end)
    if upper_fade_start is not None:
        _require_finite(upper_fade_start=upper_fade_start)
    lower, upper = resolve_fade_bounds(min_alt, max_alt, lower_fade_end, upper_fade_start)
    if not min_alt < lower < upper < max_alt:
        raise WindConfigError(
            f"Altitude envelope from {min_alt!r} to {max_alt!r} is too narrow to fade in and out"
        )
    rise = 1.0 / (lower - min_alt)
    fall = -1.0 / (max_alt - upper)
    return Curve(
        (
            Keyframe(min_alt, 0.0, 0.0, rise),
            Keyframe(lower, 1.0, rise, 0.0),
            Keyframe(upper, 1.0, 0.0, fall),
            Keyframe(max_alt, 0.0, fall, 0.0),
        )
    )


def radial_envelope() -> Curve:
    """Full strength out to 80% of the radius, fading to zero at the edge."""
    slope = -1.0 / (1.0 - RADIAL_FADE_START)
    return Curve(
        (
            Keyframe(0.0, 1.0, 0.0, 0.0),
            Keyframe(RADIAL_FADE_START, 1.0, 0.0, slope),
            Keyframe(1.0, 0.0, slope, 0.0),
        )
    )


def pulse_envelope(interval: float, duration: float, fade_in: float, fade_out: float) -> Curve:
    """One pulse per ``interval``: fade in, hold, fade out by ``duration``, then rest.

    Meant to be sampled with :meth:`Curve.loop_evaluate`.
    """
    _require_finite(interval=interval, duration=duration, fade_in=fade_in, fade_out=fade_out)
    if fade_in <= 0.0 or fade_out <= 0.0:
        raise WindConfigError("Pulse fade_in and fade_out must be positive")
    if fade_in >= duration - fade_out:
        raise WindConfigError("Pulse duration must exceed fade_in + fade_out")
    if duration >= interval:
        raise WindConfigError("Pulse interval must be longer than its duration")
    rise = 1.0 / fade_in
    fall = -1.0 / fade_out
    return Curve(
        (
            Keyframe(0.0, 0.0, 0.0, rise),
            Keyframe(fade_in, 1.0, rise, 0.0),
            Keyframe(duration - fade_out, 1.0, 0.0, fall),
            Keyframe(duration, 0.0, fall, 0.0),
            Keyframe(interval, 0.0, 0.0, 0.0),
        )
    )


def time_envelope(pulse: Optional[Tuple[float, float, float, float]] = None) -> Curve:
    """Pulse curve for ``(interval, duration, fade_in, fade_out)``, or constant 1."""
    if pulse is None:
        return flat(1.0)
    return pulse_envelope(*pulse)
