# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Implements the immutable piecewise cubic-Hermite ``Curve`` used by every falloff.
- Supports clamped evaluation, looped (periodic) evaluation, and finite-difference slopes.
- Accepts scalars or numpy arrays so callers can sample whole grids in one call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence, Tuple, Union

import numpy as np

from planetwind.config import WindConfigError

Number = Union[float, np.ndarray]

DERIVATIVE_STEP = 1e-4


@dataclass(frozen=True)
class Keyframe:
    """A single control point: position, value, and incoming/outgoing slopes."""

    x: float
    value: float
    in_tangent: float = 0.0
    out_tangent: float = 0.0


@dataclass(frozen=True)
class Curve:
    """Piecewise cubic-Hermite function of one scalar.

    Keyframes must be strictly increasing in ``x``. Queries outside
    ``[min_x, max_x]`` return the nearest boundary value.

    Example:
        >>> curve = Curve((Keyframe(0.0, 0.0, 0.0, 1.0), Keyframe(1.0, 1.0, 1.0, 0.0)))
        >>> curve.evaluate(2.0)
        1.0
    """

    keyframes: Tuple[Keyframe, ...]
    _x: np.ndarray = field(init=False, repr=False, compare=False)
    _v: np.ndarray = field(init=False, repr=False, compare=False)
    _in: np.ndarray = field(init=False, repr=False, compare=False)
    _out: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        keys = tuple(self.keyframes)
        if not keys:
            raise WindConfigError("A curve needs at least one keyframe")
        table = np.array(
            [(k.x, k.value, k.in_tangent, k.out_tangent) for k in keys], dtype=float
        )
        if not np.all(np.isfinite(table)):
            raise WindConfigError("Curve keyframes must be finite numbers")
        if np.any(np.diff(table[:, 0]) <= 0.0):
            raise WindConfigError("Curve keyframes must be strictly increasing in x")
        table.setflags(write=False)
        object.__setattr__(self, "keyframes", keys)
        object.__setattr__(self, "_x", table[:, 0])
        object.__setattr__(self, "_v", table[:, 1])
        object.__setattr__(self, "_in", table[:, 2])
        object.__setattr__(self, "_out", table[:, 3])

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]]) -> "Curve":
        """Build a curve from ``(x, value)`` or ``(x, value, in, out)`` rows.

        Rows without tangents receive smooth automatic slopes through their
        neighbours (one-sided at the ends).
        """
        rows = [tuple(float(v) for v in row) for row in points]
        if not rows:
            raise WindConfigError("A curve needs at least one keyframe")
        for row in rows:
            if len(row) not in (2, 4):
                raise WindConfigError(
                    f"Keyframe {row!r} must have 2 (x, value) or 4 (x, value, in, out) entries"
                )
        xs = np.array([r[0] for r in rows])
        vs = np.array([r[1] for r in rows])
        auto = _auto_tangents(xs, vs)
        keys = []
        for idx, row in enumerate(rows):
            if len(row) == 4:
                keys.append(Keyframe(*row))
            else:
                keys.append(Keyframe(row[0], row[1], auto[idx], auto[idx]))
        return cls(tuple(keys))

    @property
    def min_x(self) -> float:
        return float(self._x[0])

    @property
    def max_x(self) -> float:
        return float(self._x[-1])

    @property
    def domain_length(self) -> float:
        """Width of the keyed domain; zero for a single keyframe."""
        return self.max_x - self.min_x

    def __len__(self) -> int:
        return len(self.keyframes)

    def evaluate(self, x: Number) -> Number:
        """Return the curve value at ``x``, clamping outside the keyed domain."""
        xs = np.asarray(x, dtype=float)
        if self._x.size == 1:
            out = np.full(xs.shape, self._v[0])
        else:
            xc = np.clip(xs, self._x[0], self._x[-1])
            idx = np.searchsorted(self._x, xc, side="right") - 1
            idx = np.clip(idx, 0, self._x.size - 2)
            x0 = self._x[idx]
            dx = self._x[idx + 1] - x0
            t = (xc - x0) / dx
            t2 = t * t
            t3 = t2 * t
            h10 = t3 - 2.0 * t2 + t
            h01 = -2.0 * t3 + 3.0 * t2
            h11 = t3 - t2
            v0 = self._v[idx]
            # h00 = 1 - h01; keeps constant segments exact
            out = v0 + h01 * (self._v[idx + 1] - v0) + dx * (h10 * self._out[idx] + h11 * self._in[idx + 1])
        return float(out) if out.ndim == 0 else out

    def loop_evaluate(self, x: Number) -> Number:
        """Evaluate at ``x mod domain_length`` so the curve repeats forever."""
        length = self.domain_length
        if length > 0.0:
            return self.evaluate(np.mod(x, length))
        return self.evaluate(x)

    def derivative(self, x: Number) -> Number:
        """Symmetric finite-difference slope at ``x``."""
        ahead = self.evaluate(np.add(x, DERIVATIVE_STEP))
        behind = self.evaluate(np.subtract(x, DERIVATIVE_STEP))
        return (ahead - behind) / (2.0 * DERIVATIVE_STEP)


def _auto_tangents(xs: np.ndarray, vs: np.ndarray) -> np.ndarray:
    """Finite-difference slopes through neighbouring keyframes."""
    if xs.size < 2:
        return np.zeros_like(vs)
    with np.errstate(divide="ignore", invalid="ignore"):
        # np.gradient handles uneven spacing; duplicate x is rejected by Curve later
        slopes = np.gradient(vs, xs)
    return np.where(np.isfinite(slopes), slopes, 0.0)
