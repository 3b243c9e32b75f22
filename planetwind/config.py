# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Declares the pydantic parameter models accepted by the wind pattern builders.
- Holds process-wide ``WindSettings`` (env prefix ``PLANETWIND_``) and the ``settings`` instance.
- Defines ``WindConfigError``, the single construction-time error type.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MIN_ALT = 0.0
DEFAULT_MAX_ALT = 1.0e9  # 1 Gm, taller than any atmosphere worth simulating

ModelT = TypeVar("ModelT", bound=BaseModel)


class WindConfigError(ValueError):
    """Raised when a wind pattern or flow map definition cannot be built."""


class _ParamsModel(BaseModel):
    """Base for parameter blocks: immutable, finite numbers only, camelCase aliases."""

    model_config = ConfigDict(
        allow_inf_nan=False,
        extra="forbid",
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class AltitudeRange(_ParamsModel):
    """Explicit altitude envelope.

    Args:
        start_start: Altitude where the wind starts fading in.
        start_end: Altitude where the fade-in completes.
        end_start: Altitude where the fade-out begins.
        end_end: Altitude where the wind is fully gone.
    """

    start_start: Optional[float] = None
    start_end: Optional[float] = None
    end_start: Optional[float] = None
    end_end: Optional[float] = None


class TimeSettings(_ParamsModel):
    """Pulse timing; missing values fall back to per-pattern defaults."""

    interval: Optional[float] = None
    duration: Optional[float] = None
    fade_in: Optional[float] = None
    fade_out: Optional[float] = None
    offset: float = 0.0


class _AltitudeBounded(_ParamsModel):
    min_alt: float = DEFAULT_MIN_ALT
    max_alt: float = DEFAULT_MAX_ALT
    altitude_range: Optional[AltitudeRange] = None
    time_settings: Optional[TimeSettings] = None

    @model_validator(mode="after")
    def _check_altitudes(self):
        if self.min_alt >= self.max_alt:
            raise ValueError("max_alt cannot be less than or equal to min_alt")
        return self


class WindPatternParams(_AltitudeBounded):
    """Scalar parameters shared by every wind pattern kind."""

    longitude: float = 0.0
    latitude: float = 0.0
    length: float = 0.0
    radius: float = 0.0
    wind_speed: float = 0.0


class FlowMapParams(_AltitudeBounded):
    """Scalar parameters for a flow map; per-axis speeds default to ``wind_speed``."""

    use_third_channel: bool = False
    wind_speed: float = 0.0
    east_west_wind_speed: Optional[float] = None
    north_south_wind_speed: Optional[float] = None
    vertical_wind_speed: Optional[float] = None

    @property
    def axis_speeds(self) -> tuple[float, float, float]:
        """Return ``(north, up, east)`` speed constants."""
        def pick(value: Optional[float]) -> float:
            return self.wind_speed if value is None else value

        return (
            pick(self.north_south_wind_speed),
            pick(self.vertical_wind_speed),
            pick(self.east_west_wind_speed),
        )


def parse_params(
    model: Type[ModelT],
    params: Union[ModelT, Mapping[str, Any], None],
    context: str,
) -> ModelT:
    """Coerce ``params`` into ``model``; validation failures become ``WindConfigError``."""
    if isinstance(params, model):
        return params
    try:
        return model.model_validate(dict(params or {}))
    except ValidationError as exc:
        raise WindConfigError(f"Invalid {context} parameters: {exc}") from exc


class WindSettings(BaseSettings):
    """Process-wide knobs read from the environment."""

    model_config = SettingsConfigDict(env_prefix="PLANETWIND_", allow_inf_nan=False)

    log_level: str = "INFO"
    global_wind_speed_multiplier: float = 1.0
    developer_mode: bool = False

    @field_validator("global_wind_speed_multiplier")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("global_wind_speed_multiplier must be a finite number")
        return max(value, 0.0)


settings = WindSettings()
