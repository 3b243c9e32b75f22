# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Package root for the planetwind near-surface wind field engine.
- Owns the shared ``logger`` used by every submodule and a logging setup helper.
- Re-exports the registry, builders, and loader for concise downstream imports.
"""

from __future__ import annotations

import logging

__version__ = "0.9.0"

logger = logging.getLogger("planetwind")
logger.addHandler(logging.NullHandler())

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: int | str | None = None) -> None:
    """Install a basic handler for the package logger.

    Args:
        level: Logging level name or number. Defaults to ``settings.log_level``,
            or DEBUG when ``settings.developer_mode`` is on.
    """
    from planetwind.config import settings

    if level is None:
        level = "DEBUG" if settings.developer_mode else settings.log_level
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.setLevel(level)


from planetwind.config import WindConfigError, WindSettings, settings  # noqa: E402
from planetwind.core import Curve  # noqa: E402
from planetwind.bodies import BodyWindField, WindFieldRegistry  # noqa: E402
from planetwind.ingest import (  # noqa: E402
    build_curve,
    build_default_curve,
    build_flow_map,
    build_generator,
    load_registry,
    load_registry_file,
)

__all__ = [
    "BodyWindField",
    "Curve",
    "WindConfigError",
    "WindFieldRegistry",
    "WindSettings",
    "build_curve",
    "build_default_curve",
    "build_flow_map",
    "build_generator",
    "configure_logging",
    "load_registry",
    "load_registry_file",
    "logger",
    "settings",
]
