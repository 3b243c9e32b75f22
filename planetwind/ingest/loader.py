# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Bulk-loads body wind definitions (parsed JSON-like data) into a ``WindFieldRegistry``.
- Validates each body structurally, then builds patterns and flow maps one by one.
- A malformed body or pattern is logged and skipped; the rest of the load proceeds.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from jsonschema import ValidationError

from planetwind import logger
from planetwind.bodies.registry import WindFieldRegistry
from planetwind.config import WindConfigError
from planetwind.ingest.builders import build_flow_map, build_generator
from planetwind.ingest.schema import BodySchema, validate_body

GridSource = Union[Mapping[str, Any], Callable[[str], Any], None]

_WIND_KEYS = ("pattern_type", "curves")
_FLOW_MAP_KEYS = ("map", "curves")


def _body_definitions(definitions: Union[Mapping[str, Any], Iterable[Mapping[str, Any]]]) -> List[Dict[str, Any]]:
    if isinstance(definitions, Mapping):
        if "bodies" in definitions:
            return list(definitions["bodies"])
        return [dict(definitions)]
    return list(definitions)


def _resolve_grid(grids: GridSource, name: Optional[str]):
    if not name:
        raise WindConfigError("Flow map entry has no 'map' name")
    if grids is None:
        raise WindConfigError(f"Could not locate flow map {name!r}")
    try:
        return grids(name) if callable(grids) else grids[name]
    except (KeyError, OSError) as exc:
        raise WindConfigError(f"Could not locate flow map {name!r}") from exc


def _load_body(registry: WindFieldRegistry, definition: Mapping[str, Any], grids: GridSource) -> None:
    name = definition.get("body")
    if not name:
        logger.warning("Wind definition without a 'body' name; skipping.")
        return
    registry.add_body(name, definition.get("altitude_scale_factor", 1.0))

    logger.info("Loading wind patterns for %s", name)
    for index, entry in enumerate(definition.get("winds", [])):
        params = {key: value for key, value in entry.items() if key not in _WIND_KEYS}
        try:
            generator = build_generator(entry.get("pattern_type"), params, entry.get("curves"))
        except WindConfigError as exc:
            logger.warning("Unable to load wind pattern %d for %s: %s", index, name, exc)
            continue
        registry.add_generator(name, generator)

    for index, entry in enumerate(definition.get("flowmaps", [])):
        params = {key: value for key, value in entry.items() if key not in _FLOW_MAP_KEYS}
        try:
            grid = _resolve_grid(grids, entry.get("map"))
            sampler = build_flow_map(grid, params, entry.get("curves"))
        except WindConfigError as exc:
            logger.warning("Unable to load flow map %d for %s: %s", index, name, exc)
            continue
        registry.add_flow_map(name, sampler)


def load_registry(
    definitions: Union[Mapping[str, Any], Iterable[Mapping[str, Any]]],
    grids: GridSource = None,
    registry: Optional[WindFieldRegistry] = None,
    schema: Optional[BodySchema] = None,
) -> WindFieldRegistry:
    """Populate a registry from body definitions.

    Args:
        definitions: A list of body definitions, a single one, or ``{"bodies": [...]}``.
        grids: Flow map grids by name, or a callable returning the grid for a name.
        registry: Registry to extend; a new one is created when omitted.
        schema: Structural schema; defaults to :data:`BODY_SCHEMA`.

    Returns:
        The populated registry.
    """
    registry = registry if registry is not None else WindFieldRegistry()
    schema = schema or BodySchema.default()
    logger.info("Loading wind definitions.")
    for definition in _body_definitions(definitions):
        try:
            validate_body(definition, schema)
        except ValidationError as exc:
            logger.warning("Skipping malformed body definition: %s", exc.message)
            continue
        _load_body(registry, definition, grids)
    logger.info("All wind definitions loaded: %d bodies.", len(registry))
    return registry


def load_registry_file(
    path: Path | str,
    grids: GridSource = None,
    registry: Optional[WindFieldRegistry] = None,
) -> WindFieldRegistry:
    """Read body definitions from a JSON file and load them."""
    json_path = Path(path)
    with json_path.open("r", encoding="utf8") as fh:
        payload = json.load(fh)
    logger.info("Read wind definitions from %s", json_path)
    return load_registry(payload, grids, registry)
