# Copyright (c) 2025 Oceans Four Driftcast Team
# SPDX-License-Identifier: MIT
"""
File Summary:
- Structural JSON schema for one body's wind definition (patterns and flow maps).
- Wraps jsonschema so loaders can reject a malformed body before building anything.
- Numeric parameter checks stay in the pydantic models of planetwind.config.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from jsonschema import Draft202012Validator

_CURVES = {
    "type": "object",
    "additionalProperties": {
        "type": "array",
        "minItems": 1,
        "items": {
            "type": "array",
            "minItems": 2,
            "maxItems": 4,
            "items": {"type": "number"},
        },
    },
}

BODY_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "planetwind body definition",
    "type": "object",
    "properties": {
        "body": {"type": "string"},
        "altitude_scale_factor": {"type": "number"},
        "winds": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "pattern_type": {"type": "string"},
                    "curves": _CURVES,
                },
            },
        },
        "flowmaps": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "map": {"type": "string"},
                    "curves": _CURVES,
                },
            },
        },
    },
}


@dataclass(frozen=True)
class BodySchema:
    """Compiled validator for body definitions."""

    validator: Draft202012Validator
    path: Optional[Path] = None

    @classmethod
    def default(cls) -> "BodySchema":
        Draft202012Validator.check_schema(BODY_SCHEMA)
        return cls(validator=Draft202012Validator(BODY_SCHEMA))

    @classmethod
    def load(cls, path: Path | str) -> "BodySchema":
        """Load and compile a replacement schema from disk."""
        schema_path = Path(path)
        with schema_path.open("r", encoding="utf8") as fh:
            schema_obj = json.load(fh)
        return cls(validator=Draft202012Validator(schema_obj), path=schema_path)


def validate_body(payload: Dict[str, Any], schema: Optional[BodySchema] = None) -> None:
    """Validate one body definition; raises ``jsonschema.ValidationError`` on failure."""
    (schema or BodySchema.default()).validator.validate(payload)

