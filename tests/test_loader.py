"""
Tests for bulk loading body definitions into a registry.
"""

import json
import logging

import numpy as np
import pytest
from jsonschema import ValidationError

from planetwind import WindFieldRegistry, load_registry, load_registry_file
from planetwind.ingest.schema import BODY_SCHEMA, BodySchema, validate_body
from planetwind.fields.generators import JetStream, Vortex


@pytest.fixture
def definitions():
    return {
        "bodies": [
            {
                "body": "Kerbin",
                "altitude_scale_factor": 2.0,
                "winds": [
                    {"pattern_type": "jetstream", "radius": 5.0, "wind_speed": 12.0},
                    {"pattern_type": "Vortex", "radius": 3.0, "windSpeed": 4.0, "latitude": 20.0},
                    {"pattern_type": "hurricane", "radius": 3.0},
                    {"pattern_type": "updraft", "radius": 3.0, "min_alt": 10.0, "max_alt": 5.0},
                ],
                "flowmaps": [
                    {"map": "kerbin_flow", "wind_speed": 3.0, "use_third_channel": True},
                    {"map": "missing_flow", "wind_speed": 3.0},
                ],
            },
            {"altitude_scale_factor": 1.0, "winds": [{"pattern_type": "vortex", "radius": 1.0}]},
            {
                "body": "Duna",
                "altitude_scale_factor": -4.0,
                "winds": [
                    {
                        "pattern_type": "polarstream",
                        "wind_speed": 6.0,
                        "curves": {"radius": [[-90.0, 8.0], [90.0, 8.0]]},
                    }
                ],
            },
        ]
    }


def test_load_builds_every_valid_pattern(definitions, corner_grid, caplog):
    caplog.set_level(logging.INFO, logger="planetwind")
    registry = load_registry(definitions, {"kerbin_flow": corner_grid})

    assert registry.bodies() == ["Kerbin", "Duna"]
    kerbin = registry.get("Kerbin")
    assert kerbin.altitude_scale == 2.0
    assert [type(g) for g in kerbin.generators] == [JetStream, Vortex]
    assert len(kerbin.flow_maps) == 1
    assert kerbin.flow_maps[0].axis_speeds == (3.0, 3.0, 3.0)

    duna = registry.get("Duna")
    assert duna.altitude_scale == 1.0
    assert len(duna.generators) == 1

    assert "without a 'body' name" in caplog.text
    assert "hurricane is not a valid wind pattern" in caplog.text
    assert "max_alt cannot be less than or equal to min_alt" in caplog.text
    assert "Could not locate flow map 'missing_flow'" in caplog.text


def test_loaded_registry_evaluates(definitions, corner_grid):
    registry = load_registry(definitions, {"kerbin_flow": corner_grid})
    vector = registry.evaluate("Kerbin", 0.0, 0.0, 0.0, 0.0)
    assert vector.shape == (3,)
    assert vector[2] > 0.0
    np.testing.assert_array_equal(registry.evaluate("Eeloo", 0.0, 0.0, 0.0, 0.0), np.zeros(3))


def test_grids_may_come_from_a_callable(definitions, corner_grid):
    requested = []

    def fetch(name):
        requested.append(name)
        if name != "kerbin_flow":
            raise FileNotFoundError(name)
        return corner_grid

    registry = load_registry(definitions, fetch)
    assert requested == ["kerbin_flow", "missing_flow"]
    assert len(registry.get("Kerbin").flow_maps) == 1


def test_flow_maps_without_grids_are_skipped(definitions):
    registry = load_registry(definitions)
    assert registry.get("Kerbin").flow_maps == []
    assert len(registry.get("Kerbin").generators) == 2


def test_single_body_and_plain_lists_are_accepted(corner_grid):
    single = {"body": "Eve", "winds": [{"pattern_type": "updraft", "radius": 2.0, "wind_speed": 1.0}]}
    assert load_registry(single).bodies() == ["Eve"]
    assert load_registry([single]).bodies() == ["Eve"]


def test_existing_registry_is_extended(definitions):
    registry = WindFieldRegistry(speed_multiplier=0.5)
    registry.add_body("Mun")
    result = load_registry(definitions, registry=registry)
    assert result is registry
    assert registry.bodies() == ["Mun", "Kerbin", "Duna"]


def test_structurally_malformed_body_is_skipped(caplog):
    caplog.set_level(logging.WARNING, logger="planetwind")
    registry = load_registry(
        [
            {"body": "Moho", "winds": {"pattern_type": "vortex"}},
            {"body": "Eve", "winds": [{"pattern_type": "vortex", "radius": 1.0, "curves": {"radius": [[1.0]]}}]},
            {"body": "Gilly"},
        ]
    )
    assert registry.bodies() == ["Gilly"]
    assert caplog.text.count("Skipping malformed body definition") == 2


def test_schema_validation_errors():
    validate_body({"body": "Kerbin", "winds": [], "flowmaps": []})
    with pytest.raises(ValidationError):
        validate_body({"body": 42})
    with pytest.raises(ValidationError):
        validate_body({"body": "Kerbin", "flowmaps": [{"map": 7}]}, BodySchema.default())


def test_schema_can_be_loaded_from_disk(tmp_path):
    path = tmp_path / "body.schema.json"
    strict = dict(BODY_SCHEMA, required=["body", "winds"])
    path.write_text(json.dumps(strict), encoding="utf8")
    schema = BodySchema.load(path)
    assert schema.path == path
    with pytest.raises(ValidationError):
        validate_body({"body": "Kerbin"}, schema)


def test_load_registry_file(tmp_path, definitions, corner_grid):
    path = tmp_path / "winds.json"
    path.write_text(json.dumps(definitions), encoding="utf8")
    registry = load_registry_file(path, {"kerbin_flow": corner_grid})
    assert registry.bodies() == ["Kerbin", "Duna"]
    assert len(registry.get("Kerbin").flow_maps) == 1
