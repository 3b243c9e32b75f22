"""
Tests for per-body aggregation and the body registry.
"""

import logging
import math
from dataclasses import replace

import numpy as np
import pytest

from planetwind import BodyWindField, WindConfigError, WindFieldRegistry
from planetwind.fields import factory


@pytest.mark.parametrize(
    "query",
    [(0.0, 0.0, 0.0, 0.0), (123.0, -45.0, 7000.0, 1.0e6), (math.nan, math.inf, -1.0, 0.0)],
)
def test_empty_body_is_calm(query):
    np.testing.assert_array_equal(BodyWindField("Mun").evaluate(*query), np.zeros(3))


def test_contributions_are_summed(narrow_jet, unit_sampler):
    field = BodyWindField("Kerbin")
    field.add_generator(narrow_jet)
    field.add_generator(narrow_jet)
    field.add_flow_map(unit_sampler)
    expected = 2 * np.array([0.0, 0.0, 12.0]) + unit_sampler.evaluate(0.0, 0.0, 0.0, 0.0)
    np.testing.assert_allclose(field.evaluate(0.0, 0.0, 0.0, 0.0), expected)


def test_non_finite_contributions_are_dropped(narrow_jet, unit_sampler):
    field = BodyWindField("Kerbin", generators=[narrow_jet], flow_maps=[unit_sampler])
    result = field.evaluate(math.nan, 0.0, 0.0, 0.0)
    assert np.all(np.isfinite(result))
    np.testing.assert_array_equal(result, np.zeros(3))


def test_doubling_altitude_scale_and_altitude_preserves_wind(narrow_jet):
    jet = replace(narrow_jet, altitude_curve=factory.altitude_envelope(0.0, 100.0))
    base = BodyWindField("Eve", altitude_scale=1.0, generators=[jet])
    doubled = BodyWindField("Eve", altitude_scale=2.0, generators=[jet])
    for alt in (3.0, 5.0, 50.0, 97.5):
        reference = base.evaluate(0.0, 0.0, alt, 0.0)
        np.testing.assert_array_equal(doubled.evaluate(0.0, 0.0, 2.0 * alt, 0.0), reference)
    assert 0.0 < base.evaluate(0.0, 0.0, 5.0, 0.0)[2] < 12.0


@pytest.mark.parametrize("scale", [0.0, -3.0, math.nan, math.inf])
def test_invalid_altitude_scale_falls_back_to_one(scale, caplog):
    caplog.set_level(logging.WARNING, logger="planetwind")
    field = BodyWindField("Duna", altitude_scale=scale)
    assert field.altitude_scale == 1.0
    assert "altitude scale factor" in caplog.text


def test_release_drops_everything(narrow_jet, unit_sampler):
    field = BodyWindField("Kerbin", generators=[narrow_jet], flow_maps=[unit_sampler])
    field.release()
    assert field.generators == [] and field.flow_maps == []
    np.testing.assert_array_equal(field.evaluate(0.0, 0.0, 0.0, 0.0), np.zeros(3))


def test_unknown_body_evaluates_to_zero():
    registry = WindFieldRegistry()
    np.testing.assert_array_equal(registry.evaluate("Jool", 0.0, 0.0, 0.0, 0.0), np.zeros(3))


def test_duplicate_body_keeps_first_registration(narrow_jet):
    registry = WindFieldRegistry(speed_multiplier=1.0)
    first = registry.add_body("Kerbin", 2.0)
    registry.add_generator("Kerbin", narrow_jet)
    second = registry.add_body("Kerbin", 5.0)
    assert second is first
    assert registry.get("Kerbin").altitude_scale == 2.0
    assert len(registry) == 1
    assert "Kerbin" in registry and registry.has_body("Kerbin")
    assert registry.bodies() == ["Kerbin"] == list(registry)


def test_adding_to_unknown_body_is_ignored(narrow_jet, unit_sampler, caplog):
    caplog.set_level(logging.WARNING, logger="planetwind")
    registry = WindFieldRegistry()
    registry.add_generator("Moho", narrow_jet)
    registry.add_flow_map("Moho", unit_sampler)
    assert len(registry) == 0
    assert caplog.text.count("not registered") == 2


def test_global_multiplier_scales_and_clamps(narrow_jet):
    doubled = WindFieldRegistry(speed_multiplier=2.0)
    doubled.add_body("Kerbin")
    doubled.add_generator("Kerbin", narrow_jet)
    np.testing.assert_allclose(doubled.evaluate("Kerbin", 0.0, 0.0, 0.0, 0.0), [0.0, 0.0, 24.0])

    assert WindFieldRegistry(speed_multiplier=-1.0).speed_multiplier == 0.0


def test_clear_releases_bodies(narrow_jet):
    registry = WindFieldRegistry()
    field = registry.add_body("Kerbin")
    registry.add_generator("Kerbin", narrow_jet)
    registry.clear()
    assert len(registry) == 0
    assert field.generators == []
    np.testing.assert_array_equal(registry.evaluate("Kerbin", 0.0, 0.0, 0.0, 0.0), np.zeros(3))


@pytest.mark.parametrize("multiplier", [math.inf, -math.inf, math.nan])
def test_non_finite_global_multiplier_is_rejected(multiplier):
    with pytest.raises(WindConfigError):
        WindFieldRegistry(speed_multiplier=multiplier)


def test_overflowing_global_multiplier_still_yields_finite_vector(narrow_jet):
    """The registry result stays finite even when scaling overflows."""
    registry = WindFieldRegistry(speed_multiplier=1.0e308)
    registry.add_body("Kerbin")
    registry.add_generator("Kerbin", narrow_jet)
    vector = registry.evaluate("Kerbin", 0.0, 0.0, 0.0, 0.0)
    assert np.all(np.isfinite(vector))
    np.testing.assert_array_equal(vector, np.zeros(3))
