"""
Pytest configuration and shared fixtures for planetwind tests.
"""

import numpy as np
import pytest

from planetwind.fields import factory
from planetwind.fields.flowmap import FlowMapSampler
from planetwind.fields.generators import JetStream


@pytest.fixture
def narrow_jet():
    """Equatorial jet stream, 0.1 degrees wide, 12 m/s, active at every altitude and time."""
    return JetStream(
        wind_speed=12.0,
        center_longitude=0.0,
        length=0.0,
        radius_curve=factory.flat(0.1),
        latitude_curve=factory.flat(0.0),
        time_curve=factory.flat(1.0),
        lon_lat_multiplier_curve=factory.flat(1.0),
        radius_multiplier_curve=factory.radial_envelope(),
        altitude_curve=factory.flat(1.0),
    )


@pytest.fixture
def corner_grid():
    """2x2 flow map; rows south to north, channels (east, north, up) in [0, 1].

    Decoded (north, up, east) directions:
        [0, 0] -> ( 0.0, 0.0,  1.0)
        [0, 1] -> ( 1.0, 0.0,  0.0)
        [1, 0] -> ( 0.0, 1.0, -1.0)
        [1, 1] -> (-0.5, 0.0,  0.5)
    """
    return np.array(
        [
            [[1.0, 0.5, 0.5], [0.5, 1.0, 0.5]],
            [[0.0, 0.5, 1.0], [0.75, 0.25, 0.5]],
        ]
    )


@pytest.fixture
def unit_sampler(corner_grid):
    """Flow map over ``corner_grid`` with every multiplier and speed set to 1."""
    return FlowMapSampler(
        grid=corner_grid,
        use_third_channel=True,
        altitude_curve=factory.flat(1.0),
        north_south_curve=factory.flat(1.0),
        vertical_curve=factory.flat(1.0),
        east_west_curve=factory.flat(1.0),
        axis_speeds=(1.0, 1.0, 1.0),
        time_curve=factory.flat(1.0),
    )
