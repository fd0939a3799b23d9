"""Tests for tabulated attitude playback."""

import logging

import jax
import jax.numpy as jnp
import pytest

# Enable float64 before importing attitudejax classes
jax.config.update("jax_enable_x64", True)

from attitudejax.config import set_dtype  # noqa: E402

set_dtype(jnp.float64)

from attitudejax import (  # noqa: E402
    AngularDerivativesFilter,
    AngularEphemeris,
    InsufficientDataError,
    Quaternion,
    TimeStampedAngularCoordinates,
)

Z = jnp.array([0.0, 0.0, 1.0])
OMEGA = 0.01 * Z


@pytest.fixture
def table():
    """Ten entries every 10 s of a constant 0.01 rad/s spin about +Z, in reverse order."""
    return [
        TimeStampedAngularCoordinates(t, Quaternion.from_rotation_vector(OMEGA * t), OMEGA)
        for t in [90.0 - 10.0 * i for i in range(10)]
    ]


class TestAngularEphemeris:
    def test_sorted_range(self, table):
        ephemeris = AngularEphemeris(table)
        assert len(ephemeris) == 10
        assert ephemeris.min_time == 0.0
        assert ephemeris.max_time == 90.0
        assert [entry.time for entry in ephemeris] == [10.0 * i for i in range(10)]

    def test_defaults(self, table):
        ephemeris = AngularEphemeris(table)
        assert ephemeris.n_interpolation_points == 4
        assert ephemeris.derivatives_filter is AngularDerivativesFilter.USE_RR

    @pytest.mark.parametrize(
        "time, expected",
        [
            (35.0, [20.0, 30.0, 40.0, 50.0]),
            (30.0, [20.0, 30.0, 40.0, 50.0]),
            (0.0, [0.0, 10.0, 20.0, 30.0]),
            (3.0, [0.0, 10.0, 20.0, 30.0]),
            (90.0, [60.0, 70.0, 80.0, 90.0]),
            (88.0, [60.0, 70.0, 80.0, 90.0]),
        ],
    )
    def test_neighbors(self, table, time, expected):
        ephemeris = AngularEphemeris(table)
        assert [entry.time for entry in ephemeris.neighbors(time)] == expected

    def test_odd_window(self, table):
        ephemeris = AngularEphemeris(table, n_interpolation_points=3)
        assert [entry.time for entry in ephemeris.neighbors(45.0)] == [30.0, 40.0, 50.0]

    @pytest.mark.parametrize("time", [-1.0, 90.5])
    def test_out_of_range(self, table, time):
        ephemeris = AngularEphemeris(table)
        with pytest.raises(ValueError, match="outside the ephemeris range"):
            ephemeris.interpolate(time)

    @pytest.mark.parametrize("time", [0.0, 45.0, 71.3, 90.0])
    def test_interpolate(self, table, time):
        ephemeris = AngularEphemeris(table)
        result = ephemeris.interpolate(time)
        assert result.time == time
        expected = Quaternion.from_rotation_vector(OMEGA * time)
        assert float(result.rotation.distance(expected)) < 1e-12
        assert jnp.allclose(result.rotation_rate, OMEGA, atol=1e-12)

    def test_rotation_only_table(self, table):
        stripped = [TimeStampedAngularCoordinates(entry.time, entry.rotation) for entry in table]
        ephemeris = AngularEphemeris(stripped, 2, AngularDerivativesFilter.USE_R)
        result = ephemeris.interpolate(45.0)
        assert float(result.rotation.angle()) == pytest.approx(0.45, abs=1e-12)
        assert jnp.allclose(result.rotation_rate, OMEGA, atol=1e-12)

    def test_too_few_entries(self, table):
        with pytest.raises(InsufficientDataError):
            AngularEphemeris(table[:3], n_interpolation_points=4)

    def test_window_too_small_for_rotation_only(self, table):
        with pytest.raises(InsufficientDataError):
            AngularEphemeris(table, 1, AngularDerivativesFilter.USE_R)

    def test_logs_construction(self, table, caplog):
        with caplog.at_level(logging.DEBUG, logger="attitudejax.angular_coordinates.ephemeris"):
            AngularEphemeris(table)
        assert "Built angular ephemeris with 10 entries" in caplog.text
