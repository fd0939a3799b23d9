"""Tests for AngularCoordinates, TimeStampedAngularCoordinates and the derivative filter."""

import datetime
import math

import jax
import jax.numpy as jnp
import pytest

# Enable float64 before importing attitudejax classes
jax.config.update("jax_enable_x64", True)

from attitudejax.config import set_dtype  # noqa: E402

set_dtype(jnp.float64)

from attitudejax import (  # noqa: E402
    AngularCoordinates,
    AngularDerivativesFilter,
    Quaternion,
    TimeStampedAngularCoordinates,
    estimate_rate,
)
from attitudejax.utils import shift_time, time_difference  # noqa: E402

ATOL = 1e-12

X = jnp.array([1.0, 0.0, 0.0])
Y = jnp.array([0.0, 1.0, 0.0])
Z = jnp.array([0.0, 0.0, 1.0])


def _random_coordinates(seed):
    key1, key2, key3 = jax.random.split(jax.random.PRNGKey(seed), 3)
    rotation = Quaternion.from_vector(jax.random.normal(key1, (4,), dtype=jnp.float64) + 0.1)
    rate = 0.01 * jax.random.normal(key2, (3,), dtype=jnp.float64)
    acceleration = 0.001 * jax.random.normal(key3, (3,), dtype=jnp.float64)
    return AngularCoordinates(rotation, rate, acceleration)


# ===========================================================================
# AngularCoordinates
# ===========================================================================


class TestAngularCoordinates:
    def test_defaults(self):
        ac = AngularCoordinates()
        assert ac.rotation == Quaternion.identity()
        assert jnp.allclose(ac.rotation_rate, jnp.zeros(3))
        assert jnp.allclose(ac.rotation_acceleration, jnp.zeros(3))
        assert ac.is_close(AngularCoordinates.identity())

    def test_vectors_converted(self):
        ac = AngularCoordinates(Quaternion.identity(), [0.0, 0.0, 1.0], (1.0, 0.0, 0.0))
        assert ac.rotation_rate.dtype == jnp.float64
        assert jnp.allclose(ac.rotation_rate, Z)
        assert jnp.allclose(ac.rotation_acceleration, X)

    def test_apply_to(self):
        ac = AngularCoordinates(Quaternion.from_axis_angle(Z, math.pi / 2))
        assert jnp.allclose(ac.apply_to(X), Y, atol=ATOL)

    def test_revert_composes_to_identity(self):
        ac = _random_coordinates(0)
        assert ac.add_offset(ac.revert()).is_close(AngularCoordinates.identity(), ATOL)
        assert ac.revert().add_offset(ac).is_close(AngularCoordinates.identity(), ATOL)

    def test_double_revert(self):
        ac = _random_coordinates(1)
        assert ac.revert().revert().is_close(ac, ATOL)

    def test_add_then_subtract(self):
        a = _random_coordinates(2)
        b = _random_coordinates(3)
        assert a.add_offset(b).subtract_offset(b).is_close(a, ATOL)

    def test_subtract_then_add(self):
        a = _random_coordinates(4)
        b = _random_coordinates(5)
        assert a.subtract_offset(b).add_offset(b).is_close(a, ATOL)

    def test_add_offset_order(self):
        a = AngularCoordinates(Quaternion.from_axis_angle(X, math.pi / 2))
        b = AngularCoordinates(Quaternion.from_axis_angle(Z, math.pi / 2))
        # b rotation first, then a
        assert jnp.allclose(a.add_offset(b).apply_to(Y), -X, atol=ATOL)
        assert not a.add_offset(b).is_close(b.add_offset(a), 1e-6)

    def test_add_offset_transports_rate(self):
        a = AngularCoordinates(Quaternion.from_axis_angle(Z, math.pi / 2), 0.1 * Z, 0.01 * Z)
        b = AngularCoordinates(Quaternion.identity(), 0.2 * X, 0.02 * X)
        result = a.add_offset(b)
        assert jnp.allclose(result.rotation_rate, 0.1 * Z + 0.2 * Y, atol=ATOL)
        assert jnp.allclose(result.rotation_acceleration, 0.01 * Z + 0.02 * Y, atol=ATOL)

    def test_subtract_is_add_revert(self):
        a = _random_coordinates(6)
        b = _random_coordinates(7)
        assert a.subtract_offset(b).is_close(a.add_offset(b.revert()), ATOL)

    def test_shifted_by(self):
        ac = AngularCoordinates(Quaternion.from_axis_angle(Z, 0.1), 0.2 * Z, 0.02 * Z)
        shifted = ac.shifted_by(2.0)
        assert float(shifted.rotation.angle()) == pytest.approx(0.1 + 0.4 + 0.04, abs=ATOL)
        assert jnp.allclose(shifted.rotation.axis(), Z, atol=ATOL)
        assert jnp.allclose(shifted.rotation_rate, 0.24 * Z, atol=ATOL)
        assert jnp.allclose(shifted.rotation_acceleration, 0.02 * Z, atol=ATOL)

    def test_shifted_by_zero(self):
        ac = _random_coordinates(8)
        assert ac.shifted_by(0.0).is_close(ac, ATOL)

    def test_shifted_by_back_and_forth_without_acceleration(self):
        ac = AngularCoordinates(Quaternion.from_axis_angle(Y, 0.3), jnp.array([0.01, -0.02, 0.03]))
        assert ac.shifted_by(5.0).shifted_by(-5.0).is_close(ac, ATOL)

    def test_is_close_antipodal(self):
        q = Quaternion.from_axis_angle(Y, 0.3)
        assert AngularCoordinates(-q, 0.1 * X).is_close(AngularCoordinates(q, 0.1 * X))
        assert not AngularCoordinates(q, 0.1 * X).is_close(AngularCoordinates(q, 0.2 * X))

    def test_modified_rodrigues_shape(self):
        assert _random_coordinates(9).modified_rodrigues(1.0).shape == (3, 3)

    def test_repr(self):
        assert repr(AngularCoordinates()).startswith("AngularCoordinates(rotation=Quaternion(")

    def test_pytree_roundtrip(self):
        ac = _random_coordinates(10)
        leaves, treedef = jax.tree_util.tree_flatten(ac)
        assert len(leaves) == 3
        rebuilt = jax.tree_util.tree_unflatten(treedef, leaves)
        assert isinstance(rebuilt, AngularCoordinates)
        assert rebuilt.is_close(ac, ATOL)

    def test_jit_revert(self):
        ac = _random_coordinates(11)
        reverted = jax.jit(lambda c: c.revert())(ac)
        assert isinstance(reverted, AngularCoordinates)
        assert reverted.is_close(ac.revert(), ATOL)


class TestEstimateRate:
    def test_constant_rate(self):
        start = Quaternion.from_axis_angle(Z, 0.1)
        end = Quaternion.from_axis_angle(Z, 0.4)
        assert jnp.allclose(estimate_rate(start, end, 3.0), 0.1 * Z, atol=ATOL)

    def test_non_trivial_start(self):
        start = Quaternion.from_axis_angle(X, 1.0)
        evolution = Quaternion.from_rotation_vector(jnp.array([0.02, -0.01, 0.03]))
        rate = estimate_rate(start, evolution * start, 0.5)
        assert jnp.allclose(rate, jnp.array([0.04, -0.02, 0.06]), atol=ATOL)

    def test_aliasing_beyond_half_turn(self):
        start = Quaternion.identity()
        end = Quaternion.from_axis_angle(Z, 1.5 * math.pi)
        assert jnp.allclose(estimate_rate(start, end, 1.0), -0.5 * math.pi * Z, atol=ATOL)


# ===========================================================================
# AngularDerivativesFilter
# ===========================================================================


class TestAngularDerivativesFilter:
    def test_max_order(self):
        assert AngularDerivativesFilter.USE_R.max_order == 0
        assert AngularDerivativesFilter.USE_RR.max_order == 1
        assert AngularDerivativesFilter.USE_RRA.max_order == 2

    @pytest.mark.parametrize("order", [0, 1, 2])
    def test_from_order(self, order):
        assert AngularDerivativesFilter.from_order(order).max_order == order

    @pytest.mark.parametrize("order", [-1, 3])
    def test_from_order_invalid(self, order):
        with pytest.raises(ValueError, match="Unsupported derivation order"):
            AngularDerivativesFilter.from_order(order)

    def test_int_lookup(self):
        assert AngularDerivativesFilter(1) is AngularDerivativesFilter.USE_RR


# ===========================================================================
# TimeStampedAngularCoordinates
# ===========================================================================


class TestTimeStampedAngularCoordinates:
    def test_properties(self):
        q = Quaternion.from_axis_angle(Z, 0.2)
        tac = TimeStampedAngularCoordinates(3.0, q, 0.1 * Z, 0.01 * X)
        assert tac.time == 3.0
        assert tac.rotation == q
        assert jnp.allclose(tac.rotation_rate, 0.1 * Z)
        assert jnp.allclose(tac.rotation_acceleration, 0.01 * X)
        assert isinstance(tac.coordinates, AngularCoordinates)

    def test_from_coordinates(self):
        ac = _random_coordinates(12)
        tac = TimeStampedAngularCoordinates.from_coordinates(7.0, ac)
        assert tac.time == 7.0
        assert tac.coordinates is ac

    def test_offsets_keep_own_time(self):
        a = TimeStampedAngularCoordinates.from_coordinates(1.0, _random_coordinates(13))
        b = TimeStampedAngularCoordinates.from_coordinates(99.0, _random_coordinates(14))
        added = a.add_offset(b)
        assert added.time == 1.0
        assert added.coordinates.is_close(a.coordinates.add_offset(b.coordinates), ATOL)
        assert added.subtract_offset(b).is_close(a, ATOL)
        assert a.revert().time == 1.0

    def test_add_plain_coordinates(self):
        a = TimeStampedAngularCoordinates.from_coordinates(1.0, _random_coordinates(15))
        b = _random_coordinates(16)
        assert a.add_offset(b).subtract_offset(b).is_close(a, ATOL)

    def test_shifted_by_float_time(self):
        tac = TimeStampedAngularCoordinates(10.0, Quaternion.identity(), 0.1 * Z)
        shifted = tac.shifted_by(2.5)
        assert shifted.time == 12.5
        assert float(shifted.rotation.angle()) == pytest.approx(0.25, abs=ATOL)

    def test_shifted_by_datetime(self):
        t0 = datetime.datetime(2024, 1, 1, 12, 0, 0, tzinfo=datetime.timezone.utc)
        tac = TimeStampedAngularCoordinates(t0, Quaternion.identity(), 0.1 * Z)
        shifted = tac.shifted_by(-30.0)
        assert shifted.time == t0 - datetime.timedelta(seconds=30)

    def test_is_close_compares_time(self):
        ac = _random_coordinates(17)
        a = TimeStampedAngularCoordinates.from_coordinates(0.0, ac)
        b = TimeStampedAngularCoordinates.from_coordinates(1.0, ac)
        assert a.is_close(a)
        assert not a.is_close(b)

    def test_pytree_time_is_static(self):
        tac = TimeStampedAngularCoordinates(4.0, Quaternion.from_axis_angle(Y, 0.4), 0.1 * X)
        leaves, treedef = jax.tree_util.tree_flatten(tac)
        assert len(leaves) == 3
        rebuilt = jax.tree_util.tree_unflatten(treedef, leaves)
        assert isinstance(rebuilt, TimeStampedAngularCoordinates)
        assert rebuilt.time == 4.0

    def test_jit_keeps_time(self):
        tac = TimeStampedAngularCoordinates(4.0, Quaternion.from_axis_angle(Y, 0.4), 0.1 * X)
        result = jax.jit(lambda c: c.revert())(tac)
        assert result.time == 4.0
        assert result.is_close(tac.revert(), ATOL)

    def test_repr(self):
        assert repr(TimeStampedAngularCoordinates(1.0)).startswith("TimeStampedAngularCoordinates(time=1.0")


# ===========================================================================
# Time helpers
# ===========================================================================


class TestTimeHelpers:
    def test_float_seconds(self):
        assert time_difference(12.5, 10.0) == 2.5
        assert shift_time(10.0, -1.5) == 8.5

    def test_datetime(self):
        t0 = datetime.datetime(2024, 1, 1, 0, 0, 0)
        t1 = datetime.datetime(2024, 1, 1, 0, 1, 30)
        assert time_difference(t1, t0) == 90.0
        assert time_difference(t0, t1) == -90.0
        assert shift_time(t0, 90.0) == t1
