"""Rotation, rotation rate and rotation acceleration as one value.

Provides the immutable ``AngularCoordinates`` class and the
``estimate_rate`` helper.

Convention:
    The rotation ``R`` is an active :class:`Quaternion`.  The rotation rate
    ``Omega`` satisfies ``dR/dt = [Omega]x R``: it is expressed on the image
    side of ``R``.  With this convention composition transports the inner
    rate through the outer rotation, which is what ``add_offset`` does.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from attitudejax.attitude_representations import Quaternion
from attitudejax.attitude_representations._tolerance import get_attitude_epsilon
from attitudejax.config import get_dtype


def _as_vector(v: ArrayLike | None) -> jax.Array:
    _float = get_dtype()
    if v is None:
        return jnp.zeros(3, dtype=_float)
    return jnp.asarray(v, dtype=_float)


class AngularCoordinates:
    """Immutable rotation / rotation rate / rotation acceleration triple.

    Every operation returns a new instance.  This class is registered as a
    JAX pytree with ``(rotation, rotation_rate, rotation_acceleration)`` as
    children and no auxiliary data.

    Args:
        rotation (Quaternion | None): Rotation. Defaults to the identity.
        rotation_rate (ArrayLike | None): Rotation rate ``Omega`` of shape
            ``(3,)`` [rad/s]. Defaults to zero.
        rotation_acceleration (ArrayLike | None): Rotation acceleration
            ``dOmega/dt`` of shape ``(3,)`` [rad/s^2]. Defaults to zero.
    """

    __slots__ = ('_rotation', '_rotation_rate', '_rotation_acceleration')

    def __init__(
        self,
        rotation: Quaternion | None = None,
        rotation_rate: ArrayLike | None = None,
        rotation_acceleration: ArrayLike | None = None,
    ) -> None:
        self._rotation = Quaternion.identity() if rotation is None else rotation
        self._rotation_rate = _as_vector(rotation_rate)
        self._rotation_acceleration = _as_vector(rotation_acceleration)

    @classmethod
    def _from_internal(
        cls, rotation: Quaternion, rotation_rate: jax.Array, rotation_acceleration: jax.Array
    ) -> AngularCoordinates:
        obj = object.__new__(cls)
        obj._rotation = rotation
        obj._rotation_rate = rotation_rate
        obj._rotation_acceleration = rotation_acceleration
        return obj

    @classmethod
    def identity(cls) -> AngularCoordinates:
        """Return the fixed identity rotation with zero rate and acceleration."""
        return cls()

    # Properties

    @property
    def rotation(self) -> Quaternion:
        """Rotation."""
        return self._rotation

    @property
    def rotation_rate(self) -> jax.Array:
        """Rotation rate of shape ``(3,)`` [rad/s]."""
        return self._rotation_rate

    @property
    def rotation_acceleration(self) -> jax.Array:
        """Rotation acceleration of shape ``(3,)`` [rad/s^2]."""
        return self._rotation_acceleration

    # Offset algebra

    def revert(self) -> AngularCoordinates:
        """Return the coordinates undoing the effect of this instance.

        The rotation is inverted and the rate and acceleration are negated
        and expressed through the inverse rotation.

        Returns:
            AngularCoordinates: Reverse coordinates.
        """
        r = self._rotation
        return AngularCoordinates._from_internal(
            r.inverse(),
            r.apply_inverse_to(-self._rotation_rate),
            r.apply_inverse_to(-self._rotation_acceleration),
        )

    def add_offset(self, offset: AngularCoordinates) -> AngularCoordinates:
        """Compose an offset applied before this instance.

        The offset rotation is applied first and this instance afterward,
        and the offset rate and acceleration are transported through this
        rotation before being summed.  The operation does *not* commute:
        ``a.add_offset(b)`` and ``b.add_offset(a)`` differ in general.

        ``add_offset`` and :meth:`subtract_offset` are exact inverses, so
        both ``a.add_offset(b).subtract_offset(b)`` and
        ``a.subtract_offset(b).add_offset(b)`` give back ``a``.

        Args:
            offset (AngularCoordinates): Offset to add.

        Returns:
            AngularCoordinates: New instance with the offset added.
        """
        r = self._rotation
        return AngularCoordinates._from_internal(
            r * offset.rotation,
            self._rotation_rate + r.apply_to(offset.rotation_rate),
            self._rotation_acceleration + r.apply_to(offset.rotation_acceleration),
        )

    def subtract_offset(self, offset: AngularCoordinates) -> AngularCoordinates:
        """Remove an offset applied before this instance.

        Equivalent to ``self.add_offset(offset.revert())``; see
        :meth:`add_offset` for the ordering convention.

        Args:
            offset (AngularCoordinates): Offset to subtract.

        Returns:
            AngularCoordinates: New instance with the offset removed.
        """
        return self.add_offset(offset.revert())

    def shifted_by(self, dt: float) -> AngularCoordinates:
        """Return the coordinates extrapolated by ``dt`` seconds.

        The shift uses a constant-acceleration model: the rotation is
        advanced by the small rotation ``exp(Omega dt + 0.5 dOmega/dt dt^2)``
        applied after the current one, the rate is advanced by
        ``dOmega/dt dt`` and the acceleration is kept.  This is a local
        approximation and *not* a replacement for attitude propagation; it
        is meant for small shifts or coarse accuracy.

        Args:
            dt (float): Time shift in seconds.

        Returns:
            AngularCoordinates: Shifted coordinates.
        """
        rate = self._rotation_rate
        acceleration = self._rotation_acceleration
        evolution = Quaternion.from_rotation_vector(rate * dt + 0.5 * acceleration * dt * dt)
        return AngularCoordinates._from_internal(
            evolution * self._rotation,
            rate + acceleration * dt,
            acceleration,
        )

    # Vectors and conversions

    def apply_to(self, v: ArrayLike) -> jax.Array:
        """Rotate a vector by the rotation part.

        Args:
            v (ArrayLike): Vector of shape ``(3,)``.

        Returns:
            jnp.ndarray: Rotated vector of shape ``(3,)``.
        """
        return self._rotation.apply_to(v)

    def modified_rodrigues(self, sign: float) -> jax.Array:
        """Convert to a modified Rodrigues vector and its time derivatives.

        See :func:`attitudejax.angular_coordinates.rodrigues.to_modified_rodrigues`.

        Args:
            sign (float): ``+1.0`` or ``-1.0``, selects the quaternion representative.

        Returns:
            jnp.ndarray: Array of shape ``(3, 3)``.
        """
        from attitudejax.angular_coordinates.rodrigues import to_modified_rodrigues

        return to_modified_rodrigues(self, sign)

    @classmethod
    def from_modified_rodrigues(cls, r: ArrayLike) -> AngularCoordinates:
        """Create from a modified Rodrigues vector and its time derivatives.

        See :func:`attitudejax.angular_coordinates.rodrigues.from_modified_rodrigues`.

        Args:
            r (ArrayLike): Array of shape ``(3, 3)``.

        Returns:
            AngularCoordinates: Equivalent coordinates.
        """
        from attitudejax.angular_coordinates.rodrigues import from_modified_rodrigues

        return from_modified_rodrigues(r)

    # Comparisons

    def is_close(self, other: AngularCoordinates, atol: float | None = None) -> bool:
        """Compare with another instance within an absolute tolerance.

        Rotations are compared through :meth:`Quaternion.distance`, so
        antipodal representatives are equal.

        Args:
            other (AngularCoordinates): Coordinates to compare with.
            atol (float | None): Absolute tolerance. Defaults to the
                dtype-adaptive attitude epsilon.

        Returns:
            bool: ``True`` if rotation, rate and acceleration all match.
        """
        if atol is None:
            atol = get_attitude_epsilon()
        return bool(
            (self._rotation.distance(other.rotation) <= atol)
            & jnp.all(jnp.abs(self._rotation_rate - other.rotation_rate) <= atol)
            & jnp.all(jnp.abs(self._rotation_acceleration - other.rotation_acceleration) <= atol)
        )

    def __repr__(self) -> str:
        return (
            f"AngularCoordinates(rotation={self._rotation!r}, "
            f"rotation_rate={self._rotation_rate.tolist()}, "
            f"rotation_acceleration={self._rotation_acceleration.tolist()})"
        )


def estimate_rate(start: Quaternion, end: Quaternion, dt: float) -> jax.Array:
    """Estimate the constant rate turning ``start`` into ``end`` in ``dt``.

    The evolution ``end * start.inverse()`` is converted to its shortest
    rotation vector, so rotations of more than half a turn between the two
    instants alias to the opposite direction.

    Args:
        start (Quaternion): Rotation at the start instant.
        end (Quaternion): Rotation at the end instant.
        dt (float): Duration between both instants in seconds.

    Returns:
        jnp.ndarray: Rotation rate of shape ``(3,)`` [rad/s].
    """
    evolution = end * start.inverse()
    return evolution.to_rotation_vector() / dt


# Register as JAX pytree
jax.tree_util.register_pytree_node(
    AngularCoordinates,
    lambda ac: ((ac._rotation, ac._rotation_rate, ac._rotation_acceleration), None),
    lambda _, children: AngularCoordinates._from_internal(*children),
)
