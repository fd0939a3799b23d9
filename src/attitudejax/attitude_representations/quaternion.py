"""Quaternion rotation primitive.

Provides the ``Quaternion`` class representing a rotation as a unit
quaternion in scalar-first convention ``[w, x, y, z]``.

The quaternion is normalized on construction and acts on vectors
actively: ``q.apply_to(v)`` returns ``q v q*``.  Composition follows the
Hamilton product, so ``a * b`` is the rotation that applies ``b`` first and
``a`` afterward.  ``q`` and ``-q`` describe the same rotation; equality is
component-wise, while :meth:`Quaternion.distance` ignores the sign.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from attitudejax.attitude_representations._tolerance import get_attitude_epsilon
from attitudejax.attitude_representations.conversions import (
    axis_angle_to_quaternion,
    quaternion_conjugate,
    quaternion_multiply,
    quaternion_product,
    quaternion_rotate_vector,
    quaternion_to_axis_angle,
    quaternion_to_rotation_vector,
    rotation_vector_to_quaternion,
)
from attitudejax.config import get_dtype
from attitudejax.utils import from_radians, to_radians


class Quaternion:
    """Rotation stored as a normalized scalar-first quaternion.

    The components ``[w, x, y, z]`` live in a single ``(4,)`` array, which
    is the only pytree leaf of an instance.

    Args:
        w (float): Scalar part.
        x (float): Vector part along the first axis.
        y (float): Vector part along the second axis.
        z (float): Vector part along the third axis.
    """

    __slots__ = ('_data',)

    def __init__(self, w: float, x: float, y: float, z: float) -> None:
        data = jnp.array([w, x, y, z], dtype=get_dtype())
        self._data = data / jnp.linalg.norm(data)

    @classmethod
    def _from_internal(cls, data: jax.Array) -> Quaternion:
        """Wrap a kernel output as-is, skipping normalization."""
        obj = object.__new__(cls)
        obj._data = data
        return obj

    # Components

    @property
    def w(self) -> jax.Array:
        return self._data[0]

    @property
    def x(self) -> jax.Array:
        return self._data[1]

    @property
    def y(self) -> jax.Array:
        return self._data[2]

    @property
    def z(self) -> jax.Array:
        return self._data[3]

    @property
    def vector(self) -> jax.Array:
        """Vector part ``[x, y, z]`` of shape ``(3,)``."""
        return self._data[1:]

    # Constructors and array views

    @classmethod
    def identity(cls) -> Quaternion:
        """Return the identity rotation ``[1, 0, 0, 0]``."""
        return cls._from_internal(jnp.array([1.0, 0.0, 0.0, 0.0], dtype=get_dtype()))

    @classmethod
    def from_vector(cls, v: ArrayLike, scalar_first: bool = True) -> Quaternion:
        """Build from four components, normalizing them.

        Args:
            v (ArrayLike): Components, ``[w, x, y, z]`` when ``scalar_first``
                is ``True`` and ``[x, y, z, w]`` otherwise.

        Returns:
            Quaternion: Normalized quaternion.
        """
        data = jnp.asarray(v, dtype=get_dtype())
        if not scalar_first:
            data = jnp.roll(data, 1)
        return cls._from_internal(data / jnp.linalg.norm(data))

    def to_vector(self, scalar_first: bool = True) -> jax.Array:
        """Components as a ``(4,)`` array, scalar part first unless ``scalar_first`` is ``False``."""
        return self._data if scalar_first else jnp.roll(self._data, -1)

    @classmethod
    def from_axis_angle(cls, axis: ArrayLike, angle: float, use_degrees: bool = False) -> Quaternion:
        """Create the rotation of ``angle`` about ``axis``.

        Args:
            axis (ArrayLike): Rotation axis of shape ``(3,)``, need not be unit length.
            angle (float): Rotation angle, positive counter-clockwise about ``axis``.
            use_degrees (bool): If ``True``, interpret ``angle`` as degrees. Default: ``False``.

        Returns:
            Quaternion: Equivalent quaternion.
        """
        _float = get_dtype()
        axis = jnp.asarray(axis, dtype=_float)
        angle = jnp.asarray(to_radians(angle, use_degrees), dtype=_float)
        return cls._from_internal(axis_angle_to_quaternion(axis, angle))

    @classmethod
    def from_rotation_vector(cls, v: ArrayLike) -> Quaternion:
        """Create from a rotation vector ``angle * axis`` (radians).

        Args:
            v (ArrayLike): Rotation vector of shape ``(3,)``.

        Returns:
            Quaternion: Equivalent quaternion; the zero vector gives the identity.
        """
        return cls._from_internal(rotation_vector_to_quaternion(jnp.asarray(v, dtype=get_dtype())))

    def to_rotation_vector(self) -> jax.Array:
        """Return the shortest rotation vector, with angle in ``[0, pi]``.

        Returns:
            jnp.ndarray: Rotation vector of shape ``(3,)``.
        """
        return quaternion_to_rotation_vector(self._data)

    def axis(self) -> jax.Array:
        """Return the unit rotation axis matching :meth:`angle`.

        Returns:
            jnp.ndarray: Axis of shape ``(3,)``; ``[1, 0, 0]`` for the identity.
        """
        axis, _ = quaternion_to_axis_angle(self._data)
        return axis

    def angle(self, use_degrees: bool = False) -> jax.Array:
        """Return the rotation angle in ``[0, 2*pi]`` for this representative.

        ``-q`` yields ``2*pi`` minus the angle of ``q``.

        Args:
            use_degrees (bool): If ``True``, return degrees. Default: ``False``.

        Returns:
            jax.Array: Rotation angle.
        """
        _, angle = quaternion_to_axis_angle(self._data)
        return from_radians(angle, use_degrees)

    # Algebra

    def norm(self) -> jax.Array:
        """Euclidean norm of the stored components."""
        return jnp.linalg.norm(self._data)

    def conjugate(self) -> Quaternion:
        """Quaternion with negated vector part, ``[w, -x, -y, -z]``."""
        return Quaternion._from_internal(quaternion_conjugate(self._data))

    def inverse(self) -> Quaternion:
        """Rotation undoing this one; the conjugate divided by the norm."""
        return Quaternion._from_internal(quaternion_conjugate(self._data) / self.norm())

    def dot(self, other: Quaternion) -> jax.Array:
        """Return the 4D dot product with another quaternion.

        Its sign tells whether both representatives lie on the same
        hemisphere of the unit 3-sphere.

        Args:
            other (Quaternion): Other quaternion.

        Returns:
            jax.Array: Scalar dot product.
        """
        return jnp.dot(self._data, other._data)

    def distance(self, other: Quaternion) -> jax.Array:
        """Return the angle of the rotation ``self * other.inverse()``.

        The result lies in ``[0, pi]`` and does not depend on the signs of
        either representative.

        Args:
            other (Quaternion): Other rotation.

        Returns:
            jax.Array: Angular distance in radians.
        """
        p = quaternion_product(self._data, quaternion_conjugate(other._data))
        return 2.0 * jnp.arctan2(jnp.linalg.norm(p[1:]), jnp.abs(p[0]))

    def apply_to(self, v: ArrayLike) -> jax.Array:
        """Rotate a vector.

        Args:
            v (ArrayLike): Vector of shape ``(3,)``.

        Returns:
            jnp.ndarray: Rotated vector of shape ``(3,)``.
        """
        return quaternion_rotate_vector(self._data, jnp.asarray(v, dtype=self._data.dtype))

    def apply_inverse_to(self, v: ArrayLike) -> jax.Array:
        """Rotate a vector by the inverse rotation.

        Args:
            v (ArrayLike): Vector of shape ``(3,)``.

        Returns:
            jnp.ndarray: Rotated vector of shape ``(3,)``.
        """
        return quaternion_rotate_vector(
            quaternion_conjugate(self._data), jnp.asarray(v, dtype=self._data.dtype)
        )

    # Operators

    def __mul__(self, other: Quaternion) -> Quaternion:
        """Compose rotations: ``other`` first, then ``self``."""
        if isinstance(other, Quaternion):
            return Quaternion._from_internal(quaternion_multiply(self._data, other._data))
        return NotImplemented

    def __neg__(self) -> Quaternion:
        """Antipodal representative of the same rotation."""
        return Quaternion._from_internal(-self._data)

    def __getitem__(self, idx: int) -> jax.Array:
        return self._data[idx]

    def __eq__(self, other: object) -> bool:
        """Component-wise comparison within the attitude epsilon; ``q != -q``."""
        if isinstance(other, Quaternion):
            return bool(jnp.all(jnp.abs(self._data - other._data) < get_attitude_epsilon()))
        return NotImplemented

    def _format(self, fmt: str) -> str:
        w, x, y, z = (format(float(c), fmt) for c in self._data)
        return f"Quaternion(w={w}, x={x}, y={y}, z={z})"

    def __str__(self) -> str:
        return self._format(".6f")

    def __repr__(self) -> str:
        return self._format("")


# Register as JAX pytree
jax.tree_util.register_pytree_node(
    Quaternion,
    lambda q: ((q._data,), None),
    lambda _, data: Quaternion._from_internal(*data),
)
