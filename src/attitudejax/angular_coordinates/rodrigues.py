"""Modified Rodrigues parameterization with time derivatives.

The modified Rodrigues vector of a rotation of angle ``theta`` about the
unit axis ``u`` is ``tan(theta/4) u``.  In quaternion components it reads
``r = v / (1 + w)``, which stays finite for every angle except ``2*pi``
(``w = -1``).  Picking the sign of the quaternion representative moves that
singularity, so :func:`to_modified_rodrigues` takes an explicit sign.

Polynomial interpolation of ``r`` keeps the interpolated rate the exact
derivative of the interpolated rotation, which is why the interpolation
driver works on these vectors (Tanygin, *Attitude Interpolation*; Shuster,
*A Survey of Attitude Representations*).

Quaternion kinematics under the ``dR/dt = [Omega]x R`` convention::

    q_dot     = 0.5 (0, Omega) q
    q_dot_dot = 0.5 (0, dOmega/dt) q + 0.5 (0, Omega) q_dot

and conversely ``Omega = vec(2 q_dot q*)``, ``dOmega/dt = vec(2 q_dot_dot q*)``.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from attitudejax.angular_coordinates.angular_coordinates import AngularCoordinates
from attitudejax.attitude_representations import Quaternion
from attitudejax.attitude_representations.conversions import (
    quaternion_conjugate,
    quaternion_product,
)
from attitudejax.config import get_dtype


def _pure(v: jax.Array) -> jax.Array:
    """Embed a 3-vector as the pure quaternion ``(0, v)``."""
    return jnp.concatenate([jnp.zeros(1, dtype=v.dtype), v])


def modified_rodrigues_kernel(
    q: jax.Array, omega: jax.Array, omega_dot: jax.Array, sign: float | jax.Array
) -> jax.Array:
    """Raw-array form of :func:`to_modified_rodrigues`.

    Args:
        q (jax.Array): Unit quaternion of shape ``(4,)``.
        omega (jax.Array): Rotation rate of shape ``(3,)``.
        omega_dot (jax.Array): Rotation acceleration of shape ``(3,)``.
        sign (float | jax.Array): ``+1`` or ``-1``.

    Returns:
        jnp.ndarray: Rows ``[r, r_dot, r_dot_dot]``, shape ``(3, 3)``.
    """
    q = sign * q
    q_dot = 0.5 * quaternion_product(_pure(omega), q)
    q_dot_dot = 0.5 * (quaternion_product(_pure(omega_dot), q)
                       + quaternion_product(_pure(omega), q_dot))

    w, w_dot, w_dot_dot = q[0], q_dot[0], q_dot_dot[0]
    inv = 1.0 / (1.0 + w)

    # r (1 + w) = v, differentiated twice
    r = inv * q[1:]
    r_dot = inv * (q_dot[1:] - r * w_dot)
    r_dot_dot = inv * (q_dot_dot[1:] - 2.0 * r_dot * w_dot - r * w_dot_dot)

    return jnp.stack([r, r_dot, r_dot_dot])


def inverse_modified_rodrigues_kernel(r: jax.Array) -> tuple[jax.Array, jax.Array, jax.Array]:
    """Raw-array form of :func:`from_modified_rodrigues`.

    Args:
        r (jax.Array): Rows ``[r, r_dot, r_dot_dot]``, shape ``(3, 3)``.

    Returns:
        tuple: ``(q, omega, omega_dot)`` with shapes ``(4,)``, ``(3,)``, ``(3,)``.
    """
    p, p_dot, p_dot_dot = r[0], r[1], r[2]

    # q = ((1 - |r|^2), 2 r) / (1 + |r|^2) = (k - 1, k r) with k = 2 / (1 + |r|^2)
    k = 2.0 / (1.0 + jnp.dot(p, p))
    pp_dot = jnp.dot(p, p_dot)
    k_dot = -k * k * pp_dot
    k_dot_dot = -2.0 * k * k_dot * pp_dot - k * k * (jnp.dot(p_dot, p_dot) + jnp.dot(p, p_dot_dot))

    q = jnp.concatenate([jnp.array([k - 1.0]), k * p])
    q_dot = jnp.concatenate([jnp.array([k_dot]), k_dot * p + k * p_dot])
    q_dot_dot = jnp.concatenate([
        jnp.array([k_dot_dot]),
        k_dot_dot * p + 2.0 * k_dot * p_dot + k * p_dot_dot,
    ])

    q_conj = quaternion_conjugate(q)
    omega = 2.0 * quaternion_product(q_dot, q_conj)[1:]
    omega_dot = 2.0 * quaternion_product(q_dot_dot, q_conj)[1:]

    return q, omega, omega_dot


def to_modified_rodrigues(coordinates, sign: float) -> jax.Array:
    """Convert angular coordinates to a modified Rodrigues vector and derivatives.

    The caller must keep ``sign * w`` away from ``-1``; the interpolation
    driver enforces this with its singularity threshold.

    Args:
        coordinates (AngularCoordinates | TimeStampedAngularCoordinates):
            Coordinates to convert.
        sign (float): ``+1.0`` or ``-1.0``, selects which of ``q`` and ``-q``
            is converted.

    Returns:
        jnp.ndarray: Array of shape ``(3, 3)``; row 0 is the vector, rows 1
        and 2 its first and second time derivatives.
    """
    return modified_rodrigues_kernel(
        coordinates.rotation.to_vector(),
        coordinates.rotation_rate,
        coordinates.rotation_acceleration,
        sign,
    )


def from_modified_rodrigues(r: ArrayLike) -> AngularCoordinates:
    """Convert a modified Rodrigues vector and derivatives to angular coordinates.

    Args:
        r (ArrayLike): Array of shape ``(3, 3)``; row 0 is the vector, rows 1
            and 2 its first and second time derivatives.

    Returns:
        AngularCoordinates: Coordinates whose rotation is the scalar-positive
        representative when ``|r| < 1``.
    """
    q, omega, omega_dot = inverse_modified_rodrigues_kernel(jnp.asarray(r, dtype=get_dtype()))
    return AngularCoordinates(Quaternion._from_internal(q), omega, omega_dot)
