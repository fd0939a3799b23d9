"""Pure quaternion kernels.

All functions operate on raw JAX arrays (no class instances) so they can be
shared by :class:`~attitudejax.attitude_representations.Quaternion` and the
angular-coordinate kernels, and used under ``jax.jit``.

Convention:
    Quaternion layout is scalar-first: ``[w, x, y, z]`` (shape ``(4,)``).
    Rotations are active: ``q`` rotates a vector ``v`` into ``q v q*``.
    Rotation vectors are ``angle * axis`` (shape ``(3,)``).
"""

from __future__ import annotations

import jax
import jax.numpy as jnp


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

def quaternion_product(q1: jax.Array, q2: jax.Array) -> jax.Array:
    """Hamilton product without renormalization.

    Needed for products involving quaternion time-derivatives, which are
    not unit quaternions.

    Args:
        q1 (jax.Array): Left factor of shape ``(4,)`` in scalar-first order.
        q2 (jax.Array): Right factor of shape ``(4,)`` in scalar-first order.

    Returns:
        jnp.ndarray: Product of shape ``(4,)``.
    """
    s1, v1 = q1[0], q1[1:]
    s2, v2 = q2[0], q2[1:]

    s = s1 * s2 - jnp.dot(v1, v2)
    v = s1 * v2 + s2 * v1 + jnp.cross(v1, v2)

    return jnp.concatenate([jnp.array([s]), v])


def quaternion_multiply(q1: jax.Array, q2: jax.Array) -> jax.Array:
    """Hamilton product of two unit quaternions.

    The result is renormalized to absorb rounding drift.  As rotations,
    ``q2`` is applied first and ``q1`` afterward.

    Args:
        q1 (jax.Array): First quaternion of shape ``(4,)`` in scalar-first order.
        q2 (jax.Array): Second quaternion of shape ``(4,)`` in scalar-first order.

    Returns:
        jnp.ndarray: Product quaternion of shape ``(4,)``.
    """
    result = quaternion_product(q1, q2)
    return result / jnp.linalg.norm(result)


def quaternion_conjugate(q: jax.Array) -> jax.Array:
    """Return ``[w, -x, -y, -z]``.

    Args:
        q (jax.Array): Quaternion of shape ``(4,)``.

    Returns:
        jnp.ndarray: Conjugate of shape ``(4,)``.
    """
    return q * jnp.array([1.0, -1.0, -1.0, -1.0], dtype=q.dtype)


def quaternion_rotate_vector(q: jax.Array, v: jax.Array) -> jax.Array:
    """Rotate a vector by a unit quaternion.

    Evaluates ``q v q*`` in the expanded form
    ``v + 2w (u x v) + 2 u x (u x v)`` where ``u`` is the vector part.

    Args:
        q (jax.Array): Unit quaternion of shape ``(4,)``.
        v (jax.Array): Vector of shape ``(3,)``.

    Returns:
        jnp.ndarray: Rotated vector of shape ``(3,)``.
    """
    w, u = q[0], q[1:]
    t = 2.0 * jnp.cross(u, v)
    return v + w * t + jnp.cross(u, t)


# ---------------------------------------------------------------------------
# Axis-angle
# ---------------------------------------------------------------------------

def axis_angle_to_quaternion(axis: jax.Array, angle: jax.Array) -> jax.Array:
    """Quaternion of the rotation by ``angle`` radians about ``axis``.

    ``axis`` need not be unit length; it is normalized first.

    Args:
        axis (jax.Array): Rotation axis of shape ``(3,)``.
        angle (jax.Array): Scalar angle in radians.

    Returns:
        jnp.ndarray: Unit quaternion of shape ``(4,)``.
    """
    unit = axis / jnp.linalg.norm(axis)
    half = 0.5 * angle
    return jnp.concatenate([jnp.array([jnp.cos(half)]), jnp.sin(half) * unit])


def quaternion_to_axis_angle(q: jax.Array) -> tuple[jax.Array, jax.Array]:
    """Axis and angle of this particular representative.

    The angle spans ``[0, 2*pi]``, so ``q`` and ``-q`` give complementary
    angles.  A null rotation reports the ``[1, 0, 0]`` axis.

    Args:
        q (jax.Array): Unit quaternion of shape ``(4,)``.

    Returns:
        tuple: ``(axis, angle)``, shapes ``(3,)`` and ``()``.
    """
    sin_half = jnp.linalg.norm(q[1:])
    angle = 2.0 * jnp.arctan2(sin_half, q[0])

    degenerate = sin_half <= 1e-15
    axis = jnp.where(
        degenerate,
        jnp.array([1.0, 0.0, 0.0], dtype=q.dtype),
        q[1:] / jnp.where(degenerate, 1.0, sin_half),
    )
    return axis, angle


# ---------------------------------------------------------------------------
# Rotation vector (exponential and logarithm maps)
# ---------------------------------------------------------------------------

def rotation_vector_to_quaternion(v: jax.Array) -> jax.Array:
    """Exponential map from a rotation vector to a unit quaternion.

    Uses ``sin(theta/2)/theta = sinc(theta/(2 pi))/2`` so the zero vector
    maps to the identity without a special case.

    Args:
        v (jax.Array): Rotation vector ``angle * axis`` of shape ``(3,)``.

    Returns:
        jnp.ndarray: Unit quaternion of shape ``(4,)``.
    """
    angle = jnp.linalg.norm(v)
    scale = 0.5 * jnp.sinc(angle / (2.0 * jnp.pi))
    q = jnp.concatenate([jnp.array([jnp.cos(0.5 * angle)]), scale * v])
    return q / jnp.linalg.norm(q)


def quaternion_to_rotation_vector(q: jax.Array) -> jax.Array:
    """Logarithm map from a unit quaternion to its shortest rotation vector.

    The representative with non-negative scalar part is used, so the
    returned angle lies in ``[0, pi]``.

    Args:
        q (jax.Array): Unit quaternion of shape ``(4,)``.

    Returns:
        jnp.ndarray: Rotation vector of shape ``(3,)``.
    """
    q = jnp.where(q[0] < 0.0, -q, q)
    v = q[1:]
    v_norm = jnp.linalg.norm(v)
    angle = 2.0 * jnp.arctan2(v_norm, q[0])

    # angle / |v| tends to 2 / w as the rotation vanishes
    safe_norm = jnp.where(v_norm > 1e-15, v_norm, 1.0)
    scale = jnp.where(v_norm > 1e-15, angle / safe_norm, 2.0 / q[0])
    return scale * v
