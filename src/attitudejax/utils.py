"""Shared helpers for angle units and opaque time values.

The angle helpers follow the ``use_degrees`` convention of the public
constructors.  The time helpers let every time-stamped value accept plain
float seconds, ``datetime.datetime`` instances, or any epoch type whose
difference yields seconds and which can be shifted by adding seconds.
"""

from __future__ import annotations

import datetime
from typing import Any

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike


def to_radians(angle: ArrayLike, use_degrees: bool) -> Array:
    """Angle in radians, reading ``angle`` as degrees when ``use_degrees`` is set."""
    return jnp.where(use_degrees, jnp.deg2rad(angle), angle)


def from_radians(angle: ArrayLike, use_degrees: bool) -> Array:
    """Radian ``angle`` expressed in degrees when ``use_degrees`` is set."""
    return jnp.where(use_degrees, jnp.rad2deg(angle), angle)


def time_difference(time: Any, reference: Any) -> float:
    """Return ``time - reference`` in seconds.

    Args:
        time: Later (or earlier) instant.
        reference: Instant the difference is measured from.

    Returns:
        float: Signed duration in seconds.
    """
    delta = time - reference
    if isinstance(delta, datetime.timedelta):
        return delta.total_seconds()
    return float(delta)


def shift_time(time: Any, dt: float) -> Any:
    """Return the instant ``dt`` seconds after ``time``.

    Args:
        time: Instant to shift.
        dt (float): Shift in seconds, may be negative.

    Returns:
        An instant of the same type as ``time``.
    """
    if isinstance(time, datetime.datetime):
        return time + datetime.timedelta(seconds=float(dt))
    return time + dt
