"""Singularity-avoiding interpolation of angular coordinates.

:func:`interpolate` rebuilds rotation, rate and acceleration at an arbitrary
instant from a sample of time-stamped angular coordinates:

1. A linear offset model (identity rotation at the target instant, turning
   at the mean sample rate) is built.
2. The offset, shifted to each sample instant, is subtracted from every
   sample, leaving residual rotations that vary slowly.
3. Each residual is converted to a modified Rodrigues vector (plus the
   derivatives the filter trusts) and fed to a Hermite interpolator keyed
   by the time offset from the target.
4. The interpolator is evaluated at offset zero, converted back, and the
   offset model is added again.

Modified Rodrigues vectors blow up at a rotation angle of ``2*pi`` under the
chosen quaternion sign.  When a residual gets too close to it, the offset
model is rotated by ``2*pi / n`` about a fixed axis and the attempt is
restarted.  Each of the ``n`` residuals can block at most one of these
rotations, so ``n + 2`` attempts always suffice for sane samples.

The quaternion sign is chosen greedily so consecutive residuals stay on the
same hemisphere.  This heuristic depends on sample order and is not proven
optimal for samples turning by large angles between consecutive points.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from typing import Any

import jax
import jax.numpy as jnp

from attitudejax.angular_coordinates.angular_coordinates import AngularCoordinates, estimate_rate
from attitudejax.angular_coordinates.filters import AngularDerivativesFilter
from attitudejax.angular_coordinates.hermite import hermite_interpolate
from attitudejax.angular_coordinates.rodrigues import from_modified_rodrigues
from attitudejax.angular_coordinates.timestamped import TimeStampedAngularCoordinates
from attitudejax.attitude_representations import Quaternion
from attitudejax.config import get_dtype
from attitudejax.errors import InsufficientDataError, InternalInvariantViolation
from attitudejax.utils import time_difference

logger = logging.getLogger(__name__)

# Smallest distance kept between a residual's signed scalar part and -1
SINGULARITY_MARGIN = 1.0e-4

_RESTART_AXIS = (1.0, 0.0, 0.0)


def mean_rate(
    derivatives_filter: AngularDerivativesFilter,
    sample: Sequence[TimeStampedAngularCoordinates],
) -> jax.Array:
    """Mean rotation rate of a sample.

    Sample rates are averaged when the filter trusts them; otherwise rates
    are estimated between consecutive rotations and those estimates are
    averaged.

    Args:
        derivatives_filter (AngularDerivativesFilter): Trusted derivative orders.
        sample: Time-ordered sample.

    Returns:
        jnp.ndarray: Mean rate of shape ``(3,)`` [rad/s].

    Raises:
        InsufficientDataError: If the sample is empty, or holds fewer than
            two points with ``USE_R``.
    """
    if len(sample) < 1:
        raise InsufficientDataError("Cannot interpolate an empty sample")

    if derivatives_filter.max_order > 0:
        return jnp.mean(jnp.stack([point.rotation_rate for point in sample]), axis=0)

    if len(sample) < 2:
        raise InsufficientDataError(
            f"Rate estimation needs at least 2 sample points, got {len(sample)}"
        )
    estimates = [
        estimate_rate(previous.rotation, current.rotation, time_difference(current.time, previous.time))
        for previous, current in zip(sample[:-1], sample[1:])
    ]
    return jnp.mean(jnp.stack(estimates), axis=0)


def singularity_threshold(sample_size: int) -> float:
    """Lowest signed quaternion scalar part accepted for a residual.

    Args:
        sample_size (int): Number of sample points.

    Returns:
        float: ``min(-(1 - margin), -cos(pi / (2 n)))``.
    """
    epsilon = 2.0 * math.pi / sample_size
    return min(-(1.0 - SINGULARITY_MARGIN), -math.cos(epsilon / 4.0))


def _remove_offset(
    time: Any,
    derivatives_filter: AngularDerivativesFilter,
    sample: Sequence[TimeStampedAngularCoordinates],
    offset: TimeStampedAngularCoordinates,
    threshold: float,
) -> tuple[jax.Array, jax.Array] | None:
    """Single attempt: Hermite data for one offset model, or ``None`` to retry.

    Returns:
        ``(abscissae, samples)`` with shapes ``(n,)`` and ``(n, k, 3)``, or
        ``None`` when a residual lies too close to the ``2*pi`` singularity.
    """
    n_rows = derivatives_filter.max_order + 1
    abscissae = []
    rodrigues = []

    sign = 1.0
    previous = Quaternion.identity()
    for point in sample:
        dt = time_difference(point.time, time)
        fixed = point.subtract_offset(offset.shifted_by(dt))

        # keep consecutive residuals on the same hemisphere
        rotation = fixed.rotation
        sign = math.copysign(1.0, float(rotation.dot(previous)) * sign)
        previous = rotation

        signed_w = float(rotation.w) * sign
        if signed_w < threshold:
            logger.debug(
                "Residual at %s has signed scalar part %.6f below %.6f",
                point.time, signed_w, threshold,
            )
            return None

        abscissae.append(dt)
        rodrigues.append(fixed.modified_rodrigues(sign)[:n_rows])

    return jnp.asarray(abscissae, dtype=get_dtype()), jnp.stack(rodrigues)


def interpolate(
    time: Any,
    derivatives_filter: AngularDerivativesFilter,
    sample: Iterable[TimeStampedAngularCoordinates],
) -> TimeStampedAngularCoordinates:
    """Interpolate angular coordinates at ``time``.

    Hermite interpolation is performed on modified Rodrigues vectors, so the
    interpolated rate stays the exact derivative of the interpolated
    rotation.  Whatever the filter, the result carries rotation, rate and
    acceleration: untrusted derivatives are synthesized by the interpolating
    polynomial.  This allows adding derivatives to rotation-only data, e.g.
    sample an analytical attitude law and let interpolation supply its
    rates.

    Args:
        time: Target instant.
        derivatives_filter (AngularDerivativesFilter): Derivative orders
            trusted in the sample.
        sample: Time-ordered sample with distinct instants.

    Returns:
        TimeStampedAngularCoordinates: Interpolated coordinates at ``time``.

    Raises:
        InsufficientDataError: If the sample is too small for the filter.
        InternalInvariantViolation: If no safe offset model is found within
            ``n + 2`` attempts.
    """
    derivatives_filter = AngularDerivativesFilter(derivatives_filter)
    sample = list(sample)

    offset = TimeStampedAngularCoordinates(
        time, Quaternion.identity(), mean_rate(derivatives_filter, sample), None
    )

    n = len(sample)
    epsilon = 2.0 * math.pi / n
    threshold = singularity_threshold(n)
    supplementary = AngularCoordinates(Quaternion.from_axis_angle(_RESTART_AXIS, epsilon))

    for attempt in range(n + 2):
        hermite_data = _remove_offset(time, derivatives_filter, sample, offset, threshold)
        if hermite_data is not None:
            abscissae, rodrigues = hermite_data
            p = hermite_interpolate(abscissae, rodrigues, 0.0, order=2)
            interpolated = TimeStampedAngularCoordinates.from_coordinates(
                time, from_modified_rodrigues(p)
            )
            return interpolated.add_offset(offset)

        logger.debug("Restarting interpolation at %s, attempt %d of %d", time, attempt + 1, n + 2)
        offset = offset.add_offset(supplementary)

    logger.error("No safe offset model found for %d sample points at %s", n, time)
    raise InternalInvariantViolation(
        f"Singularity avoidance did not converge after {n + 2} attempts"
    )
