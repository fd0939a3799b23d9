"""Time-stamped angular coordinates.

Provides ``TimeStampedAngularCoordinates``, an immutable pair of an instant
and an :class:`AngularCoordinates` value.  It is the unit exchanged with
callers and the element type of interpolation samples.

The instant is opaque: float seconds, ``datetime.datetime``, or any epoch
type whose differences are seconds (see :mod:`attitudejax.utils`).
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import jax
from jax.typing import ArrayLike

from attitudejax.angular_coordinates.angular_coordinates import AngularCoordinates
from attitudejax.angular_coordinates.filters import AngularDerivativesFilter
from attitudejax.attitude_representations import Quaternion
from attitudejax.utils import shift_time


def _coordinates_of(value: AngularCoordinates | TimeStampedAngularCoordinates) -> AngularCoordinates:
    if isinstance(value, TimeStampedAngularCoordinates):
        return value.coordinates
    return value


class TimeStampedAngularCoordinates:
    """Angular coordinates attached to an instant.

    This class is registered as a JAX pytree with the wrapped coordinates
    as the only child and the instant as auxiliary data.

    Args:
        time: Instant of the coordinates.
        rotation (Quaternion | None): Rotation. Defaults to the identity.
        rotation_rate (ArrayLike | None): Rotation rate of shape ``(3,)``
            [rad/s]. Defaults to zero.
        rotation_acceleration (ArrayLike | None): Rotation acceleration of
            shape ``(3,)`` [rad/s^2]. Defaults to zero.
    """

    __slots__ = ('_time', '_coordinates')

    def __init__(
        self,
        time: Any,
        rotation: Quaternion | None = None,
        rotation_rate: ArrayLike | None = None,
        rotation_acceleration: ArrayLike | None = None,
    ) -> None:
        self._time = time
        self._coordinates = AngularCoordinates(rotation, rotation_rate, rotation_acceleration)

    @classmethod
    def from_coordinates(cls, time: Any, coordinates: AngularCoordinates) -> TimeStampedAngularCoordinates:
        """Attach an instant to existing coordinates.

        Args:
            time: Instant of the coordinates.
            coordinates (AngularCoordinates): Coordinates to wrap.

        Returns:
            TimeStampedAngularCoordinates: New instance.
        """
        obj = object.__new__(cls)
        obj._time = time
        obj._coordinates = coordinates
        return obj

    # Properties

    @property
    def time(self) -> Any:
        """Instant of the coordinates."""
        return self._time

    @property
    def coordinates(self) -> AngularCoordinates:
        """Wrapped angular coordinates."""
        return self._coordinates

    @property
    def rotation(self) -> Quaternion:
        """Rotation."""
        return self._coordinates.rotation

    @property
    def rotation_rate(self) -> jax.Array:
        """Rotation rate of shape ``(3,)`` [rad/s]."""
        return self._coordinates.rotation_rate

    @property
    def rotation_acceleration(self) -> jax.Array:
        """Rotation acceleration of shape ``(3,)`` [rad/s^2]."""
        return self._coordinates.rotation_acceleration

    # Offset algebra, keeping the instant of this instance

    def revert(self) -> TimeStampedAngularCoordinates:
        """Return coordinates undoing this instance, at the same instant."""
        return TimeStampedAngularCoordinates.from_coordinates(self._time, self._coordinates.revert())

    def add_offset(
        self, offset: AngularCoordinates | TimeStampedAngularCoordinates
    ) -> TimeStampedAngularCoordinates:
        """Compose an offset applied before this instance.

        The instant of the offset, if any, is ignored.  See
        :meth:`AngularCoordinates.add_offset`.

        Args:
            offset: Offset to add.

        Returns:
            TimeStampedAngularCoordinates: Result at this instance's instant.
        """
        return TimeStampedAngularCoordinates.from_coordinates(
            self._time, self._coordinates.add_offset(_coordinates_of(offset))
        )

    def subtract_offset(
        self, offset: AngularCoordinates | TimeStampedAngularCoordinates
    ) -> TimeStampedAngularCoordinates:
        """Remove an offset applied before this instance.

        The instant of the offset, if any, is ignored.  See
        :meth:`AngularCoordinates.subtract_offset`.

        Args:
            offset: Offset to subtract.

        Returns:
            TimeStampedAngularCoordinates: Result at this instance's instant.
        """
        return TimeStampedAngularCoordinates.from_coordinates(
            self._time, self._coordinates.subtract_offset(_coordinates_of(offset))
        )

    def shifted_by(self, dt: float) -> TimeStampedAngularCoordinates:
        """Return the coordinates extrapolated to ``dt`` seconds later.

        Same local constant-acceleration model as
        :meth:`AngularCoordinates.shifted_by`: suitable for small shifts or
        coarse accuracy, not as an attitude propagator.

        Args:
            dt (float): Time shift in seconds.

        Returns:
            TimeStampedAngularCoordinates: Shifted coordinates at ``time + dt``.
        """
        return TimeStampedAngularCoordinates.from_coordinates(
            shift_time(self._time, dt), self._coordinates.shifted_by(dt)
        )

    def apply_to(self, v: ArrayLike) -> jax.Array:
        """Rotate a vector by the rotation part."""
        return self._coordinates.apply_to(v)

    def modified_rodrigues(self, sign: float) -> jax.Array:
        """Modified Rodrigues vector and derivatives, shape ``(3, 3)``."""
        return self._coordinates.modified_rodrigues(sign)

    def is_close(self, other: TimeStampedAngularCoordinates, atol: float | None = None) -> bool:
        """Compare instants exactly and coordinates within ``atol``."""
        return self._time == other.time and self._coordinates.is_close(other.coordinates, atol)

    @classmethod
    def interpolate(
        cls,
        time: Any,
        derivatives_filter: AngularDerivativesFilter,
        sample: Iterable[TimeStampedAngularCoordinates],
    ) -> TimeStampedAngularCoordinates:
        """Interpolate a sample at ``time``.

        See :func:`attitudejax.angular_coordinates.interpolation.interpolate`.
        """
        from attitudejax.angular_coordinates.interpolation import interpolate

        return interpolate(time, derivatives_filter, sample)

    def __repr__(self) -> str:
        return f"TimeStampedAngularCoordinates(time={self._time!r}, coordinates={self._coordinates!r})"


# Register as JAX pytree
jax.tree_util.register_pytree_node(
    TimeStampedAngularCoordinates,
    lambda tac: ((tac._coordinates,), tac._time),
    lambda time, children: TimeStampedAngularCoordinates.from_coordinates(time, children[0]),
)
