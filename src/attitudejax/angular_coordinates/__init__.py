"""Angular coordinates and their interpolation.

Provides the value types and algorithms for rebuilding a continuous
attitude history from sparse samples:

- :class:`AngularCoordinates` -- rotation, rate and acceleration with the
  offset algebra (``add_offset``, ``subtract_offset``, ``revert``,
  ``shifted_by``)
- :class:`TimeStampedAngularCoordinates` -- the same, attached to an instant
- :class:`AngularDerivativesFilter` -- derivative orders trusted in a sample
- :func:`to_modified_rodrigues` / :func:`from_modified_rodrigues` -- the
  interpolation parameterization
- :func:`hermite_interpolate` -- Hermite polynomial with derivatives
- :func:`interpolate` -- the singularity-avoiding interpolation driver
- :class:`AngularEphemeris` -- tabulated attitude playback
"""

from attitudejax.angular_coordinates.angular_coordinates import (
    AngularCoordinates,
    estimate_rate,
)
from attitudejax.angular_coordinates.filters import AngularDerivativesFilter
from attitudejax.angular_coordinates.timestamped import TimeStampedAngularCoordinates
from attitudejax.angular_coordinates.rodrigues import (
    from_modified_rodrigues,
    to_modified_rodrigues,
)
from attitudejax.angular_coordinates.hermite import hermite_interpolate
from attitudejax.angular_coordinates.interpolation import interpolate
from attitudejax.angular_coordinates.ephemeris import AngularEphemeris

__all__ = [
    "AngularCoordinates",
    "AngularDerivativesFilter",
    "AngularEphemeris",
    "TimeStampedAngularCoordinates",
    "estimate_rate",
    "from_modified_rodrigues",
    "hermite_interpolate",
    "interpolate",
    "to_modified_rodrigues",
]
