"""
attitudejax rebuilds continuous spacecraft attitude histories from sparse samples, implemented in JAX.
"""

from .config import set_dtype, get_dtype

from .errors import InsufficientDataError, InternalInvariantViolation

from .attitude_representations import Quaternion

from .angular_coordinates import (
    AngularCoordinates,
    AngularDerivativesFilter,
    AngularEphemeris,
    TimeStampedAngularCoordinates,
    estimate_rate,
    from_modified_rodrigues,
    hermite_interpolate,
    interpolate,
    to_modified_rodrigues,
)

__all__ = [
    # Config
    "set_dtype",
    "get_dtype",
    # Errors
    "InsufficientDataError",
    "InternalInvariantViolation",
    # Attitude Representations
    "Quaternion",
    # Angular Coordinates
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
