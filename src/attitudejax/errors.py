"""Exceptions raised by the angular-coordinate interpolation engine."""


class InsufficientDataError(ValueError):
    """Raised when a sample holds too few points for the requested filter.

    An empty sample can never be interpolated, and rotation-only samples
    need at least two points so a mean rate can be estimated from
    consecutive rotations.
    """


class InternalInvariantViolation(RuntimeError):
    """Raised when the singularity-avoidance loop exhausts its attempt budget.

    Well-formed samples always settle on a safe offset within the budget,
    so this indicates a defect or corrupted input rather than a user error.
    """
