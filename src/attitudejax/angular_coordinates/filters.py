"""Derivative filter for angular-coordinate samples.

Provides the ``AngularDerivativesFilter`` enum stating which derivative
orders of a sample are trusted.  Interpolation consumes only the trusted
orders and synthesizes the others.
"""

from __future__ import annotations

import enum


class AngularDerivativesFilter(enum.IntEnum):
    """Trusted derivative orders in an angular-coordinate sample.

    Values equal the highest trusted derivative order, so they double as
    slice bounds over the rows of a modified Rodrigues triple.

    Attributes:
        USE_R: Rotation only (index 0).  Rates are estimated from
            consecutive rotations.
        USE_RR: Rotation and rotation rate (index 1).
        USE_RRA: Rotation, rotation rate and rotation acceleration (index 2).
    """

    USE_R = 0
    USE_RR = 1
    USE_RRA = 2

    @property
    def max_order(self) -> int:
        """Highest derivative order taken from the sample."""
        return int(self.value)

    @classmethod
    def from_order(cls, order: int) -> AngularDerivativesFilter:
        """Return the filter trusting derivatives up to ``order``.

        Args:
            order (int): Highest trusted derivative order, 0 to 2.

        Returns:
            AngularDerivativesFilter: Matching filter.

        Raises:
            ValueError: If no filter has this order.
        """
        for candidate in cls:
            if candidate.max_order == order:
                return candidate
        raise ValueError(f"Unsupported derivation order {order}. Must be 0, 1 or 2")
