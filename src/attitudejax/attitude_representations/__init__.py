"""Rotation primitive for angular coordinates.

Provides :class:`Quaternion`, a scalar-first ``[w, x, y, z]`` unit
quaternion acting actively on vectors, and the raw-array kernels in
:mod:`attitudejax.attitude_representations.conversions` that back it.
"""

from .quaternion import Quaternion

__all__ = [
    "Quaternion",
]
