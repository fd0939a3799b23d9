"""Comparison tolerance matching the configured float precision.

Backs ``Quaternion.__eq__`` and the default tolerance of
``AngularCoordinates.is_close``.
"""

from __future__ import annotations

import jax.numpy as jnp

from attitudejax.config import get_dtype

# Half-precision types fall back to the loosest value
_EPSILONS = ((jnp.float64, 1e-12), (jnp.float32, 1e-6))
_HALF_PRECISION_EPSILON = 1e-3


def get_attitude_epsilon() -> float:
    """Absolute tolerance for component-wise attitude comparisons.

    Returns:
        float: ``1e-12`` in float64, ``1e-6`` in float32 and ``1e-3`` for
        ``float16`` and ``bfloat16``.
    """
    dtype = get_dtype()
    for candidate, epsilon in _EPSILONS:
        if dtype == candidate:
            return epsilon
    return _HALF_PRECISION_EPSILON
