"""Hermite polynomial interpolation with derivatives.

Provides :func:`hermite_interpolate`, which builds the polynomial matching
values and leading derivatives at a set of abscissae and evaluates it (and
its derivatives) at a query point.

The polynomial is kept in Newton form.  Each abscissa is repeated once per
known derivative order; divided differences over a run of identical nodes
are replaced by ``f^(j) / j!`` (confluent divided differences).  Evaluation
uses Horner's scheme extended to carry derivatives::

    P_j(x)      = c_j + (x - z_j) P_{j+1}(x)
    P_j^(p)(x)  = (x - z_j) P_{j+1}^(p)(x) + p P_{j+1}^(p-1)(x)

Abscissae must be distinct; their order does not matter.  The loops run
over the (small) number of conditions at trace time, so the function is
usable under ``jax.jit`` for a fixed sample shape.
"""

from __future__ import annotations

import math

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from attitudejax.config import get_dtype


def hermite_interpolate(
    abscissae: ArrayLike,
    samples: ArrayLike,
    x: ArrayLike,
    order: int = 2,
) -> jax.Array:
    """Evaluate the Hermite interpolating polynomial and its derivatives.

    Args:
        abscissae: Sample abscissae of shape ``(n,)``, pairwise distinct.
        samples: Sample data of shape ``(n, k, d)``: ``samples[i, j]`` is the
            ``j``-th derivative of the ``d``-dimensional function at
            ``abscissae[i]``.  All points carry the same ``k >= 1`` orders.
        x: Query abscissa (scalar).
        order (int): Highest derivative order to return.

    Returns:
        Array of shape ``(order + 1, d)``: the polynomial value followed by
        its first ``order`` derivatives at ``x``.

    Examples:
        ```python
        import jax.numpy as jnp
        xs = jnp.array([0.0, 1.0])
        ys = jnp.array([[[0.0], [0.0]], [[1.0], [2.0]]])  # f = t^2
        hermite_interpolate(xs, ys, 0.5)  # [[0.25], [1.0], [2.0]]
        ```
    """
    _float = get_dtype()
    abscissae = jnp.asarray(abscissae, dtype=_float)
    samples = jnp.asarray(samples, dtype=_float)
    x = jnp.asarray(x, dtype=_float)

    n, k, _ = samples.shape
    m = n * k
    nodes = jnp.repeat(abscissae, k)

    # Divided differences, one column per level; column[i] = f[z_i, ..., z_{i+level}]
    column = [samples[i // k, 0] for i in range(m)]
    coefficients = [column[0]]
    for level in range(1, m):
        next_column = []
        for i in range(m - level):
            j = i + level
            if i // k == j // k:
                next_column.append(samples[i // k, level] / math.factorial(level))
            else:
                next_column.append((column[i + 1] - column[i]) / (nodes[j] - nodes[i]))
        column = next_column
        coefficients.append(column[0])

    values = [jnp.zeros_like(coefficients[0]) for _ in range(order + 1)]
    for j in range(m - 1, -1, -1):
        h = x - nodes[j]
        for p in range(order, 0, -1):
            values[p] = values[p] * h + p * values[p - 1]
        values[0] = values[0] * h + coefficients[j]

    return jnp.stack(values)
