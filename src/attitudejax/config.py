"""Float precision shared by every attitudejax value.

Quaternions, angular coordinates and interpolation kernels cast their
inputs through :func:`get_dtype`.  The default is ``jnp.float32``.
Interpolation close to the modified Rodrigues singularity needs
``jnp.float64``; selecting it also switches on ``jax_enable_x64``.

Choose the precision first, before creating any value: existing arrays keep
the dtype they were built with, and mixing them promotes or truncates
without warning.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

_SUPPORTED = (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64)

_dtype = jnp.float32


def set_dtype(dtype) -> None:
    """Select the float dtype used from now on.

    Args:
        dtype: ``jnp.float16``, ``jnp.bfloat16``, ``jnp.float32`` or
            ``jnp.float64``.  The latter enables JAX's 64-bit mode.

    Raises:
        ValueError: For any other value.
    """
    global _dtype
    if not any(dtype == supported for supported in _SUPPORTED):
        names = ", ".join(f"jnp.{supported.__name__}" for supported in _SUPPORTED)
        raise ValueError(f"Unsupported dtype {dtype!r}, expected one of {names}")
    if dtype == jnp.float64:
        jax.config.update("jax_enable_x64", True)
    _dtype = dtype


def get_dtype():
    """Float dtype currently in use, ``jnp.float32`` unless changed."""
    return _dtype
