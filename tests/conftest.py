import jax.numpy as jnp
import pytest

from attitudejax.config import set_dtype


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Run every test in float64.

    Interpolation tolerances assume double precision, and pytest-xdist
    workers start on the float32 default. test_config.py overrides this
    with its own float32 fixture.
    """
    set_dtype(jnp.float64)
