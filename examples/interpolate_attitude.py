# /// script
# requires-python = ">=3.11"
# dependencies = ["typer>=0.9.0", "attitudejax"]
#
# [tool.uv.sources]
# attitudejax = { path = ".." }
# ///
"""Play back a sampled spin attitude and measure the interpolation error.

Samples a constant-rate spin about an arbitrary axis every ``--step``
seconds, builds an angular ephemeris from the samples, then interpolates on
a fine grid and compares rotation and rate against the analytical motion.

Requires attitudejax to be installed (``uv pip install -e .`` from the repo root).

Usage:
    uv run examples/interpolate_attitude.py [OPTIONS]

Examples:
    # Rotation and rate samples every 30 s over 10 minutes
    uv run examples/interpolate_attitude.py --step 30 --duration 600

    # Rotation-only samples, rates synthesized by interpolation
    uv run examples/interpolate_attitude.py --derivatives use_r --points 6

    # Fast spin, shows singularity-avoidance restarts at debug level
    uv run examples/interpolate_attitude.py --rate 0.2 --step 20 --verbose
"""

import enum
import logging
import time
from typing import Annotated

import jax.numpy as jnp
import typer

from attitudejax import (
    AngularDerivativesFilter,
    AngularEphemeris,
    Quaternion,
    TimeStampedAngularCoordinates,
    set_dtype,
)

set_dtype(jnp.float64)


class Filter(enum.StrEnum):
    """Derivative orders kept in the samples."""

    use_r = "use_r"
    use_rr = "use_rr"

    def to_filter(self) -> AngularDerivativesFilter:
        return AngularDerivativesFilter[self.name.upper()]


def main(
    rate: Annotated[float, typer.Option(help="Spin rate in rad/s")] = 0.02,
    step: Annotated[float, typer.Option(help="Sampling step in seconds")] = 30.0,
    duration: Annotated[float, typer.Option(help="Covered span in seconds")] = 600.0,
    points: Annotated[int, typer.Option(help="Interpolation points per query")] = 4,
    derivatives: Annotated[Filter, typer.Option(help="Derivatives kept in the samples")] = Filter.use_rr,
    queries: Annotated[int, typer.Option(help="Number of query instants")] = 200,
    verbose: Annotated[bool, typer.Option(help="Log interpolation restarts")] = False,
) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    axis = jnp.array([1.0, -2.0, 2.0]) / 3.0
    omega = rate * axis
    q0 = Quaternion(0.9, 0.3, -0.2, 0.1)

    def truth(t: float) -> Quaternion:
        return Quaternion.from_rotation_vector(omega * t) * q0

    print(f"\n── Stage 1: Sampling spin of {rate} rad/s every {step}s over {duration}s ──")
    n_samples = int(duration // step) + 1
    sample = []
    for i in range(n_samples):
        t = i * step
        rate_vector = omega if derivatives == Filter.use_rr else None
        sample.append(TimeStampedAngularCoordinates(t, truth(t), rate_vector))
    ephemeris = AngularEphemeris(sample, points, derivatives.to_filter())
    print(f"  {len(ephemeris)} samples from {ephemeris.min_time}s to {ephemeris.max_time}s")

    print(f"\n── Stage 2: Interpolating at {queries} instants ──")
    max_angle_error = 0.0
    max_rate_error = 0.0
    t0 = time.perf_counter()
    for i in range(queries):
        t = ephemeris.max_time * i / (queries - 1)
        state = ephemeris.interpolate(t)
        max_angle_error = max(max_angle_error, float(state.rotation.distance(truth(t))))
        max_rate_error = max(max_rate_error, float(jnp.linalg.norm(state.rotation_rate - omega)))
    elapsed = time.perf_counter() - t0

    print(f"  Interpolated in {elapsed:.2f}s ({queries / elapsed:,.0f} queries/s)")
    print(f"  Max rotation error: {max_angle_error:.3e} rad")
    print(f"  Max rate error:     {max_rate_error:.3e} rad/s")
    print("\nDone.")


if __name__ == "__main__":
    typer.run(main)
