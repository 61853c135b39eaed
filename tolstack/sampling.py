"""Random deviation draws for single tolerance entities.

This is the central sampling module used by the stackup aggregator. All
draws are vectorized: each function takes a NumPy generator and a sample
count and returns a 1D array, one value per simulated trial.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable

import numpy as np

from tolstack.errors import SamplingExhausted
from tolstack.models import DimTol, FloatTL, LinearTL, Tolerance

DEFAULT_MAX_ATTEMPTS = 1000


class SamplingPolicy(Enum):
    """How a single DimTol is drawn.

    Bounded policies redraw any value outside [dim - tol_neg, dim + tol_pos].
    """
    NORMAL = "normal"
    BOUNDED_NORMAL = "bounded_normal"
    UNIFORM = "uniform"
    BOUNDED_UNIFORM = "bounded_uniform"


def _rejection_sample(
    draw: Callable[[int], np.ndarray],
    lower: float,
    upper: float,
    size: int,
    max_attempts: int,
) -> np.ndarray:
    """Draw `size` values, redrawing out-of-bounds entries.

    Raises:
        SamplingExhausted: If values remain out of bounds after
            `max_attempts` redraw rounds.
    """
    samples = draw(size)
    bad = (samples < lower) | (samples > upper)
    attempts = 0
    while bad.any():
        if attempts >= max_attempts:
            raise SamplingExhausted(attempts, int(bad.sum()))
        attempts += 1
        samples[bad] = draw(int(bad.sum()))
        bad = (samples < lower) | (samples > upper)
    return samples


def sample_dimtol(
    dimtol: DimTol,
    rng: np.random.Generator,
    size: int,
    policy: SamplingPolicy = SamplingPolicy.NORMAL,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> np.ndarray:
    """Sample a toleranced dimension about its nominal.

    Normal draws use `tol_multiplier` as the standard deviation. Uniform
    draws span the full tolerance band.

    Args:
        dimtol: Dimension to sample.
        rng: NumPy random generator.
        size: Number of samples.
        policy: Distribution and bounding policy.
        max_attempts: Redraw cap for bounded policies.

    Returns:
        1D array of absolute dimension values.
    """
    def normal(n: int) -> np.ndarray:
        return rng.normal(loc=dimtol.dim, scale=dimtol.tol_multiplier, size=n)

    def uniform(n: int) -> np.ndarray:
        return rng.uniform(low=dimtol.lower, high=dimtol.upper, size=n)

    if policy == SamplingPolicy.NORMAL:
        return normal(size)
    elif policy == SamplingPolicy.UNIFORM:
        return uniform(size)
    elif policy == SamplingPolicy.BOUNDED_NORMAL:
        return _rejection_sample(normal, dimtol.lower, dimtol.upper, size, max_attempts)
    elif policy == SamplingPolicy.BOUNDED_UNIFORM:
        return _rejection_sample(uniform, dimtol.lower, dimtol.upper, size, max_attempts)
    else:
        raise ValueError(f"Unknown sampling policy: {policy}")


def sample_linear(
    tolerance: LinearTL,
    rng: np.random.Generator,
    size: int,
) -> np.ndarray:
    """Unbounded normal draws of a linear dimension, nominal included."""
    return sample_dimtol(tolerance.distance, rng, size, SamplingPolicy.NORMAL)


def sample_float(
    tolerance: FloatTL,
    rng: np.random.Generator,
    size: int,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> np.ndarray:
    """Draw the clearance contribution of a hole/pin float fit.

    Hole and pin are drawn independently within their tolerance bands.
    The radial slop is half the diametral clearance; where the parts would
    interfere the contribution is exactly zero. Otherwise the contribution
    is uniform over [-slop, +slop], since the fastener can sit anywhere in
    its play.
    """
    hole = sample_dimtol(tolerance.hole, rng, size,
                         SamplingPolicy.BOUNDED_NORMAL, max_attempts)
    pin = sample_dimtol(tolerance.pin, rng, size,
                        SamplingPolicy.BOUNDED_NORMAL, max_attempts)
    slop = (hole - pin) / 2.0

    result = np.zeros(size)
    play = slop > 0.0
    # Equivalent to an unbounded uniform draw of DimTol(0, slop, slop).
    result[play] = rng.uniform(low=-slop[play], high=slop[play])
    return result


def sample_tolerance(
    tolerance: Tolerance,
    rng: np.random.Generator,
    size: int,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> np.ndarray:
    """Draw `size` independent realizations of one tolerance entity."""
    if isinstance(tolerance, LinearTL):
        return sample_linear(tolerance, rng, size)
    elif isinstance(tolerance, FloatTL):
        return sample_float(tolerance, rng, size, max_attempts)
    else:
        raise TypeError(f"Unknown tolerance type: {type(tolerance).__name__}")
