"""Stackup aggregation: summed realizations of a whole tolerance chain."""

from __future__ import annotations

import logging
from functools import partial
from typing import Sequence

import numpy as np

from tolstack.errors import InvalidParameters
from tolstack.models import Tolerance
from tolstack.parallel import Seed, parallel_generate, seed_sequence
from tolstack.sampling import DEFAULT_MAX_ATTEMPTS, sample_tolerance

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 4


def compute_stackup(
    tolerance_chain: Sequence[Tolerance],
    n: int,
    n_workers: int = DEFAULT_WORKERS,
    seed: Seed = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> np.ndarray:
    """Sample every tolerance `n` times and sum them trial by trial.

    Each tolerance gets its own contiguous buffer of `n` samples, generated
    on a pool of `n_workers` threads. Index `i` of every buffer belongs to
    trial `i`, so the output is the column sum of the stacked buffers.

    Args:
        tolerance_chain: Tolerances in the loop.
        n: Number of trials.
        n_workers: Threads used per tolerance.
        seed: Int, SeedSequence, or None for OS entropy.
        max_attempts: Redraw cap for bounded sampling.

    Returns:
        1D array of `n` stackup totals. An empty chain gives all zeros.
    """
    if n < 0:
        raise InvalidParameters(f"n must be non-negative, got {n}")

    children = seed_sequence(seed).spawn(len(tolerance_chain))

    buffers = np.zeros((len(tolerance_chain), n))
    for row, (tol, child) in enumerate(zip(tolerance_chain, children)):
        logger.debug("Sampling tolerance %d (%s) x %d on %d workers",
                     row, tol.kind.value, n, n_workers)
        sample_fn = partial(_sample_worker, tol, max_attempts=max_attempts)
        buffers[row] = parallel_generate(n, n_workers, sample_fn, seed=child)

    return buffers.sum(axis=0)


def _sample_worker(
    tolerance: Tolerance,
    rng: np.random.Generator,
    size: int,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> np.ndarray:
    return sample_tolerance(tolerance, rng, size, max_attempts)
