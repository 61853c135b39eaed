"""Fan-out/fan-in sample generation on a bounded thread pool."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Union

import numpy as np

from tolstack.errors import ComputationFailed, InvalidParameters

logger = logging.getLogger(__name__)

SampleFn = Callable[[np.random.Generator, int], np.ndarray]
Seed = Union[int, np.random.SeedSequence, None]


def seed_sequence(seed: Seed) -> np.random.SeedSequence:
    """Fresh SeedSequence for `seed`.

    A caller's SeedSequence is copied, since spawn() advances its child
    counter and a reused seed would otherwise give different streams.
    """
    if isinstance(seed, np.random.SeedSequence):
        return np.random.SeedSequence(
            seed.entropy, spawn_key=seed.spawn_key, pool_size=seed.pool_size,
        )
    return np.random.SeedSequence(seed)


def worker_shares(count: int, worker_count: int) -> list[int]:
    """Split `count` samples over workers; the remainder goes to the first ones."""
    base, extra = divmod(count, worker_count)
    return [base + 1 if i < extra else base for i in range(worker_count)]


def parallel_generate(
    count: int,
    worker_count: int,
    sample_fn: SampleFn,
    seed: Seed = None,
) -> np.ndarray:
    """Generate `count` i.i.d. samples on `worker_count` threads.

    Each worker owns a generator spawned from one SeedSequence, so no
    generator is shared between threads and a seeded call is reproducible.
    Worker results are concatenated in submission order.

    Args:
        count: Total number of samples.
        worker_count: Number of pool threads.
        sample_fn: Called as sample_fn(rng, n); must return n samples.
        seed: Int, SeedSequence, or None for OS entropy.

    Returns:
        1D array of length `count`.

    Raises:
        InvalidParameters: If count is negative or worker_count < 1.
        ComputationFailed: If any worker raised.
    """
    if count < 0:
        raise InvalidParameters(f"count must be non-negative, got {count}")
    if worker_count < 1:
        raise InvalidParameters(f"worker_count must be at least 1, got {worker_count}")

    ss = seed_sequence(seed)
    shares = worker_shares(count, worker_count)
    rngs = [np.random.default_rng(child) for child in ss.spawn(worker_count)]

    with ThreadPoolExecutor(max_workers=worker_count) as executor:
        futures = [
            executor.submit(sample_fn, rng, n) for rng, n in zip(rngs, shares)
        ]
        parts = []
        for i, future in enumerate(futures):
            try:
                parts.append(np.asarray(future.result(), dtype=float))
            except Exception as exc:
                logger.error("Sampling worker %d of %d failed: %s", i, worker_count, exc)
                raise ComputationFailed(f"sampling worker {i} failed: {exc}") from exc

    result = np.concatenate(parts) if parts else np.zeros(0)
    if len(result) != count:
        raise ComputationFailed(
            f"workers returned {len(result)} samples, expected {count}"
        )
    return result
