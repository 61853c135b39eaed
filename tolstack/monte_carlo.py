"""Chunked Monte Carlo analysis of a tolerance stack.

The requested iteration count is split into fixed-size chunks. Chunks are
processed one after another, each one producing a fresh batch of stackup
samples from :func:`tolstack.stackup.compute_stackup`. Chunking bounds the
work done per aggregation call and keeps the per-chunk spread estimates
well conditioned; the final mean is taken over every sample.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from tolstack.errors import InvalidParameters
from tolstack.models import FloatTL, LinearTL, State, Tolerance
from tolstack.parallel import Seed, seed_sequence
from tolstack.results import McResults, save_samples_csv
from tolstack.sampling import DEFAULT_MAX_ATTEMPTS
from tolstack.stackup import DEFAULT_WORKERS, compute_stackup

logger = logging.getLogger(__name__)


@dataclass
class MonteCarloConfig:
    """Tuning knobs for a Monte Carlo run.

    Attributes:
        chunk_size: Samples generated per chunk. Iterations that do not fill
            a whole chunk are discarded.
        n_workers: Threads used per tolerance inside each chunk.
        max_attempts: Redraw cap for bounded sampling.
        seed: Random seed for reproducibility (None draws OS entropy).
        samples_path: If set, every stackup sample of the run is written
            to this CSV file, one value per line.
    """
    chunk_size: int = 100_000
    n_workers: int = DEFAULT_WORKERS
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    seed: Seed = None
    samples_path: Optional[str] = None


def validate(state: State, config: MonteCarloConfig) -> None:
    """Reject inputs that would give a degenerate run.

    Raises:
        InvalidParameters: On an empty chain or out-of-range parameters.
    """
    params = state.parameters
    if not state.tolerance_loop:
        raise InvalidParameters("tolerance loop is empty")
    if config.chunk_size <= 0:
        raise InvalidParameters(f"chunk_size must be positive, got {config.chunk_size}")
    if config.n_workers <= 0:
        raise InvalidParameters(f"n_workers must be positive, got {config.n_workers}")
    if config.max_attempts <= 0:
        raise InvalidParameters(f"max_attempts must be positive, got {config.max_attempts}")
    if params.n_iterations <= 0:
        raise InvalidParameters(f"n_iterations must be positive, got {params.n_iterations}")
    if params.n_iterations < config.chunk_size:
        raise InvalidParameters(
            f"n_iterations ({params.n_iterations}) is smaller than one chunk "
            f"({config.chunk_size})"
        )
    if params.assy_sigma < 1:
        raise InvalidParameters(f"assy_sigma must be at least 1, got {params.assy_sigma}")


def split_spread(samples: np.ndarray, mean: float) -> tuple[float, float]:
    """Standard deviation of the samples above and below the mean.

    Each side is measured about the common mean, so a skewed distribution
    gives different upper and lower spreads. A side with fewer than two
    samples has zero spread.
    """
    def _side(values: np.ndarray) -> float:
        if len(values) < 2:
            return 0.0
        return float(np.sqrt(np.sum((values - mean) ** 2) / (len(values) - 1)))

    return _side(samples[samples > mean]), _side(samples[samples < mean])


def worst_case_bounds(tolerance_loop: Sequence[Tolerance]) -> tuple[float, float]:
    """Return (upper, lower) with every tolerance at its adverse extreme.

    A float fit contributes its largest possible clearance to both sides.
    """
    nominal = 0.0
    total_pos = 0.0
    total_neg = 0.0
    for tol in tolerance_loop:
        nominal += tol.distance_nominal()
        if isinstance(tol, LinearTL):
            total_pos += abs(tol.distance.tol_pos)
            total_neg += abs(tol.distance.tol_neg)
        elif isinstance(tol, FloatTL):
            clearance = tol.max_clearance()
            total_pos += clearance
            total_neg += clearance
        else:
            raise TypeError(f"Unknown tolerance type: {type(tol).__name__}")
    return nominal + total_pos, nominal - total_neg


def run_monte_carlo(
    state: State,
    config: Optional[MonteCarloConfig] = None,
) -> McResults:
    """Run a chunked Monte Carlo analysis of the state's tolerance loop.

    Args:
        state: Parameters and tolerance chain. Not modified.
        config: Tuning knobs; defaults to MonteCarloConfig().

    Returns:
        McResults; `iterations` reports the samples actually generated.

    Raises:
        InvalidParameters: Before sampling, on invalid input.
        ComputationFailed: If a sampling worker failed.
    """
    if config is None:
        config = MonteCarloConfig()
    validate(state, config)

    params = state.parameters
    tolerances = list(state.tolerance_loop)
    chunks = params.n_iterations // config.chunk_size
    iterations = chunks * config.chunk_size
    if iterations != params.n_iterations:
        logger.warning(
            "Discarding %d iterations that do not fill a chunk of %d",
            params.n_iterations - iterations, config.chunk_size,
        )
    logger.info("Monte Carlo: %d tolerances, %d chunks of %d",
                len(tolerances), chunks, config.chunk_size)

    ss = seed_sequence(config.seed)
    all_samples = np.empty(iterations)
    stddev_pos = 0.0
    stddev_neg = 0.0

    for n, chunk_seed in enumerate(ss.spawn(chunks)):
        stack = compute_stackup(
            tolerances,
            config.chunk_size,
            n_workers=config.n_workers,
            seed=chunk_seed,
            max_attempts=config.max_attempts,
        )
        chunk_mean = float(np.mean(stack))
        chunk_pos, chunk_neg = split_spread(stack, chunk_mean)
        # Running average; every chunk has the same size.
        stddev_pos += (chunk_pos - stddev_pos) / (n + 1)
        stddev_neg += (chunk_neg - stddev_neg) / (n + 1)
        all_samples[n * config.chunk_size:(n + 1) * config.chunk_size] = stack
        logger.debug("Chunk %d/%d: mean=%.6f stddev=+%.6f/-%.6f",
                     n + 1, chunks, chunk_mean, chunk_pos, chunk_neg)

    mean = float(np.mean(all_samples))
    upper, lower = worst_case_bounds(tolerances)
    if config.samples_path:
        save_samples_csv(all_samples, config.samples_path)
        logger.info("Wrote %d samples to %s", iterations, config.samples_path)

    result = McResults(
        mean=mean,
        tolerance_pos=stddev_pos * params.assy_sigma,
        tolerance_neg=stddev_neg * params.assy_sigma,
        stddev_pos=stddev_pos,
        stddev_neg=stddev_neg,
        iterations=iterations,
        worst_case_upper=upper,
        worst_case_lower=lower,
    )
    logger.info("Monte Carlo done: mean=%.6f +%.6f/-%.6f over %d samples",
                result.mean, result.tolerance_pos, result.tolerance_neg, iterations)
    return result


async def run_monte_carlo_async(
    state: State,
    config: Optional[MonteCarloConfig] = None,
) -> McResults:
    """Await a Monte Carlo run without blocking the event loop."""
    return await asyncio.to_thread(run_monte_carlo, state, config)
