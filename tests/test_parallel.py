"""Tests for the thread pool sample generator."""

import numpy as np
import pytest

from tolstack.errors import ComputationFailed, InvalidParameters
from tolstack.parallel import parallel_generate, worker_shares


def _uniform(rng, n):
    return rng.random(n)


class TestWorkerShares:
    def test_even(self):
        assert worker_shares(100, 4) == [25, 25, 25, 25]

    def test_remainder(self):
        shares = worker_shares(10, 4)
        assert shares == [3, 3, 2, 2]
        assert sum(shares) == 10

    def test_fewer_samples_than_workers(self):
        assert worker_shares(2, 4) == [1, 1, 0, 0]


class TestParallelGenerate:
    @pytest.mark.parametrize("workers", [1, 3, 4, 7])
    def test_length(self, workers):
        assert len(parallel_generate(1000, workers, _uniform)) == 1000

    def test_length_not_divisible(self):
        assert len(parallel_generate(1001, 4, _uniform)) == 1001

    def test_zero_count(self):
        assert len(parallel_generate(0, 4, _uniform)) == 0

    def test_seed_reproducibility(self):
        a = parallel_generate(10_000, 4, _uniform, seed=123)
        b = parallel_generate(10_000, 4, _uniform, seed=123)
        np.testing.assert_array_equal(a, b)

    def test_seed_sequence_not_consumed(self):
        ss = np.random.SeedSequence(123)
        a = parallel_generate(1_000, 4, _uniform, seed=ss)
        b = parallel_generate(1_000, 4, _uniform, seed=ss)
        np.testing.assert_array_equal(a, b)
        np.testing.assert_array_equal(a, parallel_generate(1_000, 4, _uniform, seed=123))

    def test_independent_worker_streams(self):
        samples = parallel_generate(400, 4, _uniform, seed=9)
        parts = samples.reshape(4, 100)
        for i in range(1, 4):
            assert not np.array_equal(parts[0], parts[i])

    def test_worker_failure(self):
        def failing(rng, n):
            raise RuntimeError("boom")

        with pytest.raises(ComputationFailed, match="boom") as excinfo:
            parallel_generate(100, 4, failing)
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    def test_short_worker_result(self):
        with pytest.raises(ComputationFailed, match="expected 100"):
            parallel_generate(100, 4, lambda rng, n: rng.random(max(n - 1, 0)))

    def test_invalid_workers(self):
        with pytest.raises(InvalidParameters, match="worker_count"):
            parallel_generate(100, 0, _uniform)
