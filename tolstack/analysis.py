"""Convenience dispatcher running the Monte Carlo and RSS engines."""

from __future__ import annotations

from typing import Optional

from tolstack.models import State
from tolstack.monte_carlo import MonteCarloConfig, run_monte_carlo
from tolstack.results import AnalysisResults
from tolstack.rss import run_rss


def analyze_state(
    state: State,
    methods: Optional[list[str]] = None,
    config: Optional[MonteCarloConfig] = None,
) -> AnalysisResults:
    """Run one or more analysis methods on a state.

    The fresh results replace ``state.results``.

    Args:
        state: The state to analyze.
        methods: List of method names ("mc", "rss"). Defaults to both.
        config: Monte Carlo tuning knobs.

    Returns:
        The new AnalysisResults.
    """
    if methods is None:
        methods = ["mc", "rss"]

    results = AnalysisResults()

    for m in methods:
        key = m.lower().strip()
        if key in ("mc", "monte-carlo", "monte_carlo"):
            results.monte_carlo = run_monte_carlo(state, config)
        elif key == "rss":
            results.rss = run_rss(state)
        else:
            raise ValueError(f"Unknown analysis method: {m!r}")

    state.results = results
    return results
