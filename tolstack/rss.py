"""Root-Sum-Square (RSS) statistical tolerance analysis."""

from __future__ import annotations

import numpy as np

from tolstack.models import FloatTL, LinearTL, State, Tolerance
from tolstack.results import RssResults


def _float_variance(tol: FloatTL) -> float:
    """Variance term of a float fit.

    Hole and pin are diameters, so their average half-bands are halved
    again to get a radial contribution. Both are scaled by the pin sigma.
    """
    hole_avg = (tol.hole.tol_neg + tol.hole.tol_pos) / 2.0
    pin_avg = (tol.pin.tol_neg + tol.pin.tol_pos) / 2.0
    hole_sq = ((hole_avg / 2.0) / tol.pin.sigma) ** 2
    pin_sq = ((pin_avg / 2.0) / tol.pin.sigma) ** 2
    return hole_sq + pin_sq


def _variance_term(tol: Tolerance, upper: bool) -> float:
    if isinstance(tol, LinearTL):
        band = tol.distance.tol_pos if upper else tol.distance.tol_neg
        return (band / tol.distance.sigma) ** 2
    elif isinstance(tol, FloatTL):
        # Same term on both sides: the fit is treated as symmetric.
        return _float_variance(tol)
    else:
        raise TypeError(f"Unknown tolerance type: {type(tol).__name__}")


def run_rss(state: State) -> RssResults:
    """Perform RSS analysis of the state's tolerance loop.

    Each tolerance band is taken to represent its own sigma; the combined
    standard deviation is the root sum of squares, reported at the
    assembly sigma. No sampling is involved, so the result is deterministic.

    Returns:
        RssResults with the nominal mean and upper/lower tolerances.
    """
    tolerances = state.tolerance_loop
    assy_sigma = state.parameters.assy_sigma

    mean = sum(tol.distance_nominal() for tol in tolerances)
    var_pos = sum(_variance_term(tol, upper=True) for tol in tolerances)
    var_neg = sum(_variance_term(tol, upper=False) for tol in tolerances)

    return RssResults(
        mean=float(mean),
        tolerance_pos=float(np.sqrt(var_pos) * assy_sigma),
        tolerance_neg=float(np.sqrt(var_neg) * assy_sigma),
    )
