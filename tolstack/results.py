"""Result records produced by the Monte Carlo and RSS engines."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

import numpy as np
from scipy.stats import norm

from tolstack.errors import InvalidParameters

# Column order of AnalysisResults.export()
EXPORT_FIELDS = (
    "mc_mean",
    "mc_tolerance_pos",
    "mc_tolerance_neg",
    "mc_stddev_pos",
    "mc_stddev_neg",
    "mc_worst_case_lower",
    "mc_worst_case_upper",
    "rss_mean",
    "rss_tolerance_pos",
    "rss_tolerance_neg",
)


@dataclass(frozen=True)
class McResults:
    """Output of a Monte Carlo run.

    Attributes:
        mean: Mean of every generated stackup sample.
        tolerance_pos: Upper tolerance at the assembly sigma.
        tolerance_neg: Lower tolerance at the assembly sigma (positive value).
        stddev_pos: Spread of samples above the mean.
        stddev_neg: Spread of samples below the mean.
        iterations: Samples actually generated (may be below the request).
        worst_case_upper: Nominal plus every upper tolerance.
        worst_case_lower: Nominal minus every lower tolerance.
    """
    mean: float = 0.0
    tolerance_pos: float = 0.0
    tolerance_neg: float = 0.0
    stddev_pos: float = 0.0
    stddev_neg: float = 0.0
    iterations: int = 0
    worst_case_upper: float = 0.0
    worst_case_lower: float = 0.0

    def summary(self) -> str:
        lines = [
            "=== Monte Carlo Analysis ===",
            f"  Mean:             {self.mean:+.6f}",
            f"  Upper tolerance:  +{self.tolerance_pos:.6f}",
            f"  Lower tolerance:  -{self.tolerance_neg:.6f}",
            f"  Std dev (+/-):    {self.stddev_pos:.6f} / {self.stddev_neg:.6f}",
            f"  Iterations:       {self.iterations}",
            f"  Worst case:       [{self.worst_case_lower:+.6f}, {self.worst_case_upper:+.6f}]",
        ]
        return "\n".join(lines)

    @classmethod
    def from_dict(cls, d: dict) -> McResults:
        return cls(**{k: d[k] for k in cls.__dataclass_fields__ if k in d})


@dataclass(frozen=True)
class RssResults:
    """Output of a Root-Sum-Square calculation."""
    mean: float = 0.0
    tolerance_pos: float = 0.0
    tolerance_neg: float = 0.0

    def summary(self) -> str:
        lines = [
            "=== RSS Analysis ===",
            f"  Mean:             {self.mean:+.6f}",
            f"  Upper tolerance:  +{self.tolerance_pos:.6f}",
            f"  Lower tolerance:  -{self.tolerance_neg:.6f}",
        ]
        return "\n".join(lines)

    @classmethod
    def from_dict(cls, d: dict) -> RssResults:
        return cls(**{k: d[k] for k in cls.__dataclass_fields__ if k in d})


@dataclass
class AnalysisResults:
    """Latest results of both engines, as shown to and exported by the user."""
    monte_carlo: Optional[McResults] = None
    rss: Optional[RssResults] = None

    def export(self) -> list[float]:
        """Flatten both results into the fixed EXPORT_FIELDS order.

        Returns an empty list unless both engines have produced a result.
        """
        mc, rss = self.monte_carlo, self.rss
        if mc is None or rss is None:
            return []
        return [
            mc.mean,
            mc.tolerance_pos,
            mc.tolerance_neg,
            mc.stddev_pos,
            mc.stddev_neg,
            mc.worst_case_lower,
            mc.worst_case_upper,
            rss.mean,
            rss.tolerance_pos,
            rss.tolerance_neg,
        ]

    def summary(self, assy_sigma: Optional[float] = None) -> str:
        blocks = []
        if self.monte_carlo is not None:
            blocks.append(self.monte_carlo.summary())
        if self.rss is not None:
            blocks.append(self.rss.summary())
        if assy_sigma is not None and blocks:
            blocks.append(f"  Est. yield at {assy_sigma:.1f} sigma: "
                          f"{estimated_yield(assy_sigma):.4f}%")
        return "\n\n".join(blocks)

    def to_dict(self) -> dict:
        return {
            "monte_carlo": asdict(self.monte_carlo) if self.monte_carlo else None,
            "rss": asdict(self.rss) if self.rss else None,
        }

    @classmethod
    def from_dict(cls, d: dict) -> AnalysisResults:
        mc = d.get("monte_carlo")
        rss = d.get("rss")
        return cls(
            monte_carlo=McResults.from_dict(mc) if mc else None,
            rss=RssResults.from_dict(rss) if rss else None,
        )


def estimated_yield(sigma: float) -> float:
    """Percent of a normal population inside +/- sigma."""
    return float((norm.cdf(sigma) - norm.cdf(-sigma)) * 100.0)


def save_export_csv(results: AnalysisResults, path: str) -> None:
    """Write the flat export vector as a one-row CSV with a header."""
    row = results.export()
    if not row:
        raise InvalidParameters("Both Monte Carlo and RSS results are required for export")
    np.savetxt(path, np.array([row]), delimiter=",",
               header=",".join(EXPORT_FIELDS), comments="")


def save_samples_csv(samples: np.ndarray, path: str) -> None:
    """Write raw stackup samples, one value per line."""
    np.savetxt(path, np.asarray(samples, dtype=float).ravel(), delimiter=",")
