"""1D Tolerance Stack Analysis Tool.

Supports Monte Carlo, RSS and worst-case analysis of tolerance chains made of:
- Linear toleranced dimensions
- Floating fastener (hole/pin clearance) fits

Additional capabilities:
- Chunked, multi-threaded Monte Carlo with asymmetric spread estimates
- Reproducible runs from an optional seed
- JSON persistence and CSV export of results
"""

from tolstack.errors import (
    ToleranceStackError, InvalidParameters, SamplingExhausted, ComputationFailed,
)
from tolstack.models import (
    DimTol, LinearTL, FloatTL, Tolerance, ToleranceKind, Parameters, State,
    tolerance_from_dict,
)
from tolstack.results import (
    McResults, RssResults, AnalysisResults, EXPORT_FIELDS,
    estimated_yield, save_export_csv, save_samples_csv,
)
from tolstack.sampling import SamplingPolicy, sample_dimtol, sample_tolerance
from tolstack.parallel import parallel_generate
from tolstack.stackup import compute_stackup
from tolstack.monte_carlo import (
    MonteCarloConfig, run_monte_carlo, run_monte_carlo_async, worst_case_bounds,
)
from tolstack.rss import run_rss
from tolstack.analysis import analyze_state

__all__ = [
    # Errors
    "ToleranceStackError", "InvalidParameters", "SamplingExhausted",
    "ComputationFailed",
    # Core models
    "DimTol", "LinearTL", "FloatTL", "Tolerance", "ToleranceKind",
    "Parameters", "State", "tolerance_from_dict",
    # Results
    "McResults", "RssResults", "AnalysisResults", "EXPORT_FIELDS",
    "estimated_yield", "save_export_csv", "save_samples_csv",
    # Sampling
    "SamplingPolicy", "sample_dimtol", "sample_tolerance",
    "parallel_generate", "compute_stackup",
    # Engines
    "MonteCarloConfig", "run_monte_carlo", "run_monte_carlo_async",
    "worst_case_bounds", "run_rss", "analyze_state",
]
__version__ = "0.1.0"
