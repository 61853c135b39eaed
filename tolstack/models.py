"""Data models for 1D tolerance stack analysis."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from tolstack.errors import InvalidParameters
from tolstack.results import AnalysisResults


class ToleranceKind(Enum):
    """Kind of tolerance entity in a stack."""
    LINEAR = "linear"
    FLOAT = "float"


@dataclass
class DimTol:
    """A dimension with an asymmetric tolerance band.

    Attributes:
        dim: Nominal dimension value.
        tol_pos: Upper tolerance (non-negative).
        tol_neg: Lower tolerance (non-negative, will be subtracted).
        sigma: Number of sigma the tolerance band represents.
    """
    dim: float
    tol_pos: float
    tol_neg: float
    sigma: float = 3.0

    def __post_init__(self) -> None:
        if self.tol_pos < 0 or self.tol_neg < 0:
            raise InvalidParameters(
                f"tolerances must be non-negative, got +{self.tol_pos}/-{self.tol_neg}"
            )
        if self.sigma <= 0:
            raise InvalidParameters(f"sigma must be positive, got {self.sigma}")

    @property
    def tol_multiplier(self) -> float:
        """Standard deviation implied by the tolerance band and sigma."""
        return (self.tol_pos + self.tol_neg) / 2.0 / self.sigma

    @property
    def upper(self) -> float:
        return self.dim + self.tol_pos

    @property
    def lower(self) -> float:
        return self.dim - self.tol_neg

    def to_dict(self) -> dict:
        # tol_multiplier is written for readers of the file only; it is
        # recomputed on load.
        return {
            "dim": self.dim,
            "tol_pos": self.tol_pos,
            "tol_neg": self.tol_neg,
            "tol_multiplier": self.tol_multiplier,
            "sigma": self.sigma,
        }

    @classmethod
    def from_dict(cls, d: dict) -> DimTol:
        return cls(
            dim=d["dim"],
            tol_pos=d["tol_pos"],
            tol_neg=d["tol_neg"],
            sigma=d.get("sigma", 3.0),
        )


@dataclass
class LinearTL:
    """A single directly toleranced linear dimension in the stack."""
    distance: DimTol
    description: str = ""

    kind = ToleranceKind.LINEAR

    def distance_nominal(self) -> float:
        return self.distance.dim

    def to_dict(self) -> dict:
        return {
            "type": self.kind.value,
            "description": self.description,
            "distance": self.distance.to_dict(),
        }


@dataclass
class FloatTL:
    """A floating fastener clearance fit between a hole and a pin.

    The hole and pin are both diameters. The fit contributes the radial
    play left after both parts are made, which is never negative.

    Attributes:
        hole: Hole diameter with its tolerance.
        pin: Pin diameter with its tolerance.
        sigma: Sigma applied to the clearance distribution of the fit,
            independent of the hole and pin sigmas.
        description: Optional label.
    """
    hole: DimTol
    pin: DimTol
    sigma: float = 3.0
    description: str = ""

    kind = ToleranceKind.FLOAT

    def __post_init__(self) -> None:
        if self.sigma <= 0:
            raise InvalidParameters(f"sigma must be positive, got {self.sigma}")

    def distance_nominal(self) -> float:
        # Float slop is centred on zero; it adds no nominal length.
        return 0.0

    def max_clearance(self) -> float:
        """Largest one-sided clearance with the hole at max and pin at min."""
        return max(0.0, (self.hole.upper - self.pin.lower) / 2.0)

    def to_dict(self) -> dict:
        return {
            "type": self.kind.value,
            "description": self.description,
            "hole": self.hole.to_dict(),
            "pin": self.pin.to_dict(),
            "sigma": self.sigma,
        }


Tolerance = Union[LinearTL, FloatTL]


def tolerance_from_dict(d: dict) -> Tolerance:
    """Build a tolerance from its serialized form."""
    kind = ToleranceKind(d.get("type", "linear"))
    if kind == ToleranceKind.LINEAR:
        return LinearTL(
            distance=DimTol.from_dict(d["distance"]),
            description=d.get("description", ""),
        )
    elif kind == ToleranceKind.FLOAT:
        return FloatTL(
            hole=DimTol.from_dict(d["hole"]),
            pin=DimTol.from_dict(d["pin"]),
            sigma=d.get("sigma", 3.0),
            description=d.get("description", ""),
        )
    else:
        raise ValueError(f"Unknown tolerance type: {kind}")


@dataclass
class Parameters:
    """Simulation input parameters.

    Attributes:
        assy_sigma: Sigma level the assembly result is reported at.
        n_iterations: Requested number of Monte Carlo samples.
    """
    assy_sigma: float = 4.0
    n_iterations: int = 1_000_000

    def to_dict(self) -> dict:
        return {"assy_sigma": self.assy_sigma, "n_iterations": self.n_iterations}

    @classmethod
    def from_dict(cls, d: dict) -> Parameters:
        return cls(
            assy_sigma=d.get("assy_sigma", 4.0),
            n_iterations=int(d.get("n_iterations", 1_000_000)),
        )


@dataclass
class State:
    """Working state of an analysis: inputs and the latest results.

    Attributes:
        parameters: Simulation parameters.
        tolerance_loop: Ordered tolerance chain. Order sets summation order only.
        results: Results of the last analysis run.
        name: Descriptive name for the stack.
    """
    parameters: Parameters = field(default_factory=Parameters)
    tolerance_loop: list[Tolerance] = field(default_factory=list)
    results: AnalysisResults = field(default_factory=AnalysisResults)
    name: str = ""

    def add(self, tolerance: Tolerance) -> None:
        """Append a tolerance to the chain."""
        self.tolerance_loop.append(tolerance)

    def clear_inputs(self) -> None:
        self.tolerance_loop = []

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "parameters": self.parameters.to_dict(),
            "tolerance_loop": [t.to_dict() for t in self.tolerance_loop],
            "results": self.results.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: dict) -> State:
        return cls(
            parameters=Parameters.from_dict(d.get("parameters", {})),
            tolerance_loop=[tolerance_from_dict(t) for t in d.get("tolerance_loop", [])],
            results=AnalysisResults.from_dict(d.get("results") or {}),
            name=d.get("name", ""),
        )

    def save(self, path: str) -> None:
        """Save the state to a JSON file."""
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str) -> State:
        """Load a state from a JSON file."""
        with open(path) as f:
            data = json.load(f)
        return cls.from_dict(data)
