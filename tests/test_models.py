"""Tests for the tolerance data models and JSON persistence."""

import json

import pytest

from tolstack.errors import InvalidParameters
from tolstack.models import (
    DimTol, FloatTL, LinearTL, Parameters, State, ToleranceKind, tolerance_from_dict,
)
from tolstack.results import AnalysisResults, McResults, RssResults


class TestDimTol:
    def test_multiplier(self):
        d = DimTol(10.0, 0.2, 0.1, 3.0)
        assert d.tol_multiplier == pytest.approx(0.15 / 3.0)

    def test_multiplier_follows_mutation(self):
        d = DimTol(10.0, 0.3, 0.3, 3.0)
        d.tol_pos = 0.6
        d.sigma = 2.0
        assert d.tol_multiplier == pytest.approx(0.45 / 2.0)

    def test_limits(self):
        d = DimTol(10.0, 0.2, 0.1)
        assert d.upper == pytest.approx(10.2)
        assert d.lower == pytest.approx(9.9)

    def test_negative_tolerance(self):
        with pytest.raises(InvalidParameters, match="non-negative"):
            DimTol(10.0, -0.1, 0.1, 3.0)

    def test_zero_sigma(self):
        with pytest.raises(InvalidParameters, match="sigma"):
            DimTol(10.0, 0.1, 0.1, 0.0)

    def test_invalid_parameters_is_value_error(self):
        with pytest.raises(ValueError):
            DimTol(10.0, 0.1, 0.1, -3.0)


class TestTolerances:
    def test_linear_nominal(self):
        t = LinearTL(DimTol(12.5, 0.1, 0.1))
        assert t.kind == ToleranceKind.LINEAR
        assert t.distance_nominal() == pytest.approx(12.5)

    def test_float_nominal_is_zero(self):
        t = FloatTL(DimTol(2.6, 0.1, 0.0), DimTol(2.45, 0.02, 0.05), 3.0)
        assert t.kind == ToleranceKind.FLOAT
        assert t.distance_nominal() == 0.0

    def test_float_max_clearance(self):
        t = FloatTL(DimTol(2.6, 0.1, 0.0), DimTol(2.45, 0.02, 0.05), 3.0)
        # (2.70 - 2.40) / 2
        assert t.max_clearance() == pytest.approx(0.15)

    def test_float_max_clearance_interference(self):
        t = FloatTL(DimTol(2.0, 0.01, 0.01), DimTol(2.5, 0.01, 0.01), 3.0)
        assert t.max_clearance() == 0.0

    def test_float_zero_sigma(self):
        with pytest.raises(InvalidParameters, match="sigma"):
            FloatTL(DimTol(2.6, 0.1, 0.0), DimTol(2.45, 0.02, 0.05), 0.0)

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            tolerance_from_dict({"type": "compound"})


class TestState:
    def test_defaults(self):
        state = State()
        assert state.parameters.assy_sigma == 4.0
        assert state.parameters.n_iterations == 1_000_000
        assert state.tolerance_loop == []
        assert state.results.monte_carlo is None

    def test_add_and_clear(self):
        state = State()
        state.add(LinearTL(DimTol(1.0, 0.1, 0.1)))
        state.add(LinearTL(DimTol(2.0, 0.1, 0.1)))
        assert len(state.tolerance_loop) == 2
        state.clear_inputs()
        assert state.tolerance_loop == []

    def test_save_load(self, tmp_path):
        state = State(parameters=Parameters(assy_sigma=3.0, n_iterations=200_000), name="Test")
        state.add(LinearTL(DimTol(5.0, 0.1, 0.2, 3.0), description="Plate"))
        state.add(FloatTL(DimTol(2.6, 0.1, 0.0, 3.0), DimTol(2.45, 0.02, 0.05, 2.0), 4.0))
        state.results = AnalysisResults(
            monte_carlo=McResults(mean=5.0, iterations=200_000),
            rss=RssResults(5.0, 0.1, 0.2),
        )
        path = str(tmp_path / "state.json")
        state.save(path)
        loaded = State.load(path)

        assert loaded.name == "Test"
        assert loaded.parameters == state.parameters
        assert loaded.tolerance_loop == state.tolerance_loop
        assert loaded.tolerance_loop[0].description == "Plate"
        assert loaded.tolerance_loop[1].pin.sigma == 2.0
        assert loaded.results.monte_carlo.iterations == 200_000
        assert loaded.results.rss.tolerance_neg == pytest.approx(0.2)

    def test_stale_multiplier_ignored(self, tmp_path):
        data = {
            "parameters": {"assy_sigma": 3.0, "n_iterations": 100_000},
            "tolerance_loop": [{
                "type": "linear",
                "distance": {"dim": 10.0, "tol_pos": 0.3, "tol_neg": 0.3,
                             "tol_multiplier": 999.0, "sigma": 3.0},
            }],
        }
        path = tmp_path / "stale.json"
        path.write_text(json.dumps(data))
        loaded = State.load(str(path))
        assert loaded.tolerance_loop[0].distance.tol_multiplier == pytest.approx(0.1)
        assert loaded.results.rss is None
