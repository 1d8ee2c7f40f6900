"""
Tests for the primary solve, frontier enumeration and refinement.
"""

import logging
from types import SimpleNamespace

import pytest
from scipy.optimize import milp

from vitaminopt.optimization.errors import InfeasibleSelectionError
from vitaminopt.optimization.pareto import explore_pareto_frontier
from vitaminopt.optimization.secondary import optimize_at_pareto_frontier
from vitaminopt.optimization.selector import build_and_optimize_model, build_selection_model
from vitaminopt.optimization.oracle import MilpSession, TerminationStatus


class TestPrimarySolve:
    """Tests for build_and_optimize_model."""

    def test_loose_limb_uses_cheapest_motor(self, loose_limb, motors, ratios, cheap_motor):
        """All three slots take the cheapest motor."""
        _, solution = build_and_optimize_model(loose_limb, motors, ratios)
        assert solution.motors == (cheap_motor,) * 3
        assert solution.objective_value == pytest.approx(15.0)
        assert solution.status == TerminationStatus.OPTIMAL

    def test_heavy_limb_needs_strong_shoulder(self, heavy_limb, motors, ratios, strong_motor, cheap_motor):
        """Slot 1 needs the strong motor and slot 2 the cheap motor at ratio 2."""
        model, solution = build_and_optimize_model(heavy_limb, motors, ratios)
        assert solution.motors == (strong_motor, cheap_motor, cheap_motor)
        assert solution.gear_ratios[1] == 2.0
        assert solution.objective_value == pytest.approx(19.0)
        assert model.constraints.check_violations(solution) == []

    def test_max_configuration_adds_requirements(self, limb_factory, motors, ratios, strong_motor):
        """Longer max links force a stronger shoulder than min links alone."""
        limb = limb_factory(tip_force=7.0, min_r=(0.05, 0.05, 0.05), max_r=(0.1, 0.1, 0.1))
        _, min_only = build_and_optimize_model(limb, motors, ratios)
        _, both = build_and_optimize_model(limb, motors, ratios, configurations=("min", "max"))
        assert min_only.objective_value == pytest.approx(15.0)
        assert both.objective_value == pytest.approx(19.0)
        assert both.motors[0] == strong_motor

    def test_infeasible_limb_aborts(self, infeasible_limb, motors, ratios):
        """No selection at all is a fatal error with context."""
        with pytest.raises(InfeasibleSelectionError) as excinfo:
            build_and_optimize_model(infeasible_limb, motors, ratios)
        context = excinfo.value.context
        assert context["stage"] == "primary"
        assert context["status"] == "infeasible"
        assert "Slot 1" in context["diagnostics"]

    def test_reference_nema14_selection(self, nema14, limb_factory):
        """A single NEMA14 catalog selects NEMA14 everywhere at 3 x 12.95."""
        limb = limb_factory(tip_force=0.01, tip_velocity=0.01, min_r=(0.01, 0.01, 0.01))
        ratios = (0.021, 0.048, 0.077, 1.0, 3.0)
        _, solution = build_and_optimize_model(limb, [nema14], ratios)
        assert solution.motors == (nema14,) * 3
        assert solution.objective_value == pytest.approx(38.85)

    def test_session_must_be_empty(self, loose_limb, motors, ratios):
        """A session already holding variables cannot be reused."""
        session = MilpSession()
        session.add_binary_variables(1, "stale")
        with pytest.raises(ValueError):
            build_selection_model(loose_limb, motors, ratios, session=session)

    def test_explicit_session_is_used(self, loose_limb, motors, ratios):
        """The caller's session becomes the model's session."""
        session = MilpSession()
        model = build_selection_model(loose_limb, motors, ratios, session=session)
        assert model.session is session
        assert session.num_variables == 3 * 4


class TestParetoFrontier:
    """Tests for explore_pareto_frontier."""

    def test_enumerates_every_tie(self, loose_limb, motors, ratios, cheap_motor):
        """Cheap motor at any of 2 ratios in 3 slots gives 8 ties."""
        model, first = build_and_optimize_model(loose_limb, motors, ratios)
        others = explore_pareto_frontier(model, first.objective_value)
        everything = [first, *others]
        assert len(everything) == 8
        assert len({s.column_indices for s in everything}) == 8
        for solution in everything:
            assert solution.objective_value == pytest.approx(first.objective_value)
            assert solution.motors == (cheap_motor,) * 3

    def test_heavy_limb_ties(self, heavy_limb, motors, ratios):
        """Shoulder ratio and tip ratio are free; slot 2 is fixed."""
        model, first = build_and_optimize_model(heavy_limb, motors, ratios)
        others = explore_pareto_frontier(model, first.objective_value)
        everything = [first, *others]
        assert len(everything) == 4
        assert {s.gear_ratios[1] for s in everything} == {2.0}

    def test_max_solutions_limit(self, loose_limb, motors, ratios):
        """Enumeration stops at the requested limit."""
        model, first = build_and_optimize_model(loose_limb, motors, ratios)
        assert len(explore_pareto_frontier(model, first.objective_value, max_solutions=3)) == 3

    def test_limit_equal_to_frontier_size(self, heavy_limb, motors, ratios, caplog):
        """Hitting the limit reports the limit without claiming more ties exist."""
        model, first = build_and_optimize_model(heavy_limb, motors, ratios)
        with caplog.at_level(logging.WARNING, logger="vitaminopt.optimization.pareto"):
            others = explore_pareto_frontier(model, first.objective_value, max_solutions=3)
        assert len(others) == 3
        assert "Reached the limit of 3 alternatives" in caplog.text

    def test_no_limit_warning_when_exhausted(self, heavy_limb, motors, ratios, caplog):
        model, first = build_and_optimize_model(heavy_limb, motors, ratios)
        with caplog.at_level(logging.WARNING, logger="vitaminopt.optimization.pareto"):
            explore_pareto_frontier(model, first.objective_value)
        assert "limit" not in caplog.text

    def test_unique_optimum_yields_nothing(self, limb_factory, cheap_motor, strong_motor):
        """With one ratio and a forced assignment there is no alternative."""
        limb = limb_factory(tip_force=7.0)
        model, first = build_and_optimize_model(limb, [cheap_motor, strong_motor], [2.0])
        assert explore_pareto_frontier(model, first.objective_value) == []

    def test_cuts_accumulate(self, loose_limb, motors, ratios):
        """One cut per solution found plus the final, failing one."""
        model, first = build_and_optimize_model(loose_limb, motors, ratios)
        before = model.session.num_constraints
        others = explore_pareto_frontier(model, first.objective_value)
        assert model.session.num_constraints == before + len(others) + 1


class TestRefinement:
    """Tests for optimize_at_pareto_frontier."""

    def test_prefers_highest_total_ratio(self, loose_limb, motors, ratios):
        """Among cheapest selections, all slots use ratio 2."""
        model, first = build_and_optimize_model(loose_limb, motors, ratios)
        refined = optimize_at_pareto_frontier(model, first.objective_value)
        assert refined.gear_ratios == (2.0, 2.0, 2.0)
        assert refined.total_price == pytest.approx(15.0)
        assert refined.objective_value == pytest.approx(15.0)

    def test_refined_ratio_dominates_frontier(self, heavy_limb, motors, ratios):
        """The refined total ratio is at least that of every tied selection."""
        model, first = build_and_optimize_model(heavy_limb, motors, ratios)
        frontier = [first, *explore_pareto_frontier(model, first.objective_value)]

        fresh, fresh_first = build_and_optimize_model(heavy_limb, motors, ratios)
        refined = optimize_at_pareto_frontier(fresh, fresh_first.objective_value)

        assert refined.total_price <= first.objective_value + 1e-9
        assert all(refined.total_gear_ratio >= s.total_gear_ratio for s in frontier)

    def test_cap_below_optimum_is_fatal(self, loose_limb, motors, ratios):
        """A cost cap no selection can meet raises."""
        model, _ = build_and_optimize_model(loose_limb, motors, ratios)
        with pytest.raises(InfeasibleSelectionError) as excinfo:
            optimize_at_pareto_frontier(model, 10.0)
        assert excinfo.value.context["stage"] == "refine"


@pytest.fixture
def time_limited(monkeypatch):
    """Report every solve that found a point as stopped on its time limit."""

    def fake_milp(*args, **kwargs):
        res = milp(*args, **kwargs)
        if res.x is None:
            return res
        return SimpleNamespace(status=1, x=res.x, message="Time limit reached.")

    monkeypatch.setattr("vitaminopt.optimization.oracle.milp", fake_milp)


class TestTimeLimitedSolves:
    """A time-limited solve with a feasible point is accepted and flagged."""

    def test_primary_solution_is_flagged(self, time_limited, loose_limb, motors, ratios, cheap_motor):
        model, solution = build_and_optimize_model(loose_limb, motors, ratios)
        assert model.session.status == TerminationStatus.TIME_LIMIT
        assert solution.is_suboptimal
        assert solution.motors == (cheap_motor,) * 3
        assert solution.objective_value == pytest.approx(15.0)

    def test_frontier_continues_past_time_limited_solves(self, time_limited, loose_limb, motors, ratios):
        model, first = build_and_optimize_model(loose_limb, motors, ratios)
        others = explore_pareto_frontier(model, first.objective_value)
        assert len(others) == 7
        assert all(s.is_suboptimal for s in others)

    def test_refinement_accepts_time_limited_solve(self, time_limited, loose_limb, motors, ratios):
        model, first = build_and_optimize_model(loose_limb, motors, ratios)
        refined = optimize_at_pareto_frontier(model, first.objective_value)
        assert refined.is_suboptimal
        assert refined.gear_ratios == (2.0, 2.0, 2.0)
