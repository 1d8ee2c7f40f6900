"""
Refine the cost-optimal selection with a secondary objective.

The price objective is capped at its optimum and the model is re-solved to
maximize the total gear ratio, preferring the highest reduction among all
cheapest selections. The cap is only meaningful if the given value really is
the optimum; that is the caller's responsibility.
"""

from __future__ import annotations

from dataclasses import replace

from vitaminopt.constants import OBJECTIVE_ABS_TOL, OBJECTIVE_CAP_SLACK
from vitaminopt.constraints.limb import slot_feature
from vitaminopt.logging import get_logger
from vitaminopt.optimization.errors import InfeasibleSelectionError
from vitaminopt.optimization.feature_matrix import FeatureRow
from vitaminopt.optimization.oracle import LinearExpression, ObjectiveSense
from vitaminopt.optimization.selector import SelectionModel
from vitaminopt.optimization.solution import Solution

log = get_logger(__name__)


def total_gear_ratio(model: SelectionModel) -> LinearExpression:
    """Sum over slots of the selected column's gear ratio."""
    return sum(slot_feature(model.feature_matrix, slot, FeatureRow.GEAR_RATIO) for slot in model.slots)


def optimize_at_pareto_frontier(
    model: SelectionModel,
    optimal_objective_value: float,
    objective: LinearExpression | None = None,
) -> Solution:
    """
    Maximize total gear ratio while keeping price at ``optimal_objective_value``.

    Args:
        model: Solved selection model; the cap and new objective are added to its session
        optimal_objective_value: Proven optimal price
        objective: Price expression to cap (defaults to the model's objective)

    Returns:
        Refined solution; its ``objective_value`` is the total price

    Raises:
        InfeasibleSelectionError: The refinement solve failed
    """
    objective = objective if objective is not None else model.objective
    cap = optimal_objective_value + OBJECTIVE_CAP_SLACK.value * abs(optimal_objective_value) + OBJECTIVE_ABS_TOL.value

    # Force the model to stay at the Pareto frontier.
    model.session.add_constraint(objective, upper=cap, name="objective_cap")

    model.session.set_objective(total_gear_ratio(model), ObjectiveSense.MAXIMIZE)
    model.session.solve()

    if model.session.failed():
        raise InfeasibleSelectionError(
            "Failed to optimize the model at the Pareto frontier",
            {
                "stage": "refine",
                "status": model.session.status.value,
                "objective_value": optimal_objective_value,
                "slot_states": model.slot_states(),
            },
        )

    solution = model.decode()
    log.info(f"Refined selection: total gear ratio {model.session.objective_value:.6g}")
    return replace(solution, objective_value=model.session.evaluate(objective))
