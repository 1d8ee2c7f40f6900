"""
Enumerate every selection tied at the optimal total price.

After the primary solve, each round adds a no-good cut forbidding the exact
column triple just found and re-solves. Any single-slot change escapes the
cut, so the next solve finds the best remaining combination. The loop stops
as soon as a re-solve fails or its objective moves off the optimum. Every
cut removes at least one combination from a finite set, so it terminates.
"""

from __future__ import annotations

from vitaminopt.constants import OBJECTIVE_ABS_TOL, OBJECTIVE_REL_TOL
from vitaminopt.logging import get_logger
from vitaminopt.optimization.decoder import optimal_indices
from vitaminopt.optimization.oracle import LinearExpression
from vitaminopt.optimization.selector import SelectionModel
from vitaminopt.optimization.solution import Solution, objectives_match

log = get_logger(__name__)


def add_no_good_cut(model: SelectionModel) -> list[int]:
    """Forbid the column triple selected by the latest solve; return that triple."""
    indices = optimal_indices(model.session, model.slots)
    selected = [int(slot[index]) for slot, index in zip(model.slots, indices)]
    cut = LinearExpression.weighted_sum(selected, [1.0] * len(selected))
    model.session.add_constraint(
        cut,
        upper=len(model.slots) - 1,
        name=f"no_good_{'_'.join(str(i) for i in indices)}",
    )
    return indices


def explore_pareto_frontier(
    model: SelectionModel,
    optimal_objective_value: float,
    max_solutions: int | None = None,
    rel_tol: float = OBJECTIVE_REL_TOL.value,
    abs_tol: float = OBJECTIVE_ABS_TOL.value,
) -> list[Solution]:
    """
    Find all other solutions at ``optimal_objective_value``.

    The session must hold a successful solve at that objective. Solutions
    are returned in discovery order and exclude the one already in the
    session.

    Args:
        model: Solved selection model; cuts are added to its session
        optimal_objective_value: Objective of the primary solve
        max_solutions: Stop after this many alternatives (None for no limit)
        rel_tol: Relative tolerance for "objective unchanged"
        abs_tol: Absolute tolerance for "objective unchanged"

    Returns:
        Alternative optimal solutions
    """
    solutions: list[Solution] = []
    session = model.session

    while max_solutions is None or len(solutions) < max_solutions:
        excluded = add_no_good_cut(model)
        session.solve()

        if session.failed():
            log.info(f"Frontier exhausted after {len(solutions)} alternatives: re-solve {session.status.value}")
            break
        if not objectives_match(session.objective_value, optimal_objective_value, rel_tol, abs_tol):
            log.info(
                f"Frontier exhausted after {len(solutions)} alternatives: objective moved to "
                f"{session.objective_value:.6g}",
            )
            break

        solution = model.decode()
        log.debug(f"Excluded columns {excluded}, found {list(solution.column_indices)}")
        solutions.append(solution)
    else:
        log.warning(f"Reached the limit of {max_solutions} alternatives; further tied selections were not searched")

    return solutions
