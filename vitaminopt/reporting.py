"""Text and JSON renderings of selection results."""

from __future__ import annotations

from typing import Any

from vitaminopt.logging import get_logger
from vitaminopt.optimization.solution import ParetoSet, Solution

log = get_logger(__name__)

_BANNER = "-" * 55


def format_solution(solution: Solution) -> list[str]:
    """Lines describing one solution, with a banner when it is not proven optimal."""
    lines = []
    if solution.is_suboptimal:
        lines += [_BANNER, "SUBOPTIMAL RESULT".center(55, "-"), _BANNER]
    lines.append(f"Optimal objective: {solution.objective_value}")
    lines.append("Optimal motors:")
    for motor, ratio in solution:
        lines.append(f"\t{motor}, ratio={ratio:g}")
    return lines


def log_solution(solution: Solution) -> None:
    if solution.is_suboptimal:
        log.warning("Solve hit its time limit; the result below is feasible but not proven optimal")
    for line in format_solution(solution):
        log.info(line)


def solution_to_dict(solution: Solution) -> dict[str, Any]:
    return {
        "objective_value": solution.objective_value,
        "status": solution.status.value,
        "suboptimal": solution.is_suboptimal,
        "total_price": solution.total_price,
        "total_gear_ratio": solution.total_gear_ratio,
        "slots": [
            {
                "motor": s.motor.name,
                "gear_ratio": s.gear_ratio,
                "column_index": s.column_index,
                "torque": s.torque,
                "speed": s.speed,
            }
            for s in solution.selections
        ],
    }


def pareto_set_to_dict(pareto: ParetoSet) -> dict[str, Any]:
    return {
        "objective_value": pareto.objective_value,
        "count": len(pareto),
        "suboptimal": pareto.is_suboptimal,
        "solutions": [solution_to_dict(s) for s in pareto],
    }
