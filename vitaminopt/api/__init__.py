"""
High-level entry points for motor selection.

``optimize_limb`` returns every cheapest selection; ``refine_limb`` returns
the cheapest selection with the highest total gear reduction. The ``load_*``
variants read the limb and catalog from files first. Every call builds its
own oracle session.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

from vitaminopt.config.settings import SelectorConfig
from vitaminopt.io.catalog import load_problem
from vitaminopt.logging import get_logger
from vitaminopt.optimization.pareto import explore_pareto_frontier
from vitaminopt.optimization.secondary import optimize_at_pareto_frontier
from vitaminopt.optimization.selector import SelectionModel, build_and_optimize_model
from vitaminopt.optimization.solution import ParetoSet, Solution
from vitaminopt.physics.limb import Limb
from vitaminopt.physics.motor import Motor
from vitaminopt.reporting import log_solution

log = get_logger(__name__)

__all__ = [
    "ParetoSet",
    "Solution",
    "load_and_optimize",
    "load_and_optimize_at_pareto_frontier",
    "optimize_limb",
    "refine_limb",
]


def _primary(
    limb: Limb, motors: Sequence[Motor], gear_ratios: Iterable[float], config: SelectorConfig,
) -> tuple[SelectionModel, Solution]:
    return build_and_optimize_model(
        limb,
        motors,
        gear_ratios,
        options=config.oracle_options(),
        configurations=config.configurations,
        decode_rel_tol=config.decode_rel_tol,
        decode_abs_tol=config.decode_abs_tol,
    )


def optimize_limb(
    limb: Limb,
    motors: Sequence[Motor],
    gear_ratios: Iterable[float] | None = None,
    config: SelectorConfig | None = None,
) -> ParetoSet:
    """Solve for minimum price and collect every selection tied with it."""
    config = config or SelectorConfig()
    ratios = config.gear_ratios() if gear_ratios is None else gear_ratios

    model, solution = _primary(limb, motors, ratios, config)

    log.info("Exploring Pareto frontier.")
    others = explore_pareto_frontier(
        model,
        solution.objective_value,
        max_solutions=config.max_pareto_solutions,
        rel_tol=config.objective_rel_tol,
        abs_tol=config.objective_abs_tol,
    )
    pareto = ParetoSet([solution, *others])
    for found in pareto:
        log_solution(found)
    log.info(f"Pareto set for {limb.name}: {len(pareto)} selections at objective {solution.objective_value:.6g}")
    return pareto


def refine_limb(
    limb: Limb,
    motors: Sequence[Motor],
    gear_ratios: Iterable[float] | None = None,
    config: SelectorConfig | None = None,
) -> Solution:
    """Solve for minimum price, then maximize total gear ratio at that price."""
    config = config or SelectorConfig()
    ratios = config.gear_ratios() if gear_ratios is None else gear_ratios

    model, solution = _primary(limb, motors, ratios, config)

    log.info("Optimizing at Pareto frontier.")
    refined = optimize_at_pareto_frontier(model, solution.objective_value)
    log_solution(refined)
    return refined


def load_and_optimize(
    constraints_file: str | Path,
    limb_name: str,
    motor_options_file: str | Path,
    config: SelectorConfig | None = None,
) -> ParetoSet:
    """File-based :func:`optimize_limb`."""
    config = config or SelectorConfig()
    limb, motors, ratios = load_problem(constraints_file, limb_name, motor_options_file, config)
    return optimize_limb(limb, motors, ratios, config)


def load_and_optimize_at_pareto_frontier(
    constraints_file: str | Path,
    limb_name: str,
    motor_options_file: str | Path,
    config: SelectorConfig | None = None,
) -> Solution:
    """File-based :func:`refine_limb`."""
    config = config or SelectorConfig()
    limb, motors, ratios = load_problem(constraints_file, limb_name, motor_options_file, config)
    return refine_limb(limb, motors, ratios, config)
