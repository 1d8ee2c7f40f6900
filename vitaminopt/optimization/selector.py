"""
Primary motor selection: build the model and minimize total price.

``build_selection_model`` declares one binary slot vector per link over the
full feature matrix, forces each slot to exactly one column, adds the limb
constraints and sets the price objective. ``build_and_optimize_model`` then
solves it once and decodes the cheapest selection. The returned
``SelectionModel`` owns the solved session; the frontier enumerator and the
refiner keep mutating it.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from vitaminopt.constants import DECODE_ABS_TOL, DECODE_REL_TOL, NUM_SLOTS
from vitaminopt.constraints.limb import LimbConstraints, slot_feature
from vitaminopt.diagnostics.feasibility import check_feasibility
from vitaminopt.logging import get_logger
from vitaminopt.optimization.decoder import find_optimal_motors
from vitaminopt.optimization.errors import InfeasibleSelectionError
from vitaminopt.optimization.feature_matrix import FeatureMatrix, FeatureRow, build_feature_matrix
from vitaminopt.optimization.oracle import (
    LinearExpression,
    MilpSession,
    ObjectiveSense,
    OracleOptions,
)
from vitaminopt.optimization.solution import Solution
from vitaminopt.physics.limb import Limb
from vitaminopt.physics.motor import Motor

log = get_logger(__name__)


@dataclass(eq=False)
class SelectionModel:
    """Everything one exploration needs: the session and the data it was built from.

    Not safe to share; every exploration builds its own.
    """

    session: MilpSession
    feature_matrix: FeatureMatrix
    slots: list[np.ndarray]
    objective: LinearExpression
    constraints: LimbConstraints
    decode_rel_tol: float = DECODE_REL_TOL.value
    decode_abs_tol: float = DECODE_ABS_TOL.value

    @property
    def motors(self) -> tuple[Motor, ...]:
        return self.feature_matrix.motors

    def decode(self) -> Solution:
        """Decode the most recent solve."""
        return find_optimal_motors(
            self.session,
            self.feature_matrix,
            self.slots,
            rel_tol=self.decode_rel_tol,
            abs_tol=self.decode_abs_tol,
        )

    def slot_states(self) -> dict[str, list[int]]:
        """Selected columns per slot after the latest solve, for error context."""
        if not self.session.has_values:
            return {}
        return {
            f"slot{i + 1}": np.flatnonzero(self.session.value(slot) > 0.5).tolist()
            for i, slot in enumerate(self.slots)
        }


def build_selection_model(
    limb: Limb,
    motors: Sequence[Motor],
    gear_ratios: Iterable[float],
    options: OracleOptions | None = None,
    configurations: Sequence[str] = ("min",),
    session: MilpSession | None = None,
    decode_rel_tol: float = DECODE_REL_TOL.value,
    decode_abs_tol: float = DECODE_ABS_TOL.value,
) -> SelectionModel:
    """
    Build the price-minimization model without solving it.

    Args:
        limb: Limb description
        motors: Ordered motor catalog
        gear_ratios: Ordered candidate ratios
        options: Oracle options for a new session
        configurations: Limb link sets to enforce
        session: Empty session to build into; a new one is created if omitted
        decode_rel_tol: Relative torque/speed tolerance used when decoding
        decode_abs_tol: Absolute torque/speed tolerance used when decoding

    Returns:
        SelectionModel ready to solve
    """
    feature_matrix = build_feature_matrix(motors, gear_ratios)
    if session is None:
        session = MilpSession(options or OracleOptions())
    elif session.num_variables:
        raise ValueError("Selection models must be built into an empty session")

    # Each slot is a binary vector with a single 1 picking the motor and ratio.
    slots = [
        session.add_binary_variables(feature_matrix.num_columns, f"slot{i + 1}")
        for i in range(NUM_SLOTS)
    ]
    for i, slot in enumerate(slots):
        session.add_exactly_one(slot, name=f"one_selection_{i + 1}")

    constraints = LimbConstraints(limb, configurations)
    constraints.formulate(session, feature_matrix, slots)

    objective = sum(slot_feature(feature_matrix, slot, FeatureRow.PRICE) for slot in slots)
    session.set_objective(objective, ObjectiveSense.MINIMIZE)

    log.info(
        f"Built selection model for {limb.name}: {session.num_variables} binary variables, "
        f"{session.num_constraints} constraints",
    )
    return SelectionModel(
        session=session,
        feature_matrix=feature_matrix,
        slots=slots,
        objective=objective,
        constraints=constraints,
        decode_rel_tol=decode_rel_tol,
        decode_abs_tol=decode_abs_tol,
    )


def build_and_optimize_model(
    limb: Limb,
    motors: Sequence[Motor],
    gear_ratios: Iterable[float],
    options: OracleOptions | None = None,
    configurations: Sequence[str] = ("min",),
    session: MilpSession | None = None,
    decode_rel_tol: float = DECODE_REL_TOL.value,
    decode_abs_tol: float = DECODE_ABS_TOL.value,
) -> tuple[SelectionModel, Solution]:
    """
    Build the model, minimize total price once and decode the result.

    Raises:
        InfeasibleSelectionError: The solve produced no usable selection
    """
    model = build_selection_model(
        limb,
        motors,
        gear_ratios,
        options=options,
        configurations=configurations,
        session=session,
        decode_rel_tol=decode_rel_tol,
        decode_abs_tol=decode_abs_tol,
    )

    log.info("Optimizing initial model.")
    model.session.solve()

    if model.session.failed():
        report = check_feasibility(limb, model.feature_matrix, configurations)
        raise InfeasibleSelectionError(
            "The model was not solved correctly",
            {
                "stage": "primary",
                "status": model.session.status.value,
                "slot_states": model.slot_states(),
                "diagnostics": "; ".join(report.recommendations) or "none",
            },
        )

    solution = model.decode()
    log.info(f"Found solution with objective {solution.objective_value:.6g}")
    return model, solution
