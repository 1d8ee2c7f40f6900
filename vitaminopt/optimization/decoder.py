"""
Map solved slot vectors back to catalog motors.

A feature column stores torque and speed after gearing. Decoding divides the
embedded ratio back out and searches the catalog: price and mass must match
exactly (gearing never touches them), torque and speed within
``DECODE_REL_TOL`` because undoing the ratio is subject to rounding.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from vitaminopt.constants import DECODE_ABS_TOL, DECODE_REL_TOL
from vitaminopt.logging import get_logger
from vitaminopt.optimization.errors import DecodeError
from vitaminopt.optimization.feature_matrix import FeatureMatrix, FeatureRow
from vitaminopt.optimization.oracle import MilpSession
from vitaminopt.optimization.solution import SlotSelection, Solution
from vitaminopt.physics.motor import Motor

log = get_logger(__name__)


def optimal_indices(session: MilpSession, slots: Sequence[np.ndarray]) -> list[int]:
    """Column index each slot selected in the most recent solve."""
    indices = []
    for i, slot in enumerate(slots):
        chosen = np.flatnonzero(session.value(slot) > 0.5)
        if len(chosen) != 1:
            raise DecodeError(
                "Slot is not one-hot after solve",
                {"slot": i + 1, "selected_columns": chosen.tolist(), "status": session.status.value},
            )
        indices.append(int(chosen[0]))
    return indices


def find_motor_index(
    column: np.ndarray,
    motors: Sequence[Motor],
    rel_tol: float = DECODE_REL_TOL.value,
    abs_tol: float = DECODE_ABS_TOL.value,
) -> int | None:
    """
    Index of the motor a feature column was built from.

    Args:
        column: One feature matrix column
        motors: Catalog the matrix was built from
        rel_tol: Relative tolerance on un-geared torque and speed
        abs_tol: Absolute tolerance on un-geared torque and speed

    Returns:
        First matching index, or None when nothing matches
    """
    ratio = column[FeatureRow.GEAR_RATIO]
    torque = column[FeatureRow.TORQUE] / ratio
    speed = column[FeatureRow.SPEED] * ratio
    for index, motor in enumerate(motors):
        if (
            motor.price == column[FeatureRow.PRICE]
            and motor.mass == column[FeatureRow.MASS]
            and math.isclose(motor.stall_torque, torque, rel_tol=rel_tol, abs_tol=abs_tol)
            and math.isclose(motor.free_speed, speed, rel_tol=rel_tol, abs_tol=abs_tol)
        ):
            return index
    return None


def decode_column(
    column: np.ndarray,
    motors: Sequence[Motor],
    rel_tol: float = DECODE_REL_TOL.value,
    abs_tol: float = DECODE_ABS_TOL.value,
) -> tuple[Motor, float]:
    """Return ``(motor, gear_ratio)`` for a column, or raise DecodeError."""
    index = find_motor_index(column, motors, rel_tol=rel_tol, abs_tol=abs_tol)
    if index is None:
        raise DecodeError(
            "No catalog motor matches the selected feature column",
            {"column": np.asarray(column).tolist(), "rel_tol": rel_tol, "abs_tol": abs_tol},
        )
    return motors[index], float(column[FeatureRow.GEAR_RATIO])


def find_optimal_motors(
    session: MilpSession,
    feature_matrix: FeatureMatrix,
    slots: Sequence[np.ndarray],
    rel_tol: float = DECODE_REL_TOL.value,
    abs_tol: float = DECODE_ABS_TOL.value,
) -> Solution:
    """Decode the session's most recent solve into a Solution."""
    selections = []
    for index in optimal_indices(session, slots):
        motor, ratio = decode_column(
            feature_matrix.column(index), feature_matrix.motors, rel_tol=rel_tol, abs_tol=abs_tol,
        )
        selections.append(SlotSelection(motor=motor, gear_ratio=ratio, column_index=index))
    return Solution(
        selections=tuple(selections),
        objective_value=session.objective_value,
        status=session.status,
    )
