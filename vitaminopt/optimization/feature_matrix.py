"""
Feature encoding of every (motor, gear ratio) combination.

Each combination becomes one column of six attributes. The gear ratio scales
torque up and speed down; price and mass do not depend on gearing. Columns
follow ``product(motors, gear_ratios)`` order, which decoding relies on.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import IntEnum
from itertools import product

import numpy as np

from vitaminopt.logging import get_logger
from vitaminopt.physics.motor import Motor, validate_gear_ratios, validate_motors

log = get_logger(__name__)


class FeatureRow(IntEnum):
    """Row index of each attribute in the feature matrix."""

    TORQUE = 0
    SPEED = 1
    PRICE = 2
    MASS = 3
    SPEED_FUNCTION = 4
    GEAR_RATIO = 5


NUM_FEATURES = len(FeatureRow)


def feature_column(motor: Motor, ratio: float) -> np.ndarray:
    """Encode one motor mounted behind one gear ratio."""
    return np.array(
        [
            motor.stall_torque * ratio,
            motor.free_speed / ratio,
            motor.price,
            motor.mass,
            # Reserved for a torque-speed curve term; not used by any constraint.
            0.0,
            ratio,
        ],
        dtype=float,
    )


@dataclass(frozen=True, eq=False)
class FeatureMatrix:
    """Attributes of all candidate combinations, one column per combination.

    Attributes:
        matrix: ``(6, len(motors) * len(gear_ratios))`` array, read-only
        motors: Motor list the matrix was built from
        gear_ratios: Ratio sequence the matrix was built from
    """

    matrix: np.ndarray
    motors: tuple[Motor, ...]
    gear_ratios: tuple[float, ...]

    def __post_init__(self) -> None:
        expected = (NUM_FEATURES, len(self.motors) * len(self.gear_ratios))
        if self.matrix.shape != expected:
            raise ValueError(f"Feature matrix shape {self.matrix.shape} != {expected}")
        self.matrix.setflags(write=False)

    @property
    def num_columns(self) -> int:
        return int(self.matrix.shape[1])

    def row(self, feature: FeatureRow) -> np.ndarray:
        return self.matrix[int(feature), :]

    def column(self, index: int) -> np.ndarray:
        return self.matrix[:, index]

    def column_index(self, motor_index: int, ratio_index: int) -> int:
        """Column holding ``motors[motor_index]`` behind ``gear_ratios[ratio_index]``."""
        return motor_index * len(self.gear_ratios) + ratio_index


def build_feature_matrix(
    motors: Sequence[Motor], gear_ratios: Iterable[float],
) -> FeatureMatrix:
    """
    Build the feature matrix for the Cartesian product of motors and ratios.

    Args:
        motors: Ordered motor list
        gear_ratios: Ordered, positive, unique ratios

    Returns:
        FeatureMatrix with ``len(motors) * len(gear_ratios)`` columns
    """
    motors = tuple(motors)
    validate_motors(motors)
    ratios = validate_gear_ratios(gear_ratios)

    columns = [feature_column(motor, ratio) for motor, ratio in product(motors, ratios)]
    matrix = np.column_stack(columns)

    log.debug(
        f"Built feature matrix: {len(motors)} motors x {len(ratios)} ratios = {matrix.shape[1]} columns",
    )
    return FeatureMatrix(matrix=matrix, motors=motors, gear_ratios=ratios)
