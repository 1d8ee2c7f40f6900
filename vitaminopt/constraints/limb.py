"""
Limb torque and speed requirements as linear constraints.

For a three-link limb, each slot's selected column must deliver at least the
torque and speed its joint needs. Joint torque includes the weight of the
motors chosen for the outboard slots, so the requirement itself is a linear
expression in the slot variables; joint speed depends only on geometry.

With a one-hot slot vector ``s``, ``row @ s`` is exactly the selected
column's feature, which keeps every expression linear.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np

from vitaminopt.constants import GRAVITY, LIMB_CONFIGURATIONS, NUM_SLOTS
from vitaminopt.constraints.base import BaseConstraints, ConstraintType, ConstraintViolation
from vitaminopt.logging import get_logger
from vitaminopt.optimization.feature_matrix import FeatureMatrix, FeatureRow
from vitaminopt.optimization.oracle import LinearExpression, MilpSession
from vitaminopt.physics.limb import (
    Limb,
    lever_arm,
    mass_lever_arm,
    required_speeds,
    required_torques,
)

if TYPE_CHECKING:
    from vitaminopt.optimization.solution import Solution

log = get_logger(__name__)


def slot_feature(
    feature_matrix: FeatureMatrix, slot: np.ndarray, feature: FeatureRow,
) -> LinearExpression:
    """Feature of the column a slot selects, as ``feature_row @ slot``."""
    return LinearExpression.weighted_sum(slot, feature_matrix.row(feature))


class LimbConstraints(BaseConstraints):
    """
    Torque and speed constraints for every slot of a three-link limb.

    Args:
        limb: Limb description
        configurations: Link sets to enforce, any of ``"min"`` and ``"max"``
    """

    def __init__(self, limb: Limb, configurations: Sequence[str] = ("min",)):
        super().__init__()
        self.limb = limb
        self.configurations = tuple(configurations)
        if not self.validate():
            raise ValueError(
                f"configurations must be a non-empty subset of {LIMB_CONFIGURATIONS}, got {self.configurations}",
            )

    def validate(self) -> bool:
        if not self.configurations:
            return False
        if len(set(self.configurations)) != len(self.configurations):
            return False
        return all(c in LIMB_CONFIGURATIONS for c in self.configurations)

    def required_torque(
        self,
        feature_matrix: FeatureMatrix,
        slots: Sequence[np.ndarray],
        slot_index: int,
        configuration: str = "min",
    ) -> LinearExpression:
        """
        Torque the joint of ``slot_index`` must supply.

        The tip force acts over every link from the joint to the tip; each
        outboard motor's weight acts over the links between the joint and
        that motor.
        """
        radii = self.limb.radii(configuration)
        required = LinearExpression(constant=self.limb.tip_force * lever_arm(radii, slot_index))
        for j in range(slot_index + 1, NUM_SLOTS):
            mass = slot_feature(feature_matrix, slots[j], FeatureRow.MASS)
            required = required + mass * (GRAVITY * mass_lever_arm(radii, slot_index, j))
        return required

    def required_speed(self, slot_index: int, configuration: str = "min") -> float:
        """Angular speed the joint of ``slot_index`` must reach."""
        radii = self.limb.radii(configuration)
        return self.limb.tip_velocity / lever_arm(radii, slot_index)

    def formulate(
        self,
        session: MilpSession,
        feature_matrix: FeatureMatrix,
        slots: Sequence[np.ndarray],
    ) -> None:
        """Add ``torque >= required`` and ``speed >= required`` for every slot and configuration."""
        if len(slots) != NUM_SLOTS:
            raise ValueError(f"Expected {NUM_SLOTS} slots, got {len(slots)}")

        for configuration in self.configurations:
            for i in range(NUM_SLOTS):
                torque = slot_feature(feature_matrix, slots[i], FeatureRow.TORQUE)
                tau_required = self.required_torque(feature_matrix, slots, i, configuration)
                name = f"torque_{configuration}_{i + 1}"
                self.add_constraint(name, session.add_constraint(torque - tau_required, lower=0.0, name=name))

                speed = slot_feature(feature_matrix, slots[i], FeatureRow.SPEED)
                omega_required = self.required_speed(i, configuration)
                name = f"speed_{configuration}_{i + 1}"
                self.add_constraint(name, session.add_constraint(speed, lower=omega_required, name=name))

                log.debug(
                    f"Slot {i + 1} ({configuration}): tau >= {tau_required.constant:.4g} + mass terms, "
                    f"omega >= {omega_required:.4g}",
                )

    def check_violations(self, solution: Solution) -> list[ConstraintViolation]:
        """Check a decoded solution's geared torque and speed against the requirements."""
        self.clear_violations()
        masses = [selection.motor.mass for selection in solution.selections]
        for configuration in self.configurations:
            torques = required_torques(self.limb, masses, configuration)
            speeds = required_speeds(self.limb, configuration)
            for i, selection in enumerate(solution.selections):
                checks = [
                    (selection.torque, torques[i], ConstraintType.TORQUE, f"torque_{configuration}_{i + 1}"),
                    (selection.speed, speeds[i], ConstraintType.SPEED, f"speed_{configuration}_{i + 1}"),
                ]
                for actual, required, constraint_type, name in checks:
                    violation = self._check_minimum(actual, required, constraint_type, name, slot_index=i)
                    if violation is not None:
                        self._add_violation(violation)
        return self.get_violations()
