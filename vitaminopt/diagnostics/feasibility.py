from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from vitaminopt.constants import GRAVITY, NUM_SLOTS
from vitaminopt.logging import get_logger
from vitaminopt.optimization.feature_matrix import FeatureMatrix, FeatureRow
from vitaminopt.physics.limb import Limb, lever_arm, mass_lever_arm, required_speeds

log = get_logger(__name__)


@dataclass
class FeasibilityReport:
    feasible: bool
    max_violation: float
    violations: dict[str, float] = field(default_factory=dict)
    recommendations: list[str] = field(default_factory=list)


def check_feasibility(
    limb: Limb, feature_matrix: FeatureMatrix, configurations: Sequence[str] = ("min",),
) -> FeasibilityReport:
    """Per-slot feasibility check using lower bounds on the requirements.

    Outboard motor weight is bounded below by the lightest catalog motor, so a
    slot flagged here cannot be satisfied by any selection. Passing this check
    does not guarantee the full model is feasible, since the slots interact
    through motor masses.
    """
    violations: dict[str, float] = {}
    recs: list[str] = []

    torque = feature_matrix.row(FeatureRow.TORQUE)
    speed = feature_matrix.row(FeatureRow.SPEED)
    lightest = float(np.min(feature_matrix.row(FeatureRow.MASS)))

    for configuration in configurations:
        radii = limb.radii(configuration)
        speeds = required_speeds(limb, configuration)
        for i in range(NUM_SLOTS):
            tau_lb = limb.tip_force * lever_arm(radii, i) + sum(
                GRAVITY * lightest * mass_lever_arm(radii, i, j) for j in range(i + 1, NUM_SLOTS)
            )
            omega = speeds[i]

            # Relative shortfall of the column closest to meeting both requirements
            torque_gap = np.maximum(0.0, (tau_lb - torque) / max(abs(tau_lb), 1e-12))
            speed_gap = np.maximum(0.0, (omega - speed) / max(abs(omega), 1e-12))
            shortfall = float(np.min(np.maximum(torque_gap, speed_gap)))

            if shortfall > 0.0:
                key = f"slot{i + 1}_{configuration}"
                violations[key] = shortfall
                recs.append(
                    f"Slot {i + 1} ({configuration}): no motor/ratio reaches torque {tau_lb:.4g} N*m "
                    f"and speed {omega:.4g} rad/s (best available {float(np.max(torque)):.4g} N*m, "
                    f"{float(np.max(speed)):.4g} rad/s)",
                )

    max_violation = max(violations.values()) if violations else 0.0
    feasible = max_violation == 0.0
    if not feasible:
        log.debug(f"Feasibility check failed: {violations}")

    return FeasibilityReport(
        feasible=feasible,
        max_violation=max_violation,
        violations=violations,
        recommendations=recs,
    )
