"""Constants used across the VitaminOpt project.

Physics constants and the tolerances that decoding and frontier search
depend on use the PhysicalConstant dataclass for traceability. Pure
configuration defaults (gear ratio generation, slot count) are raw values.
"""

from __future__ import annotations

from vitaminopt.units import PhysicalConstant

# =============================================================================
# Physics
# =============================================================================

GRAVITY = PhysicalConstant(
    value=9.80665,
    unit="m/s^2",
    source="CGPM 1901, standard acceleration of gravity",
    notes="Used for the gravity loading of outboard motors on each joint",
)


# =============================================================================
# Numerical Tolerances
# =============================================================================

DECODE_REL_TOL = PhysicalConstant(
    value=1.5e-8,
    unit="dimensionless",
    source="sqrt(2.2e-16), square root of double machine epsilon",
    notes="Relative tolerance for matching un-geared torque and speed against the "
    "motor catalog. Feature columns store torque*ratio and speed/ratio, so undoing "
    "the ratio is exact only up to rounding.",
)

DECODE_ABS_TOL = PhysicalConstant(
    value=0.0,
    unit="dimensionless",
    source="Project standard",
    notes="Absolute tolerance for the decode match; zero keeps the match purely relative.",
)

OBJECTIVE_REL_TOL = PhysicalConstant(
    value=1e-9,
    unit="dimensionless",
    source="HiGHS default mip_feasibility_tolerance order of magnitude",
    notes="Relative tolerance for deciding that a re-solve stayed on the optimal objective",
)

OBJECTIVE_ABS_TOL = PhysicalConstant(
    value=1e-6,
    unit="currency",
    source="HiGHS default primal feasibility tolerance (1e-7) with 10x margin",
    notes="Absolute tolerance for deciding that a re-solve stayed on the optimal objective",
)

OBJECTIVE_CAP_SLACK = PhysicalConstant(
    value=1e-9,
    unit="dimensionless",
    source="Project standard",
    notes="Relative slack on the cost cap used when refining inside the optimal set",
)


# =============================================================================
# Problem Configuration (raw values)
# =============================================================================

NUM_SLOTS: int = 3

DEFAULT_RATIO_START: float = 1.0
DEFAULT_RATIO_STEP: float = 2.0
DEFAULT_RATIO_COUNT: int = 30

LIMB_CONFIGURATIONS: list[str] = [
    "min",
    "max",
]
