"""
Physical descriptions of the selection problem.

Motors and gear ratios are the candidate drive components; a limb carries the
kinematic parameters that turn into per-link torque and speed requirements.
"""

from .limb import Limb, Link, required_speeds, required_torques
from .motor import Motor, make_gear_ratios, validate_gear_ratios, validate_motors

__all__ = [
    # Drive components
    "Motor",
    "make_gear_ratios",
    "validate_gear_ratios",
    "validate_motors",

    # Limb kinematics
    "Limb",
    "Link",
    "required_speeds",
    "required_torques",
]
