"""
Constraint definitions for motor selection problems.

This module provides the constraint base classes and the limb formulator that
turns kinematic requirements into linear constraints over slot variables.
"""

from .base import BaseConstraints, ConstraintType, ConstraintViolation
from .limb import LimbConstraints, slot_feature

__all__ = [
    # Base classes
    "BaseConstraints",
    "ConstraintType",
    "ConstraintViolation",

    # Limb constraints
    "LimbConstraints",
    "slot_feature",
]
