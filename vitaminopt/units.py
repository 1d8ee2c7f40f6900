"""Typed physical constants with engineering metadata.

All physical constants are documented with:
- SI units
- Source citation

Usage:
    from vitaminopt.constants import GRAVITY

    # Access value directly
    g = GRAVITY.value

    # Or scale it
    weight = GRAVITY * mass
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PhysicalConstant:
    """Typed physical constant with engineering metadata.

    Attributes:
        value: Numerical value of the constant
        unit: SI unit string (e.g., "m", "m/s^2")
        source: Citation or reference for the value
        notes: Additional documentation
    """

    value: float
    unit: str
    source: str
    notes: str = ""

    def __mul__(self, other):
        return self.value * other

    def __repr__(self) -> str:
        return f"PhysicalConstant({self.value} {self.unit})"
