"""
Base constraint classes and interfaces.

This module defines the constraint bookkeeping shared by every constraint
family: named rows registered on an oracle session, and violation records
produced when a decoded solution is checked against the requirements.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from vitaminopt.logging import get_logger

log = get_logger(__name__)


class ConstraintType(Enum):
    """Types of constraints that can be applied."""

    TORQUE = "torque"
    SPEED = "speed"


@dataclass
class ConstraintViolation:
    """Represents a constraint violation."""

    constraint_type: ConstraintType
    constraint_name: str
    violation_value: float
    limit_value: float
    slot_index: int | None = None
    message: str = ""

    def __post_init__(self):
        if not self.message:
            self.message = f"{self.constraint_name} violation: {self.violation_value:.6g} below required {self.limit_value:.6g}"


class BaseConstraints(ABC):
    """
    Base class for all constraint systems.

    Keeps track of the rows a constraint family added to an oracle session
    and of the violations found when checking a solution.
    """

    def __init__(self):
        self._constraints: dict[str, Any] = {}
        self._violations: list[ConstraintViolation] = []

    @abstractmethod
    def validate(self) -> bool:
        """
        Validate the constraint definition.

        Returns:
            bool: True if the constraints are well formed, False otherwise
        """

    @abstractmethod
    def check_violations(self, solution: Any) -> list[ConstraintViolation]:
        """
        Check a decoded solution against the constraints.

        Args:
            solution: Decoded selection

        Returns:
            List of constraint violations found
        """

    def add_constraint(self, name: str, constraint: Any) -> None:
        """Register a constraint under ``name``."""
        self._constraints[name] = constraint
        log.debug(f"Added constraint: {name}")

    def get_constraint(self, name: str) -> Any:
        """Get a constraint by name."""
        return self._constraints.get(name)

    def list_constraints(self) -> list[str]:
        """List all constraint names."""
        return list(self._constraints.keys())

    def clear_violations(self) -> None:
        """Clear all constraint violations."""
        self._violations.clear()

    def get_violations(self) -> list[ConstraintViolation]:
        """Get all constraint violations."""
        return self._violations.copy()

    def has_violations(self) -> bool:
        """Check if there are any constraint violations."""
        return len(self._violations) > 0

    def _add_violation(self, violation: ConstraintViolation) -> None:
        """Add a constraint violation."""
        self._violations.append(violation)
        log.warning(f"Constraint violation: {violation.message}")

    def _check_minimum(
        self,
        actual: float,
        required: float,
        constraint_type: ConstraintType,
        name: str,
        slot_index: int | None = None,
        tolerance: float = 1e-9,
    ) -> ConstraintViolation | None:
        """
        Check that ``actual`` reaches ``required``.

        Args:
            actual: Value provided by the selection
            required: Minimum value demanded
            constraint_type: Type of constraint
            name: Name of the constraint
            slot_index: Slot the check applies to
            tolerance: Relative slack allowed below ``required``

        Returns:
            ConstraintViolation if violated, None otherwise
        """
        if actual < required - tolerance * max(1.0, abs(required)):
            return ConstraintViolation(
                constraint_type=constraint_type,
                constraint_name=name,
                violation_value=actual,
                limit_value=required,
                slot_index=slot_index,
            )
        return None
