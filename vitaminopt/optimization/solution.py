"""Decoded selections and the set of cost-tied alternatives."""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass, field

from vitaminopt.constants import OBJECTIVE_ABS_TOL, OBJECTIVE_REL_TOL
from vitaminopt.optimization.oracle import TerminationStatus
from vitaminopt.physics.motor import Motor


@dataclass(frozen=True)
class SlotSelection:
    """The motor and gear ratio one slot resolved to."""

    motor: Motor
    gear_ratio: float
    column_index: int

    @property
    def torque(self) -> float:
        """Stall torque at the output of the gearing."""
        return self.motor.stall_torque * self.gear_ratio

    @property
    def speed(self) -> float:
        """Free speed at the output of the gearing."""
        return self.motor.free_speed / self.gear_ratio


@dataclass(frozen=True)
class Solution:
    """One (motor, ratio) pair per slot, shoulder first, with the objective it achieved."""

    selections: tuple[SlotSelection, ...]
    objective_value: float
    status: TerminationStatus = TerminationStatus.OPTIMAL

    def __iter__(self) -> Iterator[tuple[Motor, float]]:
        return iter((s.motor, s.gear_ratio) for s in self.selections)

    def __len__(self) -> int:
        return len(self.selections)

    @property
    def motors(self) -> tuple[Motor, ...]:
        return tuple(s.motor for s in self.selections)

    @property
    def gear_ratios(self) -> tuple[float, ...]:
        return tuple(s.gear_ratio for s in self.selections)

    @property
    def column_indices(self) -> tuple[int, ...]:
        return tuple(s.column_index for s in self.selections)

    @property
    def total_price(self) -> float:
        return sum(s.motor.price for s in self.selections)

    @property
    def total_mass(self) -> float:
        return sum(s.motor.mass for s in self.selections)

    @property
    def total_gear_ratio(self) -> float:
        return sum(s.gear_ratio for s in self.selections)

    @property
    def is_suboptimal(self) -> bool:
        """True when the solve stopped on its time limit before proving optimality."""
        return self.status == TerminationStatus.TIME_LIMIT


def objectives_match(
    a: float,
    b: float,
    rel_tol: float = OBJECTIVE_REL_TOL.value,
    abs_tol: float = OBJECTIVE_ABS_TOL.value,
) -> bool:
    """Whether two objective values are the same optimum up to solver noise."""
    return math.isclose(a, b, rel_tol=rel_tol, abs_tol=abs_tol)


@dataclass
class ParetoSet:
    """Distinct solutions sharing the optimal total price, in discovery order."""

    solutions: list[Solution] = field(default_factory=list)

    def __iter__(self) -> Iterator[Solution]:
        return iter(self.solutions)

    def __len__(self) -> int:
        return len(self.solutions)

    def __getitem__(self, index: int) -> Solution:
        return self.solutions[index]

    @property
    def objective_value(self) -> float | None:
        return self.solutions[0].objective_value if self.solutions else None

    @property
    def is_suboptimal(self) -> bool:
        return any(s.is_suboptimal for s in self.solutions)

    def is_consistent(self) -> bool:
        """All objectives tie with the first and no column triple repeats."""
        if not self.solutions:
            return True
        first = self.solutions[0].objective_value
        if not all(objectives_match(s.objective_value, first) for s in self.solutions):
            return False
        triples = [s.column_indices for s in self.solutions]
        return len(set(triples)) == len(triples)
