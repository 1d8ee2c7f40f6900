"""
Stateful mixed-integer linear programming session.

``MilpSession`` is the optimization oracle the selection pipeline talks to.
Variables and constraints accumulate on the session; every ``solve`` call
hands the whole model to ``scipy.optimize.milp`` (HiGHS branch-and-bound)
and keeps the result for later queries. A session belongs to exactly one
exploration and is mutated in place, so it must not be shared.
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np
from scipy.optimize import Bounds, LinearConstraint, milp
from scipy.sparse import coo_matrix

from vitaminopt.logging import get_logger

log = get_logger(__name__)


class TerminationStatus(Enum):
    """Outcome of the most recent solve."""

    NOT_SOLVED = "not_solved"
    OPTIMAL = "optimal"
    TIME_LIMIT = "time_limit"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    OTHER = "other"


# scipy.optimize.milp status codes
_SCIPY_STATUS = {
    0: TerminationStatus.OPTIMAL,
    1: TerminationStatus.TIME_LIMIT,
    2: TerminationStatus.INFEASIBLE,
    3: TerminationStatus.UNBOUNDED,
}


class ObjectiveSense(Enum):
    MINIMIZE = "min"
    MAXIMIZE = "max"


def failed_to_optimize(status: TerminationStatus, has_values: bool) -> bool:
    """Return True unless the solve is optimal or hit its time limit with a usable point."""
    return not (
        status == TerminationStatus.OPTIMAL
        or (status == TerminationStatus.TIME_LIMIT and has_values)
    )


class LinearExpression:
    """Affine expression ``sum(coeff * x[index]) + constant`` over session variables."""

    __slots__ = ("terms", "constant")

    def __init__(self, terms: Mapping[int, float] | None = None, constant: float = 0.0):
        self.terms: dict[int, float] = {}
        for index, coeff in (terms or {}).items():
            if coeff != 0.0:
                self.terms[int(index)] = float(coeff)
        self.constant = float(constant)

    @classmethod
    def weighted_sum(
        cls, indices: Iterable[int], weights: Iterable[float], constant: float = 0.0,
    ) -> LinearExpression:
        """Build ``sum(w * x[i])`` from parallel index and weight sequences."""
        terms: dict[int, float] = {}
        for index, weight in zip(indices, weights):
            terms[int(index)] = terms.get(int(index), 0.0) + float(weight)
        return cls(terms, constant)

    def _combine(self, other: LinearExpression | float, sign: float) -> LinearExpression:
        if isinstance(other, LinearExpression):
            terms = dict(self.terms)
            for index, coeff in other.terms.items():
                terms[index] = terms.get(index, 0.0) + sign * coeff
            return LinearExpression(terms, self.constant + sign * other.constant)
        return LinearExpression(self.terms, self.constant + sign * float(other))

    def __add__(self, other: LinearExpression | float) -> LinearExpression:
        return self._combine(other, 1.0)

    def __radd__(self, other: float) -> LinearExpression:
        # Lets sum() start from 0
        return self._combine(other, 1.0)

    def __sub__(self, other: LinearExpression | float) -> LinearExpression:
        return self._combine(other, -1.0)

    def __rsub__(self, other: float) -> LinearExpression:
        return (-self)._combine(other, 1.0)

    def __mul__(self, scalar: float) -> LinearExpression:
        scalar = float(scalar)
        return LinearExpression(
            {index: coeff * scalar for index, coeff in self.terms.items()},
            self.constant * scalar,
        )

    __rmul__ = __mul__

    def __neg__(self) -> LinearExpression:
        return self * -1.0

    def evaluate(self, values: np.ndarray) -> float:
        """Value of the expression for a full variable vector."""
        return self.constant + sum(coeff * float(values[index]) for index, coeff in self.terms.items())

    def __repr__(self) -> str:
        return f"LinearExpression({len(self.terms)} terms, constant={self.constant})"


@dataclass
class OracleOptions:
    """Options forwarded to HiGHS through ``scipy.optimize.milp``."""

    time_limit: float | None = None
    mip_rel_gap: float | None = None
    presolve: bool = True
    disp: bool = False

    def to_scipy(self) -> dict[str, Any]:
        options: dict[str, Any] = {"disp": self.disp, "presolve": self.presolve}
        if self.time_limit is not None:
            options["time_limit"] = float(self.time_limit)
        if self.mip_rel_gap is not None:
            options["mip_rel_gap"] = float(self.mip_rel_gap)
        return options


@dataclass
class _ConstraintRow:
    name: str
    expression: LinearExpression
    lower: float
    upper: float


@dataclass
class SolveRecord:
    """Summary of one solve call, kept in the session history."""

    status: TerminationStatus
    objective_value: float | None
    solve_time: float
    num_constraints: int
    message: str = ""


@dataclass(eq=False)
class MilpSession:
    """
    Binary MILP model that grows across repeated solves.

    Only binary variables are supported; that is all motor selection needs.
    Constraints are never removed: cuts added between solves stay for the
    life of the session.
    """

    options: OracleOptions = field(default_factory=OracleOptions)

    def __post_init__(self) -> None:
        self._variable_names: list[str] = []
        self._rows: list[_ConstraintRow] = []
        self._objective = LinearExpression()
        self._sense = ObjectiveSense.MINIMIZE
        self._status = TerminationStatus.NOT_SOLVED
        self._values: np.ndarray | None = None
        self._objective_value: float | None = None
        self.history: list[SolveRecord] = []

    # -- model building -----------------------------------------------------

    @property
    def num_variables(self) -> int:
        return len(self._variable_names)

    @property
    def num_constraints(self) -> int:
        return len(self._rows)

    def add_binary_variables(self, count: int, name: str) -> np.ndarray:
        """Declare ``count`` binary variables and return their indices."""
        if count < 1:
            raise ValueError(f"count must be positive, got {count}")
        start = len(self._variable_names)
        self._variable_names.extend(f"{name}[{i}]" for i in range(count))
        return np.arange(start, start + count)

    def add_constraint(
        self,
        expression: LinearExpression,
        lower: float = -np.inf,
        upper: float = np.inf,
        name: str = "",
    ) -> int:
        """Add ``lower <= expression <= upper`` and return its row number."""
        self._check_indices(expression)
        # The constant moves to the bounds side
        row = _ConstraintRow(
            name=name or f"c{len(self._rows)}",
            expression=LinearExpression(expression.terms),
            lower=float(lower) - expression.constant,
            upper=float(upper) - expression.constant,
        )
        self._rows.append(row)
        log.debug(f"Added constraint {row.name}: {row.lower} <= ({len(row.expression.terms)} terms) <= {row.upper}")
        return len(self._rows) - 1

    def add_exactly_one(self, indices: Iterable[int], name: str = "") -> int:
        """Require exactly one of the given binary variables to be 1."""
        indices = list(indices)
        return self.add_constraint(
            LinearExpression.weighted_sum(indices, [1.0] * len(indices)),
            lower=1.0,
            upper=1.0,
            name=name,
        )

    def set_objective(self, expression: LinearExpression, sense: ObjectiveSense) -> None:
        """Replace the objective."""
        self._check_indices(expression)
        self._objective = expression
        self._sense = sense

    @property
    def objective(self) -> LinearExpression:
        return self._objective

    @property
    def sense(self) -> ObjectiveSense:
        return self._sense

    def _check_indices(self, expression: LinearExpression) -> None:
        for index in expression.terms:
            if not 0 <= index < self.num_variables:
                raise IndexError(f"Variable index {index} out of range (0..{self.num_variables - 1})")

    # -- solving --------------------------------------------------------------

    def solve(self) -> TerminationStatus:
        """Solve the current model; blocks until HiGHS terminates."""
        n = self.num_variables
        if n == 0:
            raise RuntimeError("Cannot solve a model without variables")

        c = np.zeros(n)
        for index, coeff in self._objective.terms.items():
            c[index] = coeff
        if self._sense == ObjectiveSense.MAXIMIZE:
            c = -c

        constraints = []
        if self._rows:
            rows, cols, data = [], [], []
            for r, row in enumerate(self._rows):
                for index, coeff in row.expression.terms.items():
                    rows.append(r)
                    cols.append(index)
                    data.append(coeff)
            A = coo_matrix((data, (rows, cols)), shape=(len(self._rows), n)).tocsr()
            lb = np.array([row.lower for row in self._rows])
            ub = np.array([row.upper for row in self._rows])
            constraints.append(LinearConstraint(A, lb, ub))

        start = time.time()
        res = milp(
            c,
            integrality=np.ones(n),
            bounds=Bounds(np.zeros(n), np.ones(n)),
            constraints=constraints or None,
            options=self.options.to_scipy(),
        )
        elapsed = time.time() - start

        self._status = _SCIPY_STATUS.get(res.status, TerminationStatus.OTHER)
        if res.x is not None:
            self._values = np.round(np.asarray(res.x, dtype=float))
            self._objective_value = self._objective.evaluate(self._values)
        else:
            self._values = None
            self._objective_value = None

        record = SolveRecord(
            status=self._status,
            objective_value=self._objective_value,
            solve_time=elapsed,
            num_constraints=len(self._rows),
            message=str(getattr(res, "message", "")),
        )
        self.history.append(record)
        log.debug(
            f"Solve #{len(self.history)}: {self._status.value}, objective={self._objective_value}, "
            f"{len(self._rows)} constraints, {elapsed:.3f} s",
        )
        return self._status

    # -- results --------------------------------------------------------------

    @property
    def status(self) -> TerminationStatus:
        return self._status

    @property
    def has_values(self) -> bool:
        return self._values is not None

    def failed(self) -> bool:
        """Apply :func:`failed_to_optimize` to the most recent solve."""
        return failed_to_optimize(self._status, self.has_values)

    @property
    def objective_value(self) -> float:
        if self._objective_value is None:
            raise RuntimeError(f"No objective value available (status: {self._status.value})")
        return self._objective_value

    def value(self, indices: np.ndarray | list[int]) -> np.ndarray:
        """Solved values of the given variables."""
        if self._values is None:
            raise RuntimeError(f"No variable values available (status: {self._status.value})")
        return self._values[np.asarray(indices, dtype=int)]

    def evaluate(self, expression: LinearExpression) -> float:
        """Value of any expression at the most recent solution."""
        if self._values is None:
            raise RuntimeError(f"No variable values available (status: {self._status.value})")
        return expression.evaluate(self._values)
