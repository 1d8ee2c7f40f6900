"""Selector configuration loaded from JSON or YAML."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from vitaminopt.config.parameter_manager import ParameterValidator
from vitaminopt.constants import (
    DECODE_ABS_TOL,
    DECODE_REL_TOL,
    DEFAULT_RATIO_COUNT,
    DEFAULT_RATIO_START,
    DEFAULT_RATIO_STEP,
    LIMB_CONFIGURATIONS,
    OBJECTIVE_ABS_TOL,
    OBJECTIVE_REL_TOL,
)
from vitaminopt.logging import get_logger
from vitaminopt.optimization.oracle import OracleOptions
from vitaminopt.physics.motor import make_gear_ratios

log = get_logger(__name__)


@dataclass
class SelectorConfig:
    """Settings for one selection run."""

    # Gear ratio generation
    ratio_start: float = DEFAULT_RATIO_START
    ratio_step: float = DEFAULT_RATIO_STEP
    ratio_count: int = DEFAULT_RATIO_COUNT
    include_reciprocals: bool = True

    # Oracle
    time_limit: float | None = None
    mip_rel_gap: float | None = None
    presolve: bool = True
    solver_output: bool = False

    # Model
    configurations: tuple[str, ...] = ("min",)

    # Tolerances
    decode_rel_tol: float = DECODE_REL_TOL.value
    decode_abs_tol: float = DECODE_ABS_TOL.value
    objective_rel_tol: float = OBJECTIVE_REL_TOL.value
    objective_abs_tol: float = OBJECTIVE_ABS_TOL.value

    # Frontier
    max_pareto_solutions: int | None = None

    def __post_init__(self) -> None:
        self.configurations = tuple(self.configurations)
        if not self.validate():
            raise ValueError("Invalid selector configuration; see log for details")

    def validate(self) -> bool:
        v = ParameterValidator
        checks = [
            v.validate_positive_float(self.ratio_start, "ratio_start"),
            v.validate_non_negative_float(self.ratio_step, "ratio_step"),
            v.validate_positive_int(self.ratio_count, "ratio_count"),
            v.validate_choices(self.configurations, "configurations", LIMB_CONFIGURATIONS),
            v.validate_non_negative_float(self.decode_rel_tol, "decode_rel_tol"),
            v.validate_non_negative_float(self.decode_abs_tol, "decode_abs_tol"),
            v.validate_non_negative_float(self.objective_rel_tol, "objective_rel_tol"),
            v.validate_non_negative_float(self.objective_abs_tol, "objective_abs_tol"),
        ]
        if self.time_limit is not None:
            checks.append(v.validate_positive_float(self.time_limit, "time_limit"))
        if self.mip_rel_gap is not None:
            checks.append(v.validate_non_negative_float(self.mip_rel_gap, "mip_rel_gap"))
        if self.max_pareto_solutions is not None:
            checks.append(v.validate_positive_int(self.max_pareto_solutions, "max_pareto_solutions"))
        return all(checks)

    def gear_ratios(self) -> tuple[float, ...]:
        return make_gear_ratios(
            start=self.ratio_start,
            step=self.ratio_step,
            count=self.ratio_count,
            include_reciprocals=self.include_reciprocals,
        )

    def oracle_options(self) -> OracleOptions:
        return OracleOptions(
            time_limit=self.time_limit,
            mip_rel_gap=self.mip_rel_gap,
            presolve=self.presolve,
            disp=self.solver_output,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> SelectorConfig:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {unknown}")
        return cls(**dict(data))

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["configurations"] = list(self.configurations)
        return d


def load_config(path: str | Path) -> SelectorConfig:
    """Read a SelectorConfig from a JSON or YAML file."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".yml", ".yaml"}:
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path} must hold a mapping")
    log.info(f"Loaded selector configuration from {path}")
    return SelectorConfig.from_mapping(data)
