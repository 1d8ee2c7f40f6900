"""Motor catalog records and gear-ratio sets."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from vitaminopt.constants import (
    DEFAULT_RATIO_COUNT,
    DEFAULT_RATIO_START,
    DEFAULT_RATIO_STEP,
)


@dataclass(frozen=True)
class Motor:
    """Immutable catalog entry for a motor.

    Attributes:
        name: Catalog identifier, e.g. ``"stepperMotor-GenericNEMA14"``
        stall_torque: Torque at zero speed (N*m)
        free_speed: Angular speed at zero load (rad/s)
        price: Unit price
        mass: Mass (kg)
    """

    name: str
    stall_torque: float
    free_speed: float
    price: float
    mass: float

    def __str__(self) -> str:
        return (
            f"Motor({self.name!r}, tau_stall={self.stall_torque}, "
            f"omega_free={self.free_speed}, price={self.price}, mass={self.mass})"
        )


def make_gear_ratios(
    start: float = DEFAULT_RATIO_START,
    step: float = DEFAULT_RATIO_STEP,
    count: int = DEFAULT_RATIO_COUNT,
    include_reciprocals: bool = True,
) -> tuple[float, ...]:
    """
    Generate the candidate gear-ratio set.

    Ratios are ``start + k * step`` for ``k < count``; with
    ``include_reciprocals`` each ratio's inverse is a candidate too, since a
    reduction can be mounted either way round. The result is ascending and
    free of duplicates, so its order is stable across runs.

    Args:
        start: First ratio (must be positive)
        step: Increment between ratios (must be non-negative)
        count: Number of ratios before adding reciprocals
        include_reciprocals: Whether to add ``1 / ratio`` for every ratio

    Returns:
        Sorted tuple of unique positive ratios
    """
    if start <= 0:
        raise ValueError(f"start must be positive, got {start}")
    if step < 0:
        raise ValueError(f"step must be non-negative, got {step}")
    if count < 1:
        raise ValueError(f"count must be at least 1, got {count}")

    ratios = [start + k * step for k in range(count)]
    if include_reciprocals:
        ratios += [1.0 / r for r in ratios]
    return tuple(sorted(set(float(r) for r in ratios)))


def validate_gear_ratios(gear_ratios: Iterable[float]) -> tuple[float, ...]:
    """Return the ratios as a tuple, preserving order, after checking they are usable."""
    ratios = tuple(float(r) for r in gear_ratios)
    if not ratios:
        raise ValueError("At least one gear ratio is required")
    bad = [r for r in ratios if not r > 0]
    if bad:
        raise ValueError(f"Gear ratios must be positive, got {bad}")
    if len(set(ratios)) != len(ratios):
        raise ValueError("Gear ratios must be unique")
    return ratios


def validate_motors(motors: Sequence[Motor]) -> None:
    """Check a motor list before it is encoded into a feature matrix."""
    if not motors:
        raise ValueError("At least one motor is required")
    for motor in motors:
        if motor.stall_torque < 0 or motor.free_speed < 0:
            raise ValueError(f"Motor {motor.name} has negative torque or speed")
