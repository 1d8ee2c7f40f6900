"""
Motor catalog and limb constraint readers.

Motor options file (JSON or YAML), one entry per motor type and size::

    {
      "stepperMotor": {
        "GenericNEMA14": {
          "MaxTorqueNewtonmeters": 0.098,
          "MaxFreeSpeedRadPerSec": 139.626,
          "price": 12.95,
          "massKg": 0.12
        }
      }
    }

Constraints file, one entry per limb, links shoulder first::

    {
      "HephaestusArmLimbOne": {
        "tipForce": 1.0,
        "tipVelocity": 0.1,
        "minLinks": [{"dhParam": {"d": 0, "theta": 0, "r": 0.1, "alpha": 0}}, ...],
        "maxLinks": [...]
      }
    }
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from vitaminopt.config.settings import SelectorConfig
from vitaminopt.logging import get_logger
from vitaminopt.physics.limb import Limb, Link
from vitaminopt.physics.motor import Motor

log = get_logger(__name__)

_MOTOR_FIELDS = {
    "stall_torque": "MaxTorqueNewtonmeters",
    "free_speed": "MaxFreeSpeedRadPerSec",
    "price": "price",
    "mass": "massKg",
}


def _load_document(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".yml", ".yaml"}:
        return yaml.safe_load(text)
    return json.loads(text)


def parse_motor_options(path: str | Path) -> list[Motor]:
    """Read the motor catalog; order follows the file."""
    path = Path(path)
    data = _load_document(path)
    if not isinstance(data, dict):
        raise ValueError(f"Motor options file {path} must hold a mapping of motor types")

    motors = []
    for motor_type, sizes in data.items():
        if not isinstance(sizes, dict):
            raise ValueError(f"Motor type {motor_type} must map sizes to motor data")
        for size, entry in sizes.items():
            try:
                values = {name: float(entry[key]) for name, key in _MOTOR_FIELDS.items()}
            except KeyError as exc:
                raise ValueError(f"Motor {motor_type}-{size} is missing field {exc.args[0]}") from exc
            motors.append(Motor(name=f"{motor_type}-{size}", **values))

    log.info(f"Loaded {len(motors)} motors from {path}")
    return motors


def _parse_link(raw: dict[str, Any]) -> Link:
    dh = raw.get("dhParam", raw)
    return Link(
        r=float(dh["r"]),
        d=float(dh.get("d", 0.0)),
        theta=float(dh.get("theta", 0.0)),
        alpha=float(dh.get("alpha", 0.0)),
    )


def _parse_limb(name: str, raw: dict[str, Any]) -> Limb:
    try:
        return Limb(
            name=name,
            tip_force=float(raw["tipForce"]),
            tip_velocity=float(raw["tipVelocity"]),
            min_links=tuple(_parse_link(link) for link in raw["minLinks"]),
            max_links=tuple(_parse_link(link) for link in raw["maxLinks"]),
        )
    except KeyError as exc:
        raise ValueError(f"Limb {name} is missing field {exc.args[0]}") from exc


def parse_constraints(path: str | Path, limb_names: Iterable[str]) -> list[Limb]:
    """Read the named limbs from a constraints file, in the order requested."""
    path = Path(path)
    data = _load_document(path)
    if not isinstance(data, dict):
        raise ValueError(f"Constraints file {path} must hold a mapping of limbs")

    limbs = []
    for name in limb_names:
        if name not in data:
            raise KeyError(f"Limb {name!r} not found in {path}")
        limbs.append(_parse_limb(name, data[name]))
    return limbs


def load_problem(
    constraints_file: str | Path,
    limb_name: str,
    motor_options_file: str | Path,
    config: SelectorConfig | None = None,
) -> tuple[Limb, list[Motor], tuple[float, ...]]:
    """Load one limb and the motor catalog, paired with the ratio set from ``config``."""
    config = config or SelectorConfig()
    limb = parse_constraints(constraints_file, [limb_name])[0]
    motors = parse_motor_options(motor_options_file)
    return limb, motors, config.gear_ratios()
