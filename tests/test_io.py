"""
Tests for the catalog and constraint readers.
"""

import json

import pytest

from vitaminopt.config.settings import SelectorConfig
from vitaminopt.io.catalog import load_problem, parse_constraints, parse_motor_options

MOTOR_OPTIONS = {
    "stepperMotor": {
        "GenericNEMA14": {
            "MaxTorqueNewtonmeters": 0.098,
            "MaxFreeSpeedRadPerSec": 139.626,
            "price": 12.95,
            "massKg": 0.12,
            "source": "https://www.example.com/nema14",
        },
        "GenericNEMA17": {
            "MaxTorqueNewtonmeters": 0.4,
            "MaxFreeSpeedRadPerSec": 104.72,
            "price": 14.0,
            "massKg": 0.28,
        },
    },
    "hobbyServo": {
        "MG92B": {
            "MaxTorqueNewtonmeters": 0.343,
            "MaxFreeSpeedRadPerSec": 10.47,
            "price": 9.95,
            "massKg": 0.0138,
        },
    },
}


def _links(*radii):
    return [{"dhParam": {"d": 0.0, "theta": 0.0, "r": r, "alpha": 0.0}} for r in radii]


CONSTRAINTS = {
    "HephaestusArmLimbOne": {
        "tipForce": 0.5,
        "tipVelocity": 0.2,
        "minLinks": _links(0.1, 0.15, 0.05),
        "maxLinks": _links(0.2, 0.25, 0.1),
    },
}


@pytest.fixture
def motor_file(tmp_path):
    path = tmp_path / "motorOptions.json"
    path.write_text(json.dumps(MOTOR_OPTIONS), encoding="utf-8")
    return path


@pytest.fixture
def constraints_file(tmp_path):
    path = tmp_path / "constraints1.json"
    path.write_text(json.dumps(CONSTRAINTS), encoding="utf-8")
    return path


class TestMotorOptions:
    """Tests for parse_motor_options."""

    def test_names_and_order(self, motor_file):
        """Motor ids join type and size in file order."""
        motors = parse_motor_options(motor_file)
        assert [m.name for m in motors] == [
            "stepperMotor-GenericNEMA14",
            "stepperMotor-GenericNEMA17",
            "hobbyServo-MG92B",
        ]

    def test_fields(self, motor_file):
        motor = parse_motor_options(motor_file)[0]
        assert motor.stall_torque == 0.098
        assert motor.free_speed == 139.626
        assert motor.price == 12.95
        assert motor.mass == 0.12

    def test_yaml(self, tmp_path):
        path = tmp_path / "motors.yaml"
        path.write_text(
            "servo:\n  S1:\n    MaxTorqueNewtonmeters: 1\n    MaxFreeSpeedRadPerSec: 2\n    price: 3\n    massKg: 4\n",
            encoding="utf-8",
        )
        (motor,) = parse_motor_options(path)
        assert motor.name == "servo-S1"
        assert motor.mass == 4.0

    def test_missing_field(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text(json.dumps({"servo": {"S1": {"price": 1.0}}}), encoding="utf-8")
        with pytest.raises(ValueError, match="missing field"):
            parse_motor_options(path)


class TestConstraints:
    """Tests for parse_constraints."""

    def test_limb_fields(self, constraints_file):
        (limb,) = parse_constraints(constraints_file, ["HephaestusArmLimbOne"])
        assert limb.tip_force == 0.5
        assert limb.tip_velocity == 0.2
        assert limb.radii("min") == [0.1, 0.15, 0.05]
        assert limb.radii("max") == [0.2, 0.25, 0.1]

    def test_missing_limb(self, constraints_file):
        with pytest.raises(KeyError):
            parse_constraints(constraints_file, ["NoSuchLimb"])

    def test_load_problem(self, constraints_file, motor_file):
        """The ratio set comes from the selector configuration."""
        config = SelectorConfig(ratio_start=1.0, ratio_step=1.0, ratio_count=2, include_reciprocals=False)
        limb, motors, ratios = load_problem(constraints_file, "HephaestusArmLimbOne", motor_file, config)
        assert limb.name == "HephaestusArmLimbOne"
        assert len(motors) == 3
        assert ratios == (1.0, 2.0)

    def test_load_problem_default_ratios(self, constraints_file, motor_file):
        _, _, ratios = load_problem(constraints_file, "HephaestusArmLimbOne", motor_file)
        assert len(ratios) == 59
