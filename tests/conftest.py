"""
Pytest configuration for the VitaminOpt test suite.

Shared catalogs and limbs are small enough that every test runs real HiGHS
solves in milliseconds.
"""

import pytest

from vitaminopt.physics.limb import Limb, Link
from vitaminopt.physics.motor import Motor

RATIOS = (1.0, 2.0)


def make_limb(name="TestLimb", tip_force=0.1, tip_velocity=0.1, min_r=(0.1, 0.1, 0.1), max_r=None):
    max_r = max_r or min_r
    return Limb(
        name=name,
        tip_force=tip_force,
        tip_velocity=tip_velocity,
        min_links=tuple(Link(r=r) for r in min_r),
        max_links=tuple(Link(r=r) for r in max_r),
    )


@pytest.fixture
def cheap_motor():
    return Motor(name="A", stall_torque=1.0, free_speed=10.0, price=5.0, mass=0.1)


@pytest.fixture
def strong_motor():
    return Motor(name="B", stall_torque=4.0, free_speed=20.0, price=9.0, mass=0.2)


@pytest.fixture
def motors(cheap_motor, strong_motor):
    return [cheap_motor, strong_motor]


@pytest.fixture
def ratios():
    return RATIOS


@pytest.fixture
def loose_limb():
    """Every motor at every ratio satisfies every slot."""
    return make_limb()


@pytest.fixture
def heavy_limb():
    """Slot 1 needs the strong motor, slot 2 needs the cheap motor at ratio 2."""
    return make_limb(name="HeavyLimb", tip_force=7.0)


@pytest.fixture
def infeasible_limb():
    return make_limb(name="ImpossibleLimb", tip_force=1000.0)


@pytest.fixture
def nema14():
    return Motor(
        name="stepperMotor-GenericNEMA14",
        stall_torque=0.098,
        free_speed=139.626,
        price=12.95,
        mass=0.12,
    )


@pytest.fixture
def limb_factory():
    return make_limb
