"""
Limb kinematics and the per-link torque and speed requirements they imply.

Links are indexed from the shoulder (index 0) to the tip (index 2). The motor
driving link ``i`` has to hold the tip force acting over every link from ``i``
out to the tip, plus the weight of every motor mounted further out. The motor
at link ``j`` sits at the end of link ``j - 1``, so its weight acts over the
links ``i .. j - 1``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from vitaminopt.constants import GRAVITY, LIMB_CONFIGURATIONS, NUM_SLOTS


@dataclass(frozen=True)
class Link:
    """One limb segment, reduced to the DH radial length ``r`` (m)."""

    r: float
    d: float = 0.0
    theta: float = 0.0
    alpha: float = 0.0


@dataclass(frozen=True)
class Limb:
    """Kinematic and load description of a three-link limb.

    ``min_links`` and ``max_links`` hold the links at the limb's minimum and
    maximum configuration.
    """

    name: str
    tip_force: float
    tip_velocity: float
    min_links: tuple[Link, ...]
    max_links: tuple[Link, ...]

    def __post_init__(self) -> None:
        for label in LIMB_CONFIGURATIONS:
            links = self.links(label)
            if len(links) != NUM_SLOTS:
                raise ValueError(
                    f"Limb {self.name} needs {NUM_SLOTS} {label} links, got {len(links)}",
                )
            for i, link in enumerate(links):
                if not link.r > 0:
                    raise ValueError(
                        f"Limb {self.name} {label} link {i + 1} must have positive r, got {link.r}",
                    )

    def links(self, configuration: str) -> tuple[Link, ...]:
        """Return the links for ``"min"`` or ``"max"``."""
        if configuration == "min":
            return tuple(self.min_links)
        if configuration == "max":
            return tuple(self.max_links)
        raise ValueError(f"configuration must be one of {LIMB_CONFIGURATIONS}, got {configuration!r}")

    def radii(self, configuration: str = "min") -> list[float]:
        return [link.r for link in self.links(configuration)]


def lever_arm(radii: Sequence[float], i: int) -> float:
    """Distance from joint ``i`` to the tip."""
    return float(sum(radii[i:]))


def mass_lever_arm(radii: Sequence[float], i: int, j: int) -> float:
    """Distance from joint ``i`` to the motor mounted at joint ``j`` (``j > i``)."""
    return float(sum(radii[i:j]))


def required_torques(
    limb: Limb, motor_masses: Sequence[float], configuration: str = "min",
) -> list[float]:
    """
    Torque each joint must supply for concrete motor masses.

    Args:
        limb: Limb description
        motor_masses: Mass of the motor at each joint, shoulder first
        configuration: ``"min"`` or ``"max"`` link set

    Returns:
        Required torque per joint (N*m)
    """
    radii = limb.radii(configuration)
    torques = []
    for i in range(NUM_SLOTS):
        tau = limb.tip_force * lever_arm(radii, i)
        for j in range(i + 1, NUM_SLOTS):
            tau += GRAVITY * motor_masses[j] * mass_lever_arm(radii, i, j)
        torques.append(tau)
    return torques


def required_speeds(limb: Limb, configuration: str = "min") -> list[float]:
    """Angular speed each joint must reach to move the tip at ``tip_velocity``."""
    radii = limb.radii(configuration)
    return [limb.tip_velocity / lever_arm(radii, i) for i in range(NUM_SLOTS)]
