"""VitaminOpt: cost-optimal motor and gear-ratio selection for robotic limbs."""
from __future__ import annotations

from vitaminopt.logging import get_logger

__version__ = "0.1.0"

log = get_logger(__name__)
