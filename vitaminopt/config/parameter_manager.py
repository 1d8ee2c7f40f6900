"""
Parameter validation utilities.

Validators log the reason a value was rejected and return a bool, so callers
can decide whether a bad value is fatal.
"""

from typing import Any, List

from vitaminopt.logging import get_logger

log = get_logger(__name__)


class ParameterValidator:
    """Validator for configuration parameters."""

    @staticmethod
    def validate_positive_float(value: Any, name: str) -> bool:
        """Validate that a value is a positive float."""
        try:
            float_val = float(value)
            if float_val <= 0:
                log.error(f"{name} must be positive, got {float_val}")
                return False
            return True
        except (ValueError, TypeError):
            log.error(f"{name} must be a number, got {type(value)}")
            return False

    @staticmethod
    def validate_non_negative_float(value: Any, name: str) -> bool:
        """Validate that a value is a float no smaller than zero."""
        try:
            float_val = float(value)
            if float_val < 0:
                log.error(f"{name} must be non-negative, got {float_val}")
                return False
            return True
        except (ValueError, TypeError):
            log.error(f"{name} must be a number, got {type(value)}")
            return False

    @staticmethod
    def validate_positive_int(value: Any, name: str) -> bool:
        """Validate that a value is a positive integer."""
        if isinstance(value, bool) or not isinstance(value, int):
            log.error(f"{name} must be an integer, got {type(value)}")
            return False
        if value < 1:
            log.error(f"{name} must be positive, got {value}")
            return False
        return True

    @staticmethod
    def validate_choices(values: Any, name: str, choices: List[str]) -> bool:
        """Validate that every value is one of the allowed choices."""
        if isinstance(values, str) or not values:
            log.error(f"{name} must be a non-empty list drawn from {choices}, got {values!r}")
            return False
        bad = [v for v in values if v not in choices]
        if bad:
            log.error(f"{name} must be drawn from {choices}, got {bad}")
            return False
        return True
