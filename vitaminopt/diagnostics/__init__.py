"""Pre-solve diagnostics for selection problems."""

from .feasibility import FeasibilityReport, check_feasibility

__all__ = ["FeasibilityReport", "check_feasibility"]
