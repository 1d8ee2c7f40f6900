"""Readers for motor catalogs and limb constraint files."""

from .catalog import load_problem, parse_constraints, parse_motor_options

__all__ = ["load_problem", "parse_constraints", "parse_motor_options"]
