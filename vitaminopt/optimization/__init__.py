"""
Motor selection optimization library.

Leaf modules (feature encoding, oracle, decoding, results) are exported here.
The solve stages live in ``selector``, ``pareto`` and ``secondary`` and are
imported from those modules directly.
"""

from __future__ import annotations

from .decoder import decode_column, find_motor_index, find_optimal_motors, optimal_indices
from .errors import DecodeError, InfeasibleSelectionError, SelectionError
from .feature_matrix import FeatureMatrix, FeatureRow, build_feature_matrix, feature_column
from .oracle import (
    LinearExpression,
    MilpSession,
    ObjectiveSense,
    OracleOptions,
    TerminationStatus,
    failed_to_optimize,
)
from .solution import ParetoSet, SlotSelection, Solution, objectives_match

__all__ = [
    "DecodeError",
    "FeatureMatrix",
    "FeatureRow",
    "InfeasibleSelectionError",
    "LinearExpression",
    "MilpSession",
    "ObjectiveSense",
    "OracleOptions",
    "ParetoSet",
    "SelectionError",
    "SlotSelection",
    "Solution",
    "TerminationStatus",
    "build_feature_matrix",
    "decode_column",
    "failed_to_optimize",
    "feature_column",
    "find_motor_index",
    "find_optimal_motors",
    "objectives_match",
    "optimal_indices",
]
