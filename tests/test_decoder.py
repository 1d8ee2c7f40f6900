"""
Unit tests for decoding feature columns back to catalog motors.
"""

import numpy as np
import pytest

from vitaminopt.optimization.decoder import decode_column, find_motor_index
from vitaminopt.optimization.errors import DecodeError
from vitaminopt.optimization.feature_matrix import FeatureRow, build_feature_matrix, feature_column
from vitaminopt.physics.motor import Motor, make_gear_ratios

CATALOG = [
    Motor("stepperMotor-GenericNEMA14", 0.098, 139.626, 12.95, 0.12),
    Motor("stepperMotor-GenericNEMA17", 0.4, 104.72, 14.0, 0.28),
    Motor("hobbyServo-MG92B", 0.343, 10.47, 9.95, 0.0138),
    Motor("roundMotor-WPI-gb37y3530-50en", 1.765, 19.9, 29.95, 0.2),
]


class TestRoundTrip:
    """Decoding a column built from (M, R) recovers M."""

    def test_every_motor_every_ratio(self):
        """Round trip over the default ratio set."""
        ratios = make_gear_ratios()
        fm = build_feature_matrix(CATALOG, ratios)
        for m, motor in enumerate(CATALOG):
            for r, ratio in enumerate(ratios):
                decoded, decoded_ratio = decode_column(fm.column(fm.column_index(m, r)), CATALOG)
                assert decoded is motor
                assert decoded_ratio == ratio

    def test_awkward_ratios(self):
        """Ratios that do not invert exactly still decode."""
        for ratio in (0.021, 0.048, 0.077, 1 / 3, 1 / 7, 17.0):
            for motor in CATALOG:
                assert decode_column(feature_column(motor, ratio), CATALOG)[0] is motor


class TestMatching:
    """Tests for the matching rule."""

    def test_same_price_and_mass_distinguished_by_torque(self):
        """Torque breaks ties between motors with equal price and mass."""
        twins = [Motor("weak", 0.1, 10.0, 5.0, 0.1), Motor("strong", 0.2, 10.0, 5.0, 0.1)]
        assert find_motor_index(feature_column(twins[1], 3.0), twins) == 1

    def test_price_must_match_exactly(self):
        """A different price never matches."""
        col = feature_column(CATALOG[0], 2.0).copy()
        col[FeatureRow.PRICE] += 1e-12
        assert find_motor_index(col, CATALOG) is None

    def test_tolerance_is_respected(self):
        """A torque error beyond the tolerance does not match; a looser tolerance does."""
        col = feature_column(CATALOG[1], 2.0).copy()
        col[FeatureRow.TORQUE] *= 1 + 1e-6
        assert find_motor_index(col, CATALOG) is None
        assert find_motor_index(col, CATALOG, rel_tol=1e-5) == 1

    def test_unknown_column_raises(self):
        """A column from outside the catalog is a decode error."""
        col = feature_column(Motor("ghost", 1.0, 1.0, 1.0, 1.0), 1.0)
        with pytest.raises(DecodeError) as excinfo:
            decode_column(col, CATALOG)
        assert excinfo.value.context["rel_tol"] > 0
        assert np.allclose(excinfo.value.context["column"], col)
