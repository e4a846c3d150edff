"""
Tests for severity classification and the significance filter.
"""

import pytest

from kubegreen.waste import Severity, classify_severity, is_significant


class TestClassifySeverity:
    """Tests for classify_severity."""

    @pytest.mark.parametrize(
        "cost, expected",
        [
            (0.0, Severity.OPTIMIZED),
            (0.99, Severity.OPTIMIZED),
            (1.0, Severity.OPTIMIZED),
            (1.0001, Severity.WASTE),
            (2.2995, Severity.WASTE),
            (5.0, Severity.WASTE),
            (5.0001, Severity.HIGH_WASTE),
            (1000.0, Severity.HIGH_WASTE),
        ],
    )
    def test_tiers(self, cost, expected):
        assert classify_severity(cost) == expected

    def test_custom_thresholds(self):
        assert classify_severity(3.0, waste_threshold=2.0, high_waste_threshold=2.5) == Severity.HIGH_WASTE
        assert classify_severity(2.0, waste_threshold=2.0, high_waste_threshold=2.5) == Severity.OPTIMIZED


class TestIsSignificant:
    """Tests for is_significant."""

    def test_cost_above_threshold(self):
        assert is_significant(0.11, 0, 0) is True

    def test_cost_at_threshold_without_requests(self):
        assert is_significant(0.1, 0, 0) is False

    def test_requests_make_record_significant(self):
        assert is_significant(0.0, 500, 0) is True
        assert is_significant(0.0, 0, 1024) is True
