"""
Tests for Data Coverage Score and Valuation Confidence
"""

import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.calculators import (
    ComparableData,
    calculate_data_coverage_score,
    calculate_valuation_confidence,
)


# =============================================================================
# Data Coverage Score
# =============================================================================

class TestDataCoverageScore:

    def test_perfect_coverage(self):
        result = calculate_data_coverage_score(ComparableData(count=20, recency=0, variance=0))

        assert result.id == "data-coverage-score"
        assert result.value == 100

    def test_band_boundary_takes_higher_band(self):
        at_boundary = calculate_data_coverage_score(ComparableData(count=20, recency=0, variance=0))
        below_boundary = calculate_data_coverage_score(ComparableData(count=19, recency=0, variance=0))

        assert at_boundary.value == 100
        assert below_boundary.value == 90

    @pytest.mark.parametrize("count,points", [
        (20, 40), (10, 30), (9, 20), (5, 20), (4, 10), (2, 10), (1, 0), (0, 0),
    ])
    def test_count_bands(self, count, points):
        # Stale, inconsistent data isolates the count component
        result = calculate_data_coverage_score(ComparableData(count=count, recency=365, variance=50))
        assert result.value == points

    def test_half_year_recency_and_mid_variance(self):
        result = calculate_data_coverage_score(ComparableData(count=5, recency=182.5, variance=25))
        assert result.value == 20 + 15 + 15

    def test_components_floor_at_zero(self):
        result = calculate_data_coverage_score(ComparableData(count=0, recency=1000, variance=400))
        assert result.value == 0

    def test_limited_data_assumption(self):
        result = calculate_data_coverage_score(ComparableData(count=1, recency=300, variance=40))
        assert result.explanation.assumptions == ("Limited data may affect accuracy of valuation",)


# =============================================================================
# Valuation Confidence
# =============================================================================

class TestValuationConfidence:

    @pytest.mark.parametrize("count,sales,expected", [
        (20, 5, 95),
        (10, 2, 75),
        (5, 5, 75),
        (3, 1, 55),
        (4, 0, 40),
        (0, 0, 30),
        (2, 3, 45),
    ])
    def test_scores(self, count, sales, expected):
        result = calculate_valuation_confidence(count, sales)

        assert result.id == "valuation-confidence"
        assert result.value == expected

    def test_floor_and_ceiling(self):
        for count in range(0, 40, 3):
            for sales in (0, 1, 5, 50):
                value = calculate_valuation_confidence(count, sales).value
                assert 15 <= value <= 100

    def test_low_confidence_recommends_valuation(self):
        result = calculate_valuation_confidence(0, 0)
        assert "professional valuation recommended" in result.explanation.assumptions[0]
