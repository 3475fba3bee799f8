"""
Comparable-data quality scores.

- Data Coverage Score: how much, how recent and how consistent the
  comparable sales are.
- Valuation Confidence: how far to trust a valuation built on them.
"""

from typing import Final, Tuple

from .base import CalculatorResult, clamp, make_result, round_half_up
from .models import ComparableData


# =============================================================================
# Data Coverage Score
# =============================================================================

# (minimum count, points, label), highest band first
COUNT_BANDS: Final[Tuple[Tuple[int, int, str], ...]] = (
    (20, 40, "Excellent"),
    (10, 30, "Good"),
    (5, 20, "Moderate"),
    (2, 10, "Limited"),
)

RECENCY_MAX_POINTS = 30
RECENCY_HORIZON_DAYS = 365
VARIANCE_MAX_POINTS = 30
VARIANCE_HORIZON_PERCENT = 50


def _count_points(count: int) -> Tuple[int, str]:
    for minimum, points, label in COUNT_BANDS:
        if count >= minimum:
            return points, f"{label}: {count} comparable sales found"
    return 0, f"Very limited: Only {count} comparable sale(s) found"


def calculate_data_coverage_score(comparables: ComparableData) -> CalculatorResult[int]:
    """
    Score comparable-sales coverage on a 0-100 scale.

    Count contributes up to 40 points, recency up to 30 (linear to zero at
    a year old) and price variance up to 30 (linear to zero at 50%).
    """
    count = comparables.count
    recency = comparables.recency
    variance = comparables.variance

    bullets = []
    assumptions = []

    count_points, count_note = _count_points(count)
    bullets.append(count_note)

    recency_points = max(0.0, RECENCY_MAX_POINTS - (recency / RECENCY_HORIZON_DAYS) * RECENCY_MAX_POINTS)
    if recency <= 90:
        bullets.append(f"Recent data: Most recent sale was {recency:g} days ago")
    elif recency <= 180:
        bullets.append(f"Moderately recent: Most recent sale was {recency:g} days ago")
    else:
        bullets.append(f"Stale data: Most recent sale was {recency:g} days ago")

    variance_points = max(0.0, VARIANCE_MAX_POINTS - (variance / VARIANCE_HORIZON_PERCENT) * VARIANCE_MAX_POINTS)
    if variance <= 10:
        bullets.append(f"Low price variance ({variance:.1f}%): Consistent market")
    elif variance <= 25:
        bullets.append(f"Moderate price variance ({variance:.1f}%): Some market variation")
    else:
        bullets.append(f"High price variance ({variance:.1f}%): Inconsistent market")

    score = count_points + round_half_up(recency_points) + round_half_up(variance_points)
    score = int(clamp(score))

    if score < 40:
        assumptions.append("Limited data may affect accuracy of valuation")
    elif score < 70:
        assumptions.append("Moderate data quality: results should be treated as directional")
    else:
        assumptions.append("Good data coverage: results are reliable")

    return make_result(
        "data-coverage-score",
        "Data Coverage Score",
        score,
        bullets,
        assumptions,
    )


# =============================================================================
# Valuation Confidence
# =============================================================================

VALUATION_CONFIDENCE_BASE = 50
VALUATION_CONFIDENCE_FLOOR = 15
VALUATION_CONFIDENCE_CEILING = 100

# (minimum comparables, adjustment, label), highest band first
COMPARABLE_ADJUSTMENTS: Final[Tuple[Tuple[int, int, str], ...]] = (
    (20, 35, "Excellent"),
    (10, 25, "Good"),
    (5, 15, "Moderate"),
    (3, 5, "Limited"),
)
SPARSE_COMPARABLE_PENALTY = -5

ACTIVE_MARKET_SALES = 5
ACTIVE_MARKET_BONUS = 10
DORMANT_MARKET_PENALTY = 15


def calculate_valuation_confidence(
    comparable_count: int,
    sales_in_last_year: int,
) -> CalculatorResult[int]:
    """
    Score confidence in the valuation on a 15-100 scale.

    Starts at 50, adjusts by comparable-count band, then applies the
    recency adjustment to the running score. The floor of 15 holds
    regardless of the intermediate steps.
    """
    bullets = ["Base confidence: 50 points"]
    assumptions = []

    score = VALUATION_CONFIDENCE_BASE

    for minimum, adjustment, label in COMPARABLE_ADJUSTMENTS:
        if comparable_count >= minimum:
            score += adjustment
            bullets.append(f"{label}: {comparable_count} comparables (+{adjustment} points)")
            break
    else:
        score += SPARSE_COMPARABLE_PENALTY
        bullets.append(
            f"Very limited: {comparable_count} comparables ({SPARSE_COMPARABLE_PENALTY} points)"
        )

    # Recency adjustment is applied to the running score, not folded into the bands
    if sales_in_last_year >= ACTIVE_MARKET_SALES:
        score = min(score + ACTIVE_MARKET_BONUS, VALUATION_CONFIDENCE_CEILING)
        bullets.append(
            f"Recent activity: {sales_in_last_year} sales in last year (+10 points, capped at 100)"
        )
    elif sales_in_last_year == 0:
        score = max(score - DORMANT_MARKET_PENALTY, VALUATION_CONFIDENCE_FLOOR)
        bullets.append("No recent sales: 0 sales in last year (-15 points, minimum 15)")
    else:
        bullets.append(
            f"Some recent activity: {sales_in_last_year} sales in last year (no adjustment)"
        )

    score = int(clamp(score, VALUATION_CONFIDENCE_FLOOR, VALUATION_CONFIDENCE_CEILING))

    if score >= 70:
        assumptions.append("High confidence: Strong comparable data available")
    elif score >= 50:
        assumptions.append("Moderate confidence: Adequate comparable data")
    else:
        assumptions.append(
            "Low confidence: Limited comparable data - professional valuation recommended"
        )

    return make_result(
        "valuation-confidence",
        "Valuation Confidence",
        score,
        bullets,
        assumptions,
    )
