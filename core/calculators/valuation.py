"""
Valuation-range calculators.

- Asking Price Positioning: where the ask sits against the valuation range.
- Adjusted Valuation Range: ages a stale valuation forward by a
  conservative house-price-index trend.
"""

import math
from datetime import date, datetime
from typing import Optional, Union

from utils.formatting import format_currency

from .base import CalculatorResult, make_result, percent_of, round_half_up
from .models import (
    AskingPricePosition,
    PricePosition,
    PricingPosture,
    ValuationInputs,
    ValuationRange,
)


# =============================================================================
# Asking Price Positioning
# =============================================================================

NO_ASKING_PRICE_SCORE = 65
WITHIN_RANGE_SCORE = 80
BELOW_RANGE_FLOOR = 60
ABOVE_RANGE_CEILING = 40
AGGRESSIVE_THRESHOLD_PERCENT = 15
VERY_OPTIMISTIC_THRESHOLD_PERCENT = 20


def calculate_asking_price_position(
    asking_price: Optional[float],
    valuation_low: float,
    valuation_high: float,
) -> CalculatorResult[AskingPricePosition]:
    """
    Position the asking price against the valuation range.

    Below the range scores at least 60, above it at most 40, within it 80.
    A missing or zero asking price takes the neutral path (65).
    """
    bullets = []

    if not asking_price:
        position = AskingPricePosition(
            position=PricePosition.WITHIN,
            percentage=0.0,
            posture=PricingPosture.BALANCED,
            gap=0,
            score=NO_ASKING_PRICE_SCORE,
        )
        bullets.append("No asking price provided")
        bullets.append("Score: 65 points (neutral, slightly positive)")

    elif asking_price < valuation_low:
        gap = valuation_low - asking_price
        percentage = percent_of(gap, valuation_low)
        score = max(BELOW_RANGE_FLOOR, 100 - percentage * 2)
        posture = (
            PricingPosture.AGGRESSIVE
            if percentage > AGGRESSIVE_THRESHOLD_PERCENT
            else PricingPosture.BALANCED
        )
        position = AskingPricePosition(PricePosition.BELOW, percentage, posture, gap, score)

        bullets.append(f"Asking price is {percentage:.1f}% below valuation range")
        if posture == PricingPosture.AGGRESSIVE:
            bullets.append("This is an aggressive pricing strategy")
        else:
            bullets.append("Pricing appears balanced and competitive")
        bullets.append(f"Score: {score:.0f} points (below range = higher score)")

    elif asking_price > valuation_high:
        gap = asking_price - valuation_high
        percentage = percent_of(gap, valuation_high)
        score = max(0, min(ABOVE_RANGE_CEILING, 100 - percentage))
        posture = (
            PricingPosture.VERY_OPTIMISTIC
            if percentage > VERY_OPTIMISTIC_THRESHOLD_PERCENT
            else PricingPosture.OPTIMISTIC
        )
        position = AskingPricePosition(PricePosition.ABOVE, percentage, posture, gap, score)

        bullets.append(f"Asking price is {percentage:.1f}% above valuation range")
        if posture == PricingPosture.VERY_OPTIMISTIC:
            bullets.append("This is a very optimistic pricing strategy")
        else:
            bullets.append("Pricing is optimistic but may be negotiable")
        bullets.append(f"Score: {score:.0f} points (above range = lower score)")

    else:
        position = AskingPricePosition(
            position=PricePosition.WITHIN,
            percentage=0.0,
            posture=PricingPosture.BALANCED,
            gap=0,
            score=WITHIN_RANGE_SCORE,
        )
        bullets.append("Asking price falls within the valuation range")
        bullets.append("Pricing appears fair and market-aligned")
        bullets.append("Score: 80 points (within range)")

    if position.gap > 0:
        bullets.append(f"Gap: {format_currency(position.gap)}")

    return make_result(
        "asking-price-positioning",
        "Asking Price Positioning",
        position,
        bullets,
        [
            "Valuation range based on comparable sales data",
            "Market conditions may affect actual sale price",
        ],
    )


# =============================================================================
# Adjusted Valuation Range (HPI)
# =============================================================================

STALE_SALE_MONTHS = 24
DAYS_PER_MONTH = 30
HPI_MONTHLY_RATE = 0.002
# Median sitting at low x 1.15 (within £1,000) suggests the range was built
# directly from the old sale rather than from current comparables.
DERIVED_MEDIAN_RATIO = 1.15
DERIVED_MEDIAN_TOLERANCE = 1000


def _as_date(value: Union[date, datetime, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip()[:10])


def months_since(sale_date: Union[date, datetime, str], reference_date: date) -> int:
    """Whole 30-day months between sale and reference date, rounded up."""
    days = abs((reference_date - _as_date(sale_date)).days)
    return math.ceil(days / DAYS_PER_MONTH)


def is_derived_from_sale(valuation_low: float, valuation_median: float) -> bool:
    """Heuristic: does the range look like it was built from the last sale alone?"""
    return abs(valuation_median - valuation_low * DERIVED_MEDIAN_RATIO) < DERIVED_MEDIAN_TOLERANCE


def calculate_adjusted_valuation(
    inputs: ValuationInputs,
    reference_date: Optional[date] = None,
) -> CalculatorResult[ValuationRange]:
    """
    Age a stale valuation range forward by a house-price-index trend.

    Upstream valuation usually applies its own index adjustment, so the
    range is only adjusted when the last sale is more than 24 months old
    AND the median looks derived from that sale. Only the months beyond
    the 24-month mark are compounded, at 0.2% per month.
    """
    reference_date = reference_date or date.today()

    low = inputs.valuation_low
    median = inputs.valuation_median
    high = inputs.valuation_high

    bullets = []
    assumptions = []
    multiplier = 1.0

    if inputs.last_sold_date:
        months = months_since(inputs.last_sold_date, reference_date)
        if months > STALE_SALE_MONTHS and is_derived_from_sale(low, median):
            excess_months = months - STALE_SALE_MONTHS
            multiplier = (1 + HPI_MONTHLY_RATE) ** excess_months
            bullets.append(
                f"Applied conservative HPI adjustment: +{(multiplier - 1) * 100:.1f}% "
                f"for {excess_months} month(s) beyond 2 years"
            )
            assumptions.append(
                "Using conservative UK House Price Index trend of 0.2% per month for very old data"
            )
        else:
            bullets.append("Valuation based on recent comparables - no additional adjustment needed")
            assumptions.append(
                "Valuation already accounts for market changes through comparable sales"
            )
    else:
        bullets.append("Valuation based on current market comparables")
        assumptions.append("No adjustment needed - using recent sales data")

    adjusted = ValuationRange(
        low=round_half_up(low * multiplier),
        median=round_half_up(median * multiplier),
        high=round_half_up(high * multiplier),
    )

    bullets.append(
        f"Adjusted range: {format_currency(adjusted.low)} - {format_currency(adjusted.high)}"
    )
    bullets.append(f"Median: {format_currency(adjusted.median)}")

    return make_result(
        "valuation-range-wrapper",
        "Adjusted Valuation Range",
        adjusted,
        bullets,
        assumptions,
    )
