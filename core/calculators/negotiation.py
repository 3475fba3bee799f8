"""
Negotiation calculators.

- Negotiation Leverage Index: buyer strength against a motivated seller.
- Offer Recommendation: anchor / target / walk-away figures.
- Negotiation Headroom: counter-offer ladder between asking and target.
"""

from types import MappingProxyType
from typing import Final, Mapping, Optional, Tuple

from utils.formatting import format_currency

from .base import CalculatorResult, clamp, make_result, percent_of, round_half_up
from .models import (
    BUYER_STATUS_BONUS_RATES,
    RISK_APPETITE_MULTIPLIERS,
    BuyerStatus,
    LeverageFactors,
    NegotiationHeadroom,
    NegotiationStep,
    OfferRecommendation,
    RiskAppetite,
)


# =============================================================================
# Negotiation Leverage Index
# =============================================================================

# (minimum days, points, strength), highest band first
DAYS_ON_MARKET_BANDS: Final[Tuple[Tuple[int, int, str], ...]] = (
    (180, 40, "strong"),
    (90, 30, "good"),
    (30, 20, "moderate"),
)
NEW_LISTING_POINTS = 10

# (minimum drops, points), highest band first
PRICE_DROP_BANDS: Final[Tuple[Tuple[int, int], ...]] = (
    (3, 30),
    (2, 20),
    (1, 10),
)

READY_AND_CHAIN_FREE_POINTS = 20
READY_ONLY_POINTS = 10
MARKET_CONDITIONS_POINTS = 10

BUYER_STATUS_NOTES: Final[Mapping[BuyerStatus, str]] = MappingProxyType({
    BuyerStatus.FIRST_TIME: "First-Time Buyer bonus: +{bonus} points (no chain, quick completion)",
    BuyerStatus.CASH: "Cash Buyer bonus: +{bonus} points (no mortgage delays, strong position)",
    BuyerStatus.CHAIN_FREE: "Chain-Free bonus: +{bonus} points (ready to proceed)",
    BuyerStatus.SUBJECT_TO_SALE: "Subject to Sale: No bonus (dependent on own sale)",
})


def _days_on_market_points(days: int) -> Tuple[int, str]:
    for minimum, points, strength in DAYS_ON_MARKET_BANDS:
        if days >= minimum:
            return points, f"Property on market {days} days - {strength} leverage"
    return NEW_LISTING_POINTS, f"Property on market {days} days - limited leverage"


def _price_drop_points(drops: int) -> int:
    for minimum, points in PRICE_DROP_BANDS:
        if drops >= minimum:
            return points
    return 0


def buyer_status_bonus(running_total: float, status: Optional[BuyerStatus]) -> int:
    """
    Bonus points for the buyer's chain position.

    A percentage of the total accumulated so far, so it must be applied
    after every other component.
    """
    if status is None:
        return 0
    return round_half_up(running_total * BUYER_STATUS_BONUS_RATES[status])


def calculate_negotiation_leverage(factors: LeverageFactors) -> CalculatorResult[int]:
    """Score buyer negotiating leverage on a 0-100 scale (higher is stronger)."""
    bullets = []

    days_points, days_note = _days_on_market_points(factors.days_on_market)
    score = days_points
    bullets.append(days_note)

    drops = factors.price_drops
    score += _price_drop_points(drops)
    if drops >= 3:
        bullets.append(f"{drops} price reductions - very strong leverage")
    elif drops >= 2:
        bullets.append(f"{drops} price reductions - good leverage")
    elif drops >= 1:
        bullets.append(f"{drops} price reduction - some leverage")
    else:
        bullets.append("No price reductions - limited leverage")

    if factors.buyer_ready and factors.chain_free:
        score += READY_AND_CHAIN_FREE_POINTS
        bullets.append("Chain-free and ready to proceed - strong position")
    elif factors.buyer_ready:
        score += READY_ONLY_POINTS
        bullets.append("Ready to proceed - moderate position")
    else:
        bullets.append("Not yet ready - weaker position")

    score += MARKET_CONDITIONS_POINTS
    bullets.append("Current market conditions favour buyers")

    if factors.buyer_status is not None:
        bonus = buyer_status_bonus(score, factors.buyer_status)
        score += bonus
        bullets.append(BUYER_STATUS_NOTES[factors.buyer_status].format(bonus=bonus))

    score = int(clamp(score))

    if score >= 70:
        bullets.append("Excellent negotiation position")
    elif score >= 50:
        bullets.append("Good negotiation position")
    elif score >= 30:
        bullets.append("Moderate negotiation position")
    else:
        bullets.append("Limited negotiation leverage")

    return make_result(
        "negotiation-leverage-index",
        "Negotiation Leverage Index",
        score,
        bullets,
        [
            "Leverage may change based on seller circumstances",
            "Market conditions can shift quickly",
        ],
    )


# =============================================================================
# Offer Recommendation
# =============================================================================

BELOW_RANGE_ANCHOR = 0.95
BELOW_RANGE_TARGET = 0.98


def calculate_offer_recommendation(
    asking_price: Optional[float],
    valuation_low: float,
    valuation_median: float,
    valuation_high: float,
    risk_appetite: RiskAppetite,
) -> CalculatorResult[OfferRecommendation]:
    """
    Recommend anchor, target and walk-away offers.

    Figures are fractions of the median valuation chosen by risk appetite.
    When the ask is already below the valuation range the offers are
    re-based on the ask, with the bottom of the range as walk-away.
    An ask above the range leaves the valuation figures unchanged.
    """
    level = risk_appetite.level
    multipliers = RISK_APPETITE_MULTIPLIERS[level]
    bullets = []

    anchor = round_half_up(valuation_median * multipliers.anchor)
    target = round_half_up(valuation_median * multipliers.target)
    walk_away = round_half_up(valuation_median * multipliers.walk_away)

    if asking_price and asking_price < valuation_low:
        anchor = round_half_up(asking_price * BELOW_RANGE_ANCHOR)
        target = round_half_up(asking_price * BELOW_RANGE_TARGET)
        walk_away = round_half_up(valuation_low)
        bullets.append("Asking price is below valuation range - offers adjusted accordingly")
    elif asking_price and asking_price > valuation_high:
        bullets.append("Asking price is above valuation range - offers based on valuation")

    bullets.append(f"Anchor offer: {format_currency(anchor)} ({level.value} strategy)")
    bullets.append(f"Target price: {format_currency(target)}")
    bullets.append(f"Walk-away limit: {format_currency(walk_away)}")

    if asking_price and asking_price - target > 0:
        bullets.append(
            f"Potential savings: {format_currency(asking_price - target)} if target is achieved"
        )

    return make_result(
        "offer-recommendation",
        "Offer Recommendation",
        OfferRecommendation(anchor=anchor, target=target, walk_away=walk_away),
        bullets,
        [
            f"Based on {level.value} negotiation strategy",
            "Offers assume property is in good condition",
            "Market conditions may affect seller receptiveness",
        ],
    )


# =============================================================================
# Negotiation Headroom
# =============================================================================

# (fraction of the gap above target, rationale) for the opening steps
LADDER_STEPS: Final[Tuple[Tuple[float, str], ...]] = (
    (0.3, "Opening offer: Start below target to leave room for negotiation"),
    (0.6, "Counter-offer: Move closer to target if initial offer rejected"),
)
FINAL_STEP_RATIONALE = "Final offer: Target price - your walk-away limit"


def calculate_negotiation_headroom(
    asking_price: float,
    target_price: float,
) -> CalculatorResult[NegotiationHeadroom]:
    """
    Build a counter-offer ladder from the gap between asking and target.

    A positive gap yields three steps (target + 30% of the gap, target +
    60% of the gap, then target). No gap yields a single step at target.
    """
    gap = asking_price - target_price
    gap_percentage = percent_of(gap, asking_price)

    bullets = [f"Negotiation gap: {format_currency(gap)} ({gap_percentage:.1f}%)"]
    steps = []

    if gap > 0:
        for number, (fraction, rationale) in enumerate(LADDER_STEPS, start=1):
            amount = round_half_up(target_price + gap * fraction)
            steps.append(NegotiationStep(
                step=number,
                amount=amount,
                percentage=percent_of(asking_price - amount, asking_price),
                rationale=rationale,
            ))
        steps.append(NegotiationStep(
            step=len(LADDER_STEPS) + 1,
            amount=round_half_up(target_price),
            percentage=gap_percentage,
            rationale=FINAL_STEP_RATIONALE,
        ))

        bullets.append("3-step negotiation strategy recommended")
        for step in steps:
            bullets.append(
                f"Step {step.step}: {format_currency(step.amount)} "
                f"({step.percentage:.1f}% below asking)"
            )
    else:
        steps.append(NegotiationStep(
            step=1,
            amount=round_half_up(target_price),
            percentage=0.0,
            rationale="Offer at asking price or above",
        ))
        bullets.append("No negotiation headroom: target price is at or above asking")

    return make_result(
        "negotiation-headroom",
        "Negotiation Headroom",
        NegotiationHeadroom(
            gap=gap,
            gap_percentage=gap_percentage,
            steps=tuple(steps),
        ),
        bullets,
        [
            "Negotiation strategy assumes motivated seller",
            "Market conditions may affect seller flexibility",
        ],
    )
