"""
Composite deal scores.

Combine leaf calculator outputs into the two top-level signals shown to
the buyer:
- Decision Confidence: how much to trust the numbers
- Deal Attractiveness: whether the deal is worth pursuing
"""

from dataclasses import dataclass
from enum import Enum
from typing import Final, Tuple

from utils.formatting import round_half_up

from .calculators.base import CalculatorResult, clamp, make_result


class ConfidenceLevel(Enum):
    HIGH = "High"
    MODERATE = "Moderate"
    LOW = "Low"
    VERY_LOW = "Very Low"


class AttractivenessLevel(Enum):
    HIGHLY_ATTRACTIVE = "Highly Attractive"
    MODERATELY_ATTRACTIVE = "Moderately Attractive"
    CAUTIOUS = "Cautious"
    NOT_ATTRACTIVE = "Not Attractive"


@dataclass(frozen=True)
class CompositeScore:
    """Weighted 0-100 score with its qualitative band."""
    score: int
    level: Enum
    summary: str


class DecisionConfidenceScorer:
    """
    Weighted confidence in the audit's numbers.

    Scoring methodology:
    - Match confidence (40%): are we looking at the right property
    - Valuation confidence (40%): how well supported the valuation is
    - Data coverage (20%): comparable-sales depth

    Data coverage carries the smallest weight so thin comparables do not
    swamp a good match and a well-supported valuation.
    """

    WEIGHT_MATCH = 0.4
    WEIGHT_VALUATION = 0.4
    WEIGHT_COVERAGE = 0.2

    # (minimum score, level, summary), highest band first
    BANDS: Final[Tuple[Tuple[int, ConfidenceLevel, str], ...]] = (
        (70, ConfidenceLevel.HIGH, "High confidence: we're confident in these numbers."),
        (50, ConfidenceLevel.MODERATE, "Moderate confidence: we're not guessing, but we are squinting."),
        (30, ConfidenceLevel.LOW, "Low confidence: we're making educated guesses here."),
    )
    FALLBACK = (ConfidenceLevel.VERY_LOW, "Very low confidence: treat these numbers as directional only.")

    def score(
        self,
        match_confidence: float,
        data_coverage_score: float,
        valuation_confidence: float,
    ) -> CalculatorResult[CompositeScore]:
        score = round_half_up(
            match_confidence * self.WEIGHT_MATCH
            + valuation_confidence * self.WEIGHT_VALUATION
            + data_coverage_score * self.WEIGHT_COVERAGE
        )
        score = int(clamp(score))
        level, summary = self._band(score)

        bullets = [
            f"Match confidence: {match_confidence:g}%",
            f"Data coverage: {data_coverage_score:g}%",
            f"Valuation confidence: {valuation_confidence:g}%",
            f"Overall decision confidence: {score}%",
            f"Confidence level: {level.value}",
            summary,
        ]

        return make_result(
            "decision-confidence",
            "Decision Confidence",
            CompositeScore(score=score, level=level, summary=summary),
            bullets,
            [
                "Confidence based on data quality and match accuracy",
                "Professional valuation recommended for low confidence scores",
            ],
        )

    def _band(self, score: int) -> Tuple[ConfidenceLevel, str]:
        for minimum, level, summary in self.BANDS:
            if score >= minimum:
                return level, summary
        return self.FALLBACK


class DealAttractivenessScorer:
    """
    Weighted attractiveness of the deal.

    Scoring methodology:
    - Asking price position (30%): below range scores high
    - Negotiation leverage (25%)
    - Risk (25%): inverted, lower risk scores high
    - Stress test (20%): pass = 100, fail = 0
    """

    WEIGHT_ASKING_POSITION = 0.30
    WEIGHT_LEVERAGE = 0.25
    WEIGHT_RISK = 0.25
    WEIGHT_STRESS_TEST = 0.20

    BANDS: Final[Tuple[Tuple[int, AttractivenessLevel, str], ...]] = (
        (70, AttractivenessLevel.HIGHLY_ATTRACTIVE, "Strong buy signal - this deal looks very attractive"),
        (50, AttractivenessLevel.MODERATELY_ATTRACTIVE, "Decent deal - proceed with standard due diligence"),
        (30, AttractivenessLevel.CAUTIOUS, "Proceed with caution - some concerns identified"),
    )
    FALLBACK = (AttractivenessLevel.NOT_ATTRACTIVE, "Consider walking away - deal has significant concerns")

    def score(
        self,
        asking_price_position: float,
        leverage_index: float,
        risk_score: float,
        stress_test_pass: bool,
    ) -> CalculatorResult[CompositeScore]:
        inverted_risk = 100 - risk_score
        stress_test_score = 100 if stress_test_pass else 0

        score = round_half_up(
            asking_price_position * self.WEIGHT_ASKING_POSITION
            + leverage_index * self.WEIGHT_LEVERAGE
            + inverted_risk * self.WEIGHT_RISK
            + stress_test_score * self.WEIGHT_STRESS_TEST
        )
        score = int(clamp(score))
        level, summary = self._band(score)

        bullets = [
            f"Asking price position: {asking_price_position:.0f}%",
            f"Negotiation leverage: {leverage_index:g}%",
            f"Risk assessment: {inverted_risk:g}% ({risk_score:g}% risk)",
            f"Stress test: {'PASS' if stress_test_pass else 'FAIL'}",
            f"Overall deal attractiveness: {score}%",
            f"Attractiveness level: {level.value}",
            f"Recommendation: {summary}",
        ]

        return make_result(
            "deal-attractiveness",
            "Deal Attractiveness",
            CompositeScore(score=score, level=level, summary=summary),
            bullets,
            [
                "Score weighted by importance of each factor",
                "Personal circumstances may affect attractiveness",
                "Market conditions can change deal dynamics",
            ],
        )

    def _band(self, score: int) -> Tuple[AttractivenessLevel, str]:
        for minimum, level, summary in self.BANDS:
            if score >= minimum:
                return level, summary
        return self.FALLBACK


def calculate_decision_confidence(
    match_confidence: float,
    data_coverage_score: float,
    valuation_confidence: float,
) -> CalculatorResult[CompositeScore]:
    """Convenience wrapper around DecisionConfidenceScorer."""
    return DecisionConfidenceScorer().score(
        match_confidence, data_coverage_score, valuation_confidence
    )


def calculate_deal_attractiveness(
    asking_price_position: float,
    leverage_index: float,
    risk_score: float,
    stress_test_pass: bool,
) -> CalculatorResult[CompositeScore]:
    """Convenience wrapper around DealAttractivenessScorer."""
    return DealAttractivenessScorer().score(
        asking_price_position, leverage_index, risk_score, stress_test_pass
    )
