"""
Deal Audit - Integrated Scoring Pipeline

Runs every calculator for one property in dependency order and collects
the results, with the two composite scores on top.

Pipeline order:
1. ADJUST - age a stale valuation range (HPI)
2. CONFIDENCE - match, data coverage, valuation confidence
3. PRICE - asking price position against the adjusted range
4. CONDITION - repair estimate and deal risk
5. NEGOTIATE - leverage, offer figures, counter-offer ladder
6. AFFORD - monthly cost, stress test, savings buffer
7. COMPOSITE - decision confidence and deal attractiveness
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from .calculators import (
    AskingPricePosition,
    BufferBreakdown,
    CalculatorResult,
    ChecklistInputs,
    ComparableData,
    ConditionDeduction,
    FinanceInputs,
    LeverageFactors,
    MonthlyCosts,
    NegotiationHeadroom,
    OfferRecommendation,
    RiskAppetite,
    StressTestResult,
    ValuationInputs,
    ValuationRange,
    calculate_adjusted_valuation,
    calculate_asking_price_position,
    calculate_buffer_adequacy,
    calculate_condition_deduction,
    calculate_data_coverage_score,
    calculate_deal_risk_score,
    calculate_match_confidence,
    calculate_monthly_ownership_cost,
    calculate_negotiation_headroom,
    calculate_negotiation_leverage,
    calculate_offer_recommendation,
    calculate_stress_test,
    calculate_valuation_confidence,
)
from .scoring import CompositeScore, DealAttractivenessScorer, DecisionConfidenceScorer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DealAuditInputs:
    """Everything the pipeline needs for one property, already resolved."""
    valuation: ValuationInputs
    comparables: ComparableData
    finance: FinanceInputs
    leverage: LeverageFactors
    checklist: ChecklistInputs = field(default_factory=ChecklistInputs)
    risk_appetite: RiskAppetite = field(default_factory=RiskAppetite)
    asking_price: Optional[float] = None
    tenure: str = ""
    user_address: Optional[str] = None
    api_address: Optional[str] = None
    sales_in_last_year: int = 0


@dataclass(frozen=True)
class DealAudit:
    """
    Complete audit for one property.

    Holds every calculator result; to_dict() produces the JSON record
    consumed by the presentation and storage layers.
    """
    adjusted_valuation: CalculatorResult[ValuationRange]
    match_confidence: CalculatorResult[int]
    data_coverage: CalculatorResult[int]
    valuation_confidence: CalculatorResult[int]
    asking_price_position: CalculatorResult[AskingPricePosition]
    condition: CalculatorResult[ConditionDeduction]
    deal_risk: CalculatorResult[int]
    leverage: CalculatorResult[int]
    offer: CalculatorResult[OfferRecommendation]
    headroom: CalculatorResult[NegotiationHeadroom]
    monthly_cost: CalculatorResult[MonthlyCosts]
    stress_test: CalculatorResult[StressTestResult]
    buffer: CalculatorResult[BufferBreakdown]
    decision_confidence: CalculatorResult[CompositeScore]
    deal_attractiveness: CalculatorResult[CompositeScore]
    property_price: float = 0

    def results(self) -> List[CalculatorResult]:
        """All results in pipeline order."""
        return [
            self.adjusted_valuation,
            self.match_confidence,
            self.data_coverage,
            self.valuation_confidence,
            self.asking_price_position,
            self.condition,
            self.deal_risk,
            self.leverage,
            self.offer,
            self.headroom,
            self.monthly_cost,
            self.stress_test,
            self.buffer,
            self.decision_confidence,
            self.deal_attractiveness,
        ]

    def summary(self) -> dict:
        """Headline figures for dashboards and the report cover."""
        offer = self.offer.value
        return {
            "decision_confidence": self.decision_confidence.value.score,
            "confidence_level": self.decision_confidence.value.level.value,
            "deal_attractiveness": self.deal_attractiveness.value.score,
            "attractiveness_level": self.deal_attractiveness.value.level.value,
            "property_price": self.property_price,
            "anchor_offer": offer.anchor,
            "target_offer": offer.target,
            "walk_away": offer.walk_away,
            "monthly_cost": self.monthly_cost.value.total,
            "stress_test_pass": self.stress_test.value.overall_pass,
            "buffer_adequacy": self.buffer.value.adequacy.value,
            "condition_risk": self.condition.value.risk_level.value,
        }

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "summary": self.summary(),
            "results": {result.id: result.to_dict() for result in self.results()},
        }


class DealAuditor:
    """
    Runs the full calculator pipeline for a property.

    Calculators are pure, so the auditor holds no state beyond the
    reference date used to age stale valuations.
    """

    def __init__(self, reference_date: date = None):
        """
        Initialize the deal auditor.

        Args:
            reference_date: Reference date for valuation ageing (default: today)
        """
        self._reference_date = reference_date or date.today()
        self._confidence_scorer = DecisionConfidenceScorer()
        self._attractiveness_scorer = DealAttractivenessScorer()

    def run(self, inputs: DealAuditInputs) -> DealAudit:
        """
        Audit a single property.

        Args:
            inputs: Resolved property, valuation, finance and checklist data

        Returns:
            DealAudit with every calculator result
        """
        adjusted = calculate_adjusted_valuation(inputs.valuation, self._reference_date)
        valuation_range = adjusted.value

        match = calculate_match_confidence(inputs.user_address, inputs.api_address)
        coverage = calculate_data_coverage_score(inputs.comparables)
        valuation_confidence = calculate_valuation_confidence(
            inputs.comparables.count,
            inputs.sales_in_last_year,
        )

        position = calculate_asking_price_position(
            inputs.asking_price,
            valuation_range.low,
            valuation_range.high,
        )

        condition = calculate_condition_deduction(inputs.checklist)
        deal_risk = calculate_deal_risk_score(inputs.checklist, inputs.tenure, coverage.value)

        leverage = calculate_negotiation_leverage(inputs.leverage)
        offer = calculate_offer_recommendation(
            inputs.asking_price,
            valuation_range.low,
            valuation_range.median,
            valuation_range.high,
            inputs.risk_appetite,
        )

        # Without an ask, negotiate and price the purchase from the median
        property_price = inputs.asking_price or valuation_range.median
        headroom = calculate_negotiation_headroom(property_price, offer.value.target)

        monthly_cost = calculate_monthly_ownership_cost(property_price, inputs.finance)
        stress_test = calculate_stress_test(property_price, inputs.finance)
        buffer = calculate_buffer_adequacy(
            property_price,
            inputs.finance,
            condition.value.total_estimate,
            monthly_cost.value.total,
        )

        decision_confidence = self._confidence_scorer.score(
            match.value,
            coverage.value,
            valuation_confidence.value,
        )
        deal_attractiveness = self._attractiveness_scorer.score(
            position.value.score,
            leverage.value,
            deal_risk.value,
            stress_test.value.overall_pass,
        )

        audit = DealAudit(
            adjusted_valuation=adjusted,
            match_confidence=match,
            data_coverage=coverage,
            valuation_confidence=valuation_confidence,
            asking_price_position=position,
            condition=condition,
            deal_risk=deal_risk,
            leverage=leverage,
            offer=offer,
            headroom=headroom,
            monthly_cost=monthly_cost,
            stress_test=stress_test,
            buffer=buffer,
            decision_confidence=decision_confidence,
            deal_attractiveness=deal_attractiveness,
            property_price=property_price,
        )

        for result in audit.results():
            logger.debug("%s: %s", result.id, result.value)

        logger.info(
            "Deal audit complete: confidence=%s (%s) attractiveness=%s (%s)",
            decision_confidence.value.score,
            decision_confidence.value.level.value,
            deal_attractiveness.value.score,
            deal_attractiveness.value.level.value,
        )

        return audit


def run_deal_audit(inputs: DealAuditInputs, reference_date: date = None) -> DealAudit:
    """Convenience wrapper: audit one property with a fresh DealAuditor."""
    return DealAuditor(reference_date=reference_date).run(inputs)
