"""
Deal-scoring calculators.

Independent pure functions, each returning a CalculatorResult. The only
data dependencies between them are:
- Deal Risk Score consumes a Data Coverage Score value
- Offer Recommendation and Negotiation Headroom consume a valuation range
"""

from .base import (
    CalculatorResult,
    Explanation,
    affordability_ratio,
    clamp,
    percent_of,
    to_serialisable,
)
from .models import (
    SEVERITY_COST_BANDS,
    RISK_APPETITE_MULTIPLIERS,
    BUYER_STATUS_BONUS_RATES,
    AskingPricePosition,
    BufferAdequacy,
    BufferBreakdown,
    BuyerStatus,
    ChecklistInputs,
    ChecklistItem,
    ComparableData,
    ConditionDeduction,
    CostBand,
    FinanceInputs,
    LeverageFactors,
    MonthlyCosts,
    NegotiationHeadroom,
    NegotiationStep,
    OfferMultipliers,
    OfferRecommendation,
    PricePosition,
    PricingPosture,
    RepairEstimate,
    RiskAppetite,
    RiskAppetiteLevel,
    RiskLevel,
    Severity,
    StressScenario,
    StressTestResult,
    Tenure,
    ValuationInputs,
    ValuationRange,
)
from .matching import calculate_match_confidence, extract_postcode
from .coverage import calculate_data_coverage_score, calculate_valuation_confidence
from .valuation import calculate_adjusted_valuation, calculate_asking_price_position
from .condition import calculate_condition_deduction, calculate_deal_risk_score
from .negotiation import (
    calculate_negotiation_headroom,
    calculate_negotiation_leverage,
    calculate_offer_recommendation,
)
from .finance import (
    calculate_buffer_adequacy,
    calculate_monthly_ownership_cost,
    calculate_stress_test,
    monthly_mortgage_payment,
)

__all__ = [
    # Result envelope
    "CalculatorResult",
    "Explanation",
    "to_serialisable",
    "clamp",
    "percent_of",
    "affordability_ratio",
    # Inputs
    "FinanceInputs",
    "ChecklistItem",
    "ChecklistInputs",
    "ComparableData",
    "ValuationInputs",
    "LeverageFactors",
    "RiskAppetite",
    # Enums and tables
    "Severity",
    "RiskLevel",
    "PricePosition",
    "PricingPosture",
    "BufferAdequacy",
    "BuyerStatus",
    "RiskAppetiteLevel",
    "Tenure",
    "CostBand",
    "OfferMultipliers",
    "SEVERITY_COST_BANDS",
    "RISK_APPETITE_MULTIPLIERS",
    "BUYER_STATUS_BONUS_RATES",
    # Output values
    "AskingPricePosition",
    "RepairEstimate",
    "ConditionDeduction",
    "OfferRecommendation",
    "NegotiationStep",
    "NegotiationHeadroom",
    "MonthlyCosts",
    "StressScenario",
    "StressTestResult",
    "BufferBreakdown",
    "ValuationRange",
    # Calculators
    "calculate_match_confidence",
    "extract_postcode",
    "calculate_data_coverage_score",
    "calculate_valuation_confidence",
    "calculate_asking_price_position",
    "calculate_adjusted_valuation",
    "calculate_condition_deduction",
    "calculate_deal_risk_score",
    "calculate_negotiation_leverage",
    "calculate_offer_recommendation",
    "calculate_negotiation_headroom",
    "calculate_monthly_ownership_cost",
    "calculate_stress_test",
    "calculate_buffer_adequacy",
    "monthly_mortgage_payment",
]
