"""
Deal Audit Engine - Core Business Logic

Deal-scoring pipeline for a UK residential purchase:
1. Leaf calculators (pure functions, each returning a CalculatorResult)
2. Composite scorers (Decision Confidence, Deal Attractiveness)
3. DealAuditor (runs the whole pipeline in dependency order)
4. Caller-side validation of raw JSON input
"""

from .calculators import (
    CalculatorResult,
    Explanation,
    FinanceInputs,
    ChecklistItem,
    ChecklistInputs,
    ComparableData,
    ValuationInputs,
    LeverageFactors,
    RiskAppetite,
    Severity,
    RiskLevel,
    PricePosition,
    PricingPosture,
    BufferAdequacy,
    BuyerStatus,
    RiskAppetiteLevel,
    Tenure,
    calculate_match_confidence,
    calculate_data_coverage_score,
    calculate_valuation_confidence,
    calculate_asking_price_position,
    calculate_adjusted_valuation,
    calculate_condition_deduction,
    calculate_deal_risk_score,
    calculate_negotiation_leverage,
    calculate_offer_recommendation,
    calculate_negotiation_headroom,
    calculate_monthly_ownership_cost,
    calculate_stress_test,
    calculate_buffer_adequacy,
)

# Composite scores
from .scoring import (
    AttractivenessLevel,
    CompositeScore,
    ConfidenceLevel,
    DealAttractivenessScorer,
    DecisionConfidenceScorer,
    calculate_deal_attractiveness,
    calculate_decision_confidence,
)

# Pipeline
from .deal_audit import DealAudit, DealAuditInputs, DealAuditor, run_deal_audit

# Caller-side validation
from .validation import (
    DealAuditValidationError,
    parse_deal_audit_inputs,
    validate_deal_audit_inputs,
)

__all__ = [
    # Result envelope
    "CalculatorResult",
    "Explanation",
    # Inputs
    "FinanceInputs",
    "ChecklistItem",
    "ChecklistInputs",
    "ComparableData",
    "ValuationInputs",
    "LeverageFactors",
    "RiskAppetite",
    # Enums
    "Severity",
    "RiskLevel",
    "PricePosition",
    "PricingPosture",
    "BufferAdequacy",
    "BuyerStatus",
    "RiskAppetiteLevel",
    "Tenure",
    # Leaf calculators
    "calculate_match_confidence",
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
    # Composite scores
    "CompositeScore",
    "ConfidenceLevel",
    "AttractivenessLevel",
    "DecisionConfidenceScorer",
    "DealAttractivenessScorer",
    "calculate_decision_confidence",
    "calculate_deal_attractiveness",
    # Pipeline
    "DealAudit",
    "DealAuditInputs",
    "DealAuditor",
    "run_deal_audit",
    # Validation
    "DealAuditValidationError",
    "parse_deal_audit_inputs",
    "validate_deal_audit_inputs",
]
