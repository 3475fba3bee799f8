"""
Condition and risk calculators.

- Condition Deduction: maps viewing-checklist severities to indicative
  repair costs.
- Deal Risk Score: aggregates checklist findings, tenure and data gaps.
"""

from utils.formatting import format_currency

from .base import CalculatorResult, clamp, make_result, round_half_up
from .models import (
    SEVERITY_COST_BANDS,
    ChecklistInputs,
    ConditionDeduction,
    RepairEstimate,
    RiskLevel,
    Severity,
    Tenure,
)


# =============================================================================
# Condition Deduction
# =============================================================================

HIGH_RISK_TOTAL = 30000
MEDIUM_RISK_TOTAL = 15000


def estimate_repair(severity: Severity) -> int:
    """Indicative repair cost for one finding: midpoint of its cost band."""
    return round_half_up(SEVERITY_COST_BANDS[severity].midpoint)


def classify_condition_risk(high_count: int, medium_count: int, total_estimate: float) -> RiskLevel:
    """Overall condition risk from severity counts and total repair estimate."""
    if high_count >= 2 or total_estimate > HIGH_RISK_TOTAL:
        return RiskLevel.HIGH
    if high_count >= 1 or medium_count >= 3 or total_estimate > MEDIUM_RISK_TOTAL:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def calculate_condition_deduction(checklist: ChecklistInputs) -> CalculatorResult[ConditionDeduction]:
    """Estimate repair costs and condition risk from checklist findings."""
    breakdown = tuple(
        RepairEstimate(
            category=item.category,
            severity=item.severity,
            estimate=estimate_repair(item.severity),
        )
        for item in checklist.items
    )
    total_estimate = sum(entry.estimate for entry in breakdown)

    risk_level = classify_condition_risk(
        checklist.count(Severity.HIGH),
        checklist.count(Severity.MEDIUM),
        total_estimate,
    )

    bullets = [
        f"Total estimated repair cost: {format_currency(total_estimate)}",
        f"Risk level: {risk_level.value.capitalize()}",
    ]
    for entry in breakdown:
        bullets.append(
            f"{entry.category}: {format_currency(entry.estimate)} ({entry.severity.value} severity)"
        )

    if risk_level == RiskLevel.HIGH:
        bullets.append("Significant repairs required - consider professional survey")
    elif risk_level == RiskLevel.MEDIUM:
        bullets.append("Moderate repairs expected - factor into offer")
    else:
        bullets.append("Minor repairs only - property in good condition")

    return make_result(
        "condition-deduction",
        "Condition Deduction",
        ConditionDeduction(
            total_estimate=total_estimate,
            breakdown=breakdown,
            risk_level=risk_level,
        ),
        bullets,
        [
            "Cost estimates are indicative and may vary",
            "Professional survey recommended for accurate assessment",
            "Some issues may be more expensive to fix than estimated",
        ],
    )


# =============================================================================
# Deal Risk Score
# =============================================================================

HIGH_SEVERITY_POINTS = 15
MEDIUM_SEVERITY_POINTS = 5
CHECKLIST_RISK_CAP = 50

LEASEHOLD_RISK = 30
FREEHOLD_RISK = 0
UNKNOWN_TENURE_RISK = 15

DATA_GAP_MAX_RISK = 20


def tenure_risk(tenure: str) -> int:
    """Risk points for a free-text tenure; unrecognised tenure is mid-range."""
    classified = Tenure.classify(tenure)
    if classified == Tenure.LEASEHOLD:
        return LEASEHOLD_RISK
    if classified == Tenure.FREEHOLD:
        return FREEHOLD_RISK
    return UNKNOWN_TENURE_RISK


def calculate_deal_risk_score(
    checklist: ChecklistInputs,
    tenure: str,
    data_coverage_score: float,
) -> CalculatorResult[int]:
    """
    Score deal risk on a 0-100 scale (lower is less risky).

    Checklist findings contribute up to 50 points, tenure up to 30 and
    missing comparable data up to 20.
    """
    bullets = []

    high_count = checklist.count(Severity.HIGH)
    medium_count = checklist.count(Severity.MEDIUM)

    checklist_risk = min(
        CHECKLIST_RISK_CAP,
        high_count * HIGH_SEVERITY_POINTS + medium_count * MEDIUM_SEVERITY_POINTS,
    )
    if high_count > 0:
        bullets.append(f"{high_count} high-severity issue(s) identified")
    if medium_count > 0:
        bullets.append(f"{medium_count} medium-severity issue(s) identified")

    tenure_points = tenure_risk(tenure)
    if tenure_points == LEASEHOLD_RISK:
        bullets.append("Leasehold tenure increases risk (ground rent, service charges, lease length)")
    elif tenure_points == FREEHOLD_RISK:
        bullets.append("Freehold tenure reduces risk")
    else:
        bullets.append("Tenure type unclear - may increase risk")

    data_risk = round_half_up(DATA_GAP_MAX_RISK - (data_coverage_score / 100) * DATA_GAP_MAX_RISK)
    if data_coverage_score < 40:
        bullets.append("Limited comparable data increases uncertainty")
    elif data_coverage_score < 70:
        bullets.append("Moderate data coverage - some uncertainty remains")
    else:
        bullets.append("Good data coverage reduces risk")

    risk_score = int(clamp(checklist_risk + tenure_points + data_risk))

    if risk_score >= 70:
        bullets.append("High risk deal - proceed with caution")
    elif risk_score >= 40:
        bullets.append("Moderate risk - standard due diligence recommended")
    else:
        bullets.append("Low risk - deal appears straightforward")

    return make_result(
        "deal-risk-score",
        "Deal Risk Score",
        risk_score,
        bullets,
        [
            "Risk assessment based on available information",
            "Professional advice recommended for high-risk deals",
        ],
    )
