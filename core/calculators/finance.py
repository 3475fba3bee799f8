"""
Affordability calculators.

- Monthly Ownership Cost: mortgage + insurance + maintenance + leasehold
  charges.
- Stress Test: mortgage affordability under +1/+2/+3 point rate shocks.
- Buffer Adequacy: savings against deposit, fees, repairs and an
  emergency fund.
"""

from typing import Final, Tuple

from utils.formatting import format_currency, format_percent

from .base import (
    CalculatorResult,
    affordability_ratio,
    make_result,
    round_half_up,
)
from .models import (
    BufferAdequacy,
    BufferBreakdown,
    FinanceInputs,
    MonthlyCosts,
    StressScenario,
    StressTestResult,
)


# =============================================================================
# Mortgage maths
# =============================================================================

def monthly_mortgage_payment(principal: float, annual_rate_percent: float, term_years: float) -> float:
    """
    Standard amortising repayment: P*r*(1+r)^n / ((1+r)^n - 1).

    Returns 0.0 when principal, term or rate is not positive.
    """
    monthly_rate = annual_rate_percent / 100 / 12
    payments = term_years * 12
    if principal <= 0 or payments <= 0 or monthly_rate <= 0:
        return 0.0
    growth = (1 + monthly_rate) ** payments
    return principal * monthly_rate * growth / (growth - 1)


# =============================================================================
# Monthly Ownership Cost
# =============================================================================

INSURANCE_ANNUAL_RATE = 0.002
MAINTENANCE_ANNUAL_RATE = 0.01

UNAFFORDABLE_RATIO = 40
TIGHT_RATIO = 30


def calculate_monthly_ownership_cost(
    property_price: float,
    finance: FinanceInputs,
) -> CalculatorResult[MonthlyCosts]:
    """
    Estimate the full monthly cost of owning the property.

    The affordability band (share of monthly income) is reported in the
    explanation only; it does not change the value.
    """
    mortgage = monthly_mortgage_payment(
        property_price - finance.deposit,
        finance.interest_rate,
        finance.loan_term,
    )
    insurance = property_price * INSURANCE_ANNUAL_RATE / 12
    maintenance = property_price * MAINTENANCE_ANNUAL_RATE / 12
    service_charge = (finance.service_charge or 0) / 12
    ground_rent = (finance.ground_rent or 0) / 12
    total = mortgage + insurance + maintenance + service_charge + ground_rent

    bullets = [
        f"Mortgage repayment: {format_currency(mortgage)}/month",
        f"Insurance: {format_currency(insurance)}/month",
        f"Maintenance allowance: {format_currency(maintenance)}/month",
    ]
    if service_charge > 0:
        bullets.append(f"Service charge: {format_currency(service_charge)}/month")
    if ground_rent > 0:
        bullets.append(f"Ground rent: {format_currency(ground_rent)}/month")
    bullets.append(f"Total monthly cost: {format_currency(total)}")

    ratio = affordability_ratio(total, finance.monthly_income)
    if ratio is None:
        bullets.append("No monthly income provided - affordability cannot be assessed")
    elif ratio > UNAFFORDABLE_RATIO:
        bullets.append(
            f"Monthly costs represent {format_percent(ratio)} of income - may be unaffordable"
        )
    elif ratio > TIGHT_RATIO:
        bullets.append(
            f"Monthly costs represent {format_percent(ratio)} of income - tight but manageable"
        )
    else:
        bullets.append(f"Monthly costs represent {format_percent(ratio)} of income - affordable")

    return make_result(
        "monthly-ownership-cost",
        "Monthly Ownership Cost",
        MonthlyCosts(
            mortgage=round_half_up(mortgage),
            insurance=round_half_up(insurance),
            maintenance=round_half_up(maintenance),
            service_charge=round_half_up(service_charge),
            ground_rent=round_half_up(ground_rent),
            total=round_half_up(total),
        ),
        bullets,
        [
            "Insurance estimate based on typical UK property insurance rates",
            "Maintenance allowance is indicative - actual costs may vary",
            "Mortgage calculation assumes standard repayment mortgage",
        ],
    )


# =============================================================================
# Stress Test
# =============================================================================

RATE_SHOCKS: Final[Tuple[int, ...]] = (1, 2, 3)
STRESS_PASS_RATIO = 40


def calculate_stress_test(
    property_price: float,
    finance: FinanceInputs,
) -> CalculatorResult[StressTestResult]:
    """
    Re-price the mortgage at +1, +2 and +3 percentage points.

    A scenario passes when the payment is at most 40% of monthly income.
    A positive payment against no income fails.
    """
    principal = property_price - finance.deposit
    scenarios = []

    for shock in RATE_SHOCKS:
        new_rate = finance.interest_rate + shock
        payment = monthly_mortgage_payment(principal, new_rate, finance.loan_term)
        ratio = affordability_ratio(payment, finance.monthly_income)
        scenarios.append(StressScenario(
            rate_increase=shock,
            new_rate=new_rate,
            new_monthly_payment=round_half_up(payment),
            affordability_ratio=None if ratio is None else round(ratio, 1),
            passed=ratio is not None and ratio <= STRESS_PASS_RATIO,
        ))

    overall_pass = all(scenario.passed for scenario in scenarios)

    bullets = [f"Current rate: {finance.interest_rate:g}%"]
    for scenario in scenarios:
        status = "PASS" if scenario.passed else "FAIL"
        bullets.append(
            f"{status} +{scenario.rate_increase:g}% ({scenario.new_rate:g}%): "
            f"{format_currency(scenario.new_monthly_payment)}/month "
            f"({format_percent(scenario.affordability_ratio)} of income)"
        )

    if overall_pass:
        bullets.append("All stress test scenarios passed")
    else:
        bullets.append("Some stress test scenarios failed - consider lower offer or longer term")

    return make_result(
        "stress-test",
        "Interest Rate Stress Test",
        StressTestResult(scenarios=tuple(scenarios), overall_pass=overall_pass),
        bullets,
        [
            "Stress test uses 40% of income as affordability threshold",
            "Assumes other costs (insurance, maintenance) remain constant",
            "Rate increases are hypothetical - actual rates may differ",
        ],
    )


# =============================================================================
# Buffer Adequacy
# =============================================================================

PURCHASE_FEES_RATE = 0.04
EMERGENCY_FUND_MONTHS = 3
COMFORTABLE_BUFFER_RATIO = 1.1


def calculate_buffer_adequacy(
    property_price: float,
    finance: FinanceInputs,
    repair_costs: float,
    monthly_ownership_cost: float,
) -> CalculatorResult[BufferBreakdown]:
    """
    Compare savings with the cash needed to complete and stay solvent.

    Required = deposit + fees (4% of price) + repairs + 3 months of
    ownership costs. Adequate needs a 10% margin over that; tight means
    covered with less margin; insufficient means a shortfall.
    """
    deposit = finance.deposit
    fees = round_half_up(property_price * PURCHASE_FEES_RATE)
    emergency_fund = round_half_up(monthly_ownership_cost * EMERGENCY_FUND_MONTHS)
    total_required = deposit + fees + repair_costs + emergency_fund
    savings = finance.savings
    shortfall = max(0, total_required - savings)

    if shortfall == 0 and savings >= total_required * COMFORTABLE_BUFFER_RATIO:
        adequacy = BufferAdequacy.ADEQUATE
    elif shortfall == 0:
        adequacy = BufferAdequacy.TIGHT
    else:
        adequacy = BufferAdequacy.INSUFFICIENT

    bullets = [
        f"Deposit: {format_currency(deposit)}",
        f"Fees (stamp duty, legal, survey): {format_currency(fees)}",
        f"Repairs: {format_currency(repair_costs)}",
        f"Emergency fund (3 months): {format_currency(emergency_fund)}",
        f"Total required: {format_currency(total_required)}",
        f"Available savings: {format_currency(savings)}",
    ]
    if adequacy == BufferAdequacy.INSUFFICIENT:
        bullets.append(f"Shortfall: {format_currency(shortfall)}")
        bullets.append("Insufficient funds - consider saving more or reducing offer")
    elif adequacy == BufferAdequacy.TIGHT:
        bullets.append("Funds are adequate but tight - little buffer remaining")
    else:
        bullets.append("Funds are adequate with buffer remaining")

    return make_result(
        "buffer-adequacy",
        "Buffer Adequacy",
        BufferBreakdown(
            deposit=deposit,
            fees=fees,
            repairs=repair_costs,
            emergency_fund=emergency_fund,
            total_required=total_required,
            available_savings=savings,
            shortfall=shortfall,
            adequacy=adequacy,
        ),
        bullets,
        [
            "Fees estimate includes stamp duty, legal fees, and survey costs",
            "Emergency fund based on 3 months of ownership costs",
            "Actual costs may vary from estimates",
        ],
    )
