"""
Tests for Monthly Ownership Cost, Stress Test and Buffer Adequacy

Uses the reference buyer: £200,000 purchase, £20,000 deposit, 5% over
25 years, £3,000 monthly income.
"""

import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.calculators import (
    BufferAdequacy,
    FinanceInputs,
    affordability_ratio,
    calculate_buffer_adequacy,
    calculate_monthly_ownership_cost,
    calculate_stress_test,
    monthly_mortgage_payment,
)


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def finance():
    return FinanceInputs(
        deposit=20000,
        interest_rate=5,
        loan_term=25,
        monthly_income=3000,
        savings=0,
    )


# =============================================================================
# Mortgage maths
# =============================================================================

class TestMortgagePayment:

    def test_reference_payment(self):
        assert monthly_mortgage_payment(180000, 5, 25) == pytest.approx(1052.26, abs=0.01)

    @pytest.mark.parametrize("principal,rate,term", [
        (0, 5, 25),
        (-5000, 5, 25),
        (180000, 0, 25),
        (180000, 5, 0),
    ])
    def test_degenerate_inputs_pay_nothing(self, principal, rate, term):
        assert monthly_mortgage_payment(principal, rate, term) == 0.0


# =============================================================================
# Monthly Ownership Cost
# =============================================================================

class TestMonthlyOwnershipCost:

    def test_reference_buyer(self, finance):
        result = calculate_monthly_ownership_cost(200000, finance)
        costs = result.value

        assert result.id == "monthly-ownership-cost"
        assert abs(costs.mortgage - 1053) <= 1
        assert costs.insurance == 33
        assert costs.maintenance == 167
        assert costs.service_charge == 0
        assert costs.ground_rent == 0
        assert costs.total == 1252

    def test_reference_buyer_mortgage_share_of_income(self, finance):
        payment = monthly_mortgage_payment(200000 - finance.deposit, finance.interest_rate, finance.loan_term)
        assert affordability_ratio(payment, finance.monthly_income) == pytest.approx(35.1, abs=0.05)

    def test_affordability_band_uses_total_cost(self, finance):
        # 1,252.26 total against 3,000 income
        bullets = calculate_monthly_ownership_cost(200000, finance).explanation.bullets
        assert "Monthly costs represent 41.7% of income - may be unaffordable" in bullets

    def test_leasehold_charges_are_monthly(self, finance):
        leasehold = FinanceInputs(20000, 5, 25, 3000, 0, service_charge=1800, ground_rent=240)
        costs = calculate_monthly_ownership_cost(200000, leasehold).value

        assert costs.service_charge == 150
        assert costs.ground_rent == 20

    def test_zero_income_is_explained(self):
        no_income = FinanceInputs(20000, 5, 25, 0, 0)
        result = calculate_monthly_ownership_cost(200000, no_income)

        assert any("No monthly income" in bullet for bullet in result.explanation.bullets)


# =============================================================================
# Stress Test
# =============================================================================

class TestStressTest:

    def test_reference_buyer_fails_at_plus_three(self, finance):
        result = calculate_stress_test(200000, finance)
        scenarios = result.value.scenarios

        assert result.id == "stress-test"
        assert [s.rate_increase for s in scenarios] == [1, 2, 3]
        assert [s.new_rate for s in scenarios] == [6, 7, 8]
        assert scenarios[0].passed is True
        assert scenarios[2].passed is False
        assert scenarios[2].affordability_ratio > 40
        assert result.value.overall_pass is False

    def test_comfortable_buyer_passes(self):
        comfortable = FinanceInputs(20000, 5, 25, 6000, 0)
        assert calculate_stress_test(200000, comfortable).value.overall_pass is True

    def test_zero_income_fails_every_scenario(self):
        no_income = FinanceInputs(20000, 5, 25, 0, 0)
        result = calculate_stress_test(200000, no_income)

        assert all(s.affordability_ratio is None for s in result.value.scenarios)
        assert result.value.overall_pass is False

    def test_no_borrowing_passes(self):
        cash = FinanceInputs(200000, 5, 25, 0, 0)
        result = calculate_stress_test(200000, cash)

        assert all(s.new_monthly_payment == 0 for s in result.value.scenarios)
        assert result.value.overall_pass is True


# =============================================================================
# Buffer Adequacy
# =============================================================================

class TestBufferAdequacy:

    def _finance(self, savings):
        return FinanceInputs(20000, 5, 25, 3000, savings)

    def test_breakdown(self):
        result = calculate_buffer_adequacy(200000, self._finance(100000), 0, 1000)
        buffer = result.value

        assert result.id == "buffer-adequacy"
        assert buffer.fees == 8000
        assert buffer.emergency_fund == 3000
        assert buffer.total_required == 31000
        assert buffer.shortfall == 0
        assert buffer.adequacy == BufferAdequacy.ADEQUATE

    def test_tight(self):
        buffer = calculate_buffer_adequacy(200000, self._finance(32000), 0, 1000).value
        assert buffer.adequacy == BufferAdequacy.TIGHT

    def test_insufficient(self):
        buffer = calculate_buffer_adequacy(200000, self._finance(30000), 0, 1000).value

        assert buffer.adequacy == BufferAdequacy.INSUFFICIENT
        assert buffer.shortfall == 1000

    def test_repairs_count_towards_required(self):
        buffer = calculate_buffer_adequacy(200000, self._finance(40000), 12000, 1000).value

        assert buffer.total_required == 43000
        assert buffer.adequacy == BufferAdequacy.INSUFFICIENT
