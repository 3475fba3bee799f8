"""
Tests for caller-side validation of raw deal audit input

Verifies:
- camelCase and snake_case records parse to the same inputs
- Structural violations are collected and reported together
- Optional sections fall back to documented defaults
"""

import copy
import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core import (
    BuyerStatus,
    DealAuditValidationError,
    RiskAppetiteLevel,
    Severity,
    parse_deal_audit_inputs,
    validate_deal_audit_inputs,
)
from reporting.sample import create_sample_inputs


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def data():
    return create_sample_inputs()


@pytest.fixture
def snake_case_data():
    return {
        "user_address": "14 Acacia Avenue, Reading RG1 4QP",
        "api_address": "14 ACACIA AVENUE, READING, RG1 4QP",
        "asking_price": 285000,
        "tenure": "Freehold",
        "sales_in_last_year": 6,
        "valuation": {
            "valuation_low": 290000,
            "valuation_median": 310000,
            "valuation_high": 330000,
            "confidence_score": 72,
            "last_sold_date": "2019-06-14",
        },
        "comparables": {"count": 14, "recency": 120, "variance": 8},
        "checklist": {"items": [
            {"category": "roof", "severity": "medium", "description": "Slipped tiles on rear pitch"},
            {"category": "electrics", "severity": "low", "description": "Consumer unit predates 2008"},
        ]},
        "leverage": {
            "days_on_market": 95,
            "price_drops": 1,
            "buyer_ready": True,
            "chain_free": True,
            "buyer_status": "first_time",
        },
        "finance": {
            "deposit": 45000,
            "interest_rate": 4.5,
            "loan_term": 25,
            "monthly_income": 5200,
            "savings": 72000,
        },
        "risk_appetite": {"level": "balanced"},
    }


# =============================================================================
# Parsing
# =============================================================================

class TestParseDealAuditInputs:

    def test_camel_case_record(self, data):
        inputs = parse_deal_audit_inputs(data)

        assert inputs.asking_price == 285000
        assert inputs.tenure == "Freehold"
        assert inputs.sales_in_last_year == 6
        assert inputs.valuation.valuation_median == 310000
        assert inputs.comparables.count == 14
        assert inputs.leverage.buyer_status == BuyerStatus.FIRST_TIME
        assert inputs.finance.loan_term == 25
        assert inputs.risk_appetite.level == RiskAppetiteLevel.BALANCED
        assert [item.severity for item in inputs.checklist.items] == [Severity.MEDIUM, Severity.LOW]

    def test_snake_case_matches_camel_case(self, data, snake_case_data):
        assert parse_deal_audit_inputs(snake_case_data) == parse_deal_audit_inputs(data)

    def test_user_typed_address_alias(self, data):
        del data["userAddress"]
        data["userTypedAddress"] = "14 Acacia Avenue"

        assert parse_deal_audit_inputs(data).user_address == "14 Acacia Avenue"

    def test_optional_sections_default(self, data):
        for key in ("askingPrice", "checklist", "riskAppetite", "tenure", "salesInLastYear"):
            del data[key]

        inputs = parse_deal_audit_inputs(data, default_risk_appetite=RiskAppetiteLevel.CONSERVATIVE)

        assert inputs.asking_price is None
        assert inputs.checklist.items == ()
        assert inputs.tenure == ""
        assert inputs.sales_in_last_year == 0
        assert inputs.risk_appetite.level == RiskAppetiteLevel.CONSERVATIVE

    def test_leasehold_charges_optional(self, data):
        data["finance"]["serviceCharge"] = 1800
        inputs = parse_deal_audit_inputs(data)

        assert inputs.finance.service_charge == 1800
        assert inputs.finance.ground_rent == 0


# =============================================================================
# Rejections
# =============================================================================

class TestValidationErrors:

    def test_valid_record_has_no_errors(self, data):
        assert validate_deal_audit_inputs(data) == []

    def test_body_must_be_object(self):
        with pytest.raises(DealAuditValidationError) as exc_info:
            parse_deal_audit_inputs(["not", "an", "object"])
        assert exc_info.value.errors == ["request body must be an object"]

    def test_missing_section(self, data):
        del data["finance"]
        assert "finance is required" in validate_deal_audit_inputs(data)

    def test_inverted_valuation_range(self, data):
        data["valuation"]["valuationLow"] = 350000
        errors = validate_deal_audit_inputs(data)

        assert "valuation.valuation_low must not exceed valuation.valuation_high" in errors

    def test_median_outside_range(self, data):
        data["valuation"]["valuationMedian"] = 400000
        errors = validate_deal_audit_inputs(data)

        assert "valuation.valuation_median must lie within the valuation range" in errors

    def test_negative_count(self, data):
        data["comparables"]["count"] = -1
        assert "comparables.count must be non-negative" in validate_deal_audit_inputs(data)

    def test_fractional_count(self, data):
        data["comparables"]["count"] = 2.5
        assert "comparables.count must be a whole number" in validate_deal_audit_inputs(data)

    def test_negative_money(self, data):
        data["finance"]["savings"] = -100
        assert "finance.savings must be non-negative" in validate_deal_audit_inputs(data)

    def test_boolean_is_not_a_number(self, data):
        data["askingPrice"] = True
        errors = validate_deal_audit_inputs(data)

        assert any(error.startswith("asking_price must be a number") for error in errors)

    def test_unknown_severity(self, data):
        data["checklist"].append({"category": "damp", "severity": "catastrophic"})
        errors = validate_deal_audit_inputs(data)

        assert any(error.startswith("checklist[2].severity") for error in errors)

    def test_unknown_enums(self, data):
        data["riskAppetite"] = "reckless"
        data["leverage"]["buyerStatus"] = "investor"
        errors = validate_deal_audit_inputs(data)

        assert any(error.startswith("risk_appetite") for error in errors)
        assert any(error.startswith("leverage.buyer_status") for error in errors)

    def test_bad_sale_date(self, data):
        data["valuation"]["lastSoldDate"] = "last spring"
        errors = validate_deal_audit_inputs(data)

        assert any(error.startswith("valuation.last_sold_date") for error in errors)

    @pytest.mark.parametrize("key,label", [
        ("userAddress", "user_address"),
        ("apiAddress", "api_address"),
        ("tenure", "tenure"),
    ])
    def test_text_fields_must_be_strings(self, data, key, label):
        data[key] = 14
        errors = validate_deal_audit_inputs(data)

        assert any(error.startswith(f"{label} must be a string") for error in errors)

    @pytest.mark.parametrize("flag", ["buyerReady", "chainFree"])
    @pytest.mark.parametrize("value", ["false", "true", 0, 1])
    def test_leverage_flags_must_be_booleans(self, data, flag, value):
        data["leverage"][flag] = value

        with pytest.raises(DealAuditValidationError) as exc_info:
            parse_deal_audit_inputs(data)

        assert any(" must be true or false" in error for error in exc_info.value.errors)

    def test_missing_leverage_flags_default_to_false(self, data):
        del data["leverage"]["buyerReady"]
        del data["leverage"]["chainFree"]
        leverage = parse_deal_audit_inputs(data).leverage

        assert leverage.buyer_ready is False
        assert leverage.chain_free is False

    def test_errors_are_collected(self, data):
        broken = copy.deepcopy(data)
        del broken["comparables"]
        broken["finance"]["deposit"] = -1
        broken["checklist"] = "roof"

        with pytest.raises(DealAuditValidationError) as exc_info:
            parse_deal_audit_inputs(broken)

        errors = exc_info.value.errors
        assert "comparables is required" in errors
        assert "finance.deposit must be non-negative" in errors
        assert "checklist must be a list of items" in errors
        assert isinstance(exc_info.value, ValueError)
