"""
Integration tests for the Deal Audit pipeline

Verifies:
- Every calculator runs and is keyed by its stable id
- Wiring between calculators (adjusted range, offer target, repair costs)
- Deterministic results for the same input
- All scores stay within their documented bounds
"""

import json
import pytest
from dataclasses import replace
from datetime import date
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core import (
    AttractivenessLevel,
    BufferAdequacy,
    ChecklistInputs,
    ChecklistItem,
    ComparableData,
    ConfidenceLevel,
    DealAuditInputs,
    DealAuditor,
    FinanceInputs,
    LeverageFactors,
    BuyerStatus,
    PricePosition,
    RiskLevel,
    Severity,
    ValuationInputs,
    run_deal_audit,
)

RESULT_IDS = [
    "valuation-range-wrapper",
    "match-confidence",
    "data-coverage-score",
    "valuation-confidence",
    "asking-price-positioning",
    "condition-deduction",
    "deal-risk-score",
    "negotiation-leverage-index",
    "offer-recommendation",
    "negotiation-headroom",
    "monthly-ownership-cost",
    "stress-test",
    "buffer-adequacy",
    "decision-confidence",
    "deal-attractiveness",
]


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def reference_date():
    """Fixed reference date for deterministic tests."""
    return date(2024, 6, 1)


@pytest.fixture
def auditor(reference_date):
    return DealAuditor(reference_date=reference_date)


@pytest.fixture
def sample_inputs():
    """Freehold semi, listed just under its valuation range."""
    return DealAuditInputs(
        user_address="14 Acacia Avenue, Reading RG1 4QP",
        api_address="14 ACACIA AVENUE, READING, RG1 4QP",
        asking_price=285000,
        tenure="Freehold",
        sales_in_last_year=6,
        valuation=ValuationInputs(
            valuation_low=290000,
            valuation_median=310000,
            valuation_high=330000,
            confidence_score=72,
            last_sold_date="2019-06-14",
        ),
        comparables=ComparableData(count=14, recency=120, variance=8),
        checklist=ChecklistInputs(items=(
            ChecklistItem("roof", Severity.MEDIUM, "Slipped tiles on rear pitch"),
            ChecklistItem("electrics", Severity.LOW, "Consumer unit predates 2008"),
        )),
        leverage=LeverageFactors(
            days_on_market=95,
            price_drops=1,
            buyer_ready=True,
            chain_free=True,
            buyer_status=BuyerStatus.FIRST_TIME,
        ),
        finance=FinanceInputs(
            deposit=45000,
            interest_rate=4.5,
            loan_term=25,
            monthly_income=5200,
            savings=72000,
        ),
    )


# =============================================================================
# Pipeline
# =============================================================================

class TestDealAuditPipeline:

    def test_every_calculator_runs_in_order(self, auditor, sample_inputs):
        audit = auditor.run(sample_inputs)
        assert [result.id for result in audit.results()] == RESULT_IDS

    def test_sample_leaf_values(self, auditor, sample_inputs):
        audit = auditor.run(sample_inputs)

        assert audit.match_confidence.value == 88
        assert audit.data_coverage.value == 75
        assert audit.valuation_confidence.value == 85
        assert audit.asking_price_position.value.position == PricePosition.BELOW
        assert audit.condition.value.total_estimate == 7250
        assert audit.condition.value.risk_level == RiskLevel.LOW
        assert audit.deal_risk.value == 10
        assert audit.leverage.value == 81

    def test_offer_rebased_on_ask_below_range(self, auditor, sample_inputs):
        offer = auditor.run(sample_inputs).offer.value

        assert offer.anchor == 270750
        assert offer.target == 279300
        assert offer.walk_away == 290000

    def test_headroom_measured_against_offer_target(self, auditor, sample_inputs):
        audit = auditor.run(sample_inputs)

        assert audit.headroom.value.gap == 285000 - audit.offer.value.target
        assert audit.headroom.value.steps[-1].amount == audit.offer.value.target

    def test_buffer_uses_repairs_and_monthly_cost(self, auditor, sample_inputs):
        audit = auditor.run(sample_inputs)
        buffer = audit.buffer.value

        assert buffer.repairs == audit.condition.value.total_estimate
        assert buffer.emergency_fund == 3 * audit.monthly_cost.value.total
        assert buffer.adequacy == BufferAdequacy.TIGHT

    def test_composite_scores(self, auditor, sample_inputs):
        audit = auditor.run(sample_inputs)

        assert audit.stress_test.value.overall_pass is True
        assert audit.decision_confidence.value.level == ConfidenceLevel.HIGH
        assert audit.deal_attractiveness.value.level == AttractivenessLevel.HIGHLY_ATTRACTIVE

    def test_missing_asking_price_prices_from_median(self, auditor, sample_inputs):
        audit = auditor.run(replace(sample_inputs, asking_price=None))

        assert audit.property_price == 310000
        assert audit.asking_price_position.value.score == 65
        assert audit.offer.value.target == 294500

    def test_stale_derived_valuation_is_aged_before_positioning(self, auditor, sample_inputs):
        stale = ValuationInputs(200000, 230000, 250000, last_sold_date="2020-01-01")
        audit = auditor.run(replace(sample_inputs, valuation=stale, asking_price=201000))

        # Ask sits inside the raw range but below the aged one
        assert audit.adjusted_valuation.value.low > 201000
        assert audit.asking_price_position.value.position == PricePosition.BELOW


# =============================================================================
# Serialisation
# =============================================================================

class TestDealAuditRecord:

    def test_to_dict_is_json_serialisable(self, auditor, sample_inputs):
        record = auditor.run(sample_inputs).to_dict()
        encoded = json.dumps(record)

        assert set(record["results"]) == set(RESULT_IDS)
        assert json.loads(encoded)["results"]["condition-deduction"]["value"]["risk_level"] == "low"

    def test_summary(self, auditor, sample_inputs):
        summary = auditor.run(sample_inputs).summary()

        assert summary["confidence_level"] == "High"
        assert summary["attractiveness_level"] == "Highly Attractive"
        assert summary["target_offer"] == 279300
        assert summary["buffer_adequacy"] == "tight"
        assert summary["stress_test_pass"] is True

    def test_explanations_present(self, auditor, sample_inputs):
        for result in auditor.run(sample_inputs).results():
            assert result.explanation.bullets
            assert result.name


# =============================================================================
# Determinism and bounds
# =============================================================================

class TestDeterministicResults:

    def test_same_input_same_output(self, sample_inputs, reference_date):
        first = run_deal_audit(sample_inputs, reference_date).to_dict()
        second = run_deal_audit(sample_inputs, reference_date).to_dict()

        assert first == second

    def test_inputs_are_not_mutated(self, auditor, sample_inputs):
        before = repr(sample_inputs)
        auditor.run(sample_inputs)

        assert repr(sample_inputs) == before


class TestScoreBounds:

    @pytest.mark.parametrize("asking", [None, 1, 150000, 300000, 900000])
    @pytest.mark.parametrize("count,recency,variance", [(0, 2000, 300), (3, 200, 30), (40, 0, 0)])
    def test_scores_within_bounds(self, auditor, sample_inputs, asking, count, recency, variance):
        inputs = replace(
            sample_inputs,
            asking_price=asking,
            comparables=ComparableData(count=count, recency=recency, variance=variance),
        )
        audit = auditor.run(inputs)

        for value in (
            audit.match_confidence.value,
            audit.data_coverage.value,
            audit.deal_risk.value,
            audit.leverage.value,
            audit.asking_price_position.value.score,
            audit.decision_confidence.value.score,
            audit.deal_attractiveness.value.score,
        ):
            assert 0 <= value <= 100
        assert 15 <= audit.valuation_confidence.value <= 100

    def test_more_comparables_never_lower_coverage(self, auditor, sample_inputs):
        scores = [
            auditor.run(replace(sample_inputs, comparables=ComparableData(n, 120, 8))).data_coverage.value
            for n in range(0, 30)
        ]
        assert scores == sorted(scores)
