"""
Tests for the deal audit web API
"""

import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from fastapi.testclient import TestClient

from reporting.sample import create_sample_inputs
from utils.config import Config
from web.app import create_app


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def client(tmp_path):
    config = Config(reports_dir=str(tmp_path))
    return TestClient(create_app(config))


# =============================================================================
# Health
# =============================================================================

class TestHealth:

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"


# =============================================================================
# Deal audit
# =============================================================================

class TestDealAuditEndpoint:

    def test_runs_full_audit(self, client):
        response = client.post("/api/deal-audit", json=create_sample_inputs())
        body = response.json()

        assert response.status_code == 200
        assert len(body["results"]) == 15
        assert body["summary"]["confidence_level"] == "High"
        assert body["results"]["offer-recommendation"]["value"]["walk_away"] == 290000

    def test_validation_errors_return_422(self, client):
        data = create_sample_inputs()
        data["valuation"]["valuationLow"] = 999999

        response = client.post("/api/deal-audit", json=data)

        assert response.status_code == 422
        assert "valuation.valuation_low must not exceed valuation.valuation_high" in (
            response.json()["detail"]["errors"]
        )

    def test_non_string_address_returns_422(self, client):
        data = create_sample_inputs()
        data["userAddress"] = 14

        response = client.post("/api/deal-audit", json=data)

        assert response.status_code == 422
        assert any(
            error.startswith("user_address must be a string")
            for error in response.json()["detail"]["errors"]
        )

    def test_non_object_body_rejected(self, client):
        response = client.post("/api/deal-audit", json=[1, 2, 3])
        assert response.status_code == 422


class TestDealAuditReportEndpoint:

    def test_returns_pdf(self, client):
        response = client.post(
            "/api/deal-audit/report",
            json={"reference_id": "REF-001", "inputs": create_sample_inputs()},
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")
        assert "deal-audit-REF-001.pdf" in response.headers["content-disposition"]

    def test_invalid_inputs_return_422(self, client):
        response = client.post(
            "/api/deal-audit/report",
            json={"reference_id": "REF-002", "inputs": {}},
        )

        assert response.status_code == 422
        assert "valuation is required" in response.json()["detail"]["errors"]
