"""
FastAPI application for the deal audit engine.

Production deployment configuration via environment variables.
"""

import logging
import os
from typing import Any, Dict

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field

from core import (
    DealAuditValidationError,
    DealAuditor,
    RiskAppetiteLevel,
    parse_deal_audit_inputs,
)
from reporting import DealAuditReportGenerator, report_filename
from utils.config import Config

logger = logging.getLogger(__name__)

# =============================================================================
# Environment Configuration
# =============================================================================

IS_PRODUCTION = os.getenv("RAILWAY_ENVIRONMENT") is not None or os.getenv("PRODUCTION", "").lower() == "true"

# In production, only explicitly allowed origins
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "").split(",") if os.getenv("ALLOWED_ORIGINS") else []
if not ALLOWED_ORIGINS and not IS_PRODUCTION:
    ALLOWED_ORIGINS = ["http://localhost:8000", "http://127.0.0.1:8000"]

# Debug mode is never enabled in production
DEBUG_MODE = os.getenv("DEBUG", "false").lower() == "true" and not IS_PRODUCTION


# =============================================================================
# API Request Models
# =============================================================================

class DealAuditReportRequest(BaseModel):
    """Request body for PDF generation."""
    reference_id: str = Field(default="audit", max_length=64)
    inputs: Dict[str, Any]


def _default_risk_appetite(config: Config) -> RiskAppetiteLevel:
    level = RiskAppetiteLevel.from_string(config.default_risk_appetite)
    if level is None:
        logger.warning(
            "Unknown DEFAULT_RISK_APPETITE %r, using balanced", config.default_risk_appetite
        )
        return RiskAppetiteLevel.BALANCED
    return level


def create_app(config: Config = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or Config.load()
    default_risk_appetite = _default_risk_appetite(config)

    app = FastAPI(
        title="Deal Audit Engine",
        description="Property deal scoring: offers, affordability and risk",
        version="0.1.0",
        docs_url=None if IS_PRODUCTION else "/docs",
        redoc_url=None if IS_PRODUCTION else "/redoc",
        openapi_url=None if IS_PRODUCTION else "/openapi.json",
        debug=DEBUG_MODE,
    )

    # Healthchecks are registered first and perform no IO.
    @app.get("/", include_in_schema=False)
    def root():
        return {"status": "ok"}

    @app.get("/health", include_in_schema=False)
    def health():
        return {
            "status": "healthy",
            "version": "0.1.0",
            "environment": "production" if IS_PRODUCTION else "development",
        }

    if ALLOWED_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=ALLOWED_ORIGINS,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    report_generator = DealAuditReportGenerator(output_dir=config.reports_dir)

    def _audit(data: Dict[str, Any]):
        try:
            inputs = parse_deal_audit_inputs(data, default_risk_appetite=default_risk_appetite)
        except DealAuditValidationError as e:
            raise HTTPException(status_code=422, detail={"errors": e.errors})
        return DealAuditor().run(inputs)

    @app.post("/api/deal-audit")
    def deal_audit(data: Dict[str, Any] = Body(...)):
        """
        Run the full deal audit pipeline.

        Returns:
            - summary: headline scores and offer figures
            - results: every calculator result keyed by calculator id
        """
        return _audit(data).to_dict()

    @app.post("/api/deal-audit/report")
    def deal_audit_report(request_data: DealAuditReportRequest):
        """Run the audit and return the PDF report."""
        audit = _audit(request_data.inputs)
        pdf_bytes = report_generator.generate_to_buffer(audit, request_data.reference_id)

        logger.info("Generated deal audit report %s (%d bytes)", request_data.reference_id, len(pdf_bytes))
        return Response(
            content=pdf_bytes,
            media_type="application/pdf",
            headers={"Content-Disposition": f'inline; filename="{report_filename(request_data.reference_id)}"'},
        )

    return app


# Create app instance for uvicorn
app = create_app()
