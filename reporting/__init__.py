"""
Reporting module for the Deal Audit Engine.

Generates buyer-facing deal audit PDFs from a completed DealAudit.

Usage:
    from core import parse_deal_audit_inputs, run_deal_audit
    from reporting import generate_report, create_sample_inputs

    audit = run_deal_audit(parse_deal_audit_inputs(create_sample_inputs()))
    result = generate_report(audit, "REF-001")
"""

from .pdf_generator import (
    DealAuditReportGenerator,
    ReportSuccess,
    generate_report,
    headline,
    report_filename,
)
from .sample import create_sample_inputs

__all__ = [
    "DealAuditReportGenerator",
    "ReportSuccess",
    "generate_report",
    "headline",
    "report_filename",
    "create_sample_inputs",
]
