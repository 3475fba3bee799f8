"""
Deal Audit Report

Generates a buyer-facing PDF from a completed DealAudit. Uses ReportLab
for deterministic PDF generation.

Output Structure:
1. Cover (reference, date, headline scores, offer figures)
2. Headline Scores (decision confidence, deal attractiveness)
3. Calculator Detail (one block per calculator: headline value,
   explanation bullets, assumptions)
4. Disclaimer
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from io import BytesIO
from pathlib import Path
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_JUSTIFY, TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import (
    KeepTogether,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from core.calculators import (
    AskingPricePosition,
    BufferBreakdown,
    CalculatorResult,
    ConditionDeduction,
    MonthlyCosts,
    NegotiationHeadroom,
    OfferRecommendation,
    StressTestResult,
    ValuationRange,
)
from core.deal_audit import DealAudit
from core.scoring import CompositeScore
from utils.config import Config
from utils.formatting import format_currency

logger = logging.getLogger(__name__)


@dataclass
class ReportSuccess:
    """Returned when PDF generation succeeds."""
    path: Path
    sections: int


# =============================================================================
# Color Palette
# =============================================================================

class Palette:
    """Print-friendly palette: charcoal text on white, navy accent."""
    BLACK = colors.Color(0.1, 0.1, 0.1)
    CHARCOAL = colors.Color(0.2, 0.2, 0.22)
    SLATE = colors.Color(0.35, 0.38, 0.42)
    GRAY = colors.Color(0.5, 0.5, 0.5)
    LIGHT_GRAY = colors.Color(0.85, 0.85, 0.85)
    PALE_GRAY = colors.Color(0.95, 0.95, 0.95)
    WHITE = colors.white

    ACCENT = colors.Color(0.15, 0.25, 0.4)


# =============================================================================
# Style Configuration
# =============================================================================

def get_report_styles() -> dict:
    """Paragraph styles for the deal audit report."""
    styles = getSampleStyleSheet()

    styles.add(ParagraphStyle(
        name='CoverBrand',
        parent=styles['Normal'],
        fontSize=11,
        leading=14,
        textColor=Palette.BLACK,
        alignment=TA_LEFT,
        fontName='Helvetica',
        letterSpacing=1.5,
    ))

    styles.add(ParagraphStyle(
        name='CoverTitle',
        parent=styles['Normal'],
        fontSize=22,
        leading=28,
        textColor=Palette.CHARCOAL,
        fontName='Helvetica-Bold',
        spaceAfter=8*mm,
    ))

    styles.add(ParagraphStyle(
        name='CoverSubtitle',
        parent=styles['Normal'],
        fontSize=11,
        leading=15,
        textColor=Palette.SLATE,
        fontName='Helvetica',
        spaceAfter=3*mm,
    ))

    styles.add(ParagraphStyle(
        name='SectionTitle',
        parent=styles['Normal'],
        fontSize=14,
        leading=18,
        textColor=Palette.CHARCOAL,
        fontName='Helvetica-Bold',
        spaceBefore=18,
        spaceAfter=12,
    ))

    styles.add(ParagraphStyle(
        name='CalculatorTitle',
        parent=styles['Normal'],
        fontSize=11,
        leading=14,
        textColor=Palette.ACCENT,
        fontName='Helvetica-Bold',
        spaceBefore=12,
        spaceAfter=4,
    ))

    styles.add(ParagraphStyle(
        name='Headline',
        parent=styles['Normal'],
        fontSize=10,
        leading=13,
        textColor=Palette.CHARCOAL,
        fontName='Helvetica-Bold',
        spaceAfter=4,
    ))

    styles['BodyText'].fontSize = 9.5
    styles['BodyText'].leading = 14.25
    styles['BodyText'].textColor = Palette.CHARCOAL
    styles['BodyText'].spaceAfter = 6
    styles['BodyText'].alignment = TA_JUSTIFY
    styles['BodyText'].fontName = 'Helvetica'

    styles.add(ParagraphStyle(
        name='BulletText',
        parent=styles['BodyText'],
        fontSize=9,
        leading=13,
        leftIndent=6*mm,
        bulletIndent=2*mm,
        spaceAfter=3,
    ))

    styles.add(ParagraphStyle(
        name='AssumptionText',
        parent=styles['BulletText'],
        fontSize=8,
        leading=11,
        textColor=Palette.GRAY,
        fontName='Helvetica-Oblique',
    ))

    styles.add(ParagraphStyle(
        name='Disclaimer',
        parent=styles['Normal'],
        fontSize=7.5,
        leading=11.25,
        textColor=Palette.GRAY,
        alignment=TA_JUSTIFY,
        fontName='Helvetica',
        spaceBefore=14,
        spaceAfter=6,
    ))

    return styles


# =============================================================================
# Headline values
# =============================================================================

def headline(result: CalculatorResult) -> str:
    """One-line rendering of a calculator's primary value."""
    value = result.value

    if isinstance(value, CompositeScore):
        return f"{value.score}/100 ({value.level.value})"
    if isinstance(value, ValuationRange):
        return (
            f"{format_currency(value.low)} to {format_currency(value.high)} "
            f"(median {format_currency(value.median)})"
        )
    if isinstance(value, AskingPricePosition):
        return f"{value.position.value.capitalize()} range, {value.posture.value} pricing"
    if isinstance(value, ConditionDeduction):
        return f"{format_currency(value.total_estimate)} repairs ({value.risk_level.value} risk)"
    if isinstance(value, OfferRecommendation):
        return f"Target offer {format_currency(value.target)}"
    if isinstance(value, NegotiationHeadroom):
        return f"{format_currency(value.gap)} headroom ({value.gap_percentage:.1f}%)"
    if isinstance(value, MonthlyCosts):
        return f"{format_currency(value.total)} per month"
    if isinstance(value, StressTestResult):
        return "PASS" if value.overall_pass else "FAIL"
    if isinstance(value, BufferBreakdown):
        return value.adequacy.value.capitalize()
    if isinstance(value, (int, float)):
        return f"{value:g}/100"
    return str(value)


def report_filename(reference_id: str) -> str:
    """PDF file name for a reference; characters outside [A-Za-z0-9_-] become '_'."""
    safe_reference = re.sub(r"[^A-Za-z0-9_-]", "_", reference_id) or "audit"
    return f"deal-audit-{safe_reference}.pdf"


# =============================================================================
# Report Generator Class
# =============================================================================

class DealAuditReportGenerator:
    """
    Generates deal audit PDFs.

    Usage:
        generator = DealAuditReportGenerator()
        result = generator.generate_report(audit, "REF-001")
    """

    PAGE_WIDTH, PAGE_HEIGHT = A4
    MARGIN_LEFT = 18*mm
    MARGIN_RIGHT = 18*mm
    MARGIN_TOP = 18*mm
    MARGIN_BOTTOM = 22*mm

    WORDMARK = "DEAL AUDIT"

    def __init__(self, output_dir: Optional[Path] = None, report_date: Optional[date] = None):
        self.styles = get_report_styles()
        self.output_dir = Path(output_dir) if output_dir else Path(Config.load().reports_dir)
        self.report_date = report_date or date.today()

    def generate_report(self, audit: DealAudit, reference_id: str) -> ReportSuccess:
        """
        Write the audit PDF to the output directory.

        Args:
            audit: Completed deal audit
            reference_id: Shown on the cover and used in the file name

        Returns:
            ReportSuccess with the written path
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)

        output_path = self.output_dir / report_filename(reference_id)
        output_path.write_bytes(self.generate_to_buffer(audit, reference_id))

        logger.info("Deal audit report written to %s", output_path)
        return ReportSuccess(path=output_path, sections=len(audit.results()))

    def generate_to_buffer(self, audit: DealAudit, reference_id: str = "") -> bytes:
        """Generate PDF and return as bytes (for streaming or testing)."""
        buffer = BytesIO()
        self._build_document(audit, reference_id, buffer)
        return buffer.getvalue()

    def _build_document(self, audit: DealAudit, reference_id: str, buffer: BytesIO):
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=self.MARGIN_LEFT,
            rightMargin=self.MARGIN_RIGHT,
            topMargin=self.MARGIN_TOP,
            bottomMargin=self.MARGIN_BOTTOM,
            title=f"Deal Audit {reference_id}".strip(),
            subject="Property deal audit",
        )

        story = []
        story.extend(self._build_cover(audit, reference_id))
        story.append(PageBreak())
        story.extend(self._build_headline_scores(audit))
        story.extend(self._build_calculator_detail(audit))
        story.extend(self._build_disclaimer())

        doc.build(
            story,
            onFirstPage=self._draw_page_frame,
            onLaterPages=self._draw_page_frame,
        )

    def _draw_page_frame(self, canvas_obj: canvas.Canvas, doc):
        """Footer: wordmark left, page number right."""
        canvas_obj.saveState()
        canvas_obj.setFont('Helvetica', 7)
        canvas_obj.setFillColor(Palette.GRAY)
        canvas_obj.drawString(self.MARGIN_LEFT, self.MARGIN_BOTTOM - 10*mm, self.WORDMARK)
        canvas_obj.drawRightString(
            self.PAGE_WIDTH - self.MARGIN_RIGHT,
            self.MARGIN_BOTTOM - 10*mm,
            f"{doc.page}",
        )
        canvas_obj.restoreState()

    # =========================================================================
    # Sections
    # =========================================================================

    def _build_cover(self, audit: DealAudit, reference_id: str) -> list:
        elements = [
            Paragraph(self.WORDMARK, self.styles['CoverBrand']),
            Spacer(1, 30*mm),
            Paragraph("Property Deal Audit", self.styles['CoverTitle']),
        ]

        if reference_id:
            elements.append(Paragraph(f"Reference: {escape(reference_id)}", self.styles['CoverSubtitle']))
        elements.append(Paragraph(
            f"Date: {self.report_date.strftime('%d %B %Y')}",
            self.styles['CoverSubtitle'],
        ))
        elements.append(Paragraph(
            f"Property price: {format_currency(audit.property_price)}",
            self.styles['CoverSubtitle'],
        ))

        elements.append(Spacer(1, 12*mm))

        offer = audit.offer.value
        rows = [
            ["Anchor offer", "Target offer", "Walk-away"],
            [format_currency(offer.anchor), format_currency(offer.target), format_currency(offer.walk_away)],
        ]
        elements.append(self._table(rows, [58*mm, 58*mm, 58*mm]))

        return elements

    def _build_headline_scores(self, audit: DealAudit) -> list:
        elements = [Paragraph("Headline Scores", self.styles['SectionTitle'])]

        rows = [["Measure", "Score", "Level"]]
        for result in (audit.decision_confidence, audit.deal_attractiveness):
            rows.append([result.name, f"{result.value.score}/100", result.value.level.value])
        elements.append(self._table(rows, [70*mm, 40*mm, 64*mm]))
        elements.append(Spacer(1, 8))

        elements.append(Paragraph(escape(audit.decision_confidence.value.summary), self.styles['BodyText']))
        elements.append(Paragraph(escape(audit.deal_attractiveness.value.summary), self.styles['BodyText']))

        return elements

    def _build_calculator_detail(self, audit: DealAudit) -> list:
        elements = [Paragraph("Calculator Detail", self.styles['SectionTitle'])]

        for result in audit.results():
            block = [
                Paragraph(escape(result.name), self.styles['CalculatorTitle']),
                Paragraph(escape(headline(result)), self.styles['Headline']),
            ]
            for bullet in result.explanation.bullets:
                block.append(Paragraph(f"• {escape(bullet)}", self.styles['BulletText']))
            for assumption in result.explanation.assumptions:
                block.append(Paragraph(f"Assumes: {escape(assumption)}", self.styles['AssumptionText']))
            elements.append(KeepTogether(block))

        return elements

    def _build_disclaimer(self) -> list:
        return [
            Spacer(1, 6*mm),
            Paragraph(
                "This audit is generated from the figures supplied and public market data. "
                "It is not a RICS valuation, a survey, or financial advice. All figures are "
                "indicative; obtain a professional valuation, survey and mortgage advice "
                "before committing to a purchase.",
                self.styles['Disclaimer'],
            ),
        ]

    def _table(self, rows: list, col_widths: list) -> Table:
        table = Table(rows, colWidths=col_widths)
        table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('BACKGROUND', (0, 0), (-1, 0), Palette.CHARCOAL),
            ('TEXTCOLOR', (0, 0), (-1, 0), Palette.WHITE),
            ('TEXTCOLOR', (0, 1), (-1, -1), Palette.CHARCOAL),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('GRID', (0, 0), (-1, -1), 0.5, Palette.LIGHT_GRAY),
            ('TOPPADDING', (0, 0), (-1, -1), 3*mm),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 3*mm),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [Palette.WHITE, Palette.PALE_GRAY]),
        ]))
        return table


# =============================================================================
# Convenience Function
# =============================================================================

def generate_report(audit: DealAudit, reference_id: str, output_dir: Optional[Path] = None) -> ReportSuccess:
    """
    Generate a deal audit PDF.

    Example:
        from core import run_deal_audit
        from reporting import generate_report

        result = generate_report(run_deal_audit(inputs), "REF-001")
        print(f"Report generated: {result.path}")
    """
    return DealAuditReportGenerator(output_dir=output_dir).generate_report(audit, reference_id)
