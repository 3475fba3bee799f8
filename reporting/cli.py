#!/usr/bin/env python3
"""
CLI for running deal audits.

Usage:
    python -m reporting.cli sample [--pdf]
    python -m reporting.cli audit <inputs_json> [--pdf] [--reference REF]

Examples:
    # Audit the built-in sample property
    python -m reporting.cli sample

    # Audit a property from a JSON file and write the PDF report
    python -m reporting.cli audit inputs/acacia_avenue.json --pdf
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from core.calculators import RiskAppetiteLevel
from core.deal_audit import DealAudit, run_deal_audit
from core.validation import DealAuditValidationError, parse_deal_audit_inputs
from utils.config import Config
from utils.logging_setup import configure_logging

from .pdf_generator import generate_report
from .sample import create_sample_inputs

logger = logging.getLogger(__name__)


def _run(data: dict, args, config: Config) -> int:
    default_level = RiskAppetiteLevel.from_string(config.default_risk_appetite) or RiskAppetiteLevel.BALANCED

    try:
        inputs = parse_deal_audit_inputs(data, default_risk_appetite=default_level)
    except DealAuditValidationError as e:
        print("Error: Invalid deal audit input:", file=sys.stderr)
        for error in e.errors:
            print(f"  - {error}", file=sys.stderr)
        return 1

    audit = run_deal_audit(inputs)
    print(json.dumps(audit.to_dict(), indent=2))

    if args.pdf:
        _write_pdf(audit, args.reference, config)
    return 0


def _write_pdf(audit: DealAudit, reference: str, config: Config):
    result = generate_report(audit, reference, output_dir=Path(config.reports_dir))
    print(f"Report generated: {result.path}", file=sys.stderr)


def cmd_sample(args, config: Config) -> int:
    """Audit the built-in sample property."""
    return _run(create_sample_inputs(), args, config)


def cmd_audit(args, config: Config) -> int:
    """Audit a property described by a JSON file."""
    input_path = Path(args.inputs_file)

    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1

    logger.info("Loading deal audit input from %s", input_path)

    try:
        with open(input_path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON: {e}", file=sys.stderr)
        return 1

    return _run(data, args, config)


def main(argv=None) -> int:
    """Main CLI entry point."""
    config = Config.load()
    configure_logging(config.log_level)

    parser = argparse.ArgumentParser(
        description="Deal Audit Engine - property deal scoring",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m reporting.cli sample
    python -m reporting.cli audit inputs/acacia_avenue.json --pdf

Output:
    The audit JSON is printed to stdout.
    PDF reports are saved to: $REPORTS_DIR/deal-audit-<reference>.pdf
        """,
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    sample_parser = subparsers.add_parser(
        "sample",
        help="Audit a built-in sample property",
    )
    sample_parser.set_defaults(func=cmd_sample, reference="sample")

    audit_parser = subparsers.add_parser(
        "audit",
        help="Audit a property from a JSON input file",
    )
    audit_parser.add_argument(
        "inputs_file",
        help="Path to JSON deal audit input",
    )
    audit_parser.add_argument(
        "--reference",
        default="audit",
        help="Reference used in the PDF file name",
    )
    audit_parser.set_defaults(func=cmd_audit)

    for sub in (sample_parser, audit_parser):
        sub.add_argument(
            "--pdf",
            action="store_true",
            help="Also write the PDF report",
        )

    args = parser.parse_args(argv)
    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())
