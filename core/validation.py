"""
Deal Audit Validation - structural checks for the calling layer

The calculators assume well-typed, already-validated input. This module is
where the calling layer (web API, CLI) rejects structurally invalid
requests before they reach the pipeline: missing required fields,
negative counts or amounts, an inverted valuation range, unknown enum
values. All errors are collected and reported together.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from .calculators import (
    BuyerStatus,
    ChecklistInputs,
    ChecklistItem,
    ComparableData,
    FinanceInputs,
    LeverageFactors,
    RiskAppetite,
    RiskAppetiteLevel,
    Severity,
    ValuationInputs,
)
from .deal_audit import DealAuditInputs

logger = logging.getLogger(__name__)


class DealAuditValidationError(ValueError):
    """Raised when deal audit input is structurally invalid."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


# =============================================================================
# Field access helpers
# =============================================================================


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _field(data: dict[str, Any], name: str, *aliases: str) -> Any:
    """Look a field up by snake_case name, camelCase name, then aliases."""
    for key in (name, _camel(name), *aliases):
        if key in data and data[key] is not None:
            return data[key]
    return None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _number(
    data: dict[str, Any],
    name: str,
    section: str,
    errors: list[str],
    required: bool = True,
    default: Optional[float] = 0,
) -> Optional[float]:
    value = _field(data, name)
    label = f"{section}.{name}" if section else name
    if value is None:
        if required:
            errors.append(f"{label} is required")
        return default
    if not _is_number(value):
        errors.append(f"{label} must be a number: {value!r}")
        return default
    if value < 0:
        errors.append(f"{label} must be non-negative")
        return default
    return value


def _string(data: dict[str, Any], name: str, errors: list[str], *aliases: str) -> Optional[str]:
    value = _field(data, name, *aliases)
    if value is not None and not isinstance(value, str):
        errors.append(f"{name} must be a string: {value!r}")
        return None
    return value


def _boolean(data: dict[str, Any], name: str, section: str, errors: list[str]) -> bool:
    """Absent flags are False; anything other than a JSON boolean is rejected."""
    value = _field(data, name)
    if value is None:
        return False
    if not isinstance(value, bool):
        errors.append(f"{section}.{name} must be true or false: {value!r}")
        return False
    return value


def _section(data: dict[str, Any], name: str, errors: list[str]) -> dict[str, Any]:
    value = _field(data, name)
    if value is None:
        errors.append(f"{name} is required")
        return {}
    if not isinstance(value, dict):
        errors.append(f"{name} must be an object")
        return {}
    return value


# =============================================================================
# Section parsers
# =============================================================================


def _parse_valuation(data: dict[str, Any], errors: list[str]) -> ValuationInputs:
    section = _section(data, "valuation", errors)
    low = _number(section, "valuation_low", "valuation", errors)
    median = _number(section, "valuation_median", "valuation", errors)
    high = _number(section, "valuation_high", "valuation", errors)
    confidence = _number(section, "confidence_score", "valuation", errors, required=False)

    if section and low > high:
        errors.append("valuation.valuation_low must not exceed valuation.valuation_high")
    elif section and not low <= median <= high:
        errors.append("valuation.valuation_median must lie within the valuation range")

    last_sold = _field(section, "last_sold_date")
    if last_sold is not None:
        if isinstance(last_sold, str):
            try:
                date.fromisoformat(last_sold.strip()[:10])
            except ValueError:
                errors.append(f"valuation.last_sold_date is not an ISO date: {last_sold}")
                last_sold = None
        elif not isinstance(last_sold, date):
            errors.append(f"valuation.last_sold_date is not an ISO date: {last_sold!r}")
            last_sold = None

    return ValuationInputs(
        valuation_low=low,
        valuation_median=median,
        valuation_high=high,
        confidence_score=confidence,
        last_sold_date=last_sold,
    )


def _parse_comparables(data: dict[str, Any], errors: list[str]) -> ComparableData:
    section = _section(data, "comparables", errors)
    count = _number(section, "count", "comparables", errors)
    if _is_number(count) and count != int(count):
        errors.append("comparables.count must be a whole number")
    return ComparableData(
        count=int(count),
        recency=_number(section, "recency", "comparables", errors),
        variance=_number(section, "variance", "comparables", errors),
    )


def _parse_checklist(data: dict[str, Any], errors: list[str]) -> ChecklistInputs:
    raw = _field(data, "checklist")
    if raw is None:
        return ChecklistInputs()
    if isinstance(raw, dict):
        raw = raw.get("items", [])
    if not isinstance(raw, list):
        errors.append("checklist must be a list of items")
        return ChecklistInputs()

    items = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            errors.append(f"checklist[{index}] must be an object")
            continue
        category = entry.get("category")
        if not category or not str(category).strip():
            errors.append(f"checklist[{index}].category is required")
        severity_raw = entry.get("severity")
        severity = Severity.from_string(severity_raw) if isinstance(severity_raw, str) else None
        if severity is None:
            errors.append(f"checklist[{index}].severity must be low, medium or high: {severity_raw!r}")
            continue
        items.append(ChecklistItem(
            category=str(category or "").strip(),
            severity=severity,
            description=str(entry.get("description") or ""),
        ))
    return ChecklistInputs(items=tuple(items))


def _parse_leverage(data: dict[str, Any], errors: list[str]) -> LeverageFactors:
    section = _section(data, "leverage", errors)
    days = _number(section, "days_on_market", "leverage", errors)
    drops = _number(section, "price_drops", "leverage", errors)

    status_raw = _field(section, "buyer_status")
    status: Optional[BuyerStatus] = None
    if status_raw is not None:
        status = BuyerStatus.from_string(status_raw) if isinstance(status_raw, str) else None
        if status is None:
            errors.append(f"leverage.buyer_status is not recognised: {status_raw!r}")

    return LeverageFactors(
        days_on_market=int(days),
        price_drops=int(drops),
        buyer_ready=_boolean(section, "buyer_ready", "leverage", errors),
        chain_free=_boolean(section, "chain_free", "leverage", errors),
        buyer_status=status,
    )


def _parse_finance(data: dict[str, Any], errors: list[str]) -> FinanceInputs:
    section = _section(data, "finance", errors)
    return FinanceInputs(
        deposit=_number(section, "deposit", "finance", errors),
        interest_rate=_number(section, "interest_rate", "finance", errors),
        loan_term=int(_number(section, "loan_term", "finance", errors)),
        monthly_income=_number(section, "monthly_income", "finance", errors),
        savings=_number(section, "savings", "finance", errors),
        service_charge=_number(section, "service_charge", "finance", errors, required=False),
        ground_rent=_number(section, "ground_rent", "finance", errors, required=False),
    )


def _parse_risk_appetite(
    data: dict[str, Any],
    errors: list[str],
    default_level: RiskAppetiteLevel,
) -> RiskAppetite:
    raw = _field(data, "risk_appetite")
    if raw is None:
        return RiskAppetite(level=default_level)
    if isinstance(raw, dict):
        raw = raw.get("level")
    level = RiskAppetiteLevel.from_string(raw) if isinstance(raw, str) else None
    if level is None:
        errors.append(f"risk_appetite must be conservative, balanced or aggressive: {raw!r}")
        return RiskAppetite(level=default_level)
    return RiskAppetite(level=level)


# =============================================================================
# Public API
# =============================================================================


def parse_deal_audit_inputs(
    data: dict[str, Any],
    default_risk_appetite: RiskAppetiteLevel = RiskAppetiteLevel.BALANCED,
) -> DealAuditInputs:
    """
    Build DealAuditInputs from a JSON-style dictionary.

    Keys may be snake_case or camelCase. All structural problems are
    collected before raising.

    Args:
        data: Raw request body
        default_risk_appetite: Used when the request does not name one

    Returns:
        DealAuditInputs ready for DealAuditor.run()

    Raises:
        DealAuditValidationError: If any structural rule is violated
    """
    if not isinstance(data, dict):
        raise DealAuditValidationError(["request body must be an object"])

    errors: list[str] = []

    asking_price = _number(data, "asking_price", "", errors, required=False, default=None)
    sales_in_last_year = _number(data, "sales_in_last_year", "", errors, required=False)

    tenure = _string(data, "tenure", errors)

    inputs = DealAuditInputs(
        valuation=_parse_valuation(data, errors),
        comparables=_parse_comparables(data, errors),
        finance=_parse_finance(data, errors),
        leverage=_parse_leverage(data, errors),
        checklist=_parse_checklist(data, errors),
        risk_appetite=_parse_risk_appetite(data, errors, default_risk_appetite),
        asking_price=asking_price,
        tenure=tenure or "",
        user_address=_string(data, "user_address", errors, "userTypedAddress"),
        api_address=_string(data, "api_address", errors),
        sales_in_last_year=int(sales_in_last_year),
    )

    if errors:
        logger.warning("Deal audit input rejected: %d error(s)", len(errors))
        raise DealAuditValidationError(errors)

    return inputs


def validate_deal_audit_inputs(data: dict[str, Any]) -> list[str]:
    """
    Validate raw deal audit input without raising.

    Returns:
        List of error messages (empty if valid)
    """
    try:
        parse_deal_audit_inputs(data)
    except DealAuditValidationError as exc:
        return exc.errors
    return []
