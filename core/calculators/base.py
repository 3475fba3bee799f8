"""
Result envelope shared by every calculator and composite scorer.

Each calculator returns a CalculatorResult: a stable id, a display name,
the primary value and an advisory explanation. The explanation is for
presentation only and is never read back by other calculators.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any, Generic, Iterable, Optional, Tuple, TypeVar

from utils.formatting import round_half_up

T = TypeVar("T")


@dataclass(frozen=True)
class Explanation:
    """Human-readable reasoning behind a calculator value."""

    bullets: Tuple[str, ...] = ()
    assumptions: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "bullets": list(self.bullets),
            "assumptions": list(self.assumptions),
        }


@dataclass(frozen=True)
class CalculatorResult(Generic[T]):
    """
    Uniform output of a calculator.

    Immutable and produced fresh per call.
    """

    id: str
    name: str
    value: T
    explanation: Explanation = field(default_factory=Explanation)

    def to_dict(self) -> dict:
        """Convert to a JSON-serialisable dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "value": to_serialisable(self.value),
            "explanation": self.explanation.to_dict(),
        }


def make_result(
    calculator_id: str,
    name: str,
    value: T,
    bullets: Iterable[str],
    assumptions: Iterable[str],
) -> CalculatorResult[T]:
    """Build a CalculatorResult, freezing the bullet and assumption lists."""
    return CalculatorResult(
        id=calculator_id,
        name=name,
        value=value,
        explanation=Explanation(
            bullets=tuple(bullets),
            assumptions=tuple(assumptions),
        ),
    )


def to_serialisable(value: Any) -> Any:
    """
    Convert calculator values into plain JSON types.

    Enums become their string value, dataclasses become dicts,
    tuples become lists.
    """
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_serialisable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [to_serialisable(v) for v in value]
    if isinstance(value, dict):
        return {k: to_serialisable(v) for k, v in value.items()}
    return value


# =============================================================================
# Numeric helpers
# =============================================================================

def clamp(value: float, lower: float = 0, upper: float = 100) -> float:
    """Clamp value into [lower, upper]."""
    return max(lower, min(upper, value))


def percent_of(amount: float, base: float) -> float:
    """amount as a percentage of base; 0.0 when base is not positive."""
    if base <= 0:
        return 0.0
    return amount * 100 / base


def affordability_ratio(monthly_cost: float, monthly_income: float) -> Optional[float]:
    """
    Monthly cost as a percentage of monthly income.

    Returns 0.0 when there is nothing to pay, and None when a positive
    cost is measured against zero or negative income.
    """
    if monthly_cost <= 0:
        return 0.0
    if monthly_income <= 0:
        return None
    return monthly_cost * 100 / monthly_income


__all__ = [
    "Explanation",
    "CalculatorResult",
    "make_result",
    "to_serialisable",
    "clamp",
    "percent_of",
    "affordability_ratio",
    "round_half_up",
]
