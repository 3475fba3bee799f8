"""
Input value objects and banding tables for the deal-scoring calculators.

All inputs are created by the caller per request, read once and discarded.
Calculators never mutate them, so every dataclass here is frozen.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Final, Mapping, Optional, Tuple, Union


# =============================================================================
# Enumerations
# =============================================================================

class Severity(Enum):
    """Severity of a viewing-checklist finding."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_string(cls, value: str) -> Optional["Severity"]:
        """Convert string to Severity, case-insensitive."""
        normalised = value.lower().strip()
        for member in cls:
            if member.value == normalised:
                return member
        return None


class RiskLevel(Enum):
    """Overall condition risk derived from checklist findings."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PricePosition(Enum):
    """Where the asking price sits relative to the valuation range."""
    BELOW = "below"
    WITHIN = "within"
    ABOVE = "above"


class PricingPosture(Enum):
    """How the seller appears to have priced the property."""
    AGGRESSIVE = "aggressive"
    BALANCED = "balanced"
    OPTIMISTIC = "optimistic"
    VERY_OPTIMISTIC = "very-optimistic"


class BufferAdequacy(Enum):
    """Whether savings cover the up-front cash requirement."""
    ADEQUATE = "adequate"
    TIGHT = "tight"
    INSUFFICIENT = "insufficient"


class BuyerStatus(Enum):
    """Buyer's position in the purchase chain."""
    FIRST_TIME = "first-time"
    CHAIN_FREE = "chain-free"
    SUBJECT_TO_SALE = "subject-to-sale"
    CASH = "cash"

    @classmethod
    def from_string(cls, value: str) -> Optional["BuyerStatus"]:
        """Convert string to BuyerStatus, case-insensitive."""
        normalised = value.lower().strip().replace("_", "-")
        for member in cls:
            if member.value == normalised:
                return member
        return None


class RiskAppetiteLevel(Enum):
    """Buyer's negotiation risk appetite."""
    CONSERVATIVE = "conservative"
    BALANCED = "balanced"
    AGGRESSIVE = "aggressive"

    @classmethod
    def from_string(cls, value: str) -> Optional["RiskAppetiteLevel"]:
        """Convert string to RiskAppetiteLevel, case-insensitive."""
        normalised = value.lower().strip()
        for member in cls:
            if member.value == normalised:
                return member
        return None


class Tenure(Enum):
    """
    Property tenure type.

    Free-text tenure strings are classified by containment, so
    "Leasehold (125 years)" is leasehold. Anything else is unknown.
    """
    FREEHOLD = "freehold"
    LEASEHOLD = "leasehold"

    @classmethod
    def classify(cls, value: Optional[str]) -> Optional["Tenure"]:
        """Classify a free-text tenure string; None when unrecognised."""
        if not value:
            return None
        lowered = value.lower()
        if cls.LEASEHOLD.value in lowered:
            return cls.LEASEHOLD
        if cls.FREEHOLD.value in lowered:
            return cls.FREEHOLD
        return None


# =============================================================================
# Banding tables
# =============================================================================

@dataclass(frozen=True)
class CostBand:
    """Indicative repair cost range in GBP."""
    minimum: int
    maximum: int

    @property
    def midpoint(self) -> float:
        return (self.minimum + self.maximum) / 2


@dataclass(frozen=True)
class OfferMultipliers:
    """Fractions of the median valuation for each offer figure."""
    anchor: float
    target: float
    walk_away: float


SEVERITY_COST_BANDS: Final[Mapping[Severity, CostBand]] = MappingProxyType({
    Severity.LOW: CostBand(500, 2000),
    Severity.MEDIUM: CostBand(2000, 10000),
    Severity.HIGH: CostBand(10000, 50000),
})

RISK_APPETITE_MULTIPLIERS: Final[Mapping[RiskAppetiteLevel, OfferMultipliers]] = MappingProxyType({
    RiskAppetiteLevel.CONSERVATIVE: OfferMultipliers(anchor=0.85, target=0.92, walk_away=0.98),
    RiskAppetiteLevel.BALANCED: OfferMultipliers(anchor=0.88, target=0.95, walk_away=1.00),
    RiskAppetiteLevel.AGGRESSIVE: OfferMultipliers(anchor=0.90, target=0.97, walk_away=1.02),
})

# Percentage of the running leverage total, applied after every other component
BUYER_STATUS_BONUS_RATES: Final[Mapping[BuyerStatus, float]] = MappingProxyType({
    BuyerStatus.FIRST_TIME: 0.15,
    BuyerStatus.CASH: 0.15,
    BuyerStatus.CHAIN_FREE: 0.10,
    BuyerStatus.SUBJECT_TO_SALE: 0.0,
})


# =============================================================================
# Input value objects
# =============================================================================

@dataclass(frozen=True)
class FinanceInputs:
    """
    Buyer finance details from the finance form.

    interest_rate is an annual percentage (5 means 5%), loan_term is in years,
    service_charge and ground_rent are annual amounts.
    """
    deposit: float
    interest_rate: float
    loan_term: int
    monthly_income: float
    savings: float
    service_charge: float = 0
    ground_rent: float = 0


@dataclass(frozen=True)
class ChecklistItem:
    """A single viewing-checklist finding."""
    category: str
    severity: Severity
    description: str = ""


@dataclass(frozen=True)
class ChecklistInputs:
    """Ordered viewing-checklist findings. Categories may repeat."""
    items: Tuple[ChecklistItem, ...] = ()

    def count(self, severity: Severity) -> int:
        """Number of findings with the given severity."""
        return sum(1 for item in self.items if item.severity == severity)


@dataclass(frozen=True)
class ComparableData:
    """
    Summary statistics of a comparable-sales set.

    recency is days since the most recent sale, variance is the price
    spread as a percentage.
    """
    count: int
    recency: float
    variance: float


@dataclass(frozen=True)
class ValuationInputs:
    """Valuation range from the valuation provider (low <= median <= high)."""
    valuation_low: float
    valuation_median: float
    valuation_high: float
    confidence_score: float = 0
    last_sold_date: Optional[Union[date, str]] = None


@dataclass(frozen=True)
class LeverageFactors:
    """Signals of seller motivation and buyer strength."""
    days_on_market: int
    price_drops: int
    buyer_ready: bool
    chain_free: bool
    buyer_status: Optional[BuyerStatus] = None


@dataclass(frozen=True)
class RiskAppetite:
    """Buyer's chosen negotiation stance."""
    level: RiskAppetiteLevel = RiskAppetiteLevel.BALANCED


# =============================================================================
# Calculator output values
# =============================================================================

@dataclass(frozen=True)
class AskingPricePosition:
    position: PricePosition
    percentage: float  # Distance outside the range, % of the nearest boundary
    posture: PricingPosture
    gap: float  # £ distance to the nearest boundary, 0 within range
    score: float  # 0-100, feeds Deal Attractiveness


@dataclass(frozen=True)
class RepairEstimate:
    category: str
    severity: Severity
    estimate: int


@dataclass(frozen=True)
class ConditionDeduction:
    total_estimate: int
    breakdown: Tuple[RepairEstimate, ...]
    risk_level: RiskLevel


@dataclass(frozen=True)
class OfferRecommendation:
    anchor: int  # Opening offer
    target: int  # Ideal price
    walk_away: int  # Maximum acceptable


@dataclass(frozen=True)
class NegotiationStep:
    step: int
    amount: int
    percentage: float  # Below asking
    rationale: str


@dataclass(frozen=True)
class NegotiationHeadroom:
    gap: float
    gap_percentage: float
    steps: Tuple[NegotiationStep, ...]


@dataclass(frozen=True)
class MonthlyCosts:
    mortgage: int
    insurance: int
    maintenance: int
    service_charge: int
    ground_rent: int
    total: int


@dataclass(frozen=True)
class StressScenario:
    rate_increase: float
    new_rate: float
    new_monthly_payment: int
    affordability_ratio: Optional[float]  # None when income is zero
    passed: bool


@dataclass(frozen=True)
class StressTestResult:
    scenarios: Tuple[StressScenario, ...]
    overall_pass: bool


@dataclass(frozen=True)
class BufferBreakdown:
    deposit: float
    fees: int  # Stamp duty, legal, survey
    repairs: float
    emergency_fund: int  # 3 months of ownership costs
    total_required: float
    available_savings: float
    shortfall: float
    adequacy: BufferAdequacy


@dataclass(frozen=True)
class ValuationRange:
    low: int
    median: int
    high: int
