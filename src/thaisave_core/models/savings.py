"""Request and result models for the actual/365 savings calculator.

The request side is deliberately permissive about numeric values (infinite
and NaN decimals are accepted by the model) so that the engine can report
them through its own error taxonomy instead of a pydantic error.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..dates import SUPPORTED_TIMEZONE, format_date
from ..exceptions import ValidationError


# =============================================================================
# ENUMERATIONS
# =============================================================================

class EventType(str, Enum):
    """Kinds of balance change on the timeline."""
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"


class YearMode(str, Enum):
    """Compounding mode of one calendar year.

    A year starts in COMPOUND_AT_PAYOUT and may latch into SIMPLE_DUE_TO_20K
    once its interest exceeds the exemption threshold. There is no way back
    within the same year.
    """
    COMPOUND_AT_PAYOUT = "CompoundAtPayout"
    SIMPLE_DUE_TO_20K = "SimpleDueTo20k"


class TaxStatus(str, Enum):
    """Threshold position of a payout."""
    NONE = "none"
    THRESHOLD_CROSSED = "threshold-crossed"
    ABOVE_THRESHOLD = "above-threshold"


class InterestMethod(str, Enum):
    """Whether a payout's net interest was added to the balance immediately."""
    COMPOUND = "compound"
    SIMPLE = "simple"


def _date_to_string(value: Any) -> Any:
    if isinstance(value, dt.date) and not isinstance(value, dt.datetime):
        return format_date(value)
    return value


# =============================================================================
# REQUEST MODELS
# =============================================================================

class TimelineEvent(BaseModel):
    """A deposit or withdrawal on a given day."""

    model_config = ConfigDict(frozen=True)

    date: str = Field(description="Event date as YYYY-MM-DD")
    type: EventType
    amount: Decimal = Field(allow_inf_nan=True, description="Positive amount in THB")

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        """Accept datetime.date values."""
        return _date_to_string(v)


class WithholdingTaxConfig(BaseModel):
    """Explicit withholding tax applied at every payout."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    rate: Decimal = Field(
        default=Decimal("0"),
        allow_inf_nan=True,
        description="Rate as a fraction, e.g. 0.15 for 15%",
    )


class SavingsInput(BaseModel):
    """Immutable request for the savings calculator."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "principal_start": "100000",
                    "annual_rate_pct": "1.0",
                    "start_date": "2025-01-01",
                    "end_date": "2025-12-31",
                    "events": [
                        {"date": "2025-03-15", "type": "deposit", "amount": "50000"},
                    ],
                    "apply_20k_rule": True,
                    "override_keep_compounding": False,
                }
            ]
        },
    )

    principal_start: Decimal = Field(allow_inf_nan=True)
    annual_rate_pct: Decimal = Field(allow_inf_nan=True)
    start_date: str
    end_date: str
    events: list[TimelineEvent] = Field(default_factory=list)
    apply_20k_rule: bool = True
    override_keep_compounding: bool = False
    withholding_tax: Optional[WithholdingTaxConfig] = None
    timezone: str = SUPPORTED_TIMEZONE

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def coerce_dates(cls, v):
        """Accept datetime.date values."""
        return _date_to_string(v)

    @property
    def rule_active(self) -> bool:
        """True when the 20k threshold may switch a year to simple interest."""
        return self.apply_20k_rule and not self.override_keep_compounding

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SavingsInput":
        """Build a request from a plain mapping (e.g. decoded JSON).

        Raises:
            ValidationError: If the payload does not have the expected shape.
        """
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as exc:
            first = exc.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            raise ValidationError(
                f"Invalid request: {location}: {first.get('msg')}",
                field=location or None,
                value=first.get("input"),
                details={"error_count": exc.error_count()},
            ) from exc


# =============================================================================
# RESULT MODELS
# =============================================================================

class Payout(BaseModel):
    """Interest credited on one semiannual payout date."""

    model_config = ConfigDict(frozen=True)

    date: str
    gross_interest: Decimal
    tax: Decimal
    net_interest: Decimal
    balance_after_payout: Decimal

    cumulative_ytd_gross: Decimal
    remaining_to_threshold: Decimal
    threshold_crossed: bool
    tax_status: TaxStatus
    interest_method: InterestMethod

    taxable_amount: Decimal = Field(
        description="Base the tax was computed on; the whole YTD gross on a crossing payout"
    )
    running_ytd_tax: Decimal

    @property
    def year(self) -> int:
        return int(self.date[:4])


class YearSummary(BaseModel):
    """Totals for one calendar year touched by the range."""

    model_config = ConfigDict(frozen=True)

    year: int
    mode: YearMode
    gross_interest: Decimal
    tax: Decimal
    net_interest: Decimal
    closing_balance: Decimal


class AccrualStep(BaseModel):
    """Diagnostic record of one accrual sub-period."""

    model_config = ConfigDict(frozen=True)

    from_date: str
    to_date: str
    days: int = Field(ge=1)
    principal: Decimal
    gross_interest: Decimal


class SavingsResult(BaseModel):
    """Complete outcome of a savings calculation."""

    model_config = ConfigDict(frozen=True)

    ending_balance: Decimal
    total_contributions: Decimal
    gross_interest_total: Decimal
    withholding_tax_total: Decimal
    net_interest_total: Decimal
    payouts: list[Payout] = Field(default_factory=list)
    year_summaries: list[YearSummary] = Field(default_factory=list)
    steps: list[AccrualStep] = Field(default_factory=list)

    def payouts_for_year(self, year: int) -> list[Payout]:
        """Payouts credited during ``year``."""
        return [payout for payout in self.payouts if payout.year == year]
