"""Commercial bank deposit rate tables.

These models describe what a rate source returns for one business day:
each bank's savings and fixed-deposit rate ranges. The savings engine only
ever consumes a single resolved ``annual_rate_pct`` taken from a table.
"""

import datetime as dt
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field, field_validator


class FixedTerm(str, Enum):
    """Published fixed-deposit terms."""
    THREE_MONTHS = "3M"
    SIX_MONTHS = "6M"
    TWELVE_MONTHS = "12M"
    TWENTY_FOUR_MONTHS = "24M"


class RateRange(BaseModel):
    """A published min/max rate pair in percent per annum."""

    min_rate: Optional[Decimal] = None
    max_rate: Optional[Decimal] = None

    @field_validator("min_rate", "max_rate", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """Published tables use blank strings for missing rates."""
        if v is None:
            return None
        if isinstance(v, str):
            stripped = v.strip()
            if not stripped:
                return None
            try:
                parsed = Decimal(stripped)
            except InvalidOperation:
                return None
            return parsed if parsed.is_finite() else None
        return v

    @computed_field
    @property
    def average(self) -> Optional[Decimal]:
        """Midpoint of the range, or whichever bound is present."""
        if self.min_rate is not None and self.max_rate is not None:
            return (self.min_rate + self.max_rate) / 2
        if self.min_rate is not None:
            return self.min_rate
        return self.max_rate


class BankDepositRate(BaseModel):
    """One bank's published deposit rates for a period."""

    period: dt.date
    bank_type: str = "Unknown"
    bank_name: str = "Unknown Bank"
    bank_name_th: Optional[str] = None
    savings: RateRange = Field(default_factory=RateRange)
    fixed: dict[FixedTerm, RateRange] = Field(default_factory=dict)


class DepositRateTable(BaseModel):
    """All bank rates published for a single period."""

    period: dt.date
    timestamp: Optional[dt.datetime] = None
    records: list[BankDepositRate] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.records

    def find_bank(self, bank_name: str) -> Optional[BankDepositRate]:
        """Case-insensitive lookup by English or Thai bank name."""
        wanted = bank_name.strip().casefold()
        for record in self.records:
            if record.bank_name.casefold() == wanted:
                return record
            if record.bank_name_th and record.bank_name_th.casefold() == wanted:
                return record
        return None

    def group_by_bank_type(self) -> dict[str, list[BankDepositRate]]:
        """Records grouped by bank type, types sorted alphabetically."""
        groups: dict[str, list[BankDepositRate]] = {}
        for record in self.records:
            groups.setdefault(record.bank_type, []).append(record)
        return dict(sorted(groups.items()))
