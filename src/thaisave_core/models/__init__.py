"""Data models for thaisave-core.

- Savings calculator request and result models (savings.py)
- Deposit rate tables from the rate collaborator (rates.py)
"""

from thaisave_core.models.savings import (
    # Enumerations
    EventType,
    YearMode,
    TaxStatus,
    InterestMethod,
    # Request
    TimelineEvent,
    WithholdingTaxConfig,
    SavingsInput,
    # Result
    Payout,
    YearSummary,
    AccrualStep,
    SavingsResult,
)
from thaisave_core.models.rates import (
    FixedTerm,
    RateRange,
    BankDepositRate,
    DepositRateTable,
)

__all__ = [
    # Enumerations
    "EventType",
    "YearMode",
    "TaxStatus",
    "InterestMethod",
    # Request
    "TimelineEvent",
    "WithholdingTaxConfig",
    "SavingsInput",
    # Result
    "Payout",
    "YearSummary",
    "AccrualStep",
    "SavingsResult",
    # Rate tables
    "FixedTerm",
    "RateRange",
    "BankDepositRate",
    "DepositRateTable",
]
