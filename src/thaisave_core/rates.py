"""Deposit rate source interface and latest-table resolution.

The savings calculator takes a plain ``annual_rate_pct``. Where that number
comes from is up to the caller: typically a published table of commercial
bank deposit rates. This module defines the contract such a source must
satisfy, using structural subtyping via ``typing.Protocol`` so that any
client with a matching ``fetch_rates`` method is compatible, and the
business-day fallback used to find the most recent non-empty table.

Example Usage:
    ```python
    class PublishedRates:
        async def fetch_rates(self, period: date) -> Optional[DepositRateTable]:
            ...

    table = await resolve_latest_rates(PublishedRates())
    rate = savings_rate_for(table, "Kasikornbank")
    result = compute_savings_daily_actual365({..., "annual_rate_pct": rate})
    ```
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, runtime_checkable

import structlog

from .config import EngineConfig
from .dates import bangkok_today, previous_business_day
from .exceptions import RateUnavailableError, ValidationError
from .models import DepositRateTable

logger = structlog.get_logger()


@runtime_checkable
class DepositRateSource(Protocol):
    """Anything that can return the deposit rate table for a business day."""

    async def fetch_rates(self, period: date) -> Optional[DepositRateTable]:
        """Return the table published for ``period``, or None if nothing was published."""
        ...


async def resolve_latest_rates(
    source: DepositRateSource,
    today: Optional[date] = None,
    max_lookback_days: Optional[int] = None,
) -> DepositRateTable:
    """Find the most recent non-empty rate table.

    Tries ``today`` (Bangkok) first, then walks back one business day at a
    time, at most ``max_lookback_days`` times (default: the engine
    setting ``rate_lookback_days``).

    Raises:
        RateUnavailableError: If every attempt returned nothing.
    """
    if max_lookback_days is None:
        max_lookback_days = EngineConfig().rate_lookback_days
    current = today or bangkok_today()

    for attempt in range(max_lookback_days + 1):
        table = await source.fetch_rates(current)
        if table is not None and not table.is_empty:
            logger.info(
                "deposit_rates_resolved",
                period=table.period.isoformat(),
                requested=current.isoformat(),
                attempts=attempt + 1,
                banks=len(table.records),
            )
            return table
        logger.debug("deposit_rates_missing", period=current.isoformat())
        if attempt < max_lookback_days:
            current = previous_business_day(current)

    raise RateUnavailableError(
        "No deposit rate data available for recent business days",
        lookback_days=max_lookback_days,
        last_period=current,
    )


def savings_rate_for(table: DepositRateTable, bank_name: str) -> Decimal:
    """Average published savings rate of one bank, in percent per annum.

    Raises:
        ValidationError: If the bank is not in the table or publishes no
            savings rate.
    """
    record = table.find_bank(bank_name)
    if record is None:
        raise ValidationError(
            f"Bank not found in rate table: {bank_name}",
            field="bank_name",
            value=bank_name,
        )
    rate = record.savings.average
    if rate is None:
        raise ValidationError(
            f"No savings rate published for {record.bank_name}",
            field="bank_name",
            value=bank_name,
        )
    return rate
