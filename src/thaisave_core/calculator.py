"""Actual/365 savings interest calculator with Thai semiannual payouts.

The calculator walks every calendar day of the requested range:

1. apply deposits and withdrawals due today
2. on a payout date (30 June, 31 December, or the end of the range) credit
   the interest accrued through yesterday, applying the 20k threshold rule
3. accrue one day of interest on the current balance
4. on the last day of a year (or of the range) release any deferred credit
   and close the year's summary

All per-call state lives in a private walk object, so a single calculator
can be shared across threads.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence, Union

import structlog

from .config import EngineConfig
from .dates import (
    add_days,
    days_inclusive,
    ensure_supported_timezone,
    format_date,
    is_payout_date,
    is_semiannual_accrual_day,
    iter_days,
    parse_date,
    year_end,
)
from .exceptions import ValidationError
from .models import (
    AccrualStep,
    Payout,
    SavingsInput,
    SavingsResult,
    YearSummary,
)
from .money import ZERO, round_money, to_decimal
from .savings_rules import (
    YearContext,
    close_year,
    daily_rate,
    settle_payout,
)
from .timeline import BalanceLedger, EventCursor, ScheduledEvent, prepare_events

logger = structlog.get_logger()


@dataclass
class _AccrualPeriod:
    """Open diagnostic sub-period: since the last event or payout."""
    start: date
    principal: Decimal
    interest: Decimal = ZERO


class _DayWalk:
    """Mutable state of one calculation."""

    def __init__(
        self,
        *,
        start: date,
        end: date,
        principal: Decimal,
        rate_per_day: Decimal,
        events: Sequence[ScheduledEvent],
        rule_active: bool,
        withholding_rate: Optional[Decimal],
    ):
        self.start = start
        self.end = end
        self.rate_per_day = rate_per_day
        self.rule_active = rule_active
        self.withholding_rate = withholding_rate

        self.ledger = BalanceLedger.opening(principal)
        self.cursor = EventCursor(events)
        self.context = YearContext.open(start.year)
        self.pending = ZERO
        self.period = _AccrualPeriod(start=start, principal=principal)

        self.payouts: list[Payout] = []
        self.year_summaries: list[YearSummary] = []
        self.steps: list[AccrualStep] = []

    def run(self) -> None:
        for day in iter_days(self.start, self.end):
            self._apply_events(day)

            if self._is_settlement_day(day) and (
                self.pending > 0 or self.period.start < day
            ):
                self._settle_payout(day)

            self._accrue(day)

            if day == year_end(day, self.end):
                self._close_year(day)

    def _is_settlement_day(self, day: date) -> bool:
        # Payouts are clipped to the end of the range
        return is_payout_date(day) or day == self.end

    def _record_step(self, from_date: date, to_date: date) -> None:
        if from_date > to_date:
            return
        step = AccrualStep(
            from_date=format_date(from_date),
            to_date=format_date(to_date),
            days=days_inclusive(from_date, to_date),
            principal=round_money(self.period.principal),
            gross_interest=round_money(self.period.interest),
        )
        self.steps.append(step)
        logger.debug(
            "accrual_step",
            from_date=step.from_date,
            to_date=step.to_date,
            days=step.days,
            principal=str(step.principal),
            gross_interest=str(step.gross_interest),
        )

    def _apply_events(self, day: date) -> None:
        for event in self.cursor.due(day):
            if self.period.start < day:
                self._record_step(self.period.start, add_days(day, -1))
            self.ledger.apply(event)
            self.period = _AccrualPeriod(start=day, principal=self.ledger.balance)

    def _settle_payout(self, day: date) -> None:
        accrual_end = add_days(day, -1)
        settlement, self.context = settle_payout(
            self.context,
            self.pending,
            rule_active=self.rule_active,
            withholding_rate=self.withholding_rate,
        )

        self._record_step(self.period.start, accrual_end)

        if settlement.compounds:
            self.ledger.credit(settlement.net)

        payout = Payout(
            date=format_date(day),
            gross_interest=settlement.gross,
            tax=settlement.tax,
            net_interest=settlement.net,
            balance_after_payout=round_money(self.ledger.balance),
            cumulative_ytd_gross=settlement.cumulative_ytd_gross,
            remaining_to_threshold=settlement.remaining_to_threshold,
            threshold_crossed=settlement.threshold_crossed,
            tax_status=settlement.tax_status,
            interest_method=settlement.interest_method,
            taxable_amount=settlement.taxable_amount,
            running_ytd_tax=settlement.running_ytd_tax,
        )
        self.payouts.append(payout)

        if settlement.threshold_crossed:
            logger.info(
                "threshold_crossed",
                date=payout.date,
                cumulative_ytd_gross=str(payout.cumulative_ytd_gross),
                tax=str(payout.tax),
            )
        logger.info(
            "payout_settled",
            date=payout.date,
            gross=str(payout.gross_interest),
            tax=str(payout.tax),
            net=str(payout.net_interest),
            balance=str(payout.balance_after_payout),
            tax_status=payout.tax_status.value,
            interest_method=payout.interest_method.value,
        )

        self.pending = ZERO
        self.period = _AccrualPeriod(
            start=add_days(accrual_end, 1), principal=self.ledger.balance
        )

    def _accrue(self, day: date) -> None:
        if not self.rate_per_day or day >= self.end or not is_semiannual_accrual_day(day):
            return
        interest = self.ledger.balance * self.rate_per_day
        self.pending += interest
        self.period.interest += interest

    def _close_year(self, day: date) -> None:
        credit, self.context = close_year(self.context)
        if credit:
            self.ledger.credit(credit)

        gross = round_money(self.context.gross)
        tax = round_money(self.context.tax)
        summary = YearSummary(
            year=self.context.year,
            mode=self.context.mode,
            gross_interest=gross,
            tax=tax,
            net_interest=gross - tax,
            closing_balance=round_money(self.ledger.balance),
        )
        self.year_summaries.append(summary)
        logger.info(
            "year_closed",
            year=summary.year,
            mode=summary.mode.value,
            gross=str(summary.gross_interest),
            tax=str(summary.tax),
            deferred_credit=str(round_money(credit)),
            closing_balance=str(summary.closing_balance),
        )

        if day < self.end:
            # 31 December accrues nothing; the next period opens on 1 January
            self.context = YearContext.open(day.year + 1)
            self.period = _AccrualPeriod(
                start=add_days(day, 1), principal=self.ledger.balance
            )

    def result(self) -> SavingsResult:
        gross_total = sum((p.gross_interest for p in self.payouts), ZERO)
        tax_total = sum((p.tax for p in self.payouts), ZERO)
        return SavingsResult(
            ending_balance=round_money(self.ledger.balance),
            total_contributions=round_money(self.ledger.contributions),
            gross_interest_total=round_money(gross_total),
            withholding_tax_total=round_money(tax_total),
            net_interest_total=round_money(gross_total - tax_total),
            payouts=self.payouts,
            year_summaries=self.year_summaries,
            steps=self.steps,
        )


class SavingsCalculator:
    """
    Simulate a Thai savings account with actual/365 daily accrual.

    Interest is credited on 30 June and 31 December. While the year's
    cumulative gross interest stays at or below 20,000 THB it is tax-free and
    compounds at each payout; the payout that crosses the threshold withholds
    15% of the whole year's interest and switches the year to simple
    interest, with net interest credited at year end.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Initialize the calculator.

        Args:
            config: Engine settings (default: loaded from the environment)
        """
        self.config = config or EngineConfig()

    def _validate_amount(self, value: Any, field: str, label: str) -> Decimal:
        amount = to_decimal(value, field)
        if amount < 0:
            raise ValidationError(
                f"{label} cannot be negative",
                field=field,
                value=amount,
                constraint=">= 0",
            )
        return amount

    def _withholding_rate(self, request: SavingsInput) -> Optional[Decimal]:
        withholding = request.withholding_tax
        if withholding is None or not withholding.enabled:
            return None
        rate = to_decimal(withholding.rate, "withholding_tax.rate")
        if rate < 0 or rate > 1:
            raise ValidationError(
                "Withholding tax rate must be between 0 and 1",
                field="withholding_tax.rate",
                value=rate,
                constraint="0 <= rate <= 1",
            )
        return rate

    def calculate(
        self, request: Union[SavingsInput, Mapping[str, Any]]
    ) -> SavingsResult:
        """
        Run the day walk for a request.

        Args:
            request: A SavingsInput, or a mapping with the same fields

        Returns:
            SavingsResult with payouts, year summaries and accrual steps

        Raises:
            FormatError: Malformed or non-existent date
            ValidationError: Invalid amounts, range, timezone or event dates
            SequencingError: Withdrawal submitted immediately before a same-day deposit
            InsufficientBalanceError: Withdrawal larger than the balance
        """
        if not isinstance(request, SavingsInput):
            request = SavingsInput.from_payload(request)

        ensure_supported_timezone(request.timezone)
        principal = self._validate_amount(
            request.principal_start, "principal_start", "Starting principal"
        )
        rate_pct = self._validate_amount(
            request.annual_rate_pct, "annual_rate_pct", "Annual rate"
        )

        start = parse_date(request.start_date)
        end = parse_date(request.end_date)
        if start > end:
            raise ValidationError(
                "End date must be on or after start date",
                field="end_date",
                value=request.end_date,
                constraint=f">= {request.start_date}",
            )
        if days_inclusive(start, end) > self.config.max_range_days:
            raise ValidationError(
                "Calculation range is too long",
                field="end_date",
                value=request.end_date,
                constraint=f"at most {self.config.max_range_days} days",
            )

        withholding_rate = self._withholding_rate(request)
        events = prepare_events(request.events, start, end)

        logger.info(
            "savings_calculation_started",
            start_date=format_date(start),
            end_date=format_date(end),
            principal=str(principal),
            annual_rate_pct=str(rate_pct),
            events=len(events),
            rule_active=request.rule_active,
            withholding_rate=str(withholding_rate) if withholding_rate is not None else None,
        )

        walk = _DayWalk(
            start=start,
            end=end,
            principal=principal,
            rate_per_day=daily_rate(rate_pct),
            events=events,
            rule_active=request.rule_active,
            withholding_rate=withholding_rate,
        )
        walk.run()
        result = walk.result()

        logger.info(
            "savings_calculation_completed",
            ending_balance=str(result.ending_balance),
            gross_interest_total=str(result.gross_interest_total),
            withholding_tax_total=str(result.withholding_tax_total),
            payouts=len(result.payouts),
            years=len(result.year_summaries),
        )
        return result


def compute_savings_daily_actual365(
    request: Union[SavingsInput, Mapping[str, Any]],
    config: Optional[EngineConfig] = None,
) -> SavingsResult:
    """Convenience wrapper around :meth:`SavingsCalculator.calculate`."""
    return SavingsCalculator(config).calculate(request)
