"""Thai Revenue Department rules for savings account interest.

Savings interest is exempt from withholding tax while a depositor's interest
for the calendar year stays at or below 20,000 THB. Once a payout pushes the
year's cumulative gross interest above that threshold, 15% is withheld
retroactively on the whole year's interest, and net interest for the rest of
the year is no longer compounded at each payout but credited once at year end.

Banks credit savings interest semiannually, on 30 June and 31 December.

This module holds the per-year state machine:

    CompoundAtPayout --(cumulative YTD gross > 20,000)--> SimpleDueTo20k

The edge is one-directional and the state resets every calendar year. The
state is carried in an immutable :class:`YearContext`; every transition
returns a new context.
"""

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional

from .models import InterestMethod, TaxStatus, YearMode
from .money import ZERO, round_money

# =============================================================================
# RULE CONSTANTS
# =============================================================================

EXEMPTION_THRESHOLD = Decimal("20000")
THRESHOLD_TAX_RATE = Decimal("0.15")
DAYS_IN_YEAR = Decimal("365")


def daily_rate(annual_rate_pct: Decimal) -> Decimal:
    """Actual/365 daily rate for an annual percentage rate."""
    return annual_rate_pct / 100 / DAYS_IN_YEAR


# =============================================================================
# YEAR STATE
# =============================================================================

@dataclass(frozen=True)
class YearContext:
    """Interest bookkeeping for one calendar year of the simulation."""
    year: int
    mode: YearMode = YearMode.COMPOUND_AT_PAYOUT
    gross: Decimal = ZERO
    tax: Decimal = ZERO
    net_pending_credit: Decimal = ZERO
    cumulative_gross: Decimal = ZERO

    @classmethod
    def open(cls, year: int) -> "YearContext":
        """Fresh context for the start of a year."""
        return cls(year=year)

    @property
    def is_simple(self) -> bool:
        return self.mode is YearMode.SIMPLE_DUE_TO_20K

    def latch_simple(self) -> "YearContext":
        """Switch to simple interest for the rest of the year."""
        return replace(self, mode=YearMode.SIMPLE_DUE_TO_20K)


@dataclass(frozen=True)
class PayoutSettlement:
    """Outcome of settling one payout against the year's state."""
    gross: Decimal
    tax: Decimal
    net: Decimal
    taxable_amount: Decimal
    cumulative_ytd_gross: Decimal
    remaining_to_threshold: Decimal
    threshold_crossed: bool
    tax_status: TaxStatus
    interest_method: InterestMethod
    running_ytd_tax: Decimal

    @property
    def compounds(self) -> bool:
        """True if the net interest goes into the balance at this payout."""
        return self.interest_method is InterestMethod.COMPOUND


def remaining_to_threshold(cumulative_gross: Decimal) -> Decimal:
    if cumulative_gross < EXEMPTION_THRESHOLD:
        return EXEMPTION_THRESHOLD - cumulative_gross
    return ZERO


def settle_payout(
    context: YearContext,
    pending_gross: Decimal,
    *,
    rule_active: bool,
    withholding_rate: Optional[Decimal] = None,
) -> tuple[PayoutSettlement, YearContext]:
    """Settle the interest accrued since the last payout.

    Args:
        context: The year's state before this payout
        pending_gross: Unrounded interest accrued since the last payout
        rule_active: Whether the 20k rule may switch the year to simple interest
        withholding_rate: Explicit withholding rate (fraction); ``None`` or
            zero when no explicit withholding is configured

    Returns:
        Tuple of (settlement, context after this payout)
    """
    gross = round_money(pending_gross)
    previous_cumulative = context.cumulative_gross
    cumulative = previous_cumulative + gross

    explicit_rate = withholding_rate if withholding_rate else None

    tax = round_money(ZERO)
    taxable = ZERO
    if explicit_rate is not None:
        taxable = gross
        tax = round_money(gross * explicit_rate)

    status = TaxStatus.NONE
    crossed = False
    compounds = True
    next_context = context

    if rule_active:
        if previous_cumulative <= EXEMPTION_THRESHOLD < cumulative:
            crossed = True
            status = TaxStatus.THRESHOLD_CROSSED
            if explicit_rate is None:
                # Retroactive: total withheld this year becomes 15% of all
                # YTD gross.
                # tax_this_payout = 0.15 * ytd_gross_after - ytd_tax_already_withheld
                taxable = cumulative
                tax = round_money(cumulative * THRESHOLD_TAX_RATE - context.tax)
            compounds = False
            next_context = next_context.latch_simple()
        elif previous_cumulative > EXEMPTION_THRESHOLD:
            status = TaxStatus.ABOVE_THRESHOLD
            if explicit_rate is None:
                taxable = gross
                tax = round_money(gross * THRESHOLD_TAX_RATE)
            compounds = False
            next_context = next_context.latch_simple()

    net = gross - tax
    ytd_tax = context.tax + tax
    next_context = replace(
        next_context,
        gross=context.gross + gross,
        tax=ytd_tax,
        cumulative_gross=cumulative,
        net_pending_credit=(
            context.net_pending_credit if compounds else context.net_pending_credit + net
        ),
    )

    settlement = PayoutSettlement(
        gross=gross,
        tax=tax,
        net=net,
        taxable_amount=round_money(taxable),
        cumulative_ytd_gross=round_money(cumulative),
        remaining_to_threshold=round_money(remaining_to_threshold(cumulative)),
        threshold_crossed=crossed,
        tax_status=status,
        interest_method=InterestMethod.COMPOUND if compounds else InterestMethod.SIMPLE,
        running_ytd_tax=round_money(ytd_tax),
    )
    return settlement, next_context


def close_year(context: YearContext) -> tuple[Decimal, YearContext]:
    """Release the deferred net interest of a simple-interest year.

    Returns:
        Tuple of (amount to credit to the balance now, emptied context)
    """
    if not context.is_simple:
        return ZERO, context
    return context.net_pending_credit, replace(context, net_pending_credit=ZERO)
