"""Deposit and withdrawal timeline handling.

Raw request events are validated and ordered by :func:`prepare_events`; the
day walk then consumes them through an :class:`EventCursor`, applying each
one exactly once to a :class:`BalanceLedger`.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterator, Sequence

import structlog

from .dates import compare_dates, parse_date
from .exceptions import InsufficientBalanceError, SequencingError, ValidationError
from .models import EventType, TimelineEvent
from .money import ZERO, to_decimal

logger = structlog.get_logger()


@dataclass(frozen=True)
class ScheduledEvent:
    """A validated event with a parsed date."""
    date: date
    type: EventType
    amount: Decimal


def _validate_event(event: TimelineEvent, start: date, end: date) -> ScheduledEvent:
    amount = to_decimal(event.amount, "amount")
    if amount <= 0:
        raise ValidationError(
            "Event amount must be positive",
            field="amount",
            value=amount,
            constraint="> 0",
        )

    event_date = parse_date(event.date)
    if compare_dates(event_date, start) < 0 or compare_dates(event_date, end) > 0:
        raise ValidationError(
            "Event date must be within the calculation range",
            field="date",
            value=event.date,
            constraint=f"{start.isoformat()}..{end.isoformat()}",
        )

    return ScheduledEvent(date=event_date, type=event.type, amount=amount)


def _check_same_day_sequence(events: Sequence[ScheduledEvent]) -> None:
    """Reject a withdrawal submitted immediately before a same-day deposit."""
    for previous, event in zip(events, events[1:]):
        if (
            previous.type is EventType.WITHDRAW
            and event.type is EventType.DEPOSIT
            and previous.date == event.date
        ):
            raise SequencingError(
                "Deposits must be applied before withdrawals on the same day",
                event_date=event.date,
            )


def prepare_events(
    events: Sequence[TimelineEvent],
    start: date,
    end: date,
) -> list[ScheduledEvent]:
    """Validate events and return them in application order.

    Events are sorted by date; on a tied date deposits come before
    withdrawals, otherwise submission order is kept.

    Raises:
        ValidationError: Non-positive or non-finite amount, or a date
            outside [start, end].
        FormatError: Unparsable event date.
        SequencingError: A withdrawal submitted immediately before a
            same-day deposit.
    """
    scheduled = [_validate_event(event, start, end) for event in events]
    _check_same_day_sequence(scheduled)
    return sorted(
        scheduled,
        key=lambda event: (event.date, event.type is EventType.WITHDRAW),
    )


@dataclass
class BalanceLedger:
    """Running balance and net contributions during one calculation."""
    balance: Decimal
    contributions: Decimal

    @classmethod
    def opening(cls, principal: Decimal) -> "BalanceLedger":
        return cls(balance=principal, contributions=principal)

    def apply(self, event: ScheduledEvent) -> None:
        """Apply a deposit or withdrawal.

        Raises:
            InsufficientBalanceError: If a withdrawal exceeds the balance.
        """
        if event.type is EventType.DEPOSIT:
            self.balance += event.amount
            self.contributions += event.amount
            return

        if self.balance - event.amount < ZERO:
            raise InsufficientBalanceError(
                "Withdrawal events cannot reduce balance below zero",
                balance=self.balance,
                amount=event.amount,
                event_date=event.date,
            )
        self.balance -= event.amount
        self.contributions -= event.amount

    def credit(self, amount: Decimal) -> None:
        """Add credited interest to the balance."""
        self.balance += amount


class EventCursor:
    """Hands out scheduled events as the day walk reaches them."""

    def __init__(self, events: Sequence[ScheduledEvent]):
        self._events = list(events)
        self._index = 0

    def due(self, day: date) -> Iterator[ScheduledEvent]:
        """Yield every unconsumed event dated on or before ``day``, once."""
        while self._index < len(self._events) and self._events[self._index].date <= day:
            event = self._events[self._index]
            self._index += 1
            logger.debug(
                "timeline_event_due",
                date=event.date.isoformat(),
                type=event.type.value,
                amount=str(event.amount),
            )
            yield event

    @property
    def remaining(self) -> int:
        return len(self._events) - self._index
