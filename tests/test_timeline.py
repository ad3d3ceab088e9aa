"""Tests for event validation, ordering and the balance ledger."""

from datetime import date
from decimal import Decimal

import pytest

from thaisave_core.exceptions import (
    FormatError,
    InsufficientBalanceError,
    SequencingError,
    ValidationError,
)
from thaisave_core.models import EventType, TimelineEvent
from thaisave_core.timeline import (
    BalanceLedger,
    EventCursor,
    ScheduledEvent,
    prepare_events,
)

START = date(2025, 1, 1)
END = date(2025, 12, 31)


def event(day: str, kind: str, amount: str) -> TimelineEvent:
    return TimelineEvent(date=day, type=kind, amount=Decimal(amount))


class TestPrepareEvents:
    """Test suite for prepare_events."""

    def test_sorted_by_date(self):
        prepared = prepare_events(
            [
                event("2025-05-01", "deposit", "300"),
                event("2025-02-01", "deposit", "100"),
                event("2025-03-01", "withdraw", "50"),
            ],
            START,
            END,
        )

        assert [e.date for e in prepared] == [
            date(2025, 2, 1),
            date(2025, 3, 1),
            date(2025, 5, 1),
        ]
        assert all(isinstance(e, ScheduledEvent) for e in prepared)

    def test_deposits_before_withdrawals_on_same_day(self):
        """A later-dated deposit submitted first does not jump ahead."""
        prepared = prepare_events(
            [
                event("2025-04-01", "deposit", "10"),
                event("2025-04-01", "withdraw", "5"),
                event("2025-03-01", "deposit", "20"),
            ],
            START,
            END,
        )

        assert [(e.date.month, e.type) for e in prepared] == [
            (3, EventType.DEPOSIT),
            (4, EventType.DEPOSIT),
            (4, EventType.WITHDRAW),
        ]

    def test_submission_order_kept_within_type(self):
        prepared = prepare_events(
            [
                event("2025-04-01", "deposit", "1"),
                event("2025-04-01", "deposit", "2"),
                event("2025-04-01", "deposit", "3"),
            ],
            START,
            END,
        )

        assert [e.amount for e in prepared] == [Decimal("1"), Decimal("2"), Decimal("3")]

    def test_withdrawal_submitted_before_deposit(self):
        with pytest.raises(SequencingError) as exc_info:
            prepare_events(
                [
                    event("2025-04-01", "withdraw", "5"),
                    event("2025-04-01", "deposit", "10"),
                ],
                START,
                END,
            )

        assert exc_info.value.event_date == date(2025, 4, 1)
        assert exc_info.value.details["event_date"] == "2025-04-01"

    def test_only_adjacent_same_day_pair_is_rejected(self):
        """A same-day deposit separated from the withdrawal is reordered."""
        prepared = prepare_events(
            [
                event("2025-03-01", "withdraw", "5"),
                event("2025-04-01", "deposit", "10"),
                event("2025-03-01", "deposit", "20"),
            ],
            START,
            END,
        )

        assert [(e.date.month, e.type) for e in prepared] == [
            (3, EventType.DEPOSIT),
            (3, EventType.WITHDRAW),
            (4, EventType.DEPOSIT),
        ]

    def test_withdrawal_then_deposit_on_different_days(self):
        prepared = prepare_events(
            [
                event("2025-04-01", "withdraw", "5"),
                event("2025-04-02", "deposit", "10"),
            ],
            START,
            END,
        )

        assert len(prepared) == 2

    @pytest.mark.parametrize("amount", ["0", "-1", "NaN", "Infinity"])
    def test_invalid_amounts(self, amount):
        with pytest.raises(ValidationError):
            prepare_events([event("2025-04-01", "deposit", amount)], START, END)

    def test_range_boundaries_are_inclusive(self):
        prepared = prepare_events(
            [
                event("2025-01-01", "deposit", "1"),
                event("2025-12-31", "deposit", "1"),
            ],
            START,
            END,
        )

        assert len(prepared) == 2

    @pytest.mark.parametrize("day", ["2024-12-31", "2026-01-01"])
    def test_outside_range(self, day):
        with pytest.raises(ValidationError) as exc_info:
            prepare_events([event(day, "deposit", "1")], START, END)

        assert exc_info.value.field == "date"

    def test_unparsable_date(self):
        with pytest.raises(FormatError):
            prepare_events([event("2025-04-31", "deposit", "1")], START, END)

    def test_empty(self):
        assert prepare_events([], START, END) == []


class TestBalanceLedger:
    """Test suite for BalanceLedger."""

    def test_opening(self):
        ledger = BalanceLedger.opening(Decimal("1000"))

        assert ledger.balance == Decimal("1000")
        assert ledger.contributions == Decimal("1000")

    def test_deposit_and_withdrawal_track_contributions(self):
        ledger = BalanceLedger.opening(Decimal("1000"))

        ledger.apply(ScheduledEvent(date(2025, 2, 1), EventType.DEPOSIT, Decimal("500")))
        ledger.apply(ScheduledEvent(date(2025, 3, 1), EventType.WITHDRAW, Decimal("200")))

        assert ledger.balance == Decimal("1300")
        assert ledger.contributions == Decimal("1300")

    def test_interest_is_not_a_contribution(self):
        ledger = BalanceLedger.opening(Decimal("1000"))

        ledger.credit(Decimal("12.34"))

        assert ledger.balance == Decimal("1012.34")
        assert ledger.contributions == Decimal("1000")

    def test_withdraw_to_zero(self):
        ledger = BalanceLedger.opening(Decimal("1000"))

        ledger.apply(ScheduledEvent(date(2025, 2, 1), EventType.WITHDRAW, Decimal("1000")))

        assert ledger.balance == 0

    def test_overdraw_leaves_balance_untouched(self):
        ledger = BalanceLedger.opening(Decimal("1000"))

        with pytest.raises(InsufficientBalanceError) as exc_info:
            ledger.apply(
                ScheduledEvent(date(2025, 2, 1), EventType.WITHDRAW, Decimal("1000.01"))
            )

        assert ledger.balance == Decimal("1000")
        assert exc_info.value.details == {
            "balance": "1000",
            "amount": "1000.01",
            "event_date": "2025-02-01",
        }


class TestEventCursor:
    """Test suite for EventCursor."""

    def test_each_event_yielded_once(self):
        events = [
            ScheduledEvent(date(2025, 2, 1), EventType.DEPOSIT, Decimal("1")),
            ScheduledEvent(date(2025, 2, 1), EventType.WITHDRAW, Decimal("1")),
            ScheduledEvent(date(2025, 3, 1), EventType.DEPOSIT, Decimal("2")),
        ]
        cursor = EventCursor(events)

        assert list(cursor.due(date(2025, 1, 31))) == []
        assert list(cursor.due(date(2025, 2, 1))) == events[:2]
        assert list(cursor.due(date(2025, 2, 1))) == []
        assert cursor.remaining == 1
        assert list(cursor.due(date(2025, 12, 31))) == events[2:]
        assert cursor.remaining == 0
