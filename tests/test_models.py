"""Tests for request, result and rate table models."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from thaisave_core.exceptions import ValidationError
from thaisave_core.models import (
    BankDepositRate,
    DepositRateTable,
    EventType,
    FixedTerm,
    InterestMethod,
    Payout,
    RateRange,
    SavingsInput,
    SavingsResult,
    TaxStatus,
    TimelineEvent,
)


class TestSavingsInput:
    """Test suite for SavingsInput."""

    def test_defaults(self, make_request):
        request = SavingsInput.from_payload(make_request())

        assert request.events == []
        assert request.apply_20k_rule is True
        assert request.override_keep_compounding is False
        assert request.withholding_tax is None
        assert request.timezone == "Asia/Bangkok"
        assert request.rule_active is True

    @pytest.mark.parametrize(
        "apply_rule,override,expected",
        [(True, False, True), (True, True, False), (False, False, False), (False, True, False)],
    )
    def test_rule_active(self, make_request, apply_rule, override, expected):
        request = SavingsInput.from_payload(make_request(
            apply_20k_rule=apply_rule,
            override_keep_compounding=override,
        ))

        assert request.rule_active is expected

    def test_accepts_json_strings(self):
        """Decoded JSON carries amounts as strings or numbers."""
        request = SavingsInput.from_payload({
            "principal_start": "100000.50",
            "annual_rate_pct": 1.25,
            "start_date": "2025-01-01",
            "end_date": "2025-12-31",
            "events": [{"date": "2025-02-01", "type": "withdraw", "amount": "10"}],
        })

        assert request.principal_start == Decimal("100000.50")
        assert request.annual_rate_pct == Decimal("1.25")
        assert request.events[0].type is EventType.WITHDRAW

    def test_date_objects_become_strings(self):
        request = SavingsInput(
            principal_start=Decimal("1"),
            annual_rate_pct=Decimal("1"),
            start_date=date(2025, 1, 1),
            end_date=date(2025, 2, 1),
            events=[TimelineEvent(date=date(2025, 1, 15), type="deposit", amount=Decimal("5"))],
        )

        assert request.start_date == "2025-01-01"
        assert request.events[0].date == "2025-01-15"

    def test_is_frozen(self, make_request):
        request = SavingsInput.from_payload(make_request())

        with pytest.raises(PydanticValidationError):
            request.principal_start = Decimal("1")

    def test_missing_field(self, make_request):
        payload = make_request()
        del payload["end_date"]

        with pytest.raises(ValidationError) as exc_info:
            SavingsInput.from_payload(payload)

        assert exc_info.value.field == "end_date"
        assert exc_info.value.details["error_count"] == 1

    def test_bad_event_reports_location(self, make_request):
        with pytest.raises(ValidationError) as exc_info:
            SavingsInput.from_payload(make_request(
                events=[{"date": "2025-02-01", "type": "interest", "amount": "1"}],
            ))

        assert exc_info.value.field == "events.0.type"


class TestResultModels:
    """Result serialization."""

    def test_payout_year(self):
        payout = Payout(
            date="2026-06-30",
            gross_interest=Decimal("1.00"),
            tax=Decimal("0.00"),
            net_interest=Decimal("1.00"),
            balance_after_payout=Decimal("101.00"),
            cumulative_ytd_gross=Decimal("1.00"),
            remaining_to_threshold=Decimal("19999.00"),
            threshold_crossed=False,
            tax_status=TaxStatus.NONE,
            interest_method=InterestMethod.COMPOUND,
            taxable_amount=Decimal("0.00"),
            running_ytd_tax=Decimal("0.00"),
        )

        assert payout.year == 2026

    def test_json_uses_wire_values(self, make_request, calculator):
        result = calculator.calculate(make_request(
            principal_start=Decimal("10000"),
            annual_rate_pct=Decimal("2"),
            start_date="2023-01-01",
            end_date="2023-12-31",
        ))

        dumped = result.model_dump(mode="json")

        assert dumped["ending_balance"] == "10200.45"
        assert dumped["payouts"][0]["tax"] == "0.00"
        assert dumped["payouts"][0]["running_ytd_tax"] == "0.00"
        assert dumped["year_summaries"][0]["tax"] == "0.00"
        assert dumped["withholding_tax_total"] == "0.00"
        assert dumped["payouts"][0]["tax_status"] == "none"
        assert dumped["payouts"][0]["interest_method"] == "compound"
        assert dumped["year_summaries"][0]["mode"] == "CompoundAtPayout"
        assert SavingsResult.model_validate_json(result.model_dump_json()) == result


class TestRateRange:
    """Test suite for RateRange."""

    def test_average_of_both_bounds(self):
        assert RateRange(min_rate="0.25", max_rate="0.75").average == Decimal("0.5")

    def test_average_with_one_bound(self):
        assert RateRange(min_rate="0.40").average == Decimal("0.40")
        assert RateRange(max_rate="1.10").average == Decimal("1.10")

    @pytest.mark.parametrize("value", ["", "   ", "n/a", "NaN"])
    def test_blank_values_are_missing(self, value):
        rate = RateRange(min_rate=value, max_rate=value)

        assert rate.min_rate is None
        assert rate.average is None

    def test_average_is_serialized(self):
        assert RateRange(min_rate="1", max_rate="2").model_dump()["average"] == Decimal("1.5")


class TestDepositRateTable:
    """Test suite for DepositRateTable."""

    @pytest.fixture
    def table(self) -> DepositRateTable:
        period = date(2025, 6, 2)
        return DepositRateTable(
            period=period,
            records=[
                BankDepositRate(
                    period=period,
                    bank_type="Commercial Banks",
                    bank_name="Kasikornbank",
                    bank_name_th="ธนาคารกสิกรไทย",
                    savings=RateRange(min_rate="0.25", max_rate="0.50"),
                    fixed={FixedTerm.TWELVE_MONTHS: RateRange(min_rate="1.30", max_rate="1.55")},
                ),
                BankDepositRate(
                    period=period,
                    bank_type="Foreign Bank Branches",
                    bank_name="Citibank",
                ),
                BankDepositRate(
                    period=period,
                    bank_type="Commercial Banks",
                    bank_name="Bangkok Bank",
                ),
            ],
        )

    def test_find_bank_by_english_name(self, table):
        assert table.find_bank("  kasikornbank ").bank_name == "Kasikornbank"

    def test_find_bank_by_thai_name(self, table):
        assert table.find_bank("ธนาคารกสิกรไทย").bank_name == "Kasikornbank"

    def test_find_bank_missing(self, table):
        assert table.find_bank("Unknown") is None

    def test_group_by_bank_type(self, table):
        groups = table.group_by_bank_type()

        assert list(groups) == ["Commercial Banks", "Foreign Bank Branches"]
        assert [r.bank_name for r in groups["Commercial Banks"]] == [
            "Kasikornbank",
            "Bangkok Bank",
        ]

    def test_fixed_terms_parse_from_wire_values(self):
        record = BankDepositRate.model_validate({
            "period": "2025-06-02",
            "fixed": {"6M": {"min_rate": "1.0", "max_rate": ""}},
        })

        assert record.fixed[FixedTerm.SIX_MONTHS].average == Decimal("1.0")
        assert record.bank_name == "Unknown Bank"

    def test_is_empty(self, table):
        assert table.is_empty is False
        assert DepositRateTable(period=date(2025, 6, 2)).is_empty is True
