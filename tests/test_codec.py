"""Tests for the editor field codecs."""

import time
from datetime import date, timedelta, timezone

import pytest

from finance_tracker.editor import codec
from finance_tracker.editor.errors import DecodeError, MalformedSelectionError
from finance_tracker.models.transaction import Category, CategoryType, TransactionType


# Every whole-hour offset from UTC-12 to UTC+14, plus the common half/quarter hours
OFFSETS = [timedelta(hours=h) for h in range(-12, 15)] + [
    timedelta(hours=-9, minutes=-30),
    timedelta(hours=-3, minutes=-30),
    timedelta(hours=3, minutes=30),
    timedelta(hours=5, minutes=30),
    timedelta(hours=5, minutes=45),
    timedelta(hours=9, minutes=30),
]


@pytest.fixture
def host_zone(monkeypatch):
    """Switch the process time zone, restoring it after the test."""

    # POSIX TZ strings, so no zoneinfo database is needed
    def switch(name):
        monkeypatch.setenv("TZ", name)
        time.tzset()

    yield switch
    monkeypatch.undo()
    time.tzset()


class TestDates:

    def test_date_to_draft(self):
        assert codec.date_to_draft(date(2024, 3, 1)) == "2024-03-01"

    def test_draft_to_date(self):
        assert codec.draft_to_date("2024-03-01") == date(2024, 3, 1)
        assert codec.draft_to_date("2024/03/01") == date(2024, 3, 1)

    @pytest.mark.parametrize("value", ["", "yesterday", "2024-13-01", "2024-02-30"])
    def test_draft_to_date_rejects_garbage(self, value):
        with pytest.raises(DecodeError) as exc_info:
            codec.draft_to_date(value)
        assert exc_info.value.field == "date"

    @pytest.mark.parametrize("offset", OFFSETS, ids=str)
    def test_calendar_day_survives_storage_in_every_zone(self, offset):
        tz = timezone(offset)
        for day in (date(2024, 1, 1), date(2024, 2, 29), date(2024, 12, 31)):
            instant = codec.date_to_instant(day, tz)
            assert codec.instant_to_date(instant, tz) == day

    def test_instant_is_local_midnight(self):
        tz = timezone(timedelta(hours=-5))
        instant = codec.date_to_instant(date(2024, 3, 1), tz)
        assert instant.isoformat() == "2024-03-01T00:00:00-05:00"

    def test_host_zone_round_trip(self):
        day = date(2024, 7, 14)
        assert codec.instant_to_date(codec.date_to_instant(day)) == day

    @pytest.mark.skipif(not hasattr(time, "tzset"), reason="needs time.tzset")
    @pytest.mark.parametrize(
        "zone",
        [
            "NST3:30NDT,M3.2.0,M11.1.0",
            "SST11",
            "IST-5:30",
            "NPT-5:45",
            "LINT-14",
        ],
    )
    def test_host_zone_round_trip_in_other_zones(self, host_zone, zone):
        host_zone(zone)
        for day in (date(2024, 1, 1), date(2024, 3, 10), date(2024, 7, 14), date(2024, 11, 3), date(2024, 12, 31)):
            instant = codec.date_to_instant(day)
            assert instant.utcoffset() is not None
            assert codec.instant_to_date(instant) == day

    @pytest.mark.skipif(not hasattr(time, "tzset"), reason="needs time.tzset")
    def test_host_zone_instant_is_local_midnight(self, host_zone):
        host_zone("IST-5:30")
        instant = codec.date_to_instant(date(2024, 3, 1))
        assert instant.isoformat() == "2024-03-01T00:00:00+05:30"


class TestAmounts:

    @pytest.mark.parametrize(
        "minor_units, transaction_type, expected",
        [
            (0, None, "$ 0.00"),
            (450, TransactionType.EXPENSE, "- $ 4.50"),
            (123450, TransactionType.EXPENSE, "- $ 1 234.50"),
            (123450, TransactionType.INCOME, "+ $ 1 234.50"),
            (100000000, TransactionType.INCOME, "+ $ 1 000 000.00"),
            (5, None, "$ 0.05"),
        ],
    )
    def test_amount_to_masked(self, minor_units, transaction_type, expected):
        assert codec.amount_to_masked(minor_units, transaction_type) == expected

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("- $ 1 234.50", 123450),
            ("+ $ 4.50", 450),
            ("$ 0.00", 0),
            ("12", 12),
            ("$ 4.505", 4505),
        ],
    )
    def test_masked_to_amount(self, value, expected):
        assert codec.masked_to_amount(value) == expected

    @pytest.mark.parametrize("value", ["", "$", "- $ ", "abc", None])
    def test_masked_to_amount_without_digits(self, value):
        assert codec.masked_to_amount(value) is None

    @pytest.mark.parametrize("value", ["9" * 19, "9" * 5000, "$ " + "1 000 " * 1000])
    def test_masked_to_amount_too_many_digits(self, value):
        assert codec.masked_to_amount(value) is None

    def test_masked_to_amount_longest_accepted(self):
        assert codec.masked_to_amount("9" * codec.MAX_AMOUNT_DIGITS) == int("9" * codec.MAX_AMOUNT_DIGITS)

    @pytest.mark.parametrize("transaction_type", [None, TransactionType.INCOME, TransactionType.EXPENSE])
    def test_amount_round_trip(self, transaction_type):
        for minor_units in (0, 1, 99, 100, 123456789):
            masked = codec.amount_to_masked(minor_units, transaction_type)
            assert codec.masked_to_amount(masked) == minor_units

    def test_currency_prefix(self):
        assert codec.currency_prefix(TransactionType.INCOME) == "+ $"
        assert codec.currency_prefix(TransactionType.EXPENSE) == "- $"
        assert codec.currency_prefix(None) == "$"


class TestCategories:

    def test_category_round_trip(self, food):
        assert codec.draft_to_category(codec.category_to_draft(food)) == food

    @pytest.mark.parametrize("value", ["", "Food", "{}", '{"value": "Food"}', "[1, 2]"])
    def test_malformed_selection(self, value):
        with pytest.raises(MalformedSelectionError) as exc_info:
            codec.draft_to_category(value)
        assert exc_info.value.field == "category"

    def test_category_label(self, food):
        assert codec.category_label(food) == "01 - Food"
        assert codec.category_label(Category(id="c", value="Gift", type=CategoryType.OTHER)) == "Gift"

    def test_selectable_categories(self, categories):
        expense = codec.selectable_categories(categories, TransactionType.EXPENSE)
        income = codec.selectable_categories(categories, TransactionType.INCOME)

        assert [c.value for c in expense] == ["Food", "Gift"]
        assert [c.value for c in income] == ["Salary", "Gift"]
        assert codec.selectable_categories(categories, None) == []
