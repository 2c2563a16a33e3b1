"""Tests for field and record sanitization."""

from datetime import date
from decimal import Decimal

import pytest

from tradeledger.normalization.sanitizer import (
    sanitize_account_name,
    sanitize_date,
    sanitize_notes,
    sanitize_number,
    sanitize_option_action,
    sanitize_option_record,
    sanitize_option_type,
    sanitize_stock_action,
    sanitize_stock_record,
    sanitize_strategy,
    sanitize_string,
    sanitize_ticker,
)


class TestSanitizeString:
    def test_strips_markup(self):
        assert sanitize_string("<script>alert(1)</script>") == "scriptalert(1)/script"

    def test_strips_javascript_and_handlers(self):
        assert sanitize_string("javascript:go() onclick=x") == "go() x"

    def test_trims_and_truncates(self):
        assert sanitize_string("  hello  ") == "hello"
        assert len(sanitize_string("a" * 2000)) == 1000

    def test_empty_values(self):
        assert sanitize_string(None) == ""
        assert sanitize_string("") == ""

    def test_notes_and_account_name_limits(self):
        assert len(sanitize_notes("n" * 600)) == 500
        assert len(sanitize_account_name("a" * 150)) == 100


class TestSanitizeTicker:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            (" aapl ", "AAPL"),
            ("brk.b", "BRKB"),
            ("GOOGLEX", "GOOGL"),
            ("123", ""),
            (None, ""),
        ],
    )
    def test_ticker(self, raw, expected):
        assert sanitize_ticker(raw) == expected


class TestSanitizeNumber:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("$1,250.50", Decimal("1250.50")),
            ("-3.5", Decimal("-3.5")),
            ("12abc", Decimal("12")),
            ("1.2.3", Decimal("1.2")),
            ("abc", Decimal("0")),
            ("", Decimal("0")),
            (None, Decimal("0")),
            (42, Decimal("42")),
            (0.1, Decimal("0.1")),
            (float("inf"), Decimal("0")),
            (float("nan"), Decimal("0")),
            (Decimal("Infinity"), Decimal("0")),
            (True, Decimal("0")),
        ],
    )
    def test_number(self, raw, expected):
        assert sanitize_number(raw) == expected

    def test_never_raises_on_unexpected_types(self):
        assert sanitize_number(["1"]) == Decimal("1")
        assert sanitize_number({}) == Decimal("0")


class TestSanitizeDate:
    def test_valid_date(self):
        assert sanitize_date("2024-03-15") == "2024-03-15"

    def test_strips_stray_characters(self):
        assert sanitize_date(" 2024-03-15 ") == "2024-03-15"

    def test_date_object(self):
        assert sanitize_date(date(2024, 3, 15)) == "2024-03-15"

    @pytest.mark.parametrize("raw", ["2024-02-30", "2023-02-29", "03/15/2024", "2024-3-5", "", None])
    def test_invalid_dates_become_empty(self, raw):
        assert sanitize_date(raw) == ""

    def test_leap_day(self):
        assert sanitize_date("2024-02-29") == "2024-02-29"


class TestSanitizeEnums:
    def test_option_action(self):
        assert sanitize_option_action(" Sell-To-Open ") == "sell-to-open"
        assert sanitize_option_action("sell") == ""

    def test_option_type(self):
        assert sanitize_option_type("CALL") == "call"
        assert sanitize_option_type("p") == "put"
        assert sanitize_option_type("straddle") == ""

    def test_stock_action(self):
        assert sanitize_stock_action("Transfer_In") == "transfer-in"
        assert sanitize_stock_action("short") == ""

    def test_strategy_falls_back_to_other(self):
        assert sanitize_strategy("covered_call") == "covered-call"
        assert sanitize_strategy("butterfly") == "other"
        assert sanitize_strategy(None) == "other"


class TestSanitizeRecords:
    def test_stock_record(self, raw_stock_record):
        cleaned = sanitize_stock_record(raw_stock_record)
        assert cleaned["ticker"] == "MSFT"
        assert cleaned["account_id"] == "acct-1"
        assert cleaned["price_per_share"] == Decimal("410.25")
        assert cleaned["shares"] == Decimal("10")
        assert cleaned["total_amount"] == Decimal("4102.50")
        assert cleaned["notes"] == "bfirst/b lot"
        assert cleaned["id"] == ""

    def test_stock_record_keeps_given_total(self, raw_stock_record):
        cleaned = sanitize_stock_record({**raw_stock_record, "totalAmount": "4100"})
        assert cleaned["total_amount"] == Decimal("4100")

    def test_option_record(self, raw_option_record):
        cleaned = sanitize_option_record(raw_option_record)
        assert cleaned["contracts"] == 2
        assert isinstance(cleaned["contracts"], int)
        assert cleaned["strike_price"] == Decimal("160")
        assert cleaned["total_premium"] == Decimal("250")
        assert cleaned["option_type"] == "call"
        assert cleaned["transaction_date"] == "2024-03-04"
        assert cleaned["realized_pl"] is None
        assert cleaned["assignment_date"] is None

    def test_option_record_legacy_keys(self):
        cleaned = sanitize_option_record(
            {
                "ticker": "spy",
                "type": "P",
                "action": "buy-to-open",
                "contracts": "1",
                "strike": "400",
                "premium": "2.10",
                "expiration": "2024-06-21",
                "date": "2024-05-01",
            }
        )
        assert cleaned["ticker"] == "SPY"
        assert cleaned["option_type"] == "put"
        assert cleaned["strike_price"] == Decimal("400")
        assert cleaned["total_premium"] == Decimal("210")
        assert cleaned["expiration_date"] == "2024-06-21"
        assert cleaned["transaction_date"] == "2024-05-01"

    def test_fractional_contracts_kept_for_validation(self):
        cleaned = sanitize_option_record({"contracts": "1.5"})
        assert cleaned["contracts"] == Decimal("1.5")
