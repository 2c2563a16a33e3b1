"""Tests for transaction, position and enum models."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from tradeledger.config import LedgerSettings
from tradeledger.models.enums import OpeningSide, OptionAction, OptionType, StockAction
from tradeledger.models.positions import OptionPosition
from tradeledger.models.reports import ValidationResult, WashSaleInfo
from tradeledger.models.transactions import OptionTransaction, StockTransaction
from tradeledger.utils.dates import add_years, parse_date, window


class TestStockTransaction:
    def test_camel_case_keys(self):
        txn = StockTransaction.model_validate(
            {
                "id": "s1",
                "accountId": "acct-1",
                "ticker": "AAPL",
                "action": "transfer-in",
                "shares": "5",
                "pricePerShare": "100",
                "totalAmount": "500",
                "date": "2024-01-02",
            }
        )
        assert txn.account_id == "acct-1"
        assert txn.action == StockAction.TRANSFER_IN
        assert txn.trade_date == date(2024, 1, 2)

    def test_frozen(self, aapl_buy):
        with pytest.raises(ValidationError):
            aapl_buy.shares = Decimal("1")

    def test_invalid_date_is_representable(self, aapl_buy):
        txn = aapl_buy.model_copy(update={"date": "2024-02-30"})
        assert txn.trade_date is None

    @pytest.mark.parametrize(
        "ratio,expected",
        [("2:1", Decimal("2")), ("1:4", Decimal("0.25")), ("2:0", None), ("two", None), (None, None)],
    )
    def test_split_multiplier(self, aapl_buy, ratio, expected):
        txn = aapl_buy.model_copy(update={"action": StockAction.SPLIT, "split_ratio": ratio})
        assert txn.split_multiplier == expected


class TestOptionTransaction:
    def test_realized_pl_alias(self):
        txn = OptionTransaction.model_validate(
            {
                "id": "o1",
                "accountId": "acct-1",
                "ticker": "AAPL",
                "optionType": "put",
                "action": "buy-to-close",
                "contracts": 1,
                "strikePrice": "150",
                "premiumPerShare": "1",
                "totalPremium": "100",
                "expirationDate": "2024-03-15",
                "transactionDate": "2024-03-01",
                "realizedPL": "-25",
            }
        )
        assert txn.realized_pl == Decimal("-25")
        assert txn.expiration == date(2024, 3, 15)
        assert txn.contract_key == ("AAPL", OptionType.PUT, Decimal("150"), "2024-03-15")

    def test_strategy_defaults_to_other(self, aapl_covered_call):
        data = aapl_covered_call.model_dump()
        data.pop("strategy")
        assert OptionTransaction(**data).strategy == "other"


class TestEnums:
    def test_opening_side_for_actions(self):
        assert OpeningSide.for_action(OptionAction.SELL_TO_OPEN) == OpeningSide.SOLD
        assert OpeningSide.for_action(OptionAction.BUY_TO_CLOSE) == OpeningSide.SOLD
        assert OpeningSide.for_action(OptionAction.BUY_TO_OPEN) == OpeningSide.BOUGHT
        assert OpeningSide.for_action(OptionAction.SELL_TO_CLOSE) == OpeningSide.BOUGHT

    def test_counterpart_actions(self):
        assert OpeningSide.SOLD.closing_action == OptionAction.BUY_TO_CLOSE
        assert OpeningSide.BOUGHT.closing_action == OptionAction.SELL_TO_CLOSE
        assert OpeningSide.SOLD.opening_action == OptionAction.SELL_TO_OPEN

    def test_opening_and_closing(self):
        assert OptionAction.BUY_TO_OPEN.is_opening
        assert OptionAction.SELL_TO_CLOSE.is_closing
        assert not OptionAction.SELL_TO_OPEN.is_closing


class TestReports:
    def test_warnings_do_not_invalidate(self):
        result = ValidationResult()
        result.add_warning("date", "future")
        assert result.is_valid
        result.add_error("shares", "bad")
        assert not result.is_valid
        assert [i.field for i in result.errors] == ["shares"]

    def test_wash_sale_loss_non_negative(self):
        with pytest.raises(ValidationError):
            WashSaleInfo(
                transaction_id="s1",
                ticker="AAPL",
                loss_amount=Decimal("-1"),
                wash_sale_period_start=date(2024, 1, 1),
                wash_sale_period_end=date(2024, 3, 1),
                has_wash_sale=False,
            )


class TestDates:
    def test_parse_date(self):
        assert parse_date("2024-02-29") == date(2024, 2, 29)
        assert parse_date("2023-02-29") is None
        assert parse_date("2024-1-1") is None
        assert parse_date(None) is None

    def test_window_inclusive_bounds(self):
        assert window(date(2024, 3, 1), 30) == (date(2024, 1, 31), date(2024, 3, 31))

    def test_add_years_leap_day(self):
        assert add_years(date(2024, 2, 29), 2) == date(2026, 2, 28)


class TestSettings:
    def test_defaults(self):
        settings = LedgerSettings()
        assert settings.wash_sale_window_days == 30
        assert settings.contract_multiplier == 100
        assert settings.price_warning_threshold == Decimal("10000")

    def test_env_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TRADELEDGER_WASH_SALE_WINDOW_DAYS", "45")
        monkeypatch.setenv("TRADELEDGER_DB_PATH", str(tmp_path / "x.db"))
        settings = LedgerSettings.from_env()
        assert settings.wash_sale_window_days == 45
        assert settings.db_path == tmp_path / "x.db"


class TestOptionPosition:
    def test_lot_key_adds_side_to_identity(self):
        position = OptionPosition(
            id="p1",
            account_id="acct-1",
            ticker="SPY",
            option_type=OptionType.PUT,
            strike_price=Decimal("400"),
            expiration_date="2024-06-21",
            contracts=1,
            total_premium=Decimal("-100"),
            opening_side=OpeningSide.BOUGHT,
            open_date="2024-05-01",
        )
        assert position.identity_key == ("acct-1", "SPY", OptionType.PUT, Decimal("400"), "2024-06-21")
        assert position.lot_key == (*position.identity_key, OpeningSide.BOUGHT)
