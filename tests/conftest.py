"""Shared test fixtures for TradeLedger."""

from datetime import date
from decimal import Decimal

import pytest

from tradeledger.models.enums import AccountType, OptionAction, OptionStrategy, OptionType, StockAction
from tradeledger.models.transactions import Account, OptionTransaction, StockTransaction
from tradeledger.normalization.ledger import TransactionLog


@pytest.fixture
def today() -> date:
    return date(2024, 6, 1)


@pytest.fixture
def sample_account() -> Account:
    return Account(
        id="acct-1",
        name="Main Brokerage",
        account_type=AccountType.BROKERAGE,
        broker="Fidelity",
        initial_cash=Decimal("10000"),
    )


@pytest.fixture
def empty_log(sample_account: Account) -> TransactionLog:
    return TransactionLog(accounts=[sample_account])


@pytest.fixture
def aapl_buy() -> StockTransaction:
    return StockTransaction(
        id="stk-buy-1",
        account_id="acct-1",
        ticker="AAPL",
        action=StockAction.BUY,
        shares=Decimal("100"),
        price_per_share=Decimal("150"),
        total_amount=Decimal("15000"),
        date="2024-01-02",
    )


@pytest.fixture
def aapl_covered_call() -> OptionTransaction:
    return OptionTransaction(
        id="opt-cc-1",
        account_id="acct-1",
        ticker="AAPL",
        strategy=OptionStrategy.COVERED_CALL,
        option_type=OptionType.CALL,
        action=OptionAction.SELL_TO_OPEN,
        contracts=1,
        strike_price=Decimal("160"),
        premium_per_share=Decimal("2.50"),
        total_premium=Decimal("250"),
        expiration_date="2024-02-16",
        transaction_date="2024-01-05",
    )


@pytest.fixture
def raw_stock_record() -> dict:
    return {
        "accountId": "acct-1",
        "ticker": " msft ",
        "action": "buy",
        "shares": "10",
        "pricePerShare": "$410.25",
        "fees": 0,
        "date": "2024-03-04",
        "notes": "<b>first</b> lot",
    }


@pytest.fixture
def raw_option_record() -> dict:
    return {
        "accountId": "acct-1",
        "ticker": "AAPL",
        "strategy": "covered-call",
        "optionType": "call",
        "action": "sell-to-open",
        "contracts": 2,
        "strikePrice": 160,
        "premiumPerShare": 1.25,
        "fees": 1.30,
        "expirationDate": "2024-04-19",
        "transactionDate": "2024-03-04",
    }
