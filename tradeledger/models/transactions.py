"""Account and transaction records.

Transactions are immutable once recorded. Dates keep the ``YYYY-MM-DD`` text
they arrived with; ``trade_date`` parses them when a comparison is needed and
is None for a date that does not parse, which the validator reports.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tradeledger.models.enums import (
    AccountType,
    OptionAction,
    OptionStrategy,
    OptionType,
    StockAction,
)
from tradeledger.utils.dates import parse_date


class LedgerRecord(BaseModel):
    """Accepts snake_case or the camelCase keys used by upstream parsers."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Account(LedgerRecord):
    id: str
    name: str
    account_type: AccountType = AccountType.BROKERAGE
    broker: str = ""
    initial_cash: Decimal = Decimal("0")
    is_active: bool = True


class StockTransaction(LedgerRecord):
    id: str
    account_id: str
    ticker: str
    action: StockAction
    shares: Decimal
    price_per_share: Decimal
    fees: Decimal = Decimal("0")
    total_amount: Decimal
    date: str
    split_ratio: str | None = None
    notes: str = ""

    @property
    def trade_date(self) -> date | None:
        return parse_date(self.date)

    @property
    def split_multiplier(self) -> Decimal | None:
        """``new / old`` for a well-formed split ratio, else None."""
        if not self.split_ratio:
            return None
        new, _, old = self.split_ratio.partition(":")
        if not (new.isdigit() and old.isdigit()) or int(old) == 0:
            return None
        return Decimal(new) / Decimal(old)


class OptionTransaction(LedgerRecord):
    id: str
    account_id: str
    ticker: str
    strategy: OptionStrategy = OptionStrategy.OTHER
    option_type: OptionType
    action: OptionAction
    contracts: int
    strike_price: Decimal
    premium_per_share: Decimal
    total_premium: Decimal
    fees: Decimal = Decimal("0")
    expiration_date: str
    transaction_date: str
    assignment_date: str | None = None
    realized_pl: Decimal | None = Field(default=None, alias="realizedPL")
    notes: str = ""

    @property
    def trade_date(self) -> date | None:
        return parse_date(self.transaction_date)

    @property
    def expiration(self) -> date | None:
        return parse_date(self.expiration_date)

    @property
    def contract_key(self) -> tuple[str, OptionType, Decimal, str]:
        """(ticker, type, strike, expiration): what a closing order must match exactly."""
        return (self.ticker, self.option_type, self.strike_price, self.expiration_date)


Transaction = StockTransaction | OptionTransaction
