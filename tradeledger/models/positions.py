"""Derived position models.

Positions are never persisted as ground truth: they are rebuilt from the
transaction log on every query.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from tradeledger.models.enums import (
    OpeningSide,
    OptionStrategy,
    OptionType,
    PositionStatus,
)


class OptionPosition(BaseModel):
    id: str
    account_id: str
    ticker: str
    strategy: OptionStrategy = OptionStrategy.OTHER
    option_type: OptionType
    strike_price: Decimal
    expiration_date: str
    contracts: int = Field(ge=0)
    total_premium: Decimal  # positive when sold to open, negative when bought
    fees: Decimal = Decimal("0")
    opening_side: OpeningSide
    open_date: str
    close_date: str | None = None
    status: PositionStatus = PositionStatus.OPEN
    realized_pl: Decimal = Decimal("0")
    transaction_ids: list[str] = Field(default_factory=list)

    @property
    def identity_key(self) -> tuple[str, str, OptionType, Decimal, str]:
        return (
            self.account_id,
            self.ticker,
            self.option_type,
            self.strike_price,
            self.expiration_date,
        )

    @property
    def lot_key(self) -> tuple:
        """Identity key plus opening side; one open lot exists per key."""
        return (*self.identity_key, self.opening_side)

    @property
    def average_premium(self) -> Decimal:
        """Per-share premium of the remaining contracts."""
        if self.contracts == 0:
            return Decimal("0")
        return abs(self.total_premium) / (self.contracts * 100)


class StockPosition(BaseModel):
    ticker: str
    account_id: str
    shares: Decimal
    average_cost_basis: Decimal
    total_cost_basis: Decimal
    first_purchase_date: str
    last_transaction_date: str
    transaction_ids: list[str] = Field(default_factory=list)
    realized_pl: Decimal = Decimal("0")
    premium_adjusted_cost_basis: Decimal | None = None
    premium_adjusted_total_cost: Decimal | None = None
    applied_premiums: Decimal | None = None


class PositionUpdate(BaseModel):
    """Effect of one closing transaction on one lot."""

    position_id: str
    contracts_closed: int
    remaining_contracts: int
    realized_pl: Decimal
    is_closed: bool


class ClosingCheck(BaseModel):
    valid: bool
    error: str | None = None
    warning: str | None = None
