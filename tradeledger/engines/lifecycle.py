"""Closing, expiring and assigning open option positions.

Builds the transactions a close produces; recording them is left to the
caller, through ``TransactionLog.record``.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from uuid import uuid4

from tradeledger.config import LedgerSettings
from tradeledger.exceptions import InsufficientContractsError
from tradeledger.models.enums import CloseType, OpeningSide, OptionType, PositionStatus, StockAction
from tradeledger.models.positions import OptionPosition
from tradeledger.models.transactions import OptionTransaction, StockTransaction

logger = logging.getLogger(__name__)


@dataclass
class LifecycleResult:
    closing_transaction: OptionTransaction
    stock_transaction: StockTransaction | None = None


class PositionLifecycle:
    """Turns a close request on an open position into ledger transactions."""

    def __init__(self, settings: LedgerSettings | None = None):
        self.settings = settings or LedgerSettings()

    def close_position(
        self,
        position: OptionPosition,
        close_type: CloseType,
        close_date: str,
        close_price: Decimal = Decimal("0"),
        fees: Decimal = Decimal("0"),
        contracts: int | None = None,
    ) -> LifecycleResult:
        """Build the closing transaction for ``position``.

        Args:
            position: An open option position from a snapshot.
            close_type: Manual close, expiration or assignment.
            close_date: ``YYYY-MM-DD`` date of the close.
            close_price: Per-share premium of a manual close. Ignored for
                expirations and assignments, which carry no premium.
            fees: Fees charged on the close.
            contracts: Contracts to close; defaults to all remaining.

        Returns:
            The closing option transaction with its realized P/L, plus the
            stock transaction an assignment of a sold option delivers.

        Raises:
            InsufficientContractsError: If more contracts are requested than
                the position holds open.
        """
        available = position.contracts if position.status == PositionStatus.OPEN else 0
        closing = available if contracts is None else contracts
        if closing <= 0 or closing > available:
            raise InsufficientContractsError(position.id, closing, available)

        multiplier = self.settings.contract_multiplier
        per_share = close_price if close_type == CloseType.CLOSED else Decimal("0")
        close_premium = per_share * closing * multiplier
        close_fees = fees if close_type == CloseType.CLOSED else Decimal("0")

        share = Decimal(closing) / Decimal(position.contracts)
        open_premium = abs(position.total_premium) * share
        open_fees = position.fees * share
        if position.opening_side == OpeningSide.SOLD:
            realized = open_premium - close_premium - open_fees - close_fees
        else:
            realized = close_premium - open_premium - open_fees - close_fees

        closing_txn = OptionTransaction(
            id=str(uuid4()),
            account_id=position.account_id,
            ticker=position.ticker,
            strategy=position.strategy,
            option_type=position.option_type,
            action=position.opening_side.closing_action,
            contracts=closing,
            strike_price=position.strike_price,
            premium_per_share=per_share,
            total_premium=close_premium,
            fees=close_fees,
            expiration_date=position.expiration_date,
            transaction_date=close_date,
            assignment_date=close_date if close_type == CloseType.ASSIGNED else None,
            realized_pl=realized,
            notes=self._notes(position, close_type, closing, per_share),
        )
        logger.debug(
            "Built %s close of %d contract(s) for position %s (realized %s)",
            close_type.value, closing, position.id, realized,
        )

        stock_txn = None
        if close_type == CloseType.ASSIGNED and position.opening_side == OpeningSide.SOLD:
            stock_txn = self._assignment_delivery(position, closing, close_date)
        return LifecycleResult(closing_transaction=closing_txn, stock_transaction=stock_txn)

    def _assignment_delivery(
        self, position: OptionPosition, contracts: int, close_date: str
    ) -> StockTransaction:
        """Shares that change hands when a sold option is assigned.

        A sold put buys shares at the strike; a sold call sells them.
        """
        shares = Decimal(contracts * self.settings.contract_multiplier)
        is_put = position.option_type == OptionType.PUT
        return StockTransaction(
            id=str(uuid4()),
            account_id=position.account_id,
            ticker=position.ticker,
            action=StockAction.BUY if is_put else StockAction.SELL,
            shares=shares,
            price_per_share=position.strike_price,
            total_amount=shares * position.strike_price,
            date=close_date,
            notes=(
                f"Assigned from {position.strategy.value}: {contracts} "
                f"{position.option_type.value} contract(s) at ${position.strike_price} strike"
            ),
        )

    def _notes(
        self, position: OptionPosition, close_type: CloseType, contracts: int, per_share: Decimal
    ) -> str:
        if close_type == CloseType.EXPIRED:
            return f"{contracts} contract(s) expired worthless"
        if close_type == CloseType.ASSIGNED:
            verb = "bought" if position.option_type == OptionType.PUT else "sold"
            shares = contracts * self.settings.contract_multiplier
            return (
                f"{contracts} contract(s) assigned - {verb} {shares} shares of "
                f"{position.ticker} at ${position.strike_price}"
            )
        return f"Closed {contracts} contract(s) at ${per_share}/share"
