"""Lot matching engine: FIFO matching of option closes against open lots."""

import logging
from decimal import Decimal

from tradeledger.models.enums import OpeningSide, OptionAction, PositionStatus
from tradeledger.models.positions import ClosingCheck, OptionPosition, PositionUpdate
from tradeledger.models.transactions import OptionTransaction

logger = logging.getLogger(__name__)


class LotMatcher:
    """Matches closing option transactions to open lots, oldest first."""

    @staticmethod
    def _matches(position: OptionPosition, closing: OptionTransaction) -> bool:
        return (
            position.status == PositionStatus.OPEN
            and position.contracts > 0
            and position.ticker == closing.ticker
            and position.option_type == closing.option_type
            and position.strike_price == closing.strike_price
            and position.expiration_date == closing.expiration_date
        )

    def matching_positions(
        self, closing: OptionTransaction, open_positions: list[OptionPosition]
    ) -> list[OptionPosition]:
        """Open lots for the exact contract, sorted oldest first (stable on ties)."""
        return sorted(
            (p for p in open_positions if self._matches(p, closing)),
            key=lambda p: p.open_date,
        )

    def match_close(
        self, closing: OptionTransaction, open_positions: list[OptionPosition]
    ) -> list[PositionUpdate]:
        """FIFO: consume the oldest lots first and prorate P/L per lot.

        Opening premium and fees are prorated by the share of the lot consumed;
        closing premium and fees by the share of the closing order it absorbed.
        Contracts beyond what is open are dropped; callers run
        ``validate_closing_transaction`` first. Positions are not mutated.

        Returns:
            One PositionUpdate per lot touched, in consumption order.
        """
        updates: list[PositionUpdate] = []
        if closing.contracts <= 0:
            return updates

        remaining = closing.contracts
        close_contracts = Decimal(closing.contracts)

        for position in self.matching_positions(closing, open_positions):
            if remaining <= 0:
                break
            consumed = min(remaining, position.contracts)
            lot_share = Decimal(consumed) / Decimal(position.contracts)
            close_share = Decimal(consumed) / close_contracts

            open_premium = abs(position.total_premium) * lot_share
            close_premium = closing.total_premium * close_share
            fees = position.fees * lot_share + closing.fees * close_share

            if position.opening_side == OpeningSide.SOLD:
                realized = open_premium - close_premium - fees
            else:
                realized = close_premium - open_premium - fees

            left = position.contracts - consumed
            updates.append(
                PositionUpdate(
                    position_id=position.id,
                    contracts_closed=consumed,
                    remaining_contracts=left,
                    realized_pl=realized,
                    is_closed=left == 0,
                )
            )
            logger.debug(
                "Matched %d contract(s) of %s to lot %s (realized %s)",
                consumed, closing.id, position.id, realized,
            )
            remaining -= consumed

        if remaining > 0:
            logger.debug("Dropped %d unmatched contract(s) of %s", remaining, closing.id)
        return updates

    def validate_closing_transaction(
        self, closing: OptionTransaction, open_positions: list[OptionPosition]
    ) -> ClosingCheck:
        """Pre-check that enough contracts are open before matching."""
        if not closing.action.is_closing:
            return ClosingCheck(valid=True)

        matches = self.matching_positions(closing, open_positions)
        open_contracts = sum(p.contracts for p in matches)
        if open_contracts == 0:
            return ClosingCheck(
                valid=False,
                error=(
                    f"Cannot close {closing.contracts} contracts: No open position found for "
                    f"{closing.ticker} {closing.option_type.value} ${closing.strike_price}"
                ),
            )
        if open_contracts < closing.contracts:
            return ClosingCheck(
                valid=False,
                error=(
                    f"Cannot close {closing.contracts} contracts: "
                    f"Only {open_contracts} contracts are open"
                ),
            )

        expected_side = OpeningSide.for_action(closing.action)
        if all(p.opening_side != expected_side for p in matches):
            opening_action = matches[0].opening_side.opening_action.value
            return ClosingCheck(
                valid=True,
                warning=(
                    f"Position was opened with {opening_action} but closing with "
                    f"{closing.action.value}. This may indicate an error."
                ),
            )
        return ClosingCheck(valid=True)

    @staticmethod
    def realized_pl(open_txn: OptionTransaction, close_txn: OptionTransaction) -> Decimal:
        """Realized P/L of one opening transaction closed in full by another."""
        fees = open_txn.fees + close_txn.fees
        if open_txn.action == OptionAction.SELL_TO_OPEN:
            return open_txn.total_premium - close_txn.total_premium - fees
        return close_txn.total_premium - open_txn.total_premium - fees
