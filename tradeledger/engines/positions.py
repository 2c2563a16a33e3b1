"""Position derivation: rebuild option and stock positions from the log.

Every call recomputes from scratch. Nothing is cached between runs, so the
same log always produces the same snapshot.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from tradeledger.config import LedgerSettings
from tradeledger.engines.lot_matcher import LotMatcher
from tradeledger.exceptions import PositionNotFoundError
from tradeledger.models.enums import OpeningSide, PositionStatus, StockAction
from tradeledger.models.positions import OptionPosition, PositionUpdate, StockPosition
from tradeledger.models.transactions import OptionTransaction, StockTransaction
from tradeledger.normalization.ledger import TransactionLog

logger = logging.getLogger(__name__)

ACQUISITIONS = {StockAction.BUY, StockAction.INITIAL, StockAction.TRANSFER_IN}
DISPOSALS = {StockAction.SELL, StockAction.TRANSFER_OUT}


@dataclass
class PositionSnapshot:
    """Everything derived from one pass over the log."""

    option_positions: list[OptionPosition] = field(default_factory=list)
    stock_positions: list[StockPosition] = field(default_factory=list)
    realized_by_transaction: dict[str, Decimal] = field(default_factory=dict)
    updates: dict[str, list[PositionUpdate]] = field(default_factory=dict)
    rejected_closings: dict[str, str] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    @property
    def open_option_positions(self) -> list[OptionPosition]:
        return [p for p in self.option_positions if p.status == PositionStatus.OPEN]

    @property
    def total_realized_pl(self) -> Decimal:
        return sum(self.realized_by_transaction.values(), Decimal("0"))

    def option_position(self, position_id: str) -> OptionPosition:
        for position in self.option_positions:
            if position.id == position_id:
                return position
        raise PositionNotFoundError(position_id)


def _chronological(transactions, opening_first) -> list:
    """Order by trade date, then log order. Same-day opens precede same-day closes."""
    indexed = list(enumerate(transactions))
    indexed.sort(
        key=lambda item: (
            item[1].trade_date or date.min,
            0 if opening_first(item[1]) else 1,
            item[0],
        )
    )
    return [txn for _, txn in indexed]


class PositionBuilder:
    """Derives positions and realized P/L from a transaction log."""

    def __init__(self, settings: LedgerSettings | None = None):
        self.settings = settings or LedgerSettings()
        self.matcher = LotMatcher()

    def build(self, log: TransactionLog, account_id: str | None = None) -> PositionSnapshot:
        snapshot = PositionSnapshot()
        options = [t for t in log.option_transactions if account_id in (None, t.account_id)]
        stocks = [t for t in log.stock_transactions if account_id in (None, t.account_id)]
        self._build_options(options, snapshot)
        self._build_stocks(stocks, snapshot)
        return snapshot

    # --- Options ---

    def _build_options(self, transactions: list[OptionTransaction], snapshot: PositionSnapshot) -> None:
        open_lots: dict[tuple, OptionPosition] = {}

        for txn in _chronological(transactions, lambda t: t.action.is_opening):
            if txn.action.is_opening:
                self._open(txn, open_lots, snapshot)
            else:
                self._close(txn, open_lots, snapshot)

    def _open(self, txn: OptionTransaction, open_lots: dict, snapshot: PositionSnapshot) -> None:
        side = OpeningSide.for_action(txn.action)
        signed_premium = txn.total_premium if side == OpeningSide.SOLD else -txn.total_premium
        key = (txn.account_id, *txn.contract_key, side)

        position = open_lots.get(key)
        if position is None:
            position = OptionPosition(
                id=txn.id,
                account_id=txn.account_id,
                ticker=txn.ticker,
                strategy=txn.strategy,
                option_type=txn.option_type,
                strike_price=txn.strike_price,
                expiration_date=txn.expiration_date,
                contracts=txn.contracts,
                total_premium=signed_premium,
                fees=txn.fees,
                opening_side=side,
                open_date=txn.transaction_date,
                transaction_ids=[txn.id],
            )
            open_lots[position.lot_key] = position
            snapshot.option_positions.append(position)
            return

        position.contracts += txn.contracts
        position.total_premium += signed_premium
        position.fees += txn.fees
        position.transaction_ids.append(txn.id)

    def _close(self, txn: OptionTransaction, open_lots: dict, snapshot: PositionSnapshot) -> None:
        scope = [p for p in open_lots.values() if p.account_id == txn.account_id]
        # Closings consume lots of their own opening side; the other side only
        # when none is open, which the check below reports as a warning.
        side = OpeningSide.for_action(txn.action)
        same_side = [p for p in self.matcher.matching_positions(txn, scope) if p.opening_side == side]
        if same_side:
            scope = same_side
        check = self.matcher.validate_closing_transaction(txn, scope)
        if not check.valid:
            snapshot.rejected_closings[txn.id] = check.error or "Invalid closing transaction"
            logger.warning("Skipping closing transaction %s: %s", txn.id, check.error)
            return
        if check.warning:
            snapshot.warnings.append(f"{txn.id}: {check.warning}")

        updates = self.matcher.match_close(txn, scope)
        by_id = {p.id: p for p in scope}
        for update in updates:
            position = by_id[update.position_id]
            share = Decimal(update.contracts_closed) / Decimal(position.contracts)
            position.total_premium -= position.total_premium * share
            position.fees -= position.fees * share
            position.contracts = update.remaining_contracts
            position.realized_pl += update.realized_pl
            position.transaction_ids.append(txn.id)
            if update.is_closed:
                position.status = PositionStatus.CLOSED
                position.close_date = txn.transaction_date
                position.total_premium = Decimal("0")
                position.fees = Decimal("0")
                del open_lots[position.lot_key]

        snapshot.updates[txn.id] = updates
        snapshot.realized_by_transaction[txn.id] = sum(
            (u.realized_pl for u in updates), Decimal("0")
        )

    # --- Stocks ---

    def _build_stocks(self, transactions: list[StockTransaction], snapshot: PositionSnapshot) -> None:
        """Average-cost stock positions; a position that reaches zero shares is dropped."""
        positions: dict[tuple[str, str], StockPosition] = {}

        for txn in _chronological(transactions, lambda t: t.action in ACQUISITIONS):
            key = (txn.account_id, txn.ticker)
            existing = positions.get(key)

            if txn.action in ACQUISITIONS:
                if existing is None:
                    positions[key] = StockPosition(
                        ticker=txn.ticker,
                        account_id=txn.account_id,
                        shares=txn.shares,
                        average_cost_basis=txn.price_per_share,
                        total_cost_basis=txn.total_amount,
                        first_purchase_date=txn.date,
                        last_transaction_date=txn.date,
                        transaction_ids=[txn.id],
                    )
                else:
                    existing.shares += txn.shares
                    existing.total_cost_basis += txn.total_amount
                    existing.average_cost_basis = existing.total_cost_basis / existing.shares
                    existing.last_transaction_date = txn.date
                    existing.transaction_ids.append(txn.id)
                continue

            if existing is None:
                continue

            if txn.action in DISPOSALS:
                cost_removed = existing.average_cost_basis * txn.shares
                if txn.action == StockAction.SELL:
                    realized = txn.price_per_share * txn.shares - txn.fees - cost_removed
                    existing.realized_pl += realized
                    snapshot.realized_by_transaction[txn.id] = realized
                remaining = existing.shares - txn.shares
                if remaining > 0:
                    existing.shares = remaining
                    existing.total_cost_basis -= cost_removed
                    existing.last_transaction_date = txn.date
                    existing.transaction_ids.append(txn.id)
                else:
                    del positions[key]
            elif txn.action == StockAction.SPLIT and txn.split_multiplier:
                multiplier = txn.split_multiplier
                existing.shares *= multiplier
                existing.average_cost_basis /= multiplier
                existing.last_transaction_date = txn.date
                existing.transaction_ids.append(txn.id)

        snapshot.stock_positions = list(positions.values())
