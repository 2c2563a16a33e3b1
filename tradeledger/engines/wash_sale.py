"""Wash-sale candidate detection.

A loss-realizing close is flagged when a substantially identical position is
opened within the window (30 calendar days either side, inclusive). The
detector only reports candidates; it does not compute disallowed losses or
touch cost basis.

Stock losses are measured against the single most recent prior buy of the
ticker rather than a full lot ledger, which makes the loss figure an
approximation.
"""

import logging
from decimal import Decimal

from tradeledger.config import LedgerSettings
from tradeledger.engines.positions import PositionBuilder, PositionSnapshot
from tradeledger.models.enums import StockAction
from tradeledger.models.reports import WashSaleInfo
from tradeledger.models.transactions import OptionTransaction, StockTransaction
from tradeledger.normalization.ledger import TransactionLog
from tradeledger.utils.dates import window

logger = logging.getLogger(__name__)


class WashSaleDetector:
    """Flags loss-realizing closes that have re-entries inside the window."""

    def __init__(self, settings: LedgerSettings | None = None):
        self.settings = settings or LedgerSettings()
        self.position_builder = PositionBuilder(self.settings)

    def detect(
        self,
        transaction_id: str,
        log: TransactionLog,
        snapshot: PositionSnapshot | None = None,
    ) -> WashSaleInfo | None:
        """Check one transaction. None when it is not a loss-realizing close.

        Args:
            transaction_id: Id of the closing transaction to check.
            log: The full transaction log.
            snapshot: Optional precomputed positions, used to look up the
                realized P/L of option closes that do not carry one.
        """
        txn = log.find(transaction_id)
        if txn is None:
            return None
        if isinstance(txn, StockTransaction):
            return self._detect_stock(txn, log)
        return self._detect_option(txn, log, snapshot)

    def _detect_stock(self, txn: StockTransaction, log: TransactionLog) -> WashSaleInfo | None:
        if txn.action != StockAction.SELL or txn.trade_date is None:
            return None

        loss = self._stock_sale_result(txn, log.stock_transactions, exclude_id=None)
        if loss is None or loss >= 0:
            return None

        start, end = window(txn.trade_date, self.settings.wash_sale_window_days)
        related = [
            t.id
            for t in log.stock_transactions
            if t.id != txn.id
            and t.ticker == txn.ticker
            and t.action == StockAction.BUY
            and t.trade_date is not None
            and start <= t.trade_date <= end
        ]
        return WashSaleInfo(
            transaction_id=txn.id,
            ticker=txn.ticker,
            loss_amount=abs(loss),
            wash_sale_period_start=start,
            wash_sale_period_end=end,
            has_wash_sale=bool(related),
            related_transaction_ids=related,
        )

    def _detect_option(
        self,
        txn: OptionTransaction,
        log: TransactionLog,
        snapshot: PositionSnapshot | None,
    ) -> WashSaleInfo | None:
        if not txn.action.is_closing or txn.trade_date is None:
            return None

        realized = txn.realized_pl
        if realized is None:
            snapshot = snapshot or self.position_builder.build(log)
            realized = snapshot.realized_by_transaction.get(txn.id)
        if realized is None or realized >= 0:
            return None

        start, end = window(txn.trade_date, self.settings.wash_sale_window_days)
        related = [
            t.id
            for t in log.option_transactions
            if t.id != txn.id
            and t.ticker == txn.ticker
            and t.option_type == txn.option_type
            and t.action.is_opening
            and t.trade_date is not None
            and start <= t.trade_date <= end
        ]
        return WashSaleInfo(
            transaction_id=txn.id,
            ticker=txn.ticker,
            loss_amount=abs(realized),
            wash_sale_period_start=start,
            wash_sale_period_end=end,
            has_wash_sale=bool(related),
            related_transaction_ids=related,
        )

    @staticmethod
    def _stock_sale_result(
        sale: StockTransaction,
        stocks: list[StockTransaction],
        exclude_id: str | None,
    ) -> Decimal | None:
        """Sale proceeds minus the cost of the most recent earlier buy, or None without one."""
        prior_buys = [
            t
            for t in stocks
            if t.ticker == sale.ticker
            and t.action == StockAction.BUY
            and t.id != exclude_id
            and t.trade_date is not None
            and t.trade_date < sale.trade_date
        ]
        if not prior_buys:
            return None
        latest = max(prior_buys, key=lambda t: t.trade_date)
        return sale.price_per_share * sale.shares - latest.price_per_share * latest.shares

    def check_reentry(self, transaction_id: str, log: TransactionLog) -> WashSaleInfo | None:
        """For a stock buy, report a loss sale of the same ticker inside the window."""
        txn = log.find(transaction_id)
        if not isinstance(txn, StockTransaction) or txn.action != StockAction.BUY:
            return None
        if txn.trade_date is None:
            return None

        start, end = window(txn.trade_date, self.settings.wash_sale_window_days)
        stocks = log.stock_transactions
        for sale in stocks:
            if (
                sale.id == txn.id
                or sale.ticker != txn.ticker
                or sale.action != StockAction.SELL
                or sale.trade_date is None
                or not start <= sale.trade_date <= end
            ):
                continue
            result = self._stock_sale_result(sale, stocks, exclude_id=txn.id)
            if result is not None and result < 0:
                return WashSaleInfo(
                    transaction_id=txn.id,
                    ticker=txn.ticker,
                    loss_amount=abs(result),
                    wash_sale_period_start=start,
                    wash_sale_period_end=end,
                    has_wash_sale=True,
                    related_transaction_ids=[sale.id],
                )
        return None

    def scan(self, log: TransactionLog) -> list[WashSaleInfo]:
        """Flagged wash-sale candidates across every closing transaction, by date."""
        snapshot = self.position_builder.build(log)
        flagged: list[tuple] = []
        for txn in log:
            info = self.detect(txn.id, log, snapshot=snapshot)
            if info is not None and info.has_wash_sale:
                flagged.append((txn.trade_date, info))
        flagged.sort(key=lambda item: item[0])
        logger.debug("Wash-sale scan flagged %d of %d transactions", len(flagged), len(log))
        return [info for _, info in flagged]
