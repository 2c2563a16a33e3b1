"""Cash and options analytics over the transaction log."""

from decimal import Decimal

from tradeledger.config import LedgerSettings
from tradeledger.engines.positions import PositionBuilder
from tradeledger.models.enums import OptionAction, StockAction
from tradeledger.models.reports import OptionsSummary
from tradeledger.models.transactions import OptionTransaction, StockTransaction, Transaction
from tradeledger.normalization.ledger import TransactionLog

ZERO = Decimal("0")


def cash_effect(txn: Transaction) -> Decimal:
    """Signed change to account cash caused by one transaction.

    Collateral for sold options is not deducted; only premium and fees move
    cash. Splits and transfers move no cash.
    """
    if isinstance(txn, StockTransaction):
        if txn.action == StockAction.BUY:
            return -(txn.total_amount + txn.fees)
        if txn.action == StockAction.SELL:
            return txn.total_amount - txn.fees
        if txn.action == StockAction.DIVIDEND:
            return txn.total_amount
        return ZERO

    if txn.action in (OptionAction.SELL_TO_OPEN, OptionAction.SELL_TO_CLOSE):
        return txn.total_premium - txn.fees
    return -(txn.total_premium + txn.fees)


def account_cash(log: TransactionLog, account_id: str) -> Decimal:
    """Initial cash of the account plus the effect of each of its transactions."""
    initial = next((a.initial_cash for a in log.accounts if a.id == account_id), ZERO)
    return initial + sum(
        (cash_effect(t) for t in log if t.account_id == account_id), ZERO
    )


class OptionsAnalytics:
    """Premium flow and win rate across option activity."""

    def __init__(self, settings: LedgerSettings | None = None):
        self.position_builder = PositionBuilder(settings)

    def summarize(self, log: TransactionLog, account_id: str | None = None) -> OptionsSummary:
        options: list[OptionTransaction] = [
            t for t in log.option_transactions if account_id in (None, t.account_id)
        ]
        totals = {action: ZERO for action in OptionAction}
        for t in options:
            totals[t.action] += t.total_premium

        snapshot = self.position_builder.build(log, account_id=account_id)
        closed_pl: list[Decimal] = []
        for t in options:
            if not t.action.is_closing:
                continue
            realized = t.realized_pl
            if realized is None:
                realized = snapshot.realized_by_transaction.get(t.id)
            if realized is not None:
                closed_pl.append(realized)

        wins = sum(1 for pl in closed_pl if pl > 0)
        win_rate = Decimal(wins) / Decimal(len(closed_pl)) * 100 if closed_pl else ZERO

        return OptionsSummary(
            total_premium_collected=totals[OptionAction.SELL_TO_OPEN],
            total_premium_paid=totals[OptionAction.BUY_TO_OPEN],
            total_closing_costs=totals[OptionAction.BUY_TO_CLOSE],
            total_closing_proceeds=totals[OptionAction.SELL_TO_CLOSE],
            net_premium=(
                totals[OptionAction.SELL_TO_OPEN]
                - totals[OptionAction.BUY_TO_OPEN]
                - totals[OptionAction.BUY_TO_CLOSE]
                + totals[OptionAction.SELL_TO_CLOSE]
            ),
            total_realized_pl=sum(closed_pl, ZERO),
            closed_count=len(closed_pl),
            win_rate=win_rate,
            open_premium=sum(
                (p.total_premium for p in snapshot.open_option_positions), ZERO
            ),
        )
