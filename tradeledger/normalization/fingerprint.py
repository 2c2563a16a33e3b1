"""Transaction fingerprints for exact-duplicate detection.

A fingerprint is built from the fields that identify a trade economically,
so two submissions of the same trade match regardless of id or insertion
order. Matching is exact string equality: a one-cent difference is a
different trade.
"""

from collections.abc import Iterable
from decimal import Decimal

from tradeledger.models.transactions import OptionTransaction, StockTransaction, Transaction


def _number(value: Decimal | int) -> str:
    """Canonical text for a number: 150, 150.0 and 150.00 all become '150'."""
    normalized = Decimal(value).normalize()
    if normalized == 0:
        return "0"
    return format(normalized, "f")


def stock_fingerprint(txn: StockTransaction) -> str:
    return "|".join(
        [
            txn.account_id,
            txn.ticker,
            txn.action.value,
            txn.date,
            _number(txn.shares),
            _number(txn.price_per_share),
            _number(txn.total_amount),
        ]
    )


def option_fingerprint(txn: OptionTransaction) -> str:
    return "|".join(
        [
            txn.account_id,
            txn.ticker,
            txn.option_type.value,
            txn.action.value,
            txn.transaction_date,
            _number(txn.contracts),
            _number(txn.strike_price),
            txn.expiration_date,
            _number(txn.premium_per_share),
            _number(txn.total_premium),
        ]
    )


def fingerprint(txn: Transaction) -> str:
    if isinstance(txn, OptionTransaction):
        return option_fingerprint(txn)
    return stock_fingerprint(txn)


def find_duplicates(candidate: Transaction, existing: Iterable[Transaction]) -> list[Transaction]:
    """Transactions in ``existing`` of the same kind with an identical fingerprint."""
    key = fingerprint(candidate)
    kind = type(candidate)
    return [txn for txn in existing if type(txn) is kind and fingerprint(txn) == key]
