"""Business-rule validation for stock and option transactions.

Hard errors block a transaction from being recorded; warnings flag
plausible-but-unusual values and never block.
"""

import re
from collections.abc import Iterable
from datetime import date

from pydantic import BaseModel, ValidationError

from tradeledger.config import LedgerSettings
from tradeledger.models.enums import StockAction
from tradeledger.models.reports import ValidationResult
from tradeledger.models.transactions import Account, OptionTransaction, StockTransaction, Transaction
from tradeledger.utils.dates import add_years

TICKER_RE = re.compile(r"^[A-Z]{1,5}$")
SPLIT_RATIO_RE = re.compile(r"^\d+:\d+$")


class TransactionValidator:
    """Stateless validator. Never mutates the transaction it is given."""

    def __init__(self, settings: LedgerSettings | None = None):
        self.settings = settings or LedgerSettings()

    def validate(
        self,
        transaction: Transaction,
        accounts: Iterable[Account],
        today: date | None = None,
    ) -> ValidationResult:
        today = today or date.today()
        result = ValidationResult()
        self._check_common(transaction, accounts, result)
        if isinstance(transaction, OptionTransaction):
            self._check_option(transaction, today, result)
        else:
            self._check_stock(transaction, today, result)
        return result

    def _check_common(
        self, transaction: Transaction, accounts: Iterable[Account], result: ValidationResult
    ) -> None:
        if not any(account.id == transaction.account_id for account in accounts):
            result.add_error("account_id", "Account does not exist")
        if not transaction.ticker or not TICKER_RE.match(transaction.ticker):
            result.add_error("ticker", "Invalid ticker format (must be 1-5 uppercase letters)")

    def _check_stock(self, txn: StockTransaction, today: date, result: ValidationResult) -> None:
        if txn.shares <= 0:
            result.add_error("shares", "Shares must be greater than 0")
        if txn.price_per_share < 0:
            result.add_error("price_per_share", "Price per share cannot be negative")
        if txn.total_amount < 0:
            result.add_error("total_amount", "Total amount cannot be negative")
        if txn.fees < 0:
            result.add_error("fees", "Fees cannot be negative")

        trade_date = txn.trade_date
        if trade_date is None:
            result.add_error("date", "Invalid date format (expected YYYY-MM-DD)")
        elif trade_date > today:
            result.add_warning("date", "Transaction date is in the future")

        if txn.action == StockAction.SPLIT:
            if not txn.split_ratio:
                result.add_error("split_ratio", "Split requires a ratio in format \"new:old\"")
            elif not SPLIT_RATIO_RE.match(txn.split_ratio) or txn.split_multiplier is None:
                result.add_error(
                    "split_ratio", "Split ratio must be in format \"new:old\" (e.g., \"2:1\")"
                )

        if txn.price_per_share > self.settings.price_warning_threshold:
            result.add_warning(
                "price_per_share",
                f"Price per share is unusually high (>${self.settings.price_warning_threshold:,})",
            )

    def _check_option(self, txn: OptionTransaction, today: date, result: ValidationResult) -> None:
        if txn.contracts <= 0:
            result.add_error("contracts", "Contracts must be greater than 0")
        if txn.strike_price <= 0:
            result.add_error("strike_price", "Strike price must be greater than 0")
        if txn.premium_per_share < 0:
            result.add_error("premium_per_share", "Premium per share cannot be negative")
        if txn.total_premium < 0:
            result.add_error("total_premium", "Total premium cannot be negative")
        if txn.fees < 0:
            result.add_error("fees", "Fees cannot be negative")

        trade_date = txn.trade_date
        if trade_date is None:
            result.add_error("transaction_date", "Invalid transaction date format (expected YYYY-MM-DD)")
        elif trade_date > today:
            result.add_warning("transaction_date", "Transaction date is in the future")

        expiration = txn.expiration
        if expiration is None:
            result.add_error("expiration_date", "Invalid expiration date format (expected YYYY-MM-DD)")
        else:
            if trade_date is not None and expiration < trade_date:
                result.add_error("expiration_date", "Expiration date cannot be before transaction date")
            horizon = self.settings.expiration_warning_years
            if expiration > add_years(today, horizon):
                result.add_warning(
                    "expiration_date", f"Expiration date is more than {horizon} years in the future"
                )

        if txn.strike_price > self.settings.price_warning_threshold:
            result.add_warning(
                "strike_price",
                f"Strike price is unusually high (>${self.settings.price_warning_threshold:,})",
            )
        if txn.premium_per_share > txn.strike_price:
            result.add_warning("premium_per_share", "Premium is higher than strike price (unusual)")


def validation_result_from_error(exc: ValidationError, model: type[BaseModel]) -> ValidationResult:
    """Report the fields a raw record could not be converted on as hard errors."""
    by_alias = {(info.alias or name): name for name, info in model.model_fields.items()}
    result = ValidationResult()
    for error in exc.errors():
        loc = error.get("loc") or ("record",)
        field = by_alias.get(str(loc[0]), str(loc[0]))
        result.add_error(field, error.get("msg", "Invalid value"))
    return result
