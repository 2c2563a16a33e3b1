"""Caller-owned transaction log and the gate every new record passes through.

The log is an ordinary object handed to each engine call; the engines keep no
state of their own. Recording goes raw record -> sanitizer -> model ->
validator + deduplicator. Errors leave the log untouched; warnings, including
duplicate fingerprints, do not block.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from uuid import uuid4

from pydantic import BaseModel, ValidationError

from tradeledger.config import LedgerSettings
from tradeledger.exceptions import TransactionNotFoundError
from tradeledger.models.reports import ValidationResult
from tradeledger.models.transactions import Account, OptionTransaction, StockTransaction, Transaction
from tradeledger.normalization.fingerprint import find_duplicates
from tradeledger.normalization.sanitizer import sanitize_option_record, sanitize_stock_record
from tradeledger.normalization.validator import TransactionValidator, validation_result_from_error

logger = logging.getLogger(__name__)


@dataclass
class RecordOutcome:
    """Result of offering one record to the log."""

    transaction: Transaction | None
    validation: ValidationResult
    duplicates: list[Transaction] = field(default_factory=list)

    @property
    def recorded(self) -> bool:
        return self.transaction is not None


class TransactionLog:
    """Append-only list of accounts and transactions, in insertion order."""

    def __init__(
        self,
        accounts: Iterable[Account] = (),
        transactions: Iterable[Transaction] = (),
        settings: LedgerSettings | None = None,
    ):
        self.settings = settings or LedgerSettings()
        self.validator = TransactionValidator(self.settings)
        self.accounts: list[Account] = list(accounts)
        self._transactions: list[Transaction] = list(transactions)

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self):
        return iter(self._transactions)

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return tuple(self._transactions)

    @property
    def stock_transactions(self) -> list[StockTransaction]:
        return [t for t in self._transactions if isinstance(t, StockTransaction)]

    @property
    def option_transactions(self) -> list[OptionTransaction]:
        return [t for t in self._transactions if isinstance(t, OptionTransaction)]

    def find(self, transaction_id: str) -> Transaction | None:
        for txn in self._transactions:
            if txn.id == transaction_id:
                return txn
        return None

    def get(self, transaction_id: str) -> Transaction:
        txn = self.find(transaction_id)
        if txn is None:
            raise TransactionNotFoundError(transaction_id)
        return txn

    def add_account(self, account: Account) -> None:
        self.accounts = [a for a in self.accounts if a.id != account.id] + [account]

    def append(self, txn: Transaction) -> None:
        """Append an already-accepted transaction, e.g. when reloading from storage."""
        self._transactions.append(txn)

    # --- Gate ---

    def record_stock(self, raw: dict, today: date | None = None) -> RecordOutcome:
        return self._record_raw(sanitize_stock_record(raw), StockTransaction, today)

    def record_option(self, raw: dict, today: date | None = None) -> RecordOutcome:
        cleaned = sanitize_option_record(raw, self.settings.contract_multiplier)
        return self._record_raw(cleaned, OptionTransaction, today)

    def record(self, txn: Transaction, today: date | None = None) -> RecordOutcome:
        """Validate and deduplicate a built transaction, appending it when valid."""
        result = self.validator.validate(txn, self.accounts, today=today)
        if self.find(txn.id) is not None:
            result.add_error("id", f"Transaction id {txn.id} is already recorded")

        duplicates = find_duplicates(txn, self._transactions)
        if duplicates:
            ids = ", ".join(d.id for d in duplicates)
            result.add_warning("fingerprint", f"Possible duplicate of transaction(s): {ids}")

        if not result.is_valid:
            logger.warning(
                "Blocked %s %s: %s",
                type(txn).__name__,
                txn.id,
                "; ".join(f"{e.field}: {e.message}" for e in result.errors),
            )
            return RecordOutcome(transaction=None, validation=result, duplicates=duplicates)

        self._transactions.append(txn)
        logger.debug("Recorded %s %s", type(txn).__name__, txn.id)
        return RecordOutcome(transaction=txn, validation=result, duplicates=duplicates)

    def _record_raw(
        self, cleaned: dict, model: type[BaseModel], today: date | None
    ) -> RecordOutcome:
        if not cleaned.get("id"):
            cleaned["id"] = str(uuid4())
        try:
            txn = model.model_validate(cleaned)
        except ValidationError as exc:
            result = validation_result_from_error(exc, model)
            logger.warning("Rejected malformed %s record: %s", model.__name__, exc.error_count())
            return RecordOutcome(transaction=None, validation=result)
        return self.record(txn, today=today)
