"""Data access layer for TradeLedger.

Transactions are stored whole as JSON payloads in insertion order and
reloaded verbatim; positions are never stored.
"""

import sqlite3
from decimal import Decimal
from uuid import uuid4

from tradeledger.config import LedgerSettings
from tradeledger.models.transactions import Account, OptionTransaction, StockTransaction, Transaction
from tradeledger.normalization.ledger import TransactionLog


class LedgerRepository:
    """Persistence for accounts and the transaction log."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    # --- Accounts ---

    def save_account(self, account: Account) -> None:
        """Insert or replace an account."""
        self.conn.execute(
            """INSERT OR REPLACE INTO accounts
               (id, name, account_type, broker, initial_cash, is_active)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (
                account.id,
                account.name,
                account.account_type.value,
                account.broker,
                str(account.initial_cash),
                int(account.is_active),
            ),
        )
        self.conn.commit()

    def get_accounts(self) -> list[Account]:
        cursor = self.conn.execute(
            "SELECT id, name, account_type, broker, initial_cash, is_active "
            "FROM accounts ORDER BY rowid"
        )
        return [
            Account(
                id=row[0],
                name=row[1],
                account_type=row[2],
                broker=row[3],
                initial_cash=Decimal(row[4]),
                is_active=bool(row[5]),
            )
            for row in cursor.fetchall()
        ]

    # --- Import batches ---

    def create_import_batch(self, source: str, file_path: str, record_count: int = 0) -> str:
        """Create an import batch record. Returns the batch ID."""
        batch_id = str(uuid4())
        self.conn.execute(
            """INSERT INTO import_batches (id, source, file_path, record_count)
               VALUES (?, ?, ?, ?)""",
            (batch_id, source, file_path, record_count),
        )
        self.conn.commit()
        return batch_id

    def finish_import_batch(self, batch_id: str, recorded_count: int) -> None:
        self.conn.execute(
            "UPDATE import_batches SET recorded_count = ? WHERE id = ?",
            (recorded_count, batch_id),
        )
        self.conn.commit()

    def get_import_batches(self) -> list[dict]:
        cursor = self.conn.execute("SELECT * FROM import_batches ORDER BY imported_at")
        columns = [desc[0] for desc in cursor.description]
        return [dict(zip(columns, row)) for row in cursor.fetchall()]

    # --- Transactions ---

    def append_transaction(self, txn: Transaction, batch_id: str | None = None) -> None:
        """Append one accepted transaction to the stored log."""
        kind = "stock" if isinstance(txn, StockTransaction) else "option"
        self.conn.execute(
            """INSERT INTO transactions (id, kind, account_id, batch_id, payload)
               VALUES (?, ?, ?, ?, ?)""",
            (txn.id, kind, txn.account_id, batch_id, txn.model_dump_json()),
        )
        self.conn.commit()

    def get_transactions(self) -> list[Transaction]:
        """All stored transactions in insertion order."""
        cursor = self.conn.execute("SELECT kind, payload FROM transactions ORDER BY seq")
        transactions: list[Transaction] = []
        for kind, payload in cursor.fetchall():
            model = StockTransaction if kind == "stock" else OptionTransaction
            transactions.append(model.model_validate_json(payload))
        return transactions

    def load_log(self, settings: LedgerSettings | None = None) -> TransactionLog:
        """Rebuild the in-memory log from storage without re-validating."""
        return TransactionLog(
            accounts=self.get_accounts(),
            transactions=self.get_transactions(),
            settings=settings,
        )
