"""Custom exceptions for TradeLedger.

The reconciliation engine reports domain problems as values (validation
results, closing checks, ``None``). These exceptions are raised by the
caller-facing helpers and collaborators around it.
"""


class LedgerError(Exception):
    """Base exception for ledger errors."""


class TransactionNotFoundError(LedgerError):
    """Raised when a transaction id is not present in the log."""

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction not found: {transaction_id}")


class PositionNotFoundError(LedgerError):
    """Raised when an option position id is not present in a snapshot."""

    def __init__(self, position_id: str):
        self.position_id = position_id
        super().__init__(f"Position not found: {position_id}")


class InsufficientContractsError(LedgerError):
    """Raised when a close requires more contracts than the position holds."""

    def __init__(self, position_id: str, requested: int, available: int):
        self.position_id = position_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient contracts in position {position_id}: "
            f"requested={requested}, available={available}"
        )


class ImportFormatError(LedgerError):
    """Raised when an import file cannot be read as transaction records."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"Import error from {source}: {message}")
