"""Normalization layer: sanitize, validate and deduplicate incoming records."""

from tradeledger.normalization.fingerprint import find_duplicates, fingerprint
from tradeledger.normalization.ledger import RecordOutcome, TransactionLog
from tradeledger.normalization.validator import TransactionValidator

__all__ = [
    "RecordOutcome",
    "TransactionLog",
    "TransactionValidator",
    "find_duplicates",
    "fingerprint",
]
