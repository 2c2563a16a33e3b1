"""Database layer for TradeLedger."""

from tradeledger.db.repository import LedgerRepository
from tradeledger.db.schema import create_schema

__all__ = ["LedgerRepository", "create_schema"]
