"""Ingestion adapters for importing transaction records."""

from tradeledger.ingestion.base import BaseAdapter, ImportResult
from tradeledger.ingestion.manual import ManualAdapter

__all__ = ["BaseAdapter", "ImportResult", "ManualAdapter"]
