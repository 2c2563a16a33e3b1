"""TradeLedger: position and tax-lot reconciliation for stock and option trades."""

__version__ = "0.1.0"
