"""Data models for TradeLedger."""

from tradeledger.models.enums import (
    AccountType,
    CloseType,
    OpeningSide,
    OptionAction,
    OptionStrategy,
    OptionType,
    PositionStatus,
    Severity,
    StockAction,
)
from tradeledger.models.positions import (
    ClosingCheck,
    OptionPosition,
    PositionUpdate,
    StockPosition,
)
from tradeledger.models.reports import (
    EffectiveCostBasis,
    OptionsSummary,
    PremiumBreakdownLine,
    UnrealizedPL,
    ValidationIssue,
    ValidationResult,
    WashSaleInfo,
)
from tradeledger.models.transactions import (
    Account,
    OptionTransaction,
    StockTransaction,
    Transaction,
)

__all__ = [
    "Account",
    "AccountType",
    "CloseType",
    "ClosingCheck",
    "EffectiveCostBasis",
    "OpeningSide",
    "OptionAction",
    "OptionPosition",
    "OptionStrategy",
    "OptionTransaction",
    "OptionType",
    "OptionsSummary",
    "PositionStatus",
    "PositionUpdate",
    "PremiumBreakdownLine",
    "Severity",
    "StockAction",
    "StockPosition",
    "StockTransaction",
    "Transaction",
    "UnrealizedPL",
    "ValidationIssue",
    "ValidationResult",
    "WashSaleInfo",
]
