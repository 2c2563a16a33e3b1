"""Reconciliation engines."""

from tradeledger.engines.analytics import OptionsAnalytics, account_cash, cash_effect
from tradeledger.engines.basis import CostBasisAdjuster
from tradeledger.engines.lifecycle import LifecycleResult, PositionLifecycle
from tradeledger.engines.lot_matcher import LotMatcher
from tradeledger.engines.positions import PositionBuilder, PositionSnapshot
from tradeledger.engines.wash_sale import WashSaleDetector

__all__ = [
    "CostBasisAdjuster",
    "LifecycleResult",
    "LotMatcher",
    "OptionsAnalytics",
    "PositionBuilder",
    "PositionLifecycle",
    "PositionSnapshot",
    "WashSaleDetector",
    "account_cash",
    "cash_effect",
]
