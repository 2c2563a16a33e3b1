"""Enumerations for TradeLedger."""

from enum import StrEnum


class AccountType(StrEnum):
    BROKERAGE = "brokerage"
    RETIREMENT = "retirement"
    MARGIN = "margin"
    CASH = "cash"
    OTHER = "other"


class StockAction(StrEnum):
    BUY = "buy"
    SELL = "sell"
    INITIAL = "initial"
    SPLIT = "split"
    DIVIDEND = "dividend"
    TRANSFER_IN = "transfer-in"
    TRANSFER_OUT = "transfer-out"


class OptionAction(StrEnum):
    BUY_TO_OPEN = "buy-to-open"
    SELL_TO_OPEN = "sell-to-open"
    BUY_TO_CLOSE = "buy-to-close"
    SELL_TO_CLOSE = "sell-to-close"

    @property
    def is_opening(self) -> bool:
        return self in (OptionAction.BUY_TO_OPEN, OptionAction.SELL_TO_OPEN)

    @property
    def is_closing(self) -> bool:
        return not self.is_opening


class OptionType(StrEnum):
    CALL = "call"
    PUT = "put"


class OptionStrategy(StrEnum):
    COVERED_CALL = "covered-call"
    CASH_SECURED_PUT = "cash-secured-put"
    LONG_CALL = "long-call"
    LONG_PUT = "long-put"
    CREDIT_SPREAD = "credit-spread"
    DEBIT_SPREAD = "debit-spread"
    IRON_CONDOR = "iron-condor"
    STRADDLE = "straddle"
    STRANGLE = "strangle"
    OTHER = "other"


class OpeningSide(StrEnum):
    SOLD = "sold"
    BOUGHT = "bought"

    @classmethod
    def for_action(cls, action: OptionAction) -> "OpeningSide":
        """Side of the lot an opening action creates, or the lot a closing action targets."""
        if action in (OptionAction.SELL_TO_OPEN, OptionAction.BUY_TO_CLOSE):
            return cls.SOLD
        return cls.BOUGHT

    @property
    def closing_action(self) -> OptionAction:
        if self == OpeningSide.SOLD:
            return OptionAction.BUY_TO_CLOSE
        return OptionAction.SELL_TO_CLOSE

    @property
    def opening_action(self) -> OptionAction:
        if self == OpeningSide.SOLD:
            return OptionAction.SELL_TO_OPEN
        return OptionAction.BUY_TO_OPEN


class PositionStatus(StrEnum):
    OPEN = "open"
    CLOSED = "closed"


class CloseType(StrEnum):
    CLOSED = "closed"
    EXPIRED = "expired"
    ASSIGNED = "assigned"


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"
