"""Result models returned by the engines."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from tradeledger.models.enums import OptionStrategy, Severity


class ValidationIssue(BaseModel):
    field: str
    message: str
    severity: Severity


class ValidationResult(BaseModel):
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """True when no issue is a hard error. Warnings never block."""
        return not self.errors

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    def add_error(self, field: str, message: str) -> None:
        self.issues.append(ValidationIssue(field=field, message=message, severity=Severity.ERROR))

    def add_warning(self, field: str, message: str) -> None:
        self.issues.append(ValidationIssue(field=field, message=message, severity=Severity.WARNING))


class WashSaleInfo(BaseModel):
    transaction_id: str
    ticker: str
    loss_amount: Decimal = Field(ge=0)
    wash_sale_period_start: date
    wash_sale_period_end: date
    has_wash_sale: bool
    related_transaction_ids: list[str] = Field(default_factory=list)


class EffectiveCostBasis(BaseModel):
    per_share: Decimal
    total: Decimal
    premium_adjusted: bool


class PremiumBreakdownLine(BaseModel):
    strategy: OptionStrategy
    premium: Decimal


class UnrealizedPL(BaseModel):
    unrealized_pl: Decimal
    unrealized_pl_percent: Decimal


class OptionsSummary(BaseModel):
    total_premium_collected: Decimal = Decimal("0")
    total_premium_paid: Decimal = Decimal("0")
    total_closing_costs: Decimal = Decimal("0")
    total_closing_proceeds: Decimal = Decimal("0")
    net_premium: Decimal = Decimal("0")
    total_realized_pl: Decimal = Decimal("0")
    closed_count: int = 0
    win_rate: Decimal = Decimal("0")
    open_premium: Decimal = Decimal("0")
