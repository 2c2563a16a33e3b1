"""Premium-adjusted cost basis for stock positions.

Premiums collected on covered calls and cash-secured puts lower the effective
cost of the shares they were written against. The adjusted figures are
advisory: they sit beside the raw basis and never replace it.
"""

from collections.abc import Iterable
from decimal import Decimal

from tradeledger.models.enums import OptionAction, OptionStrategy
from tradeledger.models.positions import StockPosition
from tradeledger.models.reports import EffectiveCostBasis, PremiumBreakdownLine, UnrealizedPL
from tradeledger.models.transactions import OptionTransaction

PREMIUM_STRATEGIES = (OptionStrategy.COVERED_CALL, OptionStrategy.CASH_SECURED_PUT)


def _qualifies(txn: OptionTransaction) -> bool:
    return txn.action == OptionAction.SELL_TO_OPEN and txn.strategy in PREMIUM_STRATEGIES


class CostBasisAdjuster:
    """Computes premium-adjusted views of stock positions."""

    def applicable_premiums(
        self, options: Iterable[OptionTransaction], ticker: str, account_id: str
    ) -> Decimal:
        return sum(
            (
                t.total_premium
                for t in options
                if t.ticker == ticker and t.account_id == account_id and _qualifies(t)
            ),
            Decimal("0"),
        )

    def adjust(
        self, positions: Iterable[StockPosition], options: Iterable[OptionTransaction]
    ) -> list[StockPosition]:
        """Return copies of ``positions`` with the premium-adjusted fields filled.

        The adjusted total is clamped at zero; raw basis fields are copied
        unchanged.
        """
        options = list(options)
        adjusted: list[StockPosition] = []
        for position in positions:
            premiums = self.applicable_premiums(options, position.ticker, position.account_id)
            total = max(Decimal("0"), position.total_cost_basis - premiums)
            per_share = total / position.shares if position.shares > 0 else Decimal("0")
            adjusted.append(
                position.model_copy(
                    update={
                        "premium_adjusted_total_cost": total,
                        "premium_adjusted_cost_basis": per_share,
                        "applied_premiums": premiums,
                    },
                    deep=True,
                )
            )
        return adjusted

    @staticmethod
    def get_effective_cost_basis(
        position: StockPosition, use_premium_adjusted: bool
    ) -> EffectiveCostBasis:
        """Pick raw or adjusted basis as a pair.

        When adjusted values are requested but the position was never adjusted,
        both raw values are returned so the two modes are never mixed.
        """
        if (
            use_premium_adjusted
            and position.premium_adjusted_cost_basis is not None
            and position.premium_adjusted_total_cost is not None
        ):
            return EffectiveCostBasis(
                per_share=position.premium_adjusted_cost_basis,
                total=position.premium_adjusted_total_cost,
                premium_adjusted=True,
            )
        return EffectiveCostBasis(
            per_share=position.average_cost_basis,
            total=position.total_cost_basis,
            premium_adjusted=False,
        )

    def adjusted_unrealized_pl(
        self, position: StockPosition, market_value: Decimal, use_premium_adjusted: bool
    ) -> UnrealizedPL:
        """Unrealized P/L against the selected basis. Market value comes from the caller."""
        basis = self.get_effective_cost_basis(position, use_premium_adjusted).total
        pl = market_value - basis
        percent = pl / basis * 100 if basis > 0 else Decimal("0")
        return UnrealizedPL(unrealized_pl=pl, unrealized_pl_percent=percent)

    def premium_breakdown(
        self, options: Iterable[OptionTransaction], ticker: str, account_id: str
    ) -> list[PremiumBreakdownLine]:
        totals: dict[OptionStrategy, Decimal] = {}
        for t in options:
            if t.ticker == ticker and t.account_id == account_id and _qualifies(t):
                totals[t.strategy] = totals.get(t.strategy, Decimal("0")) + t.total_premium
        return [PremiumBreakdownLine(strategy=s, premium=p) for s, p in totals.items()]

    def premiums_applied_to_cost_basis(
        self, options: Iterable[OptionTransaction], account_id: str | None = None
    ) -> Decimal:
        """Premiums already counted in adjusted basis, to avoid counting them again as profit."""
        return sum(
            (
                t.total_premium
                for t in options
                if _qualifies(t) and account_id in (None, t.account_id)
            ),
            Decimal("0"),
        )
