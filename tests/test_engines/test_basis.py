"""Tests for premium-adjusted cost basis."""

from decimal import Decimal

from tradeledger.engines.basis import CostBasisAdjuster
from tradeledger.models.enums import OptionAction, OptionStrategy, OptionType
from tradeledger.models.positions import StockPosition
from tradeledger.models.transactions import OptionTransaction


def _position(shares: str = "100", total: str = "15000", account_id: str = "acct-1") -> StockPosition:
    shares_d = Decimal(shares)
    return StockPosition(
        ticker="AAPL",
        account_id=account_id,
        shares=shares_d,
        average_cost_basis=Decimal(total) / shares_d if shares_d else Decimal("0"),
        total_cost_basis=Decimal(total),
        first_purchase_date="2024-01-02",
        last_transaction_date="2024-01-02",
    )


def _premium(
    txn_id: str,
    total: str,
    strategy: OptionStrategy = OptionStrategy.COVERED_CALL,
    action: OptionAction = OptionAction.SELL_TO_OPEN,
    ticker: str = "AAPL",
    account_id: str = "acct-1",
) -> OptionTransaction:
    return OptionTransaction(
        id=txn_id,
        account_id=account_id,
        ticker=ticker,
        strategy=strategy,
        option_type=OptionType.PUT if strategy == OptionStrategy.CASH_SECURED_PUT else OptionType.CALL,
        action=action,
        contracts=1,
        strike_price=Decimal("160"),
        premium_per_share=Decimal(total) / 100,
        total_premium=Decimal(total),
        expiration_date="2024-02-16",
        transaction_date="2024-01-05",
    )


class TestAdjust:
    def setup_method(self):
        self.adjuster = CostBasisAdjuster()

    def test_covered_call_lowers_basis(self, aapl_covered_call):
        adjusted = self.adjuster.adjust([_position()], [aapl_covered_call])[0]
        assert adjusted.premium_adjusted_total_cost == Decimal("14750")
        assert adjusted.premium_adjusted_cost_basis == Decimal("147.5")
        assert adjusted.applied_premiums == Decimal("250")

    def test_raw_fields_untouched(self, aapl_covered_call):
        original = _position()
        adjusted = self.adjuster.adjust([original], [aapl_covered_call])[0]
        assert adjusted.total_cost_basis == Decimal("15000")
        assert adjusted.average_cost_basis == Decimal("150")
        assert original.premium_adjusted_total_cost is None
        assert original.applied_premiums is None

    def test_cash_secured_puts_count(self):
        options = [
            _premium("o1", "250"),
            _premium("o2", "400", strategy=OptionStrategy.CASH_SECURED_PUT),
        ]
        adjusted = self.adjuster.adjust([_position()], options)[0]
        assert adjusted.applied_premiums == Decimal("650")

    def test_other_premiums_ignored(self):
        options = [
            _premium("o1", "250", strategy=OptionStrategy.LONG_CALL),
            _premium("o2", "250", action=OptionAction.BUY_TO_CLOSE),
            _premium("o3", "250", ticker="MSFT"),
            _premium("o4", "250", account_id="acct-2"),
        ]
        adjusted = self.adjuster.adjust([_position()], options)[0]
        assert adjusted.applied_premiums == Decimal("0")
        assert adjusted.premium_adjusted_total_cost == Decimal("15000")
        assert adjusted.premium_adjusted_cost_basis == Decimal("150")

    def test_adjusted_total_clamped_at_zero(self):
        adjusted = self.adjuster.adjust([_position(total="1000")], [_premium("o1", "1500")])[0]
        assert adjusted.premium_adjusted_total_cost == Decimal("0")
        assert adjusted.premium_adjusted_cost_basis == Decimal("0")
        assert adjusted.applied_premiums == Decimal("1500")

    def test_zero_shares_per_share_is_zero(self):
        adjusted = self.adjuster.adjust([_position(shares="0", total="0")], [_premium("o1", "100")])[0]
        assert adjusted.premium_adjusted_cost_basis == Decimal("0")


class TestEffectiveCostBasis:
    def setup_method(self):
        self.adjuster = CostBasisAdjuster()

    def test_raw_mode(self, aapl_covered_call):
        adjusted = self.adjuster.adjust([_position()], [aapl_covered_call])[0]
        basis = self.adjuster.get_effective_cost_basis(adjusted, use_premium_adjusted=False)
        assert basis.per_share == Decimal("150")
        assert basis.total == Decimal("15000")
        assert basis.premium_adjusted is False

    def test_adjusted_mode(self, aapl_covered_call):
        adjusted = self.adjuster.adjust([_position()], [aapl_covered_call])[0]
        basis = self.adjuster.get_effective_cost_basis(adjusted, use_premium_adjusted=True)
        assert basis.per_share == Decimal("147.5")
        assert basis.total == Decimal("14750")
        assert basis.premium_adjusted is True

    def test_unadjusted_position_falls_back_to_raw_pair(self):
        basis = self.adjuster.get_effective_cost_basis(_position(), use_premium_adjusted=True)
        assert basis.per_share == Decimal("150")
        assert basis.total == Decimal("15000")
        assert basis.premium_adjusted is False

    def test_fully_offset_basis_stays_zero(self):
        adjusted = self.adjuster.adjust([_position(total="1000")], [_premium("o1", "1000")])[0]
        basis = self.adjuster.get_effective_cost_basis(adjusted, use_premium_adjusted=True)
        assert basis.total == Decimal("0")
        assert basis.premium_adjusted is True


class TestPremiumReports:
    def setup_method(self):
        self.adjuster = CostBasisAdjuster()
        self.options = [
            _premium("o1", "250"),
            _premium("o2", "100"),
            _premium("o3", "400", strategy=OptionStrategy.CASH_SECURED_PUT),
            _premium("o4", "999", account_id="acct-2"),
        ]

    def test_breakdown_by_strategy(self):
        lines = self.adjuster.premium_breakdown(self.options, "AAPL", "acct-1")
        by_strategy = {line.strategy: line.premium for line in lines}
        assert by_strategy == {
            OptionStrategy.COVERED_CALL: Decimal("350"),
            OptionStrategy.CASH_SECURED_PUT: Decimal("400"),
        }

    def test_premiums_applied_all_accounts(self):
        assert self.adjuster.premiums_applied_to_cost_basis(self.options) == Decimal("1749")

    def test_premiums_applied_one_account(self):
        assert self.adjuster.premiums_applied_to_cost_basis(self.options, "acct-1") == Decimal("750")

    def test_unrealized_pl_against_each_basis(self, aapl_covered_call):
        adjusted = self.adjuster.adjust([_position()], [aapl_covered_call])[0]
        raw = self.adjuster.adjusted_unrealized_pl(adjusted, Decimal("16000"), use_premium_adjusted=False)
        net = self.adjuster.adjusted_unrealized_pl(adjusted, Decimal("16000"), use_premium_adjusted=True)
        assert raw.unrealized_pl == Decimal("1000")
        assert net.unrealized_pl == Decimal("1250")
        assert net.unrealized_pl_percent > raw.unrealized_pl_percent

    def test_unrealized_percent_zero_basis(self):
        adjusted = self.adjuster.adjust([_position(total="100")], [_premium("o1", "500")])[0]
        result = self.adjuster.adjusted_unrealized_pl(adjusted, Decimal("300"), use_premium_adjusted=True)
        assert result.unrealized_pl == Decimal("300")
        assert result.unrealized_pl_percent == Decimal("0")
