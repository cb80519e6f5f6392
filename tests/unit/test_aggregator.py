"""Tests for the Aggregator facade wiring."""

import pytest

import aggregator.aggregator as aggregator_module
from aggregator import Aggregator, get_default_aggregator
from aggregator.config import AggregatorConfig
from aggregator.constants import DEFAULT_PARTNER_WALLET
from aggregator.errors import CostBudgetExceeded
from aggregator.events import TradeSettled
from tests.conftest import MockRoute, MockRouteConfig
from tests.helpers.constants import (
    DAI,
    DEFAULT_WALLET,
    EXECUTOR,
    LOYALTY,
    TRADER,
    USDC,
)
from tests.helpers.factories import make_aggregator


@pytest.fixture
def aggregator() -> Aggregator:
    """An aggregator with two mock routes (x1 and x2) and a funded trader."""
    agg = make_aggregator()
    agg.ledger.mint(DAI, TRADER, 10**24)
    agg.registry.add_route("x1", MockRoute(agg.ledger, MockRouteConfig(rate_num=1)))
    agg.registry.add_route("x2", MockRoute(agg.ledger, MockRouteConfig(rate_num=2)))
    return agg


class TestWiring:
    def test_partner_zero_from_config(self):
        agg = make_aggregator(default_partner_fee_bps=30, default_partner_name="Acme")
        partner = agg.partners.resolve(0)
        assert partner.wallet == DEFAULT_WALLET
        assert partner.fee_bps == 30
        assert partner.name == "Acme"

    def test_executor_address(self):
        assert make_aggregator().address == EXECUTOR

    def test_loyalty_from_config(self):
        agg = make_aggregator(loyalty_asset=LOYALTY, eligible_amount=1)
        agg.ledger.mint(LOYALTY, TRADER, 1)
        assert agg.eligibility.is_fee_exempt(TRADER)

    def test_shared_event_log(self, aggregator):
        aggregator.trade(1, DAI, 1000, USDC, 0, 0, TRADER)
        assert aggregator.events.of_type(TradeSettled)[0].net_amount_out == 1998


class TestOperations:
    def test_quote_and_trade_agree(self, aggregator):
        preview = aggregator.quote_one(1, DAI, USDC, 1000)
        outcome = aggregator.trade(1, DAI, 1000, USDC, preview, 0, TRADER)
        assert outcome.net_amount_out == preview == 1998

    def test_split_flow(self, aggregator):
        plan = aggregator.select_best_split(DAI, USDC, 1000, [0, 1])
        amount_a, amount_b = plan.amounts_in(1000)
        legs = plan.to_legs(1000)

        preview = aggregator.quote_split_trades(
            [leg.route_index for leg in legs], DAI, [leg.amount_in for leg in legs], USDC
        )
        outcome = aggregator.split_trade(
            [leg.route_index for leg in legs],
            DAI,
            1000,
            [leg.amount_in for leg in legs],
            USDC,
            preview,
            0,
            TRADER,
        )
        assert (amount_a, amount_b) == (0, 1000)
        assert outcome.net_amount_out == preview

    def test_select_best(self, aggregator):
        assert aggregator.select_best(DAI, USDC, 10, [0, 1]).route_index == 1

    def test_configured_budget(self):
        agg = make_aggregator(quote_budget=150_000)
        agg.registry.add_route("x1", MockRoute(agg.ledger))
        agg.registry.add_route("x2", MockRoute(agg.ledger))
        with pytest.raises(CostBudgetExceeded):
            agg.select_best(DAI, USDC, 10, [0, 1])

    def test_configured_granularity(self):
        agg = make_aggregator(default_granularity=1)
        route = MockRoute(agg.ledger)
        agg.registry.add_route("a", route)
        agg.registry.add_route("b", MockRoute(agg.ledger))
        agg.select_best_split(DAI, USDC, 100, [0, 1])
        assert [call[2] for call in route.quote_calls] == [100]


class TestDefaultAggregator:
    def test_built_once_from_env(self, monkeypatch):
        monkeypatch.setattr(aggregator_module, "_default_aggregator", None)
        monkeypatch.setenv("AGGREGATOR_PARTNER_FEE_BPS", "42")

        first = get_default_aggregator()
        second = get_default_aggregator()

        assert first is second
        assert first.partners.resolve(0).fee_bps == 42


class TestDefaultConfiguration:
    """An aggregator built with no overrides settles fee-charging trades."""

    def test_trade_pays_default_partner(self):
        agg = Aggregator(AggregatorConfig())
        agg.ledger.mint(DAI, TRADER, 10**24)
        agg.registry.add_route("fixed", MockRoute(agg.ledger, MockRouteConfig(fixed_output=1000)))

        outcome = agg.trade(0, DAI, 500, USDC, 0, 0, TRADER)

        assert outcome.fee_amount == 1
        assert outcome.net_amount_out == 999
        assert agg.ledger.balance_of(DEFAULT_PARTNER_WALLET, USDC) == 1
        assert agg.ledger.balance_of(TRADER, USDC) == 999
        assert agg.ledger.balance_of(agg.address, USDC) == 0

    def test_default_from_env_trades(self, monkeypatch):
        monkeypatch.setattr(aggregator_module, "_default_aggregator", None)
        for name in (
            "AGGREGATOR_EXECUTOR_ADDRESS",
            "AGGREGATOR_PARTNER_WALLET",
            "AGGREGATOR_PARTNER_FEE_BPS",
            "AGGREGATOR_LOYALTY_ASSET",
        ):
            monkeypatch.delenv(name, raising=False)
        agg = get_default_aggregator()
        agg.ledger.mint(DAI, TRADER, 10**24)
        agg.registry.add_route("fixed", MockRoute(agg.ledger, MockRouteConfig(fixed_output=1000)))

        outcome = agg.trade(0, DAI, 500, USDC, 999, 0, TRADER)

        assert outcome.net_amount_out == 999
        assert agg.partners.resolve(0).wallet == DEFAULT_PARTNER_WALLET

    def test_partner_cannot_pay_out_to_custody(self):
        agg = Aggregator(AggregatorConfig())
        with pytest.raises(ValueError, match="custody"):
            agg.partners.add_partner(agg.address, 25, "custody")
        with pytest.raises(ValueError, match="custody"):
            agg.partners.update_partner(0, agg.address, 10, "custody")
        assert agg.partners.count() == 1
