"""Tests for single-route best-rate selection."""

import pytest

from aggregator.constants import FAILED_QUOTE
from aggregator.errors import CostBudgetExceeded, EmptyRouteSet, InvalidAmount
from aggregator.routing import BestRateQueryEngine, BestRoute, CostBudget
from tests.helpers.constants import DAI, USDC


@pytest.fixture
def mixed_routes(registry, make_route):
    """0: x1, 1: x3, 2: reverts, 3: no quote, 4: x2."""
    created = [
        make_route(rate_num=1),
        make_route(rate_num=3),
        make_route(error=RuntimeError("revert")),
        make_route(no_quote=True),
        make_route(rate_num=2),
    ]
    for i, route in enumerate(created):
        registry.add_route(f"route-{i}", route)
    return created


class TestQuoteRoutes:
    def test_captures_failures(self, query_engine, mixed_routes):
        quotes = query_engine.quote_routes(DAI, USDC, 100, [0, 1, 2, 3, 4, 9])

        assert [q.amount_out for q in quotes] == [100, 300, None, None, 200, None]
        assert [q.ok for q in quotes] == [True, True, False, False, True, False]
        assert quotes[2].error == "revert"
        assert quotes[5].error == "route unavailable"


class TestSelectBest:
    """Tests for BestRateQueryEngine.select_best."""

    def test_highest_output_wins(self, query_engine, mixed_routes):
        best = query_engine.select_best(DAI, USDC, 100, [0, 1, 2, 3, 4])
        assert best == BestRoute(route_index=1, amount_out=300)
        assert best.found

    def test_failures_are_skipped(self, query_engine, mixed_routes):
        best = query_engine.select_best(DAI, USDC, 100, [2, 3, 4, 0])
        assert best == BestRoute(4, 200)

    def test_first_candidate_wins_ties(self, registry, make_route, query_engine):
        registry.add_route("a", make_route(fixed_output=5))
        registry.add_route("b", make_route(fixed_output=5))

        assert query_engine.select_best(DAI, USDC, 100, [1, 0]).route_index == 1
        assert query_engine.select_best(DAI, USDC, 100, [0, 1]).route_index == 0

    def test_all_failing_returns_sentinel(self, query_engine, mixed_routes):
        best = query_engine.select_best(DAI, USDC, 100, [3, 2, 17])
        assert best == BestRoute(route_index=3, amount_out=FAILED_QUOTE)
        assert not best.found

    def test_inactive_route_is_skipped(self, query_engine, mixed_routes, registry):
        registry.set_active(1, False)
        assert query_engine.select_best(DAI, USDC, 100, [0, 1, 4]) == BestRoute(4, 200)

    def test_empty_candidates(self, query_engine):
        with pytest.raises(EmptyRouteSet):
            query_engine.select_best(DAI, USDC, 100, [])

    def test_negative_amount(self, query_engine, mixed_routes):
        with pytest.raises(InvalidAmount):
            query_engine.select_best(DAI, USDC, -1, [0])

    def test_does_not_execute(self, query_engine, mixed_routes):
        query_engine.select_best(DAI, USDC, 100, [0, 1, 4])
        assert all(route.execute_calls == [] for route in mixed_routes)


class TestSelectBestBudget:
    """Budgeted single-route queries."""

    @pytest.fixture
    def cheap_routes(self, registry, make_route):
        created = [make_route(rate_num=n, quote_cost=100) for n in (1, 2, 3)]
        for i, route in enumerate(created):
            registry.add_route(f"route-{i}", route)
        return created

    def test_budget_too_small_rejects_up_front(self, query_engine, cheap_routes):
        with pytest.raises(CostBudgetExceeded) as exc_info:
            query_engine.select_best(DAI, USDC, 100, [0, 1, 2], budget=250)

        assert exc_info.value.required == 300
        assert all(route.quote_calls == [] for route in cheap_routes)

    def test_exact_budget(self, query_engine, cheap_routes):
        budget = CostBudget(300)
        best = query_engine.select_best(DAI, USDC, 100, [0, 1, 2], budget=budget)
        assert best.route_index == 2
        assert budget.spent == 300
        assert budget.remaining == 0

    def test_unavailable_routes_are_free(self, query_engine, cheap_routes):
        budget = CostBudget(100)
        query_engine.select_best(DAI, USDC, 100, [0, 42], budget=budget)
        assert budget.spent == 100

    def test_engine_default_budget(self, registry, cheap_routes):
        engine = BestRateQueryEngine(registry, default_budget=200)
        with pytest.raises(CostBudgetExceeded):
            engine.select_best(DAI, USDC, 100, [0, 1, 2])
        assert engine.select_best(DAI, USDC, 100, [0, 1]).route_index == 1
