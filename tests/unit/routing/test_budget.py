"""Tests for query cost budgets."""

import pytest

from aggregator.constants import DEFAULT_QUOTE_COST
from aggregator.errors import CostBudgetExceeded
from aggregator.routing import CostBudget, quote_cost_of


class TestCostBudget:
    def test_unlimited(self):
        budget = CostBudget.unlimited()
        budget.ensure(10**30)
        budget.charge(10**30)
        assert budget.remaining is None
        assert budget.spent == 10**30

    def test_charge_and_remaining(self):
        budget = CostBudget(100)
        budget.charge(30)
        budget.charge(70)
        assert budget.remaining == 0

    def test_charge_over_limit(self):
        budget = CostBudget(100)
        budget.charge(60)
        with pytest.raises(CostBudgetExceeded) as exc_info:
            budget.charge(41)
        assert exc_info.value.available == 40
        assert budget.spent == 60

    def test_negative_limit(self):
        with pytest.raises(ValueError):
            CostBudget(-1)

    def test_reserve_for(self, make_route):
        adapters = [make_route(quote_cost=5), make_route(quote_cost=7)]
        budget = CostBudget(36)
        assert budget.reserve_for(adapters, quotes_per_route=3) == 36
        with pytest.raises(CostBudgetExceeded):
            budget.reserve_for(adapters, quotes_per_route=4)
        # Reserving checks only; nothing is spent
        assert budget.spent == 0


class TestQuoteCostOf:
    def test_declared_cost(self, make_route):
        assert quote_cost_of(make_route(quote_cost=3)) == 3

    def test_missing_cost_uses_default(self):
        class Bare:
            def quote(self, src_asset, dest_asset, amount_in):
                return amount_in

        assert quote_cost_of(Bare()) == DEFAULT_QUOTE_COST  # type: ignore[arg-type]
