"""Best-rate queries over registered routes.

Queries never move funds. Discovery favours resilience: a venue that
fails to quote (revert, unsupported pair, no liquidity, unknown route) is
recorded as a failed quote and skipped, never allowed to abort the query.

Two searches are provided:

- select_best(): the single route with the highest output
- select_best_split(): the best two-route volume split on a percentage grid

Split search policy:
    For granularity g the engine tests route A at 100*k//g percent for
    k = g..0 (so 100% and 0% are always included) with the complement on
    route B, over every unordered pair of distinct candidates. All venue
    quotes the grid needs are collected first, once per distinct
    (route, amount), and charged against the cost budget; the grid is then
    scored from that table. Because 0% and 100% are part of every pair's
    grid, the split result is never worse than the best single route.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from aggregator.constants import DEFAULT_SPLIT_GRANULARITY, FAILED_QUOTE, MAX_SPLIT_GRANULARITY, PERCENT
from aggregator.errors import EmptyRouteSet, InvalidAmount, InvalidRouteIndex
from aggregator.routing.budget import CostBudget, quote_cost_of
from aggregator.routing.types import BestRoute, RouteQuote, SplitPlan
from aggregator.safe_int import is_uint256

if TYPE_CHECKING:
    from aggregator.registry.routes import RouteRegistry
    from aggregator.routes.base import RouteAdapter

logger = structlog.get_logger()

BudgetArg = CostBudget | int | None


def split_fractions(granularity: int) -> list[int]:
    """Percentages tested for route A, from 100 down to 0."""
    return [PERCENT * k // granularity for k in range(granularity, -1, -1)]


class BestRateQueryEngine:
    """Read-only best-rate search over a route registry.

    Args:
        registry: Route registry used to resolve candidate indices
        default_budget: Cost units allowed per query when the caller passes
            no budget (None = unbounded)
    """

    def __init__(self, registry: RouteRegistry, default_budget: int | None = None) -> None:
        self.registry = registry
        self.default_budget = default_budget

    # ------------------------------------------------------------------
    # Single route
    # ------------------------------------------------------------------

    def quote_routes(
        self,
        src_asset: str,
        dest_asset: str,
        amount_in: int,
        candidates: Sequence[int],
        budget: BudgetArg = None,
    ) -> list[RouteQuote]:
        """Quote amount_in on every candidate, capturing failures.

        Raises:
            CostBudgetExceeded: If quoting every candidate would exceed the budget
        """
        _check_amount(amount_in)
        cost_budget = self._budget(budget)
        adapters = [self._try_resolve(index) for index in candidates]
        cost_budget.reserve_for(a for a in adapters if a is not None)

        return [
            self._quote(index, adapter, src_asset, dest_asset, amount_in, cost_budget)
            for index, adapter in zip(candidates, adapters, strict=True)
        ]

    def select_best(
        self,
        src_asset: str,
        dest_asset: str,
        amount_in: int,
        candidates: Sequence[int],
        budget: BudgetArg = None,
    ) -> BestRoute:
        """Pick the candidate with the highest quoted output.

        The first candidate wins ties. If every candidate fails, the first
        candidate is returned with amount_out == FAILED_QUOTE.

        Raises:
            EmptyRouteSet: If candidates is empty
            CostBudgetExceeded: If quoting every candidate would exceed the budget
        """
        if len(candidates) == 0:
            raise EmptyRouteSet()

        quotes = self.quote_routes(src_asset, dest_asset, amount_in, candidates, budget)

        best: tuple[int, int] | None = None
        for quote in quotes:
            if quote.amount_out is None:
                continue
            if best is None or quote.amount_out > best[1]:
                best = (quote.route_index, quote.amount_out)

        if best is None:
            logger.warning(
                "best_route_not_found",
                candidates=list(candidates),
                amount_in=amount_in,
            )
            return BestRoute(route_index=candidates[0], amount_out=FAILED_QUOTE)

        logger.info(
            "best_route_selected",
            route_index=best[0],
            amount_in=amount_in,
            amount_out=best[1],
            failed=sum(1 for q in quotes if not q.ok),
        )
        return BestRoute(route_index=best[0], amount_out=best[1])

    # ------------------------------------------------------------------
    # Two-route split
    # ------------------------------------------------------------------

    def select_best_split(
        self,
        src_asset: str,
        dest_asset: str,
        amount_in: int,
        candidates: Sequence[int],
        granularity: int = DEFAULT_SPLIT_GRANULARITY,
        budget: BudgetArg = None,
    ) -> SplitPlan:
        """Find the best split of amount_in across two candidates.

        Duplicate candidates are ignored (first occurrence kept). With a
        single distinct candidate the plan sends 100% to it. The first pair
        and the first (highest) fraction win ties. If no combination can be
        quoted, the first pair is returned at 100% with FAILED_QUOTE.

        Raises:
            EmptyRouteSet: If candidates is empty
            ValueError: If granularity is outside [1, 100]
            CostBudgetExceeded: If the grid's quotes would exceed the budget
        """
        if len(candidates) == 0:
            raise EmptyRouteSet()
        if not isinstance(granularity, int) or not 1 <= granularity <= MAX_SPLIT_GRANULARITY:
            raise ValueError(
                f"granularity must be in [1, {MAX_SPLIT_GRANULARITY}], got {granularity}"
            )
        _check_amount(amount_in)

        routes = list(dict.fromkeys(candidates))
        adapters = {index: self._try_resolve(index) for index in routes}
        fractions = split_fractions(granularity)

        needed = self._grid_quotes(routes, amount_in, fractions)
        cost_budget = self._budget(budget)
        cost_budget.ensure(
            sum(
                quote_cost_of(adapter)
                for index, amount in needed
                if (adapter := adapters[index]) is not None
            )
        )

        table: dict[tuple[int, int], int | None] = {}
        for index, amount in needed:
            quote = self._quote(index, adapters[index], src_asset, dest_asset, amount, cost_budget)
            table[(index, amount)] = quote.amount_out

        def lookup(index: int, amount: int) -> int | None:
            return 0 if amount == 0 else table[(index, amount)]

        if len(routes) == 1:
            only = routes[0]
            amount_out = lookup(only, amount_in)
            return SplitPlan(
                route_index_a=only,
                route_index_b=only,
                fraction_a=PERCENT,
                amount_out=FAILED_QUOTE if amount_out is None else amount_out,
            )

        best: SplitPlan | None = None
        for i, route_a in enumerate(routes):
            for route_b in routes[i + 1 :]:
                for fraction in fractions:
                    amount_a = amount_in * fraction // PERCENT
                    out_a = lookup(route_a, amount_a)
                    out_b = lookup(route_b, amount_in - amount_a)
                    if out_a is None or out_b is None:
                        continue
                    total = out_a + out_b
                    if best is None or total > best.amount_out:
                        best = SplitPlan(route_a, route_b, fraction, total)

        if best is None:
            logger.warning(
                "best_split_not_found",
                candidates=routes,
                amount_in=amount_in,
                granularity=granularity,
            )
            return SplitPlan(routes[0], routes[1], PERCENT, FAILED_QUOTE)

        logger.info(
            "split_search_complete",
            route_index_a=best.route_index_a,
            route_index_b=best.route_index_b,
            fraction_a=best.fraction_a,
            amount_out=best.amount_out,
            quotes=len(table),
            cost_spent=cost_budget.spent,
        )
        return best

    @staticmethod
    def _grid_quotes(
        routes: list[int], amount_in: int, fractions: list[int]
    ) -> list[tuple[int, int]]:
        """Distinct non-zero (route, amount) quotes the split grid needs, in scan order."""
        a_amounts = [amount_in * fraction // PERCENT for fraction in fractions]
        b_amounts = [amount_in - amount for amount in a_amounts]

        if len(routes) == 1:
            return [(routes[0], amount_in)] if amount_in > 0 else []

        needed: dict[tuple[int, int], None] = {}
        for position, index in enumerate(routes):
            amounts: list[int] = []
            if position < len(routes) - 1:
                amounts.extend(a_amounts)
            if position > 0:
                amounts.extend(b_amounts)
            for amount in amounts:
                if amount > 0:
                    needed[(index, amount)] = None
        return list(needed)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _budget(self, budget: BudgetArg) -> CostBudget:
        if isinstance(budget, CostBudget):
            return budget
        if budget is None:
            return CostBudget(self.default_budget)
        return CostBudget(budget)

    def _try_resolve(self, index: int) -> RouteAdapter | None:
        try:
            return self.registry.resolve(index)
        except InvalidRouteIndex as e:
            logger.warning("route_unavailable", route_index=index, error=str(e))
            return None

    def _quote(
        self,
        index: int,
        adapter: RouteAdapter | None,
        src_asset: str,
        dest_asset: str,
        amount_in: int,
        budget: CostBudget,
    ) -> RouteQuote:
        """Quote one route, turning any venue failure into a failed RouteQuote."""
        if adapter is None:
            return RouteQuote(route_index=index, amount_out=None, error="route unavailable")

        budget.charge(quote_cost_of(adapter))
        try:
            amount_out = adapter.quote(src_asset, dest_asset, amount_in)
        except Exception as e:
            logger.warning(
                "route_quote_failed",
                route_index=index,
                amount_in=amount_in,
                error=str(e),
            )
            return RouteQuote(route_index=index, amount_out=None, error=str(e))

        if amount_out is None or not is_uint256(amount_out):
            logger.warning(
                "route_quote_failed",
                route_index=index,
                amount_in=amount_in,
                error=f"invalid quote {amount_out!r}",
            )
            return RouteQuote(route_index=index, amount_out=None, error="invalid quote")

        logger.debug("route_quoted", route_index=index, amount_in=amount_in, amount_out=amount_out)
        return RouteQuote(route_index=index, amount_out=amount_out)


def _check_amount(amount_in: int) -> None:
    if not is_uint256(amount_in):
        raise InvalidAmount(f"Invalid query amount: {amount_in}")


__all__ = ["BestRateQueryEngine", "split_fractions"]
