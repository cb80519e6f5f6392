"""Cost budget for best-rate queries.

Quoting may be expensive (each quote can simulate a real exchange), so
callers bound the total work of a query with a CostBudget. The query
engine checks the worst-case cost up front and charges each quote as it
is made.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from aggregator.constants import DEFAULT_QUOTE_COST
from aggregator.errors import CostBudgetExceeded
from aggregator.routes.base import RouteAdapter

logger = structlog.get_logger()


def quote_cost_of(adapter: RouteAdapter) -> int:
    """Cost units of one quote on adapter (DEFAULT_QUOTE_COST if undeclared)."""
    cost = getattr(adapter, "quote_cost", DEFAULT_QUOTE_COST)
    return cost if isinstance(cost, int) and cost >= 0 else DEFAULT_QUOTE_COST


class CostBudget:
    """A ceiling on cost units spent by one query.

    Args:
        limit: Total cost units available; None means unbounded
    """

    def __init__(self, limit: int | None = None) -> None:
        if limit is not None and limit < 0:
            raise ValueError(f"Budget limit must be non-negative, got {limit}")
        self.limit = limit
        self.spent = 0

    @classmethod
    def unlimited(cls) -> CostBudget:
        return cls(None)

    @property
    def remaining(self) -> int | None:
        if self.limit is None:
            return None
        return self.limit - self.spent

    def ensure(self, required: int) -> None:
        """Raise CostBudgetExceeded if required units are not available."""
        remaining = self.remaining
        if remaining is not None and required > remaining:
            logger.warning(
                "cost_budget_exceeded",
                required=required,
                remaining=remaining,
                limit=self.limit,
            )
            raise CostBudgetExceeded(required, remaining)

    def charge(self, cost: int) -> None:
        """Spend cost units, raising CostBudgetExceeded if not available."""
        self.ensure(cost)
        self.spent += cost

    def reserve_for(self, adapters: Iterable[RouteAdapter], quotes_per_route: int = 1) -> int:
        """Check that quotes_per_route quotes on every adapter fit in the budget.

        Returns:
            The worst-case cost that was checked
        """
        required = sum(quote_cost_of(a) for a in adapters) * quotes_per_route
        self.ensure(required)
        return required


__all__ = ["CostBudget", "quote_cost_of"]
