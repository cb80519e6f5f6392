"""Trade settlement and best-rate queries.

This package contains:
- types: legs, plans, outcomes and query results
- executor: TradeExecutor settling single and split trades
- query: BestRateQueryEngine for single-route and two-route searches
- budget: CostBudget bounding query work
"""

from aggregator.routing.budget import CostBudget, quote_cost_of
from aggregator.routing.executor import TradeExecutor
from aggregator.routing.query import BestRateQueryEngine, split_fractions
from aggregator.routing.types import (
    BestRoute,
    RouteQuote,
    SplitPlan,
    SwapLeg,
    TradeOutcome,
    TradePlan,
)

__all__ = [
    # Types
    "SwapLeg",
    "TradePlan",
    "TradeOutcome",
    "RouteQuote",
    "BestRoute",
    "SplitPlan",
    # Services
    "TradeExecutor",
    "BestRateQueryEngine",
    "CostBudget",
    "quote_cost_of",
    "split_fractions",
]
