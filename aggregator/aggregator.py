"""Aggregator facade wiring the registries, fees, settlement and queries.

The Aggregator is the entry point used by the HTTP layer and by embedding
code. All collaborators can be injected; anything omitted is built from
an AggregatorConfig.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from aggregator.config import AggregatorConfig
from aggregator.events import EventLog
from aggregator.fees.calculator import FeeCalculator, FeeEngine
from aggregator.fees.config import FeeConfig
from aggregator.fees.eligibility import FeeExemptionOracle, LoyaltyEligibility
from aggregator.ledger import AssetLedger
from aggregator.registry.partners import PartnerLedger
from aggregator.registry.routes import RouteRegistry
from aggregator.routing.budget import CostBudget
from aggregator.routing.executor import TradeExecutor
from aggregator.routing.query import BestRateQueryEngine
from aggregator.routing.types import BestRoute, SplitPlan, TradeOutcome

logger = structlog.get_logger()


class Aggregator:
    """Multi-venue swap aggregator.

    Exposes the six public operations: trade, split_trade, quote_one,
    quote_split_trades, select_best and select_best_split.

    Args:
        config: Settings used for any collaborator not injected
        registry: Route registry (empty if None)
        partners: Partner ledger (partner 0 from config if None)
        ledger: Asset ledger (empty if None)
        events: Event log shared with venue adapters (new if None)
        fee_engine: Fee calculator (FeeEngine if None)
        eligibility: Fee exemption oracle (LoyaltyEligibility from config if None)
    """

    def __init__(
        self,
        config: AggregatorConfig | None = None,
        registry: RouteRegistry | None = None,
        partners: PartnerLedger | None = None,
        ledger: AssetLedger | None = None,
        events: EventLog | None = None,
        fee_engine: FeeCalculator | None = None,
        eligibility: FeeExemptionOracle | None = None,
    ) -> None:
        self.config = config or AggregatorConfig()
        self.registry = registry if registry is not None else RouteRegistry()
        self.partners = (
            partners
            if partners is not None
            else PartnerLedger(
                default_wallet=self.config.default_partner_wallet,
                default_fee_bps=self.config.default_partner_fee_bps,
                default_name=self.config.default_partner_name,
            )
        )
        self.ledger = ledger if ledger is not None else AssetLedger()
        self.events = events if events is not None else EventLog()
        self.eligibility = (
            eligibility
            if eligibility is not None
            else LoyaltyEligibility(
                self.ledger,
                loyalty_asset=self.config.loyalty_asset,
                eligible_amount=self.config.eligible_amount,
            )
        )
        self.executor = TradeExecutor(
            registry=self.registry,
            partners=self.partners,
            ledger=self.ledger,
            events=self.events,
            fee_engine=fee_engine if fee_engine is not None else FeeEngine(FeeConfig()),
            eligibility=self.eligibility,
            address=self.config.executor_address,
        )
        self.query = BestRateQueryEngine(self.registry, default_budget=self.config.quote_budget)

    @property
    def address(self) -> str:
        """Custody address of the executor."""
        return self.executor.address

    def trade(
        self,
        route_index: int,
        src_asset: str,
        amount_in: int,
        dest_asset: str,
        min_dest_amount: int,
        partner_index: int,
        trader: str,
    ) -> TradeOutcome:
        return self.executor.trade(
            route_index, src_asset, amount_in, dest_asset, min_dest_amount, partner_index, trader
        )

    def split_trade(
        self,
        route_indices: Sequence[int],
        src_asset: str,
        total_amount_in: int,
        amounts_in: Sequence[int],
        dest_asset: str,
        min_dest_amount: int,
        partner_index: int,
        trader: str,
    ) -> TradeOutcome:
        return self.executor.split_trade(
            route_indices,
            src_asset,
            total_amount_in,
            amounts_in,
            dest_asset,
            min_dest_amount,
            partner_index,
            trader,
        )

    def quote_one(
        self,
        route_index: int,
        src_asset: str,
        dest_asset: str,
        amount_in: int,
        partner_index: int = 0,
    ) -> int:
        return self.executor.quote_one(route_index, src_asset, dest_asset, amount_in, partner_index)

    def quote_split_trades(
        self,
        route_indices: Sequence[int],
        src_asset: str,
        amounts_in: Sequence[int],
        dest_asset: str,
        partner_index: int = 0,
    ) -> int:
        return self.executor.quote_split_trades(
            route_indices, src_asset, amounts_in, dest_asset, partner_index
        )

    def select_best(
        self,
        src_asset: str,
        dest_asset: str,
        amount_in: int,
        candidates: Sequence[int],
        budget: CostBudget | int | None = None,
    ) -> BestRoute:
        return self.query.select_best(src_asset, dest_asset, amount_in, candidates, budget)

    def select_best_split(
        self,
        src_asset: str,
        dest_asset: str,
        amount_in: int,
        candidates: Sequence[int],
        granularity: int | None = None,
        budget: CostBudget | int | None = None,
    ) -> SplitPlan:
        return self.query.select_best_split(
            src_asset,
            dest_asset,
            amount_in,
            candidates,
            granularity if granularity is not None else self.config.default_granularity,
            budget,
        )


_default_aggregator: Aggregator | None = None


def get_default_aggregator() -> Aggregator:
    """Return the process-wide aggregator, building it from the environment on first use."""
    global _default_aggregator
    if _default_aggregator is None:
        _default_aggregator = Aggregator(AggregatorConfig.from_env())
        logger.info(
            "aggregator_initialized",
            executor=_default_aggregator.address[-8:],
            quote_budget=_default_aggregator.config.quote_budget,
        )
    return _default_aggregator


__all__ = ["Aggregator", "get_default_aggregator"]
