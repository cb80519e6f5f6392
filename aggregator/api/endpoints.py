"""API endpoints for the swap aggregator.

Endpoints are async and call the aggregator directly, so settlements are
serialized on the event loop and never overlap.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends

from aggregator.aggregator import Aggregator, get_default_aggregator
from aggregator.models.requests import (
    BestRateRequest,
    BestSplitRequest,
    QuoteRequest,
    SplitQuoteRequest,
    SplitTradeRequest,
    TradeRequest,
)
from aggregator.models.responses import (
    BestRouteResponse,
    ErrorResponse,
    QuoteResponse,
    SplitPlanResponse,
    TradeResponse,
)

logger = structlog.get_logger()

# Statuses the aggregator error handler can return; 422 keeps FastAPI's validation schema
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status: {"model": ErrorResponse} for status in (400, 404, 409, 429, 500, 502)
}

router = APIRouter(responses=ERROR_RESPONSES)


def get_aggregator() -> Aggregator:
    """Dependency provider for the aggregator instance.

    Override this in tests to inject a prepared aggregator:
        app.dependency_overrides[get_aggregator] = lambda: aggregator

    Returns:
        The aggregator instance serving requests.
    """
    return get_default_aggregator()


@router.post("/quote")
async def quote(
    request: QuoteRequest,
    aggregator: Aggregator = Depends(get_aggregator),
) -> QuoteResponse:
    """Preview the net output of one route after the partner fee."""
    amount_out = aggregator.quote_one(
        request.route_index,
        request.src_asset,
        request.dest_asset,
        int(request.amount_in),
        request.partner_index,
    )
    return QuoteResponse(amount_out=amount_out)


@router.post("/quote/split")
async def quote_split(
    request: SplitQuoteRequest,
    aggregator: Aggregator = Depends(get_aggregator),
) -> QuoteResponse:
    """Preview the net output of a multi-route split after the partner fee."""
    amount_out = aggregator.quote_split_trades(
        request.route_indices,
        request.src_asset,
        [int(amount) for amount in request.amounts_in],
        request.dest_asset,
        request.partner_index,
    )
    return QuoteResponse(amount_out=amount_out)


@router.post("/best-rate")
async def best_rate(
    request: BestRateRequest,
    aggregator: Aggregator = Depends(get_aggregator),
) -> BestRouteResponse:
    """Find the candidate route with the highest quoted output."""
    result = aggregator.select_best(
        request.src_asset,
        request.dest_asset,
        int(request.amount_in),
        request.candidates,
        budget=request.budget,
    )
    return BestRouteResponse.from_result(result)


@router.post("/best-rate/split")
async def best_rate_split(
    request: BestSplitRequest,
    aggregator: Aggregator = Depends(get_aggregator),
) -> SplitPlanResponse:
    """Find the best two-route split of the input."""
    result = aggregator.select_best_split(
        request.src_asset,
        request.dest_asset,
        int(request.amount_in),
        request.candidates,
        granularity=request.granularity,
        budget=request.budget,
    )
    return SplitPlanResponse.from_result(result)


@router.post("/trade")
async def trade(
    request: TradeRequest,
    aggregator: Aggregator = Depends(get_aggregator),
) -> TradeResponse:
    """Settle a trade through one route."""
    logger.info(
        "received_trade",
        route_index=request.route_index,
        amount_in=request.amount_in,
        trader=request.trader[-8:],
    )
    outcome = aggregator.trade(
        request.route_index,
        request.src_asset,
        int(request.amount_in),
        request.dest_asset,
        int(request.min_dest_amount),
        request.partner_index,
        request.trader,
    )
    return TradeResponse.from_outcome(outcome)


@router.post("/trade/split")
async def trade_split(
    request: SplitTradeRequest,
    aggregator: Aggregator = Depends(get_aggregator),
) -> TradeResponse:
    """Settle a trade split across several routes."""
    logger.info(
        "received_split_trade",
        route_indices=request.route_indices,
        total_amount_in=request.total_amount_in,
        trader=request.trader[-8:],
    )
    outcome = aggregator.split_trade(
        request.route_indices,
        request.src_asset,
        int(request.total_amount_in),
        [int(amount) for amount in request.amounts_in],
        request.dest_asset,
        int(request.min_dest_amount),
        request.partner_index,
        request.trader,
    )
    return TradeResponse.from_outcome(outcome)
