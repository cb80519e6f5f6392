"""Pydantic models for aggregator API responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from aggregator.models.types import Uint256
from aggregator.routing.types import BestRoute, SplitPlan, TradeOutcome


class QuoteResponse(BaseModel):
    """Net output of a quote preview."""

    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class BestRouteResponse(BaseModel):
    """Result of a single-route search.

    amountOut is "-1" and found is False when no candidate could be quoted.
    """

    route_index: int = Field(alias="routeIndex")
    amount_out: str = Field(alias="amountOut", pattern=r"^(-1|\d+)$")
    found: bool

    model_config = {"populate_by_name": True}

    @classmethod
    def from_result(cls, result: BestRoute) -> BestRouteResponse:
        return cls(
            route_index=result.route_index,
            amount_out=str(result.amount_out),
            found=result.found,
        )


class SplitPlanResponse(BaseModel):
    """Result of a two-route split search."""

    route_index_a: int = Field(alias="routeIndexA")
    route_index_b: int = Field(alias="routeIndexB")
    fraction_a: int = Field(alias="fractionA", ge=0, le=100)
    fraction_b: int = Field(alias="fractionB", ge=0, le=100)
    amount_out: str = Field(alias="amountOut", pattern=r"^(-1|\d+)$")
    found: bool

    model_config = {"populate_by_name": True}

    @classmethod
    def from_result(cls, result: SplitPlan) -> SplitPlanResponse:
        return cls(
            route_index_a=result.route_index_a,
            route_index_b=result.route_index_b,
            fraction_a=result.fraction_a,
            fraction_b=result.fraction_b,
            amount_out=str(result.amount_out),
            found=result.found,
        )


class TradeResponse(BaseModel):
    """Settlement result of a trade."""

    gross_amount_out: Uint256 = Field(alias="grossAmountOut")
    fee_amount: Uint256 = Field(alias="feeAmount")
    net_amount_out: Uint256 = Field(alias="netAmountOut")
    partner_index: int = Field(alias="partnerIndex", description="Partner actually credited.")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_outcome(cls, outcome: TradeOutcome) -> TradeResponse:
        return cls(
            gross_amount_out=outcome.gross_amount_out,
            fee_amount=outcome.fee_amount,
            net_amount_out=outcome.net_amount_out,
            partner_index=outcome.partner_index,
        )


class ErrorResponse(BaseModel):
    """Body returned for any aggregator failure."""

    error: str = Field(description="Stable error kind, e.g. 'SlippageExceeded'.")
    detail: str
