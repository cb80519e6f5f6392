"""Pydantic models for aggregator API requests.

Amounts are uint256 decimal strings (ints are accepted and normalized);
addresses are 0x-prefixed 20-byte hex strings. Field names use camelCase
aliases on the wire.
"""

from pydantic import BaseModel, Field

from aggregator.models.types import Address, Uint256


class QuoteRequest(BaseModel):
    """Preview the net output of one route."""

    route_index: int = Field(alias="routeIndex", ge=0)
    src_asset: Address = Field(alias="srcAsset")
    dest_asset: Address = Field(alias="destAsset")
    amount_in: Uint256 = Field(alias="amountIn")
    partner_index: int = Field(default=0, alias="partnerIndex")

    model_config = {"populate_by_name": True}


class SplitQuoteRequest(BaseModel):
    """Preview the net output of an input split across several routes."""

    route_indices: list[int] = Field(alias="routeIndices")
    src_asset: Address = Field(alias="srcAsset")
    amounts_in: list[Uint256] = Field(alias="amountsIn")
    dest_asset: Address = Field(alias="destAsset")
    partner_index: int = Field(default=0, alias="partnerIndex")

    model_config = {"populate_by_name": True}


class BestRateRequest(BaseModel):
    """Find the single candidate route with the highest output."""

    src_asset: Address = Field(alias="srcAsset")
    dest_asset: Address = Field(alias="destAsset")
    amount_in: Uint256 = Field(alias="amountIn")
    candidates: list[int]
    budget: int | None = Field(
        default=None,
        ge=0,
        description="Quote cost units allowed for this query (server default if omitted).",
    )

    model_config = {"populate_by_name": True}


class BestSplitRequest(BestRateRequest):
    """Find the best two-route split of the input."""

    granularity: int | None = Field(
        default=None,
        ge=1,
        le=100,
        description="Number of grid steps between 0% and 100% (server default if omitted).",
    )


class TradeRequest(BaseModel):
    """Settle a trade through one route."""

    route_index: int = Field(alias="routeIndex")
    src_asset: Address = Field(alias="srcAsset")
    amount_in: Uint256 = Field(alias="amountIn")
    dest_asset: Address = Field(alias="destAsset")
    min_dest_amount: Uint256 = Field(alias="minDestAmount")
    partner_index: int = Field(default=0, alias="partnerIndex")
    trader: Address

    model_config = {"populate_by_name": True}


class SplitTradeRequest(BaseModel):
    """Settle a trade split across several routes."""

    route_indices: list[int] = Field(alias="routeIndices")
    src_asset: Address = Field(alias="srcAsset")
    total_amount_in: Uint256 = Field(alias="totalAmountIn")
    amounts_in: list[Uint256] = Field(alias="amountsIn")
    dest_asset: Address = Field(alias="destAsset")
    min_dest_amount: Uint256 = Field(alias="minDestAmount")
    partner_index: int = Field(default=0, alias="partnerIndex")
    trader: Address

    model_config = {"populate_by_name": True}
