"""Constant product (UniswapV2-style) venue.

Formula: amount_out = (in * fee * res_out) / (res_in * 10000 + in * fee)
with fee = 10000 - fee_bps (9970 for the standard 0.3% pool).

Reserves are the pool address's balances in the shared AssetLedger, so an
aborted trade rolls pool state back together with everyone else's.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from aggregator.constants import BPS_DENOMINATOR, DEFAULT_QUOTE_COST
from aggregator.errors import RouteQuoteFailure
from aggregator.events import RouteTraded
from aggregator.models.types import normalize_address
from aggregator.safe_int import S

if TYPE_CHECKING:
    from aggregator.events import EventLog
    from aggregator.ledger import AssetLedger

logger = structlog.get_logger()


def get_amount_out(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    fee_multiplier: int = 9970,
) -> int:
    """Calculate output amount using the constant product formula.

    Args:
        amount_in: Input token amount
        reserve_in: Reserve of input token in pool
        reserve_out: Reserve of output token in pool
        fee_multiplier: 10000 - fee_bps (9970 for 0.3% fee)

    Returns:
        Output token amount (0 for empty input or empty reserves)
    """
    if amount_in <= 0:
        return 0
    if reserve_in <= 0 or reserve_out <= 0:
        return 0

    amount_in_with_fee = S(amount_in) * S(fee_multiplier)
    numerator = amount_in_with_fee * S(reserve_out)
    denominator = S(reserve_in) * S(BPS_DENOMINATOR) + amount_in_with_fee

    return (numerator // denominator).value


class ConstantProductRoute:
    """A two-asset x*y=k pool reachable as a trading route.

    Args:
        name: Human-readable venue name
        address: Pool address; its ledger balances are the reserves
        ledger: Shared asset ledger
        token_a: First pool asset
        token_b: Second pool asset
        fee_bps: Pool swap fee in basis points (default 30 = 0.3%)
        events: Optional event log receiving one RouteTraded per execute()
        quote_cost: Cost units per quote for budgeted queries
    """

    def __init__(
        self,
        name: str,
        address: str,
        ledger: AssetLedger,
        token_a: str,
        token_b: str,
        fee_bps: int = 30,
        events: EventLog | None = None,
        quote_cost: int = DEFAULT_QUOTE_COST,
    ) -> None:
        if not 0 <= fee_bps < BPS_DENOMINATOR:
            raise ValueError(f"fee_bps must be in [0, {BPS_DENOMINATOR}), got {fee_bps}")
        self.name = name
        self.address = normalize_address(address, validate=True)
        self.ledger = ledger
        self.tokens = (normalize_address(token_a), normalize_address(token_b))
        self.fee_bps = fee_bps
        self.events = events
        self.quote_cost = quote_cost

    @property
    def fee_multiplier(self) -> int:
        """Fee multiplier for AMM math (10000 - fee_bps)."""
        return BPS_DENOMINATOR - self.fee_bps

    def supports(self, src_asset: str, dest_asset: str) -> bool:
        src = normalize_address(src_asset)
        dest = normalize_address(dest_asset)
        return src != dest and {src, dest} == set(self.tokens)

    def get_reserves(self, src_asset: str, dest_asset: str) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out).

        Raises:
            RouteQuoteFailure: If the pair is not served by this pool
        """
        if not self.supports(src_asset, dest_asset):
            raise RouteQuoteFailure(
                f"{self.name}: unsupported pair {src_asset[-8:]}/{dest_asset[-8:]}"
            )
        return (
            self.ledger.balance_of(self.address, src_asset),
            self.ledger.balance_of(self.address, dest_asset),
        )

    def quote(self, src_asset: str, dest_asset: str, amount_in: int) -> int:
        reserve_in, reserve_out = self.get_reserves(src_asset, dest_asset)
        if reserve_in <= 0 or reserve_out <= 0:
            raise RouteQuoteFailure(f"{self.name}: no liquidity")
        return get_amount_out(amount_in, reserve_in, reserve_out, self.fee_multiplier)

    def execute(
        self, src_asset: str, dest_asset: str, amount_in: int, account: str, emit: bool = True
    ) -> int:
        """Swap amount_in from account through the pool.

        emit=False skips the RouteTraded event, for callers that report the
        swap themselves.
        """
        amount_out = self.quote(src_asset, dest_asset, amount_in)
        if amount_out <= 0:
            raise RouteQuoteFailure(f"{self.name}: insufficient output amount")

        self.ledger.transfer(src_asset, account, self.address, amount_in)
        self.ledger.transfer(dest_asset, self.address, account, amount_out)

        if emit and self.events is not None:
            self.events.emit(
                RouteTraded(
                    route=self.name,
                    src_asset=normalize_address(src_asset),
                    amount_in=amount_in,
                    dest_asset=normalize_address(dest_asset),
                    amount_out=amount_out,
                )
            )

        logger.debug(
            "route_swap_executed",
            route=self.name,
            amount_in=amount_in,
            amount_out=amount_out,
        )
        return amount_out


__all__ = ["ConstantProductRoute", "get_amount_out"]
