"""Two-hop route through an intermediate asset (e.g. token -> ETH -> token)."""

from __future__ import annotations

import structlog

from aggregator.errors import RouteQuoteFailure
from aggregator.events import EventLog, RouteTraded
from aggregator.models.types import normalize_address
from aggregator.routes.constant_product import ConstantProductRoute

logger = structlog.get_logger()


class MultiHopRoute:
    """Chains two constant product pools via an intermediate asset.

    The first pool must serve src/intermediate and the second
    intermediate/dest. The per-hop pools do not emit their own events; the
    route emits one RouteTraded for the whole leg.
    """

    def __init__(
        self,
        name: str,
        first: ConstantProductRoute,
        second: ConstantProductRoute,
        intermediate: str,
        events: EventLog | None = None,
    ) -> None:
        self.name = name
        self.first = first
        self.second = second
        self.intermediate = normalize_address(intermediate)
        self.events = events
        self.quote_cost = first.quote_cost + second.quote_cost

    def quote(self, src_asset: str, dest_asset: str, amount_in: int) -> int:
        if normalize_address(src_asset) == self.intermediate or (
            normalize_address(dest_asset) == self.intermediate
        ):
            raise RouteQuoteFailure(f"{self.name}: pair must not include the intermediate asset")
        mid = self.first.quote(src_asset, self.intermediate, amount_in)
        return self.second.quote(self.intermediate, dest_asset, mid)

    def execute(self, src_asset: str, dest_asset: str, amount_in: int, account: str) -> int:
        # Quote first so an unsupported pair fails before any funds move
        self.quote(src_asset, dest_asset, amount_in)
        mid = self.first.execute(src_asset, self.intermediate, amount_in, account, emit=False)
        amount_out = self.second.execute(self.intermediate, dest_asset, mid, account, emit=False)

        if self.events is not None:
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
            "multihop_swap_executed",
            route=self.name,
            intermediate=self.intermediate[-8:],
            amount_in=amount_in,
            intermediate_amount=mid,
            amount_out=amount_out,
        )
        return amount_out


__all__ = ["MultiHopRoute"]
