"""Type definitions for the routing module."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from aggregator.constants import FAILED_QUOTE, PERCENT
from aggregator.errors import EmptyRouteSet, InvalidAmount, RouteCountMismatch
from aggregator.models.types import normalize_address
from aggregator.safe_int import is_uint256


@dataclass(frozen=True)
class SwapLeg:
    """One (route, amount) line of a trade."""

    route_index: int
    amount_in: int


@dataclass(frozen=True)
class TradePlan:
    """A concrete routing plan to settle.

    Use from_parallel() to build one from the parallel route/amount
    sequences callers supply; validate() checks the structural invariants
    before any venue is touched.
    """

    legs: tuple[SwapLeg, ...]
    src_asset: str
    dest_asset: str
    total_amount_in: int
    min_dest_amount: int
    partner_index: int
    trader: str

    @classmethod
    def from_parallel(
        cls,
        route_indices: Sequence[int],
        amounts_in: Sequence[int],
        *,
        src_asset: str,
        dest_asset: str,
        total_amount_in: int,
        min_dest_amount: int,
        partner_index: int,
        trader: str,
    ) -> TradePlan:
        """Zip parallel route and amount sequences into legs.

        Raises:
            EmptyRouteSet: If route_indices is empty
            RouteCountMismatch: If the sequences differ in length
        """
        if len(route_indices) == 0:
            raise EmptyRouteSet()
        if len(route_indices) != len(amounts_in):
            raise RouteCountMismatch(len(route_indices), len(amounts_in))
        legs = tuple(
            SwapLeg(route_index=r, amount_in=a) for r, a in zip(route_indices, amounts_in, strict=True)
        )
        return cls(
            legs=legs,
            src_asset=normalize_address(src_asset),
            dest_asset=normalize_address(dest_asset),
            total_amount_in=total_amount_in,
            min_dest_amount=min_dest_amount,
            partner_index=partner_index,
            trader=normalize_address(trader),
        )

    def validate(self) -> None:
        """Check structural invariants.

        Raises:
            EmptyRouteSet: If there are no legs
            InvalidAmount: If an amount is not a positive uint256, or the leg
                amounts do not sum to total_amount_in
        """
        if not self.legs:
            raise EmptyRouteSet()
        for leg in self.legs:
            if not is_uint256(leg.amount_in) or leg.amount_in == 0:
                raise InvalidAmount(f"Leg amount must be a positive uint256: {leg.amount_in}")
        if not is_uint256(self.min_dest_amount):
            raise InvalidAmount(f"Invalid minimum destination amount: {self.min_dest_amount}")
        leg_total = sum(leg.amount_in for leg in self.legs)
        if leg_total != self.total_amount_in:
            raise InvalidAmount(
                f"Leg amounts sum to {leg_total}, expected total {self.total_amount_in}"
            )

    @property
    def is_split(self) -> bool:
        return len(self.legs) > 1


@dataclass(frozen=True)
class TradeOutcome:
    """Result of a settled trade. net_amount_out + fee_amount == gross_amount_out."""

    gross_amount_out: int
    fee_amount: int
    net_amount_out: int
    partner_index: int


@dataclass(frozen=True)
class RouteQuote:
    """Quote from one candidate route; amount_out is None when the venue failed."""

    route_index: int
    amount_out: int | None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.amount_out is not None


@dataclass(frozen=True)
class BestRoute:
    """Best single route. amount_out is FAILED_QUOTE when no candidate could quote."""

    route_index: int
    amount_out: int

    @property
    def found(self) -> bool:
        return self.amount_out != FAILED_QUOTE


@dataclass(frozen=True)
class SplitPlan:
    """Best two-route volume split found by the search."""

    route_index_a: int
    route_index_b: int
    fraction_a: int  # Percent of amount_in sent to route A
    amount_out: int

    @property
    def fraction_b(self) -> int:
        return PERCENT - self.fraction_a

    @property
    def found(self) -> bool:
        return self.amount_out != FAILED_QUOTE

    def amounts_in(self, total_amount_in: int) -> tuple[int, int]:
        """Split total_amount_in into (amount_a, amount_b), conserving the total."""
        amount_a = total_amount_in * self.fraction_a // PERCENT
        return amount_a, total_amount_in - amount_a

    def to_legs(self, total_amount_in: int) -> tuple[SwapLeg, ...]:
        """Legs for settling this plan; empty legs are dropped."""
        amount_a, amount_b = self.amounts_in(total_amount_in)
        legs = [
            SwapLeg(route_index=self.route_index_a, amount_in=amount_a),
            SwapLeg(route_index=self.route_index_b, amount_in=amount_b),
        ]
        return tuple(leg for leg in legs if leg.amount_in > 0)


__all__ = ["SwapLeg", "TradePlan", "TradeOutcome", "RouteQuote", "BestRoute", "SplitPlan"]
