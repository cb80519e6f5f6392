"""Trade execution and settlement.

The executor settles single-route and split trades:

1. Validate the plan (legs, amounts, routes) before touching any venue
2. Pull the input from the trader into custody and execute every leg in order
3. Charge one partner fee on the aggregate gross output
4. Enforce the trader's minimum on the net amount, then pay partner and trader

Steps 2-4 run inside a single atomic unit: any failure (venue revert,
slippage, transfer error) restores every ledger balance and drops every
event emitted during the trade, so a split trade is all-or-nothing.
"""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog

from aggregator.constants import DEFAULT_EXECUTOR_ADDRESS
from aggregator.errors import (
    AggregatorError,
    CustodyImbalance,
    EmptyRouteSet,
    InvalidAmount,
    ReentrantCall,
    RouteCountMismatch,
    RouteQuoteFailure,
    SlippageExceeded,
)
from aggregator.events import EventLog, FeeCollected, TradeSettled
from aggregator.fees.calculator import DEFAULT_FEE_ENGINE
from aggregator.fees.eligibility import NoFeeExemption
from aggregator.models.types import normalize_address
from aggregator.routing.types import SwapLeg, TradeOutcome, TradePlan
from aggregator.safe_int import S, is_uint256

if TYPE_CHECKING:
    from collections.abc import Iterator

    from aggregator.fees.calculator import FeeCalculator
    from aggregator.fees.eligibility import FeeExemptionOracle
    from aggregator.ledger import AssetLedger
    from aggregator.registry.partners import PartnerLedger, PartnerRecord
    from aggregator.registry.routes import RouteRegistry
    from aggregator.routes.base import RouteAdapter

logger = structlog.get_logger()


class TradeExecutor:
    """Settles trades through registered routes.

    Args:
        registry: Route registry used to resolve route indices
        partners: Partner ledger used to resolve fee tiers
        ledger: Asset ledger holding trader, venue, partner and custody balances
        events: Event log for TradeSettled / FeeCollected (new log if None)
        fee_engine: Fee calculator (default FeeEngine)
        eligibility: Fee exemption oracle (default: nobody is exempt)
        address: Custody address of the executor

    Raises:
        ValueError: If a partner already pays out to the custody address
    """

    def __init__(
        self,
        registry: RouteRegistry,
        partners: PartnerLedger,
        ledger: AssetLedger,
        events: EventLog | None = None,
        fee_engine: FeeCalculator | None = None,
        eligibility: FeeExemptionOracle | None = None,
        address: str = DEFAULT_EXECUTOR_ADDRESS,
    ) -> None:
        self.registry = registry
        self.partners = partners
        self.ledger = ledger
        self.events = events if events is not None else EventLog()
        self.fee_engine = fee_engine if fee_engine is not None else DEFAULT_FEE_ENGINE
        self.eligibility = eligibility if eligibility is not None else NoFeeExemption()
        self.address = normalize_address(address, validate=True)
        # A fee paid to custody would leave it in custody and break the balance check
        self.partners.reserve_wallet(self.address)
        self._in_trade = False

    # ------------------------------------------------------------------
    # Trades
    # ------------------------------------------------------------------

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
        """Swap amount_in of src_asset for dest_asset through one route.

        Returns:
            TradeOutcome with gross, fee and net amounts

        Raises:
            InvalidRouteIndex: If the route is unknown or inactive
            RouteQuoteFailure: If the venue fails to execute
            SlippageExceeded: If the net output is below min_dest_amount
        """
        plan = TradePlan.from_parallel(
            [route_index],
            [amount_in],
            src_asset=src_asset,
            dest_asset=dest_asset,
            total_amount_in=amount_in,
            min_dest_amount=min_dest_amount,
            partner_index=partner_index,
            trader=trader,
        )
        return self.execute_plan(plan)

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
        """Swap total_amount_in split across several routes.

        route_indices and amounts_in are parallel sequences; amounts_in must
        sum to total_amount_in.

        Raises:
            EmptyRouteSet: If route_indices is empty
            RouteCountMismatch: If the sequences differ in length
            InvalidAmount: If the amounts do not sum to total_amount_in
            InvalidRouteIndex: If any route is unknown or inactive
            RouteQuoteFailure: If any venue fails (no leg is settled)
            SlippageExceeded: If the aggregate net output is below min_dest_amount
        """
        plan = TradePlan.from_parallel(
            route_indices,
            amounts_in,
            src_asset=src_asset,
            dest_asset=dest_asset,
            total_amount_in=total_amount_in,
            min_dest_amount=min_dest_amount,
            partner_index=partner_index,
            trader=trader,
        )
        return self.execute_plan(plan)

    def execute_plan(self, plan: TradePlan) -> TradeOutcome:
        """Validate and settle a trade plan atomically."""
        plan.validate()
        adapters = [self.registry.resolve(leg.route_index) for leg in plan.legs]

        with self._non_reentrant():
            with self.ledger.atomic(), self.events.atomic():
                outcome = self._settle(plan, adapters)

        logger.info(
            "trade_settled",
            trader=plan.trader[-8:],
            src_asset=plan.src_asset[-8:],
            dest_asset=plan.dest_asset[-8:],
            legs=len(plan.legs),
            amount_in=plan.total_amount_in,
            gross_amount_out=outcome.gross_amount_out,
            fee=outcome.fee_amount,
            net_amount_out=outcome.net_amount_out,
        )
        return outcome

    def _settle(self, plan: TradePlan, adapters: list[RouteAdapter]) -> TradeOutcome:
        src, dest = plan.src_asset, plan.dest_asset
        custody_src = self.ledger.balance_of(self.address, src)
        custody_dest = self.ledger.balance_of(self.address, dest)

        self.ledger.transfer(src, plan.trader, self.address, plan.total_amount_in)

        gross = S(0)
        for leg, adapter in zip(plan.legs, adapters, strict=True):
            gross = gross + self._execute_leg(adapter, leg, src, dest)
        gross_amount_out = gross.to_uint256()

        partner = self.partners.resolve(plan.partner_index)
        exempt = self.eligibility.is_fee_exempt(plan.trader)
        fee_amount = self.fee_engine.compute_fee(gross_amount_out, partner, exempt)
        net_amount_out = (gross - fee_amount).to_uint256()

        if net_amount_out < plan.min_dest_amount:
            logger.info(
                "trade_slippage_exceeded",
                trader=plan.trader[-8:],
                net_amount_out=net_amount_out,
                min_dest_amount=plan.min_dest_amount,
            )
            raise SlippageExceeded(net_amount_out, plan.min_dest_amount)

        if fee_amount > 0:
            self.ledger.transfer(dest, self.address, partner.wallet, fee_amount)
        self.ledger.transfer(dest, self.address, plan.trader, net_amount_out)

        self.events.emit(
            TradeSettled(
                src_asset=src,
                amount_in=plan.total_amount_in,
                dest_asset=dest,
                net_amount_out=net_amount_out,
                trader=plan.trader,
            )
        )
        if fee_amount > 0:
            self._emit_fee(partner, dest, fee_amount)

        self._check_custody(src, custody_src)
        self._check_custody(dest, custody_dest)

        return TradeOutcome(
            gross_amount_out=gross_amount_out,
            fee_amount=fee_amount,
            net_amount_out=net_amount_out,
            partner_index=partner.index,
        )

    def _execute_leg(self, adapter: RouteAdapter, leg: SwapLeg, src: str, dest: str) -> int:
        """Execute one leg and check the venue credited what it reported."""
        before = self.ledger.balance_of(self.address, dest)
        try:
            amount_out = adapter.execute(src, dest, leg.amount_in, self.address)
        except AggregatorError:
            raise
        except Exception as e:
            raise RouteQuoteFailure(f"Route {leg.route_index} failed to execute: {e}") from e

        if not is_uint256(amount_out):
            raise RouteQuoteFailure(f"Route {leg.route_index} returned invalid amount {amount_out}")

        credited = self.ledger.balance_of(self.address, dest) - before
        if credited != amount_out:
            raise RouteQuoteFailure(
                f"Route {leg.route_index} reported {amount_out} but credited {credited}"
            )

        logger.debug(
            "trade_leg_executed",
            route_index=leg.route_index,
            amount_in=leg.amount_in,
            amount_out=amount_out,
        )
        return amount_out

    def _emit_fee(self, partner: PartnerRecord, dest: str, fee_amount: int) -> None:
        self.events.emit(
            FeeCollected(
                partner_index=partner.index,
                dest_asset=dest,
                wallet=partner.wallet,
                fee_amount=fee_amount,
            )
        )
        logger.info(
            "fee_collected",
            partner_index=partner.index,
            wallet=partner.wallet[-8:],
            dest_asset=dest[-8:],
            fee=fee_amount,
        )

    def _check_custody(self, asset: str, expected: int) -> None:
        actual = self.ledger.balance_of(self.address, asset)
        if actual != expected:
            raise CustodyImbalance(
                f"Custody of {asset[-8:]} changed during trade: {expected} -> {actual}"
            )

    @contextmanager
    def _non_reentrant(self) -> Iterator[None]:
        if self._in_trade:
            raise ReentrantCall("Trade already in progress")
        self._in_trade = True
        try:
            yield
        finally:
            self._in_trade = False

    # ------------------------------------------------------------------
    # Read-only previews
    # ------------------------------------------------------------------

    def quote_one(
        self,
        route_index: int,
        src_asset: str,
        dest_asset: str,
        amount_in: int,
        partner_index: int,
    ) -> int:
        """Expected net output of trade() for a partner, before any exemption.

        Raises:
            InvalidRouteIndex: If the route is unknown or inactive
            RouteQuoteFailure: If the venue cannot quote
        """
        return self.quote_split_trades([route_index], src_asset, [amount_in], dest_asset, partner_index)

    def quote_split_trades(
        self,
        route_indices: Sequence[int],
        src_asset: str,
        amounts_in: Sequence[int],
        dest_asset: str,
        partner_index: int,
    ) -> int:
        """Expected net output of split_trade(): one fee on the summed quotes.

        Raises:
            EmptyRouteSet: If route_indices is empty
            RouteCountMismatch: If the sequences differ in length
            InvalidRouteIndex: If any route is unknown or inactive
            RouteQuoteFailure: If any venue cannot quote
        """
        if len(route_indices) == 0:
            raise EmptyRouteSet()
        if len(route_indices) != len(amounts_in):
            raise RouteCountMismatch(len(route_indices), len(amounts_in))

        adapters = [self.registry.resolve(index) for index in route_indices]

        gross = S(0)
        for index, adapter, amount_in in zip(route_indices, adapters, amounts_in, strict=True):
            if not is_uint256(amount_in):
                raise InvalidAmount(f"Invalid amount for route {index}: {amount_in}")
            gross = gross + self._quote_leg(index, adapter, src_asset, dest_asset, amount_in)

        partner = self.partners.resolve(partner_index)
        fee = self.fee_engine.compute_fee(gross.value, partner, False)
        return (gross - fee).to_uint256()

    @staticmethod
    def _quote_leg(
        index: int, adapter: RouteAdapter, src_asset: str, dest_asset: str, amount_in: int
    ) -> int:
        try:
            amount_out = adapter.quote(src_asset, dest_asset, amount_in)
        except AggregatorError:
            raise
        except Exception as e:
            raise RouteQuoteFailure(f"Route {index} failed to quote: {e}") from e
        if amount_out is None or not is_uint256(amount_out):
            raise RouteQuoteFailure(f"Route {index} cannot quote {amount_in}")
        return amount_out

    # ------------------------------------------------------------------
    # Custody
    # ------------------------------------------------------------------

    def sweep(self, asset: str, amount: int, recipient: str) -> None:
        """Move a stray custody balance to recipient.

        Never called by trades; access control belongs to the caller.

        Raises:
            InsufficientBalance: If custody holds less than amount
            InvalidDestination: If recipient is not a valid address
        """
        self.ledger.transfer(asset, self.address, recipient, amount)
        logger.info(
            "custody_swept",
            asset=normalize_address(asset)[-8:],
            amount=amount,
            recipient=normalize_address(recipient)[-8:],
        )


__all__ = ["TradeExecutor"]
