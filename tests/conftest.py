"""Pytest configuration and fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from aggregator.constants import DEFAULT_QUOTE_COST
from aggregator.events import EventLog
from aggregator.ledger import AssetLedger
from aggregator.registry.partners import PartnerLedger
from aggregator.registry.routes import RouteRegistry
from aggregator.routing.executor import TradeExecutor
from aggregator.routing.query import BestRateQueryEngine
from tests.helpers.constants import DAI, DEFAULT_WALLET, EXECUTOR, TRADER, TRADER_FUNDS

# =============================================================================
# Mock classes for dependency injection
# =============================================================================


@dataclass
class MockRouteConfig:
    """Configuration for mock route behavior."""

    # Fixed output amount (if set, ignores input)
    fixed_output: int | None = None
    # Explicit amount_in -> amount_out table (checked before the rate)
    outputs: dict[int, int] = field(default_factory=dict)
    # Output = amount_in * rate_num // rate_den
    rate_num: int = 1
    rate_den: int = 1
    # Raised from quote() and execute() when set
    error: Exception | None = None
    # Raised from execute() only
    execute_error: Exception | None = None
    # quote() returns None instead of an amount
    no_quote: bool = False
    # Extra amount added to the reported execute() output (not credited)
    misreport: int = 0


class MockRoute:
    """Mock venue adapter with configurable output.

    execute() takes amount_in of src from the account and mints the output
    of dest to it, so it behaves like a venue with unlimited inventory.

    Usage:
        # Fixed output regardless of input
        route = MockRoute(ledger, MockRouteConfig(fixed_output=1000))

        # Output as a rate of input
        route = MockRoute(ledger, MockRouteConfig(rate_num=2))

        # Venue that always fails
        route = MockRoute(ledger, MockRouteConfig(error=RuntimeError("revert")))
    """

    def __init__(
        self,
        ledger: AssetLedger,
        config: MockRouteConfig | None = None,
        address: str = "0x9999999999999999999999999999999999999999",
        quote_cost: int = DEFAULT_QUOTE_COST,
        on_execute: Callable[[], None] | None = None,
    ) -> None:
        self.ledger = ledger
        self.config = config or MockRouteConfig()
        self.address = address
        self.quote_cost = quote_cost
        self.on_execute = on_execute
        self.quote_calls: list[tuple[str, str, int]] = []  # Track calls for assertions
        self.execute_calls: list[tuple[str, str, int, str]] = []

    def _output(self, amount_in: int) -> int:
        if self.config.fixed_output is not None:
            return self.config.fixed_output
        if amount_in in self.config.outputs:
            return self.config.outputs[amount_in]
        return amount_in * self.config.rate_num // self.config.rate_den

    def quote(self, src_asset: str, dest_asset: str, amount_in: int) -> int | None:
        self.quote_calls.append((src_asset, dest_asset, amount_in))
        if self.config.error is not None:
            raise self.config.error
        if self.config.no_quote:
            return None
        return self._output(amount_in)

    def execute(self, src_asset: str, dest_asset: str, amount_in: int, account: str) -> int:
        self.execute_calls.append((src_asset, dest_asset, amount_in, account))
        if self.config.error is not None:
            raise self.config.error
        if self.config.execute_error is not None:
            raise self.config.execute_error
        if self.on_execute is not None:
            self.on_execute()

        amount_out = self._output(amount_in)
        self.ledger.transfer(src_asset, account, self.address, amount_in)
        self.ledger.mint(dest_asset, account, amount_out)
        return amount_out + self.config.misreport


# =============================================================================
# Pytest fixtures
# =============================================================================


@pytest.fixture
def ledger() -> AssetLedger:
    """An empty asset ledger."""
    return AssetLedger()


@pytest.fixture
def funded_ledger(ledger: AssetLedger) -> AssetLedger:
    """A ledger where TRADER holds plenty of DAI."""
    ledger.mint(DAI, TRADER, TRADER_FUNDS)
    return ledger


@pytest.fixture
def events() -> EventLog:
    """An empty event log."""
    return EventLog()


@pytest.fixture
def registry() -> RouteRegistry:
    """An empty route registry."""
    return RouteRegistry()


@pytest.fixture
def partners() -> PartnerLedger:
    """A partner ledger with only the default partner (10 bps)."""
    return PartnerLedger(default_wallet=DEFAULT_WALLET)


@pytest.fixture
def executor(
    registry: RouteRegistry,
    partners: PartnerLedger,
    funded_ledger: AssetLedger,
    events: EventLog,
) -> TradeExecutor:
    """A trade executor wired to the shared fixtures."""
    return TradeExecutor(
        registry=registry,
        partners=partners,
        ledger=funded_ledger,
        events=events,
        address=EXECUTOR,
    )


@pytest.fixture
def query_engine(registry: RouteRegistry) -> BestRateQueryEngine:
    """A best-rate query engine over the shared registry (unbounded budget)."""
    return BestRateQueryEngine(registry)


@pytest.fixture
def make_route(ledger: AssetLedger) -> Callable[..., MockRoute]:
    """Factory for MockRoutes sharing the test ledger.

    Usage:
        route = make_route(fixed_output=1000)
    """

    def _make(quote_cost: int = DEFAULT_QUOTE_COST, **config) -> MockRoute:
        return MockRoute(ledger, MockRouteConfig(**config), quote_cost=quote_cost)

    return _make
