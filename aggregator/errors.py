"""Aggregator error classes.

Every fatal condition raised by the core has its own class with a stable
``kind`` string so callers (and the HTTP layer) can tell them apart: retry
with different parameters, or surface the failure to the end user.
"""


class AggregatorError(Exception):
    """Base error for aggregator operations."""

    kind = "AggregatorError"


class InvalidRouteIndex(AggregatorError):
    """Route index is out of range or the route is inactive."""

    kind = "InvalidRouteIndex"

    def __init__(self, route_index: int, reason: str = "out of range") -> None:
        self.route_index = route_index
        super().__init__(f"Invalid route index {route_index}: {reason}")


class EmptyRouteSet(AggregatorError):
    """No candidate routes were supplied."""

    kind = "EmptyRouteSet"

    def __init__(self, message: str = "routes can not be empty") -> None:
        super().__init__(message)


class RouteCountMismatch(AggregatorError):
    """Parallel route and amount sequences have different lengths."""

    kind = "RouteCountMismatch"

    def __init__(self, route_count: int, amount_count: int) -> None:
        self.route_count = route_count
        self.amount_count = amount_count
        super().__init__(
            f"routes and amounts lengths mismatch: {route_count} routes, {amount_count} amounts"
        )


class InvalidAmount(AggregatorError):
    """Leg amounts do not add up to the declared total, or an amount is invalid."""

    kind = "InvalidAmount"


class SlippageExceeded(AggregatorError):
    """Net output after fees is below the caller's minimum."""

    kind = "SlippageExceeded"

    def __init__(self, net_amount_out: int, min_dest_amount: int) -> None:
        self.net_amount_out = net_amount_out
        self.min_dest_amount = min_dest_amount
        super().__init__(
            f"destination amount is too low: {net_amount_out} < {min_dest_amount}"
        )


class RouteQuoteFailure(AggregatorError):
    """A venue failed to quote or execute (revert, unsupported pair, no liquidity)."""

    kind = "RouteQuoteFailure"


class CostBudgetExceeded(AggregatorError):
    """The requested search would exceed the caller's cost budget."""

    kind = "CostBudgetExceeded"

    def __init__(self, required: int, available: int) -> None:
        self.required = required
        self.available = available
        super().__init__(f"query cost {required} exceeds budget {available}")


class CustodyImbalance(AggregatorError):
    """Executor custody balance changed across a trade."""

    kind = "CustodyImbalance"


class ReentrantCall(AggregatorError):
    """A trade was started while another trade is in progress."""

    kind = "ReentrantCall"


class TransferError(AggregatorError):
    """Base error for ledger transfers."""

    kind = "TransferError"


class InsufficientBalance(TransferError):
    """Sender does not hold enough of the asset."""

    kind = "InsufficientBalance"

    def __init__(self, asset: str, holder: str, balance: int, amount: int) -> None:
        self.asset = asset
        self.holder = holder
        self.balance = balance
        self.amount = amount
        super().__init__(
            f"Insufficient {asset[-8:]} balance for {holder[-8:]}: {balance} < {amount}"
        )


class InvalidDestination(TransferError):
    """Transfer recipient is not a valid address."""

    kind = "InvalidDestination"
