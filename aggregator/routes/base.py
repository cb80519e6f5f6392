"""Venue adapter interface.

Every liquidity venue is reached through the same two capabilities:

- quote(): a read-only price lookup
- execute(): perform the exchange, pulling src from ``account`` and
  crediting dest back to it

The core (executor and best-rate queries) depends only on this protocol,
never on a concrete venue.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class RouteAdapter(Protocol):
    """Protocol for trading route adapters.

    Attributes:
        quote_cost: Cost units charged against a query budget per quote call
    """

    quote_cost: int

    def quote(self, src_asset: str, dest_asset: str, amount_in: int) -> int | None:
        """Return the output for amount_in without moving funds.

        Args:
            src_asset: Asset sold
            dest_asset: Asset bought
            amount_in: Amount of src_asset

        Returns:
            Output amount, or None if the venue cannot fill the swap.
            Implementations may also raise RouteQuoteFailure.
        """
        ...

    def execute(self, src_asset: str, dest_asset: str, amount_in: int, account: str) -> int:
        """Exchange amount_in of src_asset held by account.

        Args:
            src_asset: Asset sold
            dest_asset: Asset bought
            amount_in: Amount of src_asset taken from account
            account: Custody address paying src_asset and receiving dest_asset

        Returns:
            Amount of dest_asset credited to account

        Raises:
            RouteQuoteFailure: If the venue cannot fill the swap
        """
        ...


__all__ = ["RouteAdapter"]
