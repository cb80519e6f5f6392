"""In-memory asset ledger with atomic rollback.

The ledger is the transfer primitive used by the executor and the venue
adapters. Native and token assets are handled uniformly; the native asset
is just another address (see constants.NATIVE_ASSET).

Transfers are all-or-nothing: a transfer either moves the full amount or
raises. ``atomic()`` snapshots every balance so a multi-step trade that
fails part way leaves no trace.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from aggregator.errors import InsufficientBalance, InvalidDestination, TransferError
from aggregator.models.types import is_valid_address, normalize_address
from aggregator.safe_int import S, is_uint256

logger = structlog.get_logger()


class AssetLedger:
    """Balances keyed by (holder, asset).

    Usage:
        ledger = AssetLedger()
        ledger.mint(DAI, trader, 1000)
        ledger.transfer(DAI, trader, executor, 400)

        with ledger.atomic():
            ledger.transfer(DAI, executor, pool, 400)
            raise SomeError  # both balances restored
    """

    def __init__(self) -> None:
        self._balances: dict[tuple[str, str], int] = {}
        self._depth = 0

    def balance_of(self, holder: str, asset: str) -> int:
        """Return holder's balance of asset (0 if never credited)."""
        return self._balances.get((normalize_address(holder), normalize_address(asset)), 0)

    def mint(self, asset: str, holder: str, amount: int) -> None:
        """Credit amount of asset to holder out of thin air (funding, tests)."""
        if not is_uint256(amount):
            raise TransferError(f"Invalid mint amount: {amount}")
        key = self._key(holder, asset)
        self._balances[key] = (S(self._balances.get(key, 0)) + amount).to_uint256()

    def transfer(self, asset: str, sender: str, recipient: str, amount: int) -> None:
        """Move amount of asset from sender to recipient.

        Raises:
            InvalidDestination: If recipient is not a valid address
            InsufficientBalance: If sender holds less than amount
            TransferError: If amount is not a valid uint256
        """
        if not is_valid_address(normalize_address(recipient)):
            raise InvalidDestination(f"Invalid transfer destination: {recipient}")
        if not is_uint256(amount):
            raise TransferError(f"Invalid transfer amount: {amount}")

        src_key = self._key(sender, asset)
        dst_key = self._key(recipient, asset)
        balance = self._balances.get(src_key, 0)
        if balance < amount:
            raise InsufficientBalance(src_key[1], src_key[0], balance, amount)

        self._balances[src_key] = (S(balance) - amount).value
        self._balances[dst_key] = (S(self._balances.get(dst_key, 0)) + amount).to_uint256()

        logger.debug(
            "asset_transferred",
            asset=src_key[1][-8:],
            sender=src_key[0][-8:],
            recipient=dst_key[0][-8:],
            amount=amount,
        )

    @contextmanager
    def atomic(self) -> Iterator[AssetLedger]:
        """Restore all balances if the block raises."""
        snapshot = dict(self._balances)
        self._depth += 1
        try:
            yield self
        except BaseException:
            self._balances = snapshot
            logger.debug("ledger_rolled_back", depth=self._depth)
            raise
        finally:
            self._depth -= 1

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    @staticmethod
    def _key(holder: str, asset: str) -> tuple[str, str]:
        return normalize_address(holder), normalize_address(asset)


__all__ = ["AssetLedger"]
