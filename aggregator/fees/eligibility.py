"""Fee exemption oracles.

The executor only consumes a boolean; these implementations decide it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

import structlog

from aggregator.constants import DEFAULT_ELIGIBLE_AMOUNT
from aggregator.models.types import normalize_address

if TYPE_CHECKING:
    from aggregator.ledger import AssetLedger

logger = structlog.get_logger()


class FeeExemptionOracle(Protocol):
    """Protocol for fee exemption checks."""

    def is_fee_exempt(self, trader: str) -> bool:
        """Return True if the trader pays no fee."""
        ...


class NoFeeExemption:
    """Nobody is exempt."""

    def is_fee_exempt(self, trader: str) -> bool:
        _ = trader  # Interface-required param
        return False


class LoyaltyEligibility:
    """Traders holding enough of a loyalty asset trade fee-free.

    With no loyalty asset configured nobody is exempt.

    Args:
        ledger: Ledger holding trader balances
        loyalty_asset: Designated loyalty asset, or None
        eligible_amount: Minimum balance for exemption (inclusive)
    """

    def __init__(
        self,
        ledger: AssetLedger,
        loyalty_asset: str | None = None,
        eligible_amount: int = DEFAULT_ELIGIBLE_AMOUNT,
    ) -> None:
        self.ledger = ledger
        self.loyalty_asset = normalize_address(loyalty_asset) if loyalty_asset else None
        self.eligible_amount = eligible_amount

    def update_loyalty_asset(self, loyalty_asset: str | None) -> None:
        self.loyalty_asset = normalize_address(loyalty_asset) if loyalty_asset else None
        logger.info("loyalty_asset_updated", loyalty_asset=self.loyalty_asset)

    def update_eligible_amount(self, eligible_amount: int) -> None:
        if eligible_amount < 0:
            raise ValueError(f"eligible_amount must be non-negative, got {eligible_amount}")
        self.eligible_amount = eligible_amount
        logger.info("eligible_amount_updated", eligible_amount=eligible_amount)

    def is_fee_exempt(self, trader: str) -> bool:
        if self.loyalty_asset is None:
            return False
        return self.ledger.balance_of(trader, self.loyalty_asset) >= self.eligible_amount


__all__ = ["FeeExemptionOracle", "NoFeeExemption", "LoyaltyEligibility"]
