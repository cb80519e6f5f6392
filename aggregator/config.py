"""Runtime configuration for the aggregator.

Values come from AGGREGATOR_* environment variables with defaults that
match the constants module.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from aggregator.constants import (
    DEFAULT_ELIGIBLE_AMOUNT,
    DEFAULT_EXECUTOR_ADDRESS,
    DEFAULT_PARTNER_FEE_BPS,
    DEFAULT_PARTNER_NAME,
    DEFAULT_PARTNER_WALLET,
    DEFAULT_SPLIT_GRANULARITY,
)
from aggregator.models.types import normalize_address


@dataclass(frozen=True)
class AggregatorConfig:
    """Aggregator settings.

    Attributes:
        executor_address: Custody address of the trade executor
        default_partner_wallet: Payout wallet of partner 0; must differ from
            executor_address
        default_partner_fee_bps: Fee of partner 0
        default_partner_name: Name of partner 0
        loyalty_asset: Asset granting fee-free trades, or None
        eligible_amount: Loyalty balance required for fee-free trades
        quote_budget: Default cost budget per best-rate query (None = unbounded)
        default_granularity: Split search granularity when the caller omits it

    Raises:
        ValueError: If the partner wallet is the executor's custody address
    """

    executor_address: str = DEFAULT_EXECUTOR_ADDRESS
    default_partner_wallet: str = DEFAULT_PARTNER_WALLET
    default_partner_fee_bps: int = DEFAULT_PARTNER_FEE_BPS
    default_partner_name: str = DEFAULT_PARTNER_NAME
    loyalty_asset: str | None = None
    eligible_amount: int = DEFAULT_ELIGIBLE_AMOUNT
    quote_budget: int | None = None
    default_granularity: int = DEFAULT_SPLIT_GRANULARITY

    def __post_init__(self) -> None:
        if normalize_address(self.default_partner_wallet) == normalize_address(
            self.executor_address
        ):
            raise ValueError(
                f"Partner wallet {self.default_partner_wallet} is the executor custody address"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AggregatorConfig:
        """Build a config from environment variables.

        Recognised variables:
        - AGGREGATOR_EXECUTOR_ADDRESS
        - AGGREGATOR_PARTNER_WALLET
        - AGGREGATOR_PARTNER_FEE_BPS
        - AGGREGATOR_PARTNER_NAME
        - AGGREGATOR_LOYALTY_ASSET
        - AGGREGATOR_ELIGIBLE_AMOUNT
        - AGGREGATOR_QUOTE_BUDGET
        - AGGREGATOR_SPLIT_GRANULARITY

        Raises:
            ValueError: If a numeric variable is not an integer, an address is
                invalid, or the partner wallet equals the executor address
        """
        env = os.environ if environ is None else environ

        def address(name: str) -> str | None:
            value = env.get(name)
            return normalize_address(value, validate=True) if value else None

        def integer(name: str) -> int | None:
            value = env.get(name)
            return int(value) if value not in (None, "") else None

        defaults = cls()
        budget = integer("AGGREGATOR_QUOTE_BUDGET")
        fee_bps = integer("AGGREGATOR_PARTNER_FEE_BPS")
        eligible = integer("AGGREGATOR_ELIGIBLE_AMOUNT")
        granularity = integer("AGGREGATOR_SPLIT_GRANULARITY")

        return cls(
            executor_address=address("AGGREGATOR_EXECUTOR_ADDRESS") or defaults.executor_address,
            default_partner_wallet=(
                address("AGGREGATOR_PARTNER_WALLET") or defaults.default_partner_wallet
            ),
            default_partner_fee_bps=defaults.default_partner_fee_bps if fee_bps is None else fee_bps,
            default_partner_name=env.get("AGGREGATOR_PARTNER_NAME") or defaults.default_partner_name,
            loyalty_asset=address("AGGREGATOR_LOYALTY_ASSET"),
            eligible_amount=defaults.eligible_amount if eligible is None else eligible,
            quote_budget=budget,
            default_granularity=(
                defaults.default_granularity if granularity is None else granularity
            ),
        )


# Default configuration instance
DEFAULT_CONFIG = AggregatorConfig()
