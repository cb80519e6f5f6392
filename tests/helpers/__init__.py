"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Asset, account and venue addresses
- factories: Pool, config and aggregator factory functions
"""

from tests.helpers.constants import (
    DAI,
    DEFAULT_WALLET,
    ETH,
    EXECUTOR,
    LOYALTY,
    OTHER_TRADER,
    PARTNER_WALLET,
    POOL_A,
    POOL_B,
    POOL_C,
    POOL_D,
    TRADER,
    TRADER_FUNDS,
    USDC,
    WETH,
)
from tests.helpers.factories import make_aggregator, make_config, make_pool

__all__ = [
    # Constants
    "WETH",
    "USDC",
    "DAI",
    "LOYALTY",
    "ETH",
    "TRADER",
    "OTHER_TRADER",
    "DEFAULT_WALLET",
    "PARTNER_WALLET",
    "EXECUTOR",
    "POOL_A",
    "POOL_B",
    "POOL_C",
    "POOL_D",
    "TRADER_FUNDS",
    # Factories
    "make_pool",
    "make_config",
    "make_aggregator",
]
