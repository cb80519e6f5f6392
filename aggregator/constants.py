"""Protocol constants for the swap aggregator.

Centralizes well-known addresses and fee/search parameters.
"""

from aggregator.models.types import is_valid_address

# Fee rates are expressed in basis points (1 bps = 0.01%)
BPS_DENOMINATOR = 10_000

# Default partner (index 0) charges 0.1%
DEFAULT_PARTNER_FEE_BPS = 10
DEFAULT_PARTNER_NAME = "Aggregator"

# Trader must hold at least this much of the loyalty asset for fee-free trades
DEFAULT_ELIGIBLE_AMOUNT = 10 * 10**18

# Sentinel amount reported by best-rate queries when every venue failed
FAILED_QUOTE = -1

# Split search: volumes are expressed in whole percent
PERCENT = 100
DEFAULT_SPLIT_GRANULARITY = 4
MAX_SPLIT_GRANULARITY = PERCENT

# Cost units charged per venue quote when an adapter does not declare its own
DEFAULT_QUOTE_COST = 100_000


def _validate_address(name: str, address: str) -> str:
    """Validate a well-known address at import time.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# Native asset (ether) is addressed with the conventional 0xeee... placeholder
NATIVE_ASSET = _validate_address("NATIVE_ASSET", "0xeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee")

# Default custody address for the executor when none is configured
DEFAULT_EXECUTOR_ADDRESS = _validate_address(
    "DEFAULT_EXECUTOR_ADDRESS", "0x00000000000000000000000000000000000a99e6"
)

# Payout wallet of partner 0 when none is configured; must differ from custody
DEFAULT_PARTNER_WALLET = _validate_address(
    "DEFAULT_PARTNER_WALLET", "0x0000000000000000000000000000000000fee001"
)
