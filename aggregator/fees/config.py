"""Fee configuration for the aggregator."""

from dataclasses import dataclass

from aggregator.constants import (
    BPS_DENOMINATOR,
    DEFAULT_ELIGIBLE_AMOUNT,
    DEFAULT_PARTNER_FEE_BPS,
    DEFAULT_PARTNER_NAME,
)


@dataclass(frozen=True)
class FeeConfig:
    """Centralized configuration for fee calculation.

    Attributes:
        bps_denominator: Basis point base (10,000 = 100%)
        default_partner_fee_bps: Fee of partner 0 when the ledger is built
            from configuration (default: 10 = 0.1%)
        default_partner_name: Name of partner 0
        eligible_amount: Loyalty asset balance at which a trader trades fee-free
    """

    bps_denominator: int = BPS_DENOMINATOR
    default_partner_fee_bps: int = DEFAULT_PARTNER_FEE_BPS
    default_partner_name: str = DEFAULT_PARTNER_NAME
    eligible_amount: int = DEFAULT_ELIGIBLE_AMOUNT


# Default configuration instance
DEFAULT_FEE_CONFIG = FeeConfig()
