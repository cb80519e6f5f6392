"""Partner fee calculation.

Uses SafeInt for arithmetic so a malformed partner rate or amount raises
instead of producing a fee larger than the gross output.
"""

from __future__ import annotations

from typing import Protocol

import structlog

from aggregator.fees.config import DEFAULT_FEE_CONFIG, FeeConfig
from aggregator.registry.partners import PartnerRecord
from aggregator.safe_int import S

logger = structlog.get_logger()


class FeeCalculator(Protocol):
    """Protocol for fee calculation.

    Alternative implementations can be injected into the executor for
    testing or for different fee schedules.
    """

    def compute_fee(
        self,
        gross_amount_out: int,
        partner: PartnerRecord,
        is_fee_exempt: bool,
    ) -> int:
        """Calculate the fee owed on a gross output amount.

        Args:
            gross_amount_out: Venue output before fees (aggregate for split trades)
            partner: Partner record being billed
            is_fee_exempt: Whether the trader qualifies for a fee waiver

        Returns:
            Fee amount in destination asset units, never above gross_amount_out
        """
        ...


class FeeEngine:
    """Default fee calculator.

    fee = floor(gross_amount_out * partner.fee_bps / 10000), or 0 when the
    trader is exempt. Rounding is applied once, on the amount given, so a
    split trade pays one fee on its aggregate output.
    """

    def __init__(self, config: FeeConfig | None = None) -> None:
        self.config = config or DEFAULT_FEE_CONFIG

    def compute_fee(
        self,
        gross_amount_out: int,
        partner: PartnerRecord,
        is_fee_exempt: bool,
    ) -> int:
        if is_fee_exempt or partner.fee_bps == 0 or gross_amount_out == 0:
            return 0

        fee = (S(gross_amount_out) * S(partner.fee_bps)) // self.config.bps_denominator
        fee_amount = fee.to_uint256()

        logger.debug(
            "fee_calculated",
            partner_index=partner.index,
            fee_bps=partner.fee_bps,
            gross_amount_out=gross_amount_out,
            fee=fee_amount,
        )
        return fee_amount

    def apply_fee(self, gross_amount_out: int, partner: PartnerRecord, is_fee_exempt: bool) -> int:
        """Return the net amount after deducting the fee."""
        fee = self.compute_fee(gross_amount_out, partner, is_fee_exempt)
        return (S(gross_amount_out) - fee).value


# Default engine instance
DEFAULT_FEE_ENGINE = FeeEngine()
