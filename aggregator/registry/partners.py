"""Partner fee records.

Index 0 is the default partner. Any caller-supplied index outside the
registered range is billed to partner 0 rather than rejected.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from aggregator.constants import BPS_DENOMINATOR, DEFAULT_PARTNER_FEE_BPS, DEFAULT_PARTNER_NAME
from aggregator.models.types import normalize_address

logger = structlog.get_logger()


@dataclass(frozen=True)
class PartnerRecord:
    """A partner's fee tier and payout wallet."""

    index: int
    wallet: str
    fee_bps: int
    name: str

    def __post_init__(self) -> None:
        if not isinstance(self.fee_bps, int) or not 0 <= self.fee_bps <= BPS_DENOMINATOR:
            raise ValueError(f"fee_bps must be in [0, {BPS_DENOMINATOR}], got {self.fee_bps}")
        object.__setattr__(self, "wallet", normalize_address(self.wallet, validate=True))

    @property
    def is_fee_free(self) -> bool:
        return self.fee_bps == 0


class PartnerLedger:
    """Ordered collection of partner records; never empty.

    Args:
        default_wallet: Payout wallet of partner 0
        default_fee_bps: Fee of partner 0 (default 10 = 0.1%)
        default_name: Name of partner 0
    """

    def __init__(
        self,
        default_wallet: str,
        default_fee_bps: int = DEFAULT_PARTNER_FEE_BPS,
        default_name: str = DEFAULT_PARTNER_NAME,
    ) -> None:
        self._partners: list[PartnerRecord] = [
            PartnerRecord(index=0, wallet=default_wallet, fee_bps=default_fee_bps, name=default_name)
        ]
        # Custody addresses that can never receive a partner fee
        self._reserved: set[str] = set()

    def reserve_wallet(self, address: str) -> None:
        """Forbid address as a payout wallet, e.g. an executor's custody address.

        Raises:
            ValueError: If a registered partner already pays out to address
        """
        address = normalize_address(address, validate=True)
        for partner in self._partners:
            if partner.wallet == address:
                raise ValueError(
                    f"Partner {partner.index} wallet {address} is a reserved custody address"
                )
        self._reserved.add(address)

    def _checked(self, partner: PartnerRecord) -> PartnerRecord:
        if partner.wallet in self._reserved:
            raise ValueError(f"Partner wallet {partner.wallet} is a reserved custody address")
        return partner

    def add_partner(self, wallet: str, fee_bps: int, name: str) -> PartnerRecord:
        """Append a partner under the next index.

        Raises:
            ValueError: If fee_bps is out of range or wallet is invalid or reserved
        """
        partner = self._checked(
            PartnerRecord(index=len(self._partners), wallet=wallet, fee_bps=fee_bps, name=name)
        )
        self._partners.append(partner)
        logger.info("partner_added", index=partner.index, name=name, fee_bps=fee_bps)
        return partner

    def update_partner(self, index: int, wallet: str, fee_bps: int, name: str) -> PartnerRecord:
        """Replace an existing partner record.

        Raises:
            IndexError: If index is not a registered partner
            ValueError: If fee_bps is out of range or wallet is invalid or reserved
        """
        if not 0 <= index < len(self._partners):
            raise IndexError(f"Partner index {index} out of range")
        partner = self._checked(PartnerRecord(index=index, wallet=wallet, fee_bps=fee_bps, name=name))
        self._partners[index] = partner
        logger.info("partner_updated", index=index, name=name, fee_bps=fee_bps)
        return partner

    def resolve(self, index: int) -> PartnerRecord:
        """Return the partner record, falling back to partner 0 for unknown indices."""
        if isinstance(index, int) and 0 <= index < len(self._partners):
            return self._partners[index]
        logger.debug("partner_index_fallback", requested=index, partner_count=len(self._partners))
        return self._partners[0]

    def count(self) -> int:
        return len(self._partners)

    def __len__(self) -> int:
        return len(self._partners)


__all__ = ["PartnerLedger", "PartnerRecord"]
