"""Fee calculation for the aggregator.

This module provides:
- Partner fee calculation in basis points (FeeEngine)
- Fee configuration (FeeConfig)
- Fee exemption oracles (LoyaltyEligibility, NoFeeExemption)

Usage:
    from aggregator.fees import FeeEngine, LoyaltyEligibility

    engine = FeeEngine()
    fee = engine.compute_fee(gross, partner, oracle.is_fee_exempt(trader))
"""

from aggregator.fees.calculator import DEFAULT_FEE_ENGINE, FeeCalculator, FeeEngine
from aggregator.fees.config import DEFAULT_FEE_CONFIG, FeeConfig
from aggregator.fees.eligibility import FeeExemptionOracle, LoyaltyEligibility, NoFeeExemption

__all__ = [
    # Calculator
    "FeeCalculator",
    "FeeEngine",
    "DEFAULT_FEE_ENGINE",
    # Config
    "FeeConfig",
    "DEFAULT_FEE_CONFIG",
    # Eligibility
    "FeeExemptionOracle",
    "LoyaltyEligibility",
    "NoFeeExemption",
]
