"""Route registry and partner ledger read by the core."""

from aggregator.registry.partners import PartnerLedger, PartnerRecord
from aggregator.registry.routes import RouteRegistry, TradingRoute

__all__ = ["RouteRegistry", "TradingRoute", "PartnerLedger", "PartnerRecord"]
