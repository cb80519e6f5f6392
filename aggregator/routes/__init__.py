"""Venue adapters.

Usage:
    from aggregator.routes import ConstantProductRoute, MultiHopRoute, RouteAdapter
"""

from aggregator.routes.base import RouteAdapter
from aggregator.routes.constant_product import ConstantProductRoute, get_amount_out
from aggregator.routes.multihop import MultiHopRoute

__all__ = ["RouteAdapter", "ConstantProductRoute", "MultiHopRoute", "get_amount_out"]
