"""Registry of trading routes.

Routes are appended with a dense, monotonically increasing index that is
never reused. Routes are never removed; they can only be deactivated.
Registration is an administrative operation; the executor and the
best-rate queries only read the registry.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, replace

import structlog

from aggregator.errors import InvalidRouteIndex
from aggregator.routes.base import RouteAdapter

logger = structlog.get_logger()


@dataclass(frozen=True)
class TradingRoute:
    """A registered venue."""

    index: int
    name: str
    adapter: RouteAdapter
    active: bool = True


class RouteRegistry:
    """Ordered collection of trading routes.

    Usage:
        registry = RouteRegistry()
        uniswap = registry.add_route("Uniswap", uniswap_adapter)
        adapter = registry.resolve(uniswap.index)
    """

    def __init__(self, routes: list[tuple[str, RouteAdapter]] | None = None) -> None:
        """Initialize the registry with optional (name, adapter) pairs."""
        self._routes: list[TradingRoute] = []
        for name, adapter in routes or []:
            self.add_route(name, adapter)

    def add_route(self, name: str, adapter: RouteAdapter) -> TradingRoute:
        """Register a route under the next index."""
        route = TradingRoute(index=len(self._routes), name=name, adapter=adapter)
        self._routes.append(route)
        logger.info("trading_route_added", index=route.index, name=name)
        return route

    def set_active(self, index: int, active: bool) -> TradingRoute:
        """Activate or deactivate a route.

        Raises:
            InvalidRouteIndex: If index is out of range
        """
        route = self.get(index)
        updated = replace(route, active=active)
        self._routes[index] = updated
        logger.info("trading_route_updated", index=index, name=route.name, active=active)
        return updated

    def get(self, index: int) -> TradingRoute:
        """Return the route record, active or not.

        Raises:
            InvalidRouteIndex: If index is out of range
        """
        if not isinstance(index, int) or index < 0 or index >= len(self._routes):
            raise InvalidRouteIndex(index)
        return self._routes[index]

    def resolve(self, index: int) -> RouteAdapter:
        """Return the adapter of an active route.

        Raises:
            InvalidRouteIndex: If index is out of range or the route is inactive
        """
        route = self.get(index)
        if not route.active:
            raise InvalidRouteIndex(index, "route is inactive")
        return route.adapter

    def count(self) -> int:
        return len(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __iter__(self) -> Iterator[TradingRoute]:
        return iter(list(self._routes))


__all__ = ["RouteRegistry", "TradingRoute"]
