"""Tests for the route registry."""

import pytest

from aggregator.errors import InvalidRouteIndex
from aggregator.registry import RouteRegistry, TradingRoute
from aggregator.routes.base import RouteAdapter


class TestAddRoute:
    """Tests for registering routes."""

    def test_indices_are_dense(self, registry, make_route):
        first = registry.add_route("first", make_route())
        second = registry.add_route("second", make_route())

        assert (first.index, second.index) == (0, 1)
        assert registry.count() == 2
        assert len(registry) == 2

    def test_route_record(self, registry, make_route):
        adapter = make_route()
        route = registry.add_route("uniswap", adapter)

        assert isinstance(route, TradingRoute)
        assert route.name == "uniswap"
        assert route.adapter is adapter
        assert route.active is True

    def test_initial_routes(self, make_route):
        registry = RouteRegistry([("a", make_route()), ("b", make_route())])
        assert [r.name for r in registry] == ["a", "b"]

    def test_iteration_yields_records_snapshot(self, registry, make_route):
        registry.add_route("a", make_route())
        registry.set_active(0, False)

        routes = iter(registry)
        registry.add_route("b", make_route())

        records = list(routes)
        assert all(isinstance(r, TradingRoute) for r in records)
        assert [(r.name, r.active) for r in records] == [("a", False)]

    def test_mock_route_satisfies_protocol(self, make_route):
        assert isinstance(make_route(), RouteAdapter)


class TestResolve:
    """Tests for RouteRegistry.resolve."""

    def test_resolves_adapter(self, registry, make_route):
        adapter = make_route()
        registry.add_route("a", adapter)
        assert registry.resolve(0) is adapter

    @pytest.mark.parametrize("index", [-1, 1, 100])
    def test_out_of_range(self, registry, make_route, index):
        registry.add_route("a", make_route())
        with pytest.raises(InvalidRouteIndex) as exc_info:
            registry.resolve(index)
        assert exc_info.value.route_index == index

    def test_empty_registry(self, registry):
        with pytest.raises(InvalidRouteIndex):
            registry.resolve(0)

    def test_inactive_route(self, registry, make_route):
        registry.add_route("a", make_route())
        registry.set_active(0, False)

        with pytest.raises(InvalidRouteIndex, match="inactive"):
            registry.resolve(0)
        # The record is still readable
        assert registry.get(0).active is False

    def test_reactivate(self, registry, make_route):
        registry.add_route("a", make_route())
        registry.set_active(0, False)
        registry.set_active(0, True)
        assert registry.resolve(0) is registry.get(0).adapter

    def test_indices_never_reused(self, registry, make_route):
        registry.add_route("a", make_route())
        registry.set_active(0, False)
        route = registry.add_route("b", make_route())
        assert route.index == 1
