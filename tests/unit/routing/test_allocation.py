"""Tests for batch swap simulation and allocation refinement."""

import pytest

from swaprouter.errors import InvalidInputError
from swaprouter.math.fixed_point import Dec
from swaprouter.pools import TokenAmount
from swaprouter.routing import (
    Route,
    RouteWithAmount,
    approximate_optimized_routes_by_token_in,
    calculate_derivative_spot_price_after_swap,
    calculate_token_out_by_token_in,
)
from tests.helpers import ATOM, ION, OSMO, make_weighted_pool


def direct_route(pool, amount: int, token_in: str = OSMO, token_out: str = ION) -> RouteWithAmount:
    return RouteWithAmount(
        pools=(pool,), token_out_denoms=(token_out,), token_in_denom=token_in, amount=amount
    )


@pytest.fixture
def hop_pools():
    """OSMO -> ATOM -> ION through two fee-free pools."""
    return (
        make_weighted_pool("20", [(OSMO, 1, 1_000_000_000), (ATOM, 1, 1_000_000_000)], swap_fee="0"),
        make_weighted_pool("21", [(ATOM, 1, 1_000_000_000), (ION, 1, 1_000_000_000)], swap_fee="0"),
    )


def multihop_route(hop_pools, amount: int) -> RouteWithAmount:
    return RouteWithAmount(
        pools=hop_pools, token_out_denoms=(ATOM, ION), token_in_denom=OSMO, amount=amount
    )


class TestCalculateTokenOutByTokenIn:
    """The aggregator."""

    def test_single_route_matches_pool_quote(self, scenario_pools):
        pool = scenario_pools[0]
        summary = calculate_token_out_by_token_in([direct_route(pool, 1_000_000)])
        quote = pool.get_token_out_by_token_in(TokenAmount(OSMO, 1_000_000), ION)

        assert summary.amount == quote.amount
        assert summary.before_spot_price_in_over_out == quote.before_spot_price_in_over_out
        assert summary.effective_price_in_over_out == quote.effective_price_in_over_out
        assert summary.swap_fee == Dec.from_str("0.01")
        assert summary.after_spot_price_in_over_out > summary.before_spot_price_in_over_out

    def test_amounts_sum_across_routes(self, scenario_pools):
        route_1 = direct_route(scenario_pools[0], 3_000_000)
        route_2 = direct_route(scenario_pools[1], 7_000_000)
        summary = calculate_token_out_by_token_in([route_1, route_2])
        assert summary.amount == (
            calculate_token_out_by_token_in([route_1]).amount
            + calculate_token_out_by_token_in([route_2]).amount
        )

    def test_slippage_definition(self, scenario_pools):
        summary = calculate_token_out_by_token_in([direct_route(scenario_pools[0], 5_000_000)])
        expected = summary.effective_price_in_over_out / summary.before_spot_price_in_over_out - 1
        assert summary.slippage == expected

    def test_multihop_chains_hops(self, hop_pools):
        summary = calculate_token_out_by_token_in([multihop_route(hop_pools, 1_000_000)])
        first = hop_pools[0].get_token_out_by_token_in(TokenAmount(OSMO, 1_000_000), ATOM)
        second = hop_pools[1].get_token_out_by_token_in(TokenAmount(ATOM, first.amount), ION)
        assert summary.amount == second.amount

    def test_multihop_fee_compounds(self):
        pools = (
            make_weighted_pool("30", [(OSMO, 1, 10**9), (ATOM, 1, 10**9)], swap_fee="0.01"),
            make_weighted_pool("31", [(ATOM, 1, 10**9), (ION, 1, 10**9)], swap_fee="0.01"),
        )
        summary = calculate_token_out_by_token_in([multihop_route(pools, 1_000_000)])
        assert summary.swap_fee == Dec.from_str("0.0199")

    def test_empty_rejected(self):
        with pytest.raises(InvalidInputError):
            calculate_token_out_by_token_in([])

    def test_mismatched_out_denoms_rejected(self, scenario_pools):
        routes = [
            direct_route(scenario_pools[0], 1_000),
            direct_route(scenario_pools[1], 1_000, token_out=ATOM),
        ]
        with pytest.raises(InvalidInputError, match="different token out"):
            calculate_token_out_by_token_in(routes)

    def test_length_mismatch_rejected(self, scenario_pools):
        route = RouteWithAmount(
            pools=(scenario_pools[1],),
            token_out_denoms=(ATOM, ION),
            token_in_denom=OSMO,
            amount=1_000,
        )
        with pytest.raises(InvalidInputError):
            calculate_token_out_by_token_in([route])

    def test_shared_pool_allowed(self, scenario_pools):
        """Only the allocator requires pool-disjoint routes."""
        route = direct_route(scenario_pools[0], 1_000_000)
        summary = calculate_token_out_by_token_in([route, route])
        assert summary.amount == 2 * calculate_token_out_by_token_in([route]).amount


class TestDerivativeSpotPriceAfterSwap:
    """Single-pool and chain-rule derivatives."""

    def test_single_pool_delegates(self, scenario_pools):
        pool = scenario_pools[0]
        expected = pool.get_derivative_spot_price_after_token_out_by_token_in(
            TokenAmount(OSMO, 2_000_000), ION
        )
        assert calculate_derivative_spot_price_after_swap(direct_route(pool, 2_000_000)) == expected

    def test_multihop_matches_finite_difference(self, hop_pools):
        x, h = 1_000_000, 100_000

        def spot_price_after(amount: int) -> Dec:
            route = multihop_route(hop_pools, amount)
            return calculate_token_out_by_token_in([route]).after_spot_price_in_over_out

        finite_difference = (spot_price_after(x + h) - spot_price_after(x)) / Dec.from_int(h)
        derivative = calculate_derivative_spot_price_after_swap(multihop_route(hop_pools, x))

        assert abs(derivative - finite_difference) <= finite_difference * Dec.from_str("0.01")

    def test_multihop_exceeds_each_hop(self, hop_pools):
        derivative = calculate_derivative_spot_price_after_swap(multihop_route(hop_pools, 1_000_000))
        first_hop = hop_pools[0].get_derivative_spot_price_after_token_out_by_token_in(
            TokenAmount(OSMO, 1_000_000), ATOM
        )
        assert derivative > first_hop

    def test_empty_route_rejected(self):
        route = RouteWithAmount(pools=(), token_out_denoms=(), token_in_denom=OSMO, amount=1)
        with pytest.raises(InvalidInputError):
            calculate_derivative_spot_price_after_swap(route)


class TestApproximateOptimizedRoutes:
    """Newton refinement of a split."""

    def test_empty_returns_empty(self):
        assert approximate_optimized_routes_by_token_in([], 10) == []

    def test_single_route_unchanged(self, scenario_pools):
        route = direct_route(scenario_pools[0], 1_000_000)
        assert approximate_optimized_routes_by_token_in([route], 10) == [route]

    def test_negative_iterations_rejected(self, scenario_pools):
        with pytest.raises(InvalidInputError):
            approximate_optimized_routes_by_token_in([direct_route(scenario_pools[0], 1)], -1)

    def test_shared_pool_rejected(self, scenario_pools):
        route = direct_route(scenario_pools[0], 1_000_000)
        with pytest.raises(InvalidInputError, match="more than one route"):
            approximate_optimized_routes_by_token_in([route, route], 3)

    def test_mismatched_out_denoms_rejected(self, scenario_pools):
        routes = [
            direct_route(scenario_pools[0], 1_000),
            direct_route(scenario_pools[1], 1_000, token_out=ATOM),
        ]
        with pytest.raises(InvalidInputError):
            approximate_optimized_routes_by_token_in(routes, 3)

    def test_total_preserved(self, scenario_pools):
        routes = [
            direct_route(scenario_pools[0], 50_000_000),
            direct_route(scenario_pools[1], 50_000_000),
        ]
        result = approximate_optimized_routes_by_token_in(routes, 10)
        assert sum(route.amount for route in result) == 100_000_000
        assert [route.pool_ids for route in result] == [("1",), ("2",)]

    def test_improves_even_split(self, scenario_pools):
        """Pool 1 saturates early, so refinement shifts input to pool 2."""
        routes = [
            direct_route(scenario_pools[0], 50_000_000),
            direct_route(scenario_pools[1], 50_000_000),
        ]
        result = approximate_optimized_routes_by_token_in(routes, 10)

        assert result[0].amount < 50_000_000
        assert (
            calculate_token_out_by_token_in(result).amount
            > calculate_token_out_by_token_in(routes).amount
        )

    def test_zero_iterations_is_identity(self, scenario_pools):
        routes = [
            direct_route(scenario_pools[0], 50_000_000),
            direct_route(scenario_pools[1], 50_000_000),
        ]
        assert approximate_optimized_routes_by_token_in(routes, 0) == routes

    def test_iterations_compose(self, scenario_pools):
        """a + b iterations equal a iterations followed by b more."""
        routes = [
            direct_route(scenario_pools[0], 50_000_000),
            direct_route(scenario_pools[1], 50_000_000),
        ]
        at_once = approximate_optimized_routes_by_token_in(routes, 5)
        in_steps = approximate_optimized_routes_by_token_in(
            approximate_optimized_routes_by_token_in(routes, 2), 3
        )
        assert [r.amount for r in at_once] == [r.amount for r in in_steps]

    def test_converged_allocation_is_stable(self, scenario_pools):
        routes = [
            direct_route(scenario_pools[0], 50_000_000),
            direct_route(scenario_pools[1], 50_000_000),
        ]
        converged = approximate_optimized_routes_by_token_in(routes, 20)
        again = approximate_optimized_routes_by_token_in(converged, 5)
        for before, after in zip(converged, again):
            assert abs(before.amount - after.amount) <= 10

    def test_aborts_instead_of_emptying_route(self, scenario_pools):
        """Small trades want everything in pool 1; the step that would empty pool 2 is refused."""
        routes = [
            direct_route(scenario_pools[0], 5_000_000),
            direct_route(scenario_pools[1], 5_000_000),
        ]
        assert approximate_optimized_routes_by_token_in(routes, 10) == routes

    def test_zero_derivative_keeps_allocation(self, deep_pools):
        """At 1e24 balances the price slope truncates to zero; the split is kept."""
        routes = [direct_route(pool, 5 * 10**22) for pool in deep_pools]
        assert calculate_derivative_spot_price_after_swap(routes[0]).is_zero()
        assert approximate_optimized_routes_by_token_in(routes, 10) == routes


def test_route_with_amount_keeps_path():
    pool = make_weighted_pool("40", [(OSMO, 1, 100), (ION, 1, 100)])
    route = Route(pools=(pool,), token_out_denoms=(ION,), token_in_denom=OSMO)
    with_amount = route.with_amount(7)
    assert with_amount.amount == 7
    assert with_amount.pool_ids == ("40",)
    assert with_amount.token_out_denom == ION
