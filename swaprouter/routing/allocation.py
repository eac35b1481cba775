"""Multi-route swap simulation and allocation refinement.

calculate_token_out_by_token_in simulates a batch of routes and summarizes
the result. approximate_optimized_routes_by_token_in moves input between
routes with Newton steps that equalize the post-swap marginal price of every
route. The iteration count is a hard cap: the loop never runs past it and
aborts early, keeping the last good allocation, when a step would leave a
route empty or at its first pool's limit amount, or when a route's post-swap
price slope truncates to zero.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from swaprouter.errors import InvalidInputError
from swaprouter.math.fixed_point import Dec
from swaprouter.pools.base import TokenAmount

from .types import RouteWithAmount, SwapSummary
from .validation import validate_route_shape, validate_routes

logger = structlog.get_logger()

ONE = Dec.from_int(1)
ZERO = Dec(0)


def calculate_token_out_by_token_in(routes: Sequence[RouteWithAmount]) -> SwapSummary:
    """Simulate every route against current pool state and aggregate.

    Each route is swapped hop by hop. Its prices are the product of the
    per-hop prices and its fee compounds as fee + (1 - fee) * pool_fee. The
    totals weight each route by amount / total amount.

    Args:
        routes: Routes with allocated input amounts

    Returns:
        SwapSummary over the whole batch

    Raises:
        InvalidInputError: If routes is empty, a route is malformed, or the
            routes disagree on in or out denom
        MissingAssetError: If a hop's pool lacks a denom
        ZeroDivisionError: If the allocated amounts sum to zero or a hop
            yields nothing
    """
    validate_routes(routes, require_disjoint_pools=False)

    sum_amount = Dec.from_int(sum(route.amount for route in routes))

    total_out = 0
    total_before = ZERO
    total_after = ZERO
    total_effective = ZERO
    total_swap_fee = ZERO

    for route in routes:
        fraction = Dec.from_int(route.amount) / sum_amount

        token_in = TokenAmount(route.token_in_denom, route.amount)
        before = ONE
        after = ONE
        effective = ONE
        swap_fee = ZERO

        for pool, out_denom in zip(route.pools, route.token_out_denoms):
            quote = pool.get_token_out_by_token_in(token_in, out_denom)

            before = before * quote.before_spot_price_in_over_out
            after = after * quote.after_pool.get_spot_price_in_over_out(token_in.denom, out_denom)
            effective = effective * quote.effective_price_in_over_out
            swap_fee = swap_fee + (ONE - swap_fee) * pool.swap_fee

            token_in = TokenAmount(out_denom, quote.amount)

        total_out += token_in.amount
        total_before = total_before + before * fraction
        total_after = total_after + after * fraction
        total_effective = total_effective + effective * fraction
        total_swap_fee = total_swap_fee + swap_fee * fraction

    return SwapSummary(
        amount=total_out,
        before_spot_price_in_over_out=total_before,
        before_spot_price_out_over_in=ONE / total_before,
        after_spot_price_in_over_out=total_after,
        after_spot_price_out_over_in=ONE / total_after,
        effective_price_in_over_out=total_effective,
        effective_price_out_over_in=ONE / total_effective,
        swap_fee=total_swap_fee,
        slippage=total_effective / total_before - ONE,
    )


def calculate_derivative_spot_price_after_swap(route: RouteWithAmount) -> Dec:
    """d(post-swap spot price in over out) / d(route.amount).

    A single pool answers directly. For a multi-hop route the post-swap
    price is the product of the hops' prices, each hop fed the previous
    hop's output. Since d(out_i)/d(in_i) is 1 / SPaS_i at the margin, the
    chain rule collapses to

        SPaS'(x) = sum_i SPaS_i'(in_i) * prod_{j>i} SPaS_j

    Raises:
        InvalidInputError: If the route is malformed
    """
    validate_route_shape(route)

    token_in = TokenAmount(route.token_in_denom, route.amount)
    if len(route.pools) == 1:
        return route.pools[0].get_derivative_spot_price_after_token_out_by_token_in(
            token_in, route.token_out_denoms[0]
        )

    # Forward pass: each hop's input and post-swap spot price
    token_ins = [token_in]
    spot_prices: list[Dec] = []
    for pool, out_denom in zip(route.pools, route.token_out_denoms):
        hop_in = token_ins[-1]
        quote = pool.get_token_out_by_token_in(hop_in, out_denom)
        spot_prices.append(quote.after_pool.get_spot_price_in_over_out(hop_in.denom, out_denom))
        token_ins.append(TokenAmount(out_denom, quote.amount))

    derivative = ZERO
    for i, (pool, out_denom) in enumerate(zip(route.pools, route.token_out_denoms)):
        hop_derivative = pool.get_derivative_spot_price_after_token_out_by_token_in(
            token_ins[i], out_denom
        )
        trailing = ONE
        for spot_price in spot_prices[i + 1 :]:
            trailing = trailing * spot_price
        derivative = derivative + hop_derivative * trailing

    return derivative


def approximate_optimized_routes_by_token_in(
    routes: Sequence[RouteWithAmount], iterations: int
) -> list[RouteWithAmount]:
    """Refine an allocation so marginal post-swap prices converge.

    Each iteration evaluates every route's post-swap spot price SPaS_i and
    derivative SPaS_i' at its current amount, then aims all routes at

        target = sum(SPaS_i / SPaS_i') / sum(1 / SPaS_i')

    moving route i by (target - SPaS_i) / SPaS_i', truncated. The last
    route takes the exact remainder so the total never drifts. If any new
    amount is <= 0 or reaches the route's limit amount, or a derivative is
    zero, the loop stops and the previous allocation is kept.

    Args:
        routes: Pool-disjoint routes with a starting allocation
        iterations: Maximum number of Newton steps

    Returns:
        Routes with refined amounts, same order. Empty input gives an empty
        list; a single route is returned unchanged.

    Raises:
        InvalidInputError: If iterations is negative or the routes are
            malformed, disagree on denoms, or share a pool
    """
    if iterations < 0:
        raise InvalidInputError(f"iterations must be >= 0, got {iterations}")
    if not routes:
        return []
    if len(routes) == 1:
        return list(routes)

    validate_routes(routes)

    total = sum(route.amount for route in routes)
    amounts = [route.amount for route in routes]
    limits = [route.pools[0].get_limit_amount(route.token_in_denom) for route in routes]

    for iteration in range(iterations):
        current = [route.with_amount(amount) for route, amount in zip(routes, amounts)]

        spot_prices: list[Dec] = []
        derivatives: list[Dec] = []
        sum_inverse_derivative = ZERO
        sum_spot_price_over_derivative = ZERO

        for i, route in enumerate(current):
            spot_price = calculate_token_out_by_token_in([route]).after_spot_price_in_over_out
            derivative = calculate_derivative_spot_price_after_swap(route)
            if derivative.is_zero():
                # Deep pools: the slope truncates below 1e-18
                logger.debug(
                    "route_approximation_aborted",
                    iteration=iteration,
                    route_index=i,
                    reason="zero_derivative",
                )
                return [r.with_amount(a) for r, a in zip(routes, amounts)]

            spot_prices.append(spot_price)
            derivatives.append(derivative)
            sum_inverse_derivative = sum_inverse_derivative + ONE / derivative
            sum_spot_price_over_derivative = sum_spot_price_over_derivative + spot_price / derivative

        target = sum_spot_price_over_derivative / sum_inverse_derivative

        new_amounts: list[int] = []
        for i, amount in enumerate(amounts):
            if i == len(amounts) - 1:
                new_amount = total - sum(new_amounts)
            else:
                new_amount = amount + ((target - spot_prices[i]) / derivatives[i]).truncate()

            if new_amount <= 0 or limits[i] <= new_amount:
                logger.debug(
                    "route_approximation_aborted",
                    iteration=iteration,
                    route_index=i,
                    reason="amount_out_of_range",
                    amount=new_amount,
                    limit=limits[i],
                )
                return [route.with_amount(a) for route, a in zip(routes, amounts)]

            new_amounts.append(new_amount)

        amounts = new_amounts

    return [route.with_amount(amount) for route, amount in zip(routes, amounts)]


__all__ = [
    "calculate_token_out_by_token_in",
    "calculate_derivative_spot_price_after_swap",
    "approximate_optimized_routes_by_token_in",
]
