"""Optimized route selection over a set of pools.

OptimizedRoutes owns a CachedPool per pool id and searches with those
wrappers, so repeated simulations during sorting and allocation hit the
memoized results. Routes handed back to callers always hold the original,
unwrapped pools.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

import structlog

from swaprouter.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from swaprouter.errors import (
    InsufficientLiquidityError,
    InvalidInputError,
    NoPoolsError,
    NoRouteFoundError,
    SwapRouterError,
)
from swaprouter.math.fixed_point import Dec
from swaprouter.pools.base import Pool, TokenAmount
from swaprouter.pools.cached import CachedPool, unwrap_pool

from .allocation import approximate_optimized_routes_by_token_in, calculate_token_out_by_token_in
from .pathfinding import CandidateRouteFinder
from .types import Route, RouteWithAmount

logger = structlog.get_logger()

R = TypeVar("R", bound=Route)


def _unwrap_routes(routes: Sequence[R]) -> list[R]:
    return [route.with_pools(tuple(unwrap_pool(pool) for pool in route.pools)) for route in routes]


def _check_token_in(token_in: TokenAmount) -> None:
    if token_in.amount <= 0:
        raise InvalidInputError(f"Token in amount must be positive, got {token_in.amount}")


class OptimizedRoutes:
    """Route search and trade splitting over a replaceable pool set.

    Not safe for concurrent mutation: the candidate and pool caches are
    plain mutable state. Use one instance per thread or per pool snapshot.

    Args:
        pools: Pools to route through; ids must be unique
        config: Defaults for route count, iterations, cache size and
            intermediate routing
    """

    calculate_token_out_by_token_in = staticmethod(calculate_token_out_by_token_in)
    approximate_optimized_routes_by_token_in = staticmethod(
        approximate_optimized_routes_by_token_in
    )

    def __init__(self, pools: Sequence[Pool], config: RouterConfig | None = None) -> None:
        self._config = config or DEFAULT_ROUTER_CONFIG
        self._pools: tuple[Pool, ...] = ()
        self._cached_pools: dict[str, CachedPool] = {}
        self._finder = CandidateRouteFinder(())
        self.set_pools(pools)

    @property
    def config(self) -> RouterConfig:
        return self._config

    @property
    def pools(self) -> tuple[Pool, ...]:
        return self._pools

    def set_pools(self, pools: Sequence[Pool]) -> None:
        """Replace the pool set and drop every cached result.

        Raises:
            InvalidInputError: If two pools share an id
        """
        originals = tuple(unwrap_pool(pool) for pool in pools)
        cached: dict[str, CachedPool] = {}
        for pool in originals:
            if pool.id in cached:
                raise InvalidInputError(f"Duplicated pool id: {pool.id}")
            cached[pool.id] = CachedPool(pool, self._config.cache_size)

        self._pools = originals
        self._cached_pools = cached
        self._finder = CandidateRouteFinder(tuple(cached.values()))

    def clear_cache(self) -> None:
        """Forget candidate routes and memoized pool queries."""
        self._finder.clear()
        for pool in self._cached_pools.values():
            pool.clear_cache()

    # -------------------------------------------------------------------------
    # Candidate and ranked routes
    # -------------------------------------------------------------------------

    def get_candidate_routes(
        self,
        token_in_denom: str,
        token_out_denom: str,
        permit_intermediate: bool | None = None,
    ) -> list[Route]:
        """Routes connecting the two denoms, direct routes first."""
        return _unwrap_routes(
            self._candidate_routes(token_in_denom, token_out_denom, permit_intermediate)
        )

    def _candidate_routes(
        self, token_in_denom: str, token_out_denom: str, permit_intermediate: bool | None
    ) -> list[Route]:
        if permit_intermediate is None:
            permit_intermediate = self._config.permit_intermediate
        return self._finder.find(token_in_denom, token_out_denom, permit_intermediate)

    def get_routes_sorted_by_expected_token_out(
        self,
        token_in: TokenAmount,
        token_out_denom: str,
        permit_intermediate: bool | None = None,
    ) -> list[Route]:
        """Feasible candidate routes, best simulated output first.

        A route is dropped when its first pool's limit amount is below
        token_in.amount or when simulating the swap fails.

        Raises:
            NoPoolsError: If the router has no pools
            InvalidInputError: If token_in.amount <= 0
        """
        return _unwrap_routes(
            self._sorted_routes(token_in, token_out_denom, permit_intermediate)
        )

    def _sorted_routes(
        self, token_in: TokenAmount, token_out_denom: str, permit_intermediate: bool | None
    ) -> list[Route]:
        if not self._pools:
            raise NoPoolsError("No pools to route through")
        _check_token_in(token_in)

        scored: list[tuple[int, Route]] = []
        for route in self._candidate_routes(token_in.denom, token_out_denom, permit_intermediate):
            limit = route.pools[0].get_limit_amount(token_in.denom)
            if limit < token_in.amount:
                logger.debug(
                    "route_filtered",
                    pools=route.pool_ids,
                    reason="limit_amount",
                    limit=limit,
                    amount=token_in.amount,
                )
                continue

            try:
                summary = calculate_token_out_by_token_in([route.with_amount(token_in.amount)])
            except (SwapRouterError, ArithmeticError) as err:
                logger.debug(
                    "route_filtered",
                    pools=route.pool_ids,
                    reason="simulation_failed",
                    error=str(err),
                )
                continue
            scored.append((summary.amount, route))

        # Stable sort keeps candidate order among equal outputs
        scored.sort(key=lambda item: item[0], reverse=True)
        return [route for _, route in scored]

    def get_best_route_by_token_in(
        self,
        token_in: TokenAmount,
        token_out_denom: str,
        permit_intermediate: bool | None = None,
    ) -> Route:
        """The single route with the greatest simulated output.

        Raises:
            NoPoolsError: If the router has no pools
            InvalidInputError: If token_in.amount <= 0
            NoRouteFoundError: If no feasible route exists
        """
        routes = self.get_routes_sorted_by_expected_token_out(
            token_in, token_out_denom, permit_intermediate
        )
        if not routes:
            raise NoRouteFoundError(f"No route from {token_in.denom} to {token_out_denom}")
        return routes[0]

    # -------------------------------------------------------------------------
    # Split routing
    # -------------------------------------------------------------------------

    def get_optimized_routes_by_token_in(
        self,
        token_in: TokenAmount,
        token_out_denom: str,
        max_routes: int | None = None,
        iterations: int | None = None,
    ) -> list[RouteWithAmount]:
        """Split token_in across up to max_routes pool-disjoint routes.

        Seeds the ranked routes with their limit amounts until the input is
        covered, refines the split with Newton steps, then tries adding one
        more route at a time (scaling the others by n / (n + 1)) for as long
        as that strictly increases the total output.

        Args:
            token_in: Denom and total amount to sell
            token_out_denom: Denom to buy
            max_routes: Route cap, defaults to the config
            iterations: Refinement steps, defaults to the config

        Returns:
            Routes with amounts summing exactly to token_in.amount

        Raises:
            InvalidInputError: If token_in.amount <= 0 or max_routes < 1
            NoPoolsError: If the router has no pools
            NoRouteFoundError: If no candidate route connects the denoms
            InsufficientLiquidityError: If candidate routes exist but their
                limit amounts cannot cover token_in.amount
        """
        _check_token_in(token_in)
        max_routes = self._config.max_routes if max_routes is None else max_routes
        iterations = self._config.iterations if iterations is None else iterations
        if max_routes < 1:
            raise InvalidInputError(f"max_routes must be >= 1, got {max_routes}")

        sorted_routes = self._select_disjoint(
            self._sorted_routes(token_in, token_out_denom, self._config.permit_intermediate),
            max_routes,
        )
        if not sorted_routes:
            if self._candidate_routes(token_in.denom, token_out_denom, self._config.permit_intermediate):
                raise InsufficientLiquidityError(
                    f"No route from {token_in.denom} to {token_out_denom} can take {token_in.amount}"
                )
            raise NoRouteFoundError(f"No route from {token_in.denom} to {token_out_denom}")

        initial_amounts: list[int] = []
        total_limit = 0
        for route in sorted_routes:
            limit = route.pools[0].get_limit_amount(token_in.denom)
            total_limit += limit
            if total_limit < token_in.amount:
                initial_amounts.append(limit)
            else:
                initial_amounts.append(token_in.amount - sum(initial_amounts))
                break

        if total_limit < token_in.amount:
            raise InsufficientLiquidityError(
                f"Routes can take at most {total_limit} {token_in.denom}, "
                f"requested {token_in.amount}"
            )

        best_routes = [route.with_amount(amount) for route, amount in zip(sorted_routes, initial_amounts)]
        best_out = calculate_token_out_by_token_in(best_routes).amount

        if len(best_routes) > 1:
            candidate = approximate_optimized_routes_by_token_in(best_routes, iterations)
            candidate_out = calculate_token_out_by_token_in(candidate).amount
            if candidate_out <= best_out:
                return self._finish(best_routes, best_out)
            best_routes, best_out = candidate, candidate_out

        for route in sorted_routes[len(initial_amounts) :]:
            scale = Dec.from_int(len(best_routes)) / Dec.from_int(len(best_routes) + 1)
            candidate = [r.with_amount((Dec.from_int(r.amount) * scale).truncate()) for r in best_routes]
            candidate.append(route.with_amount(token_in.amount - sum(r.amount for r in candidate)))
            if any(r.amount <= 0 for r in candidate):
                break

            candidate_out = calculate_token_out_by_token_in(candidate).amount
            if candidate_out > best_out:
                best_routes, best_out = candidate, candidate_out

            candidate = approximate_optimized_routes_by_token_in(candidate, iterations)
            candidate_out = calculate_token_out_by_token_in(candidate).amount
            if candidate_out <= best_out:
                break
            best_routes, best_out = candidate, candidate_out

        return self._finish(best_routes, best_out)

    @staticmethod
    def _select_disjoint(routes: Sequence[Route], max_routes: int) -> list[Route]:
        """Keep ranked routes that share no pool with a higher-ranked one."""
        selected: list[Route] = []
        used: set[str] = set()
        for route in routes:
            if len(selected) >= max_routes:
                break
            if used.intersection(route.pool_ids):
                continue
            selected.append(route)
            used.update(route.pool_ids)
        return selected

    def _finish(self, routes: list[RouteWithAmount], token_out: int) -> list[RouteWithAmount]:
        logger.debug(
            "optimized_routes_selected",
            routes=[route.pool_ids for route in routes],
            amounts=[route.amount for route in routes],
            token_out=token_out,
        )
        return _unwrap_routes(routes)


__all__ = ["OptimizedRoutes"]
