"""Shape checks for batches of routes handed to the allocator."""

from __future__ import annotations

from collections.abc import Sequence

from swaprouter.errors import InvalidInputError

from .types import Route


def validate_route_shape(route: Route) -> None:
    """Check a single route is well formed.

    Raises:
        InvalidInputError: If the route has no pools, or its pools and
            out-denoms differ in length
    """
    if not route.pools:
        raise InvalidInputError("Route has no pools")
    if len(route.pools) != len(route.token_out_denoms):
        raise InvalidInputError(
            f"Route has {len(route.pools)} pools but "
            f"{len(route.token_out_denoms)} token out denoms"
        )


def validate_routes(routes: Sequence[Route], require_disjoint_pools: bool = True) -> None:
    """Check a batch of routes can be swapped or allocated together.

    Every route must be well formed and share the same in and out denoms.
    With require_disjoint_pools, no pool may appear in more than one route.

    Raises:
        InvalidInputError: On the first violation found
    """
    if not routes:
        raise InvalidInputError("Routes are empty")

    token_in_denom = routes[0].token_in_denom
    pool_ids: set[str] = set()
    token_out_denom: str | None = None

    for route in routes:
        validate_route_shape(route)

        if route.token_in_denom != token_in_denom:
            raise InvalidInputError(
                f"Routes have different token in denoms: {token_in_denom}, {route.token_in_denom}"
            )
        if token_out_denom is None:
            token_out_denom = route.token_out_denom
        elif route.token_out_denom != token_out_denom:
            raise InvalidInputError(
                f"Routes have different token out denoms: {token_out_denom}, {route.token_out_denom}"
            )

        if not require_disjoint_pools:
            continue
        for pool_id in route.pool_ids:
            if pool_id in pool_ids:
                raise InvalidInputError(f"Pool {pool_id} is used by more than one route")
            pool_ids.add(pool_id)


__all__ = ["validate_route_shape", "validate_routes"]
