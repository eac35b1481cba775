"""Candidate route discovery.

Routes are either direct (one pool holding both denoms) or go through one
intermediate denom: a pool holding only the input denom is joined with a
pool holding only the output denom on a denom they share.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from swaprouter.pools.base import Pool

from .types import Route

logger = structlog.get_logger()

CandidateKey = tuple[str, str, bool]


class CandidateRouteFinder:
    """Builds and caches candidate routes over a fixed set of pools.

    The cache lives as long as the pool set; build a new finder (or call
    clear) when the pools change.

    Args:
        pools: Pools to search, in priority order
    """

    def __init__(self, pools: Sequence[Pool]) -> None:
        self._pools = tuple(pools)
        self._cache: dict[CandidateKey, tuple[Route, ...]] = {}

    @property
    def pools(self) -> tuple[Pool, ...]:
        return self._pools

    def clear(self) -> None:
        self._cache = {}

    def find(
        self, token_in_denom: str, token_out_denom: str, permit_intermediate: bool
    ) -> list[Route]:
        """Return candidate routes from token_in_denom to token_out_denom.

        Direct routes come first, in pool order, followed by two-pool routes
        when permit_intermediate is set.
        """
        if not self._pools:
            return []

        key = (token_in_denom, token_out_denom, permit_intermediate)
        cached = self._cache.get(key)
        if cached is not None:
            return list(cached)

        routes = self._build(token_in_denom, token_out_denom, permit_intermediate)
        self._cache[key] = tuple(routes)
        return routes

    def _build(
        self, token_in_denom: str, token_out_denom: str, permit_intermediate: bool
    ) -> list[Route]:
        direct: list[Route] = []
        # Intermediate denom -> one-sided pools holding it
        in_side: dict[str, list[Pool]] = {}
        out_side: dict[str, list[Pool]] = {}

        for pool in self._pools:
            has_in = pool.has_pool_asset(token_in_denom)
            has_out = pool.has_pool_asset(token_out_denom)

            if has_in and has_out:
                direct.append(
                    Route(
                        pools=(pool,),
                        token_out_denoms=(token_out_denom,),
                        token_in_denom=token_in_denom,
                    )
                )
                continue

            if not permit_intermediate or not (has_in or has_out):
                continue

            side = in_side if has_in else out_side
            for asset in pool.pool_assets:
                if asset.denom in (token_in_denom, token_out_denom):
                    continue
                side.setdefault(asset.denom, []).append(pool)

        multihop: list[Route] = []
        for intermediate, in_pools in in_side.items():
            for in_pool in in_pools:
                for out_pool in out_side.get(intermediate, []):
                    if in_pool.id == out_pool.id:
                        continue
                    multihop.append(
                        Route(
                            pools=(in_pool, out_pool),
                            token_out_denoms=(intermediate, token_out_denom),
                            token_in_denom=token_in_denom,
                        )
                    )

        logger.debug(
            "candidate_routes_built",
            token_in=token_in_denom,
            token_out=token_out_denom,
            permit_intermediate=permit_intermediate,
            direct=len(direct),
            multihop=len(multihop),
        )
        return direct + multihop


__all__ = ["CandidateRouteFinder"]
