#!/usr/bin/env python3
"""Quote an optimized swap split over pool snapshots stored as JSON.

Usage:
    # Split 100 OSMO (in uosmo) into uion across the pools in pools.json
    python scripts/quote_routes.py pools.json \\
        --token-in uosmo --amount 100000000 --token-out uion

    # Cap the split at two routes and show debug events
    python scripts/quote_routes.py pools.json \\
        --token-in uosmo --amount 100000000 --token-out uion --max-routes 2 -v

The JSON file holds a list of pool records, or an object with a "pools" list.
"""

import argparse
import json
import sys
from pathlib import Path

import structlog

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from swaprouter.config import RouterConfig, configure_logging  # noqa: E402
from swaprouter.errors import SwapRouterError  # noqa: E402
from swaprouter.pools import TokenAmount, parse_weighted_pools  # noqa: E402
from swaprouter.routing import OptimizedRoutes, calculate_token_out_by_token_in  # noqa: E402

logger = structlog.get_logger()


def load_pool_records(path: Path) -> list[dict]:
    """Read pool records from a JSON file."""
    with open(path) as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("pools", [])
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of pool records in {path}")
    return data


def main() -> int:
    parser = argparse.ArgumentParser(description="Quote an optimized multi-route swap")
    parser.add_argument("pools", type=Path, help="JSON file with pool snapshots")
    parser.add_argument("--token-in", required=True, help="Denom to sell")
    parser.add_argument("--amount", type=int, required=True, help="Integer amount to sell")
    parser.add_argument("--token-out", required=True, help="Denom to buy")
    parser.add_argument("--max-routes", type=int, default=None, help="Route cap")
    parser.add_argument("--iterations", type=int, default=None, help="Refinement steps")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()
    configure_logging(args.verbose)

    if not args.pools.exists():
        logger.error("pools_file_not_found", path=str(args.pools))
        print(f"Error: Pools file not found: {args.pools}")
        return 1

    pools = parse_weighted_pools(load_pool_records(args.pools))
    logger.info("pools_loaded", count=len(pools))

    router = OptimizedRoutes(pools, RouterConfig.from_env())
    token_in = TokenAmount(args.token_in, args.amount)

    try:
        routes = router.get_optimized_routes_by_token_in(
            token_in, args.token_out, args.max_routes, args.iterations
        )
    except SwapRouterError as err:
        print(f"Error: {err}")
        return 1

    summary = calculate_token_out_by_token_in(routes)

    print(f"Swap {args.amount} {args.token_in} -> {summary.amount} {args.token_out}")
    for route in routes:
        path = " -> ".join([route.token_in_denom, *route.token_out_denoms])
        print(f"  {route.amount:>24} via pools {', '.join(route.pool_ids)} ({path})")
    print(f"  effective price (in/out): {summary.effective_price_in_over_out}")
    print(f"  spot price before:        {summary.before_spot_price_in_over_out}")
    print(f"  spot price after:         {summary.after_spot_price_in_over_out}")
    print(f"  swap fee:                 {summary.swap_fee}")
    print(f"  slippage:                 {summary.slippage}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
