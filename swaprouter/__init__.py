"""Weighted-pool swap pricing and multi-route trade splitting."""

from swaprouter.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from swaprouter.math.fixed_point import Dec
from swaprouter.pools import TokenAmount, WeightedPool, parse_weighted_pools
from swaprouter.routing import OptimizedRoutes, Route, RouteWithAmount

__version__ = "0.1.0"
__all__ = [
    "DEFAULT_ROUTER_CONFIG",
    "Dec",
    "OptimizedRoutes",
    "Route",
    "RouteWithAmount",
    "RouterConfig",
    "TokenAmount",
    "WeightedPool",
    "parse_weighted_pools",
    "__version__",
]
