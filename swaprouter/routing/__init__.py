"""Route discovery and trade splitting.

Module structure:
- router.py: OptimizedRoutes facade class
- types.py: Route, RouteWithAmount and SwapSummary dataclasses
- pathfinding.py: CandidateRouteFinder for direct and one-intermediate routes
- allocation.py: Batch swap simulation and Newton allocation refinement
- validation.py: Shape checks for route batches
"""

from swaprouter.routing.allocation import (
    approximate_optimized_routes_by_token_in,
    calculate_derivative_spot_price_after_swap,
    calculate_token_out_by_token_in,
)
from swaprouter.routing.pathfinding import CandidateRouteFinder
from swaprouter.routing.router import OptimizedRoutes
from swaprouter.routing.types import Route, RouteWithAmount, SwapSummary

__all__ = [
    "CandidateRouteFinder",
    "OptimizedRoutes",
    "Route",
    "RouteWithAmount",
    "SwapSummary",
    "approximate_optimized_routes_by_token_in",
    "calculate_derivative_spot_price_after_swap",
    "calculate_token_out_by_token_in",
]
