"""Swap router error classes.

Every error raised by the core derives from SwapRouterError. None of them
are retried internally; they surface to the immediate caller.
"""


class SwapRouterError(Exception):
    """Base error for pricing and routing operations."""

    pass


class InvalidInputError(SwapRouterError, ValueError):
    """Malformed request: non-positive amount, bad route shape, bad config."""

    pass


class NoPoolsError(InvalidInputError):
    """The router has no pools to search."""

    pass


class MissingAssetError(SwapRouterError, KeyError):
    """A queried denom is not held by the pool."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class NonConvergentApproximationError(SwapRouterError, ArithmeticError):
    """The binomial series cannot be guaranteed to converge."""

    pass


class InsufficientLiquidityError(SwapRouterError):
    """Sum of per-route limit amounts is below the requested input."""

    pass


class NoRouteFoundError(SwapRouterError):
    """No candidate route connects the requested denoms."""

    pass


__all__ = [
    "SwapRouterError",
    "InvalidInputError",
    "NoPoolsError",
    "MissingAssetError",
    "NonConvergentApproximationError",
    "InsufficientLiquidityError",
    "NoRouteFoundError",
]
