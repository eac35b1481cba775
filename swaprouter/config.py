"""Router configuration and logging setup."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

import structlog

from swaprouter.errors import InvalidInputError
from swaprouter.pools.cached import DEFAULT_CACHE_SIZE


@dataclass(frozen=True)
class RouterConfig:
    """Tunables for OptimizedRoutes.

    Attributes:
        max_routes: Most routes a trade is split across (default: 3)
        iterations: Newton refinement steps per allocation (default: 10)
        cache_size: LRU capacity of each cached pool (default: 30)
        permit_intermediate: Consider two-pool routes through one
            intermediate denom (default: True)
    """

    max_routes: int = 3
    iterations: int = 10
    cache_size: int = DEFAULT_CACHE_SIZE
    permit_intermediate: bool = True

    def __post_init__(self) -> None:
        if self.max_routes < 1:
            raise InvalidInputError(f"max_routes must be >= 1, got {self.max_routes}")
        if self.iterations < 0:
            raise InvalidInputError(f"iterations must be >= 0, got {self.iterations}")
        if self.cache_size < 1:
            raise InvalidInputError(f"cache_size must be >= 1, got {self.cache_size}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RouterConfig:
        """Build a config from SWAPROUTER_* environment variables.

        Unset variables fall back to the defaults.

        Raises:
            InvalidInputError: If a variable is not a valid value
        """
        env = os.environ if environ is None else environ
        return cls(
            max_routes=_int_from_env(env, "SWAPROUTER_MAX_ROUTES", cls.max_routes),
            iterations=_int_from_env(env, "SWAPROUTER_ITERATIONS", cls.iterations),
            cache_size=_int_from_env(env, "SWAPROUTER_CACHE_SIZE", cls.cache_size),
            permit_intermediate=env.get(
                "SWAPROUTER_PERMIT_INTERMEDIATE", str(cls.permit_intermediate)
            ).lower()
            in ("true", "1", "yes"),
        )


def _int_from_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, str(default))
    try:
        return int(raw)
    except ValueError as err:
        raise InvalidInputError(f"{name} must be an integer, got {raw!r}") from err


# Default configuration instance
DEFAULT_ROUTER_CONFIG = RouterConfig()


def configure_logging(verbose: bool = False) -> None:
    """Configure structlog for console output. Called by scripts, not the library."""
    log_level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )


__all__ = ["RouterConfig", "DEFAULT_ROUTER_CONFIG", "configure_logging"]
