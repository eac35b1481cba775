"""Shared denom and pool constants for tests.

Usage:
    from tests.helpers import OSMO, ION
    # or
    from tests.helpers.constants import OSMO, ION
"""

# =============================================================================
# Denoms
# =============================================================================

OSMO = "uosmo"
ION = "uion"
ATOM = "uatom"
LUNA = "uluna"

# =============================================================================
# Pool defaults
# =============================================================================

DEFAULT_TOTAL_SHARES = "10000000000000000000"
DEFAULT_SWAP_FEE = "0.01"
DEFAULT_EXIT_FEE = "0"

# Amounts used by the routing scenario (see make_scenario_pools)
SMALL_TRADE = 10_000_000
LARGE_TRADE = 100_000_000
