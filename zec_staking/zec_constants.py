"""Zcash staking protocol and calculator constants.

This module centralizes the magic numbers used by the yield engine, the
parameter store and the URL codec. Each constant documents its source.
"""

from __future__ import annotations

# =============================================================================
# Protocol Constants
# =============================================================================

# Block subsidy in ZEC after the second halving
# Source: Zcash protocol specification (NU5 era block subsidy)
BLOCK_REWARD_ZEC = 1.5625

# Finalization rounds per day
# Source: 75-second target block spacing (86_400 / 75)
ROUNDS_PER_DAY = 1152

# Block reward split between development fund, miners and stakers
# Only the stakers' share feeds delegator yields.
SHARE_DEV = 0.20
SHARE_MINERS = 0.40
SHARE_STAKERS = 0.40

# Calendar days per year (for APY annualization)
DAYS_PER_YEAR = 365

# Days credited per projection month
DAYS_PER_MONTH = 30

# Default projection horizon in months
DEFAULT_PROJECTION_MONTHS = 12


# =============================================================================
# Economic Assumptions
# =============================================================================

# Total shielded pool eligible for staking, in ZEC
# Note: Overridable through ZEC_TOTAL_SHIELDED (see config.py)
DEFAULT_TOTAL_SHIELDED_ZEC = 3_000_000.0


# =============================================================================
# Parameter Bounds
# =============================================================================

MIN_PCT = 0.0
MAX_PCT = 100.0

MIN_FRACTION = 0.0
MAX_FRACTION = 1.0

# Monthly pool growth assumption (percentage)
MIN_POOL_GROWTH_PCT = 0.0
MAX_POOL_GROWTH_PCT = 30.0

MIN_DELEGATOR_ZEC = 0.0


# =============================================================================
# Quantization (decimal places kept after clamping)
# =============================================================================

PCT_DECIMALS = 2
FRACTION_DECIMALS = 4
# One zatoshi
ZEC_DECIMALS = 8
