"""
Curve constants.

All amounts are Ulps: integers scaled by 10**18. The values below are
normative literals. DECAY_STEP in particular must not be recomputed from
CAP and INITIAL_REWARD_FRACTION, existing issued amounts depend on this
exact value.
"""

from __future__ import annotations


ULPS = 10**18

UINT256_MAX = 2**256 - 1

# Maximum issuable amount
CAP = 1_500_000_000_000_000_000_000_000_000

# 6.5 as an 18-decimal fixed-point ratio
INITIAL_REWARD_FRACTION = 6_500_000_000_000_000_000

# CAP / INITIAL_REWARD_FRACTION, frozen
DECAY_STEP = 230_769_230_769_230_769_230_769_231

# cumulative(x) == CAP for x >= SATURATION_THRESHOLD
SATURATION_THRESHOLD = 8_300_000_000_000_000_000_000_000_000

# Upper bound on add/subtract pairs in the series below the threshold.
# The longest evaluation (just under SATURATION_THRESHOLD) needs fewer
# than 80 pairs.
MAX_SERIES_PAIRS = 128


def neumark_cap() -> int:
    """Maximum issuable amount in Ulps."""
    return CAP


def initial_reward_fraction() -> int:
    """Initial marginal issuance rate as an 18-decimal ratio."""
    return INITIAL_REWARD_FRACTION
