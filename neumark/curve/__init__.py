"""
Neumark issuance curve.

Deterministic, monotonic, capped curve converting contributed amount into
issued reward amount and back, in fixed-point integer arithmetic (Ulps,
10**18 per whole unit).

Layers (each depends only on the one below):
- cumulative: contributed -> issued, truncated alternating series
- inverse: issued -> contributed, upper-biased bisection
- incremental: deltas composed from the two above

All operations are pure functions of their arguments and the constants in
`constants`; they are safe to call concurrently.
"""

from .constants import (
    CAP,
    DECAY_STEP,
    INITIAL_REWARD_FRACTION,
    MAX_SERIES_PAIRS,
    SATURATION_THRESHOLD,
    UINT256_MAX,
    ULPS,
    initial_reward_fraction,
    neumark_cap,
)

from .errors import (
    CurveDomainError,
    CurveError,
    CurveInvariantError,
    InsufficientIssuanceError,
    OutOfBracketError,
    UintOverflowError,
)

from .cumulative import SeriesEvaluation, cumulative, evaluate_series
from .inverse import InverseSolution, cumulative_inverse, solve_inverse
from .incremental import incremental, incremental_inverse

from .schedule import ScheduleRow, format_ulps, issuance_schedule, parse_amount

__all__ = [
    # Constants
    "CAP",
    "DECAY_STEP",
    "INITIAL_REWARD_FRACTION",
    "MAX_SERIES_PAIRS",
    "SATURATION_THRESHOLD",
    "UINT256_MAX",
    "ULPS",
    "initial_reward_fraction",
    "neumark_cap",
    # Errors
    "CurveDomainError",
    "CurveError",
    "CurveInvariantError",
    "InsufficientIssuanceError",
    "OutOfBracketError",
    "UintOverflowError",
    # Operations
    "SeriesEvaluation",
    "cumulative",
    "evaluate_series",
    "InverseSolution",
    "cumulative_inverse",
    "solve_inverse",
    "incremental",
    "incremental_inverse",
    # Reporting
    "ScheduleRow",
    "format_ulps",
    "issuance_schedule",
    "parse_amount",
]
