"""
Inverse Solver: issued amount -> contributed amount.

Bisection over the Cumulative Evaluator inside a caller-supplied bracket.
The midpoint is biased up, floor((hi + lo + 1) / 2), so that moving `hi`
to `mid - 1` always shrinks the bracket; with the lower-biased midpoint two
adjacent bounds would loop forever.

Rounding:
    When no x maps exactly to y (the curve steps over y because of integer
    truncation) the solver returns the x just past the gap. Retiring
    issuance therefore never credits back more contributed amount than was
    paid for it.

An exact hit returns the first midpoint that evaluates to y. Where the
curve is flat that is not necessarily the smallest such x; results are
kept bit-compatible with previously persisted amounts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .cumulative import evaluate_series
from .errors import CurveInvariantError, OutOfBracketError
from .uint256 import checked_add, require_uint256

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InverseSolution:
    """Result of one inverse search."""
    value: int
    steps: int  # bisection iterations
    exact: bool  # cumulative(value) == target


def solve_inverse(
    y: int,
    lower: int,
    upper: int,
    max_pairs: Optional[int] = None,
) -> InverseSolution:
    """Find the contributed amount whose cumulative issuance matches y.

    Preconditions:
        - y, lower, upper are uint256
        - lower <= upper
        - cumulative(lower) <= y <= cumulative(upper)

    Postconditions:
        - lower <= value <= upper + 1
        - exact implies cumulative(value) == y
        - not exact implies cumulative(value - 1) < y < cumulative(value)

    Complexity:
        - O(log(upper - lower)) cumulative evaluations

    Raises:
        UintOverflowError: an argument is not uint256 or the bracket sum
            overflows.
        OutOfBracketError: the bracket is inverted or does not contain y.
        CurveInvariantError: the post-bisection gap check failed
            or a curve evaluation exceeded `max_pairs` series pairs.
    """
    require_uint256(y, "y")
    require_uint256(lower, "lower")
    require_uint256(upper, "upper")

    def cumulative(x: int) -> int:
        return evaluate_series(x, max_pairs).value

    if lower > upper:
        raise OutOfBracketError(f"inverted bracket: lower {lower} > upper {upper}")
    if cumulative(lower) > y:
        raise OutOfBracketError(f"cumulative(lower={lower}) exceeds target {y}")
    if cumulative(upper) < y:
        raise OutOfBracketError(f"cumulative(upper={upper}) is below target {y}")

    lo, hi = lower, upper
    steps = 0
    while lo < hi:
        steps += 1
        mid = checked_add(checked_add(hi, lo), 1) // 2
        value = cumulative(mid)
        if value == y:
            logger.debug(
                "inverse(%d) exact hit at %d", y, mid,
                extra={"context": {"y": y, "value": mid, "steps": steps, "exact": True}},
            )
            return InverseSolution(value=mid, steps=steps, exact=True)
        if value < y:
            lo = mid
        else:
            hi = mid - 1

    if cumulative(lo) == y:
        return InverseSolution(value=lo, steps=steps, exact=True)

    # No x maps to y: lo sits just below the gap.
    if not (cumulative(lo) < y < cumulative(lo + 1)):
        raise CurveInvariantError(
            f"inverse({y}) bisection ended at {lo} outside a curve gap"
        )
    logger.debug(
        "inverse(%d) rounded up to %d", y, lo + 1,
        extra={"context": {"y": y, "value": lo + 1, "steps": steps, "exact": False}},
    )
    return InverseSolution(value=lo + 1, steps=steps, exact=False)


def cumulative_inverse(y: int, lower: int, upper: int, max_pairs: Optional[int] = None) -> int:
    """Contributed amount (Ulps) for issued amount y, searched in [lower, upper]."""
    return solve_inverse(y, lower, upper, max_pairs).value
