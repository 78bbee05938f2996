"""
Cumulative Evaluator: contributed amount -> issued amount.

Approximates CAP * (1 - (1 - 1/D)**x) with the binomial expansion

    sum_{k>=1} (-1)**(k+1) * CAP * x**k / (k! * D**k)

where each term is derived from the previous one with a single floor
division: term_k = floor(term_{k-1} * x / (k * DECAY_STEP)). Terms are
consumed in add/subtract pairs until a subtracted term truncates to 0.

Termination:
    For x < SATURATION_THRESHOLD the ratio x / (k * DECAY_STEP) drops
    below 1 once k > 36, after which term strictly shrinks and integer
    truncation reaches 0. `max_pairs` turns a regression of that property
    into CurveInvariantError instead of a hang.

Intermediate sums:
    While terms are still growing (x > DECAY_STEP) a subtracted term can
    exceed the running sum. The running sum is an unbounded Python int and
    may go negative there; the final value is identical to the wrapped
    uint256 arithmetic of the original fixed-width evaluation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .constants import CAP, DECAY_STEP, MAX_SERIES_PAIRS, SATURATION_THRESHOLD
from .errors import CurveInvariantError
from .uint256 import mul_div, require_uint256

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeriesEvaluation:
    """Result of one cumulative evaluation."""
    value: int
    pairs: int  # add/subtract pairs executed, 0 when saturated
    saturated: bool


def evaluate_series(x: int, max_pairs: Optional[int] = None) -> SeriesEvaluation:
    """Evaluate the cumulative curve at x and report how much work it took.

    Preconditions:
        - x is uint256

    Postconditions:
        - 0 <= value <= CAP
        - value == CAP when x >= SATURATION_THRESHOLD
        - pairs <= max_pairs

    Raises:
        UintOverflowError: x is not uint256.
        CurveInvariantError: the series did not terminate within max_pairs
            or produced a value outside [0, CAP].
    """
    require_uint256(x, "x")
    limit = MAX_SERIES_PAIRS if max_pairs is None else max_pairs

    if x >= SATURATION_THRESHOLD:
        logger.debug(
            "cumulative(%d) saturated at cap", x,
            extra={"context": {"x": x, "pairs": 0, "saturated": True}},
        )
        return SeriesEvaluation(value=CAP, pairs=0, saturated=True)

    term = CAP
    total = 0
    denom = DECAY_STEP
    pairs = 0
    while True:
        if pairs >= limit:
            raise CurveInvariantError(
                f"cumulative({x}) did not converge within {limit} pairs"
            )
        term = mul_div(term, x, denom)
        total += term
        denom += DECAY_STEP
        term = mul_div(term, x, denom)
        total -= term
        denom += DECAY_STEP
        pairs += 1
        if term == 0:
            break

    if not (0 <= total <= CAP):
        raise CurveInvariantError(f"cumulative({x}) = {total} outside [0, CAP]")

    logger.debug(
        "cumulative(%d) = %d", x, total,
        extra={"context": {"x": x, "value": total, "pairs": pairs}},
    )
    return SeriesEvaluation(value=total, pairs=pairs, saturated=False)


def cumulative(x: int) -> int:
    """Issued amount (Ulps) for total contributed amount x (Ulps)."""
    return evaluate_series(x).value
