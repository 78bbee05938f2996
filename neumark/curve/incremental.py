"""
Delta operations on the issuance curve.

`incremental` prices an additional contribution, `incremental_inverse`
prices retiring previously issued amount back into contributed amount.

Resolution:
    Up to about 10**25 Ulps contributed every Ulp issues several Ulps and
    the truncated series is strictly increasing. Above that the marginal
    rate falls below one Ulp per Ulp and the series' truncation noise (a
    few hundred Ulps at most) dominates, so cumulative(x + 1) can be lower
    than cumulative(x). Deltas there must be large compared to the noise:
    a decrease surfaces as CurveInvariantError from `incremental`, and a
    retirement may refund slightly more contributed amount than the
    contribution that issued it.
"""

from __future__ import annotations

import logging
from typing import Optional

from .cumulative import evaluate_series
from .errors import CurveInvariantError, InsufficientIssuanceError
from .inverse import cumulative_inverse
from .uint256 import checked_add, checked_sub, require_uint256

logger = logging.getLogger(__name__)


def incremental(total: int, delta: int, max_pairs: Optional[int] = None) -> int:
    """Issued amount for contributing `delta` on top of `total`.

    Returns cumulative(total + delta) - cumulative(total).

    Above about 10**25 Ulps the truncated series is not monotone at
    single-Ulp resolution; small deltas there can raise
    CurveInvariantError (see module docstring).

    Raises:
        UintOverflowError: an argument is not uint256 or total + delta
            overflows.
        CurveInvariantError: the curve decreased over [total, total + delta],
            or an evaluation exceeded `max_pairs` series pairs.
    """
    require_uint256(total, "total")
    require_uint256(delta, "delta")
    upper = checked_add(total, delta)

    issued = evaluate_series(upper, max_pairs).value - evaluate_series(total, max_pairs).value
    if issued < 0:
        raise CurveInvariantError(
            f"cumulative decreased between {total} and {upper}: {issued}"
        )
    return issued


def incremental_inverse(
    total: int,
    issued_delta: int,
    lower: int = 0,
    upper: Optional[int] = None,
    max_pairs: Optional[int] = None,
) -> int:
    """Contributed amount equivalent to retiring `issued_delta` at `total`.

    The result never exceeds the contribution that issued `issued_delta`
    while the curve is strictly increasing (total up to about 10**25
    Ulps). Above that, truncation noise can make the refund slightly
    exceed that contribution (see module docstring).

    Args:
        total: Current total contributed amount (Ulps).
        issued_delta: Issued amount to retire (Ulps).
        lower: Lower bound of the search for the contributed amount left
            after retirement.
        upper: Upper bound of that search; defaults to `total`.
        max_pairs: Series guard for every curve evaluation.

    Raises:
        UintOverflowError: an argument is not uint256.
        InsufficientIssuanceError: issued_delta exceeds cumulative(total).
        OutOfBracketError: [lower, upper] does not contain the solution.
        CurveInvariantError: the solution lies above `total`.
    """
    require_uint256(total, "total")
    require_uint256(issued_delta, "issued_delta")
    if issued_delta == 0:
        return 0

    issued_total = evaluate_series(total, max_pairs).value
    if issued_total < issued_delta:
        raise InsufficientIssuanceError(
            f"cannot retire {issued_delta}: only {issued_total} issued at {total}"
        )

    remaining = checked_sub(issued_total, issued_delta)
    search_upper = total if upper is None else upper
    contributed_after = cumulative_inverse(remaining, lower, search_upper, max_pairs)
    if contributed_after > total:
        raise CurveInvariantError(
            f"retirement solution {contributed_after} above total {total}"
        )

    refunded = checked_sub(total, contributed_after)
    logger.debug(
        "incremental_inverse(%d, %d) -> %d", total, issued_delta, refunded,
        extra={"context": {"total": total, "issued_delta": issued_delta, "refunded": refunded}},
    )
    return refunded
