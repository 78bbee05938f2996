"""
Issuance schedule tables and Ulps formatting.

Helpers for reporting on the curve: sample cumulative issuance at evenly
spaced contributed amounts, and convert between Ulps integers and whole
unit decimal strings without going through floats.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, localcontext
from typing import Any, Dict, Iterator, Optional

from .constants import ULPS
from .cumulative import evaluate_series
from .errors import CurveDomainError
from .uint256 import checked_add, require_uint256

_ULPS_DIGITS = 18


@dataclass(frozen=True)
class ScheduleRow:
    """One sample of the issuance curve."""
    contributed: int
    issued: int
    marginal: int  # issued since the previous row

    def to_dict(self) -> Dict[str, Any]:
        return {
            "contributed": self.contributed,
            "issued": self.issued,
            "marginal": self.marginal,
        }


def issuance_schedule(
    start: int,
    step: int,
    count: int,
    max_pairs: Optional[int] = None,
) -> Iterator[ScheduleRow]:
    """Yield `count` rows at contributed = start, start + step, ...

    The first row has marginal 0. Amounts past the saturation threshold
    report the cap with marginal 0.
    """
    require_uint256(start, "start")
    require_uint256(step, "step")
    if count < 0:
        raise CurveDomainError(f"count must be non-negative, got {count}")

    contributed = start
    previous = None
    for i in range(count):
        if i > 0:
            contributed = checked_add(contributed, step)
        issued = evaluate_series(contributed, max_pairs).value
        marginal = 0 if previous is None else issued - previous
        yield ScheduleRow(contributed=contributed, issued=issued, marginal=marginal)
        previous = issued


def format_ulps(value: int) -> str:
    """Render Ulps as a whole-unit decimal string, e.g. 1500000000000000000 -> "1.5"."""
    sign = "-" if value < 0 else ""
    whole, frac = divmod(abs(value), ULPS)
    if frac == 0:
        return f"{sign}{whole}"
    digits = str(frac).rjust(_ULPS_DIGITS, "0").rstrip("0")
    return f"{sign}{whole}.{digits}"


def parse_amount(text: str, whole: bool = False) -> int:
    """Parse a CLI amount into Ulps.

    Args:
        text: Integer Ulps, or a decimal amount of whole units when `whole`.
        whole: Interpret `text` as whole units scaled by 10**18.

    Raises:
        CurveDomainError: text is not a number, or has more than 18
            fractional digits in whole-unit mode.
        UintOverflowError: the amount is outside uint256.
    """
    cleaned = text.strip().replace("_", "")
    if not whole:
        try:
            value = int(cleaned, 10)
        except ValueError:
            raise CurveDomainError(f"not an integer Ulps amount: {text!r}") from None
        return require_uint256(value, "amount")

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise CurveDomainError(f"not a decimal amount: {text!r}") from None
    if not amount.is_finite():
        raise CurveDomainError(f"not a finite amount: {text!r}")
    with localcontext() as ctx:
        ctx.prec = 100
        scaled = amount.scaleb(_ULPS_DIGITS)
    if scaled != scaled.to_integral_value():
        raise CurveDomainError(f"more than {_ULPS_DIGITS} fractional digits: {text!r}")
    return require_uint256(int(scaled), "amount")
