"""
Explicit uint256 arithmetic for the issuance curve.

Python integers never wrap, so the 256-bit domain is enforced by checks
instead of by the integer type. Every value entering or leaving a curve
operation passes through `require_uint256`; the two addition sites that
could leave the domain (total + delta, bisection bracket sum) use
`checked_add`, and the retirement subtractions use `checked_sub`.

Products inside `mul_div` are exact: two uint256 operands give a product
below 2**512, which is then floor-divided.
"""

from __future__ import annotations

from .constants import UINT256_MAX
from .errors import CurveInvariantError, UintOverflowError


def require_uint256(value: int, name: str = "value") -> int:
    """Return value unchanged if it is an int in [0, UINT256_MAX].

    Raises:
        UintOverflowError: value is not an int (bool included), is negative,
            or exceeds UINT256_MAX.
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise UintOverflowError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise UintOverflowError(f"{name} must be non-negative, got {value}")
    if value > UINT256_MAX:
        raise UintOverflowError(f"{name} exceeds uint256: {value}")
    return value


def checked_add(a: int, b: int) -> int:
    """a + b, raising UintOverflowError instead of wrapping."""
    result = a + b
    if result > UINT256_MAX:
        raise UintOverflowError(f"uint256 addition overflows: {a} + {b}")
    return result


def checked_sub(a: int, b: int) -> int:
    """a - b, raising UintOverflowError on underflow."""
    if b > a:
        raise UintOverflowError(f"uint256 subtraction underflows: {a} - {b}")
    return a - b


def mul_div(a: int, b: int, denominator: int) -> int:
    """floor(a * b / denominator) with an exact 512-bit intermediate.

    Preconditions:
        - a, b, denominator are uint256
        - denominator > 0

    Postconditions:
        - Result is uint256

    The curve only ever calls this with a non-zero, growing denominator, so
    a zero denominator is an internal error rather than a caller error.
    """
    if denominator <= 0:
        raise CurveInvariantError(f"mul_div denominator must be positive, got {denominator}")
    if a > UINT256_MAX or b > UINT256_MAX or denominator > UINT256_MAX:
        raise CurveInvariantError(f"mul_div operand exceeds uint256: {a}, {b}, {denominator}")
    result = (a * b) // denominator
    if result > UINT256_MAX:
        raise UintOverflowError(f"mul_div result exceeds uint256: {a} * {b} / {denominator}")
    return result
