"""Issuance curve errors."""

from __future__ import annotations


class CurveError(Exception):
    """Base class for issuance curve errors."""
    pass


class CurveDomainError(CurveError, ValueError):
    """Caller violated a precondition. Nothing was computed."""
    pass


class UintOverflowError(CurveDomainError):
    """Value outside the uint256 domain [0, 2**256 - 1]."""
    pass


class OutOfBracketError(CurveDomainError):
    """Inverse search bracket does not contain the target."""
    pass


class InsufficientIssuanceError(CurveDomainError):
    """Retiring more issuance than the curve holds at the given total."""
    pass


class CurveInvariantError(CurveError, AssertionError):
    """Internal consistency check failed; the implementation is broken."""
    pass
