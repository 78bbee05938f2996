"""
Tests for the Cumulative Evaluator.

Covers:
- Normative values (bit-exact with persisted amounts)
- Saturation at and above the threshold
- Series length guard
- Operand validation
"""

import pytest

from neumark.curve.constants import (
    CAP,
    MAX_SERIES_PAIRS,
    SATURATION_THRESHOLD,
    UINT256_MAX,
    ULPS,
)
from neumark.curve.cumulative import SeriesEvaluation, cumulative, evaluate_series
from neumark.curve.errors import CurveInvariantError, UintOverflowError


# =============================================================================
# Normative values
# =============================================================================

class TestNormativeValues:
    """Exact outputs other systems have already stored."""

    @pytest.mark.parametrize("contributed,issued", [
        (0, 0),
        (1, 6),
        (2, 12),
        (3, 19),
        (ULPS, 6_499_999_985_916_666_686),
    ])
    def test_exact_values(self, contributed, issued):
        assert cumulative(contributed) == issued

    def test_first_unit_below_reward_fraction(self):
        """One whole unit issues slightly less than 6.5 whole units."""
        issued = cumulative(ULPS)
        assert 6 * ULPS < issued < 65 * ULPS // 10


# =============================================================================
# Saturation
# =============================================================================

class TestSaturation:
    """Cap behaviour at the top of the curve."""

    def test_threshold_is_cap(self):
        assert cumulative(SATURATION_THRESHOLD) == CAP

    def test_just_below_threshold_is_below_cap(self):
        assert cumulative(SATURATION_THRESHOLD - 1) < CAP

    @pytest.mark.parametrize("contributed", [
        SATURATION_THRESHOLD + 1,
        10 * SATURATION_THRESHOLD,
        UINT256_MAX,
    ])
    def test_above_threshold_is_cap(self, contributed):
        assert cumulative(contributed) == CAP

    def test_saturated_evaluation_skips_series(self):
        result = evaluate_series(SATURATION_THRESHOLD)
        assert result == SeriesEvaluation(value=CAP, pairs=0, saturated=True)

    def test_never_exceeds_cap(self):
        for contributed in range(0, SATURATION_THRESHOLD, SATURATION_THRESHOLD // 97):
            assert cumulative(contributed) <= CAP


# =============================================================================
# Termination
# =============================================================================

class TestSeriesTermination:
    """The series must stop within MAX_SERIES_PAIRS for every input."""

    @pytest.mark.parametrize("contributed,pairs", [
        (0, 1),
        (1, 1),
        (ULPS, 2),
    ])
    def test_pair_counts(self, contributed, pairs):
        assert evaluate_series(contributed).pairs == pairs

    def test_longest_evaluation_within_bound(self):
        result = evaluate_series(SATURATION_THRESHOLD - 1)
        assert not result.saturated
        assert 0 < result.pairs <= MAX_SERIES_PAIRS

    def test_bound_holds_across_range(self):
        longest = 0
        step = SATURATION_THRESHOLD // 200
        for contributed in range(0, SATURATION_THRESHOLD, step):
            longest = max(longest, evaluate_series(contributed).pairs)
        assert longest <= MAX_SERIES_PAIRS

    def test_pairs_grow_with_contribution(self):
        small = evaluate_series(ULPS).pairs
        large = evaluate_series(SATURATION_THRESHOLD - 1).pairs
        assert large > small

    def test_guard_raises_instead_of_looping(self):
        with pytest.raises(CurveInvariantError, match="did not converge"):
            evaluate_series(SATURATION_THRESHOLD - 1, max_pairs=10)

    def test_guard_counts_exactly(self):
        assert evaluate_series(1, max_pairs=1).value == 6
        with pytest.raises(CurveInvariantError):
            evaluate_series(ULPS, max_pairs=1)


# =============================================================================
# Operand validation
# =============================================================================

class TestOperands:
    """Inputs outside uint256 are rejected."""

    @pytest.mark.parametrize("bad", [-1, UINT256_MAX + 1])
    def test_out_of_range(self, bad):
        with pytest.raises(UintOverflowError):
            cumulative(bad)

    @pytest.mark.parametrize("bad", [1.0, "1", True, None])
    def test_non_integer(self, bad):
        with pytest.raises(UintOverflowError, match="must be an int"):
            cumulative(bad)
