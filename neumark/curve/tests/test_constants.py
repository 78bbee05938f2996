"""Tests for the curve constants and their accessors."""

from neumark.curve import constants
from neumark.curve.constants import (
    CAP,
    DECAY_STEP,
    INITIAL_REWARD_FRACTION,
    SATURATION_THRESHOLD,
    UINT256_MAX,
    ULPS,
    initial_reward_fraction,
    neumark_cap,
)


def test_accessors():
    assert neumark_cap() == 1_500_000_000_000_000_000_000_000_000
    assert initial_reward_fraction() == 6_500_000_000_000_000_000


def test_decay_step_literal():
    assert DECAY_STEP == 230_769_230_769_230_769_230_769_231


def test_decay_step_is_cap_over_fraction():
    # DECAY_STEP * 6.5 lands within one unit of CAP
    assert abs(DECAY_STEP * INITIAL_REWARD_FRACTION - CAP * ULPS) < INITIAL_REWARD_FRACTION


def test_saturation_threshold():
    assert SATURATION_THRESHOLD == 8_300_000_000_000_000_000_000_000_000
    assert SATURATION_THRESHOLD > CAP


def test_operands_fit_uint256():
    # Largest series operands: term stays far below 2**256
    for value in (CAP, DECAY_STEP, SATURATION_THRESHOLD):
        assert value * SATURATION_THRESHOLD < UINT256_MAX


def test_constants_are_ints():
    for name in ("CAP", "DECAY_STEP", "INITIAL_REWARD_FRACTION", "SATURATION_THRESHOLD"):
        assert type(getattr(constants, name)) is int
