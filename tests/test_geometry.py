"""Tests for the shared numeric helpers."""

import pytest

from photo_platformer.geometry import clamp, lerp, round_half_up, to_int32, to_uint32, imul


def test_clamp():
    assert clamp(0.5, 0.0, 1.0) == 0.5
    assert clamp(-1.0, 0.0, 1.0) == 0.0
    assert clamp(2.0, 0.0, 1.0) == 1.0


def test_clamp_inverted_range_prefers_lo():
    assert clamp(0.5, 0.7, 0.6) == 0.7


def test_lerp():
    assert lerp(0.15, 0.80, 0.0) == pytest.approx(0.15)
    assert lerp(0.15, 0.80, 1.0) == pytest.approx(0.80)
    assert lerp(0.0, 10.0, 0.25) == pytest.approx(2.5)


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(34.8) == 35
    assert round_half_up(-0.5) == 0


def test_int32_wraparound():
    assert to_int32(2 ** 31) == -(2 ** 31)
    assert to_int32(2 ** 32 + 5) == 5
    assert to_int32(-1) == -1
    assert to_uint32(-1) == 0xFFFFFFFF


def test_imul_truncates():
    assert imul(0xFFFFFFFF, 2) == 0xFFFFFFFE
    assert imul(3, 5) == 15
