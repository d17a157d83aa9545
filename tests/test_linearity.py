import math

import pytest

from skystore.linearity import LinearityMeter


def test_first_call_sets_baseline_and_returns_zero():
    meter = LinearityMeter()
    assert meter.get_delta(1000) == 0.0
    assert meter.init == 1000
    assert meter.measure == []


def test_same_as_baseline_is_no_change():
    meter = LinearityMeter()
    meter.get_delta(500)
    assert meter.get_delta(500) == 0.0
    assert len(meter.measure) == 1


def test_doubling_is_one_hundred_percent():
    meter = LinearityMeter()
    meter.get_delta(100)
    assert meter.get_delta(200) == pytest.approx(100.0)


def test_halving_is_negative_fifty_percent():
    meter = LinearityMeter()
    meter.get_delta(100)
    assert meter.get_delta(50) == pytest.approx(-50.0)


def test_baseline_does_not_move():
    meter = LinearityMeter()
    meter.get_delta(400)
    first = meter.get_delta(300)
    meter.get_delta(900)
    again = meter.get_delta(300)
    assert first == again
    assert meter.init == 400


def test_measurements_recorded_in_order():
    meter = LinearityMeter()
    meter.get_delta(1000)
    returned = [meter.get_delta(t) for t in (900, 800, 1200)]
    assert meter.measure == returned
    assert returned[0] > returned[1]
    assert returned[2] > 0


def test_decreasing_timings_give_increasing_magnitude():
    meter = LinearityMeter()
    meter.get_delta(10_000)
    deltas = [meter.get_delta(t) for t in (9_000, 7_000, 5_000)]
    magnitudes = [abs(d) for d in deltas]
    assert magnitudes == sorted(magnitudes)
    assert all(d < 0 for d in deltas)


def test_zero_baseline_gives_infinite_change():
    meter = LinearityMeter()
    meter.get_delta(0)
    assert meter.get_delta(10) == math.inf
    assert math.isnan(meter.get_delta(0))