import math

import pytest

from tickbar.eta import EtaTracker, Sample, SlidingWindow


class FakeClock:
    def __init__(self, now: int = 0):
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.mark.parametrize("capacity", [1, 2, 5, 120])
@pytest.mark.parametrize("extra", [0, 1, 3, 250])
def test_window_keeps_most_recent(capacity, extra):
    """After C+k pushes the oldest is the (k+1)-th pushed sample"""
    window = SlidingWindow(capacity)
    pushed = [Sample(i, i * 1000) for i in range(capacity + extra)]
    for sample in pushed:
        window.push(sample)
    assert len(window) == capacity
    assert window.oldest == pushed[extra]
    assert window.samples() == pushed[-capacity:]


def test_window_partially_filled():
    window = SlidingWindow(4)
    window.push(Sample(1, 10))
    window.push(Sample(2, 20))
    assert len(window) == 2
    assert window.oldest == Sample(1, 10)
    assert window.samples() == [Sample(1, 10), Sample(2, 20)]


def test_window_empty_oldest():
    with pytest.raises(IndexError):
        SlidingWindow(3).oldest


@pytest.mark.parametrize("capacity,error", [(0, ValueError), (-1, ValueError), (1.5, TypeError)])
def test_window_capacity_checked(capacity, error):
    with pytest.raises(error):
        SlidingWindow(capacity)


def test_tracker_is_seeded():
    tracker = EtaTracker(10, clock=FakeClock(500))
    assert tracker.window.samples() == [Sample(0, 500)]


def test_tracker_speed_and_eta():
    clock = FakeClock()
    tracker = EtaTracker(120, clock=clock)
    clock.now = 1000
    est = tracker.update(10, 100)
    assert est.speed == 10
    assert est.eta == 9
    clock.now = 2000
    est = tracker.update(30, 100)
    # Still measured from the seed sample
    assert est.speed == 15
    assert est.eta == pytest.approx(70 / 15)


def test_tracker_uses_oldest_before_push():
    clock = FakeClock()
    tracker = EtaTracker(2, clock=clock)
    clock.now = 1000
    tracker.update(10, 100)
    clock.now = 2000
    assert tracker.update(30, 100).speed == 15  # against the seed (0, 0)
    clock.now = 3000
    assert tracker.update(40, 100).speed == 15  # against (10, 1000)


def test_eta_zero_when_done_even_without_speed():
    clock = FakeClock()
    tracker = EtaTracker(1, clock=clock)
    clock.now = 1000
    est = tracker.update(5, 5)
    assert est.eta == 0
    clock.now = 2000
    est = tracker.update(5, 5)
    assert est.speed == 0
    assert est.eta == 0


def test_eta_infinite_without_speed():
    clock = FakeClock()
    tracker = EtaTracker(clock=clock)
    clock.now = 1000
    est = tracker.update(0, 10)
    assert est.speed == 0
    assert est.eta == math.inf


def test_eta_infinite_with_unknown_total():
    clock = FakeClock()
    tracker = EtaTracker(clock=clock)
    clock.now = 1000
    est = tracker.update(7, None)
    assert est.speed == 7
    assert est.eta == math.inf
