# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
Tests for simbadclient.utils.throttle
"""
import pytest

from simbadclient.utils import throttle


class FakeClock:
    def __init__(self, now):
        self.now = now
        self.slept = []

    def time(self):
        return self.now

    def sleep(self, seconds):
        self.slept.append(seconds)
        self.now += seconds


@pytest.fixture
def clock(monkeypatch):
    clock = FakeClock(1000.0)
    monkeypatch.setattr(throttle, "time", clock)
    return clock


def test_first_request_does_not_wait(clock):
    assert throttle.delay("server", 3) == 1000.0
    assert clock.slept == []


def test_waits_for_remaining_time(clock):
    throttle.delay("server", 3)
    clock.now += 1
    assert throttle.delay("server", 3) == 1003.0
    assert clock.slept == [pytest.approx(2)]


def test_no_wait_after_delay_passed(clock):
    throttle.delay("server", 3)
    clock.now += 5
    throttle.delay("server", 3)
    assert clock.slept == []


def test_servers_are_independent(clock):
    throttle.delay("one", 3)
    throttle.delay("two", 3)
    assert clock.slept == []


def test_zero_delay(clock):
    throttle.delay("server", 0)
    throttle.delay("server", 0)
    assert clock.slept == []


def test_reset(clock):
    throttle.delay("server", 3)
    throttle.reset("server")
    throttle.delay("server", 3)
    assert clock.slept == []
