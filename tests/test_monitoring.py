"""
Tests for the continuous sampler
"""
import pytest

from escope.errors import InvalidDurationError, InvalidIntervalError
from escope.monitoring import (
    ContinuousSampler, parse_duration, parse_monitoring_window, start_continuous_monitoring,
)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class FakeEvent:
    """Event whose wait() advances the fake clock instead of sleeping."""

    def __init__(self, clock, cancel_after_waits=None):
        self.clock = clock
        self.flag = False
        self.waits = []
        self.cancel_after_waits = cancel_after_waits

    def set(self):
        self.flag = True

    def is_set(self):
        return self.flag

    def wait(self, timeout):
        self.waits.append(timeout)
        self.clock.now += timeout
        if self.cancel_after_waits is not None and len(self.waits) >= self.cancel_after_waits:
            self.flag = True
        return self.flag


class TestParseDuration:
    @pytest.mark.parametrize("text,seconds", [
        ("5s", 5), ("2s", 2), ("1m", 60), ("5m", 300), ("1h", 3600), ("1h30m", 5400),
        ("1.5s", 1.5), ("500ms", 0.5), ("250us", 0.00025),
    ])
    def test_valid(self, text, seconds):
        assert parse_duration(text) == pytest.approx(seconds)

    @pytest.mark.parametrize("text", ["", "abc", "5", "5x", "-1s", "0s", "1m foo", "s"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_duration(text)


class TestMonitoringWindow:
    def test_interval_defaults_to_two_seconds(self):
        assert parse_monitoring_window("1m", None) == (60.0, 2.0)
        assert parse_monitoring_window("1m", "") == (60.0, 2.0)

    def test_invalid_duration(self):
        with pytest.raises(InvalidDurationError):
            parse_monitoring_window("forever", "2s")

    def test_invalid_interval(self):
        with pytest.raises(InvalidIntervalError):
            parse_monitoring_window("1m", "often")

    def test_errors_are_value_errors(self):
        assert issubclass(InvalidDurationError, ValueError)
        assert issubclass(InvalidIntervalError, ValueError)


class TestContinuousSampler:
    def test_ten_seconds_every_two_gives_five_samples(self):
        clock = FakeClock()
        cycles = []
        sampler = ContinuousSampler(lambda: cycles.append(clock.now), clock=clock, stop_event=FakeEvent(clock))
        result = sampler.run(10, 2)
        assert result.sample_count == 5
        assert cycles == [0, 2, 4, 6, 8]

    def test_last_wait_is_trimmed_to_remaining_time(self):
        clock = FakeClock()
        event = FakeEvent(clock)
        result = ContinuousSampler(lambda: None, clock=clock, stop_event=event).run(5, 2)
        assert result.sample_count == 3
        assert event.waits == [2, 2, 1]

    def test_slow_cycles_reduce_sample_count(self):
        clock = FakeClock()

        def slow_cycle():
            clock.now += 3

        result = ContinuousSampler(slow_cycle, clock=clock, stop_event=FakeEvent(clock)).run(10, 2)
        # Cycles start at 0 and 5; the second ends at 8 and its wait reaches 10
        assert result.sample_count == 2

    def test_immediate_cancellation(self):
        clock = FakeClock()
        calls = []
        sampler = ContinuousSampler(lambda: calls.append(1), clock=clock, stop_event=FakeEvent(clock))
        sampler.cancel()
        result = sampler.run(10, 2)
        assert result.sample_count == 0
        assert calls == []

    def test_cancel_during_wait(self):
        clock = FakeClock()
        event = FakeEvent(clock, cancel_after_waits=2)
        result = ContinuousSampler(lambda: None, clock=clock, stop_event=event).run(60, 2)
        assert result.sample_count == 2

    def test_cycle_payload_is_discarded(self):
        clock = FakeClock()
        result = ContinuousSampler(lambda: {"big": "report"}, clock=clock, stop_event=FakeEvent(clock)).run(4, 2)
        assert result.model_dump() == {"sample_count": 2}


class TestStartContinuousMonitoring:
    def test_parses_and_runs(self):
        clock = FakeClock()
        result = start_continuous_monitoring(lambda: None, "10s", "2s", clock=clock, stop_event=FakeEvent(clock))
        assert result.sample_count == 5

    def test_default_interval(self):
        clock = FakeClock()
        result = start_continuous_monitoring(lambda: None, "10s", clock=clock, stop_event=FakeEvent(clock))
        assert result.sample_count == 5

    def test_rejects_before_sampling(self):
        calls = []
        with pytest.raises(InvalidIntervalError):
            start_continuous_monitoring(lambda: calls.append(1), "10s", "nope")
        assert calls == []


class TestMaxDuration:
    def test_window_within_cap(self):
        assert parse_monitoring_window("10m", "5s", max_duration=600) == (600.0, 5.0)

    def test_window_over_cap_is_rejected(self):
        with pytest.raises(InvalidDurationError, match="exceeds the maximum"):
            parse_monitoring_window("24h", "5s", max_duration=600)

    def test_rejected_before_sampling(self):
        calls = []
        with pytest.raises(InvalidDurationError):
            start_continuous_monitoring(lambda: calls.append(1), "2h", "1s", max_duration=60)
        assert calls == []
