"""Countdown / format_clock のテスト"""
import pytest

from stereo_quiz.timer import Countdown, format_clock


class TestCountdown:
    def test_not_armed_never_fires(self, clock):
        ticks = []
        countdown = Countdown(on_tick=lambda: ticks.append(1), clock=clock)

        clock.advance(5)

        assert countdown.poll() == 0
        assert ticks == []
        assert countdown.armed is False

    def test_fires_once_per_elapsed_interval(self, clock):
        ticks = []
        countdown = Countdown(on_tick=lambda: ticks.append(clock()), clock=clock)
        countdown.arm()

        clock.advance(0.9)
        assert countdown.poll() == 0
        clock.advance(2.2)
        assert countdown.poll() == 3
        assert len(ticks) == 3

    def test_cancel_stops_further_ticks(self, clock):
        ticks = []
        countdown = Countdown(on_tick=lambda: ticks.append(1), clock=clock)
        countdown.arm()
        clock.advance(1)
        countdown.poll()

        countdown.cancel()
        clock.advance(10)

        assert countdown.poll() == 0
        assert ticks == [1]
        assert countdown.armed is False

    def test_cancel_inside_callback(self, clock):
        ticks = []

        def on_tick():
            ticks.append(1)
            if len(ticks) == 2:
                countdown.cancel()

        countdown = Countdown(on_tick=on_tick, clock=clock)
        countdown.arm()
        clock.advance(10)

        assert countdown.poll() == 2
        assert countdown.armed is False


class TestFormatClock:
    @pytest.mark.parametrize(
        "seconds, expected",
        [(1800, "30:00"), (59, "00:59"), (61, "01:01"), (0, "00:00"), (-3, "00:00")],
    )
    def test_format(self, seconds, expected):
        assert format_clock(seconds) == expected
