"""Tests for the delay and sound timers."""

from __future__ import annotations

from pychip8.cpu import Timers


def test_tick_stops_at_zero() -> None:
    timers = Timers()
    timers.set_delay(2)

    timers.tick()
    assert timers.delay == 1
    timers.tick()
    timers.tick()
    assert timers.delay == 0


def test_values_are_eight_bit() -> None:
    timers = Timers()
    timers.set_delay(0x1FF)
    timers.sound = 0x102
    assert timers.delay == 0xFF
    assert timers.sound == 0x02


def test_tone_listener_sees_transitions_only() -> None:
    timers = Timers()
    events: list[bool] = []
    timers.add_tone_listener(events.append)

    timers.sound = 3
    timers.sound = 5
    for _ in range(5):
        timers.tick()
    timers.tick()

    assert events == [True, False]
    assert not timers.tone_active


def test_reset_silences_tone() -> None:
    timers = Timers()
    events: list[bool] = []
    timers.add_tone_listener(events.append)
    timers.set_delay(4)
    timers.sound = 4

    timers.reset()

    assert timers.delay == 0
    assert timers.sound == 0
    assert events == [True, False]
