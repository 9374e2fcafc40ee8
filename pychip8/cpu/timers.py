"""Delay and sound countdown timers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List

TIMER_HZ = 60

ToneListener = Callable[[bool], None]


@dataclass
class Timers:
    """Two 8-bit counters decremented once per external tick.

    Listeners registered with :meth:`add_tone_listener` are called whenever
    the sound timer moves between zero and non-zero, which is the only thing
    an audio backend needs to know.
    """

    delay: int = 0
    _sound: int = 0
    _listeners: List[ToneListener] = field(default_factory=list)

    @property
    def sound(self) -> int:
        return self._sound

    @sound.setter
    def sound(self, value: int) -> None:
        was_active = self._sound > 0
        self._sound = value & 0xFF
        if was_active != (self._sound > 0):
            self._notify(self._sound > 0)

    @property
    def tone_active(self) -> bool:
        return self._sound > 0

    def set_delay(self, value: int) -> None:
        self.delay = value & 0xFF

    def tick(self) -> None:
        if self.delay > 0:
            self.delay -= 1
        if self._sound > 0:
            self.sound = self._sound - 1

    def reset(self) -> None:
        self.delay = 0
        self.sound = 0

    def add_tone_listener(self, listener: ToneListener) -> None:
        self._listeners.append(listener)

    def _notify(self, active: bool) -> None:
        for listener in tuple(self._listeners):
            listener(active)
