"""No-op frontend used by tests and scripted runs."""

from __future__ import annotations

from collections import deque
from typing import Deque, List

from .base import InputEvent, KeyEvent, PixelGrid, QuitEvent


class HeadlessFrontend:
    """Frontend that records frames and tone changes and replays queued input."""

    def __init__(self) -> None:
        self._events: Deque[InputEvent] = deque()
        self.frames_drawn = 0
        self.last_frame: PixelGrid | None = None
        self.tone_on = False
        self.tone_changes: List[bool] = []

    def set_key(self, index: int, pressed: bool) -> None:
        self._events.append(KeyEvent(index, pressed))

    def press(self, index: int) -> None:
        self.set_key(index, True)

    def release(self, index: int) -> None:
        self.set_key(index, False)

    def request_quit(self) -> None:
        self._events.append(QuitEvent())

    # ------------------------------------------------------------------
    # Frontend protocol

    def draw(self, grid: PixelGrid) -> None:
        self.frames_drawn += 1
        self.last_frame = grid

    def poll_input(self) -> InputEvent | None:
        if not self._events:
            return None
        return self._events.popleft()

    def set_tone(self, on: bool) -> None:
        self.tone_on = on
        self.tone_changes.append(on)
