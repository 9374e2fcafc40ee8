"""Capability interface between the interpreter and its presentation layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence, Union

PixelGrid = Sequence[Sequence[int]]


@dataclass(frozen=True)
class KeyEvent:
    """A logical keypad transition (``key`` in 0-15)."""

    key: int
    pressed: bool


@dataclass(frozen=True)
class QuitEvent:
    """The user asked to end the session."""


InputEvent = Union[KeyEvent, QuitEvent]


class KeySink(Protocol):
    """Anything that accepts logical key transitions (a keypad or an event queue)."""

    def set_key(self, index: int, pressed: bool) -> None:  # pragma: no cover - interface
        ...


class Frontend(Protocol):
    """Display, input and audio backend driven once per frame."""

    def draw(self, grid: PixelGrid) -> None:  # pragma: no cover - interface
        ...

    def poll_input(self) -> InputEvent | None:  # pragma: no cover - interface
        ...

    def set_tone(self, on: bool) -> None:  # pragma: no cover - interface
        ...
