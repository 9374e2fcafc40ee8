"""Presentation-layer interfaces for the CHIP-8 interpreter."""

from .base import Frontend, InputEvent, KeyEvent, KeySink, PixelGrid, QuitEvent
from .headless import HeadlessFrontend

__all__ = [
    "Frontend",
    "HeadlessFrontend",
    "InputEvent",
    "KeyEvent",
    "KeySink",
    "PixelGrid",
    "QuitEvent",
]
