"""Input helpers for the CHIP-8 interpreter."""

from .gamepad import GamepadState
from .keyboard import Keyboard
from .keypad import KEY_COUNT, Keypad

__all__ = [
    "GamepadState",
    "Keyboard",
    "Keypad",
    "KEY_COUNT",
]
