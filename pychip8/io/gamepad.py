"""Game controller to CHIP-8 keypad mapping."""

from __future__ import annotations

from dataclasses import dataclass, field

from pychip8.frontend.base import KeySink

# Most CHIP-8 games steer with 2/4/6/8 and fire with 5.
DEFAULT_UP = 0x2
DEFAULT_LEFT = 0x4
DEFAULT_RIGHT = 0x6
DEFAULT_DOWN = 0x8
DEFAULT_BUTTON = 0x5


@dataclass
class GamepadState:
    """Track controller inputs and mirror them onto keypad keys."""

    keypad: KeySink | None = None
    up_key: int = DEFAULT_UP
    down_key: int = DEFAULT_DOWN
    left_key: int = DEFAULT_LEFT
    right_key: int = DEFAULT_RIGHT
    button_key: int = DEFAULT_BUTTON
    _left: bool = False
    _right: bool = False
    _up: bool = False
    _down: bool = False
    _button: bool = False
    _held: set[int] = field(default_factory=set)

    def attach(self, keypad: KeySink) -> None:
        self.keypad = keypad
        self._held = set()
        self._sync()

    def pressed_keys(self) -> set[int]:
        """Return the keypad indices currently held by the controller."""

        held: set[int] = set()
        if self._up:
            held.add(self.up_key)
        if self._down:
            held.add(self.down_key)
        if self._left:
            held.add(self.left_key)
        if self._right:
            held.add(self.right_key)
        if self._button:
            held.add(self.button_key)
        return held

    def set_button(self, pressed: bool) -> None:
        """Update the primary button state."""

        self._button = pressed
        self._sync()

    def set_directions(
        self,
        *,
        left: bool | None = None,
        right: bool | None = None,
        up: bool | None = None,
        down: bool | None = None,
    ) -> None:
        """Update one or more directional inputs."""

        if left is not None:
            self._left = left
        if right is not None:
            self._right = right
        if up is not None:
            self._up = up
        if down is not None:
            self._down = down
        self._sync()

    def reset(self) -> None:
        """Clear any recorded input state."""

        self._left = False
        self._right = False
        self._up = False
        self._down = False
        self._button = False
        self._sync()

    def _sync(self) -> None:
        if self.keypad is None:
            return
        held = self.pressed_keys()
        for key in sorted(self._held - held):
            self.keypad.set_key(key, False)
        for key in sorted(held - self._held):
            self.keypad.set_key(key, True)
        self._held = held


__all__ = ["GamepadState"]
