"""Sixteen-key hexadecimal keypad state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from pychip8.utils import debug_enabled, debug_log

KEY_COUNT = 16

KeyListener = Callable[[int, bool], None]


@dataclass
class Keypad:
    """Logical key states written by the input layer and read by the CPU."""

    _keys: list[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    _listeners: list[KeyListener] = field(default_factory=list)

    def set_key(self, index: int, pressed: bool) -> None:
        if not 0 <= index < KEY_COUNT:
            raise ValueError(f"key index out of range: {index}")
        before = self._keys[index]
        self._keys[index] = bool(pressed)
        if debug_enabled("input"):
            debug_log("input", "key=%X pressed=%s", index, pressed)
        if before != self._keys[index]:
            self._notify_listeners(index, self._keys[index])

    def is_pressed(self, index: int) -> bool:
        return self._keys[index & 0x0F]

    def first_pressed(self) -> int | None:
        """Return the lowest pressed key index, or ``None``."""

        for index, pressed in enumerate(self._keys):
            if pressed:
                return index
        return None

    def any_pressed(self) -> bool:
        return any(self._keys)

    def reset(self) -> None:
        for index in range(KEY_COUNT):
            self.set_key(index, False)

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._keys)

    def add_listener(self, listener: KeyListener) -> None:
        self._listeners.append(listener)

    def _notify_listeners(self, index: int, pressed: bool) -> None:
        for listener in tuple(self._listeners):
            listener(index, pressed)


__all__ = ["KEY_COUNT", "Keypad"]
