"""Host keyboard to CHIP-8 keypad translation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping

from pychip8.utils import debug_enabled, debug_log

from pychip8.frontend.base import KeySink


# Host layout           Keypad
#   1 2 3 4             1 2 3 C
#   q w e r             4 5 6 D
#   a s d f             7 8 9 E
#   z x c v             A 0 B F
KEY_MAP_TEMPLATE: Mapping[str, int] = {
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


ALIAS_TABLE: Mapping[str, str] = {
    "[1]": "1",
    "[2]": "2",
    "[3]": "3",
    "[4]": "4",
}


@dataclass
class Keyboard:
    """Translate host key names into logical key transitions."""

    keypad: KeySink
    _active: Dict[int, int] = field(default_factory=dict)

    def press(self, key_name: str) -> bool:
        index = self.lookup(key_name)
        if index is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_press=%s", key_name)
            return False
        self._active[index] = self._active.get(index, 0) + 1
        self.keypad.set_key(index, True)
        return True

    def release(self, key_name: str) -> bool:
        index = self.lookup(key_name)
        if index is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_release=%s", key_name)
            return False
        count = self._active.get(index, 0)
        if count <= 1:
            self._active.pop(index, None)
            self.keypad.set_key(index, False)
        else:
            self._active[index] = count - 1
        return True

    def reset(self) -> None:
        for index in sorted(self._active):
            self.keypad.set_key(index, False)
        self._active.clear()

    @staticmethod
    def lookup(key_name: str) -> int | None:
        name = key_name.lower()
        name = ALIAS_TABLE.get(name, name)
        return KEY_MAP_TEMPLATE.get(name)


__all__ = ["ALIAS_TABLE", "KEY_MAP_TEMPLATE", "Keyboard"]
