"""Flat memory space for the CHIP-8 interpreter.

The interpreter sees a single 4 KiB byte array. The hexadecimal font lives at
the bottom of the address space and programs are copied in at ``0x200``, which
is where the original COSMAC VIP interpreter handed over control.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from pychip8.video.font import FONT

MEMORY_SIZE = 0x1000
FONT_START = 0x000
PROGRAM_START = 0x200
MAX_ROM_SIZE = MEMORY_SIZE - PROGRAM_START


class MemoryError(Exception):
    """Raised when memory is accessed outside the 4 KiB address space."""


class RomTooLargeError(MemoryError):
    """Raised when a program image does not fit above ``PROGRAM_START``."""


@dataclass
class Memory:
    """4096 byte memory with the font preloaded at ``FONT_START``."""

    size: int = MEMORY_SIZE
    _data: bytearray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.size <= PROGRAM_START:
            raise MemoryError(f"memory size {self.size} leaves no room for programs")
        self._data = bytearray(self.size)
        self._data[FONT_START : FONT_START + len(FONT)] = FONT

    def __len__(self) -> int:
        return self.size

    def _check(self, address: int) -> int:
        if not 0 <= address < self.size:
            raise MemoryError(f"address {address:#06x} outside memory 0x0000-{self.size - 1:#06x}")
        return address

    def load8(self, address: int) -> int:
        return self._data[self._check(address)]

    def store8(self, address: int, value: int) -> None:
        self._data[self._check(address)] = value & 0xFF

    def load16(self, address: int) -> int:
        high = self.load8(address)
        low = self.load8(address + 1)
        return ((high & 0xFF) << 8) | (low & 0xFF)

    def store16(self, address: int, value: int) -> None:
        self.store8(address, (value >> 8) & 0xFF)
        self.store8(address + 1, value & 0xFF)

    def load_rom(self, data: bytes | bytearray | Iterable[int]) -> int:
        """Copy ``data`` verbatim to ``PROGRAM_START`` and return its length."""

        payload = bytes(data)
        capacity = self.size - PROGRAM_START
        if len(payload) > capacity:
            raise RomTooLargeError(f"program of {len(payload)} bytes exceeds {capacity} byte capacity")
        self._data[PROGRAM_START : PROGRAM_START + len(payload)] = payload
        return len(payload)

    def clear(self) -> None:
        """Zero everything except the font."""

        self._data[:] = bytes(self.size)
        self._data[FONT_START : FONT_START + len(FONT)] = FONT

    def read_block(self, address: int, length: int) -> bytes:
        if length < 0:
            raise MemoryError("length must not be negative")
        if length:
            self._check(address)
            self._check(address + length - 1)
        return bytes(self._data[address : address + length])

    def write_block(self, address: int, data: bytes | bytearray | Iterable[int]) -> None:
        """Store ``data`` at ``address`` only if the whole span fits in memory."""

        payload = bytes(value & 0xFF for value in data)
        if payload:
            self._check(address)
            self._check(address + len(payload) - 1)
        self._data[address : address + len(payload)] = payload

    def snapshot(self) -> bytes:
        return bytes(self._data)
