"""Lightweight execution trace buffer for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .debug import debug_log


@dataclass
class TraceEntry:
    pc: int
    opcode: int | None
    mnemonic: str
    i: int
    sp: int
    delay: int
    sound: int
    registers: tuple[int, ...]
    awaiting_key: bool
    note: str = ""


class TraceRecorder:
    """Ring buffer that stores recent CPU snapshots."""

    def __init__(self, capacity: int = 256) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._entries: List[TraceEntry | None] = [None] * capacity
        self._index = 0
        self._size = 0

    def record_step(
        self,
        cpu_state,
        opcode: int | None,
        *,
        sp: int = 0,
        delay: int = 0,
        sound: int = 0,
        awaiting_key: bool = False,
        mnemonic: str = "",
        note: str = "",
    ) -> None:
        entry = TraceEntry(
            pc=cpu_state.pc & 0xFFFF,
            opcode=None if opcode is None else opcode & 0xFFFF,
            mnemonic=mnemonic,
            i=cpu_state.i & 0xFFFF,
            sp=sp,
            delay=delay & 0xFF,
            sound=sound & 0xFF,
            registers=tuple(value & 0xFF for value in cpu_state.v),
            awaiting_key=awaiting_key,
            note=note,
        )
        self._append(entry)

    def entries(self, limit: int | None = None) -> Iterable[TraceEntry]:
        count = self._size if limit is None else min(self._size, max(limit, 0))
        for offset in range(count):
            index = (self._index - count + offset) % self._capacity
            entry = self._entries[index]
            if entry is not None:
                yield entry

    def last_entry(self) -> TraceEntry | None:
        if self._size == 0:
            return None
        index = (self._index - 1) % self._capacity
        return self._entries[index]

    def format_entries(self, limit: int | None = None) -> Sequence[str]:
        lines: list[str] = []
        for entry in self.entries(limit):
            opcode = "----" if entry.opcode is None else f"{entry.opcode:04X}"
            mnemonic = entry.mnemonic or "?"
            flags: list[str] = []
            if entry.awaiting_key:
                flags.append("KEY")
            if entry.note:
                flags.append(entry.note)
            flag_repr = ",".join(flags) if flags else "-"
            registers = " ".join(f"{value:02X}" for value in entry.registers)
            line = (
                f"pc={entry.pc:04X} opcode={opcode} {mnemonic:<4} I={entry.i:04X} SP={entry.sp:02d} "
                f"DT={entry.delay:02X} ST={entry.sound:02X} V=[{registers}] flags={flag_repr}"
            )
            lines.append(line)
        return lines

    def dump(self, category: str, limit: int | None = None) -> None:
        for line in self.format_entries(limit):
            debug_log(category, line)

    def clear(self) -> None:
        self._entries = [None] * self._capacity
        self._index = 0
        self._size = 0

    def _append(self, entry: TraceEntry) -> None:
        self._entries[self._index] = entry
        self._index = (self._index + 1) % self._capacity
        if self._size < self._capacity:
            self._size += 1
