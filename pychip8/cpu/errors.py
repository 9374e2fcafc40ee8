"""Exception hierarchy for the CHIP-8 CPU."""

from __future__ import annotations


class CPUError(Exception):
    """Base error for CPU-related failures."""


class ProgramCounterError(CPUError):
    """Raised when the program counter leaves memory before a fetch."""

    def __init__(self, pc: int, limit: int) -> None:
        super().__init__(f"program counter {pc:#06x} outside memory (limit {limit:#06x})")
        self.pc = pc
        self.limit = limit


class StackError(CPUError):
    """Base error for call stack misuse."""


class StackOverflowError(StackError):
    """Raised when a subroutine call exceeds the stack capacity."""


class StackUnderflowError(StackError):
    """Raised when returning with an empty call stack."""
