"""CPU package for the CHIP-8 interpreter."""

from .core import Chip8CPU, CPUState, RunState
from .errors import (
    CPUError,
    ProgramCounterError,
    StackError,
    StackOverflowError,
    StackUnderflowError,
)
from .stack import STACK_DEPTH, CallStack
from .timers import TIMER_HZ, Timers
from . import opcodes

__all__ = [
    "Chip8CPU",
    "CPUState",
    "RunState",
    "CPUError",
    "ProgramCounterError",
    "StackError",
    "StackOverflowError",
    "StackUnderflowError",
    "CallStack",
    "STACK_DEPTH",
    "Timers",
    "TIMER_HZ",
    "opcodes",
]
