"""CHIP-8 system assembly helpers."""

from __future__ import annotations

from .machine import DEFAULT_CYCLES_PER_FRAME, Machine, MachineConfig, create_machine

__all__ = [
    "DEFAULT_CYCLES_PER_FRAME",
    "MachineConfig",
    "Machine",
    "create_machine",
]
