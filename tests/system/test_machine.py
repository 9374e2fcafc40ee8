"""Tests for machine assembly and the frame driver."""

from __future__ import annotations

import pytest

from pychip8.bus import MemoryError as BusMemoryError
from pychip8.cpu import ProgramCounterError, RunState
from pychip8.frontend import HeadlessFrontend
from pychip8.system import MachineConfig, create_machine
from pychip8.utils import TraceRecorder


def program(*words: int) -> bytes:
    return b"".join(word.to_bytes(2, "big") for word in words)


def test_create_machine_loads_rom_and_resets() -> None:
    machine = create_machine(MachineConfig(rom_image=program(0x6005)))

    assert machine.cpu.state.pc == 0x200
    assert machine.memory.load16(0x200) == 0x6005
    assert machine.cpu.memory is machine.memory
    assert machine.cpu.framebuffer is machine.framebuffer
    assert machine.cpu.keypad is machine.keypad


def test_invalid_cycles_per_frame() -> None:
    with pytest.raises(ValueError):
        create_machine(MachineConfig(cycles_per_frame=0))


def test_super_chip_flag_reaches_cpu() -> None:
    machine = create_machine(MachineConfig(super_chip=True))
    assert machine.cpu.super_chip is True


def test_run_cycles_counts_executed_instructions() -> None:
    machine = create_machine(MachineConfig(rom_image=program(0x6001, 0x7001, 0x1202)))
    assert machine.run_cycles(5) == 5
    assert machine.cpu.state.v[0] == 3


def test_run_frame_draws_once_and_ticks_timers() -> None:
    frontend = HeadlessFrontend()
    machine = create_machine(
        MachineConfig(rom_image=program(0x6007, 0xF015, 0x1204), cycles_per_frame=4, frontend=frontend)
    )

    assert machine.run_frame() is True

    assert frontend.frames_drawn == 1
    assert machine.frame_count == 1
    assert machine.timers.delay == 6
    assert frontend.last_frame == machine.framebuffer.rows()


def test_run_frame_forwards_key_events() -> None:
    frontend = HeadlessFrontend()
    machine = create_machine(MachineConfig(rom_image=program(0xF20A, 0x1202), frontend=frontend))

    machine.run_frame()
    assert machine.cpu.awaiting_key

    frontend.press(0x9)
    machine.run_frame()

    assert machine.keypad.is_pressed(0x9)
    assert machine.cpu.state.v[2] == 0x9
    assert not machine.cpu.awaiting_key


def test_run_frame_stops_on_quit() -> None:
    frontend = HeadlessFrontend()
    machine = create_machine(MachineConfig(rom_image=program(0x1200), frontend=frontend))

    frontend.request_quit()

    assert machine.run_frame() is False
    assert frontend.frames_drawn == 0


def test_tone_follows_sound_timer() -> None:
    frontend = HeadlessFrontend()
    machine = create_machine(
        MachineConfig(rom_image=program(0x6003, 0xF018, 0x1204), cycles_per_frame=3, frontend=frontend)
    )

    machine.run_frame()
    assert frontend.tone_on is True

    machine.run_frame()
    machine.run_frame()
    assert frontend.tone_changes == [True, False]


def test_attach_frontend_while_tone_active() -> None:
    machine = create_machine(MachineConfig(rom_image=program(0x6010, 0xF018)))
    machine.run_cycles(2)

    frontend = HeadlessFrontend()
    machine.attach_frontend(frontend)

    assert frontend.tone_changes == [True]


def test_seed_makes_random_reproducible() -> None:
    rom = program(0xC0FF, 0xC1FF, 0xC2FF)
    first = create_machine(MachineConfig(rom_image=rom, seed=42))
    second = create_machine(MachineConfig(rom_image=rom, seed=42))

    first.run_cycles(3)
    second.run_cycles(3)

    assert first.cpu.state.v[:3] == second.cpu.state.v[:3]


def test_trace_skips_repeated_key_wait() -> None:
    trace = TraceRecorder(8)
    machine = create_machine(MachineConfig(rom_image=program(0xF00A), trace=trace))

    assert machine.run_cycles(5) == 1

    lines = list(trace.format_entries())
    assert len(lines) == 1
    assert "pc=0200 opcode=F00A" in lines[0]
    assert "flags=KEY" in lines[0]


def test_trace_records_fault() -> None:
    trace = TraceRecorder(8)
    machine = create_machine(MachineConfig(trace=trace))
    machine.cpu.state.pc = 0xFFF

    with pytest.raises(ProgramCounterError):
        machine.run_cycles(1)

    entry = trace.last_entry()
    assert entry is not None
    assert entry.opcode is None
    assert entry.note == "fault"
    assert machine.cpu.halted


def test_memory_fault_is_traced_halts_and_writes_nothing() -> None:
    trace = TraceRecorder(8)
    machine = create_machine(
        MachineConfig(rom_image=program(0x6011, 0x6122, 0x6233, 0xAFFE, 0xF255), trace=trace)
    )

    with pytest.raises(BusMemoryError):
        machine.run_cycles(5)

    entry = trace.last_entry()
    assert entry is not None
    assert entry.note == "fault"
    assert entry.opcode == 0xF255
    assert entry.pc == 0x208
    assert machine.cpu.run_state is RunState.HALTED
    assert machine.memory.read_block(0xFFE, 2) == b"\x00\x00"
    assert machine.run_cycles(1) == 0


def test_bcd_past_memory_writes_nothing() -> None:
    machine = create_machine(MachineConfig(rom_image=program(0x60FF, 0xAFFE, 0xF033)))

    with pytest.raises(BusMemoryError):
        machine.run_cycles(3)

    assert machine.memory.read_block(0xFFE, 2) == b"\x00\x00"
    assert machine.cpu.halted


def test_last_opcode() -> None:
    machine = create_machine(MachineConfig(rom_image=program(0xA123)))
    machine.step()
    assert machine.last_opcode() == 0xA123
