"""CHIP-8 machine assembly and frame driver."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional

from pychip8.bus import Memory
from pychip8.bus import MemoryError as BusMemoryError
from pychip8.cpu import Chip8CPU, CPUError
from pychip8.cpu.timers import Timers
from pychip8.frontend import Frontend, KeyEvent, QuitEvent
from pychip8.io import Keypad
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import FrameBuffer

DEFAULT_CYCLES_PER_FRAME = 12


@dataclass
class MachineConfig:
    """Runtime configuration for a CHIP-8 session."""

    super_chip: bool = False
    rom_image: Optional[bytes] = None
    cycles_per_frame: int = DEFAULT_CYCLES_PER_FRAME
    seed: Optional[int] = None
    frontend: Optional[Frontend] = None
    trace: Optional[TraceRecorder] = None


@dataclass
class Machine:
    """Aggregates the interpreter core with its collaborators."""

    memory: Memory
    cpu: Chip8CPU
    framebuffer: FrameBuffer
    keypad: Keypad
    cycles_per_frame: int = DEFAULT_CYCLES_PER_FRAME
    frontend: Optional[Frontend] = None
    trace: Optional[TraceRecorder] = None
    frame_count: int = field(default=0, init=False)

    @property
    def timers(self) -> Timers:
        return self.cpu.timers

    def attach_frontend(self, frontend: Frontend | None) -> None:
        self.frontend = frontend
        if frontend is not None and self.timers.tone_active:
            frontend.set_tone(True)

    def set_key(self, index: int, pressed: bool) -> None:
        self.keypad.set_key(index, pressed)

    def step(self) -> bool:
        return self.cpu.step()

    def run_cycles(self, count: int) -> int:
        """Run up to ``count`` instructions and return how many executed."""

        cpu = self.cpu
        trace = self.trace
        executed = 0
        for _ in range(count):
            if trace is None:
                if cpu.step():
                    executed += 1
                continue

            state_before = cpu.state.clone()
            opcode, mnemonic = self._peek_instruction(state_before.pc)
            try:
                stepped = cpu.step()
            except (CPUError, BusMemoryError):
                trace.record_step(
                    state_before,
                    opcode,
                    sp=cpu.stack.depth,
                    delay=cpu.timers.delay,
                    sound=cpu.timers.sound,
                    mnemonic=mnemonic,
                    note="fault",
                )
                raise
            if stepped:
                executed += 1
            elif cpu.awaiting_key and trace.last_entry() is not None:
                last = trace.last_entry()
                if last.awaiting_key and last.pc == state_before.pc:
                    continue
            trace.record_step(
                state_before,
                opcode,
                sp=cpu.stack.depth,
                delay=cpu.timers.delay,
                sound=cpu.timers.sound,
                awaiting_key=cpu.awaiting_key,
                mnemonic=mnemonic,
                note="" if stepped else "idle",
            )
        return executed

    def last_opcode(self) -> int | None:
        """Return the word before PC, i.e. the instruction most recently fetched."""

        address = self.cpu.state.pc - 2
        if not 0 <= address < len(self.memory) - 1:
            return None
        return self.memory.load16(address)

    def _peek_instruction(self, pc: int) -> tuple[int | None, str]:
        if not 0 <= pc < len(self.memory) - 1:
            return None, ""
        word = self.memory.load16(pc)
        instruction = self.cpu.decode(word)
        return word, instruction.mnemonic if instruction is not None else ""

    def tick_timers(self) -> None:
        self.cpu.tick_timers()

    def run_frame(self) -> bool:
        """Poll input, execute one frame of instructions, tick timers and draw.

        Returns ``False`` once the frontend reports a quit request.
        """

        frontend = self.frontend
        if frontend is not None and not self._drain_input(frontend):
            return False

        executed = self.run_cycles(self.cycles_per_frame)
        self.tick_timers()
        self.frame_count += 1

        if debug_enabled("perf"):
            debug_log(
                "perf",
                "frame=%d executed=%d pc=%04x dt=%d st=%d",
                self.frame_count,
                executed,
                self.cpu.state.pc,
                self.timers.delay,
                self.timers.sound,
            )

        if frontend is not None:
            frontend.draw(self.framebuffer.rows())
        return True

    def _drain_input(self, frontend: Frontend) -> bool:
        while True:
            event = frontend.poll_input()
            if event is None:
                return True
            if isinstance(event, QuitEvent):
                return False
            if isinstance(event, KeyEvent):
                self.keypad.set_key(event.key, event.pressed)

    def _forward_tone(self, active: bool) -> None:
        if debug_enabled("audio"):
            debug_log("audio", "tone=%s", active)
        if self.frontend is not None:
            self.frontend.set_tone(active)


def create_machine(config: MachineConfig) -> Machine:
    """Instantiate a CHIP-8 machine with the requested configuration."""

    if config.cycles_per_frame <= 0:
        raise ValueError("cycles_per_frame must be positive")

    memory = Memory()
    if config.rom_image:
        memory.load_rom(config.rom_image)

    framebuffer = FrameBuffer()
    keypad = Keypad()
    rng = random.Random(config.seed)

    cpu = Chip8CPU(
        memory,
        framebuffer=framebuffer,
        keypad=keypad,
        super_chip=config.super_chip,
        rng=rng,
    )
    cpu.reset()

    machine = Machine(
        memory=memory,
        cpu=cpu,
        framebuffer=framebuffer,
        keypad=keypad,
        cycles_per_frame=config.cycles_per_frame,
        trace=config.trace,
    )
    cpu.timers.add_tone_listener(machine._forward_tone)
    machine.attach_frontend(config.frontend)
    return machine
