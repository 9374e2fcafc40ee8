"""CHIP-8 CPU: register file, fetch/decode/execute and opcode handlers."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Sequence

from pychip8.bus import FONT_START, PROGRAM_START, Memory
from pychip8.bus import MemoryError as BusMemoryError
from pychip8.io import Keypad
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import FrameBuffer, glyph_offset

from .errors import CPUError, ProgramCounterError
from .opcodes import OPCODE_TABLE, Instruction, Operands
from .stack import CallStack
from .timers import Timers

REGISTER_COUNT = 16
FLAG_REGISTER = 0xF
INDEX_OVERFLOW_LIMIT = 0x1000


class RunState(Enum):
    """Execution state observed by the driver."""

    RUNNING = auto()
    AWAITING_KEY = auto()
    HALTED = auto()


@dataclass
class CPUState:
    """Snapshot of the CHIP-8 register file."""

    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    i: int = 0x0000
    pc: int = PROGRAM_START

    @property
    def vf(self) -> int:
        """The carry/borrow/collision flag (register VF)."""

        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF

    def clone(self) -> "CPUState":
        return CPUState(list(self.v), self.i, self.pc)


@dataclass
class Chip8CPU:
    """CHIP-8 interpreter core.

    ``super_chip`` selects the alternate dialect for the shift instructions
    (shift ``Vx`` in place) and for ``BNNN`` (jump to ``Vx + NNN``). With the
    default legacy dialect the shifts copy ``Vy`` into ``Vx`` first and
    ``BNNN`` jumps to ``V0 + NNN``.
    """

    memory: Memory
    framebuffer: FrameBuffer = field(default_factory=FrameBuffer)
    keypad: Keypad = field(default_factory=Keypad)
    super_chip: bool = False
    instruction_table: Sequence[Instruction | None] = field(default=OPCODE_TABLE)
    rng: random.Random = field(default_factory=random.Random)

    state: CPUState = field(default_factory=CPUState)
    stack: CallStack = field(default_factory=CallStack)
    timers: Timers = field(default_factory=Timers)
    run_state: RunState = RunState.RUNNING
    wait_register: int | None = None
    instruction_count: int = 0

    def reset(self) -> None:
        """Reset registers, stack and timers and point PC at the program."""

        self.state = CPUState()
        self.stack.clear()
        self.timers.reset()
        self.run_state = RunState.RUNNING
        self.wait_register = None
        self.instruction_count = 0

    @property
    def awaiting_key(self) -> bool:
        return self.run_state is RunState.AWAITING_KEY

    @property
    def halted(self) -> bool:
        return self.run_state is RunState.HALTED

    def step(self) -> bool:
        """Execute a single instruction.

        Returns ``False`` without fetching when the CPU is halted or parked on
        ``FX0A`` with no key held.
        """

        if self.halted:
            return False

        if self.awaiting_key and not self.keypad.any_pressed():
            if debug_enabled("cpu"):
                debug_log("cpu", "key wait pc=%04x register=V%X", self.state.pc, self.wait_register)
            return False

        pc_before = self.state.pc
        word = self.fetch()
        if debug_enabled("cpu"):
            debug_log("cpu", "pc=%04x opcode=%04x", pc_before, word)
        try:
            self.execute(word)
        except BusMemoryError:
            self.run_state = RunState.HALTED
            raise
        self.instruction_count += 1
        return True

    def fetch(self) -> int:
        """Read the big-endian word at PC and advance PC by two."""

        pc = self.state.pc
        limit = len(self.memory)
        if not 0 <= pc < limit - 1:
            self.run_state = RunState.HALTED
            raise ProgramCounterError(pc, limit)
        word = self.memory.load16(pc)
        self.state.pc = pc + 2
        return word

    def decode(self, word: int) -> Instruction | None:
        return self.instruction_table[word & 0xFFFF]

    def execute(self, word: int) -> None:
        """Dispatch ``word`` to its handler; unknown words are ignored."""

        instruction = self.decode(word)
        if instruction is None:
            if debug_enabled("cpu"):
                debug_log("cpu", "unknown opcode=%04x pc=%04x", word, self.state.pc - 2)
            return
        handler = getattr(self, instruction.handler, None)
        if handler is None:
            raise CPUError(f"handler '{instruction.handler}' not implemented")
        handler(Operands.from_word(word))

    def tick_timers(self) -> None:
        """Advance the delay and sound timers by one tick."""

        self.timers.tick()

    def load_program(self, data: bytes) -> int:
        return self.memory.load_rom(data)

    # ------------------------------------------------------------------
    # Flow control

    def op_cls(self, _: Operands) -> None:
        self.framebuffer.clear()

    def op_ret(self, _: Operands) -> None:
        self.state.pc = self.stack.pop()
        if debug_enabled("stack"):
            debug_log("stack", "ret pc=%04x depth=%d", self.state.pc, self.stack.depth)

    def op_jp(self, ops: Operands) -> None:
        self.state.pc = ops.nnn

    def op_call(self, ops: Operands) -> None:
        self.stack.push(self.state.pc)
        self.state.pc = ops.nnn
        if debug_enabled("stack"):
            debug_log("stack", "call pc=%04x depth=%d", ops.nnn, self.stack.depth)

    def op_jp_indexed(self, ops: Operands) -> None:
        register = ops.x if self.super_chip else 0
        # NNN is 12 bits wide; adding at 8 bits would drop the page.
        self.state.pc = self.state.v[register] + ops.nnn

    # ------------------------------------------------------------------
    # Conditional skips

    def op_se_immediate(self, ops: Operands) -> None:
        if self.state.v[ops.x] == ops.nn:
            self._skip()

    def op_sne_immediate(self, ops: Operands) -> None:
        if self.state.v[ops.x] != ops.nn:
            self._skip()

    def op_se_register(self, ops: Operands) -> None:
        if self.state.v[ops.x] == self.state.v[ops.y]:
            self._skip()

    def op_sne_register(self, ops: Operands) -> None:
        if self.state.v[ops.x] != self.state.v[ops.y]:
            self._skip()

    # ------------------------------------------------------------------
    # Register arithmetic

    def op_ld_immediate(self, ops: Operands) -> None:
        self.state.v[ops.x] = ops.nn

    def op_add_immediate(self, ops: Operands) -> None:
        self.state.v[ops.x] = (self.state.v[ops.x] + ops.nn) & 0xFF

    def op_ld_register(self, ops: Operands) -> None:
        self.state.v[ops.x] = self.state.v[ops.y]

    def op_or(self, ops: Operands) -> None:
        self.state.v[ops.x] = (self.state.v[ops.x] | self.state.v[ops.y]) & 0xFF

    def op_and(self, ops: Operands) -> None:
        self.state.v[ops.x] = (self.state.v[ops.x] & self.state.v[ops.y]) & 0xFF

    def op_xor(self, ops: Operands) -> None:
        self.state.v[ops.x] = (self.state.v[ops.x] ^ self.state.v[ops.y]) & 0xFF

    def op_add_register(self, ops: Operands) -> None:
        total = self.state.v[ops.x] + self.state.v[ops.y]
        self.state.v[ops.x] = total & 0xFF
        self.state.vf = 1 if total > 0xFF else 0

    def op_sub(self, ops: Operands) -> None:
        result, no_borrow = self._sub8(self.state.v[ops.x], self.state.v[ops.y])
        self.state.v[ops.x] = result
        self.state.vf = no_borrow

    def op_subn(self, ops: Operands) -> None:
        result, no_borrow = self._sub8(self.state.v[ops.y], self.state.v[ops.x])
        self.state.v[ops.x] = result
        self.state.vf = no_borrow

    def op_shr(self, ops: Operands) -> None:
        value = self._shift_source(ops)
        self.state.v[ops.x] = (value >> 1) & 0xFF
        self.state.vf = value & 0x01

    def op_shl(self, ops: Operands) -> None:
        value = self._shift_source(ops)
        self.state.v[ops.x] = (value << 1) & 0xFF
        self.state.vf = (value >> 7) & 0x01

    # ------------------------------------------------------------------
    # Index register, random and drawing

    def op_ld_index(self, ops: Operands) -> None:
        self.state.i = ops.nnn

    def op_rnd(self, ops: Operands) -> None:
        self.state.v[ops.x] = self.rng.randrange(0x100) & ops.nn

    def op_drw(self, ops: Operands) -> None:
        x = self.state.v[ops.x]
        y = self.state.v[ops.y]
        rows = self.memory.read_block(self.state.i, ops.n)
        self.state.vf = 0
        collision = self.framebuffer.draw_sprite(x, y, rows)
        self.state.vf = 1 if collision else 0

    # ------------------------------------------------------------------
    # Keypad

    def op_skp(self, ops: Operands) -> None:
        if self.keypad.is_pressed(self.state.v[ops.x]):
            self._skip()

    def op_sknp(self, ops: Operands) -> None:
        if not self.keypad.is_pressed(self.state.v[ops.x]):
            self._skip()

    def op_ld_key(self, ops: Operands) -> None:
        key = self.keypad.first_pressed()
        if key is None:
            # Re-run this instruction on the next step until a key is held.
            self.state.pc -= 2
            self.run_state = RunState.AWAITING_KEY
            self.wait_register = ops.x
            return
        self.state.v[ops.x] = key
        self.run_state = RunState.RUNNING
        self.wait_register = None

    # ------------------------------------------------------------------
    # Timers

    def op_ld_from_delay(self, ops: Operands) -> None:
        self.state.v[ops.x] = self.timers.delay

    def op_ld_delay(self, ops: Operands) -> None:
        self.timers.set_delay(self.state.v[ops.x])

    def op_ld_sound(self, ops: Operands) -> None:
        self.timers.sound = self.state.v[ops.x]

    # ------------------------------------------------------------------
    # Index and memory helpers

    def op_add_index(self, ops: Operands) -> None:
        self.state.i = (self.state.i + self.state.v[ops.x]) & 0xFFFF
        if self.state.i > INDEX_OVERFLOW_LIMIT:
            self.state.vf = 1

    def op_ld_font(self, ops: Operands) -> None:
        self.state.i = FONT_START + glyph_offset(self.state.v[ops.x])

    def op_ld_bcd(self, ops: Operands) -> None:
        value = self.state.v[ops.x]
        self.memory.write_block(self.state.i, (value // 100, (value // 10) % 10, value % 10))

    def op_store_registers(self, ops: Operands) -> None:
        self.memory.write_block(self.state.i, self.state.v[: ops.x + 1])

    def op_load_registers(self, ops: Operands) -> None:
        block = self.memory.read_block(self.state.i, ops.x + 1)
        self.state.v[: ops.x + 1] = list(block)

    # ------------------------------------------------------------------
    # Helpers

    def _skip(self) -> None:
        self.state.pc += 2

    def _shift_source(self, ops: Operands) -> int:
        if not self.super_chip:
            self.state.v[ops.x] = self.state.v[ops.y]
        return self.state.v[ops.x]

    @staticmethod
    def _sub8(x: int, y: int) -> tuple[int, int]:
        x &= 0xFF
        y &= 0xFF
        return (x - y) & 0xFF, 1 if x >= y else 0
