"""Opcode metadata for the CHIP-8 instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterable, List, Sequence


@dataclass(frozen=True)
class Instruction:
    """Metadata describing one opcode pattern.

    ``mask`` selects the nibbles that identify the instruction and ``value``
    holds their expected contents; every other nibble is an operand.
    """

    mask: int
    value: int
    mnemonic: str
    handler: str

    def __post_init__(self) -> None:
        if not 0 <= self.mask <= 0xFFFF:
            raise ValueError(f"mask out of range: {self.mask}")
        if self.value & ~self.mask:
            raise ValueError(f"pattern {self.value:#06x} has bits outside mask {self.mask:#06x}")

    def matches(self, word: int) -> bool:
        return (word & self.mask) == self.value


@dataclass(frozen=True)
class Operands:
    """Fields extracted from a 16-bit instruction word."""

    word: int
    x: int
    y: int
    n: int
    nn: int
    nnn: int

    @classmethod
    def from_word(cls, word: int) -> "Operands":
        word &= 0xFFFF
        return cls(
            word=word,
            x=(word >> 8) & 0x0F,
            y=(word >> 4) & 0x0F,
            n=word & 0x000F,
            nn=word & 0x00FF,
            nnn=word & 0x0FFF,
        )


class OpcodeTable:
    """Mutable builder for the 65536-entry instruction table."""

    _TABLE_SIZE: Final[int] = 0x10000

    def __init__(self) -> None:
        self._table: List[Instruction | None] = [None] * self._TABLE_SIZE

    def register(self, instruction: Instruction) -> None:
        free = ~instruction.mask & 0xFFFF
        operand = free
        while True:
            word = instruction.value | operand
            existing = self._table[word]
            if existing is not None:
                raise ValueError(
                    f"opcode {word:#06x} already registered as {existing.mnemonic}")
            self._table[word] = instruction
            if operand == 0:
                break
            operand = (operand - 1) & free

    def register_all(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.register(instruction)

    def freeze(self) -> Sequence[Instruction | None]:
        return tuple(self._table)


def build_instruction_table(instructions: Iterable[Instruction]) -> Sequence[Instruction | None]:
    """Build a lookup table indexed by the full instruction word."""

    table = OpcodeTable()
    table.register_all(instructions)
    return table.freeze()


DEFAULT_INSTRUCTIONS: Sequence[Instruction] = (
    # Flow control
    Instruction(0xFFFF, 0x00E0, "CLS", "op_cls"),
    Instruction(0xFFFF, 0x00EE, "RET", "op_ret"),
    Instruction(0xF000, 0x1000, "JP", "op_jp"),
    Instruction(0xF000, 0x2000, "CALL", "op_call"),
    Instruction(0xF000, 0xB000, "JP", "op_jp_indexed"),
    # Conditional skips
    Instruction(0xF000, 0x3000, "SE", "op_se_immediate"),
    Instruction(0xF000, 0x4000, "SNE", "op_sne_immediate"),
    Instruction(0xF00F, 0x5000, "SE", "op_se_register"),
    Instruction(0xF00F, 0x9000, "SNE", "op_sne_register"),
    # Register loads and arithmetic
    Instruction(0xF000, 0x6000, "LD", "op_ld_immediate"),
    Instruction(0xF000, 0x7000, "ADD", "op_add_immediate"),
    Instruction(0xF00F, 0x8000, "LD", "op_ld_register"),
    Instruction(0xF00F, 0x8001, "OR", "op_or"),
    Instruction(0xF00F, 0x8002, "AND", "op_and"),
    Instruction(0xF00F, 0x8003, "XOR", "op_xor"),
    Instruction(0xF00F, 0x8004, "ADD", "op_add_register"),
    Instruction(0xF00F, 0x8005, "SUB", "op_sub"),
    Instruction(0xF00F, 0x8006, "SHR", "op_shr"),
    Instruction(0xF00F, 0x8007, "SUBN", "op_subn"),
    Instruction(0xF00F, 0x800E, "SHL", "op_shl"),
    # Index register, random and drawing
    Instruction(0xF000, 0xA000, "LD", "op_ld_index"),
    Instruction(0xF000, 0xC000, "RND", "op_rnd"),
    Instruction(0xF000, 0xD000, "DRW", "op_drw"),
    # Keypad
    Instruction(0xF0FF, 0xE09E, "SKP", "op_skp"),
    Instruction(0xF0FF, 0xE0A1, "SKNP", "op_sknp"),
    Instruction(0xF0FF, 0xF00A, "LD", "op_ld_key"),
    # Timers
    Instruction(0xF0FF, 0xF007, "LD", "op_ld_from_delay"),
    Instruction(0xF0FF, 0xF015, "LD", "op_ld_delay"),
    Instruction(0xF0FF, 0xF018, "LD", "op_ld_sound"),
    # Index/memory helpers
    Instruction(0xF0FF, 0xF01E, "ADD", "op_add_index"),
    Instruction(0xF0FF, 0xF029, "LD", "op_ld_font"),
    Instruction(0xF0FF, 0xF033, "LD", "op_ld_bcd"),
    Instruction(0xF0FF, 0xF055, "LD", "op_store_registers"),
    Instruction(0xF0FF, 0xF065, "LD", "op_load_registers"),
)


OPCODE_TABLE: Sequence[Instruction | None] = build_instruction_table(DEFAULT_INSTRUCTIONS)


def decode(word: int, table: Sequence[Instruction | None] = OPCODE_TABLE) -> Instruction | None:
    """Return the instruction matching ``word`` or ``None`` when unknown."""

    return table[word & 0xFFFF]
