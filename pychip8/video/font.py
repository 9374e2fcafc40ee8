"""Built-in hexadecimal glyph font for CHIP-8 programs."""

from __future__ import annotations

from typing import Final, Sequence

FONT_WIDTH = 4
FONT_HEIGHT = 5
GLYPH_BYTES = FONT_HEIGHT

FONT: Final[bytes] = bytes(
    (
        0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
        0x20, 0x60, 0x20, 0x20, 0x70,  # 1
        0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
        0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
        0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
        0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
        0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
        0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
        0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
        0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
        0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
        0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
        0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
        0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
        0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
        0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
    )
)


def glyph_offset(digit: int) -> int:
    """Return the memory offset of the glyph for hexadecimal ``digit``."""

    return (digit & 0x0F) * GLYPH_BYTES


def get_glyph(digit: int) -> Sequence[int]:
    offset = glyph_offset(digit)
    return FONT[offset : offset + GLYPH_BYTES]
