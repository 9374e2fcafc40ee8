"""Monochrome frame buffer written by the clear and draw instructions."""

from __future__ import annotations

from dataclasses import dataclass, field

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32


@dataclass
class FrameBuffer:
    """Row-major grid of 0/1 pixels."""

    width: int = DISPLAY_WIDTH
    height: int = DISPLAY_HEIGHT
    _pixels: bytearray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("frame buffer dimensions must be positive")
        self._pixels = bytearray(self.width * self.height)

    def clear(self) -> None:
        self._pixels[:] = bytes(len(self._pixels))

    def get_pixel(self, x: int, y: int) -> int:
        return self._pixels[self._index(x, y)]

    def xor_pixel(self, x: int, y: int, bit: int) -> bool:
        """XOR ``bit`` into the wrapped pixel and report whether it erased a set pixel."""

        index = (y % self.height) * self.width + (x % self.width)
        bit &= 1
        collided = bool(bit and self._pixels[index])
        self._pixels[index] ^= bit
        return collided

    def draw_sprite(self, x: int, y: int, rows: bytes) -> bool:
        """Blit 8-pixel-wide ``rows`` at (``x``, ``y``) with wraparound."""

        collision = False
        for row, line in enumerate(rows):
            for column in range(8):
                bit = (line >> (7 - column)) & 1
                if bit and self.xor_pixel(x + column, y + row, bit):
                    collision = True
        return collision

    def rows(self) -> tuple[tuple[int, ...], ...]:
        width = self.width
        return tuple(
            tuple(self._pixels[row * width : (row + 1) * width]) for row in range(self.height)
        )

    def snapshot(self) -> bytes:
        return bytes(self._pixels)

    def lit_count(self) -> int:
        return sum(self._pixels)

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} frame buffer")
        return y * self.width + x
