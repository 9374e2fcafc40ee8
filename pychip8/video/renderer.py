"""Convert the CHIP-8 frame buffer into scaled RGB frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .framebuffer import FrameBuffer
from .palette import MONOCHROME, RGBColor, validate_palette


@dataclass
class RenderResult:
    """Packed RGB image produced by :class:`Renderer`."""

    width: int
    height: int
    pixels: bytearray

    def get_pixel(self, x: int, y: int) -> RGBColor:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        offset = (y * self.width + x) * 3
        return (self.pixels[offset], self.pixels[offset + 1], self.pixels[offset + 2])

    def to_surface(self):
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to build surfaces") from exc
        return pygame.image.frombuffer(bytes(self.pixels), (self.width, self.height), "RGB")


class Renderer:
    """Scale the 1-bit frame buffer with a two-colour palette."""

    def __init__(self, palette: Sequence[RGBColor] = MONOCHROME) -> None:
        self._palette = validate_palette(palette)

    @property
    def palette(self) -> tuple[RGBColor, RGBColor]:
        return self._palette

    def render(self, grid: FrameBuffer | Sequence[Sequence[int]], *, scale: int = 1) -> RenderResult:
        """Render a frame buffer or a row-major grid of 0/1 values."""

        if scale <= 0:
            raise ValueError("scale must be positive")
        rows = grid.rows() if isinstance(grid, FrameBuffer) else grid
        if not rows:
            raise ValueError("grid must contain at least one row")
        background, foreground = (bytes(color) for color in self._palette)
        width = len(rows[0]) * scale
        height = len(rows) * scale
        pixels = bytearray()
        for row in rows:
            line = b"".join((foreground if value else background) * scale for value in row)
            pixels.extend(line * scale)
        return RenderResult(width=width, height=height, pixels=pixels)
