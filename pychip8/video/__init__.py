"""Video helpers for the CHIP-8 interpreter."""

from __future__ import annotations

from .font import FONT, FONT_HEIGHT, FONT_WIDTH, GLYPH_BYTES, glyph_offset
from .framebuffer import DISPLAY_HEIGHT, DISPLAY_WIDTH, FrameBuffer
from .palette import AMBER, MONOCHROME, PALETTES, validate_palette
from .renderer import RenderResult, Renderer

__all__ = [
    "FONT",
    "FONT_WIDTH",
    "FONT_HEIGHT",
    "GLYPH_BYTES",
    "glyph_offset",
    "FrameBuffer",
    "DISPLAY_WIDTH",
    "DISPLAY_HEIGHT",
    "Renderer",
    "RenderResult",
    "MONOCHROME",
    "AMBER",
    "PALETTES",
    "validate_palette",
]
