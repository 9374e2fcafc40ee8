"""Tests for the built-in hexadecimal font."""

from __future__ import annotations

from pychip8.video import FONT, GLYPH_BYTES, glyph_offset
from pychip8.video.font import get_glyph


def test_font_has_sixteen_glyphs() -> None:
    assert len(FONT) == 16 * GLYPH_BYTES


def test_glyph_offset_masks_digit() -> None:
    assert glyph_offset(0) == 0
    assert glyph_offset(0xF) == 75
    assert glyph_offset(0x12) == glyph_offset(0x2)


def test_glyph_zero_outline() -> None:
    assert list(get_glyph(0)) == [0xF0, 0x90, 0x90, 0x90, 0xF0]
