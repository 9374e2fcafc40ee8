"""Raw CHIP-8 program image loader."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

from pychip8.bus import MEMORY_SIZE, PROGRAM_START, Memory
from pychip8.utils import debug_enabled, debug_log

from .program import RomImage

MAX_ROM_SIZE = MEMORY_SIZE - PROGRAM_START


class RomFormatError(RuntimeError):
    """Raised when a program image cannot be loaded."""


def load_rom(stream: BinaryIO, *, name: str = "") -> RomImage:
    """Read a raw program image from ``stream``.

    Images carry no header; anything that fits above ``0x200`` is accepted.
    """

    data = stream.read(MAX_ROM_SIZE + 1)
    if not data:
        raise RomFormatError("program image is empty")
    if len(data) > MAX_ROM_SIZE:
        raise RomFormatError(f"program image exceeds {MAX_ROM_SIZE} bytes")
    if debug_enabled("loader"):
        debug_log("loader", "name=%s size=%d", name or "-", len(data))
    return RomImage(bytes(data), name)


def load_rom_from_path(path: Path) -> RomImage:
    """Load a program image from the filesystem."""

    with path.open("rb") as handle:
        return load_rom(handle, name=path.stem)


def install_rom(image: RomImage, memory: Memory) -> int:
    """Copy ``image`` into ``memory`` at ``PROGRAM_START``."""

    return memory.load_rom(image.data)
