"""CHIP-8 interpreter core with a pygame frontend.

``run.py`` wires the subpackages together: ``cpu`` executes instructions
against ``bus`` memory, ``video`` and ``io`` hold the display and keypad, and
``system`` drives them frame by frame through a ``frontend``.
"""

from __future__ import annotations

from . import audio, bus, cpu, frontend, io, loader, system, ui, utils, video

__all__: list[str] = [
    "cpu",
    "bus",
    "video",
    "audio",
    "io",
    "frontend",
    "loader",
    "system",
    "ui",
    "utils",
]
