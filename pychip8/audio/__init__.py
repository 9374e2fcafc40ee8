"""Audio output for the CHIP-8 interpreter."""

from .beeper import DEFAULT_FREQUENCY, SquareWaveBeeper, build_square_wave

__all__ = [
    "DEFAULT_FREQUENCY",
    "SquareWaveBeeper",
    "build_square_wave",
]
