"""Square-wave tone driven by the CHIP-8 sound timer."""

from __future__ import annotations

from array import array
import math
from typing import Optional

DEFAULT_FREQUENCY = 440.0


class SquareWaveBeeper:
    """Manage a looping square-wave tone using pygame's mixer."""

    def __init__(
        self,
        *,
        sample_rate: int = 44_100,
        frequency: float = DEFAULT_FREQUENCY,
        volume: float = 0.35,
        min_play_ms: int = 35,
    ) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required for audio output") from exc

        if pygame.mixer.get_init() is None:
            raise RuntimeError("pygame mixer must be initialised before creating SquareWaveBeeper")

        self._pygame = pygame
        self._sample_rate = max(1, sample_rate)
        self._frequency = frequency
        self._volume = max(0.0, min(1.0, volume))
        self._min_play_ms = max(0, min_play_ms)
        self._channel: Optional[pygame.mixer.Channel] = None
        self._sound: Optional[pygame.mixer.Sound] = None
        self._playing = False
        self._last_start_ms: int = 0

    # ------------------------------------------------------------------
    # Public API

    @property
    def playing(self) -> bool:
        return self._playing

    def set_state(self, enabled: bool) -> None:
        """Start or stop the tone."""

        if not enabled:
            self._stop()
            return
        if self._playing:
            return

        if self._sound is None:
            self._sound = self._build_sound(self._frequency)
            if self._sound is None:
                return

        channel = self._channel
        if channel is None:
            channel = self._pygame.mixer.find_channel(True)
            if channel is None:
                return
            self._channel = channel

        channel.play(self._sound, loops=-1)
        channel.set_volume(self._volume)
        self._playing = True
        self._last_start_ms = self._pygame.time.get_ticks()

    def shutdown(self) -> None:
        """Stop any active tone and release resources."""

        self._stop()
        self._channel = None
        self._sound = None

    # ------------------------------------------------------------------
    # Internals

    def _stop(self) -> None:
        if self._channel is not None and self._playing:
            if self._min_play_ms > 0:
                elapsed = self._pygame.time.get_ticks() - self._last_start_ms
                remaining = self._min_play_ms - elapsed
                if remaining > 0:
                    self._channel.fadeout(int(max(10, remaining)))
                else:
                    self._channel.stop()
            else:
                self._channel.stop()
        self._playing = False

    def _build_sound(self, frequency: float) -> Optional["pygame.mixer.Sound"]:
        if frequency <= 0.0:
            return None
        buffer = build_square_wave(self._sample_rate, frequency)
        try:
            sound = self._pygame.mixer.Sound(buffer=buffer.tobytes())
        except self._pygame.error:  # pragma: no cover - pygame error path
            return None
        return sound


def build_square_wave(sample_rate: int, frequency: float, *, amplitude: int = 12_000) -> array:
    """Return one period of a band-limited square wave as signed 16-bit samples."""

    period_samples = max(32, int(round(sample_rate / frequency)))
    rank = int(((sample_rate / (2.0 * frequency)) + 1.0) / 2.0)
    rank = max(1, min(30, rank))

    buffer = array("h")
    scale = (4.0 / math.pi) * amplitude
    for index in range(period_samples):
        phase = (2.0 * math.pi * index) / period_samples
        total = 0.0
        for harmonic in range(rank):
            k = 2 * harmonic + 1
            total += math.sin(k * phase) / k
        value = total * scale
        value = max(-amplitude, min(amplitude, value))
        buffer.append(int(value))
    return buffer


__all__ = ["SquareWaveBeeper", "build_square_wave", "DEFAULT_FREQUENCY"]
