"""Program metadata structures for CHIP-8 loaders."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RomImage:
    """Raw program bytes plus the name they were loaded under."""

    data: bytes
    name: str = ""

    def __len__(self) -> int:
        return len(self.data)
