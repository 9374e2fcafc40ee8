"""Bounded return-address stack."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .errors import StackOverflowError, StackUnderflowError

STACK_DEPTH = 16


@dataclass
class CallStack:
    """Fixed-capacity LIFO of return addresses."""

    capacity: int = STACK_DEPTH
    _entries: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.capacity <= 0:
            raise ValueError("capacity must be positive")

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def depth(self) -> int:
        return len(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def is_full(self) -> bool:
        return len(self._entries) >= self.capacity

    def push(self, address: int) -> None:
        if self.is_full():
            raise StackOverflowError(
                f"call stack overflow pushing {address:#06x} (capacity {self.capacity})"
            )
        self._entries.append(address)

    def pop(self) -> int:
        if not self._entries:
            raise StackUnderflowError("return with empty call stack")
        return self._entries.pop()

    def peek(self) -> int | None:
        if not self._entries:
            return None
        return self._entries[-1]

    def clear(self) -> None:
        self._entries.clear()

    def snapshot(self) -> tuple[int, ...]:
        return tuple(self._entries)
