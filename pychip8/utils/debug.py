"""Category-filtered debug printing controlled by ``CHIP8_DEBUG``.

``CHIP8_DEBUG=cpu,stack`` turns on those categories and ``all`` turns on
every one. The variable is read once; call :func:`reload_categories` after
changing it at runtime.
"""

from __future__ import annotations

import os
from functools import lru_cache

ENV_VAR = "CHIP8_DEBUG"
ALL_CATEGORIES = "all"


def parse_categories(value: str) -> frozenset[str]:
    return frozenset(part.strip().lower() for part in value.split(",") if part.strip())


@lru_cache(maxsize=1)
def active_categories() -> frozenset[str]:
    return parse_categories(os.environ.get(ENV_VAR, ""))


def reload_categories() -> None:
    active_categories.cache_clear()


def debug_enabled(category: str | None = None) -> bool:
    active = active_categories()
    if not active:
        return False
    return category is None or ALL_CATEGORIES in active or category.lower() in active


def debug_log(category: str, message: str, *args) -> None:
    if not debug_enabled(category):
        return
    if args:
        try:
            message = message % args
        except (TypeError, ValueError):
            message = f"{message} {args!r}"
    print(f"[CHIP8][{category}] {message}")
