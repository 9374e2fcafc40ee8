"""Interactive pygame frontend."""

from .app import AppConfig, Chip8App

__all__ = ["AppConfig", "Chip8App"]
