"""Command-line entry point for the CHIP-8 interpreter."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pychip8.system import DEFAULT_CYCLES_PER_FRAME
from pychip8.ui.app import AppConfig, Chip8App
from pychip8.video import PALETTES


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py",
        description="CHIP-8 interpreter",
    )
    parser.add_argument(
        "--rom",
        type=Path,
        required=True,
        help="Path to the CHIP-8 program image",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=10,
        help="Integer window scale factor (default: 10)",
    )
    parser.add_argument(
        "--super-chip",
        action="store_true",
        help="Use the SUPER-CHIP shift and indexed-jump behaviour",
    )
    parser.add_argument(
        "--cycles-per-frame",
        type=int,
        default=DEFAULT_CYCLES_PER_FRAME,
        help=f"Instructions executed per 60 Hz frame (default: {DEFAULT_CYCLES_PER_FRAME})",
    )
    parser.add_argument(
        "--fullscreen",
        action="store_true",
        help="Launch the interpreter in fullscreen mode",
    )
    parser.add_argument(
        "--no-gamepad",
        action="store_true",
        help="Ignore attached game controllers",
    )
    parser.add_argument(
        "--palette",
        choices=sorted(PALETTES),
        default="mono",
        help="Display colours (default: mono)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the RND instruction",
    )
    return parser


def build_config(args: argparse.Namespace) -> AppConfig:
    return AppConfig(
        rom_path=args.rom,
        scale=args.scale,
        super_chip=args.super_chip,
        cycles_per_frame=args.cycles_per_frame,
        fullscreen=args.fullscreen,
        enable_gamepad=not args.no_gamepad,
        palette=args.palette,
        seed=args.seed,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.rom.exists():
        parser.error(f"ROM file not found: {args.rom}")
    if args.scale <= 0:
        parser.error("--scale must be positive")
    if args.cycles_per_frame <= 0:
        parser.error("--cycles-per-frame must be positive")

    app = Chip8App(build_config(args))
    try:
        app.run()
    except RuntimeError as exc:
        parser.exit(1, f"run.py: {exc}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
