"""Pygame frontend for the CHIP-8 interpreter."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Deque, Optional

from pychip8.audio import SquareWaveBeeper
from pychip8.bus import MemoryError as BusMemoryError
from pychip8.cpu import TIMER_HZ, CPUError, ProgramCounterError
from pychip8.frontend import InputEvent, KeyEvent, PixelGrid, QuitEvent
from pychip8.io import KEY_COUNT, GamepadState, Keyboard
from pychip8.loader import RomFormatError, load_rom_from_path
from pychip8.system import DEFAULT_CYCLES_PER_FRAME, Machine, MachineConfig, create_machine
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import DISPLAY_HEIGHT, DISPLAY_WIDTH, PALETTES, Renderer


@dataclass
class AppConfig:
    """Configuration for the interactive CHIP-8 frontend."""

    rom_path: Optional[Path] = None
    scale: int = 10
    super_chip: bool = False
    cycles_per_frame: int = DEFAULT_CYCLES_PER_FRAME
    frame_rate: int = TIMER_HZ
    fullscreen: bool = False
    enable_gamepad: bool = True
    joystick_index: int = 0
    palette: str = "mono"
    volume: float = 0.35
    seed: Optional[int] = None


class Chip8App:
    """Pygame event loop implementing the frontend capability set."""

    def __init__(self, config: AppConfig) -> None:
        if config.palette not in PALETTES:
            raise ValueError(f"unknown palette '{config.palette}'")
        self._config = config
        self._running = False
        self._pygame = None
        self._screen = None
        self._renderer = Renderer(PALETTES[config.palette])
        self._beeper: SquareWaveBeeper | None = None
        self._machine: Machine | None = None
        self._events: Deque[InputEvent] = deque()
        self._key_holds = [0] * KEY_COUNT
        self._last_frame: PixelGrid | None = None
        self._keyboard = Keyboard(self)
        self._gamepad_state = GamepadState()
        self._gamepad_state.attach(self)
        self._joystick = None
        self._joystick_instance_id: int | None = None
        self._joystick_axes = {"x": 0.0, "y": 0.0}
        self._joystick_hat = (0, 0)
        self._joystick_pressed_buttons: set[int] = set()
        self._trace_recorder: TraceRecorder | None = None
        if debug_enabled("trace"):
            self._trace_recorder = TraceRecorder(512)

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        if not self._config.rom_path:
            raise RuntimeError("ROM image is required; pass --rom <path>")
        machine = self._create_machine(self._config.rom_path)

        pygame.mixer.pre_init(44_100, -16, 1, 512)
        pygame.init()
        pygame.display.set_caption(f"CHIP-8 - {self._config.rom_path.stem}")
        self._pygame = pygame
        self._init_audio(pygame)

        if self._config.enable_gamepad:
            self._initialise_joystick(pygame)

        surface_size = (DISPLAY_WIDTH * self._config.scale, DISPLAY_HEIGHT * self._config.scale)
        flags = pygame.FULLSCREEN if self._config.fullscreen else 0
        self._screen = pygame.display.set_mode(surface_size, flags)

        clock = pygame.time.Clock()
        self._running = True
        machine.attach_frontend(self)

        try:
            while self._running:
                try:
                    self._running = machine.run_frame()
                except (CPUError, BusMemoryError) as exc:
                    self._running = False
                    raise RuntimeError(self._describe_fault(machine, exc)) from exc
                clock.tick(self._config.frame_rate)
        finally:
            if self._beeper is not None:
                self._beeper.shutdown()
            pygame.quit()

    # ------------------------------------------------------------------
    # Frontend protocol

    def draw(self, grid: PixelGrid) -> None:
        if self._screen is None or grid == self._last_frame:
            return
        self._last_frame = grid
        frame = self._renderer.render(grid, scale=self._config.scale)
        self._screen.blit(frame.to_surface(), (0, 0))
        self._pygame.display.flip()

    def poll_input(self) -> InputEvent | None:
        if not self._events and self._pygame is not None:
            self._pump_events(self._pygame)
        if not self._events:
            return None
        return self._events.popleft()

    def set_tone(self, on: bool) -> None:
        if self._beeper is not None:
            self._beeper.set_state(on)

    def set_key(self, index: int, pressed: bool) -> None:
        """Merge keyboard and controller holds so a key stays down while either source holds it."""

        holds = self._key_holds[index]
        if pressed:
            self._key_holds[index] = holds + 1
            if holds == 0:
                self._events.append(KeyEvent(index, True))
        elif holds > 0:
            self._key_holds[index] = holds - 1
            if holds == 1:
                self._events.append(KeyEvent(index, False))

    # ------------------------------------------------------------------
    # Setup

    def _create_machine(self, rom_path: Path) -> Machine:
        try:
            image = load_rom_from_path(rom_path)
        except FileNotFoundError as exc:
            raise RuntimeError(f"ROM file not found: {rom_path}") from exc
        except RomFormatError as exc:
            raise RuntimeError(f"Failed to load ROM {rom_path}: {exc}") from exc

        machine = create_machine(
            MachineConfig(
                super_chip=self._config.super_chip,
                rom_image=image.data,
                cycles_per_frame=self._config.cycles_per_frame,
                seed=self._config.seed,
                trace=self._trace_recorder,
            )
        )
        self._machine = machine
        return machine

    def _init_audio(self, pygame) -> None:
        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init(44_100, -16, 1)
            except pygame.error as exc:  # pragma: no cover - best-effort path
                if debug_enabled("audio"):
                    debug_log("audio", "mixer_init_failed=%s", exc)

        mixer_state = pygame.mixer.get_init()
        if mixer_state is None:
            if debug_enabled("audio"):
                debug_log("audio", "mixer_unavailable")
            return
        try:
            self._beeper = SquareWaveBeeper(sample_rate=mixer_state[0], volume=self._config.volume)
        except RuntimeError as exc:
            self._beeper = None
            if debug_enabled("audio"):
                debug_log("audio", "beeper_init_failed=%s", exc)

    # ------------------------------------------------------------------
    # Event handling

    def _pump_events(self, pygame) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._events.append(QuitEvent())
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self._events.append(QuitEvent())
            elif event.type in (pygame.KEYDOWN, pygame.KEYUP):
                self._handle_key_event(pygame, event.key, pressed=event.type == pygame.KEYDOWN)
            elif self._config.enable_gamepad:
                self._handle_joystick_event(pygame, event)

    def _handle_key_event(self, pygame, key_code: int, *, pressed: bool) -> None:
        name = pygame.key.name(key_code)
        if debug_enabled("input"):
            debug_log("input", "event=%s pressed=%s", name, pressed)
        if pressed:
            self._keyboard.press(name)
        else:
            self._keyboard.release(name)

    # ------------------------------------------------------------------
    # Joystick handling

    def _initialise_joystick(self, pygame, device_index: int | None = None) -> None:
        try:
            pygame.joystick.init()
        except pygame.error as exc:  # pragma: no cover - hardware dependent
            if debug_enabled("input"):
                debug_log("input", "joystick_init_failed=%s", exc)
            return

        count = pygame.joystick.get_count()
        if count <= 0:
            if debug_enabled("input"):
                debug_log("input", "joystick_none_available")
            return

        index = device_index if device_index is not None else self._config.joystick_index
        if not 0 <= index < count:
            index = 0
        try:
            joystick = pygame.joystick.Joystick(index)
            joystick.init()
        except pygame.error as exc:  # pragma: no cover - hardware dependent
            if debug_enabled("input"):
                debug_log("input", "joystick_open_failed index=%d error=%s", index, exc)
            return

        self._joystick = joystick
        self._joystick_instance_id = joystick.get_instance_id()
        self._reset_joystick_inputs()
        if debug_enabled("input"):
            debug_log("input", "joystick_attached index=%d name=%s", index, joystick.get_name())

    def _detach_joystick(self) -> None:
        if self._joystick is None:
            return
        if debug_enabled("input"):
            debug_log("input", "joystick_detached id=%s", self._joystick_instance_id)
        self._joystick.quit()
        self._joystick = None
        self._joystick_instance_id = None
        self._reset_joystick_inputs()

    def _reset_joystick_inputs(self) -> None:
        self._joystick_axes = {"x": 0.0, "y": 0.0}
        self._joystick_hat = (0, 0)
        self._joystick_pressed_buttons = set()
        self._gamepad_state.reset()

    def _handle_joystick_event(self, pygame, event) -> None:
        if event.type == pygame.JOYDEVICEADDED:
            if self._joystick is None:
                self._initialise_joystick(pygame, getattr(event, "device_index", None))
            return

        instance_id = getattr(event, "instance_id", getattr(event, "joy", None))
        if instance_id is None or instance_id != self._joystick_instance_id:
            return

        if event.type == pygame.JOYDEVICEREMOVED:
            self._detach_joystick()
            return
        if event.type == pygame.JOYAXISMOTION and event.axis in (0, 1):
            self._joystick_axes["x" if event.axis == 0 else "y"] = event.value
        elif event.type == pygame.JOYHATMOTION:
            self._joystick_hat = event.value
        elif event.type == pygame.JOYBUTTONDOWN:
            self._joystick_pressed_buttons.add(event.button)
        elif event.type == pygame.JOYBUTTONUP:
            self._joystick_pressed_buttons.discard(event.button)
        else:
            return
        self._update_gamepad_state()

    def _update_gamepad_state(self) -> None:
        x_axis = self._joystick_axes["x"]
        y_axis = self._joystick_axes["y"]
        hat_x, hat_y = self._joystick_hat
        self._gamepad_state.set_directions(
            left=x_axis < -_JOYSTICK_AXIS_THRESHOLD or hat_x < 0,
            right=x_axis > _JOYSTICK_AXIS_THRESHOLD or hat_x > 0,
            up=y_axis < -_JOYSTICK_AXIS_THRESHOLD or hat_y > 0,
            down=y_axis > _JOYSTICK_AXIS_THRESHOLD or hat_y < 0,
        )
        self._gamepad_state.set_button(bool(self._joystick_pressed_buttons))

    # ------------------------------------------------------------------
    # Diagnostics

    def _describe_fault(self, machine: Machine, exc: Exception) -> str:
        pc = machine.cpu.state.pc
        if isinstance(exc, ProgramCounterError):
            message = f"CPU fault at pc={exc.pc:04X}: {exc}"
        else:
            opcode = machine.last_opcode()
            opcode_repr = "----" if opcode is None else f"{opcode:04X}"
            message = f"CPU fault at pc={(pc - 2) & 0xFFFF:04X} opcode={opcode_repr}: {exc}"
        debug_log("trace", message)
        if self._trace_recorder is not None:
            self._trace_recorder.dump("trace", limit=32)
        return message


_JOYSTICK_AXIS_THRESHOLD = 0.5
