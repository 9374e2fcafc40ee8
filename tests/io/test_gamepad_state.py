"""Unit tests for the controller to keypad mapping."""

from __future__ import annotations

from pychip8.io import GamepadState, Keypad


def test_default_state_is_idle() -> None:
    keypad = Keypad()
    state = GamepadState()
    state.attach(keypad)

    assert state.pressed_keys() == set()
    assert not keypad.any_pressed()


def test_directions_drive_number_keys() -> None:
    keypad = Keypad()
    state = GamepadState()
    state.attach(keypad)

    state.set_directions(left=True, up=True)
    assert keypad.is_pressed(0x4)
    assert keypad.is_pressed(0x2)

    state.set_directions(left=False)
    assert not keypad.is_pressed(0x4)
    assert keypad.is_pressed(0x2)


def test_button_drives_key_five() -> None:
    keypad = Keypad()
    state = GamepadState()
    state.attach(keypad)

    state.set_button(True)
    assert keypad.is_pressed(0x5)
    state.set_button(False)
    assert not keypad.is_pressed(0x5)


def test_custom_mapping() -> None:
    keypad = Keypad()
    state = GamepadState(right_key=0xD, button_key=0xA)
    state.attach(keypad)

    state.set_directions(right=True)
    state.set_button(True)

    assert state.pressed_keys() == {0xD, 0xA}
    assert keypad.is_pressed(0xD)
    assert keypad.is_pressed(0xA)


def test_does_not_release_keys_it_never_pressed() -> None:
    keypad = Keypad()
    keypad.set_key(0x8, True)
    state = GamepadState()
    state.attach(keypad)

    state.set_directions(up=True)
    state.reset()

    assert keypad.is_pressed(0x8)
    assert not keypad.is_pressed(0x2)


def test_state_without_keypad_still_tracks_inputs() -> None:
    state = GamepadState()
    state.set_directions(down=True)
    assert state.pressed_keys() == {0x8}
