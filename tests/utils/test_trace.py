from types import SimpleNamespace

import pytest

from pychip8.utils.trace import TraceRecorder


def _state(pc: int, i: int = 0, **registers: int) -> SimpleNamespace:
    v = [0] * 16
    for name, value in registers.items():
        v[int(name[1:], 16)] = value
    return SimpleNamespace(pc=pc, i=i, v=v)


def test_trace_recorder_overwrites_old_entries():
    recorder = TraceRecorder(capacity=2)

    recorder.record_step(_state(0x200, v0=0x11), 0x6011, mnemonic="LD")
    recorder.record_step(_state(0x202, i=0x300), 0xA300, sp=1, mnemonic="LD")
    recorder.record_step(_state(0x204, vF=1), 0xF00A, delay=3, sound=2, awaiting_key=True, note="idle")

    lines = list(recorder.format_entries())
    assert len(lines) == 2
    assert "pc=0202" in lines[0]
    assert "I=0300 SP=01" in lines[0]
    assert "pc=0204" in lines[1]
    assert "DT=03 ST=02" in lines[1]
    assert "flags=KEY,idle" in lines[1]


def test_trace_recorder_handles_missing_opcode():
    recorder = TraceRecorder(1)
    recorder.record_step(_state(0xFFF), None, note="fault")
    lines = list(recorder.format_entries())
    assert len(lines) == 1
    assert "opcode=----" in lines[0]
    assert "flags=fault" in lines[0]


def test_entries_limit_and_clear():
    recorder = TraceRecorder(4)
    for offset in range(3):
        recorder.record_step(_state(0x200 + offset * 2), 0x0000)

    assert [entry.pc for entry in recorder.entries(2)] == [0x202, 0x204]
    assert recorder.last_entry().pc == 0x204

    recorder.clear()
    assert list(recorder.entries()) == []
    assert recorder.last_entry() is None


def test_invalid_capacity():
    with pytest.raises(ValueError):
        TraceRecorder(0)
