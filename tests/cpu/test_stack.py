"""Tests for the bounded call stack."""

from __future__ import annotations

import pytest

from pychip8.cpu import STACK_DEPTH, CallStack, StackError, StackOverflowError, StackUnderflowError


def test_push_pop_is_lifo() -> None:
    stack = CallStack()
    stack.push(0x202)
    stack.push(0x304)

    assert stack.peek() == 0x304
    assert stack.pop() == 0x304
    assert stack.pop() == 0x202
    assert stack.is_empty()


def test_overflow_leaves_stack_unchanged() -> None:
    stack = CallStack()
    for address in range(STACK_DEPTH):
        stack.push(0x200 + address * 2)
    before = stack.snapshot()

    with pytest.raises(StackOverflowError):
        stack.push(0x400)

    assert stack.is_full()
    assert stack.snapshot() == before


def test_underflow() -> None:
    stack = CallStack()
    with pytest.raises(StackUnderflowError):
        stack.pop()
    assert stack.peek() is None


def test_stack_errors_share_a_base() -> None:
    assert issubclass(StackOverflowError, StackError)
    assert issubclass(StackUnderflowError, StackError)


def test_invalid_capacity() -> None:
    with pytest.raises(ValueError):
        CallStack(0)
