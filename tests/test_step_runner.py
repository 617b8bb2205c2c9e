#!/usr/bin/env python3
"""
Tests for single-step execution.
"""

import io
import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from bflike import (
    Add,
    BothUnbounded,
    Fixed,
    Input,
    Loop,
    Move,
    OutOfMemoryBounds,
    Output,
    Program,
    ProgramIndex,
    Runner,
    StepRunner,
)
from bflike.predefined import brainfuck

HELLO_WORLD = "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]>>.>---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++."


def run_both(program, input_data=b"", memsize=Fixed(30000)):
    out_a = io.BytesIO()
    runner = Runner(program, io.BytesIO(input_data), out_a, memsize)
    runner.run()

    out_b = io.BytesIO()
    stepper = StepRunner(program, io.BytesIO(input_data), out_b, memsize)
    while stepper.is_running():
        stepper.step()
    return runner, out_a.getvalue(), stepper, out_b.getvalue()


def test_empty_program_is_not_running():
    stepper = StepRunner(Program([]), io.BytesIO(), io.BytesIO())
    assert not stepper.is_running()
    assert stepper.index is None
    assert stepper.current_instruction is None
    stepper.step()
    assert stepper.step_count == 0


def test_step_sequence():
    program = brainfuck.parser().parse_str(",[.,]")
    out = io.BytesIO()
    stepper = StepRunner(program, io.BytesIO(b"ab\x00"), out)

    seen = []
    while stepper.is_running():
        seen.append((tuple(stepper.index.path), stepper.current_instruction))
        stepper.step()

    loop = Loop([Output(), Input()])
    assert seen == [
        ((0,), Input()),
        ((1,), loop),
        ((1, 0), Output()),
        ((1, 1), Input()),
        ((1,), loop),
        ((1, 0), Output()),
        ((1, 1), Input()),
        ((1,), loop),
    ]
    assert out.getvalue() == b"ab"


def test_step_stops_on_error():
    program = Program([Move(-1), Add(1)])
    stepper = StepRunner(program, io.BytesIO(), io.BytesIO())
    stepper.step()
    assert stepper.pointer == -1
    with pytest.raises(OutOfMemoryBounds):
        stepper.step()
    # the failing instruction stays current
    assert stepper.current_instruction == Add(1)


def test_loop_skipped_when_zero():
    program = Program([Loop([Add(1)]), Output()])
    stepper = StepRunner(program, io.BytesIO(), io.BytesIO())
    stepper.step()
    assert stepper.index == ProgramIndex([1])


def test_empty_loop_body_retests():
    program = Program([Add(1), Loop([]), Output()])
    stepper = StepRunner(program, io.BytesIO(), io.BytesIO())
    stepper.step()
    stepper.step()
    # non-zero cell: the empty loop keeps re-testing
    assert stepper.index == ProgramIndex([1])
    stepper.set_data_at(0, 0)
    stepper.step()
    assert stepper.index == ProgramIndex([2])


def test_inspect_and_modify_memory():
    program = Program([Add(3), Move(1), Output()])
    out = io.BytesIO()
    stepper = StepRunner(program, io.BytesIO(), out, Fixed(2))
    stepper.step()
    assert stepper.get_data_at(0) == 3
    assert stepper.get_data_at(2) is None
    assert stepper.get_data_at(-1) is None
    assert stepper.set_data_at(1, 65)
    assert not stepper.set_data_at(5, 65)
    stepper.step()
    stepper.step()
    assert not stepper.is_running()
    assert out.getvalue() == b"A"
    assert stepper.step_count == 3


def test_nested_loops_step_out_to_parent():
    program = brainfuck.parser().parse_str("++[>++[>+<-]<-]")
    runner, _, stepper, _ = run_both(program)
    assert stepper.get_data_at(2) == 4
    assert runner.runtime.memory.get(2) == 4


def test_stepping_matches_running():
    sources = [
        (HELLO_WORLD, b""),
        (",[.,]", b"hello\x00"),
        (",>,<[->+<]>.", bytes([3, 4])),
        ("++++[>++++[>+>++<<-]<-]>>.>.", b""),
    ]
    for source, data in sources:
        program = brainfuck.parser().parse_str(source)
        runner, out_a, stepper, out_b = run_both(program, data)
        assert out_a == out_b
        assert runner.runtime.pointer == stepper.pointer
        assert (runner.runtime.memory.window(0, 64) == stepper.memory.window(0, 64)).all()


def test_stepping_matches_running_unbounded():
    program = brainfuck.parser().parse_str("<<+++[>++<-]>.<<<-.")
    runner, out_a, stepper, out_b = run_both(program, memsize=BothUnbounded())
    assert out_a == out_b == bytes([6, 255])
    assert (runner.runtime.memory.window(-8, 8) == stepper.memory.window(-8, 8)).all()
