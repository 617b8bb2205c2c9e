#!/usr/bin/env python3
"""
Tests for run-to-completion execution and the memory size policies.
"""

import io
import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from bflike import (
    Add,
    BothUnbounded,
    EndOfInput,
    Fixed,
    Input,
    Loop,
    Move,
    OutOfMemoryBounds,
    Output,
    Program,
    RightUnbounded,
    RuntimeIOError,
    run,
    run_with_memsize,
)
from bflike.runtime import Next, Runtime, StepIn
from bflike.state import Memory

HELLO_WORLD = Program([
    Add(8),
    Loop([
        Move(1),
        Add(4),
        Loop([
            Move(1), Add(2), Move(1), Add(3), Move(1), Add(3), Move(1), Add(1), Move(-4), Add(-1),
        ]),
        Move(1), Add(1), Move(1), Add(1), Move(1), Add(-1), Move(2), Add(1),
        Loop([Move(-1)]),
        Move(-1),
        Add(-1),
    ]),
    Move(2), Output(),
    Move(1), Add(-3), Output(),
    Add(7), Output(), Output(),
    Add(3), Output(),
    Move(2), Output(),
    Move(-1), Add(-1), Output(),
    Move(-1), Output(),
    Add(3), Output(),
    Add(-6), Output(),
    Add(-8), Output(),
    Move(2), Add(1), Output(),
    Move(1), Add(2), Output(),
])


def execute(program, input_data=b"", memsize=None):
    out = io.BytesIO()
    if memsize is None:
        run(program, io.BytesIO(input_data), out)
    else:
        run_with_memsize(program, io.BytesIO(input_data), out, memsize)
    return out.getvalue()


def test_run_empty_program():
    assert execute(Program([])) == b""


def test_run_input_output():
    assert execute(Program([Input(), Output(), Input(), Output()]), bytes([42, 53])) == bytes([42, 53])


def test_run_add_wraps_around():
    assert execute(Program([Input(), Add(3), Output()]), bytes([254])) == bytes([1])
    assert execute(Program([Add(-1), Output()])) == bytes([255])
    assert execute(Program([Add(-513), Output()])) == bytes([255])


def test_run_hello_world():
    assert execute(HELLO_WORLD) == b"Hello World!\n"


def test_out_of_memory_bounds_left():
    with pytest.raises(OutOfMemoryBounds) as info:
        execute(Program([Move(-1), Add(1)]))
    assert info.value.address == -1


def test_out_of_memory_bounds_left_for_right_unbounded():
    with pytest.raises(OutOfMemoryBounds) as info:
        execute(Program([Move(-1), Add(1)]), memsize=RightUnbounded())
    assert info.value.address == -1


def test_negative_address_for_both_unbounded():
    assert execute(Program([Move(-1), Add(1), Output()]), memsize=BothUnbounded()) == bytes([1])


def test_out_of_memory_bounds_right():
    with pytest.raises(OutOfMemoryBounds) as info:
        execute(Program([Move(30000), Add(1)]))
    assert info.value.address == 30000


def test_positive_address_for_unbounded():
    program = Program([Move(65536), Add(1), Output()])
    assert execute(program, memsize=RightUnbounded()) == bytes([1])
    assert execute(program, memsize=BothUnbounded()) == bytes([1])


def test_fixed_zero_rejects_every_access():
    for inst in (Add(1), Output(), Input(), Loop([])):
        with pytest.raises(OutOfMemoryBounds) as info:
            execute(Program([inst]), b"x", memsize=Fixed(0))
        assert info.value.address == 0


def test_pointer_may_leave_bounds_without_access():
    assert execute(Program([Move(-5), Move(100000), Move(-99995)]), memsize=Fixed(1)) == b""


def test_failed_access_does_not_mutate():
    runtime = Runtime(io.BytesIO(b"z"), io.BytesIO(), Fixed(1))
    runtime.exec_one(Add(5))
    runtime.exec_one(Move(1))
    with pytest.raises(OutOfMemoryBounds):
        runtime.exec_one(Add(1))
    with pytest.raises(OutOfMemoryBounds):
        runtime.exec_one(Input())
    # the input byte was not consumed by the failed access
    assert runtime.input.read() == b"z"
    assert runtime.get_data_at(0) == 5


def test_exec_one_loop_actions():
    runtime = Runtime(io.BytesIO(), io.BytesIO())
    body = (Add(-1),)
    assert runtime.exec_one(Loop(body)) == Next()
    runtime.exec_one(Add(1))
    assert runtime.exec_one(Loop(body)) == StepIn(body)


def test_input_eof():
    with pytest.raises(EndOfInput) as info:
        execute(Program([Input()]))
    assert str(info.value) == "detected EOF"


class ErrorReader:
    def read(self, n=-1):
        raise OSError("test error")


class ErrorWriter:
    def write(self, data):
        raise OSError("test error")


class ZeroWriter:
    def write(self, data):
        return 0


def test_input_error():
    with pytest.raises(RuntimeIOError) as info:
        run(Program([Input()]), ErrorReader(), io.BytesIO())
    assert isinstance(info.value.__cause__, OSError)


def test_output_error():
    with pytest.raises(RuntimeIOError):
        run(Program([Output()]), io.BytesIO(), ErrorWriter())
    with pytest.raises(RuntimeIOError):
        run(Program([Output()]), io.BytesIO(), ZeroWriter())


def test_memory_grows_both_ways():
    memory = Memory(BothUnbounded())
    memory.set(-3, 7)
    memory.add(1000, -1)
    assert memory.get(-3) == 7
    assert memory.get(-1) == 0
    assert memory.get(1000) == 255
    assert list(memory.window(-4, 0)) == [0, 7, 0, 0]


def test_memory_rejects_negative_fixed_size():
    with pytest.raises(ValueError):
        Fixed(-1)


def test_inspecting_memory_does_not_grow_it():
    runtime = Runtime(io.BytesIO(), io.BytesIO(), RightUnbounded())
    assert runtime.get_data_at(10 ** 9) == 0
    assert runtime.get_data_at(-1) is None
    assert len(runtime.memory.right) == 0

    runtime = Runtime(io.BytesIO(), io.BytesIO(), BothUnbounded())
    assert runtime.get_data_at(-(10 ** 9)) == 0
    assert len(runtime.memory.left) == 0
    assert runtime.set_data_at(-2, 9)
    assert runtime.get_data_at(-2) == 9


def test_memory_bounds_by_policy():
    assert Memory(Fixed(3)).in_bounds(2)
    assert not Memory(Fixed(3)).in_bounds(3)
    assert not Memory(Fixed(3)).in_bounds(-1)
    assert Memory(RightUnbounded()).in_bounds(10 ** 12)
    assert not Memory(RightUnbounded()).in_bounds(-1)
    assert Memory(BothUnbounded()).in_bounds(-(10 ** 12))
