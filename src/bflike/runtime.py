"""
Program runtime.

``Runtime`` executes one instruction at a time. Two drivers sit on top of it:
``Runner`` walks the whole program at once, ``StepRunner`` executes a single
instruction per ``step()`` call and exposes the interpreter state in between.
"""

from __future__ import annotations

import logging

from dataclasses import dataclass
from typing import BinaryIO, Optional, Sequence, Tuple, Union

from .errors import end_of_input, runtime_io_error
from .program import Add, Input, Instruction, Loop, Move, Output, Program, ProgramIndex
from .state import DEFAULT_MEMSIZE, Memory, MemorySize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Next:
    pass  # continue with the following instruction


@dataclass(frozen=True)
class StepIn:
    body: Tuple[Instruction, ...]  # loop condition held; run this body, then re-test


NextAction = Union[Next, StepIn]

_NEXT = Next()


class Runtime:
    """Pointer, memory and byte streams of a running program."""

    def __init__(self, input: BinaryIO, output: BinaryIO, memsize: MemorySize = DEFAULT_MEMSIZE):
        self.input = input
        self.output = output
        self.memory = Memory(memsize)
        self.pointer = 0

    def _input(self) -> None:
        self.memory.get(self.pointer)  # bounds check before consuming input
        try:
            data = self.input.read(1)
        except OSError as e:
            raise runtime_io_error(e) from e
        if not data:
            raise end_of_input()
        self.memory.set(self.pointer, data[0])

    def _output(self) -> None:
        value = self.memory.get(self.pointer)
        try:
            written = self.output.write(bytes((value,)))
        except OSError as e:
            raise runtime_io_error(e) from e
        if written == 0:
            raise runtime_io_error('failed to write whole buffer')

    def exec_one(self, inst: Instruction) -> NextAction:
        """
        Execute ``inst`` and tell the caller what to run next.

        A Loop whose current cell is non-zero yields ``StepIn`` with its body;
        everything else yields ``Next``. Memory and I/O failures raise
        ``BFRuntimeError`` subclasses.
        """
        if isinstance(inst, Move):
            self.pointer += inst.n
        elif isinstance(inst, Add):
            self.memory.add(self.pointer, inst.n)
        elif isinstance(inst, Output):
            self._output()
        elif isinstance(inst, Input):
            self._input()
        elif isinstance(inst, Loop):
            if self.memory.get(self.pointer) != 0:
                return StepIn(inst.body)
        else:
            raise TypeError(f'not an instruction: {inst!r}')
        return _NEXT

    def get_data_at(self, address: int) -> Optional[int]:
        if not self.memory.in_bounds(address):
            return None
        return self.memory.peek(address)

    def set_data_at(self, address: int, value: int) -> bool:
        if not self.memory.in_bounds(address):
            return False
        self.memory.set(address, value)
        return True


class Runner:
    """Runs an entire program at once."""

    def __init__(
        self,
        program: Program,
        input: BinaryIO,
        output: BinaryIO,
        memsize: MemorySize = DEFAULT_MEMSIZE,
    ):
        self.program = program
        self.runtime = Runtime(input, output, memsize)

    def run(self) -> None:
        logger.debug("running %d top-level instructions", len(self.program))
        self._run_internal(self.program.instructions)
        logger.debug("finished with pointer at %d", self.runtime.pointer)

    def _run_internal(self, instructions: Sequence[Instruction]) -> None:
        for inst in instructions:
            action = self.runtime.exec_one(inst)
            while isinstance(action, StepIn):
                self._run_internal(action.body)
                action = self.runtime.exec_one(inst)


class StepRunner:
    """
    Runs a program one instruction per ``step()`` call.

    Between steps the current index, instruction, pointer and memory cells can
    be inspected (and cells modified), which is what debuggers and
    visualizers need.
    """

    def __init__(
        self,
        program: Program,
        input: BinaryIO,
        output: BinaryIO,
        memsize: MemorySize = DEFAULT_MEMSIZE,
    ):
        self.program = program
        self.runtime = Runtime(input, output, memsize)
        self.index: Optional[ProgramIndex] = program.first_index()
        self.step_count = 0

    @property
    def current_instruction(self) -> Optional[Instruction]:
        if self.index is None:
            return None
        return self.program[self.index]

    @property
    def pointer(self) -> int:
        return self.runtime.pointer

    @property
    def memory(self) -> Memory:
        return self.runtime.memory

    def get_data_at(self, address: int) -> Optional[int]:
        """Cell value at ``address``, or None if it is outside the memory bounds."""
        return self.runtime.get_data_at(address)

    def set_data_at(self, address: int, value: int) -> bool:
        return self.runtime.set_data_at(address, value)

    def is_running(self) -> bool:
        return self.index is not None

    def step(self) -> None:
        """Execute the instruction at ``index``. Does nothing once the program has finished."""
        index = self.index
        if index is None:
            return
        action = self.runtime.exec_one(self.program[index])
        self.step_count += 1

        if isinstance(action, StepIn):
            if action.body:
                index.step_in()
                logger.debug("entered loop body at %r", index.path)
            # An empty body leaves the index on its loop, which re-tests on the next step.
            return

        # Stepping out lands on the enclosing Loop, which re-tests its condition next.
        if not self.program.step_index(index) and not index.step_out():
            self.index = None

    def run(self) -> None:
        while self.is_running():
            self.step()


def run(program: Program, input: BinaryIO, output: BinaryIO, memsize: MemorySize = DEFAULT_MEMSIZE) -> None:
    """Run ``program`` to completion. Same as ``Runner(...).run()``."""
    Runner(program, input, output, memsize).run()


def run_with_memsize(program: Program, input: BinaryIO, output: BinaryIO, memsize: MemorySize) -> None:
    Runner(program, input, output, memsize).run()
