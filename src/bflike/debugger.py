"""
Step tracing on top of ``StepRunner``.

``trace`` drives a program one instruction at a time and hands a
``StepSnapshot`` of the interpreter to a callback before every step, the way
a visualizer redraws its memory table between steps.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Callable, List, Optional, Tuple

import numpy as np

from .program import Add, Input, Instruction, Loop, Move, Output, Program
from .runtime import StepRunner
from .state import DEFAULT_MEMSIZE, MemorySize


@dataclass(frozen=True)
class StepSnapshot:
    step_count: int
    index: Tuple[int, ...]
    instruction: Instruction
    pointer: int
    window_start: int
    window: np.ndarray


def describe_instruction(inst: Instruction) -> str:
    if isinstance(inst, Move):
        return f"{'>' if inst.n > 0 else '<'}{abs(inst.n)}"
    if isinstance(inst, Add):
        return f"{inst.n:+d}"
    if isinstance(inst, Output):
        return "."
    if isinstance(inst, Input):
        return ","
    if isinstance(inst, Loop):
        return f"[{len(inst.body)}]"
    return repr(inst)


def snapshot(runner: StepRunner, *, radius: int = 8) -> Optional[StepSnapshot]:
    """State of ``runner`` before its next step; None once it has finished."""
    if runner.index is None:
        return None
    start = runner.pointer - radius
    return StepSnapshot(
        step_count=runner.step_count,
        index=tuple(runner.index.path),
        instruction=runner.program[runner.index],
        pointer=runner.pointer,
        window_start=start,
        window=runner.memory.window(start, runner.pointer + radius + 1),
    )


def format_memory_window(snap: StepSnapshot) -> str:
    """Three aligned rows: addresses, cell values and a caret under the pointer."""
    addrs: List[str] = []
    vals: List[str] = []
    ptrs: List[str] = []
    for offset, val in enumerate(snap.window):
        address = snap.window_start + offset
        addrs.append(f"{address:4d}")
        vals.append(f"{int(val):4d}")
        ptrs.append("   ^" if address == snap.pointer else "    ")
    return "\n".join([" ".join(addrs), " ".join(vals), " ".join(ptrs).rstrip()])


def format_snapshot(snap: StepSnapshot) -> str:
    path = ".".join(str(i) for i in snap.index)
    head = f"step {snap.step_count:6d} @ {path:<12s} {describe_instruction(snap.instruction):<6s} ptr={snap.pointer}"
    return f"{head}\n{format_memory_window(snap)}"


def trace(
    program: Program,
    input: BinaryIO,
    output: BinaryIO,
    on_step: Callable[[StepSnapshot], None],
    *,
    memsize: MemorySize = DEFAULT_MEMSIZE,
    max_steps: Optional[int] = None,
    radius: int = 8,
) -> StepRunner:
    """
    Run ``program`` step by step, calling ``on_step`` before each step.

    Stops when the program finishes or after ``max_steps`` steps, and returns
    the runner so the caller can tell which happened (``is_running()``).
    Runtime errors propagate unchanged.
    """
    runner = StepRunner(program, input, output, memsize)
    while runner.is_running():
        if max_steps is not None and runner.step_count >= max_steps:
            break
        on_step(snapshot(runner, radius=radius))
        runner.step()
    return runner
