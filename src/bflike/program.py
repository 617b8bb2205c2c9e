from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .token import TokenInfo

# ---------------- Instruction nodes ----------------

@dataclass(frozen=True)
class Move:
    n: int  # net >/<, never 0


@dataclass(frozen=True)
class Add:
    n: int  # net +/- on current cell, never 0


@dataclass(frozen=True)
class Output:
    pass


@dataclass(frozen=True)
class Input:
    pass


@dataclass(frozen=True)
class Loop:
    body: Tuple["Instruction", ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, 'body', tuple(self.body))


Instruction = Union[Move, Add, Output, Input, Loop]


# ---------------- Annotated nodes ----------------

@dataclass(frozen=True)
class Nop:
    pass  # a folded run whose increments and decrements cancel out


@dataclass(frozen=True)
class AnnotatedLoop:
    body: Tuple["AnnotatedInstruction", ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, 'body', tuple(self.body))


AnnotatedKind = Union[Move, Add, Output, Input, AnnotatedLoop, Nop]


@dataclass(frozen=True)
class AnnotatedInstruction:
    """An instruction together with every source token that produced it."""

    kind: AnnotatedKind
    tokens: Tuple[TokenInfo, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, 'tokens', tuple(self.tokens))

    def as_instruction(self) -> Optional[Instruction]:
        kind = self.kind
        if isinstance(kind, Nop):
            return None
        if isinstance(kind, AnnotatedLoop):
            return Loop(_strip_annotations(kind.body))
        return kind


def _strip_annotations(instructions: Iterable[AnnotatedInstruction]) -> Tuple[Instruction, ...]:
    out: List[Instruction] = []
    for inst in instructions:
        plain = inst.as_instruction()
        if plain is not None:
            out.append(plain)
    return tuple(out)


class AnnotatedProgram:
    def __init__(self, instructions: Iterable[AnnotatedInstruction] = ()):
        self._instructions = tuple(instructions)

    @property
    def instructions(self) -> Tuple[AnnotatedInstruction, ...]:
        return self._instructions

    def as_program(self) -> Program:
        return Program(_strip_annotations(self._instructions))

    def __repr__(self) -> str:
        return f"AnnotatedProgram({list(self._instructions)!r})"


# ---------------- Program and addressing ----------------

class ProgramIndex:
    """
    Path to one instruction of a program.

    Each element selects an index into the instruction sequence at its depth;
    every element but the last must select a Loop, whose body the next element
    indexes into.
    """

    def __init__(self, path: Iterable[int] = ()):
        self.path: List[int] = list(path)

    def step_in(self) -> None:
        """Point to the first instruction one level deeper."""
        self.path.append(0)

    def step_out(self) -> bool:
        """Point back to the enclosing level. Returns False once nothing is left."""
        self.path.pop()
        return bool(self.path)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ProgramIndex):
            return self.path == other.path
        return NotImplemented

    def __lt__(self, other: ProgramIndex) -> bool:
        return self.path < other.path

    def __hash__(self) -> int:
        return hash(tuple(self.path))

    def __len__(self) -> int:
        return len(self.path)

    def __repr__(self) -> str:
        return f"ProgramIndex({self.path!r})"

    def copy(self) -> ProgramIndex:
        return ProgramIndex(self.path)


def _instruction_at(instructions: Sequence[Instruction], path: Sequence[int]) -> Instruction:
    if not path:
        raise AssertionError('index must not be empty')
    head, tail = path[0], path[1:]
    if head < 0:
        raise IndexError(f'negative program index {head}')
    inst = instructions[head]
    if not tail:
        return inst
    if not isinstance(inst, Loop):
        raise AssertionError('recursive index points to non-loop instruction')
    return _instruction_at(inst.body, tail)


def _next_index(instructions: Sequence[Instruction], path: List[int], depth: int) -> bool:
    if depth >= len(path):
        raise AssertionError('index must not be empty')
    head = path[depth]
    if depth == len(path) - 1:
        if head + 1 < len(instructions):
            path[depth] = head + 1
            return True
        return False
    inst = instructions[head]
    if not isinstance(inst, Loop):
        raise AssertionError('recursive index points to non-loop instruction')
    return _next_index(inst.body, path, depth + 1)


class Program:
    """A parsed program. Instructions are addressed with ``ProgramIndex``."""

    def __init__(self, instructions: Iterable[Instruction] = ()):
        self._instructions = tuple(instructions)

    @property
    def instructions(self) -> Tuple[Instruction, ...]:
        return self._instructions

    def first_index(self) -> Optional[ProgramIndex]:
        if not self._instructions:
            return None
        return ProgramIndex([0])

    def step_index(self, index: ProgramIndex) -> bool:
        """
        Move ``index`` to the next sibling instruction.

        Returns False, leaving ``index`` untouched, when it already points at
        the last instruction of its sequence. Never steps into a loop body.
        """
        return _next_index(self._instructions, index.path, 0)

    def __getitem__(self, index: ProgramIndex) -> Instruction:
        return _instruction_at(self._instructions, index.path)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Program):
            return self._instructions == other._instructions
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._instructions)

    def __len__(self) -> int:
        return len(self._instructions)

    def __repr__(self) -> str:
        return f"Program({list(self._instructions)!r})"
