from __future__ import annotations

import io

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .parser import Parser
from .predefined import LANGUAGES
from .program import Program
from .runtime import Runner
from .state import DEFAULT_MEMSIZE, BothUnbounded, Fixed, MemorySize, RightUnbounded


@dataclass(frozen=True)
class RunOptions:
    language: str = 'bf'
    memory_size: MemorySize = DEFAULT_MEMSIZE


@dataclass(frozen=True)
class RunResult:
    output: bytes
    pointer: int


def parse_memory_size(text: str) -> MemorySize:
    """
    Parse a memory size description.

    Accepted forms: ``N`` or ``fixed:N`` for a fixed size, ``right`` for
    right-unbounded memory and ``both`` for memory unbounded in both
    directions.
    """
    t = text.strip().lower()
    if t in ('right', 'right-unbounded'):
        return RightUnbounded()
    if t in ('both', 'both-unbounded'):
        return BothUnbounded()
    if t.startswith('fixed:'):
        t = t[len('fixed:'):]
    try:
        size = int(t)
    except ValueError:
        raise ValueError(f"Invalid memory size: {text!r} (expected N, fixed:N, right or both)") from None
    return Fixed(size)


def get_parser(language: str) -> Parser:
    try:
        module = LANGUAGES[language.lower()]
    except KeyError:
        known = ", ".join(sorted(LANGUAGES))
        raise ValueError(f"Unknown language: {language!r} (known: {known})") from None
    return module.parser()


def parse_string(source: str, *, options: Optional[RunOptions] = None) -> Program:
    opts = options or RunOptions()
    return get_parser(opts.language).parse_str(source)


def run_string(source: str, input_data: bytes = b"", *, options: Optional[RunOptions] = None) -> RunResult:
    opts = options or RunOptions()
    program = parse_string(source, options=opts)
    out = io.BytesIO()
    runner = Runner(program, io.BytesIO(input_data), out, opts.memory_size)
    runner.run()
    return RunResult(output=out.getvalue(), pointer=runner.runtime.pointer)


def run_file(
    path: str | Path,
    input_data: bytes = b"",
    *,
    options: Optional[RunOptions] = None,
    encoding: str = "utf-8",
) -> RunResult:
    p = Path(path)
    return run_string(p.read_text(encoding=encoding), input_data, options=options)
