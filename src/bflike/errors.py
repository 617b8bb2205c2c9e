from __future__ import annotations

import re

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


def _line_and_column(source: str, pos_in_chars: int) -> Tuple[int, int]:
    # 1-based line and column of a char offset; an offset past the end sits on the last line.
    head = source[:pos_in_chars]
    line = head.count('\n') + 1
    column = pos_in_chars - (head.rfind('\n') + 1) + 1
    return line, column


def _build_context(lines: List[str], line_no_1: int, column: int, *, context: int = 2) -> str:
    idx = max(1, min(line_no_1, len(lines)))
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
        if i == idx:
            out.append(f"  {'':4s} | {' ' * (column - 1)}^")
    return "\n".join(out)


def _hint_for(error: BFParseError) -> Optional[str]:
    if isinstance(error, UnexpectedEndOfFile):
        return 'A loop was opened but never closed. Check for a missing loop tail.'
    if isinstance(error, UnexpectedEndOfLoop):
        return 'A loop tail appeared outside of any loop. Check for a missing loop head.'
    if isinstance(error, MiscParseError):
        if re.search(r'odd number', error.detail, re.IGNORECASE):
            return 'Tokens of this language come in pairs; the last one has no partner.'
        return None
    return None


@dataclass
class BFError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


# ---------------- Parse errors ----------------

@dataclass
class BFParseError(BFError):
    pos_in_chars: int

    def describe(self, source: str) -> str:
        """Render the error with line/column and the surrounding source lines."""
        line, column = _line_and_column(source, self.pos_in_chars)
        ctx = _build_context(source.split('\n'), line, column)
        hint = _hint_for(self)
        hint_block = f"\nHint: {hint}" if hint else ""
        return f"ParseError: {self.message} (line {line}, column {column})\n{ctx}{hint_block}"


@dataclass
class UnexpectedEndOfFile(BFParseError):
    pass


@dataclass
class UnexpectedEndOfLoop(BFParseError):
    pass


@dataclass
class MiscParseError(BFParseError):
    detail: str


def unexpected_end_of_file(pos_in_chars: int) -> UnexpectedEndOfFile:
    return UnexpectedEndOfFile(message=f"{pos_in_chars}: Unexpected end-of-file", pos_in_chars=pos_in_chars)


def unexpected_end_of_loop(pos_in_chars: int) -> UnexpectedEndOfLoop:
    return UnexpectedEndOfLoop(message=f"{pos_in_chars}: Unexpected end-of-loop", pos_in_chars=pos_in_chars)


def misc_parse_error(pos_in_chars: int, detail: str) -> MiscParseError:
    return MiscParseError(
        message=f"{pos_in_chars}: syntax error: {detail}",
        pos_in_chars=pos_in_chars,
        detail=detail,
    )


@dataclass
class ParseIOError(BFError):
    """The program source could not be read."""


def make_parse_io_error(cause: Exception) -> ParseIOError:
    return ParseIOError(message=str(cause))


@dataclass
class RegexErrorDescription:
    index: int
    error: re.error


@dataclass
class RegexErrors(BFError):
    descriptions: List[RegexErrorDescription] = field(default_factory=list)


def make_regex_errors(descriptions: List[RegexErrorDescription]) -> RegexErrors:
    parts = ", ".join(f"[{d.index}] {d.error}" for d in descriptions)
    return RegexErrors(message=f"Regex errors: {parts}", descriptions=list(descriptions))


# ---------------- Runtime errors ----------------

@dataclass
class BFRuntimeError(BFError):
    pass


@dataclass
class OutOfMemoryBounds(BFRuntimeError):
    address: int


@dataclass
class EndOfInput(BFRuntimeError):
    pass


@dataclass
class RuntimeIOError(BFRuntimeError):
    pass


def out_of_memory_bounds(address: int) -> OutOfMemoryBounds:
    return OutOfMemoryBounds(message=f"out of memory bounds [{address}]", address=address)


def end_of_input() -> EndOfInput:
    return EndOfInput(message="detected EOF")


def runtime_io_error(cause: object) -> RuntimeIOError:
    return RuntimeIOError(message=f"IO error: {cause}")
