"""
Token model shared by every tokenizer.

A tokenizer turns source text into a stream of ``TokenInfo`` values. Each one
carries either a ``Token`` or ``None`` (end of stream), plus the position where
it was found, counted in characters from the start of the source.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Protocol


class TokenType(Enum):
    PINC = auto()       # Brainfuck: '>'
    PDEC = auto()       # Brainfuck: '<'
    DINC = auto()       # Brainfuck: '+'
    DDEC = auto()       # Brainfuck: '-'
    OUTPUT = auto()     # Brainfuck: '.'
    INPUT = auto()      # Brainfuck: ','
    LOOP_HEAD = auto()  # Brainfuck: '['
    LOOP_TAIL = auto()  # Brainfuck: ']'


@dataclass(frozen=True)
class Token:
    token_type: TokenType
    token_str: str


@dataclass(frozen=True)
class TokenInfo:
    token: Optional[Token]  # None means end of stream
    pos_in_chars: int

    @property
    def token_type(self) -> Optional[TokenType]:
        return None if self.token is None else self.token.token_type

    @property
    def token_str(self) -> Optional[str]:
        return None if self.token is None else self.token.token_str

    @property
    def is_eof(self) -> bool:
        return self.token is None


class TokenStream(Protocol):
    def next(self) -> TokenInfo:
        """Return the next token, or an end-of-stream ``TokenInfo``.

        Raises ``BFParseError`` when the tokenizer itself rejects the input.
        """
        ...


class Tokenizer(Protocol):
    def token_stream(self, source: str) -> TokenStream:
        ...
