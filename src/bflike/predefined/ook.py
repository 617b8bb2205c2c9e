"""
Ook!

Every instruction is a pair of the words ``Ook.``, ``Ook?`` and ``Ook!``;
anything between or around the words is ignored. ``Ook? Ook?`` has no meaning
and a trailing unpaired word is an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..errors import misc_parse_error
from ..parser import Parser
from ..token import Token, TokenInfo, TokenType

COMMON_TOKEN_PART = 'Ook'
_WORD_LEN = len(COMMON_TOKEN_PART) + 1

_PAIRS = {
    ('.', '?'): TokenType.PINC,
    ('?', '.'): TokenType.PDEC,
    ('.', '.'): TokenType.DINC,
    ('!', '!'): TokenType.DDEC,
    ('!', '.'): TokenType.OUTPUT,
    ('.', '!'): TokenType.INPUT,
    ('!', '?'): TokenType.LOOP_HEAD,
    ('?', '!'): TokenType.LOOP_TAIL,
}


@dataclass(frozen=True)
class _OokWord:
    mark: Optional[str]  # '.', '?' or '!'; None at end of source
    pos: int


class OokTokenStream:
    def __init__(self, source: str):
        self.source = source
        self.pos = 0

    def _next_word(self) -> _OokWord:
        source = self.source
        i = source.find(COMMON_TOKEN_PART, self.pos)
        while i != -1:
            mark = source[i + len(COMMON_TOKEN_PART):i + _WORD_LEN]
            if mark in ('.', '?', '!'):
                self.pos = i + _WORD_LEN
                return _OokWord(mark=mark, pos=i)
            i = source.find(COMMON_TOKEN_PART, i + 1)

        self.pos = len(source)
        return _OokWord(mark=None, pos=self.pos)

    def next(self) -> TokenInfo:
        first = self._next_word()
        if first.mark is None:
            return TokenInfo(token=None, pos_in_chars=first.pos)

        second = self._next_word()
        if second.mark is None:
            raise misc_parse_error(second.pos, 'Odd number of Ook tokens')

        token_type = _PAIRS.get((first.mark, second.mark))
        if token_type is None:
            raise misc_parse_error(first.pos, 'Ook? Ook?: bad Ook sequence')

        token_str = self.source[first.pos:second.pos + _WORD_LEN]
        return TokenInfo(token=Token(token_type, token_str), pos_in_chars=first.pos)


class OokTokenizer:
    def token_stream(self, source: str) -> OokTokenStream:
        return OokTokenStream(source)


def tokenizer() -> OokTokenizer:
    return OokTokenizer()


def parser() -> Parser:
    return Parser(tokenizer())
