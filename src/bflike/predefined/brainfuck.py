"""Classic Brainfuck: the eight single-character symbols."""

from __future__ import annotations

from ..lexer import SimpleTokenizer, SimpleTokenSpec
from ..parser import Parser

TOKEN_SPEC = SimpleTokenSpec(
    ptr_inc='>',
    ptr_dec='<',
    data_inc='+',
    data_dec='-',
    output='.',
    input=',',
    loop_head='[',
    loop_tail=']',
)


def tokenizer() -> SimpleTokenizer:
    return TOKEN_SPEC.to_tokenizer()


def parser() -> Parser:
    return Parser(tokenizer())
