"""
Parser: token stream -> Program.

Runs of pointer (or data) increments and decrements are folded into a single
Move (or Add) carrying their sum; runs that cancel out produce nothing (or a
Nop in the annotated tree). Loop nesting is tracked with an explicit stack of
frames, one per open loop.
"""

from __future__ import annotations

import logging

from dataclasses import dataclass, field
from typing import List, Optional, Union

from .errors import make_parse_io_error, unexpected_end_of_file, unexpected_end_of_loop
from .program import (
    Add,
    AnnotatedInstruction,
    AnnotatedLoop,
    AnnotatedProgram,
    Input,
    Instruction,
    Loop,
    Move,
    Nop,
    Output,
    Program,
)
from .token import TokenInfo, TokenStream, TokenType, Tokenizer

logger = logging.getLogger(__name__)

_AXES = {
    TokenType.PINC: (TokenType.PINC, TokenType.PDEC, Move, 1),
    TokenType.PDEC: (TokenType.PINC, TokenType.PDEC, Move, -1),
    TokenType.DINC: (TokenType.DINC, TokenType.DDEC, Add, 1),
    TokenType.DDEC: (TokenType.DINC, TokenType.DDEC, Add, -1),
}


class _ParseContext:
    """A token stream with room for one pushed-back token."""

    def __init__(self, token_stream: TokenStream):
        self.token_stream = token_stream
        self.unget_buf: Optional[TokenInfo] = None

    def next_token_info(self) -> TokenInfo:
        if self.unget_buf is not None:
            info, self.unget_buf = self.unget_buf, None
            return info
        return self.token_stream.next()

    def unget_token_info(self, info: TokenInfo) -> None:
        if self.unget_buf is not None:
            raise AssertionError('a token was already pushed back')
        self.unget_buf = info

    def fold_run(self, first: TokenInfo) -> tuple:
        """Fold the run started by ``first``. Returns (node_cls, operand, tokens)."""
        inc, dec, node_cls, operand = _AXES[first.token_type]
        tokens = [first]
        while True:
            info = self.next_token_info()
            token_type = info.token_type
            if token_type is inc:
                operand += 1
            elif token_type is dec:
                operand -= 1
            else:
                # anything else, EOF included, belongs to the caller
                self.unget_token_info(info)
                break
            tokens.append(info)
        return node_cls, operand, tokens


@dataclass
class _Frame:
    instructions: list = field(default_factory=list)
    head: Optional[TokenInfo] = None  # the LOOP_HEAD that opened this frame; None at top level


class Parser:
    """
    Parses the tokens of a ``Tokenizer`` into a ``Program``.

    Example:
        parser = Parser(SimpleTokenSpec('>', '<', '+', '-', '.', ',', '[', ']').to_tokenizer())
        parser.parse_str(",[.,]")  # Program([Input(), Loop((Output(), Input()))])
    """

    def __init__(self, tokenizer: Tokenizer):
        self.tokenizer = tokenizer

    def parse(self, reader) -> Program:
        """Parse a program read in full from a text or binary stream.

        Raises ``ParseIOError`` if the stream fails or is not UTF-8,
        otherwise whatever ``parse_str`` raises.
        """
        try:
            source = reader.read()
            if isinstance(source, (bytes, bytearray)):
                source = bytes(source).decode('utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise make_parse_io_error(e) from e
        return self.parse_str(source)

    def parse_str(self, source: str) -> Program:
        context = _ParseContext(self.tokenizer.token_stream(source))
        program = Program(self._parse_plain(context))
        logger.debug("parsed %d top-level instructions from %d chars", len(program), len(source))
        return program

    def parse_str_fat(self, source: str) -> AnnotatedProgram:
        """Parse keeping, for every instruction, the tokens it came from."""
        context = _ParseContext(self.tokenizer.token_stream(source))
        return AnnotatedProgram(self._parse_fat(context))

    @staticmethod
    def _parse_plain(context: _ParseContext) -> List[Instruction]:
        stack: List[_Frame] = [_Frame()]

        while True:
            info = context.next_token_info()
            token_type = info.token_type
            frame = stack[-1]

            if token_type in _AXES:
                node_cls, operand, _ = context.fold_run(info)
                if operand != 0:
                    frame.instructions.append(node_cls(operand))
            elif token_type is TokenType.OUTPUT:
                frame.instructions.append(Output())
            elif token_type is TokenType.INPUT:
                frame.instructions.append(Input())
            elif token_type is TokenType.LOOP_HEAD:
                stack.append(_Frame(head=info))
            elif token_type is TokenType.LOOP_TAIL:
                if len(stack) == 1:
                    raise unexpected_end_of_loop(info.pos_in_chars)
                stack.pop()
                stack[-1].instructions.append(Loop(frame.instructions))
            else:
                if len(stack) > 1:
                    raise unexpected_end_of_file(info.pos_in_chars)
                return frame.instructions

    @staticmethod
    def _parse_fat(context: _ParseContext) -> List[AnnotatedInstruction]:
        stack: List[_Frame] = [_Frame()]

        while True:
            info = context.next_token_info()
            token_type = info.token_type
            frame = stack[-1]

            if token_type in _AXES:
                node_cls, operand, tokens = context.fold_run(info)
                kind: Union[Move, Add, Nop] = node_cls(operand) if operand != 0 else Nop()
                frame.instructions.append(AnnotatedInstruction(kind, tokens))
            elif token_type is TokenType.OUTPUT:
                frame.instructions.append(AnnotatedInstruction(Output(), [info]))
            elif token_type is TokenType.INPUT:
                frame.instructions.append(AnnotatedInstruction(Input(), [info]))
            elif token_type is TokenType.LOOP_HEAD:
                stack.append(_Frame(head=info))
            elif token_type is TokenType.LOOP_TAIL:
                if len(stack) == 1:
                    raise unexpected_end_of_loop(info.pos_in_chars)
                stack.pop()
                if frame.head is None:
                    raise AssertionError('loop frame must have a head token')
                tokens = [frame.head]
                for sub in frame.instructions:
                    tokens.extend(sub.tokens)
                tokens.append(info)
                stack[-1].instructions.append(
                    AnnotatedInstruction(AnnotatedLoop(frame.instructions), tokens)
                )
            else:
                if len(stack) > 1:
                    raise unexpected_end_of_file(info.pos_in_chars)
                return frame.instructions
