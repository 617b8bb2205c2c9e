from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .token import Token, TokenInfo, TokenType

# Field order of the spec classes; also the construction order of the token table.
_FIELD_TYPES: Tuple[Tuple[str, TokenType], ...] = (
    ('ptr_inc', TokenType.PINC),
    ('ptr_dec', TokenType.PDEC),
    ('data_inc', TokenType.DINC),
    ('data_dec', TokenType.DDEC),
    ('output', TokenType.OUTPUT),
    ('input', TokenType.INPUT),
    ('loop_head', TokenType.LOOP_HEAD),
    ('loop_tail', TokenType.LOOP_TAIL),
)


@dataclass(frozen=True)
class _SimpleTokenDef:
    token: str
    char_count: int
    token_type: TokenType


def _make_def(symbol: Any, token_type: TokenType) -> _SimpleTokenDef:
    token = str(symbol)
    if not token:
        raise ValueError(f'Empty symbol for {token_type.name}')
    return _SimpleTokenDef(token=token, char_count=len(token), token_type=token_type)


def _build_table(defs: Iterable[_SimpleTokenDef]) -> Tuple[_SimpleTokenDef, ...]:
    # Longest symbols first so that the first prefix hit is the longest match.
    # sorted() is stable: equal lengths keep construction order.
    return tuple(sorted(defs, key=lambda d: -d.char_count))


@dataclass(frozen=True)
class SimpleTokenSpec:
    """One symbol per token type. Any value is accepted and converted with ``str()``."""

    ptr_inc: Any
    ptr_dec: Any
    data_inc: Any
    data_dec: Any
    output: Any
    input: Any
    loop_head: Any
    loop_tail: Any

    def to_tokenizer(self) -> SimpleTokenizer:
        return SimpleTokenizer(_build_table(
            _make_def(getattr(self, name), token_type) for name, token_type in _FIELD_TYPES
        ))


@dataclass(frozen=True)
class SimpleMultiTokenSpec:
    """Like ``SimpleTokenSpec`` but every token type may have several symbols."""

    ptr_inc: Sequence[Any]
    ptr_dec: Sequence[Any]
    data_inc: Sequence[Any]
    data_dec: Sequence[Any]
    output: Sequence[Any]
    input: Sequence[Any]
    loop_head: Sequence[Any]
    loop_tail: Sequence[Any]

    def to_tokenizer(self) -> SimpleTokenizer:
        defs: List[_SimpleTokenDef] = []
        for name, token_type in _FIELD_TYPES:
            defs.extend(_make_def(symbol, token_type) for symbol in getattr(self, name))
        return SimpleTokenizer(_build_table(defs))


def _index_by_first_char(table: Tuple[_SimpleTokenDef, ...]) -> Dict[str, Tuple[_SimpleTokenDef, ...]]:
    # Each bucket keeps table order, so longest match still wins within it.
    index: Dict[str, List[_SimpleTokenDef]] = {}
    for d in table:
        index.setdefault(d.token[0], []).append(d)
    return {c: tuple(defs) for c, defs in index.items()}


class SimpleTokenizer:
    """A tokenizer where each symbol in the source maps to exactly one token type."""

    def __init__(self, token_table: Tuple[_SimpleTokenDef, ...]):
        self.token_table = token_table
        self._by_first_char = _index_by_first_char(token_table)

    def token_stream(self, source: str) -> SimpleTokenStream:
        return SimpleTokenStream(source, self._by_first_char)


class SimpleTokenStream:
    def __init__(self, source: str, by_first_char: Dict[str, Tuple[_SimpleTokenDef, ...]]):
        self.source = source
        self.by_first_char = by_first_char
        self.pos = 0

    def _find_token_at(self, pos: int) -> Optional[_SimpleTokenDef]:
        for d in self.by_first_char.get(self.source[pos], ()):
            if self.source.startswith(d.token, pos):
                return d
        return None

    def next(self) -> TokenInfo:
        source = self.source
        pos = self.pos
        while pos < len(source):
            d = self._find_token_at(pos)
            if d is not None:
                self.pos = pos + d.char_count
                return TokenInfo(token=Token(d.token_type, source[pos:self.pos]), pos_in_chars=pos)
            pos += 1

        # Nothing left to match; park the cursor at the end.
        self.pos = len(source)
        return TokenInfo(token=None, pos_in_chars=self.pos)
