"""
Regex tokenizer.

Every token type is described by a regular expression. The next token is the
one whose pattern matches earliest in the remaining text; when several
patterns match at the same position, the one defined first wins. Zero-width
matches never count as tokens. If no pattern matches anywhere, the rest of the
source is skipped and the stream ends.
"""

from __future__ import annotations

import re

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .errors import RegexErrorDescription, make_regex_errors
from .token import Token, TokenInfo, TokenType


@dataclass(frozen=True)
class _RegexTokenDef:
    token_type: TokenType
    regex: re.Pattern


class RegexTokenizer:
    def __init__(self, spec: Sequence[Tuple[TokenType, re.Pattern]]):
        self.token_defs = tuple(_RegexTokenDef(token_type, regex) for token_type, regex in spec)

    @classmethod
    def from_str_spec(cls, spec: Sequence[Tuple[TokenType, str]]) -> RegexTokenizer:
        """Compile ``(TokenType, pattern)`` pairs.

        Raises ``RegexErrors`` listing every pattern that failed, by index.
        A pattern matching the empty string is reported as a failure too,
        since it would never move the stream forward.
        """
        compiled: List[Tuple[TokenType, re.Pattern]] = []
        errors: List[RegexErrorDescription] = []

        for index, (token_type, pattern) in enumerate(spec):
            try:
                regex = re.compile(pattern)
            except re.error as e:
                errors.append(RegexErrorDescription(index=index, error=e))
                continue
            if regex.fullmatch('') is not None:
                errors.append(RegexErrorDescription(
                    index=index,
                    error=re.error('pattern matches the empty string', pattern=pattern),
                ))
                continue
            compiled.append((token_type, regex))

        if errors:
            raise make_regex_errors(errors)
        return cls(compiled)

    def token_stream(self, source: str) -> RegexTokenStream:
        return RegexTokenStream(source, self.token_defs)


def _first_nonempty_match(regex: re.Pattern, subtext: str) -> Optional[re.Match]:
    for m in regex.finditer(subtext):
        if m.end() > m.start():
            return m
    return None


class RegexTokenStream:
    def __init__(self, source: str, token_defs: Tuple[_RegexTokenDef, ...]):
        self.source = source
        self.token_defs = token_defs
        self.pos = 0

    def _next_match(self, subtext: str) -> Optional[Tuple[re.Match, _RegexTokenDef]]:
        best: Optional[Tuple[re.Match, _RegexTokenDef]] = None
        for d in self.token_defs:
            m = _first_nonempty_match(d.regex, subtext)
            # Strict comparison keeps the earlier definition on ties.
            if m is not None and (best is None or m.start() < best[0].start()):
                best = (m, d)
        return best

    def next(self) -> TokenInfo:
        # Patterns see the remainder as a string of its own, so '^' anchors at the cursor.
        subtext = self.source[self.pos:]
        found = self._next_match(subtext)
        if found is None:
            self.pos = len(self.source)
            return TokenInfo(token=None, pos_in_chars=self.pos)

        m, d = found
        start = self.pos + m.start()
        self.pos += m.end()
        return TokenInfo(token=Token(d.token_type, m.group(0)), pos_in_chars=start)
