"""Token cursor and per-invocation parse state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NoReturn, Optional, Sequence, Tuple

from mview.compiler.diagnostics import DiagnosticSink
from mview.compiler.lexer import Token, TokenKind
from mview.compiler.spans import SourceMap, Span

_KEBAB_SEGMENT_KINDS = (TokenKind.IDENT, TokenKind.NUMBER, TokenKind.BOOL)


@dataclass
class ParseContext:
    source_map: SourceMap
    sink: DiagnosticSink

    def text(self, span: Span) -> str:
        return self.source_map.text(span)

    def fatal(self, message: str, span: Span) -> NoReturn:
        self.sink.fatal(message, span)


class TokenCursor:
    """Forward-only view over the tokens of one group.

    ``end`` is the span reported when a parser runs off the end of the group:
    the closing delimiter, or the end of input at the top level.
    """

    def __init__(self, tokens: Sequence[Token], end: Span) -> None:
        self.tokens = tokens
        self.end = end
        self.index = 0

    @property
    def at_end(self) -> bool:
        return self.index >= len(self.tokens)

    def peek(self, offset: int = 0) -> Optional[Token]:
        index = self.index + offset
        if index < len(self.tokens):
            return self.tokens[index]
        return None

    def next(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def eat_punct(self, text: str) -> Optional[Token]:
        token = self.peek()
        if token is not None and token.is_punct(text):
            self.index += 1
            return token
        return None

    def peek_punct(self, text: str, offset: int = 0) -> bool:
        token = self.peek(offset)
        return token is not None and token.is_punct(text)

    def here(self) -> Span:
        """Span of the next token, or of the group end."""
        token = self.peek()
        return token.span if token is not None else self.end

    def describe_here(self) -> str:
        token = self.peek()
        return token.describe() if token is not None else "end of input"

    def parse_kebab(self) -> Optional[Tuple[str, Span]]:
        """Consume ``ident(-segment)*`` and return its joined text and span."""
        first = self.peek()
        if first is None or first.kind is not TokenKind.IDENT:
            return None
        self.index += 1
        text = first.text
        span = first.span
        while self.peek_punct("-"):
            segment = self.peek(1)
            if segment is None or segment.kind not in _KEBAB_SEGMENT_KINDS:
                break
            self.index += 2
            text = f"{text}-{segment.text}"
            span = span.join(segment.span)
        return text, span


def kebab_from_tokens(tokens: Sequence[Token]) -> Optional[str]:
    """Return the kebab identifier spelled by exactly ``tokens``, if any."""
    cursor = TokenCursor(tokens, Span(0, 0))
    parsed = cursor.parse_kebab()
    if parsed is None or not cursor.at_end:
        return None
    return parsed[0]


def is_shorthand_group(token: Optional[Token]) -> bool:
    return (
        token is not None
        and token.is_group("{")
        and kebab_from_tokens(token.tokens) is not None  # type: ignore[attr-defined]
    )
