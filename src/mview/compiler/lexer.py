"""Lexical scanner for mview markup.

Splits source text into token trees: parenthesised, braced and bracketed
groups are kept as single ``Group`` tokens holding their nested tokens, so the
parsers can treat them as opaque units and re-enter them explicitly.

Two modes are used. Markup mode (top level and children groups) skips ``//``
and ``/* */`` comments. Host mode (brackets, and braces holding a Python
expression) skips ``#`` comments instead.

A brace is a Python block when it stands where a value or a child is
expected: right after ``=``, or at the start of a node. A brace that follows
a node head is markup (children or a ``{name}`` shorthand), so ``#id``
selectors and markup comments keep working inside ``{ ... }`` children.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field
from typing import List, NoReturn, Optional, Tuple

from mview.compiler.exceptions import MviewLexError
from mview.compiler.spans import SourceMap, Span

log = logging.getLogger(__name__)


class TokenKind(enum.Enum):
    IDENT = "identifier"
    PUNCT = "punctuation"
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    GROUP = "group"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    span: Span

    def is_punct(self, text: str) -> bool:
        return self.kind is TokenKind.PUNCT and self.text == text

    def is_ident(self, text: Optional[str] = None) -> bool:
        return self.kind is TokenKind.IDENT and (text is None or self.text == text)

    def is_group(self, delimiter: Optional[str] = None) -> bool:
        return False

    @property
    def is_literal(self) -> bool:
        return self.kind in (TokenKind.STRING, TokenKind.NUMBER, TokenKind.BOOL)

    def describe(self) -> str:
        return f"`{self.text}`"


@dataclass(frozen=True)
class Group(Token):
    """A delimited group; ``span`` covers the delimiters, ``inner`` the content."""

    delimiter: str = "("
    tokens: Tuple[Token, ...] = field(default_factory=tuple)
    inner: Span = Span(0, 0)

    def is_group(self, delimiter: Optional[str] = None) -> bool:
        return delimiter is None or self.delimiter == delimiter

    def describe(self) -> str:
        return f"`{self.delimiter}...{DELIMITERS[self.delimiter]}`"


DELIMITERS = {"(": ")", "{": "}", "[": "]"}
_OPEN_FOR = {v: k for k, v in DELIMITERS.items()}

BOOL_WORDS = {"true", "false", "True", "False"}

_WHITESPACE = re.compile(r"\s+")
_LINE_COMMENT = re.compile(r"//[^\n]*")
_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_HOST_COMMENT = re.compile(r"#[^\n]*")
_STRING = re.compile(
    r"(?:[rRbBuUfF]{1,2})?"
    r"(?:'''(?:\\.|[^\\])*?'''|\"\"\"(?:\\.|[^\\])*?\"\"\"|"
    r"'(?:\\.|[^\\'\n])*'|\"(?:\\.|[^\\\"\n])*\")",
    re.DOTALL,
)
_STRING_START = re.compile(r"(?:[rRbBuUfF]{1,2})?['\"]")
_NUMBER = re.compile(
    r"0[xX][0-9a-fA-F_]+|0[oO][0-7_]+|0[bB][01_]+"
    r"|\d[\d_]*(?:\.\d[\d_]*)?(?:[eE][+-]?\d[\d_]*)?[jJ]?"
)
_IDENT = re.compile(r"[^\W\d]\w*")

MARKUP = "markup"
HOST = "host"


@dataclass
class _Frame:
    delimiter: str
    open_span: Span
    mode: str
    tokens: List[Token] = field(default_factory=list)
    # Markup position tracking, only meaningful in markup frames.
    at_node_start: bool = True
    expect_value: bool = False
    format_prefix: bool = False
    # Position this group was opened at, in its parent frame.
    opened_at_node_start: bool = False
    opened_as_value: bool = False

    def opening_mode(self, delimiter: str) -> str:
        if self.mode == HOST or delimiter == "[":
            return HOST
        if delimiter == "{" and (self.expect_value or self.at_node_start):
            return HOST
        return MARKUP

    def record_token(self, token: Token) -> None:
        if self.mode == HOST:
            return
        if self.expect_value:
            # `-` keeps waiting for the number of a negative literal.
            self.expect_value = token.is_punct("-")
            self.at_node_start = False
        elif token.is_punct("="):
            self.expect_value = True
            self.at_node_start = False
        elif token.is_punct(";"):
            self.at_node_start = True
        elif token.is_literal and self.at_node_start:
            pass
        else:
            self.format_prefix = self.at_node_start and token.is_ident("f")
            self.at_node_start = False
            return
        self.format_prefix = False

    def record_group(self, child: "_Frame", group: "Group") -> None:
        if self.mode == HOST:
            return
        if child.opened_as_value:
            self.expect_value = False
            self.at_node_start = False
        elif group.delimiter == "(":
            self.at_node_start = True
        elif group.delimiter == "[":
            self.at_node_start = child.opened_at_node_start or self.format_prefix
        elif child.opened_at_node_start:
            self.at_node_start = True
        else:
            self.at_node_start = not _is_kebab(group.tokens)
        self.format_prefix = False


def _is_kebab(tokens: Tuple[Token, ...]) -> bool:
    """True for ``ident(-segment)*``, the content of a ``{name}`` shorthand."""
    if not tokens or tokens[0].kind is not TokenKind.IDENT or len(tokens) % 2 == 0:
        return False
    pairs = zip(tokens[1::2], tokens[2::2])
    return all(
        dash.is_punct("-")
        and segment.kind in (TokenKind.IDENT, TokenKind.NUMBER, TokenKind.BOOL)
        for dash, segment in pairs
    )


def tokenize(source: str, file_path: str = "") -> List[Token]:
    """Tokenize markup into a list of token trees.

    Raises:
        MviewLexError: on unterminated literals or comments and on unbalanced
            delimiters.
    """
    return Lexer(source, file_path).tokenize()


class Lexer:
    def __init__(self, source: str, file_path: str = "") -> None:
        self.source = source
        self.source_map = SourceMap(source, file_path)
        self.pos = 0

    def tokenize(self) -> List[Token]:
        root = _Frame(delimiter="", open_span=Span(0, 0), mode=MARKUP)
        stack = [root]

        while True:
            frame = stack[-1]
            self._skip_trivia(frame.mode)
            if self.pos >= len(self.source):
                break

            char = self.source[self.pos]
            start = self.pos

            if char in DELIMITERS:
                self.pos += 1
                stack.append(
                    _Frame(
                        char,
                        Span(start, self.pos),
                        frame.opening_mode(char),
                        opened_at_node_start=frame.at_node_start,
                        opened_as_value=frame.expect_value,
                    )
                )
                continue

            if char in _OPEN_FOR:
                self.pos += 1
                if len(stack) == 1:
                    self._error(f"unexpected closing delimiter `{char}`", start)
                if _OPEN_FOR[char] != frame.delimiter:
                    self._error(
                        f"mismatched closing delimiter `{char}`, "
                        f"expected `{DELIMITERS[frame.delimiter]}`",
                        start,
                    )
                stack.pop()
                group = Group(
                    kind=TokenKind.GROUP,
                    text=self.source[frame.open_span.start : self.pos],
                    span=Span(frame.open_span.start, self.pos),
                    delimiter=frame.delimiter,
                    tokens=tuple(frame.tokens),
                    inner=Span(frame.open_span.end, start),
                )
                stack[-1].tokens.append(group)
                stack[-1].record_group(frame, group)
                continue

            token = self._scan_token(char, start)
            frame.tokens.append(token)
            frame.record_token(token)

        if len(stack) > 1:
            unclosed = stack[-1]
            self._error(
                f"unclosed delimiter `{unclosed.delimiter}`", unclosed.open_span.start
            )

        log.debug("lexed %d top-level tokens", len(root.tokens))
        return root.tokens

    def _skip_trivia(self, mode: str) -> None:
        while self.pos < len(self.source):
            match = _WHITESPACE.match(self.source, self.pos)
            if match:
                self.pos = match.end()
                continue
            if mode == HOST:
                match = _HOST_COMMENT.match(self.source, self.pos)
            elif self.source.startswith("/*", self.pos):
                match = _BLOCK_COMMENT.match(self.source, self.pos)
                if not match:
                    self._error("unterminated block comment", self.pos)
            else:
                match = _LINE_COMMENT.match(self.source, self.pos)
            if not match:
                return
            self.pos = match.end()

    def _scan_token(self, char: str, start: int) -> Token:
        if _STRING_START.match(self.source, start):
            match = _STRING.match(self.source, start)
            if not match:
                self._error("unterminated string literal", start)
            return self._make(TokenKind.STRING, match.end())

        match = _NUMBER.match(self.source, start)
        if match:
            return self._make(TokenKind.NUMBER, match.end())

        match = _IDENT.match(self.source, start)
        if match:
            word = match.group()
            kind = TokenKind.BOOL if word in BOOL_WORDS else TokenKind.IDENT
            return self._make(kind, match.end())

        if self.source.startswith("::", start):
            return self._make(TokenKind.PUNCT, start + 2)
        return self._make(TokenKind.PUNCT, start + 1)

    def _make(self, kind: TokenKind, end: int) -> Token:
        start = self.pos
        self.pos = end
        return Token(kind=kind, text=self.source[start:end], span=Span(start, end))

    def _error(self, message: str, offset: int) -> NoReturn:
        line, column = self.source_map.position(offset)
        raise MviewLexError(
            message,
            file_path=self.source_map.file_path,
            line=line,
            column=column,
            span=Span(offset, offset + 1),
        )
