"""Node head parsing: name or path, generics and selector suffixes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from mview.compiler.cursor import ParseContext, TokenCursor
from mview.compiler.lexer import TokenKind
from mview.compiler.spans import Span


@dataclass
class TagHead:
    segments: List[str]
    span: Span
    generics: Optional[str] = None
    classes: List[str] = field(default_factory=list)
    ids: List[str] = field(default_factory=list)
    selector_span: Optional[Span] = None

    @property
    def is_component(self) -> bool:
        """Paths and capitalised names are components, everything else elements."""
        return len(self.segments) > 1 or self.segments[0][:1].isupper()

    @property
    def name(self) -> str:
        return ".".join(self.segments)


class TagParser:
    def __init__(self, context: ParseContext) -> None:
        self.context = context

    def parse(self, cursor: TokenCursor) -> TagHead:
        first = cursor.parse_kebab()
        if first is None:
            self.context.fatal(
                f"expected an element or component name, found {cursor.describe_here()}",
                cursor.here(),
            )
        name, span = first
        head = TagHead(segments=[name], span=span)

        while cursor.peek_punct("::"):
            following = cursor.peek(1)
            if following is not None and following.kind is TokenKind.IDENT:
                cursor.index += 2
                head.segments.append(following.text)
                head.span = head.span.join(following.span)
            elif following is not None and following.is_punct("<"):
                cursor.next()
                break
            else:
                self.context.fatal(
                    "expected a path segment or `<` after `::`", cursor.here()
                )

        if len(head.segments) > 1 and "-" in name:
            self.context.sink.error(
                f"`{name}` is not a valid path segment", span
            )
        elif head.is_component and "-" in name:
            self.context.sink.error(
                f"component name `{name}` cannot contain hyphens",
                span,
                help=f"did you mean `{name.replace('-', '_')}`?",
            )

        if cursor.peek_punct("<"):
            head.generics = self._parse_generics(cursor)

        self._parse_selectors(cursor, head)
        return head

    def _parse_generics(self, cursor: TokenCursor) -> str:
        opening = cursor.next()
        depth = 1
        while not cursor.at_end:
            token = cursor.next()
            if token.is_punct("<"):
                depth += 1
            elif token.is_punct(">"):
                depth -= 1
                if depth == 0:
                    return self.context.text(Span(opening.span.end, token.span.start)).strip()
        self.context.fatal("unclosed generic argument list", opening.span)

    def _parse_selectors(self, cursor: TokenCursor, head: TagHead) -> None:
        while True:
            marker = cursor.peek()
            if marker is None or not (marker.is_punct(".") or marker.is_punct("#")):
                return
            cursor.next()
            parsed = cursor.parse_kebab()
            kind = "class" if marker.text == "." else "id"
            if parsed is None:
                self.context.sink.error(
                    f"expected {kind} name after `{marker.text}`", cursor.here()
                )
                continue
            value, span = parsed
            if kind == "class":
                head.classes.append(value)
            else:
                head.ids.append(value)
            selector = marker.span.join(span)
            head.selector_span = (
                selector if head.selector_span is None else head.selector_span.join(selector)
            )
