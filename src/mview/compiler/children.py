"""Children block parsing: ``|params| ( ... )`` or ``{ ... }``."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Tuple

from mview.compiler.ast_nodes import ChildrenSpec
from mview.compiler.cursor import ParseContext, TokenCursor
from mview.compiler.lexer import Group, Token
from mview.compiler.spans import Span

if TYPE_CHECKING:
    from mview.compiler.parser import NodeParser

ROOT = "root"
ELEMENT = "element"
COMPONENT = "component"
SLOT = "slot"

# Stands in for a closure parameter that a lambda cannot accept.
PARAM_PLACEHOLDER = "_"


class ChildrenParser:
    def __init__(self, context: ParseContext, nodes: "NodeParser") -> None:
        self.context = context
        self.nodes = nodes

    def starts_children(self, cursor: TokenCursor) -> bool:
        token = cursor.peek()
        return token is not None and (
            token.is_group("(") or token.is_group("{") or token.is_punct("|")
        )

    def parse(self, cursor: TokenCursor, owner: str, owner_name: str) -> ChildrenSpec:
        """Parse the closure parameters, if any, and the delimited children."""
        params: Optional[str] = None
        params_span: Optional[Span] = None

        opening = cursor.eat_punct("|")
        if opening is not None:
            params, params_span = self._parse_params(cursor, opening.span)

        group = cursor.peek()
        if not isinstance(group, Group) or group.delimiter not in "({":
            where = "the closure parameters of " if opening is not None else ""
            self.context.fatal(
                f"expected children after {where}`{owner_name}`, "
                f"found {cursor.describe_here()}",
                cursor.here(),
            )
        cursor.next()

        inner = TokenCursor(group.tokens, Span(group.inner.end, group.span.end))
        nodes = self.nodes.parse_sequence(inner, parent=owner)
        return ChildrenSpec(nodes=nodes, params=params, params_span=params_span, span=group.span)

    def _parse_params(self, cursor: TokenCursor, opening: Span) -> Tuple[str, Span]:
        patterns: List[Token] = []
        at_param_start = True
        while not cursor.at_end:
            token = cursor.next()
            if token.is_punct("|"):
                inner = Span(opening.end, token.span.start)
                return self._params_text(inner, patterns), opening.join(token.span)
            if at_param_start and (token.is_group("(") or token.is_group("[")):
                patterns.append(token)
            at_param_start = token.is_punct(",")
        self.context.fatal("unclosed closure parameter list, expected `|`", opening)

    def _params_text(self, inner: Span, patterns: List[Token]) -> str:
        """Parameter text with every unpacking pattern reported and replaced."""
        pieces = []
        start = inner.start
        for pattern in patterns:
            self.context.sink.error(
                f"closure parameter `{pattern.text}` cannot be unpacked: "
                "Python lambdas take plain names only",
                pattern.span,
                help="take a single parameter and unpack it inside a `{...}` block",
            )
            pieces.append(self.context.text(Span(start, pattern.span.start)))
            pieces.append(PARAM_PLACEHOLDER)
            start = pattern.span.end
        pieces.append(self.context.text(Span(start, inner.end)))
        return "".join(pieces).strip()
