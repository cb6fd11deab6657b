"""Main mview parser orchestrator."""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from mview.compiler.ast_nodes import (
    Block,
    Component,
    Doctype,
    Element,
    Node,
    Slot,
    Template,
    Text,
)
from mview.compiler.attributes import (
    AttributeParser,
    default_attribute_parsers,
    parse_attributes,
)
from mview.compiler.attributes.values import parse_bracketed, starts_bracketed
from mview.compiler.children import (
    COMPONENT,
    ELEMENT,
    ROOT,
    SLOT,
    ChildrenParser,
)
from mview.compiler.cursor import ParseContext, TokenCursor
from mview.compiler.diagnostics import DiagnosticSink
from mview.compiler.exceptions import MviewSyntaxError
from mview.compiler.lexer import Token, TokenKind, tokenize
from mview.compiler.spans import SourceMap, Span
from mview.compiler.tags import TagHead, TagParser

log = logging.getLogger(__name__)

__all__ = ["MviewParser", "MviewSyntaxError", "NodeParser"]


class NodeParser:
    """Recursive-descent parser for one invocation."""

    def __init__(
        self, context: ParseContext, attribute_parsers: Sequence[AttributeParser]
    ) -> None:
        self.context = context
        self.attribute_parsers = attribute_parsers
        self.tags = TagParser(context)
        self.children = ChildrenParser(context, self)

    def parse_sequence(self, cursor: TokenCursor, parent: str) -> List[Node]:
        nodes: List[Node] = []
        while True:
            token = cursor.peek()
            if token is None:
                return nodes
            node = self._parse_child(cursor, token, parent)
            if node is not None:
                nodes.append(node)

    def _parse_child(
        self, cursor: TokenCursor, token: Token, parent: str
    ) -> Optional[Node]:
        if token.kind is TokenKind.STRING:
            cursor.next()
            return Text(text=token.text, span=token.span)

        if token.kind in (TokenKind.NUMBER, TokenKind.BOOL):
            cursor.next()
            self.context.sink.error(
                f"only string literals are allowed as children, found {token.kind.value} "
                f"literal `{token.text}`",
                token.span,
                help=f'write "{token.text}" or wrap the value in braces: {{{token.text}}}',
            )
            return None

        if token.is_group("{"):
            cursor.next()
            return Block(text=self.context.text(token.inner), span=token.span)  # type: ignore[attr-defined]

        if starts_bracketed(cursor):
            return parse_bracketed(cursor, self.context)

        if token.is_punct("!"):
            return self._parse_doctype(cursor)

        if token.is_ident("slot") and cursor.peek_punct(":", 1):
            return self._parse_slot(cursor, parent)

        return self._parse_element(cursor)

    def _parse_doctype(self, cursor: TokenCursor) -> Doctype:
        bang = cursor.next()
        doctype = cursor.peek()
        html = cursor.peek(1)
        terminator = cursor.peek(2)
        if not (
            doctype is not None
            and doctype.is_ident("DOCTYPE")
            and html is not None
            and html.is_ident("html")
            and terminator is not None
            and terminator.is_punct(";")
        ):
            self.context.fatal("expected `!DOCTYPE html;`", bang.span)
        cursor.index += 3
        return Doctype(span=bang.span.join(terminator.span))

    def _parse_element(self, cursor: TokenCursor) -> Element:
        head = self.tags.parse(cursor)
        attributes = parse_attributes(cursor, self.context, self.attribute_parsers)
        node_class = Component if head.is_component else Element
        node = node_class(
            name=head.name,
            span=head.span,
            generics=head.generics,
            classes=head.classes,
            ids=head.ids,
            attributes=attributes,
        )
        owner = COMPONENT if head.is_component else ELEMENT
        self._parse_children_or_terminator(cursor, node, owner)
        return node

    def _parse_slot(self, cursor: TokenCursor, parent: str) -> Optional[Slot]:
        keyword = cursor.next()
        cursor.next()
        head = self.tags.parse(cursor)
        self._check_slot_head(head)
        attributes = parse_attributes(cursor, self.context, self.attribute_parsers)
        slot = Slot(name=head.name, span=keyword.span.join(head.span), attributes=attributes)
        self._parse_children_or_terminator(cursor, slot, SLOT)

        if parent == ROOT:
            self.context.sink.error(
                f"slot `{slot.name}` must be a child of a component", slot.span
            )
            return None
        if parent == SLOT:
            self.context.sink.error(
                f"slot `{slot.name}` cannot be passed directly to another slot",
                slot.span,
                help="wrap it in the component that declares the slot",
            )
            return None
        return slot

    def _check_slot_head(self, head: TagHead) -> None:
        if not head.is_component:
            self.context.sink.error(
                f"slot name `{head.name}` must be a capitalised type name", head.span
            )
        if head.generics is not None:
            self.context.sink.error("slots do not accept generic arguments", head.span)
        if head.selector_span is not None:
            self.context.sink.error(
                "slots do not accept `.class` or `#id` selectors", head.selector_span
            )

    def _parse_children_or_terminator(
        self, cursor: TokenCursor, node: Union[Element, Slot], owner: str
    ) -> None:
        if self.children.starts_children(cursor):
            node.children = self.children.parse(cursor, owner, node.name)
            return
        terminator = cursor.eat_punct(";")
        if terminator is not None:
            node.self_closing = True
            return
        self.context.fatal(
            f"expected children or `;` after `{node.name}`, found {cursor.describe_here()}",
            cursor.here(),
        )


class MviewParser:
    """Main parser orchestrator."""

    def __init__(self) -> None:
        # Attribute parser chain
        self.attribute_parsers: List[AttributeParser] = default_attribute_parsers()

    def parse_file(self, file_path: Path) -> Template:
        """Parse an mview markup file."""
        with open(file_path, "r", encoding="utf-8") as f:
            content = f.read()

        return self.parse(content, str(file_path))

    def parse(
        self,
        content: str,
        file_path: str = "",
        sink: Optional[DiagnosticSink] = None,
    ) -> Template:
        """Parse markup into a template.

        Fatal problems raise ``MviewSyntaxError``; recoverable ones are
        collected in ``sink`` and also attached to the returned template.
        """
        if sink is None:
            sink = DiagnosticSink(SourceMap(content, file_path))
        context = ParseContext(source_map=sink.source_map, sink=sink)

        tokens: List[Token] = tokenize(content, file_path)
        end = Span(len(content), len(content))
        nodes = NodeParser(context, self.attribute_parsers).parse_sequence(
            TokenCursor(tokens, end), parent=ROOT
        )
        log.debug("parsed %d root nodes from %s", len(nodes), file_path or "<mview>")
        return Template(nodes=nodes, file_path=file_path, diagnostics=list(sink.diagnostics))
