"""Key-value and boolean attributes."""

from typing import Optional

from mview.compiler.ast_nodes import AttributeRecord, BooleanAttr, KeyValue
from mview.compiler.attributes.base import AttributeParser
from mview.compiler.attributes.values import parse_value
from mview.compiler.cursor import ParseContext, TokenCursor
from mview.compiler.lexer import TokenKind


class KeyValueAttributeParser(AttributeParser):
    """Parses ``key=value`` and the bare boolean form ``key``."""

    def can_parse(self, cursor: TokenCursor) -> bool:
        token = cursor.peek()
        return token is not None and token.kind is TokenKind.IDENT

    def parse(
        self, cursor: TokenCursor, context: ParseContext
    ) -> Optional[AttributeRecord]:
        parsed = cursor.parse_kebab()
        if parsed is None:
            context.fatal(
                f"expected an attribute name, found {cursor.describe_here()}",
                cursor.here(),
            )
        key, span = parsed

        equals = cursor.eat_punct("=")
        if equals is None:
            return BooleanAttr(key=key, span=span)

        value = parse_value(cursor, context, equals, key)
        return KeyValue(key=key, value=value, span=span.join(value.span))
