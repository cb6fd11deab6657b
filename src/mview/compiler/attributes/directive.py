"""Colon-delimited directives (``on:click={...}``, ``class:{active}``...)."""

from typing import Optional

from mview.compiler.ast_nodes import DIRECTIVE_KINDS, AttributeRecord, Directive
from mview.compiler.attributes.base import AttributeParser
from mview.compiler.attributes.values import parse_value, placeholder
from mview.compiler.cursor import ParseContext, TokenCursor, kebab_from_tokens
from mview.compiler.lexer import TokenKind

# Directives whose name may be given as a string literal.
STRING_NAME_KINDS = ("class", "style")
# Directives that may be written without a value.
VALUELESS_KINDS = ("clone", "use")


class DirectiveAttributeParser(AttributeParser):
    def can_parse(self, cursor: TokenCursor) -> bool:
        token = cursor.peek()
        return (
            token is not None
            and token.kind is TokenKind.IDENT
            and cursor.peek_punct(":", 1)
        )

    def parse(
        self, cursor: TokenCursor, context: ParseContext
    ) -> Optional[AttributeRecord]:
        kind_token = cursor.next()
        colon = cursor.next()
        kind = kind_token.text
        span = kind_token.span.join(colon.span)

        known = kind in DIRECTIVE_KINDS
        if not known:
            context.sink.error(
                f"unknown directive `{kind}:`",
                kind_token.span,
                help="expected one of " + ", ".join(f"`{k}:`" for k in DIRECTIVE_KINDS),
            )

        subkey_literal = None
        shorthand = False
        name_token = cursor.peek()

        if name_token is not None and name_token.is_group("{"):
            cursor.next()
            span = span.join(name_token.span)
            subkey = kebab_from_tokens(name_token.tokens)  # type: ignore[attr-defined]
            shorthand = True
            if subkey is None:
                context.sink.error(
                    f"expected an identifier in `{kind}:{{...}}` shorthand",
                    name_token.span,
                )
                subkey = ""
            elif kind == "clone":
                context.sink.error(
                    "`clone:` does not support the shorthand form",
                    name_token.span,
                    help=f"write `clone:{subkey}`",
                )
        elif name_token is not None and name_token.kind is TokenKind.STRING:
            cursor.next()
            span = span.join(name_token.span)
            subkey = name_token.text
            subkey_literal = name_token.text
            if known and kind not in STRING_NAME_KINDS:
                context.sink.error(
                    f"`{kind}:` does not accept a string name; "
                    "only `class:` and `style:` do",
                    name_token.span,
                )
        else:
            parsed = cursor.parse_kebab()
            if parsed is None:
                context.sink.error(
                    f"expected a name after `{kind}:`, found {cursor.describe_here()}",
                    cursor.here(),
                )
                return None
            subkey, name_span = parsed
            if kind == "use":
                # Directive functions may be referenced by path.
                while cursor.peek_punct("::"):
                    segment = cursor.peek(1)
                    if segment is None or segment.kind is not TokenKind.IDENT:
                        break
                    cursor.index += 2
                    subkey = f"{subkey}.{segment.text}"
                    name_span = name_span.join(segment.span)
            span = span.join(name_span)

        value = None
        equals = cursor.eat_punct("=")
        if equals is not None:
            value = parse_value(cursor, context, equals, f"{kind}:{subkey}")
            span = span.join(value.span)
            if kind == "clone":
                context.sink.error("`clone:` does not take a value", equals.span)
            elif shorthand:
                context.sink.error(
                    f"shorthand `{kind}:{{{subkey}}}` cannot also take a value",
                    equals.span,
                )
        elif known and not shorthand and kind not in VALUELESS_KINDS:
            context.sink.error(
                f"`{kind}:{subkey}` requires a value",
                span,
                help=f"write `{kind}:{subkey}={{...}}` or `{kind}:{{{subkey}}}`",
            )
            value = placeholder(span)

        if not known:
            return None
        return Directive(
            kind=kind,
            subkey=subkey,
            span=span,
            value=value,
            shorthand=shorthand,
            subkey_literal=subkey_literal,
        )
