"""Attribute value parsing shared by key-value attributes and directives."""

from mview.compiler.ast_nodes import FORMAT_PREFIX, Block, Bracketed, Literal, Value
from mview.compiler.cursor import ParseContext, TokenCursor
from mview.compiler.lexer import Token, TokenKind
from mview.compiler.spans import Span

PLACEHOLDER = "..."

LITERAL_KINDS = {
    TokenKind.STRING: "str",
    TokenKind.NUMBER: "number",
    TokenKind.BOOL: "bool",
}


def placeholder(span: Span) -> Block:
    return Block(text=PLACEHOLDER, span=span, placeholder=True)


def starts_bracketed(cursor: TokenCursor) -> bool:
    token = cursor.peek()
    if token is None:
        return False
    if token.is_group("["):
        return True
    following = cursor.peek(1)
    return (
        token.is_ident(FORMAT_PREFIX)
        and following is not None
        and following.is_group("[")
    )


def parse_bracketed(cursor: TokenCursor, context: ParseContext) -> Bracketed:
    token = cursor.next()
    format_prefix = False
    span = token.span
    if token.is_ident(FORMAT_PREFIX):
        format_prefix = True
        token = cursor.next()
        span = span.join(token.span)
    return Bracketed(
        text=context.text(token.inner),  # type: ignore[attr-defined]
        span=span,
        format_prefix=format_prefix,
    )


def parse_value(
    cursor: TokenCursor, context: ParseContext, equals: Token, key: str
) -> Value:
    """Parse the value after ``key=``.

    Missing or malformed values are reported and replaced by a placeholder so
    the rest of the invocation is still checked.
    """
    token = cursor.peek()

    if token is None or token.is_punct(";") or token.is_group("("):
        context.sink.error(f"expected a value after `{key}=`", equals.span)
        return placeholder(equals.span)

    if token.is_literal:
        cursor.next()
        return Literal(kind=LITERAL_KINDS[token.kind], text=token.text, span=token.span)

    following = cursor.peek(1)
    if token.is_punct("-") and following is not None and following.kind is TokenKind.NUMBER:
        cursor.index += 2
        return Literal(
            kind="number", text=f"-{following.text}", span=token.span.join(following.span)
        )

    if token.is_group("{"):
        cursor.next()
        return Block(text=context.text(token.inner), span=token.span)  # type: ignore[attr-defined]

    if starts_bracketed(cursor):
        return parse_bracketed(cursor, context)

    if token.kind is TokenKind.IDENT:
        cursor.next()
        context.sink.error(
            f"invalid value `{token.text}` for `{key}`: "
            "non-literal values must be wrapped in braces",
            token.span,
            help=f"write `{key}={{{token.text}}}`",
        )
        return placeholder(token.span)

    cursor.next()
    context.sink.error(
        f"expected a value after `{key}=`, found {token.describe()}", token.span
    )
    return placeholder(equals.span)
