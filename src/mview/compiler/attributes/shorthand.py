"""``{name}`` attribute shorthand."""

from typing import Optional

from mview.compiler.ast_nodes import AttributeRecord, Shorthand
from mview.compiler.attributes.base import AttributeParser
from mview.compiler.cursor import (
    ParseContext,
    TokenCursor,
    is_shorthand_group,
    kebab_from_tokens,
)


class ShorthandAttributeParser(AttributeParser):
    """Parses ``{name}`` and ``{name-with-hyphens}``."""

    def can_parse(self, cursor: TokenCursor) -> bool:
        return is_shorthand_group(cursor.peek())

    def parse(
        self, cursor: TokenCursor, context: ParseContext
    ) -> Optional[AttributeRecord]:
        group = cursor.next()
        key = kebab_from_tokens(group.tokens)  # type: ignore[attr-defined]
        if key is None:
            context.fatal(f"expected a `{{name}}` shorthand, found {group.text}", group.span)
        return Shorthand(key=key, span=group.span)
