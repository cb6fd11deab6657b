"""Attribute list parsing."""

from typing import List, Sequence

from mview.compiler.ast_nodes import AttributeRecord
from mview.compiler.attributes.base import AttributeParser
from mview.compiler.attributes.directive import DirectiveAttributeParser
from mview.compiler.attributes.key_value import KeyValueAttributeParser
from mview.compiler.attributes.shorthand import ShorthandAttributeParser
from mview.compiler.cursor import ParseContext, TokenCursor


def default_attribute_parsers() -> List[AttributeParser]:
    # Order matters: a directive also starts with an identifier.
    return [
        ShorthandAttributeParser(),
        DirectiveAttributeParser(),
        KeyValueAttributeParser(),
    ]


def parse_attributes(
    cursor: TokenCursor, context: ParseContext, parsers: Sequence[AttributeParser]
) -> List[AttributeRecord]:
    """Consume attributes until the children block, ``;`` or anything else."""
    records: List[AttributeRecord] = []
    while not cursor.at_end:
        for parser in parsers:
            if parser.can_parse(cursor):
                record = parser.parse(cursor, context)
                if record is not None:
                    records.append(record)
                break
        else:
            break
    return records


__all__ = [
    "AttributeParser",
    "DirectiveAttributeParser",
    "KeyValueAttributeParser",
    "ShorthandAttributeParser",
    "default_attribute_parsers",
    "parse_attributes",
]
