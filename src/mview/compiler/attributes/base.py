"""Base class for attribute parsers."""

from abc import ABC, abstractmethod
from typing import Optional

from mview.compiler.ast_nodes import AttributeRecord
from mview.compiler.cursor import ParseContext, TokenCursor


class AttributeParser(ABC):
    """Parses one attribute form starting at the cursor."""

    @abstractmethod
    def can_parse(self, cursor: TokenCursor) -> bool:
        """Check whether the tokens at the cursor start this attribute form."""
        pass

    @abstractmethod
    def parse(
        self, cursor: TokenCursor, context: ParseContext
    ) -> Optional[AttributeRecord]:
        """Consume the attribute. Returns None when it was reported and dropped."""
        pass
