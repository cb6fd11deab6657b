"""Source spans and offset-to-position mapping."""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class Span:
    """Half-open range of character offsets into the original source."""

    start: int
    end: int

    def join(self, other: "Span") -> "Span":
        return Span(min(self.start, other.start), max(self.end, other.end))

    def __len__(self) -> int:
        return self.end - self.start


class SourceMap:
    """Resolves offsets to 1-based line/column pairs and source excerpts."""

    def __init__(self, source: str, file_path: str = "") -> None:
        self.source = source
        self.file_path = file_path
        self._line_starts: List[int] = [0]
        for index, char in enumerate(source):
            if char == "\n":
                self._line_starts.append(index + 1)

    def position(self, offset: int) -> Tuple[int, int]:
        """Return (line, column), both 1-based."""
        line_index = bisect.bisect_right(self._line_starts, offset) - 1
        return line_index + 1, offset - self._line_starts[line_index] + 1

    def line_text(self, line: int) -> str:
        start = self._line_starts[line - 1]
        if line < len(self._line_starts):
            end = self._line_starts[line] - 1
        else:
            end = len(self.source)
        return self.source[start:end]

    def text(self, span: Span) -> str:
        return self.source[span.start : span.end]
