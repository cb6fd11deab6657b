"""Exceptions raised by the mview compiler."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from mview.compiler.diagnostics import Diagnostic
    from mview.compiler.spans import Span


class MviewSyntaxError(Exception):
    """Fatal error that aborts the whole translation."""

    def __init__(
        self,
        message: str,
        file_path: str = "",
        line: int = 0,
        column: int = 0,
        span: Optional["Span"] = None,
    ) -> None:
        self.message = message
        self.file_path = file_path
        self.line = line
        self.column = column
        self.span = span
        super().__init__(self._format())

    def _format(self) -> str:
        location = self.file_path or "<mview>"
        if self.line:
            location = f"{location}:{self.line}:{self.column}"
        return f"{location}: {self.message}"


class MviewLexError(MviewSyntaxError):
    """Raised on malformed input the lexer cannot split into tokens."""


class MviewTranslationError(MviewSyntaxError):
    """Raised when recoverable diagnostics were reported during translation.

    Carries every diagnostic collected in the invocation, not only the first.
    """

    def __init__(
        self, diagnostics: List["Diagnostic"], file_path: str = "", rendered: str = ""
    ) -> None:
        self.diagnostics = diagnostics
        self.rendered = rendered
        first = diagnostics[0] if diagnostics else None
        count = len(diagnostics)
        message = f"translation failed with {count} error{'s' if count != 1 else ''}"
        if rendered:
            message = f"{message}\n{rendered}"
        super().__init__(
            message,
            file_path=file_path,
            line=first.line if first else 0,
            column=first.column if first else 0,
            span=first.span if first else None,
        )


class MviewBuildError(Exception):
    """Raised by a build when one or more view files failed to translate."""

    def __init__(self, errors: List[MviewSyntaxError]) -> None:
        self.errors = errors
        super().__init__(f"Build failed with {len(errors)} errors")
