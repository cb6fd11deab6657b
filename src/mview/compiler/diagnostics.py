"""Span-tagged diagnostics collected during a translation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, NoReturn, Optional

from mview.compiler.exceptions import MviewSyntaxError, MviewTranslationError
from mview.compiler.spans import SourceMap, Span

log = logging.getLogger(__name__)

ERROR = "error"
WARNING = "warning"


@dataclass
class Note:
    """Secondary message pointing at a related span."""

    message: str
    span: Span
    line: int = 0
    column: int = 0


@dataclass
class Diagnostic:
    message: str
    span: Span
    severity: str = ERROR
    line: int = 0
    column: int = 0
    notes: List[Note] = field(default_factory=list)
    help: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity == ERROR

    def format(self, source_map: SourceMap, enhanced: bool = False) -> str:
        """Render as plain text.

        Basic rendering is a single ``path:line:col: severity: message`` line.
        Enhanced rendering adds the source excerpt with a caret underline,
        the notes at their own spans and the help text.
        """
        location = source_map.file_path or "<mview>"
        lines = [f"{location}:{self.line}:{self.column}: {self.severity}: {self.message}"]
        if not enhanced:
            return lines[0]

        lines.extend(_excerpt(source_map, self.span, self.line, self.column))
        for note in self.notes:
            lines.append(f"  note: {note.message} ({location}:{note.line}:{note.column})")
            lines.extend(_excerpt(source_map, note.span, note.line, note.column))
        if self.help:
            lines.append(f"  help: {self.help}")
        return "\n".join(lines)


def _excerpt(source_map: SourceMap, span: Span, line: int, column: int) -> List[str]:
    if not source_map.source or line < 1:
        return []
    text = source_map.line_text(line)
    gutter = str(line)
    pad = " " * len(gutter)
    # Multi-line spans are underlined up to the end of their first line.
    width = max(1, min(len(span), len(text) - column + 1))
    return [
        f"  {pad} |",
        f"  {gutter} | {text}",
        f"  {pad} | {' ' * (column - 1)}{'^' * width}",
    ]


class DiagnosticSink:
    """Append-only collector shared by every stage of one translation."""

    def __init__(self, source_map: SourceMap) -> None:
        self.source_map = source_map
        self.diagnostics: List[Diagnostic] = []

    def error(
        self,
        message: str,
        span: Span,
        notes: Optional[List[Note]] = None,
        help: Optional[str] = None,
    ) -> Diagnostic:
        line, column = self.source_map.position(span.start)
        resolved = []
        for note in notes or []:
            note_line, note_column = self.source_map.position(note.span.start)
            resolved.append(Note(note.message, note.span, note_line, note_column))
        diagnostic = Diagnostic(
            message=message,
            span=span,
            line=line,
            column=column,
            notes=resolved,
            help=help,
        )
        log.debug("diagnostic at %d:%d: %s", line, column, message)
        self.diagnostics.append(diagnostic)
        return diagnostic

    def fatal(self, message: str, span: Span) -> NoReturn:
        line, column = self.source_map.position(span.start)
        raise MviewSyntaxError(
            message,
            file_path=self.source_map.file_path,
            line=line,
            column=column,
            span=span,
        )

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self.diagnostics)

    def render(self, enhanced: bool = False) -> str:
        return "\n".join(d.format(self.source_map, enhanced) for d in self.diagnostics)

    def raise_if_errors(self, enhanced: bool = False) -> None:
        errors = [d for d in self.diagnostics if d.is_error]
        if errors:
            raise MviewTranslationError(
                errors,
                file_path=self.source_map.file_path,
                rendered=self.render(enhanced),
            )
