"""The translation pipeline: lex, parse, normalize, generate."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from mview.compiler.ast_nodes import Template
from mview.compiler.codegen.template import DEFAULT_RUNTIME, TemplateCodegen
from mview.compiler.diagnostics import Diagnostic, DiagnosticSink
from mview.compiler.exceptions import MviewTranslationError
from mview.compiler.normalizer import Normalizer
from mview.compiler.parser import MviewParser
from mview.compiler.spans import SourceMap
from mview.config import get_settings

log = logging.getLogger(__name__)


@dataclass
class Translation:
    """Generated code together with every diagnostic reported for it.

    When ``diagnostics`` holds errors, ``code`` is still valid Python but has
    ``...`` wherever a value could not be recovered.
    """

    code: str
    diagnostics: List[Diagnostic]
    source_map: SourceMap = field(repr=False)

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self.diagnostics)

    def render(self, enhanced: Optional[bool] = None) -> str:
        if enhanced is None:
            enhanced = get_settings().enhanced_diagnostics
        return "\n".join(d.format(self.source_map, enhanced) for d in self.diagnostics)

    def raise_if_errors(self) -> None:
        errors = [d for d in self.diagnostics if d.is_error]
        if errors:
            raise MviewTranslationError(
                errors, file_path=self.source_map.file_path, rendered=self.render()
            )


def parse(source: str, file_path: str = "") -> Template:
    """Parse markup; recoverable diagnostics are attached to the template."""
    return MviewParser().parse(source, file_path)


def translate_with_diagnostics(
    source: str, file_path: str = "", runtime: str = DEFAULT_RUNTIME
) -> Translation:
    """Translate markup, returning output even when errors were reported.

    Fatal problems still raise ``MviewSyntaxError``.
    """
    sink = DiagnosticSink(SourceMap(source, file_path))
    template = MviewParser().parse(source, file_path, sink=sink)
    template = Normalizer(sink).normalize(template)
    code = TemplateCodegen(sink, runtime=runtime).generate(template.nodes)
    log.debug(
        "translated %s with %d diagnostic(s)",
        file_path or "<mview>",
        len(sink.diagnostics),
    )
    return Translation(code=code, diagnostics=list(sink.diagnostics), source_map=sink.source_map)


def translate(source: str, file_path: str = "", runtime: str = DEFAULT_RUNTIME) -> str:
    """Translate markup into a single Python expression.

    Raises:
        MviewSyntaxError: on a fatal problem.
        MviewTranslationError: when any recoverable error was reported; it
            carries all of them.
    """
    translation = translate_with_diagnostics(source, file_path, runtime)
    translation.raise_if_errors()
    return translation.code
