"""Module generation for view files."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from jinja2 import Environment, PackageLoader

from mview.compiler.codegen.template import DEFAULT_RUNTIME
from mview.compiler.translate import Translation, translate_with_diagnostics
from mview.compiler.views import ViewFile

log = logging.getLogger(__name__)

MODULE_TEMPLATE = "module.py.jinja"

_env = Environment(
    loader=PackageLoader("mview", "templates"),
    keep_trailing_newline=True,
    trim_blocks=True,
    lstrip_blocks=True,
)


@dataclass
class GeneratedModule:
    source: str
    translations: Dict[str, Translation]

    @property
    def has_errors(self) -> bool:
        return any(t.has_errors for t in self.translations.values())


class CodeGenerator:
    """Renders a parsed view file into the source of a Python module."""

    def __init__(self, runtime: str = DEFAULT_RUNTIME) -> None:
        self.runtime = runtime

    def generate(self, view_file: ViewFile) -> GeneratedModule:
        translations: Dict[str, Translation] = {}
        views: List[Dict[str, Any]] = []
        for section in view_file.views:
            translation = translate_with_diagnostics(
                section.source, view_file.file_path, runtime=self.runtime
            )
            translations[section.name] = translation
            views.append(
                {
                    "name": section.name,
                    "params": section.params,
                    "line": section.line,
                    "code": translation.code,
                }
            )
            log.debug("generated view %s from %s", section.name, view_file.file_path)

        source = _env.get_template(MODULE_TEMPLATE).render(
            file_path=view_file.file_path,
            prelude=view_file.prelude.rstrip(),
            views=views,
        )
        return GeneratedModule(source=source, translations=translations)
