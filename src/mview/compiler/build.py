"""Build system for view files."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from mview.compiler.codegen.generator import CodeGenerator, GeneratedModule
from mview.compiler.codegen.template import DEFAULT_RUNTIME
from mview.compiler.exceptions import MviewBuildError, MviewSyntaxError
from mview.compiler.views import VIEW_SUFFIX, read_view_file

log = logging.getLogger(__name__)


@dataclass
class BuildSummary:
    files: int
    views: int
    out_dir: Path
    modules: List[Path] = field(default_factory=list)


def discover_view_files(src_dir: Path) -> List[Path]:
    return sorted(p for p in src_dir.rglob(f"*{VIEW_SUFFIX}") if p.is_file())


def build_project(
    src_dir: Path,
    out_dir: Optional[Path] = None,
    runtime: str = DEFAULT_RUNTIME,
) -> BuildSummary:
    """Compile every view file under ``src_dir`` into a Python module.

    Modules mirror the source layout under ``out_dir`` (by default next to
    their view files). Errors from all files are collected first; nothing is
    written unless every file translated cleanly.

    Raises:
        MviewBuildError: carrying one exception per failing file.
    """
    src_dir = src_dir.resolve()
    out_dir = (out_dir or src_dir).resolve()
    codegen = CodeGenerator(runtime=runtime)

    generated: Dict[Path, GeneratedModule] = {}
    errors: List[MviewSyntaxError] = []
    view_count = 0

    for path in discover_view_files(src_dir):
        try:
            module = codegen.generate(read_view_file(path))
        except MviewSyntaxError as e:
            log.debug("fatal error in %s: %s", path, e)
            errors.append(e)
            continue

        for translation in module.translations.values():
            try:
                translation.raise_if_errors()
            except MviewSyntaxError as e:
                errors.append(e)
        view_count += len(module.translations)
        target = out_dir / path.relative_to(src_dir).with_suffix(".py")
        generated[target] = module

    if errors:
        raise MviewBuildError(errors)

    for target, module in generated.items():
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(module.source, encoding="utf-8")
        log.info("wrote %s", target)

    return BuildSummary(
        files=len(generated),
        views=view_count,
        out_dir=out_dir,
        modules=sorted(generated),
    )
