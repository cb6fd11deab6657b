"""Main CLI entry point."""

import logging
import sys
from pathlib import Path
from typing import Any, Callable, Optional, Tuple

import rich_click as click
from mview import __version__
from mview.compiler.codegen.template import DEFAULT_RUNTIME
from mview.compiler.exceptions import MviewBuildError, MviewSyntaxError
from mview.compiler.translate import translate_with_diagnostics
from mview.compiler.views import VIEW_SUFFIX, read_view_file
from mview.config import configure
from mview.cli.report import print_build_error, print_error, print_translation
from rich.console import Console

console = Console()

# Cyan theme
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.STYLE_HELPTEXT_FIRST = True
click.rich_click.STYLE_COMMANDS_TABLE_SHOW_LINES = False
click.rich_click.STYLE_COMMANDS_TABLE_PAD_EDGE = False
click.rich_click.STYLE_COMMANDS_TABLE_BOX = None
click.rich_click.STYLE_COMMANDS_TABLE_HEADER = "bold magenta"
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = "Try running 'mview --help' for more information."
click.rich_click.STYLE_OPTIONS_TABLE_BOX = None
click.rich_click.STYLE_COMMANDS_PANEL_BOX = None
click.rich_click.STYLE_OPTIONS_PANEL_BOX = None
click.rich_click.STYLE_HEADER_TEXT = "bold cyan"
click.rich_click.STYLE_OPTION = "cyan"
click.rich_click.STYLE_SWITCH = "cyan"
click.rich_click.STYLE_METAVAR = "dim white"
click.rich_click.STYLE_USAGE_COMMAND = "cyan"
click.rich_click.STYLE_USAGE = "dim"

click.rich_click.COMMAND_GROUPS = {
    "mview": [
        {
            "name": "Commands",
            "commands": ["translate", "check", "build"],
        }
    ]
}


def _setup_logging(verbose: bool) -> None:
    if not verbose:
        return
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _diagnostic_options(command: Callable[..., Any]) -> Callable[..., Any]:
    command = click.option(
        "--verbose", "-v", is_flag=True, help="Log each compiler stage."
    )(command)
    command = click.option(
        "--enhanced-diagnostics",
        is_flag=True,
        help="Show source excerpts, notes and help with each diagnostic.",
    )(command)
    return command


def _prepare(verbose: bool, enhanced_diagnostics: bool) -> None:
    _setup_logging(verbose)
    if enhanced_diagnostics:
        try:
            configure(enhanced_diagnostics=True)
        except RuntimeError as e:
            raise click.UsageError(str(e))


@click.group(
    help=f"""
[bold white on cyan] mview [/] [bold cyan]v{__version__}[/] Selector-style markup for Python view builders.

Run [bold cyan]mview translate FILE[/] to print the builder expression for a markup file.
Run [bold cyan]mview build DIR[/] to compile every view file into a Python module.
"""
)
@click.version_option(__version__)
def cli() -> None:
    pass


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option(
    "--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None,
    help="Write the expression to a file instead of stdout.",
)
@click.option("--runtime", default=DEFAULT_RUNTIME, show_default=True, help="Name of the view builder namespace.")
@_diagnostic_options
def translate(
    source: Any,
    output: Optional[Path],
    runtime: str,
    verbose: bool,
    enhanced_diagnostics: bool,
) -> None:
    """Translate a markup file (or - for stdin) into a builder expression."""
    _prepare(verbose, enhanced_diagnostics)
    content = source.read()

    try:
        translation = translate_with_diagnostics(content, source.name, runtime=runtime)
    except MviewSyntaxError as e:
        print_error(console, e)
        sys.exit(1)

    print_translation(console, translation)
    if translation.has_errors:
        sys.exit(1)

    if output is not None:
        output.write_text(translation.code + "\n", encoding="utf-8")
        console.print(f"✅ Wrote [cyan]{output}[/]", soft_wrap=True)
    else:
        click.echo(translation.code)


@cli.command()
@click.argument(
    "sources",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@_diagnostic_options
def check(sources: Tuple[Path, ...], verbose: bool, enhanced_diagnostics: bool) -> None:
    """Report diagnostics for markup and view files without writing output."""
    _prepare(verbose, enhanced_diagnostics)
    failed = 0
    for path in sources:
        if not _check_file(path):
            failed += 1

    if failed:
        console.print(f"[bold red]✗[/] {failed} of {len(sources)} file(s) failed")
        sys.exit(1)
    console.print(f"✅ {len(sources)} file(s) ok")


def _check_file(path: Path) -> bool:
    try:
        if path.suffix == VIEW_SUFFIX:
            view_file = read_view_file(path)
            translations = [
                translate_with_diagnostics(section.source, view_file.file_path)
                for section in view_file.views
            ]
        else:
            content = path.read_text(encoding="utf-8")
            translations = [translate_with_diagnostics(content, str(path))]
    except MviewSyntaxError as e:
        print_error(console, e)
        return False

    for translation in translations:
        print_translation(console, translation)
    return not any(t.has_errors for t in translations)


@cli.command()
@click.argument(
    "src_dir", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.option(
    "--out-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory for generated modules (default: next to each view file).",
)
@click.option("--runtime", default=DEFAULT_RUNTIME, show_default=True, help="Name of the view builder namespace.")
@_diagnostic_options
def build(
    src_dir: Path,
    out_dir: Optional[Path],
    runtime: str,
    verbose: bool,
    enhanced_diagnostics: bool,
) -> None:
    """Compile every view file under SRC_DIR into a Python module."""
    _prepare(verbose, enhanced_diagnostics)
    from mview.compiler.build import build_project

    console.print(f"🔨 Building [cyan]{src_dir}[/]...", soft_wrap=True)
    try:
        summary = build_project(src_dir, out_dir=out_dir, runtime=runtime)
    except MviewBuildError as e:
        print_build_error(console, e)
        sys.exit(1)

    console.print(
        "✅ Build complete "
        f"(files={summary.files}, views={summary.views}, out={summary.out_dir})",
        soft_wrap=True,
    )


if __name__ == "__main__":
    cli()
