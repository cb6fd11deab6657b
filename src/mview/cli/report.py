"""Console rendering of diagnostics and errors."""

from rich.console import Console
from rich.text import Text

from mview.compiler.exceptions import (
    MviewBuildError,
    MviewSyntaxError,
    MviewTranslationError,
)
from mview.compiler.translate import Translation
from mview.config import get_settings


def print_translation(console: Console, translation: Translation) -> None:
    if not translation.diagnostics:
        return
    rendered = translation.render(get_settings().enhanced_diagnostics)
    _print_block(console, rendered)


def print_error(console: Console, error: MviewSyntaxError) -> None:
    if isinstance(error, MviewTranslationError) and error.rendered:
        _print_block(console, error.rendered)
        return
    console.print(Text(str(error), style="bold red"), soft_wrap=True)


def print_build_error(console: Console, error: MviewBuildError) -> None:
    for item in error.errors:
        print_error(console, item)
    console.print(f"[bold red]✗[/] {error}")


def _print_block(console: Console, rendered: str) -> None:
    for line in rendered.splitlines():
        style = "bold red" if ": error: " in line else None
        if line.lstrip().startswith("help:"):
            style = "cyan"
        console.print(Text(line, style=style or ""), soft_wrap=True)
