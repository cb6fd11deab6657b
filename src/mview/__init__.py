from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("mview")
except PackageNotFoundError:
    __version__ = "unknown"

from mview.compiler.diagnostics import Diagnostic
from mview.compiler.exceptions import (
    MviewBuildError,
    MviewLexError,
    MviewSyntaxError,
    MviewTranslationError,
)
from mview.compiler.translate import (
    Translation,
    parse,
    translate,
    translate_with_diagnostics,
)
from mview.config import configure

__all__ = [
    "parse",
    "translate",
    "translate_with_diagnostics",
    "Translation",
    "configure",
    "Diagnostic",
    "MviewSyntaxError",
    "MviewLexError",
    "MviewTranslationError",
    "MviewBuildError",
    "__version__",
]
