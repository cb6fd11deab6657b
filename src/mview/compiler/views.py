"""``.mview`` view files: a Python prelude followed by markup sections.

A section starts at a separator line::

    --- view card(title, body) ---

and runs until the next separator or the end of the file. Everything before
the first separator is the prelude, copied verbatim into the generated module.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from mview.compiler.exceptions import MviewSyntaxError

VIEW_SUFFIX = ".mview"

SEPARATOR = re.compile(r"^---\s*view\s+(?P<name>[^\W\d]\w*)\s*\((?P<params>.*)\)\s*---\s*$")
_LOOSE_SEPARATOR = re.compile(r"^---\s*view\b")


@dataclass
class ViewSection:
    name: str
    params: str
    # Markup padded with blank lines so offsets map to lines of the whole file.
    source: str
    line: int


@dataclass
class ViewFile:
    file_path: str
    prelude: str
    views: List[ViewSection] = field(default_factory=list)


def parse_view_file(content: str, file_path: str = "") -> ViewFile:
    """Split a view file into its prelude and view sections."""
    lines = content.splitlines(keepends=True)
    prelude: List[str] = []
    views: List[ViewSection] = []
    seen: Dict[str, int] = {}
    current = None
    body: List[str] = []

    def close() -> None:
        if current is not None:
            name, params, line = current
            padding = "\n" * line
            views.append(ViewSection(name, params, padding + "".join(body), line + 1))

    for index, raw in enumerate(lines):
        line_no = index + 1
        match = SEPARATOR.match(raw.rstrip("\r\n"))
        if match is None:
            if _LOOSE_SEPARATOR.match(raw):
                raise MviewSyntaxError(
                    "malformed view separator, expected `--- view NAME(PARAMS) ---`",
                    file_path=file_path,
                    line=line_no,
                    column=1,
                )
            (body if current is not None else prelude).append(raw)
            continue

        name = match.group("name")
        if name in seen:
            raise MviewSyntaxError(
                f"view `{name}` is already defined on line {seen[name]}",
                file_path=file_path,
                line=line_no,
                column=1,
            )
        seen[name] = line_no
        close()
        current = (name, match.group("params").strip(), line_no)
        body = []

    close()
    if not views:
        raise MviewSyntaxError(
            "view file defines no views, expected a `--- view NAME(PARAMS) ---` line",
            file_path=file_path,
            line=1,
            column=1,
        )
    return ViewFile(file_path=file_path, prelude="".join(prelude), views=views)


def read_view_file(path: Path) -> ViewFile:
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()
    return parse_view_file(content, str(path))
