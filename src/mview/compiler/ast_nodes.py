"""Syntax tree produced by the mview parser.

Nodes, attribute records and values are small dataclasses; every consuming
stage dispatches over them with ``isinstance`` and rejects anything else.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from mview.compiler.diagnostics import Diagnostic
from mview.compiler.spans import Span

DIRECTIVE_KINDS = ("class", "style", "on", "prop", "attr", "clone", "use", "bind")

FORMAT_PREFIX = "f"

# --- Values -----------------------------------------------------------------


@dataclass
class Literal:
    """String, number or bool literal. ``text`` is the source spelling."""

    kind: str  # "str" | "number" | "bool"
    text: str
    span: Span

    @property
    def python_text(self) -> str:
        if self.kind == "bool":
            return "True" if self.text.lower() == "true" else "False"
        return self.text


@dataclass
class Block:
    """Opaque Python expression copied verbatim.

    ``synthesized`` blocks are produced by normalization and are already safe
    to splice as a single argument.
    """

    text: str
    span: Span
    placeholder: bool = False
    synthesized: bool = False


@dataclass
class Bracketed:
    """``[expr]`` or ``f[fmt, args...]``, expanded later into a closure."""

    text: str
    span: Span
    format_prefix: bool = False


Value = Union[Literal, Block, Bracketed]

# --- Attribute records ------------------------------------------------------


@dataclass
class KeyValue:
    key: str
    value: Value
    span: Span


@dataclass
class BooleanAttr:
    """Bare ``key``, meaning ``key=true``."""

    key: str
    span: Span


@dataclass
class Shorthand:
    """``{key}``, meaning ``key={key}``."""

    key: str
    span: Span


@dataclass
class Directive:
    """``kind:subkey=value``, ``kind:{subkey}`` or a value-less ``kind:subkey``.

    ``subkey_literal`` holds the source text of a string-literal sub-key
    (``class:"a-[b]"``); ``value`` is None when no value was written.
    """

    kind: str
    subkey: str
    span: Span
    value: Optional[Value] = None
    shorthand: bool = False
    subkey_literal: Optional[str] = None


AttributeRecord = Union[KeyValue, BooleanAttr, Shorthand, Directive]

# --- Nodes ------------------------------------------------------------------


@dataclass
class Text:
    text: str
    span: Span


@dataclass
class Doctype:
    span: Span


@dataclass
class ChildrenSpec:
    """Ordered children plus the optional ``|params|`` closure declaration."""

    nodes: List["Node"] = field(default_factory=list)
    params: Optional[str] = None
    params_span: Optional[Span] = None
    span: Optional[Span] = None


@dataclass
class Element:
    name: str
    span: Span
    generics: Optional[str] = None
    classes: List[str] = field(default_factory=list)
    ids: List[str] = field(default_factory=list)
    attributes: List[AttributeRecord] = field(default_factory=list)
    children: ChildrenSpec = field(default_factory=ChildrenSpec)
    self_closing: bool = False

    @property
    def is_component(self) -> bool:
        return False


@dataclass
class Component(Element):
    """Same shape as an element; ``name`` is a dotted Python path."""

    @property
    def is_component(self) -> bool:
        return True


@dataclass
class Slot:
    name: str
    span: Span
    attributes: List[AttributeRecord] = field(default_factory=list)
    children: ChildrenSpec = field(default_factory=ChildrenSpec)
    self_closing: bool = False

    @property
    def is_component(self) -> bool:
        # Slots take typed props like components do.
        return True


Node = Union[Element, Component, Slot, Text, Block, Bracketed, Doctype]


@dataclass
class Template:
    """Root of one translation: a children sequence without closure params."""

    nodes: List[Node]
    file_path: str = ""
    diagnostics: List[Diagnostic] = field(default_factory=list)
