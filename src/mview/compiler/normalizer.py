"""Shorthand resolution and bracket expansion.

Turns the parsed tree into one where every attribute is either a
``KeyValue`` or a ``Directive`` and every value is a ``Literal`` or a
``Block``:

* ``{key}`` becomes ``key={key_with_underscores}``. Components and slots
  also underscore the key; elements keep it as written.
* bare ``key`` becomes ``key=true``.
* ``[expr]`` becomes ``{lambda: (expr)}`` and ``f[fmt, args]`` becomes
  ``{lambda: str.format(fmt, args)}``.
* component and slot keys are made valid keyword arguments.
"""

import keyword
import logging
import re
from dataclasses import replace
from typing import List, Optional

from mview.compiler.ast_nodes import (
    AttributeRecord,
    Block,
    BooleanAttr,
    Bracketed,
    ChildrenSpec,
    Component,
    Directive,
    Doctype,
    Element,
    KeyValue,
    Literal,
    Node,
    Shorthand,
    Slot,
    Template,
    Text,
    Value,
)
from mview.compiler.diagnostics import DiagnosticSink
from mview.compiler.spans import Span

log = logging.getLogger(__name__)

_SIMPLE_EXPR = re.compile(r"[^\W\d]\w*(?:\.[^\W\d]\w*)*")


def underscored(name: str) -> str:
    return name.replace("-", "_")


def prop_name(key: str) -> str:
    """Keyword argument name for a component or slot prop."""
    name = underscored(key)
    if keyword.iskeyword(name):
        return f"{name}_"
    return name


def parenthesize(text: str) -> str:
    """Wrap an opaque expression so it stays one expression when spliced."""
    stripped = text.strip()
    if _SIMPLE_EXPR.fullmatch(stripped):
        return stripped
    # A trailing comment would swallow the closing parenthesis.
    if "\n" in text or "#" in text:
        return f"({text}\n)"
    return f"({stripped})"


def expand_bracketed(value: Bracketed) -> Block:
    if value.format_prefix:
        arguments = value.text.strip()
        if "\n" in value.text or "#" in value.text:
            arguments = f"{value.text}\n"
        text = f"lambda: str.format({arguments})"
    else:
        text = f"lambda: {parenthesize(value.text)}"
    return Block(text=text, span=value.span, synthesized=True)


class Normalizer:
    def __init__(self, sink: DiagnosticSink) -> None:
        self.sink = sink

    def normalize(self, template: Template) -> Template:
        nodes = self._nodes(template.nodes)
        log.debug("normalized %d root nodes", len(nodes))
        return replace(template, nodes=nodes)

    def _nodes(self, nodes: List[Node]) -> List[Node]:
        return [self._node(node) for node in nodes]

    def _node(self, node: Node) -> Node:
        if isinstance(node, (Element, Component)):
            typed = isinstance(node, Component)
            return replace(
                node,
                attributes=self._attributes(node.attributes, typed),
                children=self._children(node.children),
            )
        if isinstance(node, Slot):
            return replace(
                node,
                attributes=self._attributes(node.attributes, typed=True),
                children=self._children(node.children),
            )
        if isinstance(node, Bracketed):
            return expand_bracketed(node)
        if isinstance(node, (Text, Block, Doctype)):
            return node
        raise TypeError(f"unexpected node {node!r}")

    def _children(self, spec: ChildrenSpec) -> ChildrenSpec:
        return replace(spec, nodes=self._nodes(spec.nodes))

    def _attributes(
        self, records: List[AttributeRecord], typed: bool
    ) -> List[AttributeRecord]:
        return [self._attribute(record, typed) for record in records]

    def _attribute(self, record: AttributeRecord, typed: bool) -> AttributeRecord:
        key_for = prop_name if typed else str

        if isinstance(record, KeyValue):
            return replace(record, key=key_for(record.key), value=self._value(record.value))
        if isinstance(record, BooleanAttr):
            value = Literal(kind="bool", text="true", span=record.span)
            return KeyValue(key=key_for(record.key), value=value, span=record.span)
        if isinstance(record, Shorthand):
            value = self._shorthand_value(record.key, record.span)
            return KeyValue(key=key_for(record.key), value=value, span=record.span)
        if isinstance(record, Directive):
            value: Optional[Value] = record.value
            if record.shorthand:
                value = self._shorthand_value(record.subkey, record.span)
            elif value is not None:
                value = self._value(value)
            return replace(record, value=value, shorthand=False)
        raise TypeError(f"unexpected attribute {record!r}")

    def _value(self, value: Value) -> Value:
        if isinstance(value, Bracketed):
            return expand_bracketed(value)
        if isinstance(value, (Literal, Block)):
            return value
        raise TypeError(f"unexpected value {value!r}")

    def _shorthand_value(self, key: str, span: Span) -> Block:
        # The value is a variable reference, so it is always underscored.
        name = underscored(key)
        if keyword.iskeyword(name):
            self.sink.error(
                f"shorthand `{{{key}}}` refers to `{name}`, which is a Python keyword",
                span,
                help=f"write `{key}={{...}}` with an explicit value",
            )
        return Block(text=name, span=span, synthesized=True)
