"""Builder-call code generation for normalized templates."""

import ast
import logging
from typing import Dict, List, Optional

from mview.compiler.ast_nodes import (
    Block,
    ChildrenSpec,
    Component,
    Directive,
    Doctype,
    Element,
    KeyValue,
    Literal,
    Node,
    Slot,
    Text,
    Value,
)
from mview.compiler.diagnostics import DiagnosticSink
from mview.compiler.normalizer import parenthesize
from mview.compiler.slots import GroupedChildren, group_slots
from mview.compiler.spans import Span

log = logging.getLogger(__name__)

DEFAULT_RUNTIME = "view"

# Directive kind -> builder method.
DIRECTIVE_METHODS = {
    "class": "class_",
    "style": "style",
    "on": "on",
    "prop": "prop",
    "attr": "attr",
    "bind": "bind",
    "use": "use",
}


class TemplateCodegen:
    """Lowers normalized nodes into calls against the view builder protocol.

    The generator has no knowledge of what an attribute means; it only keeps
    source order and produces syntactically valid Python.
    """

    def __init__(self, sink: DiagnosticSink, runtime: str = DEFAULT_RUNTIME) -> None:
        self.sink = sink
        self.runtime = runtime

    def generate(self, nodes: List[Node]) -> str:
        """Expression for a whole template: one node, or a list of them."""
        rendered = [self.node(node) for node in nodes if not isinstance(node, Slot)]
        if len(rendered) == 1:
            return rendered[0]
        return f"[{', '.join(rendered)}]"

    def node(self, node: Node) -> str:
        if isinstance(node, Component):
            return self._component(node)
        if isinstance(node, Element):
            return self._element(node)
        if isinstance(node, Slot):
            return self._slot(node)
        if isinstance(node, Text):
            return node.text
        if isinstance(node, Block):
            return self._block(node)
        if isinstance(node, Doctype):
            return f"{self.runtime}.doctype()"
        raise TypeError(f"unexpected node {node!r}")

    # --- elements -----------------------------------------------------------

    def _element(self, node: Element) -> str:
        if node.generics is not None:
            self.sink.error(
                f"element `{node.name}` does not accept generic arguments", node.span
            )
        calls = [f"{self.runtime}.element({node.name!r})"]
        calls.extend(self._selector_calls(node))

        for record in node.attributes:
            if isinstance(record, KeyValue):
                calls.append(f".attr({record.key!r}, {self._value(record.value)})")
            elif isinstance(record, Directive):
                if record.kind == "clone":
                    self.sink.error(
                        "`clone:` is only supported on components and slots",
                        record.span,
                    )
                    continue
                calls.append(self._directive_call(record))
            else:
                raise TypeError(f"unexpected attribute {record!r}")

        if node.children.params is not None:
            self.sink.error(
                f"element `{node.name}` does not take closure parameters",
                node.children.params_span or node.span,
                help="only components and slots pass data to their children",
            )

        for child in node.children.nodes:
            if isinstance(child, Slot):
                self.sink.error(
                    f"slot `{child.name}` can only be passed to a component", child.span
                )
                continue
            calls.append(f".child({self.node(child)})")

        return "".join(calls)

    def _selector_calls(self, node: Element) -> List[str]:
        calls = []
        if node.classes:
            calls.append(f".classes({' '.join(node.classes)!r})")
        if node.ids:
            calls.append(f".id({' '.join(node.ids)!r})")
        return calls

    # --- components and slots -----------------------------------------------

    def _component(self, node: Component) -> str:
        callee = node.name
        if node.generics is not None:
            callee = f"{callee}[{node.generics}]"

        arguments = [callee]
        chained: List[str] = []
        clones: List[str] = []
        seen: Dict[str, Span] = {}

        for record in node.attributes:
            if isinstance(record, KeyValue):
                value = self._value(record.value)
                self._add_keyword(arguments, seen, record.key, value, record.span)
            elif isinstance(record, Directive):
                if record.kind == "clone":
                    clones.append(record.subkey)
                else:
                    chained.append(self._directive_call(record))
            else:
                raise TypeError(f"unexpected attribute {record!r}")

        grouped = group_slots(node.children)
        self._add_children(arguments, seen, node.children, grouped, clones, node.span)

        for name, slots in grouped.slots.items():
            rendered = [self._slot(slot) for slot in slots]
            value = rendered[0] if len(rendered) == 1 else f"[{', '.join(rendered)}]"
            self._add_keyword(arguments, seen, name, value, slots[0].span)

        call = f"{self.runtime}.component({', '.join(arguments)})"
        return call + "".join(self._selector_calls(node)) + "".join(chained)

    def _slot(self, node: Slot) -> str:
        arguments = [node.name]
        clones: List[str] = []
        seen: Dict[str, Span] = {}

        for record in node.attributes:
            if isinstance(record, KeyValue):
                value = self._value(record.value)
                self._add_keyword(arguments, seen, record.key, value, record.span)
            elif isinstance(record, Directive):
                if record.kind == "clone":
                    clones.append(record.subkey)
                else:
                    self.sink.error(
                        f"slot `{node.name}` only supports the `clone:` directive, "
                        f"found `{record.kind}:`",
                        record.span,
                    )
            else:
                raise TypeError(f"unexpected attribute {record!r}")

        grouped = group_slots(node.children)
        self._add_children(arguments, seen, node.children, grouped, clones, node.span)
        return f"{self.runtime}.slot({', '.join(arguments)})"

    def _add_children(
        self,
        arguments: List[str],
        seen: Dict[str, Span],
        spec: ChildrenSpec,
        grouped: GroupedChildren,
        clones: List[str],
        span: Span,
    ) -> None:
        if not grouped.children and spec.params is None:
            if clones:
                log.debug("clone: without children at %s has no effect", span)
            return
        closure = self._children_closure(grouped.children, spec.params, clones)
        self._add_keyword(arguments, seen, "children", closure, spec.span or span)

    def _children_closure(
        self, children: List[Node], params: Optional[str], clones: List[str]
    ) -> str:
        body = f"[{', '.join(self.node(child) for child in children)}]"
        if clones:
            names = ", ".join(clones)
            copies = ", ".join(f"{self.runtime}.clone({name})" for name in clones)
            body = f"(lambda {names}: {body})({copies})"
        if params:
            return f"lambda {params}: {body}"
        return f"lambda: {body}"

    def _add_keyword(
        self,
        arguments: List[str],
        seen: Dict[str, Span],
        name: str,
        value: str,
        span: Span,
    ) -> None:
        if name in seen:
            line, column = self.sink.source_map.position(seen[name].start)
            self.sink.error(
                f"`{name}` is passed more than once",
                span,
                help=f"first passed at {line}:{column}",
            )
            return
        seen[name] = span
        arguments.append(f"{name}={value}")

    # --- attributes and values ----------------------------------------------

    def _directive_call(self, record: Directive) -> str:
        method = DIRECTIVE_METHODS[record.kind]
        value = self._value(record.value) if record.value is not None else "None"
        if record.kind == "use":
            return f".{method}({record.subkey}, {value})"
        return f".{method}({self._directive_name(record)}, {value})"

    def _directive_name(self, record: Directive) -> str:
        if record.subkey_literal is None:
            return repr(record.subkey)

        try:
            name = ast.literal_eval(record.subkey_literal)
        except (SyntaxError, ValueError):
            name = None
        if not isinstance(name, str):
            self.sink.fatal(
                f"`{record.kind}:` names must be plain string literals, "
                f"found {record.subkey_literal}",
                record.span,
            )
        if record.kind == "class" and (not name or any(c.isspace() for c in name)):
            self.sink.fatal(
                f"class name {record.subkey_literal} must be a single non-empty class "
                "without whitespace",
                record.span,
            )
        return repr(name)

    def _value(self, value: Value) -> str:
        if isinstance(value, Literal):
            return value.python_text
        if isinstance(value, Block):
            return self._block(value)
        raise TypeError(f"bracketed value reached code generation: {value!r}")

    def _block(self, block: Block) -> str:
        if block.synthesized:
            return block.text
        return parenthesize(block.text)
