"""Shared fixtures: a small view builder runtime that renders HTML strings."""

import copy
import html
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

import mview.config
from mview import translate


class Node:
    """Chainable builder target shared by elements and component results."""

    def __init__(self) -> None:
        self.class_names: List[str] = []
        self.class_toggles: List[Tuple[str, Any]] = []
        self.styles: List[Tuple[str, Any]] = []
        self.attrs: List[Tuple[str, Any]] = []
        self.props: List[Tuple[str, Any]] = []
        self.bindings: List[Tuple[str, Any]] = []
        self.events: Dict[str, Any] = {}
        self.uses: List[Tuple[Any, Any]] = []
        self.children: List[Any] = []

    def classes(self, names: str) -> "Node":
        self.class_names.extend(names.split())
        return self

    def id(self, value: str) -> "Node":
        self.attrs.append(("id", value))
        return self

    def attr(self, name: str, value: Any) -> "Node":
        self.attrs.append((name, value))
        return self

    def class_(self, name: str, value: Any) -> "Node":
        self.class_toggles.append((name, value))
        return self

    def style(self, name: str, value: Any) -> "Node":
        self.styles.append((name, value))
        return self

    def on(self, event: str, handler: Any) -> "Node":
        self.events[event] = handler
        return self

    def prop(self, name: str, value: Any) -> "Node":
        self.props.append((name, value))
        return self

    def bind(self, name: str, value: Any) -> "Node":
        self.bindings.append((name, value))
        return self

    def use(self, directive: Any, param: Any) -> "Node":
        self.uses.append((directive, param))
        directive(self, param)
        return self

    def child(self, node: Any) -> "Node":
        self.children.append(node)
        return self


class Element(Node):
    def __init__(self, tag: str) -> None:
        super().__init__()
        self.tag = tag

    def render(self) -> str:
        parts = [self.tag]
        classes = list(self.class_names)
        for name, value in self.class_toggles:
            if resolve(value):
                classes.append(name)
        if classes:
            parts.append(f'class="{html.escape(" ".join(classes))}"')
        styles = [
            f"{name}: {resolve(value)}"
            for name, value in self.styles
            if resolve(value) is not None
        ]
        if styles:
            parts.append(f'style="{html.escape("; ".join(styles))}"')
        for name, value in self.attrs:
            value = resolve(value)
            if value is True:
                parts.append(name)
            elif value is not False and value is not None:
                parts.append(f'{name}="{html.escape(str(value))}"')
        open_tag = f"<{' '.join(parts)}>"
        return f"{open_tag}{render(self.children)}</{self.tag}>"


class ComponentResult(Node):
    def __init__(self, function: Callable[..., Any], props: Dict[str, Any]) -> None:
        super().__init__()
        self.function = function
        self.kwargs = props

    def render(self) -> str:
        result = self.function(**self.kwargs)
        if isinstance(result, Element):
            result.class_names.extend(self.class_names)
            result.class_toggles.extend(self.class_toggles)
            result.attrs.extend(self.attrs)
        return render(result)


class Doctype:
    def render(self) -> str:
        return "<!DOCTYPE html>"


def resolve(value: Any) -> Any:
    while callable(value):
        value = value()
    return value


def render(node: Any) -> str:
    if node is None:
        return ""
    if isinstance(node, (list, tuple)):
        return "".join(render(item) for item in node)
    if hasattr(node, "render"):
        return node.render()
    if callable(node):
        return render(node())
    if isinstance(node, str):
        return html.escape(node)
    return html.escape(str(node))


def component(function: Callable[..., Any], **props: Any) -> ComponentResult:
    return ComponentResult(function, props)


def slot(slot_type: Callable[..., Any], **props: Any) -> Any:
    return slot_type(**props)


def clone(value: Any) -> Any:
    return copy.copy(value)


def make_runtime() -> SimpleNamespace:
    return SimpleNamespace(
        element=Element,
        component=component,
        slot=slot,
        clone=clone,
        doctype=Doctype,
    )


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(mview.config.ENV_VAR, raising=False)
    monkeypatch.setattr(mview.config, "_settings", None)


@pytest.fixture
def view() -> SimpleNamespace:
    return make_runtime()


@pytest.fixture
def run(view: SimpleNamespace) -> Callable[..., Any]:
    """Translate markup and evaluate it against the fake runtime."""

    def _run(source: str, namespace: Optional[Dict[str, Any]] = None) -> Any:
        code = translate(source)
        scope = {"view": view}
        scope.update(namespace or {})
        return eval(code, scope)

    return _run


@pytest.fixture
def render_markup(run: Callable[..., Any]) -> Callable[..., str]:
    """Translate, evaluate and render markup to an HTML string."""

    def _render(source: str, namespace: Optional[Dict[str, Any]] = None) -> str:
        return render(run(source, namespace))

    return _render
