import unittest

from mview.compiler.ast_nodes import Block, Bracketed, KeyValue, Literal
from mview.compiler.diagnostics import DiagnosticSink
from mview.compiler.normalizer import (
    Normalizer,
    expand_bracketed,
    parenthesize,
    prop_name,
)
from mview.compiler.parser import MviewParser
from mview.compiler.spans import SourceMap, Span


def normalize(source: str):
    sink = DiagnosticSink(SourceMap(source))
    template = MviewParser().parse(source, sink=sink)
    return Normalizer(sink).normalize(template), sink


class TestNormalizer(unittest.TestCase):
    def test_boolean_attribute_becomes_true(self) -> None:
        template, _ = normalize("input disabled;")
        attr = template.nodes[0].attributes[0]
        self.assertIsInstance(attr, KeyValue)
        self.assertIsInstance(attr.value, Literal)
        self.assertEqual(attr.value.python_text, "True")

    def test_element_shorthand_keeps_key(self) -> None:
        template, _ = normalize("div {data-id};")
        attr = template.nodes[0].attributes[0]
        self.assertEqual(attr.key, "data-id")
        self.assertEqual(attr.value.text, "data_id")

    def test_component_shorthand_underscores_key(self) -> None:
        template, _ = normalize("Card {some-value} other-key=1;")
        first, second = template.nodes[0].attributes
        self.assertEqual(first.key, "some_value")
        self.assertEqual(first.value.text, "some_value")
        self.assertEqual(second.key, "other_key")

    def test_component_keyword_props(self) -> None:
        template, _ = normalize('Card class="x" for={y};')
        keys = [a.key for a in template.nodes[0].attributes]
        self.assertEqual(keys, ["class_", "for_"])

    def test_shorthand_of_keyword_is_reported(self) -> None:
        _, sink = normalize("Card {class};")
        self.assertEqual(len(sink.diagnostics), 1)
        self.assertIn("Python keyword", sink.diagnostics[0].message)

    def test_directive_shorthand_gets_value(self) -> None:
        template, _ = normalize("div class:{is-active};")
        directive = template.nodes[0].attributes[0]
        self.assertFalse(directive.shorthand)
        self.assertEqual(directive.subkey, "is-active")
        self.assertEqual(directive.value.text, "is_active")

    def test_bracketed_child_becomes_closure(self) -> None:
        template, _ = normalize("p([count] f[\"{}!\", name])")
        first, second = template.nodes[0].children.nodes
        self.assertIsInstance(first, Block)
        self.assertEqual(first.text, "lambda: count")
        self.assertEqual(second.text, 'lambda: str.format("{}!", name)')

    def test_nested_nodes_are_normalized(self) -> None:
        template, _ = normalize("div(span(input checked;))")
        span = template.nodes[0].children.nodes[0]
        attr = span.children.nodes[0].attributes[0]
        self.assertIsInstance(attr, KeyValue)


class TestHelpers(unittest.TestCase):
    def test_prop_name(self) -> None:
        self.assertEqual(prop_name("on-change"), "on_change")
        self.assertEqual(prop_name("class"), "class_")
        self.assertEqual(prop_name("value"), "value")

    def test_parenthesize(self) -> None:
        self.assertEqual(parenthesize("count"), "count")
        self.assertEqual(parenthesize(" state.count "), "state.count")
        self.assertEqual(parenthesize("a + b"), "(a + b)")
        self.assertEqual(parenthesize("x  # note"), "(x  # note\n)")
        self.assertEqual(parenthesize("a,\nb"), "(a,\nb\n)")

    def test_expand_bracketed(self) -> None:
        span = Span(0, 1)
        self.assertEqual(
            expand_bracketed(Bracketed("a + 1", span)).text, "lambda: (a + 1)"
        )
        expanded = expand_bracketed(Bracketed('"{} {}", a, b', span, format_prefix=True))
        self.assertEqual(expanded.text, 'lambda: str.format("{} {}", a, b)')
        self.assertTrue(expanded.synthesized)
