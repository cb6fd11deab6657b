import shutil
import tempfile
import unittest
from pathlib import Path

from mview.compiler.build import build_project, discover_view_files
from mview.compiler.codegen.generator import CodeGenerator
from mview.compiler.exceptions import MviewBuildError, MviewSyntaxError, MviewTranslationError
from mview.compiler.views import parse_view_file

VIEW_FILE = '''\
"""Cards."""
from app import ui


--- view card(title, body="") ---
div.card {
    h2({title})
    p({body})
}

--- view badge(label) ---
ui::Badge {label};
'''


class TestViewFiles(unittest.TestCase):
    def test_sections(self) -> None:
        view_file = parse_view_file(VIEW_FILE, "cards.mview")
        self.assertEqual(view_file.prelude, '"""Cards."""\nfrom app import ui\n\n\n')
        self.assertEqual([v.name for v in view_file.views], ["card", "badge"])
        self.assertEqual(view_file.views[0].params, 'title, body=""')
        self.assertEqual(view_file.views[1].line, 12)

    def test_section_offsets_match_file_lines(self) -> None:
        content = "--- view a() ---\ndiv(\n  input value=x;\n)\n"
        view_file = parse_view_file(content, "a.mview")
        translation = CodeGenerator().generate(view_file).translations["a"]
        self.assertEqual(translation.diagnostics[0].line, 3)

    def test_no_views(self) -> None:
        with self.assertRaisesRegex(MviewSyntaxError, "defines no views"):
            parse_view_file("x = 1\n")

    def test_duplicate_view(self) -> None:
        with self.assertRaisesRegex(MviewSyntaxError, "already defined on line 1"):
            parse_view_file("--- view a() ---\nbr;\n--- view a() ---\nbr;\n")

    def test_malformed_separator(self) -> None:
        with self.assertRaisesRegex(MviewSyntaxError, "malformed view separator"):
            parse_view_file("--- view 1a ---\n")


class TestCodeGenerator(unittest.TestCase):
    def test_module_source(self) -> None:
        module = CodeGenerator().generate(parse_view_file(VIEW_FILE, "cards.mview"))
        self.assertFalse(module.has_errors)
        source = module.source
        self.assertTrue(source.startswith("# Generated by mview from cards.mview."))
        self.assertIn("from app import ui", source)
        self.assertIn('def card(title, body=""):\n    return (\n', source)
        self.assertIn("view.component(ui.Badge, label=label)", source)
        compile(source, "cards.py", "exec")

    def test_module_executes(self) -> None:
        module = CodeGenerator(runtime="rt").generate(
            parse_view_file("--- view hello(name) ---\np({name})\n", "hello.mview")
        )
        calls = []

        class Element:
            def __init__(self, tag: str) -> None:
                self.tag = tag

            def child(self, value: object) -> "Element":
                calls.append((self.tag, value))
                return self

        namespace = {"rt": type("rt", (), {"element": Element})}
        exec(compile(module.source, "hello.py", "exec"), namespace)
        namespace["hello"]("Ada")
        self.assertEqual(calls, [("p", "Ada")])


class TestBuild(unittest.TestCase):
    def setUp(self) -> None:
        self.test_dir = tempfile.mkdtemp()
        self.src = Path(self.test_dir).resolve() / "views"
        (self.src / "nested").mkdir(parents=True)

    def tearDown(self) -> None:
        shutil.rmtree(self.test_dir)

    def test_build_writes_modules(self) -> None:
        (self.src / "cards.mview").write_text(VIEW_FILE, encoding="utf-8")
        (self.src / "nested" / "icons.mview").write_text(
            "--- view icon(name) ---\ni.icon {name};\n", encoding="utf-8"
        )
        out = Path(self.test_dir) / "out"

        summary = build_project(self.src, out_dir=out)

        self.assertEqual(summary.files, 2)
        self.assertEqual(summary.views, 3)
        self.assertEqual(summary.out_dir, out.resolve())
        self.assertTrue((out / "cards.py").exists())
        icons = (out / "nested" / "icons.py").read_text(encoding="utf-8")
        self.assertIn("view.element('i').classes('icon').attr('name', name)", icons)

    def test_build_defaults_to_source_dir(self) -> None:
        (self.src / "cards.mview").write_text(VIEW_FILE, encoding="utf-8")
        summary = build_project(self.src)
        self.assertEqual(summary.out_dir, self.src)
        self.assertTrue((self.src / "cards.py").exists())

    def test_build_collects_errors_from_all_files(self) -> None:
        (self.src / "a.mview").write_text(
            "--- view a() ---\np(0)\n--- view b() ---\np(true)\n", encoding="utf-8"
        )
        (self.src / "b.mview").write_text("--- view c() ---\ndiv\n", encoding="utf-8")
        (self.src / "ok.mview").write_text("--- view d() ---\nbr;\n", encoding="utf-8")

        with self.assertRaises(MviewBuildError) as ctx:
            build_project(self.src)

        errors = ctx.exception.errors
        self.assertEqual(len(errors), 3)
        self.assertIsInstance(errors[0], MviewTranslationError)
        self.assertNotIsInstance(errors[2], MviewTranslationError)
        self.assertIn("Build failed with 3 errors", str(ctx.exception))
        # Nothing is written when any file fails.
        self.assertFalse((self.src / "ok.py").exists())

    def test_discover_view_files(self) -> None:
        (self.src / "b.mview").write_text("", encoding="utf-8")
        (self.src / "nested" / "a.mview").write_text("", encoding="utf-8")
        (self.src / "readme.txt").write_text("", encoding="utf-8")
        found = [p.relative_to(self.src).as_posix() for p in discover_view_files(self.src)]
        self.assertEqual(found, ["b.mview", "nested/a.mview"])
