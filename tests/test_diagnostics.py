import pytest
from mview import MviewTranslationError, configure, translate, translate_with_diagnostics
from mview.compiler.diagnostics import Diagnostic, DiagnosticSink, Note
from mview.compiler.exceptions import MviewSyntaxError
from mview.compiler.spans import SourceMap, Span
from mview.config import ENV_VAR, get_settings


SOURCE = "div(\n  input value=name;\n)"


def test_basic_rendering() -> None:
    translation = translate_with_diagnostics(SOURCE, "page.mview")
    rendered = translation.render(enhanced=False)
    assert rendered.startswith("page.mview:2:15: error: invalid value `name` for `value`")
    assert "\n" not in rendered


def test_enhanced_rendering() -> None:
    translation = translate_with_diagnostics(SOURCE, "page.mview")
    lines = translation.render(enhanced=True).splitlines()
    assert lines[0].startswith("page.mview:2:15: error:")
    assert lines[2] == "  2 |   input value=name;"
    assert lines[3] == "    |               ^^^^"
    assert lines[4] == "  help: write `value={name}`"


def test_notes_are_rendered_with_their_spans() -> None:
    source_map = SourceMap("a b c", "x.mview")
    sink = DiagnosticSink(source_map)
    sink.error("first", Span(4, 5), notes=[Note("related", Span(0, 1))])
    rendered = sink.render(enhanced=True)
    assert "  note: related (x.mview:1:1)" in rendered
    assert sink.diagnostics[0].notes[0].line == 1


def test_sink_fatal_raises_with_position() -> None:
    sink = DiagnosticSink(SourceMap("ab\ncd", "f.mview"))
    with pytest.raises(MviewSyntaxError) as exc:
        sink.fatal("boom", Span(4, 5))
    assert (exc.value.line, exc.value.column) == (2, 2)
    assert str(exc.value) == "f.mview:2:2: boom"


def test_raise_if_errors_ignores_empty_sink() -> None:
    sink = DiagnosticSink(SourceMap(""))
    sink.raise_if_errors()
    assert not sink.has_errors


def test_diagnostic_is_error() -> None:
    assert Diagnostic("m", Span(0, 0)).is_error
    assert not Diagnostic("m", Span(0, 0), severity="warning").is_error


def test_translate_uses_configured_rendering() -> None:
    with pytest.raises(MviewTranslationError) as basic:
        translate(SOURCE, "page.mview")
    assert "  help:" not in str(basic.value)

    configure(enhanced_diagnostics=True)
    with pytest.raises(MviewTranslationError) as enhanced:
        translate(SOURCE, "page.mview")
    assert "  help: write `value={name}`" in str(enhanced.value)
    assert enhanced.value.diagnostics[0].line == 2


def test_configure_is_set_once() -> None:
    configure(enhanced_diagnostics=True)
    configure(enhanced_diagnostics=True)
    with pytest.raises(RuntimeError):
        configure(enhanced_diagnostics=False)


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(ENV_VAR, "1")
    assert get_settings().enhanced_diagnostics


def test_rendering_does_not_change_output() -> None:
    plain = translate_with_diagnostics(SOURCE).code
    configure(enhanced_diagnostics=True)
    assert translate_with_diagnostics(SOURCE).code == plain
