"""宏展开流程测试。"""

from __future__ import annotations

from pathlib import Path

from bindgen_plugin.config import BindgenOptions
from bindgen_plugin.macro.base import BindgenError, BindingGenerator
from bindgen_plugin.macro.context import MacroInvocation
from bindgen_plugin.macro.report import LoggingSink
from bindgen_plugin.macro.runner import BindgenMacro, MacroLogger
from bindgen_plugin.macro.tokens import Span


class RecordingGenerator(BindingGenerator):
    name = "recording"

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []

    def generate(self, options: BindgenOptions, macro_logger):
        self.calls.append(options)
        macro_logger.warn("something odd")
        if self.fail:
            macro_logger.error("cannot generate")
            raise BindgenError("cannot generate")
        return "// generated"


def test_parse_failure_skips_generator():
    generator = RecordingGenerator()
    result = BindgenMacro(generator).expand(MacroInvocation('builtins=false, "late"'))
    assert not result.ok
    assert result.output is None
    assert generator.calls == []


def test_source_directory_appended_to_clang_args(tmp_path: Path):
    source = tmp_path / "src" / "lib.rs"
    source.parent.mkdir()
    source.write_text("", encoding="utf-8")

    result = BindgenMacro().expand(MacroInvocation('"wrapper.h", builtins=false', source))
    assert result.ok
    assert result.report.options.clang_args == ["wrapper.h", "-I", str(source.parent.resolve())]
    assert result.report.options.builtins is False


def test_generator_receives_options_and_logger():
    generator = RecordingGenerator()
    invocation = MacroInvocation.from_text('bindgen!("a.h", match="a.h")')
    result = BindgenMacro(generator).expand(invocation)

    assert result.ok
    assert result.output == "// generated"
    assert generator.calls[0].match_pat == ["a.h"]
    [warning] = result.report.diagnostics
    assert warning.severity == "warning"
    assert warning.span == Span(0, 8)


def test_generator_failure_gives_dummy_result():
    result = BindgenMacro(RecordingGenerator(fail=True)).expand(MacroInvocation('"a.h"'))
    assert not result.ok
    assert result.report.has_errors
    assert result.output is None
    assert [diag.severity for diag in result.report.diagnostics] == ["warning", "error"]


def test_from_text_locates_arguments():
    text = '  bindgen!(\n    "a.h",\n    bogus=1,\n);'
    invocation = MacroInvocation.from_text(text)
    assert invocation.text == '\n    "a.h",\n    bogus=1,\n'
    assert invocation.symbol_span == Span(2, 10)

    result = BindgenMacro().expand(invocation)
    assert not result.ok
    [diag] = result.report.diagnostics
    assert (diag.line, diag.column) == (3, 5)


def test_from_text_accepts_bare_arguments():
    invocation = MacroInvocation.from_text("builtins=false")
    assert invocation.text == "builtins=false"
    assert invocation.call_text is None
    assert invocation.offset == 0


def test_macro_logger_forwards_to_sink(caplog):
    macro_logger = MacroLogger(LoggingSink("lib.rs"), Span(4, 12))
    with caplog.at_level("WARNING"):
        macro_logger.error("boom")
        macro_logger.warn("hmm")
    assert [record.levelname for record in caplog.records] == ["ERROR", "WARNING"]
    assert "lib.rs:4..12: boom" in caplog.records[0].getMessage()


def test_report_format_text_lists_options():
    result = BindgenMacro().expand(MacroInvocation('"-DX", link="static=z", enum_type="u8"'))
    text = result.report.format_text()
    assert "clang_arg: -DX" in text
    assert "link: z (static)" in text
    assert "enum_type = u8" in text

    data = result.report.to_dict()
    assert data["ok"] is True
    assert data["options"]["links"] == [["z", "static"]]
