"""诊断信息与解析报告。"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from ..config import BindgenOptions
from .tokens import Span

logger = logging.getLogger(__name__)


Severity = str


class DiagnosticSink(Protocol):
    """接收诊断的对象；两个方法都不返回值，也不抛异常。"""

    def error(self, span: Span, message: str, note: Optional[str] = None) -> None: ...

    def warn(self, span: Span, message: str, note: Optional[str] = None) -> None: ...


@dataclass(slots=True)
class Diagnostic:
    severity: Severity
    message: str
    span: Span
    line: int
    column: int
    note: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {
            "severity": self.severity,
            "message": self.message,
            "span": [self.span.lo, self.span.hi],
            "line": self.line,
            "column": self.column,
        }
        if self.note:
            data["note"] = self.note
        return data


def resolve_location(source: str, offset: int) -> Tuple[int, int]:
    """把字符偏移换算成从 1 开始的行号与列号。"""

    offset = max(0, min(offset, len(source)))
    line = source.count("\n", 0, offset) + 1
    column = offset - (source.rfind("\n", 0, offset) + 1) + 1
    return line, column


class DiagnosticCollector:
    """把诊断记录在内存中，供测试与 CLI 使用。"""

    def __init__(self, source: str = "", base_offset: int = 0):
        self.source = source
        self.base_offset = base_offset
        self.diagnostics: List[Diagnostic] = []

    def error(self, span: Span, message: str, note: Optional[str] = None) -> None:
        self._record("error", span, message, note)

    def warn(self, span: Span, message: str, note: Optional[str] = None) -> None:
        self._record("warning", span, message, note)

    def _record(self, severity: Severity, span: Span, message: str, note: Optional[str]) -> None:
        line, column = resolve_location(self.source, span.lo - self.base_offset)
        self.diagnostics.append(Diagnostic(severity, message, span, line, column, note))


class LoggingSink:
    """把诊断转发给 ``logging``。"""

    def __init__(self, origin: str = "<bindgen>", log: logging.Logger = logger):
        self.origin = origin
        self.log = log

    def error(self, span: Span, message: str, note: Optional[str] = None) -> None:
        self.log.error("%s:%d..%d: %s%s", self.origin, span.lo, span.hi, message, _note_suffix(note))

    def warn(self, span: Span, message: str, note: Optional[str] = None) -> None:
        self.log.warning("%s:%d..%d: %s%s", self.origin, span.lo, span.hi, message, _note_suffix(note))


def _note_suffix(note: Optional[str]) -> str:
    return f" ({note})" if note else ""


class ParseReport:
    """一次 ``bindgen!`` 参数解析的结果。"""

    def __init__(
        self,
        options: BindgenOptions,
        diagnostics: Iterable[Diagnostic],
        ok: bool,
        source: Optional[Path] = None,
    ):
        self.options = options
        self.diagnostics: List[Diagnostic] = list(diagnostics)
        self.ok = ok
        self.source = source

    @property
    def has_errors(self) -> bool:
        return any(diag.severity == "error" for diag in self.diagnostics)

    def severity_summary(self) -> Dict[Severity, int]:
        summary: Dict[Severity, int] = {}
        for diag in self.diagnostics:
            summary[diag.severity] = summary.get(diag.severity, 0) + 1
        return summary

    def to_dict(self) -> Dict[str, object]:
        return {
            "source": str(self.source) if self.source else None,
            "ok": self.ok,
            "options": self.options.to_dict(),
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
            "summary": self.severity_summary(),
        }

    def format_text(self) -> str:
        origin = str(self.source) if self.source else "<bindgen>"
        lines: List[str] = [f"调用: {origin}"]
        summary = self.severity_summary()
        if summary:
            summary_text = ", ".join(f"{k}={v}" for k, v in sorted(summary.items()))
        else:
            summary_text = "无问题"
        lines.append(f"统计: {summary_text}")

        for diag in self.diagnostics:
            lines.append(f"  [{diag.severity.upper()}] {origin}:{diag.line}:{diag.column}: {diag.message}")
            if diag.note:
                lines.append(f"    ↳ {diag.note}")

        if not self.ok:
            return "\n".join(lines)

        options = self.options
        lines.append(f"  builtins = {str(options.builtins).lower()}")
        lines.append(f"  fail_on_unknown_type = {str(options.fail_on_unknown_type).lower()}")
        if options.override_enum_ty:
            lines.append(f"  enum_type = {options.override_enum_ty}")
        for arg in options.clang_args:
            lines.append(f"  clang_arg: {arg}")
        for pattern in options.match_pat:
            lines.append(f"  match: {pattern}")
        for name, kind in options.links:
            lines.append(f"  link: {name} ({kind.value})")
        return "\n".join(lines)


__all__ = [
    "Diagnostic",
    "DiagnosticCollector",
    "DiagnosticSink",
    "LoggingSink",
    "ParseReport",
    "Severity",
    "resolve_location",
]
