"""基于 libclang 的头文件前端。"""

from __future__ import annotations

import logging

from ..config import BindgenOptions
from .base import BindgenError, BindingGenerator, Logger
from .utils import format_location, load_clang, split_header

logger = logging.getLogger(__name__)


class ClangHeaderFrontend(BindingGenerator):
    """用收集到的 ``clang_args`` 解析头文件，并把 clang 诊断转给 logger。

    只产出 TranslationUnit，不负责生成绑定代码。
    """

    name = "clang-header"

    def __init__(self) -> None:
        self.cindex = load_clang()
        self.index = self.cindex.Index.create()

    def generate(self, options: BindgenOptions, macro_logger: Logger):
        header, args = split_header(options.clang_args)
        if header is None:
            macro_logger.error("no header file given")
            raise BindgenError("no header file given")

        parse_options = self.cindex.TranslationUnit.PARSE_SKIP_FUNCTION_BODIES
        try:
            translation_unit = self.index.parse(header, args=args, options=parse_options)
        except self.cindex.TranslationUnitLoadError as exc:
            macro_logger.error(f"failed to parse {header}: {exc}")
            raise BindgenError(str(exc)) from exc

        errors = 0
        for diagnostic in translation_unit.diagnostics:
            message = f"{format_location(diagnostic)}: {diagnostic.spelling}"
            if diagnostic.severity >= self.cindex.Diagnostic.Error:
                errors += 1
                macro_logger.error(message)
            elif diagnostic.severity == self.cindex.Diagnostic.Warning:
                macro_logger.warn(message)

        if errors:
            raise BindgenError(f"{errors} error(s) while parsing {header}")
        logger.debug("parsed %s with %d argument(s)", header, len(args))
        return translation_unit


__all__ = ["ClangHeaderFrontend"]
