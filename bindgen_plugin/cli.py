"""命令行接口。

解析一个或多个 ``bindgen!`` 参数列表，以人类可读或 JSON 格式输出得到的配置
与诊断；也可以只做 ``clang_args`` 的类 shell 切分。
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from .macro.ast_parser import ClangHeaderFrontend
from .macro.context import MacroInvocation
from .macro.runner import BindgenMacro
from .macro.shell import split_process_args


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bindgen-args",
        description="解析 bindgen! 宏的参数列表并输出得到的配置",
    )
    parser.add_argument("invocations", nargs="+", help="参数文本，或完整的 bindgen!(...) 调用")
    parser.add_argument(
        "--source",
        type=Path,
        default=None,
        help="调用所在的源文件，其目录会以 -I 加入 clang 参数",
    )
    parser.add_argument(
        "--generate",
        action="store_true",
        help="用 libclang 解析配置中的头文件并报告 clang 诊断",
    )
    parser.add_argument(
        "--split",
        action="store_true",
        help="只按 clang_args 的规则切分每个参数并输出",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="以 JSON 格式输出完整报告",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="将结果写入指定文件 (默认输出到标准输出)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="输出调试日志",
    )
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.source is not None and not args.source.exists():
        raise FileNotFoundError(f"未找到源文件: {args.source}")

    output = args.output.open("w", encoding="utf-8") if args.output else sys.stdout
    try:
        if args.split:
            return _write_split(args.invocations, output, args.json)

        generator = ClangHeaderFrontend() if args.generate else None
        macro = BindgenMacro(generator=generator)
        results = [macro.expand(MacroInvocation.from_text(text, args.source)) for text in args.invocations]

        if args.json:
            json.dump([r.report.to_dict() for r in results], output, ensure_ascii=False, indent=2)
            output.write("\n")
        else:
            for result in results:
                output.write(result.report.format_text())
                output.write("\n")
    finally:
        if args.output:
            output.close()

    return 0 if all(result.ok for result in results) else 1


def _write_split(texts: List[str], output, as_json: bool) -> int:
    parts = [split_process_args(text) for text in texts]
    if as_json:
        json.dump(parts, output, ensure_ascii=False, indent=2)
        output.write("\n")
    else:
        for tokens in parts:
            output.write("\n".join(tokens))
            output.write("\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI 入口
    raise SystemExit(main())
