"""Standalone CLI: transform an mdBook style source tree without mdBook."""

from __future__ import annotations

import argparse
import logging as std_logging
import sys
from pathlib import Path

from .book import load_book
from .config import NumThmConfig, load_config_file
from .constants import LABEL_INDEX_FILENAME, NAME
from .errors import NumThmError
from .outputs import label_index_payload
from .pipeline import TransformResult, transform_book
from .utils import _write_json, _write_text


class ExitCode:
    SUCCESS = 0
    FAILURE = 1
    USAGE = 2
    WARNINGS = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=NAME,
        description="Number theorem-like environments and resolve references",
    )
    parser.add_argument(
        "--config", default="", help="YAML or JSONC config file (prefix, environments)"
    )
    parser.add_argument("-v", "--verbose", action="store_true")

    sub = parser.add_subparsers(dest="command", required=True)

    p_render = sub.add_parser("render", help="Write the transformed book to OUT.")
    p_render.add_argument("src", help="Book source root (holds SUMMARY.md)")
    p_render.add_argument("out", help="Output root")
    p_render.add_argument(
        "--label-index",
        action="store_true",
        help=f"Also write {LABEL_INDEX_FILENAME} to OUT",
    )

    p_check = sub.add_parser("check", help="Report diagnostics without writing.")
    p_check.add_argument("src", help="Book source root (holds SUMMARY.md)")
    p_check.add_argument(
        "--strict", action="store_true", help="Exit non-zero on any warning"
    )
    return parser


def _load_config(args: argparse.Namespace) -> NumThmConfig:
    if args.config:
        return load_config_file(Path(args.config))
    return NumThmConfig()


def _transform(src: Path, config: NumThmConfig) -> TransformResult:
    return transform_book(load_book(src, config.summary), config)


def _print_diagnostics(result: TransformResult) -> None:
    for record in result.diagnostics:
        print(f"{record.path}: {record.severity}: {record.message}", file=sys.stderr)


def cmd_render(args: argparse.Namespace, config: NumThmConfig) -> int:
    src = Path(args.src)
    out = Path(args.out)
    result = _transform(src, config)
    for path, text in result.contents.items():
        _write_text(out / path, text)
    if args.label_index:
        _write_json(out / LABEL_INDEX_FILENAME, label_index_payload(result.labels))
    _print_diagnostics(result)
    print(f"Wrote {len(result.contents)} document(s) to: {out}")
    return ExitCode.SUCCESS


def cmd_check(args: argparse.Namespace, config: NumThmConfig) -> int:
    result = _transform(Path(args.src), config)
    _print_diagnostics(result)
    if args.strict and result.diagnostics:
        return ExitCode.WARNINGS
    print(
        f"{len(result.contents)} document(s), {len(result.labels)} label(s), "
        f"{len(result.diagnostics)} warning(s)"
    )
    return ExitCode.SUCCESS


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    std_logging.basicConfig(
        stream=sys.stderr,
        # commands print diagnostics themselves
        level=std_logging.DEBUG if args.verbose else std_logging.ERROR,
        format=f"%(levelname)s [{NAME}]: %(message)s",
    )

    try:
        config = _load_config(args)
        if args.command == "render":
            return cmd_render(args, config)
        return cmd_check(args, config)
    except NumThmError as exc:
        print(str(exc), file=sys.stderr)
        return ExitCode.FAILURE


if __name__ == "__main__":
    raise SystemExit(main())
