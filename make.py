#!/usr/bin/env -S uv run
from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
CONF_DIR = ROOT / "docs"
SOURCE_DIR = ROOT / "src"
OUT_DIR = ROOT / "build" / "html"
DOCTREE_DIR = ROOT / "build" / "doctrees"
CONFIG_FILE = ROOT / "numthm.yaml"

sys.path.insert(0, str(ROOT / "exts"))


def _load_numthm(module: str):
    try:
        return importlib.import_module(f"numthm.{module}")
    except ModuleNotFoundError as exc:
        raise SystemExit(
            "missing Python dependencies for numthm; run via ./make.py "
            "(uv launcher) or `uv sync` first"
        ) from exc


def _load_config():
    config_module = _load_numthm("config")
    errors_module = _load_numthm("errors")
    if not CONFIG_FILE.exists():
        return config_module.NumThmConfig()
    try:
        return config_module.load_config_file(CONFIG_FILE)
    except errors_module.NumThmError as exc:
        raise SystemExit(f"config validation failed:\n{exc}") from exc


def _run_sphinx_html() -> None:
    OUT_DIR.mkdir(parents=True, exist_ok=True)
    DOCTREE_DIR.mkdir(parents=True, exist_ok=True)

    build_module = importlib.import_module("sphinx.cmd.build")

    args = [
        "-b",
        "html",
        "-W",
        "--keep-going",
        "-T",
        "-d",
        str(DOCTREE_DIR),
        str(SOURCE_DIR),
        str(OUT_DIR),
        "-c",
        str(CONF_DIR),
    ]
    code = build_module.build_main(args)
    if code != 0:
        raise SystemExit(code)


def cmd_validate(_: argparse.Namespace) -> None:
    config = _load_config()
    book_module = _load_numthm("book")
    errors_module = _load_numthm("errors")
    try:
        book = book_module.load_book(SOURCE_DIR, config.summary)
    except errors_module.NumThmError as exc:
        raise SystemExit(f"book validation failed:\n{exc}") from exc
    print(f"Validated config and {len(book.paths())} book document(s) OK.")


def cmd_check(args: argparse.Namespace) -> None:
    cmd_validate(args)
    cli_module = _load_numthm("cli")
    argv = ["check", str(SOURCE_DIR), "--strict"]
    if CONFIG_FILE.exists():
        argv = ["--config", str(CONFIG_FILE), *argv]
    code = cli_module.main(argv)
    if code != 0:
        raise SystemExit(code)


def cmd_build(args: argparse.Namespace) -> None:
    cmd_validate(args)
    _run_sphinx_html()
    print(f"Wrote HTML build to: {OUT_DIR}")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="numthm sample book entrypoint (defaults to build)",
    )
    sub = parser.add_subparsers(dest="cmd")
    parser.set_defaults(func=cmd_build, cmd="build")

    p_validate = sub.add_parser(
        "validate", help="Validate the numthm config and book summary."
    )
    p_validate.set_defaults(func=cmd_validate)

    p_check = sub.add_parser(
        "check", help="Run the standalone strict numbering/reference check."
    )
    p_check.set_defaults(func=cmd_check)

    p_build = sub.add_parser("build", help="Run strict Sphinx HTML build.")
    p_build.set_defaults(func=cmd_build)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
