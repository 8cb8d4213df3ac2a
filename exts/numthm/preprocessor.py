"""mdBook preprocessor entrypoint (``mdbook-numthm``).

mdBook runs ``mdbook-numthm supports <renderer>`` first, then pipes
``[context, book]`` JSON to stdin and expects the book JSON on stdout.
"""

from __future__ import annotations

import argparse
import json
import logging as std_logging
import sys
from typing import Any, TextIO

from sphinx.util import logging

from .book import Book, Chapter
from .config import config_from_mdbook_context
from .constants import MDBOOK_VERSION, NAME
from .errors import BookFormatError, NumThmError
from .pipeline import transform_book

LOGGER = logging.getLogger(__name__)


def _chapter_from_json(item: dict[str, Any]) -> Chapter:
    number = item.get("number")
    chapter = Chapter(
        name=str(item.get("name", "")),
        path=item.get("path"),
        content=str(item.get("content", "")),
        number=tuple(int(part) for part in number) if number else None,
        raw=item,
    )
    for sub in item.get("sub_items", []) or []:
        if isinstance(sub, dict) and "Chapter" in sub:
            chapter.sub_items.append(_chapter_from_json(sub["Chapter"]))
    return chapter


def book_from_mdbook(payload: dict[str, Any]) -> Book:
    sections = payload.get("sections", payload.get("items"))
    if not isinstance(sections, list):
        raise BookFormatError("mdBook payload has no 'sections' list")
    book = Book()
    for section in sections:
        # "Separator" and {"PartTitle": ...} carry no content
        if isinstance(section, dict) and "Chapter" in section:
            book.chapters.append(_chapter_from_json(section["Chapter"]))
    return book


def apply_to_mdbook(book: Book) -> None:
    for top in book.chapters:
        for chapter in top.walk():
            if chapter.raw is not None:
                chapter.raw["content"] = chapter.content


def _check_version(context: dict[str, Any]) -> None:
    version = str(context.get("mdbook_version", ""))
    if version and ".".join(version.split(".")[:2]) != MDBOOK_VERSION:
        LOGGER.warning(
            "%s was written against mdBook %s.x but is called from mdBook %s",
            NAME,
            MDBOOK_VERSION,
            version,
        )


def run_preprocessor(stdin: TextIO, stdout: TextIO) -> None:
    try:
        context, payload = json.load(stdin)
    except (ValueError, TypeError) as exc:
        raise BookFormatError(f"failed to parse mdBook input: {exc}") from exc
    if not isinstance(context, dict) or not isinstance(payload, dict):
        raise BookFormatError("mdBook input must be [context, book]")

    _check_version(context)
    config = config_from_mdbook_context(context)
    result = transform_book(book_from_mdbook(payload), config)
    apply_to_mdbook(result.book)
    json.dump(payload, stdout)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=f"mdbook-{NAME}",
        description="mdBook preprocessor numbering theorems, lemmas, etc.",
    )
    sub = parser.add_subparsers(dest="command")
    p_supports = sub.add_parser(
        "supports", help="Check whether a renderer is supported."
    )
    p_supports.add_argument("renderer")
    return parser


def main(argv: list[str] | None = None) -> int:
    std_logging.basicConfig(
        stream=sys.stderr, format=f"%(levelname)s [{NAME}]: %(message)s"
    )
    args = build_parser().parse_args(argv)
    if args.command == "supports":
        # markers are rewritten to plain markdown, which every renderer accepts
        return 0

    try:
        run_preprocessor(sys.stdin, sys.stdout)
    except NumThmError as exc:
        print(f"{NAME}: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
