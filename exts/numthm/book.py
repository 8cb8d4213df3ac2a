"""Document tree handed to the numbering passes.

A ``Book`` is a list of top-level chapters, each of which may nest
sub-chapters. The tree comes either from an mdBook preprocessor payload (see
``preprocessor``) or from an mdBook style ``SUMMARY.md`` parsed by
``parse_summary``.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .errors import BookFormatError


@dataclass
class Chapter:
    name: str
    path: str | None
    content: str = ""
    number: tuple[int, ...] | None = None
    sub_items: list[Chapter] = field(default_factory=list)
    # Original host record (mdBook JSON), carried so untouched fields survive.
    raw: dict[str, Any] | None = field(default=None, repr=False, compare=False)

    @property
    def is_draft(self) -> bool:
        return self.path is None

    @property
    def scope_path(self) -> tuple[int, ...]:
        return self.number or ()

    def walk(self) -> Iterator[Chapter]:
        yield self
        for item in self.sub_items:
            yield from item.walk()


@dataclass
class Book:
    chapters: list[Chapter] = field(default_factory=list)

    def iter_chapters(self) -> Iterator[tuple[int, Chapter]]:
        """Yield ``(top_level_index, chapter)`` in canonical traversal order.

        A chapter comes before its sub-items and siblings keep their declared
        order. Draft chapters are skipped.
        """
        for index, top in enumerate(self.chapters):
            for chapter in top.walk():
                if not chapter.is_draft:
                    yield index, chapter

    def paths(self) -> list[str]:
        return [chapter.path for _, chapter in self.iter_chapters()]

    def with_contents(self, contents: Mapping[str, str]) -> Book:
        def rebuild(chapter: Chapter) -> Chapter:
            content = chapter.content
            if chapter.path is not None:
                content = contents.get(chapter.path, content)
            return replace(
                chapter,
                content=content,
                sub_items=[rebuild(item) for item in chapter.sub_items],
            )

        return Book(chapters=[rebuild(chapter) for chapter in self.chapters])


SUMMARY_TITLE_RE = re.compile(r"^#\s+(?P<title>.+?)\s*$")
SUMMARY_SEPARATOR_RE = re.compile(r"^-{3,}\s*$")
SUMMARY_LINK_RE = re.compile(r"^\[(?P<name>[^\]]*)\]\((?P<path>[^)]*)\)\s*$")
SUMMARY_ITEM_RE = re.compile(
    r"^(?P<indent>[ \t]*)[-*]\s+\[(?P<name>[^\]]*)\]\((?P<path>[^)]*)\)\s*$"
)


def _indent_width(indent: str) -> int:
    return len(indent.expandtabs(4))


def parse_summary(text: str, source: str = "SUMMARY.md") -> Book:
    """Parse an mdBook ``SUMMARY.md`` into a chapter tree without contents.

    Prefix and suffix chapters (bare links) are unnumbered. List items are
    numbered; nesting follows indentation and numbering continues across part
    titles. An empty link target marks a draft chapter.
    """
    book = Book()
    # (indent, chapter) for the currently open list items
    stack: list[tuple[int, Chapter]] = []
    top_count = 0

    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        if SUMMARY_TITLE_RE.match(line) or SUMMARY_SEPARATOR_RE.match(line):
            stack = []
            continue

        bare = SUMMARY_LINK_RE.match(line.strip())
        if bare:
            stack = []
            book.chapters.append(
                Chapter(name=bare.group("name"), path=bare.group("path").strip() or None)
            )
            continue

        item = SUMMARY_ITEM_RE.match(line)
        if item is None:
            raise BookFormatError(f"{source}:{lineno}: unrecognized summary entry")

        indent = _indent_width(item.group("indent"))
        while stack and stack[-1][0] >= indent:
            stack.pop()

        chapter = Chapter(
            name=item.group("name"), path=item.group("path").strip() or None
        )
        if stack:
            parent = stack[-1][1]
            chapter.number = (*parent.scope_path, len(parent.sub_items) + 1)
            parent.sub_items.append(chapter)
        else:
            top_count += 1
            chapter.number = (top_count,)
            book.chapters.append(chapter)
        stack.append((indent, chapter))

    return book


def load_book(src_root: Path, summary: str = "SUMMARY.md") -> Book:
    """Read a summary and the contents of every non-draft chapter it lists."""
    summary_path = src_root / summary
    if not summary_path.exists():
        raise BookFormatError(f"book summary missing: {summary_path}")
    book = parse_summary(summary_path.read_text(encoding="utf-8"), str(summary_path))

    for _, chapter in book.iter_chapters():
        chapter_path = src_root / chapter.path
        try:
            chapter.content = chapter_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise BookFormatError(f"failed to read chapter {chapter_path}: {exc}") from exc
    return book
