from __future__ import annotations

from pathlib import Path

import pytest

from numthm.book import Book, Chapter


def write_book(root: Path, summary: str, files: dict[str, str]) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    (root / "SUMMARY.md").write_text(summary, encoding="utf-8")
    for rel_path, text in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def two_chapter_book() -> Book:
    return Book(
        chapters=[
            Chapter(
                name="Groups",
                path="algebra/groups.md",
                content="{{thm}}{thm:a}[First] see {{ref: lem:b}}",
                number=(1,),
                sub_items=[
                    Chapter(
                        name="Cosets",
                        path="algebra/cosets.md",
                        content="{{thm}} {{lem}}{lem:b}",
                        number=(1, 1),
                    )
                ],
            ),
            Chapter(
                name="Sequences",
                path="analysis/sequences.md",
                content="{{thm}}{thm:c} {{tref: thm:a}}",
                number=(2,),
            ),
        ]
    )


@pytest.fixture
def make_book(tmp_path: Path):
    def factory(summary: str, files: dict[str, str], name: str = "src") -> Path:
        return write_book(tmp_path / name, summary, files)

    return factory
