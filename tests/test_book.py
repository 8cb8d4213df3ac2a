import pytest

from numthm.book import load_book, parse_summary
from numthm.errors import BookFormatError

SUMMARY = """\
# Summary

[Introduction](intro.md)

# Algebra

- [Groups](algebra/groups.md)
    - [Cosets](algebra/cosets.md)
        - [Lagrange](algebra/lagrange.md)
    - [Draft]()
- [Rings](algebra/rings.md)

---

# Analysis

* [Sequences](analysis/sequences.md)

[Appendix](appendix.md)
"""


def test_parse_summary_numbers_and_nesting():
    book = parse_summary(SUMMARY)
    flat = [(chapter.path, chapter.number) for top in book.chapters for chapter in top.walk()]
    assert flat == [
        ("intro.md", None),
        ("algebra/groups.md", (1,)),
        ("algebra/cosets.md", (1, 1)),
        ("algebra/lagrange.md", (1, 1, 1)),
        (None, (1, 2)),
        ("algebra/rings.md", (2,)),
        ("analysis/sequences.md", (3,)),
        ("appendix.md", None),
    ]


def test_traversal_skips_drafts_and_tracks_top_level_index():
    book = parse_summary(SUMMARY)
    assert [(index, chapter.path) for index, chapter in book.iter_chapters()] == [
        (0, "intro.md"),
        (1, "algebra/groups.md"),
        (1, "algebra/cosets.md"),
        (1, "algebra/lagrange.md"),
        (2, "algebra/rings.md"),
        (3, "analysis/sequences.md"),
        (4, "appendix.md"),
    ]


def test_unrecognized_summary_line_reports_location():
    with pytest.raises(BookFormatError, match=r"SUMMARY.md:3: unrecognized"):
        parse_summary("# Summary\n\njust prose\n")


def test_with_contents_returns_copy():
    book = parse_summary("- [A](a.md)\n    - [B](b.md)\n")
    updated = book.with_contents({"b.md": "new"})
    assert updated.chapters[0].sub_items[0].content == "new"
    assert book.chapters[0].sub_items[0].content == ""
    assert updated.chapters[0].content == ""


def test_load_book_reads_chapter_contents(make_book):
    root = make_book(
        "- [A](a.md)\n- [B](sub/b.md)\n",
        {"a.md": "alpha", "sub/b.md": "beta"},
    )
    book = load_book(root)
    assert {chapter.path: chapter.content for _, chapter in book.iter_chapters()} == {
        "a.md": "alpha",
        "sub/b.md": "beta",
    }


def test_load_book_missing_summary(tmp_path):
    with pytest.raises(BookFormatError, match="book summary missing"):
        load_book(tmp_path)


def test_load_book_missing_chapter(make_book):
    root = make_book("- [A](a.md)\n", {})
    with pytest.raises(BookFormatError, match="failed to read chapter"):
        load_book(root)
