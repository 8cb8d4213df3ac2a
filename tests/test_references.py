import pytest

from numthm.constants import (
    KIND_MALFORMED_MARKER,
    KIND_UNRESOLVED_REFERENCE,
    UNRESOLVED_PLACEHOLDER,
)
from numthm.record_store import DiagnosticLog, LabelIndex
from numthm.references import ReferenceResolver, link_text, relative_link_path
from numthm.types import LabelEntry, ReferenceRequest


def _entry(label, number="1.2.1", title=None, path="math/groups.md", name="Theorem"):
    return LabelEntry(label=label, number=number, title=title, path=path, name=name)


@pytest.fixture
def resolver():
    index = LabelIndex(
        {
            "thm:lagrange": _entry("thm:lagrange", title="Lagrange Theorem"),
            "lem:plain": _entry("lem:plain", number="3", name="Lemma"),
        }
    )
    return ReferenceResolver(index, DiagnosticLog())


@pytest.mark.parametrize(
    ("from_path", "to_path", "expected"),
    [
        ("math/crypto/groups.md", "math/groups.md", "../groups.md"),
        ("crypto/signatures.md", "math/groups.md", "../math/groups.md"),
        (
            "math/crypto//signatures/bls_signatures.md",
            "algebra/groups.md",
            "../../../algebra/groups.md",
        ),
        ("math/crypto/signatures/bls.md", "math/algebra/groups.md", "../../algebra/groups.md"),
        ("intro.md", "math/groups.md", "math/groups.md"),
        ("math/a.md", "math/b.md", "b.md"),
        ("math/groups.md", "math/groups.md", ""),
    ],
)
def test_relative_link_path(from_path, to_path, expected):
    assert relative_link_path(from_path, to_path) == expected


def test_link_text_prefers_title_only_for_tref():
    entry = _entry("thm:lagrange", title="Lagrange Theorem")
    assert link_text(entry, wants_title=False) == "Theorem 1.2.1"
    assert link_text(entry, wants_title=True) == "Lagrange Theorem"
    assert link_text(_entry("x"), wants_title=True) == "Theorem 1.2.1"


def test_ref_links_numbered_name(resolver):
    output = resolver.resolve_document("see {{ref: thm:lagrange}}.", "crypto/bls.md")
    assert output == "see [Theorem 1.2.1](../math/groups.md#thm:lagrange)."
    assert resolver.log.records == []


def test_tref_links_title(resolver):
    output = resolver.resolve_document("{{tref: thm:lagrange}}", "crypto/bls.md")
    assert output == "[Lagrange Theorem](../math/groups.md#thm:lagrange)"


def test_tref_without_title_falls_back_to_numbered_name(resolver):
    output = resolver.resolve_document("{{tref: lem:plain}}", "math/groups.md")
    assert output == "[Lemma 3](#lem:plain)"


def test_unresolved_reference_gives_placeholder_and_one_warning(resolver):
    output = resolver.resolve_document("{{ref: thm:missing}}", "a.md")
    assert output == UNRESOLVED_PLACEHOLDER
    (record,) = resolver.log.records
    assert record.kind == KIND_UNRESOLVED_REFERENCE
    assert "thm:missing" in record.message
    assert record.path == "a.md"


def test_each_unresolved_occurrence_is_reported(resolver):
    output = resolver.resolve_document("{{ref: x}} and {{tref: x}}", "a.md")
    assert output == f"{UNRESOLVED_PLACEHOLDER} and {UNRESOLVED_PLACEHOLDER}"
    assert len(resolver.log.of_kind(KIND_UNRESOLVED_REFERENCE)) == 2


def test_malformed_marker_is_left_unchanged_and_reported(resolver):
    text = "{{ref:thm:lagrange}} and {{ref:  thm:lagrange}}"
    assert resolver.resolve_document(text, "a.md") == text
    records = resolver.log.of_kind(KIND_MALFORMED_MARKER)
    assert [record.message.split("'")[1] for record in records] == [
        "{{ref:thm:lagrange}}",
        "{{ref:  thm:lagrange}}",
    ]


def test_environment_markers_are_not_touched(resolver):
    text = "{{thm}}{a} {{ref: lem:plain}}"
    assert resolver.resolve_document(text, "math/groups.md") == "{{thm}}{a} [Lemma 3](#lem:plain)"


def test_resolve_single_request(resolver):
    request = ReferenceRequest(
        label="thm:lagrange", wants_title=False, source_path="math/groups.md"
    )
    assert resolver.resolve(request) == "[Theorem 1.2.1](#thm:lagrange)"


def test_resolution_is_idempotent_without_markers(resolver):
    once = resolver.resolve_document("{{ref: lem:plain}}", "intro.md")
    assert resolver.resolve_document(once, "intro.md") == once
