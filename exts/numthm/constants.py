from __future__ import annotations

NAME = "numthm"

# mdBook release line the preprocessor protocol was written against.
MDBOOK_VERSION = "0.4"

# key, display name, emphasis delimiter
BUILTIN_ENVIRONMENTS: tuple[tuple[str, str, str], ...] = (
    ("thm", "Theorem", "**"),
    ("lem", "Lemma", "**"),
    ("prop", "Proposition", "**"),
    ("def", "Definition", "**"),
    ("rem", "Remark", "*"),
)

UNRESOLVED_PLACEHOLDER = "**[??]**"

SEVERITY_WARNING = "warning"

KIND_DUPLICATE_LABEL = "duplicate_label"
KIND_UNRESOLVED_REFERENCE = "unresolved_reference"
KIND_MALFORMED_MARKER = "malformed_marker"

DIAGNOSTIC_KINDS = (
    KIND_DUPLICATE_LABEL,
    KIND_UNRESOLVED_REFERENCE,
    KIND_MALFORMED_MARKER,
)

DEFAULT_SUMMARY = "SUMMARY.md"
LABEL_INDEX_FILENAME = "numthm-labels.json"
