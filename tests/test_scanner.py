from numthm.scanner import (
    REFERENCE_ONLY_RE,
    EnvironmentMarker,
    MalformedMarker,
    ReferenceMarker,
    compile_marker_pattern,
    scan_markers,
    substitute,
)

PATTERN = compile_marker_pattern(["thm", "lem", "prop", "def", "rem"])


def test_environment_marker_fields():
    (marker,) = scan_markers("{{prop}}{prop:lagrange}[Lagrange Theorem]", PATTERN)
    assert isinstance(marker, EnvironmentMarker)
    assert marker.key == "prop"
    assert marker.label == "prop:lagrange"
    assert marker.title == "Lagrange Theorem"


def test_label_and_title_are_independent():
    markers = scan_markers("{{thm}} {{thm}}{a} {{thm}}[T]", PATTERN)
    assert [(m.label, m.title) for m in markers] == [
        (None, None),
        ("a", None),
        (None, "T"),
    ]


def test_empty_label_and_title_count_as_absent():
    (marker,) = scan_markers("{{lem}}{}[]", PATTERN)
    assert marker.raw == "{{lem}}{}[]"
    assert marker.label is None
    assert marker.title is None


def test_label_does_not_span_lines():
    (marker,) = scan_markers("{{thm}}{thm:a\n}", PATTERN)
    assert marker.raw == "{{thm}}"
    assert marker.label is None


def test_unknown_key_is_not_a_marker():
    assert scan_markers("{{cor}}{c:1} and {{ mustache }}", PATTERN) == []


def test_reference_markers():
    markers = scan_markers("{{ref: thm:a}} {{tref: thm:b}}", PATTERN)
    assert markers == [
        ReferenceMarker(0, 14, "{{ref: thm:a}}", "thm:a", False),
        ReferenceMarker(15, 30, "{{tref: thm:b}}", "thm:b", True),
    ]


def test_reference_requires_exactly_one_space():
    markers = scan_markers("{{ref:thm:a}} {{ref:  thm:a}} {{tref: }}", PATTERN)
    assert all(isinstance(marker, MalformedMarker) for marker in markers)
    assert [marker.raw for marker in markers] == [
        "{{ref:thm:a}}",
        "{{ref:  thm:a}}",
        "{{tref: }}",
    ]


def test_markers_are_left_to_right_and_non_overlapping():
    text = "{{lem}} x {{ref: a}} y {{thm}}{a}[Title with {{ref: b}}]"
    kinds = [type(marker).__name__ for marker in scan_markers(text, PATTERN)]
    assert kinds == ["EnvironmentMarker", "ReferenceMarker", "EnvironmentMarker"]


def test_reference_only_pattern_ignores_environments():
    markers = scan_markers("{{thm}}{a} {{ref: a}}", REFERENCE_ONLY_RE)
    assert [type(marker) for marker in markers] == [ReferenceMarker]


def test_substitute_keeps_surrounding_text():
    text = "before {{thm}} middle {{ref: x}} after"
    markers = scan_markers(text, PATTERN)

    def replace(marker):
        if isinstance(marker, EnvironmentMarker):
            return "THM"
        return None

    assert substitute(text, markers, replace) == "before THM middle {{ref: x}} after"


def test_keys_are_escaped():
    pattern = compile_marker_pattern(["a.b"])
    assert scan_markers("{{axb}}", pattern) == []
    assert len(scan_markers("{{a.b}}", pattern)) == 1
