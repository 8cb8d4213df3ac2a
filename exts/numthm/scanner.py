from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Union

# {{ref: label}} / {{tref: label}}, exactly one space after the colon.
REFERENCE_PATTERN = r"\{\{(?P<ref_kind>ref|tref): (?P<ref_label>[^\s}][^}\n]*)\}\}"

# Anything else shaped like a reference marker on a single line.
MALFORMED_PATTERN = r"\{\{t?ref:[^}\n]*\}\}"

ENVIRONMENT_PATTERN = (
    r"\{\{(?P<env_key>%s)\}\}"
    r"(?:\{(?P<env_label>[^}\n]*)\})?"
    r"(?:\[(?P<env_title>[^\]\n]*)\])?"
)


@dataclass(frozen=True)
class EnvironmentMarker:
    start: int
    end: int
    raw: str
    key: str
    label: str | None
    title: str | None


@dataclass(frozen=True)
class ReferenceMarker:
    start: int
    end: int
    raw: str
    label: str
    wants_title: bool


@dataclass(frozen=True)
class MalformedMarker:
    start: int
    end: int
    raw: str


Marker = Union[EnvironmentMarker, ReferenceMarker, MalformedMarker]


def _keys_alternation(keys: Iterable[str]) -> str:
    ordered = sorted(set(keys), key=lambda key: (-len(key), key))
    if not ordered:
        return "(?!)"
    return "|".join(re.escape(key) for key in ordered)


def compile_marker_pattern(keys: Iterable[str]) -> re.Pattern[str]:
    """Build the combined scanner for a set of environment keys.

    Alternatives are tried in order at each position, so a well-formed
    reference wins over the malformed form, and neither can be confused with an
    environment marker since keys never contain ``:``.
    """
    environment = ENVIRONMENT_PATTERN % _keys_alternation(keys)
    return re.compile(
        f"(?P<reference>{REFERENCE_PATTERN})"
        f"|(?P<malformed>{MALFORMED_PATTERN})"
        f"|(?P<environment>{environment})"
    )


REFERENCE_ONLY_RE = compile_marker_pattern(())


def _optional(value: str | None) -> str | None:
    # `{}` and `[]` are consumed with the marker but count as absent
    return value if value else None


def _to_marker(match: re.Match[str]) -> Marker:
    start, end = match.span()
    raw = match.group(0)
    if match.group("reference") is not None:
        return ReferenceMarker(
            start=start,
            end=end,
            raw=raw,
            label=match.group("ref_label"),
            wants_title=match.group("ref_kind") == "tref",
        )
    if match.group("malformed") is not None:
        return MalformedMarker(start=start, end=end, raw=raw)
    return EnvironmentMarker(
        start=start,
        end=end,
        raw=raw,
        key=match.group("env_key"),
        label=_optional(match.group("env_label")),
        title=_optional(match.group("env_title")),
    )


def scan_markers(text: str, pattern: re.Pattern[str]) -> list[Marker]:
    """Return every marker in ``text``, left to right and non-overlapping."""
    return [_to_marker(match) for match in pattern.finditer(text)]


def substitute(
    text: str,
    markers: Iterable[Marker],
    replace: Callable[[Marker], str | None],
) -> str:
    """Rebuild ``text`` with each marker swapped for ``replace(marker)``.

    A ``None`` replacement keeps the marker text verbatim. Text between
    markers is copied unchanged.
    """
    parts: list[str] = []
    cursor = 0
    for marker in markers:
        parts.append(text[cursor : marker.start])
        replacement = replace(marker)
        parts.append(marker.raw if replacement is None else replacement)
        cursor = marker.end
    parts.append(text[cursor:])
    return "".join(parts)
