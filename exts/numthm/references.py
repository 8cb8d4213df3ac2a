from __future__ import annotations

import posixpath
import re

from .constants import (
    KIND_MALFORMED_MARKER,
    KIND_UNRESOLVED_REFERENCE,
    UNRESOLVED_PLACEHOLDER,
)
from .record_store import DiagnosticLog, LabelIndex
from .scanner import (
    REFERENCE_ONLY_RE,
    MalformedMarker,
    Marker,
    ReferenceMarker,
    scan_markers,
    substitute,
)
from .types import LabelEntry, ReferenceRequest


def _normalize(path: str) -> str:
    return posixpath.normpath(path.replace("\\", "/"))


def relative_link_path(from_path: str, to_path: str) -> str:
    """Path of ``to_path`` relative to the directory holding ``from_path``.

    Links inside the same document collapse to an empty path so only the
    fragment remains.
    """
    source = _normalize(from_path)
    target = _normalize(to_path)
    if source == target:
        return ""
    start = posixpath.dirname(source) or "."
    return posixpath.relpath(target, start)


def link_text(entry: LabelEntry, wants_title: bool) -> str:
    if wants_title and entry.title is not None:
        return entry.title
    return entry.numbered_name


class ReferenceResolver:
    """Pass 2: swap reference markers for links using a completed index."""

    def __init__(
        self,
        index: LabelIndex,
        log: DiagnosticLog,
        pattern: re.Pattern[str] = REFERENCE_ONLY_RE,
    ) -> None:
        self.index = index
        self.log = log
        self.pattern = pattern

    def resolve(self, request: ReferenceRequest) -> str:
        entry = self.index.get(request.label)
        if entry is None:
            self.log.warn(
                KIND_UNRESOLVED_REFERENCE,
                f"unknown reference '{request.label}'",
                request.source_path,
            )
            return UNRESOLVED_PLACEHOLDER
        href = relative_link_path(request.source_path, entry.path)
        text = link_text(entry, request.wants_title)
        return f"[{text}]({href}#{request.label})"

    def resolve_document(self, text: str, path: str) -> str:
        def replace(marker: Marker) -> str | None:
            if isinstance(marker, ReferenceMarker):
                return self.resolve(
                    ReferenceRequest(
                        label=marker.label,
                        wants_title=marker.wants_title,
                        source_path=path,
                    )
                )
            if isinstance(marker, MalformedMarker):
                self.log.warn(
                    KIND_MALFORMED_MARKER,
                    f"malformed reference marker '{marker.raw}' left unchanged "
                    "(expected '{{ref: label}}' or '{{tref: label}}')",
                    path,
                )
            return None

        return substitute(text, scan_markers(text, self.pattern), replace)
