from __future__ import annotations

import re
from collections import defaultdict

from sphinx.util import logging

from .book import Book, Chapter
from .constants import KIND_DUPLICATE_LABEL
from .record_store import DiagnosticLog, LabelTable
from .registry import EnvironmentRegistry
from .scanner import EnvironmentMarker, Marker, scan_markers, substitute
from .types import EnvironmentOccurrence, EnvironmentSpec, LabelEntry

LOGGER = logging.getLogger(__name__)


class CounterState:
    """Per-environment counters for one chapter scope."""

    def __init__(self) -> None:
        self._counts: defaultdict[str, int] = defaultdict(int)

    def reset(self) -> None:
        self._counts.clear()

    def increment(self, key: str) -> int:
        self._counts[key] += 1
        return self._counts[key]

    def current(self, key: str) -> int:
        return self._counts.get(key, 0)


def format_number(counter: int, scope_path: tuple[int, ...], prefix: bool) -> str:
    if prefix and scope_path:
        return ".".join(str(part) for part in scope_path) + f".{counter}"
    return str(counter)


def render_header(spec: EnvironmentSpec, occurrence: EnvironmentOccurrence) -> str:
    anchor = ""
    if occurrence.label is not None:
        anchor = f'<a name="{occurrence.label}"></a>\n'
    heading = f"{spec.name} {occurrence.assigned_number}"
    if occurrence.title is not None:
        heading += f" ({occurrence.title})"
    return f"{anchor}{spec.emphasis}{heading}.{spec.emphasis}"


class NumberingEngine:
    """Pass 1: number environment markers and fill the label table."""

    def __init__(
        self,
        registry: EnvironmentRegistry,
        pattern: re.Pattern[str],
        *,
        prefix: bool,
        labels: LabelTable,
        log: DiagnosticLog,
    ) -> None:
        self.registry = registry
        self.pattern = pattern
        self.prefix = prefix
        self.labels = labels
        self.log = log
        self.counters = CounterState()
        self.occurrences: list[EnvironmentOccurrence] = []

    def number_document(self, chapter: Chapter) -> str:
        path = chapter.path or ""
        markers = scan_markers(chapter.content, self.pattern)

        def replace(marker: Marker) -> str | None:
            if not isinstance(marker, EnvironmentMarker):
                return None
            spec = self.registry.lookup(marker.key)
            if spec is None:
                return None
            counter = self.counters.increment(marker.key)
            occurrence = EnvironmentOccurrence(
                key=marker.key,
                label=marker.label,
                title=marker.title,
                assigned_number=format_number(counter, chapter.scope_path, self.prefix),
                source_path=path,
            )
            self.occurrences.append(occurrence)
            if occurrence.label is not None:
                self._record_label(spec, occurrence)
            return render_header(spec, occurrence)

        return substitute(chapter.content, markers, replace)

    def _record_label(
        self, spec: EnvironmentSpec, occurrence: EnvironmentOccurrence
    ) -> None:
        label = occurrence.label
        assert label is not None
        entry = LabelEntry(
            label=label,
            number=occurrence.assigned_number,
            title=occurrence.title,
            path=occurrence.source_path,
            name=spec.name,
        )
        if self.labels.insert(label, entry):
            return
        existing = self.labels.get(label)
        first_seen = existing.path if existing is not None else "<unknown>"
        self.log.warn(
            KIND_DUPLICATE_LABEL,
            f"{entry.numbered_name}: label '{label}' already used "
            f"(first defined in {first_seen}, redefined in {entry.path}); "
            "keeping the first definition",
            entry.path,
        )

    def run(self, book: Book) -> dict[str, str]:
        outputs: dict[str, str] = {}
        scope: int | None = None
        for top_index, chapter in book.iter_chapters():
            if top_index != scope:
                self.counters.reset()
                scope = top_index
            outputs[chapter.path] = self.number_document(chapter)
        LOGGER.debug(
            "numbered %d environment(s) in %d document(s); %d label(s)",
            len(self.occurrences),
            len(outputs),
            len(self.labels),
        )
        return outputs
