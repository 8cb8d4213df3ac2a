"""Two-pass transformation of a whole book.

Pass 1 numbers every environment marker in traversal order and fills the
label table. The table is then snapshotted into a read-only ``LabelIndex`` and
pass 2 resolves reference markers against it, so a reference may point at a
label defined in any document, earlier or later.

Fatal errors (registry construction) surface before any text is touched; the
caller only ever receives a fully transformed copy of the book.
"""

from __future__ import annotations

from dataclasses import dataclass

from sphinx.util import logging

from .book import Book
from .config import NumThmConfig
from .numbering import NumberingEngine
from .record_store import DiagnosticLog, LabelIndex, LabelTable
from .references import ReferenceResolver
from .registry import EnvironmentRegistry, build_registry
from .scanner import compile_marker_pattern
from .types import Diagnostic, EnvironmentOccurrence

LOGGER = logging.getLogger(__name__)


@dataclass
class TransformResult:
    book: Book
    contents: dict[str, str]
    labels: LabelIndex
    occurrences: list[EnvironmentOccurrence]
    diagnostics: list[Diagnostic]


def transform_book(
    book: Book,
    config: NumThmConfig,
    registry: EnvironmentRegistry | None = None,
) -> TransformResult:
    if registry is None:
        registry = build_registry(config.custom_environments)

    log = DiagnosticLog()
    labels = LabelTable()
    engine = NumberingEngine(
        registry,
        compile_marker_pattern(registry.keys()),
        prefix=config.prefix,
        labels=labels,
        log=log,
    )
    numbered = engine.run(book)

    index = labels.snapshot()
    resolver = ReferenceResolver(index, log)
    contents = {
        path: resolver.resolve_document(text, path) for path, text in numbered.items()
    }
    LOGGER.info(
        "numthm: %d document(s), %d label(s), %d warning(s)",
        len(contents),
        len(index),
        len(log),
    )
    return TransformResult(
        book=book.with_contents(contents),
        contents=contents,
        labels=index,
        occurrences=list(engine.occurrences),
        diagnostics=list(log.records),
    )
