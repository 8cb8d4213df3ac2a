from __future__ import annotations

from collections.abc import Iterator

from sphinx.environment import BuildEnvironment
from sphinx.util import logging

from .constants import SEVERITY_WARNING
from .types import Diagnostic, LabelEntry

LOGGER = logging.getLogger(__name__)


class LabelIndex:
    """Read-only view of a completed label table, handed to the resolver."""

    def __init__(self, entries: dict[str, LabelEntry]) -> None:
        self._entries = dict(entries)

    def get(self, label: str) -> LabelEntry | None:
        return self._entries.get(label)

    def __contains__(self, label: object) -> bool:
        return label in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> list[LabelEntry]:
        return list(self._entries.values())


class LabelTable:
    def __init__(self) -> None:
        self._entries: dict[str, LabelEntry] = {}

    def insert(self, label: str, entry: LabelEntry) -> bool:
        if label in self._entries:
            return False
        self._entries[label] = entry
        return True

    def get(self, label: str) -> LabelEntry | None:
        return self._entries.get(label)

    def __len__(self) -> int:
        return len(self._entries)

    def snapshot(self) -> LabelIndex:
        return LabelIndex(self._entries)


class DiagnosticLog:
    def __init__(self) -> None:
        self.records: list[Diagnostic] = []

    def warn(self, kind: str, message: str, path: str) -> Diagnostic:
        record = Diagnostic(
            severity=SEVERITY_WARNING, kind=kind, message=message, path=path
        )
        self.records.append(record)
        LOGGER.warning("%s: %s", path, message, type="numthm", subtype=kind)
        return record

    def of_kind(self, kind: str) -> list[Diagnostic]:
        return [record for record in self.records if record.kind == kind]

    def __len__(self) -> int:
        return len(self.records)


def _ensure_env(env: BuildEnvironment) -> None:
    if not hasattr(env, "numthm_labels"):
        env.numthm_labels = LabelIndex({})
    if not hasattr(env, "numthm_contents"):
        env.numthm_contents = {}
    if not hasattr(env, "numthm_book_docs"):
        env.numthm_book_docs = {}
    if not hasattr(env, "numthm_diagnostics"):
        env.numthm_diagnostics = []
    if not hasattr(env, "numthm_doc_diagnostics"):
        env.numthm_doc_diagnostics = {}


def _all_diagnostics(env: BuildEnvironment) -> list[Diagnostic]:
    _ensure_env(env)
    records = list(env.numthm_diagnostics)
    for docname in sorted(env.numthm_doc_diagnostics):
        records.extend(env.numthm_doc_diagnostics[docname])
    return records
