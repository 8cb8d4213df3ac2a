from __future__ import annotations

from sphinx.environment import BuildEnvironment

from numthm.record_store import _all_diagnostics
from numthm.types import Diagnostic


def _diagnostics_of_kind(env: BuildEnvironment, kind: str) -> list[Diagnostic]:
    return [record for record in _all_diagnostics(env) if record.kind == kind]


def _format_finding(record: Diagnostic) -> str:
    return f"{record.path}: {record.message}"
