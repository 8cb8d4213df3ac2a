from __future__ import annotations

from sphinx.environment import BuildEnvironment

from numthm.constants import KIND_UNRESOLVED_REFERENCE

from .common import _diagnostics_of_kind, _format_finding


def _find_unresolved_references(env: BuildEnvironment) -> list[str]:
    return [
        _format_finding(record)
        for record in _diagnostics_of_kind(env, KIND_UNRESOLVED_REFERENCE)
    ]
