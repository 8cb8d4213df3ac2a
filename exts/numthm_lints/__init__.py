from __future__ import annotations

from pathlib import Path
from typing import Any

from sphinx.application import Sphinx
from sphinx.environment import BuildEnvironment
from sphinx.errors import ExtensionError

from numthm.record_store import _ensure_env
from numthm.utils import _write_json, _write_text

from .duplicate_label_check import _find_duplicate_labels
from .malformed_marker_check import _find_malformed_markers
from .unresolved_reference_check import _find_unresolved_references

LINT_LOGS = {
    "duplicate_labels": "duplicate-label-lint.log",
    "unresolved_references": "unresolved-reference-lint.log",
    "malformed_markers": "malformed-marker-lint.log",
}


def _run_lints(app: Sphinx, env: BuildEnvironment) -> None:
    _ensure_env(env)
    lint_root_raw = getattr(app.config, "numthm_lint_root", "")
    lint_root = Path(lint_root_raw) if lint_root_raw else None

    findings: dict[str, list[str]] = {
        "duplicate_labels": _find_duplicate_labels(env),
        "unresolved_references": _find_unresolved_references(env),
        "malformed_markers": _find_malformed_markers(env),
    }

    if lint_root is not None:
        for key, filename in LINT_LOGS.items():
            _write_text(lint_root / filename, "\n".join(findings[key]) + "\n")
        summary = {
            "lint_counts": {key: len(value) for key, value in findings.items()},
            "status": (
                "pass" if all(not values for values in findings.values()) else "fail"
            ),
        }
        _write_json(lint_root / "lint-summary.json", summary)

    all_findings = [item for values in findings.values() for item in values]
    if all_findings:
        sample = "\n- " + "\n- ".join(all_findings[:20])
        raise ExtensionError(f"numthm lint gate failed:{sample}")


def setup(app: Sphinx) -> dict[str, Any]:
    app.setup_extension("numthm")
    app.add_config_value("numthm_lint_root", "", "env", types=[str])
    app.connect("env-check-consistency", _run_lints)
    return {
        "version": "0.1",
        "parallel_read_safe": True,
        "parallel_write_safe": True,
        "env_version": 1,
    }
